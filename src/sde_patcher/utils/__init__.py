"""Utility helpers for SDE Patcher."""

from .logging_config import setup_logging, ColoredFormatter, CSVFormatter

__all__ = ["setup_logging", "ColoredFormatter", "CSVFormatter"]
