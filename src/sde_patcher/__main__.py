"""
Main entry point for SDE Patcher.
Usage: python -m sde_patcher [options]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from . import __version__
from .dogma import PatchError
from .sde import SdePatchService
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sde-patcher",
        description="Apply patch documents to SDE dogma tables and convert the SDE to JSON.",
    )
    parser.add_argument("--resources", type=Path, help="directory with SDE YAML tables")
    parser.add_argument("--patches", type=Path, help="directory with patch documents")
    parser.add_argument("--output", type=Path, help="directory for JSON output")
    parser.add_argument("--config", type=Path, help="INI settings file to use")
    parser.add_argument("--profile", default="default", help="settings profile")
    parser.add_argument(
        "--legacy-has-all",
        action="store_true",
        help="match hasAllAttributes selectors on any listed attribute",
    )
    parser.add_argument(
        "--no-clear", action="store_true", help="keep existing files in the output directory"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug console output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(settings: AppSettings, args: argparse.Namespace) -> None:
    """Persist command-line paths so later runs can omit them."""
    if args.resources:
        settings.resources_path = args.resources
    if args.patches:
        settings.patches_path = args.patches
    if args.output:
        settings.output_path = args.output


def create_service(settings: AppSettings, args: argparse.Namespace) -> SdePatchService:
    """Create the patch service from settings and command-line flags.

    Raises:
        ConfigError: If no resources directory is configured
    """
    if settings.resources_path is None:
        raise ConfigError("No resources directory given (use --resources)")

    service = SdePatchService(
        settings.resources_path,
        patches_path=settings.patches_path,
        output_path=settings.output_path,
        settings=settings,
    )
    if args.legacy_has_all:
        service.legacy_has_all = True
    if args.no_clear:
        service.clear_destination = False
    return service


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")

    settings = AppSettings(profile=args.profile, settings_file=args.config)
    setup_logging(settings, console_level="DEBUG" if args.verbose else None)
    apply_overrides(settings, args)

    logger.info(f"Starting SDE Patcher {__version__}")
    logger.debug(f"Configuration loaded from {settings.get_settings_file_path()}")

    validation = settings.validate()
    for warning in validation.warnings:
        logger.warning(f"  {warning}")
    if not validation.is_valid:
        logger.error("Configuration validation failed:")
        for error in validation.errors:
            logger.error(f"  {error}")
        return 1

    try:
        service = create_service(settings, args)
        service.run()
    except ConfigError as e:
        logger.error(str(e))
        return 1
    except PatchError as e:
        logger.error(f"Patching failed, no output written: {e}")
        return 1
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        logger.error(f"Invalid patch document: {e}")
        return 1
    except OSError as e:
        logger.error(f"File error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
