"""
File loaders for SDE tables and patch documents.

SDE tables are YAML mappings keyed by numeric ID; they are read in parallel
with a ThreadPoolExecutor. Patch documents are YAML files collected from a
single directory in file-name order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, cast

import yaml

from ..dogma.models import PatchList, PatchSet

# Top-level keys of a patch document and the PatchSet field they feed
PATCH_SECTIONS = {
    "attributes": "attributes",
    "effects": "effects",
    "typeDogma": "type_dogma",
}


def _is_int_key(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, int):
        return True
    if isinstance(key, str):
        return key.lstrip("-").isdigit()
    return False


def normalize_id_keys(data: Any) -> Any:
    """Convert a mapping's keys to ints if every key is integer-like.

    YAML gives int keys, JSON gives strings; either way the patchers work
    on int-keyed tables. Other data is returned unchanged.
    """
    if isinstance(data, dict) and data:
        mapping = cast(Dict[Any, Any], data)
        if all(_is_int_key(key) for key in mapping):
            return {int(key): value for key, value in mapping.items()}
    return data


class SdeFileLoader:
    """Loads SDE YAML tables found under a resources directory."""

    def __init__(self, max_workers: int = 8):
        self.max_workers = max_workers
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug("SdeFileLoader initialized")

    @staticmethod
    def find_table_files(
        root: Path, names: Iterable[str], exclude: Iterable[Path] = ()
    ) -> Dict[str, Path]:
        """Map each wanted table name to the first ``<name>.yaml`` under root.

        Files located under any of the ``exclude`` directories are skipped.
        """
        wanted = set(names)
        excluded = [path.resolve() for path in exclude]
        found: Dict[str, Path] = {}

        for yaml_file in sorted(root.rglob("*.yaml")):
            name = yaml_file.stem
            if name not in wanted or name in found:
                continue
            resolved = yaml_file.resolve()
            if any(path in resolved.parents for path in excluded):
                continue
            found[name] = yaml_file
        return found

    def read_table(self, yaml_file: Path) -> Optional[Any]:
        """Read a single YAML table, normalizing ID keys.

        Returns:
            The parsed table, or None if the file could not be read
        """
        try:
            with yaml_file.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            # A broken source table is reported but does not stop the run
            self.logger.error(f"Error reading YAML file {yaml_file}: {e}")
            return None
        return normalize_id_keys(data)

    def load_tables(self, table_files: Dict[str, Path]) -> Dict[str, Any]:
        """Read all given tables in parallel.

        Args:
            table_files: Mapping of table name to YAML file

        Returns:
            Mapping of table name to parsed table (failed tables are absent)
        """
        tables: Dict[str, Any] = {}
        if not table_files:
            self.logger.warning("No SDE tables to load")
            return tables

        self.logger.info(f"Loading {len(table_files)} SDE tables")
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_name = {
                executor.submit(self.read_table, path): name
                for name, path in table_files.items()
            }
            for future in as_completed(future_to_name):
                name = future_to_name[future]
                data = future.result()
                if data is None:
                    continue
                tables[name] = data
                size = len(data) if isinstance(data, (dict, list)) else 0
                self.logger.debug(f"Loaded table '{name}' ({size} entries)")

        return tables


class PatchSetLoader:
    """Collects patch operations from a directory of YAML patch documents."""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @staticmethod
    def patch_files(directory: Path) -> List[Path]:
        """Return the patch documents of a directory, sorted by file name."""
        return sorted(
            (
                path
                for path in directory.iterdir()
                if path.is_file() and path.suffix.lower() == ".yaml"
            ),
            key=lambda path: path.name,
        )

    def load(self, directory: Path) -> PatchSet:
        """Load and concatenate all patch documents of a directory.

        Later documents may target rows created by earlier ones, so the
        document order is the sorted file-name order.

        Raises:
            yaml.YAMLError: If a patch document is not valid YAML
            UnicodeDecodeError: If a patch document is not UTF-8
            OSError: If a patch document cannot be read
        """
        patch_set = PatchSet()
        if not directory.is_dir():
            self.logger.warning(f"Patch directory not found: {directory}")
            return patch_set

        files = self.patch_files(directory)
        self.logger.info(f"Found {len(files)} patch documents in {directory}")

        for patch_file in files:
            with patch_file.open("r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
            if not isinstance(document, dict):
                self.logger.warning(f"Skipping patch document {patch_file.name}: not a mapping")
                continue
            self.add_document(patch_set, cast(Dict[str, Any], document), patch_file.name)

        self.logger.info(
            f"Patch set loaded: {len(patch_set.attributes)} attribute, "
            f"{len(patch_set.effects)} effect, {len(patch_set.type_dogma)} type dogma operations"
        )
        return patch_set

    def add_document(
        self, patch_set: PatchSet, document: Dict[str, Any], source: str = "<document>"
    ) -> None:
        """Append the operations of one parsed document to a patch set."""
        for section, attr in PATCH_SECTIONS.items():
            operations = document.get(section)
            if operations is None:
                continue
            if not isinstance(operations, list):
                self.logger.warning(f"{source}: '{section}' is not a list, ignored")
                continue
            target: PatchList = getattr(patch_set, attr)
            target.extend(
                op for op in cast(List[Any], operations) if isinstance(op, dict)
            )


def load_patch_set(directory: Path) -> PatchSet:
    """Load all patch documents of a directory into a PatchSet."""
    return PatchSetLoader().load(directory)
