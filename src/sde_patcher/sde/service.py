"""
Main service for patching SDE data.

Provides the high-level run: load the SDE tables and patch documents, apply
the dogma patches in dependency order and write every table as JSON.
"""

import logging
import shutil
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..dogma import (
    PatchContext,
    PatchError,
    PatchSet,
    Table,
    apply_attribute_patches,
    apply_effect_patches,
    apply_type_dogma_patches,
)
from ..dogma.models import DEFAULT_LANGUAGE
from .loaders import PatchSetLoader, SdeFileLoader
from .writers import build_types_index, write_table

if TYPE_CHECKING:
    from ..settings import AppSettings

# Tables patched by the dogma patchers, in the order they must be patched
DOGMA_TABLES = ["dogmaAttributes", "dogmaEffects", "typeDogma"]

# Source tables converted by default
DEFAULT_TABLES = [
    "categories",
    "dogmaAttributes",
    "dogmaEffects",
    "iconIDs",
    "groups",
    "marketGroups",
    "metaGroups",
    "typeDogma",
    "types",
]

TYPES_INDEX_FILE = "typesIndex.json"


class SdePatchService:
    """Service converting SDE YAML tables to patched JSON tables.

    Dogma tables are patched strictly one after another because each
    patcher looks up rows the previous one created. Loading and writing of
    independent files uses a thread pool.
    """

    def __init__(
        self,
        resources_path: str | Path,
        patches_path: Optional[str | Path] = None,
        output_path: Optional[str | Path] = None,
        settings: Optional["AppSettings"] = None,
    ):
        """Initialize the service.

        Args:
            resources_path: Directory holding the SDE YAML tables
            patches_path: Directory of patch documents (default: resources/patches)
            output_path: Directory for JSON output (default: resources/sde-json)
            settings: App settings for table selection and patching options
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.resources_path = Path(resources_path)
        self.patches_path = (
            Path(patches_path) if patches_path else self.resources_path / "patches"
        )
        self.output_path = (
            Path(output_path) if output_path else self.resources_path / "sde-json"
        )

        self.tables: List[str] = list(DEFAULT_TABLES)
        self.legacy_has_all = False
        self.language = DEFAULT_LANGUAGE
        self.clear_destination = True
        self.max_workers = 8
        if settings is not None:
            self.tables = settings.tables
            self.legacy_has_all = settings.legacy_has_all_attributes
            self.language = settings.name_language
            self.clear_destination = settings.clear_destination
            self.max_workers = settings.max_workers

        self.loader = SdeFileLoader(max_workers=self.max_workers)
        self.patch_loader = PatchSetLoader()
        self.table_files: Dict[str, Path] = {}

        self.logger.info(f"Initializing SdePatchService with path: {self.resources_path}")

    def run(self) -> Dict[str, Any]:
        """Load, patch and write all tables.

        Returns:
            The patched tables by name

        Raises:
            PatchError: If a patch cannot be applied; nothing is written then
        """
        start = time.perf_counter()

        tables = self.load_tables()
        patch_set = self.patch_loader.load(self.patches_path)
        self.apply_patches(tables, patch_set)

        if self.clear_destination and self.output_path.exists():
            self.logger.info(f"Clearing output directory {self.output_path}")
            shutil.rmtree(self.output_path)
        self.output_path.mkdir(parents=True, exist_ok=True)

        self.write_tables(tables)
        self.write_types_index(tables)

        elapsed = time.perf_counter() - start
        self.logger.info(f"All processing completed in {elapsed:.2f} seconds")
        return tables

    def load_tables(self) -> Dict[str, Any]:
        """Read the configured SDE tables from the resources directory."""
        self.table_files = self.loader.find_table_files(
            self.resources_path,
            self.tables,
            exclude=[self.patches_path, self.output_path],
        )
        missing = sorted(set(self.tables) - set(self.table_files))
        if missing:
            self.logger.warning(f"SDE tables not found: {', '.join(missing)}")
        return self.loader.load_tables(self.table_files)

    def _lookup_table(self, tables: Dict[str, Any], name: str) -> Table:
        table = tables.get(name)
        if isinstance(table, dict):
            return table
        self.logger.warning(f"Table '{name}' not loaded, patching against an empty table")
        return {}

    def _dogma_table(self, tables: Dict[str, Any], name: str) -> Table:
        """Return a dogma table, registering an empty one if it was not loaded.

        Rows created by patches must reach the output even when the source
        table is missing.
        """
        table = tables.get(name)
        if isinstance(table, dict):
            return table
        self.logger.warning(f"Table '{name}' not loaded, writing patched rows only")
        tables[name] = {}
        return tables[name]

    def apply_patches(self, tables: Dict[str, Any], patch_set: PatchSet) -> None:
        """Apply the patch set to the dogma tables in place.

        Raises:
            PatchError: Re-raised after logging the failing table and name
        """
        context = PatchContext(
            categories=self._lookup_table(tables, "categories"),
            groups=self._lookup_table(tables, "groups"),
            types=self._lookup_table(tables, "types"),
            language=self.language,
        )

        current = DOGMA_TABLES[0]
        try:
            context.dogma_attributes = apply_attribute_patches(
                self._dogma_table(tables, current), patch_set.attributes
            )

            current = DOGMA_TABLES[1]
            context.dogma_effects = apply_effect_patches(
                self._dogma_table(tables, current), patch_set.effects, context
            )

            current = DOGMA_TABLES[2]
            apply_type_dogma_patches(
                self._dogma_table(tables, current),
                patch_set.type_dogma,
                context,
                legacy_has_all=self.legacy_has_all,
            )
        except PatchError as e:
            self.logger.error(f"Error applying {current} patches: {e}")
            raise

    def output_file(self, name: str) -> Path:
        """Return the JSON output path mirroring a table's source path."""
        source = self.table_files.get(name)
        if source is None:
            return self.output_path / f"{name}.json"
        return self.output_path / source.relative_to(self.resources_path).with_suffix(".json")

    def write_tables(self, tables: Dict[str, Any]) -> None:
        """Write every loaded table as JSON, in parallel."""
        total = len(tables)
        completed = 0
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_name = {
                executor.submit(write_table, data, self.output_file(name)): name
                for name, data in tables.items()
            }
            for future in as_completed(future_to_name):
                path = future.result()
                completed += 1
                self.logger.info(
                    f"{completed}/{total} | Converted {future_to_name[future]} -> {path.name}"
                )

    def write_types_index(self, tables: Dict[str, Any]) -> Optional[Path]:
        """Write the type name <-> ID index, if the types table was loaded."""
        types = tables.get("types")
        if not isinstance(types, dict):
            self.logger.warning("Could not find 'types' data to build index")
            return None
        index = build_types_index(types, self.language)
        path = write_table(index, self.output_path / TYPES_INDEX_FILE)
        self.logger.info(f"Generated {TYPES_INDEX_FILE} ({len(index['byID'])} types)")
        return path
