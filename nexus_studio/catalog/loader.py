"""Helpers for locating and loading the catalog files once per process."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from .registry import CatalogSet, IntentCatalog, ModuleCatalog

logger = logging.getLogger(__name__)

KNOWLEDGE_DIR = Path(__file__).resolve().parents[1] / "knowledge"
INTENTS_FILE = "strategic_intents.json"
MODULES_FILE = "modules.json"


def resolve_catalog_dir(explicit_dir: str | Path | None = None) -> Path:
    if explicit_dir:
        return Path(explicit_dir).expanduser().resolve()
    return KNOWLEDGE_DIR


def load_catalogs(catalog_dir: str | Path | None = None) -> CatalogSet:
    directory = resolve_catalog_dir(catalog_dir)
    catalogs = CatalogSet(
        intents=IntentCatalog.from_json(directory / INTENTS_FILE),
        modules=ModuleCatalog.from_json(directory / MODULES_FILE),
    )
    unknown = sorted(
        {
            module_id
            for intent in catalogs.intents.list_all()
            for module_id in intent.recommended_modules
            if module_id not in catalogs.modules
        }
    )
    if unknown:
        logger.warning("Intents reference modules without a phase entry: %s", ", ".join(unknown))
    logger.debug(
        "Loaded %d intents and %d modules from %s",
        len(catalogs.intents), len(catalogs.modules), directory,
    )
    return catalogs


@lru_cache(maxsize=1)
def default_catalogs() -> CatalogSet:
    """Process-wide catalogs from the bundled knowledge directory."""
    return load_catalogs()
