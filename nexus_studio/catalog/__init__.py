"""
Static reference data for the studio.

- Strategic intents and the modules they recommend
- Module display names and pipeline phases
"""

from .registry import (
    Phase,
    PHASE_ORDER,
    FALLBACK_PHASE,
    ModuleDefinition,
    StrategicIntent,
    ModuleCatalog,
    IntentCatalog,
    CatalogSet,
)
from .loader import load_catalogs, default_catalogs, resolve_catalog_dir

__all__ = [
    "Phase",
    "PHASE_ORDER",
    "FALLBACK_PHASE",
    "ModuleDefinition",
    "StrategicIntent",
    "ModuleCatalog",
    "IntentCatalog",
    "CatalogSet",
    "load_catalogs",
    "default_catalogs",
    "resolve_catalog_dir",
]
