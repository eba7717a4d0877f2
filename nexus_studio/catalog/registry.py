"""Intent and module catalogs: loaders and lookup utilities."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ..errors import CatalogError


class Phase(str, Enum):
    """Pipeline stages, in display order."""
    MACRO = "macro"
    INTEGRITY = "integrity"
    EXPANSION = "expansion"
    EXECUTION = "execution"

    @property
    def label(self) -> str:
        return self.value.title()


PHASE_ORDER: tuple[Phase, ...] = tuple(Phase)
FALLBACK_PHASE = Phase.EXECUTION

WILDCARD_ALIGNMENT = "all"


@dataclass(frozen=True)
class ModuleDefinition:
    module_id: str
    display_name: str
    phase: Phase


@dataclass(frozen=True)
class StrategicIntent:
    id: str
    title: str
    description: str
    recommended_modules: tuple[str, ...]
    persona_alignment: tuple[str, ...]

    def is_aligned_with(self, organization_type: str) -> bool:
        """True when the intent is suggested for this organization type."""
        tags = [tag.lower() for tag in self.persona_alignment]
        if WILDCARD_ALIGNMENT in tags:
            return True
        org = (organization_type or "").lower()
        if not org:
            return False
        return any(tag in org for tag in tags)


class ModuleCatalog:
    def __init__(self, modules: Mapping[str, ModuleDefinition], source_path: str = ""):
        self._modules = MappingProxyType(dict(modules))
        self.source_path = source_path

    @classmethod
    def from_json(cls, path: str | Path) -> "ModuleCatalog":
        path_obj = Path(path)
        data = _read_json(path_obj)
        modules: dict[str, ModuleDefinition] = {}
        try:
            for item in data:
                module_id = item["module_id"]
                modules[module_id] = ModuleDefinition(
                    module_id=module_id,
                    display_name=item.get("display_name", module_id),
                    phase=Phase(item["phase"].lower()),
                )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise CatalogError(f"Malformed module catalog {path_obj}: {exc}") from exc
        return cls(modules, source_path=str(path_obj.resolve()))

    def get(self, module_id: str) -> ModuleDefinition | None:
        return self._modules.get(module_id)

    def phase_of(self, module_id: str) -> Phase:
        module = self._modules.get(module_id)
        return module.phase if module else FALLBACK_PHASE

    def display_name(self, module_id: str) -> str:
        module = self._modules.get(module_id)
        return module.display_name if module else module_id

    def list_all(self) -> list[ModuleDefinition]:
        return list(self._modules.values())

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def __len__(self) -> int:
        return len(self._modules)


class IntentCatalog:
    def __init__(
        self,
        intents: Iterable[StrategicIntent],
        baseline_modules: Iterable[str],
        organization_types: Mapping[str, Iterable[str]] | None = None,
        source_path: str = "",
    ):
        self._intents = MappingProxyType({intent.id: intent for intent in intents})
        self._positions = MappingProxyType({intent_id: i for i, intent_id in enumerate(self._intents)})
        self.baseline_modules: tuple[str, ...] = tuple(dict.fromkeys(baseline_modules))
        self.organization_types = MappingProxyType(
            {name: tuple(subtypes) for name, subtypes in (organization_types or {}).items()}
        )
        self.source_path = source_path

    @classmethod
    def from_json(cls, path: str | Path) -> "IntentCatalog":
        path_obj = Path(path)
        data = _read_json(path_obj)
        try:
            intents = [
                StrategicIntent(
                    id=item["id"],
                    title=item["title"],
                    description=item.get("description", ""),
                    recommended_modules=tuple(item.get("recommended_modules", [])),
                    persona_alignment=tuple(item.get("persona_alignment", [])),
                )
                for item in data["intents"]
            ]
            baseline = data["baseline_modules"]
        except (KeyError, TypeError) as exc:
            raise CatalogError(f"Malformed intent catalog {path_obj}: {exc}") from exc
        if len(baseline) != 2:
            raise CatalogError(f"Intent catalog {path_obj} must declare exactly two baseline modules")
        return cls(
            intents,
            baseline_modules=baseline,
            organization_types=data.get("organization_types", {}),
            source_path=str(path_obj.resolve()),
        )

    def get(self, intent_id: str) -> StrategicIntent | None:
        return self._intents.get(intent_id)

    def list_all(self) -> list[StrategicIntent]:
        return list(self._intents.values())

    def position(self, intent_id: str) -> int:
        return self._positions.get(intent_id, len(self._positions))

    def aligned_with(self, organization_type: str) -> list[StrategicIntent]:
        return [i for i in self._intents.values() if i.is_aligned_with(organization_type)]

    def subtypes_for(self, organization_type: str) -> tuple[str, ...]:
        return self.organization_types.get(organization_type, ())

    def __contains__(self, intent_id: object) -> bool:
        return intent_id in self._intents

    def __len__(self) -> int:
        return len(self._intents)


@dataclass(frozen=True)
class CatalogSet:
    """The two static catalogs, loaded together."""
    intents: IntentCatalog
    modules: ModuleCatalog

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline_modules": list(self.intents.baseline_modules),
            "intents": {
                intent.id: {
                    "title": intent.title,
                    "description": intent.description,
                    "recommended_modules": list(intent.recommended_modules),
                    "persona_alignment": list(intent.persona_alignment),
                }
                for intent in self.intents.list_all()
            },
            "modules": {
                mod.module_id: {"display_name": mod.display_name, "phase": mod.phase.value}
                for mod in self.modules.list_all()
            },
        }


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CatalogError(f"Catalog file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog file is not valid JSON: {path}: {exc}") from exc
