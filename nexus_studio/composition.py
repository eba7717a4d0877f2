"""
Composition of the active engine set from selected strategic intents.

The resolver is a pure function of the selection and the static catalogs:
the baseline engines are always present, every known intent contributes its
recommended engines, and the result is grouped by pipeline phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .catalog import PHASE_ORDER, CatalogSet, Phase, default_catalogs


@dataclass
class Composition:
    """Active engines in first-seen order plus their phase grouping."""
    active_modules: tuple[str, ...]
    by_phase: dict[Phase, tuple[str, ...]] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.active_modules)

    def phase_of(self, module_id: str) -> Optional[Phase]:
        for phase, modules in self.by_phase.items():
            if module_id in modules:
                return phase
        return None

    def to_dict(self, catalogs: Optional[CatalogSet] = None) -> dict[str, Any]:
        catalogs = catalogs or default_catalogs()
        return {
            "active_modules": list(self.active_modules),
            "count": self.count,
            "phases": [
                {
                    "phase": phase.value,
                    "label": f"{phase.label} Phase",
                    "modules": [
                        {"id": module_id, "name": catalogs.modules.display_name(module_id)}
                        for module_id in self.by_phase.get(phase, ())
                    ],
                }
                for phase in PHASE_ORDER
            ],
        }


def _ordered_intent_ids(selected: Iterable[str], catalogs: CatalogSet) -> list[str]:
    known = [intent_id for intent_id in selected if intent_id in catalogs.intents]
    if isinstance(selected, (set, frozenset)):
        # Unordered input: fall back to catalog order so repeated calls agree.
        known.sort(key=catalogs.intents.position)
    return known


def resolve(selected_intents: Iterable[str], catalogs: Optional[CatalogSet] = None) -> Composition:
    """
    Resolve selected intents into the active engine set.

    Args:
        selected_intents: Intent ids; unknown ids are dropped. Sets are read
            in catalog order, sequences in the order given.
        catalogs: Catalogs to resolve against (default: bundled catalogs)

    Returns:
        Composition with the baseline engines first, then each intent's
        recommended engines, de-duplicated, and every engine placed in
        exactly one phase.
    """
    catalogs = catalogs or default_catalogs()

    active: dict[str, None] = dict.fromkeys(catalogs.intents.baseline_modules)
    for intent_id in _ordered_intent_ids(selected_intents, catalogs):
        intent = catalogs.intents.get(intent_id)
        for module_id in intent.recommended_modules:
            active.setdefault(module_id, None)

    groups: dict[Phase, list[str]] = {phase: [] for phase in PHASE_ORDER}
    for module_id in active:
        groups[catalogs.modules.phase_of(module_id)].append(module_id)

    return Composition(
        active_modules=tuple(active),
        by_phase={phase: tuple(modules) for phase, modules in groups.items()},
    )


def mission_statement(selected_intents: Iterable[str], catalogs: Optional[CatalogSet] = None) -> Optional[str]:
    """Combined problem statement from the titles of the selected intents."""
    catalogs = catalogs or default_catalogs()
    titles = [
        catalogs.intents.get(intent_id).title
        for intent_id in selected_intents
        if intent_id in catalogs.intents
    ]
    if not titles:
        return None
    return f"Strategic Mission: {' + '.join(titles)}"


def module_preview(intent_id: str, limit: int = 3, catalogs: Optional[CatalogSet] = None) -> dict[str, Any]:
    """Short engine preview for an intent card: the first few names and an overflow count."""
    catalogs = catalogs or default_catalogs()
    intent = catalogs.intents.get(intent_id)
    if intent is None:
        return {"names": [], "overflow": 0}
    modules = intent.recommended_modules
    return {
        "names": [catalogs.modules.display_name(m).split(" ")[0] for m in modules[:limit]],
        "overflow": max(len(modules) - limit, 0),
    }
