"""
Design Studio Agent - the three-stage configuration wizard.

Studio Flow:
1. IDENTITY: who is asking (name, country, organization type, skill level)
   and an optional raw thought that can be refined into a problem statement
2. INTENT: select one or more strategic intents; the engine preview is
   recomputed from the selection on every toggle
3. CANVAS: the mission is fixed and the co-pilot takes over; reachable only
   from INTENT with at least one intent selected, and can step back to INTENT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol

from ..catalog import CatalogSet, default_catalogs
from ..composition import Composition, mission_statement, module_preview, resolve
from ..errors import IdentityIncompleteError, StageTransitionError
from ..prompts import DEFAULT_REFINE_INSTRUCTION
from ..schemas.studio_params import CUSTOM, StudioParameters

logger = logging.getLogger(__name__)


class StudioStage(Enum):
    IDENTITY = "identity"
    INTENT = "intent"
    CANVAS = "canvas"


STAGE_ORDER = [StudioStage.IDENTITY, StudioStage.INTENT, StudioStage.CANVAS]


class TextRefiner(Protocol):
    def refine(self, raw_text: str, instruction: str) -> str:
        ...


@dataclass
class StudioState:
    """Tracks wizard progress."""
    params: StudioParameters = field(default_factory=StudioParameters)
    stage: StudioStage = StudioStage.IDENTITY
    analyzing_thought: bool = False

    def get_progress(self, active_engine_count: int) -> dict:
        """Progress info for UI."""
        return {
            "stage": self.stage.value,
            "stage_index": STAGE_ORDER.index(self.stage) + 1,
            "stage_total": len(STAGE_ORDER),
            "intents_selected": len(self.params.selected_intents),
            "active_engines": active_engine_count,
        }


class DesignStudioAgent:
    """
    Drives one user's pass through the design studio.

    The agent owns the selection; the engine preview is derived from it
    and never stored.
    """

    def __init__(
        self,
        params: Optional[StudioParameters] = None,
        refiner: Optional[TextRefiner] = None,
        catalogs: Optional[CatalogSet] = None,
    ):
        self.state = StudioState(params=params or StudioParameters())
        self.catalogs = catalogs or default_catalogs()
        self.refiner = refiner

    @property
    def params(self) -> StudioParameters:
        return self.state.params

    @property
    def stage(self) -> StudioStage:
        return self.state.stage

    # --- Identity ---

    def update_identity(self, **fields: Any) -> StudioParameters:
        self.params.update(**fields)
        return self.params

    def organization_subtypes(self) -> list[str]:
        return list(self.catalogs.intents.subtypes_for(self.params.organization_type))

    @property
    def show_custom_type_input(self) -> bool:
        return self.params.organization_type == CUSTOM

    @property
    def show_custom_category_input(self) -> bool:
        if not self.params.organization_type:
            return False
        return self.params.organization_subtype == CUSTOM or not self.organization_subtypes()

    def complete_identity(self) -> StudioStage:
        missing = self.params.missing_identity_fields()
        if missing:
            raise IdentityIncompleteError(missing)
        self.state.stage = StudioStage.INTENT
        return self.state.stage

    def refine_thought(self, instruction: str = DEFAULT_REFINE_INSTRUCTION) -> Optional[str]:
        """
        Turn the initial thought into a problem statement.

        Returns:
            The refined statement, or None when there is nothing to refine or
            no refinement is available.
        """
        thought = self.params.initial_thought.strip()
        if not thought or self.refiner is None:
            return None

        self.state.analyzing_thought = True
        try:
            refined = self.refiner.refine(thought, instruction)
        except Exception:
            logger.warning("Thought refinement failed", exc_info=True)
            return None
        finally:
            self.state.analyzing_thought = False

        self.params.problem_statement = refined
        return refined

    def attach_document(self, filename: str) -> None:
        """Record an uploaded document by name; the content is never read."""
        if not filename:
            return
        self.params.uploaded_file_name = filename
        self.params.uploaded_document = True

    # --- Intent ---

    def toggle_intent(self, intent_id: str) -> list[str]:
        selected = self.params.selected_intents
        if intent_id in selected:
            selected = [i for i in selected if i != intent_id]
        else:
            selected = [*selected, intent_id]

        self.params.selected_intents = selected
        self.params.primary_intent = selected[0] if selected else None
        return list(selected)

    def preview(self) -> Composition:
        return resolve(self.params.selected_intents, self.catalogs)

    def intent_cards(self) -> list[dict[str, Any]]:
        """Every catalog intent with its selection, alignment and engine preview."""
        org_type = self.params.effective_organization_type
        selected = set(self.params.selected_intents)
        return [
            {
                "id": intent.id,
                "title": intent.title,
                "description": intent.description,
                "selected": intent.id in selected,
                "aligned": intent.is_aligned_with(org_type),
                "engines": module_preview(intent.id, catalogs=self.catalogs),
            }
            for intent in self.catalogs.intents.list_all()
        ]

    def back_to_identity(self) -> StudioStage:
        if self.state.stage == StudioStage.INTENT:
            self.state.stage = StudioStage.IDENTITY
        return self.state.stage

    def proceed_to_canvas(self) -> StudioStage:
        """
        Fix the mission and open the canvas.

        Raises:
            StageTransitionError: Not on the intent stage, or no intent selected
        """
        if self.state.stage != StudioStage.INTENT:
            raise StageTransitionError(
                f"Canvas can only be opened from the intent stage (current: {self.state.stage.value})"
            )
        if not self.params.selected_intents:
            raise StageTransitionError("Select at least one strategic intent before opening the canvas")

        if not self.params.problem_statement:
            statement = mission_statement(self.params.selected_intents, self.catalogs)
            if statement:
                self.params.problem_statement = statement
        self.state.stage = StudioStage.CANVAS
        return self.state.stage

    def back_to_intent(self) -> StudioStage:
        if self.state.stage == StudioStage.CANVAS:
            self.state.stage = StudioStage.INTENT
        return self.state.stage

    # --- Reporting ---

    def get_progress(self) -> dict:
        return self.state.get_progress(self.preview().count)

    def get_summary(self) -> dict:
        return {
            "stage": self.state.stage.value,
            "params": self.params.to_dict(),
            "composition": self.preview().to_dict(self.catalogs),
            "progress": self.get_progress(),
        }
