"""
Studio parameters: the organizational identity and mission the user declares
while walking through the design studio.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields as dataclass_fields, asdict
from enum import Enum
from typing import Any, Optional


class SkillLevel(str, Enum):
    OBSERVER = "observer"
    NOVICE = "novice"
    ASSOCIATE = "associate"
    SENIOR = "senior"
    EXECUTIVE = "executive"
    VISIONARY = "visionary"


SKILL_LEVEL_LABELS = {
    SkillLevel.OBSERVER: ("Observer", "Passive Insights Only"),
    SkillLevel.NOVICE: ("Novice Analyst", "Guided & Instructional"),
    SkillLevel.ASSOCIATE: ("Associate", "Collaborative Co-Pilot"),
    SkillLevel.SENIOR: ("Senior Strategist", "Autonomous Execution"),
    SkillLevel.EXECUTIVE: ("Decision Maker", "Synthesis & Bottom Line"),
    SkillLevel.VISIONARY: ("Visionary Architect", "Abstract & Global Scale"),
}

CUSTOM = "Custom"


@dataclass
class OrgContext:
    """What the response generator needs to know about the asker."""
    organization_type: str = ""
    region: str = ""
    industry: list[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"User is a {self.organization_type or 'organization'} in {self.region or 'an unspecified region'}. "
            f"Industry: {', '.join(self.industry) or 'unspecified'}."
        )


@dataclass
class StudioParameters:
    """Identity and mission fields collected by the studio."""
    user_name: str = ""
    user_country: str = ""
    organization_type: str = ""
    organization_subtype: str = ""
    custom_organization_type: str = ""
    skill_level: SkillLevel = SkillLevel.ASSOCIATE
    region: str = ""
    industry: list[str] = field(default_factory=list)

    # Mission
    initial_thought: str = ""
    problem_statement: str = ""
    selected_intents: list[str] = field(default_factory=list)
    primary_intent: Optional[str] = None

    # Document reference (filename only, content is never read)
    uploaded_file_name: Optional[str] = None
    uploaded_document: bool = False

    REQUIRED_IDENTITY_FIELDS = ("organization_type", "user_country", "user_name")

    def missing_identity_fields(self) -> list[str]:
        return [name for name in self.REQUIRED_IDENTITY_FIELDS if not str(getattr(self, name)).strip()]

    @property
    def effective_organization_type(self) -> str:
        if self.organization_type == CUSTOM and self.custom_organization_type:
            return self.custom_organization_type
        return self.organization_type

    def org_context(self) -> OrgContext:
        return OrgContext(
            organization_type=self.effective_organization_type,
            region=self.region,
            industry=list(self.industry),
        )

    def update(self, **fields: Any) -> None:
        """Set known fields from a form payload; unknown keys are ignored."""
        known = {f.name for f in dataclass_fields(self)}
        for name, value in fields.items():
            if name in ("selected_intents", "primary_intent", "uploaded_document"):
                continue
            if name not in known:
                continue
            if name == "skill_level" and value is not None:
                value = SkillLevel(value)
            elif name == "industry" and isinstance(value, str):
                value = [part.strip() for part in value.split(",") if part.strip()]
            setattr(self, name, value)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["skill_level"] = self.skill_level.value
        return data
