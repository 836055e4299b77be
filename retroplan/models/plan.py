"""
Plan models for Retroplan.

A ProjectPlan owns its phases, holidays and sub-projects. All models are
immutable: a change builds a new, re-validated instance through
``with_changes``. Serialized field names are camelCase so that stored and
shared payloads keep the browser planner's shape.
"""

import datetime as dt
import uuid
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from retroplan.constants import VALIDATION_DATE_ORDER


def new_id() -> str:
    """Generate a fresh identifier for a plan item."""
    return str(uuid.uuid4())


class PhaseType(str, Enum):
    """Closed set of phase types."""

    CONCEPTION = "CONCEPTION"
    DEVELOPMENT = "DEVELOPMENT"
    TESTS = "TESTS"
    PUSH_TO_PROD = "PUSH_TO_PROD"
    OTHER = "OTHER"


PHASE_LABELS: Dict[PhaseType, str] = {
    PhaseType.CONCEPTION: "Conception",
    PhaseType.DEVELOPMENT: "Développement",
    PhaseType.TESTS: "Tests / QA",
    PhaseType.PUSH_TO_PROD: "Push to Prod",
    PhaseType.OTHER: "Other",
}


class PlanModel(BaseModel):
    """Common configuration for all plan models."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def with_changes(self, **changes: Any):
        """Return a re-validated copy with the given fields replaced."""
        return type(self).model_validate({**self.model_dump(), **changes})


class SubProject(PlanModel):
    """Named grouping of phases, rendered as a collapsible row group."""

    id: str = Field(default_factory=new_id)
    name: str


class Holiday(PlanModel):
    """Single calendar day marked as an absence."""

    id: str = Field(default_factory=new_id)
    name: str
    date: dt.date


class Phase(PlanModel):
    """
    Date-ranged work item shown as a bar on the timeline.

    Both dates are inclusive. ``start_date <= end_date`` always holds, and a
    PUSH_TO_PROD phase always lasts exactly one day: its end date follows
    its start date whenever the phase is built.
    """

    id: str = Field(default_factory=new_id)
    name: Optional[str] = None
    start_date: dt.date
    end_date: dt.date
    type: PhaseType = PhaseType.DEVELOPMENT
    details: Optional[str] = None
    sub_project_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def pin_push_to_prod(cls, data: Any) -> Any:
        """Force a one-day duration for PUSH_TO_PROD phases."""
        if not isinstance(data, dict):
            return data
        phase_type = data.get("type")
        if phase_type not in (PhaseType.PUSH_TO_PROD, PhaseType.PUSH_TO_PROD.value):
            return data
        start = data.get("start_date", data.get("startDate"))
        if start is None:
            return data
        data = dict(data)
        data.pop("endDate", None)
        data["end_date"] = start
        return data

    @field_validator("name", "details", "sub_project_id")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_date_order(self) -> "Phase":
        if self.start_date > self.end_date:
            raise ValueError(VALIDATION_DATE_ORDER)
        return self

    @property
    def label(self) -> str:
        """Display name, falling back to the type label."""
        return self.name or PHASE_LABELS[self.type]

    @property
    def duration_days(self) -> int:
        """Inclusive duration in days (a single-day phase lasts 1)."""
        return (self.end_date - self.start_date).days + 1


class ProjectPlan(PlanModel):
    """
    Root aggregate of a planning session.

    Phase and holiday identifiers are unique within the plan, and every
    phase sub-project reference points at a sub-project of the same plan.
    """

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)
    phases: Tuple[Phase, ...] = ()
    holidays: Tuple[Holiday, ...] = ()
    sub_projects: Tuple[SubProject, ...] = ()

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @model_validator(mode="after")
    def validate_references(self) -> "ProjectPlan":
        phase_ids = [p.id for p in self.phases]
        if len(phase_ids) != len(set(phase_ids)):
            raise ValueError("Phase identifiers must be unique within a plan")
        holiday_ids = [h.id for h in self.holidays]
        if len(holiday_ids) != len(set(holiday_ids)):
            raise ValueError("Holiday identifiers must be unique within a plan")
        sub_project_ids = {sp.id for sp in self.sub_projects}
        for phase in self.phases:
            if phase.sub_project_id and phase.sub_project_id not in sub_project_ids:
                raise ValueError(
                    f"Phase '{phase.id}' references unknown sub-project '{phase.sub_project_id}'"
                )
        return self

    def get_phase(self, phase_id: str) -> Optional[Phase]:
        return next((p for p in self.phases if p.id == phase_id), None)

    def get_holiday(self, holiday_id: str) -> Optional[Holiday]:
        return next((h for h in self.holidays if h.id == holiday_id), None)

    def get_sub_project(self, sub_project_id: str) -> Optional[SubProject]:
        return next((sp for sp in self.sub_projects if sp.id == sub_project_id), None)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape used for storage and sharing."""
        return self.model_dump(mode="json", by_alias=True)
