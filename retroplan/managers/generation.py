"""
Merging of generated phase drafts.

A phase generator (for example an LLM-backed service) turns a free-text
project description and a start date into draft phases. Prompting and
response parsing belong to the generator; this module only defines the
draft shape and folds drafts into a plan under fresh identifiers.
"""
import datetime as dt
from typing import Any, List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from retroplan.constants import VALIDATION_DATE_ORDER
from retroplan.exceptions import InvalidDateRangeError
from retroplan.models.plan import Phase, PhaseType, ProjectPlan, new_id


class PhaseDraft(BaseModel):
    """Phase proposed by a generator, before it has an identifier."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    name: str
    start_date: dt.date
    end_date: dt.date
    type: PhaseType = PhaseType.OTHER
    details: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_to_other(cls, v: Any) -> Any:
        if isinstance(v, PhaseType):
            return v
        try:
            return PhaseType(str(v).upper())
        except ValueError:
            return PhaseType.OTHER


class PhaseGenerator(Protocol):
    """Anything that can draft phases from a description."""

    def generate(self, prompt: str, start_date: dt.date) -> List[PhaseDraft]:
        ...


def merge_generated_phases(plan: ProjectPlan, drafts: Sequence[PhaseDraft]) -> ProjectPlan:
    """
    Append drafts to a plan as new ungrouped phases.

    Every draft gets a fresh identifier. The merge is all-or-nothing: a
    draft ending before it starts rejects the whole batch.

    Raises:
        InvalidDateRangeError: If any non-PUSH_TO_PROD draft has start > end.
    """
    new_phases = []
    for draft in drafts:
        if draft.type is not PhaseType.PUSH_TO_PROD and draft.start_date > draft.end_date:
            raise InvalidDateRangeError(f"{VALIDATION_DATE_ORDER} (generated phase '{draft.name}')")
        new_phases.append(
            Phase(
                id=new_id(),
                name=draft.name,
                start_date=draft.start_date,
                end_date=draft.end_date,
                type=draft.type,
                details=draft.details,
            )
        )
    return plan.with_changes(phases=plan.phases + tuple(new_phases))
