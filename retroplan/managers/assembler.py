"""
Timeline data assembly for Retroplan.

Derives the visible date span and week buckets of the timeline from the
phase list, and partitions phases into their row groups.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from retroplan.constants import DISPLAY_WINDOW_YEARS
from retroplan.models.plan import Phase, SubProject
from retroplan.utils import add_years, plan_range, weeks_between


@dataclass(frozen=True)
class TimelineData:
    """
    Visible timeline span.

    Attributes:
        base_start, base_end: Padded plan range.
        start, end: Base range widened by the display window on each side.
        weeks: Monday week starts covering [start, end].
    """

    base_start: date
    base_end: date
    start: date
    end: date
    weeks: Tuple[date, ...]

    @property
    def origin(self) -> date:
        """Date at pixel offset 0: the first rendered week start."""
        return self.weeks[0]


@dataclass(frozen=True)
class PhaseGroup:
    """Phases of one sub-project (or of the ungrouped "general" row set)."""

    sub_project: Optional[SubProject]
    phases: Tuple[Phase, ...]

    @property
    def key(self) -> Optional[str]:
        return self.sub_project.id if self.sub_project else None


class TimelineAssembler:
    """Computes TimelineData for a phase list."""

    def __init__(self, today: Optional[date] = None, window_years: int = DISPLAY_WINDOW_YEARS) -> None:
        self.today = today
        self.window_years = window_years

    def assemble(self, phases: Sequence[Phase]) -> TimelineData:
        base_start, base_end = plan_range(phases, today=self.today or date.today())
        start = add_years(base_start, -self.window_years)
        end = add_years(base_end, self.window_years)
        return TimelineData(
            base_start=base_start,
            base_end=base_end,
            start=start,
            end=end,
            weeks=tuple(weeks_between(start, end)),
        )


def group_phases(phases: Sequence[Phase], sub_projects: Sequence[SubProject]) -> List[PhaseGroup]:
    """
    Partition phases into row groups.

    One group per sub-project in sub-project order, followed by the group
    of ungrouped phases. Phase order inside a group follows the plan order.
    """
    groups = [
        PhaseGroup(
            sub_project=sub_project,
            phases=tuple(p for p in phases if p.sub_project_id == sub_project.id),
        )
        for sub_project in sub_projects
    ]
    groups.append(PhaseGroup(sub_project=None, phases=tuple(p for p in phases if not p.sub_project_id)))
    return groups
