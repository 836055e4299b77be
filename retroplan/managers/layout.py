"""
Phase layout for the Retroplan timeline.

Places phase bars on the grid and describes the week/day cells drawn
behind them.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from retroplan.constants import DEFAULT_EDGE_HANDLE_WIDTH, MONTH_NAMES
from retroplan.managers.interaction import GestureKind
from retroplan.managers.timeline import TimelineMapper
from retroplan.models.plan import Holiday, Phase
from retroplan.utils import is_weekend, iso_week_number


@dataclass(frozen=True)
class BarRect:
    """Horizontal extent of a phase bar, in pixels from the timeline origin."""

    left: float
    width: float

    @property
    def right(self) -> float:
        return self.left + self.width


@dataclass(frozen=True)
class DayCell:
    """One background cell of the grid."""

    date: date
    is_weekend: bool
    holiday_name: Optional[str] = None

    @property
    def is_holiday(self) -> bool:
        return self.holiday_name is not None


@dataclass(frozen=True)
class WeekColumn:
    """Seven day cells plus the header labels of one week."""

    start: date
    week_number: int
    month_label: Optional[str]
    days: Tuple[DayCell, ...]


def holidays_by_date(holidays: Iterable[Holiday]) -> Dict[date, str]:
    """Index holiday names by date; the first holiday listed for a day wins."""
    index: Dict[date, str] = {}
    for holiday in holidays:
        index.setdefault(holiday.date, holiday.name)
    return index


class PhaseLayoutEngine:
    """
    Computes rendered geometry from dates.

    Args:
        mapper: Coordinate mapper for the current zoom and origin.
        edge_handle_width: Width of the resize handle on each bar edge.
    """

    def __init__(self, mapper: TimelineMapper, edge_handle_width: float = DEFAULT_EDGE_HANDLE_WIDTH) -> None:
        self.mapper = mapper
        self.edge_handle_width = edge_handle_width

    def bar_rect(self, phase: Phase) -> BarRect:
        """
        Rectangle of a phase bar.

        The width covers every inclusive day of the phase and is never
        narrower than one day.
        """
        day_width = self.mapper.day_width
        left = self.mapper.date_to_offset(phase.start_date)
        width = max(day_width, phase.duration_days * day_width)
        return BarRect(left=left, width=width)

    def gesture_kind_at(self, x_in_bar: float, bar_width: float) -> GestureKind:
        """Gesture started by pressing at ``x_in_bar`` pixels from the bar's left edge."""
        if x_in_bar < self.edge_handle_width:
            return GestureKind.RESIZE_L
        if x_in_bar >= bar_width - self.edge_handle_width:
            return GestureKind.RESIZE_R
        return GestureKind.MOVE

    def grid_weeks(self, weeks: Sequence[date], holidays: Iterable[Holiday] = ()) -> List[WeekColumn]:
        """Build header labels and background cells for each visible week."""
        holiday_names = holidays_by_date(holidays)
        columns = []
        previous: Optional[date] = None
        for week in weeks:
            is_new_month = previous is None or week.month != previous.month
            days = tuple(
                DayCell(
                    date=day,
                    is_weekend=is_weekend(day),
                    holiday_name=holiday_names.get(day),
                )
                for day in (week + timedelta(days=i) for i in range(7))
            )
            columns.append(
                WeekColumn(
                    start=week,
                    week_number=iso_week_number(week),
                    month_label=f"{MONTH_NAMES[week.month - 1]} {week.year}" if is_new_month else None,
                    days=days,
                )
            )
            previous = week
        return columns
