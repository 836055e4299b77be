"""
Timeline coordinate mapping for Retroplan.

Converts between calendar dates and horizontal pixel offsets on the
timeline grid, given a zoom factor and the timeline origin (the first
rendered week start).
"""
import math
from dataclasses import dataclass, replace
from datetime import date, timedelta

from retroplan.constants import (
    DEFAULT_BASE_DAY_WIDTH,
    DEFAULT_ZOOM,
    ZOOM_MAX,
    ZOOM_MIN,
    ZOOM_STEP,
)
from retroplan.utils import days_between

# Absorbs float error so that offset_to_date(date_to_offset(d)) == d.
_OFFSET_EPSILON = 1e-9


def clamp_zoom(zoom: float) -> float:
    """Clamp a zoom factor to [ZOOM_MIN, ZOOM_MAX], snapped to one decimal."""
    return round(min(max(zoom, ZOOM_MIN), ZOOM_MAX), 1)


@dataclass(frozen=True)
class TimelineMapper:
    """
    Maps dates to pixel offsets and back.

    Attributes:
        origin: Date drawn at pixel offset 0.
        zoom: Multiplier on the base day width, clamped to [0.4, 2.0].
        base_day_width: Width of one day at zoom 1.0, in pixels.
    """

    origin: date
    zoom: float = DEFAULT_ZOOM
    base_day_width: float = DEFAULT_BASE_DAY_WIDTH

    def __post_init__(self) -> None:
        object.__setattr__(self, "zoom", clamp_zoom(self.zoom))

    @property
    def day_width(self) -> float:
        return self.base_day_width * self.zoom

    @property
    def week_width(self) -> float:
        return self.day_width * 7

    @property
    def can_zoom_in(self) -> bool:
        return self.zoom < ZOOM_MAX

    @property
    def can_zoom_out(self) -> bool:
        return self.zoom > ZOOM_MIN

    def with_zoom(self, zoom: float) -> "TimelineMapper":
        return replace(self, zoom=clamp_zoom(zoom))

    def zoom_in(self) -> "TimelineMapper":
        return self.with_zoom(self.zoom + ZOOM_STEP)

    def zoom_out(self) -> "TimelineMapper":
        return self.with_zoom(self.zoom - ZOOM_STEP)

    def date_to_offset(self, day: date) -> float:
        """Left pixel offset of a day: whole days since origin times day width."""
        return days_between(self.origin, day) * self.day_width

    def offset_to_date(self, offset: float) -> date:
        """Day under a pixel offset: origin plus floor(offset / day width) days."""
        return self.origin + timedelta(days=math.floor(offset / self.day_width + _OFFSET_EPSILON))

    def pointer_to_date(self, client_x: float, container_left: float = 0.0, scroll_left: float = 0.0) -> date:
        """
        Translate a screen-space pointer position into the date under it.

        Args:
            client_x: Pointer X in screen space.
            container_left: Screen X of the grid container's left edge.
            scroll_left: Horizontal scroll offset of the container.
        """
        return self.offset_to_date(client_x - container_left + scroll_left)

    def centered_scroll_offset(self, day: date, viewport_width: float) -> float:
        """
        Scroll offset that centres the given day in a viewport.

        Days before the origin are treated as the origin.
        """
        pixel_offset = max(0.0, self.date_to_offset(day))
        return max(0.0, pixel_offset + self.day_width / 2 - viewport_width / 2)
