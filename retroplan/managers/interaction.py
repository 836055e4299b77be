"""
Pointer gesture state machine for phase bars.

A gesture runs from pointer-down on a bar to pointer-up:

    IDLE --begin_gesture--> DRAGGING --track_pointer*--> DRAGGING --end_gesture--> IDLE

While dragging, pointer travel is converted into a whole-day delta applied
to the dates the phase had when the gesture began. The ``moved`` flag
records whether the pointer ever travelled past DRAG_THRESHOLD_PX; a
gesture that never moved is a click and opens the phase editor instead.
"""
import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Tuple

from retroplan.constants import DEFAULT_DRAG_THRESHOLD_PX
from retroplan.models.plan import Phase


class GestureKind(str, Enum):
    """Variants of a bar gesture."""

    MOVE = "MOVE"
    RESIZE_L = "RESIZE_L"
    RESIZE_R = "RESIZE_R"


class GestureOutcome(str, Enum):
    """How a finished gesture is interpreted."""

    CLICK = "click"
    DRAG = "drag"


@dataclass(frozen=True)
class Gesture:
    """Ephemeral state of one pointer-down to pointer-up interaction."""

    phase_id: str
    kind: GestureKind
    start_x: float
    original_start: date
    original_end: date
    moved: bool = False


def begin_gesture(phase: Phase, kind: GestureKind, pointer_x: float) -> Gesture:
    """Capture the phase's dates and the pointer position at pointer-down."""
    return Gesture(
        phase_id=phase.id,
        kind=GestureKind(kind),
        start_x=pointer_x,
        original_start=phase.start_date,
        original_end=phase.end_date,
    )


def delta_days(start_x: float, current_x: float, day_width: float) -> int:
    """Pointer travel in whole days, rounded half-up."""
    return math.floor((current_x - start_x) / day_width + 0.5)


def shifted_range(gesture: Gesture, days: int) -> Tuple[date, date]:
    """
    Dates produced by shifting the gesture's original range by ``days``.

    MOVE keeps the duration. RESIZE_L never pushes the start past the
    original end; RESIZE_R never pulls the end before the original start.
    """
    start, end = gesture.original_start, gesture.original_end
    shift = timedelta(days=days)

    if gesture.kind is GestureKind.MOVE:
        return start + shift, end + shift
    if gesture.kind is GestureKind.RESIZE_L:
        return min(start + shift, end), end
    return start, max(end + shift, start)


def track_pointer(
    gesture: Gesture,
    pointer_x: float,
    day_width: float,
    threshold: float = DEFAULT_DRAG_THRESHOLD_PX,
) -> Tuple[Gesture, Optional[Tuple[date, date]]]:
    """
    Process one pointer-move tick.

    Returns:
        (gesture, dates). ``gesture`` carries the updated ``moved`` flag;
        ``dates`` is the new (start, end) for the phase, or None when the
        pointer is still within the same day as at pointer-down.
    """
    if not gesture.moved and abs(pointer_x - gesture.start_x) > threshold:
        gesture = replace(gesture, moved=True)

    days = delta_days(gesture.start_x, pointer_x, day_width)
    if days == 0:
        return gesture, None
    return gesture, shifted_range(gesture, days)


def apply_to_phase(phase: Phase, dates: Tuple[date, date]) -> Phase:
    """Write gesture dates into a phase, keeping every phase invariant."""
    start, end = dates
    return phase.with_changes(start_date=start, end_date=end)


def end_gesture(gesture: Gesture) -> GestureOutcome:
    """Interpret pointer-up: a gesture that never moved is a click."""
    return GestureOutcome.DRAG if gesture.moved else GestureOutcome.CLICK
