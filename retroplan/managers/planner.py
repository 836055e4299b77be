"""
Planner session state and its transitions.

The whole interactive state of one planning session is a single immutable
PlannerState value. Every user interaction is a transition function taking
the current state and returning a new one; nothing is mutated in place.

Transitions validate at the point of mutation. A rejected change leaves the
plan untouched and sets ``notice`` to a user-facing message instead of
raising. Mutating transitions are no-ops on a read-only (shared) session.
"""
import functools
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Callable, Dict, FrozenSet, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from retroplan.constants import (
    DATE_FORMAT_ERROR,
    DEFAULT_BASE_DAY_WIDTH,
    DEFAULT_DRAG_THRESHOLD_PX,
    DEFAULT_EDGE_HANDLE_WIDTH,
    DEFAULT_ZOOM,
    VALIDATION_DATE_ORDER,
    VALIDATION_HOLIDAY_NAME_REQUIRED,
    VALIDATION_SUBPROJECT_NAME_REQUIRED,
    ZOOM_STEP,
    ConfigManager,
    get_base_day_width,
    get_drag_threshold,
    get_edge_handle_width,
)
from retroplan.exceptions import (
    InvalidDateRangeError,
    NotFoundError,
    RetroplanError,
    ValidationError,
)
from retroplan.managers.assembler import TimelineAssembler, TimelineData
from retroplan.managers.generation import PhaseDraft, merge_generated_phases
from retroplan.managers.interaction import (
    Gesture,
    GestureKind,
    GestureOutcome,
    apply_to_phase,
    begin_gesture,
    end_gesture,
    track_pointer,
)
from retroplan.managers.layout import BarRect, PhaseLayoutEngine
from retroplan.managers.ordering import RowDrag, reorder_phases
from retroplan.managers.timeline import TimelineMapper, clamp_zoom
from retroplan.models.plan import Holiday, Phase, PhaseType, ProjectPlan, SubProject
from retroplan.utils import iter_days, to_date

PHASE_FIELDS = ("name", "start_date", "end_date", "type", "details", "sub_project_id")


@dataclass(frozen=True)
class TimelineSettings:
    """Pixel geometry and gesture tuning of the timeline."""

    base_day_width: float = DEFAULT_BASE_DAY_WIDTH
    edge_handle_width: float = DEFAULT_EDGE_HANDLE_WIDTH
    drag_threshold: float = DEFAULT_DRAG_THRESHOLD_PX

    @classmethod
    def from_config(cls, config: Optional[ConfigManager] = None) -> "TimelineSettings":
        return cls(
            base_day_width=get_base_day_width(config),
            edge_handle_width=get_edge_handle_width(config),
            drag_threshold=get_drag_threshold(config),
        )


def _coerce_dates(start: Any, end: Any) -> Tuple[date, date]:
    """Coerce form or CLI input to dates; bad input is a ValidationError."""
    try:
        return to_date(start), to_date(end)
    except (TypeError, ValueError):
        raise ValidationError(DATE_FORMAT_ERROR)


def _coerce_type(value: Any) -> PhaseType:
    if isinstance(value, PhaseType):
        return value
    try:
        return PhaseType(str(value).upper())
    except ValueError:
        raise ValidationError(f"Unknown phase type '{value}'.")


@dataclass(frozen=True)
class PhaseForm:
    """Pre-filled "create phase" form, opened by clicking empty grid space."""

    start_date: date
    end_date: date
    type: PhaseType = PhaseType.DEVELOPMENT
    name: str = ""
    sub_project_id: Optional[str] = None
    details: Optional[str] = None

    def __post_init__(self) -> None:
        start, end = _coerce_dates(self.start_date, self.end_date)
        object.__setattr__(self, "start_date", start)
        object.__setattr__(self, "end_date", end)
        object.__setattr__(self, "type", _coerce_type(self.type))
        if self.type is PhaseType.PUSH_TO_PROD:
            object.__setattr__(self, "end_date", self.start_date)

    def with_changes(self, **changes) -> "PhaseForm":
        return replace(self, **changes)


@dataclass(frozen=True)
class PlannerState:
    """
    Complete state of one planning session.

    ``frozen_phases`` holds the phase list as it was when the current bar
    gesture began; timeline geometry is computed from it while a gesture is
    active so the grid does not shift under the pointer.
    """

    plan: ProjectPlan
    settings: TimelineSettings = field(default_factory=TimelineSettings)
    zoom: float = DEFAULT_ZOOM
    read_only: bool = False
    today: Optional[date] = None
    gesture: Optional[Gesture] = None
    frozen_phases: Optional[Tuple[Phase, ...]] = None
    row_drag: RowDrag = field(default_factory=RowDrag)
    collapsed: FrozenSet[str] = frozenset()
    editing_phase_id: Optional[str] = None
    phase_form: Optional[PhaseForm] = None
    notice: Optional[str] = None
    dirty: bool = False

    @property
    def phases(self) -> Tuple[Phase, ...]:
        return self.plan.phases

    @property
    def is_dragging(self) -> bool:
        return self.gesture is not None

    @property
    def timeline_phases(self) -> Tuple[Phase, ...]:
        return self.frozen_phases if self.frozen_phases is not None else self.plan.phases

    @property
    def timeline(self) -> TimelineData:
        return TimelineAssembler(today=self.today).assemble(self.timeline_phases)

    @property
    def mapper(self) -> TimelineMapper:
        return TimelineMapper(
            origin=self.timeline.origin,
            zoom=self.zoom,
            base_day_width=self.settings.base_day_width,
        )

    @property
    def layout(self) -> PhaseLayoutEngine:
        return PhaseLayoutEngine(self.mapper, edge_handle_width=self.settings.edge_handle_width)

    @property
    def editing_phase(self) -> Optional[Phase]:
        if self.editing_phase_id is None:
            return None
        return self.plan.get_phase(self.editing_phase_id)

    def bar_rects(self) -> Dict[str, BarRect]:
        """Bar geometry of every live phase against the (possibly frozen) grid."""
        layout = self.layout
        return {phase.id: layout.bar_rect(phase) for phase in self.plan.phases}

    def snapshot(self) -> ProjectPlan:
        """The plan as it currently stands, for save, share and export."""
        return self.plan


# =============================================================================
# Transition plumbing
# =============================================================================


def _error_message(error: PydanticValidationError) -> str:
    message = error.errors()[0].get("msg", str(error))
    return message.removeprefix("Value error, ")


def transition(mutates: bool = True) -> Callable:
    """
    Wrap a transition function.

    Mutating transitions are skipped on read-only sessions. Validation
    failures are turned into a notice on the unchanged state; a successful
    transition clears any previous notice.
    """

    def decorator(fn: Callable[..., PlannerState]) -> Callable[..., PlannerState]:
        @functools.wraps(fn)
        def wrapper(state: PlannerState, *args, **kwargs) -> PlannerState:
            if mutates and state.read_only:
                return state
            try:
                new_state = fn(state, *args, **kwargs)
            except RetroplanError as e:
                return replace(state, notice=str(e))
            except PydanticValidationError as e:
                return replace(state, notice=_error_message(e))
            if new_state.notice is not None:
                new_state = replace(new_state, notice=None)
            return new_state

        return wrapper

    return decorator


def _with_plan(state: PlannerState, **plan_changes) -> PlannerState:
    return replace(state, plan=state.plan.with_changes(**plan_changes), dirty=True)


def _require_phase(state: PlannerState, phase_id: str) -> Phase:
    phase = state.plan.get_phase(phase_id)
    if phase is None:
        raise NotFoundError(f"Phase '{phase_id}' not found.")
    return phase


def _checked_range(start: Any, end: Any) -> Tuple[date, date]:
    start, end = _coerce_dates(start, end)
    if start > end:
        raise InvalidDateRangeError(VALIDATION_DATE_ORDER)
    return start, end


def _replace_phase(phases: Sequence[Phase], updated: Phase) -> Tuple[Phase, ...]:
    return tuple(updated if p.id == updated.id else p for p in phases)


# =============================================================================
# Phases
# =============================================================================


@transition()
def add_phase(
    state: PlannerState,
    start_date: date,
    end_date: date,
    type: PhaseType = PhaseType.DEVELOPMENT,
    name: Optional[str] = None,
    sub_project_id: Optional[str] = None,
    details: Optional[str] = None,
) -> PlannerState:
    # Phase coerces dates and type, pins PUSH_TO_PROD and checks the order.
    phase = Phase(
        name=name,
        start_date=start_date,
        end_date=end_date,
        type=type,
        sub_project_id=sub_project_id,
        details=details,
    )
    return _with_plan(state, phases=state.plan.phases + (phase,))


@transition()
def update_phase(state: PlannerState, phase_id: str, **changes) -> PlannerState:
    """Apply a manual edit; an edit ending before it starts is rejected."""
    unknown = set(changes) - set(PHASE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown phase field(s): {', '.join(sorted(unknown))}")
    phase = _require_phase(state, phase_id)
    updated = Phase.model_validate({**phase.model_dump(), **changes})
    return _with_plan(state, phases=_replace_phase(state.plan.phases, updated))


@transition()
def rename_phase(state: PlannerState, phase_id: str, name: str) -> PlannerState:
    """Rename inline; a blank name clears it back to the type label."""
    phase = _require_phase(state, phase_id)
    updated = phase.with_changes(name=name.strip() or None)
    return _with_plan(state, phases=_replace_phase(state.plan.phases, updated))


@transition()
def delete_phase(state: PlannerState, phase_id: str) -> PlannerState:
    _require_phase(state, phase_id)
    new_state = _with_plan(state, phases=tuple(p for p in state.plan.phases if p.id != phase_id))
    if state.editing_phase_id == phase_id:
        new_state = replace(new_state, editing_phase_id=None)
    return new_state


@transition(mutates=False)
def open_phase_editor(state: PlannerState, phase_id: str) -> PlannerState:
    _require_phase(state, phase_id)
    return replace(state, editing_phase_id=phase_id, phase_form=None)


@transition(mutates=False)
def close_editor(state: PlannerState) -> PlannerState:
    return replace(state, editing_phase_id=None, phase_form=None)


@transition()
def merge_generated(state: PlannerState, drafts: Sequence[PhaseDraft]) -> PlannerState:
    """Merge generated draft phases into the plan under fresh identifiers."""
    return replace(state, plan=merge_generated_phases(state.plan, drafts), dirty=True)


# =============================================================================
# Create-phase form (grid click)
# =============================================================================


@transition()
def grid_click(
    state: PlannerState,
    client_x: float,
    container_left: float = 0.0,
    scroll_left: float = 0.0,
    sub_project_id: Optional[str] = None,
) -> PlannerState:
    """Open the create-phase form for the day under the pointer."""
    if state.is_dragging:
        return state
    day = state.mapper.pointer_to_date(client_x, container_left, scroll_left)
    form = PhaseForm(start_date=day, end_date=day, sub_project_id=sub_project_id)
    return replace(state, phase_form=form, editing_phase_id=None)


@transition()
def edit_phase_form(state: PlannerState, **changes) -> PlannerState:
    if state.phase_form is None:
        raise ValidationError("No phase form is open.")
    return replace(state, phase_form=state.phase_form.with_changes(**changes))


@transition()
def submit_phase_form(state: PlannerState) -> PlannerState:
    form = state.phase_form
    if form is None:
        raise ValidationError("No phase form is open.")
    new_state = add_phase(
        state,
        start_date=form.start_date,
        end_date=form.end_date,
        type=form.type,
        name=form.name,
        sub_project_id=form.sub_project_id,
        details=form.details,
    )
    if new_state.notice is not None:
        # add_phase has already rejected the form; keep it open for correction.
        raise ValidationError(new_state.notice)
    return replace(new_state, phase_form=None)


# =============================================================================
# Bar gestures
# =============================================================================


@transition()
def begin_drag(state: PlannerState, phase_id: str, kind: GestureKind, pointer_x: float) -> PlannerState:
    """Pointer-down on a bar: start a gesture and freeze the grid geometry."""
    if state.is_dragging:
        return state
    phase = _require_phase(state, phase_id)
    return replace(
        state,
        gesture=begin_gesture(phase, kind, pointer_x),
        frozen_phases=state.plan.phases,
    )


@transition()
def drag_to(state: PlannerState, pointer_x: float) -> PlannerState:
    """Pointer-move while a gesture is active."""
    if state.gesture is None:
        return state
    gesture, dates = track_pointer(
        state.gesture,
        pointer_x,
        state.mapper.day_width,
        threshold=state.settings.drag_threshold,
    )
    new_state = replace(state, gesture=gesture)
    if dates is None:
        return new_state
    phase = _require_phase(state, gesture.phase_id)
    updated = apply_to_phase(phase, dates)
    if updated == phase:
        return new_state
    return _with_plan(new_state, phases=_replace_phase(state.plan.phases, updated))


@transition(mutates=False)
def end_drag(state: PlannerState) -> PlannerState:
    """
    Pointer-up: drop the gesture and release the frozen grid.

    A gesture that never moved past the threshold opens the phase editor.
    """
    gesture = state.gesture
    if gesture is None:
        return state
    new_state = replace(state, gesture=None, frozen_phases=None)
    if end_gesture(gesture) is GestureOutcome.CLICK:
        new_state = replace(new_state, editing_phase_id=gesture.phase_id, phase_form=None)
    return new_state


# =============================================================================
# Row reordering
# =============================================================================


@transition()
def row_drag_start(state: PlannerState, phase_id: str) -> PlannerState:
    return replace(state, row_drag=state.row_drag.start(phase_id))


@transition()
def row_drag_enter(state: PlannerState, phase_id: str) -> PlannerState:
    return replace(state, row_drag=state.row_drag.enter(phase_id))


@transition()
def row_drop(state: PlannerState, target_id: str) -> PlannerState:
    """Drop the dragged row onto ``target_id``; cross-group drops do nothing."""
    source_id = state.row_drag.dragging_id
    new_state = replace(state, row_drag=state.row_drag.end())
    if not source_id or source_id == target_id:
        return new_state
    reordered = reorder_phases(state.plan.phases, source_id, target_id)
    if reordered == state.plan.phases:
        return new_state
    return _with_plan(new_state, phases=reordered)


@transition(mutates=False)
def row_drag_end(state: PlannerState) -> PlannerState:
    return replace(state, row_drag=state.row_drag.end())


# =============================================================================
# Sub-projects
# =============================================================================


@transition()
def add_sub_project(state: PlannerState, name: str) -> PlannerState:
    if not name or not name.strip():
        raise ValidationError(VALIDATION_SUBPROJECT_NAME_REQUIRED)
    sub_project = SubProject(name=name.strip())
    return _with_plan(state, sub_projects=state.plan.sub_projects + (sub_project,))


@transition()
def rename_sub_project(state: PlannerState, sub_project_id: str, name: str) -> PlannerState:
    """Rename a sub-project; a blank name keeps the current one."""
    if state.plan.get_sub_project(sub_project_id) is None:
        raise NotFoundError(f"Sub-project '{sub_project_id}' not found.")
    sub_projects = tuple(
        sp.with_changes(name=name.strip() or sp.name) if sp.id == sub_project_id else sp
        for sp in state.plan.sub_projects
    )
    return _with_plan(state, sub_projects=sub_projects)


@transition()
def delete_sub_project(state: PlannerState, sub_project_id: str) -> PlannerState:
    """Delete a sub-project; its phases become ungrouped."""
    if state.plan.get_sub_project(sub_project_id) is None:
        raise NotFoundError(f"Sub-project '{sub_project_id}' not found.")
    phases = tuple(
        p.with_changes(sub_project_id=None) if p.sub_project_id == sub_project_id else p
        for p in state.plan.phases
    )
    sub_projects = tuple(sp for sp in state.plan.sub_projects if sp.id != sub_project_id)
    new_state = _with_plan(state, phases=phases, sub_projects=sub_projects)
    return replace(new_state, collapsed=state.collapsed - {sub_project_id})


@transition(mutates=False)
def toggle_sub_project(state: PlannerState, sub_project_id: str) -> PlannerState:
    if sub_project_id in state.collapsed:
        return replace(state, collapsed=state.collapsed - {sub_project_id})
    return replace(state, collapsed=state.collapsed | {sub_project_id})


# =============================================================================
# Holidays
# =============================================================================


@transition()
def add_holiday_range(state: PlannerState, name: str, start_date: date, end_date: date) -> PlannerState:
    """Mark an absence: one holiday record per covered day, all sharing the name."""
    if not name or not name.strip():
        raise ValidationError(VALIDATION_HOLIDAY_NAME_REQUIRED)
    start_date, end_date = _checked_range(start_date, end_date)
    entries = tuple(Holiday(name=name, date=day) for day in iter_days(start_date, end_date))
    return _with_plan(state, holidays=state.plan.holidays + entries)


@transition()
def update_holiday(
    state: PlannerState,
    holiday_id: str,
    name: Optional[str] = None,
    day: Optional[date] = None,
) -> PlannerState:
    holiday = state.plan.get_holiday(holiday_id)
    if holiday is None:
        raise NotFoundError(f"Holiday '{holiday_id}' not found.")
    changes = {}
    if name is not None:
        if not name.strip():
            raise ValidationError(VALIDATION_HOLIDAY_NAME_REQUIRED)
        changes["name"] = name
    if day is not None:
        changes["date"] = day
    updated = holiday.with_changes(**changes)
    holidays = tuple(updated if h.id == holiday_id else h for h in state.plan.holidays)
    return _with_plan(state, holidays=holidays)


@transition()
def delete_holiday(state: PlannerState, holiday_id: str) -> PlannerState:
    if state.plan.get_holiday(holiday_id) is None:
        raise NotFoundError(f"Holiday '{holiday_id}' not found.")
    return _with_plan(state, holidays=tuple(h for h in state.plan.holidays if h.id != holiday_id))


# =============================================================================
# View
# =============================================================================


@transition(mutates=False)
def zoom_in(state: PlannerState) -> PlannerState:
    return replace(state, zoom=clamp_zoom(state.zoom + ZOOM_STEP))


@transition(mutates=False)
def zoom_out(state: PlannerState) -> PlannerState:
    return replace(state, zoom=clamp_zoom(state.zoom - ZOOM_STEP))


@transition(mutates=False)
def dismiss_notice(state: PlannerState) -> PlannerState:
    return state


@transition(mutates=False)
def mark_saved(state: PlannerState) -> PlannerState:
    return replace(state, dirty=False)
