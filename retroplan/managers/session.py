"""
PlannerSession - one open plan in the planner.

Holds the current PlannerState, routes pointer input to the gesture
transitions, and talks to the persistence strategy chosen at session
start. Save failures are reported through the event bus and the state's
notice; the in-memory plan is never rolled back.
"""

from dataclasses import replace
from datetime import date
from typing import Callable, List, Optional

from retroplan.exceptions import StorageError
from retroplan.managers import planner
from retroplan.managers.assembler import PhaseGroup, group_phases
from retroplan.managers.events import EventType, PlanEvent, publish_event
from retroplan.managers.export import ExportTables, build_export
from retroplan.managers.generation import PhaseGenerator
from retroplan.managers.interaction import GestureKind, GestureOutcome, end_gesture
from retroplan.managers.planner import PlannerState, TimelineSettings
from retroplan.managers.share import encode_plan, share_url
from retroplan.managers.storage_manager import PlanStore
from retroplan.models.plan import ProjectPlan


class PlannerSession:
    """
    Interactive session over a single plan.

    Usage:
        session = PlannerSession(plan, store=LocalPlanStore())
        session.pointer_down("p-8", client_x=400, x_in_bar=40)
        session.pointer_move(490)
        session.pointer_up()  # commits and saves the dragged phase
    """

    def __init__(
        self,
        plan: ProjectPlan,
        store: Optional[PlanStore] = None,
        settings: Optional[TimelineSettings] = None,
        read_only: bool = False,
        today: Optional[date] = None,
        autosave: bool = True,
    ) -> None:
        """
        Initialize PlannerSession.

        Args:
            plan: Plan to open.
            store: Persistence strategy; None disables saving.
            settings: Timeline geometry; defaults to the built-in values.
            read_only: Open as a shared view where every mutation is ignored.
            today: Reference day for empty plans and scroll-to-today.
            autosave: Save after every committed bar gesture.
        """
        self.store = store
        self.autosave = autosave
        self._state = PlannerState(
            plan=plan,
            settings=settings or TimelineSettings(),
            read_only=read_only,
            today=today,
        )

    @property
    def state(self) -> PlannerState:
        return self._state

    @property
    def plan(self) -> ProjectPlan:
        return self._state.plan

    def dispatch(self, transition: Callable[..., PlannerState], *args, **kwargs) -> PlannerState:
        """Apply a planner transition to the current state."""
        self._state = transition(self._state, *args, **kwargs)
        return self._state

    def groups(self) -> List[PhaseGroup]:
        return group_phases(self.plan.phases, self.plan.sub_projects)

    # -------------------------------------------------------------------------
    # Pointer input
    # -------------------------------------------------------------------------

    def pointer_down(
        self,
        phase_id: str,
        client_x: float,
        x_in_bar: Optional[float] = None,
        kind: Optional[GestureKind] = None,
    ) -> PlannerState:
        """
        Press on a phase bar.

        The gesture kind is taken from ``kind`` when given, otherwise from
        where the bar was pressed (``x_in_bar``): the edge handles resize,
        the body moves.
        """
        if kind is None:
            kind = GestureKind.MOVE
            phase = self.plan.get_phase(phase_id)
            if phase is not None and x_in_bar is not None:
                layout = self._state.layout
                kind = layout.gesture_kind_at(x_in_bar, layout.bar_rect(phase).width)
        return self.dispatch(planner.begin_drag, phase_id, kind, client_x)

    def pointer_move(self, client_x: float) -> PlannerState:
        return self.dispatch(planner.drag_to, client_x)

    def pointer_up(self) -> Optional[GestureOutcome]:
        """
        Release the pointer.

        Returns:
            CLICK when the bar was only clicked (the editor opens), DRAG when
            the gesture moved, or None when no gesture was active.
        """
        gesture = self._state.gesture
        if gesture is None:
            return None
        before = next(
            (p for p in self._state.frozen_phases or () if p.id == gesture.phase_id),
            None,
        )
        outcome = end_gesture(gesture)
        self.dispatch(planner.end_drag)

        after = self.plan.get_phase(gesture.phase_id)
        if outcome is GestureOutcome.DRAG and after is not None and after != before:
            publish_event(
                PlanEvent.about(
                    EventType.GESTURE_COMMITTED,
                    self.plan,
                    phase_id=after.id,
                    data={"kind": gesture.kind.value},
                )
            )
            if self.autosave and self.store is not None:
                self.save()
        return outcome

    def click_grid(
        self,
        client_x: float,
        container_left: float = 0.0,
        scroll_left: float = 0.0,
        sub_project_id: Optional[str] = None,
    ) -> PlannerState:
        """Click on empty grid space: opens the create-phase form for that day."""
        return self.dispatch(planner.grid_click, client_x, container_left, scroll_left, sub_project_id)

    def scroll_to_today(self, viewport_width: float) -> float:
        """Horizontal scroll offset that centres today in the viewport."""
        today = self._state.today or date.today()
        return self._state.mapper.centered_scroll_offset(today, viewport_width)

    # -------------------------------------------------------------------------
    # Persistence, sharing and export
    # -------------------------------------------------------------------------

    def save(self) -> bool:
        """
        Hand the current plan to the store.

        Returns:
            True on success. On failure the error becomes the state's notice
            and a PLAN_SAVE_FAILED event; the plan stays as it is so the save
            can be retried.
        """
        if self.store is None or self._state.read_only:
            return False
        plan = self._state.snapshot()
        try:
            self.store.save_plan(plan)
        except StorageError as e:
            self._state = replace(self._state, notice=str(e))
            publish_event(PlanEvent.about(EventType.PLAN_SAVE_FAILED, plan, error=str(e)))
            return False
        self.dispatch(planner.mark_saved)
        publish_event(PlanEvent.about(EventType.PLAN_SAVED, plan))
        return True

    def share_token(self) -> str:
        return encode_plan(self._state.snapshot())

    def share_url(self, base_url: str) -> str:
        return share_url(self._state.snapshot(), base_url)

    def export(self) -> ExportTables:
        return build_export(self._state.snapshot())

    def generate(self, generator: PhaseGenerator, prompt: str, start_date: date) -> PlannerState:
        """Ask a generator for draft phases and merge them into the plan."""
        if self._state.read_only:
            return self._state
        drafts = generator.generate(prompt, start_date)
        return self.dispatch(planner.merge_generated, drafts)
