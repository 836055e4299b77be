"""
Managers for Retroplan.

This package contains focused modules that handle specific aspects of planning:
- timeline: Date to pixel mapping and zoom
- layout: Phase bar geometry and the week grid
- interaction: Bar drag/resize gesture state machine
- ordering: Row reordering within a sub-project
- assembler: Visible timeline range and row groups
- planner: Session state and its transitions
- session: PlannerSession, pointer routing and saving
- storage_manager: Local and remote persistence strategies
- project_manager: Plan library
- share, export, generation: Share links, export tables, generated phases
- events: Event-driven communication
"""

from retroplan.managers.assembler import PhaseGroup, TimelineAssembler, TimelineData, group_phases
from retroplan.managers.events import (
    Event,
    EventBus,
    EventListener,
    EventType,
    PlanEvent,
    SaveReporter,
    get_event_bus,
    publish_event,
    subscribe_listener,
)
from retroplan.managers.interaction import Gesture, GestureKind, GestureOutcome
from retroplan.managers.layout import BarRect, PhaseLayoutEngine
from retroplan.managers.ordering import RowDrag, reorder_phases
from retroplan.managers.planner import PhaseForm, PlannerState, TimelineSettings
from retroplan.managers.project_manager import ProjectManager
from retroplan.managers.session import PlannerSession
from retroplan.managers.storage_manager import (
    LocalPlanStore,
    PlanStore,
    RemotePlanStore,
    select_store,
)
from retroplan.managers.timeline import TimelineMapper

__all__ = [
    "PhaseGroup",
    "TimelineAssembler",
    "TimelineData",
    "group_phases",
    "Event",
    "EventBus",
    "EventListener",
    "EventType",
    "PlanEvent",
    "SaveReporter",
    "get_event_bus",
    "publish_event",
    "subscribe_listener",
    "Gesture",
    "GestureKind",
    "GestureOutcome",
    "BarRect",
    "PhaseLayoutEngine",
    "RowDrag",
    "reorder_phases",
    "PhaseForm",
    "PlannerState",
    "TimelineSettings",
    "ProjectManager",
    "PlannerSession",
    "LocalPlanStore",
    "PlanStore",
    "RemotePlanStore",
    "select_store",
    "TimelineMapper",
]
