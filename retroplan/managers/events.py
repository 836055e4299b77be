"""
Plan lifecycle events.

Sessions and the plan library announce what happened to a plan (created,
saved, failed to save, deleted, a bar gesture committed) on a process-wide
EventBus. Listeners such as SaveReporter decide how to surface it.
"""
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, DefaultDict, Dict, List, Optional, Sequence

import click

if TYPE_CHECKING:
    from retroplan.models.plan import ProjectPlan


class EventType(str, Enum):
    """Types of events in Retroplan."""
    PLAN_CREATED = "plan.created"
    PLAN_SAVED = "plan.saved"
    PLAN_SAVE_FAILED = "plan.save_failed"
    PLAN_DELETED = "plan.deleted"
    GESTURE_COMMITTED = "gesture.committed"


@dataclass
class Event:
    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PlanEvent(Event):
    """Something happened to one plan (and possibly one of its phases)."""
    plan_id: str = ""
    plan_name: str = ""
    phase_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def about(cls, event_type: EventType, plan: "ProjectPlan", **details) -> "PlanEvent":
        """Build an event carrying the plan's id and name."""
        return cls(type=event_type, plan_id=plan.id, plan_name=plan.name, **details)


class EventListener(ABC):
    """Receives the events whose types it lists in ``subscribed_events``."""

    subscribed_events: ClassVar[Sequence[EventType]] = ()

    @abstractmethod
    def handle(self, event: Event) -> None:
        ...


class EventBus:
    """
    Process-wide dispatcher from event types to listeners.

    There is one bus per process; ``EventBus()`` always returns it. A
    listener is registered at most once per event type, and a listener that
    raises is reported on stderr without stopping delivery to the others.
    """

    _instance: Optional['EventBus'] = None
    _routes: DefaultDict[EventType, List[EventListener]]

    def __new__(cls) -> 'EventBus':
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._routes = defaultdict(list)
            cls._instance = instance
        return cls._instance

    def subscribe(self, listener: EventListener) -> None:
        for event_type in listener.subscribed_events:
            route = self._routes[event_type]
            if listener not in route:
                route.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        for event_type, route in self._routes.items():
            self._routes[event_type] = [registered for registered in route if registered is not listener]

    def listeners(self, event_type: EventType) -> List[EventListener]:
        """Listeners registered for an event type, in subscription order."""
        return list(self._routes.get(event_type, ()))

    def publish(self, event: Event) -> int:
        """
        Deliver an event to every listener registered for its type.

        Returns:
            Number of listeners that handled the event without raising.
        """
        delivered = 0
        for listener in self.listeners(event.type):
            try:
                listener.handle(event)
            except Exception as e:
                click.echo(f"  ⚠ Listener {type(listener).__name__} failed on {event.type.value}: {e}", err=True)
                continue
            delivered += 1
        return delivered

    def clear(self) -> None:
        """Drop every subscription (used between tests)."""
        self._routes.clear()


class SaveReporter(EventListener):
    """Echoes save outcomes: successes on stdout, failures on stderr."""

    subscribed_events = (EventType.PLAN_SAVED, EventType.PLAN_SAVE_FAILED)

    def handle(self, event: Event) -> None:
        if not isinstance(event, PlanEvent):
            return
        if event.type is EventType.PLAN_SAVED:
            click.echo(f"  ✓ Saved plan '{event.plan_name}'")
        else:
            click.echo(f"  ⚠ Failed to save plan '{event.plan_name}': {event.error}", err=True)


def get_event_bus() -> EventBus:
    return EventBus()


def publish_event(event: Event) -> int:
    return get_event_bus().publish(event)


def subscribe_listener(listener: EventListener) -> None:
    get_event_bus().subscribe(listener)
