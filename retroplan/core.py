"""
RetroplanCore - Core business logic for the Retroplan CLI.

Orchestrates manager classes for all plan operations.
Selects the persistence strategy once, from .retroplan/config.json.
Uses EventBus for decoupled save reporting.
"""

from datetime import date
from pathlib import Path
from typing import Callable, Optional

from retroplan.constants import DEFAULT_DATA_DIR, ConfigManager
from retroplan.exceptions import StorageError, ValidationError
from retroplan.managers import (
    PlannerSession,
    PlannerState,
    PlanStore,
    ProjectManager,
    SaveReporter,
    TimelineSettings,
    get_event_bus,
    select_store,
    subscribe_listener,
)
from retroplan.models.plan import ProjectPlan

_save_reporter = SaveReporter()


class RetroplanCore:
    """
    Core class for plan operations.

    Orchestrates:
    - ConfigManager: Timeline geometry and backend selection
    - PlanStore: Local JSON file or remote database
    - ProjectManager: Plan library (list, create, duplicate, import, delete)
    - PlannerSession: Editing a single plan
    - EventBus: Save outcome reporting
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        store: Optional[PlanStore] = None,
        today: Optional[date] = None,
        report_saves: bool = True,
    ) -> None:
        """
        Initialize the RetroplanCore with a .retroplan/ directory.

        Args:
            data_dir: Path to .retroplan/ directory. Defaults to .retroplan/ in current directory.
            store: Persistence strategy. Defaults to the one selected by config.
            today: Reference day for empty plans.
            report_saves: Whether save outcomes are echoed to the terminal.
        """
        self.data_dir = data_dir if data_dir else Path(DEFAULT_DATA_DIR)
        self.config = ConfigManager(data_dir=self.data_dir)
        self.store = store if store is not None else select_store(self.config, self.data_dir)
        self.project_manager = ProjectManager(self.store)
        self.settings = TimelineSettings.from_config(self.config)
        self.today = today

        self.event_bus = get_event_bus()
        if report_saves:
            subscribe_listener(_save_reporter)

    def open_session(self, reference: str, read_only: bool = False) -> PlannerSession:
        """Open a plan, found by id, name or id prefix, for editing."""
        plan = self.project_manager.find(reference)
        return PlannerSession(
            plan,
            store=self.store,
            settings=self.settings,
            read_only=read_only,
            today=self.today,
        )

    def save(self, session: PlannerSession) -> ProjectPlan:
        """
        Save a session's plan.

        Raises:
            StorageError: If the store rejected the plan.
        """
        if not session.save():
            raise StorageError(session.state.notice or f"Plan '{session.plan.name}' could not be saved.")
        return session.plan

    def apply(
        self,
        reference: str,
        transition: Callable[..., PlannerState],
        *args,
        **kwargs,
    ) -> PlannerSession:
        """
        Apply one planner transition to a stored plan and save the result.

        Raises:
            ValidationError: If the transition was rejected.
            StorageError: If saving failed.
        """
        session = self.open_session(reference)
        state = session.dispatch(transition, *args, **kwargs)
        if state.notice:
            raise ValidationError(state.notice)
        self.save(session)
        return session
