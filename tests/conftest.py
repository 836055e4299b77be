"""
Test fixtures for the Retroplan test suite.

Provides:
- Temporary directory fixtures (isolated from the working .retroplan/)
- Mock data builders for creating test plans
- Event recording and global state reset
"""

import shutil
import tempfile
from datetime import date
from pathlib import Path
from typing import Generator, List, Optional

import pytest

from retroplan.constants import DATABASE_URL_ENV, reset_config_manager
from retroplan.managers.events import Event, EventListener, EventType, get_event_bus
from retroplan.managers.storage_manager import LocalPlanStore
from retroplan.models.plan import Holiday, Phase, PhaseType, ProjectPlan, SubProject
from retroplan.models.sample import build_demo_plan


# =============================================================================
# Global State
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_globals(monkeypatch) -> Generator[None, None, None]:
    """Reset the event bus and config singleton around every test."""
    monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
    get_event_bus().clear()
    reset_config_manager()
    yield
    get_event_bus().clear()
    reset_config_manager()


class RecordingListener(EventListener):
    """Listener that keeps every event it receives."""

    subscribed_events = tuple(EventType)

    def __init__(self) -> None:
        self.events: List[Event] = []

    def handle(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: EventType) -> List[Event]:
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def recorder() -> RecordingListener:
    """Subscribe a recording listener to the global event bus."""
    listener = RecordingListener()
    get_event_bus().subscribe(listener)
    return listener


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation.

    Ensures tests don't modify the working directory's .retroplan/ directory.
    """
    temp_path = Path(tempfile.mkdtemp(prefix="retroplan_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir: Path) -> Path:
    """Path of a .retroplan/ directory inside the temp directory (not created)."""
    return temp_dir / ".retroplan"


@pytest.fixture
def local_store(data_dir: Path) -> LocalPlanStore:
    return LocalPlanStore(data_dir)


# =============================================================================
# Mock Data Builders
# =============================================================================


class MockDataBuilder:
    """Helper class for building plan items for testing."""

    @staticmethod
    def create_phase(
        id: str = "phase-1",
        start: date = date(2025, 12, 15),
        end: date = date(2025, 12, 19),
        type: PhaseType = PhaseType.DEVELOPMENT,
        name: Optional[str] = "Test Phase",
        sub_project_id: Optional[str] = None,
        details: Optional[str] = None,
    ) -> Phase:
        """Create a Phase for testing."""
        return Phase(
            id=id,
            name=name,
            start_date=start,
            end_date=end,
            type=type,
            sub_project_id=sub_project_id,
            details=details,
        )

    @staticmethod
    def create_holiday(id: str = "holiday-1", name: str = "Day off", day: date = date(2025, 12, 25)) -> Holiday:
        return Holiday(id=id, name=name, date=day)

    @staticmethod
    def create_sub_project(id: str = "sp-1", name: str = "Backend API") -> SubProject:
        return SubProject(id=id, name=name)

    @staticmethod
    def create_plan(
        id: str = "plan-1",
        name: str = "Test Plan",
        phases=(),
        holidays=(),
        sub_projects=(),
    ) -> ProjectPlan:
        """Create a ProjectPlan for testing."""
        return ProjectPlan(
            id=id,
            name=name,
            phases=tuple(phases),
            holidays=tuple(holidays),
            sub_projects=tuple(sub_projects),
        )


@pytest.fixture
def mock_data() -> MockDataBuilder:
    """Provide mock data builder for test item creation."""
    return MockDataBuilder()


# =============================================================================
# Plan Fixtures
# =============================================================================


@pytest.fixture
def demo_plan() -> ProjectPlan:
    """The bundled demo plan (phases from 2025-11-03 to 2025-12-22)."""
    return build_demo_plan()


@pytest.fixture
def qa_plan(mock_data: MockDataBuilder) -> ProjectPlan:
    """Create a small plan around a QA phase.

    Structure:
        Backend API (sp-api)
        ├── Build   2025-12-01 → 2025-12-12  DEVELOPMENT
        └── QA      2025-12-15 → 2025-12-19  TESTS
        General
        └── Release 2025-12-22               PUSH_TO_PROD
    """
    return mock_data.create_plan(
        id="qa-plan",
        name="QA Plan",
        sub_projects=[mock_data.create_sub_project(id="sp-api", name="Backend API")],
        phases=[
            mock_data.create_phase(
                id="build", name="Build", start=date(2025, 12, 1), end=date(2025, 12, 12),
                sub_project_id="sp-api",
            ),
            mock_data.create_phase(
                id="qa", name="QA", start=date(2025, 12, 15), end=date(2025, 12, 19),
                type=PhaseType.TESTS, sub_project_id="sp-api",
            ),
            mock_data.create_phase(
                id="release", name="Release", start=date(2025, 12, 22), end=date(2025, 12, 22),
                type=PhaseType.PUSH_TO_PROD,
            ),
        ],
        holidays=[mock_data.create_holiday(id="xmas", name="Christmas", day=date(2025, 12, 25))],
    )
