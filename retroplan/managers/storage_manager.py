"""
Plan persistence for Retroplan.

Two interchangeable strategies implement PlanStore:

- LocalPlanStore keeps every plan in .retroplan/plans.json.
- RemotePlanStore keeps plans in a relational database through SQLAlchemy.

The strategy is selected once, when a session starts (``select_store``).
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy import Column, Date, DateTime, Integer, String, Text, create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from retroplan.constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_PLANS_FILENAME,
    VALID_STORAGE_BACKENDS,
    ConfigManager,
    get_database_url,
    get_storage_backend,
)
from retroplan.exceptions import ConfigurationError, StorageError
from retroplan.models.files import PlansFile
from retroplan.models.plan import Holiday, Phase, ProjectPlan, SubProject


class PlanStore(ABC):
    """Persistence strategy for project plans."""

    @abstractmethod
    def list_plans(self) -> List[ProjectPlan]:
        """Return all stored plans, most recently created first."""

    @abstractmethod
    def save_plan(self, plan: ProjectPlan) -> None:
        """Insert or replace a plan, including all of its children."""

    @abstractmethod
    def delete_plan(self, plan_id: str) -> None:
        """Delete a plan and its children. Unknown ids are ignored."""

    def get_plan(self, plan_id: str) -> Optional[ProjectPlan]:
        return next((p for p in self.list_plans() if p.id == plan_id), None)


# =============================================================================
# Local JSON store
# =============================================================================


class LocalPlanStore(PlanStore):
    """
    Stores plans in a JSON file inside the .retroplan/ directory.

    Handles atomic writes to prevent data corruption.
    """

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize the LocalPlanStore with a .retroplan/ directory path.

        Args:
            data_dir: Path to the .retroplan/ directory. Defaults to .retroplan/ in current directory.
        """
        self.data_dir = data_dir if data_dir else Path(DEFAULT_DATA_DIR)
        self.plans_path = self.data_dir / DEFAULT_PLANS_FILENAME
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _atomic_write(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Write data to a JSON file atomically to prevent corruption.

        Raises:
            StorageError: If writing to file fails.
        """
        temp_fd, temp_path = tempfile.mkstemp(
            dir=self.data_dir, prefix=".tmp_retroplan_", suffix=".json"
        )

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as temp_file:
                json.dump(data, temp_file, indent=2, ensure_ascii=False)
            os.replace(temp_path, file_path)
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Failed to write to {file_path}: {e}")

    def _load(self) -> PlansFile:
        if not self.plans_path.exists():
            return PlansFile()

        try:
            with open(self.plans_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return PlansFile.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load {self.plans_path.name}: {e}")

    def _save(self, plans_file: PlansFile) -> None:
        self._atomic_write(self.plans_path, plans_file.model_dump(mode="json", by_alias=True))

    def list_plans(self) -> List[ProjectPlan]:
        return list(self._load().plans)

    def save_plan(self, plan: ProjectPlan) -> None:
        plans = self.list_plans()
        for index, existing in enumerate(plans):
            if existing.id == plan.id:
                plans[index] = plan
                break
        else:
            plans.insert(0, plan)
        self._save(PlansFile(plans=plans))

    def delete_plan(self, plan_id: str) -> None:
        plans = [p for p in self.list_plans() if p.id != plan_id]
        self._save(PlansFile(plans=plans))


# =============================================================================
# Remote relational store
# =============================================================================

Base = declarative_base()


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, index=True)


class SubProjectRow(Base):
    __tablename__ = "subprojects"

    project_id = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    position = Column(Integer, nullable=False, default=0)


class PhaseRow(Base):
    __tablename__ = "phases"

    project_id = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=True)
    details = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    type = Column(String(32), nullable=False)
    sub_project_id = Column(String(64), nullable=True)
    # Row order within the plan; it sequences phases inside a sub-project.
    position = Column(Integer, nullable=False, default=0)


class HolidayRow(Base):
    __tablename__ = "holidays"

    project_id = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False)


class RemotePlanStore(PlanStore):
    """
    Stores plans in a relational database.

    A save upserts the project row and replaces all of its children, so the
    database always mirrors the in-memory plan exactly.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None) -> None:
        if engine is None:
            if not database_url:
                raise ConfigurationError("A database URL is required for remote storage.")
            engine = create_engine(database_url)
        self.engine = engine
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        try:
            Base.metadata.create_all(engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to prepare database: {e}")

    def list_plans(self) -> List[ProjectPlan]:
        try:
            with self._session_factory() as session:
                projects = session.scalars(
                    select(ProjectRow).order_by(ProjectRow.created_at.desc())
                ).all()
                return [self._build_plan(session, row) for row in projects]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load plans: {e}")
        except ValidationError as e:
            raise StorageError(f"Stored plan is invalid: {e}")

    def _build_plan(self, session, row: ProjectRow) -> ProjectPlan:
        sub_projects = session.scalars(
            select(SubProjectRow)
            .where(SubProjectRow.project_id == row.id)
            .order_by(SubProjectRow.position)
        ).all()
        phases = session.scalars(
            select(PhaseRow).where(PhaseRow.project_id == row.id).order_by(PhaseRow.position)
        ).all()
        holidays = session.scalars(
            select(HolidayRow).where(HolidayRow.project_id == row.id).order_by(HolidayRow.date)
        ).all()
        return ProjectPlan(
            id=row.id,
            name=row.name,
            description=row.description or "",
            created_at=row.created_at,
            sub_projects=tuple(SubProject(id=sp.id, name=sp.name) for sp in sub_projects),
            phases=tuple(
                Phase(
                    id=p.id,
                    name=p.name,
                    details=p.details,
                    start_date=p.start_date,
                    end_date=p.end_date,
                    type=p.type,
                    sub_project_id=p.sub_project_id,
                )
                for p in phases
            ),
            holidays=tuple(Holiday(id=h.id, name=h.name, date=h.date) for h in holidays),
        )

    def save_plan(self, plan: ProjectPlan) -> None:
        try:
            with self._session_factory() as session, session.begin():
                row = session.get(ProjectRow, plan.id)
                if row is None:
                    row = ProjectRow(id=plan.id)
                    session.add(row)
                row.name = plan.name
                row.description = plan.description
                row.created_at = plan.created_at

                self._delete_children(session, plan.id)
                session.add_all(
                    SubProjectRow(project_id=plan.id, id=sp.id, name=sp.name, position=index)
                    for index, sp in enumerate(plan.sub_projects)
                )
                session.add_all(
                    PhaseRow(
                        project_id=plan.id,
                        id=p.id,
                        name=p.name,
                        details=p.details,
                        start_date=p.start_date,
                        end_date=p.end_date,
                        type=p.type.value,
                        sub_project_id=p.sub_project_id,
                        position=index,
                    )
                    for index, p in enumerate(plan.phases)
                )
                session.add_all(
                    HolidayRow(project_id=plan.id, id=h.id, name=h.name, date=h.date)
                    for h in plan.holidays
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save plan '{plan.name}': {e}")

    def delete_plan(self, plan_id: str) -> None:
        try:
            with self._session_factory() as session, session.begin():
                self._delete_children(session, plan_id)
                session.execute(delete(ProjectRow).where(ProjectRow.id == plan_id))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete plan '{plan_id}': {e}")

    @staticmethod
    def _delete_children(session, plan_id: str) -> None:
        for table in (SubProjectRow, PhaseRow, HolidayRow):
            session.execute(delete(table).where(table.project_id == plan_id))


def select_store(config: Optional[ConfigManager] = None, data_dir: Optional[Path] = None) -> PlanStore:
    """
    Pick the persistence strategy configured for this session.

    Raises:
        ConfigurationError: If the configured backend is unknown.
    """
    backend = get_storage_backend(config)
    if backend not in VALID_STORAGE_BACKENDS:
        raise ConfigurationError(
            f"Unknown storage backend '{backend}'. Expected one of: {', '.join(VALID_STORAGE_BACKENDS)}."
        )
    if backend == "remote":
        return RemotePlanStore(database_url=get_database_url(config))
    return LocalPlanStore(data_dir)
