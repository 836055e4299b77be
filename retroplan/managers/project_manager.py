"""
ProjectManager for Retroplan.

Manages the plan library on top of a PlanStore: listing, creating,
duplicating, importing and deleting plans.
"""

import datetime as dt
from typing import Dict, List, Optional

from retroplan.constants import COPY_SUFFIX
from retroplan.exceptions import NotFoundError, ShareDecodeError, ValidationError
from retroplan.managers.events import EventType, PlanEvent, publish_event
from retroplan.managers.share import import_shared_plan
from retroplan.managers.storage_manager import PlanStore
from retroplan.models.plan import ProjectPlan, new_id
from retroplan.models.sample import build_demo_plan


class ProjectManager:
    """
    Manages the plan library.

    Usage:
        store = LocalPlanStore()
        manager = ProjectManager(store)

        plan = manager.create("Website relaunch")
        copy = manager.duplicate(plan.id)
        manager.delete(copy.id)
    """

    def __init__(self, store: PlanStore, seed_demo: bool = True) -> None:
        """
        Initialize ProjectManager.

        Args:
            store: Persistence strategy holding the plans.
            seed_demo: Whether an empty library gets the demo plan.
        """
        self.store = store
        self.seed_demo = seed_demo

    def list(self) -> List[ProjectPlan]:
        """All plans, most recently created first. Seeds the demo plan into an empty library."""
        plans = self.store.list_plans()
        if not plans and self.seed_demo:
            demo = build_demo_plan()
            self.store.save_plan(demo)
            plans = [demo]
        return plans

    def get(self, plan_id: str) -> ProjectPlan:
        """
        Get a plan by id.

        Raises:
            NotFoundError: If no plan has this id.
        """
        plan = self.store.get_plan(plan_id)
        if plan is None:
            raise NotFoundError(f"Plan '{plan_id}' not found.")
        return plan

    def find(self, reference: str) -> ProjectPlan:
        """
        Resolve a plan by id, exact name, or unique id prefix.

        Raises:
            NotFoundError: If nothing matches.
            ValidationError: If a prefix matches several plans.
        """
        plans = self.list()
        for plan in plans:
            if plan.id == reference or plan.name == reference:
                return plan
        matches = [p for p in plans if p.id.startswith(reference)]
        if len(matches) > 1:
            raise ValidationError(f"Plan reference '{reference}' is ambiguous.")
        if not matches:
            raise NotFoundError(f"Plan '{reference}' not found.")
        return matches[0]

    def create(self, name: str, description: str = "") -> ProjectPlan:
        """Create and store an empty plan."""
        if not name or not name.strip():
            raise ValidationError("Plan name is required.")
        plan = ProjectPlan(name=name.strip(), description=description or "")
        self.store.save_plan(plan)
        publish_event(PlanEvent.about(EventType.PLAN_CREATED, plan))
        return plan

    def update(self, plan: ProjectPlan) -> ProjectPlan:
        """Persist a whole plan, replacing the stored version."""
        self.store.save_plan(plan)
        return plan

    def delete(self, plan_id: str) -> None:
        plan = self.get(plan_id)
        self.store.delete_plan(plan_id)
        publish_event(PlanEvent.about(EventType.PLAN_DELETED, plan))

    def duplicate(self, plan_id: str) -> ProjectPlan:
        """
        Copy a plan under fresh identifiers.

        Sub-projects, phases and holidays all get new ids; phase sub-project
        references follow their sub-project.
        """
        source = self.get(plan_id)
        id_map: Dict[str, str] = {sp.id: new_id() for sp in source.sub_projects}
        copy = source.with_changes(
            id=new_id(),
            name=f"{source.name}{COPY_SUFFIX}",
            created_at=dt.datetime.now(),
            sub_projects=[sp.with_changes(id=id_map[sp.id]) for sp in source.sub_projects],
            phases=[
                p.with_changes(
                    id=new_id(),
                    sub_project_id=id_map.get(p.sub_project_id) if p.sub_project_id else None,
                )
                for p in source.phases
            ],
            holidays=[h.with_changes(id=new_id()) for h in source.holidays],
        )
        self.store.save_plan(copy)
        publish_event(PlanEvent.about(EventType.PLAN_CREATED, copy))
        return copy

    def import_shared(self, token: str) -> ProjectPlan:
        """
        Store a shared plan as a new plan.

        Raises:
            ShareDecodeError: If the token is malformed.
        """
        plan: Optional[ProjectPlan] = import_shared_plan(token)
        if plan is None:
            raise ShareDecodeError("Share link is invalid or corrupted.")
        plan = plan.with_changes(created_at=dt.datetime.now())
        self.store.save_plan(plan)
        publish_event(PlanEvent.about(EventType.PLAN_CREATED, plan))
        return plan
