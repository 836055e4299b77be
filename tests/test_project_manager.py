"""
Tests for the ProjectManager plan library.
"""

import pytest

from retroplan.exceptions import NotFoundError, ShareDecodeError, ValidationError
from retroplan.managers.events import EventType
from retroplan.managers.project_manager import ProjectManager
from retroplan.managers.share import encode_plan
from retroplan.models.sample import DEMO_PLAN_ID


@pytest.fixture
def manager(local_store) -> ProjectManager:
    return ProjectManager(local_store)


@pytest.fixture
def stocked(local_store, qa_plan) -> ProjectManager:
    """Manager over a library holding only the QA plan."""
    local_store.save_plan(qa_plan)
    return ProjectManager(local_store)


class TestListing:
    """Tests for listing and lookup."""

    def test_empty_library_is_seeded_with_demo(self, manager, local_store):
        plans = manager.list()
        assert [p.id for p in plans] == [DEMO_PLAN_ID]
        assert local_store.get_plan(DEMO_PLAN_ID) is not None

    def test_seeding_can_be_disabled(self, local_store):
        assert ProjectManager(local_store, seed_demo=False).list() == []

    def test_existing_library_is_not_seeded(self, stocked):
        assert [p.id for p in stocked.list()] == ["qa-plan"]

    def test_get(self, stocked, qa_plan):
        assert stocked.get("qa-plan") == qa_plan

    def test_get_missing(self, stocked):
        with pytest.raises(NotFoundError):
            stocked.get("missing")

    def test_find_by_name_and_prefix(self, stocked):
        assert stocked.find("QA Plan").id == "qa-plan"
        assert stocked.find("qa-p").id == "qa-plan"

    def test_find_ambiguous_prefix(self, stocked, mock_data, local_store):
        local_store.save_plan(mock_data.create_plan(id="qa-other", name="Other"))
        with pytest.raises(ValidationError, match="ambiguous"):
            stocked.find("qa-")

    def test_find_missing(self, stocked):
        with pytest.raises(NotFoundError):
            stocked.find("zzz")


class TestLifecycle:
    """Tests for create, update, delete."""

    def test_create(self, manager, recorder):
        plan = manager.create("  Website relaunch ", "Q1 work")
        assert plan.name == "Website relaunch"
        assert plan.description == "Q1 work"
        assert plan.phases == ()
        assert manager.get(plan.id) == plan
        assert recorder.of_type(EventType.PLAN_CREATED)[0].plan_id == plan.id

    def test_create_requires_name(self, manager):
        with pytest.raises(ValidationError):
            manager.create("   ")

    def test_update(self, stocked, qa_plan):
        stocked.update(qa_plan.with_changes(description="Updated"))
        assert stocked.get("qa-plan").description == "Updated"

    def test_delete(self, stocked, recorder):
        stocked.delete("qa-plan")
        assert stocked.store.list_plans() == []
        event = recorder.of_type(EventType.PLAN_DELETED)[0]
        assert event.plan_name == "QA Plan"

    def test_delete_missing(self, stocked):
        with pytest.raises(NotFoundError):
            stocked.delete("missing")


class TestDuplicate:
    """Tests for duplicate."""

    def test_duplicate_gets_fresh_ids(self, stocked, qa_plan):
        copy = stocked.duplicate("qa-plan")
        assert copy.id != qa_plan.id
        assert copy.name == "QA Plan (Copy)"
        assert not {p.id for p in copy.phases} & {p.id for p in qa_plan.phases}
        assert not {h.id for h in copy.holidays} & {h.id for h in qa_plan.holidays}
        assert copy.sub_projects[0].id != "sp-api"

    def test_duplicate_remaps_sub_projects(self, stocked):
        copy = stocked.duplicate("qa-plan")
        new_sp = copy.sub_projects[0].id
        assert [p.sub_project_id for p in copy.phases] == [new_sp, new_sp, None]

    def test_duplicate_keeps_content(self, stocked, qa_plan):
        copy = stocked.duplicate("qa-plan")
        assert [(p.name, p.start_date, p.end_date, p.type) for p in copy.phases] == [
            (p.name, p.start_date, p.end_date, p.type) for p in qa_plan.phases
        ]

    def test_original_untouched(self, stocked, qa_plan):
        stocked.duplicate("qa-plan")
        assert stocked.get("qa-plan") == qa_plan
        assert len(stocked.list()) == 2


class TestImportShared:
    """Tests for import_shared."""

    def test_import(self, manager, qa_plan):
        imported = manager.import_shared(encode_plan(qa_plan))
        assert imported.name == "(Imported) QA Plan"
        assert manager.get(imported.id).phases == qa_plan.phases

    def test_import_garbage(self, manager):
        with pytest.raises(ShareDecodeError):
            manager.import_shared("not a token")
