"""
Tests for the plan persistence strategies.

The remote store runs against an in-memory SQLite database.
"""
import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine

from retroplan.constants import DATABASE_URL_ENV, ConfigManager
from retroplan.exceptions import ConfigurationError, StorageError
from retroplan.managers.storage_manager import LocalPlanStore, RemotePlanStore, select_store


@pytest.fixture
def remote_store() -> RemotePlanStore:
    """Create a RemotePlanStore backed by in-memory SQLite."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    return RemotePlanStore(engine=engine)


@pytest.fixture(params=["local", "remote"])
def store(request, local_store, remote_store):
    """Run a test against both strategies."""
    return local_store if request.param == "local" else remote_store


class TestLocalPlanStoreFiles:
    """Tests specific to the JSON file store."""

    def test_creates_data_dir(self, temp_dir):
        nested = temp_dir / "nested" / ".retroplan"
        LocalPlanStore(nested)
        assert nested.exists()

    def test_default_path(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        store = LocalPlanStore()
        assert store.data_dir == Path(".retroplan")
        assert store.data_dir.exists()

    def test_missing_file_is_empty_library(self, local_store):
        assert local_store.list_plans() == []

    def test_file_uses_camel_case(self, local_store, qa_plan):
        local_store.save_plan(qa_plan)
        data = json.loads(local_store.plans_path.read_text(encoding="utf-8"))
        assert data["plans"][0]["subProjects"][0]["name"] == "Backend API"
        assert data["plans"][0]["phases"][1]["startDate"] == "2025-12-15"

    def test_no_temp_files_left(self, local_store, qa_plan):
        local_store.save_plan(qa_plan)
        leftovers = [p.name for p in local_store.data_dir.iterdir() if p.name.startswith(".tmp_retroplan_")]
        assert leftovers == []

    def test_corrupt_file_raises(self, local_store):
        local_store.plans_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError, match="plans.json"):
            local_store.list_plans()

    def test_invalid_plan_in_file_raises(self, local_store):
        local_store.plans_path.write_text(json.dumps({"plans": [{"id": "x"}]}), encoding="utf-8")
        with pytest.raises(StorageError):
            local_store.list_plans()

    def test_new_plans_go_first(self, local_store, mock_data):
        local_store.save_plan(mock_data.create_plan(id="old", name="Old"))
        local_store.save_plan(mock_data.create_plan(id="new", name="New"))
        assert [p.id for p in local_store.list_plans()] == ["new", "old"]


class TestPlanStoreContract:
    """Behaviour shared by the local and remote strategies."""

    def test_save_and_load(self, store, qa_plan):
        store.save_plan(qa_plan)
        assert store.list_plans() == [qa_plan]

    def test_get_plan(self, store, qa_plan):
        store.save_plan(qa_plan)
        assert store.get_plan("qa-plan") == qa_plan
        assert store.get_plan("missing") is None

    def test_save_replaces_children(self, store, qa_plan):
        store.save_plan(qa_plan)
        trimmed = qa_plan.with_changes(
            name="Renamed",
            phases=[p for p in qa_plan.phases if p.id != "build"],
            holidays=[],
        )
        store.save_plan(trimmed)
        loaded = store.get_plan("qa-plan")
        assert loaded.name == "Renamed"
        assert [p.id for p in loaded.phases] == ["qa", "release"]
        assert loaded.holidays == ()
        assert len(store.list_plans()) == 1

    def test_phase_order_is_kept(self, store, qa_plan):
        reordered = qa_plan.with_changes(phases=list(reversed(qa_plan.phases)))
        store.save_plan(reordered)
        assert [p.id for p in store.get_plan("qa-plan").phases] == ["release", "qa", "build"]

    def test_delete_plan(self, store, qa_plan, demo_plan):
        store.save_plan(qa_plan)
        store.save_plan(demo_plan)
        store.delete_plan("qa-plan")
        assert [p.id for p in store.list_plans()] == [demo_plan.id]

    def test_delete_unknown_plan_is_ignored(self, store, qa_plan):
        store.save_plan(qa_plan)
        store.delete_plan("missing")
        assert len(store.list_plans()) == 1

    def test_plans_may_share_phase_ids(self, store, qa_plan):
        store.save_plan(qa_plan)
        store.save_plan(qa_plan.with_changes(id="qa-plan-2", name="Copy"))
        assert len(store.list_plans()) == 2
        assert store.get_plan("qa-plan").get_phase("qa") is not None


class TestRemotePlanStore:
    """Tests specific to the relational store."""

    def test_requires_database_url(self):
        with pytest.raises(ConfigurationError):
            RemotePlanStore()

    def test_lists_newest_first(self, remote_store, mock_data):
        now = datetime(2025, 12, 1, 9, 0)
        older = mock_data.create_plan(id="older", name="Older").with_changes(created_at=now - timedelta(days=1))
        newer = mock_data.create_plan(id="newer", name="Newer").with_changes(created_at=now)
        remote_store.save_plan(newer)
        remote_store.save_plan(older)
        assert [p.id for p in remote_store.list_plans()] == ["newer", "older"]

    def test_database_url(self, temp_dir, qa_plan):
        url = f"sqlite:///{temp_dir / 'plans.db'}"
        RemotePlanStore(database_url=url).save_plan(qa_plan)
        assert RemotePlanStore(database_url=url).get_plan("qa-plan") == qa_plan


class TestSelectStore:
    """Tests for choosing the strategy from config."""

    def test_defaults_to_local(self, data_dir):
        store = select_store(ConfigManager(data_dir=data_dir), data_dir)
        assert isinstance(store, LocalPlanStore)
        assert store.data_dir == data_dir

    def test_remote_from_config(self, data_dir, temp_dir):
        data_dir.mkdir(parents=True)
        url = f"sqlite:///{temp_dir / 'remote.db'}"
        (data_dir / "config.json").write_text(
            json.dumps({"storage_backend": "remote", "database_url": url}), encoding="utf-8"
        )
        assert isinstance(select_store(ConfigManager(data_dir=data_dir), data_dir), RemotePlanStore)

    def test_env_overrides_database_url(self, data_dir, temp_dir, monkeypatch):
        data_dir.mkdir(parents=True)
        (data_dir / "config.json").write_text(json.dumps({"storage_backend": "remote"}), encoding="utf-8")
        url = f"sqlite:///{temp_dir / 'env.db'}"
        monkeypatch.setenv(DATABASE_URL_ENV, url)
        store = select_store(ConfigManager(data_dir=data_dir), data_dir)
        assert str(store.engine.url) == url

    def test_unknown_backend(self, data_dir):
        data_dir.mkdir(parents=True)
        (data_dir / "config.json").write_text(json.dumps({"storage_backend": "ftp"}), encoding="utf-8")
        with pytest.raises(ConfigurationError, match="ftp"):
            select_store(ConfigManager(data_dir=data_dir), data_dir)
