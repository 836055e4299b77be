"""
Tests for Retroplan pydantic models.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from retroplan.models import Holiday, Phase, PhaseType, ProjectPlan, SubProject
from retroplan.models.files import ConfigFile, PlansFile
from retroplan.models.sample import DEMO_PLAN_ID, build_demo_plan


class TestPhase:
    """Tests for the Phase model."""

    def test_defaults(self):
        phase = Phase(start_date=date(2025, 12, 1), end_date=date(2025, 12, 5))
        assert phase.type is PhaseType.DEVELOPMENT
        assert phase.id
        assert phase.name is None
        assert phase.sub_project_id is None

    def test_label_falls_back_to_type(self):
        phase = Phase(start_date=date(2025, 12, 1), end_date=date(2025, 12, 1), type=PhaseType.TESTS)
        assert phase.label == "Tests / QA"
        assert phase.with_changes(name="QA").label == "QA"

    def test_blank_name_becomes_none(self):
        phase = Phase(name="   ", start_date=date(2025, 12, 1), end_date=date(2025, 12, 1))
        assert phase.name is None

    def test_start_after_end_is_rejected(self):
        with pytest.raises(ValidationError, match="Start date must be before or equal to End date"):
            Phase(start_date=date(2025, 12, 5), end_date=date(2025, 12, 1))

    def test_same_day_is_valid(self):
        phase = Phase(start_date=date(2025, 12, 5), end_date=date(2025, 12, 5))
        assert phase.duration_days == 1

    def test_push_to_prod_end_follows_start(self):
        phase = Phase(
            start_date=date(2025, 12, 22),
            end_date=date(2025, 12, 30),
            type=PhaseType.PUSH_TO_PROD,
        )
        assert phase.end_date == date(2025, 12, 22)

    def test_push_to_prod_pinned_after_change(self):
        phase = Phase(start_date=date(2025, 12, 22), end_date=date(2025, 12, 22), type="PUSH_TO_PROD")
        moved = phase.with_changes(start_date=date(2025, 12, 29))
        assert moved.end_date == date(2025, 12, 29)

    def test_push_to_prod_pinned_from_camel_case_payload(self):
        phase = Phase.model_validate(
            {"startDate": "2025-12-22", "endDate": "2025-12-01", "type": "PUSH_TO_PROD"}
        )
        assert phase.end_date == date(2025, 12, 22)

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            Phase(start_date=date(2025, 12, 1), end_date=date(2025, 12, 1), type="LAUNCH")

    def test_models_are_immutable(self):
        phase = Phase(start_date=date(2025, 12, 1), end_date=date(2025, 12, 1))
        with pytest.raises(ValidationError):
            phase.name = "changed"

    def test_with_changes_revalidates(self):
        phase = Phase(start_date=date(2025, 12, 1), end_date=date(2025, 12, 5))
        with pytest.raises(ValidationError):
            phase.with_changes(start_date=date(2025, 12, 9))


class TestProjectPlan:
    """Tests for the ProjectPlan aggregate."""

    def test_duplicate_phase_ids_rejected(self, mock_data):
        with pytest.raises(ValidationError, match="unique"):
            mock_data.create_plan(phases=[mock_data.create_phase(id="x"), mock_data.create_phase(id="x")])

    def test_duplicate_holiday_ids_rejected(self, mock_data):
        with pytest.raises(ValidationError, match="unique"):
            mock_data.create_plan(
                holidays=[mock_data.create_holiday(id="h"), mock_data.create_holiday(id="h")]
            )

    def test_unknown_sub_project_reference_rejected(self, mock_data):
        with pytest.raises(ValidationError, match="unknown sub-project"):
            mock_data.create_plan(phases=[mock_data.create_phase(sub_project_id="missing")])

    def test_lookups(self, qa_plan):
        assert qa_plan.get_phase("qa").name == "QA"
        assert qa_plan.get_phase("nope") is None
        assert qa_plan.get_holiday("xmas").date == date(2025, 12, 25)
        assert qa_plan.get_sub_project("sp-api").name == "Backend API"

    def test_payload_is_camel_case(self, qa_plan):
        payload = qa_plan.to_payload()
        assert {"id", "name", "description", "createdAt", "phases", "holidays", "subProjects"} <= set(payload)
        qa = next(p for p in payload["phases"] if p["id"] == "qa")
        assert qa["startDate"] == "2025-12-15"
        assert qa["subProjectId"] == "sp-api"
        assert qa["type"] == "TESTS"

    def test_payload_round_trip(self, qa_plan):
        assert ProjectPlan.model_validate(qa_plan.to_payload()) == qa_plan

    def test_none_description_becomes_empty(self):
        assert ProjectPlan(name="P", description=None).description == ""


class TestDemoPlan:
    """Tests for the bundled demo plan."""

    def test_demo_plan_shape(self):
        plan = build_demo_plan()
        assert plan.id == DEMO_PLAN_ID
        assert len(plan.sub_projects) == 3
        assert len(plan.phases) == 9
        assert [h.name for h in plan.holidays] == ["Christmas Day", "Boxing Day"]

    def test_demo_release_is_single_day(self):
        release = build_demo_plan().get_phase("p-9")
        assert release.type is PhaseType.PUSH_TO_PROD
        assert release.start_date == release.end_date


class TestFileModels:
    """Tests for file models."""

    def test_plans_file_defaults_empty(self):
        assert PlansFile().plans == []

    def test_plans_file_accepts_camel_case_plans(self, qa_plan):
        plans_file = PlansFile.model_validate({"plans": [qa_plan.to_payload()]})
        assert plans_file.plans[0] == qa_plan

    def test_config_file_defaults(self):
        config = ConfigFile()
        assert config.base_day_width == 30.0
        assert config.edge_handle_width == 2.0
        assert config.drag_threshold_px == 5.0
        assert config.storage_backend == "local"


class TestSmallModels:
    """Tests for SubProject and Holiday."""

    def test_sub_project_gets_id(self):
        assert SubProject(name="Design").id

    def test_holiday_parses_iso_date(self):
        assert Holiday(name="Noël", date="2025-12-25").date == date(2025, 12, 25)
