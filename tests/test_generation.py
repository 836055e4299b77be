"""
Tests for generated phase drafts.
"""

from datetime import date

import pytest

from retroplan.exceptions import InvalidDateRangeError
from retroplan.managers.generation import PhaseDraft, merge_generated_phases
from retroplan.models.plan import PhaseType


class TestPhaseDraft:
    """Tests for PhaseDraft parsing."""

    def test_camel_case_payload(self):
        draft = PhaseDraft.model_validate(
            {"name": "Design", "startDate": "2026-01-05", "endDate": "2026-01-09", "type": "CONCEPTION"}
        )
        assert draft.start_date == date(2026, 1, 5)
        assert draft.type is PhaseType.CONCEPTION

    def test_type_is_case_insensitive(self):
        draft = PhaseDraft(name="QA", start_date="2026-01-05", end_date="2026-01-09", type="tests")
        assert draft.type is PhaseType.TESTS

    def test_unknown_type_becomes_other(self):
        draft = PhaseDraft(name="Party", start_date="2026-01-05", end_date="2026-01-05", type="CELEBRATION")
        assert draft.type is PhaseType.OTHER


class TestMergeGeneratedPhases:
    """Tests for merge_generated_phases."""

    def test_merge_appends_ungrouped_phases(self, qa_plan):
        drafts = [
            PhaseDraft(name="Design", start_date="2026-01-05", end_date="2026-01-09", type="CONCEPTION"),
            PhaseDraft(name="Build", start_date="2026-01-12", end_date="2026-01-30", details="Core work"),
        ]
        merged = merge_generated_phases(qa_plan, drafts)
        new_phases = merged.phases[len(qa_plan.phases):]
        assert [p.name for p in new_phases] == ["Design", "Build"]
        assert all(p.sub_project_id is None for p in new_phases)
        assert new_phases[1].details == "Core work"
        assert merged.phases[: len(qa_plan.phases)] == qa_plan.phases

    def test_fresh_ids(self, qa_plan):
        drafts = [PhaseDraft(name=f"Step {i}", start_date="2026-01-05", end_date="2026-01-05") for i in range(3)]
        merged = merge_generated_phases(qa_plan, drafts)
        ids = [p.id for p in merged.phases]
        assert len(ids) == len(set(ids))

    def test_reversed_draft_rejects_whole_batch(self, qa_plan):
        drafts = [
            PhaseDraft(name="Fine", start_date="2026-01-05", end_date="2026-01-09"),
            PhaseDraft(name="Backwards", start_date="2026-01-09", end_date="2026-01-05"),
        ]
        with pytest.raises(InvalidDateRangeError, match="Backwards"):
            merge_generated_phases(qa_plan, drafts)

    def test_push_to_prod_draft_is_pinned(self, qa_plan):
        drafts = [PhaseDraft(name="Go live", start_date="2026-02-02", end_date="2026-01-01", type="PUSH_TO_PROD")]
        release = merge_generated_phases(qa_plan, drafts).phases[-1]
        assert release.start_date == release.end_date == date(2026, 2, 2)
