"""
Tests for export tables.
"""

from datetime import date

from retroplan.managers.export import (
    TIMELINE_FIXED_COLUMNS,
    build_export,
    export_basename,
    sorted_phases,
)


class TestExportTables:
    """Tests for build_export."""

    def test_phases_sorted_by_group_then_start(self, qa_plan):
        assert [p.id for p in sorted_phases(qa_plan)] == ["build", "qa", "release"]

    def test_group_names_sort_case_insensitively(self, mock_data):
        plan = mock_data.create_plan(
            sub_projects=[
                mock_data.create_sub_project(id="sp-b", name="Backend"),
                mock_data.create_sub_project(id="sp-a", name="api"),
            ],
            phases=[
                mock_data.create_phase(id="b1", sub_project_id="sp-b"),
                mock_data.create_phase(id="a1", sub_project_id="sp-a"),
            ],
        )
        assert [p.id for p in sorted_phases(plan)] == ["a1", "b1"]

    def test_task_list(self, qa_plan):
        tables = build_export(qa_plan)
        assert tables.task_list[1] == {
            "Subproject": "Backend API",
            "Phase Name": "QA",
            "Type": "Tests / QA",
            "Start Date": "2025-12-15",
            "End Date": "2025-12-19",
            "Details": "",
        }
        assert tables.task_list[2]["Subproject"] == "General"

    def test_timeline_header_covers_plan_range(self, qa_plan):
        header = build_export(qa_plan).timeline_header
        assert header[:4] == TIMELINE_FIXED_COLUMNS
        assert header[4] == "11/24"
        assert header[-1] == "1/5"
        assert len(header) == 4 + 43

    def test_timeline_cells(self, qa_plan):
        tables = build_export(qa_plan)
        header = tables.timeline_header
        qa_row = tables.timeline_rows[1]
        assert qa_row[:4] == ["Backend API", "QA", "2025-12-15", "2025-12-19"]
        assert qa_row[header.index("12/15")] == "x"
        assert qa_row[header.index("12/19")] == "x"
        assert qa_row[header.index("12/20")] == ""
        assert qa_row[header.index("12/25")] == "H"

    def test_active_wins_over_holiday(self, mock_data):
        plan = mock_data.create_plan(
            phases=[mock_data.create_phase(start=date(2025, 12, 22), end=date(2025, 12, 26))],
            holidays=[mock_data.create_holiday(day=date(2025, 12, 25))],
        )
        tables = build_export(plan)
        assert tables.timeline_rows[0][tables.timeline_header.index("12/25")] == "x"

    def test_holiday_sheet(self, qa_plan):
        assert build_export(qa_plan).holidays == [{"Holiday Name": "Christmas", "Date": "2025-12-25"}]

    def test_basename(self, qa_plan):
        assert export_basename(qa_plan) == "QA_Plan_retroplanning"
