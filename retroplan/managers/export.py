"""
Export tables for Retroplan plans.

Builds the three tables a spreadsheet writer lays out as sheets: a task
list, a day-by-day visual timeline, and the holiday list. Cell values are
plain strings; writing them to a workbook is the writer's job.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List

from retroplan.constants import GENERAL_GROUP_LABEL
from retroplan.models.plan import PHASE_LABELS, Phase, ProjectPlan
from retroplan.utils import format_date, iter_days, plan_range

TASK_LIST_COLUMNS = ["Subproject", "Phase Name", "Type", "Start Date", "End Date", "Details"]
TIMELINE_FIXED_COLUMNS = ["Subproject", "Task Name", "Start", "End"]
ACTIVE_MARK = "x"
HOLIDAY_MARK = "H"


@dataclass
class ExportTables:
    """Tabular content of an exported plan."""

    task_list: List[Dict[str, str]] = field(default_factory=list)
    timeline_header: List[str] = field(default_factory=list)
    timeline_rows: List[List[str]] = field(default_factory=list)
    holidays: List[Dict[str, str]] = field(default_factory=list)


def export_basename(plan: ProjectPlan) -> str:
    """File name stem for an exported plan."""
    stem = re.sub(r"\s+", "_", plan.name)
    return f"{stem}_retroplanning"


def _group_name(plan: ProjectPlan, phase: Phase) -> str:
    if phase.sub_project_id:
        sub_project = plan.get_sub_project(phase.sub_project_id)
        if sub_project:
            return sub_project.name
    return GENERAL_GROUP_LABEL


def sorted_phases(plan: ProjectPlan) -> List[Phase]:
    """Phases ordered by group name (case-insensitive), then start date."""
    return sorted(plan.phases, key=lambda p: (_group_name(plan, p).casefold(), p.start_date))


def build_export(plan: ProjectPlan) -> ExportTables:
    """Build the export tables for a finalized plan snapshot."""
    phases = sorted_phases(plan)
    holiday_dates = {h.date for h in plan.holidays}

    task_list = [
        {
            "Subproject": _group_name(plan, phase),
            "Phase Name": phase.label,
            "Type": PHASE_LABELS[phase.type],
            "Start Date": format_date(phase.start_date),
            "End Date": format_date(phase.end_date),
            "Details": phase.details or "",
        }
        for phase in phases
    ]

    start, end = plan_range(plan.phases)
    days = list(iter_days(start, end))
    header = TIMELINE_FIXED_COLUMNS + [f"{d.month}/{d.day}" for d in days]

    rows = []
    for phase in phases:
        row = [
            _group_name(plan, phase),
            phase.label,
            format_date(phase.start_date),
            format_date(phase.end_date),
        ]
        for day in days:
            if phase.start_date <= day <= phase.end_date:
                row.append(ACTIVE_MARK)
            elif day in holiday_dates:
                row.append(HOLIDAY_MARK)
            else:
                row.append("")
        rows.append(row)

    holidays = [{"Holiday Name": h.name, "Date": format_date(h.date)} for h in plan.holidays]
    return ExportTables(task_list=task_list, timeline_header=header, timeline_rows=rows, holidays=holidays)
