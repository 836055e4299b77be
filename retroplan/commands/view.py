"""
Read-only views of a plan: the text timeline and the export tables.
"""
import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import click

from retroplan.constants import GENERAL_GROUP_LABEL
from retroplan.core import RetroplanCore
from retroplan.exceptions import NotFoundError, RetroplanError
from retroplan.managers.export import export_basename
from retroplan.managers.layout import holidays_by_date
from retroplan.utils import is_weekend, weeks_between

ACTIVE_CELL = "█"
HOLIDAY_CELL = "H"
WEEKEND_CELL = "·"
EMPTY_CELL = " "
LABEL_WIDTH = 28


def _row(label: str, cells: str) -> str:
    return f"{label[:LABEL_WIDTH]:<{LABEL_WIDTH}}|{cells}"


@click.command()
@click.argument("plan_ref")
def timeline(plan_ref: str):
    """Draw the plan as a text Gantt chart, one column per day."""
    core = RetroplanCore()
    try:
        session = core.open_session(plan_ref, read_only=True)
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")

    state = session.state
    data = state.timeline
    weeks = weeks_between(data.base_start, data.base_end)
    columns = state.layout.grid_weeks(weeks, state.plan.holidays)
    holiday_names = holidays_by_date(state.plan.holidays)
    days = [cell.date for column in columns for cell in column.days]

    months = "".join(f"{column.month_label or '':<7}"[:7] for column in columns)
    week_numbers = "".join(f"S{column.week_number:<6}" for column in columns)
    click.echo(f"{state.plan.name}")
    click.echo(_row("", months))
    click.echo(_row("", week_numbers))

    for group in session.groups():
        if group.sub_project is None and not group.phases:
            continue
        click.echo(_row(group.sub_project.name if group.sub_project else GENERAL_GROUP_LABEL, ""))
        for phase in group.phases:
            cells = []
            for day in days:
                if phase.start_date <= day <= phase.end_date:
                    cells.append(ACTIVE_CELL)
                elif day in holiday_names:
                    cells.append(HOLIDAY_CELL)
                elif is_weekend(day):
                    cells.append(WEEKEND_CELL)
                else:
                    cells.append(EMPTY_CELL)
            click.echo(_row(f"  {phase.label}", "".join(cells)))

    if days:
        click.echo(f"\n{days[0]} → {days[-1]}")


@click.command(name="export")
@click.argument("plan_ref")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Write to this file instead of <plan name>_retroplanning.json.")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the tables instead of writing a file.")
def export_plan(plan_ref: str, output: Optional[Path], to_stdout: bool):
    """Export the task list, visual timeline and holidays as JSON tables."""
    core = RetroplanCore()
    try:
        session = core.open_session(plan_ref, read_only=True)
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")

    content = json.dumps(asdict(session.export()), indent=2, ensure_ascii=False)
    if to_stdout:
        click.echo(content)
        return
    target = output or Path(f"{export_basename(session.plan)}.json")
    target.write_text(content, encoding="utf-8")
    click.echo(f"Exported '{session.plan.name}' to {target}.")
