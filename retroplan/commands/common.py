"""
Shared option parsing and display helpers for Retroplan commands.
"""
from typing import Optional

import click

from retroplan.constants import DATE_FORMAT_ERROR, GENERAL_GROUP_LABEL
from retroplan.managers.assembler import group_phases
from retroplan.models.plan import PHASE_LABELS, PhaseType, ProjectPlan
from retroplan.utils import format_date, parse_date

PHASE_TYPE_CHOICE = click.Choice([t.value for t in PhaseType], case_sensitive=False)


def parse_date_option(ctx, param, value: Optional[str]):
    """Click callback accepting any supported date format."""
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise click.BadParameter(DATE_FORMAT_ERROR)
    return parsed


def display_plan(plan: ProjectPlan) -> None:
    """Display a plan grouped by sub-project in human-readable format."""
    click.echo(f"Name: {plan.name}")
    click.echo(f"ID: {plan.id}")
    click.echo(f"Description: {plan.description}")

    for group in group_phases(plan.phases, plan.sub_projects):
        if group.sub_project is None and not group.phases:
            continue
        title = group.sub_project.name if group.sub_project else GENERAL_GROUP_LABEL
        suffix = f" [{group.sub_project.id}]" if group.sub_project else ""
        click.echo(f"\n{title}{suffix}:")
        if not group.phases:
            click.echo("  No phases.")
        for phase in group.phases:
            click.echo(
                f"  - {phase.label} ({PHASE_LABELS[phase.type]}) "
                f"{format_date(phase.start_date)} → {format_date(phase.end_date)} [{phase.id}]"
            )

    if plan.holidays:
        click.echo("\nHolidays:")
        for holiday in sorted(plan.holidays, key=lambda h: h.date):
            click.echo(f"  - {format_date(holiday.date)} {holiday.name} [{holiday.id}]")
