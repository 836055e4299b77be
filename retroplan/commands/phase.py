"""
Phase commands for Retroplan.

Bar drags are replayed through the same gesture state machine the
interactive timeline uses, so a CLI drag obeys the same clamping rules.
"""
from typing import Optional

import click

from retroplan.commands.common import PHASE_TYPE_CHOICE, parse_date_option
from retroplan.core import RetroplanCore
from retroplan.exceptions import NotFoundError, RetroplanError, ValidationError
from retroplan.managers import planner
from retroplan.managers.interaction import GestureKind, GestureOutcome
from retroplan.models.plan import PhaseType
from retroplan.utils import format_date

GESTURE_CHOICES = {
    "move": GestureKind.MOVE,
    "resize-left": GestureKind.RESIZE_L,
    "resize-right": GestureKind.RESIZE_R,
}


@click.group()
def phase():
    """Manage the phases of a plan."""
    pass


@phase.command(name="add")
@click.argument("plan_ref")
@click.option("-s", "--start", "start_date", required=True, callback=parse_date_option, help="Start date.")
@click.option("-e", "--end", "end_date", callback=parse_date_option, help="End date (defaults to start).")
@click.option("-t", "--type", "phase_type", type=PHASE_TYPE_CHOICE, default=PhaseType.DEVELOPMENT.value,
              show_default=True, help="Phase type.")
@click.option("-n", "--name", help="Phase name (defaults to the type label).")
@click.option("-g", "--subproject", "sub_project_id", help="Sub-project id.")
@click.option("-d", "--details", help="Free-text details.")
def add(plan_ref: str, start_date, end_date, phase_type: str, name: Optional[str],
        sub_project_id: Optional[str], details: Optional[str]):
    """Add a phase to a plan."""
    core = RetroplanCore()
    try:
        session = core.apply(
            plan_ref,
            planner.add_phase,
            start_date=start_date,
            end_date=end_date or start_date,
            type=PhaseType(phase_type.upper()),
            name=name,
            sub_project_id=sub_project_id,
            details=details,
        )
        new_phase = session.plan.phases[-1]
        click.echo(
            f"Phase '{new_phase.label}' created with id {new_phase.id} "
            f"({format_date(new_phase.start_date)} → {format_date(new_phase.end_date)})."
        )
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@phase.command(name="edit")
@click.argument("plan_ref")
@click.argument("phase_id")
@click.option("-s", "--start", "start_date", callback=parse_date_option, help="New start date.")
@click.option("-e", "--end", "end_date", callback=parse_date_option, help="New end date.")
@click.option("-t", "--type", "phase_type", type=PHASE_TYPE_CHOICE, help="New phase type.")
@click.option("-n", "--name", help="New name (empty string clears it).")
@click.option("-g", "--subproject", "sub_project_id", help="Move to this sub-project.")
@click.option("--ungroup", is_flag=True, help="Remove the phase from its sub-project.")
@click.option("-d", "--details", help="New details.")
def edit(plan_ref: str, phase_id: str, start_date, end_date, phase_type: Optional[str],
         name: Optional[str], sub_project_id: Optional[str], ungroup: bool, details: Optional[str]):
    """Edit a phase. Only specified fields are updated."""
    changes = {}
    if start_date is not None:
        changes["start_date"] = start_date
    if end_date is not None:
        changes["end_date"] = end_date
    if phase_type is not None:
        changes["type"] = PhaseType(phase_type.upper())
    if name is not None:
        changes["name"] = name
    if sub_project_id is not None:
        changes["sub_project_id"] = sub_project_id
    if ungroup:
        changes["sub_project_id"] = None
    if details is not None:
        changes["details"] = details
    if not changes:
        raise click.ClickException(
            "No update parameters provided. "
            "Specify at least one of: -s/--start, -e/--end, -t/--type, -n/--name, -g/--subproject, -d/--details."
        )

    core = RetroplanCore()
    try:
        session = core.apply(plan_ref, planner.update_phase, phase_id, **changes)
        updated = session.plan.get_phase(phase_id)
        click.echo(
            f"Phase '{updated.label}' updated "
            f"({format_date(updated.start_date)} → {format_date(updated.end_date)})."
        )
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@phase.command(name="delete")
@click.argument("plan_ref")
@click.argument("phase_id")
def delete(plan_ref: str, phase_id: str):
    """Delete a phase."""
    core = RetroplanCore()
    try:
        core.apply(plan_ref, planner.delete_phase, phase_id)
        click.echo(f"Phase {phase_id} deleted successfully.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@phase.command(name="drag")
@click.argument("plan_ref")
@click.argument("phase_id")
@click.option("--days", type=int, required=True, help="Whole days to drag by (negative drags earlier).")
@click.option("-k", "--kind", type=click.Choice(list(GESTURE_CHOICES)), default="move", show_default=True,
              help="Drag the whole bar or one of its edges.")
def drag(plan_ref: str, phase_id: str, days: int, kind: str):
    """Drag a phase bar along the timeline."""
    core = RetroplanCore()
    try:
        session = core.open_session(plan_ref)
        if session.plan.get_phase(phase_id) is None:
            raise NotFoundError(f"Phase '{phase_id}' not found.")
        session.pointer_down(phase_id, 0.0, kind=GESTURE_CHOICES[kind])
        session.pointer_move(days * session.state.mapper.day_width)
        outcome = session.pointer_up()
        if session.state.notice:
            raise RetroplanError(session.state.notice)
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")

    moved = session.plan.get_phase(phase_id)
    if outcome is not GestureOutcome.DRAG:
        click.echo(f"Phase '{moved.label}' was not moved.")
        return
    click.echo(
        f"Phase '{moved.label}' now runs "
        f"{format_date(moved.start_date)} → {format_date(moved.end_date)}."
    )


@phase.command(name="reorder")
@click.argument("plan_ref")
@click.argument("source_id")
@click.argument("target_id")
def reorder(plan_ref: str, source_id: str, target_id: str):
    """Move SOURCE_ID to the row of TARGET_ID within its sub-project."""
    core = RetroplanCore()
    try:
        session = core.open_session(plan_ref)
        session.dispatch(planner.row_drag_start, source_id)
        state = session.dispatch(planner.row_drop, target_id)
        if not state.dirty:
            click.echo("Nothing to reorder: phases must be distinct and share a sub-project.")
            return
        core.save(session)
        click.echo(f"Phase {source_id} moved.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")
