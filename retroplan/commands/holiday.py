"""
Holiday commands for Retroplan.
"""
import click

from retroplan.commands.common import parse_date_option
from retroplan.core import RetroplanCore
from retroplan.exceptions import NotFoundError, RetroplanError, ValidationError
from retroplan.managers import planner


@click.group()
def holiday():
    """Manage holidays and absences."""
    pass


@holiday.command(name="add")
@click.argument("plan_ref")
@click.argument("name")
@click.option("-s", "--start", "start_date", required=True, callback=parse_date_option, help="First day off.")
@click.option("-e", "--end", "end_date", callback=parse_date_option, help="Last day off (defaults to start).")
def add(plan_ref: str, name: str, start_date, end_date):
    """Mark every day from START to END as a holiday named NAME."""
    core = RetroplanCore()
    try:
        before = len(core.open_session(plan_ref).plan.holidays)
        session = core.apply(plan_ref, planner.add_holiday_range, name, start_date, end_date or start_date)
        click.echo(f"{len(session.plan.holidays) - before} holiday day(s) added.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@holiday.command(name="delete")
@click.argument("plan_ref")
@click.argument("holiday_id")
def delete(plan_ref: str, holiday_id: str):
    """Delete a single holiday day."""
    core = RetroplanCore()
    try:
        core.apply(plan_ref, planner.delete_holiday, holiday_id)
        click.echo(f"Holiday {holiday_id} deleted successfully.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")
