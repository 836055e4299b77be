"""
Sub-project commands for Retroplan.
"""
import click

from retroplan.core import RetroplanCore
from retroplan.exceptions import NotFoundError, RetroplanError, ValidationError
from retroplan.managers import planner


@click.group()
def subproject():
    """Manage the sub-projects (row groups) of a plan."""
    pass


@subproject.command(name="add")
@click.argument("plan_ref")
@click.argument("name")
def add(plan_ref: str, name: str):
    """Add a sub-project."""
    core = RetroplanCore()
    try:
        session = core.apply(plan_ref, planner.add_sub_project, name)
        created = session.plan.sub_projects[-1]
        click.echo(f"Sub-project '{created.name}' created with id {created.id}.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@subproject.command(name="rename")
@click.argument("plan_ref")
@click.argument("sub_project_id")
@click.argument("name")
def rename(plan_ref: str, sub_project_id: str, name: str):
    """Rename a sub-project. A blank name keeps the current one."""
    core = RetroplanCore()
    try:
        session = core.apply(plan_ref, planner.rename_sub_project, sub_project_id, name)
        renamed = session.plan.get_sub_project(sub_project_id)
        click.echo(f"Sub-project renamed to '{renamed.name}'.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@subproject.command(name="delete")
@click.argument("plan_ref")
@click.argument("sub_project_id")
def delete(plan_ref: str, sub_project_id: str):
    """Delete a sub-project. Its phases are kept, ungrouped."""
    core = RetroplanCore()
    try:
        core.apply(plan_ref, planner.delete_sub_project, sub_project_id)
        click.echo(f"Sub-project {sub_project_id} deleted successfully.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")
