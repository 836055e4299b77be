"""
Plan library commands for Retroplan.
"""
import json
from typing import Optional

import click

from retroplan.core import RetroplanCore
from retroplan.commands.common import display_plan
from retroplan.exceptions import NotFoundError, RetroplanError, ValidationError
from retroplan.utils import format_date


@click.group()
def plan():
    """Manage project plans."""
    pass


@plan.command(name="list")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def list_plans(json_output: bool):
    """List all plans, most recently created first."""
    core = RetroplanCore()
    try:
        plans = core.project_manager.list()
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")

    if json_output:
        click.echo(json.dumps([p.to_payload() for p in plans], indent=2, ensure_ascii=False))
        return
    for p in plans:
        click.echo(f"{p.id}  {p.name}  ({len(p.phases)} phases, created {format_date(p.created_at)})")


@plan.command(name="create")
@click.argument("name")
@click.option("-d", "--desc", help="Plan description.")
def create(name: str, desc: Optional[str]):
    """Create an empty plan."""
    core = RetroplanCore()
    try:
        new_plan = core.project_manager.create(name, desc or "")
        click.echo(f"Plan '{new_plan.name}' created with id {new_plan.id}.")
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@plan.command(name="show")
@click.argument("reference")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def show(reference: str, json_output: bool):
    """Show a plan.

    REFERENCE is the plan id, its name, or a unique id prefix.
    """
    core = RetroplanCore()
    try:
        found = core.project_manager.find(reference)
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")

    if json_output:
        click.echo(json.dumps(found.to_payload(), indent=2, ensure_ascii=False))
    else:
        display_plan(found)


@plan.command(name="delete")
@click.argument("reference")
@click.confirmation_option(prompt="Are you sure you want to delete this plan?")
def delete(reference: str):
    """Delete a plan and everything in it."""
    core = RetroplanCore()
    try:
        found = core.project_manager.find(reference)
        core.project_manager.delete(found.id)
        click.echo(f"Plan '{found.name}' deleted successfully.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")


@plan.command(name="duplicate")
@click.argument("reference")
def duplicate(reference: str):
    """Copy a plan under fresh identifiers."""
    core = RetroplanCore()
    try:
        found = core.project_manager.find(reference)
        copy = core.project_manager.duplicate(found.id)
        click.echo(f"Plan '{copy.name}' created with id {copy.id}.")
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")
