"""
Share link commands for Retroplan.
"""
from typing import Optional

import click

from retroplan.core import RetroplanCore
from retroplan.exceptions import NotFoundError, RetroplanError, ShareDecodeError
from retroplan.managers.share import token_from_url


@click.group()
def share():
    """Share plans as self-contained links."""
    pass


@share.command(name="export")
@click.argument("plan_ref")
@click.option("-u", "--base-url", help="Build a full link on this URL instead of printing the bare token.")
def export_link(plan_ref: str, base_url: Optional[str]):
    """Print a share token (or link) embedding the whole plan."""
    core = RetroplanCore()
    try:
        session = core.open_session(plan_ref, read_only=True)
    except NotFoundError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")

    click.echo(session.share_url(base_url) if base_url else session.share_token())


@share.command(name="import")
@click.argument("link")
def import_link(link: str):
    """Import a shared plan from a link or a bare token."""
    token = token_from_url(link) if "://" in link else link
    if not token:
        raise click.ClickException("Link does not contain a shared plan.")

    core = RetroplanCore()
    try:
        imported = core.project_manager.import_shared(token)
        click.echo(f"Plan '{imported.name}' imported with id {imported.id}.")
    except ShareDecodeError as e:
        raise click.ClickException(str(e))
    except RetroplanError as e:
        raise click.ClickException(f"Error: {e}")
