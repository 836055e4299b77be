"""
CLI for Retroplan using .retroplan/ storage.

Uses RetroplanCore and managers exclusively.
"""
import click

from retroplan.commands.config import config
from retroplan.commands.holiday import holiday
from retroplan.commands.phase import phase
from retroplan.commands.plan import plan
from retroplan.commands.share import share
from retroplan.commands.subproject import subproject
from retroplan.commands.view import export_plan, timeline


@click.group()
def cli():
    """Retroplanning: lay out project phases on a weekly timeline."""
    pass


cli.add_command(plan)
cli.add_command(phase)
cli.add_command(subproject)
cli.add_command(holiday)
cli.add_command(timeline)
cli.add_command(share)
cli.add_command(export_plan)
cli.add_command(config)


if __name__ == '__main__':
    cli()
