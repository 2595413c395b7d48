"""
slicewheel CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

from pathlib import Path

import click

from .commands import data, initialize, render, slices, templates, users
from .utils import configure_logging, make_context


@click.group()
@click.version_option(package_name="slicewheel")
@click.option("-d", "--db", "db_path", default=None,
              help="Path to the wheel database (default: from .slicewheel/config.yaml)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, db_path: str, verbose: bool):
    """slicewheel: Graded slice wheels.

    Define slices, group them into templates, grade them per person and
    render the result as a radial wheel.

    \b
    Quick Start:
      slicewheel init
      slicewheel slice add Focus --color "#ff0000"
      slicewheel template add Daily Focus
      slicewheel user add Alex --template Daily
      slicewheel user grade Alex Focus 7
      slicewheel render --user Alex -o alex.svg
    """
    configure_logging(verbose)
    ctx.obj = make_context(Path.cwd(), db_path)


# Register commands
main.add_command(initialize.init)
main.add_command(slices.slice_group, name="slice")
main.add_command(templates.template_group, name="template")
main.add_command(users.user_group, name="user")
main.add_command(render.render)
main.add_command(data.export)
main.add_command(data.import_, name="import")
main.add_command(data.reset)
main.add_command(data.stats)

if __name__ == "__main__":
    main()
