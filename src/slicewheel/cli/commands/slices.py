"""
Slice Commands - Create, edit and delete slices.

Renames and deletes go through the integrity engine, so templates and users
referencing a slice follow along.
"""

import click
from pydantic_extra_types.color import Color
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ...core.exceptions import EntityNotFoundError
from ...core.integrity import IntegrityEngine
from ...core.session import EditSession
from ...core.types import CollectionKind, Slice
from ..utils import echo_info, echo_success, echo_warning, handle_errors, validate_color

console = Console()


@click.group()
def slice_group():
    """Manage slices (named, colored attributes)."""


def _swatch(color: str) -> Text:
    """Color sample followed by the color text; unparseable colors get a placeholder."""
    swatch = Text()
    try:
        r, g, b = Color(color).as_rgb_tuple(alpha=False)
        swatch.append("■ ", style=f"#{r:02x}{g:02x}{b:02x}")
    except ValueError:
        swatch.append("? ")
    swatch.append(color)
    return swatch


@slice_group.command("list")
@click.pass_obj
@handle_errors
def list_slices(obj):
    """List all slices."""
    slices = Slice.from_storage(obj.store)
    if not slices:
        echo_warning("No slices yet. Add one with 'slicewheel slice add'.")
        return

    table = Table(title="Slices")
    table.add_column("Name", style="cyan")
    table.add_column("Color")
    table.add_column("Description", style="dim")
    for s in slices:
        table.add_row(escape(s.name), _swatch(s.color), escape(s.description or ""))
    console.print(table)


@slice_group.command("add")
@click.argument("name")
@click.option("-c", "--color", default="#ffffff", callback=validate_color, help="Slice color")
@click.option("--description", default=None, help="Optional description")
@click.pass_obj
@handle_errors
def add_slice(obj, name: str, color: str, description: str):
    """Create a new slice."""
    session = EditSession(Slice.default())
    session.working.name = name
    session.working.color = color
    session.working.description = description
    session.commit(obj.store)
    echo_success(f"Created slice '{name}'")


@slice_group.command("edit")
@click.argument("name")
@click.option("-n", "--name", "new_name", default=None, help="Rename the slice")
@click.option("-c", "--color", default=None, callback=validate_color, help="New color")
@click.option("--description", default=None, help="New description")
@click.pass_obj
@handle_errors
def edit_slice(obj, name: str, new_name: str, color: str, description: str):
    """Edit a slice; renames propagate to templates and users."""
    session = EditSession(Slice.get(obj.store, name))
    if new_name is not None:
        session.working.name = new_name
    if color is not None:
        session.working.color = color
    if description is not None:
        session.working.description = description

    if not session.is_dirty:
        echo_info("Nothing to change.")
        return

    session.commit(obj.store)
    echo_success(f"Saved slice '{session.original.name}'")


@slice_group.command("delete")
@click.argument("name")
@click.pass_obj
@handle_errors
def delete_slice(obj, name: str):
    """Delete a slice and remove it from every template and user."""
    if not IntegrityEngine(obj.store).delete_slice(name):
        raise EntityNotFoundError(CollectionKind.SLICE, name)
    echo_success(f"Deleted slice '{name}'")
