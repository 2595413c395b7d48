"""
Template Commands - Group slices into reusable templates.
"""

from typing import Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...core.exceptions import EntityNotFoundError
from ...core.integrity import IntegrityEngine
from ...core.session import EditSession
from ...core.types import CollectionKind, Slice, Template
from ..utils import echo_success, echo_warning, handle_errors

console = Console()


@click.group()
def template_group():
    """Manage templates (ordered sets of slices)."""


@template_group.command("list")
@click.pass_obj
@handle_errors
def list_templates(obj):
    """List all templates."""
    templates = Template.from_storage(obj.store)
    if not templates:
        echo_warning("No templates yet. Add one with 'slicewheel template add'.")
        return

    table = Table(title="Templates")
    table.add_column("Name", style="cyan")
    table.add_column("Slices")
    for t in templates:
        table.add_row(escape(t.name), escape(t.summary()))
    console.print(table)


@template_group.command("add")
@click.argument("name")
@click.argument("slice_names", nargs=-1)
@click.pass_obj
@handle_errors
def add_template(obj, name: str, slice_names: Tuple[str, ...]):
    """Create a template from existing slices, in the given order."""
    session = EditSession(Template.default())
    session.working.name = name
    for slice_name in slice_names:
        member = Slice.get(obj.store, slice_name)
        if session.working.index_of(member.name) == -1:
            session.working.toggle_membership(member)
    session.commit(obj.store)
    echo_success(f"Created template '{name}'")


@template_group.command("toggle")
@click.argument("name")
@click.argument("slice_name")
@click.pass_obj
@handle_errors
def toggle_slice(obj, name: str, slice_name: str):
    """Add SLICE_NAME to the template, or remove it if already present."""
    session = EditSession(Template.get(obj.store, name))
    is_member = session.working.toggle_membership(Slice.get(obj.store, slice_name))
    session.commit(obj.store)
    action = "Added" if is_member else "Removed"
    echo_success(f"{action} '{slice_name}' in template '{name}'")


@template_group.command("rename")
@click.argument("name")
@click.argument("new_name")
@click.pass_obj
@handle_errors
def rename_template(obj, name: str, new_name: str):
    """Rename a template."""
    session = EditSession(Template.get(obj.store, name))
    session.working.name = new_name
    session.commit(obj.store)
    echo_success(f"Renamed template '{name}' to '{new_name}'")


@template_group.command("delete")
@click.argument("name")
@click.pass_obj
@handle_errors
def delete_template(obj, name: str):
    """Delete a template. Users built from it are unaffected."""
    if not IntegrityEngine(obj.store).delete_template(name):
        raise EntityNotFoundError(CollectionKind.TEMPLATE, name)
    echo_success(f"Deleted template '{name}'")
