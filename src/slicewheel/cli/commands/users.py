"""
User Commands - Per-person wheels and their grades.
"""

from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...config import DEFAULT_GRADE, MAX_GRADE, MIN_GRADE
from ...core.exceptions import EntityNotFoundError
from ...core.integrity import IntegrityEngine
from ...core.session import EditSession
from ...core.types import CollectionKind, Template, User
from ..utils import echo_error, echo_success, echo_warning, handle_errors

console = Console()

GRADE = click.IntRange(MIN_GRADE, MAX_GRADE)


@click.group()
def user_group():
    """Manage users (graded wheels)."""


@user_group.command("list")
@click.pass_obj
@handle_errors
def list_users(obj):
    """List all users with their grades."""
    users = User.from_storage(obj.store)
    if not users:
        echo_warning("No users yet. Add one with 'slicewheel user add'.")
        return

    table = Table(title="Users")
    table.add_column("Name", style="cyan")
    table.add_column("Grades")
    for u in users:
        table.add_row(escape(u.name), escape(u.summary()))
    console.print(table)


@user_group.command("show")
@click.argument("name")
@click.pass_obj
@handle_errors
def show_user(obj, name: str):
    """Show every graded slice of a user."""
    user = User.get(obj.store, name)
    table = Table(title=escape(user.name))
    table.add_column("Slice", style="cyan")
    table.add_column("Grade", justify="right")
    table.add_column("Description", style="dim")
    for graded in user.slices:
        table.add_row(escape(graded.name), str(graded.grade), escape(graded.grade_description or ""))
    console.print(table)


@user_group.command("add")
@click.argument("name")
@click.option("-t", "--template", "template_name", default=None, help="Start from a template")
@click.option("--default-grade", default=None, type=GRADE, help="Grade for new slices")
@click.pass_obj
@handle_errors
def add_user(obj, name: str, template_name: Optional[str], default_grade: Optional[int]):
    """Create a user, optionally seeded from a template."""
    session = EditSession(User.default())
    session.working.name = name
    if template_name is not None:
        grade = _default_grade(obj, default_grade)
        session.working.apply_template(Template.get(obj.store, template_name), grade)
    session.commit(obj.store)
    echo_success(f"Created user '{name}'")


@user_group.command("grade")
@click.argument("name")
@click.argument("slice_name")
@click.argument("grade", type=GRADE)
@click.option("--description", default=None, help="Why this grade")
@click.pass_obj
@handle_errors
def grade_slice(obj, name: str, slice_name: str, grade: int, description: Optional[str]):
    """Set a user's grade for one of their slices."""
    session = EditSession(User.get(obj.store, name))
    graded = session.working.find(slice_name)
    if graded is None:
        echo_error(f"User '{name}' has no slice '{slice_name}'")
        raise SystemExit(1)
    graded.grade = grade
    if description is not None:
        graded.grade_description = description
    session.commit(obj.store)
    echo_success(f"Graded '{slice_name}' {grade} for '{name}'")


@user_group.command("apply")
@click.argument("name")
@click.argument("template_name")
@click.option("--default-grade", default=None, type=GRADE, help="Grade for new slices")
@click.pass_obj
@handle_errors
def apply_template(obj, name: str, template_name: str, default_grade: Optional[int]):
    """Switch a user to a template, keeping grades of shared slices."""
    session = EditSession(User.get(obj.store, name))
    session.working.apply_template(
        Template.get(obj.store, template_name), _default_grade(obj, default_grade)
    )
    session.commit(obj.store)
    echo_success(f"Applied template '{template_name}' to '{name}'")


@user_group.command("rename")
@click.argument("name")
@click.argument("new_name")
@click.pass_obj
@handle_errors
def rename_user(obj, name: str, new_name: str):
    """Rename a user."""
    session = EditSession(User.get(obj.store, name))
    session.working.name = new_name
    session.commit(obj.store)
    echo_success(f"Renamed user '{name}' to '{new_name}'")


@user_group.command("delete")
@click.argument("name")
@click.pass_obj
@handle_errors
def delete_user(obj, name: str):
    """Delete a user."""
    if not IntegrityEngine(obj.store).delete_user(name):
        raise EntityNotFoundError(CollectionKind.USER, name)
    echo_success(f"Deleted user '{name}'")


def _default_grade(obj, override: Optional[int]) -> int:
    if override is not None:
        return override
    return obj.config.get("defaults", {}).get("grade", DEFAULT_GRADE)
