"""
Data Commands - Backup, restore, reset and inspect storage.

The backup format is a single JSON object holding the three raw collections
under their storage keys, the same shape the browser app downloads.
"""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ...config import BACKUP_FILE_NAME
from ...core.exceptions import ImportFormatError
from ..utils import echo_error, echo_info, echo_success, handle_errors

console = Console()


@click.command()
@click.option("-o", "--output", default=BACKUP_FILE_NAME, help="Backup file to write")
@click.pass_obj
@handle_errors
def export(obj, output: str):
    """Write all slices, templates and users to a JSON backup."""
    output_path = Path(output)
    output_path.write_text(obj.store.export_json())
    echo_success(f"Exported to {output_path}")


@click.command("import")
@click.argument("backup", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_errors
def import_(obj, backup: str):
    """
    Restore collections from a JSON backup.

    Each collection present in the file replaces the stored one; collections
    missing from the file are left alone.
    """
    try:
        text = Path(backup).read_text()
    except UnicodeDecodeError as e:
        raise ImportFormatError(f"not a text file ({e})") from e

    replaced = obj.store.import_json(text)
    if not replaced:
        echo_error("Backup contained no slices, templates or users")
        raise SystemExit(1)
    echo_success(f"Imported {', '.join(str(k) for k in replaced)} data from {backup}")


@click.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
@handle_errors
def reset(obj, yes: bool):
    """Delete all slices, templates and users."""
    if not yes:
        click.confirm("This deletes all stored data. Continue?", abort=True)
    obj.store.reset()
    echo_success("All data reset")


@click.command()
@click.pass_obj
@handle_errors
def stats(obj):
    """Show record counts and storage usage."""
    data = obj.store.stats()

    table = Table(title="Storage")
    table.add_column("Collection", style="cyan")
    table.add_column("Records", justify="right")
    for name in ("slices", "templates", "users"):
        table.add_row(name, str(data[name]))
    console.print(table)

    if data["quota_bytes"]:
        echo_info(f"{data['size_bytes']} of {data['quota_bytes']} bytes used")
    else:
        echo_info(f"{data['size_bytes']} bytes used")
