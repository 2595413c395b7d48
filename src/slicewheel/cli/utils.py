"""
CLI Utilities - Shared helper functions for command line operations.

This module provides formatted printing, store opening and the error
boundary that turns core errors into a clean exit.
"""

import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import click
from pydantic_extra_types.color import Color

from ..config import load_config
from ..core.exceptions import SliceWheelError
from ..core.storage.sqlite import SQLiteMedium
from ..core.store import WheelStore


def echo_success(message: str) -> None:
    """Print a success message with a green checkmark."""
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Print an error message with a red cross to stderr."""
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@dataclass
class CliContext:
    """
    Per-invocation state shared by all commands.

    The store is opened lazily so commands like `init` never touch the
    database.
    """
    root: Path
    db_path: Optional[Path] = None
    config: Dict[str, Any] = field(default_factory=dict)
    _store: Optional[WheelStore] = None

    @property
    def store(self) -> WheelStore:
        if self._store is None:
            storage = self.config.get("storage", {})
            db_path = self.db_path or self.root / storage["db_path"]
            medium = SQLiteMedium(db_path, quota_bytes=storage.get("quota_bytes"))
            self._store = WheelStore(medium)
        return self._store


def make_context(root: Path, db_path: Optional[str]) -> CliContext:
    return CliContext(
        root=root,
        db_path=Path(db_path) if db_path else None,
        config=load_config(root),
    )


def handle_errors(func):
    """Report SliceWheelError cleanly and exit with status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SliceWheelError as e:
            echo_error(str(e))
            raise SystemExit(1)
    return wrapper


def validate_color(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[str]:
    """Click callback accepting any CSS color (hex, rgb(), named)."""
    if value is None:
        return None
    try:
        Color(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a valid color")
    return value
