"""
Init Command - Project bootstrap.

This module handles the `slicewheel init` command, which writes a
`.slicewheel/config.yaml` tailored to the current directory and keeps the
database out of version control.
"""

import copy
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm

from ...config import CONFIG_DIR_NAME, DEFAULT_CONFIG, config_path

console = Console()


def create_gitignore(root_dir: Path) -> None:
    """Ensure the .slicewheel/ directory is ignored by git."""
    gitignore = root_dir / ".gitignore"
    entry = f"\n# slicewheel\n{CONFIG_DIR_NAME}/\n"

    if not gitignore.exists():
        with open(gitignore, "w") as f:
            f.write(entry)
    else:
        content = gitignore.read_text()
        if CONFIG_DIR_NAME not in content:
            with open(gitignore, "a") as f:
                f.write(entry)


def _init_project(root_dir: Path) -> Path:
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["project_name"] = root_dir.name

    config_file = config_path(root_dir)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(config, f, sort_keys=False, default_flow_style=False)

    create_gitignore(root_dir)
    return config_file


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
@click.pass_obj
def init(obj, force: bool):
    """
    Initialize slicewheel in the current directory.
    """
    console.print(Panel.fit("🎡 [bold blue]slicewheel Initialization[/bold blue]", border_style="blue"))

    root_dir = obj.root
    config_file = config_path(root_dir)

    if config_file.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {escape(str(config_file))}[/yellow]")
        if not Confirm.ask("Do you want to overwrite it?"):
            console.print("Aborted.")
            return

    config_file = _init_project(root_dir)

    console.print("\n✨ [bold green]Initialized successfully![/bold green]")
    console.print(f"   Config created at: [dim]{escape(str(config_file))}[/dim]")
