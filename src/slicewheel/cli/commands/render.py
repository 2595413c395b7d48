"""
Render Command - Draw a wheel as SVG or dump its geometry.

A user is drawn with its own grades. A template or a single slice is drawn
fully graded, the way it is previewed while editing.
"""

import json
from pathlib import Path
from typing import Optional

import click

from ...core.types import Slice, Template, User
from ...layout.geometry import compute_wheel_geometry
from ...layout.size import SizeKind
from ...layout.svg import render_svg
from ..utils import echo_error, echo_info, echo_success, handle_errors


@click.command()
@click.option("-u", "--user", "user_name", default=None, help="Render a user's wheel")
@click.option("-t", "--template", "template_name", default=None, help="Render a template")
@click.option("-s", "--slice", "slice_name", default=None, help="Render a single slice")
@click.option("-o", "--output", default=None, help="Output SVG file (default: <key>.svg)")
@click.option("--size", default=None, type=click.IntRange(min=1), help="Image size in pixels")
@click.option("--size-kind", default=None, type=click.Choice([k.value for k in SizeKind]),
              help="Size tier; avatar and select omit labels")
@click.option("--json", "as_json", is_flag=True, help="Print geometry as JSON instead")
@click.pass_obj
@handle_errors
def render(obj, user_name: Optional[str], template_name: Optional[str],
           slice_name: Optional[str], output: Optional[str], size: Optional[int],
           size_kind: Optional[str], as_json: bool):
    """
    Render a wheel for a user, template or slice.
    """
    chosen = [n for n in (user_name, template_name, slice_name) if n is not None]
    if len(chosen) != 1:
        echo_error("Choose exactly one of --user, --template or --slice")
        raise SystemExit(2)

    if user_name is not None:
        entity = User.get(obj.store, user_name)
        graded = entity.slices
    elif template_name is not None:
        entity = Template.get(obj.store, template_name)
        graded = entity.graded_slices()
    else:
        entity = Slice.get(obj.store, slice_name)
        graded = [entity.graded()]

    render_config = obj.config.get("render", {})
    pixels = size or render_config.get("size")
    kind = SizeKind(size_kind or render_config.get("size_kind", SizeKind.VIEW))

    geometry = compute_wheel_geometry(graded, pixels, kind)

    if as_json:
        click.echo(json.dumps(geometry.to_dict(), indent=2))
        return

    output_path = Path(output) if output else Path(f"{entity.key}.svg")
    output_path.write_text(render_svg(geometry))
    echo_success(f"Generated: {output_path}")
    echo_info(f"{len(geometry.sectors)} slice(s) at {pixels}px")
