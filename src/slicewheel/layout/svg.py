"""
SVG output for wheel geometry.

Produces a standalone document: one path per arc inside a group translated
to the wheel center, plus a backed text label per sector when the geometry
carries labels.
"""

import math
from typing import List
from xml.sax.saxutils import escape, quoteattr

from .geometry import Arc, Sector, WheelGeometry

FULL_TURN = 2 * math.pi


def fmt(n: float) -> str:
    return f"{n:.3f}".rstrip("0").rstrip(".")


def _point(radius: float, angle: float) -> str:
    return f"{fmt(radius * math.sin(angle))} {fmt(-radius * math.cos(angle))}"


def _circle(radius: float) -> str:
    return (
        f"M 0 {fmt(-radius)} "
        f"A {fmt(radius)} {fmt(radius)} 0 1 1 0 {fmt(radius)} "
        f"A {fmt(radius)} {fmt(radius)} 0 1 1 0 {fmt(-radius)} Z"
    )


def arc_path(arc: Arc) -> str:
    """Path data for an annulus sector."""
    span = arc.end_angle - arc.start_angle
    if span >= FULL_TURN - 1e-9:
        path = _circle(arc.outer_radius)
        if arc.inner_radius > 0:
            path += " " + _circle(arc.inner_radius)
        return path

    large = 1 if span > math.pi else 0
    r0, r1 = arc.inner_radius, arc.outer_radius
    parts = [
        f"M {_point(r1, arc.start_angle)}",
        f"A {fmt(r1)} {fmt(r1)} 0 {large} 1 {_point(r1, arc.end_angle)}",
    ]
    if r0 > 0:
        parts.append(f"L {_point(r0, arc.end_angle)}")
        parts.append(f"A {fmt(r0)} {fmt(r0)} 0 {large} 0 {_point(r0, arc.start_angle)}")
    else:
        parts.append("L 0 0")
    parts.append("Z")
    return " ".join(parts)


def _arc_element(arc: Arc, element_id: str) -> str:
    if arc.filled:
        paint = f'fill="{arc.fill}"'
    else:
        paint = f'fill="none" stroke="{arc.stroke}"'
    return f'<path id={quoteattr(element_id)} d="{arc_path(arc)}" fill-rule="evenodd" {paint}/>'


def _label_elements(sector: Sector) -> List[str]:
    label = sector.label
    filter_id = f"{sector.key}-solidtext"
    return [
        f'<defs><filter x="0" y="0" width="1" height="1" id={quoteattr(filter_id)}>'
        f'<feFlood flood-color="{label.backing_color}" flood-opacity="{label.backing_opacity}" result="bg"/>'
        f'<feMerge><feMergeNode in="bg"/><feMergeNode in="SourceGraphic"/></feMerge>'
        f'</filter></defs>',
        f'<text filter="url(#{escape(filter_id)})" x="{fmt(label.x)}" y="{fmt(label.y)}" '
        f'font-size="{label.font_size}" dy=".33em" text-anchor="middle" '
        f'fill="{label.color}">{escape(label.text)}</text>',
    ]


def render_svg(geometry: WheelGeometry) -> str:
    """Serialize geometry as an SVG document string."""
    size = fmt(geometry.size)
    center = fmt(geometry.size / 2)
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}">',
        f'<g transform="translate({center}, {center})">',
    ]
    for sector in geometry.sectors:
        for i, arc in enumerate(sector.arcs):
            lines.append(_arc_element(arc, f"wheel-{sector.key}-{i}"))
        if sector.label is not None:
            lines.extend(_label_elements(sector))
    lines.append("</g>")
    lines.append("</svg>")
    return "\n".join(lines) + "\n"
