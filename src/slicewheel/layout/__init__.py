"""
Wheel layout and rendering.

- geometry: Sector/band computation from graded slices
- size: Size tiers and label font sizes
- svg: SVG serialization of computed geometry
"""

from .geometry import Arc, Label, Sector, WheelGeometry, compute_wheel_geometry
from .size import SizeKind, font_size, pixel_size
from .svg import render_svg

__all__ = [
    "Arc", "Label", "Sector", "WheelGeometry", "compute_wheel_geometry",
    "SizeKind", "font_size", "pixel_size", "render_svg",
]
