"""
Radial wheel layout.

Turns an ordered list of graded slices into annulus sectors:

- Angular: every slice gets an equal span of the circle. With more than one
  slice, each span is inset on both sides to leave a gap.
- Radial: grades 1..10 are grouped two per band into five concentric bands.
  The filled depth of a sector grows with its grade; the band holding the
  boundary is split into a filled inner arc and an outline outer arc.
- Color: inner bands are the base color washed with white, fading out
  towards the rim (see WHITE_MIX_BY_BAND).

Angles are radians measured clockwise from 12 o'clock, coordinates are
relative to the wheel center with y pointing down (SVG convention). The
result depends only on the inputs.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic_extra_types.color import Color

from ..config import MAX_GRADE, MIN_GRADE
from ..core.types import make_key
from .size import SizeKind, font_size

ANGLE_PADDING = 0.05
FILL_RATIO = 0.92
GRADES_PER_BAND = 2
BAND_COUNT = math.ceil(MAX_GRADE / GRADES_PER_BAND)

# Share of white mixed into the base color, by band. Designer-chosen values;
# bands past the end of the table use the base color, normalized to #rrggbb.
WHITE_MIX_BY_BAND: Tuple[float, ...] = (0.8, 0.55, 0.35, 0.175)

OUTLINE_COLOR = "#000000"
LABEL_TEXT_COLOR = "#ffffff"
LABEL_BACKING_COLOR = "#000000"
LABEL_BACKING_OPACITY = 0.75

Band = Tuple[int, int]


@dataclass(frozen=True)
class Arc:
    """One annulus piece of a sector. Exactly one of fill/stroke is set."""
    inner_radius: float
    outer_radius: float
    start_angle: float
    end_angle: float
    fill: Optional[str] = None
    stroke: Optional[str] = None

    @property
    def filled(self) -> bool:
        return self.fill is not None


@dataclass(frozen=True)
class Label:
    """Slice name centered on the sector's centroid."""
    text: str
    x: float
    y: float
    font_size: str
    color: str = LABEL_TEXT_COLOR
    backing_color: str = LABEL_BACKING_COLOR
    backing_opacity: float = LABEL_BACKING_OPACITY


@dataclass(frozen=True)
class Sector:
    """All drawable pieces of one slice."""
    key: str
    name: str
    grade: int
    color: str
    start_angle: float
    end_angle: float
    filled_radius: int
    arcs: Tuple[Arc, ...]
    label: Optional[Label] = None

    @property
    def filled_arcs(self) -> Tuple[Arc, ...]:
        return tuple(a for a in self.arcs if a.filled)


@dataclass(frozen=True)
class WheelGeometry:
    size: float
    start_radius: int
    grade_radius: int
    fill_radius: int
    bands: Tuple[Band, ...]
    sectors: Tuple[Sector, ...]

    @property
    def outer_radius(self) -> int:
        return self.bands[-1][1]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def radii_for_size(size: float) -> Tuple[int, int, int]:
    """(start_radius, grade_radius, fill_radius) for a pixel size."""
    start_radius = math.floor(size / 25)
    grade_radius = max(2, math.floor((size - 2 * start_radius) / 20))
    fill_radius = max(2, math.floor(grade_radius * FILL_RATIO) + 1)
    return start_radius, grade_radius, fill_radius


def band_bounds(start_radius: int, grade_radius: int, fill_radius: int) -> Tuple[Band, ...]:
    """Inner and outer radius of each grade band, innermost first."""
    bands = []
    for band in range(BAND_COUNT):
        inner = start_radius + band * grade_radius * GRADES_PER_BAND
        bands.append((inner, inner + GRADES_PER_BAND * fill_radius))
    return tuple(bands)


def filled_radius(grade: int, start_radius: int, grade_radius: int, fill_radius: int) -> int:
    """Radius the fill reaches for a grade; grade 0 fills nothing."""
    if grade <= 0:
        return start_radius
    return start_radius + (grade - 1) * grade_radius + fill_radius


def sector_angles(index: int, count: int) -> Tuple[float, float]:
    """Start and end angle of the index-th of count sectors."""
    span = 2 * math.pi / count
    start = index * span
    end = (index + 1) * span
    if count > 1:
        start += ANGLE_PADDING / 2
        end -= ANGLE_PADDING / 2
    return start, end


def _to_hex(rgb: Sequence[float]) -> str:
    return "#" + "".join(f"{int(c):02x}" for c in rgb)


def mix_with_white(color: str, weight: float) -> str:
    """Blend `weight` of white into color; channels round half up."""
    r, g, b = Color(color).as_rgb_tuple(alpha=False)
    return _to_hex(math.floor(c * (1 - weight) + 255 * weight + 0.5) for c in (r, g, b))


def band_color(band: int, color: str) -> str:
    """Fill color of a band, from the white-mix table."""
    if band < len(WHITE_MIX_BY_BAND):
        return mix_with_white(color, WHITE_MIX_BY_BAND[band])
    return _to_hex(Color(color).as_rgb_tuple(alpha=False))


def centroid(inner_radius: float, outer_radius: float,
             start_angle: float, end_angle: float) -> Tuple[float, float]:
    """Centroid of an annulus sector, as used for label placement."""
    r = (inner_radius + outer_radius) / 2
    a = (start_angle + end_angle) / 2 - math.pi / 2
    return (math.cos(a) * r, math.sin(a) * r)


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def _sector_arcs(bands: Sequence[Band], end_radius: int, color: str,
                 start_angle: float, end_angle: float) -> List[Arc]:
    arcs: List[Arc] = []
    fill_empty = False
    for band, (inner, outer) in enumerate(bands):
        if fill_empty:
            arcs.append(Arc(inner, outer, start_angle, end_angle, stroke=OUTLINE_COLOR))
            continue
        if outer < end_radius:
            arcs.append(Arc(inner, outer, start_angle, end_angle, fill=band_color(band, color)))
            continue

        # This band holds the fill boundary
        fill_empty = True
        if end_radius > inner:
            arcs.append(Arc(inner, end_radius, start_angle, end_angle, fill=band_color(band, color)))
            if outer > end_radius:
                arcs.append(Arc(end_radius, outer, start_angle, end_angle, stroke=OUTLINE_COLOR))
        else:
            arcs.append(Arc(inner, outer, start_angle, end_angle, stroke=OUTLINE_COLOR))
    return arcs


def compute_wheel_geometry(slices: Sequence[Any], size: float,
                           size_kind: SizeKind = SizeKind.VIEW) -> WheelGeometry:
    """
    Lay out graded slices as a wheel.

    Args:
        slices: GradedSlice entities, or any objects/mappings exposing
            `grade` and `color` (and optionally `name`, `key`).
        size: Pixel width/height of the square drawing.
        size_kind: Tier deciding whether labels are produced.

    Returns:
        The geometry of every sector, in input order.

    Raises:
        ValueError: A grade is outside 0..10 or a color cannot be parsed.
    """
    start_radius, grade_radius, fill_radius = radii_for_size(size)
    bands = band_bounds(start_radius, grade_radius, fill_radius)
    text_size = font_size(size_kind)

    sectors = []
    for i, item in enumerate(slices):
        grade = _field(item, "grade")
        if not isinstance(grade, int) or not MIN_GRADE <= grade <= MAX_GRADE:
            raise ValueError(f"Grade must be an integer in [{MIN_GRADE}, {MAX_GRADE}], got {grade!r}")
        color = _field(item, "color")
        name = _field(item, "name") or ""
        key = _field(item, "key") or make_key(name) or f"slice_{i}"

        start_angle, end_angle = sector_angles(i, len(slices))
        end_radius = filled_radius(grade, start_radius, grade_radius, fill_radius)
        arcs = _sector_arcs(bands, end_radius, color, start_angle, end_angle)

        label = None
        if text_size is not None:
            x, y = centroid(bands[0][0], bands[-1][1], start_angle, end_angle)
            label = Label(text=name, x=x, y=y, font_size=text_size)

        sectors.append(Sector(
            key=key,
            name=name,
            grade=grade,
            color=color,
            start_angle=start_angle,
            end_angle=end_angle,
            filled_radius=end_radius,
            arcs=tuple(arcs),
            label=label,
        ))

    return WheelGeometry(
        size=size,
        start_radius=start_radius,
        grade_radius=grade_radius,
        fill_radius=fill_radius,
        bands=bands,
        sectors=tuple(sectors),
    )
