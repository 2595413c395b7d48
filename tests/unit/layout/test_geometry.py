"""Unit tests for the radial wheel layout."""

import math

import pytest

from slicewheel.core.types import GradedSlice, Slice
from slicewheel.layout.geometry import (
    ANGLE_PADDING,
    WHITE_MIX_BY_BAND,
    band_bounds,
    band_color,
    compute_wheel_geometry,
    mix_with_white,
    radii_for_size,
    sector_angles,
)
from slicewheel.layout.size import SizeKind


def _wheel(*grades, color="#ff0000", size=200, size_kind=SizeKind.VIEW):
    slices = [{"name": f"S{i}", "grade": g, "color": color} for i, g in enumerate(grades)]
    return compute_wheel_geometry(slices, size, size_kind)


class TestRadii:
    def test_radii_for_size(self):
        assert radii_for_size(200) == (8, 9, 9)
        assert radii_for_size(1000) == (40, 46, 43)

    def test_small_sizes_clamped(self):
        assert radii_for_size(10) == (0, 2, 2)

    def test_band_bounds(self):
        assert band_bounds(8, 9, 9) == ((8, 26), (26, 44), (44, 62), (62, 80), (80, 98))


class TestAngles:
    def test_single_slice_is_full_circle(self):
        [sector] = _wheel(5).sectors
        assert sector.start_angle == 0
        assert sector.end_angle == pytest.approx(2 * math.pi)

    def test_four_slices_are_inset(self):
        geometry = _wheel(1, 2, 3, 4)
        for i, sector in enumerate(geometry.sectors):
            assert sector.end_angle - sector.start_angle == pytest.approx(math.pi / 2 - ANGLE_PADDING)
            assert sector.start_angle == pytest.approx(i * math.pi / 2 + ANGLE_PADDING / 2)

    def test_sector_angles(self):
        start, end = sector_angles(1, 2)
        assert start == pytest.approx(math.pi + 0.025)
        assert end == pytest.approx(2 * math.pi - 0.025)


class TestFill:
    def test_grade_zero_fills_nothing(self):
        [sector] = _wheel(0).sectors
        assert sector.filled_arcs == ()
        assert len(sector.arcs) == 5
        assert all(a.stroke == "#000000" and a.fill is None for a in sector.arcs)

    def test_grade_ten_reaches_outer_band_with_base_color(self):
        geometry = _wheel(10)
        [sector] = geometry.sectors
        filled = sector.filled_arcs
        assert len(filled) == 5
        assert filled[-1].outer_radius == geometry.outer_radius
        assert filled[-1].fill == "#ff0000"

    def test_boundary_band_is_split(self):
        [sector] = _wheel(3).sectors
        radii = [(a.inner_radius, a.outer_radius, a.filled) for a in sector.arcs]
        assert radii == [
            (8, 26, True),
            (26, 35, True),
            (35, 44, False),
            (44, 62, False),
            (62, 80, False),
            (80, 98, False),
        ]
        assert sector.filled_radius == 35

    def test_no_reversed_arcs_when_bands_have_gaps(self):
        # At large sizes bands are thinner than two grade steps
        [sector] = _wheel(2, size=1000).sectors
        assert len(sector.filled_arcs) == 1
        assert all(a.inner_radius < a.outer_radius for a in sector.arcs)

    def test_grade_ten_large_size_fills_every_band(self):
        [sector] = _wheel(10, size=1000).sectors
        assert len(sector.filled_arcs) == 5
        assert len(sector.arcs) == 5

    def test_invalid_grade(self):
        with pytest.raises(ValueError):
            _wheel(11)

    def test_invalid_color(self):
        with pytest.raises(ValueError):
            _wheel(5, color="not-a-color")


class TestColors:
    def test_ladder_is_fixed_table(self):
        assert WHITE_MIX_BY_BAND == (0.8, 0.55, 0.35, 0.175)

    def test_band_colors(self):
        assert [band_color(b, "#ff0000") for b in range(5)] == [
            "#ffcccc", "#ff8c8c", "#ff5959", "#ff2d2d", "#ff0000",
        ]

    def test_colors_fade_outward(self):
        [sector] = _wheel(10).sectors
        assert [a.fill for a in sector.arcs] == [band_color(b, "#ff0000") for b in range(5)]

    def test_named_color(self):
        assert mix_with_white("black", 0.5) == "#808080"
        assert band_color(4, "blue") == "#0000ff"

    def test_output_is_lowercase_hex(self):
        assert band_color(4, "#FF8000") == "#ff8000"
        assert band_color(4, "rgb(255, 128, 0)") == "#ff8000"
        assert band_color(0, "#FF0000") == "#ffcccc"


class TestLabels:
    def test_view_tier_has_labels(self):
        geometry = _wheel(5, 5, 5, 5)
        label = geometry.sectors[0].label
        assert label.text == "S0"
        assert label.font_size == "1.5em"
        # First quarter sits upper right of the center
        assert label.x > 0 and label.y < 0
        assert math.hypot(label.x, label.y) == pytest.approx(53)

    @pytest.mark.parametrize("size_kind", [SizeKind.AVATAR, SizeKind.SELECT])
    def test_small_tiers_have_no_labels(self, size_kind):
        geometry = _wheel(5, 5, size_kind=size_kind)
        assert all(s.label is None for s in geometry.sectors)


class TestInputs:
    def test_deterministic(self):
        first = compute_wheel_geometry([{"grade": 10, "color": "#ff0000"}], 200)
        second = compute_wheel_geometry([{"grade": 10, "color": "#ff0000"}], 200)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_accepts_graded_slices(self):
        graded = [
            GradedSlice(slice=Slice(name="Deep Focus", color="#00ff00"), grade=4),
            Slice(name="Calm", color="#0000ff").graded(),
        ]
        geometry = compute_wheel_geometry(graded, 300)
        assert [s.key for s in geometry.sectors] == ["deep_focus", "calm"]
        assert [s.grade for s in geometry.sectors] == [4, 10]

    def test_unnamed_slices_get_positional_keys(self):
        geometry = compute_wheel_geometry([{"grade": 1, "color": "#fff"}] * 2, 100)
        assert [s.key for s in geometry.sectors] == ["slice_0", "slice_1"]

    def test_empty(self):
        assert compute_wheel_geometry([], 200).sectors == ()
