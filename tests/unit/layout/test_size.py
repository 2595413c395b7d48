"""Unit tests for size tiers."""

import pytest

from slicewheel.layout.size import SizeKind, font_size, is_dynamic, pixel_size, view_size


class TestSizeTiers:
    def test_view_size_landscape(self):
        assert view_size(1000, 800) == 500

    def test_view_size_portrait(self):
        assert view_size(400, 1000) == 400

    @pytest.mark.parametrize("kind,expected", [
        (SizeKind.AVATAR, 50),
        (SizeKind.SELECT, 150),
        (SizeKind.FULL, 400),
        (SizeKind.VIEW, 500),
    ])
    def test_pixel_size(self, kind, expected):
        assert pixel_size(kind, 1000, 800) == pytest.approx(expected)

    def test_font_sizes(self):
        assert font_size(SizeKind.AVATAR) is None
        assert font_size(SizeKind.SELECT) is None
        assert font_size(SizeKind.FULL) == "1.25em"
        assert font_size(SizeKind.VIEW) == "1.5em"

    def test_only_avatar_is_static(self):
        assert not is_dynamic(SizeKind.AVATAR)
        assert all(is_dynamic(k) for k in SizeKind if k != SizeKind.AVATAR)
