"""
Size tiers for wheel rendering.

A wheel is drawn at one of four tiers. Avatar is a fixed thumbnail; the
others scale with the viewport. Only the two large tiers carry text labels.
"""

from enum import StrEnum
from typing import Optional

from ..config import AVATAR_SIZE


class SizeKind(StrEnum):
    AVATAR = "avatar"
    SELECT = "select"
    FULL = "full"
    VIEW = "view"


def view_size(width: float, height: float) -> float:
    """Largest square the viewport comfortably holds beside other content."""
    if width > height:
        return min(height, 0.5 * width)
    return min(width, 0.5 * height)


def pixel_size(kind: SizeKind, width: float, height: float) -> float:
    """Pixel size of a tier for a viewport of width x height."""
    if kind == SizeKind.AVATAR:
        return AVATAR_SIZE
    if kind == SizeKind.SELECT:
        return view_size(width, height) * 0.3
    if kind == SizeKind.FULL:
        return view_size(width, height) * 0.8
    return view_size(width, height)


def font_size(kind: SizeKind) -> Optional[str]:
    """Label font size, or None where the tier is too small for text."""
    return {
        SizeKind.AVATAR: None,
        SizeKind.SELECT: None,
        SizeKind.FULL: "1.25em",
        SizeKind.VIEW: "1.5em",
    }[kind]


def is_dynamic(kind: SizeKind) -> bool:
    """Whether the tier follows viewport resizes."""
    return kind != SizeKind.AVATAR
