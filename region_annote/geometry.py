# region_annote/geometry.py
from __future__ import annotations

from dataclasses import dataclass, replace

from .domain import Rectangle


@dataclass(frozen=True)
class Box:
    """Normalized rectangle for drawing: top-left corner plus size."""
    left: float
    top: float
    width: float
    height: float


def begin(x: float, y: float) -> Rectangle:
    """Zero-area rectangle at the drag origin."""
    return Rectangle(start_x=x, start_y=y, end_x=x, end_y=y)


def extend(rect: Rectangle, x: float, y: float) -> Rectangle:
    """Move the drag end to (x, y); the origin is kept."""
    return replace(rect, end_x=x, end_y=y)


def normalize(rect: Rectangle) -> Box:
    return Box(
        left=min(rect.start_x, rect.end_x),
        top=min(rect.start_y, rect.end_y),
        width=abs(rect.end_x - rect.start_x),
        height=abs(rect.end_y - rect.start_y),
    )
