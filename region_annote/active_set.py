# region_annote/active_set.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .domain import Annotation, Draft
from .geometry import Box, normalize
from .timeutils import decode_timestamp


# -----------------------------
# Active-set resolution
# -----------------------------

def is_active(annotation: Annotation, current_time: float) -> bool:
    start = decode_timestamp(annotation.start_time)
    end = decode_timestamp(annotation.end_time)
    return start <= float(current_time) <= end


def resolve_active(current_time: float, annotations: Iterable[Annotation]) -> List[Annotation]:
    """
    Annotations whose [start, end] interval contains current_time, in store
    order. An interval whose end decodes before its start is never active.
    """
    return [a for a in annotations if is_active(a, current_time)]


@dataclass(frozen=True)
class OverlayFrame:
    """Everything the drawing overlay needs for one repaint."""
    active: Tuple[Annotation, ...]
    boxes: Tuple[Box, ...]
    draft_box: Optional[Box] = None


def build_overlay(current_time: float, annotations: Iterable[Annotation], draft: Optional[Draft]) -> OverlayFrame:
    """
    Active annotations as normalized boxes, plus the draft rectangle (if any)
    which is shown regardless of time since it has no committed interval yet.
    """
    active = tuple(resolve_active(current_time, annotations))
    boxes = tuple(normalize(a.shape) for a in active)
    draft_box = None
    if draft is not None and draft.rectangle is not None:
        draft_box = normalize(draft.rectangle)
    return OverlayFrame(active=active, boxes=boxes, draft_box=draft_box)


# -----------------------------
# Progress bar positions
# -----------------------------

def progress_fraction(current_time: float, duration: float) -> float:
    """Played share of the media in [0, 1]; 0 while the duration is unknown."""
    if not duration or duration <= 0:
        return 0.0
    return max(0.0, min(float(current_time) / float(duration), 1.0))


def marker_fraction(timestamp: str, duration: float) -> float:
    """Position of a timestamp string on the progress bar in [0, 1]."""
    return progress_fraction(decode_timestamp(timestamp), duration)
