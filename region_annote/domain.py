# region_annote/domain.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .timeutils import decode_timestamp


DEFAULT_ANNOTATION_COLOR = "#F97316"
DEFAULT_SCRUB_STEP = 0.01


def _coord(v) -> float:
    # JSON numbers are kept as given so ints reload as ints
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise TypeError(f"coordinate must be a number, got {v!r}")
    return v


# -----------------------------
# Core Dataclasses
# -----------------------------

@dataclass(frozen=True)
class Rectangle:
    """
    Raw pointer-space rectangle in capture order.

    Start is where the drag began and end is the latest pointer position, so
    start_x may exceed end_x. Normalization happens only at render time.
    """
    start_x: float
    start_y: float
    end_x: float
    end_y: float

    def to_dict(self) -> Dict:
        return {
            "startX": self.start_x,
            "startY": self.start_y,
            "endX": self.end_x,
            "endY": self.end_y,
        }

    @staticmethod
    def from_dict(d: Dict) -> "Rectangle":
        return Rectangle(
            start_x=_coord(d["startX"]),
            start_y=_coord(d["startY"]),
            end_x=_coord(d["endX"]),
            end_y=_coord(d["endY"]),
        )


@dataclass(frozen=True)
class Annotation:
    """
    A committed, time-bounded region with a comment.
    start_time/end_time are "M:SS:CC" timestamp strings.
    """
    id: str
    start_time: str
    end_time: str
    shape: Rectangle
    comment: str

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "shape": self.shape.to_dict(),
            "comment": self.comment,
        }

    @staticmethod
    def from_dict(d: Dict) -> "Annotation":
        comment = d["comment"]
        if not isinstance(comment, str) or not comment:
            raise ValueError("annotation comment must be a non-empty string")
        start_time, end_time = d["startTime"], d["endTime"]
        # Raises TimestampParseError (a ValueError) for unreadable times
        decode_timestamp(start_time)
        decode_timestamp(end_time)
        return Annotation(
            id=str(d["id"]),
            start_time=start_time,
            end_time=end_time,
            shape=Rectangle.from_dict(d["shape"]),
            comment=comment,
        )


class DraftMode(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    PENDING_COMMENT = "pending_comment"


@dataclass
class Draft:
    """
    The single in-progress annotation. Only the lifecycle mutates it.
    """
    mode: DraftMode = DraftMode.IDLE
    rectangle: Optional[Rectangle] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    comment: str = ""

    def reset(self) -> None:
        self.mode = DraftMode.IDLE
        self.rectangle = None
        self.start_time = None
        self.end_time = None
        self.comment = ""


class AnnotationStore:
    """
    Append-only, ordered list of committed annotations for one session.
    """

    def __init__(self, annotations: Optional[List[Annotation]] = None):
        self._items: List[Annotation] = []
        self._ids = set()
        for a in (annotations or []):
            self.append(a)

    def append(self, annotation: Annotation) -> None:
        if annotation.id in self._ids:
            raise ValueError(f"duplicate annotation id: {annotation.id}")
        self._items.append(annotation)
        self._ids.add(annotation.id)

    def snapshot(self) -> Tuple[Annotation, ...]:
        return tuple(self._items)

    def ids(self) -> List[str]:
        return [a.id for a in self._items]

    def __contains__(self, annotation_id: object) -> bool:
        return annotation_id in self._ids

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(tuple(self._items))


# -----------------------------
# Config payload
# -----------------------------

@dataclass
class AppConfig:
    """
    Stored in the JSON file passed with --config.
    """
    annotations_file: str = ""
    draft_color: str = DEFAULT_ANNOTATION_COLOR
    annotation_color: str = DEFAULT_ANNOTATION_COLOR
    scrub_step: float = DEFAULT_SCRUB_STEP
    log_file: str = ""

    def to_dict(self) -> Dict:
        return {
            "annotations_file": self.annotations_file,
            "draft_color": self.draft_color,
            "annotation_color": self.annotation_color,
            "scrub_step": float(self.scrub_step),
            "log_file": self.log_file,
            "config_version": 1,
        }

    @staticmethod
    def from_dict(d: Dict) -> "AppConfig":
        step = float(d.get("scrub_step", DEFAULT_SCRUB_STEP) or DEFAULT_SCRUB_STEP)
        if step <= 0:
            step = DEFAULT_SCRUB_STEP
        return AppConfig(
            annotations_file=str(d.get("annotations_file") or ""),
            draft_color=str(d.get("draft_color") or DEFAULT_ANNOTATION_COLOR),
            annotation_color=str(d.get("annotation_color") or DEFAULT_ANNOTATION_COLOR),
            scrub_step=step,
            log_file=str(d.get("log_file") or ""),
        )
