# region_annote/lifecycle.py
"""
Annotation lifecycle: the state machine that turns pointer gestures into
committed annotations.

    Idle --pointer_down--> Drawing --pointer_up/leave--> PendingComment --commit--> Idle

Every transition method returns a Transition. A refused transition carries a
Rejection reason and leaves the draft untouched; nothing is raised for
ordinary guard failures so the UI can simply disable the matching action.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from . import geometry
from .domain import Annotation, AnnotationStore, Draft, DraftMode
from .logging_config import get_logger
from .playback import PlaybackGateway
from .timeutils import decode_timestamp, encode_timestamp

logger = get_logger(__name__)

AnnotationSink = Callable[[Annotation], None]


class Rejection(str, Enum):
    NOT_DRAWING = "not_drawing"
    NO_RECTANGLE = "no_rectangle"
    NO_START_TIME = "no_start_time"
    EMPTY_COMMENT = "empty_comment"
    NOT_PENDING = "not_pending"


@dataclass(frozen=True)
class Transition:
    mode: DraftMode
    rejection: Optional[Rejection] = None
    annotation: Optional[Annotation] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


def _new_id() -> str:
    return uuid.uuid4().hex


class AnnotationLifecycle:
    """
    Owns the Draft and the AnnotationStore; the only writer of either.
    """

    def __init__(
        self,
        gateway: PlaybackGateway,
        store: Optional[AnnotationStore] = None,
        sinks: Iterable[AnnotationSink] = (),
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.gateway = gateway
        self.store = store if store is not None else AnnotationStore()
        self._draft = Draft()
        self._sinks: List[AnnotationSink] = list(sinks)
        self._id_factory = id_factory or _new_id
        self._listeners: List[Callable[[Transition], None]] = []

    # ---------------- Read access ----------------

    @property
    def mode(self) -> DraftMode:
        return self._draft.mode

    @property
    def draft(self) -> Draft:
        """A copy of the current draft; mutate only through transitions."""
        d = self._draft
        return Draft(mode=d.mode, rectangle=d.rectangle, start_time=d.start_time,
                     end_time=d.end_time, comment=d.comment)

    def add_sink(self, sink: AnnotationSink) -> None:
        self._sinks.append(sink)

    def subscribe(self, fn: Callable[[Transition], None]) -> None:
        self._listeners.append(fn)

    # ---------------- Pointer transitions ----------------

    def pointer_down(self, x: float, y: float) -> Transition:
        if self._draft.mode is not DraftMode.IDLE:
            logger.debug("Restarting draft from %s", self._draft.mode.value)
        d = self._draft
        d.rectangle = geometry.begin(x, y)
        d.start_time = encode_timestamp(self.gateway.current_time)
        d.end_time = None
        d.comment = ""
        d.mode = DraftMode.DRAWING
        logger.debug("Drawing started at (%s, %s), start=%s", x, y, d.start_time)
        return self._accept()

    def pointer_move(self, x: float, y: float) -> Transition:
        d = self._draft
        if d.mode is not DraftMode.DRAWING:
            return self._reject(Rejection.NOT_DRAWING)
        if d.rectangle is None:
            return self._reject(Rejection.NO_RECTANGLE)
        d.rectangle = geometry.extend(d.rectangle, x, y)
        return self._accept()

    def pointer_up(self) -> Transition:
        d = self._draft
        if d.mode is not DraftMode.DRAWING:
            return self._reject(Rejection.NOT_DRAWING)
        if d.rectangle is None:
            return self._reject(Rejection.NO_RECTANGLE)
        d.mode = DraftMode.PENDING_COMMENT
        # Drawing interrupts playback so the end time can be set precisely.
        self.gateway.pause()
        logger.debug("Rectangle closed: %s", d.rectangle)
        return self._accept()

    def pointer_leave(self) -> Transition:
        return self.pointer_up()

    # ---------------- Pending-comment edits ----------------

    def scrub_bounds(self) -> Tuple[float, float]:
        """Allowed end-time range in seconds: [decoded start time, duration]."""
        lo = decode_timestamp(self._draft.start_time) if self._draft.start_time else 0.0
        hi = max(lo, float(self.gateway.duration))
        return (lo, hi)

    def set_end_time(self, seconds: float) -> Transition:
        d = self._draft
        if d.mode is not DraftMode.PENDING_COMMENT:
            return self._reject(Rejection.NOT_PENDING)
        lo, hi = self.scrub_bounds()
        value = max(lo, min(float(seconds), hi))
        d.end_time = encode_timestamp(value)
        return self._accept()

    def set_comment(self, text: str) -> Transition:
        d = self._draft
        if d.mode is not DraftMode.PENDING_COMMENT:
            return self._reject(Rejection.NOT_PENDING)
        d.comment = text or ""
        return self._accept()

    def effective_end_time(self) -> str:
        """End time the commit would use right now."""
        if self._draft.end_time:
            return self._draft.end_time
        return encode_timestamp(self.gateway.current_time)

    # ---------------- Commit / discard ----------------

    def _commit_guard(self) -> Optional[Rejection]:
        d = self._draft
        if d.mode is not DraftMode.PENDING_COMMENT:
            return Rejection.NOT_PENDING
        if d.rectangle is None:
            return Rejection.NO_RECTANGLE
        if not d.start_time:
            return Rejection.NO_START_TIME
        if not d.comment:
            return Rejection.EMPTY_COMMENT
        return None

    def can_commit(self) -> bool:
        return self._commit_guard() is None

    def commit(self) -> Transition:
        reason = self._commit_guard()
        if reason is not None:
            return self._reject(reason)

        d = self._draft
        annotation = Annotation(
            id=self._id_factory(),
            start_time=d.start_time,
            end_time=self.effective_end_time(),
            shape=d.rectangle,
            comment=d.comment,
        )
        if decode_timestamp(annotation.end_time) < decode_timestamp(annotation.start_time):
            logger.warning(
                "Annotation %s ends before it starts (%s > %s); it will never be active",
                annotation.id, annotation.start_time, annotation.end_time,
            )

        self.store.append(annotation)
        d.reset()
        logger.info("Committed annotation %s [%s - %s]", annotation.id, annotation.start_time, annotation.end_time)

        result = Transition(mode=d.mode, annotation=annotation)
        self._notify(result)
        for sink in list(self._sinks):
            sink(annotation)
        return result

    def discard(self) -> Transition:
        if self._draft.mode is not DraftMode.IDLE:
            logger.debug("Draft discarded from %s", self._draft.mode.value)
        self._draft.reset()
        return self._accept()

    # ---------------- Internals ----------------

    def _accept(self) -> Transition:
        result = Transition(mode=self._draft.mode)
        self._notify(result)
        return result

    def _reject(self, reason: Rejection) -> Transition:
        logger.debug("Rejected in %s: %s", self._draft.mode.value, reason.value)
        return Transition(mode=self._draft.mode, rejection=reason)

    def _notify(self, result: Transition) -> None:
        for fn in list(self._listeners):
            fn(result)
