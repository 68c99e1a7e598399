# region_annote/playback.py
from __future__ import annotations

import math
from typing import Callable, List, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


class PlayerBackend:
    """
    What the gateway needs from a real player. The Qt VideoPlayer widget
    implements this; tests use a recording fake.
    """

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError


class PlaybackGateway:
    """
    Facade over the external video player.

    Commands flow out (play/pause); time, duration and end-of-media flow in
    through the on_* callbacks. is_playing is local state, but on_ended()
    clears it so it cannot stay True after the media finishes by itself.
    """

    def __init__(self, backend: Optional[PlayerBackend] = None):
        self._backend = backend
        self._current_time: float = 0.0
        self._duration: float = 0.0
        self._is_playing: bool = False

        self._time_listeners: List[Callable[[float], None]] = []
        self._duration_listeners: List[Callable[[float], None]] = []
        self._state_listeners: List[Callable[[bool], None]] = []

    # ---------------- Wiring ----------------

    def attach(self, backend: PlayerBackend) -> None:
        self._backend = backend

    def add_time_listener(self, fn: Callable[[float], None]) -> None:
        self._time_listeners.append(fn)

    def add_duration_listener(self, fn: Callable[[float], None]) -> None:
        self._duration_listeners.append(fn)

    def add_state_listener(self, fn: Callable[[bool], None]) -> None:
        self._state_listeners.append(fn)

    # ---------------- State ----------------

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    # ---------------- Commands ----------------

    def play(self) -> None:
        if self._backend is not None:
            self._backend.play()
        self._set_playing(True)

    def pause(self) -> None:
        if self._backend is not None:
            self._backend.pause()
        self._set_playing(False)

    def toggle_play_pause(self) -> bool:
        if self._is_playing:
            self.pause()
        else:
            self.play()
        return self._is_playing

    # ---------------- Player callbacks ----------------

    def on_time_update(self, seconds: float) -> None:
        t = float(seconds)
        if math.isnan(t) or t < 0:
            raise ValueError(f"playback time must be >= 0, got {seconds!r}")
        self._current_time = t
        for fn in list(self._time_listeners):
            fn(t)

    def on_duration_known(self, seconds: float) -> None:
        d = float(seconds)
        if math.isnan(d) or d <= 0:
            raise ValueError(f"duration must be > 0, got {seconds!r}")
        self._duration = d
        logger.debug("Duration known: %.3fs", d)
        for fn in list(self._duration_listeners):
            fn(d)

    def on_ended(self) -> None:
        logger.debug("Playback ended at %.3fs", self._current_time)
        self._set_playing(False)

    def _set_playing(self, playing: bool) -> None:
        if playing == self._is_playing:
            return
        self._is_playing = playing
        for fn in list(self._state_listeners):
            fn(playing)
