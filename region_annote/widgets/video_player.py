# region_annote/widgets/video_player.py
from __future__ import annotations

import os
from typing import Optional

from PyQt5.QtCore import QSize, QUrl, pyqtSignal
from PyQt5.QtMultimedia import QMediaContent, QMediaPlayer
from PyQt5.QtMultimediaWidgets import QVideoWidget
from PyQt5.QtWidgets import QSizePolicy, QWidget

from ..logging_config import get_logger
from ..playback import PlayerBackend
from ..timeutils import ms_to_seconds, seconds_to_ms

logger = get_logger(__name__)


class VideoPlayer(QWidget):
    """
    One QMediaPlayer + QVideoWidget, with an optional overlay widget kept
    stacked on top of the video at the same geometry.

    Reports the player clock in seconds so the PlaybackGateway never sees ms.
    """

    # Current position (seconds)
    position_changed = pyqtSignal(float)
    # Media duration (seconds), only emitted once it is known (> 0)
    duration_changed = pyqtSignal(float)
    # Emitted when the media reaches its end by itself
    ended = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.video = QVideoWidget(self)
        self.video.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setStyleSheet("background-color: black;")

        self._overlay: Optional[QWidget] = None

        self._player = QMediaPlayer(None, QMediaPlayer.VideoSurface)
        self._player.setVideoOutput(self.video)
        self._player.setNotifyInterval(50)
        self._player.positionChanged.connect(self._on_position_changed)
        self._player.durationChanged.connect(self._on_duration_changed)
        self._player.mediaStatusChanged.connect(self._on_media_status)
        self._player.error.connect(self._on_error)

    # ---------------- Public API ----------------

    def load(self, path: str) -> bool:
        if not path or not os.path.exists(path):
            logger.error("Video not found: %s", path)
            self._player.setMedia(QMediaContent())
            return False
        self._player.setMedia(QMediaContent(QUrl.fromLocalFile(os.path.abspath(path))))
        # Show the first frame without starting playback.
        self._player.play()
        self._player.pause()
        logger.info("Loaded video %s", path)
        return True

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def set_position(self, seconds: float) -> None:
        self._player.setPosition(seconds_to_ms(seconds))

    def set_overlay(self, overlay: QWidget) -> None:
        self._overlay = overlay
        overlay.setParent(self)
        overlay.setGeometry(self.rect())
        overlay.raise_()
        overlay.show()

    def sizeHint(self) -> QSize:
        return QSize(960, 540)

    def resizeEvent(self, event):
        self.video.setGeometry(self.rect())
        if self._overlay is not None:
            self._overlay.setGeometry(self.rect())
            self._overlay.raise_()
        return super().resizeEvent(event)

    # ---------------- Player signal handlers ----------------

    def _on_position_changed(self, pos_ms: int) -> None:
        self.position_changed.emit(ms_to_seconds(pos_ms))

    def _on_duration_changed(self, dur_ms: int) -> None:
        if int(dur_ms or 0) > 0:
            self.duration_changed.emit(ms_to_seconds(dur_ms))

    def _on_media_status(self, status) -> None:
        if status == QMediaPlayer.EndOfMedia:
            self.ended.emit()
        elif status == QMediaPlayer.InvalidMedia:
            logger.error("Media could not be decoded")

    def _on_error(self, _err) -> None:
        logger.error("Player error: %s", self._player.errorString())


class QtPlayerBackend(PlayerBackend):
    """Adapts a VideoPlayer widget to the gateway's backend interface."""

    def __init__(self, player: VideoPlayer):
        self._player = player

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()
