# region_annote/widgets/progress_bar.py
from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import QRect, QSize
from PyQt5.QtGui import QColor, QPainter
from PyQt5.QtWidgets import QSizePolicy, QWidget

from ..domain import DEFAULT_ANNOTATION_COLOR


class PlaybackProgressBar(QWidget):
    """
    Thin read-only progress track with an optional start-time marker.

    Values are fractions in [0, 1] computed by active_set.progress_fraction /
    marker_fraction; this widget only maps them to pixels.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        self._progress: float = 0.0
        self._marker: Optional[float] = None
        self._color_hex = DEFAULT_ANNOTATION_COLOR

        self._track_h = 4
        self._marker_w = 4
        self._marker_h = 12

    def sizeHint(self) -> QSize:
        return QSize(400, self._marker_h + 2)

    def set_color(self, color_hex: str) -> None:
        self._color_hex = color_hex or DEFAULT_ANNOTATION_COLOR
        self.update()

    def set_progress(self, fraction: float) -> None:
        self._progress = max(0.0, min(float(fraction), 1.0))
        self.update()

    def set_marker(self, fraction: Optional[float]) -> None:
        self._marker = None if fraction is None else max(0.0, min(float(fraction), 1.0))
        self.update()

    def _fraction_to_x(self, fraction: float) -> int:
        w = max(1, self.width())
        return int(round(fraction * w))

    def paintEvent(self, event):
        painter = QPainter(self)

        bottom = self.height()
        track = QRect(0, bottom - self._track_h, self.width(), self._track_h)
        painter.fillRect(track, QColor("#525252"))

        played = QRect(0, track.top(), self._fraction_to_x(self._progress), self._track_h)
        if played.width() > 0:
            painter.fillRect(played, QColor(self._color_hex))

        if self._marker is not None:
            x = min(self._fraction_to_x(self._marker), max(0, self.width() - self._marker_w))
            painter.fillRect(QRect(x, bottom - self._marker_h, self._marker_w, self._marker_h), QColor(self._color_hex))

        painter.end()
