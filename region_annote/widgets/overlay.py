# region_annote/widgets/overlay.py
from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import Qt, QRectF, pyqtSignal
from PyQt5.QtGui import QColor, QFontMetrics, QPainter, QPen
from PyQt5.QtWidgets import QWidget

from ..active_set import OverlayFrame
from ..domain import DEFAULT_ANNOTATION_COLOR
from ..geometry import Box


class DrawingOverlay(QWidget):
    """
    Transparent layer over the video.

    Forwards pointer gestures in overlay-local pixels and paints whatever
    OverlayFrame it was last given: the active annotations plus the draft.
    It keeps no annotation state of its own.
    """

    pressed = pyqtSignal(float, float)
    moved = pyqtSignal(float, float)
    released = pyqtSignal()
    left = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_NoSystemBackground, True)
        self.setCursor(Qt.CrossCursor)

        self._frame: Optional[OverlayFrame] = None
        self._draft_color = DEFAULT_ANNOTATION_COLOR
        self._annotation_color = DEFAULT_ANNOTATION_COLOR
        self._button_down = False

    # ---------------- Public API ----------------

    def set_colors(self, draft_hex: str, annotation_hex: str) -> None:
        self._draft_color = draft_hex or DEFAULT_ANNOTATION_COLOR
        self._annotation_color = annotation_hex or DEFAULT_ANNOTATION_COLOR
        self.update()

    def set_frame(self, frame: Optional[OverlayFrame]) -> None:
        self._frame = frame
        self.update()

    # ---------------- Pointer ----------------

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)
        self._button_down = True
        self.pressed.emit(float(event.x()), float(event.y()))
        event.accept()

    def mouseMoveEvent(self, event):
        if self._button_down:
            self.moved.emit(float(event.x()), float(event.y()))
            event.accept()
            return
        return super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton and self._button_down:
            self._button_down = False
            self.released.emit()
            event.accept()
            return
        return super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        # Leaving the video area closes the rectangle just like a release.
        self._button_down = False
        self.left.emit()
        return super().leaveEvent(event)

    # ---------------- Painting ----------------

    def _box_rect(self, box: Box) -> QRectF:
        return QRectF(float(box.left), float(box.top), float(box.width), float(box.height))

    def paintEvent(self, event):
        if self._frame is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        fm = QFontMetrics(self.font())

        fill = QColor(self._annotation_color)
        fill.setAlpha(40)
        for annotation, box in zip(self._frame.active, self._frame.boxes):
            rect = self._box_rect(box)
            painter.fillRect(rect, fill)
            painter.setPen(QPen(QColor(self._annotation_color), 2))
            painter.drawRect(rect)

            # Comment label above the box (inside if there is no room)
            text = fm.elidedText(annotation.comment, Qt.ElideRight, max(60, int(box.width)))
            y = rect.top() - 4 if rect.top() > fm.height() else rect.top() + fm.ascent() + 2
            painter.setPen(QPen(QColor("#ffffff"), 1))
            painter.drawText(int(rect.left()) + 2, int(y), text)

        if self._frame.draft_box is not None:
            painter.setPen(QPen(QColor(self._draft_color), 2))
            painter.drawRect(self._box_rect(self._frame.draft_box))

        painter.end()
