# region_annote/widgets/comment_panel.py
from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..domain import DEFAULT_SCRUB_STEP


class CommentPanel(QGroupBox):
    """
    Shown while a closed rectangle waits for its comment.

    The end-time slider works in integer steps of `step` seconds over
    [lo, hi]; values go out as seconds. Programmatic updates never echo
    back through the signals.
    """

    end_time_changed = pyqtSignal(float)   # seconds
    comment_changed = pyqtSignal(str)
    post_requested = pyqtSignal()
    cancel_requested = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__("Time Range", parent)

        self._lo: float = 0.0
        self._step: float = DEFAULT_SCRUB_STEP
        self._ignore_updates = False

        lay = QVBoxLayout(self)
        lay.setContentsMargins(8, 8, 8, 8)

        row = QHBoxLayout()
        self.start_label = QLabel("-")
        self.end_slider = QSlider(Qt.Horizontal)
        self.end_slider.setRange(0, 0)
        self.end_slider.valueChanged.connect(self._on_slider_value)
        self.end_label = QLabel("-")
        row.addWidget(self.start_label)
        row.addWidget(QLabel("-"))
        row.addWidget(self.end_slider, stretch=1)
        row.addWidget(self.end_label)
        lay.addLayout(row)

        row2 = QHBoxLayout()
        self.comment_edit = QLineEdit()
        self.comment_edit.setPlaceholderText("Add your comment...")
        self.comment_edit.textChanged.connect(self._on_text_changed)
        self.comment_edit.returnPressed.connect(self.post_requested.emit)
        self.btn_post = QPushButton("Post")
        self.btn_post.setEnabled(False)
        self.btn_post.clicked.connect(self.post_requested.emit)
        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(self.cancel_requested.emit)
        row2.addWidget(self.comment_edit, stretch=1)
        row2.addWidget(self.btn_post)
        row2.addWidget(self.btn_cancel)
        lay.addLayout(row2)

    # ---------------- Public API ----------------

    def set_range(self, lo: float, hi: float, step: float) -> None:
        self._lo = float(lo)
        self._step = float(step) if step and step > 0 else DEFAULT_SCRUB_STEP
        steps = int(round(max(0.0, float(hi) - self._lo) / self._step))
        self._ignore_updates = True
        try:
            self.end_slider.setRange(0, steps)
        finally:
            self._ignore_updates = False

    def set_end_seconds(self, seconds: float) -> None:
        v = int(round((float(seconds) - self._lo) / self._step))
        self._ignore_updates = True
        try:
            self.end_slider.setValue(max(self.end_slider.minimum(), min(v, self.end_slider.maximum())))
        finally:
            self._ignore_updates = False

    def set_labels(self, start_text: str, end_text: str) -> None:
        self.start_label.setText(start_text or "-")
        self.end_label.setText(end_text or "-")

    def set_comment(self, text: str) -> None:
        if self.comment_edit.text() == (text or ""):
            return
        self._ignore_updates = True
        try:
            self.comment_edit.setText(text or "")
        finally:
            self._ignore_updates = False

    def set_can_post(self, ok: bool) -> None:
        self.btn_post.setEnabled(bool(ok))

    def focus_comment(self) -> None:
        self.comment_edit.setFocus(Qt.OtherFocusReason)

    # ---------------- Handlers ----------------

    def _on_slider_value(self, v: int) -> None:
        if self._ignore_updates:
            return
        self.end_time_changed.emit(self._lo + int(v) * self._step)

    def _on_text_changed(self, text: str) -> None:
        if self._ignore_updates:
            return
        self.comment_changed.emit(text)
