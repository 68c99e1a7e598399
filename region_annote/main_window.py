# region_annote/main_window.py
from __future__ import annotations

import os
from typing import List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QShortcut,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from .active_set import build_overlay, marker_fraction, progress_fraction
from .domain import Annotation, AnnotationStore, AppConfig, DraftMode
from .lifecycle import AnnotationLifecycle, Transition
from .logging_config import get_logger
from .persistence import JsonFileSink, LoggingSink, load_annotations
from .playback import PlaybackGateway
from .timeutils import format_clock
from .widgets.annotations_table import AnnotationsTable
from .widgets.comment_panel import CommentPanel
from .widgets.overlay import DrawingOverlay
from .widgets.progress_bar import PlaybackProgressBar
from .widgets.video_player import QtPlayerBackend, VideoPlayer

logger = get_logger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, video_path: Optional[str] = None, cfg: Optional[AppConfig] = None):
        super().__init__()
        self.setWindowTitle("Region-Annote (Video Region Annotator)")
        self.resize(1200, 900)

        self.cfg: AppConfig = cfg or AppConfig()
        self.video_path: Optional[str] = None

        # Panel update guard
        self._ignore_panel_updates = False

        self._build_ui()

        # Core: gateway + lifecycle. The lifecycle is the only writer of the draft/store.
        self.gateway = PlaybackGateway(QtPlayerBackend(self.player))
        existing = self._load_existing_annotations()
        sinks: List = [LoggingSink()]
        if self.cfg.annotations_file:
            sinks.append(JsonFileSink(self.cfg.annotations_file, existing=existing))
        self.lifecycle = AnnotationLifecycle(self.gateway, store=AnnotationStore(existing), sinks=sinks)

        self._wire()
        self.table.set_records(self.lifecycle.store.snapshot())

        if video_path:
            self.open_video(video_path)
        self._refresh()

    # ---------------- UI ----------------

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)

        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(6, 6, 6, 6)
        main_layout.setSpacing(6)

        splitter = QSplitter(Qt.Vertical)
        main_layout.addWidget(splitter, stretch=1)

        # ===== Video + overlay + progress =====
        video_box = QWidget()
        video_lay = QVBoxLayout(video_box)
        video_lay.setContentsMargins(0, 0, 0, 0)
        video_lay.setSpacing(0)

        self.player = VideoPlayer()
        self.overlay = DrawingOverlay()
        self.overlay.set_colors(self.cfg.draft_color, self.cfg.annotation_color)
        self.player.set_overlay(self.overlay)
        video_lay.addWidget(self.player, stretch=1)

        self.progress = PlaybackProgressBar()
        self.progress.set_color(self.cfg.annotation_color)
        video_lay.addWidget(self.progress)

        # ===== Controls =====
        controls = QHBoxLayout()
        self.btn_play = QPushButton("Play")
        self.timeline_label = QLabel("0:00 / 0:00")
        self.status_label = QLabel("Drag on the video to mark a region.")
        controls.addWidget(self.btn_play)
        controls.addWidget(self.timeline_label)
        controls.addStretch(1)
        controls.addWidget(self.status_label)
        video_lay.addLayout(controls)

        # ===== Comment panel (pending draft) =====
        self.comment_panel = CommentPanel()
        self.comment_panel.setVisible(False)
        video_lay.addWidget(self.comment_panel)

        splitter.addWidget(video_box)

        # ===== Committed annotations =====
        self.table = AnnotationsTable()
        splitter.addWidget(self.table)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)

    def _wire(self):
        # Player -> gateway
        self.player.position_changed.connect(self.gateway.on_time_update)
        self.player.duration_changed.connect(self.gateway.on_duration_known)
        self.player.ended.connect(self.gateway.on_ended)

        self.gateway.add_time_listener(lambda _t: self._refresh())
        self.gateway.add_duration_listener(lambda _d: self._refresh())
        self.gateway.add_state_listener(lambda _p: self._update_play_button())

        # Pointer -> lifecycle
        self.overlay.pressed.connect(self.lifecycle.pointer_down)
        self.overlay.moved.connect(self.lifecycle.pointer_move)
        self.overlay.released.connect(self.lifecycle.pointer_up)
        self.overlay.left.connect(self.lifecycle.pointer_leave)

        # Panel -> lifecycle
        self.comment_panel.end_time_changed.connect(self._on_end_time_changed)
        self.comment_panel.comment_changed.connect(self._on_comment_changed)
        self.comment_panel.post_requested.connect(self._post)
        self.comment_panel.cancel_requested.connect(self._cancel_draft)

        self.lifecycle.subscribe(self._on_transition)

        self.btn_play.clicked.connect(self._toggle_play_pause)
        self.table.seek_requested.connect(self.player.set_position)

        QShortcut(QKeySequence(Qt.Key_Escape), self, activated=self._cancel_draft)

    # ---------------- Video ----------------

    def open_video(self, path: str) -> None:
        if not self.player.load(path):
            QMessageBox.warning(self, "Video not found", f"Could not open video:\n{path}")
            return
        self.video_path = path
        self.setWindowTitle(f"Region-Annote - {os.path.basename(path)}")

    def _load_existing_annotations(self) -> List[Annotation]:
        path = self.cfg.annotations_file
        if not path:
            return []
        try:
            records = load_annotations(path)
        except (OSError, ValueError) as e:
            QMessageBox.warning(self, "Annotations not loaded", f"{path}\n\n{e}")
            return []
        if records:
            logger.info("Loaded %d annotation(s) from %s", len(records), path)
        return records

    # ---------------- Playback ----------------

    def _toggle_play_pause(self):
        self.gateway.toggle_play_pause()

    def _update_play_button(self) -> None:
        self.btn_play.setText("Pause" if self.gateway.is_playing else "Play")

    # ---------------- Draft workflow ----------------

    def _on_transition(self, result: Transition) -> None:
        if result.annotation is not None:
            self.table.set_records(self.lifecycle.store.snapshot())
            self.status_label.setText(f"Saved: {result.annotation.comment}")
        self._refresh()

    def _on_end_time_changed(self, seconds: float) -> None:
        if self._ignore_panel_updates:
            return
        self.lifecycle.set_end_time(seconds)

    def _on_comment_changed(self, text: str) -> None:
        if self._ignore_panel_updates:
            return
        self.lifecycle.set_comment(text)

    def _post(self) -> None:
        try:
            result = self.lifecycle.commit()
        except OSError as e:
            # The annotation is in the store; only the file output failed.
            self.table.set_records(self.lifecycle.store.snapshot())
            self._refresh()
            QMessageBox.warning(self, "Save failed", str(e))
            return
        if not result.accepted:
            logger.debug("Post ignored: %s", result.rejection.value)

    def _cancel_draft(self) -> None:
        if self.lifecycle.mode is DraftMode.IDLE:
            return
        self.lifecycle.discard()
        self.status_label.setText("Draft discarded.")

    # ---------------- Refresh ----------------

    def _refresh(self) -> None:
        t = self.gateway.current_time
        dur = self.gateway.duration
        draft = self.lifecycle.draft
        store = self.lifecycle.store.snapshot()

        frame = build_overlay(t, store, draft)
        self.overlay.set_frame(frame)
        self.table.set_active_ids([a.id for a in frame.active])

        self.progress.set_progress(progress_fraction(t, dur))
        self.progress.set_marker(marker_fraction(draft.start_time, dur) if draft.start_time else None)
        self.timeline_label.setText(f"{format_clock(t)} / {format_clock(dur)}")

        pending = draft.mode is DraftMode.PENDING_COMMENT
        was_visible = self.comment_panel.isVisible()
        self.comment_panel.setVisible(pending)
        if pending:
            self._refresh_comment_panel(draft)
            if not was_visible:
                self.comment_panel.focus_comment()

    def _refresh_comment_panel(self, draft) -> None:
        lo, hi = self.lifecycle.scrub_bounds()
        end_text = self.lifecycle.effective_end_time()

        self._ignore_panel_updates = True
        try:
            self.comment_panel.set_range(lo, hi, self.cfg.scrub_step)
            if not draft.end_time:
                # Until the user scrubs, the end follows the playback position.
                self.comment_panel.set_end_seconds(self.gateway.current_time)
            self.comment_panel.set_labels(draft.start_time, end_text)
            self.comment_panel.set_comment(draft.comment)
        finally:
            self._ignore_panel_updates = False
        self.comment_panel.set_can_post(self.lifecycle.can_commit())

    def closeEvent(self, event):
        if self.lifecycle.mode is not DraftMode.IDLE:
            resp = QMessageBox.question(
                self,
                "Discard draft?",
                "The region you are drawing has not been posted. Quit anyway?",
                QMessageBox.Yes | QMessageBox.No,
                QMessageBox.No,
            )
            if resp != QMessageBox.Yes:
                event.ignore()
                return
        self.gateway.pause()
        event.accept()
