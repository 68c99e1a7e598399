# region_annote/app.py
from __future__ import annotations

import sys
from typing import List, Optional

from PyQt5.QtWidgets import QApplication, QFileDialog

from .domain import AppConfig
from .main_window import MainWindow

VIDEO_FILTER = "Videos (*.mp4 *.mov *.mkv *.avi *.m4v *.webm);;All files (*)"


def choose_video(parent=None) -> Optional[str]:
    path, _ = QFileDialog.getOpenFileName(parent, "Open Video", "", VIDEO_FILTER)
    return path or None


def run_app(video_path: Optional[str] = None, cfg: Optional[AppConfig] = None, argv: Optional[List[str]] = None) -> int:
    app = QApplication(argv if argv is not None else sys.argv[:1])

    win = MainWindow(video_path=None, cfg=cfg)
    win.show()

    # If no video was given, prompt once
    path = video_path or choose_video(win)
    if path:
        win.open_video(path)

    return app.exec_()
