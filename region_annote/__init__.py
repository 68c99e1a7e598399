# region_annote/__init__.py
'''
region_annote/
    __init__.py
    __main__.py
    cli.py                 # argparse entry point, config resolution
    app.py                 # QApplication + boot + video selection
    main_window.py         # QMainWindow layout + wiring of core to widgets

    timeutils.py           # "M:SS:CC" timestamp codec, ms<->seconds helpers
    geometry.py            # drag rectangle builder + render-time normalization
    domain.py              # dataclasses: Rectangle, Annotation, Draft, AnnotationStore, AppConfig
    lifecycle.py           # draft state machine: Idle -> Drawing -> PendingComment -> commit
    active_set.py          # annotations active at a playback time, overlay frame, progress fractions
    playback.py            # PlaybackGateway facade (play/pause, time/duration/ended callbacks)
    persistence.py         # config.json, annotations.json, commit sinks
    logging_config.py      # package logger setup

    widgets/
      video_player.py      # QMediaPlayer + QVideoWidget, overlay stacking
      overlay.py           # transparent drawing layer (pointer in, boxes out)
      progress_bar.py      # progress track + start marker
      comment_panel.py     # end-time scrub + comment + Post/Cancel
      annotations_table.py # read-only committed list, active rows highlighted
'''

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
