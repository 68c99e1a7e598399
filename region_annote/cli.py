# region_annote/cli.py
"""Command-line entry point for region_annote."""
from __future__ import annotations

import argparse
import os
from typing import List, Optional

from . import __version__
from .domain import AppConfig
from .logging_config import get_logger, setup_logging
from .persistence import CONFIG_FILENAME, default_annotations_path, load_app_config

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="region-annote",
        description="Mark rectangular regions on a playing video and comment on them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  region-annote match.mp4                       # annotations.json next to the video
  region-annote match.mp4 --output notes.json   # explicit output file
  region-annote match.mp4 --no-save             # log records only
  region-annote --config config.json match.mp4
        """,
    )
    parser.add_argument("video", nargs="?", help="Video file to open (prompted if omitted)")
    parser.add_argument("--version", action="version", version=f"region-annote {__version__}")
    parser.add_argument(
        "--config", "-c", metavar="FILE",
        help=f"JSON config file (default: ./{CONFIG_FILENAME} if present)",
    )
    parser.add_argument("--output", "-o", metavar="FILE", help="Where committed annotations are written")
    parser.add_argument("--no-save", action="store_true", help="Do not write annotations to a file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Show only errors")
    parser.add_argument("--log-file", metavar="FILE", help="Write logs to file")
    return parser


def resolve_config(args: argparse.Namespace) -> AppConfig:
    """
    Config file values, then command-line overrides.

    Without --output or a configured file, annotations go next to the video.
    """
    path = args.config
    if not path and os.path.exists(CONFIG_FILENAME):
        path = CONFIG_FILENAME

    cfg = load_app_config(path) if path else None
    if cfg is None:
        if args.config:
            logger.warning("Config %s not loaded; using defaults", args.config)
        cfg = AppConfig()

    if args.output:
        cfg.annotations_file = args.output
    elif not cfg.annotations_file and args.video:
        cfg.annotations_file = default_annotations_path(args.video)

    if args.no_save:
        cfg.annotations_file = ""
    if args.log_file:
        cfg.log_file = args.log_file
    return cfg


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = resolve_config(args)
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=cfg.log_file or None)

    if args.video and not os.path.exists(args.video):
        logger.error("Video not found: %s", args.video)
        return 2

    logger.debug("Annotations file: %s", cfg.annotations_file or "(disabled)")

    # Qt is imported lazily so --help/--version work without a display.
    from .app import run_app

    return run_app(video_path=args.video, cfg=cfg)
