# region_annote/persistence.py
from __future__ import annotations

import json
import os
import tempfile
from typing import Dict, List, Optional, Sequence

from .domain import Annotation, AppConfig
from .logging_config import get_logger

logger = get_logger(__name__)


# Default filenames (next to the video unless configured)
CONFIG_FILENAME = "config.json"
ANNOTATIONS_FILENAME = "annotations.json"
FORMAT_VERSION = 1


# -----------------------------
# Atomic file helpers
# -----------------------------

def _atomic_write_text(path: str, text: str, encoding: str = "utf-8") -> None:
    d = os.path.dirname(os.path.abspath(path))
    os.makedirs(d, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=d)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def _atomic_write_json(path: str, payload: Dict) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    _atomic_write_text(path, text + "\n")


def _read_json(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


# -----------------------------
# App config
# -----------------------------

def load_app_config(path: Optional[str]) -> Optional[AppConfig]:
    """
    Loads an AppConfig from JSON.

    If missing or invalid, returns None (caller should use defaults).
    """
    if not path or not os.path.exists(path):
        return None
    try:
        data = _read_json(path)
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")
        return AppConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return None


def save_app_config(path: str, cfg: AppConfig) -> None:
    if not path:
        raise ValueError("config path is required")
    _atomic_write_json(path, cfg.to_dict())


def default_annotations_path(video_path: str) -> str:
    return os.path.join(os.path.dirname(os.path.abspath(video_path)), ANNOTATIONS_FILENAME)


# -----------------------------
# Annotation list (annotations.json)
# -----------------------------

def annotation_to_json(annotation: Annotation) -> str:
    return json.dumps(annotation.to_dict(), indent=2, ensure_ascii=False)


def save_annotations(path: str, annotations: Sequence[Annotation]) -> str:
    """Rewrites the whole list atomically. Returns the written path."""
    payload = {
        "annotations": [a.to_dict() for a in annotations],
        "format_version": FORMAT_VERSION,
    }
    _atomic_write_json(path, payload)
    return path


def load_annotations(path: str) -> List[Annotation]:
    if not path or not os.path.exists(path):
        return []
    data = _read_json(path)
    raw = data.get("annotations") if isinstance(data, dict) else data
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of annotations")

    out: List[Annotation] = []
    seen = set()
    for i, item in enumerate(raw):
        try:
            rec = Annotation.from_dict(item)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed annotation #%d in %s: %s", i, path, e)
            continue
        if rec.id in seen:
            logger.warning("Skipping duplicate annotation id %s in %s", rec.id, path)
            continue
        seen.add(rec.id)
        out.append(rec)
    return out


# -----------------------------
# Commit sinks
# -----------------------------

class LoggingSink:
    """Logs every committed record as indented JSON."""

    def __init__(self, log=None):
        self._logger = log or logger

    def __call__(self, annotation: Annotation) -> None:
        self._logger.info("Annotation saved:\n%s", annotation_to_json(annotation))


class JsonFileSink:
    """
    Keeps annotations.json in step with the store: every commit rewrites the
    file with all records seen so far (starting from any already on disk).
    """

    def __init__(self, path: str, existing: Optional[Sequence[Annotation]] = None):
        self.path = path
        self._records: List[Annotation] = list(existing or [])

    def __call__(self, annotation: Annotation) -> None:
        self._records.append(annotation)
        save_annotations(self.path, self._records)
        logger.debug("Wrote %d annotation(s) to %s", len(self._records), self.path)
