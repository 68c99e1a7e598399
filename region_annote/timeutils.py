# region_annote/timeutils.py
from __future__ import annotations

import math


class TimestampError(ValueError):
    """Raised when a value cannot be represented as a timestamp string."""


class TimestampParseError(TimestampError):
    """Raised when a timestamp string is malformed."""


# -----------------------------
# Timestamp codec ("M:SS:CC")
# -----------------------------

def encode_timestamp(seconds: float) -> str:
    """
    Encode elapsed seconds as "M:SS:CC".

    Minutes are unbounded and unpadded; seconds and centiseconds are
    zero-padded to two digits. Sub-centisecond precision is truncated.
    """
    if seconds is None:
        raise TimestampError("seconds is required")
    sec = float(seconds)
    if math.isnan(sec) or math.isinf(sec) or sec < 0:
        raise TimestampError(f"cannot encode {seconds!r} as a timestamp")

    minutes = int(math.floor(sec / 60.0))
    secs = int(math.floor(sec % 60.0))
    centis = int(math.floor((sec % 1.0) * 100.0))
    return f"{minutes}:{secs:02d}:{centis:02d}"


def decode_timestamp(text: str) -> float:
    """
    Decode a timestamp string back into seconds.

    Only the first two fields are read: the result is minutes * 60 + seconds.
    The centisecond field is ignored, so "0:08:25" decodes to 8.0.
    """
    if not isinstance(text, str):
        raise TimestampParseError(f"timestamp must be a string, got {type(text).__name__}")

    parts = text.strip().split(":")
    if len(parts) < 2:
        raise TimestampParseError(f"malformed timestamp: {text!r}")

    try:
        minutes = float(parts[0])
        secs = float(parts[1])
    except ValueError:
        raise TimestampParseError(f"malformed timestamp: {text!r}") from None

    if math.isnan(minutes) or math.isnan(secs) or math.isinf(minutes) or math.isinf(secs):
        raise TimestampParseError(f"malformed timestamp: {text!r}")

    return minutes * 60.0 + secs


# -----------------------------
# Player clock helpers
# -----------------------------

def ms_to_seconds(ms: int) -> float:
    if ms is None:
        ms = 0
    return max(0, int(ms)) / 1000.0


def seconds_to_ms(sec: float) -> int:
    if sec is None:
        sec = 0.0
    return int(round(max(0.0, float(sec)) * 1000.0))


def format_clock(sec: float) -> str:
    """Short "M:SS" label for the playback position readout."""
    if sec is None or sec < 0:
        sec = 0.0
    s = int(sec)
    return f"{s // 60}:{s % 60:02d}"
