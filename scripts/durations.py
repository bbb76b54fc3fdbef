"""ISO 8601 video durations (``PT#H#M#S``) to seconds and ``H:MM:SS`` labels."""

from __future__ import annotations

import re
from typing import Optional

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def iso_duration_to_seconds(value: Optional[str]) -> int:
    if not value:
        return 0
    m = _DURATION_RE.search(value)
    if not m:
        return 0
    hours, minutes, seconds = (int(g or 0) for g in m.groups())
    return hours * 3600 + minutes * 60 + seconds


def format_duration(total_seconds: int) -> str:
    total_seconds = max(0, int(total_seconds))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def to_human_duration(value: Optional[str]) -> str:
    return format_duration(iso_duration_to_seconds(value))
