"""
Canonical parsing for time-slot labels.

Slot labels are "HH:MM-HH:MM" strings (e.g. "14:00-16:00"); this module is
the only place that converts between labels and time objects.
"""

import re
from datetime import time
from typing import Tuple

_SLOT_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])-([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_time_slot(label: str) -> Tuple[time, time]:
    """
    Parse "HH:MM-HH:MM" into (start, end).

    Raises ValueError if the label is malformed or end is not after start.
    """
    match = _SLOT_RE.match(label.strip()) if label else None
    if not match:
        raise ValueError(f"Time slot must be in HH:MM-HH:MM format: {label!r}")
    start = time(int(match.group(1)), int(match.group(2)))
    end = time(int(match.group(3)), int(match.group(4)))
    if end <= start:
        raise ValueError(f"Time slot end must be after start: {label!r}")
    return start, end


def format_time_slot(start: time, end: time) -> str:
    return f"{start.strftime('%H:%M')}-{end.strftime('%H:%M')}"


def minutes_between(start_time: time, end_time: time) -> int:
    """Minutes from start_time to end_time (same-day)."""
    start_min = start_time.hour * 60 + start_time.minute
    end_min = end_time.hour * 60 + end_time.minute
    return end_min - start_min if end_min > start_min else 0


def intervals_overlap(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    """Check if [a_start, a_end) overlaps [b_start, b_end)."""
    return a_start < b_end and b_start < a_end

