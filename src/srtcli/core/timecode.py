from __future__ import annotations

import re

_TIMECODE_PATTERN = re.compile(r"(\d{2}):(\d{2}):(\d{2}),(\d{3})")
_TIME_RANGE_PATTERN = re.compile(
    r"(\d{2}:\d{2}:\d{2},\d{3})\s*-->\s*(\d{2}:\d{2}:\d{2},\d{3})"
)
_SEQUENCE_PATTERN = re.compile(r"^\d+$")


def parse_unit(token: str) -> int:
    """Convert a numeric token to an int, coercing anything unparseable to 0."""
    try:
        value = int(token)
    except (TypeError, ValueError):
        return 0
    return value if value >= 0 else 0


def parse_timecode(text: str) -> int:
    """Parse ``HH:MM:SS,mmm`` into milliseconds. Non-matching input yields 0."""
    match = _TIMECODE_PATTERN.search(text)
    if match is None:
        return 0
    hours, minutes, seconds, millis = (parse_unit(group) for group in match.groups())
    return ((hours * 3600 + minutes * 60 + seconds) * 1000) + millis


def format_timecode(milliseconds: int) -> str:
    """Format milliseconds to SRT timestamp (HH:MM:SS,mmm)."""
    if milliseconds < 0:
        raise ValueError(f"Timecode must be non-negative, got {milliseconds}")
    hours = milliseconds // 3_600_000
    minutes = (milliseconds % 3_600_000) // 60_000
    secs = (milliseconds % 60_000) // 1_000
    ms = milliseconds % 1_000
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{ms:03d}"


def format_clock(milliseconds: int) -> str:
    milliseconds = max(0, milliseconds)
    hours = milliseconds // 3_600_000
    minutes = (milliseconds % 3_600_000) // 60_000
    secs = (milliseconds % 60_000) // 1_000
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def is_sequence_number(line: str) -> bool:
    return _SEQUENCE_PATTERN.match(line.strip()) is not None


def parse_time_range(line: str) -> tuple[int, int] | None:
    """Decode a ``<timecode> --> <timecode>`` line, or ``None`` if it is not one."""
    match = _TIME_RANGE_PATTERN.search(line)
    if match is None:
        return None
    return parse_timecode(match.group(1)), parse_timecode(match.group(2))
