"""HH:MM:SS.mmm timecodes and line splitting shared by the parsers."""

import re

# One timecode, four capture groups: hours, minutes, seconds, milliseconds
TIMECODE = r"(\d{2}):(\d{2}):(\d{2})\.(\d{3})"

_TIMECODE_RE = re.compile(rf"^{TIMECODE}$")
_LINE_BREAK = re.compile(r"\r\n|\n")


def split_lines(text: str) -> list[str]:
    """Split on \\r\\n or \\n, keeping empty lines (including a trailing one)."""
    return _LINE_BREAK.split(text)


def to_seconds(hours: str, minutes: str, seconds: str, millis: str) -> float:
    """Convert captured timecode groups to fractional seconds.

    Raises ValueError if a group is not an integer.
    """
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + int(millis) / 1000


def parse_timecode(value: str) -> float:
    m = _TIMECODE_RE.match(value.strip())
    if not m:
        raise ValueError(f"Invalid timecode: {value!r}")
    return to_seconds(*m.groups())


def format_timecode(seconds: float) -> str:
    total_ms = int(round(seconds * 1000))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"
