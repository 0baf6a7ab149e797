"""Two-press range selection over playback positions.

The first press pins a pivot; the second press confirms the range between
the pivot and the current position, in either direction. The confirmed
range is turned into a command line for the script.
"""

from typing import Optional

from .timecode import format_timecode

_RANGE_KEYWORDS = ("HIDE", "SHOW", "DELETE")


class Anchor:
    def __init__(self) -> None:
        self.pivot: Optional[float] = None

    @property
    def recording(self) -> bool:
        return self.pivot is not None

    def press(self, time: float) -> Optional[tuple[float, float]]:
        """Set the pivot, or confirm and return (start, end) if one is set."""
        if self.pivot is None:
            self.pivot = time
            return None
        return self.confirm(time)

    def preview(self, time: float) -> Optional[tuple[float, float]]:
        if self.pivot is None:
            return None
        return min(self.pivot, time), max(self.pivot, time)

    def confirm(self, time: float) -> tuple[float, float]:
        if self.pivot is None:
            return time, time
        start, end = min(self.pivot, time), max(self.pivot, time)
        self.pivot = None
        return start, end

    def cancel(self) -> None:
        self.pivot = None


def command_line(keyword: str, start: float, end: float) -> str:
    keyword = keyword.upper()
    if keyword not in _RANGE_KEYWORDS:
        raise ValueError(f"not a range command: {keyword}")
    return f"{keyword} {format_timecode(start)} {format_timecode(end)}"
