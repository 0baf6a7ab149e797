"""Parse body lines into edit commands."""

import hashlib
import re
from typing import Optional

from .models import Cut, Delete, EditCommand, Hide, Load, Show
from .timecode import TIMECODE, split_lines, to_seconds

_LOAD = re.compile(r"^\s*LOAD\s+(.+?)\s*$", re.IGNORECASE)
_CUT = re.compile(rf"^\s*CUT\s+{TIMECODE}\s*$")

# HIDE / SHOW / DELETE <start> <end>
_RANGE_PATTERNS: list[tuple[re.Pattern[str], type]] = [
    (re.compile(rf"^\s*{keyword}\s+{TIMECODE}\s+{TIMECODE}\s*$"), cls)
    for keyword, cls in (("HIDE", Hide), ("SHOW", Show), ("DELETE", Delete))
]


def _unquote(path: str) -> str:
    if len(path) >= 2 and path[0] == path[-1] == '"':
        return path[1:-1]
    return path


def parse_line(line: str, line_number: int) -> Optional[EditCommand]:
    """Return the command on this line, or None if it is not a command."""
    try:
        m = _LOAD.match(line)
        if m:
            return Load(path=_unquote(m.group(1)), line=line_number)

        m = _CUT.match(line)
        if m:
            return Cut(time=to_seconds(*m.groups()), line=line_number)

        for pattern, cls in _RANGE_PATTERNS:
            m = pattern.match(line)
            if m:
                groups = m.groups()
                return cls(
                    start=to_seconds(*groups[:4]),
                    end=to_seconds(*groups[4:]),
                    line=line_number,
                )
    except ValueError:
        # numeric groups that fail to convert drop the line
        return None

    return None


def is_command_line(line: str) -> bool:
    return parse_line(line, 0) is not None


def parse_commands(body: str, line_offset: int = 0) -> list[EditCommand]:
    """
    Parse every recognized command in the body, in source order.

    Line numbers are 1-based; line_offset shifts them so they refer to the
    whole document when the body is a slice of it.
    """
    commands: list[EditCommand] = []
    for i, line in enumerate(split_lines(body)):
        command = parse_line(line, i + 1 + line_offset)
        if command is not None:
            commands.append(command)
    return commands


def fingerprint(commands: list[EditCommand]) -> str:
    """Content hash of a command sequence; line numbers do not participate."""
    canonical = "\n".join(str(c) for c in commands)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
