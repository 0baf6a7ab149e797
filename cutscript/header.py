"""Split a script into its header settings and its body."""

import dataclasses
import re
from typing import Callable, Optional

from .models import ProjectConfig
from .timecode import split_lines

_SEPARATOR = re.compile(r"^={3,}$")

_UNIT = r"(0?\.\d+|1\.0|0|1)"   # a fraction in [0, 1]
_HEX = r"#([0-9A-Fa-f]{6})"


def _directive(body: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*{body}\s*$", re.IGNORECASE)


def _positive(value: str) -> Optional[int]:
    n = int(value)
    return n if n > 0 else None


def _color(value: str) -> str:
    return "#" + value.upper()


# (pattern, fields, converter), checked in order; the first match wins.
# A converter returning None marks the directive as malformed.
_DIRECTIVES: list[tuple[re.Pattern[str], tuple[str, ...], Callable]] = [
    (_directive(r'PROJECT\s+"(.+)"'), ("project_name",), str),
    (_directive(r"RESOLUTION\s+(\d+)x(\d+)"), ("width", "height"), _positive),
    (_directive(r"FRAMERATE\s+(\d+)"), ("frame_rate",), _positive),
    (_directive(r'DEFAULT_FONT\s+"(.+)"'), ("default_font",), str),
    (_directive(r"DEFAULT_FONT_SIZE\s+(\d+)"), ("default_font_size",), _positive),
    (_directive(rf"DEFAULT_TITLE_COLOR\s+{_HEX}"), ("default_title_color",), _color),
    (_directive(rf"DEFAULT_SUBTITLE_COLOR\s+{_HEX}"), ("default_subtitle_color",), _color),
    (_directive(rf"DEFAULT_BACKGROUND_ALPHA\s+{_UNIT}"), ("default_background_alpha",), float),
    (_directive(rf"TITLE_POSITION_X\s+{_UNIT}"), ("title_position_x",), float),
    (_directive(rf"TITLE_POSITION_Y\s+{_UNIT}"), ("title_position_y",), float),
    (_directive(rf"SUBTITLE_POSITION_Y\s+{_UNIT}"), ("subtitle_position_y",), float),
    (_directive(r"TITLE_FONT_SIZE\s+(\d+)"), ("title_font_size",), _positive),
    (_directive(r"SUBTITLE_FONT_SIZE\s+(\d+)"), ("subtitle_font_size",), _positive),
    (_directive(rf"DEFAULT_FREETEXT_COLOR\s+{_HEX}"), ("default_free_text_color",), _color),
]


def _parse_directive(line: str) -> dict:
    """Return the field updates one header line asks for ({} if none)."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return {}

    for pattern, fields, convert in _DIRECTIVES:
        m = pattern.match(line)
        if not m:
            continue
        try:
            values = [convert(g) for g in m.groups()]
        except ValueError:
            return {}
        if any(v is None for v in values):
            return {}
        return dict(zip(fields, values))

    return {}


def split_header(text: str) -> tuple[ProjectConfig, int]:
    """
    Parse the header of a script.

    Returns (config, body_start) where body_start is the index of the first
    body line. Without a `===` separator line the whole text is body and
    the config is all defaults.
    """
    if not text:
        return ProjectConfig(), 0

    lines = split_lines(text)
    updates: dict = {}

    for i, line in enumerate(lines):
        if _SEPARATOR.match(line):
            return dataclasses.replace(ProjectConfig(), **updates), i + 1
        updates.update(_parse_directive(line))

    return ProjectConfig(), 0


def body_text(text: str, body_start: int) -> str:
    return "\n".join(split_lines(text)[body_start:])


def render_header(config: ProjectConfig) -> str:
    """Render a config back into header directives followed by `===`."""
    lines = [
        f'PROJECT "{config.project_name}"',
        f"RESOLUTION {config.resolution}",
        f"FRAMERATE {config.frame_rate}",
        f'DEFAULT_FONT "{config.default_font}"',
        f"DEFAULT_FONT_SIZE {config.default_font_size}",
        f"DEFAULT_TITLE_COLOR {config.default_title_color}",
        f"DEFAULT_SUBTITLE_COLOR {config.default_subtitle_color}",
        f"DEFAULT_BACKGROUND_ALPHA {_fraction(config.default_background_alpha)}",
        f"TITLE_POSITION_X {_fraction(config.title_position_x)}",
        f"TITLE_POSITION_Y {_fraction(config.title_position_y)}",
        f"SUBTITLE_POSITION_Y {_fraction(config.subtitle_position_y)}",
        f"TITLE_FONT_SIZE {config.title_font_size}",
        f"SUBTITLE_FONT_SIZE {config.subtitle_font_size}",
        f"DEFAULT_FREETEXT_COLOR {config.default_free_text_color}",
        "===",
    ]
    return "\n".join(lines) + "\n"


def _fraction(value: float) -> str:
    # The directive grammar accepts 0, 1, 1.0 and 0.xxx
    if value >= 1:
        return "1.0"
    if value <= 0:
        return "0"
    text = f"{value:.4f}".rstrip("0")
    return "0" if text.endswith(".") else text
