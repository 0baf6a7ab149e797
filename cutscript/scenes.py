"""Parse timestamped scene blocks out of the script body.

A scene starts at a separator line

    --- [00:01:15.000 -> 00:01:20.500] ---

and its content runs until the next separator or the next command line.
Inside the content, the first `# ` line is the title, `> ` lines make up the
subtitle, and everything else is free text split into paragraphs at blank
lines.
"""

import re
from typing import Optional

from .commands import is_command_line
from .models import FreeTextItem, SceneBlock
from .timecode import TIMECODE, format_timecode, split_lines, to_seconds

_SEPARATOR = re.compile(rf"^-{{3,}}\s*\[{TIMECODE}\s*->\s*{TIMECODE}\]\s*-{{3,}}$")


def _decompose(content_lines: list[tuple[int, str]]) -> tuple[Optional[str], Optional[str], tuple[FreeTextItem, ...]]:
    """Split content into (title, subtitle, free-text paragraphs)."""
    title: Optional[str] = None
    subtitle_lines: list[str] = []
    free_text: list[FreeTextItem] = []
    paragraph: list[str] = []
    paragraph_line = 0

    def close_paragraph() -> None:
        nonlocal paragraph
        if paragraph:
            free_text.append(FreeTextItem(text="\n".join(paragraph).strip(), line=paragraph_line))
            paragraph = []

    for line_number, raw in content_lines:
        line = raw.lstrip()
        if not line.strip():
            close_paragraph()
            continue

        if line.startswith("# "):
            close_paragraph()
            if title is None:
                title = line[2:].strip()
            else:
                # only the first heading is the title
                free_text.append(FreeTextItem(text=line[2:].strip(), line=line_number))
            continue

        if line.startswith("> "):
            close_paragraph()
            subtitle_lines.append(line[2:].strip())
            continue

        if not paragraph:
            paragraph_line = line_number
        paragraph.append(line)

    close_paragraph()
    subtitle = "\n".join(subtitle_lines) if subtitle_lines else None
    return title, subtitle, tuple(free_text)


def _parse_block(lines: list[str], index: int, match: re.Match, line_offset: int) -> SceneBlock:
    groups = match.groups()
    start = to_seconds(*groups[:4])
    end = to_seconds(*groups[4:])

    content_lines: list[tuple[int, str]] = []
    for j in range(index + 1, len(lines)):
        if _SEPARATOR.match(lines[j]) or is_command_line(lines[j]):
            break
        content_lines.append((j + 1 + line_offset, lines[j]))

    content = "\n".join(line for _, line in content_lines).strip()
    title, subtitle, free_text = _decompose(content_lines)

    return SceneBlock(
        start=start,
        end=end,
        line=index + 1 + line_offset,
        content=content,
        title=title,
        subtitle=subtitle,
        free_text=free_text,
    )


def parse_scenes(body: str, line_offset: int = 0) -> list[SceneBlock]:
    """Return one SceneBlock per well-formed separator, in source order."""
    if not body:
        return []

    lines = split_lines(body)
    scenes: list[SceneBlock] = []

    for i, line in enumerate(lines):
        m = _SEPARATOR.match(line)
        if not m:
            continue
        try:
            scenes.append(_parse_block(lines, i, m, line_offset))
        except ValueError as e:
            print(f"[scenes] Skipped block at line {i + 1 + line_offset}: {e}")

    return scenes


def scene_at(scenes: list[SceneBlock], time: float) -> Optional[SceneBlock]:
    return next((s for s in scenes if s.contains(time)), None)


def render_scene(scene: SceneBlock) -> str:
    """Render the separator line plus title and subtitle lines for a scene."""
    lines = [f"--- [{format_timecode(scene.start)} -> {format_timecode(scene.end)}] ---"]
    if scene.title:
        lines.append(f"# {scene.title}")
    if scene.subtitle:
        lines.extend(f"> {s}" for s in scene.subtitle.split("\n"))
    return "\n".join(lines) + "\n"
