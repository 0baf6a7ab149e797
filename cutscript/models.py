from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .errors import ScriptError
from .timecode import format_timecode


# ── Project settings ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProjectConfig:
    project_name: str = "Untitled Project"
    width: int = 1920
    height: int = 1080
    frame_rate: int = 30
    default_font: str = "Meiryo"
    default_font_size: int = 24
    default_title_color: str = "#FFFFFF"
    default_subtitle_color: str = "#FFFFFF"
    default_background_alpha: float = 0.8
    # Caption layout, as fractions of the frame
    title_position_x: float = 0.05
    title_position_y: float = 0.05
    subtitle_position_y: float = 0.85
    title_font_size: int = 32
    subtitle_font_size: int = 24
    default_free_text_color: str = "#FFFFFF"

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


# ── Edit commands ────────────────────────────────────────────────────────────
# One frozen dataclass per command kind; `line` is the 1-based source line.
# str(command) is the canonical text form.

@dataclass(frozen=True)
class Load:
    path: str
    line: int = 0

    def __str__(self) -> str:
        return f"LOAD {self.path}"


@dataclass(frozen=True)
class Cut:
    time: float
    line: int = 0

    def __str__(self) -> str:
        return f"CUT {format_timecode(self.time)}"


@dataclass(frozen=True)
class _RangeCommand:
    start: float
    end: float
    line: int = 0

    keyword = ""

    def __str__(self) -> str:
        return f"{self.keyword} {format_timecode(self.start)} {format_timecode(self.end)}"


@dataclass(frozen=True)
class Hide(_RangeCommand):
    keyword = "HIDE"


@dataclass(frozen=True)
class Show(_RangeCommand):
    keyword = "SHOW"


@dataclass(frozen=True)
class Delete(_RangeCommand):
    keyword = "DELETE"


EditCommand = Union[Load, Cut, Hide, Show, Delete]


# ── Scenes ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FreeTextItem:
    text: str
    line: int


@dataclass(frozen=True)
class SceneBlock:
    """A timestamped chunk of script text, independent of the segments."""
    start: float
    end: float
    line: int        # line of the separator
    content: str     # trimmed text between this separator and the next boundary
    title: Optional[str] = None
    subtitle: Optional[str] = None
    free_text: tuple[FreeTextItem, ...] = ()

    def __post_init__(self):
        if self.start < 0:
            raise ValueError("scene start must be >= 0")
        if self.end < self.start:
            raise ValueError(
                f"scene end {format_timecode(self.end)} is before start {format_timecode(self.start)}"
            )

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, time: float) -> bool:
        return self.start <= time <= self.end

    def overlaps(self, start: float, end: float) -> bool:
        return self.start < end and self.end > start


# ── Segments ─────────────────────────────────────────────────────────────────

class SegmentState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    HIDDEN = "hidden"


@dataclass
class VideoSegment:
    """A half-open interval [start, end) of one source video."""
    start: float
    end: float
    path: str
    visible: bool = True
    state: SegmentState = SegmentState.STOPPED
    id: Optional[int] = None   # assigned by the store

    def __post_init__(self):
        if self.start < 0:
            raise ValueError("segment start must be >= 0")
        if self.end <= self.start:
            raise ValueError(f"segment end {self.end} must be > start {self.start}")

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, time: float) -> bool:
        return self.start <= time <= self.end

    def overlaps(self, start: float, end: float) -> bool:
        return self.start < end and self.end > start


class EventKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    UPDATED = "updated"
    CLEARED = "cleared"


@dataclass(frozen=True)
class SegmentEvent:
    kind: EventKind
    segment: Optional[VideoSegment] = None   # None for CLEARED


# ── Execution results ────────────────────────────────────────────────────────

@dataclass
class CommandResult:
    command: EditCommand
    success: bool
    error: Optional[ScriptError] = None
    affected_ids: list[int] = field(default_factory=list)


@dataclass
class ExecutionReport:
    results: list[CommandResult] = field(default_factory=list)
    cancelled: bool = False

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    @property
    def error_messages(self) -> list[str]:
        return [
            f"line {r.command.line}: {r.error}"
            for r in self.results
            if not r.success and r.error is not None
        ]


@dataclass
class PassResult:
    """Everything one pipeline pass publishes to observers."""
    config: ProjectConfig
    body_start: int
    commands: list[EditCommand]
    scenes: list[SceneBlock]
    fingerprint: str
    executed: bool
    report: Optional[ExecutionReport] = None
