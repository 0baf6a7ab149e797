"""cutscript: compile a plain-text edit script into a video segment timeline."""

from .anchor import Anchor, command_line
from .commands import fingerprint, parse_commands, parse_line
from .debounce import Debouncer
from .errors import (
    DegenerateCut,
    LoadCancelled,
    MediaUnavailable,
    MissingField,
    NoSegmentAtTime,
    ScriptError,
    error_response,
)
from .header import render_header, split_header
from .interpreter import Interpreter
from .media import FFprobeEngine, MediaEngine
from .models import (
    CommandResult,
    Cut,
    Delete,
    EditCommand,
    EventKind,
    ExecutionReport,
    Hide,
    Load,
    PassResult,
    ProjectConfig,
    SceneBlock,
    SegmentEvent,
    SegmentState,
    Show,
    VideoSegment,
)
from .pipeline import Pipeline, PipelineState
from .scenes import parse_scenes
from .store import SegmentStore
