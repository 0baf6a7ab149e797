"""Apply edit commands to the segment store."""

import math
from typing import Callable, Optional

from .errors import DegenerateCut, LoadCancelled, MediaUnavailable, MissingField, NoSegmentAtTime, ScriptError
from .media import MediaEngine
from .models import (
    CommandResult,
    Cut,
    Delete,
    EditCommand,
    ExecutionReport,
    Hide,
    Load,
    SegmentState,
    Show,
    VideoSegment,
)
from .store import SegmentStore
from .timecode import format_timecode


class Interpreter:
    """
    Execute commands against a SegmentStore.

    A failing command affects nothing but itself: its ScriptError is logged
    and recorded in the report, and the rest of the batch still runs.
    HIDE, SHOW and DELETE act on whole segments; a segment that only
    partially overlaps the range is affected in its entirety.
    """

    def __init__(self, store: SegmentStore, engine: MediaEngine):
        self.store = store
        self.engine = engine
        self._cancelled: Callable[[], bool] = lambda: False

    def execute(
        self,
        commands: list[EditCommand],
        cancelled: Optional[Callable[[], bool]] = None,
    ) -> ExecutionReport:
        """
        Run commands in order.

        cancelled is polled after each media lookup; once it returns True the
        lookup result is discarded and the remaining commands are not applied.
        """
        report = ExecutionReport()
        self._cancelled = cancelled or (lambda: False)
        try:
            for command in commands:
                result = self.execute_one(command)
                report.results.append(result)
                if isinstance(result.error, LoadCancelled):
                    report.cancelled = True
                    break
        finally:
            self._cancelled = lambda: False
        return report

    def execute_one(self, command: EditCommand) -> CommandResult:
        handler = self._HANDLERS.get(type(command))
        if handler is None:
            raise TypeError(f"not an edit command: {command!r}")
        try:
            affected = handler(self, command)
        except ScriptError as e:
            print(f"[interpret] line {command.line}: {command} failed: {e}")
            return CommandResult(command=command, success=False, error=e)
        return CommandResult(command=command, success=True, affected_ids=affected)

    # ── Handlers ─────────────────────────────────────────────────────────────

    def _load(self, command: Load) -> list[int]:
        if not command.path or not command.path.strip():
            raise MissingField("LOAD needs a file path")

        try:
            duration = self.engine.get_duration(command.path)
        except ScriptError:
            raise
        except (OSError, ValueError, RuntimeError) as e:
            raise MediaUnavailable(f"{command.path}: {e}") from e

        if not math.isfinite(duration) or duration <= 0:
            raise MediaUnavailable(f"{command.path}: no playable duration ({duration})")

        if self._cancelled():
            raise LoadCancelled(f"{command.path}: document changed during load")

        self.store.clear()
        segment = self.store.add(VideoSegment(start=0.0, end=duration, path=command.path))
        print(f"[interpret] Loaded {command.path} ({duration:.3f}s)")
        return [segment.id]

    def _cut(self, command: Cut) -> list[int]:
        t = command.time
        target = next((s for s in self.store if s.start < t < s.end), None)
        if target is None:
            if self.store.segment_at(t) is not None:
                raise DegenerateCut(f"{format_timecode(t)} is already a segment boundary")
            raise NoSegmentAtTime(f"no segment at {format_timecode(t)}")

        head = VideoSegment(start=target.start, end=t, path=target.path, visible=target.visible)
        tail = VideoSegment(start=t, end=target.end, path=target.path, visible=target.visible)

        self.store.remove(target.id)
        self.store.add(head)
        self.store.add(tail)
        return [head.id, tail.id]

    def _hide(self, command: Hide) -> list[int]:
        return self._set_visibility(command.start, command.end, visible=False, state=SegmentState.HIDDEN)

    def _show(self, command: Show) -> list[int]:
        return self._set_visibility(command.start, command.end, visible=True, state=SegmentState.STOPPED)

    def _set_visibility(self, start: float, end: float, visible: bool, state: SegmentState) -> list[int]:
        affected = []
        for segment in self.store.segments_overlapping(start, end):
            segment.visible = visible
            segment.state = state
            self.store.update(segment)
            affected.append(segment.id)
        return affected

    def _delete(self, command: Delete) -> list[int]:
        affected = []
        for segment in self.store.segments_overlapping(command.start, command.end):
            self.store.remove(segment.id)
            affected.append(segment.id)
        return affected

    _HANDLERS = {
        Load: _load,
        Cut: _cut,
        Hide: _hide,
        Show: _show,
        Delete: _delete,
    }
