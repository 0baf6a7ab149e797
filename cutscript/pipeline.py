"""Re-evaluate a script into the segment store on every text change."""

import threading
from enum import Enum
from typing import Callable, Optional

from .commands import fingerprint, parse_commands
from .header import body_text, split_header
from .interpreter import Interpreter
from .models import CommandResult, Cut, PassResult
from .scenes import parse_scenes

_print_lock = threading.Lock()


def _log(msg: str) -> None:
    with _print_lock:
        print(msg)


class PipelineState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"


class Pipeline:
    """
    Text snapshot in, segments and scenes out.

    A pass parses the header, commands and scenes, then executes the
    commands against a cleared store, unless their fingerprint matches the
    previous successful pass. Config and scenes are published after every
    pass either way.

    The PARSING state doubles as the reentrancy guard: a snapshot submitted
    while a pass is running (typically by an observer reacting to that pass)
    is ignored.
    """

    def __init__(self, interpreter: Interpreter):
        self.interpreter = interpreter
        self.store = interpreter.store
        self.state = PipelineState.IDLE
        self.fingerprint: Optional[str] = None
        self.last_result: Optional[PassResult] = None
        self._revision = 0
        self._listeners: list[Callable[[PassResult], None]] = []
        self._error_listeners: list[Callable[[str], None]] = []

    def subscribe(self, listener: Callable[[PassResult], None]) -> None:
        self._listeners.append(listener)

    def on_error(self, listener: Callable[[str], None]) -> None:
        self._error_listeners.append(listener)

    def notify_changed(self) -> None:
        """Mark the document as edited; an in-flight LOAD will discard its result."""
        self._revision += 1

    def submit(self, text: str) -> Optional[PassResult]:
        """Run one pass over a full-text snapshot. Returns None if ignored or failed."""
        if self.state is PipelineState.PARSING:
            _log("[pipeline] Pass already running, snapshot ignored")
            return None

        self.state = PipelineState.PARSING
        revision = self._revision
        try:
            config, body_start = split_header(text)
            body = body_text(text, body_start)
            commands = parse_commands(body, line_offset=body_start)
            scenes = parse_scenes(body, line_offset=body_start)

            digest = fingerprint(commands)
            result = PassResult(
                config=config,
                body_start=body_start,
                commands=commands,
                scenes=scenes,
                fingerprint=digest,
                executed=False,
            )

            if digest == self.fingerprint:
                _log(f"[pipeline] Commands unchanged ({len(commands)}), skipping execution")
            else:
                # a pass that dies before recording its digest must not match later
                self.fingerprint = None
                self.store.clear()
                report = self.interpreter.execute(commands, cancelled=lambda: self._revision != revision)
                result.executed = True
                result.report = report
                # a cancelled pass leaves the store stale; force the next pass to re-run
                self.fingerprint = None if report.cancelled else digest
                _log(
                    f"[pipeline] Executed {report.total} command(s): "
                    f"{report.succeeded} ok, {report.failed} failed, {len(self.store)} segment(s)"
                )

            self.last_result = result
            for listener in list(self._listeners):
                listener(result)
            return result
        except Exception as e:
            message = f"parse failed: {e}"
            _log(f"[pipeline] {message}")
            for listener in list(self._error_listeners):
                listener(message)
            return None
        finally:
            self.state = PipelineState.IDLE

    def insert_cut(self, time: float) -> Optional[CommandResult]:
        """
        Cut at a playback position directly, outside of the script text.

        A successful cut makes the store diverge from the script, so the
        fingerprint is dropped and the next pass rebuilds from the text.
        """
        if self.state is PipelineState.PARSING:
            _log("[pipeline] Pass running, cut ignored")
            return None

        self.state = PipelineState.PARSING
        try:
            result = self.interpreter.execute_one(Cut(time=time))
            if result.success:
                self.fingerprint = None
            return result
        finally:
            self.state = PipelineState.IDLE
