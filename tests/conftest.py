import pytest

from cutscript.errors import MediaUnavailable
from cutscript.interpreter import Interpreter
from cutscript.pipeline import Pipeline
from cutscript.store import SegmentStore


class FakeEngine:
    """Duration lookup backed by a dict; counts calls per path."""

    def __init__(self, durations=None, on_lookup=None):
        self.durations = dict(durations or {})
        self.calls: list[str] = []
        self.on_lookup = on_lookup

    def get_duration(self, path: str) -> float:
        self.calls.append(path)
        if self.on_lookup is not None:
            self.on_lookup(path)
        if path not in self.durations:
            raise MediaUnavailable(f"media file not found: {path}")
        return self.durations[path]


@pytest.fixture
def engine():
    return FakeEngine({"a.mp4": 60.0, "b.mp4": 30.0})


@pytest.fixture
def store():
    return SegmentStore()


@pytest.fixture
def events(store):
    received = []
    store.subscribe(received.append)
    return received


@pytest.fixture
def interpreter(store, engine):
    return Interpreter(store, engine)


@pytest.fixture
def pipeline(interpreter):
    return Pipeline(interpreter)
