from cutscript.interpreter import Interpreter
from cutscript.models import EventKind
from cutscript.pipeline import Pipeline, PipelineState
from cutscript.store import SegmentStore

from conftest import FakeEngine

SCRIPT = """PROJECT "Demo"
FRAMERATE 24
===
LOAD a.mp4
CUT 00:00:10.000
--- [00:00:00.000 -> 00:00:05.000] ---
hello
world
HIDE 00:00:10.000 00:00:20.000
"""


def test_pass_publishes_config_scenes_and_segments(pipeline, store):
    received = []
    pipeline.subscribe(received.append)

    result = pipeline.submit(SCRIPT)
    assert result is not None
    assert received == [result]
    assert pipeline.last_result is result
    assert pipeline.state is PipelineState.IDLE

    assert result.config.project_name == "Demo"
    assert result.config.frame_rate == 24
    assert result.body_start == 3
    assert [c.line for c in result.commands] == [4, 5, 9]
    assert result.executed
    assert result.report.all_succeeded

    (scene,) = result.scenes
    assert (scene.start, scene.end, scene.content) == (0.0, 5.0, "hello\nworld")
    assert scene.line == 6

    assert [(s.start, s.end, s.visible) for s in store] == [(0.0, 10.0, True), (10.0, 60.0, False)]


def test_identical_text_does_not_touch_store(pipeline, store, engine):
    pipeline.submit(SCRIPT)
    events = []
    store.subscribe(events.append)

    second = pipeline.submit(SCRIPT)
    assert second is not None
    assert not second.executed
    assert second.fingerprint == pipeline.fingerprint
    assert events == []
    assert engine.calls == ["a.mp4"]


def test_moving_commands_between_lines_is_not_a_change(pipeline, store):
    pipeline.submit("LOAD a.mp4\nCUT 00:00:10.000")
    result = pipeline.submit("\n\nLOAD a.mp4\n\nsome notes\nCUT 00:00:10.000\n")
    assert not result.executed


def test_scene_only_edit_republishes_without_executing(pipeline):
    pipeline.submit("LOAD a.mp4\n--- [00:00:00.000 -> 00:00:01.000] ---\n# Before")
    result = pipeline.submit("LOAD a.mp4\n--- [00:00:00.000 -> 00:00:01.000] ---\n# After")
    assert not result.executed
    assert result.scenes[0].title == "After"


def test_changed_commands_rebuild_from_empty_store(pipeline, store):
    pipeline.submit("LOAD a.mp4\nCUT 00:00:10.000")
    events = []
    store.subscribe(events.append)

    result = pipeline.submit("LOAD a.mp4\nCUT 00:00:20.000")
    assert result.executed
    assert events[0].kind is EventKind.CLEARED
    assert [(s.start, s.end) for s in store] == [(0.0, 20.0), (20.0, 60.0)]


def test_removing_all_commands_empties_store(pipeline, store):
    pipeline.submit("LOAD a.mp4")
    result = pipeline.submit("just notes")
    assert result.executed
    assert len(store) == 0


def test_failed_commands_are_reported_not_raised(pipeline, store):
    result = pipeline.submit("LOAD nope.mp4\nCUT 00:00:01.000")
    assert result.report.failed == 2
    assert len(store) == 0
    assert pipeline.state is PipelineState.IDLE


def test_reentrant_submit_is_ignored(pipeline, store):
    nested = []

    def resubmit(result):
        nested.append(pipeline.submit("LOAD b.mp4"))

    pipeline.subscribe(resubmit)
    pipeline.submit("LOAD a.mp4")

    assert nested == [None]
    assert [s.path for s in store] == ["a.mp4"]
    assert pipeline.state is PipelineState.IDLE


def test_insert_cut_outside_of_pass(pipeline, store):
    pipeline.submit("LOAD a.mp4")
    result = pipeline.insert_cut(15.0)
    assert result.success
    assert [(s.start, s.end) for s in store] == [(0.0, 15.0), (15.0, 60.0)]


def test_insert_cut_is_ignored_during_pass(pipeline):
    attempts = []
    pipeline.subscribe(lambda result: attempts.append(pipeline.insert_cut(5.0)))
    pipeline.submit("LOAD a.mp4")
    assert attempts == [None]


def test_exception_in_pass_goes_to_error_listeners(pipeline):
    errors = []
    pipeline.on_error(errors.append)

    def explode(result):
        raise RuntimeError("observer broke")

    pipeline.subscribe(explode)
    assert pipeline.submit("LOAD a.mp4") is None
    assert errors == ["parse failed: observer broke"]
    assert pipeline.state is PipelineState.IDLE


def test_edit_during_load_discards_result_and_forces_rerun():
    store = SegmentStore()
    pipeline = None

    def edit_while_probing(path):
        pipeline.notify_changed()

    engine = FakeEngine({"a.mp4": 60.0}, on_lookup=edit_while_probing)
    pipeline = Pipeline(Interpreter(store, engine))

    result = pipeline.submit("LOAD a.mp4\nCUT 00:00:10.000")
    assert result.report.cancelled
    assert len(store) == 0
    assert pipeline.fingerprint is None

    engine.on_lookup = None
    again = pipeline.submit("LOAD a.mp4\nCUT 00:00:10.000")
    assert again.executed
    assert len(store) == 2


def test_failed_pass_does_not_leave_a_matching_fingerprint(pipeline, store):
    pipeline.submit("LOAD a.mp4")

    def refuse_b(event):
        if event.kind is EventKind.ADDED and event.segment.path == "b.mp4":
            raise RuntimeError("observer refused")

    unsubscribe = store.subscribe(refuse_b)
    assert pipeline.submit("LOAD b.mp4") is None
    assert pipeline.fingerprint is None
    unsubscribe()

    result = pipeline.submit("LOAD a.mp4")
    assert result.executed
    assert [(s.start, s.end, s.path) for s in store] == [(0.0, 60.0, "a.mp4")]


def test_store_observer_error_mid_pass_then_same_text_reexecutes(pipeline, store):
    errors = []
    pipeline.on_error(errors.append)
    failing = [True]

    def flaky(event):
        if event.kind is EventKind.ADDED and failing[0]:
            raise RuntimeError("disk full")

    store.subscribe(flaky)
    assert pipeline.submit("LOAD a.mp4\nCUT 00:00:10.000") is None
    assert errors == ["parse failed: disk full"]
    assert pipeline.state is PipelineState.IDLE

    failing[0] = False
    result = pipeline.submit("LOAD a.mp4\nCUT 00:00:10.000")
    assert result.executed
    assert len(store) == 2


def test_insert_cut_forces_rebuild_from_text(pipeline, store):
    script = "LOAD a.mp4\n--- [00:00:00.000 -> 00:00:01.000] ---\n# Intro"
    pipeline.submit(script)
    assert pipeline.insert_cut(15.0).success
    assert pipeline.fingerprint is None

    result = pipeline.submit(script.replace("Intro", "Opening"))
    assert result.executed
    assert [(s.start, s.end) for s in store] == [(0.0, 60.0)]


def test_rejected_insert_cut_keeps_fingerprint(pipeline):
    pipeline.submit("LOAD a.mp4")
    digest = pipeline.fingerprint
    assert not pipeline.insert_cut(99.0).success
    assert pipeline.fingerprint == digest
