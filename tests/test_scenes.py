import pytest

from cutscript.models import SceneBlock
from cutscript.scenes import parse_scenes, render_scene, scene_at

BODY = """LOAD a.mp4
--- [00:00:05.000 -> 00:00:10.000] ---
# Hello
> Sub line one
> Sub line two
Some free text
continues here

Second paragraph
CUT 00:00:07.000
--- [00:00:12.000 -> 00:00:15.500] ---
just text"""


def test_scene_boundaries_and_decomposition():
    scenes = parse_scenes(BODY)
    assert len(scenes) == 2

    first = scenes[0]
    assert (first.start, first.end, first.line) == (5.0, 10.0, 2)
    assert first.title == "Hello"
    assert first.subtitle == "Sub line one\nSub line two"
    assert [(f.text, f.line) for f in first.free_text] == [
        ("Some free text\ncontinues here", 6),
        ("Second paragraph", 9),
    ]
    # content stops at the command line
    assert "CUT" not in first.content
    assert first.content.endswith("Second paragraph")

    second = scenes[1]
    assert (second.start, second.end, second.line) == (12.0, 15.5, 11)
    assert second.title is None
    assert second.subtitle is None
    assert second.content == "just text"


def test_scene_scenario_title_only():
    scenes = parse_scenes("--- [00:00:01.000 -> 00:00:02.000] ---\n# Hello")
    assert len(scenes) == 1
    assert (scenes[0].start, scenes[0].end) == (1.0, 2.0)
    assert scenes[0].title == "Hello"


def test_only_first_heading_is_the_title():
    scenes = parse_scenes("--- [00:00:01.000 -> 00:00:02.000] ---\n# One\n# Two")
    assert scenes[0].title == "One"
    assert [f.text for f in scenes[0].free_text] == ["Two"]


def test_scene_with_end_before_start_is_skipped():
    body = "--- [00:00:05.000 -> 00:00:01.000] ---\nbad\n--- [00:00:06.000 -> 00:00:07.000] ---\ngood"
    scenes = parse_scenes(body)
    assert [s.content for s in scenes] == ["good"]


def test_zero_length_scene_is_allowed():
    scenes = parse_scenes("--- [00:00:05.000 -> 00:00:05.000] ---")
    assert scenes[0].duration == 0
    assert scenes[0].content == ""


@pytest.mark.parametrize(
    "line",
    [
        "-- [00:00:01.000 -> 00:00:02.000] ---",
        "--- [00:00:01.000 - 00:00:02.000] ---",
        "--- [00:00:01 -> 00:00:02.000] ---",
        "--- 00:00:01.000 -> 00:00:02.000 ---",
    ],
)
def test_malformed_separators_do_not_start_scenes(line):
    assert parse_scenes(line) == []


def test_line_offset_applies_to_scene_and_free_text_lines():
    scenes = parse_scenes("--- [00:00:01.000 -> 00:00:02.000] ---\ntext", line_offset=10)
    assert scenes[0].line == 11
    assert scenes[0].free_text[0].line == 12


def test_empty_body():
    assert parse_scenes("") == []


def test_scene_at():
    scenes = parse_scenes(BODY)
    assert scene_at(scenes, 7.0) is scenes[0]
    assert scene_at(scenes, 10.0) is scenes[0]
    assert scene_at(scenes, 11.0) is None


def test_scene_block_validation():
    with pytest.raises(ValueError):
        SceneBlock(start=-1, end=2, line=1, content="")
    with pytest.raises(ValueError):
        SceneBlock(start=3, end=2, line=1, content="")


def test_render_scene_parses_back():
    scene = parse_scenes(BODY)[0]
    again = parse_scenes(render_scene(scene))[0]
    assert (again.start, again.end) == (scene.start, scene.end)
    assert again.title == scene.title
    assert again.subtitle == scene.subtitle
