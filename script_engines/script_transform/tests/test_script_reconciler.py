"""State Reconciler Tests."""
import logging

import pytest

from script_engines.script_transform.models import (
    AnimationSegment,
    ChangeBackground,
    ChangeFigure,
    Easing,
    RawText,
    SetTransform,
    Transform,
    Vec2,
)
from script_engines.script_transform.parser import parse_script
from script_engines.script_transform.reconciler import (
    build_animation_sequence,
    ease_in,
    ease_in_out,
    ease_linear,
    get_ease,
    interpolate,
    reconcile,
)

EXAMPLE = (
    'changeFigure:figure1.png -id=figure1 -transform={"position":{"x":0,"y":0},"scale":{"x":1,"y":1}};\n'
    'setTransform:{"position":{"x":100,"y":0}} -target=figure1 -duration=300 -ease=linear;'
)


def test_reconcile_example_final_state():
    commands = parse_script(EXAMPLE, 1, 1)
    result = reconcile(commands)

    assert len(result.consolidated) == 2
    assert [c.kind for c in result.consolidated] == ["changeFigure", "setTransform"]
    final = result.final_states["figure1"]
    assert final.position == Vec2(x=100, y=0)
    assert final.scale == Vec2(x=1, y=1)


def test_reconcile_preserves_order_and_passthrough():
    commands = [
        RawText(text="Alice: hi"),
        ChangeBackground(path="bg.png"),
        ChangeFigure(target="f1", path="a.png"),
        SetTransform(target="bg-main", transform=Transform(rotation=1.0)),
        SetTransform(target="f1", transform=Transform(position=Vec2(x=5, y=5))),
        RawText(text="Bob: bye"),
    ]
    result = reconcile(commands)

    assert len(result.consolidated) == len(commands)
    assert result.consolidated[0] is commands[0]
    assert result.consolidated[1] is commands[1]
    assert result.consolidated[3] is commands[3]  # background passes through unexamined
    assert result.consolidated[5] is commands[5]
    assert "bg-main" not in result.final_states
    assert result.final_states["f1"].position == Vec2(x=5, y=5)


def test_reconcile_merges_synthesized_filters():
    commands = [
        ChangeFigure(target="f1", path="a.png", transform=Transform(filters={"brightness": 1.0})),
        SetTransform(target="f1", transform=Transform(filters={"contrast": 2.0})),
        SetTransform(target="f1", transform=Transform(position=Vec2(x=3, y=4), filters={"brightness": 0.5})),
    ]
    result = reconcile(commands)

    # changeFigure keeps its own transform
    assert result.consolidated[0].transform.filters == {"brightness": 1.0}
    assert result.consolidated[1].transform.filters == {"brightness": 1.0, "contrast": 2.0}
    assert result.final_states["f1"].filters == {"brightness": 0.5, "contrast": 2.0}
    assert result.final_states["f1"].position == Vec2(x=3, y=4)
    # inputs are left untouched
    assert commands[1].transform.filters == {"contrast": 2.0}


def test_reconcile_missing_baseline_warns(caplog):
    commands = [SetTransform(target="ghost", transform=Transform(rotation=0.25))]
    with caplog.at_level(logging.WARNING):
        result = reconcile(commands)

    assert result.final_states["ghost"].rotation == 0.25
    assert result.final_states["ghost"].scale == Vec2(x=1, y=1)
    assert "ghost" in caplog.text


def test_reconcile_change_figure_resets_running_state():
    commands = [
        ChangeFigure(target="f1", path="a.png"),
        SetTransform(target="f1", transform=Transform(filters={"contrast": 2.0})),
        ChangeFigure(target="f1", path="b.png"),
    ]
    result = reconcile(commands)
    assert result.final_states["f1"] == Transform()


def test_animation_chains_segments_per_target():
    script = "\n".join(
        [
            'changeFigure:a.png -id=f1 -transform={"position":{"x":0,"y":0}};',
            'setTransform:{"position":{"x":100}} -target=f1 -duration=300 -ease=linear;',
            'setTransform:{"position":{"x":200}} -target=f1 -duration=600;',
        ]
    )
    segments = build_animation_sequence(parse_script(script, 1, 1))

    assert len(segments) == 2
    first, second = segments
    assert first.start_state.position.x == 0
    assert first.end_state.position.x == 100
    assert first.duration == 300
    assert first.easing == Easing.named("linear")
    assert second.start_state == first.end_state
    assert second.end_state.position.x == 200
    assert all(s.start_time == 0 for s in segments)
    assert second.end_time == 600


def test_animation_without_figure_starts_from_first_set_transform():
    commands = [
        SetTransform(target="f2", transform=Transform(position=Vec2(x=-50, y=150)), duration=400),
        SetTransform(target="f2", transform=Transform(position=Vec2(x=0, y=0)), duration=400),
    ]
    first, second = build_animation_sequence(commands)

    assert first.start_state == first.end_state == commands[0].transform
    assert second.start_state == commands[0].transform
    assert second.end_state == commands[1].transform


def test_animation_holds_static_entities():
    commands = [
        ChangeBackground(path="bg.png"),
        ChangeFigure(target="f1", path="a.png", transform=Transform(rotation=0.3)),
        RawText(text="hello"),
    ]
    segments = build_animation_sequence(commands)

    assert [s.target for s in segments] == ["bg-main", "f1"]
    assert all(s.duration == 0 and s.start_state == s.end_state for s in segments)
    assert segments[1].end_state.rotation == 0.3


def test_animation_includes_background_tweens():
    commands = [
        ChangeBackground(path="bg.png"),
        SetTransform(target="bg-main", transform=Transform(scale=Vec2(x=2, y=2)), duration=1000),
    ]
    (segment,) = build_animation_sequence(commands)
    assert segment.target == "bg-main"
    assert segment.start_state == Transform()
    assert segment.end_state.scale.x == 2


def test_interpolate_linear_midpoint():
    segment = AnimationSegment(
        target="f1",
        start_state=Transform(position=Vec2(x=0, y=0), rotation=0, filters={"brightness": 1.0, "mode": "a"}),
        end_state=Transform(position=Vec2(x=100, y=50), rotation=1, filters={"brightness": 2.0, "mode": "b"}),
        duration=1000,
        easing=Easing.named("linear"),
    )

    mid = interpolate(segment, 500)
    assert mid.position.x == pytest.approx(50)
    assert mid.position.y == pytest.approx(25)
    assert mid.rotation == pytest.approx(0.5)
    assert mid.filters["brightness"] == pytest.approx(1.5)
    assert mid.filters["mode"] == "a"

    assert interpolate(segment, 2000) == Transform(
        position=Vec2(x=100, y=50), rotation=1, filters={"brightness": 2.0, "mode": "b"}
    )
    assert interpolate(segment, -10).position.x == 0


def test_interpolate_zero_duration():
    state = Transform(rotation=0.7)
    segment = AnimationSegment(target="f1", start_state=state, end_state=state, duration=0)
    assert interpolate(segment, 0) == state


def test_get_ease():
    assert get_ease(Easing.named("linear")) is ease_linear
    assert get_ease(Easing.named("easeIn")) is ease_in
    assert get_ease(Easing.named("ease-in")) is ease_in
    assert get_ease(Easing.unspecified()) is ease_in_out
    assert get_ease(Easing.use_default()) is ease_in_out
    assert get_ease(Easing.named("bounce")) is ease_in_out
