########## Scene Tests ##########
# Per-room fragment rotation and environmental event pacing.

from __future__ import annotations

import random

from velora.core import config
from velora.core.scenes import (
    ENVIRONMENTAL_EVENTS,
    SceneGenerator,
    environmental_event_chance,
    generate_environmental_event,
    should_trigger_environmental_event,
)
from velora.core.types import Character, NarrativeContext


class _FixedRandom(random.Random):
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _arc(phase: str = "introduction", tension: str = "medium", theme: str = "superhero") -> NarrativeContext:
    return NarrativeContext(theme=theme, current_phase=phase, current_tension=tension)


def test_event_never_triggers_before_five_messages() -> None:
    """Below the spacing floor the answer is always no."""

    # 1 Try every phase and tension with a draw of zero.                       # steps
    for phase in ("introduction", "conflict", "climax", "resolution"):
        for tension in ("low", "medium", "high", "very high"):
            arc = _arc(phase, tension)
            for count in range(config.EVENT_MIN_MESSAGES):
                assert environmental_event_chance(arc, count) == 0.0
                assert should_trigger_environmental_event(arc, count, random.Random(count)) is False


def test_event_chance_is_monotonic_in_message_count() -> None:
    """More quiet messages never lowers the trigger probability."""

    for phase in ("introduction", "conflict", "climax", "resolution"):
        for tension in ("low", "medium", "high", "very high"):
            arc = _arc(phase, tension)
            chances = [environmental_event_chance(arc, count) for count in range(0, 25)]
            assert chances == sorted(chances)
            assert all(0.0 <= value <= 1.0 for value in chances)


def test_event_chance_without_arc_is_zero() -> None:
    """No arc means no room-wide events."""

    assert environmental_event_chance(None, 20) == 0.0
    assert generate_environmental_event(None, [], random.Random(1)) == ""


def test_generated_event_comes_from_theme_and_phase_pool() -> None:
    """Events are drawn from the matching theme and phase."""

    arc = _arc("conflict")
    event = generate_environmental_event(arc, [], random.Random(5))
    assert event in ENVIRONMENTAL_EVENTS["superhero"]["conflict"]


def test_rotation_is_per_instance() -> None:
    """Two generators keep independent rotation state."""

    # 1 Advance one generator twice; the other must start fresh.              # steps
    arc = _arc(tension="low")
    first = SceneGenerator(random.Random(1))
    second = SceneGenerator(random.Random(1))
    assert first.next_category(arc) == "environment"
    assert first.next_category(arc) == "plot"
    assert second.next_category(arc) == "environment"
    assert first.next_category(arc) == "action"


def test_explicit_action_message_forces_action_fragment() -> None:
    """Action messages always get an action fragment."""

    generator = SceneGenerator(random.Random(2))
    assert generator.next_category(_arc(), message_type="action") == "action"


def test_scene_description_needs_character_and_arc() -> None:
    """Missing inputs produce an empty fragment."""

    generator = SceneGenerator(random.Random(2))
    hero = Character(name="Thor", type="superhero")
    assert generator.generate_scene_description(None, _arc()) == ""
    assert generator.generate_scene_description(hero, None) == ""
    assert generator.generate_scene_description(hero, _arc()) != ""


def test_high_tension_pulls_rotation_toward_action() -> None:
    """High and very high tension override the rotation when the draw passes."""

    # 1 After an action fragment the rotation would move on to environment.    # steps
    for tension in ("high", "very high"):
        assert SceneGenerator(_FixedRandom(0.1)).next_category(_arc(tension=tension)) == "action"
        assert SceneGenerator(_FixedRandom(0.9)).next_category(_arc(tension=tension)) == "environment"
    assert SceneGenerator(_FixedRandom(0.1)).next_category(_arc(tension="medium")) == "environment"
    pressed = SceneGenerator(_FixedRandom(0.1))
    pressed.next_category(_arc(tension="high"))
    assert pressed.last_type == "action"
