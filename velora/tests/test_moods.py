########## Mood Tests ##########
# Exercises intensity clamping, tiered labels, and the mood tracker.

from __future__ import annotations

import random

from velora.core import config
from velora.core.moods import (
    MoodTracker,
    describe_mood_change,
    initialize_mood,
    should_announce_mood_change,
    update_mood,
)
from velora.core.types import Character, MoodState


class _FixedRandom(random.Random):
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def test_positive_impact_moves_happy_to_delighted() -> None:
    """Happy at 4 with +3 lands on 7 in the medium happy tier."""

    # 1 Start from a lowered happy state and apply the impact.                 # steps
    state = MoodState(character_id="Ada", base_mood="Happy", current_mood="Happy", intensity=4)
    updated = update_mood(state, "x", 3)
    assert updated.intensity == 7
    assert updated.current_mood == "Delighted"


def test_negative_impact_clamps_and_collapses_to_neutral() -> None:
    """-4 from 3 clamps to 1 and falls back to Neutral."""

    state = MoodState(character_id="Ada", base_mood="Happy", current_mood="Happy", intensity=3)
    updated = update_mood(state, "insult", -4)
    assert updated.intensity == config.MOOD_INTENSITY_MIN
    assert updated.current_mood == "Neutral"


def test_high_tier_and_negative_family_labels() -> None:
    """High intensity picks the strong variant of the base mood family."""

    happy = MoodState(character_id="Ada", base_mood="Happy", intensity=6)
    assert update_mood(happy, "praise", 3).current_mood == "Ecstatic"
    angry = MoodState(character_id="Hulk", base_mood="Angry", intensity=10)
    assert update_mood(angry, "taunt", -2).current_mood == "Furious"
    assert update_mood(angry, "taunt", -4).current_mood == "Angry"


def test_small_impact_keeps_label() -> None:
    """Impacts under the variant threshold leave the label alone."""

    state = MoodState(character_id="Ada", base_mood="Curious", current_mood="Curious", intensity=5)
    updated = update_mood(state, "remark", 1)
    assert updated.current_mood == "Curious"
    assert updated.intensity == 6


def test_history_and_triggers_are_capped() -> None:
    """History keeps the newest ten, triggers the newest five."""

    # 1 Apply more updates than either buffer holds.                           # steps
    state = initialize_mood(Character(name="Ada", mood="Calm"))
    for index in range(config.MOOD_HISTORY_KEEP + 4):
        state = update_mood(state, f"t{index}", 1 if index % 2 else -1)
    assert len(state.history) == config.MOOD_HISTORY_KEEP
    assert state.history[0].trigger == f"t{config.MOOD_HISTORY_KEEP + 3}"
    assert len(state.triggers) == config.MOOD_TRIGGERS_KEEP
    assert state.triggers[-1] == f"t{config.MOOD_HISTORY_KEEP + 3}"


def test_intensity_stays_in_bounds_for_any_sequence() -> None:
    """Random impacts never push intensity outside 1..10."""

    rng = random.Random(11)
    state = initialize_mood(Character(name="Ada"))
    for _ in range(200):
        state = update_mood(state, "noise", rng.randint(-6, 6))
        assert config.MOOD_INTENSITY_MIN <= state.intensity <= config.MOOD_INTENSITY_MAX


def test_announcement_rules() -> None:
    """Unchanged labels are silent; strong swings always announce."""

    previous = MoodState(character_id="Ada", base_mood="Happy", current_mood="Happy", intensity=6)
    same = previous.model_copy()
    assert should_announce_mood_change(previous, same, _FixedRandom(0.0)) is False
    strong = update_mood(previous, "victory", 3)
    assert should_announce_mood_change(previous, strong, _FixedRandom(0.99)) is True
    assert describe_mood_change(strong) == "Ada's mood changes to Ecstatic after victory."


def test_tracker_voices_current_mood() -> None:
    """The tracker creates states on read and voices the latest label."""

    tracker = MoodTracker(_FixedRandom(0.0))
    ada = Character(name="Ada", mood="Happy")
    assert tracker.get(ada).current_mood == "Happy"
    state, announcement = tracker.update(ada, "joke", 3)
    assert state.current_mood == "Ecstatic"
    assert announcement is not None
    assert tracker.voiced(ada).mood == "Ecstatic"
