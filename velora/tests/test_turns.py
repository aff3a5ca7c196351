########## Turn Taking Tests ##########
# Speaker exclusion, mention priority, responder caps, and the typing slot.

from __future__ import annotations

import random

from velora.core import config
from velora.core.dice import weighted_pick
from velora.core.turns import (
    TypingIndicator,
    determine_next_speaker,
    determine_responders,
    should_respond,
    typing_delay_ms,
)
from velora.core.types import Character, Message


class _FixedRandom(random.Random):
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _roster() -> list:
    return [
        Character(name="Ada", talkativeness=3),
        Character(name="Bo", talkativeness=9),
        Character(name="Cy", talkativeness=6),
        Character(name="Dee", talkativeness=5),
    ]


def _line(text: str, speaker: str = "You") -> Message:
    return Message(id="m1", speaker=speaker, message=text, is_user=speaker == "You")


def test_next_speaker_never_returns_last_speaker() -> None:
    """Across many seeds the excluded speaker is never chosen."""

    roster = _roster()
    for seed in range(50):
        chosen = determine_next_speaker(roster, _line("hi", "Bo"), "Bo", random.Random(seed))
        assert chosen is not None
        assert chosen.name != "Bo"


def test_next_speaker_edge_cases() -> None:
    """Zero candidates gives None, one candidate is returned as is."""

    ada = Character(name="Ada")
    assert determine_next_speaker([], None, None, random.Random(1)) is None
    assert determine_next_speaker([ada], None, "Ada", random.Random(1)) is None
    assert determine_next_speaker([ada, Character(name="Bo")], None, "Bo", random.Random(1)) == ada


def test_sole_mention_always_wins() -> None:
    """A named character is picked regardless of talkativeness."""

    # 1 Mention the quietest character; Bo is the last speaker.                # steps
    roster = _roster()
    for seed in range(20):
        chosen = determine_next_speaker(roster, _line("Ada, what do you see?", "Bo"), "Bo", random.Random(seed))
        assert chosen is not None and chosen.name == "Ada"


def test_mentions_match_whole_words_only() -> None:
    """Bo is not mentioned by the word 'boat'."""

    roster = [Character(name="Bo", talkativeness=1), Character(name="Cy", talkativeness=10)]
    chosen = determine_next_speaker(roster, _line("Look at that boat"), None, _FixedRandom(0.5))
    assert chosen is not None and chosen.name == "Cy"


def test_intense_mood_wins_most_draws() -> None:
    """Intense characters jump the queue when the 70 percent gate passes."""

    roster = [Character(name="Calm", talkativeness=10), Character(name="Wild", mood="Intense", talkativeness=1)]
    chosen = determine_next_speaker(roster, _line("anything"), None, _FixedRandom(0.1))
    assert chosen is not None and chosen.name == "Wild"


def test_weighted_pick_uses_talkativeness() -> None:
    """A low draw picks the chattiest; the roster is sorted before sampling."""

    chosen = determine_next_speaker(_roster(), _line("anything"), None, _FixedRandom(0.0))
    assert chosen is not None and chosen.name == "Bo"


def test_weighted_pick_without_usable_weight_takes_the_heaviest() -> None:
    """A non-positive total ignores list order and returns the top weight."""

    weights = {"quiet": -2.0, "steady": 0.0, "shy": -1.0}
    assert weighted_pick(_FixedRandom(0.5), list(weights), weights.get) == "steady"
    assert weighted_pick(_FixedRandom(0.5), [], weights.get) is None


def test_responders_capped_and_unique() -> None:
    """Output never exceeds the cap and never repeats a character."""

    roster = _roster()
    for seed in range(30):
        for cap in range(0, 6):
            responders = determine_responders(roster, _line("Ada and Cy, report"), "Dee", cap, random.Random(seed))
            names = [character.name for character in responders]
            assert len(names) <= cap
            assert len(names) == len(set(names))
            assert "Dee" not in names


def test_responders_put_mentions_first_then_fill_by_talkativeness() -> None:
    """Mentions lead; empty slots take the chattiest of the rest."""

    responders = determine_responders(_roster(), _line("Ada, thoughts?"), None, 3, random.Random(2))
    assert [character.name for character in responders] == ["Ada", "Bo", "Cy"]


def test_should_respond_threshold() -> None:
    """random*10 must beat 11 - talkativeness."""

    chatty = Character(name="Bo", talkativeness=9)
    assert should_respond(chatty, _FixedRandom(0.21)) is True
    assert should_respond(chatty, _FixedRandom(0.19)) is False


def test_typing_delay_scales_with_thinking_speed() -> None:
    """Fast thinkers type sooner than slow ones for the same text."""

    fast = Character(name="Fast", thinking_speed=2.0)
    slow = Character(name="Slow", thinking_speed=0.5)
    text = "A short reply."
    fast_delay = typing_delay_ms(fast, text, _FixedRandom(0.0))
    slow_delay = typing_delay_ms(slow, text, _FixedRandom(0.0))
    assert fast_delay < slow_delay
    assert fast_delay == config.TYPING_BASE_MS // 2 + len(text) * config.TYPING_MS_PER_CHAR


def test_typing_indicator_defers_overlapping_attempts() -> None:
    """Only one character types; others queue in arrival order."""

    # 1 Claim, collide twice, then release in order.                           # steps
    indicator = TypingIndicator()
    assert indicator.begin("Ada") is True
    assert indicator.begin("Bo") is False
    assert indicator.begin("Cy") is False
    assert indicator.begin("Bo") is False
    assert indicator.deferred == ["Bo", "Cy"]
    assert indicator.end() == "Bo"
    assert indicator.is_typing is False
    assert indicator.begin("Bo") is True
