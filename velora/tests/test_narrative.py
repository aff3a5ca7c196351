########## Narrative Tests ##########
# Phase ladder, arc transitions, branch pacing, and branch options.

from __future__ import annotations

import random

from velora.core import config
from velora.core.branches import BranchGenerator, overlaps_history
from velora.core.narrative import (
    NarrativeDirector,
    generate_writing_instructions,
    infer_phase,
    phase_for_count,
    update_story_arc,
)
from velora.core.types import Character, Message, NarrativeContext, Relationship


class _FixedRandom(random.Random):
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _history(count: int, text: str = "We walk on through the quiet valley.") -> list:
    return [Message(id=str(index), speaker="You", message=text, is_user=True) for index in range(count)]


def test_phase_ladder_thresholds() -> None:
    """Message counts map onto the configured ladder."""

    assert phase_for_count(0) == "introduction"
    assert phase_for_count(10) == "rising_action"
    assert phase_for_count(25) == "conflict"
    assert phase_for_count(40) == "climax"
    assert phase_for_count(60) == config.PHASE_FINAL


def test_tense_rooms_escalate_rising_action() -> None:
    """A tense tone turns rising action into conflict."""

    assert infer_phase(12, "tense", random.Random(1)) == "conflict"
    assert infer_phase(12, "neutral", random.Random(1)) == "rising_action"


def test_cheerful_rooms_sometimes_ease_conflict() -> None:
    """Happy or excited tone drops conflict back to rising action when the draw allows."""

    assert infer_phase(30, "happy", _FixedRandom(0.1)) == "rising_action"
    assert infer_phase(30, "excited", _FixedRandom(0.1)) == "rising_action"
    assert infer_phase(30, "happy", _FixedRandom(0.5)) == "conflict"
    assert infer_phase(30, "neutral", _FixedRandom(0.1)) == "conflict"
    assert infer_phase(45, "happy", _FixedRandom(0.1)) == "climax"


def test_update_story_arc_moves_phase_and_goal() -> None:
    """Battle talk in the introduction jumps to a high-tension conflict."""

    # 1 Feed a trigger word through the recent window.                         # steps
    arc = NarrativeContext(theme="superhero")
    updated = update_story_arc(arc, _history(2, "They attack the bridge!"))
    assert updated.current_phase == "conflict"
    assert updated.current_tension == "high"
    assert arc.current_phase == "introduction"


def test_update_story_arc_without_triggers_returns_same_arc() -> None:
    """Quiet windows leave the arc object untouched."""

    arc = NarrativeContext(theme="superhero")
    assert update_story_arc(arc, _history(3)) is arc


def test_writing_instructions_follow_talkativeness_and_tension() -> None:
    """Chatty characters get long replies and high tension adds urgency notes."""

    arc = NarrativeContext(theme="superhero", current_phase="conflict", current_tension="high", current_goal="Hold the line")
    chatty = Character(name="Iron Man", type="superhero", talkativeness=9, voice_style="witty")
    quiet = Character(name="Hulk", type="superhero", talkativeness=2)
    loud = generate_writing_instructions(arc, chatty)
    assert loud.response_length == "long"
    assert "Iron Man" in loud.character_reminders
    assert "witty" in loud.character_reminders
    assert "urgency" in loud.general_instructions
    assert "hold the line" in loud.general_instructions
    assert generate_writing_instructions(arc, quiet).response_length == "short"


def test_branch_pacing_never_before_minimum_always_at_maximum() -> None:
    """The ramp stays closed under eight and opens at twelve."""

    # 1 Nothing can fire for the first eight checks.                           # steps
    # 2 Once the counter reaches the maximum a suggestion is due.              # steps
    director = NarrativeDirector("adventure", random.Random(0))
    history = _history(3)
    assert director.should_suggest_branch([]) is False
    for _ in range(config.BRANCH_MIN_SPACING + 1):
        assert director.should_suggest_branch(history) is False
    director.messages_since_branch = config.BRANCH_MAX_SPACING
    assert director.should_suggest_branch(history) is True


def test_generate_branch_options_returns_three_or_four_unique() -> None:
    """Options are unique, bounded, and reset the pacing counter."""

    for seed in range(20):
        director = NarrativeDirector("fantasy", random.Random(seed))
        director.messages_since_branch = 11
        options = director.generate_branch_options(_history(6, "The ancient crystal glows in the temple."))
        assert config.BRANCH_OPTIONS_MIN <= len(options) <= config.BRANCH_OPTIONS_MAX
        assert len(options) == len(set(options))
        assert all("{{" not in option for option in options)
        assert director.messages_since_branch == 0
        assert director.branch_history[-len(options):] == options


def test_recent_branches_are_not_offered_again() -> None:
    """Anything overlapping the branch history is filtered from the pool."""

    generator = BranchGenerator(random.Random(4))
    pool = generator.candidate_pool("adventure", [], "neutral", "introduction", [], [])
    remembered = pool[:2]
    filtered = generator.candidate_pool("adventure", [], "neutral", "introduction", [], remembered)
    assert not any(overlaps_history(option, remembered) for option in filtered)


def test_relationship_branches_name_the_pair() -> None:
    """A strong bond produces branches that mention both characters."""

    bond = Relationship(characters=["Thor", "Hulk"], affinity=8)
    branches = BranchGenerator(random.Random(1)).relationship_branches([bond], "adventure", "conflict")
    assert branches
    assert all("Thor" in branch and "Hulk" in branch for branch in branches)
