########## Voice Tests ##########
# Template lookup, banned phrase scrubbing, and the scenario filter.

from __future__ import annotations

import random

from velora.core.types import Character, NarrativeContext
from velora.core.voices import (
    DEFAULT_FORBIDDEN,
    ENVIRONMENT_ACTIONS,
    HERO_FORBIDDEN,
    URGENCY_PREFIXES,
    filter_response_for_scenario,
    get_voice_template,
    needs_urgency,
    offending_phrase,
    replacement_for,
    scrub_forbidden,
    strip_forbidden_literals,
)


class _FixedRandom(random.Random):
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def test_template_lookup_prefers_name_then_type() -> None:
    """Named voices win, types come next, and the default list always rides along."""

    iron_man = get_voice_template(Character(name="Iron Man", type="superhero"))
    assert "Let's explore this topic further" in iron_man.forbidden_phrases
    assert all(phrase in iron_man.forbidden_phrases for phrase in DEFAULT_FORBIDDEN)
    hero = get_voice_template(Character(name="Nova", type="superhero"))
    assert all(phrase in hero.forbidden_phrases for phrase in HERO_FORBIDDEN)
    assert any("civilian" in rule for rule in hero.rules)


def test_default_template_picks_up_mood_tweaks() -> None:
    """Angry characters without a named or typed voice get forceful rules."""

    template = get_voice_template(Character(name="Pat", type="modern", mood="Furious"))
    assert "Express frustration or anger" in template.rules
    assert template.forbidden_phrases == DEFAULT_FORBIDDEN


def test_offending_phrase_matches_literal_and_near_misses() -> None:
    """Exact text and heavy token overlap both count."""

    assert offending_phrase("That's a valid point, friend.", DEFAULT_FORBIDDEN) == "That's a valid point"
    assert offending_phrase("I really do appreciate your thoughts.", HERO_FORBIDDEN) == "I appreciate your thoughts"
    assert offending_phrase("Hold the line.", HERO_FORBIDDEN) is None


def test_replacement_uses_closest_known_phrase() -> None:
    """Close phrases get type lines; unknown phrases get the type default."""

    assert replacement_for("That's an interesting perspective", "fantasy") == "Your words carry ancient wisdom."
    assert replacement_for("That's an interesting perspective", "modern") == "I see your point."
    assert replacement_for("Feel free to share more", "scifi") == "The data is clear on our next steps."


def test_scrub_swaps_sentence_and_keeps_action() -> None:
    """The offending sentence is replaced; its leading action survives."""

    scrubbed = scrub_forbidden("*nods* That's a valid point. We move at dawn.", DEFAULT_FORBIDDEN, "modern")
    assert scrubbed == "*nods* Let's focus on what matters. We move at dawn."


def test_literal_strip_removes_every_occurrence() -> None:
    """Literal passes repeat until nothing banned remains."""

    cleaned = strip_forbidden_literals("I'm here to help, so ask. i'm here to help", ["I'm here to help"])
    assert cleaned == "So ask."


def test_urgency_rules() -> None:
    """Very high tension anywhere, or high tension in a fight."""

    assert needs_urgency(NarrativeContext(current_tension="very high"))
    assert needs_urgency(NarrativeContext(current_phase="climax", current_tension="high"))
    assert not needs_urgency(NarrativeContext(current_phase="discovery", current_tension="high"))


def test_filter_adds_urgency_prefix_in_a_fight() -> None:
    """A calm line in a high-tension conflict gets an urgent opening action."""

    # 1 The line has no urgency terms and no action span.                      # steps
    hero = Character(name="Nova", type="superhero")
    arc = NarrativeContext(theme="superhero", current_phase="conflict", current_tension="high")
    filtered = filter_response_for_scenario("Stay close.", hero, arc, random.Random(1))
    assert filtered.endswith("Stay close.")
    assert any(filtered.startswith(prefix) for prefix in URGENCY_PREFIXES["superhero"])


def test_filter_adds_environment_action_when_lucky() -> None:
    """Quiet arcs sometimes open with a phase-matched environment beat."""

    mage = Character(name="Lyra", type="fantasy")
    arc = NarrativeContext(theme="fantasy", current_phase="introduction", current_tension="low")
    filtered = filter_response_for_scenario("We should rest.", mage, arc, _FixedRandom(0.1))
    assert filtered == f"{ENVIRONMENT_ACTIONS['fantasy']['introduction'][0]} We should rest."
    assert filter_response_for_scenario("*sits* We should rest.", mage, arc, _FixedRandom(0.1)) == "*sits* We should rest."
    assert filter_response_for_scenario("We should rest.", mage, None, _FixedRandom(0.1)) == "We should rest."
