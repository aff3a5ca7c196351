########## Scenario Context Tests ##########
# Cue extraction from descriptions and the scenario-anchored reply lines.

from __future__ import annotations

import random

from velora.core.context import (
    COMBAT_FLOURISHES,
    TYPE_SCENARIO_LINES,
    ScenarioElements,
    combat_response,
    extract_scenario_elements,
    flirt_response,
    is_flirtatious,
    relationship_response,
    scenario_response,
)
from velora.core.types import Character

DESCRIPTION = (
    "A tense standoff at the old harbor warehouse district at midnight, rain pouring. "
    "Former friends now rivals, the air thick with tension and the smell of salt."
)


class _FixedRandom(random.Random):
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def test_extract_scenario_elements() -> None:
    """Each cue family pulls the first or every matching phrase."""

    elements = extract_scenario_elements(DESCRIPTION)
    assert elements.setting == "old harbor warehouse district"
    assert elements.time == "midnight"
    assert elements.weather == "pouring"
    assert elements.mood == "tense"
    assert elements.relationships == ["Former friends", "rivals"]
    assert elements.conflict == "standoff"
    assert elements.sensory_details == ["smell"]
    assert elements.emotional_undercurrents == ["tension"]


def test_empty_description_gives_empty_elements() -> None:
    """Nothing to mine means every field stays empty."""

    assert extract_scenario_elements("") == ScenarioElements()
    assert extract_scenario_elements(None) == ScenarioElements()


def test_flirt_detection_and_reply() -> None:
    """Compliments are spotted and deflected inside the scene."""

    assert is_flirtatious("You have lovely eyes")
    assert not is_flirtatious("Check the map")
    reply = flirt_response(Character(name="Mira"), extract_scenario_elements(DESCRIPTION), _FixedRandom(0.0))
    assert reply.startswith("*with a tense expression, glancing around at the old harbor warehouse district*")


def test_scenario_response_falls_back_to_type_lines() -> None:
    """Without cues only the type-keyed lines remain."""

    mage = Character(name="Lyra", type="fantasy")
    for seed in range(10):
        line = scenario_response(mage, ScenarioElements(), "hello", random.Random(seed))
        assert line in TYPE_SCENARIO_LINES["fantasy"]
    stranger = Character(name="Pat", type="unknown")
    assert scenario_response(stranger, ScenarioElements(), "hello", random.Random(1)) in TYPE_SCENARIO_LINES["default"]


def test_relationship_and_combat_lines_use_the_character() -> None:
    """Relationship lines name the target; combat lines use type flourishes."""

    zax = Character(name="Commander Zax", type="scifi")
    target = Character(name="Mira Chen")
    for seed in range(10):
        line = relationship_response(zax, target, extract_scenario_elements(DESCRIPTION), random.Random(seed))
        assert "Mira Chen" in line
    assert COMBAT_FLOURISHES["scifi"][0] in combat_response(zax, _FixedRandom(0.0))
