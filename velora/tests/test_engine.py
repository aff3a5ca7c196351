########## Engine Facade Tests ##########
# Public entry points return safe defaults and log when internals raise.

from __future__ import annotations

import random

from velora.core import config, engine as engine_module, runtime
from velora.core.engine import ConversationEngine
from velora.core.types import Character, Message, MoodState, NarrativeContext, Relationship


def _boom(*args: object, **kwargs: object) -> None:
    raise RuntimeError("boom")


def test_engine_happy_path_uses_shared_random() -> None:
    """Normal calls pass straight through to the pure functions."""

    room = ConversationEngine(random.Random(4))
    roster = [Character(name="Ada", talkativeness=8), Character(name="Bo", talkativeness=2)]
    speaker = room.select_next_speaker(roster, Message(id="1", speaker="Bo", message="Ada?"), "Bo")
    assert speaker is not None and speaker.name == "Ada"
    state = room.update_mood(MoodState(character_id="Ada", base_mood="Happy", intensity=4), "joke", 3)
    assert state.current_mood == "Delighted"
    assert room.synthesize_response(roster[0], "hello there")
    assert room.should_trigger_environmental_event(None, 20) is False


def test_synthesis_failure_deflects_and_logs(monkeypatch) -> None:
    """A raising synthesizer yields the deflection line and one log note."""

    # 1 Mirror the run log into the debug buffer for inspection.               # steps
    monkeypatch.setattr(config, "DEBUG_VERBOSE", True)
    monkeypatch.setattr(config, "LOG_TEXT_ENABLED", False)
    monkeypatch.setattr(runtime, "DEBUG_LOG", [])
    room = ConversationEngine(random.Random(1))
    monkeypatch.setattr(room.synthesizer, "generate_response", _boom)
    monkeypatch.setattr(room.synthesizer, "generate_interaction", _boom)
    hero = Character(name="Thor", type="superhero")
    assert room.synthesize_response(hero, "hello") == config.DEFLECTION_LINE
    assert room.synthesize_interaction(hero, "Hulk", "smash") == config.DEFLECTION_LINE
    assert runtime.DEBUG_LOG[0] == "[Synthesis] RuntimeError: boom"
    assert runtime.DEBUG_LOG[1] == "[Interaction] RuntimeError: boom"


def test_state_updates_return_inputs_on_failure(monkeypatch) -> None:
    """Mood and relationship updates hand back the original value."""

    monkeypatch.setattr(config, "LOG_TEXT_ENABLED", False)
    monkeypatch.setattr(engine_module, "apply_mood_update", _boom)
    monkeypatch.setattr(engine_module, "apply_relationship_update", _boom)
    room = ConversationEngine(random.Random(1))
    state = MoodState(character_id="Ada")
    bond = Relationship(characters=["Ada", "Bo"], affinity=2)
    assert room.update_mood(state, "x", 3) is state
    assert room.update_relationship(bond, "Ada", "hi", 1, "statement") is bond


def test_selection_and_narrative_defaults_on_failure(monkeypatch) -> None:
    """Selection falls back to nobody; events and branches to nothing."""

    monkeypatch.setattr(config, "LOG_TEXT_ENABLED", False)
    monkeypatch.setattr(engine_module, "determine_next_speaker", _boom)
    monkeypatch.setattr(engine_module, "determine_responders", _boom)
    monkeypatch.setattr(engine_module, "event_due", _boom)
    room = ConversationEngine(random.Random(1))
    monkeypatch.setattr(room.scenes, "generate_environmental_event", _boom)
    monkeypatch.setattr(room.director, "generate_branch_options", _boom)
    roster = [Character(name="Ada"), Character(name="Bo")]
    arc = NarrativeContext(theme="superhero")
    assert room.select_next_speaker(roster, None, None) is None
    assert room.select_responders(roster, None, None, 2) == []
    assert room.should_trigger_environmental_event(arc, 9) is False
    assert room.generate_environmental_event(arc, roster) == ""
    assert room.generate_branch_options([]) == []
