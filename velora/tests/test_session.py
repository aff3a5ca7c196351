########## Chat Session Tests ##########
# Drives a seeded room end to end against a throwaway sqlite file.

from __future__ import annotations

import random
from typing import Iterator

import pytest

from velora.core import config, db
from velora.core.characters import CharacterCatalog
from velora.core.session import ChatSession
from velora.demo.velora_demo import DEMO_ROSTER, DEMO_SCENARIO, build_demo_room, play_script


@pytest.fixture(autouse=True)
def _isolated_db(tmp_path, monkeypatch) -> Iterator[None]:
    """Fresh event log per test and no text log noise."""

    monkeypatch.setattr(config, "DB_FILE", str(tmp_path / "session_test.sqlite"))
    monkeypatch.setattr(config, "LOG_TEXT_ENABLED", False)
    db._ENGINE = None  # reset cached engine for isolated test
    yield
    db._ENGINE = None


def _room(seed: int = 7) -> ChatSession:
    catalog = CharacterCatalog()
    roster = [catalog.by_name(name) for name in DEMO_ROSTER]
    return ChatSession(roster, scenario=DEMO_SCENARIO, rng=random.Random(seed))


def test_user_lines_get_sequential_ids_and_action_flags() -> None:
    """Ids count up and a leading asterisk marks an action."""

    room = _room()
    welcome = room.welcome()
    spoken = room.post_user_message("Hello team.")
    action = room.post_user_message("*raises shield* Stay behind me.")
    assert [welcome.id, spoken.id, action.id] == ["msg-1", "msg-2", "msg-3"]
    assert welcome.system and welcome.is_narration
    assert spoken.is_user and not spoken.is_action
    assert action.is_action


def test_character_turn_answers_latest_line() -> None:
    """Replies point at the stimulus, stay under the cap, and free the typing slot."""

    # 1 Post one line and let the room react.                                  # steps
    # 2 Every reply records a delay and the typing slot ends empty.            # steps
    for seed in range(10):
        room = _room(seed)
        stimulus = room.post_user_message("What should we do about the reactor core?")
        appended = room.run_character_turn()
        replies = [message for message in appended if not message.system]
        assert 1 <= len(replies) <= config.DEMO_MAX_RESPONDERS
        assert all(reply.reply_to == stimulus.id for reply in replies)
        assert all(room.delays[reply.id] > 0 for reply in replies)
        assert len({reply.speaker for reply in replies}) == len(replies)
        assert not room.typing.is_typing


def test_mentioned_character_answers_first() -> None:
    """Naming a character puts them at the front of the turn."""

    for seed in range(5):
        room = _room(seed)
        room.post_user_message("Thor, what now?")
        appended = room.run_character_turn()
        assert appended[0].speaker == "Thor"


def test_story_arc_moves_with_battle_talk() -> None:
    """Trigger words in user lines push the arc into conflict."""

    room = _room()
    room.post_user_message("They attack the bridge!")
    assert room.story_arc is not None
    assert room.story_arc.current_phase == "conflict"
    assert DEMO_SCENARIO.story_arc.current_phase == "introduction"


def test_lines_between_characters_move_affinity() -> None:
    """A warm line spoken by one character raises affinity with whoever answers."""

    room = _room(3)
    room.post_user_message("Thank you, great plan.", speaker="Thor")
    appended = room.run_character_turn()
    replies = [message for message in appended if not message.system]
    assert replies and all(reply.speaker != "Thor" for reply in replies)
    assert room.relationships.get("Thor", replies[0].speaker).affinity == 2


def test_busy_typing_slot_defers_everyone() -> None:
    """While someone else types, responders queue instead of replying."""

    # 1 Hold the slot, run a turn, then release and let the queue drain.       # steps
    room = _room()
    stimulus = room.post_user_message("Anyone there?")
    room.typing.begin("Narrator")
    assert room.run_character_turn() == []
    queued = list(room.typing.deferred)
    assert queued
    released = [message for message in room.release_typing() if not message.system]
    assert [reply.speaker for reply in released] == queued
    assert all(reply.reply_to == stimulus.id for reply in released)
    assert not room.typing.is_typing and room.typing.deferred == []
    assert room.release_typing() == []


def test_regenerate_keeps_id_and_position() -> None:
    """Regenerating swaps the text in place; user lines cannot be regenerated."""

    room = _room(11)
    stimulus = room.post_user_message("Iron Man, status report?")
    reply = next(message for message in room.run_character_turn() if not message.system)
    position = room.messages.index(reply)
    replacement = room.regenerate(reply.id)
    assert replacement is not None
    assert replacement.id == reply.id
    assert replacement.reply_to == stimulus.id
    assert room.messages[position].id == reply.id
    assert room.regenerate(stimulus.id) is None
    assert room.regenerate("msg-999") is None


def test_roster_changes_are_narrated() -> None:
    """Joins and leaves produce narrator lines; unknown names do nothing."""

    room = _room()
    extra = CharacterCatalog().by_name("Mira Chen")
    joined = room.add_character(extra)
    assert joined.message == "Mira Chen has joined the chat."
    left = room.remove_character("Hulk")
    assert left is not None and left.message == "Hulk has left the chat."
    assert room.character("Hulk") is None
    assert room.remove_character("Nobody") is None


def test_branch_offer_and_choice() -> None:
    """Forced offers hold three or four forks; choosing one narrates it."""

    room = _room(5)
    for line in ("We search the roof.", "Nothing here yet.", "Keep looking."):
        room.post_user_message(line)
    options = room.propose_branches(force=True)
    assert config.BRANCH_OPTIONS_MIN <= len(options) <= config.BRANCH_OPTIONS_MAX
    assert room.choose_branch(len(options)) is None
    chosen = room.choose_branch(0)
    assert chosen is not None and chosen.message == options[0]
    assert room.pending_branches == []


def test_events_reset_counter_and_are_flagged(monkeypatch) -> None:
    """Environmental and world events arrive as flagged narrator lines."""

    room = _room()
    room.post_user_message("Quiet night.")
    monkeypatch.setattr(room.engine, "should_trigger_environmental_event", lambda *args: True)
    event = room.maybe_environmental_event()
    assert event is not None and event.is_environmental_event
    assert room.messages_since_event == 0
    world = room.trigger_world_event(major=True)
    assert world.speaker == config.NARRATOR_NAME
    assert world.is_environmental_event and "{{" not in world.message


def test_session_events_reach_the_event_log() -> None:
    """User lines and replies are mirrored into sqlite."""

    room = _room()
    room.post_user_message("Hello team.")
    room.run_character_turn()
    kinds = [event["type"] for event in db.fetch_events()]
    assert kinds[0] == "user_message"
    assert "reply" in kinds


def test_transcript_is_json_ready() -> None:
    """Transcript rows use camelCase aliases and carry reply delays."""

    room = _room()
    room.post_user_message("Hello team.")
    room.run_character_turn()
    rows = room.transcript()
    assert rows[0]["isUser"] is True
    assert rows[0]["delayMs"] is None
    assert isinstance(rows[1]["delayMs"], int)


def test_demo_script_runs_end_to_end() -> None:
    """The scripted demo fills the log and ends with a world event."""

    session = build_demo_room(seed=3)
    messages = play_script(session)
    assert messages[0].is_narration
    assert messages[-1].is_environmental_event
    assert sum(1 for message in messages if message.is_user) == 8
    assert all("{{" not in message.message for message in messages)
