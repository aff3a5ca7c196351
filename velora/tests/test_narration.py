########## Narration Tests ##########
# System message rendering and its welcome fallback.

from __future__ import annotations

from velora.core.narration import TIME_CHANGE, WELCOME, build_system_message


def test_detailed_kinds_render_their_details() -> None:
    """Known kinds with every detail present render their own line."""

    assert build_system_message("character_joined", name="Thor") == "Thor has joined the chat."
    assert build_system_message("character_left", name="Thor") == "Thor has left the chat."
    assert build_system_message("mood_change", name="Hulk", mood="Furious") == "Hulk's mood changes to Furious."
    assert build_system_message("scene_change", scene="The docks") == "The scene changes to: The docks"
    assert build_system_message("day_night_transition", time="dusk").startswith("The time changes to dusk.")


def test_plain_kinds_and_fallbacks() -> None:
    """Plain kinds ignore details; unknown kinds or missing details give the welcome."""

    assert build_system_message("time_change") == TIME_CHANGE
    assert build_system_message("welcome") == WELCOME
    assert build_system_message("mood_change", name="Hulk") == WELCOME
    assert build_system_message("meteor_shower") == WELCOME
