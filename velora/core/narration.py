########## System Messages ##########
# Narrator lines for joins, leaves, mood shifts, and scene or time changes.

from __future__ import annotations

from typing import Callable, Dict, Tuple

WELCOME: str = "Welcome to the chat room! Characters will respond to your messages."
TIME_CHANGE: str = "The atmosphere in the room shifts as time passes..."

# kind -> (required detail keys, renderer)
DETAILED_MESSAGES: Dict[str, Tuple[Tuple[str, ...], Callable[..., str]]] = {
    "character_joined": (("name",), lambda name: f"{name} has joined the chat."),
    "character_left": (("name",), lambda name: f"{name} has left the chat."),
    "mood_change": (("name", "mood"), lambda name, mood: f"{name}'s mood changes to {mood}."),
    "scene_change": (("scene",), lambda scene: f"The scene changes to: {scene}"),
    "narration": (("text",), lambda text: text),
    "day_night_transition": (
        ("time",),
        lambda time: f"The time changes to {time}. The lighting and mood shift accordingly.",
    ),
}
PLAIN_MESSAGES: Dict[str, str] = {"welcome": WELCOME, "time_change": TIME_CHANGE}


def build_system_message(kind: str, **details: str) -> str:
    """Render a narrator line; unknown kinds or missing details fall back to the welcome."""

    entry = DETAILED_MESSAGES.get(kind)
    if entry is not None:
        keys, render = entry
        if all(details.get(key) for key in keys):
            return render(*(details[key] for key in keys))
    return PLAIN_MESSAGES.get(kind, WELCOME)
