########## Mood Tracker ##########
# Derives each character's current mood label and intensity from recent impact.

from __future__ import annotations

import random
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from . import config
from .dice import make_random
from .runtime import log_run_event
from .types import Character, MoodChange, MoodState

# (keywords, high tier label, medium tier label); first family whose keyword
# appears in the lowercased base mood wins.
POSITIVE_VARIANTS: List[Tuple[Tuple[str, ...], str, str]] = [
    (("happy", "joyful"), "Ecstatic", "Delighted"),
    (("calm", "peaceful"), "Blissful", "Content"),
    (("curious", "inquisitive"), "Fascinated", "Intrigued"),
    (("intense",), "Passionate", "Enthusiastic"),
]
POSITIVE_DEFAULT: Tuple[str, str, str] = ("Elated", "Pleased", "Positive")

NEGATIVE_VARIANTS: List[Tuple[Tuple[str, ...], str, str]] = [
    (("angry", "irritable"), "Furious", "Angry"),
    (("sad", "melancholic"), "Devastated", "Sorrowful"),
    (("anxious", "nervous"), "Panicked", "Worried"),
    (("intense",), "Enraged", "Agitated"),
]
NEGATIVE_DEFAULT: Tuple[str, str, str] = ("Distraught", "Upset", "Displeased")

HIGH_TIER: int = 8
MEDIUM_TIER: int = 5
NEUTRAL_MOOD: str = "Neutral"


def _clamp(value: int, low: int, high: int) -> int:
    """Clamp helper for intensity values."""

    if value < low:
        return low
    if value > high:
        return high
    return value


def _variant(
    base_mood: str,
    intensity: int,
    table: List[Tuple[Tuple[str, ...], str, str]],
    default: Tuple[str, str, str],
) -> str:
    """Resolve a label from a variant table for the intensity tier."""

    lowered = (base_mood or "").lower()
    high, medium, low = default
    for keywords, family_high, family_medium in table:
        if any(keyword in lowered for keyword in keywords):
            high, medium = family_high, family_medium
            break
    if intensity >= HIGH_TIER:
        return high
    if intensity >= MEDIUM_TIER:
        return medium
    return low


def positive_mood(base_mood: str, intensity: int) -> str:
    return _variant(base_mood, intensity, POSITIVE_VARIANTS, POSITIVE_DEFAULT)


def negative_mood(base_mood: str, intensity: int) -> str:
    return _variant(base_mood, intensity, NEGATIVE_VARIANTS, NEGATIVE_DEFAULT)


def initialize_mood(character: Character) -> MoodState:
    """Fresh state from the character's base mood at the initial intensity."""

    base = character.mood or config.DEFAULT_BASE_MOOD
    return MoodState(character_id=character.name, base_mood=base, current_mood=base)


def update_mood(
    state: MoodState,
    trigger: str,
    emotional_impact: int,
    interaction_type: str = "statement",
    timestamp: Optional[datetime] = None,
) -> MoodState:
    """Return the next mood state after an emotional impact."""

    # 1 Record the change with the previous label, newest first.               # steps
    # 2 Move intensity and pick the label for its tier and sign.               # steps
    # 3 Low intensity always collapses to Neutral.                             # steps
    timestamp = timestamp or datetime.utcnow()
    impact = int(emotional_impact)
    change = MoodChange(
        timestamp=timestamp,
        previous_mood=state.current_mood,
        trigger=trigger,
        impact=impact,
        interaction_type=interaction_type,
    )
    history = [change, *state.history][: config.MOOD_HISTORY_KEEP]
    intensity = _clamp(state.intensity + impact, config.MOOD_INTENSITY_MIN, config.MOOD_INTENSITY_MAX)
    current = state.current_mood
    if intensity <= config.MOOD_COLLAPSE_INTENSITY:
        current = NEUTRAL_MOOD
    elif impact >= config.MOOD_VARIANT_THRESHOLD:
        current = positive_mood(state.base_mood, intensity)
    elif impact <= -config.MOOD_VARIANT_THRESHOLD:
        current = negative_mood(state.base_mood, intensity)
    triggers = [*state.triggers, trigger][-config.MOOD_TRIGGERS_KEEP :]
    return MoodState(
        character_id=state.character_id,
        base_mood=state.base_mood,
        current_mood=current,
        intensity=intensity,
        triggers=triggers,
        history=history,
        last_change=timestamp,
    )


def should_announce_mood_change(previous: MoodState, current: MoodState, rng: random.Random) -> bool:
    """Surface dramatic swings always, smaller ones only sometimes."""

    if previous.current_mood == current.current_mood:
        return False
    if current.intensity >= config.MOOD_ANNOUNCE_ALWAYS:
        return True
    if current.intensity >= config.MOOD_ANNOUNCE_MEDIUM:
        return rng.random() < config.MOOD_ANNOUNCE_MEDIUM_CHANCE
    return rng.random() < config.MOOD_ANNOUNCE_LOW_CHANCE


def describe_mood_change(state: MoodState) -> str:
    """Narration line for a mood announcement."""

    if state.triggers:
        return f"{state.character_id}'s mood changes to {state.current_mood} after {state.triggers[-1]}."
    return f"{state.character_id}'s mood changes to {state.current_mood}."


class MoodTracker:
    """Owns the mood state for every character in a room."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.states: Dict[str, MoodState] = {}
        self.random = rng or make_random()

    def get(self, character: Character) -> MoodState:
        """Create-on-read lookup keyed by character name."""

        state = self.states.get(character.name)
        if state is None:
            state = initialize_mood(character)
            self.states[character.name] = state
        return state

    def update(
        self,
        character: Character,
        trigger: str,
        emotional_impact: int,
        interaction_type: str = "statement",
    ) -> Tuple[MoodState, Optional[str]]:
        """Apply an impact; returns the new state and an announcement when due."""

        previous = self.get(character)
        current = update_mood(previous, trigger, emotional_impact, interaction_type)
        self.states[character.name] = current
        announcement: Optional[str] = None
        if should_announce_mood_change(previous, current, self.random):
            announcement = describe_mood_change(current)
            log_run_event(f"[Mood] {announcement}")
        return current, announcement

    def voiced(self, character: Character) -> Character:
        """Character copy carrying the current mood label."""

        return character.with_mood(self.get(character).current_mood)
