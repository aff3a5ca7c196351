########## Speaker Selection ##########
# Picks who talks next, who joins in, and how long they "type" first.

from __future__ import annotations

import random
import re
from typing import List, Optional, Sequence

from . import config
from .dice import pick, weighted_pick
from .types import Character, Message

INTENSE_MOOD: str = "intense"
INTENSE_CHANCE: float = 0.7


def _talkativeness(character: Character) -> int:
    return character.talkativeness or config.TALKATIVENESS_DEFAULT


def _available(characters: Sequence[Character], last_speaker_name: Optional[str]) -> List[Character]:
    """Everyone except whoever spoke last."""

    return [character for character in characters or [] if character.name != last_speaker_name]


def mentioned(characters: Sequence[Character], last_message: Optional[Message]) -> List[Character]:
    """Characters named as a whole word in the last message."""

    if last_message is None or not last_message.message:
        return []
    text = last_message.message.lower()
    found: List[Character] = []
    for character in characters:
        pattern = r"\b" + re.escape(character.name.lower()) + r"\b"
        if re.search(pattern, text):
            found.append(character)
    return found


def _is_intense(character: Character) -> bool:
    return (character.mood or "").strip().lower() == INTENSE_MOOD


def by_talkativeness(characters: Sequence[Character]) -> List[Character]:
    """Most talkative first; stable so list order breaks ties."""

    return sorted(characters, key=_talkativeness, reverse=True)


def determine_next_speaker(
    characters: Sequence[Character],
    last_message: Optional[Message],
    last_speaker_name: Optional[str],
    rng: random.Random,
) -> Optional[Character]:
    """Single responder: mentions, then intense moods, then weighted talkativeness."""

    # 1 Drop the previous speaker and short-circuit tiny rosters.              # steps
    # 2 Mentions win outright; intense moods win most of the time.             # steps
    # 3 Otherwise sample by talkativeness over the sorted roster.              # steps
    available = _available(characters, last_speaker_name)
    if not available:
        return None
    if len(available) == 1:
        return available[0]
    named = mentioned(available, last_message)
    if named:
        return pick(rng, named)
    intense = [character for character in available if _is_intense(character)]
    if intense and rng.random() < INTENSE_CHANCE:
        return pick(rng, intense)
    ordered = by_talkativeness(available)
    chosen = weighted_pick(rng, ordered, _talkativeness)
    return chosen or ordered[0]


def determine_responders(
    characters: Sequence[Character],
    last_message: Optional[Message],
    last_speaker_name: Optional[str],
    max_responders: int,
    rng: random.Random,
) -> List[Character]:
    """Several responders: mentions, lucky intense moods, then the chattiest."""

    # 1 Priority list from mentions and intense moods, capped.                 # steps
    # 2 Fill any remaining slots from the talkativeness-sorted remainder.      # steps
    if max_responders <= 0:
        return []
    available = _available(characters, last_speaker_name)
    if len(available) <= 1:
        return available[:max_responders]
    priority = mentioned(available, last_message)
    for character in available:
        if _is_intense(character) and character not in priority and rng.random() < INTENSE_CHANCE:
            priority.append(character)
    priority = priority[:max_responders]
    if len(priority) < max_responders:
        remaining = [character for character in available if character not in priority]
        for character in by_talkativeness(remaining):
            if len(priority) >= max_responders:
                break
            priority.append(character)
    return priority


def should_respond(character: Character, rng: random.Random) -> bool:
    """Chatty characters take their turn more often than quiet ones."""

    threshold = 11 - _talkativeness(character)
    return rng.random() * 10 > threshold


def typing_delay_ms(character: Character, text: str, rng: random.Random) -> int:
    """Simulated latency from thinking speed plus a short reading cost."""

    base = config.TYPING_BASE_MS / (character.thinking_speed or config.THINKING_SPEED_DEFAULT)
    jitter = int(rng.random() * config.TYPING_JITTER_MS)
    reading = min(len(text or "") * config.TYPING_MS_PER_CHAR, config.TYPING_MAX_READING_MS)
    return int(base) + jitter + reading


class TypingIndicator:
    """At most one character is typing; overlapping attempts get deferred."""

    def __init__(self) -> None:
        self.typing_character: Optional[str] = None
        self.deferred: List[str] = []

    @property
    def is_typing(self) -> bool:
        return self.typing_character is not None

    def begin(self, name: str) -> bool:
        """Claim the indicator; returns False and queues the name when busy."""

        if self.typing_character is not None:
            if name != self.typing_character and name not in self.deferred:
                self.deferred.append(name)
            return False
        self.typing_character = name
        return True

    def end(self) -> Optional[str]:
        """Release the indicator and hand back the next deferred name, if any."""

        self.typing_character = None
        if self.deferred:
            return self.deferred.pop(0)
        return None
