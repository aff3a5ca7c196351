########## Topic Extractor ##########
# Pulls names, objects, places, verbs, and themes out of raw dialogue text.

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from . import config
from .types import Message

ACTION_SPAN = re.compile(r"\*[^*]*\*")
WORD_PATTERN = re.compile(r"[a-z][a-z'\-]*")
SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
CAPITALIZED = re.compile(r"^[A-Z][a-z]{2,}$")

STOP_WORDS = frozenset(
    """
    the a an and or but in on at to for with by about like through over before after between
    under during without of up down is are was were be been being have has had do does did
    will would shall should can could may might must that this these those i you he she it we
    they me him her us them there here where when what which who whom whose why how doing just
    very really quite more most some other another many much such from into onto upon while
    since until though although even also then than well back again still only ever never
    always often sometimes your yours mine ours their theirs yeah okay going want know think
    """.split()
)

OBJECT_WORDS = frozenset(
    "sword book key map scroll artifact gem crystal potion device machine computer weapon tool ship vehicle".split()
)
PLACE_WORDS = frozenset(
    "castle tower forest mountain cave dungeon city village temple shrine lab station planet galaxy dimension realm".split()
)
CONCEPT_WORDS = frozenset(
    "magic technology science power energy force spirit soul mind knowledge wisdom truth secret mystery quest mission".split()
)
ACTION_VERBS = frozenset(
    """
    attack fight defend protect save rescue escape flee hide search find discover explore investigate
    solve create build make destroy break steal take give help heal hurt kill travel journey quest seek
    """.split()
)
EMOTIONAL_THEMES = frozenset(
    "love hate fear hope despair joy sorrow anger peace conflict betrayal loyalty trust suspicion revenge forgiveness".split()
)
DIRECTION_WORDS = frozenset("north south east west inside outside above below beyond behind beneath within around".split())
KEY_PHRASE_PATTERN = re.compile(r"\b(?:the|this|that)\s+([a-z]+)\b|\b([a-z]+)'s\s+([a-z]+)\b")
DESTINATION_PATTERN = re.compile(r"\b(?:go to|head to|travel to|arrive at|reach|enter|exit|leave) the ([a-z]+)\b")


def strip_actions(text: str) -> str:
    """Remove *action* spans so only spoken words remain."""

    return ACTION_SPAN.sub(" ", text or "")


def significant_words(text: str) -> List[str]:
    """Lowercase words longer than three letters that are not stop words."""

    words = [word.strip("'-") for word in WORD_PATTERN.findall(strip_actions(text).lower())]
    return [word for word in words if len(word) >= config.TOPIC_MIN_LENGTH and word not in STOP_WORDS]


def _names(text: str) -> List[str]:
    """Capitalized words that do not open a sentence."""

    names: List[str] = []
    for sentence in SENTENCE_SPLIT.split(text.strip()):
        for token in sentence.split()[1:]:
            token = token.strip(".,!?;:\"()")
            if CAPITALIZED.match(token):
                names.append(token)
    return names


def _keep(candidate: str) -> bool:
    return len(candidate) >= config.TOPIC_MIN_LENGTH and candidate not in STOP_WORDS


def extract_topics(text: str, limit: int = config.TOPIC_LIMIT) -> List[str]:
    """Ranked, unique topics for a block of text."""

    # 1 Names first, found on the original casing.                              # steps
    # 2 Then fixed vocabularies, key phrases, verbs, themes, and locations.     # steps
    # 3 Pad with the remaining significant words in reading order.              # steps
    spoken = strip_actions(text)
    lowered = spoken.lower()
    words = significant_words(spoken)
    ranked: List[str] = []

    def _add(candidates: Iterable[str]) -> None:
        for candidate in candidates:
            candidate = candidate.lower()
            if _keep(candidate) and candidate not in ranked:
                ranked.append(candidate)

    _add(_names(spoken))
    _add(word for word in words if word in OBJECT_WORDS or word in PLACE_WORDS or word in CONCEPT_WORDS)
    for match in KEY_PHRASE_PATTERN.finditer(lowered):
        _add(group for group in match.groups() if group)
    _add(word for word in words if word in ACTION_VERBS)
    _add(word for word in words if word in EMOTIONAL_THEMES)
    _add(word for word in words if word in DIRECTION_WORDS)
    _add(DESTINATION_PATTERN.findall(lowered))
    _add(words)
    return ranked[:limit]


def extract_topics_from_messages(messages: Sequence[Message], limit: int = config.TOPIC_LIMIT) -> List[str]:
    """Topics for a message window, skipping system lines."""

    combined = " ".join(message.message for message in messages if not message.system)
    return extract_topics(combined, limit=limit)


def quick_topics(text: str) -> List[str]:
    """First few significant words of a single line."""

    unique: List[str] = []
    for word in significant_words(text):
        if word not in unique:
            unique.append(word)
    return unique[: config.QUICK_TOPIC_LIMIT]


def recent_topics(messages: Sequence[Message]) -> List[str]:
    """Quick topics across the last three messages."""

    topics: List[str] = []
    for message in list(messages)[-3:]:
        for topic in quick_topics(message.message):
            if topic not in topics:
                topics.append(topic)
    return topics
