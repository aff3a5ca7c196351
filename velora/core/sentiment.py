########## Sentiment & Tone ##########
# Keyword counting for polarity, dominant emotion, and interaction deltas.

from __future__ import annotations

import re
from typing import Dict, List, Sequence, Tuple

from . import config
from .types import Message

TOKEN_PATTERN = re.compile(r"[a-z']+")

POSITIVE_WORDS: List[str] = [
    "good", "great", "excellent", "amazing", "wonderful", "happy", "love", "like", "enjoy",
    "beautiful", "best", "fantastic", "awesome", "nice", "fun", "exciting", "pleased", "glad",
    "thanks", "thank",
]
NEGATIVE_WORDS: List[str] = [
    "bad", "terrible", "awful", "horrible", "sad", "hate", "dislike", "worst", "boring",
    "annoying", "disappointed", "sorry", "unfortunate", "wrong", "problem", "difficult",
    "angry", "upset", "worried", "fear",
]

EMOTION_FAMILIES: Dict[str, List[str]] = {
    "angry": ["angry", "furious", "enraged", "mad", "outraged", "livid", "seething", "hate", "fury"],
    "sad": ["sad", "depressed", "unhappy", "miserable", "gloomy", "heartbroken", "grief", "sorrow"],
    "happy": ["happy", "joyful", "delighted", "pleased", "glad", "cheerful", "thrilled", "excited"],
    "afraid": ["afraid", "scared", "frightened", "terrified", "fearful", "panicked", "alarmed"],
    "surprised": ["surprised", "shocked", "amazed", "astonished", "stunned", "startled"],
    "tense": ["tense", "anxious", "nervous", "worried", "concerned", "uneasy", "stressed"],
    "curious": ["curious", "interested", "intrigued", "fascinated", "wonder", "questioning"],
    "determined": ["determined", "resolved", "committed", "focused", "steadfast", "dedicated"],
}
EXCLAMATION_FAMILIES: Tuple[str, ...] = ("angry", "happy", "surprised")
EXCLAMATION_WEIGHT: float = 0.5
QUESTION_WEIGHT: float = 1.0
TONE_THRESHOLD: float = 2.0

# Coarser tone vocabulary the branch generator keys its templates on.
BRANCH_TONE_FAMILIES: Dict[str, List[str]] = {
    "tense": ["worried", "anxious", "nervous", "tense", "stress", "uneasy", "concerned"],
    "excited": ["excited", "thrilled", "eager", "enthusiastic", "amazed", "wow", "incredible"],
    "sad": ["sad", "sorry", "unfortunate", "regret", "miss", "loss", "disappointed"],
    "happy": ["happy", "glad", "pleased", "joy", "delighted", "wonderful", "great"],
    "angry": ["angry", "furious", "annoyed", "irritated", "mad", "rage", "hate"],
    "fearful": ["afraid", "scared", "terrified", "fear", "dread", "horror", "panic"],
}

INTERACTION_POSITIVE: List[str] = [
    "thank", "appreciate", "good", "great", "excellent", "amazing", "wonderful", "help", "kind",
    "friend", "like", "love", "agree", "yes", "please", "nice", "happy", "glad", "impressive",
    "beautiful", "smart", "clever", "brave",
]
INTERACTION_NEGATIVE: List[str] = [
    "hate", "dislike", "bad", "terrible", "awful", "horrible", "stupid", "idiot", "fool", "wrong",
    "no", "never", "not", "disagree", "annoying", "irritating", "angry", "upset", "disappointed",
    "failure", "useless", "worthless", "ugly",
]


def tokens(text: str) -> List[str]:
    return TOKEN_PATTERN.findall((text or "").lower())


def _hits(word: str, keyword: str) -> bool:
    """Whole word, or a longer keyword used as a stem (thank -> thanks)."""

    if word == keyword:
        return True
    return len(keyword) >= 4 and word.startswith(keyword)


def _keyword_count(words: Sequence[str], keywords: Sequence[str]) -> int:
    return sum(1 for keyword in keywords if any(_hits(word, keyword) for word in words))


def analyze_sentiment(text: str) -> str:
    """Classify one line as positive, negative, or neutral."""

    words = tokens(text)
    positive = _keyword_count(words, POSITIVE_WORDS)
    negative = _keyword_count(words, NEGATIVE_WORDS)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def analyze_conversation_mood(messages: Sequence[Message], window: int = 3) -> str:
    """Majority polarity across the last few messages."""

    if not messages:
        return "neutral"
    sentiments = [analyze_sentiment(message.message) for message in list(messages)[-window:]]
    positive = sentiments.count("positive")
    negative = sentiments.count("negative")
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def emotion_scores(messages: Sequence[Message]) -> Dict[str, float]:
    """Per family counts plus punctuation boosts for a message window."""

    # 1 One point per message per family that has any keyword present.        # steps
    # 2 Each '!' nudges angry/happy/surprised, each '?' nudges curious.        # steps
    scores: Dict[str, float] = {emotion: 0.0 for emotion in EMOTION_FAMILIES}
    for message in messages:
        text = (message.message or "").lower()
        words = tokens(text)
        for emotion, keywords in EMOTION_FAMILIES.items():
            if any(_hits(word, keyword) for word in words for keyword in keywords):
                scores[emotion] += 1
        exclamations = text.count("!")
        for emotion in EXCLAMATION_FAMILIES:
            scores[emotion] += exclamations * EXCLAMATION_WEIGHT
        scores["curious"] += text.count("?") * QUESTION_WEIGHT
    return scores


def analyze_emotional_tone(messages: Sequence[Message]) -> str:
    """Dominant emotion of the window, or neutral below the threshold."""

    if not messages:
        return "neutral"
    scores = emotion_scores(messages)
    best = max(scores, key=lambda emotion: scores[emotion])  # ties keep family order
    if scores[best] < TONE_THRESHOLD:
        return "neutral"
    return best


def analyze_branch_tone(messages: Sequence[Message]) -> str:
    """Coarse tone for branch selection; lines with no cue vote neutral."""

    if not messages:
        return "neutral"
    counts: Dict[str, int] = {emotion: 0 for emotion in BRANCH_TONE_FAMILIES}
    counts["neutral"] = 0
    for message in messages:
        text = (message.message or "").lower()
        if not text:
            continue
        found = False
        for emotion, indicators in BRANCH_TONE_FAMILIES.items():
            if any(indicator in text for indicator in indicators):
                counts[emotion] += 1
                found = True
        if not found:
            counts["neutral"] += 1
    dominant = "neutral"
    best = 0
    for emotion, count in counts.items():
        if count > best:
            best = count
            dominant = emotion
    return dominant


def classify_interaction(text: str) -> str:
    """Interaction type by punctuation first, then cue words."""

    lowered = (text or "").lower()
    if "?" in lowered:
        return "question"
    if "!" in lowered:
        return "exclamation"
    if "thank" in lowered:
        return "gratitude"
    if "help" in lowered:
        return "request"
    if "disagree" in lowered:
        return "disagreement"
    if "agree" in lowered:
        return "agreement"
    return "statement"


def analyze_interaction(text: str) -> Tuple[int, str]:
    """Signed affinity delta (clamped) and interaction type for a line."""

    # 1 Count each word at most once toward either side.                       # steps
    words = tokens(text)
    positive = 0
    negative = 0
    for word in words:
        if any(_hits(word, keyword) for keyword in INTERACTION_POSITIVE):
            positive += 1
        elif any(_hits(word, keyword) for keyword in INTERACTION_NEGATIVE):
            negative += 1
    low, high = config.AFFINITY_DELTA_CLAMP
    delta = positive - negative
    if delta > high:
        delta = high
    if delta < low:
        delta = low
    return delta, classify_interaction(text)
