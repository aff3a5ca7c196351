########## Sentiment Tests ##########
# Covers polarity, emotional tone, and interaction analysis.

from __future__ import annotations

from velora.core.sentiment import (
    analyze_conversation_mood,
    analyze_emotional_tone,
    analyze_interaction,
    analyze_sentiment,
    classify_interaction,
)
from velora.core.types import Message


def _messages(*lines: str) -> list:
    return [Message(id=str(index), speaker="A", message=line) for index, line in enumerate(lines)]


def test_analyze_sentiment_counts_keywords() -> None:
    """More positive cues than negative ones reads positive and vice versa."""

    assert analyze_sentiment("What a wonderful, amazing day") == "positive"
    assert analyze_sentiment("This is terrible and awful") == "negative"
    assert analyze_sentiment("The door is blue") == "neutral"


def test_conversation_mood_uses_last_three_messages() -> None:
    """Only the trailing window votes."""

    messages = _messages("I hate this", "awful", "great news", "so good", "excellent")
    assert analyze_conversation_mood(messages) == "positive"
    assert analyze_conversation_mood([]) == "neutral"


def test_emotional_tone_needs_threshold() -> None:
    """A single mild cue stays neutral; repeated anger dominates."""

    assert analyze_emotional_tone(_messages("I am a little annoyed")) == "neutral"
    tone = analyze_emotional_tone(_messages("I am furious!", "This makes me angry!", "I hate it!"))
    assert tone == "angry"


def test_analyze_interaction_clamps_delta() -> None:
    """Affinity change is signed and never beyond three."""

    # 1 Stack many positive words to push past the clamp.                     # steps
    delta, kind = analyze_interaction("thank you, great, excellent, amazing, wonderful friend")
    assert delta == 3
    assert kind == "gratitude"
    delta, kind = analyze_interaction("No, that is stupid and wrong, you fool")
    assert delta == -3
    assert kind == "statement"


def test_classify_interaction_priority() -> None:
    """Punctuation wins, and disagreement is not mistaken for agreement."""

    assert classify_interaction("Really?") == "question"
    assert classify_interaction("Watch out!") == "exclamation"
    assert classify_interaction("I disagree with that") == "disagreement"
    assert classify_interaction("I agree with that") == "agreement"
    assert classify_interaction("Please help me") == "request"
