########## Topic Tests ##########
# Confirms lexical topic extraction stays deterministic and bounded.

from __future__ import annotations

from velora.core import config
from velora.core.topics import extract_topics, extract_topics_from_messages, quick_topics, strip_actions
from velora.core.types import Message


def test_extract_topics_ranks_names_then_vocabulary() -> None:
    """Names come before vocabulary hits, and action spans are ignored."""

    # 1 Mix a name, an object, and an action span.                             # steps
    topics = extract_topics("*waves happily* We must find Merlin before the sword is lost.")
    assert topics[0] == "merlin"
    assert "sword" in topics
    assert "waves" not in topics
    assert "happily" not in topics


def test_extract_topics_is_unique_bounded_and_deterministic() -> None:
    """Repeated input yields the same unique list within the limit."""

    words = [f"zz{chr(97 + index % 26)}{chr(97 + index // 26)}word" for index in range(30)]
    text = " ".join(words + words)
    first = extract_topics(text)
    second = extract_topics(text)
    assert first == second
    assert len(first) <= config.TOPIC_LIMIT
    assert len(first) == len(set(first))


def test_extract_topics_from_messages_skips_system_lines() -> None:
    """Narrator lines do not contribute topics."""

    messages = [
        Message(id="1", speaker="Narrator", message="The dragon appears", system=True),
        Message(id="2", speaker="You", message="Where is the castle?"),
    ]
    topics = extract_topics_from_messages(messages)
    assert "castle" in topics
    assert "dragon" not in topics


def test_quick_topics_and_strip_actions() -> None:
    """quick_topics keeps the first three significant words."""

    assert quick_topics("Ancient crystals glow inside forgotten tunnels tonight") == [
        "ancient",
        "crystals",
        "glow",
    ]
    assert strip_actions("*nods* fine").strip() == "fine"
