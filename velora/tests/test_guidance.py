########## Guidance Tests ##########
# Dialogue analysis, per-reply guidance, and final line formatting.

from __future__ import annotations

import random
from datetime import datetime, timedelta

from velora.core import config
from velora.core.guidance import (
    analyze_dialogue_history,
    format_character_response,
    generate_narrative_guidance,
    generate_response_format,
    limit_sentences,
    oldest_open_question,
    shorten,
)
from velora.core.types import Character, DialogueAnalysis, Message, NarrativeContext, NarrativeGuidance, ResponseFormat

START = datetime(2024, 5, 1, 12, 0, 0)


def _log() -> list:
    lines = [
        ("m1", "You", "Where is the relic?", None),
        ("m2", "Ada", "*draws blade* Stay back.", None),
        ("m3", "Ada", "I hold the gate.", None),
        ("m4", "Bo", "Did you hear that?", None),
        ("m5", "Ada", "Yes, it came from below.", "m4"),
    ]
    return [
        Message(
            id=message_id,
            speaker=speaker,
            message=text,
            is_user=speaker == "You",
            reply_to=reply_to,
            timestamp=START + timedelta(seconds=2 * index),
        )
        for index, (message_id, speaker, text, reply_to) in enumerate(lines)
    ]


def test_empty_history_gives_neutral_summary() -> None:
    """No messages means the default analysis."""

    assert analyze_dialogue_history([]) == DialogueAnalysis()


def test_analysis_counts_speakers_actions_and_open_questions() -> None:
    """Dominant speaker, actions, questions, and pace come from the window."""

    # 1 m4 is answered by m5, so only m1 stays open.                           # steps
    analysis = analyze_dialogue_history(_log())
    assert analysis.dominant_speaker == "Ada"
    assert analysis.action_count == 1
    assert analysis.recent_actions == ["draws blade"]
    assert analysis.question_count == 2
    assert [message.id for message in analysis.unaddressed_questions] == ["m1"]
    assert analysis.conversation_pace == "rapid"


def test_oldest_open_question_skips_own_questions() -> None:
    """A character never owes an answer to itself."""

    analysis = analyze_dialogue_history(_log())
    question = oldest_open_question(analysis, Character(name="Ada"))
    assert question is not None and question.id == "m1"
    assert oldest_open_question(analysis, Character(name="You")) is None


def test_guidance_reacts_to_dominance_questions_and_pace() -> None:
    """Open questions set the goal; sparse actions and rapid pace adjust the rest."""

    ada = Character(name="Ada")
    arc = NarrativeContext(current_phase="discovery")
    guidance = generate_narrative_guidance(ada, analyze_dialogue_history(_log()), arc)
    assert guidance.goal == "address-open-question"
    assert guidance.approach == "include-physical-action"
    assert guidance.pace == "slow-down-for-depth"
    assert guidance.topic_focus == "Answer the question from You."
    assert "Avoid dominating the conversation." in guidance.continuity_notes


def test_guidance_without_arc_uses_defaults() -> None:
    """Missing inputs give the plain continue-conversation guidance."""

    guidance = generate_narrative_guidance(Character(name="Ada"), DialogueAnalysis(), None)
    assert guidance.goal == "continue-conversation"
    assert guidance.approach == "respond-naturally"


def test_response_format_length_follows_phase() -> None:
    """High-stakes phases are short and reflective phases are long."""

    hero = Character(name="Ada")
    guidance = NarrativeGuidance(goal="take-action", approach="take-action")
    short = generate_response_format(hero, guidance, NarrativeContext(current_phase="climax"), random.Random(1))
    long = generate_response_format(hero, guidance, NarrativeContext(current_phase="planning"), random.Random(1))
    assert short.response_length == "short"
    assert long.response_length == "long"
    assert generate_response_format(hero, None, None) == ResponseFormat()


def test_format_places_scene_fragment() -> None:
    """Fragments replace the opening action before the line or trail after it."""

    line = "*nods* We hold here."
    fragment = "*smoke drifts past*"
    assert format_character_response(line, ResponseFormat(), fragment) == "*smoke drifts past* We hold here."
    after = ResponseFormat(action_placement="after")
    assert format_character_response(line, after, fragment) == "We hold here. *smoke drifts past*"
    assert format_character_response(line, ResponseFormat(), "") == line
    assert format_character_response(line, ResponseFormat(include_action=False), fragment) == line
    assert format_character_response("", ResponseFormat(), fragment) == ""


def test_sentence_cap_and_shortening() -> None:
    """Long replies lose extra sentences; short replies keep one clause."""

    assert limit_sentences("One. Two. Three. Four.") == "One. Two. Three."
    long_first = "The north tower has fallen and the wall is breached. " + "More words follow here. " * 5
    assert shorten(long_first) == "The north tower has fallen and the wall is breached."
    run_on = "Go! " + "onward " * 20
    assert shorten(run_on) == run_on[: config.SHORT_RESPONSE_CHARS] + "..."
    assert shorten("Brief.") == "Brief."


def test_mid_reply_fragment_and_thought_stay_outside_actions() -> None:
    """The fragment lands between spans and the thought quotes spoken words only."""

    # 1 The word midpoint falls inside the action, so the splice moves left.   # steps
    line = "We hold the line. *eyes widening with alarm* Stay close."
    during = ResponseFormat(action_placement="during", include_thought=True)
    formatted = format_character_response(line, during, "*smoke drifts*")
    assert formatted == (
        "We hold the line. *smoke drifts* *eyes widening with alarm* Stay close. *thinking: the line. Stay close....*"
    )


def test_thought_never_lifts_speech_past_the_cap() -> None:
    """A thought rides along as an action; spoken sentences stay at three."""

    thoughtful = ResponseFormat(include_thought=True, include_action=False)
    formatted = format_character_response("*sighs* One. Two. Three. Four.", thoughtful)
    assert formatted == "*sighs* One. Two. Three. *thinking: Two. Three....*"


def test_sentence_cap_skips_action_spans() -> None:
    """Punctuation inside an action does not count toward the cap."""

    capped = limit_sentences("*looks away. then back.* One. Two! *grins* Three? Four.")
    assert capped == "*looks away. then back.* One. Two! *grins* Three?"
    drawn = "hold " * 18 + "*draws the long blade slowly* now"
    assert shorten(drawn) == ("hold " * 18).rstrip() + "..."
