########## Narrative Guidance ##########
# Reads the dialogue window and turns it into per-reply hints and final formatting.

from __future__ import annotations

import random
import re
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from . import config
from .dice import chance, make_random
from .sentiment import analyze_emotional_tone
from .topics import quick_topics
from .types import Character, DialogueAnalysis, Message, NarrativeContext, NarrativeGuidance, ResponseFormat

ACTION_TEXT = re.compile(r"\*(.*?)\*")
LEADING_ACTION = re.compile(r"^\*[^*]*\*\s*")
ACTION_SPAN = re.compile(r"(\*[^*]*\*)")
SENTENCE_END = re.compile(r"[.!?]+(?=\s|$)")

# phase -> (goal, approach, continuity note)
PHASE_GUIDANCE: Dict[str, Tuple[str, str, str]] = {
    "introduction": (
        "establish-character-relationships",
        "reveal-character-traits",
        "Introduce character background and establish initial dynamics.",
    ),
    "discovery": (
        "explore-scenario-mystery",
        "share-observations",
        "Focus on uncovering new information about the scenario.",
    ),
    "rising_action": (
        "raise-the-stakes",
        "add-complications",
        "Build on what has happened and hint at what could go wrong.",
    ),
    "conflict": (
        "address-immediate-threat",
        "take-action",
        "Respond to the current threat with urgency and purpose.",
    ),
    "planning": (
        "develop-strategy",
        "contribute-ideas",
        "Focus on finding solutions and preparing for the climax.",
    ),
    "climax": (
        "resolve-central-conflict",
        "decisive-action",
        "This is the critical moment, actions should be dramatic and consequential.",
    ),
    "resolution": (
        "reflect-on-events",
        "provide-closure",
        "Acknowledge what has happened and look toward the future.",
    ),
}
DEFAULT_GUIDANCE: Tuple[str, str, str] = ("continue-conversation", "respond-naturally", "")
HIGH_STAKES_PHASES: Tuple[str, ...] = ("conflict", "climax")
REFLECTIVE_PHASES: Tuple[str, ...] = ("planning", "discovery")
ACTION_FLOOR: int = 2
ACTION_CEILING: int = 4
THOUGHT_WORDS: int = 5


def _is_action(message: Message) -> bool:
    return message.is_action or "*" in (message.message or "")


def _pace(messages: Sequence[Message]) -> str:
    """Average gap between timestamps mapped to rapid, moderate, or slow."""

    if len(messages) < 2:
        return "moderate"
    gaps = [
        (later.timestamp - earlier.timestamp).total_seconds()
        for earlier, later in zip(messages, messages[1:])
    ]
    average = sum(gaps) / len(gaps)
    if average < config.PACE_RAPID_SECONDS:
        return "rapid"
    if average < config.PACE_MODERATE_SECONDS:
        return "moderate"
    return "slow"


def analyze_dialogue_history(messages: Sequence[Message], window: int = config.DIALOGUE_WINDOW) -> DialogueAnalysis:
    """Summarize speakers, topics, tone, actions, questions, and pace."""

    # 1 Window the log; an empty log yields the neutral summary.               # steps
    # 2 Count speakers and topics; most common wins, first seen breaks ties.   # steps
    # 3 A question stays open until a later message replies to it.             # steps
    if not messages:
        return DialogueAnalysis()
    recent = list(messages)[-window:]
    speakers = [message.speaker or "" for message in recent]
    speaker_counts = Counter(speaker for speaker in speakers if speaker)
    topic_counts: Counter = Counter()
    for message in recent:
        topic_counts.update(quick_topics(message.message))
    actions = [message for message in recent if _is_action(message)]
    recent_actions: List[str] = []
    for message in actions:
        match = ACTION_TEXT.search(message.message)
        recent_actions.append(match.group(1) if match else message.message)
    unaddressed: List[Message] = []
    for index, message in enumerate(recent):
        if "?" not in message.message:
            continue
        answered = any(later.reply_to == message.id for later in recent[index + 1 :])
        if not answered:
            unaddressed.append(message)
    return DialogueAnalysis(
        recent_speakers=speakers,
        dominant_speaker=speaker_counts.most_common(1)[0][0] if speaker_counts else None,
        recent_topics=list(topic_counts),
        dominant_topic=topic_counts.most_common(1)[0][0] if topic_counts else None,
        emotional_tone=analyze_emotional_tone(recent),
        action_count=len(actions),
        question_count=sum(1 for message in recent if "?" in message.message),
        unaddressed_questions=unaddressed,
        recent_actions=recent_actions,
        conversation_pace=_pace(recent),
    )


def oldest_open_question(analysis: DialogueAnalysis, character: Character) -> Optional[Message]:
    """Oldest unanswered question someone else asked."""

    for question in analysis.unaddressed_questions:
        if question.speaker != character.name:
            return question
    return None


def generate_narrative_guidance(
    character: Optional[Character],
    analysis: Optional[DialogueAnalysis],
    story_arc: Optional[NarrativeContext],
) -> NarrativeGuidance:
    """Goal, approach, and continuity hints for the next reply."""

    if character is None or analysis is None or story_arc is None:
        goal, approach, _ = DEFAULT_GUIDANCE
        return NarrativeGuidance(goal=goal, approach=approach, pace="maintain-current-pace")
    phase = story_arc.current_phase
    goal, approach, note = PHASE_GUIDANCE.get(phase, DEFAULT_GUIDANCE)
    notes: List[str] = [note] if note else []
    topic_focus: Optional[str] = None
    emotional: Optional[str] = None
    pace = "maintain-current-pace"

    if analysis.dominant_speaker == character.name:
        approach = "invite-others-to-speak"
        notes.append("Avoid dominating the conversation.")
    question = oldest_open_question(analysis, character)
    if question is not None:
        goal = "address-open-question"
        topic_focus = f"Answer the question from {question.speaker or 'the room'}."
        notes.append("Respond to the unanswered question.")
    if analysis.action_count < ACTION_FLOOR and phase not in ("planning", "resolution"):
        approach = "include-physical-action"
        notes.append("Include more physical actions to create a sense of movement.")
    elif analysis.action_count > ACTION_CEILING:
        approach = "focus-on-dialogue"
        notes.append("Balance physical actions with meaningful dialogue.")
    if analysis.emotional_tone == "neutral" and phase in HIGH_STAKES_PHASES:
        emotional = "increase-emotional-intensity"
        notes.append("Show more emotional response to the high-stakes situation.")
    elif analysis.emotional_tone in ("angry", "tense") and phase == "resolution":
        emotional = "move-toward-resolution"
        notes.append("Begin to resolve emotional tensions as the story concludes.")
    if analysis.conversation_pace == "rapid" and phase in REFLECTIVE_PHASES:
        pace = "slow-down-for-depth"
        notes.append("Take time to explore ideas more thoroughly.")
    elif analysis.conversation_pace == "slow" and phase in HIGH_STAKES_PHASES:
        pace = "increase-urgency"
        notes.append("Respond with greater urgency to match the situation.")
    if analysis.recent_topics and phase != "introduction" and topic_focus is None:
        topic_focus = f"Maintain continuity with recent topics: {', '.join(analysis.recent_topics[:3])}."
    return NarrativeGuidance(
        goal=goal,
        approach=approach,
        topic_focus=topic_focus,
        emotional_direction=emotional,
        pace=pace,
        continuity_notes=notes,
    )


def generate_response_format(
    character: Optional[Character],
    guidance: Optional[NarrativeGuidance],
    story_arc: Optional[NarrativeContext],
    rng: Optional[random.Random] = None,
) -> ResponseFormat:
    """Action placement, length class, and thought flag for the reply."""

    if character is None or guidance is None or story_arc is None:
        return ResponseFormat()
    rng = rng or make_random()
    response_format = ResponseFormat()
    if guidance.approach == "include-physical-action":
        response_format.action_placement = "before" if chance(rng, 0.5) else "during"
    elif guidance.approach == "focus-on-dialogue":
        response_format.include_action = chance(rng, 0.3)
    phase = story_arc.current_phase
    if guidance.pace == "increase-urgency" or phase in HIGH_STAKES_PHASES:
        response_format.response_length = "short"
    elif guidance.pace == "slow-down-for-depth" or phase in REFLECTIVE_PHASES:
        response_format.response_length = "long"
    if guidance.goal in ("establish-character-relationships", "reflect-on-events") or (
        guidance.approach == "reveal-character-traits"
    ):
        response_format.include_thought = chance(rng, 0.5)
    return response_format


def limit_sentences(text: str, limit: int = config.MAX_RESPONSE_SENTENCES) -> str:
    """Keep the first ``limit`` spoken sentences; *action* spans are never split or counted."""

    kept: List[str] = []
    count = 0
    for piece in ACTION_SPAN.split(text.strip()):
        if not piece:
            continue
        if ACTION_SPAN.fullmatch(piece):
            kept.append(piece)
            continue
        if count >= limit:
            continue
        for end in SENTENCE_END.finditer(piece):
            count += 1
            if count == limit:
                piece = piece[: end.end()] + " "
                break
        kept.append(piece)
    return re.sub(r"\s{2,}", " ", "".join(kept)).strip()


def shorten(text: str) -> str:
    """First sentence when it is substantial, otherwise a hard cut outside any action."""

    if len(text) <= config.SHORT_RESPONSE_CHARS:
        return text
    first = limit_sentences(text, 1)
    if len(first) < len(text.strip()) and len(first) > config.SHORT_FIRST_SENTENCE_MIN:
        return first
    cut = text[: config.SHORT_RESPONSE_CHARS]
    if cut.count("*") % 2:
        cut = cut[: cut.rfind("*")].rstrip()
    return cut + "..."


def _splice_index(words: Sequence[str]) -> int:
    """Word boundary nearest the middle that sits outside every *action* span."""

    midpoint = len(words) // 2
    outside: List[int] = []
    stars = 0
    for index in range(len(words) + 1):
        if stars % 2 == 0:
            outside.append(index)
        if index < len(words):
            stars += words[index].count("*")
    return min(outside, key=lambda index: abs(index - midpoint))


def _thought_phrase(spoken: str) -> str:
    words = ACTION_TEXT.sub(" ", spoken).replace("*", " ").split()
    start = len(words) // 3
    return " ".join(words[start : start + THOUGHT_WORDS])


def format_character_response(
    response: str,
    response_format: Optional[ResponseFormat] = None,
    scene_fragment: str = "",
) -> str:
    """Cap sentences, trim short replies, and weave in the scene fragment."""

    # 1 Keep the reply's own opening action unless a fragment replaces it.     # steps
    # 2 Cap sentences on the spoken part and trim short length classes.        # steps
    # 3 Place the fragment between words outside any action span.              # steps
    # 4 Append a thought built from spoken words only, then re-cap the whole.  # steps
    if not response:
        return ""
    response_format = response_format or ResponseFormat()
    text = response.strip()
    fragment = scene_fragment.strip().replace("*", "").strip()
    lead = ""
    match = LEADING_ACTION.match(text)
    if match:
        lead = match.group(0).strip()
        text = text[match.end() :]
    if fragment and response_format.include_action:
        lead = ""
    spoken = limit_sentences(text)
    if response_format.response_length == "short":
        spoken = shorten(spoken)
    if fragment and response_format.include_action:
        if response_format.action_placement == "before":
            formatted = f"*{fragment}* {spoken}"
        elif response_format.action_placement == "during":
            words = spoken.split()
            splice = _splice_index(words)
            formatted = f"{' '.join(words[:splice])} *{fragment}* {' '.join(words[splice:])}"
        else:
            formatted = f"{spoken} *{fragment}*"
    else:
        formatted = f"{lead} {spoken}" if lead else spoken
    if response_format.include_thought:
        phrase = _thought_phrase(spoken)
        if phrase:
            formatted += f" *thinking: {phrase}...*"
    return limit_sentences(formatted)
