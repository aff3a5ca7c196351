########## Response Synthesizer ##########
# Ordered rule tables that turn a stimulus into an in-voice character line.

from __future__ import annotations

import random
import re
from typing import Callable, List, NamedTuple, Optional, Sequence

from pydantic import BaseModel, Field

from . import config
from .context import (
    combat_response,
    extract_scenario_elements,
    flirt_response,
    is_flirtatious,
    relationship_response,
    scenario_response,
    sensory_response,
    tracked_relationship_response,
    undercurrent_response,
)
from .dice import chance, make_random, pick
from .guidance import (
    analyze_dialogue_history,
    format_character_response,
    generate_narrative_guidance,
    generate_response_format,
    limit_sentences,
)
from .lines import (
    ACTION_KINDS,
    ACTION_RESPONSES,
    ADDRESSED_RESPONSES,
    ANALYTICAL_FLAVOR,
    BATTLE_INTERACTIONS,
    BATTLE_PREFERENCES,
    BATTLE_WORDS,
    CHARACTER_FALLBACKS,
    COMBAT_MESSAGE_WORDS,
    DANGER_RESPONSES,
    DANGER_WORDS,
    DEFAULT_FALLBACKS,
    DEFAULT_RESPONSE_POOL,
    DEFAULT_ROLE,
    EMOTIONAL_FLAVOR,
    FLAVOR_TOPIC_DEFAULT,
    GOAL_POOL_KEYWORDS,
    GREETING_RESPONSES,
    GREETING_WORDS,
    HISTORY_REFERENCE,
    HUMOR_FLAVOR,
    INTERACTION_ACTION_RESPONSES,
    INTERACTION_DANGER_RESPONSES,
    INTERACTION_FLAVOR,
    INTERACTION_TEMPLATES,
    INTERACTION_WEAPON_RESPONSES,
    MOOD_PREFIXES,
    NEGATIVE_RESPONSES,
    NO_CHARACTER_FALLBACK,
    PHILOSOPHICAL_FLAVOR,
    POSITIVE_RESPONSES,
    QUESTION_RESPONSES,
    QUESTION_TOPIC_DEFAULT,
    REMINDER_HINTS,
    ROLE_HINTS,
    SELF_REFERENCE,
    STANDARD_INTERACTIONS,
    TYPE_FALLBACKS,
    TYPE_RESPONSES,
    VOICE_STYLE_HINTS,
    WEAPON_RESPONSES,
    WEAPON_WORDS,
    WRITING_STYLE_MOODS,
)
from .relationships import describe_relationship, interaction_reference, should_reference_interaction
from .scenes import SceneGenerator
from .sentiment import analyze_sentiment, tokens
from .templates import bind_template, strip_placeholders
from .topics import extract_topics
from .types import Character, Message, NarrativeContext, Relationship, Scenario, WritingInstructions
from .voices import filter_response_for_scenario, get_voice_template, strip_forbidden_literals

ACTION_SPAN = re.compile(r"\*(.*?)\*")
LEADING_ACTIONS = re.compile(r"^(?:\s*\*[^*]*\*)+\s*")
TERMINAL_MARKS = (".", "!", "?", "*", '"')
REMINDER_WORDS: int = 3


class ReplyContext(BaseModel):
    """Everything the rules read about one reply request."""

    character: Character
    text: str = ""
    words: List[str] = Field(default_factory=list)
    action: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    sentiment: str = "neutral"
    keyword: str = "that"
    recent_messages: List[Message] = Field(default_factory=list)
    instructions: Optional[WritingInstructions] = None
    scenario: Optional[Scenario] = None
    relationships: List[Relationship] = Field(default_factory=list)
    target_name: Optional[str] = None

    @property
    def story_arc(self) -> Optional[NarrativeContext]:
        return self.scenario.story_arc if self.scenario is not None else None

    def has_any(self, vocabulary) -> bool:
        return any(word in vocabulary for word in self.words)


class SynthesisRule(NamedTuple):
    """One priority step: first rule whose predicate holds writes the line."""

    name: str
    predicate: Callable[[ReplyContext], bool]
    handler: Callable[[ReplyContext], str]
    weave_scene: bool = True


########## Small Helpers ##########


def classify_action(details: str) -> str:
    """weapon, friendly, aggressive, or neutral by substring cues."""

    lowered = (details or "").lower()
    for kind, cues in ACTION_KINDS:
        if any(cue in lowered for cue in cues):
            return kind
    return "neutral"


def action_details(text: str) -> Optional[str]:
    match = ACTION_SPAN.search(text or "")
    if match is None or not match.group(1).strip():
        return None
    return match.group(1).strip()


def pick_keyword(text: str, rng: random.Random) -> str:
    """Random word of four or more letters from the line, else 'that'."""

    candidates = [word for word in tokens(text) if len(word) >= config.KEYWORD_MIN_LENGTH]
    if not candidates:
        return "that"
    return pick(rng, candidates)


def addressed_to(character: Character, text: str) -> bool:
    pattern = r"\b" + re.escape(character.name.lower()) + r"\b"
    return re.search(pattern, (text or "").lower()) is not None


def _lower_first(part: str) -> str:
    first_word = part.split(" ", 1)[0]
    if first_word == "I" or first_word.startswith("I'") or first_word.isupper():
        return part
    return part[:1].lower() + part[1:]


def compose(parts: Sequence[str]) -> str:
    """Join fragments; a fragment that continues a clause loses its capital."""

    pieces: List[str] = []
    for part in parts:
        part = (part or "").strip()
        if not part:
            continue
        if pieces and not pieces[-1].endswith(TERMINAL_MARKS):
            part = _lower_first(part)
        pieces.append(part)
    return " ".join(pieces)


def split_leading_action(template: str) -> tuple:
    match = LEADING_ACTIONS.match(template)
    if match is None:
        return "", template
    return match.group(0).strip(), template[match.end() :]


def stored_relationship(relationships: Sequence[Relationship], first: str, second: str) -> Optional[Relationship]:
    for relationship in relationships:
        if relationship.involves(first) and relationship.involves(second):
            return relationship
    return None


def _hint(table, text: str) -> str:
    lowered = (text or "").lower()
    for cues, line in table:
        if any(cue in lowered for cue in cues):
            return line
    return ""


def response_pool(character: Character, story_arc: Optional[NarrativeContext]) -> List[str]:
    """Type pool, overridden by cue words in the arc's goal and context."""

    pool_name = character.type if character.type in TYPE_RESPONSES else DEFAULT_RESPONSE_POOL
    if story_arc is not None:
        arc_text = f"{story_arc.theme} {story_arc.current_goal} {story_arc.current_context}".lower()
        for name, cues in GOAL_POOL_KEYWORDS:
            if any(cue in arc_text for cue in cues):
                pool_name = name
                break
    return TYPE_RESPONSES[pool_name]


def mood_prefix(character: Character, instructions: Optional[WritingInstructions]) -> str:
    prefix = MOOD_PREFIXES.get(character.mood, "")
    if instructions is not None and instructions.writing_style in WRITING_STYLE_MOODS:
        prefix = MOOD_PREFIXES.get(WRITING_STYLE_MOODS[instructions.writing_style], prefix)
    return prefix


def generate_character_fallback(
    character: Optional[Character],
    context: str = "conversation",
    rng: Optional[random.Random] = None,
) -> str:
    """In-voice redirect line: by name, then type, then generic."""

    if character is None:
        return NO_CHARACTER_FALLBACK
    rng = rng or make_random()
    context_type = "battle" if "battle" in (context or "").lower() else "conversation"
    by_name = CHARACTER_FALLBACKS.get(character.name, {})
    if context_type in by_name:
        return pick(rng, by_name[context_type])
    by_type = TYPE_FALLBACKS.get((character.type or "").lower(), {})
    if context_type in by_type:
        return pick(rng, by_type[context_type])
    return pick(rng, DEFAULT_FALLBACKS[context_type])


########## Synthesizer ##########


class ResponseSynthesizer:
    """Runs the reply and interaction rule tables with one random source."""

    def __init__(self, rng: Optional[random.Random] = None, scenes: Optional[SceneGenerator] = None) -> None:
        self.random = rng or make_random()
        self.scenes = scenes or SceneGenerator(self.random)
        self.response_rules: List[SynthesisRule] = [
            SynthesisRule("action", lambda ctx: ctx.action is not None, self._action_reply, weave_scene=False),
            SynthesisRule("weapon", lambda ctx: ctx.has_any(WEAPON_WORDS), self._weapon_reply),
            SynthesisRule("danger", lambda ctx: ctx.has_any(DANGER_WORDS), self._danger_reply),
            SynthesisRule("greeting", self._is_greeting, self._greeting_reply),
            SynthesisRule("question", lambda ctx: "?" in ctx.text, self._question_reply),
            SynthesisRule("addressed", lambda ctx: addressed_to(ctx.character, ctx.text), self._addressed_reply),
            SynthesisRule("positive", lambda ctx: self._sentiment_gate(ctx, "positive"), self._positive_reply),
            SynthesisRule("negative", lambda ctx: self._sentiment_gate(ctx, "negative"), self._negative_reply),
            SynthesisRule("default", lambda ctx: True, self._default_reply),
        ]
        self.interaction_rules: List[SynthesisRule] = [
            SynthesisRule("action", lambda ctx: ctx.action is not None, self._interaction_action, weave_scene=False),
            SynthesisRule("weapon", lambda ctx: ctx.has_any(WEAPON_WORDS), self._interaction_weapon),
            SynthesisRule("danger", lambda ctx: ctx.has_any(DANGER_WORDS), self._interaction_danger),
            SynthesisRule("battle", self._in_battle, self._battle_interaction),
            SynthesisRule("default", lambda ctx: True, self._standard_interaction),
        ]

    # ---- public entry points ----

    def build_context(
        self,
        character: Character,
        text: str,
        recent_messages: Sequence[Message] = (),
        instructions: Optional[WritingInstructions] = None,
        scenario: Optional[Scenario] = None,
        relationships: Sequence[Relationship] = (),
        target_name: Optional[str] = None,
    ) -> ReplyContext:
        """Parse the stimulus once so every rule reads the same facts."""

        text = text or ""
        return ReplyContext(
            character=character,
            text=text,
            words=tokens(text),
            action=action_details(text),
            topics=extract_topics(text),
            sentiment=analyze_sentiment(text),
            keyword=pick_keyword(text, self.random),
            recent_messages=list(recent_messages or []),
            instructions=instructions,
            scenario=scenario,
            relationships=list(relationships or []),
            target_name=target_name,
        )

    def matching_rule(self, ctx: ReplyContext, rules: Optional[Sequence[SynthesisRule]] = None) -> SynthesisRule:
        """First rule whose predicate holds; the default rule always does."""

        for rule in rules if rules is not None else self.response_rules:
            if rule.predicate(ctx):
                return rule
        return self.response_rules[-1]

    def generate_response(
        self,
        character: Optional[Character],
        stimulus: str,
        recent_messages: Sequence[Message] = (),
        instructions: Optional[WritingInstructions] = None,
        scenario: Optional[Scenario] = None,
        relationships: Sequence[Relationship] = (),
    ) -> str:
        """Reply from a character to the latest human line."""

        # 1 Parse once, then let the first matching rule write the draft.      # steps
        # 2 Every draft goes through the same post-processing.                 # steps
        if character is None:
            return config.DEFLECTION_LINE
        ctx = self.build_context(character, stimulus, recent_messages, instructions, scenario, relationships)
        rule = self.matching_rule(ctx, self.response_rules)
        draft = rule.handler(ctx)
        return self.finish(ctx, draft, ctx.story_arc, rule.weave_scene, "response")

    def generate_interaction(
        self,
        character: Optional[Character],
        target_name: str,
        target_message: str,
        recent_messages: Sequence[Message] = (),
        relationships: Sequence[Relationship] = (),
    ) -> str:
        """Reply from one character to another character's line."""

        if character is None:
            return config.DEFLECTION_LINE
        ctx = self.build_context(
            character,
            target_message,
            recent_messages,
            relationships=relationships,
            target_name=target_name,
        )
        rule = self.matching_rule(ctx, self.interaction_rules)
        draft = rule.handler(ctx)
        if rule.name in ("battle", "default") and chance(self.random, config.INTERACTION_FLAVOR_CHANCE):
            flavor = INTERACTION_FLAVOR.get(character.type, INTERACTION_FLAVOR["default"])
            draft = compose([flavor, draft])
        arc = self.interaction_arc(ctx, battle=rule.name == "battle")
        return self.finish(ctx, draft, arc, rule.weave_scene, "interaction")

    def finish(
        self,
        ctx: ReplyContext,
        draft: str,
        story_arc: Optional[NarrativeContext],
        weave_scene: bool,
        message_type: str,
    ) -> str:
        """Scrub, add scenario beats, weave the scene, and cap the length."""

        # 1 Voice filter handles banned phrasing plus urgency and environment. # steps
        # 2 Scene weaving and the sentence cap come after placeholders go.     # steps
        # 3 One last literal pass so no banned phrase sneaks back in.          # steps
        character = ctx.character
        voice = get_voice_template(character)
        text = filter_response_for_scenario(draft, character, story_arc, self.random, voice)
        text = strip_placeholders(text)
        if weave_scene:
            analysis = analyze_dialogue_history(ctx.recent_messages)
            guidance = generate_narrative_guidance(character, analysis, story_arc)
            response_format = generate_response_format(character, guidance, story_arc, self.random)
            fragment = self.scenes.generate_scene_description(character, story_arc, ctx.recent_messages, message_type)
            text = format_character_response(text, response_format, fragment)
        else:
            text = limit_sentences(text)
        text = strip_placeholders(strip_forbidden_literals(text, voice.forbidden_phrases))
        return text or generate_character_fallback(character, ctx.text, self.random)

    # ---- reply rules ----

    def _is_greeting(self, ctx: ReplyContext) -> bool:
        return ctx.has_any(GREETING_WORDS) and len(ctx.topics) <= 1

    def _sentiment_gate(self, ctx: ReplyContext, polarity: str) -> bool:
        return ctx.sentiment == polarity and self.random.random() > config.SENTIMENT_GATE

    def _action_reply(self, ctx: ReplyContext) -> str:
        kind = classify_action(ctx.action or "")
        return bind_template(pick(self.random, ACTION_RESPONSES[kind]), {"action": ctx.action})

    def _weapon_reply(self, ctx: ReplyContext) -> str:
        return pick(self.random, WEAPON_RESPONSES)

    def _danger_reply(self, ctx: ReplyContext) -> str:
        return pick(self.random, DANGER_RESPONSES)

    def _greeting_reply(self, ctx: ReplyContext) -> str:
        return pick(self.random, GREETING_RESPONSES)

    def _question_reply(self, ctx: ReplyContext) -> str:
        """Answer template, flavored by analytical then philosophical depth."""

        slots = {"keyword": ctx.keyword, "topic": ctx.topics[0] if ctx.topics else QUESTION_TOPIC_DEFAULT}
        reply = bind_template(pick(self.random, QUESTION_RESPONSES), slots)
        character = ctx.character
        if character.trait("analytical") > config.TRAIT_FLAVOR_THRESHOLD:
            count = 2 + int(self.random.random() * 3)
            return f"{reply} {bind_template(ANALYTICAL_FLAVOR, {'count': count})}"
        if character.trait("philosophical") > config.TRAIT_FLAVOR_THRESHOLD:
            return f"{reply} {PHILOSOPHICAL_FLAVOR}"
        return reply

    def _addressed_reply(self, ctx: ReplyContext) -> str:
        reply = bind_template(pick(self.random, ADDRESSED_RESPONSES), {"keyword": ctx.keyword})
        topic = {"topic": ctx.topics[0] if ctx.topics else FLAVOR_TOPIC_DEFAULT}
        if ctx.character.trait("emotional") > config.TRAIT_FLAVOR_THRESHOLD:
            return f"{reply} {bind_template(EMOTIONAL_FLAVOR, topic)}"
        if ctx.character.trait("humor") > config.TRAIT_FLAVOR_THRESHOLD:
            return f"{reply} {bind_template(HUMOR_FLAVOR, topic)}"
        return reply

    def _positive_reply(self, ctx: ReplyContext) -> str:
        return bind_template(pick(self.random, POSITIVE_RESPONSES), {"keyword": ctx.keyword})

    def _negative_reply(self, ctx: ReplyContext) -> str:
        return bind_template(pick(self.random, NEGATIVE_RESPONSES), {"keyword": ctx.keyword})

    def _default_reply(self, ctx: ReplyContext) -> str:
        """Typed pool line plus mood lead-in, callbacks, and voice extras."""

        # 1 Pick the pool line and split off any opening action.               # steps
        # 2 Scenario callbacks may take over the whole line.                   # steps
        # 3 Otherwise assemble references, lead-in, line, and extras.          # steps
        character = ctx.character
        story_arc = ctx.story_arc
        template = bind_template(pick(self.random, response_pool(character, story_arc)), {"keyword": ctx.keyword})
        opening, spoken = split_leading_action(template)
        prefix = mood_prefix(character, ctx.instructions)
        body = compose([opening, prefix, spoken])

        self_reference = ""
        if chance(self.random, config.SELF_REFERENCE_CHANCE):
            self_reference = bind_template(SELF_REFERENCE, {"name": character.name})
        history_reference = self._history_reference(ctx)
        relationship_reference = self._relationship_reference(ctx)

        scenario_line = self._scenario_callback(ctx, body)
        if scenario_line:
            return scenario_line

        reminder = self._reminder_hint(ctx.instructions) if story_arc is not None else ""
        catchphrase = self._catchphrase(character)
        voice_hint = self._voice_hint(character)
        role_hint = self._role_hint(character)
        if self._wants_short(ctx):
            return compose([opening, self_reference, prefix, spoken, catchphrase])
        return compose(
            [opening, self_reference, history_reference, relationship_reference, prefix, spoken]
            + [reminder, catchphrase, voice_hint, role_hint]
        )

    def _wants_short(self, ctx: ReplyContext) -> bool:
        length = ctx.instructions.response_length if ctx.instructions is not None else "medium"
        if length == "short":
            return True
        if length == "medium" and ctx.story_arc is not None:
            return not chance(self.random, config.LONG_VARIANT_CHANCE)
        return False

    def _history_reference(self, ctx: ReplyContext) -> str:
        history = ctx.recent_messages
        if len(history) <= 3 or not chance(self.random, config.HISTORY_REFERENCE_CHANCE):
            return ""
        past = pick(self.random, history)
        if past.system or not past.speaker or past.speaker == ctx.character.name:
            return ""
        return bind_template(HISTORY_REFERENCE, {"speaker": past.speaker})

    def _relationship_reference(self, ctx: ReplyContext) -> str:
        """Callback to a notable past exchange with whoever spoke to us."""

        responding_to = None
        for message in reversed(ctx.recent_messages):
            if message.is_user:
                responding_to = message.speaker
                break
        if not responding_to or not ctx.relationships:
            return ""
        relationship = stored_relationship(ctx.relationships, ctx.character.name, responding_to)
        if relationship is None or not should_reference_interaction(relationship, ctx.character, self.random):
            return ""
        return interaction_reference(relationship, ctx.character.name, self.random) or ""

    def _scenario_callback(self, ctx: ReplyContext, body: str) -> str:
        """Gated scenario callbacks in fixed order; the first that fires wins."""

        scenario = ctx.scenario
        if scenario is None:
            return ""
        character = ctx.character
        elements = extract_scenario_elements(scenario.description)
        if scenario.description and chance(self.random, config.SCENARIO_CONTEXT_CHANCE):
            if is_flirtatious(ctx.text):
                return flirt_response(character, elements, self.random)
            if elements.sensory_details and chance(self.random, config.SENSORY_CUE_CHANCE):
                return sensory_response(elements, body, self.random)
            return scenario_response(character, elements, ctx.text, self.random)
        others = [member for member in scenario.characters if member.name != character.name]
        if others and chance(self.random, config.RELATIONSHIP_CONTEXT_CHANCE):
            target = pick(self.random, others)
            tracked = stored_relationship(ctx.relationships, character.name, target.name)
            if tracked is not None:
                return tracked_relationship_response(target.name, describe_relationship(tracked), body, self.random)
            return relationship_response(character, target, elements, self.random)
        combat_cue = character.type == "combat" or ctx.has_any(WEAPON_WORDS) or ctx.has_any(COMBAT_MESSAGE_WORDS)
        if combat_cue and chance(self.random, config.COMBAT_CONTEXT_CHANCE):
            return combat_response(character, self.random)
        if elements.emotional_undercurrents and chance(self.random, config.UNDERCURRENT_CHANCE):
            return undercurrent_response(elements, body, self.random)
        return ""

    def _catchphrase(self, character: Character) -> str:
        if character.catchphrases and chance(self.random, config.CATCHPHRASE_CHANCE):
            return pick(self.random, character.catchphrases)
        return ""

    def _voice_hint(self, character: Character) -> str:
        if not chance(self.random, config.VOICE_HINT_CHANCE):
            return ""
        voice_style = character.voice_style or f"{(character.mood or 'neutral').lower()} and {character.type}"
        return _hint(VOICE_STYLE_HINTS, voice_style)

    def _role_hint(self, character: Character) -> str:
        if not chance(self.random, config.ROLE_HINT_CHANCE):
            return ""
        return _hint(ROLE_HINTS, character.role or DEFAULT_ROLE)

    def _reminder_hint(self, instructions: Optional[WritingInstructions]) -> str:
        if instructions is None or not instructions.character_reminders:
            return ""
        if not chance(self.random, config.REMINDER_CHANCE):
            return ""
        lead = " ".join(instructions.character_reminders.split()[:REMINDER_WORDS])
        return _hint(REMINDER_HINTS, lead)

    # ---- interaction rules ----

    def _target_slots(self, ctx: ReplyContext) -> dict:
        return {"target": ctx.target_name or "friend", "keyword": ctx.keyword}

    def _interaction_action(self, ctx: ReplyContext) -> str:
        kind = classify_action(ctx.action or "")
        return bind_template(pick(self.random, INTERACTION_ACTION_RESPONSES[kind]), self._target_slots(ctx))

    def _interaction_weapon(self, ctx: ReplyContext) -> str:
        return bind_template(pick(self.random, INTERACTION_WEAPON_RESPONSES), self._target_slots(ctx))

    def _interaction_danger(self, ctx: ReplyContext) -> str:
        return bind_template(pick(self.random, INTERACTION_DANGER_RESPONSES), self._target_slots(ctx))

    def _in_battle(self, ctx: ReplyContext) -> bool:
        if ctx.has_any(BATTLE_WORDS):
            return True
        window = ctx.recent_messages[-config.BATTLE_HISTORY_WINDOW :]
        return any("battle" in (message.message or "").lower() for message in window)

    def battle_interaction_type(self, character: Character) -> str:
        """Preferred battle style for known names, nudged by confidence and humor."""

        preferred = BATTLE_PREFERENCES.get(character.name)
        if preferred and chance(self.random, config.BATTLE_PREFERENCE_CHANCE):
            kind = pick(self.random, preferred)
        else:
            kind = pick(self.random, BATTLE_INTERACTIONS)
        if character.trait("confidence") > config.TRAIT_FLAVOR_THRESHOLD and chance(self.random, config.BATTLE_TRAIT_CHANCE):
            kind = "battle_coordination" if chance(self.random, 0.5) else "tactical_suggestion"
        if character.trait("humor") > config.TRAIT_FLAVOR_THRESHOLD and chance(self.random, config.BATTLE_TRAIT_CHANCE):
            kind = "battle_banter"
        return kind

    def affinity_interaction_type(self, relationship: Optional[Relationship]) -> str:
        """Warm pairs lean agreeable, hostile pairs lean contrary, others vary."""

        if relationship is not None and relationship.affinity >= config.AFFINITY_LEAN_THRESHOLD:
            if chance(self.random, config.AFFINITY_LEAN_CHANCE):
                return "agreement" if chance(self.random, 0.6) else "support"
            return "question" if chance(self.random, 0.5) else "neutral"
        if relationship is not None and relationship.affinity <= -config.AFFINITY_LEAN_THRESHOLD:
            if chance(self.random, config.AFFINITY_LEAN_CHANCE):
                return "disagreement" if chance(self.random, 0.6) else "challenge"
            return "neutral" if chance(self.random, 0.5) else "question"
        return pick(self.random, STANDARD_INTERACTIONS)

    def _battle_interaction(self, ctx: ReplyContext) -> str:
        kind = self.battle_interaction_type(ctx.character)
        return bind_template(pick(self.random, INTERACTION_TEMPLATES[kind]), self._target_slots(ctx))

    def _standard_interaction(self, ctx: ReplyContext) -> str:
        relationship = stored_relationship(ctx.relationships, ctx.character.name, ctx.target_name or "")
        kind = self.affinity_interaction_type(relationship)
        line = bind_template(pick(self.random, INTERACTION_TEMPLATES[kind]), self._target_slots(ctx))
        if relationship is not None and relationship.interactions:
            if chance(self.random, config.INTERACTION_REFERENCE_CHANCE):
                reference = interaction_reference(relationship, ctx.character.name, self.random)
                if reference:
                    return compose([reference, line])
        return line

    def interaction_arc(self, ctx: ReplyContext, battle: bool = False) -> NarrativeContext:
        """Small stand-in arc so interaction lines get scene beats too."""

        if battle:
            return NarrativeContext(
                theme=ctx.character.type or "general",
                current_phase="conflict",
                current_tension="high",
                current_goal="address immediate threat",
            )
        return NarrativeContext(
            theme=ctx.character.type or "general",
            current_phase="discovery" if "?" in ctx.text else "introduction",
            current_tension="medium",
            current_goal="maintain conversation flow",
        )
