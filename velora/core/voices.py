########## Voice Templates ##########
# Per character and per type voice rules, banned phrasing, and scenario post-processing.

from __future__ import annotations

import random
import re
from typing import Dict, List, Optional, Sequence, Set

from . import config
from .dice import chance, make_random, pick
from .sentiment import tokens
from .types import Character, NarrativeContext, VoiceTemplate

SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
LEADING_ACTIONS = re.compile(r"^(?:\s*\*[^*]*\*)+\s*")

DEFAULT_FORBIDDEN: List[str] = [
    "That's an interesting perspective",
    "I appreciate your thoughts on",
    "That's a fresh take on",
    "I'd love to hear more about",
    "Let's continue this conversation",
    "Have you considered sharing",
    "That's a valid point",
    "I understand where you're coming from",
    "Let me know if you have any other questions",
    "I'm here to help",
    "Feel free to share more",
]

HERO_FORBIDDEN: List[str] = [
    "That's an interesting perspective",
    "I appreciate your thoughts",
    "Let's continue this discussion",
    "I'm curious about your opinion",
    "That's a fresh take",
    "Have you considered sharing",
    "Let me know if you need anything",
    "I'm here to help",
    "Feel free to",
    "Let's chat about",
    "I'd love to hear more",
    "That's a valid point",
    "I understand where you're coming from",
]

ANALYTICAL_FORBIDDEN: List[str] = [
    *HERO_FORBIDDEN,
    "Let's explore this topic further",
    "What are your thoughts on this",
    "In my professional opinion",
    "From my perspective",
    "Let me analyze this situation",
    "I believe we should consider",
    "This reminds me of a podcast I heard",
]

DEFAULT_TEMPLATE = VoiceTemplate(
    rules=[
        "Use complete sentences and proper grammar",
        "Maintain a consistent tone throughout the response",
        "Keep responses concise and relevant to the conversation",
        "Include physical actions or reactions when appropriate",
        "Reference the current environment or situation",
    ],
    examples=[
        "I believe we should proceed with caution.",
        "*looks around carefully* This place doesn't feel right.",
        "We need to focus on the immediate threat.",
    ],
    forbidden_phrases=DEFAULT_FORBIDDEN,
)

CHARACTER_TEMPLATES: Dict[str, VoiceTemplate] = {
    "Captain America": VoiceTemplate(
        rules=[
            "Speak with authority and moral conviction",
            "Reference duty, honor, or responsibility",
            "Use military terminology when discussing tactics",
            "Show concern for civilian safety and team welfare",
        ],
        examples=[
            "*scans the battlefield* We need to establish a perimeter and evacuate civilians first.",
            "*raises shield defensively* This isn't about winning, it's about doing what's right.",
        ],
        forbidden_phrases=HERO_FORBIDDEN[:11],
    ),
    "Iron Man": VoiceTemplate(
        rules=[
            "Use witty, sarcastic remarks that fit the situation",
            "Reference specific technology with precise terminology",
            "Balance humor with seriousness during critical moments",
        ],
        examples=[
            "*repulsors charging* I've already run the calculations. Trust me, this will work. Probably.",
        ],
        forbidden_phrases=[*HERO_FORBIDDEN, "Let's explore this topic further", "What are your thoughts on this"],
    ),
    "Thor": VoiceTemplate(
        rules=[
            "Speak with a formal, slightly archaic tone",
            "Reference Asgard, Midgard, or other Norse elements",
            "Reference lightning, thunder, or storms in metaphors",
        ],
        examples=[
            "*lightning crackles around Mjolnir* You have my word as the son of Odin. These creatures shall not pass!",
        ],
        forbidden_phrases=[
            "That's interesting",
            "I appreciate your perspective",
            "Let's continue this conversation",
            "I'm curious what you think",
            *HERO_FORBIDDEN[4:],
        ],
    ),
    "Hulk": VoiceTemplate(
        rules=[
            "Use simple, direct language with short sentences",
            "Never use complex vocabulary or academic language",
            "Express emotions through actions as well as words",
        ],
        examples=["*smashes concrete with fist* Hulk smash! Hulk protect people!"],
        forbidden_phrases=ANALYTICAL_FORBIDDEN,
    ),
    "Elara Moonwhisper": VoiceTemplate(
        rules=[
            "Speak with mystical, flowing language",
            "Reference nature, magic, and ancient wisdom",
            "Use poetic language that evokes wonder and mystery",
        ],
        examples=[
            "*traces glowing runes in the air* The forest whispers warnings we would be wise to heed.",
        ],
        forbidden_phrases=ANALYTICAL_FORBIDDEN,
    ),
    "Commander Zax": VoiceTemplate(
        rules=[
            "Use military terminology and protocol",
            "Speak efficiently with minimal unnecessary words",
            "Use status reports and situation updates",
        ],
        examples=["*checks tactical display* Tactical assessment: high risk, acceptable reward ratio."],
        forbidden_phrases=[
            *ANALYTICAL_FORBIDDEN,
            "Let's take a step back",
            "I'm sensing some tension",
            "How does that make you feel",
        ],
    ),
}

TYPE_TEMPLATES: Dict[str, VoiceTemplate] = {
    "superhero": VoiceTemplate(
        rules=[
            "Speak with confidence and determination",
            "Show concern for civilian safety and collateral damage",
            "Use action-oriented language during conflicts",
        ],
        examples=["*shields injured civilian* The people come first. Always."],
        forbidden_phrases=HERO_FORBIDDEN,
    ),
    "fantasy": VoiceTemplate(
        rules=[
            "Use slightly formal, archaic language appropriate to a magical setting",
            "Avoid modern slang and technological references",
            "Include metaphors related to nature, elements, or the mystical world",
        ],
        examples=["*examines mysterious tracks* The old scrolls speak of such creatures."],
        forbidden_phrases=ANALYTICAL_FORBIDDEN,
    ),
    "scifi": VoiceTemplate(
        rules=[
            "Use precise technical terminology appropriate to futuristic settings",
            "Include exact measurements or coordinates when relevant",
            "Reference ship systems, equipment, or technological tools",
        ],
        examples=["*checks handheld scanner* Radiation levels are rising. We need to evacuate this sector."],
        forbidden_phrases=ANALYTICAL_FORBIDDEN,
    ),
}

# mood keywords -> (extra rules, extra example); applied to the default template only
MOOD_TWEAKS: List[tuple] = [
    (("angry", "furious"), ["Express frustration or anger", "Use more forceful, direct language"],
     "I've had enough of this nonsense!"),
    (("happy", "excited"), ["Express enthusiasm and positivity", "Use more animated, energetic language"],
     "This is fantastic! I couldn't be more thrilled!"),
    (("sad", "depressed"), ["Express melancholy or resignation", "Use more subdued, reflective language"],
     "I suppose it doesn't really matter in the end..."),
]

REPLACEMENTS: Dict[str, Dict[str, str]] = {
    "That's an interesting perspective": {
        "superhero": "We need to focus on the mission.",
        "fantasy": "Your words carry ancient wisdom.",
        "scifi": "My analysis indicates a logical approach.",
        "default": "I see your point.",
    },
    "I appreciate your thoughts": {
        "superhero": "Your insight helps the team.",
        "fantasy": "Your wisdom serves us well.",
        "scifi": "Your input improves our tactical position.",
        "default": "Well said.",
    },
    "Let's continue this discussion": {
        "superhero": "We need to act now.",
        "fantasy": "The path ahead is clear.",
        "scifi": "Proceeding with the mission.",
        "default": "Let's move forward.",
    },
}
DEFAULT_REPLACEMENTS: Dict[str, str] = {
    "superhero": "We need to focus on the mission.",
    "fantasy": "The ancient wisdom guides us.",
    "scifi": "The data is clear on our next steps.",
    "default": "Let's focus on what matters.",
}

URGENCY_TERMS: List[str] = [
    "quick", "fast", "hurry", "now", "immediately", "urgent", "emergency", "danger", "threat",
    "critical", "priority", "crucial", "vital", "attack", "defend", "protect", "evacuate", "run",
    "hide", "take cover",
]
URGENCY_PREFIXES: Dict[str, List[str]] = {
    "superhero": [
        "*eyes widen at approaching threat* We need to move, now!",
        "*takes defensive stance* There's no time to waste.",
        "*scans for immediate dangers* We're exposed here.",
    ],
    "fantasy": [
        "*grips weapon tightly* The shadows grow closer.",
        "*whispers urgently* We must make haste.",
        "*senses magical disturbance* Dark forces approach.",
    ],
    "scifi": [
        "*checks scanner urgently* Alert! Proximity warning.",
        "*activates emergency protocols* Critical situation detected.",
        "*secures equipment quickly* System failure imminent.",
    ],
    "default": [
        "*looks around anxiously* We need to hurry.",
        "*speaks with urgency* There's no time.",
        "*moves quickly* We must act now.",
    ],
}
ENVIRONMENT_ACTIONS: Dict[str, Dict[str, List[str]]] = {
    "superhero": {
        "conflict": ["*dodges falling debris*", "*shields eyes from explosion*", "*helps civilian to safety*"],
        "planning": ["*studies tactical display*", "*points to weak point on map*", "*checks equipment*"],
        "climax": ["*powers up abilities*", "*stands ready for battle*", "*rallies the team*"],
    },
    "fantasy": {
        "introduction": ["*adjusts traveling cloak*", "*checks supplies in pack*", "*studies ancient map*"],
        "discovery": ["*examines mysterious markings*", "*senses magical aura*", "*touches ancient stone*"],
        "conflict": ["*readies magical focus*", "*draws weapon swiftly*", "*whispers protective charm*"],
    },
    "scifi": {
        "introduction": ["*checks environmental readings*", "*adjusts space suit seals*", "*calibrates equipment*"],
        "discovery": ["*scans anomalous readings*", "*collects data sample*", "*adjusts sensor array*"],
        "conflict": ["*activates defensive shields*", "*takes cover behind console*", "*draws energy weapon*"],
    },
}
GENERIC_ENVIRONMENT_ACTIONS: List[str] = [
    "*looks around*",
    "*pauses briefly*",
    "*considers the situation*",
    "*thinks for a moment*",
]
MAX_SCRUB_PASSES: int = 5


########## Template Lookup ##########


def get_voice_template(character: Character) -> VoiceTemplate:
    """Named template, then type template, then the mood-tweaked default."""

    # 1 Resolve the most specific template.                                    # steps
    # 2 The default banned list always rides along.                            # steps
    template = CHARACTER_TEMPLATES.get(character.name) or TYPE_TEMPLATES.get(character.type)
    if template is None:
        rules = list(DEFAULT_TEMPLATE.rules)
        examples = list(DEFAULT_TEMPLATE.examples)
        mood = (character.mood or "").lower()
        for keywords, extra_rules, example in MOOD_TWEAKS:
            if any(keyword in mood for keyword in keywords):
                rules.extend(extra_rules)
                examples.append(example)
                break
        return VoiceTemplate(rules=rules, examples=examples, forbidden_phrases=list(DEFAULT_FORBIDDEN))
    banned = list(template.forbidden_phrases)
    for phrase in DEFAULT_FORBIDDEN:
        if phrase not in banned:
            banned.append(phrase)
    return VoiceTemplate(rules=list(template.rules), examples=list(template.examples), forbidden_phrases=banned)


########## Forbidden Phrases ##########


def jaccard(first: Set[str], second: Set[str]) -> float:
    if not first or not second:
        return 0.0
    return len(first & second) / len(first | second)


def offending_phrase(sentence: str, phrases: Sequence[str]) -> Optional[str]:
    """First banned phrase the sentence contains or nearly contains."""

    lowered = sentence.lower()
    words = set(tokens(sentence))
    for phrase in phrases:
        if phrase.lower() in lowered:
            return phrase
        phrase_words = set(tokens(phrase))
        if len(phrase_words) >= config.FORBIDDEN_MIN_TOKENS:
            coverage = len(phrase_words & words) / len(phrase_words)
            if coverage >= config.FORBIDDEN_TOKEN_COVERAGE:
                return phrase
    return None


def replacement_for(phrase: str, character_type: str) -> str:
    """Type-keyed line for the closest known phrase, else the type default."""

    phrase_words = set(tokens(phrase))
    best_key: Optional[str] = None
    best_score = 0.0
    for key in REPLACEMENTS:
        score = jaccard(phrase_words, set(tokens(key)))
        if score > best_score:
            best_key, best_score = key, score
    if best_key is not None and best_score >= config.REPLACEMENT_MATCH_THRESHOLD:
        options = REPLACEMENTS[best_key]
        return options.get(character_type, options["default"])
    return DEFAULT_REPLACEMENTS.get(character_type, DEFAULT_REPLACEMENTS["default"])


def strip_forbidden_literals(text: str, phrases: Sequence[str]) -> str:
    """Delete any literal banned phrase left over, repeating until none remain."""

    cleaned = text
    for _ in range(MAX_SCRUB_PASSES):
        found = False
        for phrase in phrases:
            pattern = re.compile(re.escape(phrase) + r",?\s*", re.IGNORECASE)
            if pattern.search(cleaned):
                cleaned = pattern.sub("", cleaned)
                found = True
        if not found:
            break
    cleaned = re.sub(r"\s{2,}", " ", cleaned).strip()
    if cleaned[:1].islower():
        cleaned = cleaned[0].upper() + cleaned[1:]
    return cleaned


def scrub_forbidden(text: str, phrases: Sequence[str], character_type: str) -> str:
    """Swap offending sentences for in-voice lines, keeping their action spans."""

    if not text or not phrases:
        return text
    sentences: List[str] = []
    for sentence in SENTENCE_SPLIT.split(text.strip()):
        phrase = offending_phrase(sentence, phrases)
        if phrase is None:
            sentences.append(sentence)
            continue
        lead = LEADING_ACTIONS.match(sentence)
        prefix = lead.group(0).strip() + " " if lead else ""
        sentences.append(prefix + replacement_for(phrase, character_type))
    return strip_forbidden_literals(" ".join(sentences), phrases)


########## Scenario Filter ##########


def contains_urgency(text: str) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in URGENCY_TERMS)


def needs_urgency(story_arc: NarrativeContext) -> bool:
    """Very high tension anywhere, or high tension in conflict or climax."""

    if story_arc.current_tension == "very high":
        return True
    return story_arc.current_phase in ("conflict", "climax") and story_arc.current_tension == "high"


def urgency_prefix(character: Character, rng: random.Random) -> str:
    return pick(rng, URGENCY_PREFIXES.get(character.type, URGENCY_PREFIXES["default"]))


def environment_action(character: Character, story_arc: NarrativeContext, rng: random.Random) -> str:
    by_phase = ENVIRONMENT_ACTIONS.get(character.type, {})
    return pick(rng, by_phase.get(story_arc.current_phase, GENERIC_ENVIRONMENT_ACTIONS))


def filter_response_for_scenario(
    text: str,
    character: Optional[Character],
    story_arc: Optional[NarrativeContext] = None,
    rng: Optional[random.Random] = None,
    voice: Optional[VoiceTemplate] = None,
) -> str:
    """Scrub banned phrasing, then add urgency or an environmental beat when due."""

    # 1 Forbidden phrases first so later prefixes never get scrubbed.          # steps
    # 2 Urgent arcs get an urgency action when the line has neither.           # steps
    # 3 Otherwise sometimes open with an environment action.                   # steps
    if not text or character is None:
        return text
    rng = rng or make_random()
    voice = voice or get_voice_template(character)
    filtered = scrub_forbidden(text, voice.forbidden_phrases, character.type)
    if story_arc is None:
        return filtered
    if needs_urgency(story_arc) and not contains_urgency(filtered) and "*" not in filtered:
        filtered = f"{urgency_prefix(character, rng)} {filtered}"
    if "*" not in filtered and chance(rng, config.ENVIRONMENT_ACTION_CHANCE):
        filtered = f"{environment_action(character, story_arc, rng)} {filtered}"
    return filtered
