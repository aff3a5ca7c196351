########## Scenario Context ##########
# Mines a scenario description for setting, weather, conflict, and mood cues.

from __future__ import annotations

import random
import re
from typing import List, Optional

from pydantic import BaseModel, Field

from .dice import pick
from .types import Character

SETTING_NOUNS = (
    "castle|fortress|keep|tower|forest|woods|grove|city|town|village|house|mansion|palace|temple|shrine|"
    "cave|cavern|dungeon|crypt|ship|vessel|space station|starship|laboratory|workshop|office|building|"
    "school|academy|hospital|cafe|restaurant|bar|tavern|inn|hotel|apartment|room|hall|chamber|kingdom|"
    "realm|dimension|world|planet|galaxy|district|street|alley|market|square|plaza|garden|park|"
    "battlefield|arena|theater|library|museum|ruins|beach|shore|coast|island|mountain|valley|desert|"
    "swamp|river|lake|ocean|sea"
)
SETTING_PATTERN = re.compile(
    r"\b(?:in|at|near|inside|outside|within) (?:the |a |an )?((?:[\w\-']+ ){0,3}?(?:" + SETTING_NOUNS + r"))\b",
    re.IGNORECASE,
)
TIME_PATTERN = re.compile(
    r"\b(?:late afternoon|late night|first light|golden hour|early hours|morning|dawn|daybreak|sunrise|noon|"
    r"midday|afternoon|evening|dusk|sunset|twilight|midnight|night|daylight|darkness)\b",
    re.IGNORECASE,
)
WEATHER_PATTERN = re.compile(
    r"\b(?:sunny|bright|clear|cloudy|overcast|rainy|drizzling|pouring|stormy|thunderous|foggy|misty|hazy|"
    r"snowy|windy|breezy|humid|arid|chilly|warm|hot|scorching|freezing|icy|frosty)\b",
    re.IGNORECASE,
)
MOOD_PATTERN = re.compile(
    r"\b(?:tense|peaceful|mysterious|exciting|melancholic|joyful|anxious|fearful|hopeful|desperate|chaotic|"
    r"serene|ominous|cheerful|gloomy|eerie|magical|dangerous|hostile|friendly|threatening|foreboding|"
    r"suspenseful|romantic|nostalgic|whimsical|solemn|somber|festive|mournful|frantic|charged|electric)\b",
    re.IGNORECASE,
)
RELATIONSHIP_PATTERN = re.compile(
    r"\b(?:former friends|old flames|new acquaintances|friends|enemies|rivals|allies|family|colleagues|"
    r"strangers|lovers|partners|teammates|classmates|neighbors|siblings|comrades|adversaries|companions|"
    r"confidants|conspirators|nemeses|competitors|collaborators|crew members|squad members)\b",
    re.IGNORECASE,
)
CONFLICT_PATTERN = re.compile(
    r"\b(?:conflict|problem|challenge|obstacle|threat|danger|crisis|dilemma|struggle|quest|mission|mystery|"
    r"secret|betrayal|deception|argument|fight|battle|war|rivalry|feud|vendetta|confrontation|standoff|"
    r"showdown|duel|ambush|siege|rebellion|invasion|heist|theft|sabotage|conspiracy|investigation|rescue|"
    r"escape|survival|negotiation|revenge|justice)\b",
    re.IGNORECASE,
)
SENSORY_PATTERN = re.compile(
    r"\b(?:smell|scent|aroma|fragrance|odor|taste|sound|noise|echo|whisper|roar|thunder|sight|view|"
    r"landscape|texture|touch|warmth|breeze|vibration)\b",
    re.IGNORECASE,
)
EMOTION_PATTERN = re.compile(
    r"\b(?:tension|anxiety|fear|dread|panic|wonder|awe|admiration|affection|longing|melancholy|sorrow|grief|"
    r"despair|unease|hope|doubt|suspicion|mistrust|anger|rage|resentment|bitterness|jealousy|envy|"
    r"loneliness|hostility|curiosity|excitement|pressure|stress)\b",
    re.IGNORECASE,
)

FLIRT_WORDS: List[str] = [
    "flirt", "beautiful", "attractive", "handsome", "pretty", "gorgeous", "like you", "dress", "eyes", "smile",
]
TYPE_CLOTHING = {"fantasy": "robes", "scifi": "uniform"}
SNIPPET_CHARS: int = 20


class ScenarioElements(BaseModel):
    """Cues pulled out of a free-text scenario description."""

    setting: str = ""
    time: str = ""
    weather: str = ""
    mood: str = ""
    relationships: List[str] = Field(default_factory=list)
    conflict: str = ""
    sensory_details: List[str] = Field(default_factory=list)
    emotional_undercurrents: List[str] = Field(default_factory=list)


def _first(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    if match is None:
        return ""
    return (match.group(1) if match.groups() else match.group(0)).strip()


def _all(pattern: re.Pattern, text: str) -> List[str]:
    return [match.group(0) for match in pattern.finditer(text)]


def extract_scenario_elements(description: Optional[str]) -> ScenarioElements:
    """Pull setting, time, weather, mood, ties, conflict, and sensory cues."""

    if not description:
        return ScenarioElements()
    return ScenarioElements(
        setting=_first(SETTING_PATTERN, description),
        time=_first(TIME_PATTERN, description),
        weather=_first(WEATHER_PATTERN, description),
        mood=_first(MOOD_PATTERN, description),
        relationships=_all(RELATIONSHIP_PATTERN, description),
        conflict=_first(CONFLICT_PATTERN, description),
        sensory_details=_all(SENSORY_PATTERN, description),
        emotional_undercurrents=_all(EMOTION_PATTERN, description),
    )


def is_flirtatious(text: str) -> bool:
    lowered = (text or "").lower()
    return any(word in lowered for word in FLIRT_WORDS)


########## Scenario Lines ##########
# Whole replies built around the scenario cues; each returns one finished line.


def flirt_response(character: Character, elements: ScenarioElements, rng: random.Random) -> str:
    """Deflect a compliment while staying inside the scene."""

    expression = f"with a {elements.mood} expression" if elements.mood else "with a subtle smile"
    clothing = TYPE_CLOTHING.get(character.type, "clothing")
    tie = elements.relationships[0] if elements.relationships else "current situation"
    options = [
        f"*{expression}, glancing around at the {elements.setting or 'surroundings'}* I notice you're being quite "
        f"charming. The {elements.weather or 'atmosphere'} seems to have put you in a certain mood.",
        f"*adjusting {clothing} slightly* Your words are quite forward, especially given our {tie}. Though I must "
        f"admit, it's refreshing in this {elements.mood or 'tense'} environment.",
        f"*leaning in slightly, voice lowering* In {elements.setting or 'a place like this'}, with "
        f"{elements.weather or 'everything going on'}, you choose to focus on such... personal observations?",
        f"*a hint of color rises to my cheeks* Even with {elements.conflict or 'all that is happening around us'}, "
        f"you find time for such comments? You're either very brave or very distracted.",
        f"*holding eye contact a moment longer than necessary* The {elements.time or 'current'} light does everyone "
        f"favors. We should focus on {elements.conflict or 'the matter at hand'}, though perhaps later we can talk.",
    ]
    return pick(rng, options)


def sensory_response(elements: ScenarioElements, body: str, rng: random.Random) -> str:
    detail = elements.sensory_details[0]
    options = [
        f"*pausing to notice the {detail} around us* {body}",
        f"*briefly distracted by the {detail} in our surroundings* As I was saying... {body}",
        f"*gesturing to the {detail}* This reminds me of something relevant. {body}",
    ]
    return pick(rng, options)


def scenario_response(character: Character, elements: ScenarioElements, message: str, rng: random.Random) -> str:
    """Line anchored in whichever scenario cues the description offers."""

    # 1 Collect cue-specific lines, then always add the type-keyed set.        # steps
    snippet = message[:SNIPPET_CHARS] + "..." if len(message) > SNIPPET_CHARS else ""
    options: List[str] = []
    if elements.setting:
        follow = f"But regarding what you said about {snippet}" if snippet else "What were you saying?"
        options.extend(
            [
                f"*glancing around {elements.setting}* This place reminds me of something important. {follow}",
                f"The atmosphere of {elements.setting} makes me think differently about what you're saying.",
            ]
        )
    if elements.time:
        options.extend(
            [
                f"*noticing the {elements.time} light* At this hour, everything feels different. Your words carry more weight.",
                f"*gesturing to the {elements.time} sky* This time of day always makes me more "
                f"{(character.mood or 'thoughtful').lower()} about such matters.",
            ]
        )
    if elements.weather:
        options.append(f"The {elements.weather} weather seems fitting for this conversation, doesn't it?")
    if elements.mood:
        options.append(f"*sensing the {elements.mood} mood* In moments like this, I find myself being more honest than usual.")
    if elements.conflict:
        options.extend(
            [
                f"*thinking about the {elements.conflict}* This situation forces us to reconsider everything, including what you just said.",
                f"Given the {elements.conflict} we're facing, we need to approach this differently.",
            ]
        )
    if elements.relationships:
        options.append(f"As {elements.relationships[0]}, we should be honest with each other about these matters.")
    options.extend(TYPE_SCENARIO_LINES.get(character.type, TYPE_SCENARIO_LINES["default"]))
    return pick(rng, options)


TYPE_SCENARIO_LINES = {
    "fantasy": [
        "*eyes glowing faintly* The magical energies here are bending how I hear your words.",
        "*whispering ancient words* The arcane forces at play shape how I must answer you.",
    ],
    "scifi": [
        "*checking wrist device* My sensors read unusual patterns here that bear on our conversation.",
        "*adjusting neural interface* In this setting, your words carry additional significance.",
    ],
    "historical": [
        "*adjusting period attire* In times like these, one must weigh tradition before answering.",
        "*speaking with careful formality* The weight of this moment colors my reply.",
    ],
    "combat": [
        "*shifting into a tactical stance* In conditions like these, your words take on strategic importance.",
        "*hand resting on weapon* The threat of a fight makes me weigh your words more carefully.",
    ],
    "default": [
        "*considering the circumstances* This situation gives me a new angle on what you're saying.",
        "*taking in the surroundings* Where we are shapes how I think about this.",
    ],
}

COMBAT_FLOURISHES = {
    "fantasy": ("magical energy crackles around my hands", "drawing a glowing rune in the air", "muttering an ancient incantation"),
    "scifi": ("activates combat systems", "calibrating targeting systems", "activating defensive shields"),
    "default": ("muscles tense, ready to strike", "reaching for my weapon", "adopting a defensive posture"),
}


def combat_response(character: Character, rng: random.Random) -> str:
    ready, moving, guard = COMBAT_FLOURISHES.get(character.type, COMBAT_FLOURISHES["default"])
    options = [
        f"*shifting into a fighting stance, eyes narrowing* If it's a fight you want, I'm more than ready. *{ready}*",
        f"*moving with practiced precision, {moving}* I've faced worse threats than this. Let's see what you're capable of.",
        f"*{guard}* Violence should be the last resort, but I won't hesitate to defend myself if pushed.",
    ]
    return pick(rng, options)


RELATIONSHIP_FLOURISHES = {
    "fantasy": ("a faint aura connecting us", "sensing the magical bond between us"),
    "scifi": ("biometric readings spiking", "accessing relationship protocols"),
    "default": ("expression softening slightly", "recalling our shared experiences"),
}


def relationship_response(
    character: Character,
    target: Character,
    elements: ScenarioElements,
    rng: random.Random,
) -> str:
    """Address another character through the pair's shared history."""

    look, recall = RELATIONSHIP_FLOURISHES.get(character.type, RELATIONSHIP_FLOURISHES["default"])
    status = (
        f"acknowledging our status as {elements.relationships[0]}"
        if elements.relationships
        else "considering our complex relationship"
    )
    options = [
        f"*looking directly at {target.name}, {look}* Our history together gives me a unique view on this.",
        f"*{recall}* {target.name}, you and I have been through enough together that I can speak frankly about this.",
        f"*{status}* {target.name}, the dynamic between us colors everything we discuss.",
    ]
    return pick(rng, options)


def tracked_relationship_response(target_name: str, description: str, body: str, rng: random.Random) -> str:
    options = [
        f"*looking at {target_name}* As {description}, we both have a stake in this. {body}",
        f"*exchanging a meaningful glance with {target_name}* {target_name} and I have history as {description}. {body}",
        f"*briefly touching {target_name}'s shoulder* {target_name} knows what I mean. {body}",
    ]
    return pick(rng, options)


def undercurrent_response(elements: ScenarioElements, body: str, rng: random.Random) -> str:
    feeling = elements.emotional_undercurrents[0]
    options = [
        f"*sensing the {feeling} in the air* There's something unspoken affecting us all here. {body}",
        f"*voice softening* With all this {feeling} around us, it's hard to focus solely on facts. {body}",
    ]
    return pick(rng, options)
