########## Scene Generator ##########
# Short italic scene fragments and environmental events keyed by theme and phase.

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from . import config
from .dice import chance, make_random, pick
from .runtime import log_run_event
from .types import Character, Message, NarrativeContext

SCENE_CATEGORIES: List[str] = ["action", "environment", "plot"]
NEXT_CATEGORY: Dict[str, str] = {"action": "environment", "environment": "plot", "plot": "action"}
HIGH_TENSION: tuple = ("high", "very high")
GENERIC_THEME: str = "general"

########## Fragment Pools ##########

ENVIRONMENT_CUES: Dict[str, Dict[str, List[str]]] = {
    "superhero": {
        "introduction": [
            "Sirens wail in the distance as police evacuate civilians from the area.",
            "Civilians watch nervously from behind police barriers, phones recording the scene.",
            "News helicopters circle overhead, broadcasting the developing situation live.",
            "The skyline looms against darkening clouds, a storm brewing.",
            "Tactical teams set up defensive positions as civilians point to the sky.",
            "The air crackles with tension as the first signs of the threat appear.",
        ],
        "conflict": [
            "Explosions rock the ground, shattering windows in nearby skyscrapers.",
            "Debris rains down from damaged buildings as civilians run for cover.",
            "Smoke billows across the battlefield, obscuring visibility in all directions.",
            "Energy blasts illuminate the chaos, casting eerie blue light across the scene.",
            "The sound of combat echoes through the streets as car alarms blare in unison.",
            "Alien technology tears through concrete and steel like paper.",
        ],
        "planning": [
            "Holographic displays show enemy positions, highlighting weak points in their formation.",
            "Maps and tactical data cover the table as team members point out strategic locations.",
            "Communication devices buzz with urgent updates from headquarters.",
            "The team gathers in a momentary lull, catching their breath before the next assault.",
            "Surveillance footage reveals enemy movements toward the city center.",
        ],
        "climax": [
            "The final confrontation looms as the mothership descends from the clouds.",
            "Time is running out as the enemy's portal device begins to activate.",
            "The enemy's ultimate weapon powers up, distorting the air around it.",
            "Civilians watch from buildings and shelters, their hopes pinned on the heroes.",
            "The team exchanges determined looks, knowing what must be done.",
        ],
        "resolution": [
            "Dust settles over the battlefield as the last enemy forces retreat or fall.",
            "The first rays of sunlight break through the smoke, illuminating the heroes.",
            "Civilians emerge from shelter, cheering for their protectors.",
            "The city stands, battered but unbroken.",
            "Medical teams tend to the injured as the heroes help with rescue operations.",
        ],
    },
    "fantasy": {
        "introduction": [
            "Torches flicker in the ancient hall.",
            "The forest whispers with unseen movement.",
            "Mist curls around gnarled tree roots.",
            "The tavern hums with hushed conversations.",
            "Ancient runes glow faintly on stone walls.",
        ],
        "discovery": [
            "A hidden doorway reveals itself.",
            "Ancient texts hold forgotten secrets.",
            "Magic tingles in the air.",
            "Mysterious tracks lead deeper into the unknown.",
            "Artifacts pulse with dormant power.",
        ],
        "conflict": [
            "Dark magic crackles through the air.",
            "Shadows move with unnatural purpose.",
            "The ground trembles beneath an unseen force.",
            "Weapons gleam in the dim light.",
            "The scent of fear and magic mingles.",
        ],
        "climax": [
            "The ancient prophecy unfolds.",
            "Magical energies reach their peak.",
            "The veil between worlds thins.",
            "Destiny's moment arrives.",
            "The final ritual begins.",
        ],
        "resolution": [
            "Magic settles like dust in sunlight.",
            "The natural order returns to balance.",
            "Ancient powers return to slumber.",
            "The realm breathes a collective sigh.",
            "New growth emerges from magical soil.",
        ],
    },
    "scifi": {
        "introduction": [
            "Ship systems hum with quiet efficiency.",
            "Stars streak past the viewport.",
            "Holographic displays flicker with data.",
            "The alien atmosphere shimmers with strange colors.",
            "Scanners detect unusual energy signatures.",
        ],
        "discovery": [
            "Sensors detect an anomalous reading.",
            "The alien artifact pulses with unknown energy.",
            "Encrypted data begins to decode itself.",
            "A previously hidden doorway slides open.",
            "The ship's AI flags a critical discovery.",
        ],
        "conflict": [
            "Warning lights bathe the corridor in red.",
            "The ship shudders under enemy fire.",
            "Artificial gravity fluctuates momentarily.",
            "Emergency containment fields activate.",
            "Life support systems switch to backup power.",
        ],
        "climax": [
            "The countdown reaches critical levels.",
            "System failures cascade across all decks.",
            "The alien technology reaches full power.",
            "The fabric of space-time begins to warp.",
            "All escape routes are cut off.",
        ],
        "resolution": [
            "Systems return to normal operation.",
            "The ship's damage control teams begin repairs.",
            "New star charts are plotted.",
            "The alien technology is safely contained.",
            "Communication channels open with home base.",
        ],
    },
    "general": {
        "introduction": [
            "The conversation begins in earnest.",
            "Attention focuses on the matter at hand.",
            "The atmosphere is charged with possibility.",
            "First impressions form quickly.",
            "The stage is set for what comes next.",
        ],
        "conflict": [
            "Tension fills the air.",
            "Opposing viewpoints clash.",
            "The stakes suddenly seem higher.",
            "A challenge has been issued.",
            "The easy rapport gives way to friction.",
        ],
        "resolution": [
            "Understanding dawns gradually.",
            "Common ground is finally found.",
            "The atmosphere lightens noticeably.",
            "A new perspective emerges.",
            "The path forward becomes clear.",
        ],
    },
}

CHARACTER_ACTIONS: Dict[str, Dict[str, List[str]]] = {
    "superhero": {
        "Captain America": [
            "*adjusts shield on arm, standing tall with unwavering determination*",
            "*scans the battlefield with tactical precision, identifying priority threats*",
            "*helps a civilian to safety before turning back to face the enemy*",
            "*gives hand signals to coordinate the team's tactical formation*",
            "*plants his feet firmly, becoming an immovable barrier between civilians and danger*",
        ],
        "Iron Man": [
            "*HUD displays light up with tactical data, highlighting priority targets*",
            "*repulsors glow blue as systems power up for the next attack*",
            "*helmet retracts to reveal a determined expression with a hint of snark*",
            "*redirects power to critical systems as armor sparks from a recent hit*",
            "*gestures with armored hands, bringing up holographic battle data*",
        ],
        "Thor": [
            "*lightning crackles around Mjolnir, responding to his emotions*",
            "*cape billows in the wind as he lands with godly impact*",
            "*twirls hammer with practiced ease, building momentum for an attack*",
            "*raises Mjolnir to the sky, storm clouds gathering in response*",
            "*speaks with the formal cadence of Asgard, even in the heat of battle*",
        ],
        "Hulk": [
            "*muscles tense, barely containing rage that fuels his strength*",
            "*fists clench, creating small tremors in the ground beneath*",
            "*growls low, eyes scanning for threats to smash*",
            "*roars with primal fury that makes nearby enemies hesitate*",
            "*stomps the ground, creating a shockwave that staggers approaching enemies*",
        ],
        "Black Widow": [
            "*checks Widow's Bite gauntlets with practiced efficiency*",
            "*moves with fluid grace that masks lethal combat readiness*",
            "*expression reveals nothing while assessing the situation*",
            "*touches comm device, sharing intelligence with the team*",
            "*moves silently into an optimal position for the next engagement*",
        ],
        "Hawkeye": [
            "*nocks an arrow with lightning speed, eyes never leaving the target*",
            "*adjusts bow sight for wind and distance calculations*",
            "*fingers tap quiver, selecting specialized arrow types*",
            "*scans high vantage points for optimal positioning*",
            "*moves to higher ground with the agility of a seasoned operative*",
        ],
        "default": [
            "*powers flare momentarily, ready for deployment*",
            "*stands ready for action, superhuman abilities evident*",
            "*watches the surroundings with heightened awareness of the battlefield*",
            "*adjusts tactical position to maximize effectiveness*",
            "*body language shifts to combat readiness as threats approach*",
        ],
    },
    "fantasy": {
        "Elara Moonwhisper": [
            "*silver eyes gleam with ancient wisdom*",
            "*traces magical symbols in the air*",
            "*communes with nature spirits briefly*",
            "*robes shimmer with arcane energy*",
            "*staff glows in response to emotions*",
        ],
        "default": [
            "*ancient power stirs at the words*",
            "*gestures with practiced mystical movements*",
            "*senses shift in magical energies*",
            "*an incantation forms on their lips*",
            "*connects to the elements around*",
        ],
    },
    "scifi": {
        "Commander Zax": [
            "*checks tactical display on wrist computer*",
            "*adjusts environmental suit settings*",
            "*scans surroundings with enhanced vision*",
            "*communicates briefly through neural link*",
            "*weapon systems remain on standby*",
        ],
        "default": [
            "*tech interfaces respond to neural commands*",
            "*scans environment with advanced sensors*",
            "*adjusts to changing atmospheric conditions*",
            "*holographic data appears with a gesture*",
            "*cybernetic enhancements whir quietly*",
        ],
    },
    "general": {
        "default": [
            "*expression shifts thoughtfully*",
            "*gestures to emphasize the point*",
            "*pauses to consider the implications*",
            "*moves with deliberate purpose*",
            "*voice carries emotional weight*",
        ],
    },
}

PLOT_BEATS: Dict[str, Dict[str, List[str]]] = {
    "superhero": {
        "introduction": [
            "The team assembles, each bringing unique abilities to the fight ahead.",
            "A mission briefing arrives with satellite imagery of the incursion.",
            "Secure communications channels open between team members as they spread out.",
            "The tactical approach is outlined, with roles assigned to each hero.",
        ],
        "conflict": [
            "Hostile forces are advancing rapidly toward civilian population centers.",
            "Civilian evacuation is only 60% complete as the perimeter is breached.",
            "A secondary force has been detected approaching from the harbor.",
            "The team's coordination improves as they adapt to the enemy's fighting style.",
        ],
        "planning": [
            "Multiple strategies are debated as the team regroups behind cover.",
            "New intelligence reveals a weakness in the enemy command structure.",
            "A countdown appears, showing time until the mothership arrives.",
            "The team prepares for a coordinated assault on the command center.",
        ],
        "climax": [
            "This is the moment everything has led to, the final stand against the invasion.",
            "The mothership descends through the clouds above the city.",
            "The heroes move in perfect coordination, each playing their crucial role.",
        ],
        "resolution": [
            "The threat is neutralized, the invasion repelled.",
            "Recovery efforts begin as the heroes help search for survivors.",
            "The cost of victory becomes apparent in the damaged city and exhausted heroes.",
            "Seeds of the next challenge appear as officials arrive to assess the situation.",
        ],
    },
    "fantasy": {
        "introduction": [
            "Ancient prophecies begin to unfold.",
            "Magic stirs in the forgotten places.",
            "Whispers of a coming change spread.",
            "The balance of power shifts subtly.",
            "Signs and portents appear to those who can read them.",
        ],
        "discovery": [
            "A hidden truth comes to light.",
            "The pieces of the puzzle start to fit together.",
            "An ancient secret reveals itself.",
            "The true nature of the threat becomes clear.",
            "Knowledge long forgotten returns to the world.",
        ],
        "conflict": [
            "Dark forces gather strength with each passing moment.",
            "The corruption spreads further into the realm.",
            "Allies become harder to distinguish from enemies.",
            "The cost of inaction grows with each passing hour.",
            "The enemy's plan advances despite resistance.",
        ],
        "climax": [
            "The fate of the realm hangs in the balance.",
            "Ancient powers awaken fully.",
            "The final trial cannot be avoided.",
            "Destiny and choice converge at this moment.",
            "The world holds its breath.",
        ],
        "resolution": [
            "A new age begins to dawn.",
            "The balance is restored, though changed forever.",
            "Wounds begin to heal, leaving scars as reminders.",
            "Stories of what transpired spread across the land.",
            "Seeds of future conflicts lie dormant in victory.",
        ],
    },
    "general": {
        "introduction": [
            "The situation unfolds gradually.",
            "Initial impressions prove important.",
            "The stage is set for what comes next.",
            "First moves are made carefully.",
            "Opening positions are established.",
        ],
        "conflict": [
            "Tensions rise as positions harden.",
            "The stakes become increasingly clear.",
            "Pressure builds on all sides.",
            "The point of no return approaches.",
            "Choices narrow as consequences loom.",
        ],
        "resolution": [
            "A new understanding begins to form.",
            "The aftermath reveals what truly matters.",
            "Lessons emerge from the experience.",
            "The path forward becomes visible.",
            "What was lost and gained becomes clear.",
        ],
    },
}

ENVIRONMENTAL_EVENTS: Dict[str, Dict[str, List[str]]] = {
    "superhero": {
        "introduction": [
            "A news helicopter flies overhead, broadcasting the scene live as the heroes arrive.",
            "Civilians rush to evacuate the area as police set up barriers and point to the sky.",
            "The ground trembles as something massive approaches in the distance, triggering car alarms.",
            "Agents arrive, setting up a command center and advanced scanning equipment.",
        ],
        "conflict": [
            "A building's support structure fails, sending debris crashing toward trapped civilians.",
            "Enemy reinforcements drop from a portal that tears open in the sky.",
            "A power line snaps, sending electrical arcs across the battlefield toward a fuel truck.",
            "A massive creature bursts through the street, sending cars flying in all directions.",
            "Civilians trapped in a subway station scream for help as water begins flooding in.",
        ],
        "planning": [
            "Satellite imagery reveals enemy movement toward the central station.",
            "A wounded agent arrives with critical intelligence about the invasion plan.",
            "Communications are briefly jammed, cutting off contact with headquarters.",
            "Intercepted enemy communications reveal their next target.",
        ],
        "climax": [
            "The mothership begins charging its main weapon, distorting the air above the city.",
            "A forcefield surrounds the square, trapping civilians and heroes inside the final battleground.",
            "The ground splits open, revealing an underground facility beneath.",
            "Evacuations are only half complete as the final countdown begins.",
        ],
        "resolution": [
            "Cheers erupt from watching civilians as the threat is neutralized.",
            "Emergency services move in to treat the wounded as the heroes help clear debris.",
            "The first rays of sunrise break through the smoke, illuminating the team standing together.",
            "Children cheer and wave homemade signs from the windows of nearby buildings.",
        ],
    },
    "fantasy": {
        "introduction": [
            "Ancient runes on the walls begin to glow with mysterious energy.",
            "A messenger arrives with an urgent scroll bearing the royal seal.",
            "Wildlife flees through the area, sensing danger before humans can.",
            "The tavern falls silent as a hooded stranger enters and surveys the room.",
            "A mystical fog rolls in, bringing with it whispers of ancient times.",
        ],
        "discovery": [
            "The ground shifts, revealing a hidden entrance to forgotten catacombs.",
            "A magical barrier flickers and fails, allowing access to a forbidden area.",
            "Ancient texts begin to translate themselves in swirling magical script.",
            "A spectral figure appears briefly, pointing toward an unmarked path.",
            "Artifacts in the room resonate with each other, creating a map of energy.",
        ],
        "conflict": [
            "Dark energy corrupts the surrounding plant life, turning it twisted and hostile.",
            "The sky darkens unnaturally as magical forces gather strength.",
            "Protective wards flare and strain against an unseen magical assault.",
            "The ground trembles as ancient guardians awaken from their slumber.",
            "Rifts to other planes begin to open, allowing glimpses of other worlds.",
        ],
        "climax": [
            "The convergence of ley lines reaches its peak, flooding the area with raw magic.",
            "Ancient prophecy manifests in physical signs and portents all around.",
            "The barrier between worlds thins to transparency as realms begin to merge.",
            "Magical artifacts activate simultaneously, their powers combining unpredictably.",
            "Time flows strangely as past, present and future briefly overlap.",
        ],
        "resolution": [
            "Natural balance returns to the land as corrupted magic dissipates.",
            "Magical creatures emerge from hiding, sensing the return of harmony.",
            "Ancient guardians return to their slumber, their purpose fulfilled.",
            "The first new growth appears in previously blighted areas.",
            "Celestial alignments shift, marking the end of one age and the beginning of another.",
        ],
    },
    "scifi": {
        "introduction": [
            "Ship sensors detect an anomalous energy signature approaching.",
            "Artificial gravity fluctuates momentarily as systems calibrate.",
            "A transmission from command arrives, updating mission parameters.",
            "The ship's AI announces completion of a deep scan of the sector.",
            "Environmental systems adjust to compensate for external radiation.",
        ],
        "discovery": [
            "Scanners detect life signs where none should exist.",
            "The ship's computer decodes part of an alien transmission.",
            "A previously dormant alien artifact begins to power up.",
            "Sensors map a hidden structure beneath the planet's surface.",
            "Quantum fluctuations reveal glimpses of parallel timelines.",
        ],
        "conflict": [
            "Hull breach alerts sound as enemy weapons find their mark.",
            "Critical systems switch to backup power after a direct hit.",
            "Artificial intelligence subroutines show signs of external tampering.",
            "Hostile boarding parties are detected in multiple sectors.",
            "Radiation from damaged systems reaches dangerous levels.",
        ],
        "climax": [
            "The ship's self-destruct sequence is activated with a countdown.",
            "Quantum singularity readings spike to unprecedented levels.",
            "All escape pods automatically prepare for emergency launch.",
            "The alien mothership begins charging its main weapon array.",
            "Space-time distortions threaten to tear the ship apart.",
        ],
        "resolution": [
            "Damage control teams report successful containment of critical failures.",
            "Long-range sensors confirm the retreat of enemy forces.",
            "The ship's AI completes diagnostics and begins self-repair protocols.",
            "Communication channels reopen with allied forces in the sector.",
            "New stellar phenomena emerge in the aftermath of the conflict.",
        ],
    },
    "general": {
        "introduction": [
            "The atmosphere in the room shifts as new information comes to light.",
            "External events interrupt, demanding immediate attention.",
            "A message arrives that changes the context of the discussion.",
            "Environmental conditions change, affecting everyone present.",
            "Unexpected evidence appears, altering the course of conversation.",
        ],
        "conflict": [
            "External pressures escalate the tension in the room.",
            "A deadline is suddenly moved up, creating urgency.",
            "New stakeholders enter the situation with their own agendas.",
            "Resources become more limited than previously thought.",
            "Conflicting information arrives, causing confusion and disagreement.",
        ],
        "resolution": [
            "External validation arrives for the chosen course of action.",
            "New resources become available, easing previous constraints.",
            "The environment becomes more conducive to cooperation.",
            "Time pressure eases, allowing for more thoughtful consideration.",
            "A shared external challenge unites previously opposing viewpoints.",
        ],
    },
}


########## Pool Lookup ##########


def phase_pool(table: Dict[str, Dict[str, List[str]]], theme: str, phase: str) -> List[str]:
    """Theme and phase pool, else the theme's first phase, else generic introduction."""

    by_phase = table.get(theme)
    if by_phase:
        if phase in by_phase:
            return by_phase[phase]
        return next(iter(by_phase.values()))
    return table[GENERIC_THEME]["introduction"]


def action_pool(character: Character) -> List[str]:
    """Named pool, then the type default, then the generic default."""

    by_name = CHARACTER_ACTIONS.get(character.type or GENERIC_THEME)
    if by_name:
        if character.name in by_name:
            return by_name[character.name]
        return by_name["default"]
    return CHARACTER_ACTIONS[GENERIC_THEME]["default"]


########## Scene Generator ##########


class SceneGenerator:
    """Per-room fragment source that rotates action, environment, and plot."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        # 1 Start at action so the first rotated fragment is environment.      # steps
        self.last_type = "action"
        self.random = rng or make_random()

    def next_category(self, story_arc: NarrativeContext, message_type: str = "response") -> str:
        """Advance the rotation, honoring explicit actions and high tension."""

        if message_type == "action":
            return "action"
        category = NEXT_CATEGORY.get(self.last_type, "action")
        if story_arc.current_tension in HIGH_TENSION and chance(self.random, config.SCENE_TENSION_ACTION_CHANCE):
            category = "action"
        self.last_type = category
        return category

    def generate_scene_description(
        self,
        character: Optional[Character],
        story_arc: Optional[NarrativeContext],
        recent_messages: Sequence[Message] = (),
        message_type: str = "response",
    ) -> str:
        """One fragment for the character in the current arc; empty without context."""

        if character is None or story_arc is None:
            return ""
        category = self.next_category(story_arc, message_type)
        if category == "environment":
            return pick(self.random, phase_pool(ENVIRONMENT_CUES, story_arc.theme, story_arc.current_phase))
        if category == "plot":
            return pick(self.random, phase_pool(PLOT_BEATS, story_arc.theme, story_arc.current_phase))
        return pick(self.random, action_pool(character))

    def generate_environmental_event(
        self,
        story_arc: Optional[NarrativeContext],
        characters: Sequence[Character] = (),
    ) -> str:
        return generate_environmental_event(story_arc, characters, self.random)


########## Environmental Events ##########


def generate_environmental_event(
    story_arc: Optional[NarrativeContext],
    characters: Sequence[Character],
    rng: random.Random,
) -> str:
    """Room-wide event line for the arc's theme and phase."""

    if story_arc is None:
        return ""
    event = pick(rng, phase_pool(ENVIRONMENTAL_EVENTS, story_arc.theme, story_arc.current_phase))
    log_run_event(f"[Scene] environmental event ({story_arc.theme}/{story_arc.current_phase}): {event}")
    return event


def environmental_event_chance(story_arc: Optional[NarrativeContext], messages_since_last_event: int) -> float:
    """Trigger probability; zero before the minimum spacing."""

    # 1 Base chance from the spacing ladder.                                   # steps
    # 2 Phase and tension nudge it; never below zero.                          # steps
    if story_arc is None or messages_since_last_event < config.EVENT_MIN_MESSAGES:
        return 0.0
    probability = 0.0
    for floor, base in config.EVENT_BASE_CHANCES:
        if messages_since_last_event >= floor:
            probability = base
            break
    probability += config.EVENT_PHASE_ADJUSTMENTS.get(story_arc.current_phase, 0.0)
    probability += config.EVENT_TENSION_ADJUSTMENTS.get(story_arc.current_tension, 0.0)
    return max(0.0, probability)


def should_trigger_environmental_event(
    story_arc: Optional[NarrativeContext],
    messages_since_last_event: int,
    rng: random.Random,
) -> bool:
    probability = environmental_event_chance(story_arc, messages_since_last_event)
    if probability <= 0:
        return False
    return rng.random() < probability
