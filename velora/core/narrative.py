########## Narrative Director ##########
# Phase and tone inference, branch pacing, and story-arc sampling for a room.

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

from . import config
from .branches import BranchGenerator
from .dice import chance, make_random
from .runtime import log_run_event
from .sentiment import analyze_branch_tone
from .topics import extract_topics_from_messages
from .types import Character, Message, NarrativeContext, Relationship, Scenario, WritingInstructions

ESCALATING_TONES: Tuple[str, ...] = ("tense", "angry")
CALMING_TONES: Tuple[str, ...] = ("happy", "excited")

# (from phase, trigger words, next phase, tension or None to keep)
ARC_TRANSITIONS: List[Tuple[str, Tuple[str, ...], str, Optional[str]]] = [
    ("introduction", ("attack", "fight", "battle"), "conflict", "high"),
    ("conflict", ("plan", "strategy", "weakness"), "planning", None),
    ("planning", ("final", "confront", "ready"), "climax", "very high"),
    ("climax", ("victory", "defeated", "over"), "resolution", "low"),
]

# theme -> ordered (trigger words, goal); first hit wins
ARC_GOALS: Dict[str, List[Tuple[Tuple[str, ...], str]]] = {
    "superhero": [
        (("civilian", "rescue"), "Rescue civilians and minimize casualties"),
        (("weakness", "vulnerability"), "Discover the enemy's weakness"),
        (("final", "confront"), "Confront the main threat and save the day"),
    ],
    "fantasy": [
        (("quest", "journey"), "Begin the quest and gather resources"),
        (("clue", "map"), "Follow the trail to the next location"),
        (("battle", "fight"), "Overcome the immediate threat"),
        (("artifact", "treasure"), "Secure the artifact before it falls into the wrong hands"),
    ],
    "scifi": [
        (("scan", "analyze"), "Analyze the anomaly and gather data"),
        (("malfunction", "system"), "Repair critical systems before it's too late"),
        (("alien", "contact"), "Establish contact with the unknown entity"),
        (("escape", "evacuate"), "Evacuate before the situation becomes catastrophic"),
    ],
}

PHASE_NOTES: Dict[str, Dict[str, str]] = {
    "introduction": {
        "general": "Focus on establishing character relationships and setting the scene. Keep tension moderate but building.",
        "superhero": "Establish your heroic persona and relationship to the team.",
        "fantasy": "Establish your role in the party and your connection to the magical world.",
        "scifi": "Establish your role on the crew and your technical expertise.",
    },
    "discovery": {
        "general": "Focus on exploration and uncovering new information. Show curiosity and analytical thinking.",
        "fantasy": "Interpret clues and magical signs. Use your knowledge of lore and legends.",
        "scifi": "Analyze sensor readings and anomalies with scientific reasoning.",
    },
    "rising_action": {
        "general": "Let the stakes grow. Each reply should add a complication or a new detail.",
    },
    "conflict": {
        "general": "Emphasize action and immediate threats. Responses should be urgent and focused.",
        "superhero": "Focus on protecting civilians and coordinating with teammates.",
        "fantasy": "Focus on using your abilities in combat.",
        "scifi": "Focus on technical solutions to the crisis.",
    },
    "planning": {
        "general": "Focus on strategy and analysis. Discuss next steps and the enemy's weaknesses.",
    },
    "climax": {
        "general": "This is the high point of tension. Responses should be dramatic with high stakes clearly communicated.",
        "superhero": "Show determination in the face of overwhelming odds.",
        "fantasy": "Channel your full power against the final challenge.",
        "scifi": "Execute the final plan with precision and adaptability.",
    },
    "resolution": {
        "general": "Wind down the action and reflect on what happened. Focus on character growth and next steps.",
    },
}

TYPE_REMINDERS: Dict[str, str] = {
    "fantasy": "Uses magical or mystical terminology.",
    "scifi": "Uses technical jargon and scientific concepts.",
    "historical": "Uses period-appropriate language and formal speech patterns.",
    "superhero": "References heroic ideals and responsibilities.",
}

TENSION_NOTES: Dict[str, str] = {
    "high": " Maintain a sense of urgency in your responses.",
    "very high": " Convey extreme urgency and high stakes in every response.",
}


########## Phase Inference ##########


def phase_for_count(message_count: int) -> str:
    """Phase from the message-count ladder alone."""

    for ceiling, phase in config.PHASE_THRESHOLDS:
        if message_count < ceiling:
            return phase
    return config.PHASE_FINAL


def infer_phase(message_count: int, emotional_tone: str, rng: random.Random) -> str:
    """Count-based phase nudged by the dominant tone."""

    # 1 Ladder first.                                                           # steps
    # 2 Tense or angry rooms jump rising action to conflict.                    # steps
    # 3 Happy or excited rooms sometimes fall back from conflict.               # steps
    phase = phase_for_count(message_count)
    if emotional_tone in ESCALATING_TONES and phase == "rising_action":
        return "conflict"
    if emotional_tone in CALMING_TONES and phase == "conflict" and chance(rng, config.PHASE_REGRESSION_CHANCE):
        return "rising_action"
    return phase


def update_story_arc(story_arc: NarrativeContext, recent_messages: Sequence[Message]) -> NarrativeContext:
    """Keyword-driven arc transitions and goal updates from the recent window."""

    combined = " ".join(message.message for message in recent_messages).lower()
    update: Dict[str, str] = {}
    for origin, words, target, tension in ARC_TRANSITIONS:
        if story_arc.current_phase == origin and any(word in combined for word in words):
            update["current_phase"] = target
            if tension:
                update["current_tension"] = tension
            break
    for words, goal in ARC_GOALS.get(story_arc.theme, []):
        if any(word in combined for word in words):
            update["current_goal"] = goal
            break
    if not update:
        return story_arc
    if "current_phase" in update:
        log_run_event(f"[Narrative] arc {story_arc.current_phase} -> {update['current_phase']}")
    return story_arc.model_copy(update=update)


def generate_writing_instructions(story_arc: NarrativeContext, character: Character) -> WritingInstructions:
    """Phase and theme notes plus type reminders for the speaking character."""

    reminders = f"Stay in character as {character.name}."
    if character.type in TYPE_REMINDERS:
        reminders += " " + TYPE_REMINDERS[character.type]
    if character.voice_style:
        reminders += f" Speaks in a {character.voice_style} manner."
    length = "medium"
    if character.talkativeness > 7:
        length = "long"
    elif character.talkativeness < 4:
        length = "short"
    notes_by_theme = PHASE_NOTES.get(story_arc.current_phase, PHASE_NOTES["introduction"])
    notes = notes_by_theme.get(story_arc.theme, notes_by_theme["general"])
    notes += TENSION_NOTES.get(story_arc.current_tension, "")
    if story_arc.current_goal:
        notes += f" Your current goal is to {story_arc.current_goal[0].lower()}{story_arc.current_goal[1:]}."
    return WritingInstructions(
        response_length=length,
        character_reminders=reminders,
        general_instructions=notes,
    )


########## Director ##########


class NarrativeDirector:
    """Owns branch pacing, branch history, and the inferred phase and tone."""

    def __init__(self, scenario_type: str = "adventure", rng: Optional[random.Random] = None) -> None:
        self.random = rng or make_random()
        self.scenario_type = scenario_type
        self.branch_generator = BranchGenerator(self.random)
        self.messages_since_branch = 0
        self.branch_history: List[str] = []
        self.relationships: List[Relationship] = []
        self.narrative_phase = "introduction"
        self.emotional_tone = "neutral"

    def set_relationships(self, relationships: Sequence[Relationship]) -> None:
        self.relationships = list(relationships)

    def should_suggest_branch(self, chat_history: Sequence[Message]) -> bool:
        """Never before the minimum spacing, always at the maximum, a ramp between."""

        if not chat_history:
            return False
        if self.messages_since_branch < config.BRANCH_MIN_SPACING:
            self.messages_since_branch += 1
            return False
        if self.messages_since_branch >= config.BRANCH_MAX_SPACING:
            return True
        span = config.BRANCH_MAX_SPACING - config.BRANCH_MIN_SPACING
        probability = (self.messages_since_branch - config.BRANCH_MIN_SPACING) / span
        self.messages_since_branch += 1
        return self.random.random() < probability

    def update_phase(self, chat_history: Sequence[Message]) -> str:
        self.narrative_phase = infer_phase(len(chat_history), self.emotional_tone, self.random)
        return self.narrative_phase

    def generate_branch_options(
        self,
        chat_history: Sequence[Message],
        scenario: Optional[Scenario] = None,
        scenario_type: Optional[str] = None,
    ) -> List[str]:
        """Reset pacing, refresh tone and phase, and draw 3-4 branches."""

        # 1 Window the log and read topics and tone from it.                     # steps
        # 2 Refresh the phase then sample the generator.                         # steps
        # 3 Remember the offered options so they are not repeated soon.          # steps
        self.messages_since_branch = 0
        if scenario_type:
            self.scenario_type = scenario_type
        elif scenario is not None and scenario.scenario_type:
            self.scenario_type = scenario.scenario_type
        recent = list(chat_history)[-config.BRANCH_WINDOW :]
        topics = extract_topics_from_messages(recent)
        self.emotional_tone = analyze_branch_tone(recent)
        self.update_phase(chat_history)
        options = self.branch_generator.generate_branches(
            self.scenario_type,
            topics,
            self.emotional_tone,
            self.narrative_phase,
            self.relationships,
            self.branch_history,
        )
        self.branch_history = [*self.branch_history, *options][-config.BRANCH_HISTORY_KEEP :]
        log_run_event(
            f"[Narrative] {len(options)} branches ({self.scenario_type}/{self.narrative_phase}/{self.emotional_tone})"
        )
        return options

    def record_branch_selection(self, branch: str) -> None:
        """Keep the chosen branch in the recent history."""

        self.branch_history = [*self.branch_history, branch][-config.BRANCH_HISTORY_KEEP :]
