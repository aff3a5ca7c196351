########## Engine Facade ##########
# Public entry points for presentation layers; every call degrades to a safe default.

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from . import config
from .dice import make_random
from .moods import update_mood as apply_mood_update
from .narrative import NarrativeDirector
from .relationships import update_relationship as apply_relationship_update
from .runtime import safe_call
from .scenes import SceneGenerator
from .scenes import should_trigger_environmental_event as event_due
from .synthesis import ResponseSynthesizer
from .turns import determine_next_speaker, determine_responders
from .types import Character, Message, MoodState, NarrativeContext, Relationship, Scenario, WritingInstructions


class ConversationEngine:
    """One room's worth of engine state: random source, scene rotation, branch pacing."""

    def __init__(self, rng: Optional[random.Random] = None, scenario_type: str = "adventure") -> None:
        # 1 Share a single random source so a seed pins the whole room.         # steps
        self.random = rng or make_random()
        self.scenes = SceneGenerator(self.random)
        self.synthesizer = ResponseSynthesizer(self.random, self.scenes)
        self.director = NarrativeDirector(scenario_type, self.random)

    # ---- turn taking ----

    def select_next_speaker(
        self,
        characters: Sequence[Character],
        last_message: Optional[Message],
        last_speaker_name: Optional[str],
    ) -> Optional[Character]:
        return safe_call(
            "Speaker",
            None,
            determine_next_speaker,
            characters,
            last_message,
            last_speaker_name,
            self.random,
        )

    def select_responders(
        self,
        characters: Sequence[Character],
        last_message: Optional[Message],
        last_speaker_name: Optional[str],
        max_responders: int,
    ) -> List[Character]:
        return safe_call(
            "Responders",
            [],
            determine_responders,
            characters,
            last_message,
            last_speaker_name,
            max_responders,
            self.random,
        )

    # ---- synthesis ----

    def synthesize_response(
        self,
        character: Optional[Character],
        stimulus_text: str,
        recent_messages: Sequence[Message] = (),
        writing_instructions: Optional[WritingInstructions] = None,
        scenario: Optional[Scenario] = None,
        relationships: Sequence[Relationship] = (),
    ) -> str:
        """Reply to a human line; a deflection line stands in when synthesis fails."""

        return safe_call(
            "Synthesis",
            config.DEFLECTION_LINE,
            self.synthesizer.generate_response,
            character,
            stimulus_text,
            recent_messages,
            writing_instructions,
            scenario,
            relationships,
        )

    def synthesize_interaction(
        self,
        character: Optional[Character],
        target_name: str,
        target_message: str,
        recent_messages: Sequence[Message] = (),
        relationships: Sequence[Relationship] = (),
    ) -> str:
        return safe_call(
            "Interaction",
            config.DEFLECTION_LINE,
            self.synthesizer.generate_interaction,
            character,
            target_name,
            target_message,
            recent_messages,
            relationships,
        )

    # ---- state updates ----

    def update_mood(
        self,
        mood_state: MoodState,
        trigger: str,
        impact: int,
        interaction_type: str = "statement",
    ) -> MoodState:
        """New mood state; the input comes back unchanged on failure."""

        return safe_call("Mood", mood_state, apply_mood_update, mood_state, trigger, impact, interaction_type)

    def update_relationship(
        self,
        relationship: Relationship,
        initiator_id: str,
        message: str,
        affinity_delta: int,
        interaction_type: str,
    ) -> Relationship:
        return safe_call(
            "Relationship",
            relationship,
            apply_relationship_update,
            relationship,
            initiator_id,
            message,
            affinity_delta,
            interaction_type,
        )

    # ---- narrative ----

    def should_trigger_environmental_event(
        self,
        narrative_context: Optional[NarrativeContext],
        messages_since_last_event: int,
    ) -> bool:
        return safe_call("Scene", False, event_due, narrative_context, messages_since_last_event, self.random)

    def generate_environmental_event(
        self,
        narrative_context: Optional[NarrativeContext],
        characters: Sequence[Character] = (),
    ) -> str:
        return safe_call("Scene", "", self.scenes.generate_environmental_event, narrative_context, characters)

    def generate_branch_options(
        self,
        chat_history: Sequence[Message],
        scenario: Optional[Scenario] = None,
        scenario_type: Optional[str] = None,
    ) -> List[str]:
        """Three or four plot forks, or an empty list when generation fails."""

        return safe_call("Branches", [], self.director.generate_branch_options, chat_history, scenario, scenario_type)
