########## Core Types ##########
# Pydantic models that describe characters, messages, and derived room state.

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from . import config

TRAIT_AXES: List[str] = [
    "analytical",
    "emotional",
    "philosophical",
    "humor",
    "confidence",
    "creativity",
    "sociability",
]

NARRATIVE_PHASES: List[str] = [
    "introduction",
    "discovery",
    "rising_action",
    "conflict",
    "planning",
    "climax",
    "resolution",
]

TENSION_LEVELS: List[str] = ["low", "medium", "high", "very high"]


class CharacterValidationError(ValueError):
    """Raised when a stored character record misses required fields."""


def _clamp(value, low, high):
    """Clamp helper shared by the validators below."""

    if value < low:
        return low
    if value > high:
        return high
    return value


class Personality(BaseModel):
    """Seven 1..10 traits; anything missing reads as the midpoint."""

    analytical: int = Field(default=config.TRAIT_DEFAULT)
    emotional: int = Field(default=config.TRAIT_DEFAULT)
    philosophical: int = Field(default=config.TRAIT_DEFAULT)
    humor: int = Field(default=config.TRAIT_DEFAULT)
    confidence: int = Field(default=config.TRAIT_DEFAULT)
    creativity: int = Field(default=config.TRAIT_DEFAULT)
    sociability: int = Field(default=config.TRAIT_DEFAULT)

    @model_validator(mode="before")
    @classmethod
    def _fill_missing(cls, data):
        # 1 Treat explicit None values like absent traits.                      # steps
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @model_validator(mode="after")
    def _clamp_values(self) -> "Personality":
        # 1 Clamp each axis into the configured hard range.                    # steps
        for axis in TRAIT_AXES:
            setattr(self, axis, int(_clamp(getattr(self, axis), config.TRAIT_MIN, config.TRAIT_MAX)))
        return self


class Character(BaseModel):
    """Immutable character template supplied by the catalog or the user store."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    type: str = Field(default=config.DEFAULT_CHARACTER_TYPE)
    mood: str = Field(default=config.DEFAULT_BASE_MOOD)
    personality: Personality = Field(default_factory=Personality)
    talkativeness: int = Field(default=config.TALKATIVENESS_DEFAULT)
    thinking_speed: float = Field(default=config.THINKING_SPEED_DEFAULT, alias="thinkingSpeed")
    voice_style: Optional[str] = Field(default=None, alias="voiceStyle")
    role: Optional[str] = None
    description: Optional[str] = None
    catchphrases: List[str] = Field(default_factory=list)
    opening_line: Optional[str] = None
    avatar: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # 1 Null fields fall back to their defaults instead of failing.         # steps
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @model_validator(mode="after")
    def _clamp_scales(self) -> "Character":
        # 1 Frozen models need object.__setattr__ for the clamp pass.           # steps
        object.__setattr__(self, "talkativeness", int(_clamp(self.talkativeness, config.TRAIT_MIN, config.TRAIT_MAX)))
        speed = float(_clamp(self.thinking_speed, config.THINKING_SPEED_MIN, config.THINKING_SPEED_MAX))
        object.__setattr__(self, "thinking_speed", speed)
        return self

    def trait(self, axis: str) -> int:
        """Read a personality axis with the midpoint default."""

        return int(getattr(self.personality, axis, config.TRAIT_DEFAULT))

    def with_mood(self, mood: str) -> "Character":
        """Copy with a different mood label, used to voice the current mood."""

        return self.model_copy(update={"mood": mood})


class PersistedCharacter(Character):
    """User-authored character record as kept by the SQLite store."""

    id: str
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    is_user_created: bool = Field(default=True, alias="isUserCreated")


class MoodChange(BaseModel):
    """One entry of a mood history ring buffer."""

    timestamp: datetime = Field(default_factory=datetime.utcnow)
    previous_mood: str
    trigger: str
    impact: int
    interaction_type: str = "statement"


class MoodState(BaseModel):
    """Derived, time-varying mood view for one character."""

    character_id: str
    base_mood: str = config.DEFAULT_BASE_MOOD
    current_mood: str = config.DEFAULT_BASE_MOOD
    intensity: int = config.MOOD_INITIAL_INTENSITY
    triggers: List[str] = Field(default_factory=list)
    history: List[MoodChange] = Field(default_factory=list)
    last_change: Optional[datetime] = None

    @model_validator(mode="after")
    def _clamp_intensity(self) -> "MoodState":
        self.intensity = int(_clamp(self.intensity, config.MOOD_INTENSITY_MIN, config.MOOD_INTENSITY_MAX))
        return self


class Interaction(BaseModel):
    """Stored exchange inside a relationship log."""

    timestamp: datetime = Field(default_factory=datetime.utcnow)
    initiator: str
    message: str
    interaction_type: str = "statement"
    affinity_change: int = 0


class Relationship(BaseModel):
    """Symmetric affinity record for an unordered character pair."""

    characters: List[str]
    affinity: int = config.RELATIONSHIP_NEUTRAL
    interactions: List[Interaction] = Field(default_factory=list)
    traits: Dict[str, int] = Field(default_factory=dict)
    last_interaction: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_pair(self) -> "Relationship":
        # 1 Exactly two participants, affinity inside the clamp.               # steps
        if len(self.characters) != 2:
            raise ValueError("relationship needs exactly two characters")
        self.affinity = int(_clamp(self.affinity, config.AFFINITY_CLAMP[0], config.AFFINITY_CLAMP[1]))
        return self

    def involves(self, name: str) -> bool:
        return name in self.characters

    def other(self, name: str) -> str:
        """Return the partner of the given participant."""

        first, second = self.characters
        return second if first == name else first


class WritingInstructions(BaseModel):
    """User supplied style knobs passed straight through to synthesis."""

    model_config = ConfigDict(populate_by_name=True)

    writing_style: Optional[str] = Field(default=None, alias="writingStyle")
    emoji_usage: str = Field(default="none", alias="emojiUsage")
    response_length: str = Field(default="medium", alias="responseLength")
    character_reminders: str = Field(default="", alias="characterReminders")
    general_instructions: str = Field(default="", alias="generalInstructions")


class Message(BaseModel):
    """Single entry in the append-only room log."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    speaker: Optional[str] = None
    message: str = ""
    is_user: bool = Field(default=False, alias="isUser")
    is_action: bool = Field(default=False, alias="isAction")
    system: bool = False
    is_narration: bool = Field(default=False, alias="isNarration")
    is_environmental_event: bool = Field(default=False, alias="isEnvironmentalEvent")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    reply_to: Optional[str] = Field(default=None, alias="replyTo")
    writing_instructions: Optional[WritingInstructions] = Field(default=None, alias="writingInstructions")


class NarrativeContext(BaseModel):
    """Story arc snapshot sampled from the recent message window."""

    theme: str = "general"
    current_phase: str = "introduction"
    current_tension: str = "medium"
    current_goal: str = ""
    current_context: str = ""


class Scenario(BaseModel):
    """Room level scenario the synthesizer reads for context."""

    title: str = ""
    description: str = ""
    scenario_type: str = "adventure"
    story_arc: NarrativeContext = Field(default_factory=NarrativeContext)
    characters: List[Character] = Field(default_factory=list)


class VoiceTemplate(BaseModel):
    """Rules, example lines, and banned phrasing for one voice."""

    rules: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)
    forbidden_phrases: List[str] = Field(default_factory=list)


class DialogueAnalysis(BaseModel):
    """Summary of the recent dialogue window used for guidance."""

    recent_speakers: List[str] = Field(default_factory=list)
    dominant_speaker: Optional[str] = None
    recent_topics: List[str] = Field(default_factory=list)
    dominant_topic: Optional[str] = None
    emotional_tone: str = "neutral"
    action_count: int = 0
    question_count: int = 0
    unaddressed_questions: List[Message] = Field(default_factory=list)
    recent_actions: List[str] = Field(default_factory=list)
    conversation_pace: str = "moderate"


class NarrativeGuidance(BaseModel):
    """Per reply hints produced by the narrative director."""

    goal: str
    approach: str
    topic_focus: Optional[str] = None
    emotional_direction: Optional[str] = None
    pace: Optional[str] = None
    continuity_notes: List[str] = Field(default_factory=list)


class ResponseFormat(BaseModel):
    """Shape of the final line: action placement, length class, thought."""

    include_action: bool = True
    action_placement: str = "before"
    response_length: str = "medium"
    include_thought: bool = False


# TODO: promote interaction_type strings to a closed set once the interaction pools settle.
