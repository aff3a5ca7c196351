from __future__ import annotations

from pathlib import Path

########## Core Config ##########
# Houses runtime constants for the Velora conversation engine.

########## Variable Controls ##########
# All tweakable knobs live here so you can tune the room without code changes.

RANDOM_SEED: int = 202410

# Character scales
TRAIT_MIN: int = 1
TRAIT_MAX: int = 10
TRAIT_DEFAULT: int = 5
TALKATIVENESS_DEFAULT: int = 5
THINKING_SPEED_MIN: float = 0.5
THINKING_SPEED_MAX: float = 2.0
THINKING_SPEED_DEFAULT: float = 1.0
DEFAULT_CHARACTER_TYPE: str = "modern"
DEFAULT_BASE_MOOD: str = "Neutral"

# Mood tracker
MOOD_INTENSITY_MIN: int = 1
MOOD_INTENSITY_MAX: int = 10
MOOD_INITIAL_INTENSITY: int = 5
MOOD_HISTORY_KEEP: int = 10
MOOD_TRIGGERS_KEEP: int = 5
MOOD_VARIANT_THRESHOLD: int = 2  # |impact| needed before the label shifts
MOOD_COLLAPSE_INTENSITY: int = 3  # at or below this the label falls back to Neutral
MOOD_ANNOUNCE_ALWAYS: int = 8
MOOD_ANNOUNCE_MEDIUM: int = 5
MOOD_ANNOUNCE_MEDIUM_CHANCE: float = 0.5
MOOD_ANNOUNCE_LOW_CHANCE: float = 0.2

# Relationship tracker
AFFINITY_CLAMP: tuple[int, int] = (-10, 10)
AFFINITY_DELTA_CLAMP: tuple[int, int] = (-3, 3)
RELATIONSHIP_NEUTRAL: int = 0
RELATIONSHIP_INTERACTIONS_KEEP: int = 10
RELATIONSHIP_SIGNIFICANT_AFFINITY: int = 5
REFERENCE_BASE_CHANCE: float = 0.15
REFERENCE_TRAIT_WEIGHT: float = 0.2
REFERENCE_TOP_INTERACTIONS: int = 3

# Narrative director
PHASE_THRESHOLDS: list[tuple[int, str]] = [
    (10, "introduction"),
    (25, "rising_action"),
    (40, "conflict"),
    (60, "climax"),
]
PHASE_FINAL: str = "resolution"
PHASE_REGRESSION_CHANCE: float = 0.3
BRANCH_MIN_SPACING: int = 8
BRANCH_MAX_SPACING: int = 12
BRANCH_HISTORY_KEEP: int = 10
BRANCH_WINDOW: int = 10
BRANCH_OPTIONS_MIN: int = 3
BRANCH_OPTIONS_MAX: int = 4
DIALOGUE_WINDOW: int = 6
PACE_RAPID_SECONDS: float = 5.0
PACE_MODERATE_SECONDS: float = 15.0

# Topic extraction
TOPIC_MIN_LENGTH: int = 4
TOPIC_LIMIT: int = 10
QUICK_TOPIC_LIMIT: int = 3

# Scene generator and environmental events
SCENE_TENSION_ACTION_CHANCE: float = 0.7
EVENT_MIN_MESSAGES: int = 5
EVENT_BASE_CHANCES: list[tuple[int, float]] = [
    (8, 0.35),
    (7, 0.25),
    (6, 0.15),
    (5, 0.05),
]
EVENT_PHASE_ADJUSTMENTS: dict[str, float] = {
    "climax": 0.1,
    "conflict": 0.05,
    "resolution": -0.05,
}
EVENT_TENSION_ADJUSTMENTS: dict[str, float] = {
    "very high": 0.1,
    "high": 0.05,
    "low": -0.05,
}
WORLD_EVENT_WINDOW: int = 5
WORLD_EVENT_TOPIC_CHANCE: float = 0.5

# Response synthesis
SENTIMENT_GATE: float = 0.6  # sentiment rules fire when a draw lands above this
ENVIRONMENT_ACTION_CHANCE: float = 0.3
SELF_REFERENCE_CHANCE: float = 0.3
HISTORY_REFERENCE_CHANCE: float = 0.2
SCENARIO_CONTEXT_CHANCE: float = 0.5
CATCHPHRASE_CHANCE: float = 0.2
VOICE_HINT_CHANCE: float = 0.3
ROLE_HINT_CHANCE: float = 0.25
REMINDER_CHANCE: float = 0.4
INTERACTION_REFERENCE_CHANCE: float = 0.2
INTERACTION_FLAVOR_CHANCE: float = 0.3
SENSORY_CUE_CHANCE: float = 0.4
RELATIONSHIP_CONTEXT_CHANCE: float = 0.3
COMBAT_CONTEXT_CHANCE: float = 0.25
UNDERCURRENT_CHANCE: float = 0.2
LONG_VARIANT_CHANCE: float = 0.5
BATTLE_PREFERENCE_CHANCE: float = 0.7
BATTLE_TRAIT_CHANCE: float = 0.6
AFFINITY_LEAN_CHANCE: float = 0.7
AFFINITY_LEAN_THRESHOLD: int = 5
BATTLE_HISTORY_WINDOW: int = 5
KEYWORD_MIN_LENGTH: int = 4
TRAIT_FLAVOR_THRESHOLD: int = 7
SHORT_RESPONSE_CHARS: int = 100
SHORT_FIRST_SENTENCE_MIN: int = 30
MAX_RESPONSE_SENTENCES: int = 3
FORBIDDEN_TOKEN_COVERAGE: float = 0.8
FORBIDDEN_MIN_TOKENS: int = 3
REPLACEMENT_MATCH_THRESHOLD: float = 0.5
DEFLECTION_LINE: str = "Give me a moment to gather my thoughts."

# Latency and typing
TYPING_BASE_MS: int = 1500
TYPING_JITTER_MS: int = 1000
TYPING_MS_PER_CHAR: int = 15
TYPING_MAX_READING_MS: int = 2500
RESPONSE_SPACING_MS: int = 2000

# Logging and debug
DEBUG_VERBOSE: bool = False  # mirrors verbose engine notes into DEBUG_LOG
LOG_TEXT_ENABLED: bool = True  # toggle human-readable run log
LOG_TEXT_DIR: str = "logs"
LOG_TEXT_FILENAME: str = "velora.log"
LOG_TEXT_MAX_LINES: int = 800

# Persistence
DB_FILE: str = str(Path("velora/runtime_data/velora_state.sqlite"))
DB_ECHO: bool = False
USER_CHARACTER_ID_PREFIX: str = "user-char"

# Demo exports
CATALOG_SEED_FILE: str = str(Path(__file__).resolve().parents[1] / "demo" / "seeds" / "characters.json")
DEFAULT_TRANSCRIPT_EXPORT: str = "velora/demo/run_logs"
DEFAULT_TRANSCRIPT_FILENAME_TEMPLATE: str = "run_{timestamp}.jsonl"
DEFAULT_EVENT_LOG_EXPORT: str = "events_{timestamp}.csv"
DEMO_MAX_RESPONDERS: int = 2

# Session
USER_SPEAKER_NAME: str = "You"
NARRATOR_NAME: str = "Narrator"
STORY_ARC_WINDOW: int = 5
SESSION_LOG_EVENTS: bool = True  # mirror session events into the sqlite event_log

# TODO: split the synthesis chance table into per-genre overrides once more genres ship.
