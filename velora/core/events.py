########## World Events ##########
# Minor and major scenario events, with topic slots bound from the recent window.

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from . import config
from .dice import chance, make_random, pick
from .runtime import log_run_event
from .templates import bind_template
from .topics import extract_topics_from_messages
from .types import Message

FALLBACK_TOPIC: str = "the situation"

MINOR_EVENTS: Dict[str, List[str]] = {
    "adventure": [
        "A gentle rain begins to fall, creating a soothing rhythm on the surroundings.",
        "The wind picks up, rustling leaves and carrying distant sounds.",
        "Clouds shift overhead, changing the patterns of light and shadow.",
        "Wildlife becomes more active nearby, creating a chorus of natural sounds.",
        "The path ahead changes, becoming steeper and narrower.",
        "The quality of light changes as the sun's position shifts in the sky.",
    ],
    "mystery": [
        "A shadow moves across the wall in a way that doesn't match any visible source.",
        "A door creaks open without anyone touching it.",
        "Papers seem to have been moved when no one was looking.",
        "A clock ticks unusually loudly, drawing attention to the passage of time.",
        "A faint, unidentifiable sound can be heard just at the edge of perception.",
        "A reflection in the window doesn't quite match what it should show.",
    ],
    "fantasy": [
        "Tiny magical lights appear briefly, floating in the air like fireflies.",
        "Plants seem to respond to the conversation, subtly turning toward the speakers.",
        "Small magical creatures can be glimpsed darting about at the edge of vision.",
        "Runes briefly glow on nearby surfaces.",
        "The air shimmers with barely visible magical energy.",
        "Small objects float momentarily before settling back down.",
    ],
    "scifi": [
        "Lights on nearby consoles blink in unusual patterns.",
        "A brief power fluctuation causes the displays to flicker.",
        "A holographic display glitches momentarily, showing unexpected data.",
        "Communication devices pick up fragments of unrelated transmissions.",
        "Automated systems run a brief diagnostic sequence.",
        "Sensors display unusual readings that quickly return to normal.",
    ],
    "horror": [
        "Shadows seem to deepen in the corners, making the room feel smaller.",
        "A cold draft passes through the area, raising goosebumps.",
        "A faint scratching sound comes from inside the walls.",
        "Objects seem to be slightly out of place from where they were left.",
        "A floorboard creaks as if someone stepped on it, but no one is there.",
        "Electronic devices briefly malfunction and display static.",
    ],
    "generic": [
        "The lighting changes as clouds pass overhead.",
        "A gentle breeze passes through the area, stirring papers.",
        "The temperature shifts slightly.",
        "A clock chimes, drawing attention to the passage of time.",
        "Someone passes by outside, briefly visible through a window.",
        "A phone makes a notification sound in the distance.",
    ],
}

MAJOR_EVENTS: Dict[str, List[str]] = {
    "adventure": [
        "A violent storm erupts suddenly, forcing everyone to seek shelter immediately.",
        "The ground shakes in a tremor, causing loose objects to fall and creating new obstacles.",
        "A landslide blocks the path ahead, requiring a new route to be found.",
        "A fire breaks out nearby, creating danger and urgency to either fight it or flee.",
        "A rival group is spotted approaching, requiring immediate decisions.",
        "An urgent message arrives about {{topic}}, demanding immediate attention.",
    ],
    "mystery": [
        "A power outage plunges the area into darkness, affecting every security system.",
        "A crucial piece of evidence is discovered to be missing or tampered with.",
        "An unexpected witness arrives with information that changes the understanding of {{topic}}.",
        "A threatening message is received, warning against further investigation of {{topic}}.",
        "A suspect attempts to flee, suggesting guilt or fear.",
        "A hidden compartment is discovered, containing unexpected items related to {{topic}}.",
    ],
    "fantasy": [
        "A magical portal opens unexpectedly, leading to an unknown destination.",
        "A powerful magical artifact activates, causing dramatic effects in the surrounding area.",
        "The laws of magic suddenly shift, causing spells to fail or behave unpredictably.",
        "A powerful magical creature appears, carrying an important message.",
        "A prophecy begins to unfold, with clear signs relating to {{topic}}.",
        "A deity makes contact, offering a quest and making demands.",
    ],
    "scifi": [
        "A critical system failure occurs, threatening life support.",
        "An artificial intelligence makes unexpected contact with a message about {{topic}}.",
        "A security breach is detected, with unknown entities gaining access to restricted areas.",
        "A temporal anomaly creates confusion about the sequence of events.",
        "A quarantine protocol is initiated, restricting movement and communication.",
        "An experimental technology malfunctions, creating a dangerous situation related to {{topic}}.",
    ],
    "horror": [
        "The building shakes violently as if something massive is moving within the walls.",
        "All lights fail simultaneously, plunging the area into complete darkness.",
        "A horrific, inhuman wailing echoes through the area.",
        "Temperature plummets dramatically, freezing every surface.",
        "Doors slam and lock themselves in rapid succession.",
        "Writing appears on the walls, with disturbing messages about {{topic}}.",
    ],
    "generic": [
        "A severe weather event begins, affecting travel and communication.",
        "An urgent news bulletin interrupts, announcing a significant event related to {{topic}}.",
        "An unexpected visitor arrives with urgent information.",
        "A valuable item is discovered to be missing or damaged.",
        "A deadline is suddenly moved up, creating time pressure.",
        "A communication arrives that significantly changes plans regarding {{topic}}.",
    ],
}


def event_pool(scenario_type: str, major: bool) -> List[str]:
    """Pool for the scenario type, falling back to generic events."""

    table = MAJOR_EVENTS if major else MINOR_EVENTS
    return table.get((scenario_type or "").lower(), table["generic"])


def generate_world_event(
    chat_history: Sequence[Message],
    scenario_type: str = "adventure",
    major: bool = False,
    rng: Optional[random.Random] = None,
) -> str:
    """Pick an event and bind its topic slot from the last few messages."""

    # 1 Extract topics from the recent window before choosing.                 # steps
    # 2 Major events use a topic half the time; everything else gets a stand-in. # steps
    rng = rng or make_random()
    recent = list(chat_history)[-config.WORLD_EVENT_WINDOW :]
    topics = extract_topics_from_messages(recent)
    event = pick(rng, event_pool(scenario_type, major))
    topic = FALLBACK_TOPIC
    if major and topics and chance(rng, config.WORLD_EVENT_TOPIC_CHANCE):
        topic = pick(rng, topics)
    line = bind_template(event, {"topic": topic})
    log_run_event(f"[World] {'major' if major else 'minor'} {scenario_type} event: {line}")
    return line
