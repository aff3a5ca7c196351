########## Demo Runner ##########
# Builds a room from the seed catalog, plays a scripted chat, and exports run logs.

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..core import config
from ..core.characters import CharacterCatalog
from ..core.db import fetch_events
from ..core.dice import make_random
from ..core.session import ChatSession
from ..core.types import Message, NarrativeContext, Scenario

DEMO_ROSTER: List[str] = ["Captain America", "Iron Man", "Thor", "Hulk"]

DEMO_SCENARIO = Scenario(
    title="Rooftop Standoff",
    description=(
        "A rain-soaked rooftop in the city at night. Thunder rolls overhead while the team argues about "
        "the stolen reactor core. The smell of ozone lingers and tension runs high between old friends."
    ),
    scenario_type="superhero",
    story_arc=NarrativeContext(
        theme="superhero",
        current_phase="introduction",
        current_tension="medium",
        current_goal="Recover the reactor core",
    ),
)

DEMO_SCRIPT: List[str] = [
    "Hello everyone, thanks for coming on such short notice.",
    "Iron Man, what do your scanners say about the reactor core?",
    "*draws sword* Something is moving on the next roof over.",
    "I think we should split up and flank them. Does anyone disagree?",
    "Thor, can you give us some cover with the storm?",
    "That was brilliant work, team. Thank you!",
    "Wait, there is an explosion downstairs! Everyone get ready.",
    "Hulk, we need you to hold the stairwell.",
]


def build_demo_room(seed: Optional[int] = None, roster: Sequence[str] = DEMO_ROSTER) -> ChatSession:
    """Create a session with the demo roster pulled from the catalog."""

    # 1 Load the catalog and keep only the roster names it knows.               # steps
    catalog = CharacterCatalog()
    characters = [catalog.by_name(name) for name in roster]
    session = ChatSession(
        [character for character in characters if character is not None],
        scenario=DEMO_SCENARIO,
        rng=make_random(seed),
    )
    session.scenario = session.scenario.model_copy(update={"characters": list(session.characters)})
    return session


def play_script(session: ChatSession, script: Sequence[str] = DEMO_SCRIPT) -> List[Message]:
    """Feed each scripted line and let the room react."""

    # 1 Post, answer, then check event and branch pacing after every line.      # steps
    session.welcome()
    for line in script:
        session.post_user_message(line)
        session.run_character_turn()
        session.maybe_environmental_event()
        if session.propose_branches():
            session.choose_branch(0)
    session.trigger_world_event(major=True)
    return list(session.messages)


def export_transcript(session: ChatSession) -> Path:
    """Persist the message log to JSONL for quick inspection."""

    # 1 Ensure export directory exists.                                        # steps
    export_dir = Path(config.DEFAULT_TRANSCRIPT_EXPORT)
    export_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    file_path = export_dir / config.DEFAULT_TRANSCRIPT_FILENAME_TEMPLATE.format(timestamp=timestamp)
    with file_path.open("w", encoding="utf-8") as handle:
        for payload in session.transcript():
            handle.write(json.dumps(payload) + "\n")
    return file_path


def export_event_log() -> Path:
    """Dump the sqlite event log to CSV for analysts."""

    # 1 Fetch events and write a simple CSV file.                               # steps
    export_dir = Path(config.DEFAULT_TRANSCRIPT_EXPORT)
    export_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    file_path = export_dir / Path(config.DEFAULT_EVENT_LOG_EXPORT.format(timestamp=timestamp))
    events = fetch_events()
    with file_path.open("w", encoding="utf-8") as handle:
        handle.write("actor,target,type,data,ts\n")
        for event in events:
            row = [
                event.get("actor", ""),
                event.get("target", ""),
                event.get("type", ""),
                event.get("data", ""),
                event.get("ts", ""),
            ]
            safe = [str(value if value is not None else "").replace(",", ";") for value in row]
            handle.write(",".join(safe) + "\n")
    return file_path


def run_demo(seed: Optional[int] = None) -> List[Message]:
    """Run the scripted room once and export both logs."""

    session = build_demo_room(seed)
    messages = play_script(session)
    export_transcript(session)
    export_event_log()
    return messages


def main() -> None:
    """Entry point when running the demo script directly."""

    # 1 Kick off a small run and echo the transcript.                           # steps
    messages = run_demo()
    for message in messages:
        print(f"{message.speaker}: {message.message}")
    print(f"Ran {len(messages)} messages. Logs saved to {config.DEFAULT_TRANSCRIPT_EXPORT}.")


if __name__ == "__main__":
    main()
