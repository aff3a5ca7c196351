########## Chat Session ##########
# Owns one room: the message log, trackers, pacing counters, and the typing slot.

from __future__ import annotations

import json
import random
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .db import log_event
from .dice import make_random
from .engine import ConversationEngine
from .events import generate_world_event
from .moods import MoodTracker
from .narration import build_system_message
from .narrative import generate_writing_instructions, update_story_arc
from .relationships import RelationshipTracker
from .runtime import log_run_event
from .sentiment import analyze_interaction
from .turns import TypingIndicator, mentioned
from .turns import should_respond as talkativeness_gate
from .turns import typing_delay_ms as compute_typing_delay
from .types import Character, Message, NarrativeContext, Scenario, WritingInstructions


class ChatSession:
    """Single room driven by user lines and character turns."""

    def __init__(
        self,
        characters: Sequence[Character],
        scenario: Optional[Scenario] = None,
        rng: Optional[random.Random] = None,
        writing_instructions: Optional[WritingInstructions] = None,
        max_responders: int = config.DEMO_MAX_RESPONDERS,
    ) -> None:
        # 1 One random source threads through every component.                  # steps
        # 2 Register the roster with the relationship graph up front.           # steps
        self.random = rng or make_random()
        self.characters: List[Character] = list(characters)
        self.scenario = scenario
        scenario_type = scenario.scenario_type if scenario is not None else "adventure"
        self.engine = ConversationEngine(self.random, scenario_type)
        self.moods = MoodTracker(self.random)
        self.relationships = RelationshipTracker(self.random)
        self.relationships.bootstrap(character.name for character in self.characters)
        self.typing = TypingIndicator()
        self.handoffs: List[str] = []  # deferred names released by the typing slot
        self.writing_instructions = writing_instructions
        self.max_responders = max_responders
        self.messages: List[Message] = []
        self.messages_since_event: int = 0
        self.pending_branches: List[str] = []
        self.delays: Dict[str, int] = {}  # message id -> simulated latency in ms
        self._next_id: int = 0

    # ---- message log ----

    def _new_id(self) -> str:
        self._next_id += 1
        return f"msg-{self._next_id}"

    def _append(self, message: Message) -> Message:
        self.messages.append(message)
        return message

    def _narrate(self, text: str, environmental: bool = False) -> Message:
        return self._append(
            Message(
                id=self._new_id(),
                speaker=config.NARRATOR_NAME,
                message=text,
                system=True,
                is_narration=True,
                is_environmental_event=environmental,
            )
        )

    def _record(self, actor: str, target: Optional[str], event_type: str, data: Dict[str, Any]) -> None:
        """Mirror a session event into the sqlite event log."""

        if not config.SESSION_LOG_EVENTS:
            return
        log_event(actor, target, event_type, json.dumps(data), datetime.utcnow())

    def by_id(self, message_id: str) -> Optional[Message]:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None

    def character(self, name: str) -> Optional[Character]:
        for character in self.characters:
            if character.name == name:
                return character
        return None

    @property
    def story_arc(self) -> Optional[NarrativeContext]:
        return self.scenario.story_arc if self.scenario is not None else None

    # ---- user side ----

    def welcome(self) -> Message:
        """Narrator welcome line that opens the room."""

        return self._narrate(build_system_message("welcome"))

    def add_character(self, character: Character) -> Message:
        """Join a character mid-session and announce it."""

        self.characters.append(character)
        self.relationships.bootstrap([character.name])
        self._record(character.name, None, "character_joined", {})
        return self._narrate(build_system_message("character_joined", name=character.name))

    def remove_character(self, name: str) -> Optional[Message]:
        if self.character(name) is None:
            return None
        self.characters = [character for character in self.characters if character.name != name]
        self._record(name, None, "character_left", {})
        return self._narrate(build_system_message("character_left", name=name))

    def post_user_message(self, text: str, speaker: str = config.USER_SPEAKER_NAME) -> Message:
        """Append a user line and let the story arc react to it."""

        # 1 Store the line; a leading asterisk marks it as an action.           # steps
        # 2 Advance the arc from the recent window when a scenario is loaded.   # steps
        message = self._append(
            Message(
                id=self._new_id(),
                speaker=speaker,
                message=text,
                is_user=True,
                is_action=text.strip().startswith("*"),
            )
        )
        self.messages_since_event += 1
        if self.scenario is not None:
            recent = self.messages[-config.STORY_ARC_WINDOW :]
            arc = update_story_arc(self.scenario.story_arc, recent)
            if arc is not self.scenario.story_arc:
                self.scenario = self.scenario.model_copy(update={"story_arc": arc})
        self._record(speaker, None, "user_message", {"text": text})
        return message

    # ---- character side ----

    def typing_delay_ms(self, character: Character, text: str) -> int:
        return compute_typing_delay(character, text, self.random)

    def should_respond(self, character: Character) -> bool:
        return talkativeness_gate(character, self.random)

    def _last_spoken(self) -> Optional[Message]:
        """Most recent non-system line, the stimulus for the next turn."""

        for message in reversed(self.messages):
            if not message.system:
                return message
        return None

    def _instructions_for(self, character: Character) -> Optional[WritingInstructions]:
        if self.writing_instructions is not None:
            return self.writing_instructions
        if self.story_arc is not None:
            return generate_writing_instructions(self.story_arc, character)
        return None

    def _compose_reply(self, character: Character, stimulus: Message) -> str:
        """Voice the character's current mood and pick the reply or interaction path."""

        voiced = self.moods.voiced(character)
        recent = self.messages[-config.DIALOGUE_WINDOW :]
        relationships = self.relationships.for_character(character.name)
        if stimulus.is_user or self.character(stimulus.speaker or "") is None:
            return self.engine.synthesize_response(
                voiced,
                stimulus.message,
                recent,
                self._instructions_for(character),
                self.scenario,
                relationships,
            )
        return self.engine.synthesize_interaction(
            voiced,
            stimulus.speaker or "",
            stimulus.message,
            recent,
            relationships,
        )

    def _apply_effects(self, character: Character, stimulus: Message) -> Optional[Message]:
        """Mood and affinity follow the stimulus; returns a narration line for loud shifts."""

        delta, interaction_type = analyze_interaction(stimulus.message)
        speaker = stimulus.speaker or config.USER_SPEAKER_NAME
        if self.character(speaker) is not None and speaker != character.name:
            self.relationships.update(speaker, character.name, stimulus.message, delta, interaction_type)
            self.engine.director.set_relationships(self.relationships.all())
        if delta == 0:
            return None
        state, announcement = self.moods.update(character, f"{speaker}'s message", delta, interaction_type)
        self._record(character.name, speaker, "mood", {"mood": state.current_mood, "intensity": state.intensity})
        if announcement is None:
            return None
        return self._narrate(build_system_message("mood_change", name=character.name, mood=state.current_mood))

    def _reply_once(self, character: Character, stimulus: Message) -> Optional[Message]:
        """One guarded reply attempt; overlapping attempts are deferred."""

        # 1 Claim the typing slot or queue behind whoever holds it.             # steps
        # 2 Release the slot no matter how synthesis ends.                      # steps
        if not self.typing.begin(character.name):
            log_run_event(f"[Session] {character.name} deferred behind {self.typing.typing_character}")
            return None
        try:
            text = self._compose_reply(character, stimulus)
        finally:
            self._release_typing()
        message = self._append(
            Message(
                id=self._new_id(),
                speaker=character.name,
                message=text,
                is_action=text.startswith("*"),
                reply_to=stimulus.id,
            )
        )
        self.delays[message.id] = self.typing_delay_ms(character, text)
        self.messages_since_event += 1
        self._record(character.name, stimulus.speaker, "reply", {"text": text, "reply_to": stimulus.id})
        return message

    def run_character_turn(self, max_responders: Optional[int] = None) -> List[Message]:
        """Let the selected responders answer the latest line; returns everything appended."""

        # 1 Pick responders for the latest spoken line.                          # steps
        # 2 The first responder always answers; later ones pass a chattiness gate. # steps
        # 3 Mood and affinity effects land after each reply.                     # steps
        stimulus = self._last_spoken()
        if stimulus is None:
            return []
        cap = self.max_responders if max_responders is None else max_responders
        responders = self.engine.select_responders(self.characters, stimulus, stimulus.speaker, cap)
        named = mentioned(responders, stimulus)
        appended: List[Message] = []
        for index, character in enumerate(responders):
            if index > 0 and character not in named and not self.should_respond(character):
                continue
            reply = self._reply_once(character, stimulus)
            if reply is None:
                continue
            appended.append(reply)
            narration = self._apply_effects(character, stimulus)
            if narration is not None:
                appended.append(narration)
        appended.extend(self._drain_handoffs(stimulus))
        return appended

    def _release_typing(self) -> None:
        queued = self.typing.end()
        if queued is not None:
            self.handoffs.append(queued)

    def _drain_handoffs(self, stimulus: Optional[Message]) -> List[Message]:
        """Characters handed the typing slot answer the same line in queue order."""

        appended: List[Message] = []
        while self.handoffs:
            character = self.character(self.handoffs.pop(0))
            if character is None or stimulus is None:
                continue
            reply = self._reply_once(character, stimulus)
            if reply is None:
                continue
            appended.append(reply)
            narration = self._apply_effects(character, stimulus)
            if narration is not None:
                appended.append(narration)
        return appended

    def release_typing(self) -> List[Message]:
        """Free a slot held outside a turn and let the deferred characters answer."""

        stimulus = self._last_spoken()
        self._release_typing()
        return self._drain_handoffs(stimulus)

    def regenerate(self, message_id: str) -> Optional[Message]:
        """Replace a character reply in full while keeping its id and position."""

        # 1 Only character replies with a known stimulus can be regenerated.     # steps
        index = next((i for i, message in enumerate(self.messages) if message.id == message_id), None)
        if index is None:
            return None
        original = self.messages[index]
        character = self.character(original.speaker or "")
        stimulus = self.by_id(original.reply_to) if original.reply_to else None
        if character is None or stimulus is None or self.typing.is_typing:
            return None
        self.typing.begin(character.name)
        try:
            text = self._compose_reply(character, stimulus)
        finally:
            self._release_typing()
        replacement = Message(
            id=original.id,
            speaker=character.name,
            message=text,
            is_action=text.startswith("*"),
            reply_to=original.reply_to,
        )
        self.messages[index] = replacement
        self.delays[replacement.id] = self.typing_delay_ms(character, text)
        self._record(character.name, stimulus.speaker, "regenerate", {"id": original.id, "text": text})
        return replacement

    # ---- narrative pacing ----

    def maybe_environmental_event(self) -> Optional[Message]:
        """Room-wide event when the spacing counter and the dice allow it."""

        if not self.engine.should_trigger_environmental_event(self.story_arc, self.messages_since_event):
            return None
        text = self.engine.generate_environmental_event(self.story_arc, self.characters)
        if not text:
            return None
        self.messages_since_event = 0
        self._record(config.NARRATOR_NAME, None, "environmental_event", {"text": text})
        return self._narrate(text, environmental=True)

    def trigger_world_event(self, major: bool = False) -> Message:
        scenario_type = self.scenario.scenario_type if self.scenario is not None else "generic"
        text = generate_world_event(self.messages, scenario_type, major, self.random)
        self._record(config.NARRATOR_NAME, None, "world_event", {"text": text, "major": major})
        return self._narrate(text, environmental=True)

    def propose_branches(self, force: bool = False) -> List[str]:
        """Offer plot forks when pacing allows; an empty list means not yet."""

        if not force and not self.engine.director.should_suggest_branch(self.messages):
            return []
        self.engine.director.set_relationships(self.relationships.all())
        options = self.engine.generate_branch_options(self.messages, self.scenario)
        self.pending_branches = options
        if options:
            self._record(config.NARRATOR_NAME, None, "branches", {"options": options})
        return options

    def choose_branch(self, choice: int) -> Optional[Message]:
        """Narrate the chosen fork and clear the pending offer."""

        if not 0 <= choice < len(self.pending_branches):
            return None
        branch = self.pending_branches[choice]
        self.engine.director.record_branch_selection(branch)
        self.pending_branches = []
        self._record(config.NARRATOR_NAME, None, "branch_chosen", {"branch": branch})
        return self._narrate(build_system_message("narration", text=branch))

    def transcript(self) -> List[Dict[str, Any]]:
        """JSON-ready view of the log for exports."""

        rows: List[Dict[str, Any]] = []
        for message in self.messages:
            payload = message.model_dump(mode="json", by_alias=True, exclude={"writing_instructions"})
            payload["delayMs"] = self.delays.get(message.id)
            rows.append(payload)
        return rows
