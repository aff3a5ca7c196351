########## Relationship Tracker ##########
# Tracks signed affinity and a short interaction log per character pair.

from __future__ import annotations

import random
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import networkx as nx

from . import config
from .dice import make_random, pick
from .runtime import log_run_event
from .types import Character, Interaction, Relationship

AFFINITY_BANDS: List[Tuple[int, str]] = [
    (8, "very close friends"),
    (5, "friends"),
    (2, "friendly acquaintances"),
    (-1, "neutral acquaintances"),
    (-4, "tense acquaintances"),
    (-7, "adversaries"),
]
AFFINITY_FLOOR_LABEL: str = "bitter enemies"
KEY_PHRASE_WORDS: int = 5


def _clamp_affinity(value: int) -> int:
    """Clamp helper for affinity values."""

    # 1 Apply min/max in two steps for clarity.                                # steps
    low, high = config.AFFINITY_CLAMP
    if value < low:
        return low
    if value > high:
        return high
    return value


def pair_key(first: str, second: str) -> Tuple[str, str]:
    """Order-free key for a pair of names."""

    return tuple(sorted((first, second)))  # type: ignore[return-value]


########## Pure Updates ##########
# Value-in, value-out helpers; callers own where the result is stored.


def initialize_relationship(first: str, second: str) -> Relationship:
    """Neutral relationship for a pair that has never interacted."""

    return Relationship(characters=[first, second])


def find_relationship(relationships: Sequence[Relationship], first: str, second: str) -> Relationship:
    """Return the stored pair in either order, or a fresh neutral one."""

    for relationship in relationships:
        if relationship.involves(first) and relationship.involves(second):
            return relationship
    return initialize_relationship(first, second)


def update_relationship(
    relationship: Relationship,
    initiator_id: str,
    message: str,
    affinity_delta: int,
    interaction_type: str,
    timestamp: Optional[datetime] = None,
) -> Relationship:
    """Return a new relationship with the interaction prepended and affinity clamped."""

    # 1 Clamp the delta itself then the resulting affinity.                    # steps
    # 2 Prepend the record and cut the log back to its cap.                    # steps
    timestamp = timestamp or datetime.utcnow()
    low, high = config.AFFINITY_DELTA_CLAMP
    delta = max(low, min(high, int(affinity_delta)))
    record = Interaction(
        timestamp=timestamp,
        initiator=initiator_id,
        message=message,
        interaction_type=interaction_type,
        affinity_change=delta,
    )
    interactions = [record, *relationship.interactions][: config.RELATIONSHIP_INTERACTIONS_KEEP]
    return Relationship(
        characters=list(relationship.characters),
        affinity=_clamp_affinity(relationship.affinity + delta),
        interactions=interactions,
        traits=dict(relationship.traits),
        last_interaction=timestamp,
    )


def describe_relationship(relationship: Relationship) -> str:
    """Qualitative label for the affinity band."""

    for floor, label in AFFINITY_BANDS:
        if relationship.affinity >= floor:
            return label
    return AFFINITY_FLOOR_LABEL


def significant_interaction(relationship: Relationship, rng: random.Random) -> Optional[Interaction]:
    """Random pick among the most affinity-extreme stored interactions."""

    if not relationship.interactions:
        return None
    ordered = sorted(relationship.interactions, key=lambda item: abs(item.affinity_change), reverse=True)
    return pick(rng, ordered[: config.REFERENCE_TOP_INTERACTIONS])


def should_reference_interaction(relationship: Relationship, character: Character, rng: random.Random) -> bool:
    """Analytical and philosophical characters bring up the past more often."""

    if not relationship.interactions:
        return False
    return rng.random() < reference_chance(character)


def reference_chance(character: Character) -> float:
    traits = character.trait("analytical") + character.trait("philosophical")
    return config.REFERENCE_BASE_CHANCE + (traits / 20) * config.REFERENCE_TRAIT_WEIGHT


def interaction_reference(relationship: Relationship, character_id: str, rng: random.Random) -> Optional[str]:
    """Render a callback line about a notable past exchange."""

    interaction = significant_interaction(relationship, rng)
    if interaction is None:
        return None
    key_phrase = " ".join(interaction.message.split()[:KEY_PHRASE_WORDS])
    kind = interaction.interaction_type
    change = interaction.affinity_change
    if kind == "agreement" and change > 0:
        return f'I remember when we agreed about "{key_phrase}..." That was a good point you made.'
    if kind == "disagreement" and change < 0:
        return f'I haven\'t forgotten our disagreement about "{key_phrase}..." but I\'m willing to move past it.'
    if kind == "question":
        return f'You asked me about "{key_phrase}..." earlier. I\'ve been thinking more about that.'
    if kind == "gratitude" and change > 0:
        return f'I appreciated when you thanked me regarding "{key_phrase}..."'
    if change > 1:
        return f'I enjoyed our previous conversation about "{key_phrase}..."'
    if change < -1:
        return f'I\'m still thinking about what you said earlier about "{key_phrase}..."'
    return f'As we discussed earlier regarding "{key_phrase}..."'


########## Relationship Graph ##########
# Session owned store; one undirected edge per pair.


class RelationshipTracker:
    """Graph helper that owns every pair relationship for one room."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        # 1 Undirected graph since affinity is shared by both participants.    # steps
        self.graph = nx.Graph()
        self.random = rng or make_random()

    def bootstrap(self, names: Iterable[str]) -> None:
        """Register every participant so pair lookups never miss."""

        for name in names:
            if not self.graph.has_node(name):
                self.graph.add_node(name)

    def get(self, first: str, second: str) -> Relationship:
        """Create-on-read lookup for the pair."""

        # 1 Return the stored edge or write a neutral one.                      # steps
        if self.graph.has_edge(first, second):
            return self.graph[first][second]["relationship"]
        relationship = initialize_relationship(*pair_key(first, second))
        self._write_edge(relationship)
        return relationship

    def update(
        self,
        initiator_id: str,
        responder_id: str,
        message: str,
        affinity_delta: int,
        interaction_type: str,
    ) -> Relationship:
        """Apply an interaction to the pair and store the new value."""

        current = self.get(initiator_id, responder_id)
        updated = update_relationship(current, initiator_id, message, affinity_delta, interaction_type)
        self._write_edge(updated)
        if updated.affinity != current.affinity:
            log_run_event(
                f"[Relationship] {initiator_id} <-> {responder_id} affinity {current.affinity} -> {updated.affinity}"
                f" ({interaction_type})"
            )
        return updated

    def all(self) -> List[Relationship]:
        """Every stored relationship in insertion order."""

        return [data["relationship"] for _, _, data in self.graph.edges(data=True)]

    def for_character(self, name: str) -> List[Relationship]:
        if not self.graph.has_node(name):
            return []
        return [self.graph[name][other]["relationship"] for other in self.graph.neighbors(name)]

    def significant(self) -> List[Relationship]:
        """Pairs whose affinity magnitude crosses the significance line."""

        return [rel for rel in self.all() if abs(rel.affinity) > config.RELATIONSHIP_SIGNIFICANT_AFFINITY]

    def export_edges(self) -> Dict[str, Dict[str, Dict[str, float]]]:
        """Return a serializable view of the graph for UI work."""

        # 1 Walk edges and build nested dict for JSON, both directions.         # steps
        export: Dict[str, Dict[str, Dict[str, float]]] = {}
        for first, second, data in self.graph.edges(data=True):
            relationship: Relationship = data["relationship"]
            payload = {
                "affinity": float(relationship.affinity),
                "interactions": float(len(relationship.interactions)),
            }
            export.setdefault(first, {})[second] = payload
            export.setdefault(second, {})[first] = dict(payload)
        return export

    def _write_edge(self, relationship: Relationship) -> None:
        """Store the relationship value on its edge."""

        first, second = relationship.characters
        self.graph.add_edge(first, second, relationship=relationship, affinity=relationship.affinity)
