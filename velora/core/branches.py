########## Branch Generator ##########
# Builds 3-4 "what happens next" options from scenario, phase, tone, topics, and bonds.

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from . import config
from .dice import make_random, pick, shuffled
from .templates import bind_template
from .types import Relationship

SCENARIO_TEMPLATES: Dict[str, List[str]] = {
    "adventure": [
        "A sudden storm forces the group to seek shelter in a mysterious structure.",
        "Tracks are discovered leading to what appears to be a hidden encampment.",
        "A wounded traveler stumbles into view, desperately seeking help.",
        "The sound of distant drums echoes through the area, growing steadily louder.",
        "A valuable item goes missing, with signs pointing to theft rather than loss.",
        "A local guide offers to show a shortcut, but something about their manner seems off.",
        "An old map is discovered with markings that correspond to the current location.",
        "Strange lights appear in the distance, moving in patterns that seem deliberate.",
        "A bridge that should provide safe passage appears damaged and unstable.",
        "Wildlife in the area begins behaving strangely, as if fleeing from something unseen.",
    ],
    "mystery": [
        "A previously overlooked clue is discovered, changing the understanding of the case.",
        "A witness comes forward with new information that contradicts earlier testimony.",
        "A suspect's alibi suddenly falls apart when new evidence emerges.",
        "A mysterious phone call provides cryptic information about the case.",
        "Someone attempts to destroy evidence, suggesting they have something to hide.",
        "A seemingly unrelated event is revealed to be connected to the main mystery.",
        "An expert analysis reveals something unexpected about a key piece of evidence.",
        "A person of interest suddenly changes their behavior in a suspicious way.",
        "Access is gained to a location that was previously off-limits.",
        "A pattern emerges when comparing witness accounts that was missed before.",
    ],
    "fantasy": [
        "A magical portal opens unexpectedly, offering passage to an unknown realm.",
        "An ancient prophecy is recalled that seems to describe the current situation.",
        "A mythical creature appears, either as a guide or a challenge to overcome.",
        "A character discovers latent magical abilities triggered by the current circumstances.",
        "A magical item changes properties, revealing new powers or purposes.",
        "The laws of magic suddenly shift in the area, causing unpredictable effects.",
        "A vision reveals glimpses of possible futures, one of which appears particularly dire.",
        "A magical curse or blessing is activated by recent actions.",
        "An ancient guardian awakens, demanding that old traditions be respected.",
        "The boundary between the mortal world and a magical realm grows thin.",
    ],
    "scifi": [
        "A system malfunction reveals hidden data that changes the mission parameters.",
        "Unusual energy readings are detected, suggesting advanced technology nearby.",
        "A distress signal is received from a location that should be uninhabited.",
        "The AI system begins making decisions that weren't part of its programming.",
        "A temporal anomaly causes disorienting effects on perception and memory.",
        "Contact is established with an entity that challenges current understanding.",
        "A piece of technology begins adapting itself in ways that weren't designed.",
        "Scans reveal that what appeared to be natural is actually artificial.",
        "A security breach exposes vulnerabilities that were thought to be impossible.",
        "A previously unknown faction reveals itself, with unclear intentions.",
    ],
    "horror": [
        "Strange noises begin emanating from a location everyone had assumed was empty.",
        "Personal items are found arranged in a disturbing pattern with no explanation.",
        "Someone reports seeing a figure that shouldn't be possible in this location.",
        "Electronic devices begin malfunctioning in ways that create unease.",
        "A door that was definitely locked is found standing open.",
        "Inexplicable cold spots develop in specific areas, defying normal temperature patterns.",
        "Writing appears on a surface that no one has approached.",
        "A character experiences lost time, unable to account for their actions.",
        "Something that was dead shows signs of life or movement.",
        "A character begins behaving in a way that suggests they are no longer themselves.",
    ],
    "romance": [
        "A misunderstanding leads to hurt feelings that need to be addressed.",
        "An unexpected gesture reveals deeper feelings than previously expressed.",
        "A mutual friend shares insights that cast the relationship in a new light.",
        "A moment of crisis reveals true priorities and feelings.",
        "A chance encounter with someone from the past stirs up complicated emotions.",
        "An opportunity arises that would separate the characters geographically.",
        "A shared experience creates a powerful bonding moment.",
        "Family expectations create pressure on the relationship.",
        "A secret is revealed that tests trust between the characters.",
        "A moment of vulnerability allows for deeper emotional connection.",
    ],
    "modern": [
        "Breaking news interrupts with information relevant to the current situation.",
        "A social media post goes viral, affecting the reputation of someone present.",
        "An unexpected job offer creates both opportunity and difficult choices.",
        "A health concern emerges that requires immediate attention.",
        "A legal issue arises that threatens plans or stability.",
        "A technological breakthrough changes the landscape of possibilities.",
        "Economic factors shift, creating new pressures or opportunities.",
        "A political development has personal implications for those involved.",
        "Environmental conditions create unexpected challenges.",
        "A community crisis requires a response from those present.",
    ],
}

PHASE_TEMPLATES: Dict[str, List[str]] = {
    "introduction": [
        "Someone new arrives, bringing fresh perspective and information.",
        "A challenge is presented that will require cooperation to overcome.",
        "An invitation arrives to an event that promises to be significant.",
        "A discovery reveals that there is more to the situation than initially apparent.",
        "A minor incident hints at larger issues beneath the surface.",
    ],
    "rising_action": [
        "Tensions increase as competing interests become more apparent.",
        "A deadline is imposed, creating pressure to act quickly.",
        "A small success reveals a path forward, but with greater challenges ahead.",
        "An ally reveals unexpected skills or knowledge that could be crucial.",
        "A warning is received about dangers that lie ahead.",
    ],
    "conflict": [
        "A confrontation can no longer be avoided, forcing difficult choices.",
        "Betrayal is revealed, casting doubt on who can be trusted.",
        "Resources become scarce, creating competition where there was cooperation.",
        "A mistake has serious consequences that must be addressed.",
        "External forces intervene, complicating an already difficult situation.",
    ],
    "climax": [
        "The moment of truth arrives, requiring courage and decisive action.",
        "All the pieces fall into place, revealing the full picture at last.",
        "A sacrifice becomes necessary to achieve the greater goal.",
        "The true villain is revealed, changing understanding of past events.",
        "A final test challenges the core values and abilities of those involved.",
    ],
    "resolution": [
        "An opportunity for reconciliation presents itself after the conflict.",
        "The aftermath of recent events requires healing and rebuilding.",
        "Recognition or rewards are offered for actions taken.",
        "A new normal begins to establish itself, incorporating recent changes.",
        "Seeds of future challenges appear even as current ones are resolved.",
    ],
}

TONE_TEMPLATES: Dict[str, List[str]] = {
    "tense": [
        "The air feels electric with unspoken tension as a critical moment approaches.",
        "Time seems to slow as a decision point with significant consequences arrives.",
        "Nerves fray as pressure mounts to resolve the situation quickly.",
        "The weight of responsibility creates a palpable heaviness in the atmosphere.",
    ],
    "excited": [
        "An unexpected opportunity creates a surge of hopeful energy.",
        "A breakthrough moment generates enthusiasm and renewed determination.",
        "Success seems within reach, inspiring bold and creative approaches.",
        "The thrill of discovery energizes everyone involved.",
    ],
    "sad": [
        "A moment of reflection reveals the cost of recent events.",
        "Loss creates a space for meaningful connection through shared grief.",
        "Memories resurface, bringing both comfort and pain.",
        "What might have been contrasts sharply with current reality.",
    ],
    "happy": [
        "A celebration brings people together in a moment of joy.",
        "Good fortune arrives unexpectedly, lifting spirits.",
        "A perfect moment of peace offers respite from ongoing challenges.",
        "Shared laughter creates bonds that strengthen the group.",
    ],
    "angry": [
        "Righteous fury provides the strength needed to confront injustice.",
        "Frustration boils over, forcing simmering issues to the surface.",
        "A provocation tests self-control and strategic thinking.",
        "The desire for retribution clouds judgment at a critical moment.",
    ],
    "fearful": [
        "Shadows seem to move in ways that defy explanation, raising alarm.",
        "A primal instinct warns of danger before it becomes visible.",
        "What was once familiar becomes threatening as circumstances change.",
        "The unknown looms large, feeding imagination with worst-case scenarios.",
    ],
    "neutral": [
        "A change in circumstances requires adaptation and reassessment.",
        "New information becomes available that could inform next steps.",
        "A moment of calm provides space for thoughtful consideration.",
        "Different perspectives on the situation emerge, each with merit.",
    ],
}

TOPIC_TEMPLATES: Dict[str, List[str]] = {
    "adventure": [
        "A local inhabitant recognizes the group and shares crucial information about {{topic}}.",
        "An unexpected obstacle related to {{topic}} blocks the path forward, requiring a creative solution.",
        "A mysterious map is discovered, showing the location of a legendary {{topic}}.",
    ],
    "mystery": [
        "A journal is found with entries about {{topic}}, providing new insights.",
        "Security footage reveals unexpected activity related to {{topic}}.",
        "An anonymous informant leaves a message warning about {{topic}}.",
    ],
    "fantasy": [
        "An enchanted object related to {{topic}} reveals its true nature.",
        "A magical transformation turns something ordinary about {{topic}} into something extraordinary.",
        "Ancient runes begin to glow, revealing secrets about {{topic}}.",
    ],
    "scifi": [
        "A scan reveals unusual properties about {{topic}} that weren't apparent before.",
        "A holographic projection appears, displaying information about {{topic}}.",
        "An AI analysis suggests an unexpected connection between current events and {{topic}}.",
    ],
    "horror": [
        "A disturbing discovery related to {{topic}} raises new fears.",
        "Whispers can be heard mentioning {{topic}} when no one is around.",
        "An old photograph is found showing something impossible involving {{topic}}.",
    ],
    "romance": [
        "A conversation about {{topic}} leads to a surprising revelation about shared values.",
        "A disagreement about {{topic}} tests the relationship but offers growth.",
        "A special event related to {{topic}} creates an opportunity for a meaningful moment.",
    ],
    "modern": [
        "Breaking news about {{topic}} interrupts the conversation.",
        "A social media post about {{topic}} goes viral, affecting everyone present.",
        "A chance encounter with someone connected to {{topic}} changes perspectives.",
    ],
}

CONFLICT_TOPIC_TEMPLATE: str = "A confrontation about {{topic}} can no longer be avoided."
CLIMAX_TOPIC_TEMPLATE: str = "The truth about {{topic}} is finally revealed, changing everything."
TOPIC_BRANCH_COUNT: int = 3

BOND_TESTED: str = "{{first}} and {{second}}'s strong bond is tested when a secret from the past emerges."
BOND_SACRIFICE: str = "{{first}} must make a difficult choice that could save {{second}} but at great personal cost."
BOND_VULNERABLE: str = "A moment of vulnerability between {{first}} and {{second}} deepens their connection."
RIVAL_BREAKING: str = "The tension between {{first}} and {{second}} reaches a breaking point, forcing a confrontation."
RIVAL_TRUCE: str = "{{first}} and {{second}} must set aside their differences to face a common threat."


def overlaps_history(candidate: str, history: Sequence[str]) -> bool:
    """True when any remembered branch contains the candidate or vice versa."""

    lowered = candidate.lower()
    for branch in history:
        other = branch.lower()
        if lowered in other or other in lowered:
            return True
    return False


class BranchGenerator:
    """Assembles and samples the branch candidate pool."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.random = rng or make_random()

    def candidate_pool(
        self,
        scenario_type: str,
        topics: Sequence[str],
        emotional_tone: str,
        narrative_phase: str,
        relationships: Sequence[Relationship],
        branch_history: Sequence[str],
    ) -> List[str]:
        """Every option the sampler may draw from, minus recent repeats."""

        # 1 Scenario, phase, and tone families with adventure/intro/neutral fallbacks. # steps
        # 2 Topic and relationship candidates go first, then templates.             # steps
        # 3 Anything overlapping the branch history is dropped.                     # steps
        scenario_type = (scenario_type or "adventure").lower()
        templates = [
            *SCENARIO_TEMPLATES.get(scenario_type, SCENARIO_TEMPLATES["adventure"]),
            *PHASE_TEMPLATES.get(narrative_phase, PHASE_TEMPLATES["introduction"]),
            *TONE_TEMPLATES.get(emotional_tone, TONE_TEMPLATES["neutral"]),
        ]
        candidates = [
            *self.topic_branches(topics, scenario_type, narrative_phase, emotional_tone),
            *self.relationship_branches(relationships, scenario_type, narrative_phase),
            *templates,
        ]
        pool: List[str] = []
        for candidate in candidates:
            if candidate in pool or overlaps_history(candidate, branch_history):
                continue
            pool.append(candidate)
        return pool

    def generate_branches(
        self,
        scenario_type: str = "adventure",
        topics: Sequence[str] = (),
        emotional_tone: str = "neutral",
        narrative_phase: str = "introduction",
        relationships: Sequence[Relationship] = (),
        branch_history: Sequence[str] = (),
    ) -> List[str]:
        """Shuffle the pool and keep three or four options."""

        pool = self.candidate_pool(
            scenario_type, topics, emotional_tone, narrative_phase, relationships, branch_history
        )
        spread = config.BRANCH_OPTIONS_MAX - config.BRANCH_OPTIONS_MIN + 1
        count = config.BRANCH_OPTIONS_MIN + int(self.random.random() * spread)
        return shuffled(self.random, pool)[:count]

    def topic_branches(
        self,
        topics: Sequence[str],
        scenario_type: str,
        narrative_phase: str,
        emotional_tone: str,
    ) -> List[str]:
        """One templated branch per leading topic plus a phase-specific one."""

        if not topics:
            return []
        relevant = list(topics)[:TOPIC_BRANCH_COUNT]
        templates = TOPIC_TEMPLATES.get(scenario_type, TOPIC_TEMPLATES["adventure"])
        branches = [bind_template(pick(self.random, templates), {"topic": topic}) for topic in relevant]
        if narrative_phase == "conflict" and emotional_tone == "tense":
            branches.append(bind_template(CONFLICT_TOPIC_TEMPLATE, {"topic": relevant[0]}))
        elif narrative_phase == "climax":
            branches.append(bind_template(CLIMAX_TOPIC_TEMPLATE, {"topic": relevant[0]}))
        return branches

    def relationship_branches(
        self,
        relationships: Sequence[Relationship],
        scenario_type: str,
        narrative_phase: str,
    ) -> List[str]:
        """Branches about one strongly bonded or strongly opposed pair."""

        significant = [
            rel for rel in relationships or [] if abs(rel.affinity) > config.RELATIONSHIP_SIGNIFICANT_AFFINITY
        ]
        if not significant:
            return []
        relationship = pick(self.random, significant)
        first, second = relationship.characters
        slots = {"first": first, "second": second}
        branches: List[str] = []
        if relationship.affinity > 0:
            branches.append(bind_template(BOND_TESTED, slots))
            if scenario_type in ("adventure", "fantasy"):
                branches.append(bind_template(BOND_SACRIFICE, slots))
            elif scenario_type == "romance":
                branches.append(bind_template(BOND_VULNERABLE, slots))
        else:
            branches.append(bind_template(RIVAL_BREAKING, slots))
            if narrative_phase in ("conflict", "climax"):
                branches.append(bind_template(RIVAL_TRUCE, slots))
        return branches
