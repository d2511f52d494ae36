"""
Rule-based urgency scoring and condition ranking.

Both scorers are pure functions over a read-only KnowledgeBase. The
weights and bonus magnitudes are empirical and kept exactly as tuned;
they are not validated clinical guidance.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from meditrack.knowledge_base import KnowledgeBase, normalize_symptom

MIN_URGENCY = 1.0
MAX_URGENCY = 5.0
MAX_PROBABILITY = 95
TOP_CONDITIONS = 3


class UrgencyBand(Enum):
    EMERGENCY = "emergency"
    URGENT = "urgent"
    SEMI_URGENT = "semi_urgent"
    NON_URGENT = "non_urgent"
    SELF_CARE = "self_care"

    @property
    def category(self) -> str:
        return _BAND_CATEGORIES[self]


# Evaluated top-down: the first threshold the score reaches wins
URGENCY_LADDER: Tuple[Tuple[float, UrgencyBand, str], ...] = (
    (4.5, UrgencyBand.EMERGENCY, "Emergency - Seek immediate medical attention"),
    (3.5, UrgencyBand.URGENT, "Urgent - Seek medical care within 24 hours"),
    (2.5, UrgencyBand.SEMI_URGENT, "Semi-urgent - Consult with a healthcare provider within a few days"),
    (1.5, UrgencyBand.NON_URGENT, "Non-urgent - Schedule a routine appointment"),
)
SELF_CARE_DESCRIPTION = "Self-care - Can be managed at home with self-care measures"

_BAND_CATEGORIES = {
    UrgencyBand.EMERGENCY: "emergency",
    UrgencyBand.URGENT: "high",
    UrgencyBand.SEMI_URGENT: "moderate",
    UrgencyBand.NON_URGENT: "low",
    UrgencyBand.SELF_CARE: "low",
}


@dataclass(frozen=True)
class RankedCondition:
    name: str
    probability: int
    description: str


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_urgency_score(
    symptoms: Sequence[str],
    severity_level: int,
    duration: str,
    knowledge_base: KnowledgeBase,
) -> float:
    """Combine severity, duration and risky symptom combinations into a 1-5 score"""
    score = float(severity_level)
    score *= knowledge_base.duration_factor(duration)

    reported = frozenset(normalize_symptom(s) for s in symptoms)
    for rule in knowledge_base.combination_rules:
        if rule.matches(reported):
            score += rule.bonus

    if severity_level >= knowledge_base.high_severity_threshold:
        score += knowledge_base.high_severity_bonus

    return max(MIN_URGENCY, min(MAX_URGENCY, score))


def classify_urgency(score: float) -> UrgencyBand:
    for threshold, band, _ in URGENCY_LADDER:
        if score >= threshold:
            return band
    return UrgencyBand.SELF_CARE


def get_urgency_description(score: float) -> str:
    for threshold, _, description in URGENCY_LADDER:
        if score >= threshold:
            return description
    return SELF_CARE_DESCRIPTION


def rank_conditions(symptoms: Sequence[str], knowledge_base: KnowledgeBase) -> List[RankedCondition]:
    """
    Rank candidate conditions for the reported symptoms.

    A condition survives only with a key-symptom match or at least two
    matching symptoms. Probabilities are normalized by the square root of
    the number of reported symptoms and capped at 95. Ties resolve by name.
    """
    # condition -> [score, count, key symptom matched]
    tally: Dict[str, list] = {}
    for symptom in symptoms:
        for assoc in knowledge_base.associations_for(symptom):
            entry = tally.setdefault(assoc.condition, [0.0, 0, False])
            entry[0] += assoc.likelihood
            entry[1] += 1
            if assoc.key_symptom:
                entry[2] = True

    if not tally:
        return []

    normalization = math.sqrt(len(symptoms))
    ranked = [
        RankedCondition(
            name=name,
            probability=min(MAX_PROBABILITY, _round_half_up(score / normalization * 100)),
            description=knowledge_base.describe_condition(name),
        )
        for name, (score, count, key_match) in tally.items()
        if key_match or count >= 2
    ]
    ranked.sort(key=lambda c: (-c.probability, c.name))
    return ranked[:TOP_CONDITIONS]
