from dataclasses import dataclass
from typing import List, Sequence, Tuple

from meditrack.knowledge_base import KnowledgeBase
from meditrack.scoring import RankedCondition, UrgencyBand, classify_urgency

DISCLAIMER = (
    "This assessment is for informational purposes only and does not constitute medical advice. "
    "Always consult with a qualified healthcare provider for diagnosis and treatment "
    "recommendations specific to your situation."
)

TREATMENT_PREFIX = "Consider: "

# band -> (general advice, suggested actions, follow-up)
ADVICE_TIERS = {
    UrgencyBand.EMERGENCY: (
        "Your symptoms suggest a potentially serious condition that requires immediate medical attention.",
        ["Go to the nearest emergency room or call emergency services (911)"],
        "Follow emergency room discharge instructions carefully.",
    ),
    UrgencyBand.URGENT: (
        "Your symptoms should be evaluated promptly by a healthcare professional.",
        [
            "Schedule an urgent care visit within 24 hours",
            "Contact your primary care provider for a same-day appointment",
            "Monitor your symptoms closely for any worsening",
        ],
        "Follow up with your primary care provider after your urgent care visit.",
    ),
    UrgencyBand.SEMI_URGENT: (
        "Your symptoms suggest a condition that should be evaluated by a healthcare provider, "
        "though not immediately urgent.",
        [
            "Schedule an appointment with your healthcare provider within the next few days",
            "Rest and take care of yourself while waiting for your appointment",
            "Monitor your symptoms for any changes",
        ],
        "Follow your doctor's recommendations for any follow-up care or testing.",
    ),
    UrgencyBand.NON_URGENT: (
        "Your symptoms are likely manageable with self-care, but a healthcare provider "
        "consultation is still recommended.",
        [
            "Schedule a routine appointment with your healthcare provider",
            "Try appropriate over-the-counter remedies for symptom relief",
            "Pay attention to lifestyle factors that might improve your condition",
        ],
        "If self-care measures don't improve your symptoms within a week, consider an earlier appointment.",
    ),
    UrgencyBand.SELF_CARE: (
        "Your symptoms appear mild and can likely be managed with self-care measures.",
        [
            "Rest and maintain good hydration",
            "Consider appropriate over-the-counter remedies for specific symptoms",
            "Pay attention to your diet, sleep, and stress levels",
        ],
        "If symptoms persist for more than two weeks or worsen, schedule an appointment with your "
        "healthcare provider.",
    ),
}


@dataclass(frozen=True)
class Recommendations:
    general_advice: str
    suggested_actions: Tuple[str, ...]
    follow_up_recommendation: str
    disclaimer: str
    red_flags: Tuple[str, ...] = ()


def compose_recommendations(
    urgency_score: float,
    conditions: Sequence[RankedCondition],
    knowledge_base: KnowledgeBase,
) -> Recommendations:
    """Tiered advice for the urgency band, plus treatments for the top condition"""
    general_advice, actions, follow_up = ADVICE_TIERS[classify_urgency(urgency_score)]
    suggested_actions: List[str] = list(actions)
    red_flags: Tuple[str, ...] = ()

    top = knowledge_base.condition(conditions[0].name) if conditions else None
    if top is not None:
        # Generic tier actions are not deduplicated against treatments
        suggested_actions.extend(TREATMENT_PREFIX + treatment for treatment in top.common_treatments)
        red_flags = top.red_flags

    return Recommendations(
        general_advice=general_advice,
        suggested_actions=tuple(suggested_actions),
        follow_up_recommendation=follow_up,
        disclaimer=DISCLAIMER,
        red_flags=red_flags,
    )
