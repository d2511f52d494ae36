import pytest

from meditrack.recommendations import ADVICE_TIERS, DISCLAIMER, compose_recommendations
from meditrack.scoring import RankedCondition, UrgencyBand


def _condition(name):
    return RankedCondition(name=name, probability=50, description="")


@pytest.mark.parametrize(
    "score, band",
    [
        (5.0, UrgencyBand.EMERGENCY),
        (3.5, UrgencyBand.URGENT),
        (2.5, UrgencyBand.SEMI_URGENT),
        (1.5, UrgencyBand.NON_URGENT),
        (1.0, UrgencyBand.SELF_CARE),
    ],
)
def test_tier_selected_by_urgency(kb, score, band):
    advice = compose_recommendations(score, [], kb)
    general, actions, follow_up = ADVICE_TIERS[band]
    assert advice.general_advice == general
    assert list(advice.suggested_actions) == actions
    assert advice.follow_up_recommendation == follow_up
    assert advice.disclaimer == DISCLAIMER
    assert advice.red_flags == ()


def test_actions_escalate_from_self_care_to_emergency():
    assert "emergency services" in ADVICE_TIERS[UrgencyBand.EMERGENCY][1][0]
    assert ADVICE_TIERS[UrgencyBand.SELF_CARE][1][0].startswith("Rest")


def test_top_condition_treatments_appended(kb):
    advice = compose_recommendations(1.0, [_condition("Tension Headache"), _condition("Migraine")], kb)
    assert list(advice.suggested_actions[3:]) == [
        "Consider: Over-the-counter pain relievers",
        "Consider: Stress management techniques",
        "Consider: Regular sleep schedule",
    ]
    assert "sudden severe headache" in advice.red_flags


def test_only_top_condition_contributes(kb):
    advice = compose_recommendations(5.0, [_condition("Heart Attack"), _condition("Asthma")], kb)
    # Heart Attack has no detail entry, so Asthma treatments are not used either
    assert list(advice.suggested_actions) == ADVICE_TIERS[UrgencyBand.EMERGENCY][1]


def test_treatments_not_deduplicated(kb):
    advice = compose_recommendations(1.0, [_condition("Gastroenteritis")], kb)
    assert "Rest and maintain good hydration" in advice.suggested_actions
    assert "Consider: Rest" in advice.suggested_actions
    assert len(advice.suggested_actions) == 6
