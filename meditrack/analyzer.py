from typing import List, Optional

from loguru import logger

from meditrack.engine import TriageEngine
from meditrack.errors import AnalysisUnavailableError
from meditrack.schemas import AnalysisResult, RecommendationResult, SymptomCheck, TriageResult

RECOMMENDATION_DISCLAIMER = (
    "This information is not meant to replace professional medical advice. "
    "Please consult with a healthcare provider."
)
DEFAULT_MEDICATION_ADVICE = "Consult with a healthcare provider before taking any medications"
DEFAULT_LIFESTYLE_ADVICE = "Ensure adequate rest and stay hydrated"

MEDICATION_KEYWORDS = ("medication", "over-the-counter")
LIFESTYLE_KEYWORDS = ("rest", "diet", "hydrat", "sleep", "monitor")


def _matching(actions: List[str], keywords) -> List[str]:
    return [a for a in actions if any(kw in a.lower() for kw in keywords)]


def build_general_advice(suggested_actions: List[str]) -> str:
    """Summarize suggested actions into medication and lifestyle advice"""
    medications = _matching(suggested_actions, MEDICATION_KEYWORDS)
    lifestyle = _matching(suggested_actions, LIFESTYLE_KEYWORDS)

    medication_advice = DEFAULT_MEDICATION_ADVICE
    if medications:
        medication_advice = "Consider: {}".format("; ".join(medications))
    lifestyle_advice = "; ".join(lifestyle) if lifestyle else DEFAULT_LIFESTYLE_ADVICE

    return "Based on your symptoms, you may want to: {}. {}.".format(medication_advice, lifestyle_advice)


def _to_record(check: SymptomCheck, result: TriageResult, general_advice: str) -> SymptomCheck:
    analysis = AnalysisResult(
        urgency_level=result.urgency_level.category,
        possible_conditions=result.possible_conditions,
        disclaimer=result.disclaimer,
    )
    recommendations = RecommendationResult(
        general_advice=general_advice,
        suggested_actions=result.suggested_actions,
        follow_up_recommendation=result.follow_up_recommendation,
        disclaimer=RECOMMENDATION_DISCLAIMER,
    )
    return check.model_copy(
        update={"status": result.status, "analysis": analysis, "recommendations": recommendations}
    )


def analyze_symptom_check(check: SymptomCheck, engine: Optional[TriageEngine] = None) -> SymptomCheck:
    """
    Analyze a stored symptom check and return the updated record.

    Analysis failures never propagate: the record comes back with status
    "error" and conservative recommendations.
    """
    engine = engine or TriageEngine()
    try:
        result = engine.analyze(check.symptoms, check.severity, check.duration)
    except AnalysisUnavailableError as exc:
        logger.warning("Symptom check {} could not be analyzed: {}", check.id, exc.message)
        return _to_record(check, exc.fallback, exc.fallback.general_advice)

    return _to_record(check, result, build_general_advice(result.suggested_actions))
