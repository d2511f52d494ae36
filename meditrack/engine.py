"""
Symptom triage engine.

Entry point for callers: maps the UI vocabulary onto the scorer's inputs,
runs ranking, urgency scoring and recommendation composition in memory,
and converts unexpected failures into a conservative fallback result.
"""
from collections.abc import Mapping, Sequence
from typing import List, Optional

from loguru import logger

from meditrack.errors import AnalysisUnavailableError, TriageInputError
from meditrack.knowledge_base import DURATION_IMPACT, KnowledgeBase, get_knowledge_base
from meditrack.recommendations import compose_recommendations
from meditrack.schemas import PossibleCondition, SymptomItem, TriageResult, UrgencyLevel
from meditrack.scoring import (
    calculate_urgency_score,
    classify_urgency,
    get_urgency_description,
    rank_conditions,
)

DEFAULT_DURATION_BUCKET = "days"

# UI duration options -> scorer buckets
DURATION_LABELS = {
    "Less than a day": "hours",
    "1-3 days": "days",
    "3-7 days": "days",
    "1-2 weeks": "weeks",
    "2-4 weeks": "weeks",
    "1-3 months": "months",
    "3+ months": "months",
}

FALLBACK_URGENCY_SCORE = 3.0
FALLBACK_ADVICE = (
    "An error occurred during symptom analysis. For your safety, please consult with a healthcare provider."
)
FALLBACK_ACTIONS = [
    "Contact your healthcare provider for proper evaluation",
    "Ensure adequate rest",
    "Stay hydrated",
]
FALLBACK_FOLLOW_UP = "Schedule an appointment with your doctor"
FALLBACK_DISCLAIMER = (
    "This system encountered an error during analysis. Always consult with a qualified "
    "healthcare provider for medical advice."
)


def fallback_result() -> TriageResult:
    """Conservative result returned when analysis cannot be computed"""
    return TriageResult(
        status="error",
        possible_conditions=[],
        urgency_level=UrgencyLevel(
            score=FALLBACK_URGENCY_SCORE,
            description=get_urgency_description(FALLBACK_URGENCY_SCORE),
            category="moderate",
        ),
        general_advice=FALLBACK_ADVICE,
        suggested_actions=list(FALLBACK_ACTIONS),
        follow_up_recommendation=FALLBACK_FOLLOW_UP,
        disclaimer=FALLBACK_DISCLAIMER,
    )


def identify_possible_conditions(
    symptoms: Sequence[str],
    severity_level: int,
    duration: str,
    knowledge_base: KnowledgeBase,
) -> TriageResult:
    """Rank conditions, score urgency and compose advice for one set of symptoms.

    ``duration`` is a scorer bucket ("hours", "days", ...); unknown buckets
    are weighted neutrally.
    """
    conditions = rank_conditions(symptoms, knowledge_base)
    score = calculate_urgency_score(symptoms, severity_level, duration, knowledge_base)
    advice = compose_recommendations(score, conditions, knowledge_base)
    severity = knowledge_base.severity_level(severity_level)

    return TriageResult(
        possible_conditions=[
            PossibleCondition(name=c.name, probability=c.probability, description=c.description)
            for c in conditions
        ],
        urgency_level=UrgencyLevel(
            score=score,
            description=get_urgency_description(score),
            category=classify_urgency(score).category,
        ),
        general_advice=advice.general_advice,
        suggested_actions=list(advice.suggested_actions),
        follow_up_recommendation=advice.follow_up_recommendation,
        disclaimer=advice.disclaimer,
        red_flags=list(advice.red_flags),
        severity_label=severity.label if severity else None,
    )


def symptom_descriptions(symptoms) -> List[str]:
    """Pull the free-text descriptions out of symptom records.

    Accepts SymptomItem models, mappings with a ``description`` key, or
    plain strings.
    """
    if isinstance(symptoms, (str, bytes)) or not isinstance(symptoms, Sequence):
        raise TriageInputError(
            "Symptoms must be a list of symptom records",
            details={"received": type(symptoms).__name__},
        )

    descriptions = []
    for index, item in enumerate(symptoms):
        if isinstance(item, SymptomItem):
            description = item.description
        elif isinstance(item, Mapping):
            description = item.get("description")
        else:
            description = item
        if not isinstance(description, str):
            raise TriageInputError(
                "Symptom {} has no text description".format(index),
                details={"index": index},
            )
        descriptions.append(description)
    return descriptions


def validate_severity(severity) -> int:
    # bool is an int subclass but never a valid severity
    if isinstance(severity, bool) or not isinstance(severity, int):
        raise TriageInputError("Severity must be an integer", details={"received": repr(severity)})
    if not 1 <= severity <= 5:
        raise TriageInputError("Severity must be between 1 and 5", details={"received": severity})
    return severity


class TriageEngine:
    def __init__(
        self,
        knowledge_base: Optional[KnowledgeBase] = None,
        default_duration: str = DEFAULT_DURATION_BUCKET,
    ):
        self._knowledge_base = knowledge_base
        self.default_duration = default_duration

    @property
    def knowledge_base(self) -> KnowledgeBase:
        if self._knowledge_base is None:
            self._knowledge_base = get_knowledge_base()
        return self._knowledge_base

    def map_duration(self, duration: str) -> str:
        """Translate a UI duration label into a scorer bucket"""
        if not isinstance(duration, str):
            raise TriageInputError("Duration must be a string", details={"received": repr(duration)})
        if duration in DURATION_LABELS:
            return DURATION_LABELS[duration]
        if duration in DURATION_IMPACT:
            return duration
        logger.debug("Unrecognized duration {!r}, using {!r}", duration, self.default_duration)
        return self.default_duration

    def analyze(self, symptoms, severity, duration) -> TriageResult:
        """
        Triage a list of reported symptoms.

        Raises TriageInputError for malformed input and AnalysisUnavailableError,
        carrying a fallback result, when the analysis itself fails.
        """
        descriptions = symptom_descriptions(symptoms)
        severity = validate_severity(severity)
        bucket = self.map_duration(duration)

        try:
            result = identify_possible_conditions(descriptions, severity, bucket, self.knowledge_base)
        except Exception as exc:
            logger.exception("Symptom analysis failed")
            raise AnalysisUnavailableError(fallback_result(), details={"reason": str(exc)}) from exc

        logger.info(
            "Triaged {} symptoms (severity={}, duration={}): urgency {:.2f}, top={}",
            len(descriptions),
            severity,
            bucket,
            result.urgency_level.score,
            result.possible_conditions[0].name if result.possible_conditions else None,
        )
        return result
