import pytest

from meditrack.engine import DURATION_LABELS, fallback_result
from meditrack.errors import AnalysisUnavailableError, TriageInputError
from meditrack.schemas import SymptomItem


def test_scenario_a(engine):
    result = engine.analyze(
        [SymptomItem(description="chest pain", location="chest"), SymptomItem(description="shortness of breath")],
        3,
        "Less than a day",
    )
    assert result.status == "analyzed"
    assert result.urgency_level.score == 5.0
    assert result.urgency_level.category == "emergency"
    assert result.possible_conditions[0].name == "Anxiety"
    assert result.suggested_actions == [
        "Go to the nearest emergency room or call emergency services (911)"
    ]
    assert result.severity_label == "Severe"


def test_scenario_b(engine):
    result = engine.analyze([{"description": "headache", "location": "head"}], 1, "1-2 weeks")
    assert result.urgency_level.score < 2.5
    assert result.urgency_level.category == "low"
    assert result.possible_conditions[0].name == "Tension Headache"
    assert result.possible_conditions[0].description.startswith("The most common type of headache")
    assert "Consider: Regular sleep schedule" in result.suggested_actions
    assert result.red_flags


def test_scenario_c(engine):
    result = engine.analyze(["made-up-symptom-xyz"], 2, "1-3 days")
    assert result.possible_conditions == []
    assert result.urgency_level.score == pytest.approx(2.4)
    assert result.red_flags == []


def test_scenario_d(engine):
    result = engine.analyze(["fever", "headache", "stiff neck"], 4, "hours")
    assert result.urgency_level.score == 5.0
    assert result.urgency_level.description.startswith("Emergency")
    assert result.possible_conditions[0].name == "Influenza"
    assert result.suggested_actions[1:] == [
        "Consider: Rest and hydration",
        "Consider: Antiviral medications (if diagnosed early)",
        "Consider: Pain relievers for fever and aches",
    ]


def test_empty_symptoms(engine):
    result = engine.analyze([], 2, "days")
    assert result.possible_conditions == []
    assert result.urgency_level.score == pytest.approx(2.4)


@pytest.mark.parametrize("label, bucket", sorted(DURATION_LABELS.items()))
def test_duration_labels_map_to_buckets(engine, label, bucket):
    assert engine.map_duration(label) == bucket


def test_bucket_names_pass_through(engine):
    assert engine.map_duration("weeks") == "weeks"
    assert engine.map_duration("years") == "years"


def test_unknown_duration_label_defaults_to_days(engine):
    assert engine.map_duration("a while") == "days"
    result = engine.analyze(["made-up-symptom-xyz"], 2, "a while")
    assert result.urgency_level.score == pytest.approx(2.4)


def test_result_is_json_serializable(engine):
    payload = engine.analyze(["cough", "fever"], 2, "3-7 days").model_dump(mode="json")
    assert set(payload) >= {
        "possible_conditions",
        "urgency_level",
        "general_advice",
        "suggested_actions",
        "follow_up_recommendation",
        "disclaimer",
    }


@pytest.mark.parametrize(
    "symptoms, severity, duration",
    [
        ("headache", 3, "days"),
        (None, 3, "days"),
        ([{"location": "head"}], 3, "days"),
        ([42], 3, "days"),
        (["headache"], "3", "days"),
        (["headache"], True, "days"),
        (["headache"], 0, "days"),
        (["headache"], 6, "days"),
        (["headache"], 3, None),
    ],
)
def test_malformed_input_fails_fast(engine, symptoms, severity, duration):
    with pytest.raises(TriageInputError):
        engine.analyze(symptoms, severity, duration)


def test_input_error_is_a_value_error():
    assert issubclass(TriageInputError, ValueError)


def test_failure_carries_fallback(broken_engine):
    with pytest.raises(AnalysisUnavailableError) as excinfo:
        broken_engine.analyze(["headache"], 3, "days")

    fallback = excinfo.value.fallback
    assert fallback.status == "error"
    assert fallback.possible_conditions == []
    assert fallback.urgency_level.score == 3.0
    assert fallback.urgency_level.category == "moderate"
    assert "consult with a healthcare provider" in fallback.general_advice
    assert excinfo.value.details["reason"] == "knowledge base not loaded"


def test_fallback_result_is_fresh():
    first = fallback_result()
    first.suggested_actions.append("mutated")
    assert "mutated" not in fallback_result().suggested_actions
