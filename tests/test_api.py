import pytest
from fastapi.testclient import TestClient

import main
from meditrack.engine import DURATION_LABELS


@pytest.fixture
def client():
    return TestClient(main.app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_triage(client):
    resp = client.post(
        "/api/triage",
        json={
            "symptoms": [
                {"description": "fever", "location": "general"},
                {"description": "headache", "location": "head", "characteristics": "throbbing"},
                {"description": "stiff neck"},
            ],
            "severity": 4,
            "duration": "Less than a day",
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "analyzed"
    assert data["urgency_level"]["score"] == 5.0
    assert data["urgency_level"]["category"] == "emergency"
    assert len(data["possible_conditions"]) == 3
    assert data["possible_conditions"][0]["name"] == "Influenza"


@pytest.mark.parametrize(
    "payload",
    [
        {"symptoms": [{"description": "headache"}], "severity": 9, "duration": "1-3 days"},
        {"symptoms": [{"description": "   "}], "severity": 2, "duration": "1-3 days"},
        {"symptoms": [{"location": "head"}], "severity": 2, "duration": "1-3 days"},
        {"severity": 2, "duration": "1-3 days"},
    ],
)
def test_triage_rejects_invalid_payload(client, payload):
    assert client.post("/api/triage", json=payload).status_code == 422


def test_triage_unavailable_returns_fallback(client, broken_engine, monkeypatch):
    monkeypatch.setattr(main, "engine", broken_engine)
    resp = client.post(
        "/api/triage",
        json={"symptoms": [{"description": "headache"}], "severity": 2, "duration": "1-3 days"},
    )
    assert resp.status_code == 503
    data = resp.json()
    assert data["error_code"] == "ANALYSIS_UNAVAILABLE"
    assert data["result"]["status"] == "error"
    assert data["result"]["urgency_level"]["category"] == "moderate"


def test_analyze_symptom_check(client):
    resp = client.post(
        "/api/symptom-checks/analyze",
        json={
            "id": 3,
            "patient_id": 44,
            "symptoms": [{"description": "cough", "location": "chest"}],
            "severity": 2,
            "duration": "3-7 days",
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 3
    assert data["status"] == "analyzed"
    assert data["analysis"]["possible_conditions"][0]["name"] == "Common Cold"
    assert data["recommendations"]["general_advice"].startswith("Based on your symptoms")


def test_analyze_symptom_check_error_status(client, broken_engine, monkeypatch):
    monkeypatch.setattr(main, "engine", broken_engine)
    resp = client.post(
        "/api/symptom-checks/analyze",
        json={"symptoms": [{"description": "cough"}], "severity": 2, "duration": "3-7 days"},
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "error"


def test_body_areas(client):
    areas = client.get("/api/body-areas").json()
    assert "head" in areas
    assert "chest pain" in client.get("/api/body-areas/chest/symptoms").json()
    assert client.get("/api/body-areas/elbow/symptoms").json() == []


def test_condition_details(client):
    resp = client.get("/api/conditions/Asthma")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Asthma"
    assert "Rescue inhalers for quick relief" in data["common_treatments"]


def test_unknown_condition(client):
    resp = client.get("/api/conditions/Heartburn/GERD")
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "NOT_FOUND"


def test_severity_levels(client):
    levels = client.get("/api/severity-levels").json()
    assert [level["label"] for level in levels] == ["Mild", "Moderate", "Severe", "Very Severe", "Critical"]


def test_duration_options(client):
    assert client.get("/api/duration-options").json() == list(DURATION_LABELS)
