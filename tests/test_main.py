"""API tests for the FastAPI application."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client():
    return TestClient(app)


def student_payload(**overrides):
    payload = {
        'subjects': ["Math"],
        'examDate': (date.today() + timedelta(days=5)).isoformat(),
        'dailyStudyHours': 1,
        'missedStudyDays': 5,
        'topicDifficulty': 90,
        'stressLevel': 5,
    }
    payload.update(overrides)
    return payload


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_root_serves_html(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_analyze(client):
    """Scores come back with camelCase keys."""
    response = client.post("/analyze", json=student_payload())
    assert response.status_code == 200

    body = response.json()
    assert body["academicRisk"] == 91
    assert body["burnoutRisk"] == 90
    assert body["riskLevel"] == "high"
    assert body["burnoutLevel"] == "high"
    assert body["daysUntilExam"] == 5
    assert len(body["subjectRisks"]) == 1
    assert body["subjectRisks"][0]["name"] == "Math"
    assert body["subjectRisks"][0]["risk"] == 100
    assert body["insights"][0]["severity"] == "danger"
    assert body["recommendations"][0]["title"] == "Emergency 7-Day Plan"
    assert len(body["quickTips"]) == 4


def test_analyze_clamps_out_of_range_values(client):
    response = client.post("/analyze", json=student_payload(
        dailyStudyHours=-4, missedStudyDays=12, topicDifficulty=300, stressLevel=9
    ))
    assert response.status_code == 200
    body = response.json()
    assert 0 <= body["academicRisk"] <= 100
    assert 0 <= body["burnoutRisk"] <= 100


def test_analyze_clamps_huge_numbers(client):
    """Integers too large for a float are clamped, not a server error."""
    response = client.post("/analyze", json=student_payload(
        dailyStudyHours=10**400, missedStudyDays=10**400,
        topicDifficulty=-10**400, stressLevel=10**400
    ))
    assert response.status_code == 200
    body = response.json()
    assert body["academicRisk"] == 55
    assert body["burnoutRisk"] == 100


def test_analyze_subject_entry_shape(client):
    """Each subject entry carries name, risk and colorTag."""
    response = client.post("/analyze", json=student_payload())
    entry = response.json()["subjectRisks"][0]
    assert set(entry) == {"name", "risk", "colorTag"}
    assert entry["colorTag"] == "hsl(4, 77%, 57%)"


def test_analyze_deterministic(client):
    payload = student_payload(subjects=["Math", "Physics", "Chemistry"], dailyStudyHours=5)
    first = client.post("/analyze?deterministic=true", json=payload).json()
    second = client.post("/analyze?deterministic=true", json=payload).json()
    assert first["subjectRisks"] == second["subjectRisks"]


def test_analyze_rejects_incomplete_submission(client):
    response = client.post("/analyze", json=student_payload(subjects=[]))
    assert response.status_code == 400
    assert "subject" in response.json()["detail"]

    past = (date.today() - timedelta(days=3)).isoformat()
    response = client.post("/analyze", json=student_payload(examDate=past))
    assert response.status_code == 400


def test_analyze_rejects_malformed_body(client):
    response = client.post("/analyze", json=student_payload(examDate="not-a-date"))
    assert response.status_code == 422

    payload = student_payload()
    del payload["examDate"]
    response = client.post("/analyze", json=payload)
    assert response.status_code == 422


def test_navigate_flow(client):
    """Walk landing -> input -> dashboard -> start over."""
    response = client.post("/navigate", json={'screen': "landing", 'event': "getStarted"})
    assert response.status_code == 200
    assert response.json()["screen"] == "input"
    assert response.json()["analysis"] is None

    data = student_payload()
    response = client.post("/navigate", json={'screen': "input", 'event': "submit", 'data': data})
    assert response.status_code == 200
    body = response.json()
    assert body["screen"] == "dashboard"
    assert body["studentData"]["subjects"] == ["Math"]
    assert body["analysis"]["academicRisk"] == 91

    response = client.post("/navigate", json={
        'screen': "dashboard", 'event': "startOver", 'studentData': body["studentData"]
    })
    assert response.status_code == 200
    assert response.json()["screen"] == "input"
    assert response.json()["studentData"] is None


def test_navigate_back_keeps_data(client):
    data = student_payload()
    response = client.post("/navigate", json={
        'screen': "dashboard", 'event': "back", 'studentData': data
    })
    assert response.status_code == 200
    body = response.json()
    assert body["screen"] == "input"
    assert body["studentData"]["subjects"] == ["Math"]
    assert body["analysis"] is None


def test_navigate_invalid(client):
    response = client.post("/navigate", json={'screen': "landing", 'event': "startOver"})
    assert response.status_code == 409

    response = client.post("/navigate", json={'screen': "input", 'event': "submit"})
    assert response.status_code == 409

    response = client.post("/navigate", json={'screen': "input", 'event': "teleport"})
    assert response.status_code == 409

    response = client.post("/navigate", json={
        'screen': "input", 'event': "submit", 'data': student_payload(subjects=[])
    })
    assert response.status_code == 400


def test_labels(client):
    response = client.get("/labels", params={'difficulty': 80, 'stress': 1})
    assert response.status_code == 200
    assert response.json() == {"difficulty": "Hard", "stress": "Very Low"}

    response = client.get("/labels", params={'stress': 9})
    assert response.status_code == 422
