"""
API tests for the reports router.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from medreport.api.main import app
from medreport.app.routers.reports import get_generation_client, get_report_session
from medreport.app.services.lifecycle import MISSING_DOCUMENT_MESSAGE, ReportSession
from medreport.services.errors import PayloadDecodeError, TransportFailure


class StubClient:
    def __init__(self, report=None, error=None):
        self.is_generating = False
        self.generate = AsyncMock(return_value=report, side_effect=error)


@pytest.fixture
def stub_client(medical_report):
    return StubClient(report=medical_report)


@pytest.fixture
def client(stub_client):
    session = ReportSession(client=stub_client, document_text="simulated document")
    app.dependency_overrides[get_report_session] = lambda: session
    app.dependency_overrides[get_generation_client] = lambda: stub_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_session_starts_in_input(client):
    response = client.get("/api/reports/session")

    assert response.status_code == 200
    body = response.json()
    assert body["state"]["step"] == "input"
    assert body["state"]["error"] is None
    assert body["is_generating"] is False


def test_submit_without_document_sets_error(client, stub_client):
    response = client.post("/api/reports/session/submit")

    assert response.status_code == 200
    assert response.json()["state"]["error"] == MISSING_DOCUMENT_MESSAGE
    stub_client.generate.assert_not_awaited()


def test_full_flow_renders_and_resets(client, stub_client):
    client.post("/api/reports/session/document", json={"document_name": "checkup.pdf"})
    client.post("/api/reports/session/notes", json={"notes": "Check thyroid"})

    response = client.post("/api/reports/session/submit")

    body = response.json()
    assert body["state"]["step"] == "report"
    assert body["state"]["report"]["diagnoses"]["main_diagnosis"]["name"] == (
        "Arterial hypertension, stage 2"
    )
    assert "Check thyroid" in stub_client.generate.await_args.args[0]

    html = client.get("/api/reports/session/report.html")
    assert html.status_code == 200
    assert "Arterial hypertension, stage 2" in html.text

    reset = client.post("/api/reports/session/reset").json()
    assert reset["state"] == {
        "step": "input",
        "document_name": None,
        "notes": "",
        "report": None,
        "error": None,
    }


def test_report_html_requires_report(client):
    assert client.get("/api/reports/session/report.html").status_code == 404


def test_submit_while_busy_conflicts(client, stub_client):
    stub_client.is_generating = True

    response = client.post("/api/reports/session/submit")

    assert response.status_code == 409


def test_generate_returns_report(client):
    response = client.post("/api/reports/generate", json={"prompt": "INPUT DATA: ..."})

    assert response.status_code == 200
    assert response.json()["cover_letter"]["consulting_doctor"] == "Dr. A. S. Sokolov"


def test_generate_maps_transport_failure_to_bad_gateway(client, stub_client):
    stub_client.generate.side_effect = TransportFailure(ConnectionError("down"))

    response = client.post("/api/reports/generate", json={"prompt": "x"})

    assert response.status_code == 502
    assert response.json()["detail"].startswith("Failed to generate report.")


def test_generate_maps_decode_error_to_unprocessable(client, stub_client):
    stub_client.generate.side_effect = PayloadDecodeError("bad json")

    response = client.post("/api/reports/generate", json={"prompt": "x"})

    assert response.status_code == 422


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["services"]["generation"]["status"] == "healthy"
