"""
HTTP surface tests: check-in sessions, patients, reports and auth.
"""

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from clinicintake.adapters.speech.capture import SpeechCaptureAdapter
from clinicintake.api import deps
from clinicintake.app import create_app
from clinicintake.application.ports.services.identity_provider import IdentityProvider
from clinicintake.application.use_cases.check_in_sessions import CheckInSessionRegistry
from clinicintake.core.exceptions import IdentityProviderError

from conftest import FakeRecognizer

LONG_DESCRIPTION = "Headache and mild fever since two days ago"

REGISTRATION = {
    "first_name": "Maria",
    "last_name": "Lopez",
    "phone": "555-987-6543",
    "date_of_birth": "1985-06-02",
    "symptoms": LONG_DESCRIPTION,
    "appointment_type": "general",
    "existing_conditions": ["Asthma"],
}


class FakeIdentityProvider(IdentityProvider):
    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        if password != "secret":
            raise IdentityProviderError(400, "Invalid login credentials")
        return {"access_token": "at", "user": {"email": email}}

    async def sign_up(self, email, password, profile):
        return {"id": "u1", "email": email, "user_metadata": profile}

    async def sign_out(self, access_token: str) -> None:
        return None

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        return {"id": "u1", "token": access_token}

    async def get_session(self, refresh_token: str) -> Dict[str, Any]:
        return {"access_token": "fresh"}


@pytest.fixture
def speech():
    return SpeechCaptureAdapter(recognizer=None)


@pytest.fixture
def client(patients, check_ins, analysis_service, report_generator, report_storage, speech):
    app = create_app()
    registry = CheckInSessionRegistry()
    app.dependency_overrides[deps.get_patient_directory] = lambda: patients
    app.dependency_overrides[deps.get_check_in_repository] = lambda: check_ins
    app.dependency_overrides[deps.get_analysis_service] = lambda: analysis_service
    app.dependency_overrides[deps.get_report_generator] = lambda: report_generator
    app.dependency_overrides[deps.get_report_storage] = lambda: report_storage
    app.dependency_overrides[deps.get_speech_capture] = lambda: speech
    app.dependency_overrides[deps.get_session_registry] = lambda: registry
    app.dependency_overrides[deps.get_identity_provider] = FakeIdentityProvider
    return TestClient(app)


def start(client, journey="new_patient") -> str:
    response = client.post("/check-in/sessions", json={"journey": journey})
    assert response.status_code == 201
    return response.json()["data"]["session_id"]


class TestNewPatientSession:
    def test_full_registration_and_report(self, client):
        session_id = start(client)

        response = client.post(f"/check-in/sessions/{session_id}/register", json=REGISTRATION)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["session"]["state"] == "analyzed"
        assert body["data"]["session"]["analysis"]["specialty"] == "general_medicine"

        response = client.post(f"/check-in/sessions/{session_id}/report")
        assert response.status_code == 200
        key = response.json()["data"]["session"]["artifact_key"]
        assert response.json()["data"]["notice"]["message"] == "Report generated successfully!"

        report = client.get(f"/reports/{key}")
        assert report.status_code == 200
        assert "Name: Maria Lopez" in report.text

    def test_missing_fields_return_422_with_snapshot(self, client, patients):
        session_id = start(client)

        response = client.post(
            f"/check-in/sessions/{session_id}/register", json={**REGISTRATION, "phone": ""}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"]["session"]["state"] == "idle"
        assert patients.create_calls == 0

    def test_store_failure_returns_502(self, client, patients):
        patients.fail_create = True
        session_id = start(client)

        response = client.post(f"/check-in/sessions/{session_id}/register", json=REGISTRATION)

        assert response.status_code == 502
        assert response.json()["message"] == "We couldn't complete your check-in. Please try again."

    def test_report_before_analysis_conflicts(self, client):
        session_id = start(client)

        response = client.post(f"/check-in/sessions/{session_id}/report")

        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_TRANSITION"


class TestReturningPatientSession:
    def test_verify_and_quick_check_in(self, client, analysis_service):
        session_id = start(client, "returning_patient")

        missing = client.post(f"/check-in/sessions/{session_id}/verify", json={"patient_id": "0000"})
        assert missing.status_code == 404
        assert missing.json()["details"]["session"]["state"] == "identity_pending"

        verified = client.post(f"/check-in/sessions/{session_id}/verify", json={"patient_id": "1234"})
        assert verified.status_code == 200
        assert verified.json()["message"] == "Welcome back, John Doe!"

        analyzed = client.post(
            f"/check-in/sessions/{session_id}/symptoms",
            json={"description": LONG_DESCRIPTION, "urgency": "urgent"},
        )
        assert analyzed.status_code == 200
        assert analyzed.json()["data"]["session"]["state"] == "analyzed"
        assert len(analysis_service.calls) == 1

    def test_reset_returns_to_identity_pending(self, client):
        session_id = start(client, "returning_patient")
        client.post(f"/check-in/sessions/{session_id}/verify", json={"patient_id": "1234"})

        response = client.post(f"/check-in/sessions/{session_id}/reset")

        assert response.status_code == 200
        assert response.json()["data"]["state"] == "identity_pending"
        assert response.json()["data"]["patient"] is None


class TestSessionLifecycle:
    def test_unknown_session_is_404(self, client):
        response = client.get("/check-in/sessions/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_delete_session(self, client):
        session_id = start(client)

        assert client.delete(f"/check-in/sessions/{session_id}").status_code == 200
        assert client.get(f"/check-in/sessions/{session_id}").status_code == 404

    def test_request_id_is_echoed(self, client):
        response = client.get("/check-in/sessions/missing", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"
        assert response.json()["request_id"] == "req-42"


class TestDictation:
    def test_speech_unavailable(self, client):
        session_id = start(client)

        response = client.post(
            f"/check-in/sessions/{session_id}/dictation/symptoms",
            files={"audio": ("clip.wav", b"RIFF0000", "audio/wav")},
        )

        assert response.status_code == 503
        assert response.json()["message"] == "Speech recognition is not supported in this runtime."
        assert response.json()["details"]["session"]["active_dictation"] is None

    def test_transcript_appended_to_draft(self, client, speech):
        speech._recognizer = FakeRecognizer(text="Sore throat")
        session_id = start(client)

        response = client.post(
            f"/check-in/sessions/{session_id}/dictation/symptoms",
            files={"audio": ("clip.wav", b"RIFF0000", "audio/wav")},
        )

        assert response.status_code == 200
        assert response.json()["data"]["session"]["drafts"] == {"symptoms": "Sore throat"}


class TestPatients:
    def test_lookup_seeded_patient(self, client):
        response = client.get("/patients/5678")
        assert response.status_code == 200
        assert response.json()["data"]["last_name"] == "Smith"

    def test_lookup_missing_patient(self, client):
        assert client.get("/patients/0000").status_code == 404

    def test_create_patient(self, client):
        payload = {k: v for k, v in REGISTRATION.items() if k not in ("symptoms", "appointment_type")}
        response = client.post("/patients", json=payload)

        assert response.status_code == 201
        assert response.json()["data"]["existing_conditions"] == ["Asthma"]

    def test_create_patient_rejects_bad_date(self, client):
        payload = {"first_name": "A", "last_name": "B", "phone": "1", "date_of_birth": "02/06/1985"}
        response = client.post("/patients", json=payload)

        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_INPUT"


class TestAuth:
    def test_sign_in(self, client):
        response = client.post("/auth/sign-in", json={"email": "nurse@example.com", "password": "secret"})
        assert response.status_code == 200
        assert response.json()["data"]["access_token"] == "at"

    def test_provider_error_status_passed_through(self, client):
        response = client.post("/auth/sign-in", json={"email": "nurse@example.com", "password": "nope"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid login credentials"

    def test_user_requires_bearer_token(self, client):
        assert client.get("/auth/user").status_code == 401
        response = client.get("/auth/user", headers={"Authorization": "Bearer abc"})
        assert response.json()["data"]["token"] == "abc"

    def test_refresh_session(self, client):
        response = client.post("/auth/session", json={"refresh_token": "rt"})
        assert response.json()["data"]["access_token"] == "fresh"
