"""
Tests for the exception classes and the error envelope.
"""
from nivra.core.errors import (
    CorruptPersistedStateError,
    DateComputationError,
    NoMoodSelectedError,
)
from nivra.schemas.common import ErrorResponse


class TestExceptionClasses:
    def test_no_mood_selected(self):
        err = NoMoodSelectedError()
        assert err.http_status == 422
        assert err.code == "NO_MOOD_SELECTED"
        assert err.to_dict() == {
            "code": "NO_MOOD_SELECTED",
            "message": "Please select a mood before saving.",
        }

    def test_no_mood_selected_echoes_input(self):
        err = NoMoodSelectedError(received="grumpy")
        assert err.to_dict()["details"] == {"received": "grumpy"}

    def test_corrupt_state(self):
        err = CorruptPersistedStateError("nivra_moods", raw="[x")
        assert err.code == "CORRUPT_PERSISTED_STATE"
        assert "nivra_moods" in err.message
        assert err.details == {"slot": "nivra_moods", "raw": "[x"}

    def test_date_computation(self):
        err = DateComputationError("32 Smarch")
        assert err.code == "DATE_COMPUTATION_FAILURE"
        assert err.details["raw"] == "32 Smarch"


class TestEnvelope:
    def test_validation_envelope_lists_fields(self, client):
        r = client.post("/journal/mood", json={})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = [e["field"] for e in body["details"]["errors"]]
        assert "mood" in fields

    def test_no_mood_envelope(self, client):
        body = client.post("/journal/entries", json={"mood": "bored"}).json()
        assert body["code"] == "NO_MOOD_SELECTED"
        assert body["details"]["received"] == "bored"

    def test_no_mood_envelope_matches_schema(self, client):
        r = client.post("/journal/entries", json={"note": "no mood"})
        envelope = ErrorResponse.model_validate(r.json())
        assert envelope.code == "NO_MOOD_SELECTED"
        assert envelope.message == "Please select a mood before saving."

    def test_validation_envelope_matches_schema(self, client):
        r = client.post("/journal/mood", json={"mood": "hangry"})
        envelope = ErrorResponse.model_validate(r.json())
        assert envelope.code == "VALIDATION_ERROR"
        assert envelope.details["errors"][0]["field"] == "mood"

    def test_openapi_documents_error_envelope(self, client):
        schema = client.get("/openapi.json").json()
        ref = schema["paths"]["/journal/entries"]["post"]["responses"]["422"]["content"][
            "application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")
