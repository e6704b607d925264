"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
import pytest
from sqlalchemy.exc import SQLAlchemyError

from cadence.core.errors import (
    ConfigurationError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from conftest import make_candidate


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_validation_error(self):
        err = ValidationError("Missing transcript.", field="transcript")
        assert err.http_status == 422
        assert err.code == "VALIDATION_ERROR"
        d = err.to_dict()
        assert d["details"] == {"retryable": False, "field": "transcript"}

    def test_upstream_error(self):
        err = UpstreamError("Summarizer timed out.", detail="read timeout")
        assert err.http_status == 502
        assert err.code == "UPSTREAM_ERROR"
        assert err.details["retryable"] is True
        assert err.details["detail"] == "read timeout"

    def test_configuration_error(self):
        err = ConfigurationError("OPENAI_API_KEY")
        assert isinstance(err, UpstreamError)
        assert err.http_status == 500
        assert err.code == "CONFIGURATION_ERROR"
        assert "OPENAI_API_KEY" in err.message
        assert err.details == {"retryable": False, "setting": "OPENAI_API_KEY"}

    def test_persistence_error(self):
        err = PersistenceError("Failed to save.")
        assert err.http_status == 500
        assert err.code == "PERSISTENCE_ERROR"
        assert err.details == {"retryable": True}

    def test_not_found_error(self):
        err = NotFoundError("Day", 42)
        assert err.http_status == 404
        assert err.message == "Day 42 not found."
        assert err.details == {"resource": "Day", "id": "42"}

    def test_unauthorized_to_dict_without_details(self):
        d = UnauthorizedError().to_dict()
        assert d == {"code": "UNAUTHORIZED", "message": "Unauthorized"}


# ---------------------------------------------------------------------------
# HTTP envelopes
# ---------------------------------------------------------------------------

class TestErrorResponses:
    def test_missing_owner_is_configuration_error(self, client, monkeypatch):
        from cadence.core import auth
        from cadence.main import app

        app.dependency_overrides.pop(auth.get_owner_id)
        monkeypatch.setattr(auth.settings, "OWNER_ID", "")
        r = client.get("/days")
        assert r.status_code == 500
        body = r.json()
        assert body["code"] == "CONFIGURATION_ERROR"
        assert body["details"]["setting"] == "OWNER_ID"

    def test_persistence_error_envelope(self, client, summarizer, monkeypatch):
        from cadence.services import days as day_store

        def failing_write(*args, **kwargs):
            raise SQLAlchemyError("connection reset")

        monkeypatch.setattr(day_store, "write_day", failing_write)
        summarizer.queue(make_candidate("2025-07-01"))
        r = client.post("/analyze-day", json={"date": "2025-07-01", "transcript": "recap"})
        assert r.status_code == 500
        body = r.json()
        assert body["code"] == "PERSISTENCE_ERROR"
        assert body["details"]["retryable"] is True

    @pytest.mark.parametrize("payload", [
        {},
        {"date": "not-a-date", "transcript": "x"},
        {"date": "2025-01-01", "transcript": ""},
    ])
    def test_request_validation_envelope(self, client, payload):
        r = client.post("/analyze-day", json=payload)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["message"] == "Request validation failed."
        assert isinstance(body["details"]["errors"], list)
        assert body["details"]["retryable"] is False
