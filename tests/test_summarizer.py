"""
Tests for the summarizer boundary: output validation and error mapping.

The OpenAI client is replaced by a SimpleNamespace exposing
chat.completions.create, so no network access is needed.
"""
import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from cadence.core.errors import ConfigurationError, UpstreamError
from cadence.models.event import EventCategory
from cadence.services import summarizer as summarizer_module
from cadence.services.summarizer import (
    OpenAISummarizer,
    SummarizerRequest,
    get_summarizer,
    parse_candidate_day,
)
from conftest import ev, make_candidate


def _fake_client(content=None, error=None):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


def _request():
    return SummarizerRequest(date="2025-01-11", new_transcript="slept 23 to 7")


class TestParseCandidateDay:
    def test_valid_answer(self):
        raw = json.dumps(make_candidate("2025-01-11", [ev("Sleep", "sleep", "23:00", "07:00")]))
        candidate = parse_candidate_day(raw)
        assert candidate.date == "2025-01-11"
        assert candidate.events[0].category is EventCategory.sleep
        assert candidate.events[0].start_time == "23:00"
        assert candidate.metrics.sleep_hours == 8.0
        assert candidate.suggestions == ["Block phone during study"]

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty(self, raw):
        with pytest.raises(UpstreamError, match="empty"):
            parse_candidate_day(raw)

    def test_not_json(self):
        with pytest.raises(UpstreamError, match="invalid JSON"):
            parse_candidate_day("Sure! Here is your day: {")

    def test_not_an_object(self):
        with pytest.raises(UpstreamError, match="not an object"):
            parse_candidate_day("[1, 2, 3]")

    def test_missing_field(self):
        payload = make_candidate("2025-01-11")
        del payload["metrics"]
        with pytest.raises(UpstreamError, match="schema"):
            parse_candidate_day(json.dumps(payload))

    def test_unknown_category(self):
        payload = make_candidate("2025-01-11", [ev("Party", "fun", "20:00", "23:00")])
        with pytest.raises(UpstreamError) as exc:
            parse_candidate_day(json.dumps(payload))
        assert exc.value.details["retryable"] is True

    def test_malformed_times_are_accepted_here(self):
        payload = make_candidate("2025-01-11", [ev("Sleep", "sleep", "late", None)])
        candidate = parse_candidate_day(json.dumps(payload))
        assert candidate.events[0].start_time == "late"
        assert candidate.events[0].end_time is None


class TestSummarizerRequest:
    def test_user_message_first_recap(self):
        message = _request().user_message()
        assert "Date: 2025-01-11" in message
        assert "null" in message
        assert message.endswith("slept 23 to 7")
        assert "Current local time" not in message

    def test_user_message_includes_state_and_time(self):
        request = SummarizerRequest(
            date="2025-01-11",
            new_transcript="more",
            existing_state={"summary": "earlier"},
            now_local_time="21:30",
        )
        message = request.user_message()
        assert '"summary": "earlier"' in message
        assert "21:30" in message


class TestOpenAISummarizer:
    def test_success(self):
        client, calls = _fake_client(content=json.dumps(make_candidate("2025-01-11")))
        candidate = OpenAISummarizer(api_key="k", model="test-model", client=client).summarize(_request())

        assert candidate.summary == "Summary for 2025-01-11"
        [call] = calls
        assert call["model"] == "test-model"
        assert call["response_format"] == {"type": "json_object"}
        assert call["messages"][0]["role"] == "system"
        assert "slept 23 to 7" in call["messages"][1]["content"]

    def test_timeout(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client, _ = _fake_client(error=openai.APITimeoutError(request=request))
        with pytest.raises(UpstreamError, match="timed out"):
            OpenAISummarizer(api_key="k", client=client).summarize(_request())

    def test_connection_error(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client, _ = _fake_client(error=openai.APIConnectionError(request=request))
        with pytest.raises(UpstreamError, match="request failed"):
            OpenAISummarizer(api_key="k", client=client).summarize(_request())

    def test_unusable_completion(self):
        client, _ = _fake_client(content="not json at all")
        with pytest.raises(UpstreamError):
            OpenAISummarizer(api_key="k", client=client).summarize(_request())


class TestGetSummarizer:
    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(summarizer_module.settings, "OPENAI_API_KEY", "")
        with pytest.raises(ConfigurationError) as exc:
            get_summarizer()
        assert exc.value.details["setting"] == "OPENAI_API_KEY"
        assert exc.value.details["retryable"] is False

    def test_configured(self, monkeypatch):
        monkeypatch.setattr(summarizer_module.settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(summarizer_module.settings, "OPENAI_MODEL", "gpt-test")
        instance = get_summarizer()
        assert isinstance(instance, OpenAISummarizer)
        assert instance.model == "gpt-test"
