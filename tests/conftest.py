"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests. Every test
gets its own owner id, so rows never leak between tests even though the
database is shared for the whole session. The summarizer is replaced by
FakeSummarizer, which replays canned answers.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_cadence.db")
os.environ.setdefault("OWNER_ID", "owner-default")
os.environ.setdefault("CLIENT_API_KEY", "test-client-key")
os.environ.setdefault("DASHBOARD_PASSWORD", "open-sesame")
os.environ.setdefault("SECRET_KEY", "test-secret")

import uuid
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cadence.core.auth import API_KEY_HEADER, get_owner_id
from cadence.db.base import Base, get_db
from cadence.main import app
from cadence.schemas.summarizer import CandidateDay
from cadence.services.summarizer import Summarizer, SummarizerRequest, get_summarizer

SQLITE_URL = "sqlite:///./test_cadence.db"
API_KEY = os.environ["CLIENT_API_KEY"]

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---------------------------------------------------------------------------
# Summarizer double
# ---------------------------------------------------------------------------

def make_candidate(
    day: str,
    events: list[dict] | None = None,
    sleep_hours: float = 8.0,
    **overrides: Any,
) -> dict:
    """A well-formed summarizer answer (camelCase, as the model returns it)."""
    payload = {
        "date": day,
        "events": events or [],
        "summary": f"Summary for {day}",
        "metrics": {
            "productiveHours": 4,
            "neutralHours": 3,
            "wastedHours": 2,
            "sleepHours": sleep_hours,
            "focusBlocks": 2,
            "contextSwitches": 5,
        },
        "suggestions": ["Block phone during study"],
    }
    payload.update(overrides)
    return payload


def ev(label: str, category: str, start: str | None, end: str | None, notes: str | None = None) -> dict:
    return {"label": label, "category": category, "startTime": start, "endTime": end, "notes": notes}


class FakeSummarizer(Summarizer):
    """Returns queued answers in order; a queued exception is raised instead."""

    def __init__(self):
        self.answers: list[Any] = []
        self.requests: list[SummarizerRequest] = []

    def queue(self, *answers: Any) -> "FakeSummarizer":
        self.answers.extend(answers)
        return self

    def summarize(self, request: SummarizerRequest) -> CandidateDay:
        self.requests.append(request)
        if not self.answers:
            raise AssertionError("FakeSummarizer has no queued answer")
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return CandidateDay.model_validate(answer)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def owner_id() -> str:
    return f"owner-{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture()
def anon_client(owner_id, summarizer):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_owner_id] = lambda: owner_id
    app.dependency_overrides[get_summarizer] = lambda: summarizer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def client(anon_client):
    anon_client.headers[API_KEY_HEADER] = API_KEY
    return anon_client
