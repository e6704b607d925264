"""
Recap ingestion schemas.

POST /analyze-day → RecapRequest → RecapResponse
"""
from __future__ import annotations

import datetime as dt
from typing import Annotated, Optional

from pydantic import Field, field_validator

from cadence.schemas.common import CamelModel
from cadence.schemas.day import EventOut, MetricsOut

TRANSCRIPT_MAX_LENGTH = 20_000


class RecapRequest(CamelModel):
    """A free-form recap (voice transcript or typed text) for one date."""

    date: dt.date = Field(
        description="Calendar date the recap is about (YYYY-MM-DD).",
        examples=["2025-01-11"],
    )
    transcript: Annotated[str, Field(
        min_length=1,
        max_length=TRANSCRIPT_MAX_LENGTH,
        description="Raw recap text. Stripped of leading/trailing whitespace.",
        examples=["woke up at 07:00, slept 8 hours, studied 09:00-12:00"],
    )]
    now_local_time: Optional[str] = Field(
        default=None,
        pattern=r"^([01]\d|2[0-3]):[0-5]\d$",
        description='Local wall-clock time ("HH:MM") when the recap was sent.',
        examples=["14:05"],
    )

    @field_validator("transcript", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("transcript must not be empty after stripping whitespace")
        return stripped


class RecapResponse(CamelModel):
    day_id: int
    date: str
    events: list[EventOut]
    summary: Optional[str] = None
    metrics: MetricsOut
    suggestions: list[str]
    transcript: list[str] = Field(description="Full recap history for the date, oldest first.")
