"""
Summarizer boundary: free-text recap in, candidate structured day out.

The model is an external collaborator with no correctness guarantee. Every
answer is validated into a CandidateDay (see cadence/schemas/summarizer.py);
anything else becomes an UpstreamError so the caller writes nothing.

Public API
----------
SummarizerRequest                    request DTO
Summarizer.summarize(request)        → CandidateDay   (interface)
OpenAISummarizer                     chat-completions implementation
parse_candidate_day(raw)             → CandidateDay   (raises UpstreamError)
get_summarizer()                     FastAPI dependency
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import openai
import pydantic

from cadence.core.config import settings
from cadence.core.errors import ConfigurationError, UpstreamError
from cadence.schemas.summarizer import CandidateDay

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """
You are Cadence, a life optimization assistant with a strict "signal vs noise" mindset.

You are given a date (YYYY-MM-DD), the existing structured state for that day
(may be null) and a new recap or corrections from the user. Output the FINAL
updated structured state for that day as a single JSON object:

{
  "date": "YYYY-MM-DD",
  "events": [
    {
      "label": "string",
      "category": "productive" | "neutral" | "waste" | "sleep" | "untracked",
      "startTime": "HH:MM",
      "endTime": "HH:MM",
      "notes": "optional string"
    }
  ],
  "summary": "string",
  "metrics": {
    "productiveHours": number,
    "neutralHours": number,
    "wastedHours": number,
    "sleepHours": number,
    "focusBlocks": number,
    "contextSwitches": number
  },
  "suggestions": ["string"]
}

Categories:
- "productive": goal-directed work, study, training, deliberate planning.
- "neutral": necessary maintenance such as commuting, cooking, eating, chores, admin.
- "waste": entertainment, scrolling, games, killing time. When unsure between
  neutral and waste, choose waste.
- "sleep": night sleep and naps only.
- "untracked": fill for significant unexplained gaps; metrics must still assign
  that time to one of the other categories.

Rules:
1. Edit, don't reset: merge the new recap into the existing state, keep what is
   not contradicted, fix times the user corrects, insert new activities in place.
2. Sleep: if the user went to bed before midnight and woke up on this date, emit
   one sleep event from bedtime to wake time (startTime may be later than endTime).
   If they only report a bedtime tonight, end the sleep event at 23:59.
   Naps are separate sleep events.
3. Activities that continued past midnight into this date belong between 00:00
   and the mentioned time.
4. Interpret relative phrases ("just now", "the past hour") against the provided
   current local time, clamping at 00:00.
5. Metrics should roughly add to 24 hours. Suggestions must be concrete.
6. Respond with ONLY valid JSON, no commentary.
""".strip()


# ---------------------------------------------------------------------------
# Request DTO
# ---------------------------------------------------------------------------

@dataclass
class SummarizerRequest:
    date: str
    new_transcript: str
    existing_state: Optional[dict[str, Any]] = None
    now_local_time: Optional[str] = None

    def user_message(self) -> str:
        now_line = (
            f"Current local time when this recap was sent: {self.now_local_time}.\n"
            if self.now_local_time
            else ""
        )
        return (
            f"Date: {self.date}\n"
            + now_line
            + f"Existing structured day (may be null):\n{json.dumps(self.existing_state)}\n\n"
            + f"New recap or corrections:\n{self.new_transcript}"
        )


# ---------------------------------------------------------------------------
# Validation at the boundary
# ---------------------------------------------------------------------------

def parse_candidate_day(raw: Optional[str]) -> CandidateDay:
    """Validate the model's JSON text. Raises UpstreamError when unusable."""
    if not raw or not raw.strip():
        raise UpstreamError("Summarizer returned an empty completion.")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise UpstreamError("Summarizer returned invalid JSON.", detail=str(exc)) from exc
    if not isinstance(data, dict):
        raise UpstreamError("Summarizer returned JSON that is not an object.")
    try:
        return CandidateDay.model_validate(data)
    except pydantic.ValidationError as exc:
        raise UpstreamError(
            "Summarizer output does not match the day schema.",
            detail=str(exc),
        ) from exc


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

class Summarizer:
    """Turns a recap plus the existing day into a candidate day."""

    def summarize(self, request: SummarizerRequest) -> CandidateDay:
        raise NotImplementedError


class OpenAISummarizer(Summarizer):
    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1-mini",
        timeout: float = 60.0,
        client: Optional[openai.OpenAI] = None,
    ):
        self.model = model
        self.client = client or openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=1)

    def summarize(self, request: SummarizerRequest) -> CandidateDay:
        started = time.monotonic()
        logger.info("Summarizing recap for %s with model=%s", request.date, self.model)
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": request.user_message()},
                ],
            )
        except openai.APITimeoutError as exc:
            logger.warning("Summarizer timed out for %s", request.date)
            raise UpstreamError("Summarizer timed out.", detail=str(exc)) from exc
        except openai.OpenAIError as exc:
            logger.warning("Summarizer call failed for %s: %s", request.date, exc)
            raise UpstreamError("Summarizer request failed.", detail=str(exc)) from exc

        raw = completion.choices[0].message.content if completion.choices else None
        candidate = parse_candidate_day(raw)
        logger.info(
            "Summarizer returned %d events for %s in %.2fs",
            len(candidate.events), request.date, time.monotonic() - started,
        )
        return candidate


def get_summarizer() -> Summarizer:
    if not settings.OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY")
    return OpenAISummarizer(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        timeout=settings.SUMMARIZER_TIMEOUT_SECONDS,
    )
