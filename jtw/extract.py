"""Locate, decode and validate the JSON array an AI model answers with.

The model output is treated as untrusted: the first element that breaks the
entry contract aborts the whole extraction, so a batch is either complete or
rejected.
"""
import json
import logging
import re

from pydantic import BaseModel, ValidationError, field_validator

from .config import TASK_KEY_PATTERN
from .errors import (
    InvalidActivity,
    InvalidDate,
    InvalidHours,
    InvalidTask,
    MalformedResponse,
)
from .models import WorklogEntry

logger = logging.getLogger(__name__)

FENCED_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
BARE_ARRAY = re.compile(r"\[[\s\S]*\]")
TASK_KEY = re.compile(TASK_KEY_PATTERN, re.ASCII)
ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

_FIELD_ERRORS = {
    "activity": InvalidActivity,
    "task": InvalidTask,
    "hours": InvalidHours,
    "date": InvalidDate,
}


class ExtractedEntry(BaseModel):
    # Field order is the order errors are reported in.
    activity: str
    task: str | None = None
    hours: float
    date: str

    # --- validators ---------------------------------------------------------
    @field_validator("activity", mode="before")
    @classmethod
    def non_empty_activity(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"Invalid activity: {v!r}")
        return v

    @field_validator("task", mode="before")
    @classmethod
    def task_key_shape(cls, v):
        if v is None or v == "null":
            return None
        if not isinstance(v, str) or not TASK_KEY.fullmatch(v):
            raise ValueError(f"Invalid task key: {v!r}")
        return v

    @field_validator("hours", mode="before")
    @classmethod
    def hours_in_range(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"Invalid hours: {v!r}")
        if not 0 < v <= 24:
            raise ValueError(f"Invalid hours: {v!r}")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def iso_date(cls, v):
        if not isinstance(v, str) or not ISO_DATE.fullmatch(v):
            raise ValueError(f"Invalid date: {v!r}")
        return v


def validate_entry(raw: object) -> WorklogEntry:
    """Check one decoded element and turn it into a WorklogEntry."""
    if not isinstance(raw, dict):
        raise MalformedResponse(f"Entry is not an object: {raw!r}")
    try:
        checked = ExtractedEntry.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = first["loc"][0] if first["loc"] else ""
        error_cls = _FIELD_ERRORS.get(field, MalformedResponse)
        if first["type"] == "missing":
            raise error_cls(f"Invalid {field}: missing") from exc
        cause = first.get("ctx", {}).get("error")
        raise error_cls(str(cause) if cause else first["msg"]) from exc
    return WorklogEntry(
        task=checked.task,
        activity=checked.activity,
        hours=checked.hours,
        date=checked.date,
    )


def locate_array(text: str) -> str:
    match = FENCED_BLOCK.search(text)
    if match:
        return match.group(1)
    match = BARE_ARRAY.search(text)
    if match:
        return match.group(0)
    raise MalformedResponse("AI did not return a JSON array")


def extract(raw_text: str) -> list[WorklogEntry]:
    payload = locate_array(raw_text or "")
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"AI returned invalid JSON: {exc.msg}") from exc
    if not isinstance(data, list):
        raise MalformedResponse("AI response is not an array")
    logger.debug("Decoded %d raw entries from AI response", len(data))
    return [validate_entry(item) for item in data]
