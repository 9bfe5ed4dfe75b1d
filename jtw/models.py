"""Domain models shared by the parser, the store and the Jira client."""
from typing import Literal

from pydantic import BaseModel, Field


class WorklogEntry(BaseModel):
    task: str | None = None
    activity: str
    hours: float
    date: str  # YYYY-MM-DD, empty inside templates


class HistoryEntry(WorklogEntry):
    source: Literal["ai", "template", "manual"] = "ai"
    logged_at: str | None = None


class Alias(BaseModel):
    keyword: str
    task: str
    description: str | None = None
    usage_count: int = 0
    last_used_at: str | None = None
    created_at: str | None = None


class Template(BaseModel):
    name: str
    entries: list[WorklogEntry] = Field(default_factory=list)
    usage_count: int = 0
    last_used_at: str | None = None
    created_at: str | None = None

    @property
    def total_hours(self) -> float:
        return sum(entry.hours for entry in self.entries)


class ParseContext(BaseModel):
    project_key: str
    aliases: list[Alias] = Field(default_factory=list)
    recent_tasks: list[str] = Field(default_factory=list)


# --- Jira side ---------------------------------------------------------------
class JiraIssue(BaseModel):
    key: str
    summary: str = ""
    assignee: str | None = None
    status: str = ""


class NotAssigned(BaseModel):
    key: str
    assignee: str


class ValidationResult(BaseModel):
    valid: list[JiraIssue] = Field(default_factory=list)
    invalid: list[str] = Field(default_factory=list)
    not_assigned: list[NotAssigned] = Field(default_factory=list)


class FailedEntry(BaseModel):
    entry: WorklogEntry
    error: str


class BatchResult(BaseModel):
    success: list[WorklogEntry] = Field(default_factory=list)
    failed: list[FailedEntry] = Field(default_factory=list)
