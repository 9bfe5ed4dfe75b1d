"""Shared fixtures and fakes for the jt test-suite.

The project root goes on sys.path so `import jtw` and `import client` work
even when the package is not installed in editable mode.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jtw.config import AIProviderKind, AppConfig  # noqa: E402
from jtw.errors import SubmissionFailure  # noqa: E402
from jtw.models import JiraIssue, NotAssigned, ValidationResult  # noqa: E402
from jtw.store import Store  # noqa: E402


class pick:
    """Scripted select answer matched by the choice title instead of its value."""

    def __init__(self, title: str):
        self.title = title


class FakePrompter:
    """Replays scripted answers in order and records every question asked.

    A validator that rejects an answer makes the fake move on to the next
    scripted answer, the way questionary re-asks until the input is valid.
    """

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.calls: list[tuple[str, str]] = []
        self.rejected: list[str] = []

    def _next(self, kind: str, message: str):
        self.calls.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def select(self, message, choices):
        choices = list(choices)
        answer = self._next("select", message)
        if isinstance(answer, pick):
            for title, value in choices:
                if title == answer.title:
                    return value
            raise AssertionError(f"No choice titled {answer.title!r} in {choices}")
        return answer

    def _validated(self, kind, message, validate):
        answer = self._next(kind, message)
        while validate is not None and validate(answer) is not True:
            self.rejected.append(answer)
            answer = self._next(kind, message)
        return answer

    def text(self, message, *, default="", validate=None):
        return self._validated("text", message, validate)

    def password(self, message, *, validate=None):
        return self._validated("password", message, validate)

    def confirm(self, message, *, default=True):
        return self._next("confirm", message)

    def asked(self, kind: str) -> list[str]:
        return [message for k, message in self.calls if k == kind]


class FakeTracker:
    """In-memory stand-in for JiraClient."""

    def __init__(self, *, invalid=(), owners=None, fail=None, recent=(), me="Me"):
        self.invalid = set(invalid)
        self.owners = dict(owners or {})
        self.fail = fail or (lambda entry: None)
        self.recent = list(recent)
        self.me = me
        self.validated: list[list[str]] = []
        self.submitted = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def test_connection(self):
        return True

    def validate_tasks(self, keys):
        self.validated.append(list(keys))
        result = ValidationResult()
        for key in dict.fromkeys(keys):
            if key in self.invalid:
                result.invalid.append(key)
                continue
            owner = self.owners.get(key, self.me)
            if owner != self.me:
                result.not_assigned.append(NotAssigned(key=key, assignee=owner))
            result.valid.append(JiraIssue(key=key, assignee=owner))
        return result

    def submit_worklog(self, entry):
        self.submitted.append(entry)
        error = self.fail(entry)
        if isinstance(error, BaseException):
            raise error

    def fetch_recent_tasks(self, limit=10):
        return self.recent[:limit]


def fail_for(*tasks, message="Worklog rejected"):
    return lambda entry: SubmissionFailure(message) if entry.task in tasks else None


@pytest.fixture
def store(tmp_path):
    return Store(tmp_path / "jtw" / "data.db")


@pytest.fixture
def config():
    return AppConfig(
        jira_url="https://jira.example.com",
        jira_username="me",
        jira_password="secret",
        project_key="PROJ",
        ai_provider=AIProviderKind.OPENAI,
        ai_api_key="sk-test",
    )


@pytest.fixture
def configured_store(store, config):
    store.save_config(config)
    return store
