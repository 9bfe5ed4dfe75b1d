import pytest

from jtw import display
from jtw.errors import (
    ConfigMissing,
    EmptyExtraction,
    HumanCancellation,
    InvalidHours,
    TaskNotFound,
    TransportFailure,
)
from jtw.models import WorklogEntry


def test_format_date():
    assert display.format_date("2026-10-19") == "19 Oct 2026"
    assert display.format_date("") == "—"
    assert display.format_date("someday") == "someday"


def test_preview_aligns_rows_and_totals():
    entries = [
        WorklogEntry(task="PROJ-1", activity="development", hours=3, date="2024-05-30"),
        WorklogEntry(task="PROJ-12", activity="calls", hours=1.5, date="2024-05-31"),
    ]
    lines = display.render_preview(entries).splitlines()
    assert lines[0].startswith("  30 May 2024  PROJ-1 ")
    assert lines[0].endswith("3h")
    assert lines[1].endswith("1.5h")
    assert len(lines[0]) + 2 == len(lines[1])
    assert lines[-1] == "  Total: 4.5h"


@pytest.mark.parametrize(
    "exc, code, text",
    [
        (KeyboardInterrupt(), 0, "Cancelled"),
        (HumanCancellation(), 0, "Cancelled"),
        (ConfigMissing(), 1, "jt setup"),
        (TaskNotFound(["PROJ-9"]), 1, "Tasks not found: PROJ-9"),
        (EmptyExtraction("nothing"), 1, "Could not extract"),
        (InvalidHours("Invalid hours: 30"), 1, "Invalid hours: 30"),
        (TransportFailure("Jira is down", hint="Check the VPN"), 1, "Check the VPN"),
        (RuntimeError("kaboom"), 1, "open Jira in a browser"),
    ],
)
def test_handle_error_codes(capsys, exc, code, text):
    assert display.handle_error(exc) == code
    captured = capsys.readouterr()
    assert text in captured.out + captured.err
