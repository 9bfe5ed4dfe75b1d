import json

import pytest

from jtw.errors import (
    InvalidActivity,
    InvalidDate,
    InvalidHours,
    InvalidTask,
    MalformedResponse,
)
from jtw.extract import extract, locate_array, validate_entry


def _entry(**overrides):
    base = {"activity": "development", "task": "PROJ-123", "hours": 3, "date": "2024-05-30"}
    base.update(overrides)
    return base


def test_valid_entry_passes_through():
    entry = validate_entry(_entry())
    assert entry.task == "PROJ-123"
    assert entry.activity == "development"
    assert entry.hours == 3
    assert entry.date == "2024-05-30"


@pytest.mark.parametrize("hours", [24, 0.25, 1e-6])
def test_hours_upper_and_lower_bounds_accepted(hours):
    assert validate_entry(_entry(hours=hours)).hours == hours


@pytest.mark.parametrize("hours", [0, -1, 24.0001, "3", True, None, float("nan")])
def test_hours_out_of_range_or_wrong_type_rejected(hours):
    with pytest.raises(InvalidHours):
        validate_entry(_entry(hours=hours))


@pytest.mark.parametrize("task", [None, "null"])
def test_missing_task_normalised_to_none(task):
    assert validate_entry(_entry(task=task)).task is None


@pytest.mark.parametrize("task", ["proj-1", "PROJ123", "PROJ-", "-1", 123])
def test_bad_task_key_rejected(task):
    with pytest.raises(InvalidTask):
        validate_entry(_entry(task=task))


@pytest.mark.parametrize("activity", ["", "   ", None, 5])
def test_blank_activity_rejected(activity):
    with pytest.raises(InvalidActivity):
        validate_entry(_entry(activity=activity))


@pytest.mark.parametrize("value", ["30.05.2024", "2024-5-30", "yesterday", None])
def test_date_must_be_iso(value):
    with pytest.raises(InvalidDate):
        validate_entry(_entry(date=value))


def test_missing_field_reported_by_name():
    raw = _entry()
    del raw["hours"]
    with pytest.raises(InvalidHours, match="missing"):
        validate_entry(raw)


def test_non_object_element_is_malformed():
    with pytest.raises(MalformedResponse):
        validate_entry(["PROJ-1", 2])


def test_validation_errors_are_malformed_responses():
    with pytest.raises(MalformedResponse):
        validate_entry(_entry(hours=100))


def test_fenced_block_wins_over_other_brackets():
    text = 'Sure [see below]:\n```json\n[{"a": 1}]\n```\nDone.'
    assert locate_array(text) == '[{"a": 1}]'


def test_bare_array_located_inside_prose():
    text = 'Here you go: [{"a": 1}] hope that helps'
    assert locate_array(text) == '[{"a": 1}]'


def test_no_array_at_all():
    with pytest.raises(MalformedResponse, match="JSON array"):
        extract("I could not understand the request")


def test_invalid_json_inside_array():
    with pytest.raises(MalformedResponse, match="invalid JSON"):
        extract("[{activity: 'x'}]")


def test_fenced_object_is_not_an_array():
    with pytest.raises(MalformedResponse, match="not an array"):
        extract('```json\n{"activity": "x"}\n```')


def test_empty_array_yields_no_entries():
    assert extract("[]") == []


def test_first_bad_element_rejects_whole_batch():
    payload = json.dumps([_entry(), _entry(hours=30), _entry(task="bad")])
    with pytest.raises(InvalidHours):
        extract(payload)


def test_fenced_response_with_null_task():
    text = "```json\n" + json.dumps([_entry(task=None, activity="meeting", hours=1)]) + "\n```"
    [entry] = extract(text)
    assert entry.task is None
    assert entry.activity == "meeting"


def test_week_of_calls_expands_to_five_workdays():
    # Canned answer for "неделю созвоны каждый день по 1.5 часа" asked on Friday 2024-05-31
    days = ["2024-05-27", "2024-05-28", "2024-05-29", "2024-05-30", "2024-05-31"]
    response = json.dumps(
        [{"activity": "созвоны", "task": None, "hours": 1.5, "date": d} for d in days],
        ensure_ascii=False,
    )
    entries = extract(response)
    assert len(entries) == 5
    assert [e.date for e in entries] == days
    assert len({(e.activity, e.date) for e in entries}) == 5
    assert all(e.hours == 1.5 and e.task is None for e in entries)


def test_untagged_fence_does_not_shadow_a_later_array():
    text = "Note:\n```\nno code here\n```\n" + json.dumps([_entry()])
    [entry] = extract(text)
    assert entry.task == "PROJ-123"


def test_fence_in_another_language_is_skipped():
    text = "```python\nprint('hi')\n```\n" + json.dumps([_entry(hours=2)])
    assert [e.hours for e in extract(text)] == [2]


def test_trailing_newline_in_date_rejected():
    with pytest.raises(InvalidDate):
        validate_entry(_entry(date="2024-05-30\n"))


def test_trailing_newline_in_task_rejected():
    with pytest.raises(InvalidTask):
        validate_entry(_entry(task="PROJ-1\n"))


def test_non_ascii_digits_rejected():
    with pytest.raises(InvalidTask):
        validate_entry(_entry(task="PROJ-١٢"))
    with pytest.raises(InvalidDate):
        validate_entry(_entry(date="٢٠٢٤-05-30"))
