import json
from datetime import date

from jtw.models import Alias, ParseContext
from jtw.prompt import build_prompt, recent_workdays

FRIDAY = date(2024, 5, 31)
SUNDAY = date(2024, 6, 2)


def _context(**overrides):
    base = {"project_key": "PROJ"}
    base.update(overrides)
    return ParseContext(**base)


def test_recent_workdays_ending_on_friday():
    days = recent_workdays(FRIDAY, 5)
    assert [d.isoformat() for d in days] == [
        "2024-05-27",
        "2024-05-28",
        "2024-05-29",
        "2024-05-30",
        "2024-05-31",
    ]


def test_recent_workdays_skip_the_weekend():
    days = recent_workdays(SUNDAY, 3)
    assert [d.isoformat() for d in days] == ["2024-05-29", "2024-05-30", "2024-05-31"]
    assert all(d.weekday() < 5 for d in days)


def test_current_date_and_weekday_are_stated():
    prompt = build_prompt("today meeting 1h", _context(), FRIDAY)
    assert "Current date: 2024-05-31 (Friday)" in prompt


def test_project_key_and_recent_tasks():
    prompt = build_prompt("x", _context(recent_tasks=["PROJ-7", "PROJ-9"]), FRIDAY)
    assert "Project key: PROJ" in prompt
    assert "Recent tasks: PROJ-7, PROJ-9" in prompt


def test_no_recent_tasks_and_no_aliases():
    prompt = build_prompt("x", _context(), FRIDAY)
    assert "Recent tasks: none" in prompt
    assert "(no aliases defined yet)" in prompt


def test_aliases_listed_with_descriptions():
    aliases = [
        Alias(keyword="созвоны", task="PROJ-100", description="daily calls"),
        Alias(keyword="review", task="PROJ-200"),
    ]
    prompt = build_prompt("x", _context(aliases=aliases), FRIDAY)
    assert '- "созвоны" → PROJ-100 (daily calls)' in prompt
    assert '- "review" → PROJ-200' in prompt
    assert "MEANING" in prompt


def test_examples_use_dates_computed_from_today():
    prompt = build_prompt("x", _context(), FRIDAY)
    # yesterday example
    assert '"date":"2024-05-30"' in prompt
    # the week example spans Monday to Friday of the current week
    for day in ("2024-05-27", "2024-05-28", "2024-05-29"):
        assert f'"date":"{day}"' in prompt
    assert '"date":"2024-05-25"' not in prompt


def test_json_only_instruction_and_period_rules():
    prompt = build_prompt("x", _context(), FRIDAY)
    assert "Respond with ONLY a JSON array" in prompt
    assert "PERIODS" in prompt
    assert "skipping Saturday and Sunday" in prompt
    assert "Never invent task keys" in prompt


def test_user_input_is_quoted_last():
    text = 'неделю созвоны "каждый" день по 1.5 часа'
    prompt = build_prompt(text, _context(), FRIDAY)
    assert prompt.endswith(f"User input: {json.dumps(text, ensure_ascii=False)}")


def test_prompt_is_deterministic():
    context = _context(aliases=[Alias(keyword="calls", task="PROJ-1")], recent_tasks=["PROJ-2"])
    assert build_prompt("a", context, FRIDAY) == build_prompt("a", context, FRIDAY)
