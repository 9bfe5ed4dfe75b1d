"""Build the extraction prompt sent to the completion service."""
import json
from datetime import date, timedelta

from .models import ParseContext

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def recent_workdays(current_date: date, count: int) -> list[date]:
    """Return the last `count` Monday-Friday dates up to current_date, oldest first."""
    days: list[date] = []
    day = current_date
    while len(days) < count:
        if day.weekday() < 5:
            days.append(day)
        day -= timedelta(days=1)
    return list(reversed(days))


def _example(entries: list[dict]) -> str:
    return json.dumps(entries, ensure_ascii=False, separators=(",", ":"))


def _aliases_text(context: ParseContext) -> str:
    if not context.aliases:
        return "  (no aliases defined yet)"
    lines = []
    for alias in context.aliases:
        suffix = f" ({alias.description})" if alias.description else ""
        lines.append(f'  - "{alias.keyword}" → {alias.task}{suffix}')
    return "\n".join(lines)


def build_prompt(user_input: str, context: ParseContext, current_date: date) -> str:
    key = context.project_key
    today = current_date.isoformat()
    yesterday = (current_date - timedelta(days=1)).isoformat()
    week = recent_workdays(current_date, 5)
    last_three = recent_workdays(current_date, 3)
    recent = ", ".join(context.recent_tasks) if context.recent_tasks else "none"

    single_example = _example(
        [{"activity": "разработка", "task": f"{key}-123", "hours": 3, "date": yesterday}]
    )
    meeting_example = _example(
        [{"activity": "meeting", "task": None, "hours": 1, "date": today}]
    )
    week_example = _example(
        [{"activity": "созвоны", "task": None, "hours": 1.5, "date": d.isoformat()} for d in week]
    )
    review_example = _example(
        [{"activity": "review", "task": None, "hours": 2, "date": d.isoformat()} for d in last_three]
    )

    return f"""
You are a worklog parser for Jira time tracking.

Project key: {key}

Available task aliases (match by MEANING, not literal text):
{_aliases_text(context)}

Recent tasks: {recent}

Current date: {today} ({WEEKDAYS[current_date.weekday()]}). Calculate every relative date from this date,
never from a date that appears in the examples below.

Rules:
1. If the user gives an explicit task key ({key}-XXX), use it as "task".
2. If an activity matches an alias by meaning (e.g. "созванивался" → "созвоны", "had calls" → "calls"),
   put that alias's task key in "task".
3. If you are not confident which task fits, set "task" to null. Never invent task keys.
4. Dates may be Russian or English and relative: вчера / yesterday, сегодня / today,
   позавчера / the day before yesterday, weekday names refer to the most recent such day.
5. Time units: hours (ч, h, час, часа, часов, hour, hours), minutes (м, m, мин, минут, min, minutes).
   Convert minutes to fractional hours (30m = 0.5).
6. "hours" is a number greater than 0 and at most 24. "date" is YYYY-MM-DD.
7. "activity" describes what was done, in the user's own language.
8. PERIODS: when the input names a span ("неделю", "this past week", "последние N дней", "last N days",
   "с 20 числа три дня подряд", "three days in a row from the 20th"):
   - create one separate entry per WORKDAY (Monday to Friday) inside the span, skipping Saturday and Sunday;
   - "неделю" / "a week" / "this past week" means the last 5 workdays up to and including today;
   - "последние N дней" / "last N days" means the last N workdays up to and including today;
   - if a per-day amount is given ("каждый день по 1.5 часа", "1.5 hours every day") use it for every entry;
   - if a total is given ("10 hours over the week") split it equally across the workdays;
   - never emit two entries with the same activity and date.

Respond with ONLY a JSON array. No prose, no explanations, no markdown. Each element:
{{"activity": "description of work", "task": "{key}-XXX" or null, "hours": number, "date": "YYYY-MM-DD"}}

Examples (dates already computed from the current date):
Input: "вчера {key}-123 разработка 3ч"
Output: {single_example}

Input: "today meeting 1h"
Output: {meeting_example}

Input: "неделю созвоны каждый день по 1.5 часа"
Output: {week_example}

Input: "last 3 days review 2 hours each"
Output: {review_example}

User input: {json.dumps(user_input, ensure_ascii=False)}
""".strip()
