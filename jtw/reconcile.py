"""Fill in tasks the AI left empty, asking once per distinct activity."""
import logging
import re
from typing import NamedTuple, Sequence

from . import display
from .config import TASK_KEY_PATTERN
from .models import Alias, WorklogEntry

logger = logging.getLogger(__name__)

TASK_KEY = re.compile(TASK_KEY_PATTERN, re.ASCII)
MANUAL_ENTRY_VALUE = "__manual_entry__"
RECENT_CHOICES = 5


class TaskChoice(NamedTuple):
    task: str
    alias: str | None = None


def validate_task_key(text: str) -> bool | str:
    return True if TASK_KEY.fullmatch(text.strip().upper()) else "Format: PROJ-123"


def task_choices(aliases: Sequence[Alias], recent_tasks: Sequence[str]) -> list[tuple[str, object]]:
    choices: list[tuple[str, object]] = [
        (f"{task} (recent)", TaskChoice(task)) for task in recent_tasks[:RECENT_CHOICES]
    ]
    choices += [
        (f"{alias.task} ({alias.keyword})", TaskChoice(alias.task, alias.keyword))
        for alias in aliases
    ]
    choices.append(("Enter manually", MANUAL_ENTRY_VALUE))
    return choices


def reconcile(
    entries: list[WorklogEntry],
    aliases: Sequence[Alias],
    recent_tasks: Sequence[str],
    prompter,
    store,
) -> dict[str, str]:
    """Assign a task to every entry that has none, mutating entries in place.

    Entries sharing the exact same activity text are resolved by a single
    question; the answer is reused for the rest of the batch. Returns the
    activity -> task mapping built along the way.
    """
    resolved: dict[str, str] = {}
    choices = task_choices(aliases, recent_tasks)

    for entry in entries:
        if entry.task:
            continue
        if entry.activity in resolved:
            entry.task = resolved[entry.activity]
            continue

        picked = prompter.select(f'No task found for "{entry.activity}". Choose:', choices)
        if picked == MANUAL_ENTRY_VALUE:
            task = prompter.text("Task key:", validate=validate_task_key).strip().upper()
        else:
            task = picked.task
            if picked.alias:
                store.increment_alias_usage(picked.alias)

        entry.task = task
        resolved[entry.activity] = task
        logger.debug("Resolved %r -> %s", entry.activity, task)

        if prompter.confirm(f'Save "{entry.activity}" as an alias for {task}?', default=False):
            store.save_alias(entry.activity, task)
            display.success(f'Alias saved: "{entry.activity}" → {task}\n')

    return resolved
