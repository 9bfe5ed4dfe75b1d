"""Validate a resolved batch against Jira, preview it and log it."""
import logging
from typing import Literal, Sequence

from . import display
from .errors import HumanCancellation, JtwError, TaskNotFound
from .models import BatchResult, FailedEntry, HistoryEntry, WorklogEntry

logger = logging.getLogger(__name__)


class SubmissionCoordinator:
    def __init__(
        self,
        tracker,
        store,
        prompter,
        *,
        source: Literal["ai", "template", "manual"] = "ai",
    ):
        self.tracker = tracker
        self.store = store
        self.prompter = prompter
        self.source = source

    def run(self, entries: Sequence[WorklogEntry]) -> BatchResult:
        unresolved = [e.activity for e in entries if not e.task]
        if unresolved:
            raise JtwError(f"Entries without a task: {', '.join(unresolved)}")

        display.info("Checking tasks in Jira...\n")
        keys = list(dict.fromkeys(e.task for e in entries))
        validation = self.tracker.validate_tasks(keys)
        if validation.invalid:
            # Nothing is written when any key is unknown.
            raise TaskNotFound(validation.invalid)
        if validation.not_assigned:
            owners = ", ".join(f"{n.key} ({n.assignee})" for n in validation.not_assigned)
            display.warning(f"Tasks not assigned to you: {owners}")

        display.show_preview(entries)
        if not self.prompter.confirm("Log these entries?", default=True):
            raise HumanCancellation()
        return self.submit(entries)

    def submit(self, entries: Sequence[WorklogEntry]) -> BatchResult:
        """Log entries one by one; a failed entry never stops the rest.

        Successes are written to history even when an interrupt cuts the
        batch short, since Jira already holds them.
        """
        result = BatchResult()
        display.info(f"\nLogging {len(entries)} entries...\n")
        try:
            for index, entry in enumerate(entries, start=1):
                display.progress(index, len(entries), entry.task or "???")
                try:
                    self.tracker.submit_worklog(entry)
                except Exception as exc:
                    logger.warning("Worklog for %s failed: %s", entry.task, exc)
                    result.failed.append(FailedEntry(entry=entry, error=str(exc) or "Unknown error"))
                    display.progress_result(False)
                else:
                    result.success.append(entry)
                    display.progress_result(True)
        finally:
            if result.success:
                self.store.save_history(
                    [HistoryEntry(**e.model_dump(), source=self.source) for e in result.success]
                )
        return result
