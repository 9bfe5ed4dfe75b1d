"""Quick AI log: free text in, Jira worklogs out."""
import sys

import typer
from halo import Halo

from .. import display
from ..errors import MalformedResponse
from ..models import BatchResult, ParseContext
from ..reconcile import RECENT_CHOICES, reconcile
from ..runtime import Runtime, guarded
from ..submit import SubmissionCoordinator


def _parse_failed(exc: MalformedResponse, project_key: str, aliases) -> None:
    display.error("Could not parse the input")
    display.hint(str(exc))
    display.hint("\nTry:")
    display.hint(f'  "yesterday {project_key}-123 development 3 hours"')
    if aliases:
        display.hint("\nOr use aliases:")
        for alias in aliases[:3]:
            display.hint(f'  "today {alias.keyword} 2 hours"')
    display.hint("")


def run_quick(rt: Runtime, text: str) -> BatchResult:
    config = rt.config()
    store = rt.store

    if len(text.split()) < 3:
        display.warning("Your input looks too short.")
        display.hint("Remember to quote the whole text:")
        display.hint('  Right: jt q "yesterday calls 4 hours"')
        display.hint("  Wrong: jt q yesterday calls 4 hours\n")

    provider = rt.ai_factory(config)
    with rt.jira_factory(config) as jira:
        aliases = store.get_aliases()
        context = ParseContext(
            project_key=config.project_key,
            aliases=aliases,
            recent_tasks=jira.fetch_recent_tasks(),
        )

        try:
            with Halo(text="Parsing with AI...", spinner="dots", stream=sys.stdout, enabled=sys.stdout.isatty()):
                entries = provider.parse(text, context)
        except MalformedResponse as exc:
            _parse_failed(exc, config.project_key, aliases)
            raise typer.Exit(1) from exc

        reconcile(entries, aliases, store.get_recent_tasks(RECENT_CHOICES), rt.prompter, store)

        result = SubmissionCoordinator(jira, store, rt.prompter, source="ai").run(entries)
    display.show_batch_result(result)
    return result


def register(app: typer.Typer) -> None:
    @app.command("q", help="Quick AI log from a quoted description.")
    @guarded
    def quick(ctx: typer.Context, text: str = typer.Argument(..., help="What you worked on, in quotes.")) -> None:
        run_quick(ctx.obj, text)
