"""Main menu shown when jt runs without a command."""
from .. import display
from ..errors import HumanCancellation
from ..runtime import Runtime
from .aliases import run_aliases
from .quick import run_quick
from .setup import run_setup
from .templates import run_templates


def show_stats(rt: Runtime) -> None:
    recent = rt.store.get_recent_tasks(10)
    if not recent:
        display.warning("No logging history yet")
        return
    display.info("\nRecent tasks:\n")
    for task in recent:
        display.info(f"  {task}")
    display.info("")


def _quick(rt: Runtime) -> None:
    text = rt.prompter.text(
        "Describe what you worked on:",
        validate=lambda v: True if v.strip() else "Enter some text",
    )
    run_quick(rt, text)


ACTIONS = {
    "quick": _quick,
    "templates": run_templates,
    "aliases": run_aliases,
    "stats": show_stats,
    "setup": run_setup,
}


def first_run(rt: Runtime) -> None:
    display.info("\n👋 Welcome to jt!\n")
    display.info("First, let's connect to Jira.\n")
    if rt.prompter.confirm("Start the setup?", default=True):
        run_setup(rt)
    else:
        display.info("\nRun it later: jt setup\n")


def run_interactive(rt: Runtime) -> None:
    if rt.store.get_config() is None:
        first_run(rt)
        return

    while True:
        action = rt.prompter.select(
            "What do you want to do?",
            [
                ("Quick log (AI)", "quick"),
                ("Templates", "templates"),
                ("Aliases", "aliases"),
                ("Stats", "stats"),
                ("Settings", "setup"),
                ("← Exit", "exit"),
            ],
        )
        if action == "exit":
            display.info("\nBye!\n")
            return
        try:
            ACTIONS[action](rt)
        except HumanCancellation:
            display.info("\nCancelled\n")
