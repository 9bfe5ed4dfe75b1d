"""Collaborators shared by the CLI commands."""
import functools
from dataclasses import dataclass, field
from typing import Callable

import typer

from . import display
from .ai import create_ai_provider
from .config import AppConfig
from .errors import ConfigMissing
from .jira import create_jira_client
from .prompter import QuestionaryPrompter
from .store import Store


@dataclass
class Runtime:
    store: Store = field(default_factory=Store)
    prompter: QuestionaryPrompter = field(default_factory=QuestionaryPrompter)
    ai_factory: Callable = create_ai_provider
    jira_factory: Callable = create_jira_client

    def config(self) -> AppConfig:
        config = self.store.get_config()
        if config is None:
            raise ConfigMissing()
        return config


def guarded(fn):
    """Render any error escaping a command and exit with the matching code."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except typer.Exit:
            raise
        except (Exception, KeyboardInterrupt) as exc:
            raise typer.Exit(display.handle_error(exc)) from None

    return wrapper
