"""Interactive prompts backed by questionary.

Every call uses ``unsafe_ask`` so Ctrl+C surfaces as KeyboardInterrupt
instead of a silent ``None``.
"""
from typing import Any, Callable, Sequence

import questionary

Validator = Callable[[str], bool | str]


class QuestionaryPrompter:
    def select(self, message: str, choices: Sequence[tuple[str, Any]]) -> Any:
        return questionary.select(
            message=message,
            choices=[questionary.Choice(title=title, value=value) for title, value in choices],
        ).unsafe_ask()

    def text(self, message: str, *, default: str = "", validate: Validator | None = None) -> str:
        kwargs = {"validate": validate} if validate else {}
        return questionary.text(message=message, default=default, **kwargs).unsafe_ask()

    def password(self, message: str, *, validate: Validator | None = None) -> str:
        kwargs = {"validate": validate} if validate else {}
        return questionary.password(message=message, **kwargs).unsafe_ask()

    def confirm(self, message: str, *, default: bool = True) -> bool:
        return questionary.confirm(message=message, default=default).unsafe_ask()
