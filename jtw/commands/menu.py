"""Generic list/create/act menu used by aliases and templates."""
from typing import Callable, Generic, Sequence, TypeVar

from .. import display

T = TypeVar("T")

CREATE_VALUE = "__create__"
BACK_VALUE = "__back__"


class MenuItem(Generic[T]):
    def __init__(self, label: str, value: T):
        self.label = label
        self.value = value


def run_menu(
    prompter,
    *,
    title: str,
    items: Sequence[MenuItem[T]],
    empty_message: str,
    create_fn: Callable[[], None],
    actions: Sequence[tuple[str, Callable[[T], None]]],
) -> None:
    if not items:
        display.info(f"\n{empty_message}\n")
        create_fn()
        return

    choices = [(item.label, str(i)) for i, item in enumerate(items)]
    choices.append(("+ Create new", CREATE_VALUE))
    selected = prompter.select(title, choices)
    if selected == CREATE_VALUE:
        create_fn()
        return

    item = items[int(selected)]
    action_choices = [(label, str(i)) for i, (label, _) in enumerate(actions)]
    action_choices.append(("<- Back", BACK_VALUE))
    action = prompter.select(item.label, action_choices)
    if action == BACK_VALUE:
        return
    actions[int(action)][1](item.value)
