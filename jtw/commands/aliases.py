"""Aliases: informal phrases mapped to task keys."""
import typer

from .. import display
from ..models import Alias
from ..reconcile import validate_task_key
from ..runtime import Runtime, guarded
from .menu import MenuItem, run_menu


def collect_alias_fields(prompter, defaults: Alias | None = None) -> tuple[str, str, str | None]:
    keyword = prompter.text(
        'Keyword (e.g. "calls"):',
        default=defaults.keyword if defaults else "",
        validate=lambda v: True if v.strip() else "Enter a keyword",
    ).strip()
    task = prompter.text(
        "Task key:",
        default=defaults.task if defaults else "",
        validate=validate_task_key,
    ).strip().upper()
    description = prompter.text(
        "Description (optional):",
        default=(defaults.description or "") if defaults else "",
    ).strip()
    return keyword, task, description or None


def _may_take_keyword(rt: Runtime, keyword: str) -> bool:
    existing = rt.store.find_alias(keyword)
    if existing is None:
        return True
    if rt.prompter.confirm(
        f'Alias "{keyword}" already points to {existing.task}. Replace it?', default=False
    ):
        return True
    display.warning(f'Alias "{keyword}" left unchanged')
    return False


def create_alias(rt: Runtime) -> None:
    keyword, task, description = collect_alias_fields(rt.prompter)
    if not _may_take_keyword(rt, keyword):
        return
    rt.store.save_alias(keyword, task, description)
    display.success(f'Alias saved: "{keyword}" → {task}\n')


def edit_alias(rt: Runtime, alias: Alias) -> None:
    keyword, task, description = collect_alias_fields(rt.prompter, alias)
    if keyword != alias.keyword:
        if not _may_take_keyword(rt, keyword):
            return
        rt.store.delete_alias(alias.keyword)
    rt.store.save_alias(keyword, task, description)
    display.success(f'Alias updated: "{keyword}" → {task}\n')


def delete_alias(rt: Runtime, alias: Alias) -> None:
    if rt.prompter.confirm(f'Delete alias "{alias.keyword}"?', default=False):
        rt.store.delete_alias(alias.keyword)
        display.success(f'Alias "{alias.keyword}" deleted\n')


def _label(alias: Alias) -> str:
    suffix = f" ({alias.description})" if alias.description else ""
    return f"{alias.keyword} → {alias.task}{suffix}"


def run_aliases(rt: Runtime) -> None:
    aliases = rt.store.get_aliases()
    run_menu(
        rt.prompter,
        title="Aliases",
        items=[MenuItem(_label(a), a) for a in aliases],
        empty_message="No aliases yet. Let's create the first one.",
        create_fn=lambda: create_alias(rt),
        actions=[
            ("Edit", lambda a: edit_alias(rt, a)),
            ("Delete", lambda a: delete_alias(rt, a)),
        ],
    )


def register(app: typer.Typer) -> None:
    @app.command("a", help="Manage aliases.")
    @guarded
    def aliases(ctx: typer.Context) -> None:
        run_aliases(ctx.obj)
