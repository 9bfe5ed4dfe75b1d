"""Templates: named batches of entries logged again and again."""
import typer

from .. import display
from ..dates import resolve_date, validate_date_text
from ..models import BatchResult, Template, WorklogEntry
from ..reconcile import validate_task_key
from ..runtime import Runtime, guarded
from ..submit import SubmissionCoordinator
from .menu import MenuItem, run_menu


def validate_hours(value: str) -> bool | str:
    try:
        hours = float(value.replace(",", "."))
    except ValueError:
        return "Enter a number between 0 and 24"
    return True if 0 < hours <= 24 else "Enter a number between 0 and 24"


def collect_entries(prompter, defaults: list[WorklogEntry] | None = None) -> list[WorklogEntry]:
    defaults = defaults or []
    entries: list[WorklogEntry] = []
    index = 0
    more = True
    while more:
        current = defaults[index] if index < len(defaults) else None
        display.info(f"\nEntry {index + 1}:")
        task = prompter.text(
            "Task key:",
            default=(current.task or "") if current else "",
            validate=validate_task_key,
        )
        activity = prompter.text(
            "Work description:",
            default=current.activity if current else "",
            validate=lambda v: True if v.strip() else "Enter a description",
        )
        hours = prompter.text(
            "Hours:",
            default=f"{current.hours:g}" if current else "",
            validate=validate_hours,
        )
        entries.append(
            WorklogEntry(
                task=task.strip().upper(),
                activity=activity.strip(),
                hours=float(hours.replace(",", ".")),
                date="",
            )
        )
        index += 1
        more = prompter.confirm("Add another entry?", default=index < len(defaults))
    return entries


def create_template(rt: Runtime) -> None:
    rt.config()
    name = rt.prompter.text(
        "Template name:", validate=lambda v: True if v.strip() else "Enter a name"
    ).strip()
    entries = collect_entries(rt.prompter)
    rt.store.save_template(name, entries)
    display.success(f'Template "{name}" created with {len(entries)} entries\n')


def edit_template(rt: Runtime, template: Template) -> None:
    name = rt.prompter.text("Template name:", default=template.name).strip() or template.name
    entries = collect_entries(rt.prompter, template.entries)
    if name != template.name:
        rt.store.delete_template(template.name)
    rt.store.save_template(name, entries)
    display.success(f'Template "{name}" updated\n')


def delete_template(rt: Runtime, template: Template) -> None:
    if rt.prompter.confirm(f'Delete template "{template.name}"?', default=False):
        rt.store.delete_template(template.name)
        display.success(f'Template "{template.name}" deleted\n')


def log_template(rt: Runtime, template: Template) -> BatchResult:
    config = rt.config()
    when = rt.prompter.text(
        "Date (today, yesterday, YYYY-MM-DD):", default="today", validate=validate_date_text
    )
    entry_date = resolve_date(when)
    entries = [entry.model_copy(update={"date": entry_date}) for entry in template.entries]
    if not entries:
        display.warning(f'Template "{template.name}" has no entries')
        return BatchResult()

    with rt.jira_factory(config) as jira:
        result = SubmissionCoordinator(jira, rt.store, rt.prompter, source="template").run(entries)
    display.show_batch_result(result)
    if result.success:
        rt.store.increment_template_usage(template.name)
    return result


def _label(template: Template) -> str:
    count = len(template.entries)
    noun = "entry" if count == 1 else "entries"
    return f"{template.name} — {count} {noun}, {display.format_hours(template.total_hours)}"


def run_templates(rt: Runtime) -> None:
    templates = rt.store.get_templates()
    run_menu(
        rt.prompter,
        title="Templates",
        items=[MenuItem(_label(t), t) for t in templates],
        empty_message="No templates yet. Let's create the first one.",
        create_fn=lambda: create_template(rt),
        actions=[
            ("Log", lambda t: log_template(rt, t)),
            ("Edit", lambda t: edit_template(rt, t)),
            ("Delete", lambda t: delete_template(rt, t)),
        ],
    )


def register(app: typer.Typer) -> None:
    @app.command("t", help="Manage and log templates.")
    @guarded
    def templates(ctx: typer.Context) -> None:
        run_templates(ctx.obj)
