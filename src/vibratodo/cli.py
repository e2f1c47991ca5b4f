"""VibraToDo CLI - personal task list."""

import json
import logging
import sys
from datetime import datetime

import click

from .adapters.record_store import AuthenticationError
from .config import Session, load_config
from .controller import ALL, TaskListController
from .core import categories
from .core.forms import TaskForm
from .core.tasks import Direction, Outcome, Priority, Task
from .repository import build_repository, resolve_backend

PRIORITY_MARKERS = {Priority.LOW: "!", Priority.MEDIUM: "!!", Priority.HIGH: "!!!"}
CATEGORY_CHOICES = [c.id for c in categories.all_categories()]


class ClickNotifier:
    """Prints notifications to the terminal."""

    def success(self, message: str) -> None:
        click.echo(f"✓ {message}")

    def error(self, message: str) -> None:
        click.echo(f"Error: {message}", err=True)


def _open_list(filter: str = ALL) -> TaskListController:
    """Build a controller for the configured store and load it."""
    config = load_config()
    try:
        backend = resolve_backend(config)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    session = Session.load(config)
    if backend == "remote" and not session.is_authenticated:
        click.echo("Error: Not logged in. Run 'vibratodo login' first.", err=True)
        sys.exit(1)

    controller = TaskListController(build_repository(config, session), ClickNotifier())
    try:
        if not controller.load(filter):
            sys.exit(1)
    except AuthenticationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return controller


def _resolve(controller: TaskListController, ref: str) -> Task:
    """Find a task by id, unique id prefix, or 1-based list number, in that order."""
    matches = [t for t in controller.tasks if t.id == ref] or [
        t for t in controller.tasks if t.id.startswith(ref)
    ]
    if not matches and ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(controller.tasks):
            return controller.tasks[index]

    if len(matches) != 1:
        reason = "is ambiguous" if matches else "not found"
        click.echo(f"Error: Task '{ref}' {reason}.", err=True)
        sys.exit(1)
    return matches[0]


def _finish(outcome: Outcome | None) -> None:
    if outcome not in (None, Outcome.APPLIED):
        sys.exit(1)


def _task_json(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "completed": task.completed,
        "priority": task.priority.value,
        "category": task.category,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "position": task.position,
        "created_at": task.created_at.isoformat(),
    }


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """VibraToDo - personal task list."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command("list")
@click.option("--category", "-c", type=click.Choice([ALL, *CATEGORY_CHOICES]), default=ALL,
              help="Only show one category")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(category: str, as_json: bool):
    """List tasks in display order."""
    controller = _open_list(category)

    if as_json:
        click.echo(json.dumps([_task_json(t) for t in controller.tasks], indent=2))
        return

    if not controller.tasks:
        click.echo("No tasks yet. Add one with 'vibratodo add'.")
        return

    for number, task in enumerate(controller.tasks, start=1):
        check = "x" if task.completed else " "
        marker = PRIORITY_MARKERS[task.priority]
        due = f" (due {task.due_date})" if task.due_date else ""
        click.echo(f"{number:>3}. [{check}] {marker:3} {task.title}{due}  #{task.category_name}  {task.id[:8]}")
        if task.description:
            click.echo(f"            {task.description}")


@main.command()
@click.argument("title")
@click.option("--description", "-d", default="", help="Optional description")
@click.option("--priority", "-p", type=click.Choice([p.value for p in Priority]), default="medium")
@click.option("--category", "-c", type=click.Choice(CATEGORY_CHOICES), default="personal")
@click.option("--due", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Due date (YYYY-MM-DD)")
def add(title: str, description: str, priority: str, category: str, due: datetime | None):
    """Add a task at the top of the list."""
    controller = _open_list()
    form = TaskForm()
    form.open_new()
    form.change("title", title)
    form.change("description", description)
    form.change("priority", Priority(priority))
    form.change("category", category)
    form.change("due_date", due)

    outcome = form.submit_new(controller)
    if outcome is None:
        click.echo(f"Error: {form.error}", err=True)
        sys.exit(1)
    _finish(outcome)


@main.command()
@click.argument("task_ref")
def done(task_ref: str):
    """Toggle a task's completed state."""
    controller = _open_list()
    task = _resolve(controller, task_ref)
    _finish(controller.toggle_complete(task.id))


@main.command()
@click.argument("task_ref")
@click.option("--title", "-t", default=None)
@click.option("--description", "-d", default=None)
@click.option("--priority", "-p", type=click.Choice([p.value for p in Priority]), default=None)
@click.option("--category", "-c", type=click.Choice(CATEGORY_CHOICES), default=None)
@click.option("--due", default=None, help="Due date (YYYY-MM-DD), or 'none' to clear")
def edit(task_ref: str, title, description, priority, category, due):
    """Edit a task in place."""
    controller = _open_list()
    task = _resolve(controller, task_ref)
    form = TaskForm()
    form.open_edit(task)

    changes = {
        "title": title,
        "description": description,
        "priority": Priority(priority) if priority else None,
        "category": category,
    }
    for name, value in changes.items():
        if value is not None:
            form.change_edit(task.id, name, value)
    if due is not None:
        try:
            form.change_edit(task.id, "due_date", None if due.lower() == "none" else due)
        except ValueError:
            click.echo(f"Error: Invalid due date '{due}', expected YYYY-MM-DD.", err=True)
            sys.exit(1)

    outcome = form.submit_edit(task.id, controller)
    if outcome is None:
        click.echo(f"Error: {form.edit_errors[task.id]}", err=True)
        sys.exit(1)
    _finish(outcome)


@main.command()
@click.argument("task_ref")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def rm(task_ref: str, yes: bool):
    """Delete a task."""
    controller = _open_list()
    task = _resolve(controller, task_ref)
    if not yes and not click.confirm(f"Delete '{task.title}'?"):
        return
    _finish(controller.delete(task.id))


@main.command()
@click.argument("task_ref")
@click.argument("direction", type=click.Choice([d.value for d in Direction]))
@click.option("--category", "-c", type=click.Choice([ALL, *CATEGORY_CHOICES]), default=ALL,
              help="Reorder within one category's list")
def move(task_ref: str, direction: str, category: str):
    """Move a task up or down one place."""
    controller = _open_list(category)
    task = _resolve(controller, task_ref)
    outcome = controller.move(task.id, direction)
    if outcome is None:
        click.echo(f"'{task.title}' is already at the {'top' if direction == 'up' else 'bottom'}.")
    _finish(outcome)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Show completion progress."""
    result = _open_list().stats()
    if as_json:
        click.echo(json.dumps(result.__dict__, indent=2))
        return
    click.echo(f"Completed: {result.completed}/{result.total} ({result.progress}%)")
    click.echo(f"Due today: {result.due_today}")


@main.command("categories")
def list_categories():
    """List task categories."""
    for category in categories.all_categories():
        click.echo(f"{category.id:10} {category.display_name:10} {category.color}")


@main.command()
@click.option("--project-id", prompt=True, help="Record store project id")
@click.option("--public-key", prompt=True, hide_input=True, help="Record store public key")
def login(project_id: str, public_key: str):
    """Save record store credentials."""
    session = Session(project_id=project_id.strip(), public_key=public_key.strip())
    if not session.is_authenticated:
        click.echo("Error: Project id and public key are both required.", err=True)
        sys.exit(1)
    session.save()
    click.echo("Logged in.")


@main.command()
def logout():
    """Forget saved record store credentials."""
    Session.load().logout()
    click.echo("Logged out.")


@main.command()
def backend():
    """Show which task store is in use."""
    config = load_config()
    try:
        name = resolve_backend(config)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if name == "remote":
        status = "logged in" if Session.load(config).is_authenticated else "not logged in"
        click.echo(f"remote: {config.api_base}/{config.collection} ({status})")
    else:
        click.echo(f"local: {config.data_path}")


if __name__ == "__main__":
    main()
