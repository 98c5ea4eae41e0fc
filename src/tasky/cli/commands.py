# src/tasky/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date

from ..core.ports import Prompt
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_errors import TaskError, ValidationError
from ..tasks.task_models import Priority, Task
from ..tasks.task_query import SortKey
from ..tasks.task_validation import is_valid_priority, parse_due_date

CommandHandler = Callable[[AppState, list[str], Prompt], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, prompt: Prompt) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, prompt)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    try:
        label = Priority(task.priority).label
    except ValueError:
        label = "?"
    line = f"{task.id}  [{mark}] P{task.priority}/{label:<6}  due {task.due_date}  {task.title}"
    if task.description:
        line += f" - {task.description}"
    return line


def format_tasks(tasks: Iterable[Task], header: str | None = None) -> str:
    lines = [header] if header else []
    lines.extend(format_task(t) for t in tasks)
    return "\n".join(lines)


# ---- input collection ----


def _ask_text(prompt: Prompt, label: str, *, default: str | None = None, required: bool = False) -> str:
    suffix = f" [{default}]" if default else ""
    while True:
        answer = prompt.ask(f"{label}{suffix}: ").strip()
        if not answer and default is not None:
            return default
        if answer or not required:
            return answer
        prompt.say(f"{label} cannot be empty.")


def _ask_due_date(prompt: Prompt, label: str, default: str) -> str:
    while True:
        answer = prompt.ask(f"{label} (YYYY-MM-DD) [{default}]: ").strip() or default
        try:
            return parse_due_date(answer).isoformat()
        except ValidationError as e:
            prompt.say(f"Invalid date format: {e.reason}")


def _ask_priority(prompt: Prompt, label: str, default: int) -> int:
    choices = ", ".join(f"{p.value}={p.label}" for p in Priority)
    while True:
        answer = prompt.ask(f"{label} ({choices}) [{default}]: ").strip()
        if not answer:
            return default
        try:
            value = int(answer)
        except ValueError:
            value = None
        if is_valid_priority(value):
            return value
        prompt.say("Priority must be 1, 2 or 3.")


def _confirm(prompt: Prompt, question: str) -> bool:
    answer = prompt.ask(f"{question} [y/N]: ").strip().lower()
    return answer in ("y", "yes")


def _failed(action: str, error: TaskError) -> str:
    logger.info("Failed to %s: %s", action, error)
    return f"Failed to {action}: {error}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str], prompt: Prompt) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], prompt: Prompt) -> str:
    """
    /add  -> asks for title, description, due date and priority
    """
    title = _ask_text(prompt, "Task title", required=True)
    description = _ask_text(prompt, "Task description (optional)")
    due_date = _ask_due_date(prompt, "Due date", date.today().isoformat())
    priority = _ask_priority(prompt, "Priority", Priority.MEDIUM.value)

    try:
        task = task_api.add_task(
            state.task_store,
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
        )
    except TaskError as e:
        return _failed("add task", e)
    return "Task added successfully!\n" + format_task(task)


def cmd_list(state: AppState, args: list[str], prompt: Prompt) -> str:
    """
    /list                     -> default sort/filter from settings
    /list priority            -> sort by priority
    /list dueDate open        -> hide completed tasks
    /list createdAt all       -> include completed tasks
    """
    sort_raw = str(getattr(state.settings, "default_sort", SortKey.DUE_DATE.value))
    include_completed = bool(getattr(state.settings, "show_completed", True))

    for arg in args:
        low = arg.lower()
        if low == "all":
            include_completed = True
        elif low in ("open", "pending"):
            include_completed = False
        else:
            sort_raw = arg

    try:
        sort_key = SortKey.parse(sort_raw)
    except ValueError as e:
        return str(e)

    tasks = task_api.list_tasks(
        state.task_store, sort_key=sort_key, include_completed=include_completed
    )
    if not tasks:
        return "No tasks found."
    return format_tasks(tasks, header=f"Tasks (sorted by {sort_key.value}):")


def cmd_update(state: AppState, args: list[str], prompt: Prompt) -> str:
    """
    /update <id>  -> asks for each field, Enter keeps the current value
    """
    if not args:
        tasks = state.task_store.snapshot()
        if not tasks:
            return "No tasks available to update."
        return format_tasks(tasks, header="Usage: /update <id>. Tasks:")

    task_id = args[0]
    try:
        current = state.task_store.find_by_id(task_id)
    except TaskError as e:
        return _failed("update task", e)

    title = _ask_text(prompt, "New title", default=current.title)
    description = _ask_text(prompt, "New description", default=current.description)
    due_date = _ask_due_date(prompt, "New due date", current.due_date)
    priority = _ask_priority(prompt, "New priority", current.priority)

    try:
        task = task_api.update_task(
            state.task_store,
            task_id,
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
        )
    except TaskError as e:
        return _failed("update task", e)
    return "Task updated successfully!\n" + format_task(task)


def cmd_done(state: AppState, args: list[str], prompt: Prompt) -> str:
    """
    /done <id>  -> mark a task as completed
    """
    if not args:
        pending = task_api.pending_tasks(state.task_store)
        if not pending:
            return "No incomplete tasks available."
        return format_tasks(pending, header="Usage: /done <id>. Incomplete tasks:")

    try:
        task_api.complete_task(state.task_store, args[0])
    except TaskError as e:
        return _failed("update task", e)
    return "Task marked as completed!"


def cmd_remove(state: AppState, args: list[str], prompt: Prompt) -> str:
    """
    /rm <id>  -> remove a task after confirmation
    """
    if not args:
        tasks = state.task_store.snapshot()
        if not tasks:
            return "No tasks available to remove."
        return format_tasks(tasks, header="Usage: /rm <id>. Tasks:")

    task_id = args[0]
    try:
        task = state.task_store.find_by_id(task_id)
    except TaskError as e:
        return _failed("remove task", e)

    if not _confirm(prompt, f'Are you sure you want to remove "{task.title}"?'):
        return "Task removal cancelled."

    try:
        task_api.remove_task(state.task_store, task_id)
    except TaskError as e:
        return _failed("remove task", e)
    return "Task removed successfully!"


def cmd_clear(state: AppState, args: list[str], prompt: Prompt) -> str:
    """
    /clear  -> remove every completed task after confirmation
    """
    completed = task_api.completed_tasks(state.task_store)
    if not completed:
        return "No completed tasks to clear."

    if not _confirm(prompt, f"Are you sure you want to clear {len(completed)} completed task(s)?"):
        return "Clear operation cancelled."

    try:
        count = task_api.clear_completed(state.task_store)
    except TaskError as e:
        return _failed("clear tasks", e)
    return f"Cleared {count} task(s)!"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a new task.", aliases=["new"])
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [dueDate|priority|completed|createdAt] [all|open].",
    aliases=["ls"],
)
registry.register("update", cmd_update, help_text="Update a task: /update <id>.", aliases=["edit"])
registry.register("done", cmd_done, help_text="Mark a task as completed: /done <id>.", aliases=["complete"])
registry.register("rm", cmd_remove, help_text="Remove a task: /rm <id>.", aliases=["remove"])
registry.register("clear", cmd_clear, help_text="Clear completed tasks.")
