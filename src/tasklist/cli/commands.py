# src/tasklist/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime

from ..core.errors import NotFoundError, TaskError, ValidationError
from ..core.state import AppState
from ..tasks.task_models import UNSET, Task, TaskStatus

# handler(state, args, rest) -> reply; `rest` is the raw text after the command name.
CommandHandler = Callable[[AppState, list[str], str], str]

logger = logging.getLogger(__name__)

_EDITABLE = ("title", "description", "status")
# "|" only separates changes when the next chunk starts with "<field>="; other pipes stay in the value.
_CHANGE_SEP = re.compile(r"\|(?=\s*(?:" + "|".join(_EDITABLE) + r")\s*=)", re.IGNORECASE)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, /list, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task errors (not found, invalid input) become the reply text;
        anything else propagates to the connector.
        """
        if not line.startswith("/"):
            return None

        head, _, rest = line[1:].strip().partition(" ")
        if not head:
            return "Empty command. Use /help to list available commands."

        name = head.lower()
        rest = rest.strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, rest.split(), rest)
        except NotFoundError as e:
            return e.message
        except ValidationError as e:
            return f"Invalid input: {e.message}"
        except TaskError as e:
            return e.message

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_ts(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_task(task: Task, *, verbose: bool = False) -> str:
    mark = "x" if task.is_completed else " "
    line = f"#{task.id} [{mark}] {task.title}"
    if not verbose:
        return line
    lines = [line]
    if task.description:
        lines.append(f"  {task.description}")
    lines.append(f"  status: {task.status.value}")
    lines.append(f"  created: {_fmt_ts(task.created_at)}")
    lines.append(f"  updated: {_fmt_ts(task.updated_at)}")
    return "\n".join(lines)


def _parse_id(args: list[str], usage: str) -> int:
    if not args:
        raise ValidationError(f"missing task id. Usage: {usage}", field="id")
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"task id must be a number (got {args[0]!r})", field="id") from None


def cmd_help(state: AppState, args: list[str], rest: str) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], rest: str) -> str:
    settings = state.settings
    store = state.task_store
    active = len(store.list_tasks(TaskStatus.ACTIVE))
    completed = len(store.list_tasks(TaskStatus.COMPLETED))
    http = "OFF"
    if getattr(settings, "http_enabled", False):
        http = f"http://{settings.http_host}:{settings.http_port}/api/tasks"
    return (
        "Status:\n"
        f"  Storage: {getattr(settings, 'storage', 'sqlite')}\n"
        f"  Tasks: {active} active, {completed} completed\n"
        f"  HTTP API: {http}"
    )


def cmd_add(state: AppState, args: list[str], rest: str) -> str:
    """
    /add <title>
    /add <title> | <description>
    """
    title, sep, description = rest.partition("|")
    task = state.task_store.create_task(title, description if sep else None)
    return f"Added {format_task(task)}"


def cmd_list(state: AppState, args: list[str], rest: str) -> str:
    """
    /list              -> all tasks
    /list active       -> only active
    /list completed    -> only completed
    """
    status = args[0] if args else None
    tasks = state.task_store.list_tasks(status)
    if not tasks:
        return "No tasks." if status is None else f"No {status.lower()} tasks."
    return "\n".join(format_task(t) for t in tasks)


def cmd_show(state: AppState, args: list[str], rest: str) -> str:
    task_id = _parse_id(args, "/show <id>")
    return format_task(state.task_store.get_task(task_id), verbose=True)


def cmd_edit(state: AppState, args: list[str], rest: str) -> str:
    """
    /edit <id> title=New title
    /edit <id> title=New title | description=Details | status=completed
    /edit <id> description=      -> clears the description
    """
    usage = "/edit <id> title=... | description=... | status=..."
    task_id = _parse_id(args, usage)
    changes_raw = rest.split(None, 1)[1] if len(args) > 1 else ""
    if not changes_raw.strip():
        raise ValidationError(f"nothing to change. Usage: {usage}")

    changes: dict[str, object] = {}
    for part in _CHANGE_SEP.split(changes_raw):
        key, eq, value = part.partition("=")
        key = key.strip().lower()
        if not eq or key not in _EDITABLE:
            raise ValidationError(
                f"expected key=value with key in {', '.join(_EDITABLE)} (got {part.strip()!r})"
            )
        value = value.strip()
        changes[key] = (value or None) if key == "description" else value

    task = state.task_store.update_task(
        task_id,
        title=changes.get("title", UNSET),
        description=changes.get("description", UNSET),
        status=changes.get("status", UNSET),
    )
    return f"Updated {format_task(task)}"


def cmd_toggle(state: AppState, args: list[str], rest: str) -> str:
    task_id = _parse_id(args, "/toggle <id>")
    task = state.task_store.toggle_status(task_id)
    return f"{format_task(task)} is now {task.status.value}."


def cmd_rm(state: AppState, args: list[str], rest: str) -> str:
    task_id = _parse_id(args, "/rm <id>")
    state.task_store.delete_task(task_id)
    return f"Task {task_id} deleted."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage and task counts.")
registry.register("add", cmd_add, help_text="Create a task: /add <title> [| description].")
registry.register(
    "list", cmd_list, help_text="List tasks: /list [active|completed].", aliases=["ls"]
)
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <id> title=... | description=... | status=....",
)
registry.register(
    "toggle", cmd_toggle, help_text="Flip active/completed: /toggle <id>.", aliases=["done"]
)
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete", "del"])
