# src/tasky/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.ports import Prompt
from ..core.state import AppState

logger = logging.getLogger(__name__)

BANNER = "Tasky - your command-line to-do list manager"


class ConsolePrompt:
    """Prompt port backed by input()/print()."""

    def __init__(
        self,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self._read = read
        self._write = write

    def ask(self, question: str) -> str:
        return self._read(question)

    def say(self, message: str) -> None:
        self._write(message)


def run_console_loop(state: AppState, prompt: Prompt | None = None) -> None:
    prompt = prompt or ConsolePrompt()
    logger.info("Console connector started (tasks=%d).", state.task_store.count())
    prompt.say(BANNER)
    prompt.say("Type /help for commands, /exit to quit.\n")

    while True:
        try:
            user_input = prompt.ask("tasky> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            prompt.say("")
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            prompt.say("Commands start with '/'. Use /help to list available commands.")
            continue

        try:
            cmd_response = command_registry.handle(state, user_input, prompt)
        except (EOFError, KeyboardInterrupt):
            # User bailed out of a multi-step prompt; nothing was changed.
            prompt.say("")
            cmd_response = "Cancelled."
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            prompt.say(cmd_response)

    logger.info("Console connector finished.")
