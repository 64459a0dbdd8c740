"""Slash-command matching and a registry of command handlers.

A command message looks like ``/name@botname arg1 arg2``.  :func:`match`
splits it into a :class:`Command`; :class:`CommandRegistry` looks up the
handler registered for the name and ignores commands addressed to another
bot through the ``@mention`` suffix.

This module is a collaborator of the poller, not part of it: it consumes one
update at a time and never feeds back into polling.
"""

from __future__ import annotations

import dataclasses
from typing import Awaitable, Callable, Optional

from tgapi.models import Update
from tgcore.logger import BotLogger

logger = BotLogger.get_logger()


@dataclasses.dataclass(frozen=True, slots=True)
class Command:
    """A parsed slash-command."""
    name: str                 # e.g. "/hello"
    mention: str = ""         # bot username after "@", empty when absent
    args: tuple[str, ...] = ()


CommandHandler = Callable[[Command, Update], Awaitable[None]]


def safe_slice(text: str, start: int, end: int) -> str:
    """Return ``text[start:end]`` with both bounds clamped into the string."""
    start = min(max(start, 0), len(text))
    end = min(max(end, 0), len(text))
    if start >= end:
        return ""
    return text[start:end]


def split_command(token: str) -> tuple[str, str]:
    """Split ``/command@mention`` into ``("/command", "mention")``."""
    name, _, mention = token.partition("@")
    return name, mention


def split_args(text: str) -> list[str]:
    """Tokenize *text* on runs of whitespace."""
    return text.split()


def match(text: Optional[str]) -> Optional[Command]:
    """Parse *text* as a slash-command, or return ``None`` if it is not one."""
    if not text or not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0]
    if len(head) < 2:
        return None
    name, mention = split_command(head)
    remainder = safe_slice(text, len(head), len(text))
    return Command(name=name, mention=mention, args=tuple(split_args(remainder)))


class CommandRegistry:
    """Maps command names to async handlers for one bot.

    Usage::

        commands = CommandRegistry(bot.username)

        @commands.register("/hello")
        async def hello(command: Command, update: Update) -> None: ...

        handled = await commands.run(update)
    """

    def __init__(self, username: str = "") -> None:
        self._username = username
        self._handlers: dict[str, CommandHandler] = {}

    @property
    def username(self) -> str:
        return self._username

    def add(self, name: str, handler: CommandHandler) -> None:
        if not name.startswith("/"):
            name = "/" + name
        self._handlers[name] = handler

    def register(self, name: str) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator form of :meth:`add`."""
        def decorator(func: CommandHandler) -> CommandHandler:
            self.add(name, func)
            return func
        return decorator

    def get(self, name: str) -> Optional[CommandHandler]:
        return self._handlers.get(name)

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def resolve(self, text: Optional[str]) -> Optional[tuple[Command, CommandHandler]]:
        """Match *text* and find its handler, honouring the mention filter."""
        command = match(text)
        if command is None:
            return None
        if command.mention and self._username and command.mention.lower() != self._username.lower():
            return None
        handler = self._handlers.get(command.name)
        if handler is None:
            return None
        return command, handler

    async def run(self, update: Update) -> bool:
        """Dispatch *update* to its command handler.

        Returns ``True`` if a handler was found and awaited.  Exceptions
        raised by the handler propagate to the caller.
        """
        message = update.effective_message
        if message is None:
            return False
        resolved = self.resolve(message.text)
        if resolved is None:
            return False
        command, handler = resolved
        logger.debug("Dispatching command", extra={"update_id": update.update_id, "command": command.name})
        await handler(command, update)
        return True
