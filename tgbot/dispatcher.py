"""Update dispatcher -- drains a bot's channels and routes updates to commands.

Each update is processed in its own :func:`asyncio.create_task` so a slow
handler never holds up the next batch.  Polling errors are logged; the
poller itself keeps retrying.  :func:`dispatch` returns once both channels
are closed.
"""

from __future__ import annotations

import asyncio

from tgapi.exceptions import APIError
from tgapi.models import Update
from tgbot.commands import CommandRegistry
from tgbot.session import Bot
from tgcore.logger import BotLogger

logger = BotLogger.get_logger()


async def process_update(commands: CommandRegistry, update: Update) -> None:
    """Dispatch a single update to the matching command handler.

    Handler failures are logged here, at the task boundary.
    """
    try:
        handled = await commands.run(update)
    except Exception:
        logger.exception("Command handler failed", extra={"update_id": update.update_id})
        return
    if not handled:
        logger.debug("No command matched", extra={"update_id": update.update_id, "kind": update.kind})


def log_poll_error(error: Exception) -> None:
    """Log one error received from the poller's error channel."""
    if isinstance(error, APIError):
        extra = {"error_code": error.error_code, "description": error.description}
        if error.retry_after is not None:
            extra["retry_after"] = error.retry_after
        if error.migrate_to_chat_id is not None:
            extra["migrate_to_chat_id"] = error.migrate_to_chat_id
        logger.warning("getUpdates rejected by Telegram", extra=extra)
        return
    logger.error("getUpdates failed", extra={"error_type": type(error).__name__, "error": str(error)})


async def _consume_updates(bot: Bot, commands: CommandRegistry) -> None:
    pending: set[asyncio.Task] = set()
    async for batch in bot.updates:
        logger.debug("Received updates", extra={"count": len(batch)})
        for update in batch:
            task = asyncio.create_task(process_update(commands, update))
            pending.add(task)
            task.add_done_callback(pending.discard)
    if pending:
        await asyncio.gather(*pending)


async def _consume_errors(bot: Bot) -> None:
    async for error in bot.errors:
        log_poll_error(error)


async def dispatch(bot: Bot, commands: CommandRegistry) -> None:
    """Consume *bot*'s update and error channels until both close."""
    logger.info("Dispatcher running", extra={"username": bot.username, "commands": commands.names()})
    await asyncio.gather(_consume_updates(bot, commands), _consume_errors(bot))
    logger.info("Dispatcher finished")
