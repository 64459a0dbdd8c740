"""Entry point -- verify the bot, poll for updates and answer a few commands.

Run with ``python main.py`` after setting ``BOT_TOKEN`` (or a ``.env`` file).
SIGINT / SIGTERM fire the bot's lifetime signal; the process exits once the
poller has closed its channels and in-flight handlers have finished.
"""

import asyncio
import signal

from config import API_URL, BOT_TOKEN, NO_UPDATES, POLL_TIMEOUT, RETRY_DELAY
from tgapi.models import Update
from tgapi.payloads import NewMessage
from tgbot.commands import Command, CommandRegistry
from tgbot.dispatcher import dispatch
from tgbot.session import Bot
from tgcore.logger import BotLogger

logger = BotLogger.get_logger()


def build_commands(bot: Bot) -> CommandRegistry:
    """Register the demo commands against *bot*."""
    commands = CommandRegistry(bot.username)

    @commands.register("/start")
    async def handle_start(command: Command, update: Update) -> None:
        message = update.effective_message
        if not message:
            return
        await bot.send_message(NewMessage(
            chat_id=message.chat.id,
            text="👋 Hi! Try /hello <name>.",
        ))

    @commands.register("/hello")
    async def handle_hello(command: Command, update: Update) -> None:
        message = update.effective_message
        if not message:
            return
        name = command.args[0] if command.args else "user"
        await bot.send_message(NewMessage(
            chat_id=message.chat.id,
            text=f"Hello, {name}!",
            reply_to_message_id=message.message_id,
        ))

    return commands


async def run() -> None:
    """Create the bot and dispatch updates until a shutdown signal arrives.

    Raises:
        EnvironmentError: If ``BOT_TOKEN`` is not set.
    """
    if not BOT_TOKEN:
        raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:  # Windows event loops
            pass

    bot = await Bot.create(
        BOT_TOKEN,
        api_url=API_URL,
        poll_timeout=POLL_TIMEOUT,
        retry_delay=RETRY_DELAY,
        no_updates=NO_UPDATES,
        stop_event=stop_event,
    )
    logger.info("Bot is running. Polling for updates...", extra={"username": bot.username})
    await dispatch(bot, build_commands(bot))
    await bot.stop()


if __name__ == "__main__":
    asyncio.run(run())
