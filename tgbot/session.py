"""Bot session -- a verified TelegramClient that owns an update poller.

Usage::

    bot = await Bot.create(token, poll_timeout=30)
    async for batch in bot.updates:
        ...
    # elsewhere: await bot.stop()

``Bot.create`` verifies the token with ``getMe`` before anything starts, so
a poller never runs against invalid credentials.
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional

from tgapi.client import DEFAULT_API_URL, TelegramClient
from tgapi.models import Update, User
from tgbot.channels import Channel
from tgbot.poller import PollerState, UpdatePoller
from tgcore.logger import BotLogger

logger = BotLogger.get_logger()

DEFAULT_POLL_TIMEOUT: float = 60.0
DEFAULT_RETRY_DELAY: float = 5.0


class Bot(TelegramClient):
    """A single bot identity: outbound API calls plus an inbound update stream.

    Outbound methods (``send_message``, ``delete_message``, …) run in the
    caller's task and may be used concurrently with the poller and with each
    other.  Inbound updates arrive on :attr:`updates` as batches; polling
    failures arrive on :attr:`errors`.  Both channels close when the poller
    stops.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        no_updates: bool = False,
        stop_event: Optional[asyncio.Event] = None,
        channel_size: int = 1,
        **client_options: Any,
    ) -> None:
        """Build the session without contacting Telegram.

        Args:
            token: Secret bot token.
            api_url: URL prefix the token is appended to.
            poll_timeout: Long-poll wait for ``getUpdates``, in seconds.
            retry_delay: Backoff after a failed poll, in seconds.
            no_updates: Never poll; both channels are closed immediately.
            stop_event: Lifetime signal shared with the application; a new
                event is created when omitted.
            channel_size: Buffer size of the update and error channels.
        """
        super().__init__(token, api_url=api_url, **client_options)
        self._stop = stop_event or asyncio.Event()
        self._no_updates = no_updates
        self._me: Optional[User] = None
        self._task: Optional[asyncio.Task] = None
        self._updates: Channel[List[Update]] = Channel(channel_size)
        self._errors: Channel[Exception] = Channel(channel_size)
        self._poller = UpdatePoller(
            self.get_updates,
            self._updates,
            self._errors,
            self._stop,
            poll_timeout=poll_timeout,
            retry_delay=retry_delay,
        )
        if no_updates:
            self._updates.close()
            self._errors.close()

    @classmethod
    async def create(cls, token: str, **options: Any) -> "Bot":
        """Create a bot, verify its token and start polling.

        Raises:
            TelegramError: If the ``getMe`` verification call fails; no
                poller is started in that case.
        """
        bot = cls(token, **options)
        bot._me = await bot.get_me()
        logger.info(
            "Bot identity verified",
            extra={"bot_id": bot._me.id, "username": bot._me.username, "no_updates": bot._no_updates},
        )
        if not bot._no_updates:
            bot._start()
        return bot

    def _start(self) -> None:
        self._task = asyncio.create_task(self._poller.run(), name="tgbot-poller")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def me(self) -> Optional[User]:
        """Identity returned by ``getMe`` during :meth:`create`."""
        return self._me

    @property
    def username(self) -> str:
        return (self._me.username or "") if self._me else ""

    @property
    def updates(self) -> Channel[List[Update]]:
        return self._updates

    @property
    def errors(self) -> Channel[Exception]:
        return self._errors

    @property
    def state(self) -> PollerState:
        if self._no_updates:
            return PollerState.STOPPED
        return self._poller.state

    @property
    def offset(self) -> int:
        return self._poller.offset

    @property
    def stop_event(self) -> asyncio.Event:
        return self._stop

    async def stop(self) -> None:
        """Fire the lifetime signal and wait until both channels are closed."""
        self._stop.set()
        if self._task is not None:
            await self._task

    async def __aenter__(self) -> "Bot":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
