"""Update poller -- turns ``getUpdates`` long-polling into a stream of batches.

The poller is a small state machine run as one asyncio task per bot:

    RUNNING  --fetch ok, empty-------------------------> RUNNING
    RUNNING  --fetch ok, batch--publish on updates-----> RUNNING
    RUNNING  --fetch failed--publish on errors---------> BACKOFF
    BACKOFF  --retry delay elapsed---------------------> RUNNING
    any      --lifetime signal / task cancelled--------> STOPPED

Every suspension (the HTTP call, a publish to a full channel, the backoff
sleep) races the lifetime signal, and the signal wins a tie.  On STOPPED both
channels are closed exactly once; consumers learn about shutdown only from
that.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Any, Awaitable, Callable, List, TypeVar

from tgapi.models import Update
from tgbot.channels import Channel, ChannelClosed
from tgcore.logger import BotLogger

logger = BotLogger.get_logger()

T = TypeVar("T")

# fetch(offset=..., timeout=...) -> list of updates; TelegramClient.get_updates fits.
FetchUpdates = Callable[..., Awaitable[List[Update]]]


class PollerState(str, enum.Enum):
    RUNNING = "running"
    BACKOFF = "backoff"
    STOPPED = "stopped"


class _Stopped(Exception):
    """The lifetime signal fired while the poller was suspended."""


def next_offset(batch: List[Update]) -> int:
    """Offset acknowledging every update in a non-empty *batch*."""
    return max(update.update_id for update in batch) + 1


class UpdatePoller:
    """Long-poll loop publishing update batches and errors on two channels.

    Args:
        fetch: Coroutine function returning the updates after an offset.
        updates: Channel receiving each non-empty batch.
        errors: Channel receiving every fetch failure.
        stop_event: Lifetime signal; setting it stops the poller.
        poll_timeout: Long-poll wait passed to *fetch*, in seconds.
        retry_delay: Backoff between a failed fetch and the next attempt.
    """

    def __init__(
        self,
        fetch: FetchUpdates,
        updates: Channel[List[Update]],
        errors: Channel[Exception],
        stop_event: asyncio.Event,
        poll_timeout: float = 60.0,
        retry_delay: float = 5.0,
    ) -> None:
        self._fetch = fetch
        self._updates = updates
        self._errors = errors
        self._stop = stop_event
        self._poll_timeout = poll_timeout
        self._retry_delay = retry_delay
        self.offset = 0
        self.state = PollerState.RUNNING

    async def _race(self, aw: Awaitable[T]) -> T:
        """Await *aw* unless the lifetime signal fires first.

        Raises:
            _Stopped: If the signal fired (also when both finished together).
        """
        if self._stop.is_set():
            if asyncio.iscoroutine(aw):
                aw.close()
            raise _Stopped
        work = asyncio.ensure_future(aw)
        stop = asyncio.ensure_future(self._stop.wait())
        try:
            await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not work.done():
                work.cancel()
            if not stop.done():
                stop.cancel()
        if stop.done() and not stop.cancelled():
            if work.done() and not work.cancelled():
                # Retrieve the outcome so a late failure is not reported as unhandled.
                work.exception()
            raise _Stopped
        return work.result()

    async def _publish(self, channel: Channel[Any], item: Any) -> None:
        try:
            await self._race(channel.send(item))
        except ChannelClosed:
            # A consumer closed the channel; nobody is listening any more.
            logger.info("Channel closed by consumer, stopping")
            raise _Stopped from None

    @staticmethod
    def _close(channel: Channel[Any]) -> None:
        if not channel.closed:
            channel.close()

    async def run(self) -> None:
        """Poll until stopped, then close both channels."""
        logger.info("Update poller started", extra={"poll_timeout": self._poll_timeout})
        try:
            while True:
                if self.state is PollerState.BACKOFF:
                    await self._race(asyncio.sleep(self._retry_delay))
                    self.state = PollerState.RUNNING

                try:
                    batch = await self._race(
                        self._fetch(offset=self.offset, timeout=self._poll_timeout)
                    )
                except _Stopped:
                    raise
                except Exception as exc:
                    logger.warning(
                        "getUpdates failed, backing off",
                        extra={"offset": self.offset, "retry_delay": self._retry_delay, "error": str(exc)},
                    )
                    await self._publish(self._errors, exc)
                    self.state = PollerState.BACKOFF
                    continue

                if not batch:
                    continue

                offset = next_offset(batch)
                logger.debug("Publishing batch", extra={"count": len(batch), "offset": offset})
                await self._publish(self._updates, batch)
                self.offset = offset
        except _Stopped:
            pass
        finally:
            self.state = PollerState.STOPPED
            self._close(self._updates)
            self._close(self._errors)
            logger.info("Update poller stopped", extra={"offset": self.offset})

