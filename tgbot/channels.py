"""Closable bounded channels for handing poller output to the application.

A :class:`Channel` behaves like a small :class:`asyncio.Queue` that can be
closed: after :meth:`Channel.close` no further items are accepted, receivers
drain whatever is buffered and then see the channel end.  Consumers should
iterate with ``async for`` until the channel closes instead of polling a
"stopped" flag.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import AsyncIterator, Deque, Generic, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised on send to a closed channel, or receive from a drained closed one."""


class Channel(Generic[T]):
    """Bounded, closable FIFO channel for asyncio tasks.

    ``send`` suspends while the buffer is full.  Cancelling a suspended
    ``send`` leaves the channel untouched.
    """

    def __init__(self, maxsize: int = 1) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._maxsize = maxsize
        self._items: Deque[T] = deque()
        self._closed = False
        self._changed = asyncio.Event()

    def _notify(self) -> None:
        # Wake every waiter; each re-checks its own condition.
        self._changed.set()
        self._changed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def __len__(self) -> int:
        return len(self._items)

    def full(self) -> bool:
        return len(self._items) >= self._maxsize

    async def send(self, item: T) -> None:
        """Append *item*, waiting for buffer space.

        Raises:
            ChannelClosed: If the channel is or becomes closed.
        """
        while not self._closed and self.full():
            await self._changed.wait()
        if self._closed:
            raise ChannelClosed("send on closed channel")
        self._items.append(item)
        self._notify()

    async def receive(self) -> T:
        """Return the oldest item, waiting for one if the buffer is empty.

        Raises:
            ChannelClosed: If the channel is closed and fully drained.
        """
        while not self._items and not self._closed:
            await self._changed.wait()
        if not self._items:
            raise ChannelClosed("receive on closed channel")
        item = self._items.popleft()
        self._notify()
        return item

    def close(self) -> None:
        """Close the channel. Buffered items stay available to receivers.

        Raises:
            ChannelClosed: If the channel was already closed.
        """
        if self._closed:
            raise ChannelClosed("close of closed channel")
        self._closed = True
        self._notify()

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosed:
            raise StopAsyncIteration from None
