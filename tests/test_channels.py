"""Tests for the closable bounded Channel."""

import asyncio
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tgbot.channels import Channel, ChannelClosed


class TestChannelBasics:
    """FIFO behaviour and capacity."""

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            Channel(0)

    @pytest.mark.asyncio
    async def test_fifo(self) -> None:
        ch: Channel[int] = Channel(3)
        for i in range(3):
            await ch.send(i)
        assert ch.full()
        assert [await ch.receive() for _ in range(3)] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_send_blocks_while_full(self) -> None:
        ch: Channel[str] = Channel(1)
        await ch.send("a")
        sender = asyncio.create_task(ch.send("b"))
        await asyncio.sleep(0.01)
        assert not sender.done()

        assert await ch.receive() == "a"
        await asyncio.wait_for(sender, 1)
        assert await ch.receive() == "b"

    @pytest.mark.asyncio
    async def test_receive_waits_for_item(self) -> None:
        ch: Channel[int] = Channel()
        receiver = asyncio.create_task(ch.receive())
        await asyncio.sleep(0.01)
        assert not receiver.done()
        await ch.send(9)
        assert await asyncio.wait_for(receiver, 1) == 9


class TestChannelClose:
    """Close and drain semantics."""

    @pytest.mark.asyncio
    async def test_drain_then_end(self) -> None:
        ch: Channel[int] = Channel(2)
        await ch.send(1)
        await ch.send(2)
        ch.close()
        assert [item async for item in ch] == [1, 2]
        with pytest.raises(ChannelClosed):
            await ch.receive()

    @pytest.mark.asyncio
    async def test_send_after_close(self) -> None:
        ch: Channel[int] = Channel()
        ch.close()
        with pytest.raises(ChannelClosed):
            await ch.send(1)

    def test_double_close(self) -> None:
        ch: Channel[int] = Channel()
        ch.close()
        assert ch.closed
        with pytest.raises(ChannelClosed):
            ch.close()

    @pytest.mark.asyncio
    async def test_close_wakes_receivers(self) -> None:
        ch: Channel[int] = Channel()
        consumer = asyncio.create_task(ch.receive())
        await asyncio.sleep(0.01)
        ch.close()
        with pytest.raises(ChannelClosed):
            await asyncio.wait_for(consumer, 1)

    @pytest.mark.asyncio
    async def test_close_wakes_blocked_sender(self) -> None:
        ch: Channel[int] = Channel(1)
        await ch.send(1)
        sender = asyncio.create_task(ch.send(2))
        await asyncio.sleep(0.01)
        ch.close()
        with pytest.raises(ChannelClosed):
            await asyncio.wait_for(sender, 1)
        assert len(ch) == 1

    @pytest.mark.asyncio
    async def test_cancelled_send_leaves_channel_unchanged(self) -> None:
        ch: Channel[int] = Channel(1)
        await ch.send(1)
        sender = asyncio.create_task(ch.send(2))
        await asyncio.sleep(0.01)
        sender.cancel()
        with pytest.raises(asyncio.CancelledError):
            await sender
        assert len(ch) == 1
        assert await ch.receive() == 1
