"""Bot runtime -- update poller, channels, session lifecycle and command dispatch.

This package may import from ``tgapi/`` and ``tgcore/`` only.
"""

from tgbot.channels import Channel, ChannelClosed
from tgbot.commands import Command, CommandRegistry, match
from tgbot.dispatcher import dispatch, process_update
from tgbot.poller import PollerState, UpdatePoller
from tgbot.session import Bot

__all__ = [
    # Session
    "Bot",
    # Polling
    "UpdatePoller",
    "PollerState",
    "Channel",
    "ChannelClosed",
    # Commands
    "Command",
    "CommandRegistry",
    "match",
    # Dispatcher
    "dispatch",
    "process_update",
]
