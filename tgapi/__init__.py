"""Async Telegram Bot API layer -- models, payloads, codec, transport and client.

This package is framework-agnostic. It must NEVER import from ``tgbot/``.

Usage::

    from tgapi import TelegramClient, APIError
    from tgapi.payloads import NewMessage

    client = TelegramClient(token)
    await client.send_message(NewMessage(chat_id=42, text="hi"))
"""

from tgapi.client import DEFAULT_API_URL, TelegramClient
from tgapi.exceptions import (
    APIError,
    DecodeError,
    EncodingError,
    NotAnsweredError,
    NotDeletedError,
    NotEditedError,
    OperationFailedError,
    TelegramError,
    TransportError,
)

__all__ = [
    "DEFAULT_API_URL",
    "TelegramClient",
    "TelegramError",
    "EncodingError",
    "TransportError",
    "DecodeError",
    "APIError",
    "OperationFailedError",
    "NotDeletedError",
    "NotEditedError",
    "NotAnsweredError",
]
