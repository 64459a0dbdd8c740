"""Outbound request payloads.

Each operation's request is an immutable :class:`ApiRequest`.  Requests that
can carry an uploaded file override :meth:`ApiRequest.multipart`; the codec
asks every request once, at encode time, and uses ``multipart/form-data``
only when the answer contains at least one file.
"""

from __future__ import annotations

import enum
import json
import os
from dataclasses import dataclass, field
from typing import IO, Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from tgapi.models import InlineKeyboardMarkup, Markup


class ParseMode(str, enum.Enum):
    """Formatting options for message text and captions."""

    MARKDOWN = "Markdown"
    MARKDOWN_V2 = "MarkdownV2"
    HTML = "HTML"


class InputFile:
    """A file to upload.

    *content* is raw bytes, a binary file object, or a filesystem path that is
    opened when the request is encoded.  *name* is the filename announced in
    the multipart part.
    """

    __slots__ = ("name", "content")

    def __init__(self, name: str, content: Union[bytes, IO[bytes], str, os.PathLike]) -> None:
        self.name = name
        self.content = content

    def __repr__(self) -> str:
        return f"InputFile(name={self.name!r})"

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> "InputFile":
        return cls(name=os.path.basename(os.fspath(path)), content=path)

    def read(self) -> bytes:
        """Return the file's bytes.

        Raises:
            OSError: If the underlying file cannot be read.
        """
        if isinstance(self.content, bytes):
            return self.content
        if isinstance(self.content, (str, os.PathLike)):
            with open(self.content, "rb") as fh:
                return fh.read()
        return self.content.read()


@dataclass
class Multipart:
    """Form fields plus file attachments for a ``multipart/form-data`` body."""

    form: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, InputFile] = field(default_factory=dict)


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


class ApiRequest(BaseModel):
    """Base class for every outbound request payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    def multipart(self) -> Optional[Multipart]:
        """Return a multipart form when this request carries files, else ``None``."""
        return None

    def form_fields(self, exclude: Optional[set[str]] = None) -> Dict[str, str]:
        """Stringify every present field for use as a multipart form part."""
        data = self.model_dump(mode="json", exclude_none=True, by_alias=True, exclude=exclude)
        return {key: _form_value(value) for key, value in data.items()}


class GetUpdatesRequest(ApiRequest):
    """Parameters of ``getUpdates``.

    ``offset`` and ``timeout`` of zero are left out of the wire payload, which
    Telegram treats as "from the oldest unconfirmed update" and short polling.
    """

    offset: Optional[int] = None
    limit: Optional[int] = None
    timeout: Optional[int] = None

    @field_validator("offset", "timeout")
    @classmethod
    def _positive_or_absent(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            return None
        return value

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        return min(max(value, 1), 100)


class NewMessage(ApiRequest):
    """Parameters of ``sendMessage``."""

    chat_id: Union[int, str]
    text: str
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: Optional[bool] = None
    disable_notification: Optional[bool] = None
    reply_to_message_id: Optional[int] = None
    reply_markup: Optional[Markup] = None


class ForwardMessage(ApiRequest):
    """Parameters of ``forwardMessage``."""

    chat_id: Union[int, str]
    from_chat_id: Union[int, str]
    message_id: int
    disable_notification: Optional[bool] = None


class PhotoMessage(ApiRequest):
    """Parameters of ``sendPhoto``.

    ``photo`` is either an :class:`InputFile` to upload or the ``file_id`` /
    URL of a photo Telegram already knows.
    """

    chat_id: Union[int, str]
    photo: Union[InputFile, str]
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    disable_notification: Optional[bool] = None
    reply_to_message_id: Optional[int] = None
    reply_markup: Optional[Markup] = None

    def multipart(self) -> Optional[Multipart]:
        if not isinstance(self.photo, InputFile):
            return None
        return Multipart(
            form=self.form_fields(exclude={"photo"}),
            files={"photo": self.photo},
        )


class CallbackQueryAnswer(ApiRequest):
    """Parameters of ``answerCallbackQuery``."""

    callback_query_id: str
    text: Optional[str] = None
    show_alert: Optional[bool] = None
    url: Optional[str] = None
    cache_time: Optional[int] = None


class MessageText(ApiRequest):
    """Parameters of ``editMessageText``.

    Identify the message with ``chat_id`` + ``message_id`` or with
    ``inline_message_id``.
    """

    text: str
    chat_id: Optional[Union[int, str]] = None
    message_id: Optional[int] = None
    inline_message_id: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: Optional[bool] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


class MessageCaption(ApiRequest):
    """Parameters of ``editMessageCaption``."""

    chat_id: Optional[Union[int, str]] = None
    message_id: Optional[int] = None
    inline_message_id: Optional[str] = None
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


class MessageReplyMarkup(ApiRequest):
    """Parameters of ``editMessageReplyMarkup``."""

    chat_id: Optional[Union[int, str]] = None
    message_id: Optional[int] = None
    inline_message_id: Optional[str] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


class MessageDeletion(ApiRequest):
    """Parameters of ``deleteMessage``."""

    chat_id: Union[int, str]
    message_id: int
