"""TelegramClient -- the request/response pipeline and its endpoint wrappers.

Every endpoint goes through :meth:`TelegramClient.call`:

    encode (JSON or multipart) -> transport POST -> decode envelope -> classify

so each method below only names the API method, its request payload and the
shape its ``result`` must have.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from tgapi.classifier import classify, require_true
from tgapi.codec import decode_envelope, encode_request
from tgapi.exceptions import NotAnsweredError, NotDeletedError, NotEditedError
from tgapi.models import Message, Update, User
from tgapi.payloads import (
    ApiRequest,
    CallbackQueryAnswer,
    ForwardMessage,
    GetUpdatesRequest,
    MessageCaption,
    MessageDeletion,
    MessageReplyMarkup,
    MessageText,
    NewMessage,
    PhotoMessage,
)
from tgapi.transport import Transport

DEFAULT_API_URL = "https://api.telegram.org/bot"

# Added to the long-poll timeout so the HTTP read outlives Telegram's hold.
_POLL_GRACE: float = 10

logger = logging.getLogger("tgapi.client")


class TelegramClient:
    """Asynchronous client for the Telegram Bot API.

    Successful calls return typed models.  Failures raise a subclass of
    :class:`~tgapi.exceptions.TelegramError`.
    """

    _DEFAULT_TIMEOUT: float = 10

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Optional[Transport] = None,
    ) -> None:
        """Create a client for the bot identified by *token*.

        Args:
            token: Secret bot token issued by BotFather.
            api_url: URL prefix the token is appended to.
            timeout: Default HTTP timeout in seconds.
            transport: Pre-built transport, mainly for tests.
        """
        self._api_url = api_url + token
        self._timeout = timeout
        self._transport = transport or Transport(self._api_url, timeout=timeout)

    # ------------------------------------------------------------------
    #  Pipeline
    # ------------------------------------------------------------------

    async def call(
        self,
        method: str,
        request: Optional[ApiRequest],
        shape: Any,
        timeout: Optional[float] = None,
    ) -> Any:
        """Run one API call and return its ``result`` validated as *shape*.

        Raises:
            EncodingError, TransportError, DecodeError, APIError
        """
        body, content_type = encode_request(request)
        logger.debug("Calling API", extra={"api_endpoint": method, "content_type": content_type})
        raw = await self._transport.post(method, body, content_type, timeout=timeout)
        envelope = decode_envelope(raw)
        if not envelope.ok:
            logger.info(
                "API reported failure",
                extra={"api_endpoint": method, "error_code": envelope.error_code, "description": envelope.description},
            )
        return classify(envelope, shape)

    # ------------------------------------------------------------------
    #  Endpoints
    # ------------------------------------------------------------------

    async def get_me(self) -> User:
        """A simple method for testing your bot's auth token. Returns basic information about the bot."""
        return await self.call("getMe", None, User)

    async def get_updates(
        self,
        offset: int = 0,
        limit: Optional[int] = None,
        timeout: float = 0,
    ) -> List[Update]:
        """Receive incoming updates using long polling.

        Args:
            offset: Identifier of the first update to return; usually the
                highest ``update_id`` seen so far plus one.
            limit: Batch size, clamped to 1..100.
            timeout: Long-poll wait in seconds; 0 means short polling.
        """
        request = GetUpdatesRequest(offset=offset, limit=limit, timeout=int(timeout))
        return await self.call(
            "getUpdates",
            request,
            List[Update],
            timeout=timeout + _POLL_GRACE,
        )

    async def send_message(self, message: NewMessage) -> Message:
        """Send a text message. On success, the sent Message is returned."""
        return await self.call("sendMessage", message, Message)

    async def forward_message(self, message: ForwardMessage) -> Message:
        """Forward a message of any kind. On success, the sent Message is returned."""
        return await self.call("forwardMessage", message, Message)

    async def send_photo(self, message: PhotoMessage) -> Message:
        """Send a photo, uploading it when ``photo`` is an InputFile."""
        return await self.call("sendPhoto", message, Message)

    async def answer_callback_query(self, answer: CallbackQueryAnswer) -> None:
        """Answer a callback query sent from an inline keyboard.

        Raises:
            NotAnsweredError: If Telegram returned ``false``.
        """
        require_true(await self.call("answerCallbackQuery", answer, bool), NotAnsweredError)

    async def _edit(self, method: str, request: ApiRequest) -> Optional[Message]:
        # Chat messages come back as Message, inline messages as plain true.
        result = await self.call(method, request, Union[Message, bool])
        require_true(result, NotEditedError)
        return result if isinstance(result, Message) else None

    async def edit_message_text(self, text: MessageText) -> Optional[Message]:
        """Edit text of a message; returns the edited Message, or ``None`` for inline messages.

        Raises:
            NotEditedError: If Telegram returned ``false``.
        """
        return await self._edit("editMessageText", text)

    async def edit_message_caption(self, caption: MessageCaption) -> Optional[Message]:
        """Edit the caption of a message."""
        return await self._edit("editMessageCaption", caption)

    async def edit_message_reply_markup(self, markup: MessageReplyMarkup) -> Optional[Message]:
        """Edit only the inline keyboard of a message."""
        return await self._edit("editMessageReplyMarkup", markup)

    async def delete_message(self, deletion: MessageDeletion) -> None:
        """Delete a message.

        Raises:
            NotDeletedError: If Telegram returned ``false``.
        """
        require_true(await self.call("deleteMessage", deletion, bool), NotDeletedError)
