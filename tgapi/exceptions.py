"""Exception hierarchy for the tgapi Telegram client.

Every failure of a remote call surfaces as a :class:`TelegramError` subclass
so callers can branch on the stage that failed:

- :class:`EncodingError`  -- the request could not be serialised or streamed.
- :class:`TransportError` -- the network call itself failed.
- :class:`DecodeError`    -- the reply was not a valid envelope, or a
  successful reply carried a malformed ``result``.
- :class:`APIError`       -- Telegram answered ``ok: false``.
- :class:`OperationFailedError` -- Telegram answered ``ok: true`` with a
  ``false`` result for an endpoint that reports success as a boolean.
"""

from __future__ import annotations

from typing import Optional

from tgapi.models import ResponseParameters


class TelegramError(Exception):
    """Base class for every error raised by the API layer."""


class EncodingError(TelegramError):
    """The outbound request could not be encoded."""


class TransportError(TelegramError):
    """The HTTP request failed before a response body was read."""


class DecodeError(TelegramError):
    """The response body (envelope or result) could not be decoded."""


class APIError(TelegramError):
    """Remote-reported failure (``ok: false``).

    Attributes:
        error_code: Numeric code reported by Telegram (e.g. ``429``).
        description: Human-readable explanation.
        parameters: Optional hints -- retry delay or chat migration target.
    """

    def __init__(
        self,
        error_code: int,
        description: str = "",
        parameters: Optional[ResponseParameters] = None,
    ) -> None:
        """Initialise with the error code, description and optional hints."""
        self.error_code = error_code
        self.description = description or "Unknown error"
        self.parameters = parameters
        super().__init__(f"telegram: {error_code} {self.description}")

    @property
    def retry_after(self) -> Optional[int]:
        """Seconds to wait before retrying, when Telegram asked for it."""
        return self.parameters.retry_after if self.parameters else None

    @property
    def migrate_to_chat_id(self) -> Optional[int]:
        """New identifier of a group that was upgraded to a supergroup."""
        return self.parameters.migrate_to_chat_id if self.parameters else None


class OperationFailedError(TelegramError):
    """An endpoint returned ``result: false`` inside a successful envelope."""

    message = "telegram: operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


class NotDeletedError(OperationFailedError):
    message = "telegram: message not deleted"


class NotEditedError(OperationFailedError):
    message = "telegram: message not edited"


class NotAnsweredError(OperationFailedError):
    message = "telegram: query not answered"
