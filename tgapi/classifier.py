"""Response classifier -- second-phase decoding of a reply envelope."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from tgapi.codec import ApiResponse
from tgapi.exceptions import APIError, DecodeError, OperationFailedError

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def classify(envelope: ApiResponse, shape: Any) -> Any:
    """Turn *envelope* into a value of *shape* or raise a structured error.

    ``result`` is parsed only once ``ok`` is confirmed, and in strict mode, so
    a reply such as ``"result": "yes"`` for a boolean endpoint is rejected
    rather than coerced.

    Raises:
        APIError: If the envelope reports ``ok: false``.
        DecodeError: If a successful ``result`` does not match *shape*.
    """
    if not envelope.ok:
        raise APIError(
            envelope.error_code or 0,
            envelope.description or "",
            envelope.parameters,
        )
    try:
        return _adapter(shape).validate_python(envelope.result, strict=True)
    except ValidationError as exc:
        raise DecodeError(f"malformed result for {shape!r}: {exc}") from exc


def require_true(value: Any, error_cls: type[OperationFailedError]) -> None:
    """Raise *error_cls* when a boolean-result endpoint answered ``false``."""
    if value is False:
        raise error_cls()
