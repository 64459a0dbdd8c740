"""Envelope codec -- request encoding and first-phase response decoding.

Outbound requests are encoded either as JSON or, when the request exposes a
multipart form with at least one file, as ``multipart/form-data``.  Inbound
bodies are parsed only as far as the outer envelope; the operation-specific
``result`` stays undecoded until :mod:`tgapi.classifier` knows the call
succeeded.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, StrictBool, ValidationError
from urllib3 import encode_multipart_formdata

from tgapi.exceptions import DecodeError, EncodingError
from tgapi.models import ResponseParameters
from tgapi.payloads import ApiRequest, Multipart

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

logger = logging.getLogger("tgapi.codec")


class ApiResponse(BaseModel):
    """Outer reply envelope: ``{ok, result?, error_code?, description?, parameters?}``."""

    ok: StrictBool
    result: Any = None
    error_code: Optional[int] = None
    description: Optional[str] = None
    parameters: Optional[ResponseParameters] = None


def encode_multipart(form: Multipart) -> tuple[bytes, str]:
    """Encode *form* as ``multipart/form-data``.

    Plain fields come first, then one part per file named after its field key
    and carrying the file's declared filename.

    Raises:
        EncodingError: If an attachment cannot be read.
    """
    fields: list[tuple[str, Any]] = list(form.form.items())
    for key, attachment in form.files.items():
        try:
            data = attachment.read()
        except OSError as exc:
            raise EncodingError(f"cannot read attachment {key!r}: {exc}") from exc
        fields.append((key, (attachment.name, data)))
    body, content_type = encode_multipart_formdata(fields)
    return body, content_type


def encode_request(request: Optional[ApiRequest]) -> tuple[bytes, str]:
    """Encode *request* into ``(body, content_type)``.

    Raises:
        EncodingError: On serialisation or attachment I/O failure.
    """
    if request is None:
        return b"{}", JSON_CONTENT_TYPE

    form = request.multipart()
    if form is not None and form.files:
        logger.debug("Encoding multipart request", extra={"files": sorted(form.files)})
        return encode_multipart(form)

    try:
        body = request.model_dump_json(exclude_none=True, by_alias=True)
    except (ValueError, TypeError) as exc:
        raise EncodingError(f"cannot serialise {type(request).__name__}: {exc}") from exc
    return body.encode("utf-8"), JSON_CONTENT_TYPE


def decode_envelope(raw: bytes) -> ApiResponse:
    """Parse the outer envelope of a reply without touching ``result``.

    Raises:
        DecodeError: If *raw* is not JSON or lacks the envelope shape.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"response is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise DecodeError(f"response is not an envelope: {type(payload).__name__}")
    try:
        return ApiResponse.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"malformed envelope: {exc}") from exc
