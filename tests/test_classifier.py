"""Tests for the response classifier and the exception taxonomy."""

import sys
import os
from typing import List

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tgapi.classifier import classify, require_true
from tgapi.codec import decode_envelope
from tgapi.exceptions import (
    APIError,
    DecodeError,
    NotAnsweredError,
    NotDeletedError,
    OperationFailedError,
    TelegramError,
)
from tgapi.models import ResponseParameters, Update, User


# ── APIError ─────────────────────────────────────────────────────────────────


class TestAPIError:
    """Validate the structured API error."""

    def test_attributes(self) -> None:
        exc = APIError(403, "Forbidden: bot was blocked by the user")
        assert exc.error_code == 403
        assert "403" in str(exc)
        assert "Forbidden" in str(exc)
        assert exc.retry_after is None
        assert exc.migrate_to_chat_id is None

    def test_default_description(self) -> None:
        assert APIError(500).description == "Unknown error"

    def test_hints(self) -> None:
        exc = APIError(400, "migrated", ResponseParameters(migrate_to_chat_id=-1001, retry_after=2))
        assert exc.migrate_to_chat_id == -1001
        assert exc.retry_after == 2

    def test_hierarchy(self) -> None:
        assert issubclass(APIError, TelegramError)
        assert issubclass(NotDeletedError, OperationFailedError)
        assert str(NotDeletedError()) == "telegram: message not deleted"


# ── classify ─────────────────────────────────────────────────────────────────


class TestClassify:
    """Second-phase decoding into the caller's shape."""

    def test_failure_never_parses_result(self) -> None:
        # result would not validate as User; the APIError must win regardless.
        env = decode_envelope(b'{"ok": false, "error_code": 401, "description": "Unauthorized", "result": "junk"}')
        with pytest.raises(APIError) as exc_info:
            classify(env, User)
        assert exc_info.value.error_code == 401

    def test_retry_after_hint(self) -> None:
        env = decode_envelope(b'{"ok":false,"error_code":429,"parameters":{"retry_after":3}}')
        with pytest.raises(APIError) as exc_info:
            classify(env, List[Update])
        assert exc_info.value.error_code == 429
        assert exc_info.value.retry_after == 3

    def test_success_model(self) -> None:
        env = decode_envelope(b'{"ok": true, "result": {"id": 1, "is_bot": true, "first_name": "Bot", "username": "echo_bot"}}')
        user = classify(env, User)
        assert isinstance(user, User)
        assert user.username == "echo_bot"

    def test_success_list(self) -> None:
        env = decode_envelope(b'{"ok": true, "result": [{"update_id": 5}, {"update_id": 7}]}')
        updates = classify(env, List[Update])
        assert [u.update_id for u in updates] == [5, 7]

    def test_malformed_success_payload(self) -> None:
        env = decode_envelope(b'{"ok": true, "result": {"id": "not-a-number"}}')
        with pytest.raises(DecodeError):
            classify(env, User)

    def test_boolean_is_not_coerced(self) -> None:
        env = decode_envelope(b'{"ok": true, "result": "true"}')
        with pytest.raises(DecodeError):
            classify(env, bool)

    def test_boolean_false_passes_through(self) -> None:
        env = decode_envelope(b'{"ok": true, "result": false}')
        assert classify(env, bool) is False


class TestRequireTrue:
    """Boolean-result convention."""

    def test_true_is_silent(self) -> None:
        require_true(True, NotAnsweredError)

    def test_false_raises_specific_error(self) -> None:
        with pytest.raises(NotAnsweredError):
            require_true(False, NotAnsweredError)
