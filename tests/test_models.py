"""Tests for the Pydantic wire models and request payloads."""

import sys
import os
import pytest

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pydantic import ValidationError

from tgapi.models import (
    CallbackQuery,
    Chat,
    ForceReply,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    Message,
    MessageEntity,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    Update,
    User,
)
from tgapi.payloads import (
    ForwardMessage,
    GetUpdatesRequest,
    InputFile,
    MessageCaption,
    NewMessage,
    PhotoMessage,
)

_MSG = {"message_id": 1, "date": 0, "chat": {"id": 5, "type": "group"}, "text": "hi"}


# ── Update ───────────────────────────────────────────────────────────────────


class TestUpdate:
    """Validate Update dispatch helpers."""

    def test_minimal(self) -> None:
        u = Update.model_validate({"update_id": 1})
        assert u.kind is None
        assert u.effective_message is None

    @pytest.mark.parametrize("field", ["message", "edited_message", "channel_post", "edited_channel_post"])
    def test_message_kinds(self, field) -> None:
        u = Update.model_validate({"update_id": 2, field: _MSG})
        assert u.kind == field
        assert u.effective_message is not None
        assert u.effective_message.text == "hi"

    def test_callback_query(self) -> None:
        u = Update.model_validate({
            "update_id": 3,
            "callback_query": {
                "id": "cb",
                "from": {"id": 7, "is_bot": False, "first_name": "Ann"},
                "chat_instance": "ci",
                "data": "yes",
            },
        })
        assert u.kind == "callback_query"
        assert isinstance(u.callback_query, CallbackQuery)
        assert u.callback_query.from_field.id == 7
        assert u.effective_message is None

    def test_unknown_fields_ignored(self) -> None:
        u = Update.model_validate({"update_id": 4, "poll": {"id": "p"}})
        assert u.update_id == 4
        assert u.kind is None

    def test_missing_update_id(self) -> None:
        with pytest.raises(ValidationError):
            Update.model_validate({"message": _MSG})


# ── Message / Chat / Entity ─────────────────────────────────────────────────


class TestMessage:
    """Validate the Message schema."""

    def test_from_alias(self) -> None:
        m = Message.model_validate({**_MSG, "from": {"id": 9, "is_bot": False, "first_name": "Bo"}})
        assert m.from_field is not None
        assert m.from_field.first_name == "Bo"
        assert "from" in m.model_dump(by_alias=True, exclude_none=True)

    def test_nested_reply(self) -> None:
        m = Message.model_validate({**_MSG, "reply_to_message": _MSG})
        assert m.reply_to_message is not None
        assert m.reply_to_message.message_id == 1

    def test_entities(self) -> None:
        m = Message.model_validate({
            **_MSG,
            "text": "/start now",
            "entities": [{"type": "bot_command", "offset": 0, "length": 6}],
        })
        assert m.entities[0].is_bot_command()
        assert not m.entities[0].is_mention()

    @pytest.mark.parametrize(
        "chat_type, helper",
        [("private", "is_private"), ("group", "is_group"), ("supergroup", "is_supergroup"), ("channel", "is_channel")],
    )
    def test_chat_helpers(self, chat_type, helper) -> None:
        chat = Chat(id=1, type=chat_type)
        assert getattr(chat, helper)()
        others = {"is_private", "is_group", "is_supergroup", "is_channel"} - {helper}
        assert not any(getattr(chat, name)() for name in others)

    def test_user_required_fields(self) -> None:
        with pytest.raises(ValidationError):
            User.model_validate({"id": 1, "is_bot": False})

    def test_entity_user(self) -> None:
        e = MessageEntity(type="text_mention", offset=0, length=3, user=User(id=1, is_bot=False, first_name="A"))
        assert e.user.id == 1


# ── Request payloads ─────────────────────────────────────────────────────────


class TestGetUpdatesRequest:
    """Polling parameters are normalised before encoding."""

    def test_zero_values_omitted(self) -> None:
        r = GetUpdatesRequest(offset=0, timeout=0)
        assert r.model_dump(exclude_none=True) == {}

    @pytest.mark.parametrize("limit, expected", [(0, 1), (-3, 1), (50, 50), (1000, 100)])
    def test_limit_clamped(self, limit, expected) -> None:
        assert GetUpdatesRequest(limit=limit).limit == expected

    def test_positive_values_kept(self) -> None:
        r = GetUpdatesRequest(offset=8, timeout=30)
        assert (r.offset, r.timeout) == (8, 30)


class TestPayloads:
    """Validate outbound request models."""

    def test_frozen(self) -> None:
        req = NewMessage(chat_id=1, text="x")
        with pytest.raises(ValidationError):
            req.text = "y"

    def test_chat_id_accepts_username(self) -> None:
        assert ForwardMessage(chat_id="@channel", from_chat_id=1, message_id=2).chat_id == "@channel"

    def test_form_fields_stringify(self) -> None:
        markup = InlineKeyboardMarkup(inline_keyboard=[[InlineKeyboardButton(text="A", callback_data="a")]])
        fields = MessageCaption(chat_id=1, message_id=2, reply_markup=markup).form_fields()
        assert fields["chat_id"] == "1"
        assert fields["reply_markup"] == '{"inline_keyboard":[[{"text":"A","callback_data":"a"}]]}'
        assert "caption" not in fields

    def test_reply_markup_variants(self) -> None:
        req = NewMessage(chat_id=1, text="x", reply_markup=ForceReply())
        assert isinstance(req.reply_markup, ForceReply)

    @pytest.mark.parametrize(
        "markup, expected",
        [
            ({"force_reply": True}, ForceReply),
            ({"remove_keyboard": True}, ReplyKeyboardRemove),
            ({"keyboard": [[{"text": "Yes"}]]}, ReplyKeyboardMarkup),
            ({"inline_keyboard": [[{"text": "Go", "callback_data": "go"}]]}, InlineKeyboardMarkup),
        ],
    )
    def test_reply_markup_from_dict(self, markup, expected) -> None:
        req = NewMessage(chat_id=1, text="x", reply_markup=markup)
        assert type(req.reply_markup) is expected

    def test_only_uploads_are_multipart(self) -> None:
        assert PhotoMessage(chat_id=1, photo="file-id").multipart() is None
        form = PhotoMessage(chat_id=1, photo=InputFile("a.jpg", b"x"), caption="c").multipart()
        assert form is not None
        assert set(form.files) == {"photo"}
        assert form.form == {"chat_id": "1", "caption": "c"}

    def test_input_file_read(self, tmp_path) -> None:
        path = tmp_path / "p.bin"
        path.write_bytes(b"\x00\x01")
        f = InputFile.from_path(path)
        assert f.name == "p.bin"
        assert f.read() == b"\x00\x01"
