from types import SimpleNamespace

import pytest

from models.chat_models import Message, MessageStatus, Sender
from models.errors import InputValidationError
from models.model_request import ROLE_MODEL, ROLE_USER, SAFETY_SETTINGS
from services.chat.prompts import INITIAL_GREETING, SYSTEM_PROMPT
from services.chat.request_builder import (
    INVALID_AUDIO,
    INVALID_IMAGE,
    NO_CONTENT,
    build_request,
    format_history,
)


def _message(sender, text, status=MessageStatus.DELIVERED):
    return Message.create(sender, status, text=text)


def test_first_turn_prepends_persona_and_greeting():
    request = build_request("I have a headache")

    assert len(request.turns) == 3
    assert request.turns[0].role == ROLE_USER
    assert request.turns[0].parts[0].text == SYSTEM_PROMPT
    assert request.turns[1].role == ROLE_MODEL
    assert request.turns[1].parts[0].text == INITIAL_GREETING
    assert request.current_turn.parts[0].text == "I have a headache"


def test_later_turns_replay_history_without_bootstrap():
    prior = [
        _message(Sender.USER, "I have a headache"),
        _message(Sender.ASSISTANT, "How long has it lasted?"),
    ]
    request = build_request("Two days", prior_messages=prior)

    assert [turn.role for turn in request.turns] == [ROLE_USER, ROLE_MODEL, ROLE_USER]
    assert request.turns[1].parts[0].text == "How long has it lasted?"
    assert all(turn.parts[0].text != SYSTEM_PROMPT for turn in request.turns)


def test_history_drops_errors_placeholders_and_media_only_entries(image_data_url):
    prior = [
        _message(Sender.USER, "first"),
        _message(Sender.ASSISTANT, "Sorry, error: boom", MessageStatus.ERROR),
        Message.placeholder("Thinking..."),
        Message.create(Sender.USER, MessageStatus.DELIVERED, image_data=image_data_url),
        _message(Sender.ASSISTANT, "second"),
    ]
    turns = format_history(prior)
    assert [turn.parts[0].text for turn in turns] == ["first", "second"]


def test_history_with_only_failed_messages_counts_as_first_turn():
    prior = [_message(Sender.ASSISTANT, "Sorry, error: boom", MessageStatus.ERROR)]
    request = build_request("hello", prior_messages=prior)
    assert request.turns[0].parts[0].text == SYSTEM_PROMPT


def test_wire_history_accepts_legacy_sender_and_missing_status():
    prior = [
        SimpleNamespace(text="hi", sender="user", status=None),
        SimpleNamespace(text="hello there", sender="ai", status=None),
    ]
    turns = format_history(prior)
    assert [turn.role for turn in turns] == [ROLE_USER, ROLE_MODEL]


def test_media_parts_come_before_text(image_data_url, audio_data_url):
    request = build_request("look at this", image_data_url, audio_data_url)
    parts = request.current_turn.parts

    assert [part.media_kind for part in parts] == ["image", "audio", None]
    assert parts[0].mime_type == "image/png"
    assert parts[1].mime_type == "audio/webm;codecs=opus"
    assert parts[2].text == "look at this"
    assert request.describe_media() == "image, audio"


def test_media_without_text_gets_default_instruction(image_data_url, audio_data_url):
    image_only = build_request(image_data_url=image_data_url)
    assert image_only.current_turn.parts[-1].text == (
        "Process this image considering our ongoing health consultation context."
    )

    audio_only = build_request(audio_data_url=audio_data_url)
    assert audio_only.current_turn.parts[-1].text == (
        "Process this audio considering our ongoing health consultation context."
    )

    both = build_request(None, image_data_url, audio_data_url)
    assert "image" in both.current_turn.parts[-1].text


def test_whitespace_text_is_treated_as_missing():
    with pytest.raises(InputValidationError) as excinfo:
        build_request("   ")
    assert excinfo.value.message == NO_CONTENT


def test_invalid_image_payloads_are_rejected(audio_data_url):
    with pytest.raises(InputValidationError) as excinfo:
        build_request(image_data_url="not-a-data-url")
    assert excinfo.value.message == INVALID_IMAGE

    with pytest.raises(InputValidationError):
        build_request(image_data_url=audio_data_url)


def test_malformed_audio_is_rejected_but_unknown_type_is_forwarded():
    with pytest.raises(InputValidationError) as excinfo:
        build_request(audio_data_url="data:audio/webm,raw")
    assert excinfo.value.message == INVALID_AUDIO

    request = build_request(audio_data_url="data:audio/x-unknown;base64,AAAA")
    assert request.current_turn.parts[0].mime_type == "audio/x-unknown"


def test_generation_and_safety_parameters_are_fixed():
    request = build_request("hi")
    assert request.generation.temperature == 0.7
    assert request.generation.max_output_tokens == 2048
    assert request.safety_settings == SAFETY_SETTINGS
    assert len(request.safety_settings) == 4


def test_media_payload_must_be_valid_base64():
    with pytest.raises(InputValidationError) as excinfo:
        build_request(image_data_url="data:image/png;base64,abc")
    assert excinfo.value.message == INVALID_IMAGE

    with pytest.raises(InputValidationError) as excinfo:
        build_request(audio_data_url="data:audio/webm;base64,not base64!")
    assert excinfo.value.message == INVALID_AUDIO


def test_wire_history_with_legacy_statuses_is_kept():
    prior = [
        SimpleNamespace(text="I feel feverish", sender="user", status="sent"),
        SimpleNamespace(text="Since when?", sender="ai", status="received"),
        SimpleNamespace(text="...", sender="ai", status="loading"),
    ]
    request = build_request("Since yesterday", prior_messages=prior)

    assert [turn.parts[0].text for turn in request.turns] == [
        "I feel feverish",
        "Since when?",
        "Since yesterday",
    ]
