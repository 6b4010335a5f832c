"""Assemble multimodal model requests from the current turn and prior conversation."""

import logging
from typing import Any, List, Optional, Sequence

from models.chat_models import HISTORY_STATUSES, Sender, status_value
from models.errors import InputValidationError
from models.model_request import ROLE_MODEL, ROLE_USER, ModelRequest, Turn, TurnPart
from services.chat.prompts import INITIAL_GREETING, SYSTEM_PROMPT, media_instruction
from services.media_encoder import decode_data_url, parse_data_url
from utils.media_validation import check_audio_mime, is_image_mime

LOGGER = logging.getLogger(__name__)

INVALID_IMAGE = "Invalid image data format."
INVALID_AUDIO = "Invalid or unsupported audio data format."
NO_CONTENT = "No prompt text, image, or audio data provided."


def role_for_sender(sender: Any) -> str:
    return ROLE_USER if Sender.parse(sender) is Sender.USER else ROLE_MODEL


def _keeps(message: Any) -> bool:
    """History keeps messages with text that were sent or delivered.

    Entries without a status (as older clients send them) are kept too.
    """
    if not getattr(message, "text", None):
        return False
    status = status_value(getattr(message, "status", None))
    return status is None or status in HISTORY_STATUSES


def format_history(prior_messages: Sequence[Any]) -> List[Turn]:
    """Map retained prior messages onto single-part text turns, preserving order."""
    return [
        Turn(role=role_for_sender(message.sender), parts=(TurnPart.from_text(message.text),))
        for message in prior_messages
        if _keeps(message)
    ]


def _image_part(data_url: str) -> TurnPart:
    try:
        mime_type, payload = parse_data_url(data_url)
        decode_data_url(data_url)
    except InputValidationError as exc:
        raise InputValidationError(INVALID_IMAGE) from exc
    if not is_image_mime(mime_type):
        LOGGER.error("Invalid image MIME type: %s", mime_type)
        raise InputValidationError(INVALID_IMAGE)
    return TurnPart.from_media(mime_type, payload)


def _audio_part(data_url: str) -> TurnPart:
    try:
        mime_type, payload = parse_data_url(data_url)
        decode_data_url(data_url)
    except InputValidationError as exc:
        raise InputValidationError(INVALID_AUDIO) from exc
    check_audio_mime(mime_type)
    return TurnPart.from_media(mime_type, payload)


def build_current_turn(
    text: Optional[str],
    image_data_url: Optional[str],
    audio_data_url: Optional[str],
) -> Turn:
    """Build the user turn with parts ordered image, audio, text."""
    prompt = (text or "").strip()
    if not prompt and not image_data_url and not audio_data_url:
        raise InputValidationError(NO_CONTENT)

    parts: List[TurnPart] = []
    if image_data_url:
        parts.append(_image_part(image_data_url))
    if audio_data_url:
        parts.append(_audio_part(audio_data_url))

    if prompt:
        parts.append(TurnPart.from_text(prompt))
    else:
        parts.append(TurnPart.from_text(media_instruction("image" if image_data_url else "audio")))
    return Turn(role=ROLE_USER, parts=tuple(parts))


def bootstrap_turns() -> List[Turn]:
    """Persona instructions and the canned greeting that open every session."""
    return [
        Turn(role=ROLE_USER, parts=(TurnPart.from_text(SYSTEM_PROMPT),)),
        Turn(role=ROLE_MODEL, parts=(TurnPart.from_text(INITIAL_GREETING),)),
    ]


def build_request(
    text: Optional[str] = None,
    image_data_url: Optional[str] = None,
    audio_data_url: Optional[str] = None,
    prior_messages: Sequence[Any] = (),
) -> ModelRequest:
    """Return the full model request for one user submission.

    Args:
        text: Optional user text; stripped before use.
        image_data_url: Optional ``data:image/...;base64,...`` payload.
        audio_data_url: Optional ``data:audio/...;base64,...`` payload.
        prior_messages: Conversation so far; anything with ``text``, ``sender``
            and ``status`` attributes (client messages or wire history items).

    Returns:
        A `ModelRequest` with the bootstrap turns prepended on the opening turn.

    Raises:
        InputValidationError: If no content is present or a media payload is malformed.
    """
    current = build_current_turn(text, image_data_url, audio_data_url)
    history = format_history(prior_messages)

    if not history:
        LOGGER.info("First message turn: including system prompt and initial greeting.")
        turns = bootstrap_turns() + [current]
    else:
        turns = history + [current]
    return ModelRequest(turns=tuple(turns))
