"""Validation helpers for image and audio payloads."""

import logging

LOGGER = logging.getLogger(__name__)

# Formats browsers commonly record; anything else is still forwarded.
KNOWN_AUDIO_TYPES = (
    "audio/webm",
    "audio/ogg",
    "audio/wav",
    "audio/mp4",
    "audio/aac",
    "audio/mpeg",
    "audio/mp3",
)

# Recorder preference order, most compact first.
PREFERRED_RECORDING_TYPES = (
    "audio/webm;codecs=opus",
    "audio/ogg;codecs=opus",
    "audio/webm",
    "audio/ogg",
    "audio/wav",
    "audio/aac",
    "audio/mp4",
    "audio/mpeg",
)

AUDIO_EXTENSIONS = {
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".opus": "audio/ogg",
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".mp4": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
}


def base_mime(mime_type: str) -> str:
    """Strip MIME parameters (e.g. ``audio/webm;codecs=opus``) and normalize case."""
    return (mime_type or "").lower().split(";", 1)[0].strip()


def is_image_mime(mime_type: str) -> bool:
    return base_mime(mime_type).startswith("image/")


def is_known_audio_mime(mime_type: str) -> bool:
    normalized = (mime_type or "").lower()
    return any(normalized.startswith(known) for known in KNOWN_AUDIO_TYPES)


def check_audio_mime(mime_type: str) -> bool:
    """Log whether an audio MIME type is on the known-good list.

    This check is advisory: the hosted model may accept formats outside the
    list, so callers forward the payload either way.
    """
    if is_known_audio_mime(mime_type):
        LOGGER.info("Processing audio MIME type: %s", mime_type)
        return True
    LOGGER.warning(
        "Unsupported audio MIME type: %s. Forwarding anyway; the model may reject it.", mime_type
    )
    return False
