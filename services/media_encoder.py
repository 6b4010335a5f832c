"""Encode images and audio recordings as self-describing data URLs."""

import base64
import binascii
import mimetypes
import re
from pathlib import Path
from typing import Tuple, Union

from models.errors import InputValidationError
from utils.media_validation import AUDIO_EXTENSIONS, check_audio_mime, is_image_mime

DATA_URL_PATTERN = re.compile(r"^data:(.+);base64,(.+)$", re.DOTALL)


def encode_data_url(data: bytes, mime_type: str) -> str:
    """Return ``data:<mime>;base64,<payload>`` for the given bytes."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_url(data_url: str) -> Tuple[str, str]:
    """Split a data URL into its MIME type and base64 payload.

    Raises:
        InputValidationError: If the string is not a base64 data URL.
    """
    match = DATA_URL_PATTERN.match(data_url or "")
    if not match:
        raise InputValidationError("Invalid data URL format.")
    return match.group(1), match.group(2)


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """Return the MIME type and raw bytes carried by a data URL."""
    mime_type, payload = parse_data_url(data_url)
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InputValidationError("Data URL payload is not valid base64.") from exc


def encode_image(data: bytes, mime_type: str) -> str:
    """Encode image bytes; only the ``image/*`` family is accepted."""
    if not is_image_mime(mime_type):
        raise InputValidationError("Please select an image file.")
    if not data:
        raise InputValidationError("Image file is empty.")
    return encode_data_url(data, mime_type)


def encode_image_file(path: Union[str, Path]) -> str:
    """Read an image from disk and encode it, guessing the MIME type from its name."""
    image_path = Path(path)
    mime_type, _ = mimetypes.guess_type(image_path.name)
    if not mime_type or not is_image_mime(mime_type):
        raise InputValidationError("Please select an image file.")
    try:
        data = image_path.read_bytes()
    except OSError as exc:
        raise InputValidationError(f"Error reading image file: {exc}") from exc
    return encode_image(data, mime_type)


def encode_audio(data: bytes, mime_type: str) -> str:
    """Encode a recorded audio blob with whatever MIME type the recorder reported."""
    check_audio_mime(mime_type)
    return encode_data_url(data, mime_type)


def guess_audio_mime(path: Union[str, Path], default: str = "audio/webm") -> str:
    suffix = Path(path).suffix.lower()
    if suffix in AUDIO_EXTENSIONS:
        return AUDIO_EXTENSIONS[suffix]
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or default
