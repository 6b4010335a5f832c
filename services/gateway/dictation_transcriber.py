"""Transcribe recorded audio for providers that cannot take inline audio parts."""

from __future__ import annotations

import logging

from openai import AsyncOpenAI

from models.model_request import TurnPart
from services.media_encoder import decode_data_url
from utils.media_validation import AUDIO_EXTENSIONS, base_mime

LOGGER = logging.getLogger(__name__)

# Extensions the transcription endpoint infers a container format from.
ACCEPTED_SUFFIXES = ("flac", "m4a", "mp3", "mp4", "mpeg", "mpga", "oga", "ogg", "wav", "webm")

FALLBACK_SUFFIX = "webm"

_MIME_ALIASES = {
	"audio/x-wav": "wav",
	"audio/mp3": "mp3",
	"audio/aac": "m4a",
	"audio/x-flac": "flac",
	"audio/opus": "ogg",
}


def filename_for_mime(mime_type: str) -> str:
	"""Return an upload filename whose extension the transcription API accepts.

	Unrecognized types get a generic suffix and are forwarded; the endpoint
	decides whether it can read them.
	"""
	mime = base_mime(mime_type)
	suffix = _MIME_ALIASES.get(mime)
	if suffix is None:
		for extension, known in AUDIO_EXTENSIONS.items():
			if known == mime and extension.lstrip(".") in ACCEPTED_SUFFIXES:
				suffix = extension.lstrip(".")
				break
	if suffix is None and mime.startswith("audio/") and mime.split("/", 1)[1] in ACCEPTED_SUFFIXES:
		suffix = mime.split("/", 1)[1]
	if suffix is None:
		LOGGER.warning("No transcription suffix for %s; uploading as .%s.", mime_type, FALLBACK_SUFFIX)
		suffix = FALLBACK_SUFFIX
	return f"recording.{suffix}"


class DictationTranscriber:
	"""Turn an inline audio part into a plain-text transcript."""

	def __init__(self, client: AsyncOpenAI, model: str = "whisper-1") -> None:
		if client is None:
			raise ValueError("AsyncOpenAI client is required.")
		self.client = client
		self.model = model

	async def transcribe(self, part: TurnPart) -> str:
		"""Upload the clip under a filename matching its MIME type and return the trimmed text."""
		filename = filename_for_mime(part.mime_type)
		_, audio_bytes = decode_data_url(part.data_url)
		LOGGER.info("Transcribing %s (%d bytes) with %s", filename, len(audio_bytes), self.model)

		result = await self.client.audio.transcriptions.create(
			model=self.model,
			file=(filename, audio_bytes, base_mime(part.mime_type)),
			response_format="text",
		)
		transcript = result if isinstance(result, str) else getattr(result, "text", "")
		return (transcript or "").strip()
