"""Voice-note capture as an explicit state machine over an injected recorder."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

from services.media_encoder import encode_audio, guess_audio_mime
from utils.media_validation import PREFERRED_RECORDING_TYPES, base_mime

LOGGER = logging.getLogger(__name__)

DEFAULT_RECORDING_TYPE = "audio/webm"


class CaptureState(str, Enum):
	IDLE = "idle"
	RECORDING = "recording"
	STOPPING = "stopping"
	ENCODED = "encoded"
	FAILED = "failed"


class AudioRecorder(Protocol):
	"""Device-facing collaborator that actually records sound."""

	def is_type_supported(self, mime_type: str) -> bool:
		...

	def start(self, mime_type: Optional[str]) -> None:
		...

	def stop(self) -> Tuple[bytes, Optional[str]]:
		"""Finish recording and return the blob plus the MIME type it was recorded in."""


class AudioCapture:
	"""Drive one recorder through Idle, Recording, Stopping, Encoded or Failed.

	The encoded data URL is only available once the machine reaches
	``ENCODED``; `take_payload` hands it over and re-arms the machine.
	"""

	def __init__(self, recorder: AudioRecorder) -> None:
		self.recorder = recorder
		self.state = CaptureState.IDLE
		self.mime_type: Optional[str] = None
		self.payload: Optional[str] = None
		self.error: Optional[str] = None

	def select_mime_type(self) -> Optional[str]:
		for candidate in PREFERRED_RECORDING_TYPES:
			if self.recorder.is_type_supported(candidate):
				return candidate
		return None

	def start(self) -> bool:
		"""Begin recording. Returns False when a recording is already underway."""
		if self.state in (CaptureState.RECORDING, CaptureState.STOPPING):
			LOGGER.info("Start ignored; capture is %s.", self.state.value)
			return False

		self.payload = None
		self.error = None
		self.mime_type = self.select_mime_type()
		LOGGER.info("Using MIME type: %s", self.mime_type or "default")
		try:
			self.recorder.start(self.mime_type)
		except Exception as exc:
			self._fail(f"Could not start recording: {exc}")
			return False
		self.state = CaptureState.RECORDING
		return True

	def stop(self) -> Optional[str]:
		"""Stop recording and encode the result; returns the data URL or None."""
		if self.state is not CaptureState.RECORDING:
			LOGGER.warning("Stop called but recorder not recording.")
			return None

		self.state = CaptureState.STOPPING
		try:
			blob, reported_type = self.recorder.stop()
		except Exception as exc:
			self._fail(f"Recorder error: {exc}")
			return None

		if not blob:
			self._fail("No audio data recorded.")
			return None

		mime_type = reported_type or self.mime_type or DEFAULT_RECORDING_TYPE
		LOGGER.info("Recorded blob MIME type: %s, size: %d", mime_type, len(blob))
		self.payload = encode_audio(blob, mime_type)
		self.state = CaptureState.ENCODED
		return self.payload

	def take_payload(self) -> Optional[str]:
		"""Return the encoded recording once and go back to Idle."""
		if self.state is not CaptureState.ENCODED:
			return None
		payload, self.payload = self.payload, None
		self.state = CaptureState.IDLE
		return payload

	def _fail(self, reason: str) -> None:
		LOGGER.error(reason)
		self.error = reason
		self.payload = None
		self.state = CaptureState.FAILED


class FileAudioRecorder:
	"""Recorder that "records" a pre-existing audio file."""

	def __init__(self, path: Union[str, Path]) -> None:
		self.path = Path(path).expanduser()
		self.file_type = guess_audio_mime(self.path)
		self._started = False

	def is_type_supported(self, mime_type: str) -> bool:
		return base_mime(mime_type) == base_mime(self.file_type)

	def start(self, mime_type: Optional[str]) -> None:
		if not self.path.is_file():
			raise FileNotFoundError(f"Audio file not found: {self.path}")
		self._started = True

	def stop(self) -> Tuple[bytes, Optional[str]]:
		if not self._started:
			raise RuntimeError("Recorder was not started.")
		self._started = False
		return self.path.read_bytes(), self.file_type
