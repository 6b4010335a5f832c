"""Conversation domain models for the chat client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

from models.errors import InputValidationError


class Sender(str, Enum):
	USER = "user"
	ASSISTANT = "assistant"

	@classmethod
	def parse(cls, value: Any) -> "Sender":
		"""Accept enum members, their values, and the legacy ``ai`` label."""
		if isinstance(value, cls):
			return value
		if value == "ai":
			return cls.ASSISTANT
		return cls(value)


class MessageStatus(str, Enum):
	SENDING = "sending"
	DELIVERED = "delivered"
	AWAITING_RESPONSE = "awaiting-response"
	ERROR = "error"


# Statuses whose messages are replayed to the model as history, including the
# "sent" and "received" labels older web clients put on wire history items.
LEGACY_HISTORY_STATUSES = frozenset({"sent", "received"})
HISTORY_STATUSES = frozenset({MessageStatus.SENDING.value, MessageStatus.DELIVERED.value}) | LEGACY_HISTORY_STATUSES

PLACEHOLDER_IMAGE = "Processing image..."
PLACEHOLDER_AUDIO = "Processing audio..."
PLACEHOLDER_TEXT = "Thinking..."


def _utc_now() -> datetime:
	return datetime.now(timezone.utc)


def status_value(status: Any) -> Optional[str]:
	"""Normalize a status given as enum, string, or None."""
	if status is None:
		return None
	return getattr(status, "value", status)


@dataclass(frozen=True)
class Message:
	"""A single conversation entry. Never mutated after creation."""

	id: str
	sender: Sender
	status: MessageStatus
	text: Optional[str] = None
	image_data: Optional[str] = None
	audio_data: Optional[str] = None
	timestamp: datetime = field(default_factory=_utc_now)

	def __post_init__(self) -> None:
		if self.status is MessageStatus.AWAITING_RESPONSE:
			return
		if not (self.text or self.image_data or self.audio_data):
			raise ValueError("A message needs text, image data, or audio data.")

	@classmethod
	def create(
		cls,
		sender: Sender,
		status: MessageStatus,
		*,
		text: Optional[str] = None,
		image_data: Optional[str] = None,
		audio_data: Optional[str] = None,
	) -> "Message":
		return cls(
			id=uuid4().hex,
			sender=sender,
			status=status,
			text=text,
			image_data=image_data,
			audio_data=audio_data,
		)

	@classmethod
	def placeholder(cls, label: str) -> "Message":
		"""Transient assistant entry shown while a reply is pending."""
		return cls.create(Sender.ASSISTANT, MessageStatus.AWAITING_RESPONSE, text=label)

	@property
	def is_history(self) -> bool:
		return bool(self.text) and self.status.value in HISTORY_STATUSES

	def to_dict(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {
			"id": self.id,
			"sender": self.sender.value,
			"status": self.status.value,
			"timestamp": self.timestamp.isoformat(),
		}
		if self.text is not None:
			data["text"] = self.text
		if self.image_data:
			data["imageData"] = self.image_data
		if self.audio_data:
			data["audioData"] = self.audio_data
		return data

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Message":
		raw_timestamp = data.get("timestamp")
		timestamp = datetime.fromisoformat(raw_timestamp) if raw_timestamp else _utc_now()
		return cls(
			id=str(data["id"]),
			sender=Sender.parse(data["sender"]),
			status=MessageStatus(data["status"]),
			text=data.get("text"),
			image_data=data.get("imageData"),
			audio_data=data.get("audioData"),
			timestamp=timestamp,
		)


def has_content(
	text: Optional[str] = None,
	image_data_url: Optional[str] = None,
	audio_data_url: Optional[str] = None,
) -> bool:
	"""Return True when at least one input channel carries something."""
	return bool((text or "").strip() or image_data_url or audio_data_url)


@dataclass(frozen=True)
class TurnInput:
	"""Content of one user submission.

	Text is stripped on construction. Constructing an input with every
	channel empty raises :class:`InputValidationError`, so a ``TurnInput``
	always holds text, an image, or an audio clip.
	"""

	text: Optional[str] = None
	image_data_url: Optional[str] = None
	audio_data_url: Optional[str] = None

	def __post_init__(self) -> None:
		cleaned = (self.text or "").strip() or None
		object.__setattr__(self, "text", cleaned)
		object.__setattr__(self, "image_data_url", self.image_data_url or None)
		object.__setattr__(self, "audio_data_url", self.audio_data_url or None)
		if not has_content(self.text, self.image_data_url, self.audio_data_url):
			raise InputValidationError("No prompt text, image, or audio data provided.")

	@property
	def kind(self) -> str:
		if self.image_data_url:
			return "image"
		if self.audio_data_url:
			return "audio"
		return "text"

	@property
	def placeholder_label(self) -> str:
		return {
			"image": PLACEHOLDER_IMAGE,
			"audio": PLACEHOLDER_AUDIO,
		}.get(self.kind, PLACEHOLDER_TEXT)


@dataclass(frozen=True)
class Report:
	"""End-of-consultation summary extracted from a model reply."""

	body: str
	visible: bool = False


@dataclass(frozen=True)
class TurnOutcome:
	"""What a single submission added to the conversation."""

	user_message: Message
	replies: Tuple[Message, ...] = ()
	report: Optional[Report] = None
	error: Optional[str] = None

	@property
	def failed(self) -> bool:
		return self.error is not None
