"""Session lifecycle for the chat client: one submission in flight at a time."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from models.chat_models import (
	Message,
	MessageStatus,
	Report,
	Sender,
	TurnInput,
	TurnOutcome,
	has_content,
)
from models.errors import GatewayError, GatewayErrorKind, MyDoctaError
from services.chat.response_splitter import split_response
from services.session.chat_backends import ChatBackend
from services.session.conversation_store import ConversationStore

LOGGER = logging.getLogger(__name__)

ERROR_PREFIX = "Sorry, error: "
EMPTY_REPLY = "Received an empty response from the AI."


class SessionController:
	"""Orchestrate one consultation.

	Each submission appends the user message and a placeholder, waits on the
	backend, then swaps the placeholder for the reply messages (or a single
	error message). The store is persisted after every mutation.
	"""

	def __init__(self, store: ConversationStore, backend: ChatBackend) -> None:
		self._store = store
		self._backend = backend
		self._busy = False
		self._report: Optional[Report] = None

	@property
	def busy(self) -> bool:
		return self._busy

	@property
	def report(self) -> Optional[Report]:
		return self._report

	@property
	def messages(self) -> Tuple[Message, ...]:
		return self._store.messages

	async def submit(
		self,
		text: Optional[str] = None,
		image_data_url: Optional[str] = None,
		audio_data_url: Optional[str] = None,
	) -> Optional[TurnOutcome]:
		"""Send one user turn.

		Returns None without touching the conversation when another submission
		is in flight or when every input channel is empty.
		"""
		if self._busy:
			LOGGER.info("Submission ignored; a request is already in flight.")
			return None
		if not has_content(text, image_data_url, audio_data_url):
			return None

		self._busy = True
		try:
			turn = TurnInput(text, image_data_url, audio_data_url)
			history = self._store.history()

			user_message = Message.create(
				Sender.USER,
				MessageStatus.DELIVERED,
				text=turn.text or "",
				image_data=turn.image_data_url,
				audio_data=turn.audio_data_url,
			)
			placeholder = Message.placeholder(turn.placeholder_label)
			self._append(user_message)
			self._append(placeholder)

			try:
				reply_text = await self._backend.send(turn, history)
				self._discard(placeholder)
				replies = self._deliver(reply_text)
			except MyDoctaError as exc:
				return self._fail(user_message, placeholder, exc.message)
			except Exception as exc:
				LOGGER.exception("Error sending/getting AI response")
				return self._fail(user_message, placeholder, str(exc) or "Unknown error")

			return TurnOutcome(user_message=user_message, replies=replies, report=self._report)
		finally:
			self._busy = False

	def new_session(self) -> None:
		"""Drop the conversation, its persisted slot, and any report."""
		self._store.erase()
		self._report = None

	def toggle_report(self) -> bool:
		"""Show or hide the current report; returns the new visibility."""
		if self._report is None:
			return False
		self._report = Report(body=self._report.body, visible=not self._report.visible)
		return self._report.visible

	def _deliver(self, reply_text: str) -> Tuple[Message, ...]:
		if not reply_text:
			raise GatewayError(GatewayErrorKind.EMPTY_RESPONSE, EMPTY_REPLY)

		split = split_response(reply_text)
		if not split.has_report:
			self._report = None
			return (self._assistant(reply_text),)

		segments = [segment for segment in (split.pre_text, split.post_text) if segment]
		if not segments and not split.report:
			raise GatewayError(GatewayErrorKind.EMPTY_RESPONSE, EMPTY_REPLY)

		self._report = Report(body=split.report)
		return tuple(self._assistant(segment) for segment in segments)

	def _fail(self, user_message: Message, placeholder: Message, reason: str) -> TurnOutcome:
		LOGGER.error("Chat turn failed: %s", reason)
		self._discard(placeholder)
		error_message = Message.create(Sender.ASSISTANT, MessageStatus.ERROR, text=f"{ERROR_PREFIX}{reason}")
		self._append(error_message)
		return TurnOutcome(user_message=user_message, replies=(error_message,), report=self._report, error=reason)

	def _assistant(self, text: str) -> Message:
		message = Message.create(Sender.ASSISTANT, MessageStatus.DELIVERED, text=text)
		self._append(message)
		return message

	def _append(self, message: Message) -> None:
		self._store.append(message)
		self._persist()

	def _discard(self, message: Message) -> None:
		self._store.remove(message.id)
		self._persist()

	def _persist(self) -> None:
		# A failed write leaves the in-memory conversation authoritative.
		try:
			self._store.persist()
		except OSError as exc:
			LOGGER.error("Could not save the conversation: %s", exc)
