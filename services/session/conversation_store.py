"""Ordered, persisted conversation owned by the session controller."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from models.chat_models import Message
from services.session.state_slot import JsonStateSlot

LOGGER = logging.getLogger(__name__)


class ConversationStore:
	"""Hold the conversation as an immutable tuple.

	Every mutation rebinds the whole sequence; messages themselves are never
	edited. Persisting is explicit so the owner decides when state is saved.
	"""

	def __init__(self, slot: Optional[JsonStateSlot] = None, messages: Iterable[Message] = ()) -> None:
		self._slot = slot
		self._messages: Tuple[Message, ...] = tuple(messages)

	@classmethod
	def load(cls, slot: JsonStateSlot) -> "ConversationStore":
		"""Restore the conversation from a slot, skipping malformed entries."""
		messages: List[Message] = []
		for item in slot.read():
			try:
				messages.append(Message.from_dict(item))
			except (KeyError, TypeError, ValueError) as exc:
				LOGGER.warning("Skipping malformed stored message: %s", exc)
		return cls(slot=slot, messages=messages)

	@property
	def messages(self) -> Tuple[Message, ...]:
		return self._messages

	def __len__(self) -> int:
		return len(self._messages)

	def append(self, message: Message) -> None:
		self._messages = self._messages + (message,)

	def remove(self, message_id: str) -> None:
		self._messages = tuple(msg for msg in self._messages if msg.id != message_id)

	def clear(self) -> None:
		self._messages = ()

	def history(self) -> Tuple[Message, ...]:
		"""Messages worth replaying to the model (text, sent or delivered)."""
		return tuple(msg for msg in self._messages if msg.is_history)

	def persist(self) -> None:
		if self._slot is None:
			return
		self._slot.write([msg.to_dict() for msg in self._messages])

	def erase(self) -> None:
		"""Clear the conversation and delete the persisted slot."""
		self.clear()
		if self._slot is not None:
			self._slot.erase()
