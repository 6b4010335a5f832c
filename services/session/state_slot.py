"""Single named JSON slot holding the persisted conversation."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Union

LOGGER = logging.getLogger(__name__)


class JsonStateSlot:
	"""Read, overwrite, and erase one JSON document on disk."""

	def __init__(self, path: Union[str, Path]) -> None:
		self.path = Path(path).expanduser()

	def read(self) -> List[Any]:
		"""Return the stored array, or an empty list when missing or unreadable."""
		try:
			raw = self.path.read_text(encoding="utf-8")
		except FileNotFoundError:
			return []
		try:
			data = json.loads(raw)
		except json.JSONDecodeError as exc:
			LOGGER.warning("Ignoring unreadable session slot %s: %s", self.path, exc)
			return []
		if not isinstance(data, list):
			LOGGER.warning("Ignoring session slot %s: expected a JSON array.", self.path)
			return []
		return data

	def write(self, items: List[Any]) -> None:
		"""Replace the slot contents atomically."""
		self.path.parent.mkdir(parents=True, exist_ok=True)
		tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
		tmp_path.write_text(json.dumps(items, ensure_ascii=False), encoding="utf-8")
		os.replace(tmp_path, self.path)

	def erase(self) -> None:
		try:
			self.path.unlink()
		except FileNotFoundError:
			pass
