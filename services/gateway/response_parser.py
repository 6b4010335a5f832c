"""Helpers to pull text and usage out of Responses API payloads."""

from __future__ import annotations

from typing import Any, Dict, Optional


def _field(item: Any, name: str) -> Any:
	if isinstance(item, dict):
		return item.get(name)
	return getattr(item, name, None)


def extract_text(response: Any) -> str:
	"""Concatenate every ``output_text`` entry of the response messages."""
	chunks = []
	for item in getattr(response, "output", None) or []:
		if _field(item, "type") != "message":
			continue
		for content in _field(item, "content") or []:
			if _field(content, "type") == "output_text":
				chunks.append(_field(content, "text") or "")
	if chunks:
		return "".join(chunks)
	return getattr(response, "output_text", "") or ""


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
	"""Return token usage if present."""
	usage = getattr(response, "usage", None)
	return {
		"input_tokens": getattr(usage, "input_tokens", None) if usage else None,
		"output_tokens": getattr(usage, "output_tokens", None) if usage else None,
	}


def incomplete_reason(response: Any) -> Optional[str]:
	"""Return why a response stopped early, or None for completed responses."""
	if getattr(response, "status", None) != "incomplete":
		return None
	details = getattr(response, "incomplete_details", None)
	if details is None:
		return "incomplete"
	return _field(details, "reason") or "incomplete"
