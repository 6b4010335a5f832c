"""Environment-driven settings for the chat service and the CLI client."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

SESSION_SLOT_NAME = "my-docta-chat-session"

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash-latest"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_TRANSCRIBE_MODEL = "whisper-1"
DEFAULT_API_URL = "http://127.0.0.1:8000"

SUPPORTED_PROVIDERS = ("gemini", "openai")


def _env(name: str) -> Optional[str]:
	value = os.getenv(name)
	if value is None or not value.strip():
		return None
	return value.strip()


def _env_float(name: str, default: float) -> float:
	raw = _env(name)
	if raw is None:
		return default
	try:
		return float(raw)
	except ValueError as exc:
		raise RuntimeError(f"{name}={raw!r} must be a number.") from exc


@dataclass(frozen=True)
class Settings:
	"""Runtime configuration.

	Values are read from the process environment (optionally seeded from a
	``.env`` file by the entry points). API keys stay optional here: a missing
	key is reported per request by the gateway as a configuration error rather
	than preventing the service from starting.
	"""

	model_provider: str = "gemini"
	gemini_api_key: Optional[str] = None
	gemini_model: str = DEFAULT_GEMINI_MODEL
	openai_api_key: Optional[str] = None
	openai_model: str = DEFAULT_OPENAI_MODEL
	openai_transcribe_model: str = DEFAULT_TRANSCRIBE_MODEL
	api_url: str = DEFAULT_API_URL
	state_dir: Path = Path.home() / ".mydocta"
	http_timeout: float = 60.0
	log_level: str = "INFO"

	@classmethod
	def from_env(cls) -> "Settings":
		provider = (_env("MODEL_PROVIDER") or "gemini").lower()
		if provider not in SUPPORTED_PROVIDERS:
			raise RuntimeError(
				f"MODEL_PROVIDER={provider!r} is not supported. "
				f"Choose one of: {', '.join(SUPPORTED_PROVIDERS)}."
			)
		state_dir = _env("MYDOCTA_STATE_DIR")
		return cls(
			model_provider=provider,
			gemini_api_key=_env("GEMINI_API_KEY"),
			gemini_model=_env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
			openai_api_key=_env("OPENAI_API_KEY"),
			openai_model=_env("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
			openai_transcribe_model=_env("OPENAI_TRANSCRIBE_MODEL") or DEFAULT_TRANSCRIBE_MODEL,
			api_url=_env("MYDOCTA_API_URL") or DEFAULT_API_URL,
			state_dir=Path(state_dir).expanduser() if state_dir else Path.home() / ".mydocta",
			http_timeout=_env_float("MYDOCTA_HTTP_TIMEOUT", 60.0),
			log_level=(_env("LOG_LEVEL") or "INFO").upper(),
		)

	@property
	def session_slot_path(self) -> Path:
		return self.state_dir / f"{SESSION_SLOT_NAME}.json"

	@property
	def model_name(self) -> str:
		return self.openai_model if self.model_provider == "openai" else self.gemini_model


def configure_logging(level: str = "INFO") -> None:
	"""Install a root handler once; later calls only adjust the level."""
	root = logging.getLogger()
	if not root.handlers:
		logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
	root.setLevel(getattr(logging, level.upper(), logging.INFO))
