"""Gateway contract shared by the hosted-model providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from models.errors import GatewayError, GatewayErrorKind
from models.model_request import ModelRequest

GENERIC_FAILURE = "An error occurred while processing your request."
MISSING_KEY = "API Key not configured."


@dataclass(frozen=True)
class GatewayReply:
	text: str
	usage: Dict[str, Optional[int]] = field(default_factory=dict)


class ModelGateway(Protocol):
	provider: str
	model: str

	async def generate(self, request: ModelRequest) -> GatewayReply:
		"""Send one request; return the reply text or raise GatewayError."""

	async def aclose(self) -> None:
		"""Release the underlying client."""


class UnconfiguredGateway:
	"""Stand-in used when the selected provider has no credential."""

	configured = False

	def __init__(self, provider: str, model: str) -> None:
		self.provider = provider
		self.model = model

	async def generate(self, request: ModelRequest) -> GatewayReply:
		raise GatewayError(GatewayErrorKind.CONFIGURATION_MISSING, MISSING_KEY)

	async def aclose(self) -> None:
		return None


def blocked_message(reason: str) -> str:
	label = "Safety concerns" if reason.upper() in {"SAFETY", "CONTENT_FILTER"} else reason
	return f"Response was stopped or blocked due to: {label}."
