"""Ways for the session controller to reach the model: over HTTP or in-process."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, Sequence

import httpx

from models.api_models import ChatRequest, HistoryItem
from models.chat_models import Message, TurnInput
from models.errors import ERROR_KIND_HEADER, GatewayError, GatewayErrorKind, kind_for_status
from services.chat.request_builder import build_request
from services.gateway.model_gateway import ModelGateway

LOGGER = logging.getLogger(__name__)


class ChatBackend(Protocol):
	async def send(self, turn: TurnInput, history: Sequence[Message]) -> str:
		"""Return the raw model reply text or raise a MyDoctaError."""

	async def aclose(self) -> None:
		"""Release network resources."""


class LocalChatBackend:
	"""Build and send requests in-process through a model gateway."""

	def __init__(self, gateway: ModelGateway) -> None:
		self.gateway = gateway

	async def send(self, turn: TurnInput, history: Sequence[Message]) -> str:
		request = build_request(turn.text, turn.image_data_url, turn.audio_data_url, history)
		reply = await self.gateway.generate(request)
		return reply.text

	async def aclose(self) -> None:
		await self.gateway.aclose()


class HttpChatBackend:
	"""Client for the ``POST /api/chat`` endpoint."""

	def __init__(
		self,
		base_url: str,
		*,
		timeout: float = 60.0,
		client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self._base_url = base_url.rstrip("/")
		self._client = client or httpx.AsyncClient(
			base_url=self._base_url,
			headers={"Accept": "application/json"},
			timeout=timeout,
		)

	@staticmethod
	def build_payload(turn: TurnInput, history: Sequence[Message]) -> Dict[str, Any]:
		request = ChatRequest(
			prompt=turn.text or "",
			image_data_url=turn.image_data_url,
			audio_data_url=turn.audio_data_url,
			history=[
				HistoryItem(id=msg.id, text=msg.text, sender=msg.sender)
				for msg in history
				if msg.is_history
			],
		)
		return request.model_dump(by_alias=True, exclude_none=True, mode="json")

	async def send(self, turn: TurnInput, history: Sequence[Message]) -> str:
		payload = self.build_payload(turn, history)
		try:
			resp = await self._client.post("/api/chat", json=payload)
		except httpx.HTTPError as exc:
			LOGGER.error("Chat API request failed: %s", exc)
			raise GatewayError(GatewayErrorKind.UNKNOWN, f"API request failed: {exc}") from exc

		if resp.status_code >= 400:
			raise self._error_from(resp)

		try:
			data = resp.json()
		except ValueError as exc:
			raise GatewayError(GatewayErrorKind.UNKNOWN, "Chat API returned invalid JSON.") from exc
		return (data or {}).get("response") or ""

	@staticmethod
	def _error_from(resp: httpx.Response) -> GatewayError:
		message = f"API request failed: {resp.reason_phrase} ({resp.status_code})"
		try:
			body = resp.json()
		except ValueError:
			body = None
		if isinstance(body, dict) and body.get("error"):
			message = str(body["error"])

		header_kind = resp.headers.get(ERROR_KIND_HEADER)
		try:
			kind = GatewayErrorKind(header_kind) if header_kind else kind_for_status(resp.status_code)
		except ValueError:
			kind = kind_for_status(resp.status_code)
		return GatewayError(kind, message)

	async def aclose(self) -> None:
		await self._client.aclose()
