"""Controller behind ``POST /api/chat``: build the request, call the model."""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import HTTPException, Request

from models.api_models import ChatRequest
from models.errors import ERROR_KIND_HEADER, GatewayError, InputValidationError
from services.chat.request_builder import build_request
from services.gateway.model_gateway import ModelGateway

LOGGER = logging.getLogger(__name__)


def _gateway(request: Request) -> ModelGateway:
	gateway = getattr(request.app.state, "model_gateway", None)
	if gateway is None:
		raise HTTPException(status_code=500, detail="Model gateway not initialized.")
	return gateway


async def handle_chat(request: Request, payload: ChatRequest) -> Dict[str, str]:
	"""Answer one chat turn.

	Args:
		request: FastAPI request (gives access to the shared model gateway).
		payload: Current prompt/media plus the prior conversation.

	Returns:
		``{"response": <model text>}`` on success.

	Raises:
		HTTPException: 400 for bad input or blocked content, 403 for a rejected
			credential, 404 for an unavailable model, 500 otherwise. Gateway
			failures also carry their kind in the ``X-MyDocta-Error-Kind`` header.
	"""
	gateway = _gateway(request)
	try:
		model_request = build_request(
			payload.prompt,
			payload.image_data_url,
			payload.audio_data_url,
			payload.history,
		)
		reply = await gateway.generate(model_request)
	except InputValidationError as exc:
		raise HTTPException(status_code=exc.http_status, detail=exc.message) from exc
	except GatewayError as exc:
		LOGGER.warning("Chat turn failed (%s): %s", exc.kind.value, exc.message)
		raise HTTPException(
			status_code=exc.http_status,
			detail=exc.message,
			headers={ERROR_KIND_HEADER: exc.kind.value},
		) from exc

	return {"response": reply.text}
