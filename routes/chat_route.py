"""FastAPI route for consultation chat turns."""

import logging

from fastapi import APIRouter, HTTPException, Request

from controllers.chat_controller import handle_chat
from models.api_models import ChatRequest, ChatResponse

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def post_chat(request: Request, payload: ChatRequest):
	"""Forward one user turn (text, image, or audio) to the model."""
	try:
		return await handle_chat(request, payload)
	except HTTPException:
		raise
	except Exception as exc:
		LOGGER.exception("Error in /api/chat route")
		raise HTTPException(status_code=500, detail="An error occurred while processing your request.") from exc
