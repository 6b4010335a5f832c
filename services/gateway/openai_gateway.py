"""Model gateway backed by OpenAI's Responses API."""

import logging
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from models.errors import GatewayError, GatewayErrorKind
from models.model_request import ROLE_MODEL, ModelRequest, Turn, TurnPart
from services.gateway.dictation_transcriber import DictationTranscriber
from services.gateway.model_gateway import GENERIC_FAILURE, GatewayReply, blocked_message
from services.gateway.response_parser import extract_text, extract_usage, incomplete_reason

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIGateway:
    """Send consultation turns to OpenAI, transcribing audio parts first."""

    provider = "openai"
    configured = True

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = DEFAULT_MODEL,
        transcriber: Optional[DictationTranscriber] = None,
    ) -> None:
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model
        self.transcriber = transcriber or DictationTranscriber(client)

    async def _user_content(self, part: TurnPart) -> Dict[str, Any]:
        if part.media_kind == "image":
            return {"type": "input_image", "image_url": part.data_url}
        if part.is_media:
            transcript = await self.transcriber.transcribe(part)
            LOGGER.info("Audio transcript added (%d chars)", len(transcript))
            return {"type": "input_text", "text": f"Audio narration (transcribed): {transcript}"}
        return {"type": "input_text", "text": part.text}

    async def _to_input(self, turn: Turn) -> Dict[str, Any]:
        if turn.role == ROLE_MODEL:
            text = "".join(part.text or "" for part in turn.parts)
            return {"type": "message", "role": "assistant", "content": text}
        content = [await self._user_content(part) for part in turn.parts]
        return {"type": "message", "role": "user", "content": content}

    async def build_inputs(self, request: ModelRequest) -> List[Dict[str, Any]]:
        """Build the Responses API input array, one message per turn."""
        return [await self._to_input(turn) for turn in request.turns]

    async def generate(self, request: ModelRequest) -> GatewayReply:
        try:
            inputs = await self.build_inputs(request)
        except openai.OpenAIError as exc:
            LOGGER.error("OpenAI transcription request failed: %s", exc)
            raise self._translate_error(exc) from exc

        # The Responses API has no per-request safety thresholds.
        LOGGER.debug("Safety settings not forwarded to OpenAI: %s", request.safety_settings)
        LOGGER.info("Calling OpenAI (%s) with %s.", self.model, request.describe_media())
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=inputs,
                temperature=request.generation.temperature,
                max_output_tokens=request.generation.max_output_tokens,
            )
        except openai.OpenAIError as exc:
            LOGGER.error("Error during OpenAI Responses API call: %s", exc)
            raise self._translate_error(exc) from exc

        reason = incomplete_reason(response)
        if reason:
            LOGGER.warning("OpenAI response finished due to %s.", reason)
            raise GatewayError(GatewayErrorKind.CONTENT_BLOCKED, blocked_message(reason))

        text = extract_text(response)
        if not text:
            LOGGER.warning("OpenAI response has no text content.")
            raise GatewayError(GatewayErrorKind.EMPTY_RESPONSE, "AI returned an empty response content.")

        usage = extract_usage(response)
        LOGGER.info("OpenAI usage: %s", usage)
        return GatewayReply(text=text, usage=usage)

    def _translate_error(self, exc: Exception) -> GatewayError:
        if isinstance(exc, openai.NotFoundError):
            return GatewayError(
                GatewayErrorKind.UPSTREAM_NOT_FOUND,
                f"Model '{self.model}' not found or inaccessible. ({exc})",
            )
        if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return GatewayError(
                GatewayErrorKind.UPSTREAM_UNAUTHORIZED,
                f"API Key invalid or lacks permission. ({exc})",
            )
        return GatewayError(GatewayErrorKind.UNKNOWN, GENERIC_FAILURE)

    async def aclose(self) -> None:
        await self.client.close()
