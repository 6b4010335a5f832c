"""Model gateway backed by Google's Gemini API (``google-genai``)."""

import base64
import inspect
import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from models.errors import GatewayError, GatewayErrorKind
from models.model_request import ModelRequest, Turn, TurnPart
from services.gateway.model_gateway import GENERIC_FAILURE, GatewayReply, blocked_message

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = "gemini-1.5-flash-latest"


def _enum_name(value: Any) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "name", None) or str(value)


def _to_part(part: TurnPart) -> genai_types.Part:
    if part.is_media:
        return genai_types.Part(
            inline_data=genai_types.Blob(mime_type=part.mime_type, data=base64.b64decode(part.data))
        )
    return genai_types.Part(text=part.text)


def to_contents(request: ModelRequest) -> List[genai_types.Content]:
    """Translate provider-neutral turns into Gemini contents."""
    return [
        genai_types.Content(role=turn.role, parts=[_to_part(part) for part in turn.parts])
        for turn in request.turns
    ]


def to_config(request: ModelRequest) -> genai_types.GenerateContentConfig:
    return genai_types.GenerateContentConfig(
        temperature=request.generation.temperature,
        max_output_tokens=request.generation.max_output_tokens,
        safety_settings=[
            genai_types.SafetySetting(category=category, threshold=threshold)
            for category, threshold in request.safety_settings
        ],
    )


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage from ``usage_metadata`` when present."""
    usage = getattr(response, "usage_metadata", None)
    return {
        "input_tokens": getattr(usage, "prompt_token_count", None) if usage else None,
        "output_tokens": getattr(usage, "candidates_token_count", None) if usage else None,
    }


class GeminiGateway:
    """Send consultation turns to Gemini and normalize its failures."""

    provider = "gemini"
    configured = True

    def __init__(self, client: genai.Client, model: str = DEFAULT_MODEL) -> None:
        if client is None:
            raise ValueError("Gemini client must be provided.")
        self.client = client
        self.model = model

    @classmethod
    def from_api_key(cls, api_key: str, model: str = DEFAULT_MODEL) -> "GeminiGateway":
        return cls(genai.Client(api_key=api_key), model=model)

    async def generate(self, request: ModelRequest) -> GatewayReply:
        LOGGER.info("Calling Gemini (%s) with %s.", self.model, request.describe_media())
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=to_contents(request),
                config=to_config(request),
            )
        except genai_errors.APIError as exc:
            raise self._translate_error(exc) from exc
        except Exception as exc:
            LOGGER.error("Gemini request failed: %s", exc)
            raise GatewayError(GatewayErrorKind.UNKNOWN, GENERIC_FAILURE) from exc

        reply = self._parse_response(response)
        LOGGER.info("Gemini usage: %s", reply.usage)
        return reply

    def _translate_error(self, exc: Exception) -> GatewayError:
        code = getattr(exc, "code", None)
        detail = str(exc)
        LOGGER.error("Gemini API error (%s): %s", code, detail)
        if code == 404:
            return GatewayError(
                GatewayErrorKind.UPSTREAM_NOT_FOUND,
                f"Model '{self.model}' not found or inaccessible. ({detail})",
            )
        if code in (401, 403) or "API key not valid" in detail or "permission" in detail.lower():
            return GatewayError(
                GatewayErrorKind.UPSTREAM_UNAUTHORIZED,
                f"API Key invalid or lacks permission. ({detail})",
            )
        return GatewayError(GatewayErrorKind.UNKNOWN, GENERIC_FAILURE)

    def _parse_response(self, response: Any) -> GatewayReply:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = _enum_name(getattr(feedback, "block_reason", None)) if feedback else None
        if block_reason:
            LOGGER.warning("Gemini blocked the prompt: %s", block_reason)
            raise GatewayError(GatewayErrorKind.CONTENT_BLOCKED, blocked_message(block_reason))

        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            LOGGER.error("Gemini response carried no candidates.")
            raise GatewayError(
                GatewayErrorKind.EMPTY_RESPONSE, "Failed to get valid response structure from AI."
            )

        candidate = candidates[0]
        finish_reason = _enum_name(getattr(candidate, "finish_reason", None))
        if finish_reason and finish_reason != "STOP":
            LOGGER.warning("Gemini response finished due to %s.", finish_reason)
            raise GatewayError(GatewayErrorKind.CONTENT_BLOCKED, blocked_message(finish_reason))

        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or []
        text = "".join(getattr(part, "text", None) or "" for part in parts)
        if not text:
            LOGGER.warning("Gemini candidate exists but has no text content.")
            raise GatewayError(GatewayErrorKind.EMPTY_RESPONSE, "AI returned an empty response content.")
        return GatewayReply(text=text, usage=extract_usage(response))

    async def aclose(self) -> None:
        aclose = getattr(self.client.aio, "aclose", None)
        if aclose is None:
            return
        result = aclose()
        if inspect.isawaitable(result):
            await result
