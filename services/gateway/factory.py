"""Build the configured model gateway."""

import logging

from openai import AsyncOpenAI

from services.gateway.dictation_transcriber import DictationTranscriber
from services.gateway.gemini_gateway import GeminiGateway
from services.gateway.model_gateway import ModelGateway, UnconfiguredGateway
from services.gateway.openai_gateway import OpenAIGateway
from utils.config import Settings

LOGGER = logging.getLogger(__name__)


def create_gateway(settings: Settings) -> ModelGateway:
    """Return a gateway for ``settings.model_provider``.

    A missing API key yields an `UnconfiguredGateway`, which fails every
    request with a configuration error instead of failing at startup.
    """
    provider = settings.model_provider
    if provider == "gemini":
        if not settings.gemini_api_key:
            LOGGER.error("Gemini API Key not found.")
            return UnconfiguredGateway(provider, settings.gemini_model)
        return GeminiGateway.from_api_key(settings.gemini_api_key, model=settings.gemini_model)

    if provider == "openai":
        if not settings.openai_api_key:
            LOGGER.error("OpenAI API Key not found.")
            return UnconfiguredGateway(provider, settings.openai_model)
        client = AsyncOpenAI(api_key=settings.openai_api_key)
        transcriber = DictationTranscriber(client, model=settings.openai_transcribe_model)
        return OpenAIGateway(client, model=settings.openai_model, transcriber=transcriber)

    raise ValueError(f"Unsupported model provider '{provider}'.")
