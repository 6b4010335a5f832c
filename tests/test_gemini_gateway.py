from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from models.errors import GatewayError, GatewayErrorKind
from models.model_request import ROLE_MODEL
from services.chat.request_builder import build_request
from services.gateway.gemini_gateway import GeminiGateway, to_config, to_contents


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _gateway(response=None, error=None):
    models = FakeModels(response, error)
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiGateway(client, model="gemini-test"), models


def _response(text="Hello", finish_reason="STOP", block_reason=None, candidates=True):
    candidate = SimpleNamespace(
        finish_reason=SimpleNamespace(name=finish_reason),
        content=SimpleNamespace(parts=[SimpleNamespace(text=text)]),
    )
    return SimpleNamespace(
        prompt_feedback=SimpleNamespace(block_reason=block_reason),
        candidates=[candidate] if candidates else [],
        usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=3),
    )


def test_contents_carry_roles_and_inline_media(image_data_url):
    contents = to_contents(build_request("what is this?", image_data_url))

    assert contents[1].role == ROLE_MODEL
    current = contents[-1]
    assert current.parts[0].inline_data.mime_type == "image/png"
    assert current.parts[0].inline_data.data.startswith(b"\x89PNG")
    assert current.parts[1].text == "what is this?"


def test_config_carries_generation_and_safety_settings():
    config = to_config(build_request("hi"))
    assert config.temperature == 0.7
    assert config.max_output_tokens == 2048
    assert len(config.safety_settings) == 4


@pytest.mark.asyncio
async def test_generate_returns_text_and_usage():
    gateway, models = _gateway(_response("How can I help?"))

    reply = await gateway.generate(build_request("hi"))

    assert reply.text == "How can I help?"
    assert reply.usage == {"input_tokens": 12, "output_tokens": 3}
    assert models.calls[0]["model"] == "gemini-test"


@pytest.mark.asyncio
async def test_blocked_prompt_is_content_blocked():
    gateway, _ = _gateway(_response(block_reason=SimpleNamespace(name="SAFETY")))
    with pytest.raises(GatewayError) as excinfo:
        await gateway.generate(build_request("hi"))
    assert excinfo.value.kind is GatewayErrorKind.CONTENT_BLOCKED
    assert excinfo.value.message == "Response was stopped or blocked due to: Safety concerns."


@pytest.mark.asyncio
async def test_abnormal_finish_is_content_blocked():
    gateway, _ = _gateway(_response(finish_reason="MAX_TOKENS"))
    with pytest.raises(GatewayError) as excinfo:
        await gateway.generate(build_request("hi"))
    assert excinfo.value.kind is GatewayErrorKind.CONTENT_BLOCKED
    assert "MAX_TOKENS" in excinfo.value.message


@pytest.mark.asyncio
async def test_missing_candidates_and_empty_text_are_empty_responses():
    gateway, _ = _gateway(_response(candidates=False))
    with pytest.raises(GatewayError) as excinfo:
        await gateway.generate(build_request("hi"))
    assert excinfo.value.kind is GatewayErrorKind.EMPTY_RESPONSE

    gateway, _ = _gateway(_response(text=""))
    with pytest.raises(GatewayError) as excinfo:
        await gateway.generate(build_request("hi"))
    assert excinfo.value.message == "AI returned an empty response content."


@pytest.mark.asyncio
async def test_not_found_model_is_reported():
    error = genai_errors.ClientError(
        404, {"error": {"code": 404, "message": "models/gemini-test is not found", "status": "NOT_FOUND"}}
    )
    gateway, _ = _gateway(error=error)
    with pytest.raises(GatewayError) as excinfo:
        await gateway.generate(build_request("hi"))
    assert excinfo.value.kind is GatewayErrorKind.UPSTREAM_NOT_FOUND
    assert "gemini-test" in excinfo.value.message


@pytest.mark.asyncio
async def test_rejected_key_is_unauthorized():
    error = genai_errors.ClientError(
        400, {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key.", "status": "INVALID_ARGUMENT"}}
    )
    gateway, _ = _gateway(error=error)
    with pytest.raises(GatewayError) as excinfo:
        await gateway.generate(build_request("hi"))
    assert excinfo.value.kind is GatewayErrorKind.UPSTREAM_UNAUTHORIZED


@pytest.mark.asyncio
async def test_transport_failure_is_unknown():
    gateway, _ = _gateway(error=ConnectionError("reset"))
    with pytest.raises(GatewayError) as excinfo:
        await gateway.generate(build_request("hi"))
    assert excinfo.value.kind is GatewayErrorKind.UNKNOWN
    assert excinfo.value.message == "An error occurred while processing your request."
