from __future__ import annotations

import base64
import sys
from pathlib import Path
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from models.errors import GatewayError  # noqa: E402
from models.model_request import ModelRequest  # noqa: E402
from services.gateway.model_gateway import GatewayReply  # noqa: E402
from utils.config import Settings  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
WEBM_BYTES = b"\x1aE\xdf\xa3fake-audio"


def data_url(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


class FakeGateway:
    """Records every request and replies from a script."""

    provider = "fake"
    model = "fake-model"
    configured = True

    def __init__(self, reply: str = "Tell me more.", error: Optional[GatewayError] = None) -> None:
        self.reply = reply
        self.error = error
        self.requests: List[ModelRequest] = []
        self.closed = False

    async def generate(self, request: ModelRequest) -> GatewayReply:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return GatewayReply(text=self.reply)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def image_data_url() -> str:
    return data_url("image/png", PNG_BYTES)


@pytest.fixture
def audio_data_url() -> str:
    return data_url("audio/webm;codecs=opus", WEBM_BYTES)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(model_provider="gemini", state_dir=tmp_path, log_level="WARNING")


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def client(settings, gateway):
    from main import create_app

    app = create_app(settings)
    app.state.model_gateway = gateway
    with TestClient(app) as test_client:
        yield test_client
