"""Wire payloads for the ``/api/chat`` endpoint."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.chat_models import Sender


class HistoryItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: Optional[str] = None
    sender: Sender
    status: Optional[str] = None

    @field_validator("sender", mode="before")
    @classmethod
    def _accept_legacy_sender(cls, value):
        return Sender.parse(value)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    image_data_url: Optional[str] = Field(default=None, alias="imageDataUrl")
    audio_data_url: Optional[str] = Field(default=None, alias="audioDataUrl")
    history: List[HistoryItem] = Field(default_factory=list)


class ChatResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
