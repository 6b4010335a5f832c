"""Provider-neutral request types handed from the request builder to a gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

ROLE_USER = "user"
ROLE_MODEL = "model"

HARM_BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"

SAFETY_SETTINGS: Tuple[Tuple[str, str], ...] = (
    ("HARM_CATEGORY_HARASSMENT", HARM_BLOCK_MEDIUM_AND_ABOVE),
    ("HARM_CATEGORY_HATE_SPEECH", HARM_BLOCK_MEDIUM_AND_ABOVE),
    ("HARM_CATEGORY_SEXUALLY_EXPLICIT", HARM_BLOCK_MEDIUM_AND_ABOVE),
    ("HARM_CATEGORY_DANGEROUS_CONTENT", HARM_BLOCK_MEDIUM_AND_ABOVE),
)


@dataclass(frozen=True)
class TurnPart:
    """A text part, or an inline media part holding a base64 payload."""

    text: Optional[str] = None
    mime_type: Optional[str] = None
    data: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "TurnPart":
        return cls(text=text)

    @classmethod
    def from_media(cls, mime_type: str, data: str) -> "TurnPart":
        return cls(mime_type=mime_type, data=data)

    @property
    def is_media(self) -> bool:
        return self.data is not None

    @property
    def media_kind(self) -> Optional[str]:
        """Return ``image`` or ``audio`` for media parts, None for text."""
        if not self.is_media or not self.mime_type:
            return None
        return self.mime_type.split("/", 1)[0]

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class Turn:
    role: str
    parts: Tuple[TurnPart, ...]


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float = 0.7
    max_output_tokens: int = 2048


@dataclass(frozen=True)
class ModelRequest:
    """Ordered turns plus the fixed generation and safety parameters."""

    turns: Tuple[Turn, ...]
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    safety_settings: Tuple[Tuple[str, str], ...] = SAFETY_SETTINGS

    @property
    def current_turn(self) -> Turn:
        return self.turns[-1]

    def media_kinds(self) -> Tuple[str, ...]:
        """Media kinds present in the current turn, in part order."""
        return tuple(part.media_kind for part in self.current_turn.parts if part.media_kind)

    def describe_media(self) -> str:
        kinds = self.media_kinds()
        return ", ".join(kinds) if kinds else "no media"
