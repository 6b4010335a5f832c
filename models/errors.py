"""Error types shared by the chat service, the gateways, and the session client."""

from __future__ import annotations

from enum import Enum


class MyDoctaError(Exception):
	"""Base class for every failure surfaced to a chat participant."""

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


class InputValidationError(MyDoctaError):
	"""Bad or missing user input, detected before any model call."""

	http_status = 400


class GatewayErrorKind(str, Enum):
	CONFIGURATION_MISSING = "configuration-missing"
	CONTENT_BLOCKED = "content-blocked"
	UPSTREAM_NOT_FOUND = "upstream-not-found"
	UPSTREAM_UNAUTHORIZED = "upstream-unauthorized"
	EMPTY_RESPONSE = "empty-response"
	UNKNOWN = "unknown"


_HTTP_STATUS = {
	GatewayErrorKind.CONFIGURATION_MISSING: 500,
	GatewayErrorKind.CONTENT_BLOCKED: 400,
	GatewayErrorKind.UPSTREAM_NOT_FOUND: 404,
	GatewayErrorKind.UPSTREAM_UNAUTHORIZED: 403,
	GatewayErrorKind.EMPTY_RESPONSE: 500,
	GatewayErrorKind.UNKNOWN: 500,
}


class GatewayError(MyDoctaError):
	"""Typed failure returned by a model gateway or a chat backend."""

	def __init__(self, kind: GatewayErrorKind, message: str) -> None:
		super().__init__(message)
		self.kind = kind

	@property
	def http_status(self) -> int:
		return _HTTP_STATUS[self.kind]

	@property
	def fatal(self) -> bool:
		"""True when resubmitting cannot help (credential or model problems)."""
		return self.kind in {
			GatewayErrorKind.CONFIGURATION_MISSING,
			GatewayErrorKind.UPSTREAM_NOT_FOUND,
			GatewayErrorKind.UPSTREAM_UNAUTHORIZED,
		}

	def __repr__(self) -> str:
		return f"GatewayError(kind={self.kind.value!r}, message={self.message!r})"


def kind_for_status(status_code: int) -> GatewayErrorKind:
	"""Best-effort inverse of the HTTP status mapping used by the chat API."""
	if status_code == 400:
		return GatewayErrorKind.CONTENT_BLOCKED
	if status_code in (401, 403):
		return GatewayErrorKind.UPSTREAM_UNAUTHORIZED
	if status_code == 404:
		return GatewayErrorKind.UPSTREAM_NOT_FOUND
	return GatewayErrorKind.UNKNOWN


# Response header carrying the GatewayErrorKind of a failed chat turn.
ERROR_KIND_HEADER = "X-MyDocta-Error-Kind"
