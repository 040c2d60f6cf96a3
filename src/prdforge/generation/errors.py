"""Classification of generation failures.

The generation service fails with opaque errors whose text is the only usable signal. The text
is inspected for known markers in priority order; anything unrecognised is reported as
``UNKNOWN`` with the original text kept in the message.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorKind(str, Enum):
    """User-facing error taxonomy."""

    VALIDATION = "validation"
    AUTH = "auth"
    NETWORK = "network"
    BAD_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


class ClassifiedError(BaseModel):
    """Taxonomy-tagged, user-readable wrapping of a failure."""

    kind: ErrorKind
    message: str


AUTH_MARKERS = ("API_KEY_INVALID", "permission denied")
NETWORK_MARKERS = ("network", "fetch failed")
BAD_REQUEST_MARKER = "400"
SERVER_ERROR_MARKER = "500"

AUTH_MESSAGE = (
    "API Authentication Failed: Your API key appears to be invalid or missing permissions. "
    "Please verify your key and its configuration."
)
NETWORK_MESSAGE = (
    "Network Error: Could not connect to the generation service. "
    "Please check your internet connection."
)
BAD_REQUEST_MESSAGE = (
    "Invalid Request: The server could not process the request. "
    "Please check if the feature list format is correct."
)
SERVER_ERROR_MESSAGE = (
    "Server Error: The generation service encountered an internal issue. Please try again later."
)
EMPTY_FEATURES_MESSAGE = "Feature list cannot be empty. Please add at least one feature."


def describe(raw: object) -> str:
    """Text description of a raw failure signal."""

    if isinstance(raw, BaseException):
        text = str(raw)
        return text or type(raw).__name__
    return "" if raw is None else str(raw)


def classify_error(raw: object) -> ClassifiedError:
    """Map a raw failure into a :class:`ClassifiedError`. First matching rule wins."""

    text = describe(raw)
    lowered = text.lower()

    if any(marker in text for marker in AUTH_MARKERS):
        return ClassifiedError(kind=ErrorKind.AUTH, message=AUTH_MESSAGE)
    if any(marker in lowered for marker in NETWORK_MARKERS):
        return ClassifiedError(kind=ErrorKind.NETWORK, message=NETWORK_MESSAGE)
    if BAD_REQUEST_MARKER in text:
        return ClassifiedError(kind=ErrorKind.BAD_REQUEST, message=BAD_REQUEST_MESSAGE)
    if SERVER_ERROR_MARKER in text:
        return ClassifiedError(kind=ErrorKind.SERVER_ERROR, message=SERVER_ERROR_MESSAGE)
    return ClassifiedError(kind=ErrorKind.UNKNOWN, message=f"Generation failed: {text}")


def validation_error(message: str = EMPTY_FEATURES_MESSAGE) -> ClassifiedError:
    return ClassifiedError(kind=ErrorKind.VALIDATION, message=message)
