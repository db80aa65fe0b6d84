"""
Error classification for LLM provider failures.

Providers do not share an error model: REST backends surface HTTP statuses,
SDKs raise their own exception hierarchies, and transport failures arrive as
asyncio or aiohttp exceptions. ``classify_error`` maps any of these onto the
closed ``AIErrorType`` taxonomy with a retryability flag.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import aiohttp

from skeleton_core.llm.interfaces.llm_provider_interface import AIError, AIErrorType


@dataclass(frozen=True)
class ErrorClassification:
    error_type: AIErrorType
    retryable: bool
    status: Optional[int] = None


_TIMEOUT_TYPES = (asyncio.TimeoutError, TimeoutError)
_NETWORK_TYPES = (aiohttp.ClientConnectionError, ConnectionError)
_NETWORK_MARKERS = ("network", "fetch", "connection")


def extract_status(error: BaseException) -> Optional[int]:
    """Pull an HTTP status out of the various shapes errors carry it in."""
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        # bool is an int subclass; gRPC-style string statuses are ignored
        if isinstance(value, int) and not isinstance(value, bool):
            return value

    response = getattr(error, "response", None)
    if response is not None:
        for attr in ("status", "status_code"):
            value = getattr(response, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
    return None


def _is_timeout(error: BaseException, message: str) -> bool:
    if isinstance(error, _TIMEOUT_TYPES):
        return True
    if "timeout" in type(error).__name__.lower():
        return True
    return "timeout" in message or "timed out" in message


def _is_network(error: BaseException, message: str) -> bool:
    if isinstance(error, _NETWORK_TYPES):
        return True
    if "connection" in type(error).__name__.lower():
        return True
    return any(marker in message for marker in _NETWORK_MARKERS)


def classify_error(error: BaseException) -> ErrorClassification:
    """
    Classify a raw provider failure.

    Rules, first match wins: 429 is a rate limit; 503 or a message mentioning
    quota is quota exhaustion; 401/403 is an auth failure; then timeout and
    network failures by exception type or message; anything else is unknown.
    Only auth failures are non-retryable. An ``AIError`` keeps its own
    classification.
    """
    if isinstance(error, AIError):
        return ErrorClassification(error.error_type, error.retryable, error.status)

    status = extract_status(error)
    message = str(error).lower()

    if status == 429:
        error_type = AIErrorType.RATE_LIMIT
    elif status == 503 or "quota" in message:
        error_type = AIErrorType.QUOTA_EXCEEDED
    elif status in (401, 403):
        error_type = AIErrorType.AUTH_ERROR
    elif _is_timeout(error, message):
        error_type = AIErrorType.TIMEOUT
    elif _is_network(error, message):
        error_type = AIErrorType.NETWORK_ERROR
    else:
        error_type = AIErrorType.UNKNOWN_ERROR

    return ErrorClassification(
        error_type=error_type,
        retryable=error_type != AIErrorType.AUTH_ERROR,
        status=status,
    )


def is_retryable(error: BaseException) -> bool:
    return classify_error(error).retryable


def to_ai_error(error: BaseException, provider: Optional[str] = None) -> AIError:
    """Wrap a raw failure in a classified AIError; AIErrors pass through."""
    if isinstance(error, AIError):
        if error.provider is None:
            error.provider = provider
        return error

    classification = classify_error(error)
    message = str(error) or f"{provider or 'provider'} request failed ({type(error).__name__})"
    return AIError(
        message,
        classification.error_type,
        provider=provider,
        status=classification.status,
        retryable=classification.retryable,
    )
