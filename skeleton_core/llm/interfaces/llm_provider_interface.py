"""
Abstract interface for Large Language Model (LLM) providers.

This module defines the common interface that all LLM providers must implement,
together with the error taxonomy shared by providers, the fallback strategy and
the sentence analysis service.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from skeleton_core.config.config_manager import ProviderConfig


class AIErrorType(Enum):
    """Closed taxonomy of provider-call failures."""
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    RATE_LIMIT = "RATE_LIMIT"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    AUTH_ERROR = "AUTH_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class LLMError(Exception):
    """Base exception for LLM provider errors."""
    pass


class AIError(LLMError):
    """A provider failure that has been classified."""

    def __init__(
        self,
        message: str,
        error_type: AIErrorType = AIErrorType.UNKNOWN_ERROR,
        provider: Optional[str] = None,
        status: Optional[int] = None,
        retryable: Optional[bool] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.provider = provider
        self.status = status
        if retryable is None:
            retryable = error_type != AIErrorType.AUTH_ERROR
        self.retryable = retryable

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.message!r}, type={self.error_type.value}, "
            f"provider={self.provider!r}, status={self.status}, retryable={self.retryable})"
        )


class ResponseFormatError(AIError):
    """Raised when a provider answered but the payload is not a usable artifact."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(
            message,
            AIErrorType.INVALID_RESPONSE,
            provider=provider,
            status=200,
            retryable=True,
        )


class ProviderHTTPError(LLMError):
    """Raw non-2xx response from a REST backend, before classification."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


@dataclass
class ProviderFailure:
    """Last error recorded for one provider during a fallback run."""
    provider: str
    error: Exception
    attempts: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "error": str(self.error),
            "attempts": self.attempts,
        }


class AllProvidersFailedError(LLMError):
    """Every available provider was tried and none succeeded."""

    def __init__(self, providers: List[str], errors: List[ProviderFailure]):
        self.providers = list(providers)
        self.errors = list(errors)
        summary = "; ".join(f"{e.provider}: {e.error}" for e in self.errors)
        super().__init__(f"All AI providers failed. Tried: {', '.join(self.providers)}. {summary}")


class NoAvailableProvidersError(LLMError):
    """No registered provider is enabled and configured."""
    pass


@dataclass
class GenerateOptions:
    """Per-call generation options."""
    model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 2000
    response_format: str = "json"
    schema: Optional[Dict[str, Any]] = None
    system_prompt: Optional[str] = None
    timeout: float = 30.0  # seconds

    @property
    def wants_json(self) -> bool:
        return self.response_format == "json"


@dataclass
class GenerateResult:
    """Response from an LLM provider."""
    content: str
    model: str
    provider: str
    usage: Dict[str, Optional[int]] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "model": self.model,
            "provider": self.provider,
            "usage": self.usage,
            "metadata": self.metadata,
        }


@dataclass
class ProviderStatus:
    """Snapshot of a provider's availability and last failure."""
    name: str
    available: bool
    model: Optional[str] = None
    fallback_model: Optional[str] = None
    last_error: Optional[str] = None
    last_error_time: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "available": self.available,
            "model": self.model,
            "fallback_model": self.fallback_model,
            "last_error": self.last_error,
            "last_error_time": self.last_error_time.isoformat() if self.last_error_time else None,
        }


def normalize_usage(
    prompt_tokens: Optional[int] = None,
    completion_tokens: Optional[int] = None,
    total_tokens: Optional[int] = None,
) -> Dict[str, Optional[int]]:
    if total_tokens is None and prompt_tokens is not None and completion_tokens is not None:
        total_tokens = prompt_tokens + completion_tokens
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": total_tokens,
    }


def build_schema_instructions(prompt: str, schema: Optional[Dict[str, Any]]) -> str:
    """
    Append the schema's required field names to a prompt.

    Used by providers that cannot pass a schema natively, so the model is told
    the exact field names to emit.
    """
    if not schema:
        return prompt

    properties = schema.get("properties", {})
    required = schema.get("required", [])
    if not required:
        return f"{prompt}\n\nPlease respond in valid JSON format."

    field_lines = "\n".join(
        f'- "{name}": {properties.get(name, {}).get("description", "required")}'
        for name in required
    )
    return (
        f"{prompt}\n\n"
        f"IMPORTANT: Return a valid JSON object with these exact field names:\n"
        f"{field_lines}\n\n"
        f"The JSON must use these exact field names: {', '.join(required)}.\n"
        f'Do NOT use alternative names like "sentence" or "mainClauseStructure".'
    )


class LLMProviderInterface(ABC):
    """
    Abstract interface for LLM providers.

    Subclasses implement ``_generate`` for one backend. ``generate`` wraps it
    with the shared contract: availability check, per-call timeout, status
    bookkeeping and translation of every failure into a classified ``AIError``.
    Providers never retry internally.
    """

    def __init__(self, config: ProviderConfig):
        """
        Initialize the LLM provider.

        Args:
            config: Static provider configuration
        """
        if not config.name:
            raise ValueError("Provider config must include name")

        self.config = config
        self.name = config.name
        self.logger = logging.getLogger(self.__class__.__name__)

        self.model_name = config.model or self.get_default_model()
        self.priority = config.priority

        self._status_lock = threading.Lock()
        self._last_error: Optional[str] = None
        self._last_error_time: Optional[datetime] = None

    @abstractmethod
    def get_default_model(self) -> str:
        """Default model name used when the config leaves it empty."""
        pass

    def is_available(self) -> bool:
        """True iff the provider is enabled and has credentials."""
        return bool(self.config.enabled and self.config.api_key)

    async def generate(self, prompt: str, options: Optional[GenerateOptions] = None) -> GenerateResult:
        """
        Generate a completion for a prompt.

        Args:
            prompt: Input prompt text
            options: Generation options; defaults are used when omitted

        Returns:
            The raw completion wrapped in a GenerateResult

        Raises:
            AIError: On any failure, already classified
        """
        from skeleton_core.llm.error_classifier import to_ai_error

        if not self.is_available():
            raise AIError(
                f"{self.name} provider is not available. Please check API key configuration.",
                AIErrorType.AUTH_ERROR,
                provider=self.name,
                status=401,
                retryable=False,
            )

        options = options or GenerateOptions()
        model = options.model or self.model_name

        try:
            result = await asyncio.wait_for(
                self._generate(prompt, options, model),
                timeout=options.timeout,
            )
            if not result.content:
                raise AIError(
                    f"Empty response from {self.name} API",
                    AIErrorType.INVALID_RESPONSE,
                    provider=self.name,
                    status=200,
                )
        except Exception as e:
            error = to_ai_error(e, self.name)
            self.record_error(error)
            self.logger.warning(f"{self.name} generation failed: {error.error_type.value}: {error}")
            if error is e:
                raise
            raise error from e

        self.clear_error()
        return result

    @abstractmethod
    async def _generate(self, prompt: str, options: GenerateOptions, model: str) -> GenerateResult:
        """
        Perform exactly one backend call.

        Args:
            prompt: Input prompt text
            options: Generation options
            model: Resolved model name

        Returns:
            Generated result; content may be empty, which the caller rejects
        """
        pass

    async def close(self):
        """Release network resources held by the provider."""
        pass

    def record_error(self, error: Exception):
        with self._status_lock:
            self._last_error = str(error)
            self._last_error_time = datetime.now()

    def clear_error(self):
        with self._status_lock:
            self._last_error = None
            self._last_error_time = None

    def get_status(self) -> ProviderStatus:
        with self._status_lock:
            last_error, last_error_time = self._last_error, self._last_error_time
        return ProviderStatus(
            name=self.name,
            available=self.is_available(),
            model=self.model_name,
            fallback_model=self.config.fallback_model,
            last_error=last_error,
            last_error_time=last_error_time,
        )

    def get_provider_info(self) -> Dict[str, Any]:
        """
        Get information about this provider.

        Returns:
            Provider information dictionary
        """
        return {
            "name": self.name,
            "class": self.__class__.__name__,
            "model": self.model_name,
            "fallback_model": self.config.fallback_model,
            "priority": self.priority,
            "available": self.is_available(),
            "config": {
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
                "timeout": self.config.timeout,
            },
        }
