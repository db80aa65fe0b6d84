"""
LLM Provider System for the sentence analysis core

This module provides the multi-provider LLM layer: a uniform provider
interface, error classification, a retry/fallback strategy and a manager that
orders providers by preference and priority.

Features:
- Qwen, DeepSeek, Gemini, OpenAI and Claude providers
- Provider factory building a manager from configuration
- Linear-backoff retries per provider and fallback across providers
- Classified errors with a retryability flag
"""

from .factory import (
    create_provider,
    create_manager,
    list_available_providers,
    LLMProviderFactory
)

from .manager import LLMManager

from .fallback import FallbackStrategy

from .error_classifier import (
    ErrorClassification,
    classify_error,
    is_retryable,
    to_ai_error
)

from .interfaces.llm_provider_interface import (
    LLMProviderInterface,
    AIErrorType,
    LLMError,
    AIError,
    ResponseFormatError,
    ProviderHTTPError,
    ProviderFailure,
    AllProvidersFailedError,
    NoAvailableProvidersError,
    GenerateOptions,
    GenerateResult,
    ProviderStatus
)

__all__ = [
    # Factory functions
    'create_provider',
    'create_manager',
    'list_available_providers',
    'LLMProviderFactory',

    # Orchestration
    'LLMManager',
    'FallbackStrategy',

    # Error classification
    'ErrorClassification',
    'classify_error',
    'is_retryable',
    'to_ai_error',

    # Interfaces and types
    'LLMProviderInterface',
    'AIErrorType',
    'LLMError',
    'AIError',
    'ResponseFormatError',
    'ProviderHTTPError',
    'ProviderFailure',
    'AllProvidersFailedError',
    'NoAvailableProvidersError',
    'GenerateOptions',
    'GenerateResult',
    'ProviderStatus'
]
