"""
LLM provider interfaces package.

This package contains the abstract provider interface and the shared error
taxonomy used across the LLM layer.
"""

from .llm_provider_interface import (
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
    ProviderStatus,
    build_schema_instructions,
    normalize_usage,
)

__all__ = [
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
    'ProviderStatus',
    'build_schema_instructions',
    'normalize_usage',
]
