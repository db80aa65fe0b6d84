"""
LLM provider factory for creating LLM provider instances.

This module maps provider names to implementations and builds a fully
registered LLMManager from the application configuration.
"""

import logging
from typing import Dict, List, Optional, Type

from skeleton_core.config.config_manager import AppConfig, ProviderConfig, get_config
from skeleton_core.llm.fallback import FallbackStrategy
from skeleton_core.llm.interfaces.llm_provider_interface import LLMProviderInterface
from skeleton_core.llm.manager import LLMManager
from skeleton_core.llm.providers.anthropic.anthropic_provider import AnthropicLLMProvider
from skeleton_core.llm.providers.deepseek.deepseek_provider import DeepSeekLLMProvider
from skeleton_core.llm.providers.gemini.gemini_provider import GeminiLLMProvider
from skeleton_core.llm.providers.openai.openai_provider import OpenAILLMProvider
from skeleton_core.llm.providers.qwen.qwen_provider import QwenLLMProvider


class LLMProviderFactory:
    """
    Factory class for creating LLM provider instances.

    This factory creates and configures LLM providers based on the
    application configuration.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._providers: Dict[str, Type[LLMProviderInterface]] = {}
        self._register_providers()

    def _register_providers(self):
        """Register available LLM providers."""
        self._providers["qwen"] = QwenLLMProvider
        self._providers["deepseek"] = DeepSeekLLMProvider
        self._providers["gemini"] = GeminiLLMProvider
        self._providers["openai"] = OpenAILLMProvider
        self._providers["claude"] = AnthropicLLMProvider

    def register_provider_class(self, name: str, provider_class: Type[LLMProviderInterface]):
        self._providers[name] = provider_class

    def create_provider(self, provider_type: str, provider_config: ProviderConfig) -> LLMProviderInterface:
        """
        Create an LLM provider instance.

        Args:
            provider_type: Registered provider name ('qwen', 'deepseek', 'gemini',
                          'openai', 'claude')
            provider_config: Configuration for the provider

        Returns:
            Configured LLM provider instance

        Raises:
            ValueError: If the provider type is not supported
        """
        if provider_type not in self._providers:
            available_providers = list(self._providers.keys())
            raise ValueError(
                f"Unsupported provider type '{provider_type}'. "
                f"Available providers: {available_providers}"
            )

        if not provider_config.name:
            provider_config.name = provider_type

        provider_class = self._providers[provider_type]
        self.logger.debug(f"Creating {provider_type} LLM provider")
        return provider_class(provider_config)

    def create_manager(self, app_config: Optional[AppConfig] = None) -> LLMManager:
        """
        Build an LLMManager with every enabled provider registered.

        Args:
            app_config: Application configuration. If None, uses the global config.

        Returns:
            Manager using the configured fallback policy
        """
        app_config = app_config or get_config().config
        fallback = app_config.llm.fallback

        # Retries are disabled along with fallback
        strategy = FallbackStrategy(
            retry_count=fallback.retry_count if fallback.enabled else 0,
            retry_delay=fallback.retry_delay,
        )
        manager = LLMManager(strategy, default_provider=app_config.llm.default_provider)

        for name, provider_config in app_config.llm.provider_configs().items():
            if not provider_config.enabled:
                self.logger.debug(f"Provider {name} disabled in configuration")
                continue
            try:
                provider = self.create_provider(name, provider_config)
            except Exception as e:
                self.logger.warning(f"Failed to register {name} provider: {e}")
                continue
            manager.register_provider(provider)

        for status in manager.get_all_provider_status():
            state = "available" if status["available"] else "unavailable (no API key)"
            self.logger.info(f"Provider {status['name']}: {state}")

        return manager

    def list_available_providers(self) -> List[str]:
        """
        List all registered LLM provider names.

        Returns:
            List of provider type names
        """
        return list(self._providers.keys())

    def is_provider_available(self, provider_type: str) -> bool:
        return provider_type in self._providers


# Global factory instance
_llm_factory = LLMProviderFactory()


def create_provider(provider_type: str, provider_config: ProviderConfig) -> LLMProviderInterface:
    """
    Create an LLM provider instance using the global factory.

    Args:
        provider_type: Registered provider name
        provider_config: Configuration for the provider

    Returns:
        Configured LLM provider instance
    """
    return _llm_factory.create_provider(provider_type, provider_config)


def create_manager(app_config: Optional[AppConfig] = None) -> LLMManager:
    """Build a registered LLMManager using the global factory."""
    return _llm_factory.create_manager(app_config)


def list_available_providers() -> List[str]:
    return _llm_factory.list_available_providers()
