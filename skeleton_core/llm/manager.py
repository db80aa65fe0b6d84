"""
LLM Manager with fallback support and provider orchestration.

This module provides the LLMManager class that owns the registered providers,
resolves the order they are tried in and delegates each request to the
fallback strategy.
"""
import logging
from typing import Any, Dict, List, Optional

from skeleton_core.llm.fallback import FallbackStrategy, ResponseHandler
from skeleton_core.llm.interfaces.llm_provider_interface import (
    AllProvidersFailedError,
    GenerateOptions,
    LLMProviderInterface,
    NoAvailableProvidersError,
)

DEFAULT_PRIORITY = 999


class LLMManager:
    """
    LLM Manager with fallback support and provider orchestration.

    Providers are registered once at startup. Ordering is by ascending
    configured priority, with an available preferred provider moved to the
    front. Requests that name no preferred provider use the default one.
    """

    def __init__(self, fallback_strategy: Optional[FallbackStrategy] = None,
                 default_provider: Optional[str] = None):
        """
        Initialize the LLM Manager.

        Args:
            fallback_strategy: Retry/fallback policy. If None, uses the defaults.
            default_provider: Provider preferred when a request names none
        """
        self.fallback_strategy = fallback_strategy or FallbackStrategy()
        self.default_provider = default_provider
        self.logger = logging.getLogger(__name__)
        self.providers: Dict[str, LLMProviderInterface] = {}

    def register_provider(self, provider: LLMProviderInterface):
        if not provider or not getattr(provider, "name", None):
            raise ValueError("Provider must have a name")
        if provider.name in self.providers:
            self.logger.warning(f"Replacing already registered provider: {provider.name}")
        self.providers[provider.name] = provider
        self.logger.info(f"Registered provider: {provider.name}")

    def get_provider(self, name: str) -> Optional[LLMProviderInterface]:
        return self.providers.get(name)

    @property
    def provider_names(self) -> List[str]:
        return list(self.providers.keys())

    def get_available_providers(self, preferred_provider: Optional[str] = None) -> List[LLMProviderInterface]:
        """
        Get available providers in the order they should be tried.

        Args:
            preferred_provider: Provider to move to the front if it is available

        Returns:
            Available providers, preferred first, then by ascending priority
        """
        providers = [p for p in self.providers.values() if p.is_available()]
        # sorted() is stable, so equal priorities keep registration order
        providers = sorted(providers, key=lambda p: p.priority if p.priority is not None else DEFAULT_PRIORITY)

        if preferred_provider:
            preferred = next((p for p in providers if p.name == preferred_provider), None)
            if preferred is not None:
                providers = [preferred] + [p for p in providers if p is not preferred]
            else:
                self.logger.warning(
                    f"Preferred provider '{preferred_provider}' is not available, using priority order"
                )

        return providers

    async def generate_with_fallback(
        self,
        prompt: str,
        options: Optional[GenerateOptions] = None,
        preferred_provider: Optional[str] = None,
        enable_fallback: bool = True,
        fallback_providers: Optional[List[str]] = None,
        response_handler: Optional[ResponseHandler] = None,
    ) -> Any:
        """
        Generate a completion using the best available provider.

        Args:
            prompt: Input prompt text
            options: Generation options
            preferred_provider: Provider to try first, the default provider if None
            enable_fallback: If False, only the first resolved provider is called, once
            fallback_providers: If given, restrict the run to the preferred
                provider plus these names
            response_handler: Applied to the raw result inside each attempt

        Returns:
            GenerateResult, or the response handler's return value

        Raises:
            NoAvailableProvidersError: If no provider resolves
            AIError: On a non-retryable failure, or any failure with fallback disabled
            AllProvidersFailedError: If all providers are exhausted
        """
        preferred_provider = preferred_provider or self.default_provider
        providers = self.get_available_providers(preferred_provider)

        if fallback_providers:
            allowed = set(fallback_providers)
            providers = [p for p in providers if p.name == preferred_provider or p.name in allowed]

        if not providers:
            raise NoAvailableProvidersError("No available AI providers")

        if not enable_fallback:
            provider = providers[0]
            self.logger.debug(f"Fallback disabled, using {provider.name} only")
            result = await provider.generate(prompt, options)
            return response_handler(result) if response_handler is not None else result

        try:
            return await self.fallback_strategy.execute_with_fallback(
                providers, prompt, options, response_handler=response_handler
            )
        except AllProvidersFailedError as e:
            self.logger.error(f"All providers failed: {[f.to_dict() for f in e.errors]}")
            raise

    def get_all_provider_status(self) -> List[Dict[str, Any]]:
        return [provider.get_status().to_dict() for provider in self.providers.values()]

    def health_check(self) -> Dict[str, Any]:
        """
        Summarize provider health.

        Returns:
            Overall availability plus per-provider status
        """
        statuses = self.get_all_provider_status()
        available = [s["name"] for s in statuses if s["available"]]
        return {
            "overall_status": "healthy" if available else "unavailable",
            "available_providers": available,
            "total_providers": len(statuses),
            "default_provider": self.default_provider,
            "fallback": {
                "retry_count": self.fallback_strategy.retry_count,
                "retry_delay": self.fallback_strategy.retry_delay,
            },
            "providers": statuses,
        }
