"""
Retry and fallback policy across LLM providers.

Providers are tried strictly one at a time, in the order given. Each provider
gets ``retry_count + 1`` attempts with linear backoff between them. The first
success wins. A non-retryable failure aborts the whole run; when every provider
is exhausted an ``AllProvidersFailedError`` carries one failure per provider.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from skeleton_core.llm.error_classifier import classify_error
from skeleton_core.llm.interfaces.llm_provider_interface import (
    AllProvidersFailedError,
    GenerateOptions,
    GenerateResult,
    LLMProviderInterface,
    ProviderFailure,
)

ResponseHandler = Callable[[GenerateResult], Any]


class FallbackStrategy:
    """Executes one generation request against an ordered provider list."""

    def __init__(self, retry_count: int = 2, retry_delay: float = 1.0):
        """
        Args:
            retry_count: Extra attempts per provider after the first one
            retry_delay: Base delay in seconds; attempt ``n`` waits ``retry_delay * n``
        """
        if retry_count < 0:
            raise ValueError("retry_count must be >= 0")
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.logger = logging.getLogger(__name__)

    async def execute_with_fallback(
        self,
        providers: List[LLMProviderInterface],
        prompt: str,
        options: Optional[GenerateOptions] = None,
        response_handler: Optional[ResponseHandler] = None,
    ) -> Any:
        """
        Run the request until one provider succeeds.

        Args:
            providers: Candidate providers in preference order
            prompt: Prompt text
            options: Generation options passed to every provider
            response_handler: Optional callable applied to each raw result inside
                the attempt; its failures count as provider failures

        Returns:
            The first successful GenerateResult, or the handler's return value

        Raises:
            AIError: A non-retryable failure, unchanged
            AllProvidersFailedError: Every available provider was exhausted
        """
        available = [p for p in providers if p.is_available()]
        skipped = [p.name for p in providers if p not in available]
        if skipped:
            self.logger.debug(f"Skipping unavailable providers: {skipped}")

        tried: List[str] = []
        failures: List[ProviderFailure] = []

        for provider in available:
            tried.append(provider.name)
            last_error: Optional[Exception] = None

            for attempt in range(self.retry_count + 1):
                if attempt > 0:
                    delay = self.retry_delay * attempt
                    self.logger.info(
                        f"Retrying {provider.name} in {delay:.1f}s "
                        f"(attempt {attempt + 1}/{self.retry_count + 1})"
                    )
                    await asyncio.sleep(delay)

                try:
                    result = await provider.generate(prompt, options)
                    if response_handler is not None:
                        result = response_handler(result)
                except Exception as e:
                    last_error = e
                    classification = classify_error(e)

                    if not classification.retryable:
                        self.logger.error(
                            f"Provider {provider.name} failed with non-retryable "
                            f"{classification.error_type.value}: {e}"
                        )
                        raise

                    self.logger.warning(
                        f"Provider {provider.name} attempt {attempt + 1} failed "
                        f"({classification.error_type.value}): {e}"
                    )
                    continue

                if attempt > 0 or tried[0] != provider.name:
                    self.logger.info(f"Provider {provider.name} succeeded after fallback/retry")
                return result

            failures.append(ProviderFailure(provider.name, last_error, self.retry_count + 1))
            self.logger.warning(f"Provider {provider.name} exhausted, moving to next provider")

        raise AllProvidersFailedError(tried, failures)
