"""
OpenAI GPT LLM provider implementation.

This module implements the LLMProviderInterface for OpenAI's chat completions
API. The schema is communicated by listing its required fields in the prompt
and requesting JSON mode, since chat completions has no native schema channel
for every model.
"""

import logging
from typing import Any, Dict, List

from openai import AsyncOpenAI

from skeleton_core.config.config_manager import ProviderConfig
from skeleton_core.llm.interfaces.llm_provider_interface import (
    GenerateOptions,
    GenerateResult,
    LLMProviderInterface,
    build_schema_instructions,
    normalize_usage,
)


class OpenAILLMProvider(LLMProviderInterface):
    """
    OpenAI GPT LLM provider.

    Also serves as the base for OpenAI-compatible backends, which only
    differ in base URL and default model.
    """

    def __init__(self, config: ProviderConfig):
        """
        Initialize the OpenAI LLM provider.

        Args:
            config: Provider configuration. ``api_base`` overrides the SDK's
                default base URL. Without an ``api_key`` no client is built
                and the provider reports itself unavailable.
        """
        super().__init__(config)

        self.logger = logging.getLogger(__name__)
        self.client = None

        if config.api_key:
            client_kwargs = {
                "api_key": config.api_key,
                "timeout": config.timeout,
                # retries belong to the fallback strategy
                "max_retries": 0,
            }
            base_url = config.api_base or self.get_default_base_url()
            if base_url:
                client_kwargs["base_url"] = base_url
            self.client = AsyncOpenAI(**client_kwargs)

    def get_default_model(self) -> str:
        """Get the default model name for OpenAI provider."""
        return "gpt-4o-mini"

    def get_default_base_url(self):
        return None

    def is_available(self) -> bool:
        return super().is_available() and self.client is not None

    def _build_messages(self, prompt: str, options: GenerateOptions) -> List[Dict[str, str]]:
        messages = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})

        user_content = prompt
        if options.schema and options.wants_json:
            user_content = build_schema_instructions(prompt, options.schema)
        messages.append({"role": "user", "content": user_content})
        return messages

    async def _generate(self, prompt: str, options: GenerateOptions, model: str) -> GenerateResult:
        request_params: Dict[str, Any] = {
            "model": model,
            "messages": self._build_messages(prompt, options),
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }
        if options.schema and options.wants_json:
            request_params["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(**request_params)

        choice = response.choices[0] if response.choices else None
        content = choice.message.content if choice and choice.message else None
        usage = response.usage

        return GenerateResult(
            content=content or "",
            model=model,
            provider=self.name,
            usage=normalize_usage(
                getattr(usage, "prompt_tokens", None),
                getattr(usage, "completion_tokens", None),
                getattr(usage, "total_tokens", None),
            ),
            metadata={"finish_reason": choice.finish_reason if choice else None},
        )

    async def close(self):
        if self.client is not None:
            await self.client.close()
