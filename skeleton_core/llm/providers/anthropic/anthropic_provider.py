"""
Anthropic Claude LLM provider implementation.

Claude has no JSON mode on the messages API, so the schema's required fields
are listed in the prompt.
"""

import logging
from typing import Any, Dict

from anthropic import AsyncAnthropic

from skeleton_core.config.config_manager import ProviderConfig
from skeleton_core.llm.interfaces.llm_provider_interface import (
    GenerateOptions,
    GenerateResult,
    LLMProviderInterface,
    build_schema_instructions,
    normalize_usage,
)


class AnthropicLLMProvider(LLMProviderInterface):
    """Anthropic Claude provider, registered under the name ``claude``."""

    def __init__(self, config: ProviderConfig):
        super().__init__(config)

        self.logger = logging.getLogger(__name__)
        self.client = None
        if config.api_key:
            client_kwargs: Dict[str, Any] = {
                "api_key": config.api_key,
                "timeout": config.timeout,
                "max_retries": 0,
            }
            if config.api_base:
                client_kwargs["base_url"] = config.api_base
            self.client = AsyncAnthropic(**client_kwargs)

    def get_default_model(self) -> str:
        return "claude-3-haiku-20240307"

    def is_available(self) -> bool:
        return super().is_available() and self.client is not None

    async def _generate(self, prompt: str, options: GenerateOptions, model: str) -> GenerateResult:
        user_content = prompt
        if options.schema and options.wants_json:
            user_content = build_schema_instructions(prompt, options.schema)
        elif options.wants_json and "json" not in prompt.lower():
            user_content = f"{prompt}\n\nPlease respond with valid JSON format."

        request_params: Dict[str, Any] = {
            "model": model,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "messages": [{"role": "user", "content": user_content}],
        }
        if options.system_prompt:
            request_params["system"] = options.system_prompt

        response = await self.client.messages.create(**request_params)

        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        usage = response.usage
        input_tokens = getattr(usage, "input_tokens", None)
        output_tokens = getattr(usage, "output_tokens", None)

        return GenerateResult(
            content=content,
            model=model,
            provider=self.name,
            usage=normalize_usage(input_tokens, output_tokens),
            metadata={"stop_reason": getattr(response, "stop_reason", None)},
        )

    async def close(self):
        if self.client is not None:
            await self.client.close()
