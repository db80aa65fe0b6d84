"""
DeepSeek LLM provider implementation.

DeepSeek exposes an OpenAI-compatible chat completions endpoint, so this
provider reuses the OpenAI provider with a different base URL and model.
"""

import logging

from skeleton_core.config.config_manager import ProviderConfig
from skeleton_core.llm.providers.openai.openai_provider import OpenAILLMProvider

DEEPSEEK_API_BASE = "https://api.deepseek.com"


class DeepSeekLLMProvider(OpenAILLMProvider):
    """DeepSeek chat models through the OpenAI SDK."""

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        self.logger = logging.getLogger(__name__)

    def get_default_model(self) -> str:
        return "deepseek-chat"

    def get_default_base_url(self) -> str:
        return DEEPSEEK_API_BASE
