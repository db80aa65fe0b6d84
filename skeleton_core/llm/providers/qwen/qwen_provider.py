"""
Qwen LLM provider implementation.

Talks to Alibaba Cloud's DashScope text-generation REST endpoint over aiohttp.
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from skeleton_core.config.config_manager import ProviderConfig
from skeleton_core.llm.interfaces.llm_provider_interface import (
    GenerateOptions,
    GenerateResult,
    LLMProviderInterface,
    ProviderHTTPError,
    build_schema_instructions,
    normalize_usage,
)

DASHSCOPE_API_BASE = "https://dashscope.aliyuncs.com/api/v1"
GENERATION_PATH = "/services/aigc/text-generation/generation"


class QwenLLMProvider(LLMProviderInterface):
    """
    Qwen (Tongyi Qianwen) provider.

    The response is requested in message format, so content arrives under
    ``output.choices[0].message.content``; older models answer with
    ``output.text`` instead.
    """

    def __init__(self, config: ProviderConfig):
        super().__init__(config)

        self.logger = logging.getLogger(__name__)
        self.api_base = (config.api_base or DASHSCOPE_API_BASE).rstrip("/")

        # HTTP session for connection pooling
        self._session: Optional[aiohttp.ClientSession] = None

    def get_default_model(self) -> str:
        return "qwen-flash"

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}{GENERATION_PATH}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    def _build_request(self, prompt: str, options: GenerateOptions, model: str) -> Dict[str, Any]:
        messages = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})

        parameters: Dict[str, Any] = {
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
            "result_format": "message",
        }

        user_content = prompt
        if options.schema and options.wants_json:
            user_content = build_schema_instructions(prompt, options.schema)
            parameters["response_format"] = {"type": "json_object"}
        messages.append({"role": "user", "content": user_content})

        return {
            "model": model,
            "input": {"messages": messages},
            "parameters": parameters,
        }

    async def _generate(self, prompt: str, options: GenerateOptions, model: str) -> GenerateResult:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        session = await self._get_session()

        async with session.post(
            self.endpoint, json=self._build_request(prompt, options, model), headers=headers
        ) as response:
            if not 200 <= response.status < 300:
                try:
                    error_data = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    error_data = None
                message = None
                if isinstance(error_data, dict):
                    message = error_data.get("message")
                raise ProviderHTTPError(response.status, message or f"Qwen API error: {response.status}")

            data = await response.json(content_type=None)

        usage = data.get("usage") or {}
        return GenerateResult(
            content=self._extract_content(data),
            model=model,
            provider=self.name,
            usage=normalize_usage(
                usage.get("input_tokens"),
                usage.get("output_tokens"),
                usage.get("total_tokens"),
            ),
            metadata={"request_id": data.get("request_id")},
        )

    @staticmethod
    def _extract_content(data: Dict[str, Any]) -> str:
        output = data.get("output") or {}
        choices = output.get("choices") or []
        if choices:
            content = (choices[0].get("message") or {}).get("content")
            if content:
                return content
        return output.get("text") or ""

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
