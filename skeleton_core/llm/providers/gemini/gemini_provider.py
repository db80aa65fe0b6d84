"""
Google Gemini LLM provider implementation.

Gemini accepts a response schema natively, so the JSON schema from the prompt
builder is converted to the SDK's ``Schema`` type instead of being embedded in
the prompt.
"""

import logging
from typing import Any, Dict

from google import genai
from google.genai import types

from skeleton_core.config.config_manager import ProviderConfig
from skeleton_core.llm.interfaces.llm_provider_interface import (
    GenerateOptions,
    GenerateResult,
    LLMProviderInterface,
    normalize_usage,
)

_TYPE_MAP = {
    "string": types.Type.STRING,
    "integer": types.Type.INTEGER,
    "number": types.Type.NUMBER,
    "boolean": types.Type.BOOLEAN,
    "array": types.Type.ARRAY,
    "object": types.Type.OBJECT,
}


def convert_schema(schema: Dict[str, Any]) -> types.Schema:
    """Convert a JSON-Schema-like dict into a Gemini ``Schema``."""
    schema_type = _TYPE_MAP.get(schema.get("type", "string"), types.Type.STRING)
    kwargs: Dict[str, Any] = {"type": schema_type}

    if schema.get("description"):
        kwargs["description"] = schema["description"]
    if schema.get("enum"):
        kwargs["enum"] = [str(value) for value in schema["enum"]]

    if schema_type == types.Type.ARRAY:
        kwargs["items"] = convert_schema(schema.get("items") or {"type": "string"})
    elif schema_type == types.Type.OBJECT:
        properties = schema.get("properties") or {}
        kwargs["properties"] = {name: convert_schema(prop) for name, prop in properties.items()}
        if schema.get("required"):
            kwargs["required"] = list(schema["required"])

    return types.Schema(**kwargs)


class GeminiLLMProvider(LLMProviderInterface):
    """
    Google Gemini LLM provider.

    Uses the async surface of the google-genai client.
    """

    def __init__(self, config: ProviderConfig):
        """
        Initialize the Gemini LLM provider.

        Args:
            config: Provider configuration; no client is built without an api_key
        """
        super().__init__(config)

        self.logger = logging.getLogger(__name__)
        self.client = genai.Client(api_key=config.api_key) if config.api_key else None

    def get_default_model(self) -> str:
        """Get the default model name for Gemini provider."""
        return "gemini-2.5-flash-lite"

    def is_available(self) -> bool:
        return super().is_available() and self.client is not None

    def _build_config(self, options: GenerateOptions) -> types.GenerateContentConfig:
        gen_config = types.GenerateContentConfig(
            temperature=options.temperature,
            max_output_tokens=options.max_tokens,
            response_mime_type="application/json" if options.wants_json else "text/plain",
        )
        if options.system_prompt:
            gen_config.system_instruction = options.system_prompt
        if options.schema and options.wants_json:
            gen_config.response_schema = convert_schema(options.schema)
        return gen_config

    async def _generate(self, prompt: str, options: GenerateOptions, model: str) -> GenerateResult:
        response = await self.client.aio.models.generate_content(
            model=model, contents=prompt, config=self._build_config(options)
        )

        usage = getattr(response, "usage_metadata", None)
        candidates = getattr(response, "candidates", None) or []
        finish_reason = getattr(candidates[0], "finish_reason", None) if candidates else None

        return GenerateResult(
            content=response.text or "",
            model=model,
            provider=self.name,
            usage=normalize_usage(
                getattr(usage, "prompt_token_count", None),
                getattr(usage, "candidates_token_count", None),
                getattr(usage, "total_token_count", None),
            ),
            metadata={"finish_reason": str(finish_reason) if finish_reason is not None else None},
        )
