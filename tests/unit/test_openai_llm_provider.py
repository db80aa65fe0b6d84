"""
Unit tests for the OpenAI and DeepSeek LLM providers.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from skeleton_core.config.config_manager import ProviderConfig
from skeleton_core.llm.interfaces.llm_provider_interface import AIError, AIErrorType, GenerateOptions
from skeleton_core.llm.providers.deepseek.deepseek_provider import DEEPSEEK_API_BASE, DeepSeekLLMProvider
from skeleton_core.llm.providers.openai.openai_provider import OpenAILLMProvider
from skeleton_core.prompts.schema import get_sentence_schema


def make_completion(content, finish_reason="stop"):
    choice = Mock(finish_reason=finish_reason)
    choice.message = Mock(content=content)
    return Mock(
        choices=[choice],
        usage=Mock(prompt_tokens=10, completion_tokens=20, total_tokens=30),
    )


@pytest.fixture
def mock_async_openai():
    with patch("skeleton_core.llm.providers.openai.openai_provider.AsyncOpenAI") as client_class:
        client = Mock()
        client.chat.completions.create = AsyncMock(return_value=make_completion('{"ok": true}'))
        client.close = AsyncMock()
        client_class.return_value = client
        yield client_class


@pytest.fixture
def openai_config():
    return ProviderConfig(name="openai", api_key="sk-test", model="gpt-4o-mini", timeout=15)


class TestOpenAILLMProviderInitialization:

    def test_client_built_without_sdk_retries(self, mock_async_openai, openai_config):
        provider = OpenAILLMProvider(openai_config)

        assert provider.is_available()
        kwargs = mock_async_openai.call_args.kwargs
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["max_retries"] == 0
        assert kwargs["timeout"] == 15
        assert "base_url" not in kwargs

    def test_custom_base_url(self, mock_async_openai):
        OpenAILLMProvider(ProviderConfig(name="openai", api_key="k", api_base="https://proxy.local/v1"))
        assert mock_async_openai.call_args.kwargs["base_url"] == "https://proxy.local/v1"

    def test_no_api_key_means_no_client(self, mock_async_openai):
        provider = OpenAILLMProvider(ProviderConfig(name="openai"))

        assert provider.client is None
        assert not provider.is_available()
        mock_async_openai.assert_not_called()

    def test_default_model(self, mock_async_openai):
        provider = OpenAILLMProvider(ProviderConfig(name="openai", api_key="k", model=None))
        assert provider.model_name == "gpt-4o-mini"


class TestOpenAILLMProviderGenerate:

    @pytest.mark.asyncio
    async def test_generate_with_schema(self, mock_async_openai, openai_config):
        provider = OpenAILLMProvider(openai_config)
        options = GenerateOptions(schema=get_sentence_schema(), system_prompt="You are a teacher.")

        result = await provider.generate("Analyze this.", options)

        assert result.content == '{"ok": true}'
        assert result.provider == "openai"
        assert result.model == "gpt-4o-mini"
        assert result.usage["total_tokens"] == 30
        assert result.metadata["finish_reason"] == "stop"

        params = provider.client.chat.completions.create.call_args.kwargs
        assert params["response_format"] == {"type": "json_object"}
        assert params["messages"][0] == {"role": "system", "content": "You are a teacher."}
        assert "originalSentence" in params["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_generate_text_mode(self, mock_async_openai, openai_config):
        provider = OpenAILLMProvider(openai_config)

        await provider.generate("Hello", GenerateOptions(response_format="text"))

        params = provider.client.chat.completions.create.call_args.kwargs
        assert "response_format" not in params
        assert params["messages"] == [{"role": "user", "content": "Hello"}]

    @pytest.mark.asyncio
    async def test_empty_choice_is_invalid_response(self, mock_async_openai, openai_config):
        provider = OpenAILLMProvider(openai_config)
        provider.client.chat.completions.create.return_value = Mock(choices=[], usage=None)

        with pytest.raises(AIError) as exc_info:
            await provider.generate("Hello")
        assert exc_info.value.error_type == AIErrorType.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_sdk_status_error_is_classified(self, mock_async_openai, openai_config):
        provider = OpenAILLMProvider(openai_config)
        error = Exception("Rate limit reached")
        error.status_code = 429
        provider.client.chat.completions.create.side_effect = error

        with pytest.raises(AIError) as exc_info:
            await provider.generate("Hello")

        assert exc_info.value.error_type == AIErrorType.RATE_LIMIT
        assert provider.get_status().last_error == "Rate limit reached"

    @pytest.mark.asyncio
    async def test_close(self, mock_async_openai, openai_config):
        provider = OpenAILLMProvider(openai_config)
        await provider.close()
        provider.client.close.assert_awaited_once()


class TestDeepSeekLLMProvider:

    def test_defaults(self, mock_async_openai):
        provider = DeepSeekLLMProvider(ProviderConfig(name="deepseek", api_key="k", model=None))

        assert provider.model_name == "deepseek-chat"
        assert mock_async_openai.call_args.kwargs["base_url"] == DEEPSEEK_API_BASE

    @pytest.mark.asyncio
    async def test_generate(self, mock_async_openai):
        provider = DeepSeekLLMProvider(ProviderConfig(name="deepseek", api_key="k", model="deepseek-chat"))

        result = await provider.generate("Hello")

        assert result.provider == "deepseek"
        assert result.model == "deepseek-chat"
