"""
Configuration file for pytest.

Provides shared fixtures: a scripted fake provider, sample provider payloads
and an environment without provider credentials.
"""

import json
from typing import Any, List, Optional

import pytest

from skeleton_core.config.config_manager import ConfigManager, ProviderConfig
from skeleton_core.llm.interfaces.llm_provider_interface import (
    GenerateOptions,
    GenerateResult,
    LLMProviderInterface,
)

CONFIG_ENV_VARS = [
    "ENVIRONMENT", "DEBUG", "DEFAULT_PROVIDER",
    "QWEN_API_KEY", "QWEN_API_BASE", "DEEPSEEK_API_KEY", "DEEPSEEK_API_BASE",
    "API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY", "CLAUDE_API_KEY",
    "FALLBACK_ENABLED", "FALLBACK_RETRY_COUNT", "FALLBACK_RETRY_DELAY",
    "GENERATION_TIMEOUT", "QUESTION_BANK_PATH", "LOG_LEVEL", "LOG_JSON",
]


class FakeProvider(LLMProviderInterface):
    """
    Provider whose outcomes are scripted.

    Each call consumes the next outcome; the last one repeats. An exception
    outcome is raised, a string outcome is returned as content.
    """

    def __init__(self, name: str, priority: int = 1, outcomes: Optional[List[Any]] = None,
                 api_key: Optional[str] = "test-key", enabled: bool = True):
        super().__init__(ProviderConfig(
            name=name,
            enabled=enabled,
            api_key=api_key,
            model=f"{name}-model",
            priority=priority,
        ))
        self.outcomes = list(outcomes or ["{}"])
        self.calls = 0
        self.prompts: List[str] = []
        self.options: List[GenerateOptions] = []

    def get_default_model(self) -> str:
        return "fake-model"

    async def _generate(self, prompt: str, options: GenerateOptions, model: str) -> GenerateResult:
        self.calls += 1
        self.prompts.append(prompt)
        self.options.append(options)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return GenerateResult(content=outcome, model=model, provider=self.name)


@pytest.fixture
def make_provider():
    """Factory for scripted fake providers."""
    return FakeProvider


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the config layer reads."""
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield monkeypatch


@pytest.fixture
def fresh_config_manager():
    """Reset the ConfigManager singleton around a test."""
    ConfigManager._instance = None
    yield
    ConfigManager._instance = None


@pytest.fixture
def sample_payload():
    """A well-formed provider answer for an intermediate sentence."""
    return {
        "originalSentence": "He put the book on the table.",
        "words": ["He", "put", "the", "book", "on", "the", "table", "."],
        "wordRoles": ["主语", "谓语", "定语", "宾语", "定语", "状语", "定语", "连接词/其他"],
        "structureType": "主谓宾 (SVO)",
        "skeletonIndices": [0, 1, 3],
        "explanation": "主干是 He put book。",
        "options": ["主语", "谓语", "宾语", "定语", "状语", "连接词/其他"],
    }


@pytest.fixture
def sample_json(sample_payload):
    return json.dumps(sample_payload, ensure_ascii=False)
