from .config_manager import (
    AppConfig,
    ConfigManager,
    ConfigValidationError,
    Environment,
    FallbackConfig,
    GenerationConfig,
    LLMConfig,
    LogLevel,
    ProviderConfig,
    QuestionBankConfig,
    get_config,
    init_config,
)

__all__ = [
    "AppConfig",
    "ConfigManager",
    "ConfigValidationError",
    "Environment",
    "FallbackConfig",
    "GenerationConfig",
    "LLMConfig",
    "LogLevel",
    "ProviderConfig",
    "QuestionBankConfig",
    "get_config",
    "init_config",
]
