"""
Centralized Configuration Management

This module provides the configuration system for the sentence analysis core:
- Centralizes provider, fallback, generation and logging settings
- Supports environment-specific overrides
- Validates configuration on startup
- Is populated once at process start; business logic never reads os.environ
"""

import os
import json
import yaml
import logging
import threading
from typing import Any, Dict, Optional, Union
from pathlib import Path
from dataclasses import dataclass, field, fields
from enum import Enum


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


PROVIDER_NAMES = ("qwen", "deepseek", "gemini", "openai", "claude")


@dataclass
class ProviderConfig:
    """Static configuration for a single LLM provider"""

    name: str = ""
    enabled: bool = True
    api_key: Optional[str] = None
    model: str = ""
    fallback_model: Optional[str] = None
    priority: int = 999
    temperature: float = 0.7
    max_tokens: int = 2000
    api_base: Optional[str] = None
    timeout: float = 30.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)


def _qwen_defaults() -> ProviderConfig:
    return ProviderConfig(
        name="qwen",
        model="qwen-flash",
        fallback_model="qwen-turbo",
        priority=1,
        api_base="https://dashscope.aliyuncs.com/api/v1",
    )


def _deepseek_defaults() -> ProviderConfig:
    return ProviderConfig(
        name="deepseek",
        model="deepseek-chat",
        fallback_model="deepseek-reasoner",
        priority=2,
        api_base="https://api.deepseek.com",
    )


def _gemini_defaults() -> ProviderConfig:
    return ProviderConfig(
        name="gemini",
        model="gemini-2.5-flash-lite",
        fallback_model="gemini-2.0-flash",
        priority=3,
    )


def _openai_defaults() -> ProviderConfig:
    return ProviderConfig(
        name="openai",
        model="gpt-4o-mini",
        fallback_model="gpt-3.5-turbo",
        priority=3,
    )


def _claude_defaults() -> ProviderConfig:
    return ProviderConfig(
        name="claude",
        enabled=False,
        model="claude-3-haiku-20240307",
        priority=4,
    )


@dataclass
class FallbackConfig:
    """Provider fallback policy"""

    enabled: bool = True
    retry_count: int = 2
    retry_delay: float = 1.0  # seconds, multiplied by the attempt number


@dataclass
class LLMConfig:
    """LLM provider configuration"""

    default_provider: str = "qwen"
    qwen: ProviderConfig = field(default_factory=_qwen_defaults)
    deepseek: ProviderConfig = field(default_factory=_deepseek_defaults)
    gemini: ProviderConfig = field(default_factory=_gemini_defaults)
    openai: ProviderConfig = field(default_factory=_openai_defaults)
    claude: ProviderConfig = field(default_factory=_claude_defaults)
    fallback: FallbackConfig = field(default_factory=FallbackConfig)

    def provider_configs(self) -> Dict[str, ProviderConfig]:
        """All provider configurations keyed by provider name."""
        return {name: getattr(self, name) for name in PROVIDER_NAMES}


@dataclass
class GenerationConfig:
    """Per-request generation policy"""

    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: float = 30.0


@dataclass
class QuestionBankConfig:
    """Question bank persistence"""

    enabled: bool = True
    path: str = "./questions/bank.json"


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: LogLevel = LogLevel.INFO
    json_format: bool = False


@dataclass
class AppConfig:
    """Main application configuration"""

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    llm: LLMConfig = field(default_factory=LLMConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    question_bank: QuestionBankConfig = field(default_factory=QuestionBankConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""

    pass


def _to_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class ConfigManager:
    """
    Centralized configuration manager with support for:
    - Environment-specific configurations
    - Configuration validation
    - Environment variable overrides
    """

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        """Singleton pattern implementation"""
        if not cls._instance:
            with cls._lock:
                if not cls._instance:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        # Avoid re-initialization in singleton
        if hasattr(self, "_initialized"):
            return

        self._initialized = True
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            project_root = Path(__file__).parent.parent.parent
            self.config_dir = project_root / "config"

        self.config: AppConfig = AppConfig()
        self.loaded_files = []
        self.logger = logging.getLogger(__name__)

        self._load_configuration()

    def _load_configuration(self):
        """Load configuration from multiple sources in priority order"""
        # 1. Defaults
        self.config = AppConfig()
        self.loaded_files = []

        # 2. Base configuration file
        self._load_from_file("config.yaml")
        self._load_from_file("config.json")

        # 3. Environment-specific configuration
        env = os.getenv("ENVIRONMENT", "development").lower()
        self._load_from_file(f"environments/config.{env}.yaml")
        self._load_from_file(f"environments/config.{env}.json")

        # 4. Environment variables (highest priority)
        self._load_from_environment()

        # 5. Validate
        self._validate_configuration()

    def _load_from_file(self, filename: str):
        """Load configuration from YAML/JSON file"""
        file_path = self.config_dir / filename
        if not file_path.exists():
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if filename.endswith(".yaml") or filename.endswith(".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            self.logger.warning(f"Failed to load configuration from {filename}: {e}")
            return

        if data:
            self._update_config_from_dict(data)
            self.loaded_files.append(str(file_path))
            self.logger.info(f"Loaded configuration from {filename}")

    def _load_from_environment(self):
        """Load configuration from environment variables"""
        env_mappings = {
            # Environment
            "ENVIRONMENT": ("environment", lambda x: Environment(x.lower())),
            "DEBUG": ("debug", _to_bool),
            # Providers
            "DEFAULT_PROVIDER": ("llm.default_provider", str),
            "QWEN_API_KEY": ("llm.qwen.api_key", str),
            "QWEN_API_BASE": ("llm.qwen.api_base", str),
            "DEEPSEEK_API_KEY": ("llm.deepseek.api_key", str),
            "DEEPSEEK_API_BASE": ("llm.deepseek.api_base", str),
            "API_KEY": ("llm.gemini.api_key", str),
            "GEMINI_API_KEY": ("llm.gemini.api_key", str),
            "OPENAI_API_KEY": ("llm.openai.api_key", str),
            "ANTHROPIC_API_KEY": ("llm.claude.api_key", str),
            "CLAUDE_API_KEY": ("llm.claude.api_key", str),
            # Fallback
            "FALLBACK_ENABLED": ("llm.fallback.enabled", _to_bool),
            "FALLBACK_RETRY_COUNT": ("llm.fallback.retry_count", int),
            "FALLBACK_RETRY_DELAY": ("llm.fallback.retry_delay", float),
            # Generation
            "GENERATION_TIMEOUT": ("generation.timeout", float),
            # Question bank
            "QUESTION_BANK_PATH": ("question_bank.path", str),
            # Logging
            "LOG_LEVEL": ("logging.level", lambda x: LogLevel(x.upper())),
            "LOG_JSON": ("logging.json_format", _to_bool),
        }

        # Later entries win, so GEMINI_API_KEY overrides API_KEY and
        # CLAUDE_API_KEY overrides ANTHROPIC_API_KEY.
        for env_var, (config_path, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is None or value == "":
                continue
            try:
                self._set_nested_attr(self.config, config_path, converter(value))
            except (ValueError, TypeError) as e:
                self.logger.warning(f"Invalid value for {env_var}: {value}, error: {e}")

    def _update_config_from_dict(self, data: Dict[str, Any], prefix: str = ""):
        """Update configuration from dictionary recursively"""
        for key, value in data.items():
            config_path = f"{prefix}.{key}" if prefix else key

            if isinstance(value, dict):
                self._update_config_from_dict(value, config_path)
                continue

            try:
                if config_path == "environment" and isinstance(value, str):
                    value = Environment(value.lower())
                elif config_path == "logging.level" and isinstance(value, str):
                    value = LogLevel(value.upper())

                self._set_nested_attr(self.config, config_path, value)
            except AttributeError:
                self.logger.warning(f"Unknown configuration key: {config_path}")
            except ValueError as e:
                self.logger.warning(f"Invalid value for {config_path}: {value}, error: {e}")

    def _set_nested_attr(self, obj: Any, path: str, value: Any):
        """Set nested attribute using dot notation"""
        parts = path.split(".")
        for part in parts[:-1]:
            obj = getattr(obj, part)
        if not hasattr(obj, parts[-1]):
            raise AttributeError(path)
        setattr(obj, parts[-1], value)

    def _validate_configuration(self):
        """Validate configuration settings"""
        errors = []
        llm = self.config.llm

        if llm.default_provider not in PROVIDER_NAMES:
            errors.append(
                f"Unknown default provider '{llm.default_provider}'. "
                f"Expected one of: {', '.join(PROVIDER_NAMES)}"
            )

        if llm.fallback.retry_count < 0:
            errors.append("Fallback retry_count must be >= 0")

        if llm.fallback.retry_delay < 0:
            errors.append("Fallback retry_delay must be >= 0")

        for name, provider_config in llm.provider_configs().items():
            if not isinstance(provider_config.priority, int):
                errors.append(f"Provider '{name}' priority must be an integer")
            if provider_config.timeout <= 0:
                errors.append(f"Provider '{name}' timeout must be positive")
            if provider_config.max_tokens <= 0:
                errors.append(f"Provider '{name}' max_tokens must be positive")

        if self.config.generation.timeout <= 0:
            errors.append("Generation timeout must be positive")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.info("Configuration validation passed")

    def reload_configuration(self):
        """Reload configuration from all sources"""
        self._load_configuration()
        self.logger.info("Configuration reloaded successfully")

    def get(self, path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        try:
            obj = self.config
            for part in path.split("."):
                obj = getattr(obj, part)
            return obj
        except AttributeError:
            return default

    def set(self, path: str, value: Any):
        """Set configuration value using dot notation"""
        self._set_nested_attr(self.config, path, value)
        self._validate_configuration()

    def to_dict(self, redact_secrets: bool = False) -> Dict[str, Any]:
        """Convert configuration to dictionary"""

        def _asdict_recursive(obj):
            result = {}
            for f in fields(obj):
                value = getattr(obj, f.name)
                if isinstance(value, Enum):
                    result[f.name] = value.value
                elif hasattr(value, "__dataclass_fields__"):
                    result[f.name] = _asdict_recursive(value)
                elif redact_secrets and f.name == "api_key" and value:
                    result[f.name] = "***"
                else:
                    result[f.name] = value
            return result

        return _asdict_recursive(self.config)

    def save_to_file(self, filename: str, format: str = "yaml"):
        """Save current configuration to file"""
        file_path = self.config_dir / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        config_dict = self.to_dict()

        with open(file_path, "w", encoding="utf-8") as f:
            if format.lower() == "yaml":
                yaml.dump(config_dict, f, default_flow_style=False, indent=2, allow_unicode=True)
            else:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)

        self.logger.info(f"Configuration saved to {filename}")


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration manager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def init_config(config_dir: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize the global configuration manager"""
    global _config_manager
    ConfigManager._instance = None
    _config_manager = ConfigManager(config_dir)
    return _config_manager
