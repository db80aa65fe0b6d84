#!/usr/bin/env python3
"""
Sentence Skeleton CLI - generate and analyse sentences from the command line.

Usage:
    sentence-skeleton generate [--level=LEVEL] [--provider=NAME] [--no-fallback] [--fallback=A,B] [--previous=SENTENCE]
    sentence-skeleton analyze --sentence=SENTENCE [--level=LEVEL] [--provider=NAME] [--no-fallback] [--fallback=A,B]
    sentence-skeleton status [--format=FORMAT]
    sentence-skeleton bank-size [--level=LEVEL]
    sentence-skeleton config show [--section=SECTION]
    sentence-skeleton version
    sentence-skeleton --help

Commands:
    generate            Generate and analyse a sentence for a difficulty level
    analyze             Analyse a sentence you supply
    status              Show provider availability
    bank-size           Count saved questions
    config              Show configuration (API keys redacted)
    version             Show version information

Options:
    -h --help           Show this help message
    --level=LEVEL       Basic, Intermediate or Advanced [default: Basic]
    --provider=NAME     Provider to try first (qwen, deepseek, gemini, openai, claude)
    --no-fallback       Call only the first provider, once
    --fallback=A,B      Restrict fallback to these providers
    --previous=SENT     Sentence the model should not repeat
    --sentence=SENT     Sentence to analyse
    --format=FORMAT     Output format (text, json) [default: text]
    --section=SECTION   Configuration section
    --config=DIR        Configuration directory
"""

import asyncio
import json
import logging
import os
import sys
import traceback
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from skeleton_core import __version__
from skeleton_core.analysis.sentence_analysis_service import SentenceAnalysisService
from skeleton_core.config.config_manager import ConfigManager, init_config
from skeleton_core.llm.factory import create_manager
from skeleton_core.llm.interfaces.llm_provider_interface import LLMError
from skeleton_core.llm.manager import LLMManager
from skeleton_core.monitoring.structured_logger import configure_logging
from skeleton_core.storage.backends.json_file.json_file_question_bank import JsonFileQuestionBank

logger = logging.getLogger(__name__)


class SentenceSkeletonCLI:
    """Sentence Skeleton command line interface."""

    def __init__(self, config_dir: Optional[str] = None):
        self.config_dir = config_dir
        self.config_manager: Optional[ConfigManager] = None
        self.manager: Optional[LLMManager] = None
        self.question_bank: Optional[JsonFileQuestionBank] = None

    def initialize(self):
        """Load configuration and logging; providers are built lazily."""
        self.config_manager = init_config(self.config_dir)
        logging_config = self.config_manager.config.logging
        configure_logging(logging_config.level.value, logging_config.json_format)

    def _get_manager(self) -> LLMManager:
        if self.manager is None:
            self.manager = create_manager(self.config_manager.config)
        return self.manager

    def _get_question_bank(self) -> Optional[JsonFileQuestionBank]:
        bank_config = self.config_manager.config.question_bank
        if not bank_config.enabled:
            return None
        if self.question_bank is None:
            self.question_bank = JsonFileQuestionBank(bank_config.path)
        return self.question_bank

    def _build_service(self) -> SentenceAnalysisService:
        return SentenceAnalysisService(
            self._get_manager(),
            question_bank=self._get_question_bank(),
            generation_config=self.config_manager.config.generation,
        )

    async def close(self):
        if self.manager is None:
            return
        for provider in self.manager.providers.values():
            await provider.close()

    async def generate_command(self, level: str, provider: Optional[str] = None,
                               enable_fallback: bool = True, fallback: Optional[str] = None,
                               previous: Optional[str] = None):
        """Generate a new sentence analysis."""
        print(f"🧠 Generating {level} sentence...", file=sys.stderr)
        service = self._build_service()
        artifact = await service.generate_sentence_analysis(
            level,
            preferred_provider=provider,
            enable_fallback=enable_fallback,
            fallback_providers=_split_list(fallback),
            previous_sentence=previous,
        )
        print(json.dumps(artifact.to_dict(), ensure_ascii=False, indent=2))

    async def analyze_command(self, sentence: str, level: str, provider: Optional[str] = None,
                              enable_fallback: bool = True, fallback: Optional[str] = None):
        """Analyse a user-supplied sentence."""
        print(f"🔍 Analysing: {sentence}", file=sys.stderr)
        service = self._build_service()
        artifact = await service.analyze_custom_sentence(
            sentence,
            level,
            preferred_provider=provider,
            enable_fallback=enable_fallback,
            fallback_providers=_split_list(fallback),
        )
        print(json.dumps(artifact.to_dict(), ensure_ascii=False, indent=2))

    def status_command(self, format: str = "text"):
        """Show provider status."""
        health = self._get_manager().health_check()

        if format == "json":
            print(json.dumps(health, ensure_ascii=False, indent=2, default=str))
            return

        print("📊 Provider Status")
        print("=" * 50)
        print(f"Overall: {health['overall_status']}")
        if health["default_provider"]:
            print(f"Default provider: {health['default_provider']}")
        for status in health["providers"]:
            icon = "✅" if status["available"] else "❌"
            print(f"{icon} {status['name']}: {status['model']}")
            if status["last_error"]:
                print(f"    Last error: {status['last_error']}")
        fallback = health["fallback"]
        print(f"Retries per provider: {fallback['retry_count']} (delay {fallback['retry_delay']}s)")

    def bank_size_command(self, level: Optional[str] = None):
        bank = self._get_question_bank()
        if bank is None:
            print("⚠️  Question bank is disabled")
            return
        label = level or "all levels"
        print(f"📚 {bank.size(level)} questions ({label})")

    def config_command(self, action: str, section: Optional[str] = None):
        """Show configuration."""
        if action != "show":
            print(f"❌ Unknown config action: {action}")
            sys.exit(1)

        config = self.config_manager.to_dict(redact_secrets=True)
        if section:
            if section not in config:
                print(f"❌ Unknown configuration section: {section}")
                sys.exit(1)
            config = config[section]
            print(f"📋 Configuration - {section}")
        else:
            print("📋 Configuration")

        print("=" * 50)
        print(yaml.dump(config, indent=2, allow_unicode=True, default_flow_style=False))

    def version_command(self):
        print(f"Sentence Skeleton v{__version__}")


def _split_list(value: Any) -> Optional[list]:
    if not value or value is True:
        return None
    return [item.strip() for item in str(value).split(",") if item.strip()]


def parse_args(argv=None) -> Tuple[str, Dict[str, Any]]:
    """Parse command line arguments manually."""
    argv = sys.argv if argv is None else argv

    if len(argv) < 2:
        print(__doc__)
        sys.exit(1)

    command = argv[1]
    args: Dict[str, Any] = {}

    i = 2
    while i < len(argv):
        arg = argv[i]

        if arg.startswith('--'):
            if '=' in arg:
                key, value = arg[2:].split('=', 1)
                args[key] = value
            else:
                key = arg[2:]
                if i + 1 < len(argv) and not argv[i + 1].startswith('--'):
                    args[key] = argv[i + 1]
                    i += 1
                else:
                    args[key] = True
        else:
            args.setdefault('positional', []).append(arg)

        i += 1

    return command, args


async def async_main(argv=None):
    """Main CLI entry point."""
    command, args = parse_args(argv)

    if command in ["--help", "-h", "help"]:
        print(__doc__)
        return
    if command == "version":
        SentenceSkeletonCLI().version_command()
        return

    load_dotenv()
    cli = SentenceSkeletonCLI(args.get('config'))

    try:
        cli.initialize()

        if command == "generate":
            await cli.generate_command(
                level=args.get('level', 'Basic'),
                provider=args.get('provider'),
                enable_fallback=not args.get('no-fallback', False),
                fallback=args.get('fallback'),
                previous=args.get('previous'),
            )

        elif command == "analyze":
            if 'sentence' not in args or args['sentence'] is True:
                print("❌ Analyze requires --sentence argument")
                sys.exit(1)
            await cli.analyze_command(
                sentence=args['sentence'],
                level=args.get('level', 'Advanced'),
                provider=args.get('provider'),
                enable_fallback=not args.get('no-fallback', False),
                fallback=args.get('fallback'),
            )

        elif command == "status":
            cli.status_command(format=args.get('format', 'text'))

        elif command == "bank-size":
            cli.bank_size_command(level=args.get('level'))

        elif command == "config":
            positional = args.get('positional') or ['show']
            cli.config_command(positional[0], section=args.get('section'))

        else:
            print(f"❌ Unknown command: {command}")
            print("Run 'sentence-skeleton --help' for usage information")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\n🛑 Operation cancelled")
        sys.exit(1)
    except (LLMError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Unexpected error: {e}")
        if os.getenv('DEBUG'):
            traceback.print_exc()
        sys.exit(1)
    finally:
        await cli.close()


def main():
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
