"""
Unit tests for the command line interface.
"""

import json

import pytest

from skeleton_core import __version__
from skeleton_core.cli import SentenceSkeletonCLI, _split_list, async_main, parse_args
from skeleton_core.config.config_manager import ConfigManager
from skeleton_core.llm.manager import LLMManager


@pytest.fixture
def cli(tmp_path, clean_env, fresh_config_manager):
    clean_env.setenv("QUESTION_BANK_PATH", str(tmp_path / "bank.json"))
    cli = SentenceSkeletonCLI(str(tmp_path))
    cli.config_manager = ConfigManager(tmp_path)
    return cli


class TestParseArgs:

    def test_equals_and_space_forms(self):
        command, args = parse_args(["prog", "generate", "--level=Advanced", "--provider", "gemini", "--no-fallback"])

        assert command == "generate"
        assert args == {"level": "Advanced", "provider": "gemini", "no-fallback": True}

    def test_positional(self):
        command, args = parse_args(["prog", "config", "show", "--section=llm"])

        assert command == "config"
        assert args["positional"] == ["show"]
        assert args["section"] == "llm"

    def test_no_command_exits(self, capsys):
        with pytest.raises(SystemExit):
            parse_args(["prog"])
        assert "Usage" in capsys.readouterr().out

    def test_split_list(self):
        assert _split_list("qwen, gemini,") == ["qwen", "gemini"]
        assert _split_list(None) is None
        assert _split_list(True) is None


class TestCommands:

    @pytest.mark.asyncio
    async def test_version(self, capsys):
        await async_main(["prog", "version"])
        assert __version__ in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_unknown_command(self, tmp_path, clean_env, fresh_config_manager, capsys, monkeypatch):
        monkeypatch.setattr("skeleton_core.cli.load_dotenv", lambda: None)
        monkeypatch.setattr("skeleton_core.cli.configure_logging", lambda *args: None)

        with pytest.raises(SystemExit):
            await async_main(["prog", "fly", f"--config={tmp_path}"])
        assert "Unknown command: fly" in capsys.readouterr().out

    def test_status_json(self, cli, make_provider, capsys):
        cli.manager = LLMManager()
        cli.manager.register_provider(make_provider("qwen"))
        cli.manager.register_provider(make_provider("gemini", api_key=None))

        cli.status_command(format="json")

        health = json.loads(capsys.readouterr().out)
        assert health["overall_status"] == "healthy"
        assert health["available_providers"] == ["qwen"]

    def test_status_text(self, cli, make_provider, capsys):
        cli.manager = LLMManager()
        cli.manager.register_provider(make_provider("qwen"))

        cli.status_command()

        out = capsys.readouterr().out
        assert "qwen" in out
        assert "Overall: healthy" in out

    def test_config_show_redacts(self, cli, clean_env, capsys):
        cli.config_manager.config.llm.qwen.api_key = "secret-key"

        cli.config_command("show", section="llm")

        out = capsys.readouterr().out
        assert "secret-key" not in out
        assert "***" in out

    def test_config_unknown_section(self, cli):
        with pytest.raises(SystemExit):
            cli.config_command("show", section="database")

    def test_bank_size(self, cli, capsys):
        cli.bank_size_command()
        assert "0 questions" in capsys.readouterr().out

    def test_bank_disabled(self, cli, capsys):
        cli.config_manager.config.question_bank.enabled = False
        cli.bank_size_command()
        assert "disabled" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_generate_prints_fallback_artifact(self, cli, make_provider, capsys):
        cli.manager = LLMManager()
        cli.manager.register_provider(make_provider("qwen", outcomes=[Exception("network down")]))
        cli.manager.fallback_strategy.retry_count = 0

        await cli.generate_command("Basic")

        artifact = json.loads(capsys.readouterr().out)
        assert artifact["originalSentence"] == "My grandmother bakes delicious cookies."
        assert artifact["level"] == "Basic"

    @pytest.mark.asyncio
    async def test_analyze_restricts_fallback(self, cli, make_provider, sample_json, capsys):
        cli.manager = LLMManager()
        cli.manager.fallback_strategy.retry_count = 0
        qwen = make_provider("qwen", priority=1, outcomes=[Exception("network down")])
        deepseek = make_provider("deepseek", priority=2, outcomes=[sample_json])
        gemini = make_provider("gemini", priority=3, outcomes=[sample_json])
        for provider in (qwen, deepseek, gemini):
            cli.manager.register_provider(provider)

        await cli.analyze_command("He put the book on the table.", "Intermediate",
                                  provider="qwen", fallback="gemini")

        artifact = json.loads(capsys.readouterr().out)
        assert artifact["originalSentence"] == "He put the book on the table."
        assert qwen.calls == 1
        assert deepseek.calls == 0
        assert gemini.calls == 1

    def test_status_text_shows_default_provider(self, cli, make_provider, capsys):
        cli.manager = LLMManager(default_provider="qwen")
        cli.manager.register_provider(make_provider("qwen"))

        cli.status_command()

        assert "Default provider: qwen" in capsys.readouterr().out
