"""Tests for wiring and exit codes of the runner and the CLI."""

from unittest.mock import MagicMock, patch

import discord
import pytest

from disco_gpt import cli, runner
from disco_gpt.bot import DiscoGPTClient
from disco_gpt.commands.command_registry import CommandRegistrationError, CommandRegistry
from disco_gpt.commands.handlers import GPTCommandHandler
from disco_gpt.config import Settings
from disco_gpt.discord_interactions import InteractionDispatcher
from disco_gpt.discord_transport import DiscordAPIError, DiscordRestTransport


@pytest.fixture
def settings(tmp_path):
    return Settings(
        discord_guild_id="42",
        discord_bot_token="bot-token",
        remove_commands=False,
        openai_api_key="sk-test",
        openai_model="gpt-4o-mini",
        completion_timeout_secs=30,
        data_dir=tmp_path,
    )


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch.object(runner, "setup_logging"):
        yield


class TestBuildBot:
    def test_wires_gpt_handler(self, settings):
        bot = runner.build_bot(settings)

        assert isinstance(bot, DiscoGPTClient)
        assert bot.guild_id == "42"
        assert bot.remove_commands is False
        handler = bot.dispatcher.handler_for("gpt")
        assert isinstance(handler, GPTCommandHandler)
        assert handler.model == "gpt-4o-mini"
        assert handler.completion_client.timeout == 30.0
        assert bot.drain_timeout == 30.0 + runner.DRAIN_GRACE_SECS

    def test_no_completion_deadline_means_unbounded_drain(self, settings):
        settings.completion_timeout_secs = 0
        assert runner.build_bot(settings).drain_timeout is None


class TestRunnerMain:
    def test_invalid_config_exits_nonzero(self, tmp_path):
        with patch.object(runner, "build_bot") as build:
            assert runner.main(Settings(data_dir=tmp_path)) == 1
        build.assert_not_called()

    def test_clean_shutdown_returns_zero(self, settings):
        bot = MagicMock()
        bot.teardown_error = None
        with patch.object(runner, "build_bot", return_value=bot):
            assert runner.main(settings) == 0
        bot.run.assert_called_once_with("bot-token", log_handler=None)

    def test_login_failure_exits_nonzero(self, settings):
        bot = MagicMock()
        bot.run.side_effect = discord.LoginFailure("Improper token has been passed.")
        with patch.object(runner, "build_bot", return_value=bot):
            assert runner.main(settings) == 1

    def test_registration_failure_exits_nonzero(self, settings):
        bot = MagicMock()
        bot.run.side_effect = CommandRegistrationError("Cannot create 'gpt' command")
        with patch.object(runner, "build_bot", return_value=bot):
            assert runner.main(settings) == 1

    def test_failed_removal_at_shutdown_exits_nonzero(self, settings):
        bot = MagicMock()
        bot.teardown_error = CommandRegistrationError("Cannot delete 'gpt' command")
        with patch.object(runner, "build_bot", return_value=bot):
            assert runner.main(settings) == 1

    def test_bad_log_level_is_reported_not_raised(self, tmp_path):
        s = Settings(
            discord_bot_token="t", openai_api_key="k", log_level="LOUD", data_dir=tmp_path
        )
        with patch.object(runner, "build_bot") as build:
            assert runner.main(s) == 1
        build.assert_not_called()


class TestCli:
    @pytest.fixture(autouse=True)
    def _no_dotenv(self, monkeypatch):
        monkeypatch.setattr(cli, "load_dotenv", lambda *a, **k: False)

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "env-token")
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")
        monkeypatch.setenv("DISCORD_GUILD_ID", "1")

        s = cli.load_settings(["--guild", "2", "--apikey", "flag-key", "--no-rmcmd"])

        assert s.discord_guild_id == "2"
        assert s.discord_bot_token == "env-token"
        assert s.openai_api_key == "flag-key"
        assert s.remove_commands is False

    def test_defaults(self):
        s = cli.load_settings([])

        assert s.discord_guild_id == ""
        assert s.remove_commands is True
        assert s.openai_model == "gpt-3.5-turbo"
        assert s.completion_timeout_secs == 60.0

    def test_main_hands_settings_to_runner(self):
        with patch.object(runner, "main", return_value=0) as run_main:
            assert cli.main(["--token", "t", "--apikey", "k", "--timeout", "5"]) == 0

        passed = run_main.call_args.args[0]
        assert passed.discord_bot_token == "t"
        assert passed.completion_timeout_secs == 5.0


class TestRunnerShutdownPath:
    """Drive the real ``Client.run`` with a ``start`` that ends right after one /gpt."""

    @pytest.fixture
    def transport(self):
        t = MagicMock(spec=DiscordRestTransport)
        t.create_command.return_value = {"id": "cmd-1", "name": "gpt"}
        return t

    @staticmethod
    def _start_serving(interaction):
        async def start(self, token, *, reconnect=True):
            self.registry = CommandRegistry(self.transport, "999")
            self.registry.register_all()
            await self.on_interaction(interaction)

        return start

    def _run(self, settings, transport, interaction, stub_completion):
        gpt = GPTCommandHandler(stub_completion("4", delay=0.1))
        bot = DiscoGPTClient(
            InteractionDispatcher({"gpt": gpt}),
            transport=transport,
            remove_commands=True,
            drain_timeout=5,
        )
        with patch.object(runner, "build_bot", return_value=bot), patch.object(
            DiscoGPTClient, "start", self._start_serving(interaction)
        ):
            return runner.main(settings)

    def test_pending_answer_edited_and_command_removed(
        self, settings, transport, make_interaction, stub_completion
    ):
        interaction = make_interaction()

        assert self._run(settings, transport, interaction, stub_completion) == 0

        interaction.edit_original_response.assert_awaited_once()
        transport.delete_command.assert_called_once_with("999", "cmd-1", guild_id="")
        transport.close.assert_called_once()

    def test_failed_removal_exits_nonzero(
        self, settings, transport, make_interaction, stub_completion
    ):
        transport.delete_command.side_effect = DiscordAPIError("boom", status=500)
        interaction = make_interaction()

        assert self._run(settings, transport, interaction, stub_completion) == 1

        interaction.edit_original_response.assert_awaited_once()
