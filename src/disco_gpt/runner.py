# -*- coding: utf-8 -*-
"""Disco GPT runner."""

from __future__ import annotations

from typing import Optional

import discord

from .bot import DiscoGPTClient
from .commands.command_registry import CommandRegistrationError, get_command_names
from .commands.handlers import GPTCommandHandler
from .completion_client import CompletionClient
from .config import Settings
from .discord_interactions import InteractionDispatcher
from .discord_transport import DiscordRestTransport
from .logging_utils import get_logger, setup_logging

log = get_logger("runner")

# Extra time granted at shutdown, beyond the completion deadline, for the
# final edit of answers still in flight.
DRAIN_GRACE_SECS = 5.0


def build_bot(settings: Settings) -> DiscoGPTClient:
    """Wire every component from ``settings`` and return the gateway client."""
    completion = CompletionClient(
        settings.openai_api_key, timeout=settings.completion_timeout
    )
    gpt = GPTCommandHandler(completion, model=settings.openai_model)
    dispatcher = InteractionDispatcher({gpt.name: gpt})

    for name in get_command_names():
        if dispatcher.handler_for(name) is None:
            log.warning("command_without_handler name=%s", name)

    drain_timeout = None
    if settings.completion_timeout is not None:
        drain_timeout = settings.completion_timeout + DRAIN_GRACE_SECS

    transport = DiscordRestTransport(
        settings.discord_bot_token, api_base=settings.discord_api_base
    )
    return DiscoGPTClient(
        dispatcher,
        transport=transport,
        guild_id=settings.discord_guild_id,
        remove_commands=settings.remove_commands,
        drain_timeout=drain_timeout,
    )


def main(settings: Optional[Settings] = None) -> int:
    """
    Run the bot until interrupted and return the process exit status.

    0 after a clean Ctrl+C shutdown; 1 for bad configuration, rejected
    credentials, or a command that could not be created or removed.
    """
    settings = settings or Settings()
    setup_logging(settings=settings)

    problems = settings.validate()
    if problems:
        for problem in problems:
            log.error("invalid_config problem=%s", problem)
        return 1

    log.info(
        "starting model=%s scope=%s remove_commands=%s timeout=%s",
        settings.openai_model,
        settings.discord_guild_id or "global",
        settings.remove_commands,
        settings.completion_timeout,
    )

    bot = build_bot(settings)
    try:
        # Ctrl+C is handled inside run(): it closes the client and returns.
        bot.run(settings.discord_bot_token, log_handler=None)
    except discord.LoginFailure as e:
        log.critical("Invalid bot parameters: %s", e)
        return 1
    except CommandRegistrationError as e:
        log.critical("command_sync_failed err=%s", e)
        return 1

    if bot.teardown_error is not None:
        log.critical("command_sync_failed err=%s", bot.teardown_error)
        return 1

    log.info("Gracefully shutting down.")
    return 0
