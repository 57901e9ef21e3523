"""
Gateway client for Disco GPT.

Owns the connection lifecycle: once logged in it creates the slash commands,
routes interactions to the dispatcher while connected, and on shutdown
lets pending answers finish, then removes the commands again (when
configured) before closing the connection.
"""

import asyncio
from typing import Optional

import discord

from .commands.command_registry import CommandRegistrationError, CommandRegistry
from .discord_interactions import InteractionDispatcher
from .discord_transport import DiscordRestTransport
from .logging_utils import get_logger

log = get_logger("bot")


class DiscoGPTClient(discord.Client):
    """Discord client serving the registered slash commands."""

    def __init__(
        self,
        dispatcher: InteractionDispatcher,
        *,
        transport: DiscordRestTransport,
        guild_id: str = "",
        remove_commands: bool = True,
        drain_timeout: Optional[float] = None,
        **kwargs,
    ):
        # Slash commands need no privileged intents
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        super().__init__(intents=intents, **kwargs)

        self.dispatcher = dispatcher
        self.transport = transport
        self.guild_id = guild_id
        self.remove_commands = remove_commands
        self.registry: Optional[CommandRegistry] = None
        self.drain_timeout = drain_timeout
        self.teardown_error: Optional[CommandRegistrationError] = None
        self._torn_down = False

    async def setup_hook(self) -> None:
        """Runs after login, before the gateway connects."""
        self.registry = CommandRegistry(
            self.transport, str(self.application_id), guild_id=self.guild_id
        )
        await asyncio.to_thread(self.registry.register_all)
        log.info("Press Ctrl+C to exit")

    async def on_ready(self) -> None:
        log.info("logged_in user=%s id=%s", self.user, getattr(self.user, "id", None))

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        await self.dispatcher.dispatch(interaction)

    async def teardown_commands(self) -> int:
        """Remove registered commands once, if configured. Returns the count."""
        if self._torn_down:
            return 0
        self._torn_down = True
        if not self.remove_commands or self.registry is None:
            return 0
        return await asyncio.to_thread(self.registry.remove_all)

    async def finish_pending(self) -> None:
        """Let in-flight command work finish, up to ``drain_timeout`` seconds."""
        try:
            await asyncio.wait_for(self.dispatcher.drain(), timeout=self.drain_timeout)
        except asyncio.TimeoutError:
            log.warning("drain_timeout after=%.1fs", self.drain_timeout)

    async def close(self) -> None:
        # Removal failures are recorded, not raised; runner.main checks
        # teardown_error once run() returns.
        try:
            await self.finish_pending()
            await self.teardown_commands()
        except CommandRegistrationError as e:
            log.error("command_teardown_failed err=%s", e)
            self.teardown_error = e
        finally:
            self.transport.close()
            await super().close()
