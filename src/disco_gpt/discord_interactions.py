"""Routing of Discord interaction events to command handlers.

discord.py delivers every interaction to ``Client.on_interaction``.  The
dispatcher looks the command name up in a plain name -> handler table; an
interaction nobody handles is ignored.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, Mapping, Optional

import discord

from .logging_utils import get_logger

log = get_logger("discord_interactions")

Handler = Callable[[discord.Interaction], Awaitable[None]]


class InteractionDispatcher:
    """Name -> handler lookup for application-command interactions."""

    def __init__(self, handlers: Optional[Mapping[str, Handler]] = None):
        self.handlers: Dict[str, Handler] = dict(handlers or {})

    def register(self, name: str, handler: Handler) -> None:
        self.handlers[name] = handler

    def handler_for(self, name: str) -> Optional[Handler]:
        return self.handlers.get(name)

    async def dispatch(self, interaction: discord.Interaction) -> bool:
        """Run the handler for ``interaction``.

        Returns
        -------
        bool
            True if a handler was found and invoked, False otherwise.
        """
        if interaction.type != discord.InteractionType.application_command:
            return False

        command_name = (interaction.data or {}).get("name", "")
        handler = self.handler_for(command_name)
        if handler is None:
            log.debug("interaction_unhandled command=%s", command_name)
            return False

        log.info(
            "interaction_received command=%s id=%s user=%s",
            command_name,
            interaction.id,
            getattr(interaction.user, "id", None),
        )
        try:
            await handler(interaction)
        except Exception as e:
            log.error(
                "interaction_failed command=%s id=%s err=%s",
                command_name,
                interaction.id,
                e,
                exc_info=True,
            )
        return True

    async def drain(self) -> None:
        """Wait for background work of every handler that keeps some."""
        for handler in self.handlers.values():
            drain = getattr(handler, "drain", None)
            if drain is not None:
                await drain()
