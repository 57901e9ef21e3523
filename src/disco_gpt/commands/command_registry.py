"""
Discord Slash Command Registry
===============================

Defines the slash commands Disco GPT exposes and keeps Discord in sync with
them: every definition is created when the bot starts and, if configured,
deleted again when it stops.

Option Types:
- 1: SUB_COMMAND
- 2: SUB_COMMAND_GROUP
- 3: STRING
- 4: INTEGER
- 5: BOOLEAN
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..discord_transport import DiscordAPIError, DiscordRestTransport
from ..logging_utils import get_logger

log = get_logger("command_registry")

OPTION_TYPE_STRING = 3

# All user-facing slash commands
COMMANDS: List[Dict[str, Any]] = [
    {
        "name": "gpt",
        "description": "Ask GPT a question",
        "options": [
            {
                "name": "prompt",
                "type": OPTION_TYPE_STRING,
                "description": "Prompt to send to GPT-3.5",
                "required": True,
            },
        ],
    },
]


class CommandRegistrationError(RuntimeError):
    """A command could not be created or deleted on Discord."""


@dataclass(frozen=True)
class RegisteredCommand:
    """Handle Discord returned for a created command."""

    id: str
    name: str
    guild_id: str = ""


def get_command_names() -> List[str]:
    """Names of all declared commands."""
    return [cmd["name"] for cmd in COMMANDS]


class CommandRegistry:
    """Creates the declared commands on Discord and removes them again.

    Parameters
    ----------
    transport : DiscordRestTransport
        Authenticated REST transport.
    application_id : str
        Application (bot user) id the commands belong to.
    guild_id : str
        Guild to scope the commands to; empty registers them globally.
    commands : Sequence[Dict[str, Any]]
        Definitions to register, defaults to :data:`COMMANDS`.
    """

    def __init__(
        self,
        transport: DiscordRestTransport,
        application_id: str,
        guild_id: str = "",
        commands: Sequence[Dict[str, Any]] = COMMANDS,
    ):
        self.transport = transport
        self.application_id = str(application_id)
        self.guild_id = guild_id or ""
        self.commands = list(commands)
        self._registered: List[RegisteredCommand] = []

    @property
    def registered(self) -> List[RegisteredCommand]:
        return list(self._registered)

    @property
    def scope(self) -> str:
        return f"guild:{self.guild_id}" if self.guild_id else "global"

    def register_all(self) -> List[RegisteredCommand]:
        """Create every declared command; the first failure is fatal."""
        log.info("adding_commands count=%d scope=%s", len(self.commands), self.scope)
        for command in self.commands:
            name = command["name"]
            try:
                created = self.transport.create_command(
                    self.application_id, command, guild_id=self.guild_id
                )
            except DiscordAPIError as e:
                log.error("command_create_failed name=%s err=%s", name, e)
                raise CommandRegistrationError(
                    f"Cannot create '{name}' command: {e}"
                ) from e

            command_id = str(created.get("id") or "")
            if not command_id:
                raise CommandRegistrationError(
                    f"Cannot create '{name}' command: no id in response"
                )
            handle = RegisteredCommand(
                id=command_id, name=created.get("name", name), guild_id=self.guild_id
            )
            self._registered.append(handle)
            log.info("command_created name=%s id=%s", handle.name, handle.id)
        return self.registered

    def remove_all(self) -> int:
        """Delete every recorded command and return how many were removed.

        Stops at the first failure and raises :class:`CommandRegistrationError`;
        commands not yet deleted stay recorded.
        """
        log.info("removing_commands count=%d", len(self._registered))
        removed = 0
        while self._registered:
            handle = self._registered[0]
            try:
                self.transport.delete_command(
                    self.application_id, handle.id, guild_id=handle.guild_id
                )
            except DiscordAPIError as e:
                log.error("command_delete_failed name=%s err=%s", handle.name, e)
                raise CommandRegistrationError(
                    f"Cannot delete '{handle.name}' command: {e}"
                ) from e
            self._registered.pop(0)
            removed += 1
            log.info("command_deleted name=%s id=%s", handle.name, handle.id)
        return removed

