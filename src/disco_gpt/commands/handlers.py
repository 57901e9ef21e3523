"""
Discord Slash Command Handlers
===============================

Implements the handler behind ``/gpt``.

The platform gives an interaction only a few seconds for its first response,
while a completion can take much longer.  The handler therefore answers with
a placeholder right away and does the slow part in its own task:

1. acknowledge with ``Enviando prompt...``
2. ask the completion API
3. edit the acknowledgment with the question and an embed holding the answer
4. if that edit fails, post one ephemeral follow-up
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Set

import discord

from ..completion_client import (
    DEFAULT_MODEL,
    CompletionClient,
    CompletionError,
    CompletionTimeout,
)
from ..logging_utils import get_logger
from .embeds import TIMEOUT_NOTICE, create_acknowledgment, create_answer_edit
from .errors import FLAG_EPHEMERAL, generic_error, missing_parameter_error

log = get_logger("command_handlers")


def get_option_value(interaction_data: Optional[Dict[str, Any]], name: str) -> Any:
    """Value of the top-level option ``name``, or ``None`` when not supplied."""
    for opt in (interaction_data or {}).get("options", []) or []:
        if opt.get("name") == name:
            return opt.get("value")
    return None


async def send_response(
    interaction: discord.Interaction, payload: Dict[str, Any]
) -> None:
    """Send a channel-message payload as the interaction's initial response."""
    data = payload.get("data", {})
    await interaction.response.send_message(
        content=data.get("content"),
        ephemeral=bool(data.get("flags", 0) & FLAG_EPHEMERAL),
    )


class GPTCommandHandler:
    """Handler for ``/gpt prompt:<text>``.

    Each invocation gets its own completion task; the only state shared
    between invocations is the set keeping those tasks referenced until
    they finish.
    """

    name = "gpt"

    def __init__(self, completion_client: CompletionClient, model: str = DEFAULT_MODEL):
        self.completion_client = completion_client
        self.model = model
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def __call__(self, interaction: discord.Interaction) -> None:
        prompt = get_option_value(interaction.data, "prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            log.warning("gpt_missing_prompt interaction=%s", interaction.id)
            await send_response(interaction, missing_parameter_error("prompt"))
            return

        await send_response(interaction, create_acknowledgment())

        task = asyncio.create_task(
            self._complete_and_edit(interaction, prompt),
            name=f"gpt-{interaction.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for every in-flight completion task."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _complete_and_edit(
        self, interaction: discord.Interaction, prompt: str
    ) -> None:
        answer: Optional[str] = None
        try:
            answer = await self.completion_client.complete(prompt, self.model)
        except CompletionTimeout:
            answer = TIMEOUT_NOTICE
        except CompletionError as e:
            log.warning("gpt_completion_failed interaction=%s err=%s", interaction.id, e)
        except Exception as e:
            log.error(
                "gpt_completion_crashed interaction=%s err=%s",
                interaction.id,
                e,
                exc_info=True,
            )

        edit = create_answer_edit(prompt, answer)
        try:
            await interaction.edit_original_response(
                content=edit["content"],
                embeds=[discord.Embed.from_dict(e) for e in edit["embeds"]],
            )
        except Exception as e:
            log.warning("gpt_edit_failed interaction=%s err=%s", interaction.id, e)
            await self._send_failure_notice(interaction)
            return

        log.info(
            "gpt_answered interaction=%s chars=%d", interaction.id, len(answer or "")
        )

    async def _send_failure_notice(self, interaction: discord.Interaction) -> None:
        data = generic_error()
        try:
            await interaction.followup.send(
                data["content"], ephemeral=bool(data["flags"] & FLAG_EPHEMERAL)
            )
        except Exception as e:
            log.debug("gpt_followup_failed interaction=%s err=%s", interaction.id, e)
