"""Tests for routing interactions to command handlers."""

from unittest.mock import AsyncMock

import discord
import pytest

from disco_gpt.commands.handlers import GPTCommandHandler
from disco_gpt.discord_interactions import InteractionDispatcher


class TestInteractionDispatcher:
    @pytest.mark.asyncio
    async def test_routes_by_command_name(self, make_interaction):
        handler = AsyncMock()
        dispatcher = InteractionDispatcher({"gpt": handler})
        interaction = make_interaction()

        assert await dispatcher.dispatch(interaction) is True
        handler.assert_awaited_once_with(interaction)

    @pytest.mark.asyncio
    async def test_unknown_command_is_ignored(self, make_interaction):
        handler = AsyncMock()
        dispatcher = InteractionDispatcher({"gpt": handler})

        assert await dispatcher.dispatch(make_interaction(name="chart")) is False
        handler.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_command_interaction_is_ignored(self, make_interaction):
        handler = AsyncMock()
        dispatcher = InteractionDispatcher({"gpt": handler})
        interaction = make_interaction(interaction_type=discord.InteractionType.component)

        assert await dispatcher.dispatch(interaction) is False
        handler.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_handler_error_does_not_escape(self, make_interaction):
        dispatcher = InteractionDispatcher()
        dispatcher.register("gpt", AsyncMock(side_effect=RuntimeError("expired")))

        assert await dispatcher.dispatch(make_interaction()) is True

    def test_register_and_lookup(self):
        handler = AsyncMock()
        dispatcher = InteractionDispatcher()
        dispatcher.register("gpt", handler)

        assert dispatcher.handler_for("gpt") is handler
        assert dispatcher.handler_for("nope") is None

    @pytest.mark.asyncio
    async def test_drain_waits_for_handler_tasks(self, make_interaction, stub_completion):
        async def plain_handler(interaction):
            return None

        gpt = GPTCommandHandler(stub_completion("4", delay=0.05))
        dispatcher = InteractionDispatcher({"gpt": gpt, "ping": plain_handler})
        interaction = make_interaction()
        await dispatcher.dispatch(interaction)
        assert gpt.pending == 1

        await dispatcher.drain()

        assert gpt.pending == 0
        interaction.edit_original_response.assert_awaited_once()
