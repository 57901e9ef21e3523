"""Shared fixtures: fake Discord interactions and a stub completion client."""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Tuple, Union
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

_ENV_KEYS = (
    "DISCORD_GUILD_ID",
    "DISCORD_BOT_TOKEN",
    "REMOVE_COMMANDS",
    "DISCORD_API_BASE",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "COMPLETION_TIMEOUT_SECS",
    "LOG_LEVEL",
    "LOG_PLAIN",
    "DATA_DIR",
    "DOTENV_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep a developer's real .env / shell exports out of the tests."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def restore_root_logging():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def build_interaction(
    prompt: Optional[str] = "What is 2+2?",
    *,
    name: str = "gpt",
    interaction_id: int = 1001,
    interaction_type: discord.InteractionType = discord.InteractionType.application_command,
) -> MagicMock:
    """MagicMock standing in for ``discord.Interaction``."""
    options = []
    if prompt is not None:
        options.append({"name": "prompt", "type": 3, "value": prompt})

    interaction = MagicMock(name=f"interaction-{interaction_id}")
    interaction.id = interaction_id
    interaction.type = interaction_type
    interaction.data = {"id": "555", "name": name, "type": 1, "options": options}
    interaction.user.id = 42
    interaction.response.send_message = AsyncMock()
    interaction.edit_original_response = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def make_interaction() -> Callable[..., MagicMock]:
    return build_interaction


class StubCompletion:
    """Records prompts; answers with a fixed string, a function of the prompt, or raises."""

    def __init__(
        self,
        answer: Union[str, Callable[[str], str], None] = None,
        *,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
    ):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []

    async def complete(self, prompt: str, model: str) -> Any:
        self.calls.append((prompt, model))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if callable(self.answer):
            return self.answer(prompt)
        return self.answer


@pytest.fixture
def stub_completion() -> Callable[..., StubCompletion]:
    return StubCompletion
