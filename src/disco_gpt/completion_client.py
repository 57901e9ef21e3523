"""
OpenAI chat-completion client for Disco GPT.

One prompt in, one answer out.  The wrapped SDK client is built with
``max_retries=0`` so every call maps to exactly one HTTP request, and an
optional deadline bounds how long a caller waits for the answer.

Every failure mode (network, authentication, malformed or empty response,
deadline) surfaces as :class:`CompletionError`; the ``/gpt`` handler only
cares whether it got text back.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from .logging_utils import get_logger

log = get_logger("completion_client")

DEFAULT_MODEL = "gpt-3.5-turbo"


class CompletionError(Exception):
    """The completion API did not produce usable text."""


class CompletionTimeout(CompletionError):
    """The completion API did not answer before the deadline."""


def build_messages(prompt: str) -> List[Dict[str, str]]:
    """Single user-role message; no history is carried between calls."""
    return [{"role": "user", "content": prompt}]


class CompletionClient:
    """Async wrapper around ``AsyncOpenAI.chat.completions.create``."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        self.timeout = timeout
        self._client = client or AsyncOpenAI(
            api_key=api_key, max_retries=0, timeout=timeout
        )

    async def complete(self, prompt: str, model: str = DEFAULT_MODEL) -> str:
        """Return the first choice's text for ``prompt``.

        Raises
        ------
        CompletionTimeout
            The deadline expired before the API answered.
        CompletionError
            Any other failure, including an empty choice list.
        """
        log.info("completion_prompt model=%s prompt=%s", model, prompt)

        request = self._client.chat.completions.create(
            model=model, messages=build_messages(prompt)
        )
        try:
            if self.timeout:
                resp = await asyncio.wait_for(request, timeout=self.timeout)
            else:
                resp = await request
        except asyncio.TimeoutError as e:
            log.warning("completion_timeout model=%s after=%.1fs", model, self.timeout)
            raise CompletionTimeout(f"no answer within {self.timeout}s") from e
        except openai.APITimeoutError as e:
            log.warning("completion_timeout model=%s err=%s", model, e)
            raise CompletionTimeout(str(e)) from e
        except openai.OpenAIError as e:
            log.error("completion_failed model=%s err=%s", model, e)
            raise CompletionError(str(e)) from e

        return _first_choice_text(resp, model)


def _first_choice_text(resp: Any, model: str) -> str:
    choices = getattr(resp, "choices", None)
    if not choices:
        log.error("completion_empty model=%s", model)
        raise CompletionError("completion returned no choices")

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        log.error("completion_malformed model=%s", model)
        raise CompletionError("completion choice has no text content")

    log.debug("completion_done model=%s chars=%d", model, len(content))
    return content
