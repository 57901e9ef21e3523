"""Disco GPT package.

A small Discord bot exposing a single ``/gpt`` slash command. The prompt a
user types is relayed to the OpenAI chat-completion API and the answer is
rendered back into the acknowledgment message as an embed. Configuration,
logging, the completion client, command registration and interaction
dispatch live in separate modules so each can be tested on its own.
"""

__all__: list[str] = []
