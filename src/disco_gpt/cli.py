"""Command-line interface for Disco GPT.

Flags mirror the environment variables and win over them::

    disco-gpt --guild 1234567890 --token $DISCORD_BOT_TOKEN --apikey $OPENAI_API_KEY
    disco-gpt --no-rmcmd          # keep the command registered after exit

A ``.env`` file in the working directory (or the file named by
``DOTENV_FILE``) is loaded before the settings are read.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from . import runner
from .config import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="disco-gpt",
        description="Discord bot relaying /gpt prompts to the OpenAI chat API.",
    )
    parser.add_argument(
        "--guild",
        default=None,
        help="Test guild ID. If not passed, the bot registers commands globally.",
    )
    parser.add_argument("--token", default=None, help="Bot access token.")
    parser.add_argument(
        "--rmcmd",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Remove the registered commands on shutdown (default: on).",
    )
    parser.add_argument("--apikey", default=None, help="OpenAI API key.")
    parser.add_argument(
        "--model", default=None, help="Chat model to ask (default: gpt-3.5-turbo)."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for an answer; 0 waits indefinitely (default: 60).",
    )
    parser.add_argument("--log-level", default=None, help="Root log level.")
    return parser


def load_settings(argv: Optional[List[str]] = None) -> Settings:
    """Environment (after loading ``.env``) overridden by command-line flags."""
    load_dotenv(os.getenv("DOTENV_FILE") or find_dotenv(usecwd=True))
    args = build_parser().parse_args(argv)
    return Settings().with_overrides(
        discord_guild_id=args.guild,
        discord_bot_token=args.token,
        remove_commands=args.rmcmd,
        openai_api_key=args.apikey,
        openai_model=args.model,
        completion_timeout_secs=args.timeout,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    return runner.main(load_settings(argv))


if __name__ == "__main__":
    sys.exit(main())
