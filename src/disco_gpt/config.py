import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional


def _env_float_opt(name: str) -> Optional[float]:
    """
    Read an optional float from env. Returns None if unset, blank, or non-numeric.
    """
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    if raw == "" or raw.lower() in {"none", "null"} or raw.startswith("#"):
        return None
    try:
        return float(raw)
    except Exception:
        return None


def _b(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {
        "1",
        "true",
        "yes",
        "y",
        "on",
    }


def _s(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _f(name: str, default: float) -> float:
    val = _env_float_opt(name)
    return default if val is None else val


def is_log_level(name: str) -> bool:
    return isinstance(logging.getLevelName((name or "").strip().upper()), int)


@dataclass
class Settings:
    # --- Discord ---
    # Guild (server) the slash command is registered in.  Leave empty to
    # register the command globally; global commands can take up to an hour
    # to show up in clients, guild commands are instant.
    discord_guild_id: str = field(default_factory=lambda: _s("DISCORD_GUILD_ID"))
    discord_bot_token: str = field(default_factory=lambda: _s("DISCORD_BOT_TOKEN"))

    # Delete the registered commands again when the bot shuts down.
    remove_commands: bool = field(default_factory=lambda: _b("REMOVE_COMMANDS", True))

    # Base URL for the administrative REST calls (command create/delete).
    discord_api_base: str = field(
        default_factory=lambda: _s("DISCORD_API_BASE", "https://discord.com/api/v10")
    )

    # --- OpenAI ---
    openai_api_key: str = field(default_factory=lambda: _s("OPENAI_API_KEY"))
    openai_model: str = field(
        default_factory=lambda: _s("OPENAI_MODEL", "gpt-3.5-turbo")
    )

    # Deadline for a single completion call in seconds.  0 disables the
    # deadline and lets the request run as long as the API keeps it open.
    completion_timeout_secs: float = field(
        default_factory=lambda: _f("COMPLETION_TIMEOUT_SECS", 60.0)
    )

    # --- Logging ---
    log_level: str = field(default_factory=lambda: _s("LOG_LEVEL", "INFO"))
    log_plain: bool = field(default_factory=lambda: _b("LOG_PLAIN", False))

    # Paths (tests expect Path fields)
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("DATA_DIR", "data")).resolve()
    )

    @property
    def completion_timeout(self) -> Optional[float]:
        """Completion deadline in seconds, or ``None`` when disabled."""
        if self.completion_timeout_secs and self.completion_timeout_secs > 0:
            return float(self.completion_timeout_secs)
        return None

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when usable)."""
        problems: List[str] = []
        if not self.discord_bot_token:
            problems.append("DISCORD_BOT_TOKEN is not set (use --token)")
        if not self.openai_api_key:
            problems.append("OPENAI_API_KEY is not set (use --apikey)")
        if not self.openai_model:
            problems.append("OPENAI_MODEL is empty (use --model)")
        if self.completion_timeout_secs < 0:
            problems.append("COMPLETION_TIMEOUT_SECS must not be negative")
        if not is_log_level(self.log_level):
            problems.append(f"LOG_LEVEL {self.log_level!r} is not a logging level")
        return problems

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-``None`` override applied."""
        changes: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

