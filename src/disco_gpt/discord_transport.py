"""Blocking REST access to the Discord application-command endpoints.

Only the administrative calls live here: creating and deleting application
commands.  Everything that happens over the gateway (interaction responses,
edits, follow-ups) goes through discord.py instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests  # runtime dep

from .logging_utils import get_logger

log = get_logger("discord_transport")

DEFAULT_API_BASE = "https://discord.com/api/v10"


class DiscordAPIError(RuntimeError):
    """Non-2xx answer (or no answer at all) from the Discord REST API."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class DiscordRestTransport:
    """Thin ``requests.Session`` wrapper authenticated with a bot token."""

    def __init__(
        self,
        bot_token: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bot {bot_token}",
                "Content-Type": "application/json",
            }
        )

    def commands_url(self, application_id: str, guild_id: str = "") -> str:
        """Collection URL for global commands, or guild commands if ``guild_id``."""
        if guild_id:
            return (
                f"{self.api_base}/applications/{application_id}"
                f"/guilds/{guild_id}/commands"
            )
        return f"{self.api_base}/applications/{application_id}/commands"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise DiscordAPIError(f"{method} {url} failed: {e}") from e

        status = getattr(resp, "status_code", None)
        if status is None or not 200 <= status < 300:
            body = (getattr(resp, "text", "") or "")[:200]
            log.warning("discord_api_error method=%s status=%s", method, status)
            raise DiscordAPIError(
                f"{method} {url} returned {status}", status=status, body=body
            )
        return resp

    def create_command(
        self, application_id: str, payload: Dict[str, Any], guild_id: str = ""
    ) -> Dict[str, Any]:
        """Create (or overwrite) one application command and return Discord's copy."""
        resp = self._request(
            "POST", self.commands_url(application_id, guild_id), json=payload
        )
        try:
            return resp.json()
        except ValueError as e:
            raise DiscordAPIError("command create returned invalid JSON") from e

    def delete_command(
        self, application_id: str, command_id: str, guild_id: str = ""
    ) -> None:
        url = f"{self.commands_url(application_id, guild_id)}/{command_id}"
        self._request("DELETE", url)

    def close(self) -> None:
        self.session.close()
