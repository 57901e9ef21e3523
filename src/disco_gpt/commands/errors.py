"""
Discord Command Error Responses
================================

Standardized error payloads for slash commands.
"""

from typing import Any, Dict

# Response types
RESPONSE_TYPE_CHANNEL_MESSAGE = 4

FLAG_EPHEMERAL = 64

GENERIC_FAILURE_NOTICE = "Something went wrong"


def missing_parameter_error(parameter: str) -> Dict[str, Any]:
    """
    Return error for missing required parameter.

    Parameters
    ----------
    parameter : str
        Name of the missing parameter

    Returns
    -------
    Dict[str, Any]
        Discord interaction response
    """
    return {
        "type": RESPONSE_TYPE_CHANNEL_MESSAGE,
        "data": {
            "content": f"Missing required parameter: `{parameter}`",
            "flags": FLAG_EPHEMERAL,
        },
    }


def generic_error(error_message: str = GENERIC_FAILURE_NOTICE) -> Dict[str, Any]:
    """
    Return the body of an ephemeral follow-up message.

    Follow-ups are plain messages, not interaction responses, so there is no
    response ``type`` here.  Sent when the answer could not be written into
    the acknowledgment message.
    """
    return {
        "content": error_message,
        "flags": FLAG_EPHEMERAL,
    }
