"""
Disco GPT Discord Commands
===========================

Slash command definitions, registration and handlers.
"""

from .command_registry import (
    COMMANDS,
    CommandRegistrationError,
    CommandRegistry,
    RegisteredCommand,
    get_command_names,
)
from .embeds import create_acknowledgment, create_answer_edit, create_answer_embed
from .errors import generic_error, missing_parameter_error
from .handlers import GPTCommandHandler, get_option_value

__all__ = [
    "COMMANDS",
    "CommandRegistrationError",
    "CommandRegistry",
    "RegisteredCommand",
    "get_command_names",
    "create_acknowledgment",
    "create_answer_edit",
    "create_answer_embed",
    "generic_error",
    "missing_parameter_error",
    "GPTCommandHandler",
    "get_option_value",
]
