"""CLI command modules for template-scaffold."""

from .check import register_check_command
from .config_cmd import register_config_command
from .create import register_clone_command, register_copy_command

__all__ = [
    "register_check_command",
    "register_clone_command",
    "register_config_command",
    "register_copy_command",
]
