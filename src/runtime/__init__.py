"""Runtime engine exports."""

from .command_dispatch import CommandArgumentError, RuntimeCommandDispatcher
from .loop import RuntimeBootstrap, RuntimeEngine, RuntimeHooks

__all__ = [
    "CommandArgumentError",
    "RuntimeBootstrap",
    "RuntimeCommandDispatcher",
    "RuntimeEngine",
    "RuntimeHooks",
]
