"""Output abstraction layer."""

from .console import (
    DRY_RUN_MARKER,
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)

__all__ = [
    "DRY_RUN_MARKER",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
]
