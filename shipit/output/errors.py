"""Error presentation for release failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipit.output.console import Style

if TYPE_CHECKING:
    from shipit.output.console import ConsoleProtocol
    from shipit.services.release.errors import ReleaseError

__all__ = ["print_release_error"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error: the message in red, then an optional dim hint."""
    if error.kind == "test_failed":
        console.error("Tests failed")
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
