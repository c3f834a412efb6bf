"""Result type for explicit error handling.

Every release step returns a Result instead of raising or exiting, so the
state machine driver decides when the pipeline stops.

Usage:
    def read_version(path: Path) -> Result[str, str]:
        if not path.exists():
            return Err(f"missing {path}")
        return Ok(path.read_text().strip())

    match read_version(Path("VERSION")):
        case Ok(version):
            print(version)
        case Err(error):
            print(f"error: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
