"""Tagged values for attributes whose true value may be unknowable locally.

The remote secret store never returns plaintext once a value is persisted,
so a value that drifted out-of-band can only be represented as
``Unresolved``. Consumers must handle both arms explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Known(Generic[T]):
    """A value that is determined and trusted."""

    value: T


@dataclass(frozen=True)
class Unresolved:
    """A value that is undetermined: not yet computed, or no longer trusted."""

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = Unresolved()

Value = Known[str] | Unresolved


def encode_value(value: Value | None) -> str | None:
    """Wire encoding: the raw string for Known, ``None`` otherwise."""
    if isinstance(value, Known):
        return value.value
    return None


def decode_value(raw: str | None) -> Value:
    if raw is None:
        return UNRESOLVED
    return Known(raw)
