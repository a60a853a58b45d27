"""Explicit per-stage outcomes for the enrichment fallback chain.

Each fetch or decode step returns one of :class:`Ok`, :data:`MISSING` or
:class:`Failed` so the aggregator can branch on the result instead of relying
on caught-and-ignored exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")

__all__ = ["Ok", "Missing", "MISSING", "Failed", "Outcome"]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Missing:
    """The stage completed but had nothing to offer."""

    reason: str = ""


MISSING = Missing()


@dataclass(frozen=True)
class Failed:
    cause: Exception


Outcome = Union[Ok[T], Missing, Failed]
