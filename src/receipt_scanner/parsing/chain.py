"""Ordered "first success wins" evaluation of fallback steps."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

I = TypeVar("I")
T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a single fallback step.

    Attributes:
        name: Name of the step that produced this outcome
        value: The produced value, or None when the step did not succeed
        error: Short description of why the step did not succeed
    """

    name: str
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    @classmethod
    def success(cls, name: str, value: T) -> Outcome[T]:
        return cls(name=name, value=value)

    @classmethod
    def failure(cls, name: str, error: str) -> Outcome[T]:
        return cls(name=name, error=error)


Step = Callable[[I], Outcome[T]]


def first_success(
    steps: Sequence[Step[I, T]],
    value: I,
    log: logging.Logger | None = None,
) -> Outcome[T] | None:
    """Run ``steps`` in order and return the first successful outcome.

    Returns None when every step reported a failure. Steps report failure
    through their outcome; exceptions are not part of the contract.
    """
    log = log or logger
    for step in steps:
        outcome = step(value)
        if outcome.ok:
            return outcome
        log.debug("Step %s did not succeed: %s", outcome.name, outcome.error)
    return None
