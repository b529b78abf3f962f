"""
Query Epoch - supersede in-flight work when a newer query starts

Each user-initiated flow calls ``begin()`` and carries the returned token
through its awaits. Before writing anything shared it checks
``is_current(token)``; results of a superseded flow are dropped silently.
No locks are needed: the event loop is single-threaded and exclusion is a
token comparison at the write.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class EpochToken:
    """Identifies one flow; compare against the epoch to see if it is current."""

    number: int
    label: str = ""


class QueryEpoch:
    """Monotonic epoch counter plus the result committed by the current token."""

    def __init__(self) -> None:
        self._current = 0
        self._result: Any = None

    @property
    def current(self) -> int:
        return self._current

    @property
    def result(self) -> Any:
        """Last value committed by a token that was current at the time."""
        return self._result

    def begin(self, label: str = "") -> EpochToken:
        """Start a new epoch; every earlier token is superseded."""
        self._current += 1
        logger.debug(f"Epoch {self._current} started {label!r}")
        return EpochToken(self._current, label)

    def is_current(self, token: EpochToken) -> bool:
        return token.number == self._current

    def commit(self, token: EpochToken, value: Any) -> bool:
        """Store *value* if *token* is current; report whether it was written."""
        if not self.is_current(token):
            logger.debug(f"Discarding result of superseded epoch {token.number} {token.label!r}")
            return False
        self._result = value
        return True

    async def run(self, token: EpochToken, awaitable: Awaitable[T]) -> T | None:
        """
        Await *awaitable* and return its result only if *token* is still current.

        Errors raised by a superseded flow are discarded with the result.
        """
        try:
            value = await awaitable
        except Exception:
            if not self.is_current(token):
                logger.debug(f"Ignoring failure of superseded epoch {token.number}")
                return None
            raise
        if not self.commit(token, value):
            return None
        return value
