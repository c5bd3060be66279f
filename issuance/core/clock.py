from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int:
        """Current logical time (block height or unix seconds)."""
        ...


class LogicalClock:
    """Monotonic counter standing in for block height.

    The execution environment owns this and advances it between
    transactions; the registry only reads it.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")
        self._height = start

    def now(self) -> int:
        return self._height

    def advance(self, by: int = 1) -> int:
        if by < 1:
            raise ValueError("clock can only move forward")
        self._height += by
        return self._height


class WallClock:
    def now(self) -> int:
        return int(time.time())
