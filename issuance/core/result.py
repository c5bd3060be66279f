"""Typed operation outcomes.

Registry operations return ``Ok(value)`` or ``Err(RegistryError.X)``
instead of raising: every failure listed here is an expected outcome
the caller branches on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class RegistryError(Enum):
    UNAUTHORIZED = 200
    NOT_FOUND = 201
    INVALID_ISSUER = 202
    PAUSED = 203
    INVALID_PARAM = 204
    ALREADY_ISSUED = 205
    INVALID_DID = 206
    METADATA_TOO_LONG = 207
    ALREADY_REGISTERED = 208

    @property
    def code(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        """Lower-case name used as the metrics/log outcome."""
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    error: RegistryError

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> int:
        return self.error.code


Result = Union[Ok[T], Err]
