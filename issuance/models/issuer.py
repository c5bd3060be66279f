from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Issuer:
    """Registered issuer, keyed in the registry by the caller identity."""

    name: str
    registered_at: int
    verification_key: bytes
    active: bool = True

    @staticmethod
    def new(*, name: str, verification_key: bytes, registered_at: int) -> Issuer:
        return Issuer(
            name=name,
            registered_at=registered_at,
            verification_key=verification_key,
            active=True,
        )
