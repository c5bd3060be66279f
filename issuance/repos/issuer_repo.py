from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from issuance.models.issuer import Issuer


class IssuerRepo(Protocol):
    def get(self, identity: str) -> Issuer | None: ...
    def add(self, identity: str, issuer: Issuer) -> None: ...
    def set_active(self, identity: str, active: bool) -> Issuer: ...
    def list_all(self) -> list[tuple[str, Issuer]]: ...


class InMemoryIssuerRepo:
    def __init__(self) -> None:
        self._by_identity: dict[str, Issuer] = {}

    def get(self, identity: str) -> Issuer | None:
        return self._by_identity.get(identity)

    def add(self, identity: str, issuer: Issuer) -> None:
        if identity in self._by_identity:
            raise ValueError("issuer already registered")
        self._by_identity[identity] = issuer

    def set_active(self, identity: str, active: bool) -> Issuer:
        existing = self._by_identity.get(identity)
        if existing is None:
            raise KeyError("issuer not found")
        updated = replace(existing, active=active)
        self._by_identity[identity] = updated
        return updated

    def list_all(self) -> list[tuple[str, Issuer]]:
        return list(self._by_identity.items())
