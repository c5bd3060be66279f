from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from issuance.models.credential import Credential


class CredentialRepo(Protocol):
    def get(self, credential_id: bytes) -> Credential | None: ...
    def exists(self, credential_id: bytes) -> bool: ...
    def add(self, credential_id: bytes, credential: Credential) -> None: ...
    def remove(self, credential_id: bytes) -> bool: ...
    def set_active(self, credential_id: bytes, active: bool) -> Credential: ...
    def update_metadata(self, credential_id: bytes, metadata: str) -> Credential: ...
    def list_all(self) -> list[tuple[bytes, Credential]]: ...


class InMemoryCredentialRepo:
    def __init__(self) -> None:
        self._store: dict[bytes, Credential] = {}

    def get(self, credential_id: bytes) -> Credential | None:
        return self._store.get(credential_id)

    def exists(self, credential_id: bytes) -> bool:
        return credential_id in self._store

    def add(self, credential_id: bytes, credential: Credential) -> None:
        # Insert-only: there is no overwrite path for credentials.
        if credential_id in self._store:
            raise ValueError("credential already issued")
        self._store[credential_id] = credential

    def remove(self, credential_id: bytes) -> bool:
        # Only used to roll back an insert whose issuance record failed.
        return self._store.pop(credential_id, None) is not None

    def set_active(self, credential_id: bytes, active: bool) -> Credential:
        existing = self._store.get(credential_id)
        if existing is None:
            raise KeyError("credential not found")
        updated = replace(existing, active=active)
        self._store[credential_id] = updated
        return updated

    def update_metadata(self, credential_id: bytes, metadata: str) -> Credential:
        existing = self._store.get(credential_id)
        if existing is None:
            raise KeyError("credential not found")
        updated = replace(existing, metadata=metadata)
        self._store[credential_id] = updated
        return updated

    def list_all(self) -> list[tuple[bytes, Credential]]:
        return list(self._store.items())
