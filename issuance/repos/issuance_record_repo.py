from __future__ import annotations

from typing import Protocol

from issuance.models.issuance_record import IssuanceRecord


class IssuanceRecordRepo(Protocol):
    def get(self, did: str, issue_id: int) -> IssuanceRecord | None: ...
    def put(self, did: str, issue_id: int, record: IssuanceRecord) -> IssuanceRecord | None: ...
    def list_by_did(self, did: str) -> list[tuple[int, IssuanceRecord]]: ...


class InMemoryIssuanceRecordRepo:
    def __init__(self) -> None:
        # did -> issue_id -> record
        self._by_did: dict[str, dict[int, IssuanceRecord]] = {}

    def get(self, did: str, issue_id: int) -> IssuanceRecord | None:
        records = self._by_did.get(did)
        return records.get(issue_id) if records is not None else None

    def put(self, did: str, issue_id: int, record: IssuanceRecord) -> IssuanceRecord | None:
        """Insert or overwrite; returns the record that was replaced, if any."""
        records = self._by_did.setdefault(did, {})
        previous = records.get(issue_id)
        records[issue_id] = record
        return previous

    def list_by_did(self, did: str) -> list[tuple[int, IssuanceRecord]]:
        records = self._by_did.get(did)
        if records is None:
            return []
        # Snapshot before sorting: writers may insert while we read.
        snapshot = list(records.items())
        return sorted(snapshot, key=lambda pair: pair[0])
