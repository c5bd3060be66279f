from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IssuanceRecord:
    """Audit entry for (did, issue_id) pointing at the credential produced."""

    credential_id: bytes
    timestamp: int
