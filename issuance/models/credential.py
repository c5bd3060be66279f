from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Credential:
    """Issued vaccination credential, keyed by its derived content ID.

    ``signature`` is stored as opaque bytes; the registry only ever
    compares it for equality.
    """

    did: str
    issuer: str  # identity of the issuing caller
    vaccine_type: str
    batch_number: str
    issue_date: int
    expiry_date: int | None
    metadata: str
    signature: bytes
    active: bool = True

    @staticmethod
    def new(
        *,
        did: str,
        issuer: str,
        vaccine_type: str,
        batch_number: str,
        issue_date: int,
        metadata: str,
        signature: bytes,
        expiry_date: int | None = None,
    ) -> Credential:
        return Credential(
            did=did,
            issuer=issuer,
            vaccine_type=vaccine_type,
            batch_number=batch_number,
            issue_date=issue_date,
            expiry_date=expiry_date,
            metadata=metadata,
            signature=signature,
            active=True,
        )
