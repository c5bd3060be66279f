from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure repo root is on sys.path so `import issuance` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from issuance.core.clock import LogicalClock  # noqa: E402
from issuance.services.registry import IssuanceRegistry  # noqa: E402

ADMIN = "deployer"
ISSUER = "wallet_1"
USER = "wallet_2"
DID = "did:stack:user-hash"
ISSUE_DATE = 1_700_000_000


@pytest.fixture
def clock() -> LogicalClock:
    return LogicalClock(start=100)


@pytest.fixture
def registry(clock: LogicalClock) -> IssuanceRegistry:
    return IssuanceRegistry(ADMIN, clock=clock)


@pytest.fixture
def issuer_registry(registry: IssuanceRegistry) -> IssuanceRegistry:
    """Registry with ISSUER already registered and active."""
    assert registry.register_issuer(ISSUER, "Health Clinic", b"pubkey1").ok
    return registry


def issue(
    registry: IssuanceRegistry,
    caller: str = ISSUER,
    *,
    did: str = DID,
    vaccine_type: str = "Pfizer",
    batch_number: str = "BATCH123",
    issue_date: int = ISSUE_DATE,
    expiry_date: int | None = None,
    metadata: str = "Vaccination details",
    signature: bytes = b"signature1",
    issue_id: int = 1,
):
    """Issue with the default scenario values, overriding only what a test cares about."""
    return registry.issue_credential(
        caller,
        did,
        vaccine_type,
        batch_number,
        issue_date,
        expiry_date,
        metadata,
        signature,
        issue_id,
    )
