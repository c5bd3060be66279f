"""Demo: walk the register → issue → revoke flow through the command surface.

Run with:
    python scripts/demo_issuance_flow.py
"""

from __future__ import annotations

from issuance.core.clock import LogicalClock
from issuance.services.commands import dispatch, parse_command
from issuance.services.credential_id import credential_id_hex
from issuance.services.registry import IssuanceRegistry

ADMIN = "deployer"
ISSUER = "wallet_1"
OUTSIDER = "wallet_2"
DID = "did:stack:user-hash"


def main() -> None:
    clock = LogicalClock(start=1)
    registry = IssuanceRegistry(ADMIN, clock=clock)

    def run(caller: str, name: str, payload: dict | None = None):
        result = dispatch(registry, caller, parse_command(name, payload))
        clock.advance()
        return result

    # ── Step 1: register an issuer ──────────────────────────────────
    r = run(
        ISSUER,
        "registerIssuer",
        {"name": "Health Clinic", "verificationKey": b"pubkey1".hex()},
    )
    print(f"1. registerIssuer   ({ISSUER}) → {r}")

    # ── Step 2: issue a credential ──────────────────────────────────
    issue_payload = {
        "did": DID,
        "vaccineType": "Pfizer",
        "batchNumber": "BATCH123",
        "issueDate": 1_700_000_000,
        "metadata": "Vaccination details",
        "signature": b"signature1".hex(),
        "issueId": 1,
    }
    r = run(ISSUER, "issueCredential", issue_payload)
    assert r.ok, r
    cid = credential_id_hex(r.value)
    print(f"2. issueCredential  ({ISSUER}) → credential {cid[:16]}…")

    # ── Step 3: same tuple again ────────────────────────────────────
    r = run(ISSUER, "issueCredential", {**issue_payload, "issueId": 2})
    print(f"3. issueCredential  (again)    → {r.error.name} ({r.code})")

    # ── Step 4: outsider tries to revoke ────────────────────────────
    r = run(OUTSIDER, "revokeCredential", {"credentialId": cid})
    print(f"4. revokeCredential ({OUTSIDER}) → {r.error.name} ({r.code})")

    # ── Step 5: owner revokes ───────────────────────────────────────
    r = run(ISSUER, "revokeCredential", {"credentialId": cid})
    print(f"5. revokeCredential ({ISSUER}) → {r}")

    r = run(OUTSIDER, "isCredentialActive", {"credentialId": cid})
    print(f"6. isCredentialActive          → {r.value}")

    record = registry.get_issuance_record(DID, 1)
    print(f"7. issuance record (did, 1)    → timestamp={record.timestamp}")
    print(f"   stats: {registry.get_statistics()}")


if __name__ == "__main__":
    main()
