from __future__ import annotations

import pytest
from pydantic import ValidationError

from issuance.core.result import Err, Ok, RegistryError
from issuance.services.commands import (
    COMMANDS,
    IssueCredential,
    PauseContract,
    RegisterIssuer,
    dispatch,
    parse_command,
)
from issuance.services.credential_id import credential_id_hex, derive_credential_id
from issuance.services.registry import IssuanceRegistry
from tests.conftest import ADMIN, DID, ISSUE_DATE, ISSUER

_ISSUE_PAYLOAD = {
    "did": DID,
    "vaccineType": "Pfizer",
    "batchNumber": "BATCH123",
    "issueDate": ISSUE_DATE,
    "expiryDate": None,
    "metadata": "Vaccination details",
    "signature": b"signature1".hex(),
    "issueId": 1,
}


def test_every_operation_has_a_command() -> None:
    assert set(COMMANDS) == {
        "pauseContract",
        "unpauseContract",
        "setAdmin",
        "registerIssuer",
        "deactivateIssuer",
        "issueCredential",
        "revokeCredential",
        "updateCredentialMetadata",
        "getIssuer",
        "getCredential",
        "getIssuanceRecord",
        "isIssuerActive",
        "isCredentialActive",
        "verifyIssuerSignature",
        "isContractPaused",
        "getAdmin",
    }


def test_parse_camel_case_payload() -> None:
    command = parse_command("issueCredential", _ISSUE_PAYLOAD)
    assert isinstance(command, IssueCredential)
    assert command.vaccine_type == "Pfizer"
    assert command.signature == b"signature1"
    assert command.expiry_date is None
    assert command.issue_id == 1


def test_snake_case_names_also_accepted() -> None:
    command = RegisterIssuer(name="Health Clinic", verification_key=b"pubkey1")
    assert command.verification_key == b"pubkey1"


def test_hex_byte_fields_are_decoded() -> None:
    command = parse_command(
        "registerIssuer", {"name": "Health Clinic", "verificationKey": "7075626b657931"}
    )
    assert command.verification_key == b"pubkey1"


def test_bad_hex_is_a_validation_error() -> None:
    with pytest.raises(ValidationError):
        parse_command("registerIssuer", {"name": "Clinic", "verificationKey": "zz"})


def test_missing_field_is_a_validation_error() -> None:
    with pytest.raises(ValidationError):
        parse_command("setAdmin", {})


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(ValidationError):
        parse_command("pauseContract", {"force": True})


def test_unknown_operation() -> None:
    with pytest.raises(KeyError, match="unknown operation"):
        parse_command("mintEverything", {})


def test_commands_are_immutable() -> None:
    command = parse_command("setAdmin", {"newAdmin": "x"})
    with pytest.raises(ValidationError):
        command.new_admin = "y"  # type: ignore[misc]


def test_dispatch_rejects_non_commands(registry: IssuanceRegistry) -> None:
    with pytest.raises(TypeError):
        dispatch(registry, ADMIN, {"operation": "pauseContract"})  # type: ignore[arg-type]


def test_dispatch_full_flow(registry: IssuanceRegistry) -> None:
    assert dispatch(
        registry,
        ISSUER,
        parse_command("registerIssuer", {"name": "Health Clinic", "verificationKey": b"pubkey1"}),
    ) == Ok(True)

    result = dispatch(registry, ISSUER, parse_command("issueCredential", _ISSUE_PAYLOAD))
    cid = derive_credential_id(DID, "Pfizer", "BATCH123", ISSUE_DATE)
    assert result == Ok(cid)

    cid_hex = credential_id_hex(cid)
    assert dispatch(
        registry, ISSUER, parse_command("isCredentialActive", {"credentialId": cid_hex})
    ) == Ok(True)
    assert dispatch(
        registry,
        "anyone",
        parse_command(
            "verifyIssuerSignature",
            {"credentialId": cid_hex, "signature": b"signature1".hex()},
        ),
    ) == Ok(True)
    assert dispatch(
        registry,
        ISSUER,
        parse_command(
            "updateCredentialMetadata", {"credentialId": cid_hex, "newMetadata": "Booster"}
        ),
    ) == Ok(True)
    assert dispatch(
        registry, ISSUER, parse_command("revokeCredential", {"credentialId": cid_hex})
    ) == Ok(True)

    record = dispatch(
        registry, "anyone", parse_command("getIssuanceRecord", {"did": DID, "issueId": 1})
    )
    assert record.value.credential_id == cid

    credential = dispatch(registry, "anyone", parse_command("getCredential", {"credentialId": cid}))
    assert credential.value.metadata == "Booster"
    assert credential.value.active is False


def test_dispatch_returns_registry_errors(registry: IssuanceRegistry) -> None:
    assert dispatch(registry, ISSUER, PauseContract()) == Err(RegistryError.UNAUTHORIZED)
    assert dispatch(registry, ISSUER, parse_command("issueCredential", _ISSUE_PAYLOAD)) == Err(
        RegistryError.INVALID_ISSUER
    )


def test_dispatch_admin_commands(registry: IssuanceRegistry) -> None:
    assert dispatch(registry, ADMIN, parse_command("pauseContract")) == Ok(True)
    assert dispatch(registry, ADMIN, parse_command("isContractPaused")) == Ok(True)
    assert dispatch(registry, ADMIN, parse_command("unpauseContract")) == Ok(True)
    assert dispatch(registry, ADMIN, parse_command("setAdmin", {"newAdmin": "ops"})) == Ok(True)
    assert dispatch(registry, "ops", parse_command("getAdmin")) == Ok("ops")


def test_dispatch_issuer_queries(issuer_registry: IssuanceRegistry) -> None:
    issuer = dispatch(issuer_registry, "anyone", parse_command("getIssuer", {"issuer": ISSUER}))
    assert issuer.value.name == "Health Clinic"

    assert dispatch(
        issuer_registry, "ops", parse_command("deactivateIssuer", {"issuer": ISSUER})
    ) == Err(RegistryError.UNAUTHORIZED)
    assert dispatch(
        issuer_registry, ADMIN, parse_command("deactivateIssuer", {"issuer": ISSUER})
    ) == Ok(True)
    assert dispatch(
        issuer_registry, "anyone", parse_command("isIssuerActive", {"issuer": ISSUER})
    ) == Ok(False)
