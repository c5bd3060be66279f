"""Typed commands for the registry's public operation surface.

Each operation is a pydantic model named after it.  ``parse_command``
builds one from a plain mapping (decoded JSON, a queue payload) using
the camelCase operation and field names callers see; ``dispatch`` runs
it against a registry on behalf of an already-authenticated caller.

Byte-string fields (verification keys, signatures, credential IDs)
accept raw ``bytes`` or a hex string.

Queries are wrapped in ``Ok`` by ``dispatch`` so every command returns a
``Result``; calling the registry directly returns the bare value.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from issuance.core.result import Ok, Result
from issuance.services.registry import IssuanceRegistry


class Command(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    operation: ClassVar[str]

    @field_validator("*", mode="before")
    @classmethod
    def decode_hex_bytes(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields.get(info.field_name or "")
        if field is not None and field.annotation is bytes and isinstance(value, str):
            return bytes.fromhex(value)
        return value

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        raise NotImplementedError


# ---- access & pause control ----


class PauseContract(Command):
    operation: ClassVar[str] = "pauseContract"

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.pause_contract(caller)


class UnpauseContract(Command):
    operation: ClassVar[str] = "unpauseContract"

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.unpause_contract(caller)


class SetAdmin(Command):
    operation: ClassVar[str] = "setAdmin"

    new_admin: str

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.set_admin(caller, self.new_admin)


# ---- issuers ----


class RegisterIssuer(Command):
    operation: ClassVar[str] = "registerIssuer"

    name: str
    verification_key: bytes

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.register_issuer(caller, self.name, self.verification_key)


class DeactivateIssuer(Command):
    operation: ClassVar[str] = "deactivateIssuer"

    issuer: str

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.deactivate_issuer(caller, self.issuer)


# ---- credentials ----


class IssueCredential(Command):
    operation: ClassVar[str] = "issueCredential"

    did: str
    vaccine_type: str
    batch_number: str
    issue_date: int
    expiry_date: int | None = None
    metadata: str = ""
    signature: bytes
    issue_id: int

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.issue_credential(
            caller,
            self.did,
            self.vaccine_type,
            self.batch_number,
            self.issue_date,
            self.expiry_date,
            self.metadata,
            self.signature,
            self.issue_id,
        )


class RevokeCredential(Command):
    operation: ClassVar[str] = "revokeCredential"

    credential_id: bytes

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.revoke_credential(caller, self.credential_id)


class UpdateCredentialMetadata(Command):
    operation: ClassVar[str] = "updateCredentialMetadata"

    credential_id: bytes
    new_metadata: str

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.update_credential_metadata(
            caller, self.credential_id, self.new_metadata
        )


# ---- queries ----


class GetIssuer(Command):
    operation: ClassVar[str] = "getIssuer"

    issuer: str

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return Ok(registry.get_issuer(self.issuer))


class GetCredential(Command):
    operation: ClassVar[str] = "getCredential"

    credential_id: bytes

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return Ok(registry.get_credential(self.credential_id))


class GetIssuanceRecord(Command):
    operation: ClassVar[str] = "getIssuanceRecord"

    did: str
    issue_id: int

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return Ok(registry.get_issuance_record(self.did, self.issue_id))


class IsIssuerActive(Command):
    operation: ClassVar[str] = "isIssuerActive"

    issuer: str

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return Ok(registry.is_issuer_active(self.issuer))


class IsCredentialActive(Command):
    operation: ClassVar[str] = "isCredentialActive"

    credential_id: bytes

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return Ok(registry.is_credential_active(self.credential_id))


class VerifyIssuerSignature(Command):
    operation: ClassVar[str] = "verifyIssuerSignature"

    credential_id: bytes
    signature: bytes

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return registry.verify_issuer_signature(self.credential_id, self.signature)


class IsContractPaused(Command):
    operation: ClassVar[str] = "isContractPaused"

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return Ok(registry.is_contract_paused())


class GetAdmin(Command):
    operation: ClassVar[str] = "getAdmin"

    def run(self, registry: IssuanceRegistry, caller: str) -> Result:
        return Ok(registry.get_admin())


COMMANDS: dict[str, type[Command]] = {
    cls.operation: cls
    for cls in (
        PauseContract,
        UnpauseContract,
        SetAdmin,
        RegisterIssuer,
        DeactivateIssuer,
        IssueCredential,
        RevokeCredential,
        UpdateCredentialMetadata,
        GetIssuer,
        GetCredential,
        GetIssuanceRecord,
        IsIssuerActive,
        IsCredentialActive,
        VerifyIssuerSignature,
        IsContractPaused,
        GetAdmin,
    )
}


def parse_command(name: str, payload: dict[str, Any] | None = None) -> Command:
    """Build a command from its operation name and field mapping.

    Raises KeyError for an unknown operation and pydantic's
    ValidationError for a malformed payload.
    """
    try:
        cls = COMMANDS[name]
    except KeyError:
        raise KeyError(f"unknown operation {name!r}") from None
    return cls.model_validate(payload or {})


def dispatch(registry: IssuanceRegistry, caller: str, command: Command) -> Result:
    if not isinstance(command, Command):
        raise TypeError(f"expected a Command, got {type(command).__name__}")
    return command.run(registry, caller)
