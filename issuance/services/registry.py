"""Issuance registry: issuers, credentials, and per-DID issuance records.

Every mutating operation is one all-or-nothing transition guarded by a
single writer lock.  Checks run in a fixed order (pause, authorization,
structural validity, uniqueness) and the first failure is returned as
an ``Err`` before anything is written.

Reads take no lock.  Stored records are frozen and replaced whole, so a
reader sees either the last committed version of a record or the next
one, never a half-written one.

The caller identity and the clock are supplied from outside: the
registry never authenticates anyone and never advances time.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from issuance.core.clock import Clock, LogicalClock
from issuance.core.metrics import (
    ACTIVE_CREDENTIALS,
    ACTIVE_ISSUERS,
    CREDENTIALS_ISSUED,
    REGISTRY_OPERATIONS,
    REGISTRY_PAUSED,
)
from issuance.core.result import Err, Ok, RegistryError, Result
from issuance.models.credential import Credential
from issuance.models.issuance_record import IssuanceRecord
from issuance.models.issuer import Issuer
from issuance.repos.credential_repo import CredentialRepo, InMemoryCredentialRepo
from issuance.repos.issuance_record_repo import (
    InMemoryIssuanceRecordRepo,
    IssuanceRecordRepo,
)
from issuance.repos.issuer_repo import InMemoryIssuerRepo, IssuerRepo
from issuance.services.credential_id import (
    batch_number_too_long,
    credential_id_hex,
    derive_credential_id,
    is_timestamp,
    is_valid_did,
    metadata_too_long,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RegistryStats:
    issuers: int
    active_issuers: int
    credentials: int
    active_credentials: int


class IssuanceRegistry:
    def __init__(
        self,
        admin: str,
        *,
        clock: Clock | None = None,
        issuers: IssuerRepo | None = None,
        credentials: CredentialRepo | None = None,
        records: IssuanceRecordRepo | None = None,
    ) -> None:
        if not admin:
            raise ValueError("admin must be non-empty")
        self._admin = admin
        self._paused = False
        self._clock: Clock = clock if clock is not None else LogicalClock()
        self._issuers: IssuerRepo = issuers if issuers is not None else InMemoryIssuerRepo()
        self._credentials: CredentialRepo = (
            credentials if credentials is not None else InMemoryCredentialRepo()
        )
        self._records: IssuanceRecordRepo = (
            records if records is not None else InMemoryIssuanceRecordRepo()
        )
        self._lock = threading.Lock()

        # Running totals behind the active gauges; seeded once from the stores.
        stats = self.get_statistics()
        self._active_issuers = stats.active_issuers
        self._active_credentials = stats.active_credentials

        REGISTRY_PAUSED.set(0)
        self._publish_gauges()

    # ------------------------------------------------------------------
    # Access & pause control
    # ------------------------------------------------------------------

    def pause_contract(self, caller: str) -> Result[bool]:
        with self._lock:
            if caller != self._admin:
                return self._reject("pause_contract", caller, RegistryError.UNAUTHORIZED)
            self._paused = True
            REGISTRY_PAUSED.set(1)
            return self._accept("pause_contract", caller, True)

    def unpause_contract(self, caller: str) -> Result[bool]:
        with self._lock:
            if caller != self._admin:
                return self._reject("unpause_contract", caller, RegistryError.UNAUTHORIZED)
            self._paused = False
            REGISTRY_PAUSED.set(0)
            return self._accept("unpause_contract", caller, True)

    def set_admin(self, caller: str, new_admin: str) -> Result[bool]:
        with self._lock:
            if caller != self._admin:
                return self._reject("set_admin", caller, RegistryError.UNAUTHORIZED)
            if not new_admin:
                return self._reject("set_admin", caller, RegistryError.INVALID_PARAM)
            self._admin = new_admin
            return self._accept("set_admin", caller, True)

    # ------------------------------------------------------------------
    # Issuers
    # ------------------------------------------------------------------

    def register_issuer(
        self, caller: str, name: str, verification_key: bytes
    ) -> Result[bool]:
        """Self-register ``caller`` as an active issuer.

        One-time per identity: a second call fails with
        ALREADY_REGISTERED whatever the arguments are.
        """
        op = "register_issuer"
        with self._lock:
            if self._paused:
                return self._reject(op, caller, RegistryError.PAUSED)
            if self._issuers.get(caller) is not None:
                return self._reject(op, caller, RegistryError.ALREADY_REGISTERED)
            if not name or not verification_key:
                return self._reject(op, caller, RegistryError.INVALID_PARAM)

            issuer = Issuer.new(
                name=name,
                verification_key=bytes(verification_key),
                registered_at=self._clock.now(),
            )
            self._issuers.add(caller, issuer)
            self._active_issuers += 1
            self._publish_gauges()
            return self._accept(op, caller, True)

    def deactivate_issuer(self, caller: str, issuer: str) -> Result[bool]:
        op = "deactivate_issuer"
        with self._lock:
            if caller != self._admin:
                return self._reject(op, caller, RegistryError.UNAUTHORIZED, issuer=issuer)
            existing = self._issuers.get(issuer)
            if existing is None:
                return self._reject(op, caller, RegistryError.NOT_FOUND, issuer=issuer)
            self._issuers.set_active(issuer, False)
            if existing.active:
                self._active_issuers -= 1
                self._publish_gauges()
            return self._accept(op, caller, True, issuer=issuer)

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def issue_credential(
        self,
        caller: str,
        did: str,
        vaccine_type: str,
        batch_number: str,
        issue_date: int,
        expiry_date: int | None,
        metadata: str,
        signature: bytes,
        issue_id: int,
    ) -> Result[bytes]:
        """Mint a credential and record it under ``(did, issue_id)``.

        Returns the derived credential ID.  The issuance record for
        ``(did, issue_id)`` is overwritten if one already exists;
        ``issue_id`` is chosen by the caller and not checked for reuse.
        A non-integer ``issue_date`` (or ``expiry_date``) is rejected with
        INVALID_PARAM rather than truncated into the ID.
        """
        op = "issue_credential"
        with self._lock:
            if self._paused:
                return self._reject(op, caller, RegistryError.PAUSED, did=did)
            if not self._is_active_issuer(caller):
                return self._reject(op, caller, RegistryError.INVALID_ISSUER, did=did)
            if not is_valid_did(did):
                return self._reject(op, caller, RegistryError.INVALID_DID, did=did)
            if not is_timestamp(issue_date):
                return self._reject(op, caller, RegistryError.INVALID_PARAM, did=did)

            credential_id = derive_credential_id(did, vaccine_type, batch_number, issue_date)
            if self._credentials.exists(credential_id):
                return self._reject(
                    op, caller, RegistryError.ALREADY_ISSUED,
                    did=did, credential_id=credential_id_hex(credential_id),
                )
            if (
                not vaccine_type
                or batch_number_too_long(batch_number)
                or not signature
                or (expiry_date is not None and not is_timestamp(expiry_date))
            ):
                return self._reject(op, caller, RegistryError.INVALID_PARAM, did=did)
            if metadata_too_long(metadata):
                return self._reject(op, caller, RegistryError.METADATA_TOO_LONG, did=did)

            credential = Credential.new(
                did=did,
                issuer=caller,
                vaccine_type=vaccine_type,
                batch_number=batch_number,
                issue_date=issue_date,
                expiry_date=expiry_date,
                metadata=metadata,
                signature=bytes(signature),
            )
            record = IssuanceRecord(credential_id=credential_id, timestamp=self._clock.now())

            self._credentials.add(credential_id, credential)
            try:
                replaced = self._records.put(did, issue_id, record)
            except Exception:
                self._credentials.remove(credential_id)
                raise

            if replaced is not None:
                logger.warning(
                    "Overwrote issuance record did=%s issue_id=%d previous=%s",
                    did,
                    issue_id,
                    credential_id_hex(replaced.credential_id),
                    extra={"operation": op, "caller": caller, "did": did},
                )

            CREDENTIALS_ISSUED.inc()
            self._active_credentials += 1
            self._publish_gauges()
            return self._accept(
                op, caller, credential_id,
                did=did, credential_id=credential_id_hex(credential_id),
            )

    def revoke_credential(self, caller: str, credential_id: bytes) -> Result[bool]:
        """Deactivate a credential.  Revoking an inactive one succeeds again."""
        op = "revoke_credential"
        with self._lock:
            rejected = self._check_owner(op, caller, credential_id)
            if rejected is not None:
                return rejected
            was_active = self._credentials.get(credential_id).active
            self._credentials.set_active(credential_id, False)
            if was_active:
                self._active_credentials -= 1
                self._publish_gauges()
            return self._accept(op, caller, True, credential_id=credential_id_hex(credential_id))

    def update_credential_metadata(
        self, caller: str, credential_id: bytes, new_metadata: str
    ) -> Result[bool]:
        op = "update_credential_metadata"
        with self._lock:
            rejected = self._check_owner(op, caller, credential_id)
            if rejected is not None:
                return rejected
            if metadata_too_long(new_metadata):
                return self._reject(
                    op, caller, RegistryError.METADATA_TOO_LONG,
                    credential_id=credential_id_hex(credential_id),
                )
            self._credentials.update_metadata(credential_id, new_metadata)
            return self._accept(op, caller, True, credential_id=credential_id_hex(credential_id))

    # ------------------------------------------------------------------
    # Queries (no gating, never fail on a missing key)
    # ------------------------------------------------------------------

    def get_issuer(self, issuer: str) -> Issuer | None:
        return self._issuers.get(issuer)

    def get_credential(self, credential_id: bytes) -> Credential | None:
        return self._credentials.get(credential_id)

    def get_issuance_record(self, did: str, issue_id: int) -> IssuanceRecord | None:
        return self._records.get(did, issue_id)

    def list_issuance_records(self, did: str) -> list[tuple[int, IssuanceRecord]]:
        return self._records.list_by_did(did)

    def is_issuer_active(self, issuer: str) -> bool:
        return self._is_active_issuer(issuer)

    def is_credential_active(self, credential_id: bytes) -> bool:
        credential = self._credentials.get(credential_id)
        return credential.active if credential is not None else False

    def verify_issuer_signature(self, credential_id: bytes, signature: bytes) -> Result[bool]:
        """Compare ``signature`` with the stored signature bytes.

        This is a plain byte-equality check.  It does NOT verify any
        cryptographic signature against the issuer's verification key.
        """
        credential = self._credentials.get(credential_id)
        if credential is None:
            return Err(RegistryError.NOT_FOUND)
        if self._issuers.get(credential.issuer) is None:
            return Err(RegistryError.INVALID_ISSUER)
        return Ok(credential.signature == bytes(signature))

    def is_contract_paused(self) -> bool:
        return self._paused

    def get_admin(self) -> str:
        return self._admin

    def get_statistics(self) -> RegistryStats:
        issuers = self._issuers.list_all()
        credentials = self._credentials.list_all()
        return RegistryStats(
            issuers=len(issuers),
            active_issuers=sum(1 for _, i in issuers if i.active),
            credentials=len(credentials),
            active_credentials=sum(1 for _, c in credentials if c.active),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_active_issuer(self, identity: str) -> bool:
        issuer = self._issuers.get(identity)
        return issuer is not None and issuer.active

    def _check_owner(self, op: str, caller: str, credential_id: bytes) -> Err | None:
        # Shared gate for revoke/update: paused, missing, not the owning active issuer.
        if self._paused:
            return self._reject(op, caller, RegistryError.PAUSED)
        credential = self._credentials.get(credential_id)
        if credential is None:
            return self._reject(
                op, caller, RegistryError.NOT_FOUND,
                credential_id=credential_id_hex(credential_id),
            )
        if not self._is_active_issuer(caller) or credential.issuer != caller:
            return self._reject(
                op, caller, RegistryError.INVALID_ISSUER,
                credential_id=credential_id_hex(credential_id),
            )
        return None

    def _publish_gauges(self) -> None:
        ACTIVE_ISSUERS.set(self._active_issuers)
        ACTIVE_CREDENTIALS.set(self._active_credentials)

    def _accept(self, op: str, caller: str, value, **context) -> Ok:
        REGISTRY_OPERATIONS.labels(operation=op, outcome="ok").inc()
        logger.info(
            "%s ok caller=%s",
            op,
            caller,
            extra={"operation": op, "caller": caller, "outcome": "ok", **context},
        )
        return Ok(value)

    def _reject(self, op: str, caller: str, error: RegistryError, **context) -> Err:
        REGISTRY_OPERATIONS.labels(operation=op, outcome=error.label).inc()
        logger.warning(
            "%s rejected caller=%s error=%s",
            op,
            caller,
            error.name,
            extra={"operation": op, "caller": caller, "outcome": error.label, **context},
        )
        return Err(error)
