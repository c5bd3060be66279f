"""Credential ID derivation and field validation helpers.

A credential ID is the SHA-256 digest of a length-prefixed encoding of
``(did, vaccine_type, batch_number, issue_date)`` in that order:

    preimage = lp(b"vaxcred/v1") + lp(did) + lp(vaccine_type)
             + lp(batch_number) + lp(str(issue_date))

    lp(x) = len(x).to_bytes(4, "big") + x     (x as UTF-8 bytes)

Length prefixes keep field boundaries unambiguous: ("ab", "c") and
("a", "bc") produce different preimages.  The encoding is part of the
ID contract; changing it changes every credential ID.
"""

from __future__ import annotations

import hashlib

DID_PREFIX = "did:stack:"
MAX_METADATA_LEN = 500
MAX_BATCH_NUMBER_LEN = 50

_DOMAIN_TAG = b"vaxcred/v1"
_LEN_BYTES = 4


def _length_prefixed(data: bytes) -> bytes:
    return len(data).to_bytes(_LEN_BYTES, "big") + data


def encode_id_preimage(
    did: str, vaccine_type: str, batch_number: str, issue_date: int
) -> bytes:
    if not is_timestamp(issue_date):
        raise TypeError(f"issue_date must be an int (got {type(issue_date).__name__})")
    fields = (
        _DOMAIN_TAG,
        did.encode("utf-8"),
        vaccine_type.encode("utf-8"),
        batch_number.encode("utf-8"),
        str(issue_date).encode("ascii"),
    )
    return b"".join(_length_prefixed(f) for f in fields)


def derive_credential_id(
    did: str, vaccine_type: str, batch_number: str, issue_date: int
) -> bytes:
    """Return the 32-byte content ID for a credential tuple."""
    preimage = encode_id_preimage(did, vaccine_type, batch_number, issue_date)
    return hashlib.sha256(preimage).digest()


def credential_id_hex(credential_id: bytes) -> str:
    return credential_id.hex()


def is_valid_did(did: str) -> bool:
    # Syntactic only; DID resolution is someone else's job.
    return did.startswith(DID_PREFIX)


def text_len(value: str) -> int:
    """Length in characters, the unit all text limits are expressed in."""
    return len(value)


def metadata_too_long(metadata: str) -> bool:
    return text_len(metadata) > MAX_METADATA_LEN


def batch_number_too_long(batch_number: str) -> bool:
    return text_len(batch_number) > MAX_BATCH_NUMBER_LEN


def is_timestamp(value: object) -> bool:
    """Integer timestamps only; bool is an int subclass but not a date."""
    return isinstance(value, int) and not isinstance(value, bool)
