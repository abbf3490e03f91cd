"""
vns_core.identifier
-------------------
Self-certifying identifiers of the form ``name:hexpubkey``.

- The first ``:`` is the boundary; the name is everything before it and
  must be non-empty.
- The key segment is the hex encoding of a DER SubjectPublicKeyInfo blob.
- Hex casing is not significant; the canonical form is lowercase.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from .errors import MalformedIdentifierError, InvalidPublicKeyEncodingError
from .utils import hexe, hexd

SEPARATOR = ":"

PublicKey = Union[ec.EllipticCurvePublicKey, ed25519.Ed25519PublicKey]


def split_identifier(identifier: str) -> Tuple[int, str, str]:
    """
    Split at the first ``:``.

    Returns (boundary, name_prefix, pubkey_hex) where boundary is the index
    just past the separator and name_prefix keeps the separator.
    """
    idx = identifier.find(SEPARATOR)
    if idx < 0:
        raise MalformedIdentifierError(f"identifier has no '{SEPARATOR}' separator")
    if idx == 0:
        raise MalformedIdentifierError("identifier name is empty")
    if any(ch in identifier for ch in ("\t", "\r", "\n")):
        raise MalformedIdentifierError("identifier contains a tab or line break")
    boundary = idx + 1
    return boundary, identifier[:boundary], identifier[boundary:]


def decode_key_bytes(pubkey_hex: str) -> bytes:
    if not pubkey_hex:
        raise InvalidPublicKeyEncodingError("public key segment is empty")
    try:
        return hexd(pubkey_hex)
    except ValueError as e:
        raise InvalidPublicKeyEncodingError(f"public key segment is not hex: {e}") from e


def load_public_key(der: bytes) -> PublicKey:
    try:
        key = serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as e:
        raise InvalidPublicKeyEncodingError(f"public key does not parse as SubjectPublicKeyInfo: {e}") from e
    if not isinstance(key, (ec.EllipticCurvePublicKey, ed25519.Ed25519PublicKey)):
        raise InvalidPublicKeyEncodingError(f"unsupported public key type: {type(key).__name__}")
    return key


def decode_public_key(pubkey_hex: str) -> PublicKey:
    return load_public_key(decode_key_bytes(pubkey_hex))


@dataclass(frozen=True)
class Identifier:
    name: str
    public_key: bytes  # DER SubjectPublicKeyInfo

    @classmethod
    def parse(cls, identifier: str, validate_key: bool = True) -> "Identifier":
        """
        Parse ``name:hexpubkey``. With validate_key the key bytes must load as
        a supported public key; without it only the hex is checked (used when
        scanning already-stored lines).
        """
        _, prefix, pubkey_hex = split_identifier(identifier)
        raw = decode_key_bytes(pubkey_hex)
        if validate_key:
            load_public_key(raw)
        return cls(name=prefix[:-len(SEPARATOR)], public_key=raw)

    @property
    def prefix(self) -> str:
        return self.name + SEPARATOR

    def key(self) -> PublicKey:
        return load_public_key(self.public_key)

    def __str__(self) -> str:
        return self.prefix + hexe(self.public_key)


def canonicalize(identifier: str) -> str:
    """Lowercase the key hex, keep the name as given."""
    return str(Identifier.parse(identifier))
