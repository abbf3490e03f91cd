"""
vns_core.crypto
---------------
Signature gate for name-record writes.

- ECDSA keys (any curve): DER/ASN.1 signature, SHA-256 over the link bytes
- Ed25519 keys: raw 64-byte signature over the link bytes

The signed message is exactly the link. Verification is deterministic and
has no side effects.

Key generation and signing live here too, for clients producing records
and for tests. The store itself only ever verifies.
"""

from __future__ import annotations
from typing import Tuple, Union
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from .identifier import PublicKey
from .utils import hexe

PrivateKey = Union[ec.EllipticCurvePrivateKey, ed25519.Ed25519PrivateKey]

KEY_KINDS = ("p256", "p224", "ed25519")

_CURVES = {
    "p256": ec.SECP256R1,
    "p224": ec.SECP224R1,
}


# --------- verify (write path) ----------
def verify_signature(public_key: PublicKey, message: bytes, signature: bytes) -> bool:
    try:
        if isinstance(public_key, ed25519.Ed25519PublicKey):
            public_key.verify(signature, message)
        elif isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(signature, message, ec.ECDSA(hashes.SHA256()))
        else:
            return False
        return True
    except (InvalidSignature, ValueError):
        return False


# --------- client helpers ----------
def generate_keypair(kind: str = "p256") -> Tuple[PrivateKey, PublicKey]:
    if kind == "ed25519":
        sk = ed25519.Ed25519PrivateKey.generate()
    elif kind in _CURVES:
        sk = ec.generate_private_key(_CURVES[kind]())
    else:
        raise ValueError(f"Unknown key kind: {kind}")
    return sk, sk.public_key()


def public_key_der(public_key: PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def public_key_hex(public_key: PublicKey) -> str:
    return hexe(public_key_der(public_key))


def make_identifier(name: str, public_key: PublicKey) -> str:
    return f"{name}:{public_key_hex(public_key)}"


def sign_link(private_key: PrivateKey, link: str) -> bytes:
    data = link.encode("utf-8")
    if isinstance(private_key, ed25519.Ed25519PrivateKey):
        return private_key.sign(data)
    return private_key.sign(data, ec.ECDSA(hashes.SHA256()))
