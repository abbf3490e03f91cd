"""
vns_core.utils
--------------
Small helpers for hex encoding and content-link handling. Kept
dependency-free so every layer can import them.
"""

from __future__ import annotations
import binascii

IPFS_SCHEME = "ipfs://"
_FORBIDDEN_LINK_CHARS = ("\t", "\r", "\n")


def hexe(b: bytes) -> str:
    return binascii.hexlify(b).decode("ascii")


def hexd(s: str) -> bytes:
    # raises ValueError on odd length or non-hex characters
    try:
        return binascii.unhexlify(s.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"invalid hex: {e}") from e


def is_storable_link(link: str) -> bool:
    """A link fits in one table line: non-empty, no TAB/CR/LF."""
    if not link:
        return False
    return not any(ch in link for ch in _FORBIDDEN_LINK_CHARS)


def content_path(link: str) -> str:
    """
    Reduce a content link to its gateway path component.

        ipfs://Qm1          -> Qm1
        /ipfs/Qm1/readme    -> Qm1/readme
        Qm1                 -> Qm1
    """
    link = link.strip()
    if link.startswith(IPFS_SCHEME):
        link = link[len(IPFS_SCHEME):]
    elif link.startswith("/ipfs/"):
        link = link[len("/ipfs/"):]
    return link.strip("/")
