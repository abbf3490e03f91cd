"""
VNS Core Package
================
Verified name-record store binding self-certifying identifiers
(``name:hexpubkey``) to content links.

Provides:
- Identifier codec and canonicalization
- ECDSA/Ed25519 signature gate for writes
- Flat-file record table (pluggable, memory provider for tests)
- Content-fetch adapters (IPFS HTTP gateway, local directory)
"""

__version__ = "0.1.0"
