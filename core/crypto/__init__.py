"""
Core cryptographic utilities.

Provides the SHA-256 digest primitive shared by the Merkle tree,
the proof engine and the persisted tree record.
"""
from .hashing import (
    DIGEST_SIZE,
    sha256,
    hash_concat,
    is_digest,
    to_hex,
    from_hex,
    digest_from_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_concat",
    "is_digest",
    "to_hex",
    "from_hex",
    "digest_from_hex",
]
