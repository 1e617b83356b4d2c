"""
Hashing Utilities
Digest primitive used for leaf hashing and internal node combination.

This module provides:
- SHA-256 hashing for raw bytes
- Concatenation hashing for Merkle parents
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as received (segment bytes are never normalized)
- Parent operands are concatenated left first, with no separator or prefix
- All operations are deterministic
"""
from __future__ import annotations

import hashlib


# Width of every digest handled by the tree, proofs and persisted records
DIGEST_SIZE: int = hashlib.sha256().digest_size


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is used for computing Merkle parent hashes:
    parent = sha256(left + right)

    Args:
        left: Left child digest
        right: Right child digest

    Returns:
        32-byte SHA-256 digest of concatenation
    """
    return sha256(left + right)


def is_digest(value: object) -> bool:
    """Check that a value is a bytes digest of exactly DIGEST_SIZE bytes."""
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Args:
        data: Raw bytes

    Returns:
        Hex string with 0x prefix (e.g., "0x1234abcd")

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not isinstance(hex_string, str):
        raise ValueError(f"Hex value must be a string, got {type(hex_string).__name__}")

    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    # bytes.fromhex raises ValueError for invalid hex chars
    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def digest_from_hex(hex_string: str) -> bytes:
    """
    Decode a 0x-prefixed hex string that must hold exactly one digest.

    Raises:
        ValueError: If the string is not valid hex or does not decode
                   to DIGEST_SIZE bytes
    """
    data = from_hex(hex_string)
    if len(data) != DIGEST_SIZE:
        raise ValueError(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(data)}"
        )
    return data


__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_concat",
    "is_digest",
    "to_hex",
    "from_hex",
    "digest_from_hex",
]
