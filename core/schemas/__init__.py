"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module: error taxonomy,
record/proof shapes and canonical serialization.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SchemaVersion,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    CorruptRecordException,
    EmptyTreeException,
    ErrorCodes,
    FileNotFoundException,
    IndexOutOfRangeException,
    InvalidNameException,
    InvalidSegmentIdentifierException,
    MalformedProofException,
    MerkleVerificationException,
    SegmentExistsException,
    SegmentNotFoundException,
    SegmentTooLargeException,
    SegproofError,
    SegproofException,
    StorageUnavailableException,
    TreeNotConstructedException,
)

# Record schemas
from .tree import (
    ProofRecord,
    ProofStepRecord,
    TreeRecord,
)


__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SchemaVersion",
    # Canonical serialization
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "ErrorCodes",
    "SegproofError",
    "SegproofException",
    "EmptyTreeException",
    "TreeNotConstructedException",
    "IndexOutOfRangeException",
    "MalformedProofException",
    "MerkleVerificationException",
    "StorageUnavailableException",
    "CorruptRecordException",
    "FileNotFoundException",
    "SegmentNotFoundException",
    "SegmentExistsException",
    "SegmentTooLargeException",
    "InvalidNameException",
    "InvalidSegmentIdentifierException",
    # Records
    "TreeRecord",
    "ProofStepRecord",
    "ProofRecord",
]
