"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for the segment store and its Merkle core.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

None of these errors is retried internally; every one is terminal for the
operation that raised it and is translated by the caller (api or CLI).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the store."""

    # Tree Errors
    EMPTY_TREE = "EMPTY_TREE"
    TREE_NOT_CONSTRUCTED = "TREE_NOT_CONSTRUCTED"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"

    # Proof Errors
    MALFORMED_PROOF = "MALFORMED_PROOF"
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"

    # Persistence Errors
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    CORRUPT_RECORD = "CORRUPT_RECORD"

    # Segment Store Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    SEGMENT_NOT_FOUND = "SEGMENT_NOT_FOUND"
    SEGMENT_EXISTS = "SEGMENT_EXISTS"
    SEGMENT_TOO_LARGE = "SEGMENT_TOO_LARGE"
    INVALID_NAME = "INVALID_NAME"
    INVALID_SEGMENT_IDENTIFIER = "INVALID_SEGMENT_IDENTIFIER"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class SegproofError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error has to cross a boundary as data (api responses,
    CLI JSON output) rather than as a raised exception.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INDEX_OUT_OF_RANGE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class SegproofException(Exception):
    """
    Base exception for all segment store errors.

    This exception carries structured error information and can be
    converted to a SegproofError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "SEGPROOF_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> SegproofError:
        """Convert this exception to a SegproofError model."""
        return SegproofError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyTreeException(SegproofException):
    """Exception raised when a tree with zero leaves is built or proven."""

    def __init__(
        self,
        message: str = "Merkle tree has no leaves",
        code: str = ErrorCodes.EMPTY_TREE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class TreeNotConstructedException(EmptyTreeException):
    """Exception raised when a proof or root is requested from an unbuilt tree."""

    def __init__(
        self,
        message: str = "Merkle tree is not properly constructed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_NOT_CONSTRUCTED,
            details=details,
        )


class IndexOutOfRangeException(SegproofException):
    """Exception raised when a proof is requested for a leaf index outside [0, n)."""

    def __init__(
        self,
        leaf_index: Any,
        leaf_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["leaf_index"] = leaf_index
        full_details["leaf_count"] = leaf_count
        super().__init__(
            message=f"Leaf index {leaf_index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
        )
        self.leaf_index = leaf_index
        self.leaf_count = leaf_count


class MalformedProofException(SegproofException):
    """Exception raised when a proof is empty or carries a digest of the wrong width."""

    def __init__(
        self,
        message: str,
        step: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if step is not None:
            full_details["step"] = step
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
        )


class MerkleVerificationException(SegproofException):
    """Exception raised when a freshly generated proof fails its self-check."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
        )


class StorageUnavailableException(SegproofException):
    """Exception raised when reading or writing at the storage boundary fails."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.STORAGE_UNAVAILABLE,
            details=full_details,
        )


class CorruptRecordException(SegproofException):
    """Exception raised when persisted bytes do not parse into a valid tree."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.CORRUPT_RECORD,
            details=full_details,
        )


class FileNotFoundException(SegproofException):
    """Exception raised when a logical file has no tree record."""

    def __init__(self, file_name: str) -> None:
        super().__init__(
            message=f"File not found: {file_name}",
            code=ErrorCodes.FILE_NOT_FOUND,
            details={"file_name": file_name},
        )


class SegmentNotFoundException(SegproofException):
    """Exception raised when a stored segment does not exist."""

    def __init__(self, file_name: str, segment_name: str) -> None:
        super().__init__(
            message=f"Segment not found: {file_name}/{segment_name}",
            code=ErrorCodes.SEGMENT_NOT_FOUND,
            details={"file_name": file_name, "segment_name": segment_name},
        )


class SegmentExistsException(SegproofException):
    """Exception raised when uploading a segment name that is already stored."""

    def __init__(self, file_name: str, segment_name: str) -> None:
        super().__init__(
            message=(
                f"Segment already exists: {file_name}/{segment_name}. "
                "Rename the segment or delete the file before uploading it again"
            ),
            code=ErrorCodes.SEGMENT_EXISTS,
            details={"file_name": file_name, "segment_name": segment_name},
        )


class SegmentTooLargeException(SegproofException):
    """Exception raised when a segment exceeds the configured upload size."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            message=f"Segment of {size} bytes exceeds the {max_size} byte limit",
            code=ErrorCodes.SEGMENT_TOO_LARGE,
            details={"size": size, "max_size": max_size},
        )


class InvalidNameException(SegproofException):
    """Exception raised for file or segment names that cannot be stored safely."""

    def __init__(self, name: str, kind: str = "name") -> None:
        super().__init__(
            message=f"Invalid {kind}: {name!r}",
            code=ErrorCodes.INVALID_NAME,
            details={"name": name, "kind": kind},
        )


class InvalidSegmentIdentifierException(SegproofException):
    """Exception raised when a segment identifier is not an integer leaf index."""

    def __init__(self, identifier: Any) -> None:
        super().__init__(
            message=f"Invalid segment index: {identifier!r}",
            code=ErrorCodes.INVALID_SEGMENT_IDENTIFIER,
            details={"identifier": str(identifier)},
        )
