"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "segproof-api"
    version: str = "v1"


class UploadResponse(BaseModel):
    """Response for POST /upload/{filename} endpoint."""

    ok: bool = True
    file_name: str = Field(..., description="Logical file the segment was added to")
    segment_name: str = Field(..., description="Stored segment name")
    leaf_index: int = Field(..., description="Leaf index assigned to the segment")
    leaf_digest: str = Field(..., description="SHA-256 of the segment (0x-prefixed hex)")
    leaf_count: int = Field(..., description="Number of segments now committed")


class ProofStepModel(BaseModel):
    """One step of a Merkle proof."""

    digest: str = Field(..., description="0x-prefixed hex digest")
    orientation: str = Field(..., description="left or right")


class ProofResponse(BaseModel):
    """Response for GET /requestProof/{filename}/{segment_index} endpoint."""

    ok: bool = True
    file_name: str = Field(..., description="Logical file name")
    leaf_index: int = Field(..., description="Proven leaf index")
    root: str = Field(..., description="Merkle root the proof verifies against")
    proof: list[ProofStepModel] = Field(
        default_factory=list,
        description="Leaf digest followed by sibling digests, bottom-up",
    )
    verified: bool | None = Field(
        default=None,
        description="Server-side self-check result (omitted when disabled)",
    )


class VerifyProofResponse(BaseModel):
    """Response for POST /verifyProof endpoint."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof reproduces the root")


class ListResponse(BaseModel):
    """Response for GET /list endpoint."""

    ok: bool = True
    files: list[str] = Field(default_factory=list)


class SegmentListResponse(BaseModel):
    """Response for GET /list/{filename} endpoint."""

    ok: bool = True
    file_name: str
    segments: list[str] = Field(default_factory=list)
    leaf_count: int = 0


class DeleteResponse(BaseModel):
    """Response for DELETE /delete/{filename} endpoint."""

    ok: bool = True
    file_name: str
    deleted: bool = Field(..., description="False when the file did not exist")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
