"""
API Request Models

Pydantic models for API request validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class VerifyProofRequest(BaseModel):
    """Request body for POST /verifyProof endpoint."""

    root: str = Field(
        ...,
        description="Trusted Merkle root (0x-prefixed hex)",
    )
    proof: list[dict[str, Any]] = Field(
        ...,
        description="Proof steps as returned by /requestProof",
    )
    segment: str | None = Field(
        default=None,
        description="Optional hex segment bytes (0x-prefixed) the proof must start from",
    )
