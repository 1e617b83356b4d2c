"""API request and response models."""

from api.models.requests import VerifyProofRequest
from api.models.responses import (
    HealthResponse,
    UploadResponse,
    ProofStepModel,
    ProofResponse,
    VerifyProofResponse,
    ListResponse,
    SegmentListResponse,
    DeleteResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "VerifyProofRequest",
    "HealthResponse",
    "UploadResponse",
    "ProofStepModel",
    "ProofResponse",
    "VerifyProofResponse",
    "ListResponse",
    "SegmentListResponse",
    "DeleteResponse",
    "ErrorDetail",
    "ErrorResponse",
]
