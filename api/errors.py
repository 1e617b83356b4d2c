"""
API Error Handling

Standardized error handling for the API. Store exceptions are mapped to
HTTP status codes here and nowhere else.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, SegproofException


# HTTP status per store error code; anything unlisted is a 500
STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.INVALID_NAME: 400,
    ErrorCodes.INVALID_SEGMENT_IDENTIFIER: 400,
    ErrorCodes.INDEX_OUT_OF_RANGE: 400,
    ErrorCodes.MALFORMED_PROOF: 400,
    ErrorCodes.FILE_NOT_FOUND: 404,
    ErrorCodes.SEGMENT_NOT_FOUND: 404,
    ErrorCodes.SEGMENT_EXISTS: 409,
    ErrorCodes.SEGMENT_TOO_LARGE: 413,
    ErrorCodes.EMPTY_TREE: 422,
    ErrorCodes.TREE_NOT_CONSTRUCTED: 422,
    ErrorCodes.STORAGE_UNAVAILABLE: 500,
    ErrorCodes.CORRUPT_RECORD: 500,
    ErrorCodes.MERKLE_PROOF_INVALID: 500,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class MissingFileError(APIError):
    """Required file not provided."""

    def __init__(self, message: str = "Required file not provided"):
        super().__init__(
            code="MISSING_FILE",
            message=message,
            status_code=400,
        )


def status_for(exc: SegproofException) -> int:
    """HTTP status code for a store exception."""
    return STATUS_BY_CODE.get(exc.code, 500)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def segproof_error_handler(request: Request, exc: SegproofException) -> JSONResponse:
    """Handle store and Merkle exceptions."""
    model = exc.to_error_model()
    return JSONResponse(
        status_code=status_for(exc),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=model.code,
                message=model.message,
                details=model.details,
            ),
        ).model_dump(mode="json"),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
