"""
Upload Route

Store one segment of a file and commit it to the file's Merkle tree.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from api.deps import get_store
from api.errors import MissingFileError
from api.models.responses import UploadResponse
from core.crypto.hashing import to_hex
from core.schemas.errors import SegmentTooLargeException
from core.storage.segment_store import SegmentStore


logger = logging.getLogger(__name__)

router = APIRouter(tags=["segments"])


@router.post("/upload/{filename}", response_model=UploadResponse)
def upload_file(
    filename: str,
    file: UploadFile = File(..., description="Segment content; its filename names the segment"),
    store: SegmentStore = Depends(get_store),
) -> UploadResponse:
    """
    Upload a segment.

    The multipart part's filename becomes the segment name. Segments are
    assigned leaf indices in the order they are accepted.
    """
    if file is None or not file.filename:
        raise MissingFileError("No file uploaded")

    max_size = store.config.max_upload_size
    # One byte past the limit is enough to detect an oversized segment
    data = file.file.read(max_size + 1)
    if len(data) > max_size:
        raise SegmentTooLargeException(len(data), max_size)

    result = store.upload_segment(filename, file.filename, data)

    return UploadResponse(
        ok=True,
        file_name=result.file_name,
        segment_name=result.segment_name,
        leaf_index=result.leaf_index,
        leaf_digest=to_hex(result.leaf_digest),
        leaf_count=result.leaf_count,
    )
