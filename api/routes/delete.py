"""
Delete Route

Remove a file's directory: every segment and the tree record.
"""

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.models.responses import DeleteResponse
from core.storage.segment_store import SegmentStore


router = APIRouter(tags=["segments"])


@router.delete("/delete/{filename}", response_model=DeleteResponse)
def delete_file(
    filename: str,
    store: SegmentStore = Depends(get_store),
) -> DeleteResponse:
    """Delete a file. Deleting a missing file succeeds with deleted=false."""
    deleted = store.delete_file(filename)
    return DeleteResponse(ok=True, file_name=filename, deleted=deleted)
