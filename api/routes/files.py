"""
List Routes

List stored files, or the segments of one file.
"""

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.models.responses import ListResponse, SegmentListResponse
from core.storage.segment_store import SegmentStore


router = APIRouter(tags=["segments"])


@router.get("/list", response_model=ListResponse)
def list_files(store: SegmentStore = Depends(get_store)) -> ListResponse:
    """List the names of all stored files."""
    return ListResponse(ok=True, files=store.list_files())


@router.get("/list/{filename}", response_model=SegmentListResponse)
def list_segments(
    filename: str,
    store: SegmentStore = Depends(get_store),
) -> SegmentListResponse:
    """List the segments of one file and how many leaves its tree commits to."""
    listing = store.describe_file(filename)
    return SegmentListResponse(
        ok=True,
        file_name=listing.file_name,
        segments=listing.segments,
        leaf_count=listing.leaf_count,
    )
