"""
Download Route

Serve the stored bytes of one segment.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.deps import get_store
from core.storage.segment_store import SegmentStore


router = APIRouter(tags=["segments"])


@router.get("/download/{filename}/{segment_name}")
def download_file(
    filename: str,
    segment_name: str,
    store: SegmentStore = Depends(get_store),
) -> Response:
    """Download a stored segment as application/octet-stream."""
    data = store.read_segment(filename, segment_name)
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{segment_name}"'},
    )
