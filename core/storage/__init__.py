"""
Segment storage: on-disk segments, per-file tree records and the
per-file lock registry that serializes their updates.
"""

from .locks import FileLockRegistry, ReadWriteLock
from .segment_store import (
    FileListing,
    ProofResult,
    SegmentStore,
    UploadResult,
    parse_segment_index,
    validate_name,
)

__all__ = [
    "FileListing",
    "FileLockRegistry",
    "ReadWriteLock",
    "ProofResult",
    "SegmentStore",
    "UploadResult",
    "parse_segment_index",
    "validate_name",
]
