"""
API Dependencies

Dependency injection for the API.
The application owns one SegmentStore (and so one lock registry); routes
receive it through get_store so tests can swap it out.
"""

from __future__ import annotations

import logging

from fastapi import Request

from core.config.runtime import RuntimeConfig, get_default_config
from core.storage.segment_store import SegmentStore

logger = logging.getLogger(__name__)


def build_store(config: RuntimeConfig | None = None) -> SegmentStore:
    """Create the SegmentStore for an application instance."""
    config = config or get_default_config()
    logger.info(f"Serving segments from {config.storage.uploads_path.resolve()}")
    return SegmentStore(config.storage)


def get_store(request: Request) -> SegmentStore:
    """SegmentStore of the running application."""
    return request.app.state.store
