"""
CLI Upload Command

Store a local file as one segment of a logical file.

Usage:
    segproof upload <file_name> <path> [--segment-name NAME] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.storage.segment_store import SegmentStore


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def upload_cmd(args: Namespace) -> int:
    """
    Execute the upload command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    store: SegmentStore = args.store
    path = Path(args.path)

    if not path.is_file():
        print(f"Error: Segment source not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    segment_name = args.segment_name or path.name
    result = store.upload_segment(args.file_name, segment_name, path.read_bytes())

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        data = result.to_dict()
        print(f"file: {data['file_name']}")
        print(f"segment: {data['segment_name']}")
        print(f"leaf_index: {data['leaf_index']}")
        print(f"leaf_digest: {data['leaf_digest']}")
        print(f"leaf_count: {data['leaf_count']}")

    return EXIT_SUCCESS
