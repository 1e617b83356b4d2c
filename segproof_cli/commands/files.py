"""
CLI File Commands

List, download and delete stored files and segments.

Usage:
    segproof list [<file_name>] [--json]
    segproof download <file_name> <segment_name> --out PATH
    segproof delete <file_name>
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from core.storage.segment_store import SegmentStore


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def list_cmd(args: Namespace) -> int:
    """List files, or the segments of one file."""
    store: SegmentStore = args.store

    if args.file_name:
        names = store.list_segments(args.file_name)
    else:
        names = store.list_files()

    if args.json:
        print(json.dumps(names, indent=2))
    else:
        for name in names:
            print(name)

    return EXIT_SUCCESS


def download_cmd(args: Namespace) -> int:
    """Copy a stored segment to a local path."""
    store: SegmentStore = args.store
    out_path = Path(args.out)

    if out_path.exists() and not args.force:
        print(f"Error: Output already exists: {out_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    data = store.read_segment(args.file_name, args.segment_name)
    out_path.write_bytes(data)
    print(f"Wrote {len(data)} bytes to {out_path}")
    return EXIT_SUCCESS


def delete_cmd(args: Namespace) -> int:
    """Delete a file and all of its segments."""
    store: SegmentStore = args.store

    if store.delete_file(args.file_name):
        print(f"Deleted: {args.file_name}")
    else:
        print(f"Not found: {args.file_name}")
    return EXIT_SUCCESS
