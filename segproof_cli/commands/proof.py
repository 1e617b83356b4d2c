"""
CLI Proof Commands

Generate a membership proof for a stored segment, or print a file's root.

Usage:
    segproof proof <file_name> <segment_index> [--no-verify] [--out PATH] [--json]
    segproof root <file_name>
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from core.crypto.hashing import to_hex
from core.schemas.canonical import dumps_canonical
from core.storage.segment_store import SegmentStore


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0


def proof_cmd(args: Namespace) -> int:
    """Execute the proof command."""
    store: SegmentStore = args.store
    verify = False if args.no_verify else None

    result = store.request_proof(args.file_name, args.segment_index, verify=verify)
    document = result.to_dict()

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(dumps_canonical(document) + "\n", encoding="utf-8")
        logger.info(f"Proof written to {out_path}")

    if args.json:
        print(json.dumps(document, indent=2))
    else:
        print(f"file: {document['file_name']}")
        print(f"leaf_index: {document['leaf_index']}")
        print(f"root: {document['root']}")
        if result.verified is not None:
            print(f"verified: {str(result.verified).lower()}")
        print(f"proof ({len(document['proof'])} steps):")
        for step in document["proof"]:
            print(f"  {step['orientation']:>5} {step['digest']}")

    return EXIT_SUCCESS


def root_cmd(args: Namespace) -> int:
    """Execute the root command."""
    store: SegmentStore = args.store
    print(to_hex(store.root(args.file_name)))
    return EXIT_SUCCESS
