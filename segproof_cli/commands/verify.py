"""
CLI Verify Command

Verify a proof document offline against a trusted root.

The document is the JSON written by `segproof proof --out`. The trusted root
comes from --root; without it the root stored in the document is used, which
only shows the proof is internally consistent.

Usage:
    segproof verify proof.json [--root 0x..] [--segment PATH] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.crypto.hashing import digest_from_hex
from core.merkle.merkle_proofs import MerkleVerifier, proof_from_dict, verify_proof
from core.schemas.errors import MalformedProofException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        0 when the proof reproduces the root, 2 when it does not
    """
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        document = json.loads(proof_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Error: Proof is not valid JSON: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if isinstance(document, list):
        document = {"proof": document}
    elif not isinstance(document, dict):
        raise MalformedProofException(
            f"Proof document must be a JSON object or list, got {type(document).__name__}"
        )

    root_hex = args.root or document.get("root")
    if not root_hex:
        print("Error: No root given and none stored in the proof", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        root = digest_from_hex(root_hex)
    except ValueError as e:
        print(f"Error: Invalid root: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    proof = proof_from_dict(document.get("proof"))

    if args.segment:
        valid = MerkleVerifier.verify_segment(Path(args.segment).read_bytes(), root, proof)
    else:
        valid = verify_proof(root, proof)

    if args.json:
        print(json.dumps({"root": root_hex, "steps": len(proof), "valid": valid}, indent=2))
    else:
        print(f"root: {root_hex}")
        print(f"steps: {len(proof)}")
        print(f"valid: {str(valid).lower()}")

    if valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
