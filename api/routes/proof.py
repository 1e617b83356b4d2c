"""
Proof Routes

Generate a Merkle membership proof for a stored segment, and verify a
proof against a root supplied by the caller.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from api.deps import get_store
from api.errors import InvalidRequestError
from api.models.requests import VerifyProofRequest
from api.models.responses import ProofResponse, ProofStepModel, VerifyProofResponse
from core.crypto.hashing import digest_from_hex, from_hex
from core.merkle.merkle_proofs import MerkleVerifier, proof_from_dict, verify_proof
from core.storage.segment_store import SegmentStore


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"])


@router.get("/requestProof/{filename}/{segment_index}", response_model=ProofResponse)
def request_proof(
    filename: str,
    segment_index: str,
    verify: bool | None = Query(default=None, description="Self-check the proof (default: server config)"),
    store: SegmentStore = Depends(get_store),
) -> ProofResponse:
    """
    Request a proof for the segment at segment_index.

    The proof's first step carries the segment's own digest; the following
    steps are sibling digests from the leaf level up to the root.
    """
    result = store.request_proof(filename, segment_index, verify=verify)
    data = result.to_dict()

    logger.info(f"Proof issued for {filename} leaf {result.leaf_index}")

    return ProofResponse(
        ok=True,
        file_name=result.file_name,
        leaf_index=result.leaf_index,
        root=data["root"],
        proof=[ProofStepModel(**step) for step in data["proof"]],
        verified=result.verified,
    )


@router.post("/verifyProof", response_model=VerifyProofResponse)
def verify_proof_route(request: VerifyProofRequest) -> VerifyProofResponse:
    """
    Verify a proof against a trusted root.

    When `segment` is given, the proof must also start from that segment's digest.
    """
    try:
        root = digest_from_hex(request.root)
    except ValueError as e:
        raise InvalidRequestError(f"Invalid root: {e}")

    proof = proof_from_dict(request.proof)

    if request.segment is not None:
        try:
            segment = from_hex(request.segment)
        except ValueError as e:
            raise InvalidRequestError(f"Invalid segment: {e}")
        valid = MerkleVerifier.verify_segment(segment, root, proof)
    else:
        valid = verify_proof(root, proof)

    return VerifyProofResponse(ok=True, valid=valid)
