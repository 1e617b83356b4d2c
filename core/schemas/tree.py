"""
Schemas
File: tree.py

Purpose: Wire/record shapes for the Merkle core.
- TreeRecord: the persisted form of a tree (every level, every digest, built flag)
- ProofStepRecord / ProofRecord: the JSON form of a proof

Digests are carried as 0x-prefixed lowercase hex strings of exactly 32 bytes.
These models hold data only; conversion to MerkleTree/ProofStep lives in
core.merkle so that this module has no dependency on the tree engine.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator

from core.crypto.hashing import digest_from_hex
from .versioning import SCHEMA_VERSION, SchemaVersion


def _check_digest(value: str) -> str:
    digest_from_hex(value)
    return value.lower()


class TreeRecord(BaseModel):
    """
    Persisted tree record.

    Structural rules enforced on validation:
    - every digest is a 0x-prefixed 32-byte hex string
    - no level after level 0 is empty
    - len(levels[k + 1]) == ceil(len(levels[k]) / 2)
    - built implies the topmost level holds exactly one digest
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: SchemaVersion = Field(default=SCHEMA_VERSION)
    levels: list[list[str]] = Field(
        default_factory=list,
        description="Digests per level, level 0 first (the leaves)",
    )
    built: bool = Field(
        default=False,
        description="Whether upper levels were derived up to a single root",
    )

    @field_validator("levels")
    @classmethod
    def validate_digests(cls, levels: list[list[str]]) -> list[list[str]]:
        return [[_check_digest(d) for d in level] for level in levels]

    @model_validator(mode="after")
    def validate_shape(self) -> "TreeRecord":
        for k in range(1, len(self.levels)):
            below = len(self.levels[k - 1])
            expected = (below + 1) // 2
            if below == 0 or len(self.levels[k]) != expected:
                raise ValueError(
                    f"Level {k} has {len(self.levels[k])} nodes, "
                    f"expected {expected} from {below} nodes below"
                )
            if below == 1:
                raise ValueError(f"Level {k} found above a single-node level")
        if self.built and (not self.levels or len(self.levels[-1]) != 1):
            raise ValueError("Record marked built but has no single root")
        return self

    @property
    def leaf_count(self) -> int:
        return len(self.levels[0]) if self.levels else 0


class ProofStepRecord(BaseModel):
    """JSON form of one ProofStep."""

    model_config = ConfigDict(extra="forbid")

    digest: str = Field(..., description="0x-prefixed 32-byte hex digest")
    orientation: Literal["left", "right"] = Field(
        ...,
        description="Operand position of this digest during recombination",
    )

    @field_validator("digest")
    @classmethod
    def validate_digest(cls, value: str) -> str:
        return _check_digest(value)

    @property
    def digest_bytes(self) -> bytes:
        return digest_from_hex(self.digest)


class ProofRecord(RootModel[list[ProofStepRecord]]):
    """JSON form of a whole proof (an ordered list of steps)."""

    @model_validator(mode="after")
    def validate_not_empty(self) -> "ProofRecord":
        if not self.root:
            raise ValueError("Proof has no elements")
        return self

    @classmethod
    def from_data(cls, data: Any) -> "ProofRecord":
        return cls.model_validate(data)


__all__ = [
    "TreeRecord",
    "ProofStepRecord",
    "ProofRecord",
]
