"""
Common test fixtures shared by all modules.

Provides factory functions for:
- raw segment bytes
- built MerkleTree instances
- StorageConfig / RuntimeConfig rooted in a temporary directory
"""

from pathlib import Path

from core.config.runtime import RuntimeConfig, ServerConfig, StorageConfig
from core.merkle.merkle_tree import MerkleTree


def make_segment(index: int, size: int = 16) -> bytes:
    """Deterministic segment content for a given index."""
    seed = f"segment-{index:04d}|".encode("utf-8")
    return (seed * (size // len(seed) + 1))[:size]


def make_segments(count: int, size: int = 16) -> list[bytes]:
    """count distinct segments."""
    return [make_segment(i, size) for i in range(count)]


def make_tree(count: int, built: bool = True) -> MerkleTree:
    """Tree over make_segments(count), built by default."""
    tree = MerkleTree().add_leaves(make_segments(count))
    return tree.build() if built else tree


def make_storage_config(root: Path, **overrides) -> StorageConfig:
    """StorageConfig with uploads under root."""
    params = {"uploads_dir": str(root / "uploads")}
    params.update(overrides)
    return StorageConfig(**params)


def make_runtime_config(root: Path, **storage_overrides) -> RuntimeConfig:
    """RuntimeConfig with uploads under root and a loopback server."""
    return RuntimeConfig(
        storage=make_storage_config(root, **storage_overrides),
        server=ServerConfig(host="127.0.0.1", port=8080),
        log_level="DEBUG",
    )
