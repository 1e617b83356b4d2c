"""
Test fixtures package for segment store tests.

Usage:
    from fixtures.common import make_segments, make_tree

    def test_something():
        tree = make_tree(5)
"""

from .common import (
    make_segment,
    make_segments,
    make_tree,
    make_storage_config,
    make_runtime_config,
)

__all__ = [
    "make_segment",
    "make_segments",
    "make_tree",
    "make_storage_config",
    "make_runtime_config",
]
