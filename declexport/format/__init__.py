"""Format trees: compaction of printer output and JSON encoding."""

from .compactor import compact
from .tree import Compose, FormatTree, Leaf, Nest, encode_string, fuse, render, to_json

__all__ = [
    "Compose",
    "FormatTree",
    "Leaf",
    "Nest",
    "compact",
    "encode_string",
    "fuse",
    "render",
    "to_json",
]
