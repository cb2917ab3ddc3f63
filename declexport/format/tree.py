"""Compact format trees and their JSON encoding.

A format tree has three node kinds:

* ``Leaf(text)`` holds rendered text,
* ``Compose(left, right)`` concatenates two trees,
* ``Nest(inner)`` marks a grouping/indentation boundary with no text of its own.

Encoded as JSON a leaf is a string, ``Compose`` is ``["c", left, right]`` and
``Nest`` is ``["n", inner]``. All walkers here use an explicit stack so deeply
nested trees never hit the interpreter recursion limit.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class Leaf:
    text: str


@dataclass(frozen=True)
class Compose:
    left: "FormatTree"
    right: "FormatTree"


@dataclass(frozen=True)
class Nest:
    inner: "FormatTree"


FormatTree = Union[Leaf, Compose, Nest]


def fuse(left: FormatTree, right: FormatTree) -> FormatTree:
    """Concatenate two trees, merging text leaves that end up adjacent."""
    if isinstance(left, Leaf):
        if isinstance(right, Leaf):
            return Leaf(left.text + right.text)
        if isinstance(right, Compose) and isinstance(right.left, Leaf):
            return Compose(Leaf(left.text + right.left.text), right.right)
    elif isinstance(left, Compose) and isinstance(left.right, Leaf) and isinstance(right, Leaf):
        return Compose(left.left, Leaf(left.right.text + right.text))
    return Compose(left, right)


def render(tree: FormatTree) -> str:
    """Return the text a tree stands for, ignoring nesting hints."""
    parts: List[str] = []
    stack: List[FormatTree] = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            parts.append(node.text)
        elif isinstance(node, Compose):
            stack.append(node.right)
            stack.append(node.left)
        elif isinstance(node, Nest):
            stack.append(node.inner)
        else:
            raise TypeError(f"Not a format tree node: {node!r}")
    return "".join(parts)


def encode_string(text: str) -> str:
    """JSON string literal for ``text``; non-ASCII characters are kept as UTF-8."""
    return json.dumps(text, ensure_ascii=False)


class _Token(str):
    """Punctuation queued between nodes while encoding."""


_SEP = _Token(",")
_CLOSE = _Token("]")


def to_json(tree: FormatTree) -> str:
    """Encode a tree in its compact JSON array form."""
    parts: List[str] = []
    stack: List[Union[FormatTree, _Token]] = [tree]
    while stack:
        item = stack.pop()
        if isinstance(item, _Token):
            parts.append(item)
        elif isinstance(item, Leaf):
            parts.append(encode_string(item.text))
        elif isinstance(item, Compose):
            parts.append('["c",')
            stack.extend((_CLOSE, item.right, _SEP, item.left))
        elif isinstance(item, Nest):
            parts.append('["n",')
            stack.extend((_CLOSE, item.inner))
        else:
            raise TypeError(f"Not a format tree node: {item!r}")
    return "".join(parts)


__all__ = [
    "Compose",
    "FormatTree",
    "Leaf",
    "Nest",
    "encode_string",
    "fuse",
    "render",
    "to_json",
]
