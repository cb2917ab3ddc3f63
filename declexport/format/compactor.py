"""Reduce tagged documents to compact format trees."""

from __future__ import annotations

from typing import List, Tuple

from . import document
from .tree import FormatTree, Leaf, Nest, fuse


def compact(raw: document.Document) -> FormatTree:
    """Collapse a tagged document into a :data:`FormatTree`.

    Group, nest, highlight and tag wrappers all become ``Nest``; their indent,
    colour and tag payloads are dropped. Text becomes ``Leaf`` and
    compositions are fused so adjacent text ends up in a single leaf.
    """
    results: List[FormatTree] = []
    # (node, expanded) frames; a node is reduced once its children are on ``results``.
    stack: List[Tuple[document.Document, bool]] = [(raw, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, document.Text):
            results.append(Leaf(node.text))
        elif isinstance(node, document.Compose):
            if expanded:
                right = results.pop()
                left = results.pop()
                results.append(fuse(left, right))
            else:
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))
        elif isinstance(node, document.WRAPPER_KINDS):
            if expanded:
                results.append(Nest(results.pop()))
            else:
                stack.append((node, True))
                stack.append((node.body, False))
        else:
            raise TypeError(f"Unsupported document node: {type(node).__name__}")
    return results.pop()


__all__ = ["compact"]
