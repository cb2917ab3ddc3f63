"""Tagged document model produced by pretty-printers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Text:
    """Already-rendered text."""

    text: str


@dataclass(frozen=True)
class Compose:
    """Two documents printed one after the other."""

    left: "Document"
    right: "Document"


@dataclass(frozen=True)
class Group:
    """Layout group: break all line hints in the body or none of them."""

    body: "Document"


@dataclass(frozen=True)
class Nest:
    """Indent continuation lines of the body by ``indent`` columns."""

    indent: int
    body: "Document"


@dataclass(frozen=True)
class Highlight:
    """Colour hint for terminals and editors."""

    colour: str
    body: "Document"


@dataclass(frozen=True)
class Tag:
    """Arbitrary printer annotation attached to the body."""

    tag: object
    body: "Document"


Document = Union[Text, Compose, Group, Nest, Highlight, Tag]

WRAPPER_KINDS: tuple[type, ...] = (Group, Nest, Highlight, Tag)


def concat(*parts: Document) -> Document:
    """Right-associated composition of ``parts``; an empty call yields empty text."""
    if not parts:
        return Text("")
    result = parts[-1]
    for part in reversed(parts[:-1]):
        result = Compose(part, result)
    return result


__all__ = [
    "Compose",
    "Document",
    "Group",
    "Highlight",
    "Nest",
    "Tag",
    "Text",
    "WRAPPER_KINDS",
    "concat",
]
