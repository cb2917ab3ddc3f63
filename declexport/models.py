"""Core records shared across declexport components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .format.tree import FormatTree


class UnknownDeclarationKindError(RuntimeError):
    """Raised when the knowledge base reports a category outside the known four."""


class DeclKind(str, Enum):
    """Mutually exclusive classification of a declaration."""

    DEFINITION = "def"
    THEOREM = "thm"
    CONSTANT = "cnst"
    AXIOM = "ax"

    @classmethod
    def from_category(cls, category: str) -> "DeclKind":
        try:
            return _KIND_BY_CATEGORY[category]
        except KeyError:
            raise UnknownDeclarationKindError(
                f"Unknown declaration category: {category!r}"
            ) from None


_KIND_BY_CATEGORY = {
    "definition": DeclKind.DEFINITION,
    "theorem": DeclKind.THEOREM,
    "constant": DeclKind.CONSTANT,
    "axiom": DeclKind.AXIOM,
}


@dataclass(frozen=True)
class SourceLocation:
    """Where the knowledge base says a declaration was written."""

    filename: Optional[str]
    line: Optional[int]


@dataclass(frozen=True)
class DeclArg:
    """One peeled parameter, rendered with its brackets."""

    implicit: bool
    arg: FormatTree


@dataclass(frozen=True)
class DeclInfo:
    """Documentation record for a single exported declaration."""

    name: str
    is_meta: bool
    args: Tuple[DeclArg, ...]
    type: FormatTree
    doc_string: Optional[str]
    filename: str
    line: int
    attributes: Tuple[str, ...]
    equations: Tuple[FormatTree, ...]
    kind: DeclKind
    structure_fields: Tuple[Tuple[str, FormatTree], ...] = ()
    constructors: Tuple[Tuple[str, FormatTree], ...] = ()

    def __post_init__(self) -> None:
        if self.structure_fields and self.constructors:
            raise ValueError(f"{self.name}: structure fields and constructors are exclusive")


@dataclass(frozen=True)
class ModuleDoc:
    """Module-level documentation block."""

    filename: str
    line: int
    content: str


@dataclass(frozen=True)
class LibraryNote:
    label: str
    text: str


@dataclass(frozen=True)
class TacticDocEntry:
    """Documentation for a tactic, command or attribute."""

    name: str
    category: str
    decl_names: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    description: str = ""


__all__ = [
    "DeclArg",
    "DeclInfo",
    "DeclKind",
    "LibraryNote",
    "ModuleDoc",
    "SourceLocation",
    "TacticDocEntry",
    "UnknownDeclarationKindError",
]
