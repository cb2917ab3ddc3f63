"""Contracts for the knowledge base, pretty-printer and documentation stores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence, Tuple

from ..format.document import Document
from ..models import LibraryNote, ModuleDoc, SourceLocation, TacticDocEntry

# Display name for binders the knowledge base left unnamed.
ANONYMOUS_NAME = "ᾰ"


class BinderKind(str, Enum):
    """Visibility of a parameter slot."""

    DEFAULT = "default"
    IMPLICIT = "implicit"
    STRICT_IMPLICIT = "strict_implicit"
    INST_IMPLICIT = "inst_implicit"

    @property
    def brackets(self) -> Tuple[str, str]:
        return _BRACKETS[self]


_BRACKETS = {
    BinderKind.DEFAULT: ("(", ")"),
    BinderKind.IMPLICIT: ("{", "}"),
    BinderKind.STRICT_IMPLICIT: ("⦃", "⦄"),
    BinderKind.INST_IMPLICIT: ("[", "]"),
}


@dataclass(frozen=True)
class Binder:
    """One parameter of a signature.

    ``name`` is ``None`` for anonymous binders: arrow domains and unnamed
    instance arguments. ``dependent`` records whether anything later in the
    signature refers to the binder.
    """

    name: Optional[str]
    kind: BinderKind
    type: object
    dependent: bool = False


@dataclass(frozen=True)
class Signature:
    """A telescope of binders followed by a result term."""

    binders: Tuple[Binder, ...]
    result: object

    def drop(self, count: int) -> "Signature":
        """Open the first ``count`` binders; they stay in scope by name."""
        return Signature(binders=self.binders[count:], result=self.result)

    @property
    def is_arrow_tail(self) -> bool:
        """True when the telescope is a single trailing non-dependent arrow."""
        if len(self.binders) != 1:
            return False
        (binder,) = self.binders
        return binder.name is None and not binder.dependent and binder.kind is BinderKind.DEFAULT


class KnowledgeBase(Protocol):
    """Read-only queries against a compiled knowledge base."""

    def declaration_names(self) -> Iterable[str]:
        """Every declaration identifier, in a stable order."""

    def category(self, name: str) -> str:
        """One of ``definition``, ``theorem``, ``constant`` or ``axiom``."""

    def location(self, name: str) -> Optional[SourceLocation]:
        ...

    def is_meta(self, name: str) -> bool:
        ...

    def is_internal(self, name: str) -> bool:
        ...

    def is_auto_generated(self, name: str) -> bool:
        ...

    def signature(self, name: str) -> Signature:
        ...

    def has_attribute(self, name: str, attribute: str) -> bool:
        ...

    def equation_lemmas(self, name: str) -> Sequence[str]:
        ...

    def is_structure(self, name: str) -> bool:
        ...

    def structure_fields(self, name: str) -> Sequence[str]:
        """Projection names of a structure's fields, in declaration order."""

    def is_inductive(self, name: str) -> bool:
        ...

    def constructors(self, name: str) -> Sequence[str]:
        ...

    def num_params(self, name: str) -> int:
        """Number of leading parameters shared by an inductive type and its members."""

    def is_core(self, name: str) -> bool:
        """True when the declaration ships with the host's core library."""

    def is_available_from(self, name: str, module: str) -> bool:
        """True when loading ``module`` brings the declaration into scope."""

    def instances(self) -> Iterable[Tuple[str, str]]:
        """``(class, instance)`` pairs in discovery order."""


class PrettyPrinter(Protocol):
    """Turns terms and signatures into tagged documents."""

    def format(self, term: object) -> Document:
        ...


class DocStore(Protocol):
    """Documentation lookups that live outside the knowledge base."""

    def doc_string(self, name: str) -> Optional[str]:
        """Doc string of a declaration; may raise ``LookupError`` when none exists."""

    def module_docs(self) -> Iterable[ModuleDoc]:
        ...

    def library_notes(self) -> Iterable[LibraryNote]:
        ...

    def tactic_docs(self) -> Iterable[TacticDocEntry]:
        ...


__all__ = [
    "ANONYMOUS_NAME",
    "Binder",
    "BinderKind",
    "DocStore",
    "KnowledgeBase",
    "PrettyPrinter",
    "Signature",
]
