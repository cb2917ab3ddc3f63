"""Reference pretty-printer for snapshot terms."""

from __future__ import annotations

from typing import List

from .format.document import Document, Group, Highlight, Nest, Text, concat
from .kb.base import ANONYMOUS_NAME, Binder, BinderKind, Signature

_INDENT = 2


class TermPrinter:
    """Lays out terms as tagged documents.

    Quantified binders print as ``∀ (x : A) {y : B}, R`` and anonymous
    non-dependent binders as ``A → R``. Opaque terms print as their text.
    """

    def format(self, term: object) -> Document:
        if isinstance(term, Signature):
            return self._format_signature(term)
        return Text(str(term))

    def _format_signature(self, signature: Signature) -> Document:
        body = self.format(signature.result)
        pending: List[Binder] = []
        for binder in reversed(signature.binders):
            if _is_arrow(binder):
                body = self._quantify(pending, body)
                pending = []
                body = Group(
                    concat(self._domain(binder.type), Text(" →"), Nest(_INDENT, concat(Text(" "), body)))
                )
            else:
                pending.append(binder)
        return self._quantify(pending, body)

    def _quantify(self, pending: List[Binder], body: Document) -> Document:
        if not pending:
            return body
        parts: List[Document] = [Highlight("keyword", Text("∀"))]
        for binder in reversed(pending):
            parts.append(Text(" "))
            parts.append(self._binder(binder))
        parts.append(Text(","))
        parts.append(Nest(_INDENT, concat(Text(" "), body)))
        return Group(concat(*parts))

    def _binder(self, binder: Binder) -> Document:
        opening, closing = binder.kind.brackets
        if binder.name is None and binder.kind is BinderKind.INST_IMPLICIT:
            return concat(Text(opening), self.format(binder.type), Text(closing))
        name = binder.name if binder.name is not None else ANONYMOUS_NAME
        return concat(Text(f"{opening}{name} : "), self.format(binder.type), Text(closing))

    def _domain(self, term: object) -> Document:
        if isinstance(term, Signature) and term.binders:
            return concat(Text("("), self.format(term), Text(")"))
        return self.format(term)


def _is_arrow(binder: Binder) -> bool:
    return binder.name is None and not binder.dependent and binder.kind is BinderKind.DEFAULT


__all__ = ["TermPrinter"]
