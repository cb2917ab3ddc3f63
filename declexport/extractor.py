"""Build documentation records for individual declarations."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .config import ExportConfig
from .format.compactor import compact
from .format.tree import FormatTree, Leaf, fuse
from .kb.base import ANONYMOUS_NAME, Binder, BinderKind, DocStore, KnowledgeBase, PrettyPrinter, Signature
from .logging import get_logger
from .models import DeclArg, DeclInfo, DeclKind

# Attributes worth surfacing in the docs; anything else is not queried.
ATTRIBUTE_CHECKLIST: tuple[str, ...] = (
    "simp",
    "squash_cast",
    "move_cast",
    "elim_cast",
    "norm_cast",
    "nolint",
    "ext",
    "instance",
    "class",
)

Members = Tuple[Tuple[str, FormatTree], ...]


class EntryExtractor:
    """Queries the knowledge base and printer to describe one declaration."""

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        printer: PrettyPrinter,
        doc_store: DocStore,
        *,
        config: ExportConfig | None = None,
    ) -> None:
        self.knowledge_base = knowledge_base
        self.printer = printer
        self.doc_store = doc_store
        self.config = config
        self.logger = get_logger("extractor")

    def __call__(self, name: str) -> Optional[DeclInfo]:
        return self.extract(name)

    def extract(self, name: str) -> Optional[DeclInfo]:
        """Return the record for ``name`` or ``None`` when it is not documented.

        Internal and auto-generated declarations are skipped, as are
        declarations without a full source position or whose source file lies
        outside the project. Equation lemmas, fields and constructors the
        knowledge base cannot resolve are left out of the record. An unknown
        declaration category raises
        :class:`~declexport.models.UnknownDeclarationKindError`.
        """
        kb = self.knowledge_base
        if kb.is_internal(name):
            self.logger.debug("Skipping %s: internal name", name)
            return None
        if kb.is_auto_generated(name):
            self.logger.debug("Skipping %s: auto-generated", name)
            return None

        location = kb.location(name)
        if location is None or location.filename is None or location.line is None:
            self.logger.debug("Skipping %s: no source position", name)
            return None
        if self.config is not None and not self.config.in_project(location.filename):
            self.logger.debug("Skipping %s: %s is outside the project", name, location.filename)
            return None

        kind = DeclKind.from_category(kb.category(name))

        signature = kb.signature(name)
        peeled = peel_count(signature)
        args = tuple(self._render_binder(binder) for binder in signature.binders[:peeled])
        structure_fields, constructors = self._members(name)

        return DeclInfo(
            name=name,
            is_meta=kb.is_meta(name),
            args=args,
            type=self._render(signature.drop(peeled)),
            doc_string=self._doc_string(name),
            filename=location.filename,
            line=location.line,
            attributes=tuple(attr for attr in ATTRIBUTE_CHECKLIST if kb.has_attribute(name, attr)),
            equations=self._equations(name),
            kind=kind,
            structure_fields=structure_fields,
            constructors=constructors,
        )

    def _doc_string(self, name: str) -> Optional[str]:
        try:
            return self.doc_store.doc_string(name)
        except Exception as exc:
            self.logger.debug("No doc string for %s: %s", name, exc)
            return None

    def _equations(self, name: str) -> Tuple[FormatTree, ...]:
        equations = []
        for lemma in self.knowledge_base.equation_lemmas(name):
            signature = self._member_signature(name, lemma)
            if signature is None:
                continue
            equations.append(self._render(signature.drop(peel_count(signature))))
        return tuple(equations)

    def _members(self, name: str) -> Tuple[Members, Members]:
        kb = self.knowledge_base
        if kb.is_structure(name):
            # Fields live under the structure parameters and the ``self`` binder.
            return self._render_members(name, kb.structure_fields(name), kb.num_params(name) + 1), ()
        if kb.is_inductive(name):
            return (), self._render_members(name, kb.constructors(name), kb.num_params(name))
        return (), ()

    def _render_members(self, owner: str, member_names: Iterable[str], scope: int) -> Members:
        members = []
        for member in member_names:
            signature = self._member_signature(owner, member)
            if signature is not None:
                members.append((member, self._render(signature.drop(scope))))
        return tuple(members)

    def _member_signature(self, owner: str, member: str) -> Optional[Signature]:
        try:
            return self.knowledge_base.signature(member)
        except LookupError:
            self.logger.debug("Skipping %s of %s: not in the knowledge base", member, owner)
            return None

    def _render(self, term: object) -> FormatTree:
        return compact(self.printer.format(term))

    def _render_binder(self, binder: Binder) -> DeclArg:
        opening, closing = binder.kind.brackets
        if binder.name is None and binder.kind is BinderKind.INST_IMPLICIT:
            head = Leaf(opening)
        else:
            name = binder.name if binder.name is not None else ANONYMOUS_NAME
            head = Leaf(f"{opening}{name} : ")
        body = fuse(self._render(binder.type), Leaf(closing))
        return DeclArg(implicit=binder.kind is not BinderKind.DEFAULT, arg=fuse(head, body))


def peel_count(signature: Signature) -> int:
    """Number of leading binders to list as arguments.

    Every binder is peeled except a single trailing anonymous, non-dependent
    arrow, which stays folded into the displayed type.
    """
    count = 0
    for index in range(len(signature.binders)):
        if signature.drop(index).is_arrow_tail:
            break
        count += 1
    return count


__all__ = ["ATTRIBUTE_CHECKLIST", "EntryExtractor", "peel_count"]
