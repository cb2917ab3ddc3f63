"""Tests for the reference term printer."""

from __future__ import annotations

from declexport.format.compactor import compact
from declexport.format.tree import render
from declexport.kb.base import Binder, BinderKind, Signature
from declexport.printer import TermPrinter


def _text(term: object) -> str:
    return render(compact(TermPrinter().format(term)))


def test_plain_terms_print_verbatim() -> None:
    assert _text("list ℕ") == "list ℕ"
    assert _text(Signature(binders=(), result="ℕ")) == "ℕ"


def test_quantified_binders_share_one_forall() -> None:
    signature = Signature(
        binders=(
            Binder("α", BinderKind.IMPLICIT, "Type", dependent=True),
            Binder(None, BinderKind.INST_IMPLICIT, "group α", dependent=True),
            Binder("a", BinderKind.DEFAULT, "α", dependent=True),
            Binder("b", BinderKind.STRICT_IMPLICIT, "α", dependent=True),
        ),
        result="a * b = b * a",
    )
    assert _text(signature) == "∀ {α : Type} [group α] (a : α) ⦃b : α⦄, a * b = b * a"


def test_arrows_and_nested_domains() -> None:
    function = Signature(binders=(Binder(None, BinderKind.DEFAULT, "α"),), result="β")
    signature = Signature(
        binders=(
            Binder("f", BinderKind.DEFAULT, function, dependent=True),
            Binder(None, BinderKind.DEFAULT, "injective f"),
            Binder(None, BinderKind.DEFAULT, function),
        ),
        result="surjective f",
    )
    assert _text(signature) == "∀ (f : α → β), injective f → (α → β) → surjective f"


def test_anonymous_dependent_binder_gets_placeholder_name() -> None:
    signature = Signature(
        binders=(Binder(None, BinderKind.DEFAULT, "ℕ", dependent=True),),
        result="true",
    )
    assert _text(signature) == "∀ (ᾰ : ℕ), true"
