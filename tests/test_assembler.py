"""Tests for declexport.assembler."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from declexport.assembler import DocumentAssembler, group_instances, group_module_docs
from declexport.config import default_config
from declexport.models import ModuleDoc, TacticDocEntry, UnknownDeclarationKindError
from declexport.printer import TermPrinter
from tests._fixtures.snapshot_builder import binder, pi


def _seed(builder) -> None:
    builder.module("init.core", core=True)
    builder.module("tactic.core", imports=["init.core"])
    builder.module("tactic.basic", imports=["tactic.core"])
    builder.module("tactic.ring", imports=["tactic.basic"])
    builder.module("tactic", imports=["tactic.ring"])
    builder.module("data.basic", imports=["tactic"])

    builder.declaration("identity", pi([binder("x", "T")], "T"), filename="Basic", line=10)
    builder.declaration("identity._private.aux", "T")
    builder.declaration(
        "id_eq",
        pi([binder("a", "α")], "identity a = a"),
        kind="theorem",
        line=14,
        attributes=["simp"],
        doc="`identity` does nothing.",
    )
    builder.declaration("tactic.interactive.trivial", "tactic unit", module="init.core", is_meta=True)
    builder.declaration("tactic.interactive.rcases", "tactic unit", module="tactic.core", is_meta=True)
    builder.declaration("tactic.interactive.ring", "tactic unit", module="tactic.ring", is_meta=True)
    builder.declaration("tactic.interactive.polyrith", "tactic unit", module="tactic.polyrith", is_meta=True)

    builder.module_doc("src/data/basic.lean", 1, "# Basics")
    builder.module_doc("src/logic/basic.lean", 1, "# Logic")
    builder.module_doc("src/data/basic.lean", 30, "## Identity")
    builder.note("naming", "Lemma naming conventions.")
    builder.tactic("trivial", ["tactic.interactive.trivial"])
    builder.tactic("rcases", ["tactic.interactive.rcases", "tactic.interactive.ring"], tags=["case bashing"])
    builder.tactic("ring", ["tactic.interactive.ring"])
    builder.tactic("polyrith", ["tactic.interactive.polyrith"])
    builder.tactic("#where", [], category="command")
    builder.instance("has_add", "nat.has_add")
    builder.instance("has_mul", "nat.has_mul")
    builder.instance("has_add", "int.has_add")


def _assembler(builder, tmp_path: Path) -> DocumentAssembler:
    kb, docs = builder.stores()
    return DocumentAssembler(kb, TermPrinter(), docs, default_config(tmp_path))


def test_export_writes_complete_document(snapshot_builder, tmp_path: Path) -> None:
    _seed(snapshot_builder)

    path = _assembler(snapshot_builder, tmp_path).export()

    assert path == tmp_path.resolve() / "export.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data) == ["decls", "mod_docs", "notes", "tactic_docs", "instances"]

    names = [decl["name"] for decl in data["decls"]]
    assert names[:2] == ["identity", "id_eq"]
    assert "identity._private.aux" not in names
    id_eq = data["decls"][1]
    assert id_eq["kind"] == "thm"
    assert id_eq["attributes"] == ["simp"]
    assert id_eq["doc_string"] == "`identity` does nothing."
    assert id_eq["args"] == [{"arg": "(a : α)", "implicit": False}]

    assert data["mod_docs"] == {
        "src/data/basic.lean": [{"line": 1, "doc": "# Basics"}, {"line": 30, "doc": "## Identity"}],
        "src/logic/basic.lean": [{"line": 1, "doc": "# Logic"}],
    }
    assert data["notes"] == [["naming", "Lemma naming conventions."]]
    assert data["instances"] == {"has_add": ["nat.has_add", "int.has_add"], "has_mul": ["nat.has_mul"]}


def test_tactic_import_classification(snapshot_builder, tmp_path: Path) -> None:
    _seed(snapshot_builder)
    sink = io.StringIO()

    _assembler(snapshot_builder, tmp_path).write(sink)

    tactics = {entry["name"]: entry for entry in json.loads(sink.getvalue())["tactic_docs"]}
    assert tactics["trivial"]["import"] == "always imported"
    assert tactics["rcases"]["import"] == "import tactic.basic"
    assert tactics["ring"]["import"] == "import tactic"
    assert tactics["polyrith"]["import"] == ""
    assert tactics["#where"]["import"] == ""
    assert list(tactics["rcases"]) == ["name", "category", "decl_names", "tags", "description", "import"]
    assert tactics["rcases"]["tags"] == ["case bashing"]


def test_custom_import_labels(snapshot_builder, tmp_path: Path) -> None:
    _seed(snapshot_builder)
    config = default_config(tmp_path)
    config.imports.core_label = "core"
    config.imports.full_module = "tactic.ring"
    config.imports.full_label = "import tactic.ring"
    kb, docs = snapshot_builder.stores()
    assembler = DocumentAssembler(kb, TermPrinter(), docs, config)

    assert assembler.classify_import(TacticDocEntry("trivial", "tactic", ("tactic.interactive.trivial",))) == "core"
    assert (
        assembler.classify_import(TacticDocEntry("ring", "tactic", ("tactic.interactive.ring",)))
        == "import tactic.ring"
    )


def test_export_is_deterministic(snapshot_builder, tmp_path: Path) -> None:
    _seed(snapshot_builder)
    assembler = _assembler(snapshot_builder, tmp_path)

    first = assembler.export(tmp_path / "first.json").read_bytes()
    second = _assembler(snapshot_builder, tmp_path).export(tmp_path / "second.json").read_bytes()

    assert first == second


def test_empty_knowledge_base_is_still_valid_json(snapshot_builder, tmp_path: Path) -> None:
    sink = io.StringIO()
    assert _assembler(snapshot_builder, tmp_path).write(sink) == 0
    assert json.loads(sink.getvalue()) == {
        "decls": [],
        "mod_docs": {},
        "notes": [],
        "tactic_docs": [],
        "instances": {},
    }


def test_unknown_kind_aborts_export(snapshot_builder, tmp_path: Path) -> None:
    snapshot_builder.declaration("ok")
    snapshot_builder.declaration("broken", kind="mystery")

    with pytest.raises(UnknownDeclarationKindError):
        _assembler(snapshot_builder, tmp_path).export()


def test_dangling_equation_lemma_does_not_abort_export(snapshot_builder, tmp_path: Path) -> None:
    snapshot_builder.declaration("f", equations=["f.equations._eqn_1"])
    snapshot_builder.declaration("g")
    sink = io.StringIO()

    assert _assembler(snapshot_builder, tmp_path).write(sink) == 2

    decls = json.loads(sink.getvalue())["decls"]
    assert [(decl["name"], decl["equations"]) for decl in decls] == [("f", []), ("g", [])]


def test_module_docs_are_written_in_line_order(snapshot_builder, tmp_path: Path) -> None:
    snapshot_builder.module_doc("a.lean", 30, "## Later section")
    snapshot_builder.module_doc("b.lean", 5, "# Other file")
    snapshot_builder.module_doc("a.lean", 1, "# Header")
    snapshot_builder.module_doc("a.lean", 30, "## Same line, reported second")
    sink = io.StringIO()

    _assembler(snapshot_builder, tmp_path).write(sink)

    mod_docs = json.loads(sink.getvalue())["mod_docs"]
    assert list(mod_docs) == ["a.lean", "b.lean"]
    assert mod_docs["a.lean"] == [
        {"line": 1, "doc": "# Header"},
        {"line": 30, "doc": "## Later section"},
        {"line": 30, "doc": "## Same line, reported second"},
    ]


def test_group_module_docs_sorts_each_file() -> None:
    docs = [ModuleDoc("x.lean", 9, "b"), ModuleDoc("x.lean", 2, "a")]
    assert [doc.line for doc in group_module_docs(docs)["x.lean"]] == [2, 9]


def test_group_instances_keeps_discovery_order() -> None:
    pairs = [("b", "b1"), ("a", "a1"), ("b", "b2")]
    assert list(group_instances(pairs).items()) == [("b", ["b1", "b2"]), ("a", ["a1"])]
