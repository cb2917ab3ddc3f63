"""JSON encoding for export records.

Records are encoded piecewise into compact JSON text so format trees can use
their own stack-based encoder; scalar values go through :mod:`json`.
"""

from __future__ import annotations

import json
from typing import Iterable, List, Mapping, Sequence, Tuple

from .format.tree import FormatTree, encode_string, to_json
from .models import DeclInfo, LibraryNote, ModuleDoc, TacticDocEntry


def _value(value: object) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _object(fields: Sequence[Tuple[str, str]]) -> str:
    return "{" + ",".join(f"{encode_string(key)}:{encoded}" for key, encoded in fields) + "}"


def _array(items: Iterable[str]) -> str:
    return "[" + ",".join(items) + "]"


def _named_trees(pairs: Iterable[Tuple[str, FormatTree]]) -> str:
    return _array(_array((encode_string(name), to_json(tree))) for name, tree in pairs)


def encode_decl(info: DeclInfo) -> str:
    """Encode a declaration record as one JSON object."""
    args = _array(
        _object((("arg", to_json(arg.arg)), ("implicit", _value(arg.implicit))))
        for arg in info.args
    )
    return _object(
        (
            ("name", encode_string(info.name)),
            ("is_meta", _value(info.is_meta)),
            ("args", args),
            ("type", to_json(info.type)),
            ("doc_string", _value(info.doc_string)),
            ("filename", encode_string(info.filename)),
            ("line", _value(info.line)),
            ("attributes", _value(list(info.attributes))),
            ("equations", _array(to_json(equation) for equation in info.equations)),
            ("kind", encode_string(info.kind.value)),
            ("structure_fields", _named_trees(info.structure_fields)),
            ("constructors", _named_trees(info.constructors)),
        )
    )


def encode_module_docs(grouped: Mapping[str, List[ModuleDoc]]) -> str:
    return _object(
        [
            (filename, _array(_value({"line": doc.line, "doc": doc.content}) for doc in docs))
            for filename, docs in grouped.items()
        ]
    )


def encode_notes(notes: Iterable[LibraryNote]) -> str:
    return _array(_value([note.label, note.text]) for note in notes)


def encode_tactic_doc(entry: TacticDocEntry, import_label: str) -> str:
    return _value(
        {
            "name": entry.name,
            "category": entry.category,
            "decl_names": list(entry.decl_names),
            "tags": list(entry.tags),
            "description": entry.description,
            "import": import_label,
        }
    )


def encode_instances(grouped: Mapping[str, List[str]]) -> str:
    return _value(dict(grouped))


__all__ = [
    "encode_decl",
    "encode_instances",
    "encode_module_docs",
    "encode_notes",
    "encode_tactic_doc",
]
