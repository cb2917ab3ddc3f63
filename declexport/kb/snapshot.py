"""Knowledge base and documentation stores backed by a JSON snapshot.

The host environment dumps its compiled state once; declexport only reads it.
Terms are either strings (already-rendered text) or telescopes of the form
``{"binders": [...], "result": <term>}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ..logging import get_logger
from ..models import LibraryNote, ModuleDoc, SourceLocation, TacticDocEntry
from .base import Binder, BinderKind, Signature


class SnapshotError(RuntimeError):
    """Raised when a snapshot file cannot be read or is malformed."""


@dataclass(frozen=True)
class _Members:
    params: int
    names: Tuple[str, ...]


@dataclass
class _DeclRecord:
    name: str
    category: str
    module: Optional[str]
    filename: Optional[str]
    line: Optional[int]
    is_meta: bool
    doc: Optional[str]
    attributes: Set[str]
    auto_generated: bool
    signature: Signature
    equations: Tuple[str, ...]
    structure: Optional[_Members] = None
    inductive: Optional[_Members] = None


@dataclass
class _Module:
    core: bool = False
    imports: Tuple[str, ...] = ()


@dataclass
class Snapshot:
    """Parsed snapshot contents."""

    declarations: Dict[str, _DeclRecord] = field(default_factory=dict)
    modules: Dict[str, _Module] = field(default_factory=dict)
    module_docs: List[ModuleDoc] = field(default_factory=list)
    notes: List[LibraryNote] = field(default_factory=list)
    tactic_docs: List[TacticDocEntry] = field(default_factory=list)
    instances: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "Snapshot":
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Failed to read snapshot {path}: {exc}") from exc
        snapshot = cls.from_payload(payload)
        get_logger("snapshot").debug(
            "Loaded %d declarations and %d modules from %s",
            len(snapshot.declarations),
            len(snapshot.modules),
            path,
        )
        return snapshot

    @classmethod
    def from_payload(cls, payload: Any) -> "Snapshot":
        if not isinstance(payload, dict):
            raise SnapshotError("Snapshot must contain a mapping at the root")

        snapshot = cls()
        for name, raw in _as_dict(payload.get("modules"), "modules").items():
            raw = _as_dict(raw, f"module {name}")
            snapshot.modules[name] = _Module(
                core=bool(raw.get("core", False)),
                imports=tuple(_as_str_list(raw.get("imports"), f"module {name} imports")),
            )

        for raw in _as_list(payload.get("declarations"), "declarations"):
            record = _parse_declaration(raw)
            if record.name in snapshot.declarations:
                raise SnapshotError(f"Duplicate declaration: {record.name}")
            snapshot.declarations[record.name] = record

        for raw in _as_list(payload.get("module_docs"), "module_docs"):
            raw = _as_dict(raw, "module doc")
            snapshot.module_docs.append(
                ModuleDoc(
                    filename=_require_str(raw, "filename", "module doc"),
                    line=_require_int(raw, "line", "module doc"),
                    content=_require_str(raw, "content", "module doc"),
                )
            )

        for raw in _as_list(payload.get("notes"), "notes"):
            if isinstance(raw, dict):
                label, text = raw.get("label"), raw.get("text")
            elif isinstance(raw, list) and len(raw) == 2:
                label, text = raw
            else:
                raise SnapshotError(f"Library note must be a [label, text] pair: {raw!r}")
            if not isinstance(label, str) or not isinstance(text, str):
                raise SnapshotError(f"Library note fields must be strings: {raw!r}")
            snapshot.notes.append(LibraryNote(label=label, text=text))

        for raw in _as_list(payload.get("tactic_docs"), "tactic_docs"):
            raw = _as_dict(raw, "tactic doc")
            context = f"tactic doc {raw.get('name')!r}"
            snapshot.tactic_docs.append(
                TacticDocEntry(
                    name=_require_str(raw, "name", context),
                    category=_require_str(raw, "category", context),
                    decl_names=tuple(_as_str_list(raw.get("decl_names"), context)),
                    tags=tuple(_as_str_list(raw.get("tags"), context)),
                    description=str(raw.get("description") or ""),
                )
            )

        for raw in _as_list(payload.get("instances"), "instances"):
            if not (isinstance(raw, list) and len(raw) == 2 and all(isinstance(v, str) for v in raw)):
                raise SnapshotError(f"Instance entry must be a [class, instance] pair: {raw!r}")
            snapshot.instances.append((raw[0], raw[1]))

        return snapshot


class SnapshotKnowledgeBase:
    """:class:`~declexport.kb.base.KnowledgeBase` over a loaded snapshot."""

    def __init__(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._closures: Dict[str, Set[str]] = {}

    def declaration_names(self) -> Iterable[str]:
        return list(self._snapshot.declarations)

    def category(self, name: str) -> str:
        return self._record(name).category

    def location(self, name: str) -> Optional[SourceLocation]:
        record = self._record(name)
        if record.filename is None and record.line is None:
            return None
        return SourceLocation(filename=record.filename, line=record.line)

    def is_meta(self, name: str) -> bool:
        return self._record(name).is_meta

    def is_internal(self, name: str) -> bool:
        return any(part.startswith("_") for part in name.split("."))

    def is_auto_generated(self, name: str) -> bool:
        return self._record(name).auto_generated

    def signature(self, name: str) -> Signature:
        return self._record(name).signature

    def has_attribute(self, name: str, attribute: str) -> bool:
        return attribute in self._record(name).attributes

    def equation_lemmas(self, name: str) -> Sequence[str]:
        return self._record(name).equations

    def is_structure(self, name: str) -> bool:
        return self._record(name).structure is not None

    def structure_fields(self, name: str) -> Sequence[str]:
        members = self._record(name).structure
        return members.names if members is not None else ()

    def is_inductive(self, name: str) -> bool:
        record = self._record(name)
        return record.inductive is not None or record.structure is not None

    def constructors(self, name: str) -> Sequence[str]:
        members = self._record(name).inductive
        return members.names if members is not None else ()

    def num_params(self, name: str) -> int:
        record = self._record(name)
        members = record.structure or record.inductive
        return members.params if members is not None else 0

    def is_core(self, name: str) -> bool:
        record = self._snapshot.declarations.get(name)
        if record is None or record.module is None:
            return False
        module = self._snapshot.modules.get(record.module)
        return module is not None and module.core

    def is_available_from(self, name: str, module: str) -> bool:
        record = self._snapshot.declarations.get(name)
        if record is None or record.module is None:
            return False
        return record.module in self._import_closure(module)

    def instances(self) -> Iterable[Tuple[str, str]]:
        return list(self._snapshot.instances)

    def _record(self, name: str) -> _DeclRecord:
        try:
            return self._snapshot.declarations[name]
        except KeyError:
            raise KeyError(f"Unknown declaration: {name}") from None

    def _import_closure(self, module: str) -> Set[str]:
        cached = self._closures.get(module)
        if cached is not None:
            return cached
        seen: Set[str] = set()
        pending = [module]
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            entry = self._snapshot.modules.get(current)
            if entry is not None:
                pending.extend(entry.imports)
        self._closures[module] = seen
        return seen


class SnapshotDocStore:
    """:class:`~declexport.kb.base.DocStore` over a loaded snapshot."""

    def __init__(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot

    def doc_string(self, name: str) -> Optional[str]:
        record = self._snapshot.declarations.get(name)
        if record is None:
            raise LookupError(f"No doc string registered for {name}")
        return record.doc

    def module_docs(self) -> Iterable[ModuleDoc]:
        return list(self._snapshot.module_docs)

    def library_notes(self) -> Iterable[LibraryNote]:
        return list(self._snapshot.notes)

    def tactic_docs(self) -> Iterable[TacticDocEntry]:
        return list(self._snapshot.tactic_docs)


def parse_term(raw: Any, context: str = "term") -> object:
    """Turn a snapshot term into a string or :class:`Signature`."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict) and "result" in raw:
        binders = tuple(
            _parse_binder(item, f"{context} binder")
            for item in _as_list(raw.get("binders"), f"{context} binders")
        )
        return Signature(binders=binders, result=parse_term(raw["result"], context))
    raise SnapshotError(f"Malformed {context}: {raw!r}")


def _parse_binder(raw: Any, context: str) -> Binder:
    raw = _as_dict(raw, context)
    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        raise SnapshotError(f"{context} name must be a string or null")
    info = raw.get("info", BinderKind.DEFAULT.value)
    try:
        kind = BinderKind(info)
    except ValueError:
        raise SnapshotError(f"{context} has unknown binder info {info!r}") from None
    if "type" not in raw:
        raise SnapshotError(f"{context} is missing its type")
    dependent = raw.get("dependent", name is not None)
    return Binder(name=name, kind=kind, type=parse_term(raw["type"], context), dependent=bool(dependent))


def _parse_signature(raw: Any, context: str) -> Signature:
    term = parse_term(raw, context)
    if isinstance(term, Signature):
        return term
    return Signature(binders=(), result=term)


def _parse_declaration(raw: Any) -> _DeclRecord:
    raw = _as_dict(raw, "declaration")
    name = _require_str(raw, "name", "declaration")
    context = f"declaration {name}"
    line = raw.get("line")
    if line is not None and (not isinstance(line, int) or isinstance(line, bool)):
        raise SnapshotError(f"{context} line must be an integer")
    filename = raw.get("filename")
    if filename is not None and not isinstance(filename, str):
        raise SnapshotError(f"{context} filename must be a string")
    doc = raw.get("doc")
    if doc is not None and not isinstance(doc, str):
        raise SnapshotError(f"{context} doc must be a string")
    if "type" not in raw:
        raise SnapshotError(f"{context} is missing its type")

    return _DeclRecord(
        name=name,
        category=_require_str(raw, "kind", context),
        module=raw.get("module") if isinstance(raw.get("module"), str) else None,
        filename=filename,
        line=line,
        is_meta=bool(raw.get("is_meta", False)),
        doc=doc,
        attributes=set(_as_str_list(raw.get("attributes"), context)),
        auto_generated=bool(raw.get("auto_generated", False)),
        signature=_parse_signature(raw["type"], f"{context} type"),
        equations=tuple(_as_str_list(raw.get("equations"), context)),
        structure=_parse_members(raw.get("structure"), "fields", context),
        inductive=_parse_members(raw.get("inductive"), "constructors", context),
    )


def _parse_members(raw: Any, key: str, context: str) -> Optional[_Members]:
    if raw is None:
        return None
    raw = _as_dict(raw, context)
    params = raw.get("params", 0)
    if not isinstance(params, int) or params < 0:
        raise SnapshotError(f"{context} params must be a non-negative integer")
    return _Members(params=params, names=tuple(_as_str_list(raw.get(key), context)))


def _as_dict(value: Any, context: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SnapshotError(f"Expected a mapping for {context}")
    return value


def _as_list(value: Any, context: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotError(f"Expected a list for {context}")
    return value


def _as_str_list(value: Any, context: str) -> List[str]:
    items = _as_list(value, context)
    if not all(isinstance(item, str) for item in items):
        raise SnapshotError(f"Expected a list of strings for {context}")
    return list(items)


def _require_str(raw: Mapping[str, Any], key: str, context: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise SnapshotError(f"{context} is missing string field '{key}'")
    return value


def _require_int(raw: Mapping[str, Any], key: str, context: str) -> int:
    value = raw.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise SnapshotError(f"{context} is missing integer field '{key}'")
    return value


__all__ = ["Snapshot", "SnapshotDocStore", "SnapshotError", "SnapshotKnowledgeBase", "parse_term"]
