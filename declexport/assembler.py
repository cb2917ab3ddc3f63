"""Top-level export: stream the full JSON document to disk."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from .config import ExportConfig, default_config
from .extractor import EntryExtractor
from .kb.base import DocStore, KnowledgeBase, PrettyPrinter
from .logging import get_logger
from .models import ModuleDoc, TacticDocEntry
from .serialize import encode_instances, encode_module_docs, encode_notes, encode_tactic_doc
from .traversal import BatchedTraversal, TextSink


class DocumentAssembler:
    """Coordinates extraction and writes the export document.

    Sections are written in a fixed order: ``decls``, ``mod_docs``, ``notes``,
    ``tactic_docs`` and ``instances``. Declarations are streamed one record at
    a time; the side sections are small and built in memory.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        printer: PrettyPrinter,
        doc_store: DocStore,
        config: ExportConfig | None = None,
        *,
        extractor: EntryExtractor | None = None,
        traversal: BatchedTraversal | None = None,
    ) -> None:
        self.knowledge_base = knowledge_base
        self.doc_store = doc_store
        self.config = config or default_config()
        self.extractor = extractor or EntryExtractor(
            knowledge_base, printer, doc_store, config=self.config
        )
        self.traversal = traversal or BatchedTraversal(self.config.split_depth)
        self.logger = get_logger("assembler")

    def export(self, path: Path | None = None) -> Path:
        """Write the export document to ``path`` (or the configured output)."""
        target = path or self.config.output
        target.parent.mkdir(parents=True, exist_ok=True)
        self.logger.info("Writing export to %s", target)
        with target.open("w", encoding="utf-8") as handle:
            self.write(handle)
        return target

    def write(self, sink: TextSink) -> int:
        """Stream the export document to ``sink``; return the number of declarations."""
        names = list(self.knowledge_base.declaration_names())
        self.logger.info("Exporting %d declarations", len(names))

        sink.write('{"decls":[')
        written = self.traversal.run(names, self.extractor.extract, sink)
        sink.write("]")

        sink.write(',"mod_docs":')
        sink.write(encode_module_docs(group_module_docs(self.doc_store.module_docs())))

        sink.write(',"notes":')
        sink.write(encode_notes(self.doc_store.library_notes()))

        sink.write(',"tactic_docs":[')
        for index, entry in enumerate(self.doc_store.tactic_docs()):
            if index:
                sink.write(",")
            sink.write(encode_tactic_doc(entry, self.classify_import(entry)))
        sink.write("]")

        sink.write(',"instances":')
        sink.write(encode_instances(group_instances(self.knowledge_base.instances())))
        sink.write("}")

        self.logger.info("Exported %d of %d declarations", written, len(names))
        return written

    def classify_import(self, entry: TacticDocEntry) -> str:
        """Label describing what must be imported before the tactic is usable."""
        if not entry.decl_names:
            return ""
        decl = entry.decl_names[0]
        imports = self.config.imports
        kb = self.knowledge_base
        if kb.is_core(decl):
            return imports.core_label
        if kb.is_available_from(decl, imports.baseline_module):
            return imports.baseline_label
        if kb.is_available_from(decl, imports.full_module):
            return imports.full_label
        return ""


def group_module_docs(docs: Iterable[ModuleDoc]) -> Dict[str, List[ModuleDoc]]:
    """Group module docs by file, each file's blocks in line order."""
    grouped: Dict[str, List[ModuleDoc]] = {}
    for doc in docs:
        grouped.setdefault(doc.filename, []).append(doc)
    # Stable sort: blocks reported on the same line keep their store order.
    return {filename: sorted(blocks, key=lambda doc: doc.line) for filename, blocks in grouped.items()}


def group_instances(pairs: Iterable[Tuple[str, str]]) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for class_name, instance_name in pairs:
        grouped.setdefault(class_name, []).append(instance_name)
    return grouped


__all__ = ["DocumentAssembler", "group_instances", "group_module_docs"]
