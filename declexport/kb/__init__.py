"""Knowledge base contracts and the snapshot-backed implementation."""

from .base import Binder, BinderKind, DocStore, KnowledgeBase, PrettyPrinter, Signature
from .snapshot import Snapshot, SnapshotDocStore, SnapshotError, SnapshotKnowledgeBase

__all__ = [
    "Binder",
    "BinderKind",
    "DocStore",
    "KnowledgeBase",
    "PrettyPrinter",
    "Signature",
    "Snapshot",
    "SnapshotDocStore",
    "SnapshotError",
    "SnapshotKnowledgeBase",
]
