"""Batched traversal over the full declaration list."""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from .logging import PROGRESS, get_logger
from .models import DeclInfo
from .serialize import encode_decl

T = TypeVar("T")


class TextSink(Protocol):
    def write(self, text: str) -> int | None:
        ...


def split_batches(items: Sequence[T], depth: int) -> List[List[T]]:
    """Halve ``items`` ``depth`` times, first half taking the floor.

    Always returns ``2 ** depth`` sub-lists (some possibly empty) whose
    concatenation is ``items`` in the original order.
    """
    if depth < 0:
        raise ValueError("split depth must be non-negative")
    batches: List[List[T]] = [list(items)]
    for _ in range(depth):
        halves: List[List[T]] = []
        for batch in batches:
            middle = len(batch) // 2
            halves.append(batch[:middle])
            halves.append(batch[middle:])
        batches = halves
    return batches


class BatchedTraversal:
    """Streams declaration records to a sink as comma-separated JSON values."""

    def __init__(self, split_depth: int = 4) -> None:
        if split_depth < 0:
            raise ValueError("split depth must be non-negative")
        self.split_depth = split_depth
        self.logger = get_logger("traversal")

    def run(
        self,
        names: Sequence[str],
        per_entry: Callable[[str], Optional[DeclInfo]],
        sink: TextSink,
    ) -> int:
        """Write one JSON object per extracted record; return how many were written."""
        batches = split_batches(names, self.split_depth)
        self.logger.debug(
            "Traversing %d declarations in %d batches", len(names), len(batches)
        )
        written = 0
        for index, batch in enumerate(batches, start=1):
            batch_written = 0
            for name in batch:
                info = per_entry(name)
                if info is None:
                    continue
                if written:
                    sink.write(",")
                sink.write(encode_decl(info))
                written += 1
                batch_written += 1
            if batch:
                self.logger.log(
                    PROGRESS,
                    "Batch %d/%d: exported %d of %d declarations",
                    index,
                    len(batches),
                    batch_written,
                    len(batch),
                )
        return written


__all__ = ["BatchedTraversal", "TextSink", "split_batches"]
