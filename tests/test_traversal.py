"""Tests for declexport.traversal."""

from __future__ import annotations

import io
import json
from typing import Optional

import pytest

from declexport.format.tree import Leaf
from declexport.models import DeclInfo, DeclKind
from declexport.traversal import BatchedTraversal, split_batches


def _record(name: str) -> DeclInfo:
    return DeclInfo(
        name=name,
        is_meta=False,
        args=(),
        type=Leaf("Prop"),
        doc_string=None,
        filename="src/demo.lean",
        line=1,
        attributes=(),
        equations=(),
        kind=DeclKind.THEOREM,
    )


def _keep_all(name: str) -> Optional[DeclInfo]:
    return _record(name)


def _run(names, per_entry, depth: int) -> str:
    sink = io.StringIO()
    BatchedTraversal(split_depth=depth).run(names, per_entry, sink)
    return sink.getvalue()


def test_split_seven_names_at_depth_two() -> None:
    names = [f"n{i}" for i in range(7)]

    batches = split_batches(names, 2)

    assert batches == [["n0"], ["n1", "n2"], ["n3", "n4"], ["n5", "n6"]]
    assert [name for batch in batches for name in batch] == names


def test_split_depth_zero_is_identity() -> None:
    assert split_batches(["a", "b"], 0) == [["a", "b"]]


def test_split_keeps_empty_batches() -> None:
    batches = split_batches(["only"], 3)
    assert len(batches) == 8
    assert [name for batch in batches for name in batch] == ["only"]


def test_negative_depth_is_rejected() -> None:
    with pytest.raises(ValueError):
        split_batches([], -1)
    with pytest.raises(ValueError):
        BatchedTraversal(split_depth=-1)


@pytest.mark.parametrize("depth", [0, 1, 2, 4, 6])
def test_output_does_not_depend_on_split_depth(depth: int) -> None:
    names = [f"decl_{i}" for i in range(37)]

    def every_third_skipped(name: str) -> Optional[DeclInfo]:
        return None if int(name.split("_")[1]) % 3 == 0 else _record(name)

    assert _run(names, every_third_skipped, depth) == _run(names, every_third_skipped, 0)


def test_commas_only_between_written_records() -> None:
    names = ["skip_a", "one", "skip_b", "skip_c", "two", "skip_d"]

    def only_plain(name: str) -> Optional[DeclInfo]:
        return None if name.startswith("skip") else _record(name)

    output = _run(names, only_plain, 2)
    decoded = json.loads(f"[{output}]")

    assert [record["name"] for record in decoded] == ["one", "two"]
    assert not output.startswith(",")
    assert ",," not in output


def test_run_reports_written_count() -> None:
    sink = io.StringIO()
    written = BatchedTraversal(split_depth=1).run(
        ["a", "b", "c"], lambda name: None if name == "b" else _record(name), sink
    )
    assert written == 2


def test_nothing_written_for_empty_input() -> None:
    assert _run([], _keep_all, 4) == ""


def test_order_is_input_order() -> None:
    names = ["zeta", "alpha", "mu", "beta", "omega"]
    decoded = json.loads(f"[{_run(names, _keep_all, 3)}]")
    assert [record["name"] for record in decoded] == names
