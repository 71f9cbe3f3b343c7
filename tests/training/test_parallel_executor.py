# tests/training/test_parallel_executor.py
from __future__ import annotations

import pytest

from additive_trainer.pipeline.parallel import ParallelExecutor, ParallelKind
from additive_trainer.utils.errors import MissingLabelError


def square(x: int) -> int:
    return x * x


def test_results_keep_item_order_in_process():
    out = ParallelExecutor.run(
        kind=ParallelKind.BAG, items=[3, 1, 2], handler=square, max_workers=1
    )

    assert out == [9, 1, 4]


def test_results_keep_item_order_across_processes():
    out = ParallelExecutor.run(
        kind=ParallelKind.BAG, items=list(range(6)), handler=square, max_workers=2
    )

    assert out == [0, 1, 4, 9, 16, 25]


def test_empty_items_return_empty_list():
    assert ParallelExecutor.run(kind=ParallelKind.BAG, items=[], handler=square) == []


def test_transient_failure_is_retried(monkeypatch):
    monkeypatch.setattr("additive_trainer.utils.retry.time.sleep", lambda s: None)
    calls = {"n": 0}

    def flaky(x):
        calls["n"] += 1
        if calls["n"] == 1:
            raise MemoryError("transient")
        return x

    out = ParallelExecutor.run(
        kind=ParallelKind.BAG, items=[5], handler=flaky, max_workers=1, max_attempts=2
    )

    assert out == [5]
    assert calls["n"] == 2


def test_persistent_failure_propagates(monkeypatch):
    monkeypatch.setattr("additive_trainer.utils.retry.time.sleep", lambda s: None)

    def broken(x):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        ParallelExecutor.run(
            kind=ParallelKind.BAG, items=[1], handler=broken, max_workers=1, max_attempts=3
        )


def test_missing_label_fails_without_retry(monkeypatch):
    sleeps = []
    monkeypatch.setattr("additive_trainer.utils.retry.time.sleep", sleeps.append)
    calls = {"n": 0}

    def unlabeled(x):
        calls["n"] += 1
        raise MissingLabelError("no label")

    with pytest.raises(MissingLabelError):
        ParallelExecutor.run(
            kind=ParallelKind.BAG, items=[1], handler=unlabeled, max_workers=1, max_attempts=3
        )

    assert calls["n"] == 1
    assert sleeps == []
