# additive_trainer/pipeline/parallel/executor.py
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import Any, Callable, Iterable, List, TypeVar

from additive_trainer import logs
from additive_trainer.pipeline.parallel.types import ParallelKind
from additive_trainer.utils.errors import MissingLabelError
from additive_trainer.utils.retry import Retry

T = TypeVar("T")


class ParallelExecutor:
    """
    ParallelExecutor（FINAL）

    - 统一的 ProcessPoolExecutor 封装
    - results are returned in item order
    - handler must be picklable (module-level function or partial of one)
    - each item is retried in place; handlers must be pure
    - MissingLabelError is never retried
    """

    @staticmethod
    def run(
            *,
            kind: ParallelKind,
            items: Iterable[T],
            handler: Callable[[T], Any],
            max_workers: int | None = None,
            max_attempts: int = 1,
    ) -> List[Any]:
        items = list(items)
        if not items:
            logs.info("[ParallelExecutor] no items to process")
            return []

        logs.info(
            f"[ParallelExecutor] start "
            f"kind={kind.value} total={len(items)}"
        )

        task = partial(_run_with_retry, handler, max_attempts)
        workers = ParallelExecutor._resolve_workers(items, max_workers)

        if workers == 1:
            return ParallelExecutor._run_sequential(items, task)
        return ParallelExecutor._run_parallel(items, task, workers)

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(items: list, max_workers: int | None) -> int:
        cpu = os.cpu_count() or 1
        if max_workers is None:
            return min(cpu, len(items))
        return max(1, min(max_workers, len(items)))

    @staticmethod
    def _run_sequential(items: list, handler: Callable[[Any], Any]) -> List[Any]:
        return [handler(item) for item in items]

    @staticmethod
    def _run_parallel(
            items: list,
            handler: Callable[[Any], Any],
            workers: int,
    ) -> List[Any]:
        logs.info(
            f"[ParallelExecutor] run parallel | workers={workers}"
        )

        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(handler, item) for item in items]
            return [fut.result() for fut in futures]


def _run_with_retry(handler: Callable[[Any], Any], max_attempts: int, item: Any) -> Any:
    if max_attempts <= 1:
        return handler(item)
    return Retry.run(
        handler,
        item,
        giveup=(MissingLabelError,),
        max_attempts=max_attempts,
        delay=0.5,
    )
