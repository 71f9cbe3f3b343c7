# additive_trainer/training/engines/bag_sgd_engine.py
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from additive_trainer import logs
from additive_trainer.config.trainer_config import AdditiveTrainerParams
from additive_trainer.core.functions import FeatureFunction, FunctionForm
from additive_trainer.core.model import AdditiveModel
from additive_trainer.core.types import Example, FeatureKey
from additive_trainer.training.engines.loss_engine import pointwise_loss
from additive_trainer.training.engines.smoothing_engine import smooth_spline


@dataclass(frozen=True)
class BagTask:
    """One bag of one round: what a worker needs besides the snapshot."""
    index: int
    examples: Sequence[Example]
    seed: np.random.SeedSequence


@dataclass(frozen=True)
class BagResult:
    index: int
    functions: Dict[FeatureKey, FeatureFunction]
    loss_sum: float
    num_examples: int

    @property
    def mean_loss(self) -> float:
        return self.loss_sum / self.num_examples if self.num_examples else 0.0


def train_bag(
        task: BagTask,
        *,
        snapshot: AdditiveModel,
        params: AdditiveTrainerParams,
) -> BagResult:
    """
    Sequential online SGD over one bag.

    Works on a private deep copy of the snapshot; the snapshot itself is
    read-only. Must be module-level so the process pool can pickle it.
    """
    working = snapshot.snapshot()
    rng = np.random.default_rng(task.seed)

    window_sum = 0.0
    loss_sum = 0.0
    count = 0
    for example in task.examples:
        loss = pointwise_loss(example, working, params, rng)
        window_sum += loss
        loss_sum += loss
        count += 1
        if count % params.loss_mod == 0:
            logs.info(
                f"[Bag {task.index}] Loss = {window_sum / params.loss_mod:.6f}, "
                f"samples = {count}"
            )
            window_sum = 0.0

    return BagResult(
        index=task.index,
        functions=dict(working.items()),
        loss_sum=loss_sum,
        num_examples=count,
    )


def average_functions(
        copies: Sequence[FeatureFunction],
        num_bags: int,
) -> FeatureFunction:
    """
    Elementwise mean of the copies' weights (scale 1 / num_bags).

    Computed as a shifted sum around the first copy so identical inputs
    average back to exactly the same weights.
    """
    head = copies[0]
    func = head.copy()
    stack = np.stack([c.get_weights() for c in copies])
    base = stack[0]
    scale = 1.0 / float(num_bags)
    func.set_weights(base + (stack - base).sum(axis=0) * scale)
    return func


def aggregate_bags(
        results: Sequence[BagResult],
        params: AdditiveTrainerParams,
) -> Dict[FeatureKey, FeatureFunction]:
    """Group bag outputs by key, average, smooth splines."""
    grouped: Dict[FeatureKey, List[FeatureFunction]] = defaultdict(list)
    for result in results:
        for key, func in result.functions.items():
            grouped[key].append(func)

    aggregated: Dict[FeatureKey, FeatureFunction] = {}
    for key, copies in grouped.items():
        func = average_functions(copies, params.num_bags)
        if func.form is FunctionForm.SPLINE:
            smooth_spline(params.smoothing_tolerance, func)
        aggregated[key] = func
    return aggregated


def write_back(
        model: AdditiveModel,
        aggregated: Dict[FeatureKey, FeatureFunction],
) -> int:
    """Replace live functions; keys no longer in the model are dropped."""
    written = 0
    for key, func in aggregated.items():
        if model.replace(key, func):
            written += 1
    return written
