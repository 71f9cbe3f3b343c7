# additive_trainer/training/engines/prune_engine.py
from __future__ import annotations

from typing import List

from additive_trainer.core.functions import FunctionForm
from additive_trainer.core.model import AdditiveModel
from additive_trainer.core.types import FeatureKey


def find_small_splines(model: AdditiveModel, linfinity_threshold: float) -> List[FeatureKey]:
    # linear functions are not pruned
    return [
        key
        for key, func in model.items()
        if func.form is FunctionForm.SPLINE and func.linf_norm() < linfinity_threshold
    ]


def delete_small_splines(model: AdditiveModel, linfinity_threshold: float) -> List[FeatureKey]:
    """Remove splines whose L-infinity norm fell below the threshold."""
    to_delete = find_small_splines(model, linfinity_threshold)
    model.remove(to_delete)
    return to_delete
