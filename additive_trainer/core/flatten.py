# additive_trainer/core/flatten.py
from __future__ import annotations

import math
from typing import List

import numpy as np

from additive_trainer.core.types import FeatureVector, FlatFeature


def flatten_with_dropout(
        fv: FeatureVector,
        dropout: float,
        rng: np.random.Generator,
) -> List[FlatFeature]:
    """
    Flatten a feature vector into (family, name, value) triples, dropping
    each triple independently with probability `dropout`.

    Non-finite values are skipped before the dropout draw.
    Scores computed from the survivors must be rescaled by 1 / (1 - dropout).
    """
    flat: List[FlatFeature] = []
    for family, name, value, _ in fv.iter_values():
        if not math.isfinite(value):
            continue
        if dropout > 0.0 and rng.random() < dropout:
            continue
        flat.append(FlatFeature(family, name, value))
    return flat
