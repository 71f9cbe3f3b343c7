# additive_trainer/training/engines/model_init_engine.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence

from additive_trainer.core.functions import FeatureFunction, Linear, Spline
from additive_trainer.core.model import AdditiveModel
from additive_trainer.core.types import Example, FeatureKey


@dataclass
class FeatureStats:
    count: int
    min_val: float
    max_val: float
    is_string: bool

    def observe(self, value: float) -> None:
        self.count += 1
        self.min_val = min(self.min_val, value)
        self.max_val = max(self.max_val, value)


class ModelInitEngine:
    """
    ModelInitEngine（FINAL）

    Responsibility:
    - one pass over examples -> per (family, name) count / min / max
    - drop keys seen fewer than min_count times and the rank key family
    - non-finite values are not observed (neither counted nor ranged)
    - add one function per surviving key:
        string feature              -> Linear [0, 1]
        family in linear_families   -> Linear [0, 1]
        otherwise                   -> Spline(min, max, num_bins)
    """

    def __init__(
            self,
            *,
            num_bins: int,
            min_count: int,
            rank_key: str,
            linear_families: Sequence[str] = (),
    ):
        self.num_bins = num_bins
        self.min_count = min_count
        self.rank_key = rank_key
        self.linear_families = frozenset(linear_families)

    def feature_stats(self, examples: Iterable[Example]) -> Dict[FeatureKey, FeatureStats]:
        stats: Dict[FeatureKey, FeatureStats] = {}
        for example in examples:
            for fv in example.vectors:
                for family, name, value, is_string in fv.iter_values():
                    if family == self.rank_key or not math.isfinite(value):
                        continue
                    key = (family, name)
                    entry = stats.get(key)
                    if entry is None:
                        stats[key] = FeatureStats(1, value, value, is_string)
                    else:
                        entry.observe(value)

        return {k: s for k, s in stats.items() if s.count >= self.min_count}

    def make_function(self, family: str, stats: FeatureStats) -> FeatureFunction:
        if stats.is_string or family in self.linear_families:
            return Linear(0.0, 1.0)
        return Spline(stats.min_val, stats.max_val, self.num_bins)

    def populate(
            self,
            model: AdditiveModel,
            examples: Iterable[Example],
            *,
            overwrite: bool,
    ) -> int:
        """
        Add functions for every surviving key; returns the number added.

        overwrite=False keeps functions already present (extending a loaded
        model), overwrite=True replaces them (fresh model).
        """
        stats = self.feature_stats(examples)
        added = 0
        for (family, name), s in sorted(stats.items()):
            if model.add_function(family, name, self.make_function(family, s), overwrite):
                added += 1
        return added
