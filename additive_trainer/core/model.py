# additive_trainer/core/model.py
from __future__ import annotations

from typing import Dict, ItemsView, Iterable, Iterator, Optional

from additive_trainer.core.functions import FeatureFunction, FunctionForm
from additive_trainer.core.types import FeatureKey, FlatFeature


class AdditiveModel:
    """
    AdditiveModel（FINAL / FROZEN）

    Semantics:
    - score = sum over flat features of f_(family, name)(value)
    - single mapping (family, name) -> FeatureFunction
    - keys are only created by explicit add_function(); unknown keys in
      scoring / update / replace are skipped, never created implicitly
    """

    def __init__(self, functions: Optional[Dict[FeatureKey, FeatureFunction]] = None):
        self.functions: Dict[FeatureKey, FeatureFunction] = dict(functions or {})

    # --------------------------------------------------
    # mapping access
    # --------------------------------------------------
    def __len__(self) -> int:
        return len(self.functions)

    def __contains__(self, key: FeatureKey) -> bool:
        return key in self.functions

    def __iter__(self) -> Iterator[FeatureKey]:
        return iter(self.functions)

    def items(self) -> ItemsView[FeatureKey, FeatureFunction]:
        return self.functions.items()

    def get(self, family: str, name: str) -> Optional[FeatureFunction]:
        return self.functions.get((family, name))

    def add_function(
            self,
            family: str,
            name: str,
            func: FeatureFunction,
            overwrite: bool,
    ) -> bool:
        """Insert func; an existing key is only replaced when overwrite=True."""
        key = (family, name)
        if key in self.functions and not overwrite:
            return False
        self.functions[key] = func
        return True

    def replace(self, key: FeatureKey, func: FeatureFunction) -> bool:
        """Write-back: only keys still present in the model are replaced."""
        if key not in self.functions:
            return False
        self.functions[key] = func
        return True

    def remove(self, keys: Iterable[FeatureKey]) -> int:
        removed = 0
        for key in keys:
            if self.functions.pop(key, None) is not None:
                removed += 1
        return removed

    def count_by_form(self) -> Dict[str, int]:
        counts = {form.value: 0 for form in FunctionForm}
        for func in self.functions.values():
            counts[func.form.value] += 1
        return counts

    # --------------------------------------------------
    # copies
    # --------------------------------------------------
    def snapshot(self) -> "AdditiveModel":
        """Deep copy; the returned model shares no weight buffers with self."""
        return AdditiveModel({k: f.copy() for k, f in self.functions.items()})

    # --------------------------------------------------
    # scoring / update
    # --------------------------------------------------
    def score_flat_features(self, flat: Iterable[FlatFeature]) -> float:
        total = 0.0
        for feat in flat:
            func = self.functions.get(feat.key)
            if func is not None:
                total += func.evaluate(feat.value)
        return total

    def update(
            self,
            grad: float,
            learning_rate: float,
            linfinity_cap: float,
            flat: Iterable[FlatFeature],
    ) -> None:
        """Move every touched function by -learning_rate * grad, then clip."""
        delta = -learning_rate * grad
        for feat in flat:
            func = self.functions.get(feat.key)
            if func is None:
                continue
            func.update(delta, feat.value)
            func.clip(linfinity_cap)
