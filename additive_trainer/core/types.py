# additive_trainer/core/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, Mapping, Optional, Tuple

from additive_trainer.utils.errors import MissingLabelError

FeatureKey = Tuple[str, str]  # (family, name)


@dataclass(frozen=True)
class FeatureVector:
    """
    One feature vector of an Example.

    - float_features : family -> name -> value
    - string_features: family -> tokens (each token scores as value 1.0)
    """
    float_features: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    string_features: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    def iter_values(self) -> Iterator[Tuple[str, str, float, bool]]:
        """Yield (family, name, value, is_string) for every feature."""
        for family, feats in self.float_features.items():
            for name, value in feats.items():
                yield family, name, float(value), False
        for family, tokens in self.string_features.items():
            for token in tokens:
                yield family, token, 1.0, True

    def label(self, rank_key: str, threshold: Optional[float] = None) -> float:
        """
        Label stored under the rank key family.

        threshold=None  -> raw value (regression)
        otherwise       -> -1.0 if value <= threshold else +1.0
        """
        feats = self.float_features.get(rank_key)
        if not feats:
            raise MissingLabelError(f"no label under rank_key={rank_key!r}")

        value = float(next(iter(feats.values())))
        if threshold is None:
            return value
        return -1.0 if value <= threshold else 1.0


@dataclass(frozen=True)
class Example:
    """
    Ordered sequence of feature vectors (ranking) or a single one
    (pointwise). Immutable once built.
    """
    vectors: Tuple[FeatureVector, ...]

    @classmethod
    def pointwise(cls, fv: FeatureVector) -> "Example":
        return cls(vectors=(fv,))

    @property
    def first(self) -> FeatureVector:
        return self.vectors[0]


@dataclass(frozen=True, slots=True)
class FlatFeature:
    family: str
    name: str
    value: float

    @property
    def key(self) -> FeatureKey:
        return self.family, self.name


def make_feature_vector(
        floats: Optional[Dict[str, Dict[str, float]]] = None,
        strings: Optional[Dict[str, object]] = None,
) -> FeatureVector:
    """Convenience constructor freezing string token collections."""
    return FeatureVector(
        float_features={f: dict(v) for f, v in (floats or {}).items()},
        string_features={f: frozenset(v) for f, v in (strings or {}).items()},
    )
