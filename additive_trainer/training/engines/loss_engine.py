# additive_trainer/training/engines/loss_engine.py
from __future__ import annotations

import math
from typing import Callable, Dict

import numpy as np

from additive_trainer.config.trainer_config import AdditiveTrainerParams
from additive_trainer.core.flatten import flatten_with_dropout
from additive_trainer.core.model import AdditiveModel
from additive_trainer.core.types import Example, FeatureVector

# logistic margin is clamped here before exponentiation
LOGISTIC_CORR_CAP = 10.0


LossFn = Callable[
    [AdditiveModel, FeatureVector, float, AdditiveTrainerParams, np.random.Generator],
    float,
]


def _predict(model, fv, params, rng):
    flat = flatten_with_dropout(fv, params.dropout, rng)
    # inverse dropout: inference-time scores need no correction
    prediction = model.score_flat_features(flat) / (1.0 - params.dropout)
    return flat, prediction


def logistic_loss(corr: float) -> float:
    """log(1 + exp(-corr)), stable for very negative corr."""
    return float(np.logaddexp(0.0, -corr))


def update_logistic(model, fv, label, params, rng) -> float:
    flat, prediction = _predict(model, fv, params, rng)
    corr = min(LOGISTIC_CORR_CAP, label * prediction)
    loss = logistic_loss(corr)
    grad = -label / (1.0 + math.exp(corr))
    if grad != 0.0:
        model.update(grad, params.learning_rate, params.linfinity_cap, flat)
    return loss


def update_hinge(model, fv, label, params, rng) -> float:
    flat, prediction = _predict(model, fv, params, rng)
    loss = max(0.0, params.margin - label * prediction)
    if loss > 0.0:
        model.update(-label, params.learning_rate, params.linfinity_cap, flat)
    return loss


def update_regression(model, fv, label, params, rng) -> float:
    """Epsilon-insensitive L1 regression."""
    flat, prediction = _predict(model, fv, params, rng)
    diff = prediction - label
    if diff > params.epsilon:
        model.update(1.0, params.learning_rate, params.linfinity_cap, flat)
    elif diff < -params.epsilon:
        model.update(-1.0, params.learning_rate, params.linfinity_cap, flat)
    return abs(diff)


_LOSS_REGISTRY: Dict[str, LossFn] = {
    "logistic": update_logistic,
    "hinge": update_hinge,
    "regression": update_regression,
}


def resolve_loss(name: str) -> LossFn:
    if name not in _LOSS_REGISTRY:
        available = ", ".join(_LOSS_REGISTRY)
        raise ValueError(f"Unknown loss {name!r}. Available: {available}")
    return _LOSS_REGISTRY[name]


def pointwise_loss(
        example: Example,
        model: AdditiveModel,
        params: AdditiveTrainerParams,
        rng: np.random.Generator,
) -> float:
    """Apply one SGD step for the first feature vector; return its loss."""
    fv = example.first
    threshold = None if params.is_regression else params.rank_threshold
    label = fv.label(params.rank_key, threshold)
    return resolve_loss(params.loss)(model, fv, label, params, rng)
