# additive_trainer/core/functions.py
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

import numpy as np


class FunctionForm(str, Enum):
    SPLINE = "spline"
    LINEAR = "linear"


class FeatureFunction(ABC):
    """
    Scalar transfer function of one feature value (FINAL)

    Contract:
    - `form` tags the variant; spline-only passes dispatch on it
    - weights is a float64 vector owned by this instance
    - copy() is deep; worker-local mutation always goes through a copy
    """

    form: FunctionForm
    weights: np.ndarray

    # --------------------------------------------------
    # weights
    # --------------------------------------------------
    def get_weights(self) -> np.ndarray:
        return self.weights

    def set_weights(self, weights: Sequence[float]) -> None:
        arr = np.asarray(weights, dtype=np.float64)
        if arr.shape != self.weights.shape:
            raise ValueError(
                f"{self.form.value} expects {self.weights.shape[0]} weights, "
                f"got {arr.shape}"
            )
        self.weights = arr.copy()

    def linf_norm(self) -> float:
        if self.weights.size == 0:
            return 0.0
        return float(np.max(np.abs(self.weights)))

    def clip(self, cap: float) -> None:
        """Clamp every weight to [-cap, cap]; cap <= 0 disables clipping."""
        if cap <= 0:
            return
        np.clip(self.weights, -cap, cap, out=self.weights)

    # --------------------------------------------------
    # variant behaviour
    # --------------------------------------------------
    @abstractmethod
    def evaluate(self, x: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def update(self, delta: float, x: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_priors(self, params: Sequence[float]) -> None:
        raise NotImplementedError

    @abstractmethod
    def copy(self) -> "FeatureFunction":
        raise NotImplementedError


class Spline(FeatureFunction):
    """
    Piecewise-linear curve over [min_val, max_val] with num_bins control
    points spaced uniformly. Values outside the range clamp to the end bins.
    """

    form = FunctionForm.SPLINE

    def __init__(self, min_val: float, max_val: float, num_bins: int):
        if num_bins < 2:
            raise ValueError(f"Spline needs num_bins >= 2, got {num_bins}")
        if max_val <= min_val:
            max_val = min_val + 1.0

        self.min_val = float(min_val)
        self.max_val = float(max_val)
        self.num_bins = int(num_bins)
        self.scale = (self.num_bins - 1) / (self.max_val - self.min_val)
        self.weights = np.zeros(self.num_bins, dtype=np.float64)

    def _locate(self, x: float):
        """(low bin, fraction toward low+1) for an in-range x."""
        t = (x - self.min_val) * self.scale
        low = min(int(t), self.num_bins - 2)
        return low, t - low

    def evaluate(self, x: float) -> float:
        if x <= self.min_val:
            return float(self.weights[0])
        if x >= self.max_val:
            return float(self.weights[-1])
        low, frac = self._locate(x)
        return float((1.0 - frac) * self.weights[low] + frac * self.weights[low + 1])

    def update(self, delta: float, x: float) -> None:
        if x <= self.min_val:
            self.weights[0] += delta
        elif x >= self.max_val:
            self.weights[-1] += delta
        else:
            low, frac = self._locate(x)
            self.weights[low] += delta * (1.0 - frac)
            self.weights[low + 1] += delta * frac

    def set_priors(self, params: Sequence[float]) -> None:
        # straight line from params[0] at the first bin to params[1] at the last
        start, end = float(params[0]), float(params[1])
        self.weights = np.linspace(start, end, self.num_bins, dtype=np.float64)

    def copy(self) -> "Spline":
        out = Spline(self.min_val, self.max_val, self.num_bins)
        out.weights = self.weights.copy()
        return out

    def __repr__(self) -> str:
        return (
            f"Spline(min={self.min_val}, max={self.max_val}, "
            f"bins={self.num_bins}, linf={self.linf_norm():.4g})"
        )


class Linear(FeatureFunction):
    """f(x) = w0 + w1 * x, identity-initialised to [0, 1]."""

    form = FunctionForm.LINEAR

    def __init__(self, w0: float = 0.0, w1: float = 1.0):
        self.weights = np.array([w0, w1], dtype=np.float64)

    def evaluate(self, x: float) -> float:
        return float(self.weights[0] + self.weights[1] * x)

    def update(self, delta: float, x: float) -> None:
        self.weights[0] += delta
        self.weights[1] += delta * x

    def set_priors(self, params: Sequence[float]) -> None:
        self.weights = np.array([params[0], params[1]], dtype=np.float64)

    def copy(self) -> "Linear":
        return Linear(float(self.weights[0]), float(self.weights[1]))

    def __repr__(self) -> str:
        return f"Linear(w0={self.weights[0]:.4g}, w1={self.weights[1]:.4g})"
