# additive_trainer/training/engines/smoothing_engine.py
from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.polynomial import polynomial as P

from additive_trainer.core.functions import FeatureFunction, FunctionForm

POLY_DEGREE = 3


def _grid(n: int) -> np.ndarray:
    return np.linspace(0.0, 1.0, n) if n > 1 else np.zeros(1)


def fit_polynomial(data: np.ndarray) -> Tuple[float, np.ndarray]:
    """
    Least-squares cubic over bin index scaled to [0, 1].

    Returns (mean absolute residual, coefficients low -> high).
    """
    data = np.asarray(data, dtype=np.float64)
    x = _grid(data.size)
    deg = min(POLY_DEGREE, data.size - 1)
    coeff = P.polyfit(x, data, deg)
    err = float(np.mean(np.abs(P.polyval(x, coeff) - data)))
    return err, coeff


def evaluate_polynomial(coeff: np.ndarray, n: int) -> np.ndarray:
    return P.polyval(_grid(n), coeff)


def smooth_spline(tolerance: float, func: FeatureFunction) -> bool:
    """
    Replace spline weights by their polynomial fit when the fit error is
    below tolerance. Returns True when the weights were replaced.
    """
    if func.form is not FunctionForm.SPLINE:
        return False

    weights = func.get_weights()
    err, coeff = fit_polynomial(weights)
    if err >= tolerance:
        return False

    func.set_weights(evaluate_polynomial(coeff, weights.size))
    return True
