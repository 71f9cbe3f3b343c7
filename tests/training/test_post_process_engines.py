# tests/training/test_post_process_engines.py
from __future__ import annotations

import numpy as np
import pytest

from additive_trainer.core.functions import Linear, Spline
from additive_trainer.core.model import AdditiveModel
from additive_trainer.training.engines.prune_engine import delete_small_splines
from additive_trainer.training.engines.smoothing_engine import (
    fit_polynomial,
    smooth_spline,
)


# -----------------------------------------------------------------------------
# smoothing
# -----------------------------------------------------------------------------
def test_cubic_weights_fit_with_near_zero_error():
    x = np.linspace(0.0, 1.0, 8)
    err, _ = fit_polynomial(1.0 - 2.0 * x + 0.5 * x ** 3)

    assert err < 1e-9


def test_smooth_replaces_weights_when_fit_is_good():
    s = Spline(0.0, 1.0, 8)
    x = np.linspace(0.0, 1.0, 8)
    clean = 2.0 * x ** 2
    s.set_weights(clean + np.array([1e-4, -1e-4] * 4))

    assert smooth_spline(1e-2, s) is True
    np.testing.assert_allclose(s.get_weights(), clean, atol=1e-3)


def test_smooth_leaves_rough_curve_untouched():
    s = Spline(0.0, 1.0, 8)
    zigzag = np.array([1.0, -1.0] * 4)
    s.set_weights(zigzag)

    assert smooth_spline(1e-3, s) is False
    np.testing.assert_array_equal(s.get_weights(), zigzag)


def test_smooth_ignores_linear_functions():
    f = Linear(1.0, 2.0)

    assert smooth_spline(1e9, f) is False
    np.testing.assert_array_equal(f.get_weights(), [1.0, 2.0])


# -----------------------------------------------------------------------------
# pruning
# -----------------------------------------------------------------------------
@pytest.fixture
def model() -> AdditiveModel:
    m = AdditiveModel()

    m.add_function("zero", "v", Spline(0.0, 1.0, 4), overwrite=True)

    big = Spline(0.0, 1.0, 4)
    big.set_weights([0.0, 10.0, 0.0, 0.0])
    m.add_function("big", "v", big, overwrite=True)

    m.add_function("lin", "v", Linear(0.0, 0.0), overwrite=True)
    return m


def test_zero_spline_is_pruned(model):
    deleted = delete_small_splines(model, 1e-6)

    assert deleted == [("zero", "v")]
    assert ("zero", "v") not in model


def test_large_spline_is_kept(model):
    delete_small_splines(model, 1e-6)

    assert ("big", "v") in model


def test_linear_functions_are_never_pruned(model):
    delete_small_splines(model, 1e9)

    assert ("lin", "v") in model
    assert ("big", "v") not in model
