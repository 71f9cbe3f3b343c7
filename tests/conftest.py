# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional

import pytest
from loguru import logger

from additive_trainer.config.trainer_config import AdditiveTrainerParams
from additive_trainer.core.types import Example, FeatureVector, make_feature_vector


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


@pytest.fixture
def make_params(tmp_path: Path) -> Callable[..., AdditiveTrainerParams]:
    """
    Factory for a valid regression config; override any key by kwarg.
    """

    def _make(**overrides) -> AdditiveTrainerParams:
        raw = dict(
            loss="regression",
            num_bins=4,
            num_bags=1,
            rank_key="label",
            rank_threshold=0.0,
            learning_rate=0.01,
            dropout=0.0,
            subsample=1.0,
            linfinity_cap=100.0,
            smoothing_tolerance=0.0,
            linfinity_threshold=1e-6,
            min_count=1,
            iterations=1,
            model_output=str(tmp_path / "model"),
            seed=7,
            num_workers=1,
        )
        raw.update(overrides)
        return AdditiveTrainerParams(**raw)

    return _make


@pytest.fixture
def make_example() -> Callable[..., Example]:
    """
    make_example({"x": {"v": 1.0}}, label=2.0, strings={"city": ["sf"]})
    """

    def _make(
            floats: Optional[Dict[str, Dict[str, float]]] = None,
            *,
            label: Optional[float] = None,
            strings: Optional[Dict[str, list]] = None,
            rank_key: str = "label",
    ) -> Example:
        floats = {f: dict(v) for f, v in (floats or {}).items()}
        if label is not None:
            floats[rank_key] = {"score": label}
        fv: FeatureVector = make_feature_vector(floats, strings)
        return Example.pointwise(fv)

    return _make
