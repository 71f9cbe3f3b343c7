# tests/test_cli.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import yaml
from typer.testing import CliRunner

from additive_trainer.cli import app

runner = CliRunner()


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    x = np.linspace(0.0, 1.0, 30)
    path = tmp_path / "train.parquet"
    pd.DataFrame({"x.v": x, "label": 2.0 * x}).to_parquet(path, index=False)
    return path


def write_config(tmp_path: Path, **trainer_overrides) -> Path:
    trainer = {
        "loss": "regression",
        "num_bins": 4,
        "num_bags": 1,
        "rank_key": "$rank",
        "learning_rate": 0.01,
        "dropout": 0.0,
        "subsample": 1.0,
        "linfinity_cap": 10.0,
        "smoothing_tolerance": 0.0,
        "linfinity_threshold": 0.0,
        "min_count": 1,
        "rank_threshold": 0.0,
        "iterations": 1,
        "model_output": str(tmp_path / "model"),
        "num_workers": 1,
    }
    trainer.update(trainer_overrides)
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({"log": {"dir": str(tmp_path / "logs")}, "trainer": trainer})
    )
    return path


def test_train_writes_checkpoint(tmp_path, data_path):
    config = write_config(tmp_path)

    result = runner.invoke(app, ["train", str(config), str(data_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "model" / "model.joblib").exists()
    assert (tmp_path / "model" / "artifact.json").exists()


def test_unknown_loss_exits_before_training(tmp_path, data_path):
    config = write_config(tmp_path, loss="softmax")

    result = runner.invoke(app, ["train", str(config), str(data_path)])

    assert result.exit_code == 1
    assert not (tmp_path / "model").exists()


def test_missing_data_file_exits_cleanly(tmp_path):
    config = write_config(tmp_path)

    result = runner.invoke(app, ["train", str(config), str(tmp_path / "absent.parquet")])

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
    assert not (tmp_path / "model").exists()


def test_missing_label_column_exits_cleanly(tmp_path, data_path):
    config = write_config(tmp_path)

    result = runner.invoke(
        app, ["train", str(config), str(data_path), "--label-column", "target"]
    )

    assert result.exit_code == 1
    assert not isinstance(result.exception, KeyError)


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "v0.1.0" in result.output
