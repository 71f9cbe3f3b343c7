# additive_trainer/artifact.py
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import joblib

from additive_trainer import logs
from additive_trainer.core.model import AdditiveModel
from additive_trainer.utils.errors import ArtifactError

MODEL_FILE = "model.joblib"
META_FILE = "artifact.json"


@dataclass(frozen=True)
class ModelArtifact:
    """
    ModelArtifact（FINAL / FROZEN）

    Semantics:
    - path always points to an artifact ROOT directory
    - overwritten in place after every training round
    """
    path: Path
    run_id: str
    iteration: int
    created_at: datetime
    num_functions: Dict[str, int]
    metrics: Optional[Dict[str, Any]] = None


def save_model(
        model: AdditiveModel,
        output: str | Path,
        *,
        run_id: str,
        iteration: int,
        metrics: Optional[Dict[str, Any]] = None,
) -> ModelArtifact:
    artifact_dir = Path(output)
    artifact_dir.mkdir(parents=True, exist_ok=True)

    # write-then-rename
    model_tmp = artifact_dir / f"{MODEL_FILE}.tmp"
    joblib.dump(model, model_tmp)
    model_tmp.replace(artifact_dir / MODEL_FILE)

    artifact = ModelArtifact(
        path=artifact_dir,
        run_id=run_id,
        iteration=iteration,
        created_at=datetime.now(timezone.utc),
        num_functions=model.count_by_form(),
        metrics=dict(metrics or {}),
    )

    meta = {
        "run_id": artifact.run_id,
        "iteration": artifact.iteration,
        "created_at": artifact.created_at.isoformat(),
        "num_functions": artifact.num_functions,
        "metrics": artifact.metrics,
    }
    meta_tmp = artifact_dir / f"{META_FILE}.tmp"
    meta_tmp.write_text(json.dumps(meta, indent=2, default=float))
    meta_tmp.replace(artifact_dir / META_FILE)

    logs.info(f"[Artifact] checkpoint iteration={iteration} -> {artifact_dir}")
    return artifact


def resolve_model_artifact(artifact_dir: str | Path) -> ModelArtifact:
    artifact_dir = Path(artifact_dir)
    meta_path = artifact_dir / META_FILE
    if not meta_path.exists():
        raise ArtifactError(f"[ModelArtifact] {META_FILE} not found in {artifact_dir}")

    meta = json.loads(meta_path.read_text())
    return ModelArtifact(
        path=artifact_dir,
        run_id=meta["run_id"],
        iteration=int(meta["iteration"]),
        created_at=datetime.fromisoformat(meta["created_at"]),
        num_functions=dict(meta.get("num_functions", {})),
        metrics=meta.get("metrics"),
    )


def load_model(artifact_dir: str | Path) -> AdditiveModel:
    artifact = resolve_model_artifact(artifact_dir)
    model_path = artifact.path / MODEL_FILE
    if not model_path.exists():
        raise ArtifactError(f"[ModelArtifact] {MODEL_FILE} not found in {artifact.path}")

    model = joblib.load(model_path)
    if not isinstance(model, AdditiveModel):
        raise ArtifactError(
            f"[ModelArtifact] {model_path} holds {type(model).__name__}, not AdditiveModel"
        )

    logs.info(
        f"[ModelArtifact] loaded {len(model)} functions "
        f"(iteration={artifact.iteration}) from {artifact.path}"
    )
    return model
