# additive_trainer/training/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from additive_trainer.artifact import ModelArtifact
from additive_trainer.config.trainer_config import AdditiveTrainerParams
from additive_trainer.core.model import AdditiveModel
from additive_trainer.core.types import Example
from additive_trainer.training.engines.prior_engine import PriorSeedReport


@dataclass
class TrainingContext:
    """
    TrainingContext（FINAL）

    Semantics:
    - One context == one training run
    - model is owned by the driver; workers only ever see snapshots
    - iteration is 0 during init steps, then 1..params.iterations
    """

    # -------------------------
    # Identity (FROZEN)
    # -------------------------
    run_id: str
    params: AdditiveTrainerParams
    examples: Sequence[Example]

    # -------------------------
    # Rolling state
    # -------------------------
    model: Optional[AdditiveModel] = None
    fresh_model: bool = True
    iteration: int = 0

    prior_report: Optional[PriorSeedReport] = None
    artifact: Optional[ModelArtifact] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
    loss_history: List[float] = field(default_factory=list)

    def require_model(self) -> AdditiveModel:
        if self.model is None:
            raise RuntimeError("TrainingContext has no model; run ModelInitStep first")
        return self.model
