# additive_trainer/workflows/additive_training.py
from __future__ import annotations

import uuid
from typing import Optional, Sequence

from additive_trainer import logs
from additive_trainer.config.trainer_config import AdditiveTrainerParams
from additive_trainer.core.model import AdditiveModel
from additive_trainer.core.types import Example
from additive_trainer.observability.instrumentation import Instrumentation
from additive_trainer.training.pipeline import TrainingPipeline
from additive_trainer.training.steps.bag_sgd_step import BagSGDStep
from additive_trainer.training.steps.checkpoint_step import CheckpointStep
from additive_trainer.training.steps.model_init_step import ModelInitStep
from additive_trainer.training.steps.prior_seed_step import PriorSeedStep
from additive_trainer.training.steps.prune_step import PruneStep


def build_additive_training(
        params: AdditiveTrainerParams,
        inst: Optional[Instrumentation] = None,
) -> TrainingPipeline:
    """
    Additive Training Workflow (FINAL / FROZEN)
    """
    inst = inst if inst is not None else Instrumentation()

    return TrainingPipeline(
        init_steps=[
            ModelInitStep(inst),
            PriorSeedStep(inst),
        ],
        round_steps=[
            BagSGDStep(inst),
            PruneStep(inst),
            CheckpointStep(inst),
        ],
        params=params,
        inst=inst,
    )


@logs.catch("additive training failed")
def train(
        examples: Sequence[Example],
        params: AdditiveTrainerParams,
        run_id: Optional[str] = None,
) -> AdditiveModel:
    run_id = run_id or uuid.uuid4().hex[:12]
    ctx = build_additive_training(params).run(run_id, examples)
    return ctx.require_model()
