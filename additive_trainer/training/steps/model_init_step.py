# additive_trainer/training/steps/model_init_step.py
from __future__ import annotations

import numpy as np

from additive_trainer import logs
from additive_trainer.artifact import load_model
from additive_trainer.core.model import AdditiveModel
from additive_trainer.pipeline.step import PipelineStep
from additive_trainer.training.context import TrainingContext
from additive_trainer.training.engines.model_init_engine import ModelInitEngine
from additive_trainer.training.engines.sampling_engine import bernoulli_sample, round_seeds


class ModelInitStep(PipelineStep):
    """
    ModelInitStep（FINAL）

    Contract:
    - params.init_model == ""  -> fresh model, functions overwritten
    - otherwise                -> loaded model extended, existing kept
    - statistics come from a subsample-rate sample of ctx.examples
    - produces ctx.model / ctx.fresh_model
    """

    def run(self, ctx: TrainingContext) -> TrainingContext:
        params = ctx.params

        with self.timed():
            if params.init_model:
                model = load_model(params.init_model)
                fresh = False
            else:
                model = AdditiveModel()
                fresh = True

            sample_seq, _ = round_seeds(params.seed, 0, 0)
            rng = np.random.default_rng(sample_seq)
            init_examples = bernoulli_sample(ctx.examples, params.subsample, rng)

            engine = ModelInitEngine(
                num_bins=params.num_bins,
                min_count=params.min_count,
                rank_key=params.rank_key,
                linear_families=params.linear_feature,
            )
            added = engine.populate(model, init_examples, overwrite=fresh)

        logs.info(
            f"[{self.step_name}] Num features = {len(model)} "
            f"(added={added}, fresh={fresh}, forms={model.count_by_form()})"
        )

        ctx.model = model
        ctx.fresh_model = fresh
        return ctx
