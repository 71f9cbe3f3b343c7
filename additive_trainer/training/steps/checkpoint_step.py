# additive_trainer/training/steps/checkpoint_step.py
from __future__ import annotations

from additive_trainer.artifact import save_model
from additive_trainer.pipeline.step import PipelineStep
from additive_trainer.training.context import TrainingContext


class CheckpointStep(PipelineStep):
    """
    CheckpointStep（FINAL / FROZEN）

    Semantics:
    - overwrite params.model_output after every round
    - produces ctx.artifact
    """

    def run(self, ctx: TrainingContext) -> TrainingContext:
        with self.timed():
            ctx.artifact = save_model(
                ctx.require_model(),
                ctx.params.model_output,
                run_id=ctx.run_id,
                iteration=ctx.iteration,
                metrics=ctx.metrics,
            )
        return ctx
