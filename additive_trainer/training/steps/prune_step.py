# additive_trainer/training/steps/prune_step.py
from __future__ import annotations

from additive_trainer import logs
from additive_trainer.pipeline.step import PipelineStep
from additive_trainer.training.context import TrainingContext
from additive_trainer.training.engines.prune_engine import delete_small_splines


class PruneStep(PipelineStep):
    """Delete splines whose L-infinity norm is below linfinity_threshold."""

    def run(self, ctx: TrainingContext) -> TrainingContext:
        with self.timed():
            deleted = delete_small_splines(
                ctx.require_model(), ctx.params.linfinity_threshold
            )

        logs.info(f"[{self.step_name}] Deleting {len(deleted)} empty splines")
        ctx.metrics["num_pruned"] = len(deleted)
        return ctx
