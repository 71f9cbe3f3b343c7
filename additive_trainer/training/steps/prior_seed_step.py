# additive_trainer/training/steps/prior_seed_step.py
from __future__ import annotations

from additive_trainer import logs
from additive_trainer.pipeline.step import PipelineStep
from additive_trainer.training.context import TrainingContext
from additive_trainer.training.engines.prior_engine import seed_priors


class PriorSeedStep(PipelineStep):
    """
    Seed function weights from params.prior.

    Fresh models only; a loaded model keeps its trained weights.
    Never fails the run: per-entry failures land in ctx.prior_report.
    """

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if not ctx.params.prior:
            logs.info(f"[{self.step_name}] No prior given")
            return ctx
        if not ctx.fresh_model:
            logs.info(f"[{self.step_name}] extending loaded model -> priors ignored")
            return ctx

        with self.timed():
            report = seed_priors(ctx.params.prior, ctx.require_model())

        if report.failures:
            logs.warning(
                f"[{self.step_name}] {len(report.failures)} malformed prior(s) skipped: "
                + "; ".join(f"{f.entry!r} ({f.reason})" for f in report.failures)
            )
        logs.info(
            f"[{self.step_name}] applied={len(report.applied)} "
            f"missing={len(report.missing)}"
        )

        ctx.prior_report = report
        return ctx
