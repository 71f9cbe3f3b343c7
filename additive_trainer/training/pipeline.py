# additive_trainer/training/pipeline.py
from __future__ import annotations

from typing import List, Sequence

from additive_trainer import logs
from additive_trainer.config.trainer_config import AdditiveTrainerParams
from additive_trainer.core.types import Example
from additive_trainer.observability.instrumentation import Instrumentation
from additive_trainer.pipeline.step import PipelineStep
from additive_trainer.training.context import TrainingContext


class TrainingPipeline:
    """
    TrainingPipeline（FINAL / FROZEN）

    Semantics:
    - init_steps run once (iteration = 0)
    - round_steps run once per iteration, strictly in order
    - iteration i+1 starts only after every round step of i returned,
      checkpoint included
    """

    def __init__(
            self,
            *,
            init_steps: List[PipelineStep],
            round_steps: List[PipelineStep],
            params: AdditiveTrainerParams,
            inst: Instrumentation,
    ):
        self.init_steps = init_steps
        self.round_steps = round_steps
        self.params = params
        self.inst = inst

    def run(self, run_id: str, examples: Sequence[Example]) -> TrainingContext:
        logs.info(f"[TrainingPipeline] START run_id={run_id} examples={len(examples)}")
        logs.info(f"[TrainingPipeline] Training using {self.params.loss}")

        ctx = TrainingContext(
            run_id=run_id,
            params=self.params,
            examples=examples,
        )

        for step in self.init_steps:
            ctx = step.run(ctx)

        for i in range(1, self.params.iterations + 1):
            ctx.iteration = i
            logs.info(f"[TrainingPipeline] Iteration {i}")

            for step in self.round_steps:
                ctx = step.run(ctx)

        self.inst.generate_timeline_report(run_id)
        logs.info("[TrainingPipeline] DONE")
        return ctx
