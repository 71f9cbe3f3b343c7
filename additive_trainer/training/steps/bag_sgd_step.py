# additive_trainer/training/steps/bag_sgd_step.py
from __future__ import annotations

from functools import partial

import numpy as np

from additive_trainer import logs
from additive_trainer.pipeline.parallel import ParallelExecutor, ParallelKind
from additive_trainer.pipeline.step import PipelineStep
from additive_trainer.training.context import TrainingContext
from additive_trainer.training.engines.bag_sgd_engine import (
    BagTask,
    aggregate_bags,
    train_bag,
    write_back,
)
from additive_trainer.training.engines.sampling_engine import (
    bernoulli_sample,
    partition_bags,
    round_seeds,
)


class BagSGDStep(PipelineStep):
    """
    BagSGDStep（ONLINE / FINAL）

    Contract:
    - consumes ctx.model (read via a deep-copied snapshot)
    - sample -> num_bags bags -> train_bag per bag (parallel)
    - averaged functions are written back only for keys still in ctx.model
    - any bag failure propagates; ctx.model is then left untouched
    """

    def run(self, ctx: TrainingContext) -> TrainingContext:
        params = ctx.params
        model = ctx.require_model()

        with self.timed():
            sample_seq, bag_seqs = round_seeds(params.seed, ctx.iteration, params.num_bags)
            rng = np.random.default_rng(sample_seq)

            sampled = bernoulli_sample(ctx.examples, params.subsample, rng)
            bags = partition_bags(sampled, params.num_bags, rng)
            tasks = [
                BagTask(index=i, examples=bag, seed=seq)
                for i, (bag, seq) in enumerate(zip(bags, bag_seqs))
            ]

            snapshot = model.snapshot()
            results = ParallelExecutor.run(
                kind=ParallelKind.BAG,
                items=tasks,
                handler=partial(train_bag, snapshot=snapshot, params=params),
                max_workers=params.num_workers,
                max_attempts=params.bag_retries,
            )

            aggregated = aggregate_bags(results, params)
            written = write_back(model, aggregated)

        num_examples = sum(r.num_examples for r in results)
        mean_loss = (
            sum(r.loss_sum for r in results) / num_examples if num_examples else 0.0
        )

        logs.info(
            f"[{self.step_name}] iteration={ctx.iteration} sampled={num_examples} "
            f"bags={params.num_bags} written={written} mean_loss={mean_loss:.6f}"
        )

        ctx.loss_history.append(mean_loss)
        ctx.metrics.update(
            {
                "iteration": ctx.iteration,
                "mean_loss": mean_loss,
                "num_sampled": num_examples,
                "num_written": written,
            }
        )
        self.inst.record(f"mean_loss@{ctx.iteration}", mean_loss)
        return ctx
