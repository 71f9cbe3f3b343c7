# additive_trainer/pipeline/step.py
from __future__ import annotations

from typing import TYPE_CHECKING

from additive_trainer.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)

if TYPE_CHECKING:
    from additive_trainer.training.context import TrainingContext


class PipelineStep:
    """
    Pipeline Step 基类（FINAL）

    职责：
      - orchestration：把 engine 绑定到 TrainingContext
      - 提供 Step 级计时边界

    设计铁律：
      - Step 不做数值计算（交给 engine）
      - Step 行为不依赖 inst 是否存在
    """

    def __init__(self, inst: Instrumentation | None = None):
        # 永远保证 inst 可用（No-op 语义）
        self.inst: Instrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    @property
    def step_name(self) -> str:
        """默认使用类名作为 Step 名称。"""
        return self.__class__.__name__

    def timed(self):
        return self.inst.timer(self.step_name)

    def run(self, ctx: "TrainingContext") -> "TrainingContext":
        raise NotImplementedError
