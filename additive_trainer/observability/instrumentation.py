#!filepath: additive_trainer/observability/instrumentation.py
from __future__ import annotations

from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict

from additive_trainer import logs
from additive_trainer.observability.timer import Timer
from additive_trainer.observability.timeline_reporter import TimelineReporter


@dataclass
class Instrumentation:
    """
    Instrumentation（Leaf-only accounting）

    - timer(name) 累计到 timeline（同名 timer 跨迭代累加）
    - record=False 的 timer 只定义 scope，不产生副作用
    - metrics 只保存最新值
    """

    enabled: bool = True

    def __post_init__(self):
        self._timer = Timer(enabled=self.enabled)
        self.timeline: Dict[str, float] = OrderedDict()
        self.metrics: Dict[str, Any] = {}

    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                elapsed = inst._timer.end(name)
                if record:
                    inst.timeline[name] = inst.timeline.get(name, 0.0) + elapsed

        return _ctx()

    def record(self, name: str, value: Any) -> None:
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")

    def generate_timeline_report(self, run_id: str):
        TimelineReporter(self.timeline, run_id).print()


class NoOpInstrumentation(Instrumentation):
    def __init__(self):
        super().__init__(enabled=False)
