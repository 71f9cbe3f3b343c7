# additive_trainer/config/trainer_config.py
from __future__ import annotations

from typing import Any, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from additive_trainer import logs
from additive_trainer.utils.errors import ConfigurationError


LossName = Literal["logistic", "hinge", "regression"]


class AdditiveTrainerParams(BaseModel):
    """
    AdditiveTrainerParams（FINAL / FROZEN）

    Semantics:
    - One instance == one training run
    - Immutable after load; every engine and step reads from it
    - Optional keys fall back to documented defaults silently
    - Unknown keys are ignored; the section is shared with the transform stage
    """

    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())

    # -------------------------
    # loss
    # -------------------------
    loss: LossName
    margin: float = 1.0
    epsilon: float = 0.0
    rank_key: str
    rank_threshold: float
    rank_margin: float = 0.5  # reserved for list-wise ranking losses

    # -------------------------
    # model shape
    # -------------------------
    num_bins: int = Field(ge=2)
    min_count: int = Field(ge=0)
    linear_feature: List[str] = Field(default_factory=list)
    multiscale: List[int] = Field(default_factory=list)  # reserved
    init_model: str = ""
    prior: List[str] = Field(default_factory=list)

    # -------------------------
    # optimisation
    # -------------------------
    iterations: int = Field(ge=1)
    num_bags: int = Field(ge=1)
    learning_rate: float = Field(gt=0)
    dropout: float = Field(ge=0.0, lt=1.0)
    subsample: float = Field(gt=0.0, le=1.0)
    linfinity_cap: float
    smoothing_tolerance: float
    linfinity_threshold: float
    loss_mod: int = Field(default=100, ge=1)

    # -------------------------
    # runtime
    # -------------------------
    model_output: str
    seed: Optional[int] = None
    num_workers: Optional[int] = Field(default=None, ge=1)
    bag_retries: int = Field(default=2, ge=1)

    @property
    def is_ranking(self) -> bool:
        # all supported losses are pointwise
        return False

    @property
    def is_regression(self) -> bool:
        return self.loss == "regression"


def load_trainer_params(raw: Mapping[str, Any]) -> AdditiveTrainerParams:
    """
    Validate a raw mapping into AdditiveTrainerParams.

    Raises ConfigurationError (never a bare ValidationError) so callers
    only have to handle one initialization error type. Keys the trainer
    does not know are logged and dropped.
    """
    raw = dict(raw)
    ignored = sorted(str(k) for k in raw if k not in AdditiveTrainerParams.model_fields)
    if ignored:
        logs.warning(f"[TrainerConfig] ignoring unknown keys: {', '.join(ignored)}")

    try:
        return AdditiveTrainerParams(**raw)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(p) for p in err["loc"]) for err in e.errors()
        )
        logs.error(f"[TrainerConfig] invalid trainer config: {fields}")
        raise ConfigurationError(
            f"Invalid trainer config ({fields}): {e}"
        ) from e
