#!filepath: additive_trainer/config/app_config.py
from __future__ import annotations

import os

import yaml
from pydantic import BaseModel, Field, ValidationError

from .log_config import LogConfig
from .trainer_config import AdditiveTrainerParams, load_trainer_params
from additive_trainer.utils.errors import ConfigurationError


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    trainer: AdditiveTrainerParams

    @classmethod
    def load(cls, path: str) -> "AppConfig":
        """
        加载 YAML 配置

        Layout:
            log:     {dir, rotation, retention, level}   (optional)
            trainer: {loss, num_bins, ...}
        """
        if not os.path.exists(path):
            raise ConfigurationError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if "trainer" not in raw:
            raise ConfigurationError(f"Config {path} has no 'trainer' section")

        trainer = load_trainer_params(raw["trainer"])

        try:
            log = LogConfig(**(raw.get("log") or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid log config: {e}") from e

        return cls(log=log, trainer=trainer)
