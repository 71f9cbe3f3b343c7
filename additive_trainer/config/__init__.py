from .app_config import AppConfig
from .log_config import LogConfig
from .trainer_config import AdditiveTrainerParams, load_trainer_params

__all__ = ["AppConfig", "LogConfig", "AdditiveTrainerParams", "load_trainer_params"]
