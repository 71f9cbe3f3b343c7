#!filepath: additive_trainer/__init__.py

from .utils.logger import Logging, logs
from .utils.retry import Retry
from .utils.errors import UserInputError, ConfigurationError, ArtifactError

__version__ = "0.1.0"

# alias 简化调用
retry = Retry

__all__ = [
    "logs", "Logging",
    "retry",
    "UserInputError", "ConfigurationError", "ArtifactError",
    "__version__",
]
