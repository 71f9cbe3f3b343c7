# additive_trainer/utils/errors.py
class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided input (config, paths, priors).
    Should NOT print traceback.
    """


class ConfigurationError(UserInputError):
    """
    Trainer configuration failed validation.

    Raised before any training starts; the embedding program decides
    whether to exit.
    """


class ArtifactError(UserInputError):
    """Model artifact directory is missing or unreadable."""


class MissingLabelError(ValueError):
    """Feature vector carries no value under the rank key."""
