from __future__ import annotations


class ExerciserError(RuntimeError):
    pass


class SessionError(ExerciserError):
    """Raised when the device session cannot be created. Fatal for the run."""


class ConfigError(ValueError):
    pass
