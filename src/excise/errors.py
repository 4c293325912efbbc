from __future__ import annotations


class ExciseError(Exception):
    """Base class for errors that abort a run."""


class ConfigError(ExciseError):
    pass


class TargetError(ExciseError):
    pass


class ProjectLoadError(ExciseError):
    pass
