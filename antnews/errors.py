"""Exceptions raised at component boundaries."""


class AntnewsError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(AntnewsError, ValueError):
    """Configuration file or source list is unusable."""


class FetchStageError(AntnewsError):
    """The FETCH stage could not run at all."""
