"""Custom error types used in chartcache."""


class ChartCacheError(Exception):
    """Base class for chartcache errors."""


class InvalidQuery(ChartCacheError, ValueError):
    """Chart query rejected before it is encoded into a cache key."""


class FetchFailed(ChartCacheError, RuntimeError):
    """The dataset collaborator failed or timed out for a cache key."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key
