"""
Engine error taxonomy.

Only SourceUnavailableError is recovered inside the engine; the rest reach the caller.
"""


class RecommendationError(Exception):
    """Base class for engine errors."""


class PreferenceValidationError(RecommendationError, ValueError):
    """Candidate preferences are malformed (empty branches, non-positive score, unknown exam)."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = errors or []


class CatalogUnavailableError(RecommendationError):
    """The institution catalog could not be read."""


class SourceUnavailableError(RecommendationError):
    """A community post source failed (timeout, HTTP error, malformed payload)."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class RecommendationTimeoutError(RecommendationError):
    """The request deadline or cancellation fired and partial results are disabled."""
