"""Errors raised at the boundary with external services."""

from __future__ import annotations


class ExternalServiceError(Exception):
    """A lookup or submission call failed; ``description`` is safe to show to the user."""

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description


class LookupServiceError(ExternalServiceError):
    pass


class SubmissionError(ExternalServiceError):
    pass


class ConfigurationError(ExternalServiceError):
    """A required endpoint is not configured."""
