"""Custom exception types for measure-review-time."""


class ReviewTimeError(Exception):
    """Base exception for all recoverable review-time errors."""


class ConfigurationError(ReviewTimeError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(ReviewTimeError):
    """Raised when GitHub credentials are unavailable."""


class ApiError(ReviewTimeError):
    """Raised when a GitHub API request fails or returns an unexpected response."""
