from __future__ import annotations


class WrappedError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigError(WrappedError):
    """A required setting is missing or malformed."""


class ApiError(WrappedError):
    """The Strava API returned an error after the allowed retry."""


class AuthError(WrappedError):
    """The GitHub App key could not be used or the token exchange was rejected."""


class PublishError(WrappedError):
    """A GitHub contents read or write failed."""
