"""Errors raised by the configuration layer and the command line.

The caching core never raises these. Sender and provider errors reach the
caller unchanged. :func:`cacheable.app.main` turns a :class:`CacheableError`
into its ``exit_code``.
"""

from cacheable.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class CacheableError(Exception):
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CacheableError):
    """Malformed command-line input, such as a header without a colon."""

    exit_code = EXIT_INVALID_USAGE


class ConnectionError_(CacheableError):
    """The request never got a response (DNS, refused, timeout)."""

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(CacheableError):
    """Unreadable config file or an invalid setting."""
