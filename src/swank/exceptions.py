"""Exception hierarchy for swank.

All exceptions inherit from :class:`SwankError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`swank.exit_codes`.
These are *infrastructure* failures: they end a pipeline run.  Data-level
problems (rule and schema violations) are never raised; they accumulate in
the run's error list instead.

Subclass hierarchy::

    SwankError                  (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- FetchError              (exit 6)
    +-- ParseError              (exit 7)
    +-- UnsupportedVersionError (exit 9)
    +-- ValidatorUnavailableError (exit 10)
    +-- ConfigError             (exit 1)
"""

from __future__ import annotations

from typing import Optional

from swank.exit_codes import (
    EXIT_FETCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PARSE_ERROR,
    EXIT_UNSUPPORTED_VERSION,
    EXIT_VALIDATOR_UNAVAILABLE,
)


class SwankError(Exception):
    """Base exception for all swank errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SwankError):
    """Raised for invalid CLI arguments or options."""

    exit_code = EXIT_INVALID_USAGE


class FetchError(SwankError):
    """Raised when a network fetch of a document or schema fails.

    Args:
        message: Human-readable error description.
        url: The URL that was being fetched.
        status_code: HTTP status code when the server answered with an
            error, ``None`` for transport-level failures.
    """

    exit_code = EXIT_FETCH_ERROR

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(SwankError):
    """Raised when input text cannot be parsed into a document mapping."""

    exit_code = EXIT_PARSE_ERROR


class UnsupportedVersionError(SwankError):
    """Raised when no ruleset or schema is known for a declared spec version."""

    exit_code = EXIT_UNSUPPORTED_VERSION

    def __init__(self, message: str, version: Optional[str] = None):
        super().__init__(message)
        self.version = version


class ValidatorUnavailableError(SwankError):
    """Raised when the JSON-Schema validator cannot be constructed."""

    exit_code = EXIT_VALIDATOR_UNAVAILABLE


class ConfigError(SwankError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
