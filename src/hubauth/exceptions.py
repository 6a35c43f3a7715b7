"""Exception hierarchy for hubauth.

All exceptions inherit from :class:`HubauthError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`hubauth.exit_codes`.
The CLI entry point in :func:`hubauth.app.main` catches ``HubauthError``
and exits with the appropriate code. Library callers (the host's HTTP
pipeline) catch the specific subclasses instead.

Subclass hierarchy::

    HubauthError (exit 1)
    +-- InvalidUsageError              (exit 2)
    +-- AuthError                      (exit 3)
    |   +-- ConsentRequiredError       (exit 3)
    |   +-- ExchangeFailedError        (exit 3)
    +-- ConfigError                    (exit 1)
        +-- MissingConfigurationError  (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from hubauth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)

if TYPE_CHECKING:
    import httpx


class HubauthError(Exception):
    """Base exception for all hubauth errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(HubauthError):
    """Raised for invalid CLI arguments or an operation that does not fit the active auth mode."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(HubauthError):
    """Raised when authentication fails."""

    exit_code = EXIT_AUTH_FAILURE


class ConsentRequiredError(AuthError):
    """Raised when no authorization code or refresh token is available.

    The host is expected to send the end user to :attr:`redirect_uri`, the
    provider's consent page. The failure ends the current token attempt and
    is never retried automatically.

    Args:
        redirect_uri: The authorization URI the user must visit.
        message: Human-readable explanation shown to the user.
    """

    def __init__(self, redirect_uri: str, message: str):
        super().__init__(message)
        self.redirect_uri = redirect_uri


class ExchangeFailedError(AuthError):
    """Raised when the token endpoint answers with a non-success status.

    Args:
        response: The untouched token endpoint response.
        message: Optional override for the generated message.
    """

    def __init__(self, response: httpx.Response, message: Optional[str] = None):
        self.response = response
        self.status_code = response.status_code
        super().__init__(message or f"Token exchange failed with status {response.status_code}")


class ConfigError(HubauthError):
    """Raised for configuration problems (unreadable variable file, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class MissingConfigurationError(ConfigError):
    """Raised when a mandatory configuration property has no value.

    Args:
        key: The property key that could not be resolved (e.g. ``Auth.scope``).
        message: Optional override for the generated message.
    """

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Missing mandatory configuration property '{key}'")
