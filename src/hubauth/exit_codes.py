"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~hubauth.exceptions.HubauthError` subclass.
Shell wrappers can inspect the exit code to tell a missing consent from a
broken configuration without parsing stderr.

Example::

    $ hubauth exchange
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- consent required or token exchange rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, including configuration problems."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or in the wrong auth mode."""

EXIT_AUTH_FAILURE = 3
"""Authentication failed: consent is missing or the token endpoint refused."""
