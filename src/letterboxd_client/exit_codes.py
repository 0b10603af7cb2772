"""Numeric process exit codes used by the ``letterboxd-auth`` CLI.

Each constant maps to an error category and is referenced by the
corresponding :class:`~letterboxd_client.exceptions.LetterboxdError`
subclass. Shell wrappers can inspect the exit code to tell a rejected
credential from a network failure without parsing stderr.

Example::

    $ letterboxd-auth auth refresh --refresh-token expired
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the token endpoint rejected the grant
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration problems)."""

EXIT_INVALID_USAGE = 2
"""The command or API call was invoked with invalid or missing arguments."""

EXIT_AUTH_FAILURE = 3
"""Credentials were missing, or the token endpoint refused the grant."""

EXIT_CONNECTION_ERROR = 4
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_HTTP_ERROR = 5
"""The API answered a dispatched request with an HTTP 4xx/5xx status."""
