"""Process exit codes of the ``cacheable`` command line.

``cacheable fetch https://unreachable.invalid/`` exits with
:data:`EXIT_CONNECTION_ERROR` so scripts can tell a network failure from
bad arguments without parsing stderr.
"""

EXIT_GENERIC_FAILURE = 1
EXIT_INVALID_USAGE = 2
EXIT_CONNECTION_ERROR = 6
EXIT_INTERRUPTED = 130
