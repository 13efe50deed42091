"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~completers.exceptions.CompletersError` subclass.
Shell wrappers can inspect the exit code of ``completers complete`` to tell
why a completion was suppressed without parsing stderr.

Example::

    $ completers complete --point=2 "gi st"
    $ echo $?
    12   # EXIT_PROCESS_TIMEOUT -- the completion process was too slow
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_LAUNCH_FAILURE = 11
"""The completion process could not be located or started."""

EXIT_PROCESS_TIMEOUT = 12
"""The completion process exceeded its latency budget and was terminated."""

EXIT_MALFORMED_RESULT = 13
"""The completion process produced a result record that could not be decoded."""

EXIT_NONZERO_EXIT = 14
"""The completion process exited with a non-zero status."""

EXIT_BUSY = 15
"""Another completion request was still in flight."""
