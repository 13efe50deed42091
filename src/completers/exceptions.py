"""Exception hierarchy for completers.

All exceptions inherit from :class:`CompletersError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`completers.exit_codes`.
The top-level error handler in :func:`completers.app.main` catches
``CompletersError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Completion failures are never fatal to an interactive session: the
:class:`~completers.invoker.Invoker` converts every :class:`CompletionError`
into an unchanged line state, and only the ``complete`` command surfaces
them as exit codes.

Subclass hierarchy::

    CompletersError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- ConfigError                (exit 1)
    +-- CompletionError            (exit 1)
        +-- ProcessLaunchFailure   (exit 11)
        +-- ProcessTimeout         (exit 12)
        +-- MalformedResult        (exit 13)
        +-- NonZeroExit            (exit 14)
        +-- CompletionBusy         (exit 15)
"""

from __future__ import annotations

from completers.exit_codes import (
    EXIT_BUSY,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_LAUNCH_FAILURE,
    EXIT_MALFORMED_RESULT,
    EXIT_NONZERO_EXIT,
    EXIT_PROCESS_TIMEOUT,
)


class CompletersError(Exception):
    """Base exception for all completers errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`completers.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CompletersError):
    """Raised for invalid CLI arguments or an out-of-range ``--point``."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(CompletersError):
    """Raised for configuration problems (invalid JSON, bad env overrides)."""

    exit_code = EXIT_GENERIC_FAILURE


class CompletionError(CompletersError):
    """Base class for failures of a single trigger-response cycle.

    The live buffer is never modified when one of these is raised.
    """


class ProcessLaunchFailure(CompletionError):
    """Raised when the completion executable is missing or cannot be started."""

    exit_code = EXIT_LAUNCH_FAILURE


class ProcessTimeout(CompletionError):
    """Raised when the completion process outlives its timeout.

    The child has already been killed and reaped when this is raised.
    """

    exit_code = EXIT_PROCESS_TIMEOUT


class MalformedResult(CompletionError):
    """Raised when a result record does not parse as ``<offset> <text>``."""

    exit_code = EXIT_MALFORMED_RESULT


class NonZeroExit(CompletionError):
    """Raised when the completion process exits with a non-zero status.

    Any record the process printed before failing is discarded.

    Args:
        message: Human-readable error description.
        returncode: The child's exit status (negative for signals).
    """

    exit_code = EXIT_NONZERO_EXIT

    def __init__(self, message: str, returncode: int):
        super().__init__(message)
        self.returncode = returncode


class CompletionBusy(CompletionError):
    """Raised when a trigger arrives while another request is still in flight."""

    exit_code = EXIT_BUSY
