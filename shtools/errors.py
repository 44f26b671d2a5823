"""Exception taxonomy shared by all shtools commands.

Every exception carries the exit code its command should return. Argument
problems, precondition failures and invalid values are raised before any
side effect; ``DelegateError`` reports a wrapped utility that failed.
"""

from __future__ import annotations


class ShtoolsError(Exception):
    """Base class for errors reported to the user as ``Error: <message>``."""

    exit_code: int = 1
    show_usage: bool = False

    def __init__(self, message: str = 'Unknown error.', exit_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(ShtoolsError):
    """Too few or too many arguments, or a malformed invocation."""

    show_usage = True


class PreconditionError(ShtoolsError):
    """Missing file, unwritable path or missing external utility."""


class InvalidValueError(ShtoolsError):
    """An option or argument has a value that is not accepted."""


class DelegateError(ShtoolsError):
    """The wrapped system utility returned a failure."""


class NoProcessesFound(DelegateError):
    exit_code = 2

    def __init__(self, message: str = 'No processes found') -> None:
        super().__init__(message)
