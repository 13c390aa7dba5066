"""Exceptions raised by the launcher, each carrying its process exit code."""

from __future__ import annotations


class BeeStackError(Exception):
    """Base error. ``cli.main`` turns it into an error message and exit code."""

    exit_code = 1

    def __init__(self, message: str, *details: str, show_help: bool = False):
        super().__init__(message)
        self.message = message
        self.details = list(details)
        # Print installation instructions for runtimes/compose after the error
        self.show_help = show_help


class UserAbort(BeeStackError):
    """User declined a destructive action."""

    exit_code = 1


class RuntimeMissing(BeeStackError):
    """None of the supported container runtimes is installed."""

    exit_code = 1


class UnknownCommand(BeeStackError):
    exit_code = 1


class ComposeError(BeeStackError):
    """Compose/runtime version or connectivity failure."""

    exit_code = 2


class NotConfigured(BeeStackError):
    """Stack has no .env and the user declined to run setup."""

    exit_code = 3
