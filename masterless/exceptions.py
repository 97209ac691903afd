"""
Masterless Exception Hierarchy

Clean exception hierarchy for consistent error handling across provisioning runs.
"""

from typing import Optional


class MasterlessError(Exception):
    """Base exception for all Masterless errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        self.phase = None
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message

    def prefix(self, failure: str) -> None:
        """Prepend a failure description to the message in place."""
        self.message = f"{failure}: {self.message}"
        self.args = (self.format_message(),)


class ConfigurationError(MasterlessError):
    """Raised when configuration is invalid or missing."""

    pass


class TransportError(MasterlessError):
    """Raised by transports when the connection itself fails."""

    pass


class TransferError(MasterlessError):
    """Raised when creating a remote directory or uploading fails."""

    pass


class CommandError(MasterlessError):
    """Raised when a remote command cannot start or exits non-zero."""

    def __init__(
        self,
        command: str,
        exit_status: Optional[int] = None,
        message: Optional[str] = None,
    ):
        self.command = command
        self.exit_status = exit_status
        if message is None:
            message = (
                f"Command {command!r} exited with non-zero exit status: {exit_status}"
            )
        super().__init__(message)


class CleanupError(MasterlessError):
    """Raised when the staging directory could not be removed after the run."""

    pass
