"""Transfer primitives: remote directories and file or tree uploads."""

import os
from pathlib import Path
from typing import Union

from masterless.exceptions import (
    CleanupError,
    CommandError,
    TransferError,
    TransportError,
)
from masterless.models.command import chmod_command, mkdir_command, remove_command


class TransferService:
    """Service for staging files on the remote host."""

    def __init__(self, runner, transport, sink):
        """
        Initialize transfer service.

        Args:
            runner: CommandRunner used for directory commands
            transport: Transport used for uploads
            sink: Object with an emit(line) method
        """
        self.runner = runner
        self.transport = transport
        self.sink = sink

    def create_remote_directory(self, path: str) -> None:
        """
        Create a directory (with parents) and open it up to every user.

        The chmod lets a non-privileged connecting user populate a directory
        that may already be owned by someone else.

        Raises:
            TransferError: If either command fails
        """
        self.sink.emit(f"Creating directory: {path}")

        for command in (mkdir_command(path), chmod_command(path)):
            try:
                outcome = self.runner.execute(command)
            except CommandError as e:
                raise TransferError(e.message) from e
            if outcome.is_failure:
                raise TransferError(
                    f"Non-zero exit status {outcome.exit_status} from {outcome.command!r}",
                    context="See output above for more info.",
                )

    def upload_file(self, local_path: Union[str, Path], remote_path: str) -> None:
        """
        Upload a single local file.

        Raises:
            TransferError: If the file cannot be read or the upload fails
        """
        try:
            with open(local_path, "rb") as source:
                self.transport.upload(remote_path, source)
        except (OSError, TransportError) as e:
            raise TransferError(
                f"Could not upload {local_path} to {remote_path}: {e}"
            ) from e

    def upload_directory(self, local_path: Union[str, Path], remote_path: str) -> None:
        """
        Upload the contents of a local directory into a remote directory.

        Raises:
            TransferError: If the directory cannot be created or the upload fails
        """
        self.create_remote_directory(remote_path)

        source = str(local_path)
        if not source.endswith(os.sep):
            source = source + os.sep

        try:
            self.transport.upload_dir(remote_path, source)
        except (OSError, TransportError) as e:
            raise TransferError(
                f"Could not upload {local_path} to {remote_path}: {e}"
            ) from e

    def remove_remote_directory(self, path: str, escalate: bool = False) -> None:
        """
        Remove a remote directory tree.

        Raises:
            CleanupError: If removal fails
        """
        self.sink.emit(f"Removing directory: {path}")

        try:
            outcome = self.runner.execute(remove_command(path), escalate=escalate)
        except CommandError as e:
            raise CleanupError(e.message) from e
        if outcome.is_failure:
            raise CleanupError(
                f"Non-zero exit status {outcome.exit_status} from {outcome.command!r}"
            )
