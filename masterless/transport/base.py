"""
Transport Contracts

Abstract interfaces for the connection that runs commands and moves files.
"""

import subprocess
from abc import ABC, abstractmethod
from typing import BinaryIO, Protocol

from masterless.models.command import RemoteCommand


class OutputSink(Protocol):
    """Receives user-facing output lines. Must tolerate calls from two threads."""

    def emit(self, line: str) -> None: ...


class RemoteProcess(ABC):
    """A started command with live output streams."""

    @property
    @abstractmethod
    def stdout(self) -> BinaryIO:
        pass

    @property
    @abstractmethod
    def stderr(self) -> BinaryIO:
        pass

    @abstractmethod
    def wait(self) -> int:
        """Block until the command exits and return its exit status."""
        pass

    def close(self) -> None:
        """Release the output streams once they have been drained."""
        pass


class PopenProcess(RemoteProcess):
    """RemoteProcess backed by a local subprocess (ssh or a local shell)."""

    def __init__(self, process: subprocess.Popen):
        self.process = process

    @property
    def stdout(self) -> BinaryIO:
        return self.process.stdout

    @property
    def stderr(self) -> BinaryIO:
        return self.process.stderr

    def wait(self) -> int:
        return self.process.wait()

    def close(self) -> None:
        for pipe in (self.process.stdout, self.process.stderr):
            if pipe is not None:
                pipe.close()


class Transport(ABC):
    """
    Connection to the host being provisioned.

    Implementations raise TransportError (or OSError) when the connection
    itself fails. Non-zero exit statuses are reported through wait(), never
    raised.
    """

    @abstractmethod
    def start(self, command: RemoteCommand) -> RemoteProcess:
        """Start a command and return its live process handle."""
        pass

    @abstractmethod
    def upload(self, remote_path: str, source: BinaryIO) -> None:
        """Write the bytes of source to a single remote file."""
        pass

    @abstractmethod
    def upload_dir(self, remote_path: str, local_dir: str) -> None:
        """
        Copy a local tree to the remote path.

        A local_dir ending with a separator copies its contents rather than
        the directory itself.
        """
        pass
