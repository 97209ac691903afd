"""SSH transport for executing commands and uploading files on remote hosts."""

import shlex
import subprocess
from typing import BinaryIO

from masterless.exceptions import TransportError
from masterless.models.command import RemoteCommand, join_args
from masterless.models.ssh import SSHConnection
from masterless.transport.base import PopenProcess, RemoteProcess, Transport


class SSHTransport(Transport):
    """Transport over the system ssh client, with rsync for trees."""

    def __init__(self, connection: SSHConnection):
        """
        Initialize SSH transport.

        Args:
            connection: Host and credentials to connect with
        """
        self.connection = connection

    def start(self, command: RemoteCommand) -> RemoteProcess:
        ssh_cmd = self.connection.build_command(command.shell_command)
        try:
            process = subprocess.Popen(
                ssh_cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise TransportError(
                f"Could not start ssh: {e}",
                context=f"Host: {self.connection.host}",
            ) from e
        return PopenProcess(process)

    def upload(self, remote_path: str, source: BinaryIO) -> None:
        remote_cmd = f"cat > {shlex.quote(remote_path)}"
        result = subprocess.run(
            self.connection.build_command(remote_cmd),
            stdin=source,
            capture_output=True,
        )
        if result.returncode != 0:
            raise TransportError(
                f"Upload to {remote_path} failed with exit status {result.returncode}",
                context=result.stderr.decode("utf-8", errors="replace").strip() or None,
            )

    def upload_dir(self, remote_path: str, local_dir: str) -> None:
        rsync_cmd = [
            "rsync",
            "-rlptz",
            "-e",
            join_args(["ssh"] + self.connection.ssh_options),
            local_dir,
            self.connection.remote_target(remote_path),
        ]
        result = subprocess.run(rsync_cmd, capture_output=True, text=True)
        if result.returncode != 0:
            raise TransportError(
                f"Directory upload to {remote_path} failed with exit status {result.returncode}",
                context=result.stderr.strip() or None,
            )

    def __repr__(self) -> str:
        return f"SSHTransport({self.connection!r})"
