"""Local transport: runs commands in a local shell and copies files on disk."""

import shutil
import subprocess
from pathlib import Path
from typing import BinaryIO

from masterless.models.command import RemoteCommand
from masterless.transport.base import PopenProcess, RemoteProcess, Transport


class LocalTransport(Transport):
    """Provision the machine masterless itself runs on."""

    def start(self, command: RemoteCommand) -> RemoteProcess:
        process = subprocess.Popen(
            command.shell_command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        return PopenProcess(process)

    def upload(self, remote_path: str, source: BinaryIO) -> None:
        with open(remote_path, "wb") as target:
            shutil.copyfileobj(source, target)

    def upload_dir(self, remote_path: str, local_dir: str) -> None:
        shutil.copytree(Path(local_dir), Path(remote_path), dirs_exist_ok=True)
