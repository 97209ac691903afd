"""
SSH Configuration Models

Dataclass models for SSH connections.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from masterless.constants import DEFAULT_SSH_PORT, SSH_CONNECTION_TIMEOUT


@dataclass
class SSHConfig:
    """SSH credentials used to reach a host."""

    user: str
    key_path: Optional[str] = None

    @property
    def key_path_expanded(self) -> Optional[Path]:
        """Get expanded key path (resolves ~)."""
        if self.key_path:
            return Path(self.key_path).expanduser()
        return None

    @property
    def key_exists(self) -> bool:
        """Check if private key file exists."""
        if self.key_path_expanded:
            return self.key_path_expanded.exists()
        return False

    def __repr__(self) -> str:
        return f"SSHConfig(user={self.user}, key={self.key_path})"


@dataclass
class SSHConnection:
    """SSH connection details for a specific host."""

    host: str
    config: SSHConfig
    port: int = DEFAULT_SSH_PORT

    @property
    def connection_string(self) -> str:
        """Get SSH connection string (user@host)."""
        return f"{self.config.user}@{self.host}"

    @property
    def ssh_options(self) -> list[str]:
        """Options shared by ssh and rsync's remote shell."""
        options = []
        if self.config.key_path_expanded:
            options.extend(["-i", str(self.config.key_path_expanded)])
        options.extend(
            [
                "-p",
                str(self.port),
                "-o",
                "StrictHostKeyChecking=no",
                "-o",
                "LogLevel=QUIET",
                "-o",
                f"ConnectTimeout={SSH_CONNECTION_TIMEOUT}",
            ]
        )
        return options

    @property
    def ssh_command_prefix(self) -> list[str]:
        """Get SSH command prefix for subprocess."""
        return ["ssh"] + self.ssh_options + [self.connection_string]

    def build_command(self, remote_command: str) -> list[str]:
        """Build full SSH command with remote command."""
        return self.ssh_command_prefix + [remote_command]

    def remote_target(self, remote_path: str) -> str:
        """Get rsync destination (user@host:path)."""
        return f"{self.connection_string}:{remote_path}"

    def __repr__(self) -> str:
        return f"SSHConnection(host={self.host}, user={self.config.user}, port={self.port})"
