"""
Apply Command

Stage manifests and modules on a host and converge it with puppet apply.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import rich_click as click

from masterless.base import BaseCommand
from masterless.commands.options import (
    load_provisioner_config,
    pass_options,
    provisioner_options,
)
from masterless.constants import DEFAULT_SSH_PORT
from masterless.exceptions import ConfigurationError
from masterless.models.ssh import SSHConfig, SSHConnection
from masterless.services.provisioner import Provisioner
from masterless.transport import LocalTransport, SSHTransport, Transport


@dataclass
class ConnectionOptions:
    """Where to provision."""

    host: Optional[str] = None
    user: Optional[str] = None
    key_path: Optional[str] = None
    port: int = DEFAULT_SSH_PORT
    local: bool = False

    @property
    def target(self) -> str:
        return "localhost" if self.local else str(self.host)


class ApplyCommand(BaseCommand):
    """
    Provision one host.

    Features:
    - Settings from YAML with command-line overrides
    - SSH or local transport
    - Live command output with a log file per run
    """

    def __init__(
        self,
        config_path: Optional[str],
        options: Dict[str, Any],
        connection: ConnectionOptions,
        verbose: bool = False,
        log_dir: Optional[str] = None,
    ):
        super().__init__(verbose=verbose, log_dir=log_dir)
        self.config_path = config_path
        self.options = options
        self.connection = connection

    def build_transport(self) -> Transport:
        """Create the transport for the selected connection."""
        if self.connection.local:
            return LocalTransport()
        ssh_config = SSHConfig(
            user=self.connection.user, key_path=self.connection.key_path
        )
        if ssh_config.key_path and not ssh_config.key_exists:
            raise ConfigurationError(
                f"SSH key not found: {ssh_config.key_path_expanded}"
            )
        return SSHTransport(
            SSHConnection(
                host=self.connection.host,
                config=ssh_config,
                port=self.connection.port,
            )
        )

    def execute(self) -> None:
        """Execute apply command."""
        config = load_provisioner_config(self.config_path, self.options)

        self.show_header(
            title="Puppet Apply",
            host=self.connection.target,
            details={
                "Manifest": config.manifest_file,
                "Staging": config.staging_dir,
            },
        )

        logger = self.init_logger(self.connection.target, "apply")
        provisioner = Provisioner(config, self.build_transport(), logger)
        result = provisioner.provision()

        self.console.print()
        if result.converged:
            self.print_success(f"{self.connection.target} converged")
        else:
            self.print_warning(
                f"Puppet exited with status {result.outcome.exit_status} (ignored)"
            )
        if result.cleaned:
            self.print_dim(f"Removed {result.layout.staging_dir}")
        self.print_dim(f"Logs saved to: {logger.log_path}")


@click.command()
@click.option("--host", "-H", help="Host to provision over SSH")
@click.option("--user", "-u", help="SSH user")
@click.option("--key", "key_path", help="SSH private key")
@click.option("--port", "-p", default=DEFAULT_SSH_PORT, show_default=True, type=int)
@click.option("--local", is_flag=True, help="Provision this machine instead")
@click.option("--log-dir", help="Directory for run logs")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@provisioner_options
@pass_options
def apply(config_path, host, user, key_path, port, local, log_dir, verbose, options):
    """
    Converge a host with puppet apply

    \b
    Examples:
      masterless apply -c puppet.yml -H 10.0.0.5 -u admin
      masterless apply -m site.pp --module-path modules --fact role=web --local
    """
    if not local and not (host and user):
        raise click.UsageError("Either --local or both --host and --user are required")

    connection = ConnectionOptions(
        host=host, user=user, key_path=key_path, port=port, local=local
    )
    cmd = ApplyCommand(config_path, options, connection, verbose=verbose, log_dir=log_dir)
    cmd.run()
