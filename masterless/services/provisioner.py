"""
Provisioner

Stages puppet inputs on a remote host and converges it with puppet apply.
"""

import stat
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Optional

from masterless.exceptions import ConfigurationError, MasterlessError
from masterless.models.command import puppet_apply_command
from masterless.models.config import ProvisionerConfig, apply_defaults
from masterless.models.layout import StagingLayout
from masterless.models.results import ProvisionResult, ValidationResult
from masterless.services.agent_installer import AgentInstaller
from masterless.services.command_runner import CommandRunner
from masterless.services.config_validator import ConfigValidator
from masterless.services.transfer_service import TransferService


class Phase(Enum):
    """Phases of a provisioning run, in execution order."""

    INSTALL_AGENT = "Installing Puppet agent"
    STAGE = "Creating staging directory"
    HIERA_CONFIG = "Uploading hiera configuration"
    MANIFEST_DIR = "Uploading manifest directory"
    MODULES = "Uploading modules"
    MANIFESTS = "Uploading manifests"
    CONVERGE = "Running Puppet"
    CLEANUP = "Removing staging directory"


class Provisioner:
    """
    Run one masterless puppet apply against a host.

    Each phase is a hard gate: the first failure stops the run. Errors leave
    with their phase attached (error.phase) and a message naming the phase.
    A CleanupError means puppet already ran.
    """

    def __init__(self, config: ProvisionerConfig, transport, logger):
        """
        Initialize provisioner.

        Args:
            config: Provisioner configuration (defaults are applied here)
            transport: Transport connected to the target host
            logger: ProvisionLogger (or any object with emit/step/success/warning)
        """
        self.config = apply_defaults(config)
        self.transport = transport
        self.logger = logger
        self.layout = StagingLayout(self.config.staging_dir)
        self.validator = ConfigValidator()
        self.runner = CommandRunner(
            transport, logger, ignore_exit_codes=self.config.ignore_exit_codes
        )
        self.transfer = TransferService(self.runner, transport, logger)

    def validate(self) -> ValidationResult:
        """Check local paths without touching the remote host."""
        return self.validator.validate(self.config)

    def provision(self) -> ProvisionResult:
        """
        Execute the full provisioning run.

        Returns:
            ProvisionResult describing what was staged and how puppet exited

        Raises:
            ConfigurationError: If local paths are invalid (nothing remote ran)
            TransferError: If staging failed
            CommandError: If puppet (or the agent install) exited non-zero
            CleanupError: If the staging directory could not be removed
        """
        config = self.config
        result = self.validator.validate_and_raise(config)
        for warning in result.warnings:
            self.logger.warning(warning)

        self.logger.emit("Provisioning with Puppet...")

        if config.install_agent:
            with self._phase(Phase.INSTALL_AGENT, "Error installing puppet agent"):
                AgentInstaller(self.runner, self.logger).install(
                    config.agent_url, escalate=config.use_sudo
                )

        with self._phase(Phase.STAGE, "Error creating staging directory"):
            self.logger.emit("Creating Puppet staging directory...")
            self.transfer.create_remote_directory(self.layout.staging_dir)

        remote_hiera_config_path: Optional[str] = None
        if config.hiera_config_path:
            with self._phase(Phase.HIERA_CONFIG, "Error uploading hiera config"):
                remote_hiera_config_path = self._upload_hiera_config()

        if config.manifest_dir:
            with self._phase(Phase.MANIFEST_DIR, "Error uploading manifest dir"):
                self.logger.emit(
                    f"Uploading manifest directory from: {config.manifest_dir}"
                )
                self.transfer.upload_directory(
                    config.manifest_dir, self.layout.manifests_dir
                )

        with self._phase(Phase.MODULES, "Error uploading modules"):
            remote_module_paths = self._upload_modules()

        with self._phase(Phase.MANIFESTS, "Error uploading manifests"):
            remote_manifest_path = self._upload_manifests()

        command = puppet_apply_command(
            working_dir=config.working_dir,
            manifest_path=remote_manifest_path,
            module_paths=remote_module_paths,
            hiera_config_path=remote_hiera_config_path,
            facts=config.facts,
            puppet_bin_dir=config.puppet_bin_dir,
            extra_arguments=config.extra_arguments,
        )

        with self._phase(Phase.CONVERGE, "Error running puppet"):
            self.logger.emit(f"Running Puppet: {command}")
            outcome = self.runner.run(command, escalate=config.use_sudo)

        if outcome.is_success:
            self.logger.success("Puppet run completed")
        else:
            self.logger.warning(f"Puppet exited with status {outcome.exit_status}")

        cleaned = False
        if config.clean_staging_dir:
            with self._phase(Phase.CLEANUP, "Error removing staging directory"):
                self.transfer.remove_remote_directory(
                    self.layout.staging_dir, escalate=config.use_sudo
                )
                cleaned = True

        return ProvisionResult(
            layout=self.layout,
            remote_manifest_path=remote_manifest_path,
            command=command,
            outcome=outcome,
            remote_module_paths=remote_module_paths,
            remote_hiera_config_path=remote_hiera_config_path,
            cleaned=cleaned,
        )

    @contextmanager
    def _phase(self, phase: Phase, failure: str):
        self.logger.step(phase.value)
        try:
            yield
        except MasterlessError as e:
            e.phase = phase
            e.prefix(failure)
            raise

    def _upload_hiera_config(self) -> str:
        self.logger.emit("Uploading hiera configuration...")
        remote_path = self.layout.hiera_config_path
        self.transfer.upload_file(self.config.hiera_config_path, remote_path)
        return remote_path

    def _upload_modules(self) -> list[str]:
        """Upload module paths in order; the order is the puppet search order."""
        remote_paths = []
        for index, module_path in enumerate(self.config.module_paths):
            self.logger.emit(f"Uploading local modules from: {module_path}")
            target_path = self.layout.module_dir(index)
            self.transfer.upload_directory(module_path, target_path)
            remote_paths.append(target_path)
        return remote_paths

    def _upload_manifests(self) -> str:
        """
        Upload manifest_file, which may be a single manifest or a directory.

        Returns:
            Remote path puppet apply should be pointed at
        """
        self.logger.emit("Uploading manifests...")
        self.transfer.create_remote_directory(self.layout.manifests_dir)

        manifest = Path(self.config.manifest_file)
        try:
            mode = manifest.stat().st_mode
        except OSError as e:
            raise ConfigurationError(f"Error inspecting manifest file: {e}") from e

        if stat.S_ISDIR(mode):
            self.logger.emit(f"Uploading manifest directory from: {manifest}")
            self.transfer.upload_directory(manifest, self.layout.manifests_dir)
            return self.layout.manifests_dir

        self.logger.emit(f"Uploading manifest file from: {manifest}")
        remote_path = self.layout.manifest_file(manifest.name)
        self.transfer.upload_file(manifest, remote_path)
        return remote_path
