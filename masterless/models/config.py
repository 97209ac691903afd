"""
Provisioner Configuration Models

Immutable configuration for a single provisioning run.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from masterless.constants import (
    DEFAULT_AGENT_URL,
    DEFAULT_PUPPET_BIN_DIR,
    DEFAULT_STAGING_DIR,
)


@dataclass(frozen=True)
class ProvisionerConfig:
    """Describes one staged puppet apply run."""

    manifest_file: str = ""
    facts: Dict[str, str] = field(default_factory=dict)
    hiera_config_path: Optional[str] = None
    module_paths: Tuple[str, ...] = ()
    manifest_dir: Optional[str] = None
    prevent_sudo: bool = False
    staging_dir: str = ""
    working_dir: str = ""
    clean_staging_dir: bool = False
    ignore_exit_codes: bool = False
    puppet_bin_dir: str = DEFAULT_PUPPET_BIN_DIR
    extra_arguments: Tuple[str, ...] = ()
    install_agent: bool = False
    agent_url: str = DEFAULT_AGENT_URL

    @property
    def use_sudo(self) -> bool:
        """Whether privileged commands are escalated with sudo."""
        return not self.prevent_sudo

    @classmethod
    def from_dict(cls, data: dict) -> "ProvisionerConfig":
        """
        Build a fully defaulted configuration from plain values.

        Args:
            data: Field name to value mapping (unknown names raise TypeError)

        Returns:
            Resolved ProvisionerConfig
        """
        values = dict(data)
        if "facts" in values:
            values["facts"] = dict(values["facts"] or {})
        for key in ("module_paths", "extra_arguments"):
            if key in values:
                values[key] = tuple(values[key] or ())
        return apply_defaults(cls(**values))


def apply_defaults(config: ProvisionerConfig) -> ProvisionerConfig:
    """
    Resolve directory fallbacks without mutating the input.

    The staging directory falls back to the well-known default and the
    working directory falls back to the staging directory.
    """
    staging_dir = config.staging_dir or DEFAULT_STAGING_DIR
    working_dir = config.working_dir or staging_dir
    puppet_bin_dir = config.puppet_bin_dir or DEFAULT_PUPPET_BIN_DIR

    if (
        staging_dir == config.staging_dir
        and working_dir == config.working_dir
        and puppet_bin_dir == config.puppet_bin_dir
    ):
        return config

    return replace(
        config,
        staging_dir=staging_dir,
        working_dir=working_dir,
        puppet_bin_dir=puppet_bin_dir,
    )
