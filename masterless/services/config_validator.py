"""Validation of local paths and settings before any remote work."""

import posixpath
from pathlib import Path

from masterless.exceptions import ConfigurationError
from masterless.models.command import is_valid_fact_name
from masterless.models.config import ProvisionerConfig
from masterless.models.results import ValidationResult


class ConfigValidator:
    """Checks a ProvisionerConfig against the local filesystem."""

    def validate(self, config: ProvisionerConfig) -> ValidationResult:
        """
        Run all validation checks.

        Every check runs; errors are collected rather than stopping at the
        first one.

        Args:
            config: Configuration to check

        Returns:
            ValidationResult with all errors and warnings
        """
        result = ValidationResult(is_valid=True)

        self._validate_hiera_config(config, result)
        self._validate_manifest_dir(config, result)
        self._validate_module_paths(config, result)
        self._validate_manifest_file(config, result)
        self._validate_facts(config, result)
        self._validate_staging_dir(config, result)

        return result

    def validate_and_raise(self, config: ProvisionerConfig) -> ValidationResult:
        """
        Validate and raise if any errors are found.

        Raises:
            ConfigurationError: Listing every error found
        """
        result = self.validate(config)
        if result.has_errors:
            raise ConfigurationError(
                "Invalid provisioner configuration",
                context="; ".join(result.errors),
            )
        return result

    def _validate_hiera_config(
        self, config: ProvisionerConfig, result: ValidationResult
    ) -> None:
        if not config.hiera_config_path:
            return
        path = Path(config.hiera_config_path)
        if not path.exists():
            result.add_error(f"hiera_config_path is invalid: {path} does not exist")
        elif not path.is_file():
            result.add_error("hiera_config_path must point to a file")

    def _validate_manifest_dir(
        self, config: ProvisionerConfig, result: ValidationResult
    ) -> None:
        if not config.manifest_dir:
            return
        path = Path(config.manifest_dir)
        if not path.exists():
            result.add_error(f"manifest_dir is invalid: {path} does not exist")
        elif not path.is_dir():
            result.add_error("manifest_dir must point to a directory")
        elif config.manifest_file and Path(config.manifest_file).is_dir():
            result.add_warning(
                "manifest_dir and a manifest_file directory are both uploaded to the same location"
            )

    def _validate_module_paths(
        self, config: ProvisionerConfig, result: ValidationResult
    ) -> None:
        for index, module_path in enumerate(config.module_paths):
            path = Path(module_path)
            if not path.exists():
                result.add_error(
                    f"module_paths[{index}] is invalid: {path} does not exist"
                )
            elif not path.is_dir():
                result.add_error(f"module_paths[{index}] must point to a directory")

    def _validate_manifest_file(
        self, config: ProvisionerConfig, result: ValidationResult
    ) -> None:
        if not config.manifest_file:
            result.add_error("manifest_file must be set")
        elif not Path(config.manifest_file).exists():
            result.add_error(
                f"manifest_file is invalid: {config.manifest_file} does not exist"
            )

    def _validate_facts(
        self, config: ProvisionerConfig, result: ValidationResult
    ) -> None:
        for name in sorted(config.facts):
            if not is_valid_fact_name(name):
                result.add_error(f"facter name {name!r} is not a valid identifier")

    def _validate_staging_dir(
        self, config: ProvisionerConfig, result: ValidationResult
    ) -> None:
        if config.staging_dir and not posixpath.isabs(config.staging_dir):
            result.add_error(
                f"staging_directory must be an absolute path, got {config.staging_dir!r}"
            )
