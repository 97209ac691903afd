"""
Result Models

Dataclass models for command outcomes, validation and provisioning results.
"""

from dataclasses import dataclass, field
from typing import Optional

from masterless.models.layout import StagingLayout


@dataclass
class ExitOutcome:
    """Exit status of a remote command."""

    exit_status: int
    command: str = ""
    description: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if the command succeeded."""
        return self.exit_status == 0

    @property
    def is_failure(self) -> bool:
        """Check if the command failed."""
        return self.exit_status != 0

    def __repr__(self) -> str:
        return f"ExitOutcome(exit_status={self.exit_status}, command='{self.command[:50]}...')"


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if validation has errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if validation has warnings."""
        return len(self.warnings) > 0

    def add_error(self, error: str) -> None:
        """Add an error to the validation result."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning to the validation result."""
        self.warnings.append(warning)

    def __repr__(self) -> str:
        return f"ValidationResult(valid={self.is_valid}, errors={len(self.errors)}, warnings={len(self.warnings)})"


@dataclass
class ProvisionResult:
    """Summary of a completed provisioning run."""

    layout: StagingLayout
    remote_manifest_path: str
    command: str
    outcome: ExitOutcome
    remote_module_paths: list[str] = field(default_factory=list)
    remote_hiera_config_path: Optional[str] = None
    cleaned: bool = False

    @property
    def converged(self) -> bool:
        """True when the convergence command exited zero."""
        return self.outcome.is_success

    def __repr__(self) -> str:
        return (
            f"ProvisionResult(manifest={self.remote_manifest_path}, "
            f"modules={len(self.remote_module_paths)}, "
            f"exit_status={self.outcome.exit_status}, cleaned={self.cleaned})"
        )
