"""
Masterless Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .command import RemoteCommand
from .config import ProvisionerConfig, apply_defaults
from .layout import StagingLayout
from .results import (
    ExitOutcome,
    ValidationResult,
    ProvisionResult,
)
from .ssh import (
    SSHConfig,
    SSHConnection,
)

__all__ = [
    # Commands
    "RemoteCommand",
    # Config
    "ProvisionerConfig",
    "apply_defaults",
    "StagingLayout",
    # Results
    "ExitOutcome",
    "ValidationResult",
    "ProvisionResult",
    # SSH
    "SSHConfig",
    "SSHConnection",
]
