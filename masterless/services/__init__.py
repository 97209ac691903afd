"""
Masterless Services Layer

Remote execution, transfer and provisioning operations.
"""

from .output_streamer import OutputStreamer
from .command_runner import CommandRunner
from .transfer_service import TransferService
from .config_validator import ConfigValidator
from .agent_installer import AgentInstaller
from .provisioner import Phase, Provisioner

__all__ = [
    "OutputStreamer",
    "CommandRunner",
    "TransferService",
    "ConfigValidator",
    "AgentInstaller",
    "Phase",
    "Provisioner",
]
