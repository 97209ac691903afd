"""
Masterless Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Staging Configuration
DEFAULT_STAGING_DIR = "/tmp/terraform-puppet-masterless"
STAGING_DIR_MODE = "777"
MANIFESTS_DIR_NAME = "manifests"
MODULE_DIR_PREFIX = "module-"
HIERA_CONFIG_FILENAME = "hiera.yaml"

# Puppet Configuration
DEFAULT_PUPPET_BIN_DIR = "/opt/puppetlabs/bin"
PUPPET_EXECUTABLE = "puppet"
FACTER_VARS_FMT = "FACTER_{name}={value}"
FACTER_VARS_JOINER = " "
MODULE_PATH_JOINER = ":"

# Agent Installation
DEFAULT_AGENT_URL = (
    "https://raw.githubusercontent.com/pyToshka/puppet-install-shell/master/"
    "install_puppet_agent.sh"
)
AGENT_SCRIPT_PATH = "/tmp/install.sh"

# Privilege Escalation
SUDO_PREFIX = ["sudo", "-i", "bash", "-c"]

# Default SSH Configuration
DEFAULT_SSH_PORT = 22
SSH_CONNECTION_TIMEOUT = 10

# Log Configuration
DEFAULT_LOG_DIR = "~/.masterless/logs"
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"
