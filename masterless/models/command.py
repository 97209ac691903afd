"""
Remote Command Models

Value objects and builders for the shell commands sent to a remote host.
Every path and value goes through shlex.quote, never inline formatting.
"""

import posixpath
import re
import shlex
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from masterless.constants import (
    FACTER_VARS_FMT,
    FACTER_VARS_JOINER,
    MODULE_PATH_JOINER,
    PUPPET_EXECUTABLE,
    STAGING_DIR_MODE,
    SUDO_PREFIX,
)

FACT_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class RemoteCommand:
    """A single command to execute on the remote host."""

    command: str
    escalate: bool = False

    @property
    def shell_command(self) -> str:
        """Exact string handed to the transport."""
        if self.escalate:
            return sudo_wrap(self.command)
        return self.command

    def __repr__(self) -> str:
        return f"RemoteCommand(command='{self.command[:50]}', escalate={self.escalate})"


def join_args(args: Iterable[str]) -> str:
    """Quote and join arguments into a single shell command string."""
    return " ".join(shlex.quote(str(arg)) for arg in args)


def sudo_wrap(command: str) -> str:
    """Run a command through a root login shell."""
    return " ".join(SUDO_PREFIX + [shlex.quote(command)])


def mkdir_command(path: str) -> str:
    return join_args(["mkdir", "-p", path])


def chmod_command(path: str, mode: str = STAGING_DIR_MODE) -> str:
    return join_args(["chmod", mode, path])


def remove_command(path: str) -> str:
    return join_args(["rm", "-fr", path])


def is_valid_fact_name(name: str) -> bool:
    """Fact names become environment variable names, so must be identifiers."""
    return bool(FACT_NAME_PATTERN.match(name))


def render_facts(facts: Dict[str, str]) -> List[str]:
    """
    Render facts as FACTER_ environment assignments.

    Keys are sorted so the same facts always produce the same command.
    """
    return [
        FACTER_VARS_FMT.format(name=name, value=shlex.quote(str(facts[name])))
        for name in sorted(facts)
    ]


def puppet_apply_command(
    working_dir: str,
    manifest_path: str,
    module_paths: Sequence[str] = (),
    hiera_config_path: Optional[str] = None,
    facts: Optional[Dict[str, str]] = None,
    puppet_bin_dir: str = "",
    extra_arguments: Sequence[str] = (),
) -> str:
    """
    Build the convergence command.

    Args:
        working_dir: Remote directory to run from
        manifest_path: Remote manifest file or directory
        module_paths: Remote module directories, in search order
        hiera_config_path: Remote hiera config, omitted when empty
        facts: External facts injected as FACTER_ variables
        puppet_bin_dir: Directory holding the puppet executable
        extra_arguments: Additional puppet apply arguments

    Returns:
        Shell command string
    """
    executable = PUPPET_EXECUTABLE
    if puppet_bin_dir:
        executable = posixpath.join(puppet_bin_dir, PUPPET_EXECUTABLE)

    args = [executable, "apply", "--verbose"]
    if module_paths:
        args.append(f"--modulepath={MODULE_PATH_JOINER.join(module_paths)}")
    if hiera_config_path:
        args.append(f"--hiera_config={hiera_config_path}")
    args.extend(extra_arguments)
    args.append(manifest_path)

    parts = [join_args(["cd", working_dir]), "&&"]
    if facts:
        parts.append(FACTER_VARS_JOINER.join(render_facts(facts)))
    parts.append(join_args(args))
    return " ".join(parts)
