"""Installs the puppet agent on the remote host."""

from masterless.constants import AGENT_SCRIPT_PATH
from masterless.models.command import join_args


class AgentInstaller:
    """Downloads and runs the puppet agent install script."""

    def __init__(self, runner, sink, script_path: str = AGENT_SCRIPT_PATH):
        self.runner = runner
        self.sink = sink
        self.script_path = script_path

    def install(self, agent_url: str, escalate: bool = False) -> None:
        """
        Fetch the install script, make it executable and run it.

        Raises:
            CommandError: If any step exits non-zero
        """
        self.sink.emit(f"Installing puppet agent from: {agent_url}")
        self.runner.run(
            join_args(["curl", "-fsSL", agent_url, "-o", self.script_path])
        )
        self.runner.run(join_args(["chmod", "+x", self.script_path]))
        self.runner.run(join_args([self.script_path]), escalate=escalate)
