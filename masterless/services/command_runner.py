"""
Command Runner

Executes remote commands while streaming their output to the sink.
"""

from masterless.exceptions import CommandError, TransportError
from masterless.models.command import RemoteCommand
from masterless.models.results import ExitOutcome
from masterless.services.output_streamer import OutputStreamer
from masterless.transport.base import OutputSink, Transport


class CommandRunner:
    """
    Run one remote command at a time.

    Responsibilities:
    - Report the exact command string before it starts
    - Stream stdout and stderr concurrently while it runs
    - Wait for both streams to drain before returning
    - Apply the exit status policy
    """

    def __init__(
        self, transport: Transport, sink: OutputSink, ignore_exit_codes: bool = False
    ):
        """
        Initialize command runner.

        Args:
            transport: Transport to start commands on
            sink: Object with an emit(line) method, shared by both streams
            ignore_exit_codes: Report non-zero exits instead of raising
        """
        self.transport = transport
        self.sink = sink
        self.ignore_exit_codes = ignore_exit_codes

    def execute(self, command: str, escalate: bool = False) -> ExitOutcome:
        """
        Run a command and return its outcome without judging the exit status.

        Args:
            command: Shell command to run
            escalate: Run it through sudo on the remote host

        Returns:
            ExitOutcome with the exit status

        Raises:
            CommandError: If the transport could not start or wait for the command
        """
        remote_command = RemoteCommand(command, escalate=escalate)
        shell_command = remote_command.shell_command
        self.sink.emit(shell_command)

        try:
            process = self.transport.start(remote_command)
        except (OSError, TransportError) as e:
            raise CommandError(
                shell_command,
                message=f"Error executing command {shell_command!r}: {e}",
            ) from e

        streamers = [
            OutputStreamer(self.sink, process.stdout, "stdout").start(),
            OutputStreamer(self.sink, process.stderr, "stderr").start(),
        ]
        try:
            exit_status = process.wait()
        except (OSError, TransportError) as e:
            raise CommandError(
                shell_command,
                message=f"Error waiting for command {shell_command!r}: {e}",
            ) from e
        finally:
            # Drain both streams even when the wait failed
            for streamer in streamers:
                streamer.wait()
            process.close()

        return ExitOutcome(exit_status=exit_status, command=shell_command)

    def run(self, command: str, escalate: bool = False) -> ExitOutcome:
        """
        Run a command and enforce the exit status policy.

        Raises:
            CommandError: On non-zero exit, unless ignore_exit_codes is set
        """
        outcome = self.execute(command, escalate=escalate)
        if outcome.is_failure:
            error = CommandError(outcome.command, outcome.exit_status)
            if not self.ignore_exit_codes:
                raise error
            outcome.description = error.message
            self.sink.emit(f"Ignoring failure: {error.message}")
        return outcome
