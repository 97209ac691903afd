"""Tests for masterless.services.command_runner."""
import io
import threading

import pytest

from masterless.exceptions import CommandError, TransportError
from masterless.services.command_runner import CommandRunner
from tests.conftest import FakeProcess, FakeTransport


class RefusingTransport(FakeTransport):
    def start(self, command):
        raise TransportError('connection refused')


class GatedStream(io.BytesIO):
    """Holds its output back until the gate opens."""

    def __init__(self, data, gate):
        super().__init__(data)
        self.gate = gate

    def readline(self, *args):
        self.gate.wait(5)
        return super().readline(*args)


class DroppedProcess(FakeProcess):
    """Connection drops while output is still on its way."""

    def __init__(self, stdout):
        super().__init__()
        self.gate = threading.Event()
        self._stdout = GatedStream(stdout, self.gate)

    def wait(self):
        self.gate.set()
        raise TransportError('connection lost')


class SingleProcessTransport(FakeTransport):
    def __init__(self, process):
        super().__init__()
        self.process = process

    def start(self, command):
        self.calls.append(('run', command.shell_command))
        return self.process


class TestExecute:

    def test_streams_both_outputs_before_returning(self, sink):
        transport = FakeTransport()
        transport.output_for('make', stdout=b'a\nb\n', stderr=b'x\n')
        runner = CommandRunner(transport, sink)

        outcome = runner.execute('make all')

        assert outcome.is_success
        assert sink.lines[0] == 'make all'
        output = sink.lines[1:]
        assert sorted(output) == ['a', 'b', 'x']
        assert output.index('a') < output.index('b')

    def test_reports_command_before_starting_it(self, sink):
        transport = FakeTransport(sink=sink)
        CommandRunner(transport, sink).execute('uptime')

        assert transport.emitted_before_start == [['uptime']]

    def test_non_zero_status_is_returned_not_raised(self, sink):
        transport = FakeTransport()
        transport.fail_command('false', 3)

        outcome = CommandRunner(transport, sink).execute('false')

        assert outcome.exit_status == 3
        assert outcome.is_failure

    def test_escalation_wraps_with_sudo(self, sink):
        transport = FakeTransport()
        CommandRunner(transport, sink).execute('cd /tmp && id', escalate=True)

        assert transport.commands() == ["sudo -i bash -c 'cd /tmp && id'"]
        assert sink.lines[0] == "sudo -i bash -c 'cd /tmp && id'"

    def test_start_failure_raises_command_error(self, sink):
        runner = CommandRunner(RefusingTransport(), sink)

        with pytest.raises(CommandError) as exc_info:
            runner.execute('uptime')

        assert exc_info.value.exit_status is None
        assert 'connection refused' in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, TransportError)


class TestRun:

    def test_success_returns_outcome(self, sink):
        outcome = CommandRunner(FakeTransport(), sink).run('true')
        assert outcome.exit_status == 0
        assert outcome.description is None

    def test_non_zero_status_raises(self, sink):
        transport = FakeTransport()
        transport.fail_command('puppet', 4)
        transport.output_for('puppet', stderr=b'Error: boom\n')
        runner = CommandRunner(transport, sink)

        with pytest.raises(CommandError) as exc_info:
            runner.run('puppet apply site.pp')

        error = exc_info.value
        assert error.exit_status == 4
        assert error.command == 'puppet apply site.pp'
        assert 'non-zero exit status: 4' in str(error)
        # Output was fully drained before the error surfaced
        assert 'Error: boom' in sink.lines

    def test_ignore_exit_codes_reports_instead_of_raising(self, sink):
        transport = FakeTransport()
        transport.fail_command('puppet', 2)
        runner = CommandRunner(transport, sink, ignore_exit_codes=True)

        outcome = runner.run('puppet apply site.pp')

        assert outcome.exit_status == 2
        assert 'non-zero exit status: 2' in outcome.description
        assert any(line.startswith('Ignoring failure') for line in sink.lines)


class TestStreamLifecycle:

    def test_failed_wait_still_drains_output(self, sink):
        process = DroppedProcess(b'Notice: Applied catalog\n')
        runner = CommandRunner(SingleProcessTransport(process), sink)

        with pytest.raises(CommandError) as exc_info:
            runner.execute('puppet apply')

        assert sink.lines == ['puppet apply', 'Notice: Applied catalog']
        assert exc_info.value.exit_status is None
        assert isinstance(exc_info.value.__cause__, TransportError)
        assert process.closed
        alive = [t.name for t in threading.enumerate() if t.name.startswith('masterless-')]
        assert alive == []

    def test_process_closed_after_success(self, sink):
        process = FakeProcess(stdout=b'done\n')
        CommandRunner(SingleProcessTransport(process), sink).execute('uptime')

        assert process.closed
