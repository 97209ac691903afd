"""Pytest configuration and shared fakes for masterless tests."""
import io
import os
import threading

import pytest

from masterless.exceptions import TransportError
from masterless.transport.base import RemoteProcess, Transport


class RecordingSink:
    """Thread-safe sink that keeps every emitted line."""

    def __init__(self):
        self.lines = []
        self._lock = threading.Lock()

    def emit(self, line):
        with self._lock:
            self.lines.append(line)


class RecordingLogger(RecordingSink):
    """Sink with the progress methods the provisioner calls."""

    def __init__(self):
        super().__init__()
        self.steps = []
        self.successes = []
        self.warnings = []

    def step(self, name):
        self.steps.append(name)

    def success(self, message):
        self.successes.append(message)

    def warning(self, message):
        self.warnings.append(message)


class FakeProcess(RemoteProcess):
    def __init__(self, stdout=b'', stderr=b'', exit_status=0):
        self._stdout = io.BytesIO(stdout)
        self._stderr = io.BytesIO(stderr)
        self.exit_status = exit_status
        self.closed = False

    @property
    def stdout(self):
        return self._stdout

    @property
    def stderr(self):
        return self._stderr

    def wait(self):
        return self.exit_status

    def close(self):
        self.closed = True


class FakeTransport(Transport):
    """Records every call; commands succeed unless told otherwise."""

    def __init__(self, sink=None):
        self.sink = sink
        self.calls = []
        self.uploads = {}
        self.sources = []
        self.statuses = {}
        self.outputs = {}
        self.failing_uploads = set()
        self.emitted_before_start = []

    def fail_command(self, fragment, exit_status=1):
        """Make any command containing fragment exit with exit_status."""
        self.statuses[fragment] = exit_status

    def output_for(self, fragment, stdout=b'', stderr=b''):
        self.outputs[fragment] = (stdout, stderr)

    def fail_upload(self, remote_path):
        self.failing_uploads.add(remote_path)

    def commands(self):
        return [call[1] for call in self.calls if call[0] == 'run']

    def start(self, command):
        shell_command = command.shell_command
        if self.sink is not None:
            self.emitted_before_start.append(list(self.sink.lines))
        self.calls.append(('run', shell_command))
        exit_status = 0
        for fragment, status in self.statuses.items():
            if fragment in shell_command:
                exit_status = status
        stdout, stderr = b'', b''
        for fragment, output in self.outputs.items():
            if fragment in shell_command:
                stdout, stderr = output
        return FakeProcess(stdout, stderr, exit_status)

    def upload(self, remote_path, source):
        self.calls.append(('upload', remote_path))
        self.sources.append(source)
        if remote_path in self.failing_uploads:
            raise TransportError(f'upload to {remote_path} refused')
        self.uploads[remote_path] = source.read()

    def upload_dir(self, remote_path, local_dir):
        self.calls.append(('upload_dir', remote_path, local_dir))
        if remote_path in self.failing_uploads:
            raise TransportError(f'upload to {remote_path} refused')


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def puppet_tree(tmp_path):
    """Local puppet code: a manifest, two module dirs and a hiera config."""
    root = tmp_path / 'puppet'
    manifests = root / 'manifests'
    manifests.mkdir(parents=True)
    (manifests / 'site.pp').write_text("notify { 'hello': }\n")
    (manifests / 'nodes.pp').write_text("node default { }\n")

    for name in ('site-modules', 'vendor-modules'):
        module = root / name / 'profile' / 'manifests'
        module.mkdir(parents=True)
        (module / 'init.pp').write_text('class profile { }\n')

    (root / 'hiera.yaml').write_text('---\nversion: 5\n')
    return root


@pytest.fixture
def stub_puppet(tmp_path):
    """A fake puppet executable that echoes its arguments and facts."""
    bin_dir = tmp_path / 'bin'
    bin_dir.mkdir()
    script = bin_dir / 'puppet'
    script.write_text(
        '#!/bin/sh\n'
        'echo "puppet $*"\n'
        'echo "cwd=$(pwd)"\n'
        'echo "role=$FACTER_role"\n'
        'echo "converging" >&2\n'
        'exit "${PUPPET_STUB_EXIT:-0}"\n'
    )
    os.chmod(script, 0o755)
    return bin_dir
