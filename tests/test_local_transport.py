"""End-to-end runs over the local transport with a stub puppet executable."""
import sys

import pytest

from masterless.exceptions import CommandError
from masterless.models.config import ProvisionerConfig
from masterless.services.command_runner import CommandRunner
from masterless.services.provisioner import Phase, Provisioner
from masterless.transport.local import LocalTransport

pytestmark = pytest.mark.skipif(sys.platform == 'win32', reason='needs a POSIX shell')


class KeepingTransport(LocalTransport):
    """Local transport that remembers the processes it started."""

    def __init__(self):
        self.started = []

    def start(self, command):
        process = super().start(command)
        self.started.append(process)
        return process


class TestLocalCommandRunner:

    def test_streams_real_process_output(self, sink):
        runner = CommandRunner(LocalTransport(), sink)

        outcome = runner.run("printf 'a\\nb\\n'; printf 'x\\n' >&2")

        assert outcome.is_success
        output = sink.lines[1:]
        assert sorted(output) == ['a', 'b', 'x']
        assert output.index('a') < output.index('b')

    def test_exit_status_propagates(self, sink):
        runner = CommandRunner(LocalTransport(), sink)

        with pytest.raises(CommandError) as exc_info:
            runner.run('echo failing; exit 3')

        assert exc_info.value.exit_status == 3
        assert 'failing' in sink.lines

    def test_pipes_closed_after_run(self, sink):
        transport = KeepingTransport()

        CommandRunner(transport, sink).run('echo done')

        popen = transport.started[0].process
        assert popen.stdout.closed
        assert popen.stderr.closed


@pytest.fixture
def local_config(tmp_path, puppet_tree, stub_puppet):
    def build(**overrides):
        values = dict(
            manifest_file=str(puppet_tree / 'manifests' / 'site.pp'),
            module_paths=(
                str(puppet_tree / 'site-modules'),
                str(puppet_tree / 'vendor-modules'),
            ),
            hiera_config_path=str(puppet_tree / 'hiera.yaml'),
            facts={'role': 'web'},
            staging_dir=str(tmp_path / 'remote' / 'staging'),
            puppet_bin_dir=str(stub_puppet),
            prevent_sudo=True,
        )
        values.update(overrides)
        return ProvisionerConfig(**values)

    return build


class TestLocalProvisioning:

    def test_stages_and_converges(self, tmp_path, local_config, logger):
        staging = tmp_path / 'remote' / 'staging'

        result = Provisioner(local_config(), LocalTransport(), logger).provision()

        assert result.converged
        assert (staging / 'module-0' / 'profile' / 'manifests' / 'init.pp').is_file()
        assert (staging / 'module-1' / 'profile' / 'manifests' / 'init.pp').is_file()
        assert (staging / 'manifests' / 'site.pp').read_text() == "notify { 'hello': }\n"
        assert (staging / 'hiera.yaml').read_text() == '---\nversion: 5\n'
        assert (
            f'puppet apply --verbose '
            f'--modulepath={staging}/module-0:{staging}/module-1 '
            f'--hiera_config={staging}/hiera.yaml '
            f'{staging}/manifests/site.pp'
        ) in logger.lines
        assert f'cwd={staging}' in logger.lines
        assert 'role=web' in logger.lines
        assert 'converging' in logger.lines

    def test_directory_manifest(self, tmp_path, puppet_tree, local_config, logger):
        staging = tmp_path / 'remote' / 'staging'
        config = local_config(manifest_file=str(puppet_tree / 'manifests'))

        result = Provisioner(config, LocalTransport(), logger).provision()

        assert result.remote_manifest_path == str(staging / 'manifests')
        assert (staging / 'manifests' / 'nodes.pp').is_file()
        assert not (staging / 'manifests' / 'manifests').exists()

    def test_cleanup_removes_staging(self, tmp_path, local_config, logger):
        result = Provisioner(
            local_config(clean_staging_dir=True), LocalTransport(), logger
        ).provision()

        assert result.cleaned
        assert not (tmp_path / 'remote' / 'staging').exists()

    def test_failed_puppet_run(self, tmp_path, local_config, logger, monkeypatch):
        monkeypatch.setenv('PUPPET_STUB_EXIT', '2')

        with pytest.raises(CommandError) as exc_info:
            Provisioner(
                local_config(clean_staging_dir=True), LocalTransport(), logger
            ).provision()

        assert exc_info.value.phase is Phase.CONVERGE
        assert exc_info.value.exit_status == 2
        assert 'converging' in logger.lines
        assert (tmp_path / 'remote' / 'staging').exists()
