# Path: packager/tests/test_coordinator.py
"""
Integration tests for the package coordinator.

Runs the full pipeline against an in-process hosting service and a
recording compiler.

Tests:
- End-to-end staging of output/ and compiler invocation
- Reuse of intact archives, re-download of damaged ones
- Explicit versions
- Failures reported with the stage they happened in
- Reset mode
"""

import sys
import asyncio
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from packager.engine.coordinator import PackageCoordinator
from packager.engine.errors import CompilerNotFound, ResolutionFailure
from packager.engine.progress import KIND_FINISH
from packager.models import ReleaseDescriptor, VersionSelection
from packager.core.data_paths import WorkspacePaths
from packager.tests.fixtures import (
    make_config,
    serve,
    tree,
    FakeHostingService,
    FakeCompiler,
)


EXPECTED_OUTPUT = {
    '86Box.exe': b'MZ emulator',
    '86Manager.exe': b'MZ manager',
    'install.iss': b'[Setup]\nAppName=86Box\n',
    'nvr': None,
    'nvr/README.txt': b'nvram',
    'roms': None,
    'roms/machines': None,
    'roms/machines/ibm': None,
    'roms/machines/ibm/bios.bin': b'\x00\x01\x02',
}


def _workspace(tmp_path: Path) -> Path:
    templates = tmp_path / 'setupFiles'
    templates.mkdir()
    (templates / 'install.iss').write_bytes(EXPECTED_OUTPUT['install.iss'])
    return tmp_path


def _run(workspace, service, compiler, versions=None, events=None):
    """One coordinator run against the fake service."""
    async def scenario():
        async with serve(service.build_app()) as server:
            service.server = server
            config = make_config(
                workspace,
                api_base_url=service.api_base_url,
                web_base_url=service.web_base_url,
            )
            coordinator = PackageCoordinator(
                config,
                compiler=compiler,
                progress=events.append if events is not None else None,
                arch='64',
            )
            try:
                return await coordinator.run(versions or VersionSelection.all_latest())
            finally:
                await coordinator.close()

    return asyncio.run(scenario())


def test_end_to_end_latest(tmp_path):
    """Latest everything: output/ staged and the compiler called once."""
    workspace = _workspace(tmp_path)
    service = FakeHostingService()
    compiler = FakeCompiler()
    events = []

    result = _run(workspace, service, compiler, events=events)

    assert result.success, result.error_message
    assert result.exit_code == 0
    assert result.installer_name == '86Box-v4.2'
    assert result.installer_version == '4.2'

    assert len(compiler.calls) == 1
    call = compiler.calls[0]
    assert call['installer_name'] == '86Box-v4.2'
    assert call['version'] == 'v4.2'
    assert call['output'] == EXPECTED_OUTPUT

    assert service.hits('/api/') == [
        '/api/repos/86Box/86Box/releases/latest',
        '/api/repos/86Box/roms/releases/latest',
        '/api/repos/86Box/86BoxManager/releases/latest',
    ]
    assert service.hits('/86Box/roms/archive/') == ['/86Box/roms/archive/refs/tags/v4.2.zip']
    assert service.hits('/files/86Box/') == ['/files/86Box/v4.2/86Box-Windows-64-b6130.zip']

    assert set(result.downloads) == {'emulator', 'roms', 'manager'}
    assert result.downloads['emulator'].requests_made == 2
    assert len(result.relocations) == 4

    paths = WorkspacePaths(workspace_dir=workspace)
    assert not paths.roms_dir.exists()
    assert not paths.manager_dir.exists()
    assert not paths.emulator_dir.exists()
    assert paths.emulator_archive.exists()
    assert (workspace / 'setupFiles' / 'install.iss').exists()

    finished = {e.label for e in events if e.kind == KIND_FINISH}
    assert {
        'Downloading 86Box',
        'Downloading 86Box ROMs',
        'Downloading 86Box Manager',
        'Extracting 86Box',
        'Cleanup',
        'Generating output folder',
    } <= finished


def test_second_run_reuses_archives(tmp_path):
    """Intact archives from a previous run are not fetched again."""
    workspace = _workspace(tmp_path)
    service = FakeHostingService()

    _run(workspace, service, FakeCompiler())
    service.requests.clear()

    compiler = FakeCompiler()
    result = _run(workspace, service, compiler)

    assert result.success, result.error_message
    assert all(d.skipped for d in result.downloads.values())
    assert service.hits('/files/') == []
    assert service.hits('/86Box/roms/archive/') == []
    assert compiler.calls[0]['output'] == EXPECTED_OUTPUT


def test_damaged_archive_downloaded_again(tmp_path):
    """A truncated archive from an interrupted run is not reused."""
    workspace = _workspace(tmp_path)
    WorkspacePaths(workspace_dir=workspace).emulator_archive.write_bytes(b'PK\x03\x04 trunc')
    service = FakeHostingService()

    result = _run(workspace, service, FakeCompiler())

    assert result.success, result.error_message
    assert not result.downloads['emulator'].skipped
    assert service.hits('/files/86Box/') == ['/files/86Box/v4.2/86Box-Windows-64-b6130.zip']


def test_explicit_versions(tmp_path):
    workspace = _workspace(tmp_path)
    service = FakeHostingService()
    compiler = FakeCompiler()
    versions = VersionSelection.from_answers('4.1', 'v2.7.1', '')

    result = _run(workspace, service, compiler, versions=versions)

    assert result.success, result.error_message
    assert result.installer_name == '86Box-v4.1'
    assert result.installer_version == '4.1'
    assert service.hits('/api/') == [
        '/api/repos/86Box/86Box/releases/tags/v4.1',
        '/api/repos/86Box/roms/releases/tags/v4.1',
        '/api/repos/86Box/86BoxManager/releases/tags/v2.7.1',
    ]
    assert service.hits('/86Box/roms/archive/') == ['/86Box/roms/archive/refs/tags/v4.1.zip']
    assert compiler.calls[0]['output'] == EXPECTED_OUTPUT


def test_unknown_version_fails_resolution(tmp_path):
    workspace = _workspace(tmp_path)
    service = FakeHostingService()
    compiler = FakeCompiler()

    result = _run(workspace, service, compiler, versions=VersionSelection.from_answers('9.9', '', ''))

    assert not result.success
    assert result.error_stage == 'resolution'
    assert isinstance(result.error, ResolutionFailure)
    assert result.error.status_code == 404
    assert result.downloads == {}
    assert compiler.calls == []


def test_missing_compiler_fails_before_network(tmp_path):
    workspace = _workspace(tmp_path)
    service = FakeHostingService()

    result = _run(workspace, service, FakeCompiler(available=False))

    assert result.error_stage == 'preflight'
    assert isinstance(result.error, CompilerNotFound)
    assert service.requests == []


def test_compiler_exit_code_reported(tmp_path):
    workspace = _workspace(tmp_path)

    result = _run(workspace, FakeHostingService(), FakeCompiler(exit_code=2))

    assert not result.success
    assert result.exit_code == 2
    assert result.error is None


def test_installer_version():
    release = ReleaseDescriptor(tag='v4.2')

    assert PackageCoordinator.installer_version(VersionSelection.all_latest(), release) == 'v4.2'
    assert PackageCoordinator.installer_version(
        VersionSelection.from_answers('4.1', '', ''), release
    ) == 'v4.1'


def test_reset(tmp_path):
    """Reset deletes only transient paths and built installers."""
    workspace = _workspace(tmp_path)
    (workspace / 'emu.zip').write_bytes(b'zip')
    (workspace / 'roms' / 'roms-4.2').mkdir(parents=True)
    (workspace / 'output').mkdir()
    (workspace / 'output' / '86Box.exe').write_bytes(b'MZ')
    (workspace / '86Box-v4.2.exe').write_bytes(b'installer')
    (workspace / 'notes.txt').write_bytes(b'keep me')

    coordinator = PackageCoordinator(make_config(workspace), compiler=FakeCompiler())
    removed = coordinator.reset()

    assert sorted(p.name for p in removed) == ['86Box-v4.2.exe', 'emu.zip', 'output', 'roms']
    assert sorted(p.name for p in workspace.iterdir()) == ['notes.txt', 'setupFiles']

    assert coordinator.reset() == []


def test_reset_keeps_other_prefixed_entries(tmp_path):
    """Only 86Box-*.exe files count as built installers."""
    workspace = _workspace(tmp_path)
    (workspace / '86Box-source' / 'src').mkdir(parents=True)
    (workspace / '86Box-source' / 'src' / 'main.c').write_bytes(b'int main;')
    (workspace / '86Box-notes.txt').write_bytes(b'keep me')
    (workspace / '86Box-v4.1.exe').write_bytes(b'installer')

    coordinator = PackageCoordinator(make_config(workspace), compiler=FakeCompiler())
    removed = coordinator.reset()

    assert [p.name for p in removed] == ['86Box-v4.1.exe']
    assert (workspace / '86Box-source' / 'src' / 'main.c').read_bytes() == b'int main;'
    assert (workspace / '86Box-notes.txt').exists()
