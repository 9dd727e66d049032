# Path: packager/tests/fixtures.py
"""
Test Fixtures for the packager

- TestConfig: dict-backed stand-in for ConfigLoader
- serve(): runs an aiohttp.web application on a local port
- make_zip() / make_tar(): archive builders
- FakeHostingService: release API, asset downloads and tag archives
- FakeCompiler: records the installer build instead of running ISCC
"""

import io
import tarfile
import zipfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from aiohttp import web
from aiohttp.test_utils import TestServer

from packager.core.config_loader import ConfigLoader
from packager.core.data_paths import WorkspacePaths


class TestConfig(dict):
    """Configuration snapshot with per-test overrides (isolated from the singleton)."""

    __test__ = False


def make_config(workspace: Optional[Path] = None, **overrides) -> TestConfig:
    config = TestConfig(ConfigLoader().items())
    config.update({
        'github_token': None,
        'arch': None,
        'request_timeout': 0,
        'move_retry_delay': 0.01,
        'merge_retry_delay': 0.01,
    })
    if workspace is not None:
        config['workspace_dir'] = Path(workspace)
        config['templates_dir'] = Path(workspace) / 'setupFiles'
    config.update(overrides)
    return config


@asynccontextmanager
async def serve(app: web.Application):
    """Serve an app on localhost; yields the running TestServer."""
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


def zip_bytes(entries: dict) -> bytes:
    """
    Build a ZIP archive in memory.

    Args:
        entries: name -> bytes/str content; names ending in '/' are directories
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            if name.endswith('/'):
                zf.writestr(zipfile.ZipInfo(name), b'')
            else:
                zf.writestr(name, content)
    return buffer.getvalue()


def make_zip(path: Path, entries: dict) -> Path:
    path.write_bytes(zip_bytes(entries))
    return path


def make_tar(path: Path, entries: dict, mode: str = 'w:gz') -> Path:
    with tarfile.open(path, mode) as tf:
        for name, content in entries.items():
            info = tarfile.TarInfo(name.rstrip('/'))
            if name.endswith('/'):
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tf.addfile(info)
            else:
                data = content.encode() if isinstance(content, str) else content
                info.size = len(data)
                tf.addfile(info, io.BytesIO(data))
    return path


def tree(root: Path) -> dict:
    """Relative path -> file bytes (None for directories)."""
    result = {}
    for path in sorted(root.rglob('*')):
        rel = path.relative_to(root).as_posix()
        result[rel] = None if path.is_dir() else path.read_bytes()
    return result


# ============================================================================
# FAKE HOSTING SERVICE
# ============================================================================

EMULATOR_FILES = {
    '86Box.exe': b'MZ emulator',
    'nvr/': b'',
    'nvr/README.txt': b'nvram',
}

MANAGER_FILES = {
    '86Manager.exe': b'MZ manager',
    'AUTHORS': b'authors',
    'LICENSE': b'license',
    'README.md': b'readme',
}


def roms_files(tag: str) -> dict:
    folder = f"roms-{tag[1:]}"
    return {
        f'{folder}/': b'',
        f'{folder}/machines/ibm/bios.bin': b'\x00\x01\x02',
        f'{folder}/README.md': b'readme',
        f'{folder}/LICENSE': b'license',
        f'{folder}/.github/workflows/ci.yml': b'on: push',
    }


class FakeHostingService:
    """
    In-process stand-in for the release API and download hosts.

    API under /api, release assets under /assets (each behind one
    redirect), tag archives under /{owner}/{repo}/archive/refs/tags/.
    """

    def __init__(self):
        self.releases = {
            '86Box': {'latest': 'v4.2', 'tags': {'v4.2', 'v4.1'}},
            'roms': {'latest': 'v4.2', 'tags': {'v4.2', 'v4.1'}},
            '86BoxManager': {'latest': 'v2.7.1', 'tags': {'v2.7.1'}},
        }
        self.requests: list[str] = []
        self.server: Optional[TestServer] = None

    def build_app(self) -> web.Application:
        """A new application per event loop; state lives on the service."""
        app = web.Application(middlewares=[self._record])
        app.router.add_get('/api/repos/{owner}/{repo}/releases/latest', self._latest)
        app.router.add_get('/api/repos/{owner}/{repo}/releases/tags/{tag}', self._by_tag)
        app.router.add_get('/assets/{repo}/{tag}/{name}', self._asset_redirect)
        app.router.add_get('/files/{repo}/{tag}/{name}', self._asset)
        app.router.add_get('/{owner}/{repo}/archive/refs/tags/{archive}', self._tag_archive)
        return app

    @property
    def api_base_url(self) -> str:
        return str(self.server.make_url('/api'))

    @property
    def web_base_url(self) -> str:
        return str(self.server.make_url('/')).rstrip('/')

    @web.middleware
    async def _record(self, request, handler):
        self.requests.append(request.path)
        return await handler(request)

    def _release_json(self, request, repo: str, tag: str) -> dict:
        base = f"{request.scheme}://{request.host}"
        if repo == '86Box':
            names = [
                '86Box-Linux-x86_64-b6130.AppImage',
                '86Box-Windows-32-b6130.zip',
                '86Box-Windows-64-b6130.zip',
            ]
        elif repo == '86BoxManager':
            names = ['86BoxManager.zip']
        else:
            names = []
        return {
            'tag_name': tag,
            'assets': [
                {'name': name, 'browser_download_url': f"{base}/assets/{repo}/{tag}/{name}"}
                for name in names
            ],
        }

    async def _latest(self, request):
        repo = request.match_info['repo']
        if repo not in self.releases:
            raise web.HTTPNotFound()
        tag = self.releases[repo]['latest']
        return web.json_response(self._release_json(request, repo, tag))

    async def _by_tag(self, request):
        repo = request.match_info['repo']
        tag = request.match_info['tag']
        if repo not in self.releases or tag not in self.releases[repo]['tags']:
            return web.json_response({'message': 'Not Found'}, status=404)
        return web.json_response(self._release_json(request, repo, tag))

    async def _asset_redirect(self, request):
        info = request.match_info
        raise web.HTTPFound(f"/files/{info['repo']}/{info['tag']}/{info['name']}")

    async def _asset(self, request):
        repo = request.match_info['repo']
        if repo == '86Box':
            return web.Response(body=zip_bytes(EMULATOR_FILES))
        return web.Response(body=zip_bytes(MANAGER_FILES))

    async def _tag_archive(self, request):
        tag = request.match_info['archive'][:-len('.zip')]
        return web.Response(body=zip_bytes(roms_files(tag)))

    def hits(self, prefix: str) -> list[str]:
        return [path for path in self.requests if path.startswith(prefix)]


class FakeCompiler:
    """Records what would be compiled; snapshots output/ at that moment."""

    def __init__(self, exit_code: int = 0, available: bool = True):
        self.exit_code = exit_code
        self.available = available
        self.calls: list[dict] = []

    def ensure_available(self) -> None:
        if not self.available:
            from packager.engine.errors import CompilerNotFound
            raise CompilerNotFound('ISCC.exe')

    async def run(self, installer_name, version, workspace_dir, verbose=False) -> int:
        self.calls.append({
            'installer_name': installer_name,
            'version': version,
            'verbose': verbose,
            'output': tree(WorkspacePaths(workspace_dir=Path(workspace_dir)).output_dir),
        })
        return self.exit_code


__all__ = [
    'TestConfig',
    'make_config',
    'serve',
    'make_zip',
    'zip_bytes',
    'make_tar',
    'tree',
    'roms_files',
    'EMULATOR_FILES',
    'MANAGER_FILES',
    'FakeHostingService',
    'FakeCompiler',
]
