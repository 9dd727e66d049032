# Path: packager/tests/test_release_resolver.py
"""
Unit tests for the release resolver.

Tests:
- Latest and by-tag lookups against a local release API
- Typed failures: 404, invalid JSON, malformed payload, transport error
- Token authentication header
- Release listing
"""

import sys
import asyncio
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from aiohttp import web

from packager.engine.release_resolver import ReleaseResolver
from packager.engine.errors import ResolutionFailure
from packager.models import ArtifactSpec
from packager.tests.fixtures import make_config, serve, FakeHostingService


def _resolve(coro_factory, **config_overrides):
    """Run coro_factory(resolver) against a fresh FakeHostingService."""
    service = FakeHostingService()

    async def scenario():
        async with serve(service.build_app()) as server:
            service.server = server
            config = make_config(api_base_url=service.api_base_url, **config_overrides)
            async with ReleaseResolver(config) as resolver:
                return await coro_factory(resolver)

    return asyncio.run(scenario()), service


def test_resolve_latest():
    """Latest release yields its tag and assets in listed order."""
    result, service = _resolve(lambda r: r.resolve_latest('86Box', '86Box'))

    assert result.success, result.error_message
    assert result.release.tag == 'v4.2'
    assert [a.name for a in result.release.assets] == [
        '86Box-Linux-x86_64-b6130.AppImage',
        '86Box-Windows-32-b6130.zip',
        '86Box-Windows-64-b6130.zip',
    ]
    assert result.status_code == 200
    assert service.requests == ['/api/repos/86Box/86Box/releases/latest']


def test_resolve_by_tag():
    """An explicit tag hits the tag endpoint."""
    result, service = _resolve(lambda r: r.resolve_by_tag('86Box', 'roms', 'v4.1'))

    assert result.success, result.error_message
    assert result.release.tag == 'v4.1'
    assert result.release.assets == ()
    assert service.requests == ['/api/repos/86Box/roms/releases/tags/v4.1']


def test_resolve_spec_dispatch():
    """ArtifactSpec('latest') uses the latest endpoint, a tag the tag endpoint."""
    async def both(resolver):
        latest = await resolver.resolve(ArtifactSpec('86Box', '86BoxManager'))
        tagged = await resolver.resolve(ArtifactSpec('86Box', '86Box', 'v4.1'))
        return latest, tagged

    (latest, tagged), service = _resolve(both)

    assert latest.release.tag == 'v2.7.1'
    assert tagged.release.tag == 'v4.1'
    assert service.requests == [
        '/api/repos/86Box/86BoxManager/releases/latest',
        '/api/repos/86Box/86Box/releases/tags/v4.1',
    ]


def test_resolve_missing_tag():
    """404 is a ResolutionFailure naming the artifact, not an exception."""
    result, _ = _resolve(lambda r: r.resolve_by_tag('86Box', '86Box', 'v9.9'))

    assert not result.success
    assert result.release is None
    assert isinstance(result.error, ResolutionFailure)
    assert result.error.status_code == 404
    assert result.error.reason == 'release not found'
    assert '86Box/86Box@v9.9' in result.error_message


def _static_app(handler):
    app = web.Application()
    app.router.add_get('/repos/{owner}/{repo}/releases/latest', handler)
    app.router.add_get('/repos/{owner}/{repo}/releases', handler)
    return app


def _run_static(handler, call, **config_overrides):
    async def scenario():
        async with serve(_static_app(handler)) as server:
            config = make_config(api_base_url=str(server.make_url('/')), **config_overrides)
            async with ReleaseResolver(config) as resolver:
                return await call(resolver)

    return asyncio.run(scenario())


def test_resolve_invalid_json():
    """A 200 with a non-JSON body is reported as a failure."""
    async def handler(request):
        return web.Response(text='<html>rate limited</html>', content_type='text/html')

    result = _run_static(handler, lambda r: r.resolve_latest('86Box', '86Box'))

    assert not result.success
    assert isinstance(result.error, ResolutionFailure)
    assert 'invalid JSON' in result.error.reason


def test_resolve_malformed_release():
    """A payload without a tag is not a usable release."""
    async def handler(request):
        return web.json_response({'assets': []})

    result = _run_static(handler, lambda r: r.resolve_latest('86Box', '86Box'))

    assert not result.success
    assert result.error.status_code == 200
    assert 'malformed release' in result.error.reason


def test_resolve_server_error():
    async def handler(request):
        return web.Response(status=503)

    result = _run_static(handler, lambda r: r.resolve_latest('86Box', '86Box'))

    assert not result.success
    assert result.status_code == 503
    assert result.error.reason == 'HTTP 503'


def test_resolve_connection_refused():
    """Transport errors become ResolutionFailure."""
    async def scenario():
        config = make_config(api_base_url='http://127.0.0.1:1')
        async with ReleaseResolver(config) as resolver:
            return await resolver.resolve_latest('86Box', '86Box')

    result = asyncio.run(scenario())

    assert not result.success
    assert isinstance(result.error, ResolutionFailure)
    assert result.error.reason.startswith('transport error')


def test_token_header():
    """A configured token is sent as a bearer credential."""
    seen = []

    async def handler(request):
        seen.append(request.headers.get('Authorization'))
        return web.json_response({'tag_name': 'v4.2', 'assets': []})

    _run_static(handler, lambda r: r.resolve_latest('86Box', '86Box'), github_token='secret')
    _run_static(handler, lambda r: r.resolve_latest('86Box', '86Box'))

    assert seen == ['Bearer secret', None]


def test_list_releases():
    """Listing skips malformed entries; failures return None."""
    async def handler(request):
        return web.json_response([
            {'tag_name': 'v4.2', 'assets': []},
            {'name': 'draft without tag'},
            {'tag_name': 'v4.1', 'assets': []},
        ])

    releases = _run_static(handler, lambda r: r.list_releases('86Box', '86Box'))
    assert [r.tag for r in releases] == ['v4.2', 'v4.1']

    async def failing(request):
        return web.Response(status=500)

    assert _run_static(failing, lambda r: r.list_releases('86Box', '86Box')) is None
