# Path: packager/engine/release_resolver.py
"""
Release Resolver

Async client for the hosting service's release metadata API.
Turns an ArtifactSpec into a ReleaseDescriptor.

Architecture:
- One GET per lookup, no retry (a missing release is not transient)
- Never raises for transport/HTTP failures: returns a ResolutionResult
  carrying a typed ResolutionFailure with the specific cause
- Optional token authentication for higher rate limits
"""

import asyncio
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.engine.errors import ResolutionFailure
from packager.engine.result import ResolutionResult
from packager.models import ArtifactSpec, ReleaseDescriptor
from packager.constants import (
    HTTP_OK,
    HTTP_NOT_FOUND,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from packager.engine.constants import (
    RELEASES_LIST_PATH,
    RELEASE_LATEST_PATH,
    RELEASE_TAG_PATH,
    HEADER_USER_AGENT,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    API_ACCEPT_HEADER,
)

logger = get_logger(__name__, 'engine')


class ReleaseResolver:
    """
    Resolves 'latest' or a tag to a release descriptor.

    Example:
        async with ReleaseResolver() as resolver:
            result = await resolver.resolve_latest('86Box', '86Box')
            if result.success:
                print(result.release.tag)
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        api_base_url: Optional[str] = None,
        token: Optional[str] = None
    ):
        """
        Initialize release resolver.

        Args:
            config: Optional ConfigLoader instance
            api_base_url: Overrides the configured API base URL
            token: Overrides the configured access token
        """
        self.config = config if config else ConfigLoader()

        self.api_base_url = (api_base_url or self.config.get('api_base_url')).rstrip('/')
        self.token = token if token is not None else self.config.get('github_token')
        self.user_agent = self.config.get('user_agent')
        self.timeout = self.config.get('request_timeout')

        self._session: Optional[aiohttp.ClientSession] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(self, spec: ArtifactSpec) -> ResolutionResult:
        """Resolve an artifact spec ('latest' or explicit tag)."""
        if spec.is_latest:
            return await self.resolve_latest(spec.owner, spec.repo)
        return await self.resolve_by_tag(spec.owner, spec.repo, spec.version)

    async def resolve_latest(self, owner: str, repo: str) -> ResolutionResult:
        """Resolve the most recent published release."""
        url = self.api_base_url + RELEASE_LATEST_PATH.format(owner=owner, repo=repo)
        return await self._fetch_release(f"{owner}/{repo}", url)

    async def resolve_by_tag(self, owner: str, repo: str, tag: str) -> ResolutionResult:
        """Resolve the release published under an explicit tag."""
        url = self.api_base_url + RELEASE_TAG_PATH.format(
            owner=owner,
            repo=repo,
            tag=quote(tag, safe=''),
        )
        return await self._fetch_release(f"{owner}/{repo}@{tag}", url)

    async def list_releases(self, owner: str, repo: str) -> Optional[list[ReleaseDescriptor]]:
        """
        List published releases, newest first.

        Returns:
            Release descriptors, or None if the list could not be fetched
        """
        url = self.api_base_url + RELEASES_LIST_PATH.format(owner=owner, repo=repo)

        try:
            status, data = await self._get_json(url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"{LOG_OUTPUT} Release list failed for {owner}/{repo}: {e}")
            return None

        if status != HTTP_OK or not isinstance(data, list):
            logger.error(f"{LOG_OUTPUT} Release list failed for {owner}/{repo}: HTTP {status}")
            return None

        releases = []
        for item in data:
            try:
                releases.append(ReleaseDescriptor.from_api(item))
            except ValueError as e:
                logger.debug(f"{LOG_PROCESS} Skipping malformed release entry: {e}")

        logger.info(f"{LOG_OUTPUT} {owner}/{repo}: {len(releases)} releases")
        return releases

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch_release(self, identifier: str, url: str) -> ResolutionResult:
        logger.info(f"{LOG_INPUT} Resolving release: {identifier}")

        result = ResolutionResult(success=False, identifier=identifier, url=url)

        try:
            status, data = await self._get_json(url)
        except asyncio.TimeoutError:
            result.error = ResolutionFailure(identifier, "request timed out")
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result
        except aiohttp.ClientError as e:
            result.error = ResolutionFailure(identifier, f"transport error: {e}")
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result
        except ValueError as e:
            result.error = ResolutionFailure(identifier, f"invalid JSON response: {e}")
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result

        result.status_code = status

        if status != HTTP_OK:
            reason = "release not found" if status == HTTP_NOT_FOUND else f"HTTP {status}"
            result.error = ResolutionFailure(identifier, reason, status_code=status)
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result

        try:
            result.release = ReleaseDescriptor.from_api(data)
        except ValueError as e:
            result.error = ResolutionFailure(identifier, f"malformed release: {e}", status_code=status)
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result

        result.success = True
        logger.info(
            f"{LOG_OUTPUT} {identifier} -> {result.release.tag} "
            f"({len(result.release.assets)} assets)"
        )
        return result

    async def _get_json(self, url: str) -> tuple[int, Any]:
        """
        GET a URL and decode its JSON body.

        Returns:
            (status, decoded body or None for non-200 responses)
        """
        session = await self._get_session()

        logger.debug(f"{LOG_PROCESS} GET {url}")
        async with session.get(url, headers=self._build_headers()) as response:
            if response.status != HTTP_OK:
                return response.status, None
            # Some proxies answer with text/plain; decode regardless of type
            data = await response.json(content_type=None)
            return response.status, data

    def _build_headers(self) -> dict[str, str]:
        headers = {
            HEADER_USER_AGENT: self.user_agent,
            HEADER_ACCEPT: API_ACCEPT_HEADER,
        }
        if self.token:
            headers[HEADER_AUTHORIZATION] = f"Bearer {self.token}"
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            kwargs = {}
            if self.timeout:
                kwargs['timeout'] = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


__all__ = ['ReleaseResolver']
