# Path: packager/engine/protocol_handlers.py
"""
Protocol Handlers

HTTP/HTTPS download handler with streaming and redirect following.

Architecture:
- Async HTTP client with streaming
- Redirects followed by an explicit hop loop (allow_redirects=False),
  one DownloadTask per hop, bounded by a redirect budget
- Relative Location headers resolved against the current URL
- Determinate progress when Content-Length is known, indeterminate otherwise
- Failures carried in DownloadResult as typed DownloadError subclasses
"""

import asyncio
import time
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin

import aiohttp

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.engine.stream_handler import StreamHandler
from packager.engine.progress import ProgressCallback, ProgressTracker
from packager.engine.result import DownloadResult
from packager.engine.errors import (
    DownloadError,
    TooManyRedirects,
    MalformedRedirect,
    UnexpectedStatus,
    TransferInterrupted,
)
from packager.models import DownloadTask
from packager.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_REDIRECTS,
    HTTP_OK,
    REDIRECT_STATUS_CODES,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from packager.engine.constants import (
    HEADER_USER_AGENT,
    HEADER_ACCEPT,
    HEADER_LOCATION,
    HEADER_CONTENT_LENGTH,
    DOWNLOAD_ACCEPT_HEADER,
)

logger = get_logger(__name__, 'engine')


class HTTPHandler:
    """
    HTTP/HTTPS download handler with streaming.

    Example:
        async with HTTPHandler() as handler:
            result = await handler.download(
                url='https://github.com/86Box/roms/archive/refs/tags/v4.2.zip',
                destination=Path('roms.zip'),
                label='Downloading 86Box ROMs',
            )
            result.raise_for_error()
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize HTTP handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.chunk_size = self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)
        self.max_redirects = self.config.get('max_redirects', DEFAULT_MAX_REDIRECTS)
        self.timeout = self.config.get('request_timeout')
        self.user_agent = self.config.get('user_agent')

        self._session: Optional[aiohttp.ClientSession] = None

    async def download(
        self,
        url: str,
        destination: Path,
        label: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
        max_redirects: Optional[int] = None
    ) -> DownloadResult:
        """
        Download file from URL to local path.

        Args:
            url: Source URL
            destination: Destination path (overwritten)
            label: Progress label; defaults to the file name
            progress: Optional progress event callback
            max_redirects: Redirect budget; at most budget + 1 requests are made

        Returns:
            DownloadResult with download statistics or the typed error
        """
        destination = Path(destination)
        budget = self.max_redirects if max_redirects is None else max_redirects
        label = label or destination.name

        logger.info(f"{LOG_INPUT} Downloading: {url}")
        logger.info(f"{LOG_INPUT} Output: {destination}")

        start_time = time.time()
        result = DownloadResult(
            success=False,
            url=url,
            file_path=destination
        )
        tracker = ProgressTracker(label, progress)
        task = DownloadTask(url=url, destination=destination, label=label, redirects_left=budget)

        try:
            session = await self._get_session()

            while task is not None:
                result.requests_made += 1
                task = await self._fetch_hop(session, task, url, budget, tracker, result)

            tracker.finish()
            result.success = True
            result.duration = time.time() - start_time

            logger.info(
                f"{LOG_OUTPUT} Download complete: {result.file_size} bytes "
                f"in {result.duration:.2f}s "
                f"({result.download_speed_mbps:.2f} MB/s, "
                f"{result.requests_made - 1} redirects)"
            )

        except DownloadError as e:
            tracker.fail()
            result.error = e
            result.duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} Download failed: {e}")

        return result

    async def _fetch_hop(
        self,
        session: aiohttp.ClientSession,
        task: DownloadTask,
        original_url: str,
        budget: int,
        tracker: ProgressTracker,
        result: DownloadResult
    ) -> Optional[DownloadTask]:
        """
        Issue one request.

        Returns:
            The next hop for a redirect, None once the body has been saved
        """
        logger.info(f"{LOG_PROCESS} GET {task.url}")

        try:
            async with session.get(
                task.url,
                headers=self._build_headers(),
                allow_redirects=False
            ) as response:
                result.status_code = response.status

                if response.status in REDIRECT_STATUS_CODES:
                    return self._next_hop(task, response, original_url, budget)

                if response.status != HTTP_OK:
                    raise UnexpectedStatus(task.url, response.status)

                result.final_url = task.url
                result.file_size = await self._stream_body(response, task, tracker)
                return None

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransferInterrupted(task.url, str(e) or type(e).__name__) from e

    def _next_hop(
        self,
        task: DownloadTask,
        response: aiohttp.ClientResponse,
        original_url: str,
        budget: int
    ) -> DownloadTask:
        """Build the task for a redirect response, enforcing the budget."""
        location = response.headers.get(HEADER_LOCATION)
        if not location:
            raise MalformedRedirect(task.url, response.status)

        if task.redirects_left <= 0:
            raise TooManyRedirects(original_url, budget)

        next_url = urljoin(task.url, location)
        logger.debug(f"{LOG_PROCESS} Redirect {response.status} -> {next_url}")
        return task.follow(next_url)

    async def _stream_body(
        self,
        response: aiohttp.ClientResponse,
        task: DownloadTask,
        tracker: ProgressTracker
    ) -> int:
        total_size = self._content_length(response)

        if total_size:
            logger.info(f"{LOG_PROCESS} File size: {total_size} bytes")

        tracker.start(total_size)

        stream_handler = StreamHandler(chunk_size=self.chunk_size, config=self.config)
        try:
            return await stream_handler.stream_to_file(
                response_stream=response.content.iter_chunked(self.chunk_size),
                output_path=task.destination,
                tracker=tracker,
                total_size=total_size
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransferInterrupted(task.url, str(e) or type(e).__name__) from e

    @staticmethod
    def _content_length(response: aiohttp.ClientResponse) -> Optional[int]:
        """Positive Content-Length, or None when absent or unusable."""
        value = response.headers.get(HEADER_CONTENT_LENGTH)
        try:
            size = int(value) if value else 0
        except ValueError:
            return None
        return size if size > 0 else None

    def _build_headers(self) -> dict[str, str]:
        return {
            HEADER_USER_AGENT: self.user_agent,
            HEADER_ACCEPT: DOWNLOAD_ACCEPT_HEADER,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session.

        Returns:
            ClientSession instance
        """
        if self._session is None or self._session.closed:
            kwargs = {'connector': aiohttp.TCPConnector()}
            if self.timeout:
                kwargs['timeout'] = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(**kwargs)

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


__all__ = ['HTTPHandler']
