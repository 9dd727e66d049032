# Path: packager/engine/stream_handler.py
"""
Stream Handler

Memory-efficient streaming of a response body to disk.
Chunks are written as they arrive; the body is never buffered whole.

Architecture:
- Chunk-based streaming (64KB default)
- Progress reported through a ProgressTracker
- Async file I/O with aiofiles
"""

from pathlib import Path
from typing import Optional, AsyncIterator

import aiofiles

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.engine.progress import ProgressTracker
from packager.constants import (
    DEFAULT_CHUNK_SIZE,
    LOG_PROCESS,
)

logger = get_logger(__name__, 'engine')

# Debug log every tenth of a known total
LOG_STEP_FRACTION = 0.1


class StreamHandler:
    """
    Writes an async byte stream to a file.

    Example:
        handler = StreamHandler(chunk_size=65536)
        written = await handler.stream_to_file(
            response.content.iter_chunked(65536),
            Path('emu.zip'),
            tracker,
        )
    """

    def __init__(
        self,
        chunk_size: Optional[int] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize stream handler.

        Args:
            chunk_size: Size of chunks to read/write (bytes)
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.chunk_size = chunk_size if chunk_size is not None else \
            self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)

    async def stream_to_file(
        self,
        response_stream: AsyncIterator[bytes],
        output_path: Path,
        tracker: Optional[ProgressTracker] = None,
        total_size: Optional[int] = None
    ) -> int:
        """
        Stream response to file.

        The file is closed before any stream error propagates, so the
        destination may hold partial content afterwards.

        Args:
            response_stream: Async iterator of byte chunks
            output_path: Path where file will be written (truncated first)
            tracker: Receives one advance per chunk
            total_size: Total expected size, for debug logging

        Returns:
            Total bytes written
        """
        tracker = tracker if tracker else ProgressTracker(output_path.name)
        logger.info(f"{LOG_PROCESS} Streaming to: {output_path.name}")

        written = 0
        next_log = LOG_STEP_FRACTION

        async with aiofiles.open(output_path, 'wb') as f:
            async for chunk in response_stream:
                if not chunk:
                    continue

                await f.write(chunk)
                written += len(chunk)
                tracker.advance(len(chunk))

                if total_size and written / total_size >= next_log:
                    logger.debug(f"{LOG_PROCESS} {output_path.name}: {written}/{total_size} bytes")
                    next_log += LOG_STEP_FRACTION

        logger.info(f"{LOG_PROCESS} Stream complete: {written} bytes")
        return written


__all__ = ['StreamHandler']
