# Path: packager/engine/retry_manager.py
"""
Retry Manager

Fixed-delay retry logic for transient filesystem contention.
Antivirus scanners, indexers and not-yet-closed handles make moves fail
with "resource busy" errors that clear up within a fraction of a second.

Architecture:
- tenacity AsyncRetrying: asynchronous delay between attempts
  (asyncio.sleep), never a process-blocking sleep
- Busy-class vs fatal error classification
- Last exception re-raised unchanged once attempts are exhausted
"""

import errno
from typing import Any, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.constants import (
    DEFAULT_MOVE_RETRIES,
    DEFAULT_MOVE_RETRY_DELAY,
    LOG_PROCESS,
)
from packager.engine.constants import BUSY_ERRNOS, BUSY_WINERRORS

logger = get_logger(__name__, 'engine')


def is_busy_error(error: BaseException) -> bool:
    """
    Whether an error means "resource temporarily in use".

    Permission denied and missing paths are not busy: retrying them
    cannot succeed.
    """
    if not isinstance(error, OSError):
        return False

    winerror = getattr(error, 'winerror', None)
    if winerror is not None:
        return winerror in BUSY_WINERRORS

    return error.errno in BUSY_ERRNOS


class RetryManager:
    """
    Runs an async operation, retrying busy-class failures.

    Example:
        manager = RetryManager(max_attempts=3, delay=0.5)
        await manager.retry_async(move, src, dest)
        manager.attempts   # attempts used by the last call
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        delay: Optional[float] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize retry manager.

        Args:
            max_attempts: Total attempts including the first (from config if None)
            delay: Seconds between attempts (from config if None)
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.max_attempts = max_attempts if max_attempts is not None else \
            self.config.get('move_retries', DEFAULT_MOVE_RETRIES)

        self.delay = delay if delay is not None else \
            self.config.get('move_retry_delay', DEFAULT_MOVE_RETRY_DELAY)

        self.attempts = 0

    def is_retryable_error(self, error: BaseException) -> bool:
        return is_busy_error(error)

    async def retry_async(
        self,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> Any:
        """
        Execute async function with retry logic.

        Args:
            func: Async function to execute
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            Result of successful execution

        Raises:
            The last exception if it is not busy-class or attempts ran out
        """
        self.attempts = 0

        async def attempt_once():
            self.attempts += 1
            return await func(*args, **kwargs)

        retryer = AsyncRetrying(
            stop=stop_after_attempt(max(self.max_attempts, 1)),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception(self.is_retryable_error),
            before_sleep=self._log_retry,
            reraise=True,
        )

        result = await retryer(attempt_once)

        if self.attempts > 1:
            logger.info(f"{LOG_PROCESS} Retry succeeded on attempt {self.attempts}")

        return result

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        code = errno.errorcode.get(getattr(error, 'errno', None), 'busy')
        logger.warning(
            f"{LOG_PROCESS} Attempt {retry_state.attempt_number}/{self.max_attempts} "
            f"failed ({code}): {error}. Retrying in {self.delay:.1f}s..."
        )


__all__ = ['RetryManager', 'is_busy_error']
