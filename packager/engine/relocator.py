# Path: packager/engine/relocator.py
"""
Resilient Relocator

Moves extracted trees into the staging directory, riding out transient
"resource busy" errors with bounded, asynchronous retries.

Architecture:
- move_tree: replace dest with src as one unit (retry delay 0.5s)
- merge_children: move each child of src into dest, own retry budget
  per child (retry delay 0.3s), then remove the emptied src
- copy_children: copy each child into dest, no retries, src untouched
- Blocking filesystem calls run in worker threads (asyncio.to_thread)
- Exhausted or non-busy failures raise RelocationFailed
"""

import asyncio
import errno
import shutil
import time
from pathlib import Path
from typing import Optional

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.engine.errors import RelocationFailed
from packager.engine.result import RelocationResult
from packager.engine.retry_manager import RetryManager
from packager.constants import (
    DEFAULT_MOVE_RETRIES,
    DEFAULT_MOVE_RETRY_DELAY,
    DEFAULT_MERGE_RETRY_DELAY,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')


def remove_path(path: Path) -> bool:
    """
    Delete a file, symlink or directory tree.

    Returns:
        True if something was removed, False if the path did not exist
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def _describe(error: OSError) -> str:
    code = errno.errorcode.get(error.errno) if error.errno else None
    return f"{code}: {error}" if code else str(error)


class Relocator:
    """
    Staging-tree mover with busy-error retries.

    Example:
        relocator = Relocator()
        await relocator.move_tree(Path('roms/roms-4.2'), Path('output/roms'))
        await relocator.merge_children(Path('manager'), Path('output'))
        await relocator.copy_children(Path('setupFiles'), Path('output'))
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        move_retries: Optional[int] = None,
        move_retry_delay: Optional[float] = None,
        merge_retry_delay: Optional[float] = None
    ):
        """
        Initialize relocator.

        Args:
            config: Optional ConfigLoader instance
            move_retries: Default attempts per move (from config if None)
            move_retry_delay: Delay between whole-tree move attempts
            merge_retry_delay: Delay between per-child merge attempts
        """
        self.config = config if config else ConfigLoader()

        self.move_retries = move_retries if move_retries is not None else \
            self.config.get('move_retries', DEFAULT_MOVE_RETRIES)
        self.move_retry_delay = move_retry_delay if move_retry_delay is not None else \
            self.config.get('move_retry_delay', DEFAULT_MOVE_RETRY_DELAY)
        self.merge_retry_delay = merge_retry_delay if merge_retry_delay is not None else \
            self.config.get('merge_retry_delay', DEFAULT_MERGE_RETRY_DELAY)

    async def move_tree(
        self,
        src: Path,
        dest: Path,
        retries: Optional[int] = None
    ) -> RelocationResult:
        """
        Replace dest with src as one unit.

        Args:
            src: File or directory to move
            dest: Target path; an existing file or tree there is removed first
            retries: Total attempts (default from config)

        Returns:
            RelocationResult

        Raises:
            RelocationFailed: Non-busy error, or busy errors on every attempt
        """
        src, dest = Path(src), Path(dest)
        logger.info(f"{LOG_INPUT} Move: {src} -> {dest}")

        start_time = time.time()
        attempts = await self._move_with_retry(src, dest, retries, self.move_retry_delay)

        result = RelocationResult(
            success=True,
            source=src,
            destination=dest,
            items=[src.name],
            attempts=attempts,
            duration=time.time() - start_time,
        )
        logger.info(f"{LOG_OUTPUT} Moved {src.name} ({attempts} attempt(s))")
        return result

    async def merge_children(
        self,
        src_dir: Path,
        dest_dir: Path,
        retries: Optional[int] = None
    ) -> RelocationResult:
        """
        Move every immediate child of src_dir into dest_dir.

        Children overwrite same-named entries in dest_dir; other entries
        of dest_dir are left alone. Each child has its own retry budget.
        src_dir is removed afterwards; failing to remove it only warns.

        Raises:
            RelocationFailed: Naming the child that could not be moved
        """
        src_dir, dest_dir = Path(src_dir), Path(dest_dir)
        logger.info(f"{LOG_INPUT} Merge: {src_dir}/* -> {dest_dir}")

        start_time = time.time()
        children = await self._list_children(src_dir, dest_dir)
        await asyncio.to_thread(dest_dir.mkdir, parents=True, exist_ok=True)

        result = RelocationResult(success=False, source=src_dir, destination=dest_dir)

        for child in children:
            result.attempts += await self._move_with_retry(
                child,
                dest_dir / child.name,
                retries,
                self.merge_retry_delay
            )
            result.items.append(child.name)

        try:
            await asyncio.to_thread(remove_path, src_dir)
        except OSError as e:
            logger.warning(f"{LOG_PROCESS} Could not remove {src_dir} after merge: {e}")

        result.success = True
        result.duration = time.time() - start_time
        logger.info(f"{LOG_OUTPUT} Merged {len(result.items)} entries from {src_dir.name}")
        return result

    async def copy_children(self, src_dir: Path, dest_dir: Path) -> RelocationResult:
        """
        Copy every immediate child of src_dir into dest_dir, overwriting.

        No retries; src_dir is left untouched.

        Raises:
            RelocationFailed: On the first child that cannot be copied
        """
        src_dir, dest_dir = Path(src_dir), Path(dest_dir)
        logger.info(f"{LOG_INPUT} Copy: {src_dir}/* -> {dest_dir}")

        start_time = time.time()
        children = await self._list_children(src_dir, dest_dir)
        await asyncio.to_thread(dest_dir.mkdir, parents=True, exist_ok=True)

        result = RelocationResult(success=False, source=src_dir, destination=dest_dir)

        for child in children:
            target = dest_dir / child.name
            try:
                await asyncio.to_thread(self._copy_path, child, target)
            except OSError as e:
                raise RelocationFailed(child, target, _describe(e)) from e
            result.attempts += 1
            result.items.append(child.name)

        result.success = True
        result.duration = time.time() - start_time
        logger.info(f"{LOG_OUTPUT} Copied {len(result.items)} entries from {src_dir.name}")
        return result

    # ------------------------------------------------------------------
    # Filesystem primitives
    # ------------------------------------------------------------------

    async def _move_with_retry(
        self,
        src: Path,
        dest: Path,
        retries: Optional[int],
        delay: float
    ) -> int:
        manager = RetryManager(
            max_attempts=retries if retries is not None else self.move_retries,
            delay=delay,
            config=self.config
        )
        try:
            await manager.retry_async(self._move_path, src, dest)
        except OSError as e:
            logger.error(f"{LOG_OUTPUT} Move failed: {src} -> {dest}: {e}")
            raise RelocationFailed(src, dest, _describe(e), attempts=manager.attempts) from e
        return manager.attempts

    async def _move_path(self, src: Path, dest: Path) -> None:
        """One move attempt: clear dest, then move src into its place."""
        await asyncio.to_thread(self._replace_path, src, dest)

    @staticmethod
    def _replace_path(src: Path, dest: Path) -> None:
        if not src.exists() and not src.is_symlink():
            raise FileNotFoundError(errno.ENOENT, "Source does not exist", str(src))
        remove_path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(src), str(dest))

    @staticmethod
    def _copy_path(src: Path, dest: Path) -> None:
        if src.is_dir() and not src.is_symlink():
            if dest.exists() and not dest.is_dir():
                dest.unlink()
            shutil.copytree(src, dest, dirs_exist_ok=True)
        else:
            if dest.is_dir() and not dest.is_symlink():
                shutil.rmtree(dest)
            shutil.copy2(src, dest)

    @staticmethod
    async def _list_children(src_dir: Path, dest_dir: Path) -> list[Path]:
        try:
            return await asyncio.to_thread(lambda: sorted(src_dir.iterdir()))
        except OSError as e:
            raise RelocationFailed(src_dir, dest_dir, _describe(e)) from e


__all__ = ['Relocator', 'remove_path']
