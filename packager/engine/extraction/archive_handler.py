# Path: packager/engine/extraction/archive_handler.py
"""
Archive Handler Factory

Multi-format archive extraction with pluggable extractors.
Supports ZIP, TAR, TAR.GZ, TAR.BZ2 and TAR.XZ.

Architecture:
- Factory pattern for archive type detection
- Individual extractor classes per format
- Common interface (ExtractionResult)
- Every entry validated (traversal, depth) before anything is written
- Entries streamed to disk in chunks, one progress advance per entry
- ZIP entries written concurrently (bounded); TAR is a streamed
  format and is written sequentially

The archive is never deleted here: the caller owns it.
"""

import asyncio
import shutil
import tarfile
import time
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Optional, Type

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.engine.errors import ExtractError, EntryWriteFailed, UnsafeArchiveEntry
from packager.engine.progress import ProgressCallback, ProgressTracker
from packager.engine.result import ExtractionResult
from packager.constants import (
    DEFAULT_EXTRACT_CONCURRENCY,
    MAX_EXTRACTION_DEPTH,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from packager.engine.extraction.constants import (
    ZIP_READ_MODE,
    TAR_READ_MODE,
    TAR_GZ_MODE,
    TAR_BZ2_MODE,
    TAR_XZ_MODE,
    ARCHIVE_EXTENSIONS_ZIP,
    ARCHIVE_EXTENSIONS_TAR,
    ARCHIVE_EXTENSIONS_TAR_GZ,
    ARCHIVE_EXTENSIONS_TGZ,
    ARCHIVE_EXTENSIONS_TAR_BZ2,
    ARCHIVE_EXTENSIONS_TBZ2,
    ARCHIVE_EXTENSIONS_TAR_XZ,
    ARCHIVE_EXTENSIONS_TXZ,
    EXTRACT_COPY_BUFFER,
    ZIP_PATH_SEPARATOR,
)

logger = get_logger(__name__, 'extraction')

# Errors a damaged entry can raise while being decompressed or written
ENTRY_ERRORS = (OSError, EOFError, zlib.error, zipfile.BadZipFile, tarfile.TarError, NotImplementedError)


class BaseExtractor:
    """
    Base class for archive extractors.

    All format-specific extractors inherit from this.
    Provides common interface and validation.
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize base extractor.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

    async def extract(
        self,
        archive_path: Path,
        target_dir: Path,
        tracker: ProgressTracker
    ) -> ExtractionResult:
        """
        Extract archive to target directory.

        Must be implemented by subclasses.
        """
        raise NotImplementedError("Subclasses must implement extract()")

    def _map_entry(self, entry_name: str, target_dir: Path) -> Path:
        """
        Map an archive entry name to its output path.

        Raises:
            UnsafeArchiveEntry: If the entry escapes target_dir or is too deep
        """
        relative = PurePosixPath(entry_name.rstrip(ZIP_PATH_SEPARATOR))

        if len(relative.parts) > MAX_EXTRACTION_DEPTH:
            logger.error(f"Path too deep: {entry_name} (depth={len(relative.parts)})")
            raise UnsafeArchiveEntry(entry_name)

        member_path = target_dir.joinpath(*relative.parts)
        try:
            member_path.resolve().relative_to(target_dir.resolve())
        except ValueError:
            logger.error(f"Unsafe path detected: {entry_name}")
            raise UnsafeArchiveEntry(entry_name)

        return member_path

    @staticmethod
    def _copy_stream(source, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with source, open(dest, 'wb') as out:
            shutil.copyfileobj(source, out, EXTRACT_COPY_BUFFER)


class ZipExtractor(BaseExtractor):
    """
    ZIP file extractor.

    Handles: .zip files
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        concurrency: Optional[int] = None
    ):
        super().__init__(config)
        self.concurrency = concurrency if concurrency is not None else \
            self.config.get('extract_concurrency', DEFAULT_EXTRACT_CONCURRENCY)

    async def extract(
        self,
        archive_path: Path,
        target_dir: Path,
        tracker: ProgressTracker
    ) -> ExtractionResult:
        """
        Extract ZIP archive.

        Raises:
            ExtractError: Archive missing or unreadable
            UnsafeArchiveEntry: Entry escapes target_dir (nothing written)
            EntryWriteFailed: An entry could not be written
        """
        logger.info(f"{LOG_INPUT} Extracting ZIP: {archive_path.name}")

        result = ExtractionResult(
            success=False,
            archive_path=archive_path,
            extract_directory=target_dir
        )

        try:
            zf = await asyncio.to_thread(zipfile.ZipFile, archive_path, ZIP_READ_MODE)
        except (zipfile.BadZipFile, OSError) as e:
            raise ExtractError(f"Invalid ZIP file {archive_path.name}: {e}") from e

        with zf:
            plan = [(info, self._map_entry(info.filename, target_dir)) for info in zf.infolist()]
            result.entries_total = len(plan)

            await asyncio.to_thread(target_dir.mkdir, parents=True, exist_ok=True)
            tracker.start(len(plan))

            logger.info(
                f"{LOG_PROCESS} Extracting {len(plan)} entries "
                f"(concurrency={self.concurrency})..."
            )

            semaphore = asyncio.Semaphore(max(self.concurrency, 1))

            async def write_entry(info: zipfile.ZipInfo, dest: Path) -> None:
                async with semaphore:
                    try:
                        if info.is_dir():
                            await asyncio.to_thread(dest.mkdir, parents=True, exist_ok=True)
                            result.directories_created += 1
                        else:
                            await asyncio.to_thread(self._write_member, zf, info, dest)
                            result.files_extracted += 1
                    except ENTRY_ERRORS as e:
                        raise EntryWriteFailed(info.filename, str(e)) from e
                tracker.advance(1)

            outcomes = await asyncio.gather(
                *(write_entry(info, dest) for info, dest in plan),
                return_exceptions=True
            )

        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        return result

    def _write_member(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo, dest: Path) -> None:
        self._copy_stream(zf.open(info), dest)


class TarExtractor(BaseExtractor):
    """
    TAR archive extractor.

    Handles: .tar, .tar.gz, .tgz, .tar.bz2, .tar.xz
    Links and special files are skipped.
    """

    async def extract(
        self,
        archive_path: Path,
        target_dir: Path,
        tracker: ProgressTracker
    ) -> ExtractionResult:
        """
        Extract TAR archive (including compressed variants).

        Raises:
            ExtractError: Archive missing or unreadable
            UnsafeArchiveEntry: Entry escapes target_dir (nothing written)
            EntryWriteFailed: An entry could not be written
        """
        logger.info(f"{LOG_INPUT} Extracting TAR: {archive_path.name}")

        result = ExtractionResult(
            success=False,
            archive_path=archive_path,
            extract_directory=target_dir
        )

        mode = self._detect_tar_mode(archive_path)
        logger.info(f"{LOG_PROCESS} TAR mode: {mode}")

        try:
            tf = await asyncio.to_thread(tarfile.open, archive_path, mode)
            members = await asyncio.to_thread(tf.getmembers)
        except (tarfile.TarError, OSError, EOFError) as e:
            raise ExtractError(f"Invalid TAR file {archive_path.name}: {e}") from e

        with tf:
            plan = [(member, self._map_entry(member.name, target_dir)) for member in members]
            result.entries_total = len(plan)

            await asyncio.to_thread(target_dir.mkdir, parents=True, exist_ok=True)
            tracker.start(len(plan))

            logger.info(f"{LOG_PROCESS} Extracting {len(plan)} items...")

            for member, dest in plan:
                try:
                    if member.isdir():
                        await asyncio.to_thread(dest.mkdir, parents=True, exist_ok=True)
                        result.directories_created += 1
                    elif member.isfile():
                        await asyncio.to_thread(self._write_member, tf, member, dest)
                        result.files_extracted += 1
                    else:
                        logger.warning(f"Skipping non-regular entry: {member.name}")
                except ENTRY_ERRORS as e:
                    raise EntryWriteFailed(member.name, str(e)) from e
                tracker.advance(1)

        return result

    def _write_member(self, tf: tarfile.TarFile, member: tarfile.TarInfo, dest: Path) -> None:
        source = tf.extractfile(member)
        if source is None:
            raise tarfile.ExtractError(f"No data for {member.name}")
        self._copy_stream(source, dest)

    def _detect_tar_mode(self, archive_path: Path) -> str:
        """
        Detect TAR compression mode from file extension.

        Args:
            archive_path: Path to TAR file

        Returns:
            Mode string for tarfile.open()
        """
        name_lower = archive_path.name.lower()

        if name_lower.endswith((ARCHIVE_EXTENSIONS_TAR_GZ, ARCHIVE_EXTENSIONS_TGZ)):
            return TAR_GZ_MODE
        elif name_lower.endswith((ARCHIVE_EXTENSIONS_TAR_BZ2, ARCHIVE_EXTENSIONS_TBZ2)):
            return TAR_BZ2_MODE
        elif name_lower.endswith((ARCHIVE_EXTENSIONS_TAR_XZ, ARCHIVE_EXTENSIONS_TXZ)):
            return TAR_XZ_MODE
        else:
            return TAR_READ_MODE  # Uncompressed TAR


class ArchiveHandler:
    """
    Archive handler factory.

    Detects archive format and delegates to appropriate extractor.

    Example:
        handler = ArchiveHandler()
        result = await handler.extract(
            archive_path=Path('emu.zip'),
            target_dir=Path('emu'),
            label='Extracting 86Box',
            progress=reporter.handle,
        )
        result.raise_for_error()
    """

    # Map file extensions to extractor classes
    EXTRACTOR_MAP = {
        ARCHIVE_EXTENSIONS_ZIP: ZipExtractor,
        ARCHIVE_EXTENSIONS_TAR: TarExtractor,
        ARCHIVE_EXTENSIONS_TAR_GZ: TarExtractor,
        ARCHIVE_EXTENSIONS_TGZ: TarExtractor,
        ARCHIVE_EXTENSIONS_TAR_BZ2: TarExtractor,
        ARCHIVE_EXTENSIONS_TBZ2: TarExtractor,
        ARCHIVE_EXTENSIONS_TAR_XZ: TarExtractor,
        ARCHIVE_EXTENSIONS_TXZ: TarExtractor,
    }

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize archive handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

    async def extract(
        self,
        archive_path: Path,
        target_dir: Path,
        label: Optional[str] = None,
        progress: Optional[ProgressCallback] = None
    ) -> ExtractionResult:
        """
        Extract archive using appropriate extractor.

        Never raises for archive problems: the typed error is carried in
        the result. A failed extraction may leave a partial tree.

        Args:
            archive_path: Path to archive file
            target_dir: Target directory for extraction
            label: Progress label; defaults to the archive name
            progress: Optional progress event callback

        Returns:
            ExtractionResult
        """
        archive_path, target_dir = Path(archive_path), Path(target_dir)
        logger.info(f"{LOG_INPUT} Processing archive: {archive_path.name}")

        start_time = time.time()
        tracker = ProgressTracker(label or archive_path.name, progress)

        try:
            if not archive_path.exists():
                raise ExtractError(f"Archive not found: {archive_path}")

            extractor_class = self._detect_format(archive_path)
            if extractor_class is None:
                raise ExtractError(f"Unsupported archive format: {archive_path.name}")

            logger.info(f"{LOG_PROCESS} Using {extractor_class.__name__}")
            extractor = extractor_class(config=self.config)

            result = await extractor.extract(archive_path, target_dir, tracker)

        except ExtractError as e:
            tracker.fail()
            logger.error(f"{LOG_OUTPUT} {e}")
            return ExtractionResult(
                success=False,
                error=e,
                archive_path=archive_path,
                extract_directory=target_dir,
                duration=time.time() - start_time,
            )

        tracker.finish()
        result.success = True
        result.duration = time.time() - start_time

        logger.info(
            f"{LOG_OUTPUT} Extraction complete: {result.files_extracted} files, "
            f"{result.directories_created} directories in {result.duration:.2f}s"
        )
        return result

    def _detect_format(self, archive_path: Path) -> Optional[Type[BaseExtractor]]:
        """
        Detect archive format from file extension.

        Args:
            archive_path: Path to archive

        Returns:
            Extractor class or None if unsupported
        """
        name_lower = archive_path.name.lower()

        # Try compound extensions first (.tar.gz, .tar.xz, etc.)
        for ext, extractor_class in self.EXTRACTOR_MAP.items():
            if '.' in ext[1:] and name_lower.endswith(ext):
                logger.debug(f"Detected format: {ext}")
                return extractor_class

        suffix_lower = archive_path.suffix.lower()
        extractor_class = self.EXTRACTOR_MAP.get(suffix_lower)

        if extractor_class:
            logger.debug(f"Detected format: {suffix_lower}")
        else:
            logger.warning(f"Unknown format: {suffix_lower}")

        return extractor_class

    def is_supported(self, archive_path: Path) -> bool:
        return self._detect_format(Path(archive_path)) is not None


__all__ = [
    'ArchiveHandler',
    'BaseExtractor',
    'ZipExtractor',
    'TarExtractor',
]
