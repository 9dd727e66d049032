# Path: packager/engine/coordinator.py
"""
Package Coordinator

Main workflow orchestrator for building an installer.
Coordinates: resolve -> download -> extract -> cleanup -> stage -> compile.

Architecture:
- Stages run strictly one after another
- Component results carry typed errors; the first failure aborts the run
  and is reported in ProcessingResult (error, error_stage)
- Downloaded archives and extracted trees are reused across runs
  (see _is_reusable_archive / _is_extracted)
- Reset mode deletes every transient artifact and built installer
- IPO logging throughout
"""

import asyncio
import time
import zipfile
from pathlib import Path
from typing import Optional

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.core.data_paths import WorkspacePaths
from packager.engine.asset_selector import (
    detect_architecture,
    select_emulator_asset,
    select_manager_asset,
    roms_archive_asset,
)
from packager.engine.compiler import InstallerCompiler
from packager.engine.errors import PackagerError
from packager.engine.extraction import ArchiveHandler
from packager.engine.progress import ProgressCallback, ProgressTracker
from packager.engine.protocol_handlers import HTTPHandler
from packager.engine.release_resolver import ReleaseResolver
from packager.engine.relocator import Relocator, remove_path
from packager.engine.result import (
    DownloadResult,
    ExtractionResult,
    ProcessingResult,
)
from packager.models import ArtifactSpec, ReleaseDescriptor, VersionSelection, as_tag
from packager.constants import (
    EMULATOR_NAME,
    MANAGER_NAME,
    ROMS_NAME,
    INSTALLER_PREFIX,
    TAG_PREFIX,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')

STAGE_PREFLIGHT = 'preflight'
STAGE_RESOLUTION = 'resolution'
STAGE_DOWNLOAD = 'download'
STAGE_EXTRACTION = 'extraction'
STAGE_CLEANUP = 'cleanup'
STAGE_RELOCATION = 'relocation'
STAGE_COMPILE = 'compile'

# Staging steps: create output, ROMs, manager, emulator, templates
OUTPUT_STEPS = 5


class PackageCoordinator:
    """
    Coordinates a complete packaging run.

    Workflow:
    1. Verify the installer compiler is installed
    2. Detect architecture
    3. Resolve emulator, ROM and manager releases
    4. Download the three archives (reused when intact)
    5. Extract them (reused when already extracted)
    6. Delete non-essential files
    7. Stage everything into output/
    8. Run the compiler; its exit code is the run's exit code

    Example:
        coordinator = PackageCoordinator(progress=reporter.handle)
        result = await coordinator.run(VersionSelection.all_latest())
        await coordinator.close()
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        paths: Optional[WorkspacePaths] = None,
        resolver: Optional[ReleaseResolver] = None,
        http_handler: Optional[HTTPHandler] = None,
        archive_handler: Optional[ArchiveHandler] = None,
        relocator: Optional[Relocator] = None,
        compiler: Optional[InstallerCompiler] = None,
        progress: Optional[ProgressCallback] = None,
        arch: Optional[str] = None
    ):
        """
        Initialize package coordinator.

        Args:
            config: Optional ConfigLoader instance
            paths: Workspace layout (from config if None)
            resolver, http_handler, archive_handler, relocator, compiler:
                Component overrides; built from config if None
            progress: Progress event callback shared by all stages
            arch: '32' or '64'; detected from the host if None
        """
        self.config = config if config else ConfigLoader()

        self.paths = paths if paths else WorkspacePaths(config=self.config)
        self.resolver = resolver if resolver else ReleaseResolver(self.config)
        self.http_handler = http_handler if http_handler else HTTPHandler(self.config)
        self.archive_handler = archive_handler if archive_handler else ArchiveHandler(self.config)
        self.relocator = relocator if relocator else Relocator(self.config)
        self.compiler = compiler if compiler else InstallerCompiler(self.config)
        self.progress = progress
        self.arch = arch

        self.web_base_url = self.config.get('web_base_url')

    # ------------------------------------------------------------------
    # Reset mode
    # ------------------------------------------------------------------

    def reset(self) -> list[Path]:
        """
        Delete every transient artifact, the output folder and built installers.

        Missing paths are skipped. Makes no network requests.

        Returns:
            Paths that were actually removed
        """
        targets = (
            self.paths.intermediate_paths() +
            [self.paths.output_dir] +
            self.paths.built_installers()
        )
        logger.info(f"{LOG_INPUT} Reset: {len(targets)} candidate paths")

        removed = []
        for path in targets:
            try:
                if remove_path(path):
                    removed.append(path)
                    logger.info(f"{LOG_PROCESS} Deleted: {path.name}")
            except OSError as e:
                raise PackagerError(f"Could not delete {path}: {e}") from e

        logger.info(f"{LOG_OUTPUT} Reset complete: {len(removed)} paths removed")
        return removed

    # ------------------------------------------------------------------
    # Normal run
    # ------------------------------------------------------------------

    async def run(self, versions: VersionSelection, verbose: bool = False) -> ProcessingResult:
        """
        Build the installer for the chosen versions.

        Args:
            versions: Emulator, manager and ROM versions
            verbose: Keep the compiler's own progress output

        Returns:
            ProcessingResult; on failure error and error_stage say why
        """
        logger.info(
            f"{LOG_INPUT} Packaging: emulator={versions.emulator}, "
            f"manager={versions.manager}, roms={versions.roms}"
        )

        result = ProcessingResult(success=False)
        start_time = time.time()
        stage = STAGE_PREFLIGHT

        try:
            self.compiler.ensure_available()
            arch = detect_architecture(self.arch, config=self.config)
            logger.info(f"{LOG_PROCESS} Using {arch}-bit for downloads")

            stage = STAGE_RESOLUTION
            emulator_release = await self._resolve(versions.emulator_spec())
            roms_release = await self._resolve(versions.roms_spec())
            manager_release = await self._resolve(versions.manager_spec())

            emulator_asset = select_emulator_asset(emulator_release, arch)
            manager_asset = select_manager_asset(manager_release)
            roms_asset = roms_archive_asset(roms_release.tag, self.web_base_url)

            stage = STAGE_DOWNLOAD
            await self._download(
                result, 'emulator', EMULATOR_NAME,
                emulator_asset.download_url, self.paths.emulator_archive
            )
            await self._download(
                result, 'roms', ROMS_NAME,
                roms_asset.download_url, self.paths.roms_archive
            )
            await self._download(
                result, 'manager', MANAGER_NAME,
                manager_asset.download_url, self.paths.manager_archive
            )

            stage = STAGE_EXTRACTION
            await self._extract(
                result, 'emulator', EMULATOR_NAME,
                self.paths.emulator_archive, self.paths.emulator_dir
            )
            await self._extract(
                result, 'roms', ROMS_NAME,
                self.paths.roms_archive, self.paths.roms_dir
            )
            await self._extract(
                result, 'manager', MANAGER_NAME,
                self.paths.manager_archive, self.paths.manager_dir
            )

            stage = STAGE_CLEANUP
            await self._cleanup(roms_release.tag)

            stage = STAGE_RELOCATION
            await self._stage_output(result, roms_release.tag)

            stage = STAGE_COMPILE
            installer_version = self.installer_version(versions, emulator_release)
            result.installer_name = f"{INSTALLER_PREFIX}{installer_version}"
            result.installer_version = installer_version[len(TAG_PREFIX):] \
                if installer_version.startswith(TAG_PREFIX) else installer_version

            result.exit_code = await self.compiler.run(
                result.installer_name,
                installer_version,
                self.paths.workspace_dir,
                verbose=verbose
            )
            result.success = result.exit_code == 0

        except PackagerError as e:
            result.error = e
            result.error_stage = stage
            logger.error(f"{LOG_OUTPUT} Packaging failed during {stage}: {e}")

        finally:
            result.total_duration = time.time() - start_time

        if result.success:
            logger.info(
                f"{LOG_OUTPUT} Installer {result.installer_name} built "
                f"in {result.total_duration:.1f}s"
            )

        return result

    @staticmethod
    def installer_version(versions: VersionSelection, emulator_release: ReleaseDescriptor) -> str:
        """Emulator release tag for 'latest', otherwise the chosen version as a tag."""
        if versions.emulator_spec().is_latest:
            return emulator_release.tag
        return as_tag(versions.emulator)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _resolve(self, spec: ArtifactSpec) -> ReleaseDescriptor:
        resolution = await self.resolver.resolve(spec)
        resolution.raise_for_error()
        return resolution.release

    async def _download(
        self,
        result: ProcessingResult,
        key: str,
        name: str,
        url: str,
        destination: Path
    ) -> None:
        if await asyncio.to_thread(self._is_reusable_archive, destination):
            logger.info(f"{LOG_PROCESS} Not downloading {name}, it already exists")
            download = DownloadResult(
                success=True,
                url=url,
                file_path=destination,
                file_size=destination.stat().st_size,
                skipped=True,
            )
        else:
            if destination.exists():
                logger.warning(f"{LOG_PROCESS} {destination.name} is incomplete, downloading again")
                await asyncio.to_thread(remove_path, destination)

            download = await self.http_handler.download(
                url,
                destination,
                label=f"Downloading {name}",
                progress=self.progress
            )

        result.downloads[key] = download
        download.raise_for_error()

    async def _extract(
        self,
        result: ProcessingResult,
        key: str,
        name: str,
        archive_path: Path,
        target_dir: Path
    ) -> None:
        if await asyncio.to_thread(self._is_extracted, target_dir):
            logger.info(f"{LOG_PROCESS} Not extracting {name}, it already exists")
            extraction = ExtractionResult(
                success=True,
                archive_path=archive_path,
                extract_directory=target_dir,
                skipped=True,
            )
        else:
            extraction = await self.archive_handler.extract(
                archive_path,
                target_dir,
                label=f"Extracting {name}",
                progress=self.progress
            )

        result.extractions[key] = extraction
        extraction.raise_for_error()

    async def _cleanup(self, roms_tag: str) -> None:
        targets = self.paths.cleanup_paths(roms_tag)
        tracker = ProgressTracker('Cleanup', self.progress)
        tracker.start(len(targets))

        for path in targets:
            try:
                await asyncio.to_thread(remove_path, path)
            except OSError as e:
                tracker.fail()
                raise PackagerError(f"Could not delete {path}: {e}") from e
            tracker.advance()

        tracker.finish()
        logger.info(f"{LOG_PROCESS} Cleanup complete")

    async def _stage_output(self, result: ProcessingResult, roms_tag: str) -> None:
        """Assemble output/ from the extracted trees and the templates."""
        paths = self.paths
        tracker = ProgressTracker('Generating output folder', self.progress)
        tracker.start(OUTPUT_STEPS)

        try:
            if await asyncio.to_thread(remove_path, paths.output_dir):
                logger.info(f"{LOG_PROCESS} Removed stale {paths.output_dir.name}/")
            await asyncio.to_thread(paths.output_dir.mkdir, parents=True)
            tracker.advance()

            result.relocations.append(
                await self.relocator.move_tree(paths.roms_folder(roms_tag), paths.output_roms_dir)
            )
            await asyncio.to_thread(remove_path, paths.roms_dir)
            tracker.advance()

            result.relocations.append(
                await self.relocator.merge_children(paths.manager_dir, paths.output_dir)
            )
            tracker.advance()

            result.relocations.append(
                await self.relocator.merge_children(paths.emulator_dir, paths.output_dir)
            )
            tracker.advance()

            result.relocations.append(
                await self.relocator.copy_children(paths.templates_dir, paths.output_dir)
            )
            tracker.advance()

        except OSError as e:
            tracker.fail()
            raise PackagerError(f"Could not prepare {paths.output_dir}: {e}") from e
        except PackagerError:
            tracker.fail()
            raise

        tracker.finish()
        logger.info(f"{LOG_PROCESS} Output folder ready: {paths.output_dir}")

    @staticmethod
    def _is_reusable_archive(path: Path) -> bool:
        """An archive left by an interrupted download has no central directory."""
        return path.is_file() and zipfile.is_zipfile(path)

    @staticmethod
    def _is_extracted(path: Path) -> bool:
        return path.is_dir() and any(path.iterdir())

    async def close(self):
        """Close coordinator and cleanup resources."""
        logger.info("Closing package coordinator")
        await self.resolver.close()
        await self.http_handler.close()


__all__ = ['PackageCoordinator']
