# Path: packager/engine/__init__.py
"""
Packager Engine Module

Release acquisition and staging components.
Exports public APIs for the packaging workflow.

Architecture:
- PackageCoordinator: Main orchestrator
- ReleaseResolver: Release metadata lookups
- HTTPHandler: Redirect-following streaming downloads
- ArchiveHandler: ZIP/TAR extraction
- Relocator: Busy-tolerant moves into the staging tree
- InstallerCompiler: External compiler invocation
"""

from packager.engine.coordinator import PackageCoordinator
from packager.engine.release_resolver import ReleaseResolver
from packager.engine.asset_selector import (
    detect_architecture,
    select_emulator_asset,
    select_manager_asset,
    roms_archive_asset,
)
from packager.engine.protocol_handlers import HTTPHandler
from packager.engine.stream_handler import StreamHandler
from packager.engine.extraction import ArchiveHandler
from packager.engine.retry_manager import RetryManager, is_busy_error
from packager.engine.relocator import Relocator
from packager.engine.compiler import InstallerCompiler
from packager.engine.progress import ProgressEvent, ProgressTracker
from packager.engine.result import (
    ResolutionResult,
    DownloadResult,
    ExtractionResult,
    RelocationResult,
    ProcessingResult,
)

__all__ = [
    # Main coordinator
    'PackageCoordinator',

    # Release resolution
    'ReleaseResolver',
    'detect_architecture',
    'select_emulator_asset',
    'select_manager_asset',
    'roms_archive_asset',

    # Download / extraction
    'HTTPHandler',
    'StreamHandler',
    'ArchiveHandler',

    # Staging
    'RetryManager',
    'is_busy_error',
    'Relocator',
    'InstallerCompiler',

    # Progress
    'ProgressEvent',
    'ProgressTracker',

    # Results
    'ResolutionResult',
    'DownloadResult',
    'ExtractionResult',
    'RelocationResult',
    'ProcessingResult',
]
