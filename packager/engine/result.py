# Path: packager/engine/result.py
"""
Pipeline Result Objects

Type-safe, structured results for pipeline operations.
Components return these instead of raising, and carry the typed error
so the orchestrator can log the specific cause and abort the run.

Architecture:
- ResolutionResult: Release metadata lookup
- DownloadResult: Single file download
- ExtractionResult: Single archive extraction
- RelocationResult: Move, merge or copy into the staging tree
- ProcessingResult: Complete resolve+download+extract+stage+compile run
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from packager.engine.errors import PackagerError
from packager.models import ReleaseDescriptor


@dataclass
class _OperationResult:
    success: bool
    error: Optional[PackagerError] = None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error else None

    def raise_for_error(self) -> None:
        """Raise the carried error when the operation failed."""
        if not self.success:
            if self.error is not None:
                raise self.error
            raise PackagerError("Operation failed without a reported cause")


@dataclass
class ResolutionResult(_OperationResult):
    """
    Result of a release metadata lookup.

    Attributes:
        success: Whether a usable release was obtained
        identifier: 'owner/repo' that was queried
        release: Release descriptor (None on failure)
        status_code: HTTP status received, if any
        url: Endpoint queried
    """
    identifier: str = ''
    release: Optional[ReleaseDescriptor] = None
    status_code: Optional[int] = None
    url: str = ''

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'identifier': self.identifier,
            'tag': self.release.tag if self.release else None,
            'assets': len(self.release.assets) if self.release else 0,
            'status_code': self.status_code,
            'url': self.url,
            'error_message': self.error_message,
        }


@dataclass
class DownloadResult(_OperationResult):
    """
    Result of a single file download operation.

    Attributes:
        success: Whether download succeeded
        file_path: Destination path (may hold partial content on failure)
        file_size: Bytes written
        url: Requested URL
        final_url: URL the content was finally served from
        requests_made: Number of HTTP requests issued (1 + redirects)
        duration: Download duration in seconds
        status_code: Last HTTP status code
        skipped: True when an existing file was reused
    """
    file_path: Optional[Path] = None
    file_size: int = 0
    url: str = ''
    final_url: str = ''
    requests_made: int = 0
    duration: float = 0.0
    status_code: Optional[int] = None
    skipped: bool = False
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def download_speed_mbps(self) -> float:
        """Calculate download speed in MB/s."""
        if self.duration > 0 and self.file_size > 0:
            mb = self.file_size / (1024 * 1024)
            return mb / self.duration
        return 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'file_path': str(self.file_path) if self.file_path else None,
            'file_size': self.file_size,
            'url': self.url,
            'final_url': self.final_url,
            'requests_made': self.requests_made,
            'duration': self.duration,
            'status_code': self.status_code,
            'skipped': self.skipped,
            'error_message': self.error_message,
            'download_speed_mbps': self.download_speed_mbps,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass
class ExtractionResult(_OperationResult):
    """
    Result of archive extraction operation.

    Attributes:
        success: Whether extraction succeeded
        archive_path: Path to archive file
        extract_directory: Path where entries were written
        entries_total: Entries listed in the archive
        files_extracted: File entries written
        directories_created: Directory entries created
        duration: Extraction duration in seconds
        skipped: True when an existing extracted tree was reused
    """
    archive_path: Optional[Path] = None
    extract_directory: Optional[Path] = None
    entries_total: int = 0
    files_extracted: int = 0
    directories_created: int = 0
    duration: float = 0.0
    skipped: bool = False
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'archive_path': str(self.archive_path) if self.archive_path else None,
            'extract_directory': str(self.extract_directory) if self.extract_directory else None,
            'entries_total': self.entries_total,
            'files_extracted': self.files_extracted,
            'directories_created': self.directories_created,
            'duration': self.duration,
            'skipped': self.skipped,
            'error_message': self.error_message,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass
class RelocationResult(_OperationResult):
    """
    Result of a move, merge or copy into the staging tree.

    Failures are raised as RelocationFailed rather than returned, so a
    RelocationResult always describes completed work.

    Attributes:
        success: Whether relocation succeeded
        source: Source file or directory
        destination: Destination path
        items: Top-level entries relocated (1 for a whole-tree move)
        attempts: Attempts used, summed over all entries
        duration: Duration in seconds
    """
    source: Optional[Path] = None
    destination: Optional[Path] = None
    items: list[str] = field(default_factory=list)
    attempts: int = 0
    duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'source': str(self.source) if self.source else None,
            'destination': str(self.destination) if self.destination else None,
            'items': list(self.items),
            'attempts': self.attempts,
            'duration': self.duration,
            'error_message': self.error_message,
        }


@dataclass
class ProcessingResult(_OperationResult):
    """
    Complete result for one packaging run.

    Attributes:
        success: Whether the whole run (including the compiler) succeeded
        installer_name: Output file name without extension (e.g., '86Box-v4.2')
        installer_version: Version passed to the compiler (e.g., '4.2')
        exit_code: Compiler exit code
        downloads: Per-artifact download results
        extractions: Per-artifact extraction results
        relocations: Staging steps in the order they ran
        error_stage: Stage that failed: resolution, download, extraction,
            cleanup, relocation, compile
        total_duration: Total run duration in seconds
    """
    installer_name: Optional[str] = None
    installer_version: Optional[str] = None
    exit_code: Optional[int] = None
    downloads: dict[str, DownloadResult] = field(default_factory=dict)
    extractions: dict[str, ExtractionResult] = field(default_factory=dict)
    relocations: list[RelocationResult] = field(default_factory=list)
    error_stage: Optional[str] = None
    total_duration: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'installer_name': self.installer_name,
            'installer_version': self.installer_version,
            'exit_code': self.exit_code,
            'downloads': {k: v.to_dict() for k, v in self.downloads.items()},
            'extractions': {k: v.to_dict() for k, v in self.extractions.items()},
            'relocations': [r.to_dict() for r in self.relocations],
            'error_stage': self.error_stage,
            'error_message': self.error_message,
            'total_duration': self.total_duration,
            'timestamp': self.timestamp.isoformat(),
        }


__all__ = [
    'ResolutionResult',
    'DownloadResult',
    'ExtractionResult',
    'RelocationResult',
    'ProcessingResult',
]
