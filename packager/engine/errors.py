# Path: packager/engine/errors.py
"""
Packager Errors

Every failure the pipeline can report. All are fatal to a run; the CLI
catches PackagerError, prints it and exits non-zero.
"""

from typing import Optional


class PackagerError(Exception):
    """Base class for all pipeline failures."""


class ResolutionFailure(PackagerError):
    """No usable release could be obtained for an artifact."""

    def __init__(self, identifier: str, reason: str, status_code: Optional[int] = None):
        self.identifier = identifier
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Could not get release for {identifier}: {reason}")


class AssetNotFound(PackagerError):
    """A release has no asset matching the required pattern."""

    def __init__(self, tag: str, pattern: str):
        self.tag = tag
        self.pattern = pattern
        super().__init__(f"No asset matching '{pattern}' in release {tag}")


class UnsupportedArchitecture(PackagerError):
    """Host architecture is neither 32-bit nor 64-bit x86."""

    def __init__(self, machine: str):
        self.machine = machine
        super().__init__(f"Unsupported architecture '{machine}', must be 64bit or 32bit")


# ============================================================================
# DOWNLOAD
# ============================================================================

class DownloadError(PackagerError):
    """Base class for download failures."""


class TooManyRedirects(DownloadError):
    def __init__(self, url: str, max_redirects: int):
        self.url = url
        self.max_redirects = max_redirects
        super().__init__(f"Too many redirects (> {max_redirects}) starting at {url}")


class MalformedRedirect(DownloadError):
    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Redirect {status_code} with no location from {url}")


class UnexpectedStatus(DownloadError):
    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed with status code {status_code}: {url}")


class TransferInterrupted(DownloadError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Transfer interrupted for {url}: {reason}")


# ============================================================================
# EXTRACTION
# ============================================================================

class ExtractError(PackagerError):
    """Base class for extraction failures."""


class EntryWriteFailed(ExtractError):
    def __init__(self, entry_name: str, reason: str):
        self.entry_name = entry_name
        self.reason = reason
        super().__init__(f"Failed to extract entry '{entry_name}': {reason}")


class UnsafeArchiveEntry(ExtractError):
    def __init__(self, entry_name: str):
        self.entry_name = entry_name
        super().__init__(f"Archive entry escapes target directory or is too deep: {entry_name}")


# ============================================================================
# RELOCATION / COMPILER
# ============================================================================

class RelocationFailed(PackagerError):
    def __init__(self, src, dest, reason: str, attempts: int = 1):
        self.src = src
        self.dest = dest
        self.reason = reason
        self.attempts = attempts
        super().__init__(
            f"Failed to move {src} -> {dest} after {attempts} attempt(s): {reason}"
        )


class CompilerNotFound(PackagerError):
    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Installer compiler not found at {path}. "
            f"Install Inno Setup or set PACKAGER_COMPILER_PATH."
        )


__all__ = [
    'PackagerError',
    'ResolutionFailure',
    'AssetNotFound',
    'UnsupportedArchitecture',
    'DownloadError',
    'TooManyRedirects',
    'MalformedRedirect',
    'UnexpectedStatus',
    'TransferInterrupted',
    'ExtractError',
    'EntryWriteFailed',
    'UnsafeArchiveEntry',
    'RelocationFailed',
    'CompilerNotFound',
]
