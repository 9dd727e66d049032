# Path: packager/engine/constants.py
"""
Packager Engine Constants

Centralized constants for release resolution, downloads and relocation.
Archive extraction constants live in packager/engine/extraction/constants.py.
NO HARDCODED VALUES in engine modules - all here.
"""

import errno

# ============================================================================
# RELEASE METADATA API
# ============================================================================

RELEASES_LIST_PATH = '/repos/{owner}/{repo}/releases'
RELEASE_LATEST_PATH = '/repos/{owner}/{repo}/releases/latest'
RELEASE_TAG_PATH = '/repos/{owner}/{repo}/releases/tags/{tag}'

# ROM set is not a release asset: the source archive is derived from the tag
ROMS_ARCHIVE_URL_TEMPLATE = '{web_base}/{owner}/{repo}/archive/refs/tags/{tag}.zip'

# ============================================================================
# HTTP HEADERS
# ============================================================================

HEADER_USER_AGENT = 'User-Agent'
HEADER_ACCEPT = 'Accept'
HEADER_AUTHORIZATION = 'Authorization'
HEADER_LOCATION = 'Location'
HEADER_CONTENT_LENGTH = 'Content-Length'

API_ACCEPT_HEADER = 'application/vnd.github+json'
DOWNLOAD_ACCEPT_HEADER = '*/*'

# ============================================================================
# ASSET SELECTION
# ============================================================================

ARCH_32 = '32'
ARCH_64 = '64'

EMULATOR_ASSET_PATTERNS = {
    ARCH_32: r'^86Box-Windows-32-b\d*\.zip$',
    ARCH_64: r'^86Box-Windows-64-b\d*\.zip$',
}

# platform.machine() values per architecture
MACHINE_ARCH_MAP = {
    'amd64': ARCH_64,
    'x86_64': ARCH_64,
    'x64': ARCH_64,
    'x86': ARCH_32,
    'i386': ARCH_32,
    'i486': ARCH_32,
    'i586': ARCH_32,
    'i686': ARCH_32,
    'ia32': ARCH_32,
}

# ============================================================================
# RELOCATION
# ============================================================================

# Transient "resource in use" errors worth retrying
BUSY_ERRNOS = frozenset(
    getattr(errno, name) for name in ('EBUSY', 'ETXTBSY') if hasattr(errno, name)
)

# Windows: ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
BUSY_WINERRORS = frozenset({32, 33})


__all__ = [
    # Release metadata API
    'RELEASES_LIST_PATH',
    'RELEASE_LATEST_PATH',
    'RELEASE_TAG_PATH',
    'ROMS_ARCHIVE_URL_TEMPLATE',

    # HTTP headers
    'HEADER_USER_AGENT',
    'HEADER_ACCEPT',
    'HEADER_AUTHORIZATION',
    'HEADER_LOCATION',
    'HEADER_CONTENT_LENGTH',
    'API_ACCEPT_HEADER',
    'DOWNLOAD_ACCEPT_HEADER',

    # Asset selection
    'ARCH_32',
    'ARCH_64',
    'EMULATOR_ASSET_PATTERNS',
    'MACHINE_ARCH_MAP',

    # Relocation
    'BUSY_ERRNOS',
    'BUSY_WINERRORS',
]
