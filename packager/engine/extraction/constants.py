# Path: packager/engine/extraction/constants.py
"""
Extraction Module Constants

Centralized constants for archive extraction.
NO HARDCODED VALUES in extraction handlers - all configuration here.
"""

# ============================================================================
# ARCHIVE READ MODES
# ============================================================================

ZIP_READ_MODE = 'r'

TAR_READ_MODE = 'r'
TAR_GZ_MODE = 'r:gz'
TAR_BZ2_MODE = 'r:bz2'
TAR_XZ_MODE = 'r:xz'

# ============================================================================
# SUPPORTED EXTENSIONS
# ============================================================================

ARCHIVE_EXTENSIONS_ZIP = '.zip'
ARCHIVE_EXTENSIONS_TAR = '.tar'
ARCHIVE_EXTENSIONS_TAR_GZ = '.tar.gz'
ARCHIVE_EXTENSIONS_TGZ = '.tgz'
ARCHIVE_EXTENSIONS_TAR_BZ2 = '.tar.bz2'
ARCHIVE_EXTENSIONS_TBZ2 = '.tbz2'
ARCHIVE_EXTENSIONS_TAR_XZ = '.tar.xz'
ARCHIVE_EXTENSIONS_TXZ = '.txz'

# ============================================================================
# ENTRY WRITING
# ============================================================================

# Buffer for copying one decompressed entry to disk
EXTRACT_COPY_BUFFER = 1024 * 1024

# Zip entry names always use forward slashes
ZIP_PATH_SEPARATOR = '/'

# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'ZIP_READ_MODE',
    'TAR_READ_MODE',
    'TAR_GZ_MODE',
    'TAR_BZ2_MODE',
    'TAR_XZ_MODE',
    'ARCHIVE_EXTENSIONS_ZIP',
    'ARCHIVE_EXTENSIONS_TAR',
    'ARCHIVE_EXTENSIONS_TAR_GZ',
    'ARCHIVE_EXTENSIONS_TGZ',
    'ARCHIVE_EXTENSIONS_TAR_BZ2',
    'ARCHIVE_EXTENSIONS_TBZ2',
    'ARCHIVE_EXTENSIONS_TAR_XZ',
    'ARCHIVE_EXTENSIONS_TXZ',
    'EXTRACT_COPY_BUFFER',
    'ZIP_PATH_SEPARATOR',
]
