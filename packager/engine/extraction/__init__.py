# Path: packager/engine/extraction/__init__.py
"""
Extraction Module

Multi-format archive extraction for downloaded release artifacts.

Use ArchiveHandler for ZIP/TAR files.
"""

from packager.engine.extraction.archive_handler import (
    ArchiveHandler,
    ZipExtractor,
    TarExtractor,
    BaseExtractor,
)

__all__ = [
    'ArchiveHandler',
    'ZipExtractor',
    'TarExtractor',
    'BaseExtractor',
]
