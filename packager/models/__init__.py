# Path: packager/models/__init__.py
"""
Packager Models

Data structures shared by the resolver, downloader and orchestrator.
"""

from .artifact import ArtifactSpec, VersionSelection, as_tag
from .release import AssetRef, ReleaseDescriptor
from .download_task import DownloadTask

__all__ = [
    'ArtifactSpec',
    'VersionSelection',
    'as_tag',
    'AssetRef',
    'ReleaseDescriptor',
    'DownloadTask',
]
