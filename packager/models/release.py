# Path: packager/models/release.py
"""
Release Models

Data structures for release metadata returned by the hosting service.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AssetRef:
    """
    A single downloadable file.

    Attributes:
        name: Asset file name (e.g., '86Box-Windows-64-b6130.zip')
        download_url: Direct download URL
    """
    name: str
    download_url: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Optional['AssetRef']:
        """Build from an 'assets[]' JSON object; None when fields are missing."""
        name = data.get('name')
        url = data.get('browser_download_url')
        if not name or not url:
            return None
        return cls(name=name, download_url=url)


@dataclass(frozen=True)
class ReleaseDescriptor:
    """
    A tagged release and its downloadable assets.

    Read-only once produced by the release resolver.

    Attributes:
        tag: Release tag (e.g., 'v4.2'), never empty
        assets: Assets in the order the service lists them
    """
    tag: str
    assets: tuple[AssetRef, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.tag:
            raise ValueError("Release tag must not be empty")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> 'ReleaseDescriptor':
        """
        Build from a release JSON object.

        Args:
            data: Release object with 'tag_name' and 'assets'

        Returns:
            ReleaseDescriptor

        Raises:
            ValueError: If the payload has no tag
        """
        if not isinstance(data, dict):
            raise ValueError(f"Release payload is not an object: {type(data).__name__}")

        assets = []
        for item in data.get('assets') or []:
            asset = AssetRef.from_api(item) if isinstance(item, dict) else None
            if asset is not None:
                assets.append(asset)

        return cls(tag=data.get('tag_name') or '', assets=tuple(assets))


__all__ = ['AssetRef', 'ReleaseDescriptor']
