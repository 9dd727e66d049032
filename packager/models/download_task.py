# Path: packager/models/download_task.py
"""
Download Task Model

One network hop of a download. Redirects spawn a new task for the same
destination and label with one less redirect left.
"""

from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True)
class DownloadTask:
    url: str
    destination: Path
    label: str
    redirects_left: int

    def follow(self, location: str) -> 'DownloadTask':
        """Next hop towards an already-resolved absolute URL."""
        return replace(self, url=location, redirects_left=self.redirects_left - 1)


__all__ = ['DownloadTask']
