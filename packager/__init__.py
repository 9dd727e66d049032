# Path: packager/__init__.py
"""
86Box Installer Packager

Builds a redistributable 86Box installer from the emulator, manager and
ROM releases, with redirect-following downloads, safe extraction and
busy-tolerant staging.
"""

from .engine.coordinator import PackageCoordinator
from .cli.package_cli import PackageCLI, main

__version__ = '1.0.0'

__all__ = ['PackageCoordinator', 'PackageCLI', 'main']
