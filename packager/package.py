# Path: packager/package.py
"""
86Box Installer Packager - Main Entry Point

Run from the workspace (the directory holding setupFiles/):
    python -m packager.package [--latest] [--clean] [--verbose]

or, once installed:
    86box-packager --latest

Architecture:
- Parse flags, prompt for versions unless --latest
- PackageCoordinator resolves, downloads, extracts and stages
- Inno Setup compiles output/install.iss into 86Box-<version>.exe
"""

import asyncio
import sys

from packager.cli.package_cli import main


def run() -> None:
    """Console-script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n\nPackaging cancelled by user.")
        sys.exit(1)


if __name__ == '__main__':
    run()
