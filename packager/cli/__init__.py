# Path: packager/cli/__init__.py
"""
Packager CLI Module

Command-line interface: flags, version prompts and progress rendering.
"""

from packager.cli.package_cli import PackageCLI, main
from packager.cli.progress_display import RichProgressReporter

__all__ = ['PackageCLI', 'RichProgressReporter', 'main']
