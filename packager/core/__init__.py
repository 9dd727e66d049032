# Path: packager/core/__init__.py
"""
Packager Core Module

Core utilities for the packager including configuration,
logging, and workspace path management.
"""

from .config_loader import ConfigLoader
from .data_paths import WorkspacePaths
from .logger import get_logger, configure_logging

__all__ = [
    'ConfigLoader',
    'WorkspacePaths',
    'get_logger',
    'configure_logging',
]
