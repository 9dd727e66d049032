# Path: packager/core/logger.py
"""
Packager Module Logger

Centralized logging configuration for the packaging pipeline.

Architecture:
- Component-based logging (core, engine, extraction, cli)
- File output when a log directory is configured
- Console output through rich so log lines and progress bars share a console
- IPO (Input-Process-Output) structured logging
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from packager.core.config_loader import ConfigLoader
from packager.constants import (
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_ACTIVITY_FILE,
    LOG_ERROR_FILE,
    LOGGER_ROOT,
    LOGGER_CORE,
    LOGGER_ENGINE,
    LOGGER_CLI,
    LOGGER_EXTRACTION,
)

# Shared by the log handler and the progress display
console = Console(stderr=True)


class PackagerLogger:
    """
    Centralized logger for the packager module.

    Provides component-specific loggers with unified configuration.

    Example:
        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Downloading 86Box")
        logger.info("[PROCESS] Following redirect 1/5")
        logger.info("[OUTPUT] Download completed: 10MB in 5s")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize packager logger.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self._configured = False

    def configure(self, log_level: Optional[str] = None) -> None:
        """
        Configure logging system for the packager module.

        Args:
            log_level: Overrides the configured level when given
        """
        log_dir = self.config.get('log_dir')
        level_name = (log_level or self.config.get('log_level', 'WARNING')).upper()
        level = getattr(logging, level_name, logging.WARNING)
        console_output = self.config.get('log_console', True)

        logger = logging.getLogger(LOGGER_ROOT)
        logger.setLevel(level)
        logger.propagate = False

        # Clear any existing handlers
        logger.handlers.clear()

        if log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_dir / LOG_ACTIVITY_FILE)
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            logger.addHandler(file_handler)

            # Error-only log file
            error_handler = logging.FileHandler(log_dir / LOG_ERROR_FILE)
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            logger.addHandler(error_handler)

        if console_output:
            console_handler = RichHandler(
                console=console,
                show_path=False,
                rich_tracebacks=True,
                log_time_format='[%X]',
            )
            console_handler.setLevel(level)
            console_handler.setFormatter(logging.Formatter('%(message)s'))
            logger.addHandler(console_handler)

        self._configured = True

    def get_logger(self, name: str, component: str = 'core') -> logging.Logger:
        """
        Get logger for specific component.

        Args:
            name: Module name (typically __name__)
            component: Component type ('core', 'engine', 'extraction', 'cli')

        Returns:
            Logger instance
        """
        if component == 'core':
            logger_name = f"{LOGGER_CORE}.{name}"
        elif component == 'engine':
            logger_name = f"{LOGGER_ENGINE}.{name}"
        elif component == 'cli':
            logger_name = f"{LOGGER_CLI}.{name}"
        elif component == 'extraction':
            logger_name = f"{LOGGER_EXTRACTION}.{name}"
        else:
            logger_name = f"{LOGGER_ROOT}.{name}"

        return logging.getLogger(logger_name)


# Global logger instance
_packager_logger = PackagerLogger()


def get_logger(name: str, component: str = 'core') -> logging.Logger:
    """
    Get logger for packager module component.

    Loggers are plain children of the 'packager' logger, so they can be
    obtained at import time and pick up handlers once configure_logging()
    runs.

    Args:
        name: Module name (typically __name__)
        component: Component type ('core', 'engine', 'extraction', 'cli')

    Returns:
        Logger instance

    Example:
        from packager.core.logger import get_logger

        logger = get_logger(__name__, 'engine')
        logger.info("[OUTPUT] Relocation completed")
    """
    return _packager_logger.get_logger(name, component)


def configure_logging(
    config: Optional[ConfigLoader] = None,
    log_level: Optional[str] = None
) -> None:
    """
    Configure packager logging system.

    Call this once from the entry point.

    Args:
        config: Optional ConfigLoader instance
        log_level: Optional level overriding configuration (e.g. 'INFO')
    """
    global _packager_logger

    if config:
        _packager_logger = PackagerLogger(config)

    _packager_logger.configure(log_level=log_level)


__all__ = ['get_logger', 'configure_logging', 'PackagerLogger', 'console']
