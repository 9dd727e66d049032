# Path: packager/core/config_loader.py
"""
Packager Configuration Loader

Centralized configuration management for the packaging pipeline.
Loads environment variables (optionally from a .env file) with type
safety and defaults.

Architecture:
- Singleton pattern for global configuration
- Type-safe access with validation
- Sensible defaults (nothing is required - the tool runs from a bare checkout)
"""

import os
from typing import Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from packager.constants import (
    PACKAGER_VERSION,
    ENV_WORKSPACE_DIR,
    ENV_TEMPLATES_DIR,
    ENV_LOG_DIR,
    ENV_API_BASE_URL,
    ENV_WEB_BASE_URL,
    ENV_GITHUB_TOKEN,
    ENV_USER_AGENT,
    ENV_CHUNK_SIZE,
    ENV_MAX_REDIRECTS,
    ENV_REQUEST_TIMEOUT,
    ENV_EXTRACT_CONCURRENCY,
    ENV_MOVE_RETRIES,
    ENV_MOVE_RETRY_DELAY,
    ENV_MERGE_RETRY_DELAY,
    ENV_COMPILER_PATH,
    ENV_ARCH,
    ENV_LOG_LEVEL,
    ENV_LOG_CONSOLE,
    DEFAULT_API_BASE_URL,
    DEFAULT_WEB_BASE_URL,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_EXTRACT_CONCURRENCY,
    DEFAULT_MOVE_RETRIES,
    DEFAULT_MOVE_RETRY_DELAY,
    DEFAULT_MERGE_RETRY_DELAY,
    DEFAULT_COMPILER_PATH,
    TEMPLATES_DIRNAME,
)


class ConfigLoader:
    """
    Singleton configuration loader.

    Loads configuration from environment variables with validation,
    type conversion, and sensible defaults.

    Example:
        config = ConfigLoader()
        workspace = config.get('workspace_dir')
        chunk_size = config.get('chunk_size')
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern.
        """
        if ConfigLoader._initialized:
            return

        # .env sits next to the packager/ package (project root)
        current_file = Path(__file__).resolve()
        project_root = current_file.parent.parent.parent  # core/ -> packager/ -> root
        env_path = project_root / '.env'

        if env_path.exists():
            load_dotenv(dotenv_path=env_path, interpolate=True)

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load and validate all configuration from environment.

        Returns:
            Dictionary of validated configuration values
        """
        workspace_dir = self._get_path(ENV_WORKSPACE_DIR) or Path.cwd()

        config = {
            # ================================================================
            # DIRECTORY PATHS
            # ================================================================
            'workspace_dir': workspace_dir,
            'templates_dir': self._get_path(ENV_TEMPLATES_DIR) or workspace_dir / TEMPLATES_DIRNAME,
            'log_dir': self._get_path(ENV_LOG_DIR),

            # ================================================================
            # HOSTING SERVICE
            # ================================================================
            'api_base_url': self._get_env(ENV_API_BASE_URL, DEFAULT_API_BASE_URL).rstrip('/'),
            'web_base_url': self._get_env(ENV_WEB_BASE_URL, DEFAULT_WEB_BASE_URL).rstrip('/'),
            'github_token': self._get_env(ENV_GITHUB_TOKEN),
            'user_agent': self._get_env(ENV_USER_AGENT, f'86box-packager/{PACKAGER_VERSION}'),

            # ================================================================
            # DOWNLOAD CONFIGURATION
            # ================================================================
            'chunk_size': self._get_int(ENV_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            'max_redirects': self._get_int(ENV_MAX_REDIRECTS, DEFAULT_MAX_REDIRECTS),
            'request_timeout': self._get_int(ENV_REQUEST_TIMEOUT, DEFAULT_REQUEST_TIMEOUT),

            # ================================================================
            # EXTRACTION CONFIGURATION
            # ================================================================
            'extract_concurrency': self._get_int(ENV_EXTRACT_CONCURRENCY, DEFAULT_EXTRACT_CONCURRENCY),

            # ================================================================
            # RELOCATION CONFIGURATION
            # ================================================================
            'move_retries': self._get_int(ENV_MOVE_RETRIES, DEFAULT_MOVE_RETRIES),
            'move_retry_delay': self._get_float(ENV_MOVE_RETRY_DELAY, DEFAULT_MOVE_RETRY_DELAY),
            'merge_retry_delay': self._get_float(ENV_MERGE_RETRY_DELAY, DEFAULT_MERGE_RETRY_DELAY),

            # ================================================================
            # COMPILER / PLATFORM
            # ================================================================
            'compiler_path': self._get_path(ENV_COMPILER_PATH) or Path(DEFAULT_COMPILER_PATH),
            'arch': self._get_env(ENV_ARCH),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_level': self._get_env(ENV_LOG_LEVEL, 'WARNING'),
            'log_console': self._get_bool(ENV_LOG_CONSOLE, True),
        }

        return config

    # ------------------------------------------------------------------
    # Typed getters: blank or unparsable values fall back to the default
    # ------------------------------------------------------------------

    @staticmethod
    def _raw(key: str) -> Optional[str]:
        value = os.getenv(key)
        if value is None or not value.strip():
            return None
        return value.strip()

    def _get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._raw(key)
        return default if value is None else value

    def _get_bool(self, key: str, default: bool) -> bool:
        value = self._raw(key)
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    def _get_int(self, key: str, default: int) -> int:
        value = self._raw(key)
        try:
            return default if value is None else int(value)
        except ValueError:
            return default

    def _get_float(self, key: str, default: float) -> float:
        value = self._raw(key)
        try:
            return default if value is None else float(value)
        except ValueError:
            return default

    def _get_path(self, key: str) -> Optional[Path]:
        """Path from the environment; ~ is expanded. None when unset."""
        value = self._raw(key)
        return Path(value).expanduser() if value is not None else None

    def reload(self) -> None:
        """Re-read the environment (used after changing variables at runtime)."""
        self._config = self._load_configuration()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to configuration."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config

    def keys(self):
        """Get all configuration keys."""
        return self._config.keys()

    def items(self):
        """Get all configuration key-value pairs."""
        return self._config.items()


__all__ = ['ConfigLoader']
