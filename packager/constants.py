# Path: packager/constants.py
"""
Packager Module Constants

Module-wide constants for the installer packaging pipeline.
Engine-specific constants (headers, patterns, errno sets) go in
packager/engine/constants.py.

No hardcoded workspace paths - all paths come from .env via config_loader.
"""

PACKAGER_VERSION: str = '1.0.0'

# ============================================================================
# UPSTREAM PROJECTS
# ============================================================================
UPSTREAM_OWNER: str = '86Box'
EMULATOR_REPO: str = '86Box'
MANAGER_REPO: str = '86BoxManager'
ROMS_REPO: str = 'roms'

EMULATOR_NAME: str = '86Box'
MANAGER_NAME: str = '86Box Manager'
ROMS_NAME: str = '86Box ROMs'

VERSION_LATEST: str = 'latest'
TAG_PREFIX: str = 'v'

# ============================================================================
# HOSTING SERVICE DEFAULTS
# ============================================================================
DEFAULT_API_BASE_URL: str = 'https://api.github.com'
DEFAULT_WEB_BASE_URL: str = 'https://github.com'

# ============================================================================
# HTTP STATUS CODES
# ============================================================================
HTTP_OK: int = 200
HTTP_NOT_FOUND: int = 404
REDIRECT_STATUS_CODES: frozenset = frozenset({301, 302, 303, 307, 308})

# ============================================================================
# DOWNLOAD CONFIGURATION DEFAULTS
# ============================================================================
DEFAULT_CHUNK_SIZE: int = 65536  # 64KB chunks for streaming
DEFAULT_MAX_REDIRECTS: int = 5
DEFAULT_REQUEST_TIMEOUT: int = 0  # 0 = transport default (no total timeout)

# ============================================================================
# EXTRACTION DEFAULTS
# ============================================================================
DEFAULT_EXTRACT_CONCURRENCY: int = 4
MAX_EXTRACTION_DEPTH: int = 25  # Maximum directory nesting depth

# ============================================================================
# RELOCATION DEFAULTS
# ============================================================================
DEFAULT_MOVE_RETRIES: int = 3
DEFAULT_MOVE_RETRY_DELAY: float = 0.5  # Whole-tree move backoff (seconds)
DEFAULT_MERGE_RETRY_DELAY: float = 0.3  # Per-child merge backoff (seconds)

# ============================================================================
# INSTALLER COMPILER
# ============================================================================
DEFAULT_COMPILER_PATH: str = r'C:\Program Files (x86)\Inno Setup 6\ISCC.exe'
INSTALLER_SCRIPT_NAME: str = 'install.iss'
INSTALLER_PREFIX: str = '86Box-'
INSTALLER_EXTENSION: str = '.exe'
INSTALLER_VERSION_MACRO: str = 'MyAppVersion'

# ============================================================================
# WORKSPACE LAYOUT
# ============================================================================
EMULATOR_ARCHIVE: str = 'emu.zip'
ROMS_ARCHIVE: str = 'roms.zip'
MANAGER_ARCHIVE: str = 'manager.zip'

EMULATOR_DIRNAME: str = 'emu'
ROMS_DIRNAME: str = 'roms'
MANAGER_DIRNAME: str = 'manager'
OUTPUT_DIRNAME: str = 'output'
TEMPLATES_DIRNAME: str = 'setupFiles'

# Extracted ROM archives contain a single "<repo>-<version>" folder
ROMS_FOLDER_PREFIX: str = 'roms-'

# Non-essential files removed from extracted trees before staging
MANAGER_CLEANUP_FILES: tuple = ('AUTHORS', 'LICENSE', 'README.md')
ROMS_CLEANUP_FILES: tuple = ('.github', 'LICENSE', 'README.md')

# ============================================================================
# IPO LOGGING PREFIXES
# ============================================================================
LOG_INPUT: str = '[INPUT]'
LOG_PROCESS: str = '[PROCESS]'
LOG_OUTPUT: str = '[OUTPUT]'

# ============================================================================
# LOGGING COMPONENTS
# ============================================================================
LOGGER_ROOT: str = 'packager'
LOGGER_CORE: str = 'packager.core'
LOGGER_ENGINE: str = 'packager.engine'
LOGGER_CLI: str = 'packager.cli'
LOGGER_EXTRACTION: str = 'packager.extraction'

# ============================================================================
# LOG FORMAT
# ============================================================================
LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'
LOG_ACTIVITY_FILE: str = 'packager_activity.log'
LOG_ERROR_FILE: str = 'errors.log'

# ============================================================================
# ENVIRONMENT VARIABLE KEYS (for reference in config_loader.py)
# ============================================================================

# Directory Paths
ENV_WORKSPACE_DIR: str = 'PACKAGER_WORKSPACE_DIR'
ENV_TEMPLATES_DIR: str = 'PACKAGER_TEMPLATES_DIR'
ENV_LOG_DIR: str = 'PACKAGER_LOG_DIR'

# Hosting Service
ENV_API_BASE_URL: str = 'PACKAGER_API_BASE_URL'
ENV_WEB_BASE_URL: str = 'PACKAGER_WEB_BASE_URL'
ENV_GITHUB_TOKEN: str = 'GITHUB_TOKEN'
ENV_USER_AGENT: str = 'PACKAGER_USER_AGENT'

# Download Configuration
ENV_CHUNK_SIZE: str = 'PACKAGER_CHUNK_SIZE'
ENV_MAX_REDIRECTS: str = 'PACKAGER_MAX_REDIRECTS'
ENV_REQUEST_TIMEOUT: str = 'PACKAGER_REQUEST_TIMEOUT'

# Extraction Configuration
ENV_EXTRACT_CONCURRENCY: str = 'PACKAGER_EXTRACT_CONCURRENCY'

# Relocation Configuration
ENV_MOVE_RETRIES: str = 'PACKAGER_MOVE_RETRIES'
ENV_MOVE_RETRY_DELAY: str = 'PACKAGER_MOVE_RETRY_DELAY'
ENV_MERGE_RETRY_DELAY: str = 'PACKAGER_MERGE_RETRY_DELAY'

# Compiler / Platform
ENV_COMPILER_PATH: str = 'PACKAGER_COMPILER_PATH'
ENV_ARCH: str = 'PACKAGER_ARCH'

# Logging Configuration
ENV_LOG_LEVEL: str = 'PACKAGER_LOG_LEVEL'
ENV_LOG_CONSOLE: str = 'PACKAGER_LOG_CONSOLE'

# ============================================================================
# EXPORTS
# ============================================================================
__all__ = [
    'PACKAGER_VERSION',

    # Upstream Projects
    'UPSTREAM_OWNER',
    'EMULATOR_REPO',
    'MANAGER_REPO',
    'ROMS_REPO',
    'EMULATOR_NAME',
    'MANAGER_NAME',
    'ROMS_NAME',
    'VERSION_LATEST',
    'TAG_PREFIX',

    # Hosting Service
    'DEFAULT_API_BASE_URL',
    'DEFAULT_WEB_BASE_URL',

    # HTTP Status Codes
    'HTTP_OK',
    'HTTP_NOT_FOUND',
    'REDIRECT_STATUS_CODES',

    # Download / Extraction / Relocation Defaults
    'DEFAULT_CHUNK_SIZE',
    'DEFAULT_MAX_REDIRECTS',
    'DEFAULT_REQUEST_TIMEOUT',
    'DEFAULT_EXTRACT_CONCURRENCY',
    'MAX_EXTRACTION_DEPTH',
    'DEFAULT_MOVE_RETRIES',
    'DEFAULT_MOVE_RETRY_DELAY',
    'DEFAULT_MERGE_RETRY_DELAY',

    # Installer Compiler
    'DEFAULT_COMPILER_PATH',
    'INSTALLER_SCRIPT_NAME',
    'INSTALLER_PREFIX',
    'INSTALLER_EXTENSION',
    'INSTALLER_VERSION_MACRO',

    # Workspace Layout
    'EMULATOR_ARCHIVE',
    'ROMS_ARCHIVE',
    'MANAGER_ARCHIVE',
    'EMULATOR_DIRNAME',
    'ROMS_DIRNAME',
    'MANAGER_DIRNAME',
    'OUTPUT_DIRNAME',
    'TEMPLATES_DIRNAME',
    'ROMS_FOLDER_PREFIX',
    'MANAGER_CLEANUP_FILES',
    'ROMS_CLEANUP_FILES',

    # Logging
    'LOG_INPUT',
    'LOG_PROCESS',
    'LOG_OUTPUT',
    'LOGGER_ROOT',
    'LOGGER_CORE',
    'LOGGER_ENGINE',
    'LOGGER_CLI',
    'LOGGER_EXTRACTION',
    'LOG_FORMAT',
    'LOG_DATE_FORMAT',
    'LOG_ACTIVITY_FILE',
    'LOG_ERROR_FILE',

    # Environment Variable Keys
    'ENV_WORKSPACE_DIR',
    'ENV_TEMPLATES_DIR',
    'ENV_LOG_DIR',
    'ENV_API_BASE_URL',
    'ENV_WEB_BASE_URL',
    'ENV_GITHUB_TOKEN',
    'ENV_USER_AGENT',
    'ENV_CHUNK_SIZE',
    'ENV_MAX_REDIRECTS',
    'ENV_REQUEST_TIMEOUT',
    'ENV_EXTRACT_CONCURRENCY',
    'ENV_MOVE_RETRIES',
    'ENV_MOVE_RETRY_DELAY',
    'ENV_MERGE_RETRY_DELAY',
    'ENV_COMPILER_PATH',
    'ENV_ARCH',
    'ENV_LOG_LEVEL',
    'ENV_LOG_CONSOLE',
]
