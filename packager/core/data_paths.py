# Path: packager/core/data_paths.py
"""
Packager Workspace Paths

Single source of truth for every path the pipeline reads, writes or deletes.
All intermediate artifacts live directly under the workspace directory,
so reset mode and the pipeline agree on the same list.

Usage:
    from packager.core.data_paths import WorkspacePaths

    paths = WorkspacePaths()
    paths.emulator_archive   # <workspace>/emu.zip
    paths.intermediate_paths()
"""

from pathlib import Path
from typing import Optional

from packager.core.config_loader import ConfigLoader
from packager.core.logger import get_logger
from packager.constants import (
    EMULATOR_ARCHIVE,
    ROMS_ARCHIVE,
    MANAGER_ARCHIVE,
    EMULATOR_DIRNAME,
    ROMS_DIRNAME,
    MANAGER_DIRNAME,
    OUTPUT_DIRNAME,
    TEMPLATES_DIRNAME,
    INSTALLER_PREFIX,
    INSTALLER_EXTENSION,
    ROMS_FOLDER_PREFIX,
    MANAGER_CLEANUP_FILES,
    ROMS_CLEANUP_FILES,
    TAG_PREFIX,
    LOG_PROCESS,
)

logger = get_logger(__name__, 'core')


class WorkspacePaths:
    """
    Workspace filesystem layout.

    Attributes:
        workspace_dir: Root under which all artifacts are created
        templates_dir: Repository-local static files copied into the output
    """

    def __init__(
        self,
        workspace_dir: Optional[Path] = None,
        templates_dir: Optional[Path] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize workspace paths.

        Args:
            workspace_dir: Overrides the configured workspace directory
            templates_dir: Overrides the configured templates directory
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.workspace_dir = Path(workspace_dir) if workspace_dir else self.config.get('workspace_dir')
        if templates_dir:
            self.templates_dir = Path(templates_dir)
        elif workspace_dir:
            self.templates_dir = self.workspace_dir / TEMPLATES_DIRNAME
        else:
            self.templates_dir = self.config.get('templates_dir')

        logger.debug(f"{LOG_PROCESS} Workspace: {self.workspace_dir}")

    # Downloaded archives

    @property
    def emulator_archive(self) -> Path:
        return self.workspace_dir / EMULATOR_ARCHIVE

    @property
    def roms_archive(self) -> Path:
        return self.workspace_dir / ROMS_ARCHIVE

    @property
    def manager_archive(self) -> Path:
        return self.workspace_dir / MANAGER_ARCHIVE

    # Extracted trees

    @property
    def emulator_dir(self) -> Path:
        return self.workspace_dir / EMULATOR_DIRNAME

    @property
    def roms_dir(self) -> Path:
        return self.workspace_dir / ROMS_DIRNAME

    @property
    def manager_dir(self) -> Path:
        return self.workspace_dir / MANAGER_DIRNAME

    # Staging tree

    @property
    def output_dir(self) -> Path:
        return self.workspace_dir / OUTPUT_DIRNAME

    @property
    def output_roms_dir(self) -> Path:
        return self.output_dir / ROMS_DIRNAME

    def roms_folder(self, roms_tag: str) -> Path:
        """
        Folder created by extracting the ROM archive for a tag.

        Tag-derived archives unpack to '<repo>-<tag without leading v>',
        e.g. tag 'v4.2' -> roms/roms-4.2.
        """
        version = roms_tag[len(TAG_PREFIX):] if roms_tag.startswith(TAG_PREFIX) else roms_tag
        return self.roms_dir / f"{ROMS_FOLDER_PREFIX}{version}"

    def cleanup_paths(self, roms_tag: str) -> list[Path]:
        """Non-essential files removed from the extracted trees before staging."""
        roms_folder = self.roms_folder(roms_tag)
        return (
            [self.manager_dir / name for name in MANAGER_CLEANUP_FILES] +
            [roms_folder / name for name in ROMS_CLEANUP_FILES]
        )

    def intermediate_paths(self) -> list[Path]:
        """Every transient artifact a run may leave behind (excluding output)."""
        return [
            self.roms_dir,
            self.manager_dir,
            self.emulator_dir,
            self.roms_archive,
            self.manager_archive,
            self.emulator_archive,
        ]

    def built_installers(self) -> list[Path]:
        """Installer executables produced by earlier runs."""
        if not self.workspace_dir.exists():
            return []
        return sorted(
            path for path in self.workspace_dir.glob(f"{INSTALLER_PREFIX}*{INSTALLER_EXTENSION}")
            if path.is_file()
        )


__all__ = ['WorkspacePaths']
