# Path: packager/engine/compiler.py
"""
Installer Compiler

Thin wrapper around the external installer compiler (Inno Setup ISCC).
Runs from the workspace directory against output/install.iss; the
compiler's own console output goes straight to the terminal.
"""

import asyncio
from pathlib import Path, PureWindowsPath
from typing import Optional

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.engine.errors import CompilerNotFound, PackagerError
from packager.constants import (
    OUTPUT_DIRNAME,
    INSTALLER_SCRIPT_NAME,
    INSTALLER_VERSION_MACRO,
    TAG_PREFIX,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')


class InstallerCompiler:
    """
    Example:
        compiler = InstallerCompiler()
        compiler.ensure_available()
        exit_code = await compiler.run('86Box-v4.2', 'v4.2', workspace_dir)
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        compiler_path: Optional[Path] = None
    ):
        self.config = config if config else ConfigLoader()
        self.compiler_path = Path(compiler_path) if compiler_path else \
            Path(self.config.get('compiler_path'))

    def ensure_available(self) -> None:
        """
        Raises:
            CompilerNotFound: If the compiler executable is missing
        """
        if not self.compiler_path.is_file():
            raise CompilerNotFound(self.compiler_path)

    @staticmethod
    def build_args(installer_name: str, version: str, verbose: bool = False) -> list[str]:
        """
        Compiler command-line arguments.

        Args:
            installer_name: Output file name without extension
            version: Installer version; a leading 'v' is dropped for the macro
            verbose: Keep the compiler's progress output

        Returns:
            Arguments, excluding the executable
        """
        macro_version = version[len(TAG_PREFIX):] if version.startswith(TAG_PREFIX) else version
        args = [
            '/O.',
            f'/F{installer_name}',
            f'/D{INSTALLER_VERSION_MACRO}={macro_version}',
            str(PureWindowsPath(OUTPUT_DIRNAME, INSTALLER_SCRIPT_NAME)),
        ]
        if not verbose:
            args.append('/Qp')
        return args

    async def run(
        self,
        installer_name: str,
        version: str,
        workspace_dir: Path,
        verbose: bool = False
    ) -> int:
        """
        Run the compiler and wait for it.

        Returns:
            The compiler's exit code
        """
        self.ensure_available()

        args = self.build_args(installer_name, version, verbose)
        logger.info(f"{LOG_INPUT} Compiling installer: {installer_name}")
        logger.debug(f"{LOG_PROCESS} {self.compiler_path} {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                str(self.compiler_path),
                *args,
                cwd=str(workspace_dir)
            )
        except FileNotFoundError as e:
            raise CompilerNotFound(self.compiler_path) from e
        except OSError as e:
            raise PackagerError(f"Could not start {self.compiler_path}: {e}") from e

        exit_code = await process.wait()

        if exit_code == 0:
            logger.info(f"{LOG_OUTPUT} Installer compiled: {installer_name}")
        else:
            logger.error(f"{LOG_OUTPUT} Compiler exited with code {exit_code}")

        return exit_code


__all__ = ['InstallerCompiler']
