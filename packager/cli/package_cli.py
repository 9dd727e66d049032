# Path: packager/cli/package_cli.py
"""
Package CLI Interface

Interactive command-line interface for building the 86Box installer.

Architecture:
- --clean: delete files from a previous (or interrupted) run and exit
- --latest: use the latest release of everything, no prompts
- otherwise: ask for each version, show the choice, confirm (Y/n)
- PackageCoordinator does the work; progress rendered with rich
- Exit code: 0 on success, 1 on a pipeline error, else the compiler's code

Usage:
    python -m packager.package [--latest] [--clean] [--verbose]
"""

import argparse
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from packager.core.logger import get_logger, configure_logging
from packager.core.config_loader import ConfigLoader
from packager.cli.progress_display import RichProgressReporter
from packager.engine.coordinator import PackageCoordinator
from packager.engine.errors import PackagerError
from packager.models import VersionSelection
from packager.constants import (
    PACKAGER_VERSION,
    INSTALLER_EXTENSION,
    EMULATOR_NAME,
    MANAGER_NAME,
    ROMS_NAME,
    VERSION_LATEST,
    LOG_INPUT,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='86box-packager',
        description="Build an 86Box installer from the latest (or chosen) "
                    "86Box, 86Box Manager and ROM releases.",
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'86Box Installer Creator {PACKAGER_VERSION}'
    )
    parser.add_argument(
        '-l', '--latest',
        action='store_true',
        help='Use latest versions'
    )
    parser.add_argument(
        '-c', '--clean',
        action='store_true',
        help='Instead of normal operation, delete files from a run. '
             'Will also delete files from the middle of a run (in case of an error).'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose mode - have the installer compiler output more info'
    )
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def is_yes(answer: str) -> bool:
    """Anything but an explicit no counts as yes (default Y)."""
    return answer.strip().lower() not in ('n', 'no')


class PackageCLI:
    """
    Interactive CLI for building the installer.

    Example:
        cli = PackageCLI(parse_args())
        exit_code = await cli.run()
    """

    def __init__(
        self,
        args: argparse.Namespace,
        config: Optional[ConfigLoader] = None,
        coordinator: Optional[PackageCoordinator] = None,
        console: Optional[Console] = None,
        ask: Optional[Callable[[str], str]] = None
    ):
        """
        Initialize package CLI.

        Args:
            args: Parsed command-line flags
            config: Optional ConfigLoader instance
            coordinator: Coordinator override (built from config if None)
            console: Output console
            ask: Reads one answer for a prompt (console.input if None)
        """
        self.args = args
        self.config = config if config else ConfigLoader()
        self.coordinator = coordinator if coordinator else PackageCoordinator(self.config)
        self.console = console if console else Console()
        self.ask = ask if ask else self.console.input

    async def run(self) -> int:
        """
        Run the CLI session.

        Returns:
            Process exit code
        """
        self._intro()

        try:
            if self.args.clean:
                return self._clean()

            versions = self._choose_versions()
            self.console.print("\n[green]Creating...[/green]\n")
            return await self._build(versions)

        except PackagerError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
            logger.error(f"{LOG_OUTPUT} {e}")
            return 1

        except Exception as e:
            self.console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
            logger.error(f"CLI error: {e}", exc_info=True)
            return 1

        finally:
            await self.coordinator.close()

    def _intro(self) -> None:
        self.console.print("[green bold]86Box Installer Creator[/green bold]")
        self.console.print("Created by [blue]ilikecoding-197[/blue] on GitHub.")
        self.console.print("[green]Hope you enjoy![/green]")

    def _clean(self) -> int:
        removed = self.coordinator.reset()
        logger.info(f"{LOG_OUTPUT} Removed {len(removed)} paths")
        self.console.print("[green]Files cleaned.[/green]")
        return 0

    def _choose_versions(self) -> VersionSelection:
        if self.args.latest:
            self.console.print(
                f"\nUsing [blue]{VERSION_LATEST}[/blue] for all versions, from command line."
            )
            return VersionSelection.all_latest()

        while True:
            versions = self._prompt_versions()

            self.console.print("\nYou chose: ")
            self.console.print(f"[green]{EMULATOR_NAME}[/green]: [blue]{versions.emulator}[/blue]")
            self.console.print(f"[green]{MANAGER_NAME}[/green]: [blue]{versions.manager}[/blue]")
            self.console.print(f"[green]{ROMS_NAME}[/green]: [blue]{versions.roms}[/blue]")

            if is_yes(self.ask("[blue]Is that correct?[/blue] (Y/n): ")):
                logger.info(f"{LOG_INPUT} Versions confirmed: {versions}")
                return versions

    def _prompt_versions(self) -> VersionSelection:
        self.console.print("\nVersions:")
        emulator = self.ask(f"[blue]Version of {EMULATOR_NAME}[/blue] \\[{VERSION_LATEST}]: ")
        manager = self.ask(f"[blue]Version of {MANAGER_NAME}[/blue] \\[{VERSION_LATEST}]: ")
        roms = self.ask(
            f"[blue]Version of {ROMS_NAME}[/blue] "
            f"\\[enter nothing for same version as {EMULATOR_NAME}]: "
        )
        return VersionSelection.from_answers(emulator, manager, roms)

    async def _build(self, versions: VersionSelection) -> int:
        with RichProgressReporter() as reporter:
            self.coordinator.progress = reporter.handle
            result = await self.coordinator.run(versions, verbose=self.args.verbose)

        if result.error is not None:
            self.console.print(f"[red]{escape(str(result.error))}[/red]")
            return 1

        if result.exit_code != 0:
            self.console.print(
                f"[red]Installer compiler exited with code {result.exit_code}.[/red]"
            )
            return result.exit_code

        self.console.print(
            f"[green]Done! You can find the output executable in the current directory, "
            f"{result.installer_name}{INSTALLER_EXTENSION}.[/green]"
        )
        return 0


async def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the packager CLI.

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    configure_logging()

    cli = PackageCLI(args)
    return await cli.run()


__all__ = ['PackageCLI', 'build_parser', 'parse_args', 'is_yes', 'main']
