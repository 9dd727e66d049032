# Path: packager/tests/test_cli.py
"""
Unit tests for the command-line interface.

Tests:
- Flag parsing and Y/n answers
- --clean and --latest modes
- Interactive version prompts with confirmation loop
- Exit codes for pipeline errors and compiler failures
- Rich progress reporter task lifecycle
"""

import sys
import asyncio
from io import StringIO
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from rich.console import Console

from packager.cli.package_cli import PackageCLI, parse_args, is_yes
from packager.cli.progress_display import RichProgressReporter
from packager.engine.errors import PackagerError, ResolutionFailure
from packager.engine.progress import ProgressEvent, KIND_START, KIND_ADVANCE, KIND_FINISH, KIND_FAIL
from packager.engine.result import ProcessingResult
from packager.models import VersionSelection
from packager.tests.fixtures import make_config


class FakeCoordinator:
    """Records calls; returns a canned ProcessingResult."""

    def __init__(self, result=None, reset_error=None):
        self.result = result or ProcessingResult(
            success=True,
            installer_name='86Box-v4.2',
            installer_version='4.2',
            exit_code=0,
        )
        self.reset_error = reset_error
        self.runs = []
        self.resets = 0
        self.closed = False
        self.progress = None

    def reset(self):
        self.resets += 1
        if self.reset_error:
            raise self.reset_error
        return [Path('emu.zip')]

    async def run(self, versions, verbose=False):
        self.runs.append((versions, verbose))
        return self.result

    async def close(self):
        self.closed = True


class ScriptedAnswers:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0)


def _run_cli(argv, coordinator, answers=None):
    output = StringIO()
    cli = PackageCLI(
        parse_args(argv),
        config=make_config(),
        coordinator=coordinator,
        console=Console(file=output, width=200),
        ask=answers or ScriptedAnswers(),
    )
    exit_code = asyncio.run(cli.run())
    return exit_code, output.getvalue()


def test_parse_args():
    args = parse_args([])
    assert not args.latest and not args.clean and not args.verbose

    args = parse_args(['-l', '-v'])
    assert args.latest and args.verbose

    assert parse_args(['--clean']).clean


def test_is_yes():
    assert is_yes('')
    assert is_yes('y')
    assert is_yes('Yes')
    assert is_yes('whatever')
    assert not is_yes('n')
    assert not is_yes(' NO ')


def test_clean_mode():
    coordinator = FakeCoordinator()
    exit_code, output = _run_cli(['--clean'], coordinator)

    assert exit_code == 0
    assert coordinator.resets == 1
    assert coordinator.runs == []
    assert coordinator.closed
    assert 'Files cleaned.' in output


def test_latest_mode():
    coordinator = FakeCoordinator()
    answers = ScriptedAnswers()
    exit_code, output = _run_cli(['--latest', '--verbose'], coordinator, answers)

    assert exit_code == 0
    assert answers.prompts == []
    assert coordinator.runs == [(VersionSelection.all_latest(), True)]
    assert 'Done!' in output
    assert '86Box-v4.2.exe' in output


def test_prompt_loop_until_confirmed():
    """A rejected choice asks again; a blank confirmation means yes."""
    coordinator = FakeCoordinator()
    answers = ScriptedAnswers(
        '4.1', '', '', 'n',
        '4.2', 'v2.7.1', '4.1', '',
    )

    exit_code, output = _run_cli([], coordinator, answers)

    assert exit_code == 0
    assert len(answers.prompts) == 8
    assert coordinator.runs == [
        (VersionSelection(emulator='4.2', manager='v2.7.1', roms='4.1'), False)
    ]
    assert output.count('You chose:') == 2


def test_pipeline_error_exit_code():
    coordinator = FakeCoordinator(ProcessingResult(
        success=False,
        error=ResolutionFailure('86Box/86Box@v9.9', 'release not found', status_code=404),
        error_stage='resolution',
    ))

    exit_code, output = _run_cli(['--latest'], coordinator)

    assert exit_code == 1
    assert 'release not found' in output
    assert coordinator.closed


def test_compiler_exit_code_passed_through():
    coordinator = FakeCoordinator(ProcessingResult(success=False, exit_code=2))

    exit_code, output = _run_cli(['--latest'], coordinator)

    assert exit_code == 2
    assert 'exited with code 2' in output


def test_clean_error():
    coordinator = FakeCoordinator(reset_error=PackagerError('Could not delete output: busy'))

    exit_code, output = _run_cli(['--clean'], coordinator)

    assert exit_code == 1
    assert 'Could not delete output' in output
    assert coordinator.closed


def test_progress_reporter_tasks():
    """One rich task per label; removed on finish and on failure."""
    output = StringIO()
    reporter = RichProgressReporter(console=Console(file=output, width=120))

    with reporter:
        reporter.handle(ProgressEvent('Downloading 86Box', KIND_START, total=100))
        reporter.handle(ProgressEvent('Downloading 86Box', KIND_ADVANCE, completed=40, total=100, advance=40))
        task = reporter.progress.tasks[0]
        assert task.completed == 40
        assert task.total == 100

        reporter.handle(ProgressEvent('Extracting 86Box', KIND_START))
        assert len(reporter.progress.tasks) == 2
        assert reporter.progress.tasks[1].total is None

        reporter.handle(ProgressEvent('Downloading 86Box', KIND_FINISH))
        reporter.handle(ProgressEvent('Extracting 86Box', KIND_FAIL))
        assert reporter.progress.tasks == []

    assert 'Extracting 86Box failed' in output.getvalue()
