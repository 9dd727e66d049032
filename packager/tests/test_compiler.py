# Path: packager/tests/test_compiler.py
"""
Unit tests for the installer compiler invocation.

Tests:
- Argument list (output dir, file name, version macro, quiet flag)
- Missing compiler detection
- Exit code and working directory of a real subprocess
"""

import sys
import asyncio
import os
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from packager.engine.compiler import InstallerCompiler
from packager.engine.errors import CompilerNotFound
from packager.tests.fixtures import make_config


def test_build_args_quiet():
    args = InstallerCompiler.build_args('86Box-v4.2', 'v4.2')

    assert args == ['/O.', '/F86Box-v4.2', '/DMyAppVersion=4.2', 'output\\install.iss', '/Qp']


def test_build_args_verbose():
    args = InstallerCompiler.build_args('86Box-4.1', '4.1', verbose=True)

    assert '/Qp' not in args
    assert '/DMyAppVersion=4.1' in args


def test_missing_compiler(tmp_path):
    compiler = InstallerCompiler(make_config(), compiler_path=tmp_path / 'ISCC.exe')

    with pytest.raises(CompilerNotFound) as exc:
        compiler.ensure_available()
    assert exc.value.path == tmp_path / 'ISCC.exe'

    with pytest.raises(CompilerNotFound):
        asyncio.run(compiler.run('86Box-v4.2', 'v4.2', tmp_path))


@pytest.mark.skipif(os.name == 'nt', reason='uses a POSIX shell script as the compiler')
def test_run_returns_exit_code(tmp_path):
    """The compiler runs in the workspace and its exit code is passed through."""
    script = tmp_path / 'iscc'
    script.write_text('#!/bin/sh\npwd > ran_in.txt\necho "$@" > args.txt\nexit 3\n')
    script.chmod(0o755)

    workspace = tmp_path / 'workspace'
    workspace.mkdir()

    compiler = InstallerCompiler(make_config(), compiler_path=script)
    exit_code = asyncio.run(compiler.run('86Box-v4.2', 'v4.2', workspace))

    assert exit_code == 3
    assert Path((workspace / 'ran_in.txt').read_text().strip()).resolve() == workspace.resolve()
    assert '/F86Box-v4.2' in (workspace / 'args.txt').read_text()
