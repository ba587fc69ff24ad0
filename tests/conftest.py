"""
pytest configuration and fixtures for vidpro tests

External processes are never started by the dispatcher tests: the Runner's
run() is replaced by a mock that records Invocations.
"""

import io
import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

# Add the project root to path for importing
sys.path.insert(0, str(Path(__file__).parent.parent))
from vidpro import Dispatcher, RichOutput, Runner, ToolConfig


@pytest.fixture
def temp_dirs(tmp_path):
    """Create temporary directories for testing outputs"""
    dirs = {
        'temp': tmp_path,
        'output': tmp_path / 'output',
        'work': tmp_path / 'work',
        'tools': tmp_path / 'tools',
    }

    for dir_path in dirs.values():
        dir_path.mkdir(exist_ok=True)

    return dirs


@pytest.fixture
def output():
    """RichOutput writing to in-memory buffers"""
    out = Console(file=io.StringIO(), width=200, no_color=True, highlight=False)
    err = Console(file=io.StringIO(), width=200, no_color=True, highlight=False)
    return RichOutput(out, err)


@pytest.fixture
def config(temp_dirs):
    return ToolConfig(tools_root=temp_dirs['tools'], work_dir=temp_dirs['work'])


@pytest.fixture
def tools(config):
    """Create all external helper scripts/directories under the tools root"""
    config.yt_poster_dir.mkdir(parents=True, exist_ok=True)
    config.face_crop_dir.mkdir(parents=True, exist_ok=True)
    config.thumbnail_dir.mkdir(parents=True, exist_ok=True)
    config.clean_srt_path.write_text('# clean_srt stub\n')
    config.burn_subs_path.write_text('# burn_subs stub\n')
    config.thumbnail_path.write_text('#!/bin/sh\n')
    return config


@pytest.fixture
def runner(output):
    """Runner whose run() records calls and reports success"""
    runner = Runner(output)
    with patch.object(runner, 'run', return_value=(0, '', '')), \
         patch.object(runner, 'require'):
        yield runner


@pytest.fixture
def dispatcher(config, runner, output):
    return Dispatcher(config, runner, output, environ={})


def invocations(runner):
    """All Invocations passed to the mocked runner, in order"""
    return [c.args[0] for c in runner.run.call_args_list]


def stdout_text(output):
    return output.console.file.getvalue()


def stderr_text(output):
    return output.err_console.file.getvalue()


@pytest.fixture
def run_cli(temp_dirs):
    """Fixture to run main.py in a subprocess"""
    def _run_cli(args: list, env: dict = None):
        script_path = Path(__file__).parent.parent / 'main.py'
        cmd = [sys.executable, str(script_path)] + args
        run_env = dict(os.environ)
        run_env.update({
            'HOME': str(temp_dirs['temp']),
            'COLUMNS': '200',
            'PYTHONIOENCODING': 'utf-8',
            'VIDPRO_TOOLS_ROOT': str(temp_dirs['tools']),
            'VIDPRO_WORK_DIR': str(temp_dirs['work']),
        })
        for var in ('VIDPRO_CONFIG', 'FORCE_COLOR', 'TTY_COMPATIBLE', 'FAL_KEY'):
            run_env.pop(var, None)
        run_env.update(env or {})
        return subprocess.run(cmd, capture_output=True, text=True, encoding='utf-8', env=run_env)

    return _run_cli
