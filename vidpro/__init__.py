"""
VidPro library modules

Command dispatch for common video tasks on top of ffmpeg/ffprobe and a few
external helper scripts.
"""

# Import all public interfaces for easy access
from .errors import (
    ExitCode, VidproError, UsageError, UnknownCommandError, MissingToolError,
    ConfigError, ProcessFailedError,
)
from .models import Invocation, ToolConfig, CutRange, BatchEntry, MediaSummary
from .config import load_config
from .ffmpeg_runner import Runner
from .rich_console import RichOutput, rich_output
from .batch_spec import read_batch_spec
from .concat_manifest import concat_manifest, format_manifest
from .srt_cleaner import clean_srt_text, clean_srt_file
from .commands import COMMANDS, CommandSpec, Dispatcher

__all__ = [
    'ExitCode', 'VidproError', 'UsageError', 'UnknownCommandError', 'MissingToolError',
    'ConfigError', 'ProcessFailedError',
    'Invocation', 'ToolConfig', 'CutRange', 'BatchEntry', 'MediaSummary',
    'load_config',
    'Runner',
    'RichOutput', 'rich_output',
    'read_batch_spec',
    'concat_manifest', 'format_manifest',
    'clean_srt_text', 'clean_srt_file',
    'COMMANDS', 'CommandSpec', 'Dispatcher',
]
