#!/usr/bin/env python3
"""
VidPro - Video Processing CLI

One entry point for common video tasks:
- cut / cut-precise / batch-cut / concat / resize / extract-audio via ffmpeg
- info via ffprobe
- subs / clean-srt / thumbnail / face-crop via external helper scripts

Usage:
  vidpro <command> [args...]
  vidpro --dry-run cut episode.mp4 00:05:30 00:06:00 segment.mp4
  vidpro --tools-root ~/projects thumbnail ep.mp4 ep.srt "L2 R1" "a" "b" thumb.jpg
  vidpro help

Requires: ffmpeg, ffprobe in PATH
"""

import argparse
import sys
from pathlib import Path

from vidpro import (
    ConfigError, Dispatcher, ExitCode, ProcessFailedError, RichOutput, Runner,
    UnknownCommandError, UsageError, VidproError, load_config,
)
from vidpro.models import CLEAN_SRT_BACKENDS, X264_PRESETS


def build_parser():
    ap = argparse.ArgumentParser(prog='vidpro', add_help=False,
                                 description='Video Processing CLI - unified tool for common video tasks')
    ap.add_argument('-h', '--help', action='store_true', help='Show help')
    ap.add_argument('--config', type=Path, default=None, help='YAML config file')
    ap.add_argument('--tools-root', type=Path, default=None,
                    help='Directory holding yt-poster/, face-crop/ and thumbnail-gen/')
    ap.add_argument('--work-dir', type=Path, default=None, help='Temp work directory (default: system temp dir)')
    ap.add_argument('--crf', type=int, default=None, help='x264 Constant Rate Factor for re-encoding (0-51)')
    ap.add_argument('--preset', type=str, default=None, choices=X264_PRESETS, help='x264 preset for re-encoding')
    ap.add_argument('--clean-srt-backend', type=str, default=None, choices=CLEAN_SRT_BACKENDS,
                    help='Run clean_srt.py (script) or the built-in cleaner (builtin)')
    ap.add_argument('--dry-run', action='store_true', help='Only show what would be run')
    ap.add_argument('--debug', action='store_true', help='Show every command before running it')
    ap.add_argument('--no-color', action='store_true', help='Disable colored output')
    ap.add_argument('command', nargs='?', default='help', help='Command to run (see "vidpro help")')
    ap.add_argument('args', nargs=argparse.REMAINDER, help='Command arguments')
    return ap


def misplaced_options(parser, command_args):
    """Global options that ended up among the command arguments"""
    known = {s for action in parser._actions for s in action.option_strings}
    return [a for a in command_args if a.split('=', 1)[0] in known]


def parse_arguments(argv=None):
    """Parse global options; command arguments are validated by the dispatcher"""
    parser = build_parser()
    args = parser.parse_args(argv)
    args.misplaced = misplaced_options(parser, args.args)
    if args.help:
        args.command = 'help'
    return args


def create_cli_overrides(args):
    """Map CLI options onto config keys"""
    return {
        'tools_root': args.tools_root,
        'work_dir': args.work_dir,
        'crf': args.crf,
        'preset': args.preset,
        'clean_srt_backend': args.clean_srt_backend,
    }


def main(argv=None):
    args = parse_arguments(argv)
    output = RichOutput.plain() if args.no_color else RichOutput()

    try:
        config = load_config(args.config, create_cli_overrides(args))
    except ConfigError as e:
        output.print_error(str(e))
        return e.exit_code

    for option in args.misplaced:
        output.print_warning(f"{option} after the command is passed to '{args.command}', not to vidpro; "
                             f"put global options before the command")

    runner = Runner(output, dry_run=args.dry_run, debug=args.debug)
    dispatcher = Dispatcher(config, runner, output)

    try:
        return dispatcher.dispatch(args.command, args.args)
    except UnknownCommandError as e:
        output.print_error(str(e))
        output.console.print()
        dispatcher.print_usage()
        return e.exit_code
    except UsageError as e:
        output.print_error(str(e))
        if e.usage:
            output.print_command_usage(e.usage)
        return e.exit_code
    except ProcessFailedError as e:
        output.print_error(str(e), e.details)
        return e.exit_code
    except VidproError as e:
        output.print_error(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        output.print_error("Interrupted")
        return ExitCode.INTERRUPTED


if __name__ == '__main__':
    sys.exit(main())
