"""
Command dispatch table

Every verb maps to a minimum argument count, its help text and a handler
that turns the arguments into one external invocation (or a short fixed
sequence of them).
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .batch_spec import read_batch_spec
from .concat_manifest import concat_manifest
from .errors import ExitCode, UnknownCommandError, UsageError
from .external_tools import (
    THUMBNAIL_API_KEY_VAR, build_burn_subs_cmd, build_clean_srt_cmd, build_thumbnail_cmd,
    require_face_crop, thumbnail_api_key_present,
)
from .ffmpeg_builder import (
    build_concat_cmd, build_cut_cmd, build_cut_precise_cmd, build_extract_audio_cmd,
    build_probe_json_cmd, build_probe_raw_cmd, build_resize_cmd,
)
from .ffmpeg_runner import Runner
from .models import MediaSummary, ToolConfig
from .rich_console import RichOutput
from .srt_cleaner import clean_srt_file

PROGRAM = 'vidpro'


@dataclass(frozen=True)
class CommandSpec:
    name: str
    min_args: int
    arg_names: str
    description: str
    handler: Callable
    details: List[str] = field(default_factory=list)
    example: Optional[str] = None

    @property
    def usage(self) -> str:
        return f"{PROGRAM} {self.name} {self.arg_names}".rstrip()


COMMANDS: Dict[str, CommandSpec] = {}
ALIASES = {'--help': 'help', '-h': 'help'}


def command(name, min_args, arg_names, description, details=None, example=None):
    """Register a handler in the dispatch table"""
    def register(handler):
        COMMANDS[name] = CommandSpec(name, min_args, arg_names, description, handler,
                                     list(details or []), example)
        return handler
    return register


class Dispatcher:
    """Validates arguments for a verb and runs its handler"""

    def __init__(self, config: ToolConfig, runner: Optional[Runner] = None,
                 output: Optional[RichOutput] = None, environ: Optional[Mapping[str, str]] = None):
        self.config = config
        self.output = output or RichOutput()
        self.runner = runner or Runner(self.output)
        self.environ = os.environ if environ is None else environ

    def lookup(self, verb: str) -> CommandSpec:
        spec = COMMANDS.get(ALIASES.get(verb, verb))
        if spec is None:
            raise UnknownCommandError(verb)
        return spec

    def dispatch(self, verb: str, args: Sequence[str]) -> int:
        spec = self.lookup(verb)
        args = list(args)
        if len(args) < spec.min_args:
            raise UsageError(
                f"{spec.name} needs at least {spec.min_args} argument(s), got {len(args)}",
                usage=spec.usage,
            )
        result = spec.handler(self, args)
        return ExitCode.SUCCESS if result is None else result

    def print_usage(self):
        self.output.print_usage(COMMANDS.values())


# ═══════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════

@command('cut', 4, '<input> <start> <end> <output>',
         'Cut video segment with stream copy (instant, no re-encode)',
         details=['Times: HH:MM:SS or seconds'],
         example='vidpro cut video.mp4 00:01:30 00:02:00 clip.mp4')
def cmd_cut(ctx: Dispatcher, args):
    inp, start, end, out = args[:4]
    cmd = build_cut_cmd(ctx.config, inp, start, end, out)
    ctx.runner.require(ctx.config.ffmpeg)

    ctx.output.print_step("✂️  Cutting video (stream copy)...",
                          {'Input': inp, 'Start': start, 'End': end, 'Output': out})
    ctx.runner.check(cmd)
    ctx.output.print_success(f"Done: {out}")


@command('cut-precise', 4, '<input> <start> <end> <output>',
         'Cut with re-encode for frame-perfect precision',
         example='vidpro cut-precise video.mp4 90 120 clip.mp4')
def cmd_cut_precise(ctx: Dispatcher, args):
    inp, start, end, out = args[:4]
    cmd = build_cut_precise_cmd(ctx.config, inp, start, end, out)
    ctx.runner.require(ctx.config.ffmpeg)

    ctx.output.print_step("✂️  Cutting video (precise re-encode)...",
                          {'Input': inp, 'Start': start, 'End': end, 'Output': out})
    ctx.output.print_warning("This will take time - re-encoding for precision")
    ctx.runner.check(cmd)
    ctx.output.print_success(f"Done: {out}")


@command('subs', 3, '<video> <srt> <output>',
         'Burn subtitles into video (yellow Georgian style)',
         details=['Runs burn_subs.py from the yt-poster dir; the script is not bundled, supply your own'],
         example='vidpro subs video.mp4 subs.srt output.mp4')
def cmd_subs(ctx: Dispatcher, args):
    video, srt, out = args[:3]
    cmd = build_burn_subs_cmd(ctx.config, video, srt, out)

    ctx.output.print_step("💬 Burning subtitles (yellow Georgian style)...")
    ctx.runner.check(cmd)
    ctx.output.print_success(f"Done: {out}")


@command('clean-srt', 2, '<input.srt> <output.srt>',
         'Remove Georgian filler words from SRT',
         details=['Removes: ააა, ამმ, მჰმ, მმ, მმმ, ეჰმ, ესე იგი'],
         example='vidpro clean-srt raw.srt clean.srt')
def cmd_clean_srt(ctx: Dispatcher, args):
    inp, out = args[:2]

    if ctx.config.clean_srt_backend == 'builtin':
        if not Path(inp).is_file():
            raise UsageError(f"Subtitle file not found: {inp}")
        ctx.output.print_step("🧹 Cleaning Georgian filler words from SRT (built-in)...")
        changed = clean_srt_file(Path(inp), Path(out))
        ctx.output.print_info(f"Lines with filler words: {changed}")
        ctx.output.print_success(f"Done: {out}")
        return

    cmd = build_clean_srt_cmd(ctx.config, inp, out)
    ctx.output.print_step("🧹 Cleaning Georgian filler words from SRT...")
    ctx.runner.check(cmd)
    ctx.output.print_success(f"Done: {out}")


@command('face-crop', 2, '<video> <output>',
         'Auto-crop horizontal video to vertical (9:16) with face tracking',
         example='vidpro face-crop horizontal.mp4 vertical.mp4')
def cmd_face_crop(ctx: Dispatcher, args):
    video, out = args[:2]
    tool_dir = require_face_crop(ctx.config)

    ctx.output.print_step("👤 Face-tracking crop (horizontal → vertical 9:16)...",
                          {'Input': video, 'Output': out})
    ctx.output.print_warning("Face crop is not wired up yet - placeholder only")
    ctx.output.print_info(f"See: {tool_dir}")


@command('thumbnail', 6, '<video> <srt> <selection> <text1> <text2> <output>',
         'Generate YouTube thumbnail',
         example='vidpro thumbnail ep.mp4 ep.srt "L2 R1" "ყველაფერი" "სიზმარია" thumb.jpg')
def cmd_thumbnail(ctx: Dispatcher, args):
    video, srt, selection, text1, text2, out = args[:6]
    cmd = build_thumbnail_cmd(ctx.config, video, srt, selection, text1, text2, out)

    if not thumbnail_api_key_present(ctx.environ):
        ctx.output.print_warning(f"{THUMBNAIL_API_KEY_VAR} is not set - thumbnail rendering will likely fail")
    ctx.output.print_step("🎨 Generating thumbnail...")
    ctx.runner.check(cmd)
    ctx.output.print_success(f"Done: {out}")


@command('batch-cut', 3, '<video> <timestamps_file> <output_dir>',
         'Batch cut multiple segments from timestamps file',
         details=['Format: start,end,name (one per line)'],
         example='vidpro batch-cut video.mp4 cuts.txt ./clips/')
def cmd_batch_cut(ctx: Dispatcher, args):
    video, timestamps, output_dir = args[:3]
    count = batch_cut(ctx, video, Path(timestamps), Path(output_dir))
    ctx.output.print_success(f"Batch cut complete: {count} clips")


def batch_cut(ctx: Dispatcher, video: str, timestamps: Path, out_dir: Path) -> int:
    """Run one cut per spec entry into out_dir/<name>.mp4; returns the count"""
    entries = read_batch_spec(timestamps)
    if not ctx.runner.dry_run:
        out_dir.mkdir(parents=True, exist_ok=True)

    ctx.output.print_step("✂️  Batch cutting video...",
                          {'Input': video, 'Timestamps': timestamps, 'Output dir': out_dir})

    count = 0
    for entry in entries:
        count += 1
        out = str(out_dir / f"{entry.name}.mp4")
        ctx.output.print_info(f"[{count}] {entry.name}")
        ctx.dispatch('cut', [video, entry.start, entry.end, out])
    return count


@command('info', 1, '<video>',
         'Show video metadata (duration, resolution, codec, etc.)')
def cmd_info(ctx: Dispatcher, args):
    video = args[0]
    ctx.runner.require(ctx.config.ffprobe)

    ctx.output.print_step("ℹ️  Video metadata:")
    code, out, err = ctx.runner.run(build_probe_json_cmd(ctx.config, video), capture=True)
    if ctx.runner.dry_run:
        return

    data = None
    if code == 0:
        try:
            data = json.loads(out)
        except ValueError:
            data = None

    if not isinstance(data, dict) or not data:
        ctx.output.print_warning(
            f"Structured metadata unavailable (ffprobe exit code {code}), showing raw ffprobe output"
        )
        ctx.runner.check(build_probe_raw_cmd(ctx.config, video))
        return

    ctx.output.print_json(out)
    ctx.output.print_media_summary(MediaSummary.from_probe(data))


@command('concat', 3, '<file1> <file2> [...] <output>',
         'Concatenate multiple videos (stream copy, must have same codec/res)',
         example='vidpro concat part1.mp4 part2.mp4 part3.mp4 full.mp4')
def cmd_concat(ctx: Dispatcher, args):
    inputs, out = args[:-1], args[-1]
    ctx.runner.require(ctx.config.ffmpeg)

    with concat_manifest(inputs, ctx.config.work_dir) as manifest:
        ctx.output.print_step(f"🔗 Concatenating {len(inputs)} videos...")
        ctx.output.print_text(manifest.read_text(encoding='utf-8').rstrip('\n'))
        ctx.runner.check(build_concat_cmd(ctx.config, manifest, out))

    ctx.output.print_success(f"Done: {out}")


@command('resize', 4, '<video> <width> <height> <output>',
         'Resize video to specific dimensions',
         example='vidpro resize video.mp4 1280 720 resized.mp4')
def cmd_resize(ctx: Dispatcher, args):
    video, width, height, out = args[:4]
    ctx.runner.require(ctx.config.ffmpeg)

    ctx.output.print_step(f"📐 Resizing video to {width}x{height}...")
    ctx.runner.check(build_resize_cmd(ctx.config, video, width, height, out))
    ctx.output.print_success(f"Done: {out}")


@command('extract-audio', 2, '<video> <output.mp3>',
         'Extract audio track as MP3',
         example='vidpro extract-audio video.mp4 audio.mp3')
def cmd_extract_audio(ctx: Dispatcher, args):
    video, out = args[:2]
    ctx.runner.require(ctx.config.ffmpeg)

    ctx.output.print_step("🎵 Extracting audio...")
    ctx.runner.check(build_extract_audio_cmd(ctx.config, video, out))
    ctx.output.print_success(f"Done: {out}")


@command('help', 0, '', 'Show this help')
def cmd_help(ctx: Dispatcher, args):
    ctx.print_usage()
