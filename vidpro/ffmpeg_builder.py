"""
FFmpeg/ffprobe command building for the dispatcher verbs
"""

from pathlib import Path
from typing import List

from .errors import UsageError
from .models import CutRange, Invocation, ToolConfig


def time_range_args(cut: CutRange, inp: str) -> List[str]:
    """Seek/duration arguments around the input

    Plain-seconds pairs become -t <end-start>; anything else is handed to
    ffmpeg as -to <end> for its own parsing.
    """
    if cut.is_plain_seconds:
        if cut.duration <= 0:
            raise UsageError(f'End ({cut.end}) must be after start ({cut.start})')
        return ['-ss', cut.start, '-i', inp, '-t', str(cut.duration)]
    return ['-ss', cut.start, '-to', cut.end, '-i', inp]


def x264_args(config: ToolConfig) -> List[str]:
    return ['-c:v', 'libx264', '-preset', config.preset, '-crf', str(config.crf)]


def build_cut_cmd(config: ToolConfig, inp: str, start: str, end: str, out: str) -> Invocation:
    """Stream-copy cut (fast, keyframe-aligned)"""
    args = ['-y'] + time_range_args(CutRange(start=start, end=end), inp)
    return Invocation(program=config.ffmpeg, args=args + ['-c', 'copy', out])


def build_cut_precise_cmd(config: ToolConfig, inp: str, start: str, end: str, out: str) -> Invocation:
    """Re-encoding cut (frame accurate)"""
    args = ['-y'] + time_range_args(CutRange(start=start, end=end), inp)
    args += x264_args(config)
    args += ['-c:a', 'aac', '-b:a', config.audio_bitrate, out]
    return Invocation(program=config.ffmpeg, args=args)


def build_resize_cmd(config: ToolConfig, inp: str, width: str, height: str, out: str) -> Invocation:
    args = ['-y', '-i', inp, '-vf', f'scale={width}:{height}']
    args += x264_args(config)
    args += ['-c:a', 'copy', out]
    return Invocation(program=config.ffmpeg, args=args)


def build_extract_audio_cmd(config: ToolConfig, inp: str, out: str) -> Invocation:
    return Invocation(program=config.ffmpeg, args=[
        '-y', '-i', inp,
        '-vn',
        '-acodec', 'libmp3lame', '-q:a', str(config.mp3_quality),
        out,
    ])


def build_concat_cmd(config: ToolConfig, manifest: Path, out: str) -> Invocation:
    # -safe 0 allows absolute paths in the manifest
    return Invocation(program=config.ffmpeg, args=[
        '-y', '-f', 'concat', '-safe', '0', '-i', str(manifest), '-c', 'copy', out,
    ])


def build_probe_json_cmd(config: ToolConfig, inp: str) -> Invocation:
    return Invocation(program=config.ffprobe, args=[
        '-v', 'quiet', '-print_format', 'json', '-show_format', '-show_streams', inp,
    ])


def build_probe_raw_cmd(config: ToolConfig, inp: str) -> Invocation:
    return Invocation(program=config.ffprobe, args=[inp])
