"""
Pydantic models for invocations, configuration and parsed inputs
"""

import shlex
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

X264_PRESETS = ['ultrafast', 'superfast', 'veryfast', 'faster', 'fast',
                'medium', 'slow', 'slower', 'veryslow']

CLEAN_SRT_BACKENDS = ['script', 'builtin']

DEFAULT_TOOLS_ROOT = Path('~/clawd-mura/projects')


class Invocation(BaseModel):
    """One external process call: program plus ordered arguments"""
    program: str
    args: List[str] = Field(default_factory=list)

    @field_validator('args', mode='before')
    @classmethod
    def stringify_args(cls, v):
        return [str(a) for a in v]

    @property
    def argv(self) -> List[str]:
        return [self.program] + list(self.args)

    def display(self) -> str:
        """Shell-quoted rendering, for echoing only"""
        return shlex.join(self.argv)


class ToolConfig(BaseModel):
    """Locations of external collaborators and encoding defaults"""
    # config file keys must name a field
    model_config = ConfigDict(extra='forbid')

    tools_root: Path = DEFAULT_TOOLS_ROOT
    yt_poster_dir: Optional[Path] = None
    face_crop_dir: Optional[Path] = None
    thumbnail_dir: Optional[Path] = None

    clean_srt_script: str = 'clean_srt.py'
    burn_subs_script: str = 'burn_subs.py'
    thumbnail_script: str = 'thumbgen.sh'
    clean_srt_backend: str = 'script'

    work_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    ffmpeg: str = 'ffmpeg'
    ffprobe: str = 'ffprobe'
    python: str = 'python3'

    crf: int = Field(default=23, ge=0, le=51)
    preset: str = 'fast'
    audio_bitrate: str = '128k'
    mp3_quality: int = Field(default=2, ge=0, le=9)

    @field_validator('tools_root', 'yt_poster_dir', 'face_crop_dir', 'thumbnail_dir', 'work_dir')
    @classmethod
    def expand_user(cls, v):
        return v.expanduser() if v is not None else v

    @field_validator('preset')
    @classmethod
    def validate_preset(cls, v):
        if v not in X264_PRESETS:
            raise ValueError(f'Preset must be one of: {", ".join(X264_PRESETS)}')
        return v

    @field_validator('clean_srt_backend')
    @classmethod
    def validate_backend(cls, v):
        if v not in CLEAN_SRT_BACKENDS:
            raise ValueError(f'clean_srt_backend must be one of: {", ".join(CLEAN_SRT_BACKENDS)}')
        return v

    @model_validator(mode='after')
    def derive_tool_dirs(self):
        if self.yt_poster_dir is None:
            self.yt_poster_dir = self.tools_root / 'yt-poster'
        if self.face_crop_dir is None:
            self.face_crop_dir = self.tools_root / 'face-crop'
        if self.thumbnail_dir is None:
            self.thumbnail_dir = self.tools_root / 'thumbnail-gen'
        return self

    @property
    def clean_srt_path(self) -> Path:
        return self.yt_poster_dir / self.clean_srt_script

    @property
    def burn_subs_path(self) -> Path:
        return self.yt_poster_dir / self.burn_subs_script

    @property
    def thumbnail_path(self) -> Path:
        return self.thumbnail_dir / self.thumbnail_script


class CutRange(BaseModel):
    """Start/end pair as given on the command line"""
    start: str
    end: str

    @property
    def is_plain_seconds(self) -> bool:
        # str.isdigit() accepts non-ASCII digits, which ffmpeg does not
        return all(t.isascii() and t.isdigit() for t in (self.start, self.end))

    @property
    def duration(self) -> Optional[int]:
        if not self.is_plain_seconds:
            return None
        return int(self.end) - int(self.start)


class BatchEntry(BaseModel):
    """One line of a batch-cut specification file"""
    start: str
    end: str
    name: str
    line_number: int = 0

    @field_validator('start', 'end', 'name')
    @classmethod
    def not_empty(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('field must not be empty')
        return v


class StreamSummary(BaseModel):
    """Condensed ffprobe stream entry"""
    index: int
    codec_type: str = 'unknown'
    codec_name: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    frame_rate: Optional[str] = None
    channels: Optional[int] = None
    sample_rate: Optional[str] = None
    language: Optional[str] = None

    @property
    def resolution(self) -> Optional[str]:
        if self.width and self.height:
            return f'{self.width}x{self.height}'
        return None


class MediaSummary(BaseModel):
    """Condensed ffprobe -show_format -show_streams output"""
    file_name: str
    format_name: Optional[str] = None
    duration: Optional[float] = None
    size_bytes: Optional[int] = None
    bit_rate: Optional[int] = None
    streams: List[StreamSummary] = Field(default_factory=list)

    @classmethod
    def from_probe(cls, data: Dict[str, Any]) -> 'MediaSummary':
        fmt = data.get('format', {})
        streams = []
        for i, s in enumerate(data.get('streams', [])):
            streams.append(StreamSummary(
                index=s.get('index', i),
                codec_type=s.get('codec_type', 'unknown'),
                codec_name=s.get('codec_name'),
                width=s.get('width'),
                height=s.get('height'),
                frame_rate=s.get('avg_frame_rate') if s.get('codec_type') == 'video' else None,
                channels=s.get('channels'),
                sample_rate=s.get('sample_rate'),
                language=s.get('tags', {}).get('language'),
            ))
        return cls(
            file_name=fmt.get('filename', ''),
            format_name=fmt.get('format_long_name') or fmt.get('format_name'),
            duration=_to_float(fmt.get('duration')),
            size_bytes=_to_int(fmt.get('size')),
            bit_rate=_to_int(fmt.get('bit_rate')),
            streams=streams,
        )


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
