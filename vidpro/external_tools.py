"""
Invocations for the external helper scripts

The scripts themselves live outside this package (see ToolConfig); they are
checked for existence before anything is run.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from .errors import MissingToolError
from .models import Invocation, ToolConfig

THUMBNAIL_API_KEY_VAR = 'FAL_KEY'


def require_file(path: Path, description: str) -> Path:
    if not path.is_file():
        raise MissingToolError(f"{description} not found: {path}")
    return path


def require_dir(path: Path, description: str) -> Path:
    if not path.is_dir():
        raise MissingToolError(f"{description} not found: {path}")
    return path


def build_clean_srt_cmd(config: ToolConfig, inp: str, out: str) -> Invocation:
    script = require_file(config.clean_srt_path, "SRT cleaner")
    return Invocation(program=config.python, args=[script, inp, out])


def build_burn_subs_cmd(config: ToolConfig, video: str, srt: str, out: str) -> Invocation:
    script = require_file(config.burn_subs_path, "Subtitle burner")
    return Invocation(program=config.python, args=[script, video, srt, out])


def build_thumbnail_cmd(config: ToolConfig, video: str, srt: str, selection: str,
                        text1: str, text2: str, out: str) -> Invocation:
    script = require_file(config.thumbnail_path, "Thumbnail generator")
    return Invocation(program=str(script), args=['full', video, srt, selection, text1, text2, out])


def require_face_crop(config: ToolConfig) -> Path:
    return require_dir(config.face_crop_dir, "Face crop tool")


def thumbnail_api_key_present(environ: Optional[Mapping[str, str]] = None) -> bool:
    if environ is None:
        environ = os.environ
    return bool(environ.get(THUMBNAIL_API_KEY_VAR))
