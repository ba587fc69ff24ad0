"""
Temporary manifest files for ffmpeg's concat demuxer
"""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator


def quote_concat_path(path: str) -> str:
    """Quote a path for a ``file`` directive; embedded quotes become '\\''"""
    return "'" + path.replace("'", "'\\''") + "'"


def format_manifest(paths: Iterable[str]) -> str:
    # ffmpeg resolves relative entries against the manifest's directory,
    # so inputs are written as absolute paths
    lines = [f"file {quote_concat_path(str(Path(p).resolve()))}" for p in paths]
    return '\n'.join(lines) + '\n'


@contextmanager
def concat_manifest(paths: Iterable[str], work_dir: Path) -> Iterator[Path]:
    """Write a manifest into work_dir and remove it on exit, even on error"""
    work_dir.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix='vidpro_concat_', suffix='.txt', dir=work_dir)
    manifest = Path(name)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(format_manifest(paths))
        yield manifest
    finally:
        manifest.unlink(missing_ok=True)
