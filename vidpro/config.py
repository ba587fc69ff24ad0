"""
Configuration loading with precedence handling

defaults < YAML config file < environment variables < CLI overrides
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from .errors import ConfigError
from .models import ToolConfig

DEFAULT_CONFIG_PATH = Path('~/.config/vidpro/config.yml')

# Environment variable -> config key
ENV_OVERRIDES = {
    'VIDPRO_TOOLS_ROOT': 'tools_root',
    'VIDPRO_WORK_DIR': 'work_dir',
    'VIDPRO_FFMPEG': 'ffmpeg',
    'VIDPRO_FFPROBE': 'ffprobe',
    'VIDPRO_PYTHON': 'python',
}


def resolve_config_path(config_path: Optional[Path], environ: Mapping[str, str]) -> Optional[Path]:
    """Pick the config file to read; an explicitly named file must exist"""
    if config_path is not None:
        if not config_path.expanduser().exists():
            raise ConfigError(f"Config file not found: {config_path}")
        return config_path.expanduser()

    env_path = environ.get('VIDPRO_CONFIG')
    if env_path:
        path = Path(env_path).expanduser()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path} (from VIDPRO_CONFIG)")
        return path

    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.exists() else None


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load configuration values from a YAML file"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config YAML in {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    bad_keys = [k for k in data if not isinstance(k, str)]
    if bad_keys:
        raise ConfigError(f"Config file {path} has non-string keys: {', '.join(map(repr, bad_keys))}")
    return data


def env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    return {key: environ[var] for var, key in ENV_OVERRIDES.items() if environ.get(var)}


def load_config(config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None,
                environ: Optional[Mapping[str, str]] = None) -> ToolConfig:
    """Build the ToolConfig passed to the dispatcher"""
    if environ is None:
        environ = os.environ

    merged: Dict[str, Any] = {}

    path = resolve_config_path(config_path, environ)
    if path is not None:
        merged.update(load_config_file(path))

    merged.update(env_overrides(environ))
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return ToolConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")
