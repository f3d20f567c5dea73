from __future__ import annotations

"""
Optional YAML configuration for the command line.

    # extmerge.yml
    root: src
    output: build/all-sources.txt
    extensions: [py, md]
    recurse: true
    confirm: false

The file is only read, never written. Command line values take precedence.
"""

import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import ConfigurationError
from .extensions import validate_extensions

logger = logging.getLogger(__name__)

CONFIG_ENV = "EXTMERGE_CONFIG"


class MergeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    root: Optional[str] = None
    output: Optional[str] = None
    extensions: Optional[List[str]] = None
    recurse: Optional[bool] = None
    confirm: Optional[bool] = None

    @field_validator("extensions", mode="before")
    @classmethod
    def _check_extensions(cls, v: Any) -> Optional[List[str]]:
        if v is None:
            return None
        return validate_extensions(v)


def config_path_from_env() -> Optional[Path]:
    raw = os.environ.get(CONFIG_ENV, "").strip()
    return Path(raw).expanduser() if raw else None


def load_config(path: Union[str, os.PathLike, None]) -> MergeConfig:
    """Load and validate a config file. `None` yields an empty config."""
    if path is None:
        return MergeConfig()

    p = Path(path).expanduser()
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {p}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {p}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {p} must contain a mapping, got {type(data).__name__}")

    try:
        cfg = MergeConfig.model_validate(data)
    except ValidationError as e:
        msgs = "; ".join(
            f"{'.'.join(str(x) for x in err.get('loc', ()))}: {err.get('msg')}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid config file {p}: {msgs}") from e

    logger.debug(f"Loaded config from {p}: {cfg.model_dump(exclude_none=True)}")
    return cfg
