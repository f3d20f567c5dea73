from __future__ import annotations
# -*- coding: utf-8 -*-

"""
fs_scan.py – discovery phase.

Builds the sorted, de-duplicated list of absolute file paths for either input
mode. Nothing here reads file contents.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .errors import ConfigurationError, EnumerationError
from .extensions import describe, matches
from .models import ByPath, ByReferences

logger = logging.getLogger(__name__)


def human_size(n: float) -> str:
    size = float(n)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0 or unit == "GB":
            return "{0:.2f} {1}".format(size, unit)
        size /= 1024.0
    return "{0:.2f} GB".format(size)


def resolve_root(root: Union[str, os.PathLike]) -> Path:
    """Absolute, existing directory or ConfigurationError."""
    try:
        resolved = Path(root).expanduser().resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as e:
        raise ConfigurationError(f"Root path cannot be resolved: {root} ({e})") from e
    if not resolved.is_dir():
        raise ConfigurationError(f"Root path is not a directory: {resolved}")
    return resolved


def _log_walk_error(err: OSError) -> None:
    logger.warning(f"Skipping unreadable directory {err.filename}: {err}")


def iter_extension(root: Path, extension: str, recurse: bool = False) -> Iterator[str]:
    """
    Yield absolute paths of regular files under root whose suffix equals
    `.<extension>` (case-insensitive). Errors listing root itself propagate;
    unreadable subdirectories of a recursive walk are logged and skipped.
    """
    suffix = "." + extension.lower()
    if not recurse:
        with os.scandir(root) as it:
            for entry in it:
                if entry.is_file() and os.path.splitext(entry.name)[1].lower() == suffix:
                    yield os.path.join(str(root), entry.name)
        return

    for dirpath, _dirnames, filenames in os.walk(str(root), onerror=_log_walk_error):
        for fn in filenames:
            if os.path.splitext(fn)[1].lower() != suffix:
                continue
            p = os.path.join(dirpath, fn)
            if os.path.isfile(p):
                yield p


def collect_from_references(source: ByReferences) -> List[str]:
    files: List[str] = []
    for ref in source.files:
        if matches(ref.extension, source.extensions):
            files.append(ref.full_path)
        else:
            logger.debug(f"Skipping {ref.path}: extension '{ref.extension}' not in filter ({describe(source.extensions)})")
    return files


def collect_from_path(source: ByPath) -> List[str]:
    root = resolve_root(source.root)
    files: List[str] = []
    for ext in source.extensions:
        try:
            found = list(iter_extension(root, ext, recurse=source.recurse))
        except OSError as e:
            err = EnumerationError(ext, e)
            logger.warning(str(err))
            continue
        logger.debug(f"*.{ext}: {len(found)} match(es) under {root}")
        files.extend(found)
    return files


def consolidate(files: List[str], exclude: Optional[str] = None) -> List[str]:
    """
    Dedupe by exact string and sort ascending.

    `exclude` is compared by real path, so symlinked spellings of it are
    dropped too.
    """
    unique = set(files)
    if exclude is not None:
        real_exclude = os.path.realpath(exclude)
        unique = {p for p in unique if os.path.realpath(p) != real_exclude}
    return sorted(unique)


def discover(source: Union[ByPath, ByReferences], exclude: Optional[str] = None) -> List[str]:
    """
    Run the discovery phase for either input mode.

    `exclude` is an absolute path never included in the result (the output
    file of the current run).
    """
    if isinstance(source, ByReferences):
        files = collect_from_references(source)
    else:
        files = collect_from_path(source)
    return consolidate(files, exclude=exclude)
