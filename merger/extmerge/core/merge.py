from __future__ import annotations
# -*- coding: utf-8 -*-

"""
merge.py – the aggregator.

One linear pass: reset the output file, discover matching files, then append
one section per file:

    \\n\\n=== File: <absolute path> ===\\n
    <verbatim lines>

A file that cannot be read gets ERROR_PLACEHOLDER instead of its content and
the run continues. Only configuration and output-initialization problems are
fatal.
"""

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Union

from .errors import ConfigurationError, FileExportError, InitializationError
from .extensions import describe
from .fs_scan import discover, human_size
from .models import ByPath, ByReferences, MergeResult

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "output.txt"
DEFAULT_ENCODING = "utf-8"
ERROR_PLACEHOLDER = "# Error reading file content."

ConfirmFn = Callable[[str], bool]


def section_header(path: str) -> str:
    return f"\n\n=== File: {path} ===\n"


def resolve_output(output_file: Union[str, os.PathLike, None]) -> Path:
    """
    Absolute output path. A bare file name lands in the current working
    directory; the parent directory does not need to exist yet.
    """
    raw = Path(output_file) if output_file else Path(DEFAULT_OUTPUT)
    try:
        raw = raw.expanduser()
        if not raw.name:
            raise ValueError("empty file name")
        parent = raw.parent if str(raw.parent) not in ("", ".") else Path.cwd()
        return parent.resolve() / raw.name
    except (OSError, RuntimeError, ValueError) as e:
        raise ConfigurationError(f"Output path cannot be resolved: {output_file} ({e})") from e


def reset_output(out_path: Path, encoding: str = DEFAULT_ENCODING) -> None:
    """Truncate an existing output file or create it (with missing parents)."""
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding=encoding):
            pass
    except OSError as e:
        raise InitializationError(f"Cannot create or truncate output file {out_path}: {e}") from e


def _copy_lines(src: str, out, encoding: str) -> None:
    with open(src, "r", encoding=encoding) as fh:
        for line in fh:
            out.write(line if line.endswith("\n") else line + "\n")


def export_file(out_path: Path, src: str, encoding: str = DEFAULT_ENCODING) -> None:
    """
    Append one section for `src`. Read errors are turned into the
    placeholder line and re-raised as FileExportError once the section is
    complete.
    """
    with out_path.open("a", encoding=encoding) as out:
        out.write(section_header(src))
        try:
            _copy_lines(src, out, encoding)
        except (OSError, UnicodeDecodeError) as e:
            out.write(ERROR_PLACEHOLDER + "\n")
            raise FileExportError(src, e) from e


def is_output(src: str, out_path: Path) -> bool:
    try:
        return os.path.samefile(src, out_path)
    except OSError:
        return False


def plan_files(source: Union[ByPath, ByReferences], output_file: Union[str, os.PathLike, None] = None) -> List[str]:
    """Discovery and consolidation only; the output file is not touched."""
    exclude = str(resolve_output(output_file)) if output_file else None
    return discover(source, exclude=exclude)


def merge_files(
    source: Union[ByPath, ByReferences],
    output_file: Union[str, os.PathLike, None] = DEFAULT_OUTPUT,
    *,
    confirm: Optional[ConfirmFn] = None,
    encoding: str = DEFAULT_ENCODING,
) -> MergeResult:
    """
    Concatenate every file matched by `source` into `output_file`.

    confirm: optional per-file predicate; a file for which it returns False
    is skipped without header or placeholder.

    Raises ConfigurationError / InitializationError on fatal problems. Per
    extension enumeration errors and per file read errors are logged as
    warnings and reported in the returned MergeResult.
    """
    out_path = resolve_output(output_file)
    reset_output(out_path, encoding=encoding)

    result = MergeResult(output=out_path, extensions=list(source.extensions))
    result.files = discover(source, exclude=str(out_path))

    if not result.files:
        logger.warning(f"No files found matching extensions: {describe(source.extensions)}")
        return result

    for src in result.files:
        if is_output(src, out_path):
            logger.warning(f"Skipping {src}: it is the output file")
            continue
        if confirm is not None and not confirm(src):
            logger.info(f"Declined: {src}")
            result.declined.append(src)
            continue
        try:
            export_file(out_path, src, encoding=encoding)
        except FileExportError as e:
            logger.warning(str(e))
            result.failed.append(src)
            continue
        except OSError as e:
            logger.warning(str(FileExportError(src, e)))
            result.failed.append(src)
            continue
        logger.debug(f"Exported {src}")
        result.exported.append(src)

    try:
        result.size = out_path.stat().st_size
    except OSError as e:
        logger.debug(f"Cannot stat {out_path}: {e}")
        result.size = 0
    logger.info(
        f"Merge written: {out_path} ({human_size(result.size)}) – "
        f"{len(result.exported)} exported, {len(result.failed)} failed, {len(result.declined)} declined"
    )
    return result
