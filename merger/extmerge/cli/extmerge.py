#!/usr/bin/env python3
"""
extmerge – concatenate all files of the given extensions into one text file.

Usage:
    extmerge [ROOT] [-o OUTPUT] [-e EXT ...] [-r | --no-recurse]
    extmerge --from-list FILE|- [-o OUTPUT] [-e EXT ...]

Each file becomes a section:

    === File: /abs/path/to/file.py ===
    <content>

Allowed extensions: ps1, md, tf, sh, py, bat, yml (default: ps1).
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core.config import config_path_from_env, load_config
from ..core.errors import MergeError
from ..core.extensions import ALLOWED_EXTENSIONS, DEFAULT_EXTENSION
from ..core.merge import DEFAULT_OUTPUT, merge_files, plan_files
from ..core.models import by_path, by_references


def _fail(msg: str) -> int:
    print(f"[extmerge] Error: {msg}", file=sys.stderr)
    return 1


def parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="extmerge",
        description="Concatenate files matching the given extensions into one output file.",
    )
    ap.add_argument("root", nargs="?", default=None, help="Root directory to scan (default: .)")
    ap.add_argument("--output", "-o", default=None, help=f"Output file (default: {DEFAULT_OUTPUT})")
    ap.add_argument(
        "--extension", "-e", dest="extensions", action="append", default=None,
        help=f"Extension to include, repeatable or comma separated ({', '.join(sorted(ALLOWED_EXTENSIONS))}; default: {DEFAULT_EXTENSION})",
    )
    ap.add_argument("--recurse", "-r", action=argparse.BooleanOptionalAction, default=None,
                    help="Descend into subdirectories (--no-recurse overrides the config file)")
    ap.add_argument("--from-list", dest="from_list", default=None,
                    help="Read file paths (one per line) from FILE instead of scanning; '-' reads stdin")
    ap.add_argument("--confirm", action="store_true", default=None, help="Ask before exporting each file")
    ap.add_argument("--plan-only", action="store_true", help="Only list the files that would be merged")
    ap.add_argument("--config", default=None, help="YAML config file (default: $EXTMERGE_CONFIG)")
    ap.add_argument("--verbose", "-v", action="store_true", help="Informational output")
    ap.add_argument("--debug", action="store_true", help="Diagnostic output")
    return ap.parse_args(argv)


def setup_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    logging.basicConfig(level=level, stream=sys.stderr, format="[%(levelname)s] %(message)s")


def ask_confirm(path: str) -> bool:
    try:
        answer = input(f"Export {path}? [y/N]: ").strip().lower()
    except EOFError:
        answer = ""
    return answer in ("y", "yes", "j", "ja")


def read_list(source: str) -> List[str]:
    if source == "-":
        lines = sys.stdin.read().splitlines()
    else:
        lines = Path(source).expanduser().read_text(encoding="utf-8").splitlines()
    return [ln.strip() for ln in lines if ln.strip()]


def main(argv: Optional[List[str]] = None) -> int:
    a = parse_args(argv)
    setup_logging(a.verbose, a.debug)

    if a.from_list and a.root:
        return _fail("ROOT and --from-list are mutually exclusive")
    if a.from_list and a.recurse is not None:
        return _fail("--recurse/--no-recurse cannot be combined with --from-list")

    try:
        cfg = load_config(a.config or config_path_from_env())

        extensions = a.extensions if a.extensions is not None else cfg.extensions
        output = a.output or cfg.output or DEFAULT_OUTPUT
        confirm = a.confirm if a.confirm is not None else bool(cfg.confirm)

        if a.from_list:
            try:
                refs = read_list(a.from_list)
            except OSError as e:
                return _fail(f"Cannot read file list {a.from_list}: {e}")
            source = by_references(refs, extensions)
        else:
            recurse = a.recurse if a.recurse is not None else bool(cfg.recurse)
            source = by_path(a.root or cfg.root or ".", extensions, recurse)

        if a.plan_only:
            for p in plan_files(source, output):
                print(p)
            return 0

        result = merge_files(source, output, confirm=ask_confirm if confirm else None)
    except MergeError as e:
        return _fail(str(e))

    if a.verbose or a.debug:
        print(f"✅ Merge written: {result.output} ({len(result.exported)} files)")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
