from __future__ import annotations
# -*- coding: utf-8 -*-

"""
extensions.py – closed extension vocabulary and filter validation.
"""

from typing import Iterable, List, Union

from .errors import ConfigurationError

# Approved vocabulary (normalized: lower-case, no leading dot/glob).
ALLOWED_EXTENSIONS = frozenset({"ps1", "md", "tf", "sh", "py", "bat", "yml"})
DEFAULT_EXTENSION = "ps1"


def normalize_extension(ext: str) -> str:
    """'*.PS1', '.ps1' and 'ps1' all normalize to 'ps1'."""
    return str(ext).strip().lstrip("*").lstrip(".").lower()


def _split_ext_text(values: Iterable[str]) -> List[str]:
    parts: List[str] = []
    for v in values:
        for p in str(v).split(","):
            if p.strip():
                parts.append(p)
    return parts


def validate_extensions(values: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize caller input into an ordered, de-duplicated extension filter.

    Accepts a single string (comma separated allowed) or an iterable of
    strings. Raises ConfigurationError for an empty filter or for any entry
    outside ALLOWED_EXTENSIONS.
    """
    if values is None:
        values = [DEFAULT_EXTENSION]
    elif isinstance(values, str):
        values = [values]

    cleaned: List[str] = []
    rejected: List[str] = []
    for raw in _split_ext_text(values):
        ext = normalize_extension(raw)
        if ext not in ALLOWED_EXTENSIONS:
            rejected.append(raw.strip())
            continue
        if ext not in cleaned:
            cleaned.append(ext)

    if rejected:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
        raise ConfigurationError(
            f"Unsupported extension(s): {', '.join(rejected)} (allowed: {allowed})"
        )
    if not cleaned:
        raise ConfigurationError("At least one extension is required")
    return cleaned


def matches(extension: str, ext_filter: Iterable[str]) -> bool:
    return normalize_extension(extension) in set(ext_filter)


def describe(ext_filter: Iterable[str]) -> str:
    return ", ".join(f"*.{e}" for e in ext_filter)
