from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Iterable, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator

from .errors import ConfigurationError
from .extensions import DEFAULT_EXTENSION, normalize_extension, validate_extensions


def _default_extensions() -> List[str]:
    return [DEFAULT_EXTENSION]


class FileReference(BaseModel):
    """
    A path plus its (normalized) extension.

    Accepts plain strings, os.PathLike objects (Path, os.DirEntry) and
    file-handle-like objects exposing `full_path`/`path` and optionally
    `extension`/`suffix`. Without an explicit extension it is inferred from
    the path suffix.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    extension: str = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if isinstance(data, (str, os.PathLike)):
            data = {"path": data}
        elif not isinstance(data, dict):
            raw_path = getattr(data, "full_path", None) or getattr(data, "path", None)
            if raw_path is None:
                raise ValueError(f"Not a file reference: {data!r}")
            raw_ext = getattr(data, "extension", None) or getattr(data, "suffix", None) or ""
            data = {"path": raw_path, "extension": raw_ext}

        data = dict(data)
        if isinstance(data.get("path"), os.PathLike):
            data["path"] = os.fspath(data["path"])
        if not data.get("extension") and isinstance(data.get("path"), str):
            data["extension"] = os.path.splitext(data["path"])[1]
        return data

    @field_validator("extension")
    @classmethod
    def _normalize_ext(cls, v: str) -> str:
        return normalize_extension(v)

    @property
    def full_path(self) -> str:
        return os.path.abspath(self.path)


class _SourceModel(BaseModel):
    """Direct construction reports invalid input as ConfigurationError."""

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise _config_error(e) from e


class ByPath(_SourceModel):
    mode: Literal["path"] = "path"
    root: Path = Path(".")
    extensions: List[str] = Field(default_factory=_default_extensions)
    recurse: bool = False

    @field_validator("extensions", mode="before")
    @classmethod
    def _check_extensions(cls, v: Any) -> List[str]:
        return validate_extensions(v)


class ByReferences(_SourceModel):
    mode: Literal["references"] = "references"
    files: List[FileReference] = Field(default_factory=list)
    extensions: List[str] = Field(default_factory=_default_extensions)

    @field_validator("extensions", mode="before")
    @classmethod
    def _check_extensions(cls, v: Any) -> List[str]:
        return validate_extensions(v)


MergeSource = Annotated[Union[ByPath, ByReferences], Field(discriminator="mode")]
_SOURCE_ADAPTER: TypeAdapter = TypeAdapter(MergeSource)


def _config_error(e: ValidationError) -> ConfigurationError:
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return ConfigurationError("; ".join(parts))


def parse_source(data: Any) -> Union[ByPath, ByReferences]:
    """Build one of the two input modes from a mapping carrying a `mode` key."""
    try:
        return _SOURCE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise _config_error(e) from e


def by_path(root: Union[str, os.PathLike] = ".", extensions: Union[str, Iterable[str], None] = None, recurse: bool = False) -> ByPath:
    return ByPath(root=root, extensions=validate_extensions(extensions), recurse=recurse)


def by_references(files: Iterable[Any], extensions: Union[str, Iterable[str], None] = None) -> ByReferences:
    return ByReferences(files=list(files), extensions=validate_extensions(extensions))


@dataclass
class MergeResult:
    """Summary of one run."""

    output: Path
    extensions: List[str]
    files: List[str] = field(default_factory=list)
    exported: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    declined: List[str] = field(default_factory=list)
    size: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed
