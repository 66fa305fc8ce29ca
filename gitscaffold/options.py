"""
options.py

Responsibility: Typed option sets for the two pipeline stages.

`ScaffoldOptions` is the union accepted by `scaffold()`; each stage projects
the fields it understands and ignores the rest. Plain mappings are accepted
everywhere an options object is, with unknown keys ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, TypeVar, Union

DEFAULT_REMOTE = "origin"
# None means the remote's default branch (HEAD).
DEFAULT_BRANCH: str | None = None
DEFAULT_MAX_JOBS = 16


@dataclass(frozen=True)
class CacheOptions:
    """Options for repository cache acquisition."""

    dest: Path | None = None
    offline: bool = False
    remote: str = DEFAULT_REMOTE
    branch: str | None = DEFAULT_BRANCH


@dataclass(frozen=True)
class RenderOptions:
    """Options for the render-or-copy stage."""

    overwrite: bool = True
    max_jobs: int = DEFAULT_MAX_JOBS
    strict: bool = True


@dataclass(frozen=True)
class ScaffoldOptions:
    dest: Path | None = None
    offline: bool = False
    remote: str = DEFAULT_REMOTE
    branch: str | None = DEFAULT_BRANCH
    overwrite: bool = True
    max_jobs: int = DEFAULT_MAX_JOBS
    strict: bool = True

    def cache_options(self) -> CacheOptions:
        return coerce(CacheOptions, self)

    def render_options(self) -> RenderOptions:
        return coerce(RenderOptions, self)


_T = TypeVar("_T", CacheOptions, RenderOptions, ScaffoldOptions)

OptionsLike = Union[CacheOptions, RenderOptions, ScaffoldOptions, Mapping[str, Any], None]


def coerce(cls: type[_T], options: OptionsLike) -> _T:
    """
    Build a `cls` instance from another options object or a mapping.

    Fields `cls` does not declare are ignored; fields missing from `options`
    take their defaults.
    """
    if options is None:
        return cls()
    if isinstance(options, cls):
        return options
    if isinstance(options, Mapping):
        source: Mapping[str, Any] = options
    else:
        source = {f.name: getattr(options, f.name) for f in fields(options)}

    kwargs = {f.name: source[f.name] for f in fields(cls) if f.name in source}
    if kwargs.get("dest") is not None:
        kwargs["dest"] = Path(kwargs["dest"])
    return cls(**kwargs)
