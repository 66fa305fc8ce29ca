"""
pipeline.py

Responsibility: Compose cache acquisition and rendering into a single call.

`scaffold()` = `acquire()` then `process()`, sharing one option set. The
first error from either stage propagates; nothing is cleaned up.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Mapping

from gitscaffold.cache import acquire
from gitscaffold.options import CacheOptions, OptionsLike, RenderOptions, coerce
from gitscaffold.paths import PathResolver
from gitscaffold.renderer import process
from gitscaffold.vcs import VersionControl

logger = logging.getLogger(__name__)


async def scaffold(
    locator: str,
    dest_root: str | Path | None = None,
    data: Mapping[str, Any] | None = None,
    options: OptionsLike = None,
    *,
    vcs: VersionControl | None = None,
    resolver: PathResolver | None = None,
) -> list[Path]:
    """
    Fetch `locator` into the cache and render it into `dest_root`.

    `dest_root` defaults to the current working directory. Returns the
    destination paths written.
    """
    dest = Path(dest_root) if dest_root is not None else Path.cwd()
    template_dir = await acquire(locator, coerce(CacheOptions, options), vcs=vcs, resolver=resolver)
    logger.info("%s cloned into %s", locator, template_dir)
    return await process(template_dir, dest, data, coerce(RenderOptions, options))


def acquire_sync(locator: str, options: OptionsLike = None, **kwargs: Any) -> Path:
    return asyncio.run(acquire(locator, options, **kwargs))


def process_sync(
    source_root: str | Path,
    dest_root: str | Path,
    data: Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> list[Path]:
    return asyncio.run(process(source_root, dest_root, data, options))


def scaffold_sync(
    locator: str,
    dest_root: str | Path | None = None,
    data: Mapping[str, Any] | None = None,
    options: OptionsLike = None,
    **kwargs: Any,
) -> list[Path]:
    return asyncio.run(scaffold(locator, dest_root, data, options, **kwargs))
