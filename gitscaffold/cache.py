"""
cache.py

Responsibility: Ensure an up-to-date local working copy of a template repository.

Algorithm (strictly sequential):
1) Ensure the cache root exists
2) Refuse a target path that exists but is not a directory
3) Existing directory -> update in place (pull --rebase)
4) Missing target or failed update:
   - offline: fail, leaving the filesystem untouched
   - online: delete whatever is at the target, then clone afresh

Any update failure (including transient network errors) triggers the
delete-and-clone fallback when online.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path

from gitscaffold.errors import AcquisitionError, ConflictError, VCSError
from gitscaffold.options import CacheOptions, OptionsLike, coerce
from gitscaffold.paths import PathResolver
from gitscaffold.vcs import GitCLI, VersionControl

logger = logging.getLogger(__name__)


def _inspect(path: Path) -> str | None:
    """Classify path as "dir", "other" (exists, not a directory) or None (missing)."""
    if path.is_dir():
        return "dir"
    if path.exists():
        return "other"
    return None


def _remove_tree(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


async def acquire(
    locator: str,
    options: OptionsLike = None,
    *,
    vcs: VersionControl | None = None,
    resolver: PathResolver | None = None,
) -> Path:
    """
    Return the path of a working copy of `locator`, cloning or updating as needed.

    Raises:
        ConflictError: the target exists and is not a directory.
        AcquisitionError: offline with no usable cache, or clone failed.
    """
    opts = coerce(CacheOptions, options)
    vcs = vcs if vcs is not None else GitCLI()
    resolver = resolver if resolver is not None else PathResolver()

    try:
        await asyncio.to_thread(resolver.cache_root.mkdir, parents=True, exist_ok=True)
    except OSError as e:
        raise AcquisitionError(f"Cannot create cache root {resolver.cache_root}: {e}") from e

    if opts.dest is not None:
        target = Path(opts.dest)
    else:
        target = resolver.resolve(locator)
        if target == resolver.cache_root:
            raise AcquisitionError(f"Cannot derive a cache directory from locator {locator!r}")
    logger.debug("Download target at %s", target)

    kind = await asyncio.to_thread(_inspect, target)
    if kind == "other":
        raise ConflictError(target)

    update_error: Exception | None = None
    if kind == "dir":
        try:
            logger.debug("Updating working copy at %s", target)
            await vcs.update(target, opts.remote, opts.branch, rebase=True)
            logger.info("Updated %s from %s/%s", target, opts.remote, opts.branch or "HEAD")
            return target
        except (VCSError, OSError) as e:
            update_error = e
            logger.debug("Update of %s failed: %s", target, e)
    else:
        logger.debug("No working copy at %s", target)

    if opts.offline:
        raise AcquisitionError(f"No offline cache available: no usable copy of {locator} in {target}") from update_error

    try:
        await asyncio.to_thread(_remove_tree, target)
    except OSError as e:
        raise AcquisitionError(f"Cannot clear stale working copy at {target}: {e}") from e

    logger.info("Cloning %s into %s", locator, target)
    try:
        await vcs.clone(locator, target, branch=opts.branch)
    except VCSError as e:
        raise AcquisitionError(f"Failed to clone {locator} into {target}") from e
    return target
