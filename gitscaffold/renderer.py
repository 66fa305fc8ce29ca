"""
renderer.py

Responsibility: Render or copy every file of a template tree into a destination.

Rules:
- Walk template files in sorted order; `.git` directories are pruned.
- Binary files (by extension) are skipped, never copied.
- Text files containing a `{{ ... }}` expression are rendered with Jinja2
  against the caller's data; all other text files are copied unchanged.
- With overwrite disabled, existing destination files are left alone.

File jobs run concurrently (bounded by `RenderOptions.max_jobs`) and are
joined fail-fast: the first failing job fails the whole call, and writes that
already completed stay on disk.

This module intentionally does NOT know about git or the repository cache.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, StrictUndefined, Undefined

from gitscaffold.binary import is_binary
from gitscaffold.errors import ProcessError, RenderError, WriteError
from gitscaffold.options import OptionsLike, RenderOptions, coerce
from gitscaffold.walker import walk_async

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(r"{{([^{}]+)}}")


class FileOutcome(enum.Enum):
    WRITTEN = "written"
    SKIPPED_EXISTS = "skipped-exists"
    SKIPPED_BINARY = "skipped-binary"


@dataclass(frozen=True)
class FileResult:
    source: Path
    destination: Path
    outcome: FileOutcome


@dataclass
class FileJob:
    """One source file on its way to the destination tree."""

    source: Path
    destination: Path
    content: str | None = None
    output: str | None = None


def has_template_marker(text: str) -> bool:
    return _MARKER_RE.search(text) is not None


def _environment(strict: bool) -> Environment:
    return Environment(
        autoescape=False,
        undefined=StrictUndefined if strict else Undefined,
        keep_trailing_newline=True,
    )


def render_string(text: str, data: Mapping[str, Any] | None = None, *, strict: bool = True) -> str:
    """Render `text` as a Jinja2 template. Raises jinja2.TemplateError on failure."""
    return _environment(strict).from_string(text).render(dict(data or {}))


def _read(job: FileJob) -> str:
    try:
        with open(job.source, encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ProcessError(job.source, f"Not a UTF-8 text file: {job.source}") from e
    except OSError as e:
        raise ProcessError(job.source, f"Cannot read {job.source}: {e}") from e


def _render(job: FileJob, env: Environment, data: dict[str, Any]) -> str:
    try:
        return env.from_string(job.content or "").render(data)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(job.source, f"Failed rendering template file {job.source}: {e}") from e


def _write(job: FileJob, overwrite: bool) -> bool:
    """Write job.output; False if the destination existed and overwrite is off."""
    try:
        job.destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(job.source, f"Cannot create directory {job.destination.parent}: {e}") from e

    try:
        with open(job.destination, "w" if overwrite else "x", encoding="utf-8", newline="") as f:
            f.write(job.output or "")
    except FileExistsError:
        return False
    except OSError as e:
        raise WriteError(job.source, f"Cannot write {job.destination}: {e}") from e
    return True


async def _process_file(
    job: FileJob,
    *,
    env: Environment,
    data: dict[str, Any],
    opts: RenderOptions,
    limit: asyncio.Semaphore,
) -> FileResult:
    logger.debug("Trying %s", job.source)
    if is_binary(job.source):
        logger.debug("Skipping %s; binary", job.source)
        return FileResult(job.source, job.destination, FileOutcome.SKIPPED_BINARY)

    async with limit:
        job.content = await asyncio.to_thread(_read, job)

        if has_template_marker(job.content):
            logger.debug("Rendering template %s", job.source)
            job.output = await asyncio.to_thread(_render, job, env, data)
        else:
            job.output = job.content

        written = await asyncio.to_thread(_write, job, opts.overwrite)

    if not written:
        logger.debug("Skipping %s; already exists", job.destination)
        return FileResult(job.source, job.destination, FileOutcome.SKIPPED_EXISTS)
    logger.debug("Wrote %s", job.destination)
    return FileResult(job.source, job.destination, FileOutcome.WRITTEN)


async def process_detailed(
    source_root: str | Path,
    dest_root: str | Path,
    data: Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> list[FileResult]:
    """
    Render/copy source_root into dest_root, reporting the outcome of every file.

    Results follow the walk order. Raises WalkError, ProcessError (or its
    RenderError / WriteError subclasses) for the first failing file.
    """
    opts = coerce(RenderOptions, options)
    src_dir = Path(source_root)
    dst_dir = Path(dest_root)
    logger.debug("Generating from %s to %s", src_dir, dst_dir)

    try:
        await asyncio.to_thread(dst_dir.mkdir, parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(dst_dir, f"Cannot create destination {dst_dir}: {e}") from e

    sources = await walk_async(src_dir)
    env = _environment(opts.strict)
    context = dict(data or {})
    limit = asyncio.Semaphore(max(1, opts.max_jobs))

    jobs = [FileJob(source=p, destination=dst_dir / p.relative_to(src_dir)) for p in sources]
    return list(
        await asyncio.gather(
            *(_process_file(job, env=env, data=context, opts=opts, limit=limit) for job in jobs)
        )
    )


async def process(
    source_root: str | Path,
    dest_root: str | Path,
    data: Mapping[str, Any] | None = None,
    options: OptionsLike = None,
) -> list[Path]:
    """Render/copy source_root into dest_root; return the destination paths written."""
    results = await process_detailed(source_root, dest_root, data, options)
    return [r.destination for r in results if r.outcome is FileOutcome.WRITTEN]
