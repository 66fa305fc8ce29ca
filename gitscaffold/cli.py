"""
cli.py

Responsibility: CLI entrypoint for gitscaffold.

Commands:
- `scaffold`: fetch a template repository into the cache, render it into DEST
- `fetch`: only fetch/update the cached working copy, print its path
- `generate`: render a local template directory into DEST
- `cache-path`: print the cache directory a locator maps to

This module should orchestrate behavior but keep concerns isolated:
- Settings: `config.py`
- Data payload: `data.py`
- Locator shorthand: `github.py`
- Pipeline: `cache.py`, `renderer.py`, `pipeline.py`
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from gitscaffold import __version__
from gitscaffold.cache import acquire
from gitscaffold.config import Settings, load_settings
from gitscaffold.data import load_data
from gitscaffold.errors import GitscaffoldError
from gitscaffold.github import GitHubClient, resolve_locator
from gitscaffold.options import CacheOptions, RenderOptions, ScaffoldOptions
from gitscaffold.paths import PathResolver
from gitscaffold.pipeline import scaffold
from gitscaffold.renderer import process

logger = logging.getLogger("gitscaffold")


def _configure_logging(args: argparse.Namespace, settings: Settings) -> None:
    if args.verbose >= 2:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    elif args.quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _resolver(args: argparse.Namespace, settings: Settings) -> PathResolver:
    return PathResolver(Path(args.cache_dir) if args.cache_dir else settings.cache_root)


def _github(settings: Settings) -> GitHubClient:
    return GitHubClient(settings.github_token, api_base=settings.github_api)


def _locator_and_branch(args: argparse.Namespace, settings: Settings) -> tuple[str, str | None]:
    """
    Expand `gh:owner/name` shorthand. An explicit --branch wins over the
    repository default branch, which wins over the configured branch. None
    leaves the choice to the remote.
    """
    locator, default_branch = resolve_locator(args.locator, _github(settings))
    return locator, args.branch or default_branch or settings.branch


def _print_paths(paths: list[Path]) -> None:
    for p in paths:
        print(p)


def scaffold_cmd(args: argparse.Namespace, settings: Settings) -> int:
    locator, branch = _locator_and_branch(args, settings)
    data = load_data(args.data, args.set)
    options = ScaffoldOptions(
        offline=bool(args.offline),
        remote=args.remote or settings.remote,
        branch=branch,
        overwrite=not args.no_overwrite,
        max_jobs=args.jobs or settings.max_jobs,
        strict=not args.lenient,
    )
    dest = Path(args.dest).resolve() if args.dest else Path.cwd()
    written = asyncio.run(scaffold(locator, dest, data, options, resolver=_resolver(args, settings)))
    _print_paths(written)
    logger.info("Wrote %d file(s) to %s", len(written), dest)
    return 0


def fetch_cmd(args: argparse.Namespace, settings: Settings) -> int:
    locator, branch = _locator_and_branch(args, settings)
    options = CacheOptions(
        dest=Path(args.dest) if args.dest else None,
        offline=bool(args.offline),
        remote=args.remote or settings.remote,
        branch=branch,
    )
    print(asyncio.run(acquire(locator, options, resolver=_resolver(args, settings))))
    return 0


def generate_cmd(args: argparse.Namespace, settings: Settings) -> int:
    data = load_data(args.data, args.set)
    options = RenderOptions(
        overwrite=not args.no_overwrite,
        max_jobs=args.jobs or settings.max_jobs,
        strict=not args.lenient,
    )
    written = asyncio.run(process(Path(args.source), Path(args.dest), data, options))
    _print_paths(written)
    return 0


def cache_path_cmd(args: argparse.Namespace, settings: Settings) -> int:
    locator, _branch = resolve_locator(args.locator, _github(settings))
    print(_resolver(args, settings).resolve(locator))
    return 0


def _add_cache_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--offline", action="store_true", help="Use the cached copy only; never clone")
    p.add_argument("--remote", default=None, help="Git remote to update from (default: origin)")
    p.add_argument("--branch", default=None, help="Git branch to check out (default: the remote default branch)")
    p.add_argument("--cache-dir", default=None, help="Cache root for working copies")


def _add_render_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data", default=None, help="YAML/JSON data file (or markdown with YAML frontmatter)")
    p.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a template variable; dotted keys nest (repeatable)",
    )
    p.add_argument("--no-overwrite", action="store_true", help="Leave existing destination files untouched")
    p.add_argument("--jobs", type=int, default=None, help="Maximum concurrent file jobs")
    p.add_argument("--lenient", action="store_true", help="Render undefined template variables as empty")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gitscaffold", description="Scaffold a project from a git template repository")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    p.add_argument("--config", default=None, help="Config file (default: user config dir)")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("scaffold", help="Fetch a template repository and render it into DEST")
    s.add_argument("locator", help="Repository URL/path, or gh:owner/name")
    s.add_argument("dest", nargs="?", default=None, help="Output directory (default: current directory)")
    _add_cache_args(s)
    _add_render_args(s)
    s.set_defaults(func=scaffold_cmd)

    f = sub.add_parser("fetch", help="Clone or update the cached working copy and print its path")
    f.add_argument("locator", help="Repository URL/path, or gh:owner/name")
    f.add_argument("--dest", default=None, help="Working copy path (default: derived from locator)")
    _add_cache_args(f)
    f.set_defaults(func=fetch_cmd)

    g = sub.add_parser("generate", help="Render a local template directory into DEST")
    g.add_argument("source", help="Template directory")
    g.add_argument("dest", help="Output directory")
    _add_render_args(g)
    g.set_defaults(func=generate_cmd)

    c = sub.add_parser("cache-path", help="Print the cache directory for a locator")
    c.add_argument("locator", help="Repository URL/path, or gh:owner/name")
    c.add_argument("--cache-dir", default=None, help="Cache root for working copies")
    c.set_defaults(func=cache_path_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
        _configure_logging(args, settings)
        return int(args.func(args, settings))
    except GitscaffoldError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
