"""
paths.py

Responsibility: Map a repository locator to a deterministic cache directory.

The cache root is explicit configuration handed to `PathResolver`; the
platform lookup in `default_cache_root()` runs only when a caller asks for it.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import unicodedata
from pathlib import Path

import platformdirs

logger = logging.getLogger(__name__)

CACHE_DIR_NAME = ".gitscaffold-templates"
CACHE_DIR_ENV = "GITSCAFFOLD_CACHE_DIR"

# Acronym followed by a capitalized word, capitalized/lowercase words, bare
# acronyms, digit runs. Anything else separates words.
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def slugify(locator: str) -> str:
    """
    Kebab-case slug of `locator`: lowercase ASCII alphanumerics joined by `-`.
    Accents are stripped before splitting, so "Ünïcode" gives "unicode".

    >>> slugify("My Repo!")
    'my-repo'
    >>> slugify("git@github.com:acme/fooBar.git")
    'git-github-com-acme-foo-bar-git'
    """
    decomposed = unicodedata.normalize("NFKD", locator)
    folded = "".join(c for c in decomposed if not unicodedata.combining(c))
    return "-".join(w.lower() for w in _WORD_RE.findall(folded))


def default_cache_root() -> Path:
    """
    Return the directory holding cached working copies.

    Resolution order:
    1. GITSCAFFOLD_CACHE_DIR environment variable
    2. The platform user cache directory (via platformdirs)
    3. The system temp directory
    """
    if env_root := os.environ.get(CACHE_DIR_ENV):
        return Path(env_root)

    try:
        base = platformdirs.user_cache_dir()
    except (OSError, KeyError, RuntimeError) as e:
        logger.debug("No platform cache directory (%s); using temp dir", e)
        base = tempfile.gettempdir()
    return Path(base) / CACHE_DIR_NAME


class PathResolver:
    """Resolves locators to working-copy directories under a fixed cache root."""

    def __init__(self, cache_root: str | Path | None = None) -> None:
        self.cache_root = Path(cache_root) if cache_root is not None else default_cache_root()

    def resolve(self, locator: str) -> Path:
        return self.cache_root / slugify(locator)

    def __repr__(self) -> str:
        return f"PathResolver(cache_root={str(self.cache_root)!r})"
