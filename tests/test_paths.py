from __future__ import annotations

import re
from pathlib import Path

import pytest

from gitscaffold import paths
from gitscaffold.paths import PathResolver, default_cache_root, slugify


@pytest.mark.parametrize(
    ("locator", "expected"),
    [
        ("My Repo!", "my-repo"),
        ("https://github.com/acme/fooBar.git", "https-github-com-acme-foo-bar-git"),
        ("git@github.com:acme/templates.git", "git-github-com-acme-templates-git"),
        ("XMLHttpRequest", "xml-http-request"),
        ("python3-template", "python-3-template"),
        ("--already--kebab--", "already-kebab"),
    ],
)
def test_slugify(locator: str, expected: str) -> None:
    assert slugify(locator) == expected


def test_slug_is_lowercase_alnum_and_hyphens() -> None:
    slug = slugify("Ünïcode / Path\\With:Weird*Chars?2024")
    assert re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", slug)


def test_resolve_joins_slug_under_cache_root(tmp_path: Path) -> None:
    resolver = PathResolver(tmp_path)
    assert resolver.resolve("My Repo!") == tmp_path / "my-repo"


def test_resolve_is_deterministic(tmp_path: Path) -> None:
    resolver = PathResolver(tmp_path)
    assert resolver.resolve("https://x/y.git") == resolver.resolve("https://x/y.git")


def test_empty_locator_resolves_to_cache_root(tmp_path: Path) -> None:
    assert PathResolver(tmp_path).resolve("") == tmp_path


def test_default_cache_root_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GITSCAFFOLD_CACHE_DIR", str(tmp_path / "c"))
    assert default_cache_root() == tmp_path / "c"


def test_default_cache_root_uses_platform_cache_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("GITSCAFFOLD_CACHE_DIR", raising=False)
    monkeypatch.setattr(paths.platformdirs, "user_cache_dir", lambda: str(tmp_path))
    assert default_cache_root() == tmp_path / ".gitscaffold-templates"


def test_default_cache_root_falls_back_to_tempdir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def boom() -> str:
        raise OSError("no home")

    monkeypatch.delenv("GITSCAFFOLD_CACHE_DIR", raising=False)
    monkeypatch.setattr(paths.platformdirs, "user_cache_dir", boom)
    monkeypatch.setattr(paths.tempfile, "gettempdir", lambda: str(tmp_path))
    assert default_cache_root() == tmp_path / ".gitscaffold-templates"


def test_slugify_strips_accents() -> None:
    assert slugify("Ünïcode Repo") == "unicode-repo"
    assert slugify("café-Crème") == "cafe-creme"
