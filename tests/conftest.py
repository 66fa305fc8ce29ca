from __future__ import annotations

from pathlib import Path

import pytest

from gitscaffold.errors import VCSError
from gitscaffold.paths import PathResolver


class FakeVCS:
    """In-memory VersionControl: clone writes `files`, update succeeds unless told otherwise."""

    def __init__(self, files: dict[str, str] | None = None, *, update_fails: bool = False, clone_fails: bool = False):
        self.files = files if files is not None else {"README.md": "# {{ name }}\n"}
        self.update_fails = update_fails
        self.clone_fails = clone_fails
        self.calls: list[tuple] = []

    async def update(self, working_copy: Path, remote: str, branch: str | None, *, rebase: bool = True) -> None:
        self.calls.append(("update", Path(working_copy), remote, branch, rebase))
        if self.update_fails:
            raise VCSError(["git", "pull", "--rebase", remote, branch or ""], 1, "fatal: unable to access remote")

    async def clone(self, locator: str, destination: Path, *, branch: str | None = None) -> None:
        self.calls.append(("clone", locator, Path(destination), branch))
        if self.clone_fails:
            raise VCSError(["git", "clone", locator, str(destination)], 128, "fatal: repository not found")
        destination = Path(destination)
        destination.mkdir(parents=True)
        (destination / ".git").mkdir()
        (destination / ".git" / "HEAD").write_text("ref: refs/heads/master\n")
        for rel, content in self.files.items():
            p = destination / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(content)

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_vcs() -> FakeVCS:
    return FakeVCS()


@pytest.fixture
def resolver(tmp_path: Path) -> PathResolver:
    return PathResolver(tmp_path / "cache")


@pytest.fixture
def template_tree(tmp_path: Path) -> Path:
    """A small template directory with rendered, copied, binary and VCS files."""
    root = tmp_path / "template"
    (root / "src").mkdir(parents=True)
    (root / ".git" / "objects").mkdir(parents=True)
    (root / "README.md").write_text("Hello {{name}}\n")
    (root / "src" / "main.py").write_text("print('plain file')\n")
    (root / "logo.png").write_bytes(b"\x89PNG {{name}}")
    (root / ".git" / "config").write_text("[core] {{name}}\n")
    (root / ".git" / "objects" / "ab").write_text("blob")
    return root
