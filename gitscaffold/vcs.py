"""
vcs.py

Responsibility: Isolate all interaction with the version-control client.

The pipeline depends only on the `VersionControl` protocol (update + clone),
so it can run against a fake in tests. `GitCLI` is the real implementation and
the only place in the package that spawns `git`.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from gitscaffold.errors import VCSError

logger = logging.getLogger(__name__)


class VersionControl(Protocol):
    async def update(self, working_copy: Path, remote: str, branch: str | None, *, rebase: bool = True) -> None:
        """
        Bring `working_copy` up to date with `remote`/`branch`. Raises VCSError.

        A None branch means the branch the working copy already tracks.
        """
        ...

    async def clone(self, locator: str, destination: Path, *, branch: str | None = None) -> None:
        """
        Clone `locator` into `destination`. Raises VCSError.

        A None branch checks out the remote default branch.
        """
        ...


class GitCLI:
    """`VersionControl` backed by the `git` executable."""

    def __init__(self, executable: str = "git", env: Mapping[str, str] | None = None) -> None:
        self.executable = executable
        base = dict(os.environ if env is None else env)
        # Never block on a credential prompt.
        base.setdefault("GIT_TERMINAL_PROMPT", "0")
        self._env = base

    async def _run(self, args: Sequence[str], *, cwd: Path | None = None) -> str:
        """
        Run a git command, raising VCSError on a non-zero exit or spawn failure.

        Returns the combined stdout/stderr.
        """
        cmd = [self.executable, *args]
        logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd) if cwd is not None else None,
                env=self._env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise VCSError(cmd, None, str(e)) from e

        raw, _ = await proc.communicate()
        output = raw.decode("utf-8", errors="replace") if raw else ""
        if proc.returncode != 0:
            raise VCSError(cmd, proc.returncode, output)
        return output

    async def update(self, working_copy: Path, remote: str, branch: str | None, *, rebase: bool = True) -> None:
        args = ["pull"]
        if rebase:
            args.append("--rebase")
        args.append(remote)
        if branch:
            args.append(branch)
        await self._run(args, cwd=working_copy)

    async def clone(self, locator: str, destination: Path, *, branch: str | None = None) -> None:
        args = ["clone"]
        if branch:
            args += ["--branch", branch]
        args += ["--", locator, str(destination)]
        await self._run(args)
