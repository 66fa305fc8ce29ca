"""
errors.py

Responsibility: The exception hierarchy shared by every stage of the pipeline.

All errors derive from `GitscaffoldError` so callers (and the CLI) can catch a
single type. Nothing in the pipeline retries or rolls back; errors surface to
the immediate caller of the failing operation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class GitscaffoldError(RuntimeError):
    pass


class ConflictError(GitscaffoldError):
    """A path exists but is not the directory the operation requires."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = Path(path)
        super().__init__(message or f"File exists at {self.path} (expected a directory)")


class AcquisitionError(GitscaffoldError):
    """No usable working copy could be obtained."""


class WalkError(GitscaffoldError):
    pass


class ProcessError(GitscaffoldError):
    """A single file job failed; `path` is the source file."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class RenderError(ProcessError):
    pass


class WriteError(ProcessError):
    pass


class VCSError(GitscaffoldError):
    def __init__(self, cmd: Sequence[str], returncode: int | None, output: str = "") -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.output = output
        detail = f"\n\n{output.strip()}" if output.strip() else ""
        super().__init__(f"Command failed ({returncode}): {' '.join(self.cmd)}{detail}")


class DataError(ValueError, GitscaffoldError):
    pass


class ConfigError(ValueError, GitscaffoldError):
    pass


class GitHubError(GitscaffoldError):
    pass
