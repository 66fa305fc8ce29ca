"""
gitscaffold package

Fetch a template repository into a local cache and render it into a project tree.

Key responsibilities are split across modules:
- `paths.py`: locator -> cache directory mapping, cache root discovery
- `vcs.py`: version-control capability interface and the git CLI implementation
- `cache.py`: working copy acquisition with online/offline fallback (`acquire`)
- `walker.py` / `binary.py`: template tree enumeration and binary classification
- `renderer.py`: render-or-copy of every template file (`process`)
- `pipeline.py`: acquire + process in one call (`scaffold`)
- `cli.py`: CLI entrypoint
"""

from __future__ import annotations

from gitscaffold.cache import acquire
from gitscaffold.errors import (
    AcquisitionError,
    ConflictError,
    GitscaffoldError,
    ProcessError,
    RenderError,
    VCSError,
    WalkError,
    WriteError,
)
from gitscaffold.options import CacheOptions, RenderOptions, ScaffoldOptions
from gitscaffold.paths import PathResolver
from gitscaffold.pipeline import scaffold
from gitscaffold.renderer import FileOutcome, FileResult, process, process_detailed

__all__ = [
    "__version__",
    "AcquisitionError",
    "CacheOptions",
    "ConflictError",
    "FileOutcome",
    "FileResult",
    "GitscaffoldError",
    "PathResolver",
    "ProcessError",
    "RenderError",
    "RenderOptions",
    "ScaffoldOptions",
    "VCSError",
    "WalkError",
    "WriteError",
    "acquire",
    "process",
    "process_detailed",
    "scaffold",
]

__version__ = "0.1.0"
