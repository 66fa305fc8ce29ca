"""
config.py

Responsibility: Collect user settings from a config file and the environment.

Precedence (later wins): defaults -> config file -> environment -> CLI flags.

Config file: $GITSCAFFOLD_CONFIG, else `<user config dir>/gitscaffold/config.yaml`.
Missing default config files are ignored; an explicitly named one must exist.

Environment variables (all optional):
    GITSCAFFOLD_CACHE_DIR:  Cache root for working copies.
    GITSCAFFOLD_REMOTE:     Git remote to update from. Default "origin".
    GITSCAFFOLD_BRANCH:     Git branch to clone and update. Default: the remote's default branch.
    GITSCAFFOLD_MAX_JOBS:   Concurrent file jobs. Default 16.
    GITSCAFFOLD_LOG_LEVEL:  Logging level. Default "WARNING".
    GITHUB_TOKEN:           Token for `gh:` locator lookups.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import platformdirs
import yaml

from gitscaffold.errors import ConfigError
from gitscaffold.github import DEFAULT_API_BASE
from gitscaffold.options import DEFAULT_BRANCH, DEFAULT_MAX_JOBS, DEFAULT_REMOTE
from gitscaffold.paths import CACHE_DIR_ENV, default_cache_root

logger = logging.getLogger(__name__)

CONFIG_ENV = "GITSCAFFOLD_CONFIG"

_ENV_KEYS = {
    "cache_root": CACHE_DIR_ENV,
    "remote": "GITSCAFFOLD_REMOTE",
    "branch": "GITSCAFFOLD_BRANCH",
    "max_jobs": "GITSCAFFOLD_MAX_JOBS",
    "log_level": "GITSCAFFOLD_LOG_LEVEL",
    "github_api": "GITSCAFFOLD_GITHUB_API",
    "github_token": "GITHUB_TOKEN",
}


@dataclass
class Settings:
    cache_root: Path = field(default_factory=default_cache_root)
    remote: str = DEFAULT_REMOTE
    branch: str | None = DEFAULT_BRANCH
    max_jobs: int = DEFAULT_MAX_JOBS
    log_level: str = "WARNING"
    github_api: str = DEFAULT_API_BASE
    github_token: str | None = field(default=None, repr=False)

    def merged(self, values: Mapping[str, Any]) -> "Settings":
        """Return a copy with `values` applied; unknown keys are rejected."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")
        return replace(self, **_normalize(values))


def _normalize(values: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(values)
    if out.get("cache_root") is not None:
        out["cache_root"] = Path(os.path.expanduser(str(out["cache_root"])))
    if "max_jobs" in out:
        try:
            out["max_jobs"] = int(out["max_jobs"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"max_jobs must be an integer, got {out['max_jobs']!r}") from e
        if out["max_jobs"] < 1:
            raise ConfigError("max_jobs must be at least 1")
    if "log_level" in out:
        out["log_level"] = str(out["log_level"]).upper()
    for key in ("remote", "github_api"):
        if key in out:
            out[key] = str(out[key])
    if "branch" in out:
        out["branch"] = str(out["branch"]) if out["branch"] not in (None, "") else None
    return out


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir("gitscaffold")) / "config.yaml"


def load_config_file(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {p}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {p} must contain a mapping at the top level.")
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    env = os.environ if environ is None else environ
    return {key: env[var] for key, var in _ENV_KEYS.items() if env.get(var)}


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build Settings from defaults, the config file, then the environment."""
    env = os.environ if environ is None else environ
    settings = Settings()

    explicit = config_path or env.get(CONFIG_ENV)
    path = Path(explicit) if explicit else default_config_path()
    if path.is_file():
        logger.debug("Loading config from %s", path)
        settings = settings.merged(load_config_file(path))
    elif explicit:
        raise ConfigError(f"Config file does not exist: {path}")

    return settings.merged(env_overrides(env))
