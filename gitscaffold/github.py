"""
github.py

Responsibility: Isolate all direct GitHub REST API interaction.

Used to expand `gh:owner/name` locator shorthand into a clone URL and the
repository's default branch. This module must be the only place that
constructs GitHub REST endpoints or interprets their responses.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import requests

from gitscaffold.errors import GitHubError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"

_SHORTHAND_RE = re.compile(r"^(?:gh|github):(?P<owner>[A-Za-z0-9_.-]+)/(?P<name>[A-Za-z0-9_.-]+?)(?:\.git)?$")


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    name: str
    html_url: str
    clone_url: str
    default_branch: str


class GitHubClient:
    def __init__(self, token: str | None = None, api_base: str = DEFAULT_API_BASE, timeout: float = 30) -> None:
        self._token = (token or "").strip() or None
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "gitscaffold",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _request(self, method: str, path: str) -> Any:
        url = f"{self._api_base}{path}"
        try:
            r = requests.request(method, url, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            message = payload.get("message", payload) if isinstance(payload, dict) else payload
            raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {message}")
        return r.json()

    def get_repo(self, owner: str, name: str) -> RepoInfo:
        data = self._request("GET", f"/repos/{owner}/{name}")
        return RepoInfo(
            owner=owner,
            name=name,
            html_url=data["html_url"],
            clone_url=data["clone_url"],
            default_branch=data.get("default_branch") or "main",
        )


def parse_shorthand(locator: str) -> tuple[str, str] | None:
    """Return (owner, name) for `gh:owner/name`, else None."""
    m = _SHORTHAND_RE.match(locator.strip())
    if m is None:
        return None
    return m.group("owner"), m.group("name")


def resolve_locator(locator: str, client: GitHubClient | None = None) -> tuple[str, str | None]:
    """
    Expand GitHub shorthand into (clone_url, default_branch).

    Any other locator is returned unchanged with a None branch.
    """
    parsed = parse_shorthand(locator)
    if parsed is None:
        return locator, None
    owner, name = parsed
    repo = (client or GitHubClient()).get_repo(owner, name)
    logger.debug("Resolved %s to %s (default branch %s)", locator, repo.clone_url, repo.default_branch)
    return repo.clone_url, repo.default_branch
