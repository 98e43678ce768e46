"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_ingest.domain.exceptions import InvalidRepositoryError

_GITHUB_URL_RE = re.compile(
    r"^https?://github\.com/(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)(?:\.git)?/?$"
)
_NAME_RE = re.compile(r"^[A-Za-z0-9\-_.]+$")


@dataclass(frozen=True, slots=True)
class RepositoryCoordinates:
    """Validated repository reference.

    ``branch`` is ``None`` unless the caller pinned one; the resolver then
    falls back to the repository's reported default branch.  Owner and name
    are restricted to GitHub's character set so they can be interpolated
    into API paths without escaping.
    """

    owner: str
    name: str
    branch: str | None = None

    @classmethod
    def create(cls, owner: str, name: str, branch: str | None = None) -> RepositoryCoordinates:
        """Validate an owner/name pair."""
        owner = owner.strip()
        name = name.strip()
        if name.endswith(".git"):
            name = name[: -len(".git")]
        if not all(_NAME_RE.match(part) and part not in (".", "..") for part in (owner, name)):
            raise InvalidRepositoryError(
                f"Invalid owner or repository name: '{owner}/{name}'."
            )
        branch = branch.strip() if branch else None
        return cls(owner=owner, name=name, branch=branch or None)

    @classmethod
    def from_url(cls, url: str, branch: str | None = None) -> RepositoryCoordinates:
        """Parse and validate a ``https://github.com/<owner>/<repo>`` URL."""
        url = url.strip()
        match = _GITHUB_URL_RE.match(url)
        if not match:
            raise InvalidRepositoryError(
                f"Invalid GitHub URL: '{url}'. "
                "Expected format: https://github.com/<owner>/<repo>"
            )
        return cls.create(match["owner"], match["repo"], branch)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"
