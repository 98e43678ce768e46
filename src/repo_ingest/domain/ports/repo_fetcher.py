"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_ingest.domain.entities import RepoMetadata, TreeNode
from repo_ingest.domain.value_objects import RepositoryCoordinates


class RepoFetcher(Protocol):
    """Abstract contract for fetching repository data from a hosting API.

    Implementations raise :class:`~repo_ingest.domain.exceptions.RepoIngestError`
    subclasses only; callers rely on that to isolate per-file failures.
    """

    async def fetch_metadata(self, coords: RepositoryCoordinates) -> RepoMetadata:
        """Return high-level repository metadata."""
        ...

    async def fetch_tree(self, coords: RepositoryCoordinates, branch: str) -> list[TreeNode]:
        """Return the recursive tree listing for the given branch."""
        ...

    async def fetch_readme(self, coords: RepositoryCoordinates, branch: str) -> str:
        """Return the decoded README text."""
        ...

    async def fetch_file_content(
        self, coords: RepositoryCoordinates, path: str, branch: str
    ) -> str:
        """Return the decoded text content of a single file."""
        ...
