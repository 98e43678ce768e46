from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from repo_ingest.domain.entities import RepoMetadata, TreeNode
from repo_ingest.domain.exceptions import ResourceNotFoundError, TransportError
from repo_ingest.domain.value_objects import RepositoryCoordinates


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


class FakeRepoFetcher:
    """In-memory RepoFetcher that records calls and peak concurrency."""

    def __init__(
        self,
        *,
        tree: list[str] | None = None,
        files: dict[str, str] | None = None,
        readme: str | None = None,
        metadata: RepoMetadata | None = None,
        failing: tuple[str, ...] = (),
        metadata_error: Exception | None = None,
        tree_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.tree = tree or []
        self.files = files or {}
        self.readme = readme
        self.metadata = metadata or RepoMetadata(default_branch="main", description="A repo")
        self.failing = set(failing)
        self.metadata_error = metadata_error
        self.tree_error = tree_error
        self.delay = delay
        self.content_calls: list[str] = []
        self.content_branches: set[str] = set()
        self.tree_branches: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_metadata(self, coords: RepositoryCoordinates) -> RepoMetadata:
        if self.metadata_error:
            raise self.metadata_error
        return self.metadata

    async def fetch_tree(self, coords: RepositoryCoordinates, branch: str) -> list[TreeNode]:
        self.tree_branches.append(branch)
        if self.tree_error:
            raise self.tree_error
        return [TreeNode(path=p, type="blob") for p in self.tree]

    async def fetch_readme(self, coords: RepositoryCoordinates, branch: str) -> str:
        if self.readme is None:
            raise ResourceNotFoundError("No README", status_code=404)
        return self.readme

    async def fetch_file_content(
        self, coords: RepositoryCoordinates, path: str, branch: str
    ) -> str:
        self.content_calls.append(path)
        self.content_branches.add(branch)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if path in self.failing:
                raise TransportError(f"connection reset fetching {path}")
            if path not in self.files:
                raise ResourceNotFoundError(f"File not found: {path}", status_code=404)
            return self.files[path]
        finally:
            self.in_flight -= 1


@pytest.fixture
def make_fetcher() -> Callable[..., FakeRepoFetcher]:
    return FakeRepoFetcher


@pytest.fixture
def coords() -> RepositoryCoordinates:
    return RepositoryCoordinates.create("octo", "demo")
