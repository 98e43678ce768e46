"""Best-effort content fetching behind a bounded worker pool."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from repo_ingest.domain.entities import FetchOutcome, FileEntry
from repo_ingest.domain.exceptions import RepoIngestError
from repo_ingest.domain.ports.repo_fetcher import RepoFetcher
from repo_ingest.domain.value_objects import RepositoryCoordinates

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8

README_PATH = "README"


class ContentFetcher:
    """Fetch file contents independently; a failure only drops that file.

    All fetches issued through one instance share a single semaphore, so the
    number of in-flight requests never exceeds *concurrency* regardless of how
    many paths the caller asks for.
    """

    def __init__(self, fetcher: RepoFetcher, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._fetcher = fetcher
        self._sem = asyncio.Semaphore(concurrency)

    async def fetch_one(
        self, coords: RepositoryCoordinates, branch: str, path: str
    ) -> FetchOutcome:
        async with self._sem:
            try:
                content = await self._fetcher.fetch_file_content(coords, path, branch)
            except RepoIngestError as exc:
                logger.debug("Skipping %s: %s", path, exc)
                return FetchOutcome(path=path, reason=str(exc))
        return FetchOutcome(path=path, entry=FileEntry(path=path, content=content))

    async def fetch_readme(self, coords: RepositoryCoordinates, branch: str) -> FetchOutcome:
        async with self._sem:
            try:
                content = await self._fetcher.fetch_readme(coords, branch)
            except RepoIngestError as exc:
                logger.debug("No README for %s: %s", coords.full_name, exc)
                return FetchOutcome(path=README_PATH, reason=str(exc))
        return FetchOutcome(path=README_PATH, entry=FileEntry(path=README_PATH, content=content))

    async def fetch_outcomes(
        self, coords: RepositoryCoordinates, branch: str, paths: Sequence[str]
    ) -> list[FetchOutcome]:
        """Fetch *paths* concurrently; outcomes come back in input order."""
        return list(
            await asyncio.gather(*(self.fetch_one(coords, branch, p) for p in paths))
        )

    async def fetch_many(
        self, coords: RepositoryCoordinates, branch: str, paths: Sequence[str]
    ) -> list[FileEntry]:
        """Like :meth:`fetch_outcomes` but keep only the successful entries."""
        outcomes = await self.fetch_outcomes(coords, branch, paths)
        return [o.entry for o in outcomes if o.entry is not None]
