"""Tree resolution — metadata + recursive listing, filtered and capped."""

from __future__ import annotations

import logging

from repo_ingest.domain.entities import (
    DEFAULT_BRANCH,
    DEFAULT_DESCRIPTION,
    MAX_TREE_ENTRIES,
    ResolvedTree,
)
from repo_ingest.domain.exceptions import IngestionStageError, RepoIngestError
from repo_ingest.domain.ports.repo_fetcher import RepoFetcher
from repo_ingest.domain.value_objects import RepositoryCoordinates
from repo_ingest.services.path_classifier import filter_tree

logger = logging.getLogger(__name__)


def cap_tree(paths: list[str], limit: int = MAX_TREE_ENTRIES) -> tuple[list[str], bool]:
    """Keep the first *limit* paths; report whether anything was cut."""
    if len(paths) > limit:
        return paths[:limit], True
    return paths, False


class TreeResolver:
    """Resolve repository coordinates into a filtered blob listing.

    Both upstream calls are mandatory: any failure is re-raised as an
    :class:`IngestionStageError` naming the stage that broke.
    """

    def __init__(self, fetcher: RepoFetcher, max_entries: int = MAX_TREE_ENTRIES) -> None:
        self._fetcher = fetcher
        self._max_entries = max_entries

    async def resolve(self, coords: RepositoryCoordinates) -> ResolvedTree:
        try:
            metadata = await self._fetcher.fetch_metadata(coords)
        except RepoIngestError as exc:
            logger.warning("Metadata fetch failed for %s: %s", coords.full_name, exc)
            raise IngestionStageError("repository metadata", exc) from exc

        default_branch = (
            DEFAULT_BRANCH if metadata.default_branch is None else metadata.default_branch
        )
        description = (
            DEFAULT_DESCRIPTION if metadata.description is None else metadata.description
        )
        # An empty reported default still cannot be used as a ref
        branch = coords.branch or default_branch or DEFAULT_BRANCH

        try:
            nodes = await self._fetcher.fetch_tree(coords, branch)
        except RepoIngestError as exc:
            logger.warning("Tree fetch failed for %s@%s: %s", coords.full_name, branch, exc)
            raise IngestionStageError("repository tree", exc) from exc

        blobs = [node.path for node in nodes if node.type == "blob"]
        retained = filter_tree(blobs)
        tree, is_truncated = cap_tree(retained, self._max_entries)

        logger.info(
            "Resolved %s@%s: %d blobs, %d retained%s",
            coords.full_name,
            branch,
            len(blobs),
            len(retained),
            " (truncated)" if is_truncated else "",
        )
        return ResolvedTree(
            default_branch=default_branch,
            branch=branch,
            description=description,
            tree=tree,
            is_truncated=is_truncated,
        )
