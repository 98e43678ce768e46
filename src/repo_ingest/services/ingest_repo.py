"""Ingest-repository use case — the main orchestration pipeline.

This is the single entry point for remote ingestion.  It depends only on the
:class:`RepoFetcher` port and the pure service modules; the interface layer
injects the concrete GitHub adapter at runtime.
"""

from __future__ import annotations

import asyncio
import logging

from repo_ingest.domain.entities import (
    FetchFailure,
    FetchOutcome,
    FetchStage,
    IngestionResult,
    RepoInfo,
)
from repo_ingest.domain.ports.repo_fetcher import RepoFetcher
from repo_ingest.domain.value_objects import RepositoryCoordinates
from repo_ingest.services.content_assembler import format_dependencies
from repo_ingest.services.content_fetcher import DEFAULT_CONCURRENCY, ContentFetcher
from repo_ingest.services.path_classifier import is_source_candidate, present_manifests
from repo_ingest.services.relevance_scorer import select_top
from repo_ingest.services.tree_resolver import TreeResolver

logger = logging.getLogger(__name__)


def collect_failures(stage: FetchStage, outcomes: list[FetchOutcome]) -> list[FetchFailure]:
    return [
        FetchFailure(stage=stage, path=o.path, reason=o.reason or "unknown error")
        for o in outcomes
        if not o.ok
    ]


class IngestRepoUseCase:
    """Orchestrates the repository → bundle pipeline.

    Parameters
    ----------
    repo_fetcher:
        Adapter that can fetch metadata, tree and file content.
    fetch_concurrency:
        Maximum number of content requests in flight at once.
    """

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        fetch_concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self._fetcher = repo_fetcher
        self._concurrency = fetch_concurrency

    async def execute(
        self, coords: RepositoryCoordinates, max_files: int | None = None
    ) -> IngestionResult:
        """Run the full pipeline and return the ingestion bundle."""
        logger.info("Ingesting %s", coords.full_name)

        # 1. Mandatory: metadata + filtered tree (raises IngestionStageError)
        resolved = await TreeResolver(self._fetcher).resolve(coords)
        branch = resolved.branch

        # 2. Pure selection, decided before any content is requested
        manifests = present_manifests(resolved.tree)
        candidates = [p for p in resolved.tree if is_source_candidate(p)]
        selected = select_top(candidates, max_files)
        logger.info(
            "Selected %d of %d candidate files from %s",
            len(selected),
            len(candidates),
            coords.full_name,
        )

        # 3. Best-effort fetches share one bounded pool
        fetcher = ContentFetcher(self._fetcher, self._concurrency)
        readme_outcome, manifest_outcomes, source_outcomes = await asyncio.gather(
            fetcher.fetch_readme(coords, branch),
            fetcher.fetch_outcomes(coords, branch, manifests),
            fetcher.fetch_outcomes(coords, branch, selected),
        )

        diagnostics = (
            collect_failures(FetchStage.README, [readme_outcome])
            + collect_failures(FetchStage.DEPENDENCY, manifest_outcomes)
            + collect_failures(FetchStage.SOURCE, source_outcomes)
        )
        if diagnostics:
            logger.info(
                "%d best-effort fetch(es) failed for %s", len(diagnostics), coords.full_name
            )

        return IngestionResult(
            info=RepoInfo(
                owner=coords.owner,
                repo=coords.name,
                default_branch=resolved.default_branch,
                description=resolved.description,
            ),
            tree=resolved.tree,
            readme=readme_outcome.entry.content if readme_outcome.entry else "",
            dependencies=format_dependencies(
                o.entry for o in manifest_outcomes if o.entry is not None
            ),
            source_files=[o.entry for o in source_outcomes if o.entry is not None],
            is_truncated=resolved.is_truncated,
            diagnostics=diagnostics,
        )
