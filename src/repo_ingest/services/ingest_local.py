"""Ingest-local-folder use case — same bundle shape, read from disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from repo_ingest.domain.entities import IngestionResult, RepoInfo
from repo_ingest.domain.exceptions import (
    LocalFolderNotFoundError,
    LocalPathNotAllowedError,
)
from repo_ingest.domain.ports.local_scanner import LocalScanner
from repo_ingest.services.content_assembler import format_dependencies
from repo_ingest.services.path_classifier import (
    filter_tree,
    is_readme,
    is_source_candidate,
    present_manifests,
)
from repo_ingest.services.relevance_scorer import select_top
from repo_ingest.services.tree_resolver import cap_tree

logger = logging.getLogger(__name__)

LOCAL_OWNER = "local"
LOCAL_BRANCH = "local"
LOCAL_DESCRIPTION = "Local folder analysis"


class IngestLocalFolderUseCase:
    """Build an :class:`IngestionResult` from a directory on disk.

    When *allowed_root* is set, only directories at or below it may be read.
    """

    def __init__(self, scanner: LocalScanner, allowed_root: Path | None = None) -> None:
        self._scanner = scanner
        self._allowed_root = allowed_root.expanduser().resolve() if allowed_root else None

    async def execute(self, root: str | Path, max_files: int | None = None) -> IngestionResult:
        root_path = Path(root).expanduser()
        if self._allowed_root is not None:
            resolved = root_path.resolve()
            if not resolved.is_relative_to(self._allowed_root):
                raise LocalPathNotAllowedError(
                    f"Path is outside the allowed ingestion root: {root_path}"
                )
            root_path = resolved
        if not root_path.is_dir():
            raise LocalFolderNotFoundError(f"Not a directory: {root_path}")

        logger.info("Ingesting local folder %s", root_path)
        entries = await asyncio.to_thread(self._scanner.scan, root_path)
        contents = {e.path: e for e in entries}

        tree, is_truncated = cap_tree(filter_tree(e.path for e in entries))

        readme = next((contents[p].content for p in tree if is_readme(p)), "")
        dependencies = format_dependencies(contents[name] for name in present_manifests(tree))
        selected = select_top([p for p in tree if is_source_candidate(p)], max_files)

        return IngestionResult(
            info=RepoInfo(
                owner=LOCAL_OWNER,
                repo=root_path.resolve().name or "local-project",
                default_branch=LOCAL_BRANCH,
                description=LOCAL_DESCRIPTION,
            ),
            tree=tree,
            readme=readme,
            dependencies=dependencies,
            source_files=[contents[p] for p in selected],
            is_truncated=is_truncated,
        )
