"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

MAX_TREE_ENTRIES = 1000
DEFAULT_BRANCH = "main"
DEFAULT_DESCRIPTION = "No description provided."


class FetchStage(str, Enum):
    """Which best-effort fetch a diagnostic record belongs to."""

    README = "readme"
    DEPENDENCY = "dependency"
    SOURCE = "source"


@dataclass(frozen=True, slots=True)
class TreeNode:
    """A single node from the GitHub tree API (blob or sub-tree)."""

    path: str
    type: str  # "blob" or "tree"


@dataclass(frozen=True, slots=True)
class RepoMetadata:
    """Raw repository metadata; missing fields stay ``None``."""

    default_branch: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedTree:
    """Filtered, capped blob listing of one branch.

    ``branch`` is the ref that was listed; ``default_branch`` is what the
    repository reports, which differs when the caller pinned a branch.
    """

    default_branch: str
    branch: str
    description: str
    tree: list[str]
    is_truncated: bool = False


@dataclass(frozen=True, slots=True)
class ScoredPath:
    """A candidate path annotated with its relevance score."""

    path: str
    score: int


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A fetched file with its decoded content."""

    path: str
    content: str


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Result of a single best-effort fetch: either an entry or a failure reason."""

    path: str
    entry: FileEntry | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.entry is not None


@dataclass(frozen=True, slots=True)
class FetchFailure:
    """Diagnostic record for a fetch that was dropped from the bundle."""

    stage: FetchStage
    path: str
    reason: str


@dataclass(frozen=True, slots=True)
class RepoInfo:
    """Identity and description of the ingested repository."""

    owner: str
    repo: str
    default_branch: str
    description: str


@dataclass(frozen=True, slots=True)
class IngestionResult:
    """The bundle handed back to the caller."""

    info: RepoInfo
    tree: list[str]
    readme: str
    dependencies: str
    source_files: list[FileEntry]
    is_truncated: bool
    diagnostics: list[FetchFailure] = field(default_factory=list)
