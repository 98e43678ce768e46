"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class RepoIngestError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidRepositoryError(RepoIngestError):
    """The supplied URL or owner/name pair is not a valid repository reference."""


class LocalFolderNotFoundError(RepoIngestError):
    """The local path to ingest does not exist or is not a directory."""


class LocalPathNotAllowedError(RepoIngestError):
    """Local ingestion is disabled, or the path lies outside the allowed root."""


class ConfigurationError(RepoIngestError):
    """A required setting (e.g. a mandatory GitHub token) is missing."""


# ── Transport / upstream errors ─────────────────────────────────────────────


class TransportError(RepoIngestError):
    """Network-level failure (connection, TLS, timeout) talking to the upstream API."""


class UpstreamStatusError(RepoIngestError):
    """The upstream API answered with a non-success HTTP status."""

    def __init__(self, message: str, *, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResourceNotFoundError(UpstreamStatusError):
    """The repository or path does not exist or is not visible (404)."""


class RepositoryAccessDeniedError(UpstreamStatusError):
    """Access to the repository was denied (403)."""


class GitHubRateLimitError(UpstreamStatusError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class DecodeError(RepoIngestError):
    """Malformed JSON payload or content envelope."""


# ── Pipeline errors ─────────────────────────────────────────────────────────


class IngestionStageError(RepoIngestError):
    """A mandatory pipeline stage failed; the whole ingestion is aborted.

    Always raised ``from`` the underlying error so the cause chain survives.
    """

    def __init__(self, stage: str, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"Failed to fetch {stage}: {describe_cause_chain(cause)}")


def describe_cause_chain(exc: BaseException) -> str:
    """Render *exc* and its ``__cause__`` chain as ``msg | Caused by: msg ...``."""
    parts: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        parts.append(str(current) or type(current).__name__)
        current = current.__cause__ or current.__context__
    return " | Caused by: ".join(parts)
