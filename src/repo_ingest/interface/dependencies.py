"""FastAPI dependency injection wiring."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from repo_ingest.domain.exceptions import ConfigurationError, LocalPathNotAllowedError
from repo_ingest.infrastructure.config import Settings, get_settings
from repo_ingest.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_ingest.infrastructure.http_client import build_http_client
from repo_ingest.infrastructure.local_fs_adapter import LocalFolderScanner
from repo_ingest.services.ingest_local import IngestLocalFolderUseCase
from repo_ingest.services.ingest_repo import IngestRepoUseCase

_http_client: httpx.AsyncClient | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    _http_client = build_http_client(get_settings())


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None


def resolve_github_token(explicit: str | None, settings: Settings) -> str | None:
    """Prefer a non-blank request token, then ``GITHUB_TOKEN``."""
    token = explicit.strip() if explicit else ""
    if not token and settings.github_token:
        token = settings.github_token.get_secret_value().strip()
    if not token and settings.require_github_token:
        raise ConfigurationError(
            "A GitHub token is required. Pass one in the request or set GITHUB_TOKEN."
        )
    return token or None


class UseCaseProvider:
    """Builds per-request use cases around the shared (or a dedicated) HTTP client."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None) -> None:
        self._settings = settings
        self._client = client

    @property
    def settings(self) -> Settings:
        return self._settings

    @asynccontextmanager
    async def repo(
        self, token: str | None = None, proxy: str | None = None
    ) -> AsyncIterator[IngestRepoUseCase]:
        """Yield a remote use case; a request-level proxy gets its own client."""
        resolved = resolve_github_token(token, self._settings)
        if proxy and proxy.strip():
            async with build_http_client(self._settings, proxy=proxy) as client:
                yield self._build_repo(client, resolved)
        else:
            assert self._client is not None, "startup() was not called"
            yield self._build_repo(self._client, resolved)

    def local(self) -> IngestLocalFolderUseCase:
        """Local ingestion reads server disk, so it needs a configured root."""
        root = self._settings.local_ingest_root
        if root is None:
            raise LocalPathNotAllowedError(
                "Local folder ingestion is disabled. Set LOCAL_INGEST_ROOT to enable it."
            )
        return IngestLocalFolderUseCase(
            LocalFolderScanner(max_file_size=self._settings.local_max_file_size_bytes),
            allowed_root=root,
        )

    def _build_repo(self, client: httpx.AsyncClient, token: str | None) -> IngestRepoUseCase:
        adapter = GitHubRestAdapter(
            client=client, token=token, api_url=self._settings.github_api_url
        )
        return IngestRepoUseCase(
            repo_fetcher=adapter, fetch_concurrency=self._settings.fetch_concurrency
        )


def get_provider() -> UseCaseProvider:
    """Return the provider bound to the current settings and shared client."""
    return UseCaseProvider(get_settings(), _http_client)
