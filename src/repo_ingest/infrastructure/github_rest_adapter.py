"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from repo_ingest.domain.entities import RepoMetadata, TreeNode
from repo_ingest.domain.exceptions import (
    DecodeError,
    GitHubRateLimitError,
    RepositoryAccessDeniedError,
    ResourceNotFoundError,
    TransportError,
    UpstreamStatusError,
    describe_cause_chain,
)
from repo_ingest.domain.value_objects import RepositoryCoordinates

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_MAX_ERROR_BODY = 500


def decode_content_envelope(payload: Any) -> str:
    """Decode a GitHub ``{"content": "<base64>", "encoding": "base64"}`` envelope.

    GitHub wraps base64 at 60 columns, so line breaks are stripped before a
    strict decode.  Invalid UTF-8 is replaced rather than rejected.
    """
    if not isinstance(payload, dict):
        raise DecodeError("Content envelope is not a JSON object.")
    content = payload.get("content")
    if not isinstance(content, str):
        raise DecodeError("Content envelope has no 'content' field.")
    encoding = payload.get("encoding", "base64")
    if encoding != "base64":
        raise DecodeError(f"Unsupported content encoding '{encoding}'.")

    cleaned = content.replace("\n", "").replace("\r", "")
    try:
        raw = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base64 content: {exc}") from exc
    return raw.decode("utf-8", errors="replace")


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        api_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "repo-ingest/1.0",
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, coords: RepositoryCoordinates) -> RepoMetadata:
        """GET /repos/{owner}/{repo} → RepoMetadata."""
        data = await self._api_get_json(
            f"/repos/{coords.owner}/{coords.name}",
            not_found=(
                f"Repository {coords.full_name} not found. "
                "Check the URL or provide a token for private repositories."
            ),
        )
        if not isinstance(data, dict):
            raise DecodeError("Repository metadata is not a JSON object.")
        branch = data.get("default_branch")
        description = data.get("description")
        return RepoMetadata(
            default_branch=branch if isinstance(branch, str) else None,
            description=description if isinstance(description, str) else None,
        )

    async def fetch_tree(self, coords: RepositoryCoordinates, branch: str) -> list[TreeNode]:
        """GET /repos/{owner}/{repo}/git/trees/{branch}?recursive=1 → [TreeNode]."""
        data = await self._api_get_json(
            f"/repos/{coords.owner}/{coords.name}/git/trees/{quote(branch)}",
            params={"recursive": "1"},
            not_found=f"Branch '{branch}' not found in {coords.full_name}.",
        )
        if not isinstance(data, dict):
            raise DecodeError("Tree listing is not a JSON object.")
        if data.get("truncated"):
            logger.warning(
                "GitHub truncated the tree listing for %s@%s", coords.full_name, branch
            )

        items = data.get("tree")
        if not isinstance(items, list):
            return []
        return [
            TreeNode(path=item["path"], type=str(item.get("type", "")))
            for item in items
            if isinstance(item, dict) and isinstance(item.get("path"), str)
        ]

    async def fetch_readme(self, coords: RepositoryCoordinates, branch: str) -> str:
        """GET /repos/{owner}/{repo}/readme → decoded text."""
        data = await self._api_get_json(
            f"/repos/{coords.owner}/{coords.name}/readme",
            params={"ref": branch},
            not_found=f"No README in {coords.full_name}.",
        )
        return decode_content_envelope(data)

    async def fetch_file_content(
        self, coords: RepositoryCoordinates, path: str, branch: str
    ) -> str:
        """GET /repos/{owner}/{repo}/contents/{path} → decoded text."""
        data = await self._api_get_json(
            f"/repos/{coords.owner}/{coords.name}/contents/{quote(path)}",
            params={"ref": branch},
            not_found=f"File not found: {path}",
        )
        return decode_content_envelope(data)

    async def _api_get_json(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
        *,
        not_found: str,
    ) -> Any:
        resp = await self._api_get(endpoint, params=params, not_found=not_found)
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON from {endpoint}: {exc}") from exc

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
        *,
        not_found: str,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._api_url}{endpoint}"
        try:
            resp = await self._client.get(
                url, headers=self._api_headers, params=params
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"Timed out fetching {url}: {describe_cause_chain(exc)}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Network error fetching {url}: {describe_cause_chain(exc)}"
            ) from exc

        if resp.status_code == 200:
            return resp

        body = resp.text[:_MAX_ERROR_BODY]

        if resp.status_code == 404:
            raise ResourceNotFoundError(not_found, status_code=404, body=body)

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                    "Set the GITHUB_TOKEN environment variable to increase the limit.",
                    status_code=403,
                    body=body,
                )
            raise RepositoryAccessDeniedError(
                "Access denied. The repository may be private.",
                status_code=403,
                body=body,
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError(
                "GitHub API rate limit exceeded (HTTP 429).", status_code=429, body=body
            )

        raise UpstreamStatusError(
            f"GitHub API returned HTTP {resp.status_code} for {url}: {body}",
            status_code=resp.status_code,
            body=body,
        )
