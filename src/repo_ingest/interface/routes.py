"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from repo_ingest.domain.entities import IngestionResult
from repo_ingest.domain.value_objects import RepositoryCoordinates
from repo_ingest.interface.dependencies import UseCaseProvider, get_provider
from repo_ingest.interface.schemas import (
    IngestLocalRequest,
    IngestRepoRequest,
    IngestResponse,
)
from repo_ingest.services.content_assembler import render_bundle
from repo_ingest.services.token_budget import count_tokens

router = APIRouter(prefix="/api")


def _to_response(
    result: IngestionResult,
    *,
    include_diagnostics: bool,
    render_context: bool,
    token_budget: int,
) -> IngestResponse:
    response = IngestResponse.from_result(result, include_diagnostics=include_diagnostics)
    if render_context:
        context = render_bundle(result, max_source_tokens=token_budget)
        response.context = context
        response.context_tokens = count_tokens(context)
    return response


@router.post(
    "/repo",
    response_model=IngestResponse,
    response_model_exclude_none=True,
    responses={
        401: {"description": "GitHub token required but missing"},
        403: {"description": "Repository is private"},
        404: {"description": "Repository or branch not found"},
        422: {"description": "Invalid repository reference"},
        429: {"description": "GitHub API rate limit exceeded"},
        502: {"description": "GitHub API or network error"},
    },
)
async def ingest_repo(
    body: IngestRepoRequest,
    provider: UseCaseProvider = Depends(get_provider),
) -> IngestResponse:
    """Ingest a GitHub repository into a bounded bundle."""
    if body.github_url:
        coords = RepositoryCoordinates.from_url(body.github_url, body.branch)
    else:
        coords = RepositoryCoordinates.create(body.owner or "", body.repo or "", body.branch)

    async with provider.repo(token=body.token, proxy=body.proxy) as use_case:
        result = await use_case.execute(coords, max_files=_max_files(body.max_files, provider))

    return _to_response(
        result,
        include_diagnostics=body.include_diagnostics,
        render_context=body.render_context,
        token_budget=provider.settings.context_token_budget,
    )


@router.post(
    "/local",
    response_model=IngestResponse,
    response_model_exclude_none=True,
    responses={
        403: {"description": "Local ingestion disabled or path outside the allowed root"},
        422: {"description": "Path is not a directory"},
    },
)
async def ingest_local(
    body: IngestLocalRequest,
    provider: UseCaseProvider = Depends(get_provider),
) -> IngestResponse:
    """Ingest a directory on the server's filesystem."""
    result = await provider.local().execute(
        body.path, max_files=_max_files(body.max_files, provider)
    )
    return _to_response(
        result,
        include_diagnostics=body.include_diagnostics,
        render_context=body.render_context,
        token_budget=provider.settings.context_token_budget,
    )


def _max_files(requested: int | None, provider: UseCaseProvider) -> int:
    return provider.settings.default_max_files if requested is None else requested
