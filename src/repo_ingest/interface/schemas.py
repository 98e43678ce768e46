"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from repo_ingest.domain.entities import IngestionResult


class IngestRepoRequest(BaseModel):
    """Request body for ``POST /api/repo``.

    Either ``github_url`` or the ``owner`` + ``repo`` pair must be supplied.
    """

    github_url: str | None = None
    owner: str | None = None
    repo: str | None = None
    branch: str | None = None
    token: str | None = None
    max_files: int | None = None
    proxy: str | None = None
    include_diagnostics: bool = False
    render_context: bool = False

    @field_validator("github_url")
    @classmethod
    def _must_be_github(cls, v: str | None) -> str | None:
        if v is None:
            return v
        stripped = v.strip()
        if "github.com" not in stripped.lower():
            msg = (
                f"Invalid URL: '{stripped}'. "
                "Only GitHub repository URLs are supported."
            )
            raise ValueError(msg)
        return stripped

    @model_validator(mode="after")
    def _needs_a_repository(self) -> IngestRepoRequest:
        if not self.github_url and not (self.owner and self.repo):
            msg = "Provide either github_url or both owner and repo."
            raise ValueError(msg)
        return self


class IngestLocalRequest(BaseModel):
    """Request body for ``POST /api/local``."""

    path: str = Field(min_length=1)
    max_files: int | None = None
    include_diagnostics: bool = False
    render_context: bool = False


class RepoInfoSchema(BaseModel):
    owner: str
    repo: str
    default_branch: str
    description: str


class FileEntrySchema(BaseModel):
    path: str
    content: str


class FetchFailureSchema(BaseModel):
    stage: str
    path: str
    reason: str


class IngestResponse(BaseModel):
    """Successful ingestion bundle."""

    info: RepoInfoSchema
    tree: list[str]
    readme: str
    dependencies: str
    source_files: list[FileEntrySchema]
    is_truncated: bool
    diagnostics: list[FetchFailureSchema] | None = None
    context: str | None = None
    context_tokens: int | None = None

    @classmethod
    def from_result(
        cls, result: IngestionResult, *, include_diagnostics: bool = False
    ) -> IngestResponse:
        info = result.info
        return cls(
            info=RepoInfoSchema(
                owner=info.owner,
                repo=info.repo,
                default_branch=info.default_branch,
                description=info.description,
            ),
            tree=list(result.tree),
            readme=result.readme,
            dependencies=result.dependencies,
            source_files=[
                FileEntrySchema(path=f.path, content=f.content) for f in result.source_files
            ],
            is_truncated=result.is_truncated,
            diagnostics=(
                [
                    FetchFailureSchema(stage=d.stage.value, path=d.path, reason=d.reason)
                    for d in result.diagnostics
                ]
                if include_diagnostics
                else None
            ),
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
