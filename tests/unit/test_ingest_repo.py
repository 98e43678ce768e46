from __future__ import annotations

import pytest

from repo_ingest.domain.entities import FetchStage, RepoMetadata
from repo_ingest.domain.exceptions import IngestionStageError, TransportError
from repo_ingest.domain.value_objects import RepositoryCoordinates
from repo_ingest.services.ingest_repo import IngestRepoUseCase


@pytest.mark.anyio
async def test_scenario_selects_by_score_and_skips_special_files(make_fetcher, coords) -> None:
    tree = ["src/main.go", "src/main_test.go", "README.md", "docs/setup.md", "package.json"]
    repo = make_fetcher(
        tree=tree,
        files={p: f"// {p}" for p in tree},
        readme="# Demo",
    )

    result = await IngestRepoUseCase(repo).execute(coords, max_files=2)

    assert [f.path for f in result.source_files] == ["src/main.go", "src/main_test.go"]
    assert "README.md" not in repo.content_calls
    assert result.readme == "# Demo"
    assert result.dependencies == "\n--- package.json ---\n// package.json\n"
    assert result.tree == tree
    assert result.is_truncated is False
    assert result.diagnostics == []


@pytest.mark.anyio
async def test_single_file_budget_takes_only_the_best(make_fetcher, coords) -> None:
    tree = ["src/main.go", "src/main_test.go", "docs/setup.md"]
    repo = make_fetcher(tree=tree, files={p: "x" for p in tree})

    result = await IngestRepoUseCase(repo).execute(coords, max_files=1)

    assert [f.path for f in result.source_files] == ["src/main.go"]


@pytest.mark.anyio
async def test_info_carries_metadata_and_defaults(make_fetcher, coords) -> None:
    repo = make_fetcher(tree=[], metadata=RepoMetadata(default_branch=None, description=None))

    result = await IngestRepoUseCase(repo).execute(coords)

    assert result.info.owner == "octo"
    assert result.info.repo == "demo"
    assert result.info.default_branch == "main"
    assert result.info.description == "No description provided."
    assert result.source_files == []
    assert result.readme == ""
    assert result.dependencies == ""


@pytest.mark.anyio
async def test_manifests_follow_fixed_order_and_skip_failures(make_fetcher, coords) -> None:
    tree = ["go.mod", "requirements.txt", "package.json", "Cargo.toml", "web/pom.xml"]
    repo = make_fetcher(
        tree=tree,
        files={"go.mod": "module x", "requirements.txt": "httpx", "package.json": "{}"},
        failing=("requirements.txt",),
    )

    result = await IngestRepoUseCase(repo).execute(coords)

    assert result.dependencies == (
        "\n--- package.json ---\n{}\n"
        "\n--- go.mod ---\nmodule x\n"
    )
    failed = {(d.stage, d.path) for d in result.diagnostics}
    assert (FetchStage.DEPENDENCY, "requirements.txt") in failed
    assert (FetchStage.DEPENDENCY, "Cargo.toml") in failed
    assert (FetchStage.README, "README") in failed
    assert "web/pom.xml" not in repo.content_calls


@pytest.mark.anyio
async def test_source_failures_are_omitted_and_reported(make_fetcher, coords) -> None:
    tree = ["src/app.py", "src/api.py", "src/util.py"]
    repo = make_fetcher(tree=tree, files={p: p for p in tree}, failing=("src/api.py",))

    result = await IngestRepoUseCase(repo).execute(coords, max_files=3)

    assert [f.path for f in result.source_files] == ["src/app.py", "src/util.py"]
    sources = [d for d in result.diagnostics if d.stage is FetchStage.SOURCE]
    assert [d.path for d in sources] == ["src/api.py"]
    assert "connection reset" in sources[0].reason


@pytest.mark.anyio
@pytest.mark.parametrize("requested, expected", [(None, 5), (0, 1), (1000, 200)])
async def test_max_files_is_clamped(make_fetcher, coords, requested, expected) -> None:
    tree = [f"src/mod{i}.py" for i in range(250)]
    repo = make_fetcher(tree=tree, files={p: "" for p in tree})

    result = await IngestRepoUseCase(repo, fetch_concurrency=16).execute(coords, max_files=requested)

    assert len(result.source_files) == expected


@pytest.mark.anyio
async def test_truncated_tree_bounds_selection(make_fetcher, coords) -> None:
    tree = [f"docs/page{i}.md" for i in range(1000)] + ["src/main.go"]
    repo = make_fetcher(tree=tree, files={p: "" for p in tree})

    result = await IngestRepoUseCase(repo).execute(coords, max_files=3)

    assert len(result.tree) == 1000
    assert result.is_truncated is True
    assert "src/main.go" not in result.tree
    assert all(f.path in result.tree for f in result.source_files)


@pytest.mark.anyio
async def test_tree_failure_aborts(make_fetcher, coords) -> None:
    repo = make_fetcher(tree_error=TransportError("Timed out fetching tree"))

    with pytest.raises(IngestionStageError, match="repository tree"):
        await IngestRepoUseCase(repo).execute(coords)
    assert repo.content_calls == []


@pytest.mark.anyio
async def test_pinned_branch_is_fetched_but_info_keeps_repository_default(make_fetcher) -> None:
    repo = make_fetcher(
        tree=["src/main.go"],
        files={"src/main.go": "package main"},
        metadata=RepoMetadata(default_branch="main", description="A repo"),
    )
    coords = RepositoryCoordinates.create("octo", "demo", branch="feature")

    result = await IngestRepoUseCase(repo).execute(coords)

    assert result.info.default_branch == "main"
    assert repo.tree_branches == ["feature"]
    assert repo.content_branches == {"feature"}
    assert [f.path for f in result.source_files] == ["src/main.go"]
