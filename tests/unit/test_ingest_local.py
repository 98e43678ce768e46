from __future__ import annotations

from pathlib import Path

import pytest

from repo_ingest.domain.exceptions import LocalFolderNotFoundError, LocalPathNotAllowedError
from repo_ingest.infrastructure.local_fs_adapter import LocalFolderScanner
from repo_ingest.services.ingest_local import IngestLocalFolderUseCase


def write(root: Path, rel: str, content: str | bytes) -> None:
    target = root / rel
    target.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        target.write_bytes(content)
    else:
        target.write_text(content, encoding="utf-8")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "demo-project"
    write(root, "README.md", "# Demo\n")
    write(root, "package.json", '{"name": "demo"}')
    write(root, "requirements.txt", "httpx\n")
    write(root, "src/server.ts", "export const server = 1;\n")
    write(root, "src/util.ts", "export const util = 1;\n")
    write(root, "tests/server.test.ts", "test('x', () => {});\n")
    write(root, "node_modules/left-pad/index.js", "module.exports = 1;\n")
    write(root, ".git/HEAD", "ref: refs/heads/main\n")
    write(root, ".vscode/settings.json", "{}")
    write(root, ".env", "TOKEN=abc\n")
    write(root, "assets/logo.bin", b"\x89PNG\xff\xfe\x00")
    return root


def test_scanner_skips_heavy_hidden_and_binary(project: Path) -> None:
    paths = [e.path for e in LocalFolderScanner().scan(project)]

    assert "src/server.ts" in paths
    assert ".env" in paths  # secret filtering happens later, in the classifier
    assert not any(p.startswith(("node_modules/", ".git/", ".vscode/")) for p in paths)
    assert "assets/logo.bin" not in paths


def test_scanner_skips_large_files(tmp_path: Path) -> None:
    write(tmp_path, "big.py", "x" * 2048)
    write(tmp_path, "small.py", "y = 1\n")

    paths = [e.path for e in LocalFolderScanner(max_file_size=1024).scan(tmp_path)]

    assert paths == ["small.py"]


@pytest.mark.anyio
async def test_local_ingest_builds_full_bundle(project: Path) -> None:
    use_case = IngestLocalFolderUseCase(LocalFolderScanner())

    result = await use_case.execute(project, max_files=2)

    assert result.info.owner == "local"
    assert result.info.repo == "demo-project"
    assert result.info.default_branch == "local"
    assert result.info.description == "Local folder analysis"
    assert ".env" not in result.tree
    assert result.readme == "# Demo\n"
    assert result.dependencies == (
        '\n--- package.json ---\n{"name": "demo"}\n'
        "\n--- requirements.txt ---\nhttpx\n\n"
    )
    assert [f.path for f in result.source_files] == ["src/server.ts", "src/util.ts"]
    assert result.source_files[0].content == "export const server = 1;\n"
    assert result.is_truncated is False


@pytest.mark.anyio
async def test_local_ingest_truncates_large_trees(tmp_path: Path) -> None:
    for i in range(1005):
        write(tmp_path, f"pkg/f{i:04d}.py", "")

    result = await IngestLocalFolderUseCase(LocalFolderScanner()).execute(tmp_path)

    assert len(result.tree) == 1000
    assert result.is_truncated is True
    assert len(result.source_files) == 5


@pytest.mark.anyio
async def test_local_ingest_rejects_missing_folder(tmp_path: Path) -> None:
    with pytest.raises(LocalFolderNotFoundError):
        await IngestLocalFolderUseCase(LocalFolderScanner()).execute(tmp_path / "nope")


@pytest.mark.anyio
async def test_local_ingest_reads_inside_allowed_root(project: Path) -> None:
    use_case = IngestLocalFolderUseCase(LocalFolderScanner(), allowed_root=project.parent)

    result = await use_case.execute(project, max_files=1)

    assert [f.path for f in result.source_files] == ["src/server.ts"]


@pytest.mark.anyio
async def test_local_ingest_rejects_path_outside_allowed_root(tmp_path: Path) -> None:
    allowed = tmp_path / "shared"
    allowed.mkdir()
    write(tmp_path, "private/settings.py", "DB_PASSWORD = 'hunter2'\n")
    use_case = IngestLocalFolderUseCase(LocalFolderScanner(), allowed_root=allowed)

    with pytest.raises(LocalPathNotAllowedError):
        await use_case.execute(tmp_path / "private")
    with pytest.raises(LocalPathNotAllowedError):
        await use_case.execute(allowed / ".." / "private")
