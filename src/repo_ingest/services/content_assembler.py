"""Content assembler — formats manifests and renders a bundle as LLM context.

This is the final transformation before the bundle enters a prompt template.
"""

from __future__ import annotations

from typing import Iterable

from repo_ingest.domain.entities import FileEntry, IngestionResult
from repo_ingest.services.token_budget import truncate_to_budget

TREE_PREVIEW_LINES = 500
README_PREVIEW_CHARS = 2000
DEPENDENCIES_PREVIEW_CHARS = 2000


def format_dependencies(manifests: Iterable[FileEntry]) -> str:
    """Concatenate manifests as ``\\n--- name ---\\ncontent\\n`` blocks."""
    return "".join(f"\n--- {m.path} ---\n{m.content}\n" for m in manifests)


def _render_tree(result: IngestionResult) -> str:
    lines = result.tree[:TREE_PREVIEW_LINES]
    hidden = len(result.tree) - len(lines)
    if hidden > 0:
        lines = [*lines, f"… and {hidden} more files"]
    if result.is_truncated:
        lines = [*lines, "(tree truncated by the ingester)"]
    return "\n".join(lines)


def _render_sources(files: list[FileEntry]) -> str:
    return "\n\n".join(f"### {f.path}\n\n```\n{f.content}\n```" for f in files)


def render_bundle(result: IngestionResult, max_source_tokens: int | None = None) -> str:
    """Combine all non-empty bundle parts into a single Markdown context block.

    When *max_source_tokens* is given, only the source-file section is cut to
    that many tokens; the other sections are already bounded by character caps.
    """
    info = result.info
    sections: list[tuple[str, str]] = [
        (
            "## Repository",
            f"{info.owner}/{info.repo} (branch: {info.default_branch})\n\n{info.description}",
        ),
        ("## File Tree", _render_tree(result)),
        ("## README", result.readme[:README_PREVIEW_CHARS]),
        ("## Dependencies", result.dependencies.strip()[:DEPENDENCIES_PREVIEW_CHARS]),
    ]

    sources = _render_sources(result.source_files)
    if sources and max_source_tokens is not None:
        sources = truncate_to_budget(sources, max_source_tokens)
    sections.append(("## Key Source Files", sources))

    return "\n\n---\n\n".join(
        f"{header}\n\n{body}" for header, body in sections if body
    )
