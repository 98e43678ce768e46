"""File relevance scoring — additive path heuristics plus stable ranking.

Every rule looks at the path alone; no file content is read.  Scores are
integers so that ties are common and the original tree order decides them.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from repo_ingest.domain.entities import ScoredPath

# ── Heuristic weight constants ──────────────────────────────────────────────

TEST_PENALTY = 50
AUX_PENALTY = 30
CORE_DIR_BONUS = 20
IMPORTANT_NAME_BONUS = 10

DEFAULT_MAX_FILES = 5
MIN_MAX_FILES = 1
MAX_MAX_FILES = 200

_TEST_DIR_MARKERS: tuple[str, ...] = ("/test/", "/tests/", "__tests__")

_AUX_KEYWORDS: tuple[str, ...] = (
    "build", "setup", "config", "webpack", "vite", "rollup", "gulpfile",
    "backup", "manage.py", "scripts/", "tools/", "docs/", "example", "demo",
    "migrations/",
)

_CORE_DIRS: tuple[str, ...] = ("src/", "lib/", "app/", "core/", "pkg/", "internal/")

_IMPORTANT_NAMES: tuple[str, ...] = (
    "main", "index", "app", "server", "core", "manager", "parser", "api",
    "router", "handler", "controller", "service", "model", "database",
)


def _is_test_like(lower_path: str, file_name: str) -> bool:
    if any(marker in lower_path for marker in _TEST_DIR_MARKERS):
        return True
    return (
        ".test." in file_name
        or ".spec." in file_name
        or file_name.startswith("test_")
        or file_name.endswith("_test.go")
    )


def score(path: str) -> int:
    """Return the relevance score of *path*; higher means more worth reading."""
    lower_path = path.lower()
    parts = lower_path.split("/")
    file_name = parts[-1]
    depth = len(parts)

    total = 0
    if _is_test_like(lower_path, file_name):
        total -= TEST_PENALTY
    if any(keyword in lower_path for keyword in _AUX_KEYWORDS):
        total -= AUX_PENALTY
    if any(lower_path.startswith(d) or f"/{d}" in lower_path for d in _CORE_DIRS):
        total += CORE_DIR_BONUS
    if any(name in file_name for name in _IMPORTANT_NAMES):
        total += IMPORTANT_NAME_BONUS
    total -= depth
    return total


# ── Public API ──────────────────────────────────────────────────────────────


def rank(paths: Iterable[str]) -> list[ScoredPath]:
    """Return paths sorted by descending score; equal scores keep input order."""
    scored = [ScoredPath(path=p, score=score(p)) for p in paths]
    # list.sort is stable, so negating the key keeps ties in tree order.
    scored.sort(key=lambda s: -s.score)
    return scored


def clamp_max_files(value: int | None) -> int:
    """Clamp a caller-supplied file count to ``[1, 200]`` (``None`` → 5)."""
    if value is None:
        return DEFAULT_MAX_FILES
    return max(MIN_MAX_FILES, min(int(value), MAX_MAX_FILES))


def select_top(paths: Sequence[str], max_files: int | None = None) -> list[str]:
    """Rank *paths* and return the best ``clamp_max_files(max_files)`` of them."""
    limit = clamp_max_files(max_files)
    return [s.path for s in rank(paths)[:limit]]
