"""Path classification — decide which tree entries are noise, secrets, manifests or candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

HARD_IGNORE_DIRS: tuple[str, ...] = (
    "venv",
    ".venv",
    "node_modules",
    ".git",
    "__pycache__",
    "dist",
    "build",
)

SECRET_SUFFIXES: tuple[str, ...] = (
    ".env",
    ".pem",
    ".key",
    ".cert",
    ".p12",
    "secrets.json",
    "credentials.json",
    "id_rsa",
)

# Order matters: manifests are concatenated in this order.
DEPENDENCY_MANIFESTS: tuple[str, ...] = (
    "package.json",
    "requirements.txt",
    "go.mod",
    "Cargo.toml",
    "pom.xml",
    "build.gradle",
)

SOURCE_EXTENSIONS: tuple[str, ...] = (
    ".ts", ".tsx", ".js", ".jsx", ".py", ".go", ".rs",
    ".java", ".cpp", ".c", ".h", ".cs", ".md",
)

README_NAME = "readme.md"


@dataclass(frozen=True, slots=True)
class PathClassification:
    """Noise / secret verdict for a single path."""

    hard_ignored: bool
    secret: bool

    @property
    def retained(self) -> bool:
        return not (self.hard_ignored or self.secret)


def _is_hard_ignored(path: str) -> bool:
    """Match only whole segments so that e.g. ``builder/`` survives."""
    return any(
        path.startswith(f"{name}/") or f"/{name}/" in path
        for name in HARD_IGNORE_DIRS
    )


def _is_secret(path: str) -> bool:
    # The "/<suffix>/" branch only fires for directories literally named like a
    # secret file; kept so the filter matches the desktop and server variants.
    return any(
        path.endswith(suffix) or f"/{suffix}/" in path
        for suffix in SECRET_SUFFIXES
    )


def classify(path: str) -> PathClassification:
    """Classify a repository-relative path (case-sensitive)."""
    return PathClassification(hard_ignored=_is_hard_ignored(path), secret=_is_secret(path))


def is_retained(path: str) -> bool:
    """Return *True* if the path belongs in the working tree."""
    return classify(path).retained


def filter_tree(paths: Iterable[str]) -> list[str]:
    """Drop hard-ignored and secret paths, preserving order."""
    return [p for p in paths if is_retained(p)]


def is_dependency_manifest(path: str) -> bool:
    """Exact root-level filename match; ``web/package.json`` is *not* a manifest."""
    return path in DEPENDENCY_MANIFESTS


def is_readme(path: str) -> bool:
    return path.lower() == README_NAME


def is_source_candidate(path: str) -> bool:
    """Return *True* if the path may be scored and selected as a source file."""
    if not path.endswith(SOURCE_EXTENSIONS):
        return False
    return not is_dependency_manifest(path) and not is_readme(path)


def present_manifests(tree: Iterable[str]) -> list[str]:
    """Return the recognised manifests found in *tree*, in fixed manifest order."""
    paths = set(tree)
    return [name for name in DEPENDENCY_MANIFESTS if name in paths]
