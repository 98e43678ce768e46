"""Port: local folder scanner — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from repo_ingest.domain.entities import FileEntry


class LocalScanner(Protocol):
    """Abstract contract for walking a directory on disk."""

    def scan(self, root: Path) -> list[FileEntry]:
        """Return ``(path, content)`` entries with root-relative POSIX paths."""
        ...
