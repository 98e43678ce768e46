"""Local filesystem adapter — implements the LocalScanner port."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from repo_ingest.domain.entities import FileEntry

logger = logging.getLogger(__name__)

HEAVY_DIRS: frozenset[str] = frozenset(
    {"node_modules", "target", "venv", "build", "__pycache__"}
)
HIDDEN_DIRS: frozenset[str] = frozenset({".venv", ".idea", ".vscode"})

DEFAULT_MAX_FILE_SIZE = 1_000_000


def _should_skip_dir(name: str) -> bool:
    """Return *True* for editor, VCS and dependency directories."""
    return name.startswith(".git") or name in HIDDEN_DIRS or name in HEAVY_DIRS


class LocalFolderScanner:
    """Walk a directory and read every small UTF-8 text file beneath it.

    Binary files, files that are not valid UTF-8, and files above
    ``max_file_size`` bytes are skipped silently.
    """

    def __init__(self, max_file_size: int = DEFAULT_MAX_FILE_SIZE) -> None:
        self._max_file_size = max_file_size

    def scan(self, root: Path) -> list[FileEntry]:
        entries: list[FileEntry] = []
        skipped = 0
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not _should_skip_dir(d))
            for fn in sorted(filenames):
                if fn.startswith(".git"):
                    continue
                fp = Path(dirpath) / fn
                try:
                    if fp.stat().st_size > self._max_file_size:
                        skipped += 1
                        continue
                    content = fp.read_bytes().decode("utf-8")
                except (OSError, UnicodeDecodeError):
                    skipped += 1
                    continue
                entries.append(
                    FileEntry(path=fp.relative_to(root).as_posix(), content=content)
                )

        logger.debug("Scanned %s: %d files read, %d skipped", root, len(entries), skipped)
        return entries
