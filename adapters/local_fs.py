"""Adapter: LocalFileSystem implements FileSystemPort over the output directory.

Every artifact name is relative to one benchmark output directory; the
pipeline never addresses files outside it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from domain.models import is_artifact

logger = logging.getLogger("linea_bench.adapters")


class LocalFileSystem:
    """Benchmark output directory on local disk.

    The directory itself is created lazily, by the first write or by
    ``clear``.
    """

    def __init__(self, base_dir: str) -> None:
        self._root = Path(base_dir).resolve()

    def _artifact(self, name: str) -> Path:
        return self._root / name

    def _prepared(self, name: str) -> Path:
        target = self._artifact(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def read_file(self, path: str) -> str:
        return self._artifact(path).read_text(encoding="utf-8")

    def write_file(self, path: str, content: str) -> None:
        self._prepared(path).write_text(content, encoding="utf-8")

    def append_file(self, path: str, content: str) -> None:
        with self._prepared(path).open("a", encoding="utf-8") as fh:
            fh.write(content)

    def file_exists(self, path: str) -> bool:
        return self._artifact(path).is_file()

    def list_files(self) -> list[str]:
        """Names of the regular files at the top of the output directory."""
        if not self._root.is_dir():
            return []
        return sorted(entry.name for entry in self._root.iterdir() if entry.is_file())

    def clear(self) -> None:
        """Delete the previous run's artifacts.

        Only top-level files named like this tool's output go. Anything else
        in the directory, including subdirectories, is left alone.
        """
        self._root.mkdir(parents=True, exist_ok=True)
        stale = [
            entry for entry in self._root.iterdir() if entry.is_file() and is_artifact(entry.name)
        ]
        for entry in stale:
            entry.unlink()
        logger.info("Removed %d previous artifact(s) from %s", len(stale), self._root)
