"""Gitignore-aware file traversal for frontend projects and plugin corpora."""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

# Hard-coded exclusions that should never be scanned
_ALWAYS_IGNORE = {
    ".git",
    "node_modules",
    "__pycache__",
    ".next",
    ".nuxt",
    ".svelte-kit",
    "dist",
    "build",
    ".cache",
    ".turbo",
    "coverage",
    ".pytest_cache",
    ".venv",
    "venv",
}

# Max file size to read (1 MB)
_MAX_FILE_SIZE = 1_024 * 1_024

# Binary extensions to skip when reading
_BINARY_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp", ".avif",
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    ".zip", ".tar", ".gz", ".br",
    ".mp4", ".webm", ".mp3", ".wav",
    ".pdf", ".doc", ".docx",
    ".pyc", ".pyo", ".so", ".dll", ".dylib",
}


class ProjectTree:
    """Read files under a root directory, respecting .gitignore rules.

    Glob patterns use gitignore syntax: a pattern without a slash
    (``*.tsx``) matches at any depth, a pattern with one
    (``src/**/*.tsx``, ``public/manifest.json``) is anchored at the root.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise ValueError(f"Project root is not a directory: {self.root}")
        self._spec = self._load_gitignore()

    def _load_gitignore(self) -> pathspec.PathSpec | None:
        gi = self.root / ".gitignore"
        if gi.exists():
            return pathspec.PathSpec.from_lines("gitignore", gi.read_text().splitlines())
        return None

    def _is_ignored(self, rel: Path) -> bool:
        for part in rel.parts:
            if part in _ALWAYS_IGNORE:
                return True
        if self._spec and self._spec.match_file(rel.as_posix()):
            return True
        return False

    def _is_binary(self, path: Path) -> bool:
        return path.suffix.lower() in _BINARY_EXTENSIONS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, subpath: str) -> Path | None:
        """Absolute path for ``subpath``, or None if it escapes the root."""
        target = (self.root / subpath).resolve()
        if target != self.root and self.root not in target.parents:
            return None
        return target

    def is_file(self, subpath: str) -> bool:
        target = self.resolve(subpath)
        return target is not None and target.is_file()

    def is_dir(self, subpath: str) -> bool:
        target = self.resolve(subpath)
        return target is not None and target.is_dir()

    def exists(self, subpath: str) -> bool:
        target = self.resolve(subpath)
        return target is not None and target.exists()

    def glob(self, patterns: list[str] | str, *, include_ignored: bool = False) -> list[str]:
        """Return relative posix paths of files matching any pattern.

        Ignored files are left out unless ``include_ignored`` is set, which
        is how build output such as ``dist/`` is inspected.
        """
        if isinstance(patterns, str):
            patterns = [patterns]
        spec = pathspec.PathSpec.from_lines("gitignore", patterns)
        pool = self.all_files if include_ignored else self.files
        return [rel for rel in pool if spec.match_file(rel)]

    def read_text(self, subpath: str) -> str | None:
        """Return file contents, or None for missing, binary or oversized files."""
        target = self.resolve(subpath)
        if target is None or not target.is_file():
            return None
        if self._is_binary(target):
            return None
        size = target.stat().st_size
        if size > _MAX_FILE_SIZE:
            logger.debug("Skipping %s: %s bytes", subpath, f"{size:,}")
            return None
        return target.read_text(errors="replace")

    @cached_property
    def files(self) -> list[str]:
        """All non-ignored files as sorted relative posix paths."""
        found: list[str] = []
        for path in self.root.rglob("*"):
            if not path.is_file():
                continue
            rel = path.relative_to(self.root)
            if self._is_ignored(rel):
                continue
            found.append(rel.as_posix())
        found.sort()
        logger.debug("Indexed %d files under %s", len(found), self.root)
        return found

    @cached_property
    def all_files(self) -> list[str]:
        """Every file except those under ``.git`` and ``node_modules``."""
        found: list[str] = []
        for path in self.root.rglob("*"):
            if not path.is_file():
                continue
            rel = path.relative_to(self.root)
            if ".git" in rel.parts or "node_modules" in rel.parts:
                continue
            found.append(rel.as_posix())
        found.sort()
        return found
