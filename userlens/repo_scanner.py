"""Discovery of candidate component files under a project's entry directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

_EXCLUDED_DIRS = {"node_modules", "dist", "build"}

_COMPONENT_SUFFIXES = {".jsx", ".tsx", ".js", ".ts"}
_TEST_MARKERS = (".test", ".spec")


@dataclass
class ExcludeRule:
    """A glob from ``exclude_patterns``.

    Patterns containing a slash match the root-relative POSIX path; bare
    patterns match any single path segment.
    """

    pattern: str

    @property
    def has_slash(self) -> bool:
        return "/" in self.pattern

    def matches(self, rel_path: str) -> bool:
        if not self.pattern:
            return False
        if self.has_slash:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def is_component_file(path: Path) -> bool:
    """Heuristic for React component files (``LoginForm.jsx``, ``components/x.js``)."""
    suffix = path.suffix.lower()
    if suffix not in _COMPONENT_SUFFIXES:
        return False
    stem = path.stem
    if stem.endswith(_TEST_MARKERS):
        return False
    return (
        stem[:1].isupper()
        or "Component" in stem
        or "components" in path.parts[:-1]
        or stem.endswith(("Page", "View"))
    )


class ComponentScanner:
    """Walks an entry directory and yields absolute component file paths in sorted order."""

    def __init__(self, exclude_patterns: Sequence[str] = ()) -> None:
        self.rules: List[ExcludeRule] = [ExcludeRule(p.strip()) for p in exclude_patterns if p.strip()]

    def scan(self, root: Path, entry: Path | None = None) -> Iterator[Path]:
        root_path = Path(root).expanduser().resolve()
        entry_path = (root_path / entry).resolve() if entry is not None else root_path
        if not entry_path.exists():
            raise FileNotFoundError(f"Entry directory not found: {entry_path}")
        if not entry_path.is_dir():
            raise NotADirectoryError(f"Entry path is not a directory: {entry_path}")

        for dirpath, dirnames, filenames in os.walk(entry_path):
            current_dir = Path(dirpath)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if name not in _EXCLUDED_DIRS
                and not name.startswith(".")
                and not self._excluded(self._relative(current_dir / name, root_path))
            )
            for filename in sorted(filenames):
                path = current_dir / filename
                if self._excluded(self._relative(path, root_path)):
                    continue
                if is_component_file(path):
                    yield path

    def _excluded(self, rel_path: str) -> bool:
        return any(rule.matches(rel_path) for rule in self.rules)

    @staticmethod
    def _relative(path: Path, root: Path) -> str:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            return path.as_posix()


__all__ = ["ComponentScanner", "ExcludeRule", "is_component_file"]
