"""Content-addressed cache of per-file component metadata."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Dict, Optional

from ..errors import CacheCorruptionError, CacheIOError, HashingError
from ..logging import get_logger
from ..models import CacheEntry, ComponentMetadata

_METADATA_DIR = "metadata"


class ComponentCache:
    """One JSON entry per source file under ``<cache_dir>/metadata``.

    Entries are keyed by the MD5 of the file's project-relative POSIX path and
    hold the MD5 of the file content at extraction time. A differing content
    hash marks the entry stale.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir
        self.metadata_dir = cache_dir / _METADATA_DIR
        self.logger = get_logger("stores.component_cache")

    @classmethod
    def create(cls, cache_dir: Path) -> "ComponentCache":
        cache = cls(cache_dir)
        try:
            cache.metadata_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheIOError(f"Cannot create cache directory {cache.metadata_dir}: {exc}") from exc
        return cache

    @staticmethod
    def key_for(relative_path: str) -> str:
        return hashlib.md5(relative_path.encode("utf-8")).hexdigest()

    @staticmethod
    def hash_content(text: str) -> str:
        return hashlib.md5(text.encode("utf-8")).hexdigest()

    @staticmethod
    def read_source(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise HashingError(f"Cannot read {path}: {exc}") from exc

    def entry_path(self, relative_path: str) -> Path:
        return self.metadata_dir / f"{self.key_for(relative_path)}.json"

    def get(self, relative_path: str) -> Optional[CacheEntry]:
        path = self.entry_path(relative_path)
        if not path.exists():
            return None
        try:
            return self._load(path)
        except CacheCorruptionError as exc:
            self.logger.warning("Discarding corrupt cache entry for %s: %s", relative_path, exc)
            self._unlink(path)
            return None

    def store(self, relative_path: str, source_hash: str, metadata: ComponentMetadata) -> None:
        entry = CacheEntry(source_file_hash=source_hash, component_metadata=metadata)
        payload = json.dumps(entry.to_dict(), indent=2, sort_keys=True)
        target = self.entry_path(relative_path)
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.stem}.", suffix=".tmp", dir=self.metadata_dir
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, target)
            except Exception:
                self._unlink(Path(tmp_name))
                raise
        except OSError as exc:
            raise CacheIOError(f"Cannot write cache entry for {relative_path}: {exc}") from exc

    def remove(self, relative_path: str) -> None:
        self.remove_key(self.key_for(relative_path))

    def remove_key(self, key: str) -> None:
        self._unlink(self.metadata_dir / f"{key}.json")

    def cached_paths(self, project_root: Path) -> Dict[str, str]:
        """Map each valid entry's key to its relative path; corrupt entries are purged.

        Keys come from the entry file names, so an entry whose recorded path
        is stale still maps back to the file it was stored for.
        """
        paths: Dict[str, str] = {}
        if not self.metadata_dir.is_dir():
            return paths
        for entry_file in sorted(self.metadata_dir.glob("*.json")):
            try:
                entry = self._load(entry_file)
            except CacheCorruptionError as exc:
                self.logger.warning("Purging corrupt cache entry %s: %s", entry_file.name, exc)
                self._unlink(entry_file)
                continue
            paths[entry_file.stem] = normalize_relative(entry.component_metadata.file_path, project_root)
        return paths

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> CacheEntry:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CacheCorruptionError(str(exc)) from exc
        try:
            return CacheEntry.from_dict(raw)
        except ValueError as exc:
            raise CacheCorruptionError(str(exc)) from exc

    def _unlink(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            self.logger.warning("Could not delete %s: %s", path, exc)


def normalize_relative(file_path: str, project_root: Path) -> str:
    """Return ``file_path`` relative to ``project_root`` in POSIX form.

    Older entries may record absolute paths; those under the project root are
    rewritten, anything else is returned unchanged.
    """
    candidate = Path(file_path)
    if candidate.is_absolute():
        try:
            return candidate.relative_to(project_root).as_posix()
        except ValueError:
            return candidate.as_posix()
    return PurePosixPath(file_path.replace("\\", "/")).as_posix()


__all__ = ["ComponentCache", "normalize_relative"]
