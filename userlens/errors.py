"""Error taxonomy for the analysis pipeline."""

from __future__ import annotations

from typing import Optional, Tuple


class UserLensError(RuntimeError):
    """Base class for all analysis failures."""


class ParseError(UserLensError):
    """Raised when a source file cannot be turned into a clean syntax tree."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        position: Optional[Tuple[int, int]] = None,
    ) -> None:
        self.path = path
        self.position = position
        location = ""
        if path:
            location = f" in {path}"
            if position is not None:
                location += f" at line {position[0] + 1}, column {position[1] + 1}"
        super().__init__(f"{message}{location}")


class ExtractionError(UserLensError):
    """Raised when a parsed tree lacks the shape an extraction rule expects."""


class CacheCorruptionError(UserLensError):
    """Raised when a persisted cache entry is unreadable or incomplete."""


class CacheIOError(UserLensError):
    """Raised when the cache directory or an entry cannot be written."""


class HashingError(UserLensError):
    """Raised when a source file cannot be read for fingerprinting."""


class ArtifactIOError(UserLensError):
    """Raised when a run artifact cannot be written to the output directory."""


__all__ = [
    "ArtifactIOError",
    "CacheCorruptionError",
    "CacheIOError",
    "ExtractionError",
    "HashingError",
    "ParseError",
    "UserLensError",
]
