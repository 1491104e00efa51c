"""Persistence for cached component metadata and run artifacts."""

from .artifacts import ArtifactStore
from .component_cache import ComponentCache

__all__ = ["ArtifactStore", "ComponentCache"]
