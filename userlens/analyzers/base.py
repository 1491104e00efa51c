"""Base classes for component extractors."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models import ComponentMetadata


class ComponentExtractor(ABC):
    """Contract for extractors that turn one source file into component metadata."""

    @abstractmethod
    def supports(self, path: Path) -> bool:
        """Return True when this extractor understands the file's dialect."""

    @abstractmethod
    def parse_component(self, source: str, path: Path, relative_path: str) -> ComponentMetadata:
        """Return the component described by ``source``; raise ``ParseError`` on bad input."""
