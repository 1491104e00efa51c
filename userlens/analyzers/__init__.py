"""Component extractor implementations and the framework registry."""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from ..nlp.semantic import SemanticClassifier
from .base import ComponentExtractor
from .react import ReactExtractor

_BUILTIN_FACTORIES: dict[str, Callable[[SemanticClassifier], ComponentExtractor]] = {
    "react": ReactExtractor,
}


def available_frameworks() -> list[str]:
    return sorted(_BUILTIN_FACTORIES)


def get_extractor(
    framework: str,
    *,
    classifier: Optional[SemanticClassifier] = None,
    custom_mappings: Optional[Mapping[str, str]] = None,
) -> ComponentExtractor:
    """Return the extractor registered for ``framework``."""

    factory = _BUILTIN_FACTORIES.get(framework.lower())
    if factory is None:
        supported = ", ".join(available_frameworks())
        raise ValueError(f"Unsupported framework '{framework}' (supported: {supported})")
    instance = factory(classifier or SemanticClassifier(custom_mappings))
    if not isinstance(instance, ComponentExtractor):
        raise TypeError(f"Extractor factory for '{framework}' did not return a ComponentExtractor")
    return instance


__all__ = [
    "ComponentExtractor",
    "ReactExtractor",
    "available_frameworks",
    "get_extractor",
]
