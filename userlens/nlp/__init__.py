"""Semantic classification and pattern detection over extracted components."""

from .patterns import PatternDetector
from .semantic import SemanticClassifier

__all__ = ["PatternDetector", "SemanticClassifier"]
