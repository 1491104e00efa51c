"""Tree-sitter powered syntax tree provider for JavaScript and TypeScript sources."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterator, Optional

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..errors import ParseError

_GRAMMARS: Dict[str, Callable[[], object]] = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_DIALECT_BY_SUFFIX = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}


def dialect_for_path(path: str | Path) -> str:
    """Return the grammar used for ``path``; JSX-capable JavaScript is the default."""
    suffix = Path(path).suffix.lower()
    return _DIALECT_BY_SUFFIX.get(suffix, "javascript")


class SyntaxTreeProvider:
    """Parses source text into tree-sitter trees, one cached parser per dialect."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def parse(self, source: str, dialect: str, *, path: Optional[str] = None) -> Tree:
        """Return a clean tree for ``source`` or raise ``ParseError``.

        tree-sitter always produces a tree, recovering around malformed input.
        Any ``ERROR`` or missing node is treated as a failed parse so partially
        recovered trees never reach extraction.
        """
        parser = self._get_parser(dialect, path)
        tree = parser.parse(source.encode("utf-8"))
        if tree.root_node.has_error:
            broken = _first_error(tree.root_node)
            position = None
            if broken is not None:
                position = (broken.start_point[0], broken.start_point[1])
            raise ParseError(f"Syntax error ({dialect})", path=path, position=position)
        return tree

    def _get_parser(self, dialect: str, path: Optional[str]) -> Parser:
        parser = self._parsers.get(dialect)
        if parser is not None:
            return parser
        grammar = _GRAMMARS.get(dialect)
        if grammar is None:
            raise ParseError(f"Unsupported dialect {dialect!r}", path=path)
        parser = Parser(Language(grammar()))
        self._parsers[dialect] = parser
        return parser


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Optional[Node], source_bytes: bytes) -> str:
    if node is None:
        return ""
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _first_error(node: Node) -> Optional[Node]:
    for candidate in walk(node):
        if candidate.type == "ERROR" or candidate.is_missing:
            return candidate
    return None


__all__ = ["SyntaxTreeProvider", "dialect_for_path", "node_text", "walk"]
