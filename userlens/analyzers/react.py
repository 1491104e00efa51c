"""React component extraction over tree-sitter JavaScript/TypeScript trees.

One source file yields exactly one component record. The extractor resolves
the component's name, merges props declared through ``propTypes``, a
``*Props`` interface or type alias, and the destructured first parameter, then
gathers the textual context (rendered text, comments, imports, markup tags)
the semantic classifier works from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Node, Tree

from .base import ComponentExtractor
from .tree_sitter import SyntaxTreeProvider, dialect_for_path, node_text, walk
from ..errors import ExtractionError
from ..logging import get_logger
from ..models import CommentSet, ComponentContext, ComponentMetadata, PropDefinition, UserAction
from ..nlp.semantic import SemanticClassifier, split_compact_case

_SUPPORTED_SUFFIXES = {".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts"}

SIGNIFICANT_TEXT_TAGS = frozenset(
    {"button", "p", "h1", "h2", "h3", "h4", "h5", "h6", "span", "div", "td", "th", "li", "label", "a"}
)

_FUNCTION_NODES = {"arrow_function", "function_expression", "function", "generator_function"}
_DECLARATION_NODES = {
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
}
_CLASS_NODES = {"class_declaration", "abstract_class_declaration", "class"}
_VARIABLE_NODES = {"lexical_declaration", "variable_declaration"}
_FIELD_NODES = {"field_definition", "public_field_definition"}

_PROPTYPE_VALIDATORS = {
    "string": "string",
    "number": "number",
    "bool": "boolean",
    "func": "function",
    "object": "object",
    "shape": "object",
    "exact": "object",
    "objectOf": "object",
    "array": "array",
    "arrayOf": "array",
    "node": "node",
    "element": "element",
    "elementType": "element",
}

_TS_PREDEFINED = {"string": "string", "number": "number", "boolean": "boolean", "object": "object"}

# Trailing event word of an ``on*`` prop -> action type; longer words are tried first.
_EVENT_WORDS: Tuple[Tuple[str, str], ...] = (
    ("register", "submit"),
    ("submit", "submit"),
    ("signin", "submit"),
    ("signup", "submit"),
    ("login", "submit"),
    ("save", "submit"),
    ("send", "submit"),
    ("change", "input"),
    ("input", "input"),
    ("click", "click"),
    ("press", "click"),
    ("tap", "click"),
)

_SEPARATORS = re.compile(r"[-_]")


@dataclass
class ExtractedComponent:
    """Structural facts pulled from one file before classification."""

    name: str
    props: List[PropDefinition]
    user_actions: List[UserAction]
    context: ComponentContext


@dataclass
class _ModuleIndex:
    """Top-level declarations and exports of one module."""

    declarations: Dict[str, Node] = field(default_factory=dict)
    statements: Dict[str, Node] = field(default_factory=dict)
    default_name: Optional[str] = None
    default_anonymous: Optional[Tuple[Node, Node]] = None
    named_exports: List[str] = field(default_factory=list)

    def declared_name(self) -> str:
        if self.default_name:
            return self.default_name
        if self.named_exports:
            return self.named_exports[0]
        raise ExtractionError("No default export or exported function/class declaration")

    def component_for(self, name: str) -> Tuple[Optional[Node], Optional[Node]]:
        """Return ``(declaration, top_level_statement)`` for the component."""
        if name in self.declarations:
            return self.declarations[name], self.statements[name]
        if self.default_anonymous is not None:
            return self.default_anonymous
        for candidate, node in self.declarations.items():
            if candidate[:1].isupper():
                return node, self.statements[candidate]
        return None, None


class ReactExtractor(ComponentExtractor):
    """Extracts React component metadata from ``.js/.jsx/.ts/.tsx`` sources."""

    def __init__(
        self,
        classifier: SemanticClassifier | None = None,
        provider: SyntaxTreeProvider | None = None,
    ) -> None:
        self.classifier = classifier or SemanticClassifier()
        self.provider = provider or SyntaxTreeProvider()
        self.logger = get_logger("analyzers.react")

    def supports(self, path: Path) -> bool:
        suffix = path.suffix.lower()
        return not suffix or suffix in _SUPPORTED_SUFFIXES

    def parse_component(self, source: str, path: Path, relative_path: str) -> ComponentMetadata:
        tree = self.provider.parse(source, dialect_for_path(path), path=relative_path)
        extracted = self.extract(tree, source, path, relative_path=relative_path)
        category, description = self.classifier.classify(
            extracted.name, extracted.props, extracted.context
        )
        return ComponentMetadata(
            name=extracted.name,
            file_path=relative_path,
            props=extracted.props,
            children=[],
            user_actions=extracted.user_actions,
            semantic_category=category,
            description=description,
        )

    def extract(
        self,
        tree: Tree,
        source: str,
        path: Path,
        *,
        relative_path: Optional[str] = None,
    ) -> ExtractedComponent:
        source_bytes = source.encode("utf-8")
        root = tree.root_node
        module = _index_module(root, source_bytes)

        try:
            name = module.declared_name()
        except ExtractionError as exc:
            name = name_from_filename(path)
            self.logger.debug("%s in %s; using file name %s", exc, relative_path or path, name)

        declaration, statement = module.component_for(name)
        props = _merge_props(
            _prop_types_props(root, source_bytes),
            _interface_props(root, source_bytes),
            _destructured_props(declaration, source_bytes),
        )
        context = ComponentContext(
            file_path=relative_path or str(path),
            props=props,
            jsx_text=_jsx_text(root, source_bytes),
            comments=_collect_comments(root, declaration, statement, source_bytes),
            import_sources=_import_sources(root, source_bytes),
            html_tags=_html_tags(root, source_bytes),
        )
        return ExtractedComponent(
            name=name,
            props=props,
            user_actions=infer_user_actions(name, props),
            context=context,
        )


def name_from_filename(path: Path | str) -> str:
    """``product-search.jsx`` -> ``ProductSearch``."""
    stem = Path(path).stem
    name = "".join(part[:1].upper() + part[1:] for part in _SEPARATORS.split(stem))
    return name or "Component"


def infer_user_actions(component_name: str, props: Sequence[PropDefinition]) -> List[UserAction]:
    actions: List[UserAction] = []
    for prop in props:
        if not prop.name.startswith("on") or len(prop.name) <= 2:
            continue
        suffix = prop.name[2:]
        lowered = suffix.lower()
        for word, action_type in _EVENT_WORDS:
            if lowered.endswith(word):
                trigger = suffix[: len(suffix) - len(word)] or component_name
                actions.append(_build_action(action_type, trigger, component_name))
                break

    lowered_name = component_name.lower()
    if (
        "link" in lowered_name
        or "nav" in lowered_name
        or any(prop.name in ("to", "href") for prop in props)
    ):
        actions.append(
            UserAction(
                type="navigation",
                trigger=component_name,
                description=f"Click the {_format_trigger(component_name)}",
                outcome="Navigates to another page",
            )
        )
    return actions


def _build_action(action_type: str, trigger: str, component_name: str) -> UserAction:
    if action_type == "submit":
        return UserAction(
            type="submit",
            trigger=component_name,
            description=f"Submit the {_format_trigger(component_name)}",
            outcome="Sends the form data",
        )
    label = _format_trigger(trigger)
    if action_type == "input":
        return UserAction(
            type="input",
            trigger=trigger,
            description=f"Enter information in the {label}",
            outcome="Updates the input value",
        )
    return UserAction(
        type="click",
        trigger=trigger,
        description=f"Click the {label}",
        outcome=f"Performs the {label} action",
    )


def _format_trigger(name: str) -> str:
    return split_compact_case(name).lower()


# Module structure


def _index_module(root: Node, source_bytes: bytes) -> _ModuleIndex:
    index = _ModuleIndex()
    for statement in root.named_children:
        if statement.type == "export_statement":
            _index_export(index, statement, source_bytes)
        else:
            _register_declaration(index, statement, statement, source_bytes)
    return index


def _index_export(index: _ModuleIndex, statement: Node, source_bytes: bytes) -> None:
    is_default = any(child.type == "default" for child in statement.children)
    declaration = statement.child_by_field_name("declaration")
    value = statement.child_by_field_name("value")

    if declaration is not None:
        name = _register_declaration(index, declaration, statement, source_bytes)
        if name and declaration.type in _DECLARATION_NODES:
            if is_default:
                index.default_name = index.default_name or name
            else:
                index.named_exports.append(name)
        return

    if value is not None and is_default:
        name, anonymous = _default_export_target(value, source_bytes)
        if name:
            index.default_name = index.default_name or name
        elif anonymous is not None and index.default_anonymous is None:
            index.default_anonymous = (anonymous, statement)
        return

    # export { LoginForm as default }
    for clause in statement.named_children:
        if clause.type != "export_clause":
            continue
        for specifier in clause.named_children:
            if specifier.type != "export_specifier":
                continue
            alias = node_text(specifier.child_by_field_name("alias"), source_bytes)
            if alias == "default":
                local = node_text(specifier.child_by_field_name("name"), source_bytes)
                index.default_name = index.default_name or local


def _default_export_target(value: Node, source_bytes: bytes) -> Tuple[str, Optional[Node]]:
    """Resolve ``export default <value>`` to a name or an anonymous component node."""
    node: Optional[Node] = value
    while node is not None:
        if node.type == "identifier":
            return node_text(node, source_bytes), None
        if node.type in _FUNCTION_NODES or node.type in _CLASS_NODES:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                return node_text(name_node, source_bytes), None
            return "", node
        if node.type in ("call_expression", "parenthesized_expression"):
            # memo(Component), withRouter(connect(...)(Component)), (Component)
            node = _first_argument(node)
            continue
        break
    return "", None


def _first_argument(node: Node) -> Optional[Node]:
    if node.type == "parenthesized_expression":
        return _first_named(node.named_children)
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return None
    return _first_named(arguments.named_children)


def _register_declaration(
    index: _ModuleIndex, node: Node, statement: Node, source_bytes: bytes
) -> str:
    if node.type in _DECLARATION_NODES:
        name = node_text(node.child_by_field_name("name"), source_bytes)
        if name:
            index.declarations.setdefault(name, node)
            index.statements.setdefault(name, statement)
        return name
    if node.type in _VARIABLE_NODES:
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            target = _component_value(declarator.child_by_field_name("value"))
            if target is None:
                continue
            name = node_text(name_node, source_bytes)
            index.declarations.setdefault(name, target)
            index.statements.setdefault(name, statement)
    return ""


def _component_value(value: Optional[Node]) -> Optional[Node]:
    """Unwrap ``memo(() => ...)``/``forwardRef(function ...)`` to the inner function."""
    node = value
    while node is not None:
        if node.type in _FUNCTION_NODES or node.type in _CLASS_NODES:
            return node
        if node.type in ("call_expression", "parenthesized_expression"):
            node = _first_argument(node)
            continue
        return None
    return None


def _first_named(nodes: Sequence[Node]) -> Optional[Node]:
    for node in nodes:
        if node.type != "comment":
            return node
    return None


# Props


def _merge_props(*sources: Sequence[PropDefinition]) -> List[PropDefinition]:
    merged: List[PropDefinition] = []
    seen: set[str] = set()
    for source in sources:
        for prop in source:
            if prop.name in seen:
                continue
            seen.add(prop.name)
            merged.append(prop)
    return merged


def _prop_types_objects(root: Node, source_bytes: bytes) -> Iterator[Node]:
    """Object literals assigned to ``X.propTypes`` or a ``static propTypes`` field."""
    for node in walk(root):
        descriptor: Optional[Node] = None
        if node.type == "assignment_expression":
            left = node.child_by_field_name("left")
            if left is not None and left.type == "member_expression":
                prop_name = node_text(left.child_by_field_name("property"), source_bytes)
                if prop_name == "propTypes":
                    descriptor = node.child_by_field_name("right")
        elif node.type in _FIELD_NODES:
            key = node.child_by_field_name("property") or node.child_by_field_name("name")
            if node_text(key, source_bytes) == "propTypes":
                descriptor = node.child_by_field_name("value")
        if descriptor is not None and descriptor.type == "object":
            yield descriptor


def _prop_types_props(root: Node, source_bytes: bytes) -> List[PropDefinition]:
    props: List[PropDefinition] = []
    for descriptor in _prop_types_objects(root, source_bytes):
        for pair in descriptor.named_children:
            if pair.type != "pair":
                continue
            name = _property_name(pair.child_by_field_name("key"), source_bytes)
            if not name:
                continue
            prop_type, required = _validator_type(pair.child_by_field_name("value"), source_bytes)
            props.append(
                PropDefinition(
                    name=name,
                    type=prop_type,
                    required=required,
                    description=_comment_description(pair, source_bytes),
                )
            )
    return props


def _validator_type(value: Optional[Node], source_bytes: bytes) -> Tuple[str, bool]:
    """``PropTypes.string.isRequired`` -> ``("string", True)``."""
    if value is None:
        return "any", False
    required = False
    node = value
    if node.type == "member_expression" and node_text(
        node.child_by_field_name("property"), source_bytes
    ) == "isRequired":
        required = True
        node = node.child_by_field_name("object") or node
    if node.type == "call_expression":
        node = node.child_by_field_name("function") or node
    if node.type == "member_expression":
        validator = node_text(node.child_by_field_name("property"), source_bytes)
    elif node.type == "identifier":
        validator = node_text(node, source_bytes)
    else:
        validator = ""
    return _PROPTYPE_VALIDATORS.get(validator, "any"), required


def _props_type_bodies(root: Node, source_bytes: bytes) -> Iterator[Node]:
    """Bodies of ``interface *Props`` and ``type *Props = {...}`` declarations."""
    for node in walk(root):
        if node.type == "interface_declaration":
            body = node.child_by_field_name("body")
        elif node.type == "type_alias_declaration":
            body = node.child_by_field_name("value")
            if body is not None and body.type != "object_type":
                continue
        else:
            continue
        if "Props" not in node_text(node.child_by_field_name("name"), source_bytes):
            continue
        if body is not None:
            yield body


def _interface_props(root: Node, source_bytes: bytes) -> List[PropDefinition]:
    props: List[PropDefinition] = []
    for body in _props_type_bodies(root, source_bytes):
        for member in body.named_children:
            if member.type != "property_signature":
                continue
            name = _property_name(member.child_by_field_name("name"), source_bytes)
            if not name:
                continue
            optional = any(child.type == "?" for child in member.children)
            props.append(
                PropDefinition(
                    name=name,
                    type=_annotation_type(member.child_by_field_name("type"), source_bytes),
                    required=not optional,
                    description=_comment_description(member, source_bytes),
                )
            )
    return props


def _annotation_type(annotation: Optional[Node], source_bytes: bytes) -> str:
    if annotation is None:
        return "any"
    type_node = annotation
    if annotation.type == "type_annotation":
        type_node = _first_named(annotation.named_children)
        if type_node is None:
            return "any"
    kind = type_node.type
    if kind == "predefined_type":
        return _TS_PREDEFINED.get(node_text(type_node, source_bytes), "any")
    if kind == "function_type":
        return "function"
    if kind == "object_type":
        return "object"
    if kind == "array_type":
        return "array"
    if kind == "generic_type":
        generic = node_text(type_node.child_by_field_name("name"), source_bytes)
        if generic in ("Array", "ReadonlyArray"):
            return "array"
    return "any"


def _destructured_props(declaration: Optional[Node], source_bytes: bytes) -> List[PropDefinition]:
    if declaration is None or declaration.type in _CLASS_NODES:
        return []
    parameters = declaration.child_by_field_name("parameters")
    if parameters is None:
        return []
    first = _first_named(parameters.named_children)
    if first is None:
        return []
    if first.type in ("required_parameter", "optional_parameter"):
        first = first.child_by_field_name("pattern")
    if first is not None and first.type == "assignment_pattern":
        first = first.child_by_field_name("left")
    if first is None or first.type != "object_pattern":
        return []

    props: List[PropDefinition] = []
    for entry in first.named_children:
        default: Optional[str] = None
        if entry.type == "shorthand_property_identifier_pattern":
            name = node_text(entry, source_bytes)
        elif entry.type == "object_assignment_pattern":
            name = node_text(entry.child_by_field_name("left"), source_bytes)
            default = node_text(entry.child_by_field_name("right"), source_bytes) or None
        elif entry.type == "pair_pattern":
            name = _property_name(entry.child_by_field_name("key"), source_bytes)
            target = entry.child_by_field_name("value")
            if target is not None and target.type == "assignment_pattern":
                default = node_text(target.child_by_field_name("right"), source_bytes) or None
        else:
            continue
        if name:
            props.append(PropDefinition(name=name, type="any", required=False, default_value=default))
    return props


def _property_name(key: Optional[Node], source_bytes: bytes) -> str:
    if key is None:
        return ""
    if key.type == "string":
        return _string_value(key, source_bytes)
    if key.type in ("property_identifier", "identifier", "shorthand_property_identifier_pattern"):
        return node_text(key, source_bytes)
    return ""


def _string_value(node: Node, source_bytes: bytes) -> str:
    text = node_text(node, source_bytes)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


# Context


def _jsx_text(root: Node, source_bytes: bytes) -> List[str]:
    texts: Dict[str, None] = {}
    for node in walk(root):
        if node.type != "jsx_element":
            continue
        opening = node.child_by_field_name("open_tag")
        tag = node_text(opening.child_by_field_name("name") if opening else None, source_bytes)
        if tag.lower() not in SIGNIFICANT_TEXT_TAGS:
            continue
        for child in node.named_children:
            text = ""
            if child.type == "jsx_text":
                text = node_text(child, source_bytes)
            elif child.type == "jsx_expression":
                inner = [n for n in child.named_children if n.type != "comment"]
                if len(inner) == 1 and inner[0].type == "string":
                    text = _string_value(inner[0], source_bytes)
            cleaned = " ".join(text.split())
            if cleaned:
                texts.setdefault(cleaned)
    return list(texts)


def _html_tags(root: Node, source_bytes: bytes) -> List[str]:
    tags: Dict[str, None] = {}
    for node in walk(root):
        if node.type not in ("jsx_opening_element", "jsx_self_closing_element"):
            continue
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.type != "identifier":
            continue
        tag = node_text(name_node, source_bytes)
        if tag[:1].islower() and tag == tag.lower():
            tags.setdefault(tag)
    return list(tags)


def _import_sources(root: Node, source_bytes: bytes) -> List[str]:
    sources: Dict[str, None] = {}
    for node in root.named_children:
        if node.type != "import_statement":
            continue
        source = node.child_by_field_name("source")
        if source is not None:
            sources.setdefault(_string_value(source, source_bytes))
    return list(sources)


def _collect_comments(
    root: Node,
    declaration: Optional[Node],
    statement: Optional[Node],
    source_bytes: bytes,
) -> CommentSet:
    collected = CommentSet()

    def _add(comment: Node, bucket: List[str]) -> None:
        raw = node_text(comment, source_bytes)
        cleaned = _clean_comment(raw)
        if not cleaned:
            return
        target = collected.jsdoc if raw.startswith("/**") else bucket
        if cleaned not in target:
            target.append(cleaned)

    if statement is not None:
        for comment in _preceding_comments(statement):
            _add(comment, collected.leading)
        for comment in _trailing_comments(statement):
            _add(comment, collected.trailing)

    if declaration is not None:
        for node in walk(declaration):
            if node.type == "return_statement":
                for comment in _preceding_comments(node):
                    _add(comment, collected.leading)
                for comment in _trailing_comments(node):
                    _add(comment, collected.trailing)

    for node in walk(root):
        if node.type == "jsx_expression":
            named = node.named_children
            if named and all(child.type == "comment" for child in named):
                for comment in named:
                    _add(comment, collected.inner)

    containers = [*_prop_types_objects(root, source_bytes), *_props_type_bodies(root, source_bytes)]
    for container in containers:
        for member in container.named_children:
            if member.type in ("property_signature", "pair"):
                for comment in _preceding_comments(member):
                    _add(comment, collected.leading)
    return collected


def _comment_description(node: Node, source_bytes: bytes) -> Optional[str]:
    parts = [_clean_comment(node_text(c, source_bytes)) for c in _preceding_comments(node)]
    text = " ".join(part for part in parts if part)
    return text or None


def _preceding_comments(node: Node) -> List[Node]:
    found: List[Node] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == "comment":
        before = sibling.prev_sibling
        if (
            before is not None
            and before.type != "comment"
            and before.end_point[0] == sibling.start_point[0]
        ):
            # Same line as the previous sibling: it trails that node instead.
            break
        found.append(sibling)
        sibling = before
    found.reverse()
    return found


def _trailing_comments(node: Node) -> Iterator[Node]:
    sibling = node.next_sibling
    if sibling is not None and sibling.type in (",", ";"):
        sibling = sibling.next_sibling
    while (
        sibling is not None
        and sibling.type == "comment"
        and sibling.start_point[0] == node.end_point[0]
    ):
        yield sibling
        sibling = sibling.next_sibling


def _clean_comment(raw: str) -> str:
    text = raw.strip()
    if text.startswith("//"):
        return text[2:].strip()
    if text.startswith("/*"):
        text = text[3:] if text.startswith("/**") else text[2:]
        if text.endswith("*/"):
            text = text[:-2]
        lines = [line.strip().lstrip("*").strip() for line in text.splitlines()]
        return " ".join(line for line in lines if line)
    return text


__all__ = [
    "ExtractedComponent",
    "ReactExtractor",
    "SIGNIFICANT_TEXT_TAGS",
    "infer_user_actions",
    "name_from_filename",
]
