"""Core data models shared across userlens components.

Records that are persisted (cache entries and run artifacts) serialise to the
camelCase JSON layout read by documentation generators. ``from_dict`` raises
``ValueError`` when a payload is missing required fields or carries values of
the wrong type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence


class ComponentCategory(str, Enum):
    """Closed set of semantic categories a component can belong to."""

    FORM = "form"
    NAVIGATION = "navigation"
    DISPLAY = "display"
    INTERACTION = "interaction"
    LAYOUT = "layout"


PROP_TYPES: tuple[str, ...] = (
    "string",
    "number",
    "boolean",
    "function",
    "object",
    "array",
    "node",
    "element",
    "any",
)

ACTION_TYPES: tuple[str, ...] = ("click", "input", "navigation", "submit")


@dataclass
class PropDefinition:
    """A single component prop."""

    name: str
    type: str = "any"
    required: bool = False
    description: Optional[str] = None
    default_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        return data

    @classmethod
    def from_dict(cls, payload: object) -> "PropDefinition":
        data = _require_mapping(payload, "prop")
        prop_type = _require_str(data, "type")
        if prop_type not in PROP_TYPES:
            raise ValueError(f"Unknown prop type: {prop_type!r}")
        return cls(
            name=_require_str(data, "name"),
            type=prop_type,
            required=_require_bool(data, "required"),
            description=_optional_str(data, "description"),
            default_value=_optional_str(data, "defaultValue"),
        )


@dataclass
class UserAction:
    """Something a user can do with a component, phrased for end users."""

    type: str
    trigger: str
    description: str
    outcome: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "trigger": self.trigger,
            "description": self.description,
            "outcome": self.outcome,
        }

    @classmethod
    def from_dict(cls, payload: object) -> "UserAction":
        data = _require_mapping(payload, "user action")
        action_type = _require_str(data, "type")
        if action_type not in ACTION_TYPES:
            raise ValueError(f"Unknown action type: {action_type!r}")
        return cls(
            type=action_type,
            trigger=_require_str(data, "trigger"),
            description=_require_str(data, "description"),
            outcome=_require_str(data, "outcome"),
        )


@dataclass
class ComponentMetadata:
    """Structured description of one UI component found in a source file."""

    name: str
    file_path: str
    props: List[PropDefinition] = field(default_factory=list)
    children: List["ComponentMetadata"] = field(default_factory=list)
    user_actions: List[UserAction] = field(default_factory=list)
    semantic_category: ComponentCategory = ComponentCategory.LAYOUT
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "filePath": self.file_path,
            "props": [prop.to_dict() for prop in self.props],
            "children": [child.to_dict() for child in self.children],
            "userActions": [action.to_dict() for action in self.user_actions],
            "semanticCategory": self.semantic_category.value,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, payload: object) -> "ComponentMetadata":
        data = _require_mapping(payload, "component metadata")
        category = _require_str(data, "semanticCategory")
        try:
            semantic_category = ComponentCategory(category)
        except ValueError as exc:
            raise ValueError(f"Unknown semantic category: {category!r}") from exc
        return cls(
            name=_require_str(data, "name"),
            file_path=_require_str(data, "filePath"),
            props=[PropDefinition.from_dict(item) for item in _require_list(data, "props")],
            children=[cls.from_dict(item) for item in _require_list(data, "children")],
            user_actions=[
                UserAction.from_dict(item) for item in _require_list(data, "userActions")
            ],
            semantic_category=semantic_category,
            description=_require_str(data, "description"),
        )


@dataclass
class CommentSet:
    """Comments gathered around a component declaration and its rendered output."""

    leading: List[str] = field(default_factory=list)
    trailing: List[str] = field(default_factory=list)
    inner: List[str] = field(default_factory=list)
    jsdoc: List[str] = field(default_factory=list)


@dataclass
class ComponentContext:
    """Auxiliary, non-persisted signals handed to the semantic classifier."""

    file_path: str
    props: List[PropDefinition] = field(default_factory=list)
    jsx_text: List[str] = field(default_factory=list)
    comments: CommentSet = field(default_factory=CommentSet)
    import_sources: List[str] = field(default_factory=list)
    html_tags: List[str] = field(default_factory=list)


@dataclass
class SemanticInfo:
    """Purpose, goal and keywords inferred for a component."""

    purpose: str
    user_goal: str
    keywords: List[str] = field(default_factory=list)


@dataclass
class DetectedPattern:
    """A cross-component UI motif with a confidence score in [0, 1]."""

    name: str
    description: str
    user_goal: str
    matched_components: List[ComponentMetadata] = field(default_factory=list)
    matched_actions: List[UserAction] = field(default_factory=list)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "userGoal": self.user_goal,
            "matchedComponents": [c.to_dict() for c in self.matched_components],
            "matchedActions": [a.to_dict() for a in self.matched_actions],
            "confidence": self.confidence,
        }


@dataclass
class WorkflowStep:
    name: str
    description: str
    actions: List[UserAction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "actions": [action.to_dict() for action in self.actions],
        }


@dataclass
class Workflow:
    """An ordered, multi-step user task assembled from project-wide actions."""

    name: str
    description: str
    steps: List[WorkflowStep] = field(default_factory=list)
    components: List[ComponentMetadata] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "steps": [step.to_dict() for step in self.steps],
            "components": [c.to_dict() for c in self.components],
        }


@dataclass
class CacheEntry:
    """Persisted metadata for one source file, keyed by its content hash."""

    source_file_hash: str
    component_metadata: ComponentMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceFileHash": self.source_file_hash,
            "componentMetadata": self.component_metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: object) -> "CacheEntry":
        data = _require_mapping(payload, "cache entry")
        if "componentMetadata" not in data:
            raise ValueError("Missing field: componentMetadata")
        return cls(
            source_file_hash=_require_str(data, "sourceFileHash"),
            component_metadata=ComponentMetadata.from_dict(data["componentMetadata"]),
        )


@dataclass
class ChangeSet:
    """Files added, modified or removed since the previous run, plus artifact dirty flags."""

    new_components: List[str] = field(default_factory=list)
    changed_components: List[str] = field(default_factory=list)
    deleted_components: List[str] = field(default_factory=list)
    components_json_changed: bool = False
    patterns_json_changed: bool = False
    workflows_json_changed: bool = False

    def is_empty(self) -> bool:
        return not (
            self.new_components
            or self.changed_components
            or self.deleted_components
            or self.components_json_changed
            or self.patterns_json_changed
            or self.workflows_json_changed
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "newComponents": list(self.new_components),
            "changedComponents": list(self.changed_components),
            "deletedComponents": list(self.deleted_components),
            "componentsJsonChanged": self.components_json_changed,
            "patternsJsonChanged": self.patterns_json_changed,
            "workflowsJsonChanged": self.workflows_json_changed,
        }

    @classmethod
    def from_dict(cls, payload: object) -> "ChangeSet":
        data = _require_mapping(payload, "changeset")
        return cls(
            new_components=_require_str_list(data, "newComponents"),
            changed_components=_require_str_list(data, "changedComponents"),
            deleted_components=_require_str_list(data, "deletedComponents"),
            components_json_changed=_require_bool(data, "componentsJsonChanged"),
            patterns_json_changed=_require_bool(data, "patternsJsonChanged"),
            workflows_json_changed=_require_bool(data, "workflowsJsonChanged"),
        )


@dataclass
class RunSummary:
    """Counters reported at the end of every analysis run."""

    processed: int = 0
    hits: int = 0
    misses: int = 0
    stale: int = 0
    deleted: int = 0
    errors: int = 0
    skipped: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.errors == 0

    def describe(self) -> str:
        text = (
            f"{self.processed} files processed: {self.hits} cached, {self.misses} new, "
            f"{self.stale} changed, {self.deleted} deleted, {self.errors} failed"
        )
        if self.skipped:
            text += f" (skipped: {', '.join(self.skipped)})"
        return text


@dataclass
class AnalysisResult:
    """Everything one ``analyze_batch`` invocation hands to downstream generators."""

    components: List[ComponentMetadata]
    patterns: List[DetectedPattern]
    workflows: List[Workflow]
    changeset: ChangeSet
    summary: RunSummary


def _require_mapping(payload: object, label: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"Expected a mapping for {label}")
    return payload


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Missing or invalid field: {key}")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Invalid field: {key}")
    return value


def _require_bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if not isinstance(value, bool):
        raise ValueError(f"Missing or invalid field: {key}")
    return value


def _require_list(data: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise ValueError(f"Missing or invalid field: {key}")
    return value


def _require_str_list(data: Mapping[str, Any], key: str) -> List[str]:
    values = _require_list(data, key)
    if not all(isinstance(item, str) for item in values):
        raise ValueError(f"Invalid entries in field: {key}")
    return list(values)


__all__ = [
    "ACTION_TYPES",
    "AnalysisResult",
    "CacheEntry",
    "ChangeSet",
    "CommentSet",
    "ComponentCategory",
    "ComponentContext",
    "ComponentMetadata",
    "DetectedPattern",
    "PROP_TYPES",
    "PropDefinition",
    "RunSummary",
    "SemanticInfo",
    "UserAction",
    "Workflow",
    "WorkflowStep",
]
