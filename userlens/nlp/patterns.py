"""Detection of cross-component UI patterns and multi-step workflows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ..models import (
    ComponentCategory,
    ComponentMetadata,
    DetectedPattern,
    UserAction,
    Workflow,
    WorkflowStep,
)

_COMPONENT_WEIGHT = 0.7
_ACTION_WEIGHT = 0.3


@dataclass(frozen=True)
class PatternDefinition:
    name: str
    keywords: Tuple[str, ...]
    action_phrases: Tuple[str, ...]
    description: str
    user_goal: str


@dataclass(frozen=True)
class ActionClause:
    """Matches actions of the given types whose listed fields contain a keyword.

    An empty ``types`` accepts every action type; empty ``keywords`` skips the
    text test entirely.
    """

    types: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = ("description",)
    keywords: Tuple[str, ...] = ()

    def matches(self, action: UserAction) -> bool:
        if self.types and action.type not in self.types:
            return False
        if not self.keywords:
            return True
        for field_name in self.fields:
            value = getattr(action, field_name).lower()
            if any(keyword in value for keyword in self.keywords):
                return True
        return False


@dataclass(frozen=True)
class ActionFilter:
    """Union of clauses: an action passes when any clause matches it."""

    clauses: Tuple[ActionClause, ...]

    def matches(self, action: UserAction) -> bool:
        return any(clause.matches(action) for clause in self.clauses)

    def select(self, actions: Iterable[UserAction]) -> List[UserAction]:
        return [action for action in actions if self.matches(action)]


@dataclass(frozen=True)
class ComponentFilter:
    name_keywords: Tuple[str, ...]
    categories: Tuple[ComponentCategory, ...] = ()

    def matches(self, component: ComponentMetadata) -> bool:
        if component.semantic_category in self.categories:
            return True
        lowered = component.name.lower()
        return any(keyword in lowered for keyword in self.name_keywords)


@dataclass(frozen=True)
class StepDefinition:
    name: str
    description: str
    actions: ActionFilter


@dataclass(frozen=True)
class WorkflowDefinition:
    """A workflow emitted when both detection tests pass over the whole project."""

    name: str
    description: str
    detect_components: ComponentFilter
    detect_actions: ActionFilter
    steps: Tuple[StepDefinition, ...]
    components: ComponentFilter


def _any_of(*clauses: ActionClause) -> ActionFilter:
    return ActionFilter(clauses=clauses)


def _text(*keywords: str, fields: Tuple[str, ...] = ("description",)) -> ActionClause:
    return ActionClause(fields=fields, keywords=keywords)


PATTERNS: Tuple[PatternDefinition, ...] = (
    PatternDefinition(
        "authentication",
        ("login", "signin", "register", "signup", "password", "auth"),
        ("submit credentials", "create account", "reset password"),
        "User authentication flow",
        "Access your account securely",
    ),
    PatternDefinition(
        "search",
        ("search", "filter", "results", "query"),
        ("enter search term", "apply filter", "view results"),
        "Search and filtering functionality",
        "Find specific information",
    ),
    PatternDefinition(
        "form-submission",
        ("form", "input", "submit", "field", "validation"),
        ("fill form", "validate input", "submit data"),
        "Data entry and submission",
        "Submit information",
    ),
    PatternDefinition(
        "crud",
        ("create", "add", "edit", "update", "delete", "remove", "list"),
        ("create new", "update existing", "delete item", "view items"),
        "Create, Read, Update, Delete operations",
        "Manage your data",
    ),
    PatternDefinition(
        "navigation",
        ("nav", "menu", "sidebar", "header", "footer", "link", "route"),
        ("navigate to", "open page", "go to section"),
        "Navigation through the application",
        "Move between different sections",
    ),
    PatternDefinition(
        "dashboard",
        ("dashboard", "overview", "stats", "analytics", "widgets"),
        ("view statistics", "monitor data", "check status"),
        "Overview and analytics display",
        "Get a comprehensive view of your data",
    ),
    PatternDefinition(
        "settings",
        ("settings", "preferences", "config", "options", "profile"),
        ("change settings", "update preferences", "configure options"),
        "User preferences and configuration",
        "Customize your experience",
    ),
    PatternDefinition(
        "notification",
        ("notification", "alert", "message", "toast"),
        ("view notifications", "mark as read", "dismiss alert"),
        "User notification system",
        "Stay informed about important updates",
    ),
    PatternDefinition(
        "cart-checkout",
        ("cart", "basket", "checkout", "payment", "order"),
        ("add to cart", "remove item", "complete purchase"),
        "Shopping cart and checkout process",
        "Complete your purchase",
    ),
    PatternDefinition(
        "wizard",
        ("wizard", "step", "progress", "multi-step", "flow"),
        ("proceed to next step", "go back", "complete process"),
        "Step-by-step guided process",
        "Complete a multi-step process",
    ),
)

WORKFLOWS: Tuple[WorkflowDefinition, ...] = (
    WorkflowDefinition(
        name="Authentication",
        description="Sign in or create a new account",
        detect_components=ComponentFilter(("login", "signin", "register")),
        detect_actions=_any_of(_text("sign in", "log in", "create account")),
        steps=(
            StepDefinition(
                "Enter credentials",
                "Enter your username/email and password",
                _any_of(
                    ActionClause(
                        types=("input",),
                        fields=("trigger",),
                        keywords=("username", "email", "password"),
                    )
                ),
            ),
            StepDefinition(
                "Submit credentials",
                "Click the sign in button to access your account",
                _any_of(
                    ActionClause(types=("submit",)),
                    ActionClause(types=("click",), fields=("trigger",), keywords=("login", "signin")),
                ),
            ),
        ),
        components=ComponentFilter(("login", "signin", "auth")),
    ),
    WorkflowDefinition(
        name="Search and Filter",
        description="Find and narrow down results",
        detect_components=ComponentFilter(("search", "filter", "results")),
        detect_actions=_any_of(_text("search", "filter", "find")),
        steps=(
            StepDefinition(
                "Enter search term",
                "Type what you want to find in the search box",
                _any_of(ActionClause(types=("input",), fields=("trigger",), keywords=("search",))),
            ),
            StepDefinition(
                "Apply filters",
                "Narrow down results by selecting specific criteria",
                _any_of(_text("filter", fields=("description", "trigger"))),
            ),
            StepDefinition(
                "View results",
                "Browse through the matching items",
                _any_of(_text("results", "found", fields=("outcome",))),
            ),
        ),
        components=ComponentFilter(("search", "filter", "results")),
    ),
    WorkflowDefinition(
        name="Form Submission",
        description="Enter and submit information",
        detect_components=ComponentFilter(("form",), categories=(ComponentCategory.FORM,)),
        detect_actions=_any_of(ActionClause(types=("submit",)), _text("submit", "save")),
        steps=(
            StepDefinition(
                "Fill in the form",
                "Enter the required information in the form fields",
                _any_of(ActionClause(types=("input",))),
            ),
            StepDefinition(
                "Validate information",
                "Ensure all information is correct and complete",
                _any_of(_text("validate", "check")),
            ),
            StepDefinition(
                "Submit the form",
                "Send the information by clicking the submit button",
                _any_of(
                    ActionClause(types=("submit",)),
                    ActionClause(types=("click",), fields=("trigger",), keywords=("submit", "save")),
                ),
            ),
        ),
        components=ComponentFilter(("form",), categories=(ComponentCategory.FORM,)),
    ),
    WorkflowDefinition(
        name="Manage Items",
        description="Create, view, edit and delete items",
        detect_components=ComponentFilter(("create", "edit", "delete", "list")),
        detect_actions=_any_of(_text("create", "add", "edit", "update", "delete", "remove")),
        steps=(
            StepDefinition(
                "View items",
                "Browse through the available items",
                _any_of(_text("view", "list", "display", fields=("outcome",))),
            ),
            StepDefinition(
                "Create new item",
                "Add a new item by filling in the required information",
                _any_of(_text("create", "add", "new")),
            ),
            StepDefinition(
                "Edit item",
                "Modify an existing item",
                _any_of(_text("edit", "update", "modify")),
            ),
            StepDefinition(
                "Delete item",
                "Remove an item that is no longer needed",
                _any_of(_text("delete", "remove")),
            ),
        ),
        components=ComponentFilter(("create", "edit", "delete", "list")),
    ),
    WorkflowDefinition(
        name="Shopping Checkout",
        description="Complete a purchase",
        detect_components=ComponentFilter(("cart", "checkout", "payment")),
        detect_actions=_any_of(_text("add to cart", "checkout", "payment", "purchase")),
        steps=(
            StepDefinition(
                "Add items to cart",
                "Select items and add them to your shopping cart",
                _any_of(_text("add to cart"), _text("added to cart", fields=("outcome",))),
            ),
            StepDefinition(
                "Review cart",
                "Check the items in your cart and make any adjustments",
                _any_of(_text("view cart", fields=("outcome",)), _text("cart", fields=("trigger",))),
            ),
            StepDefinition(
                "Proceed to checkout",
                "Begin the checkout process",
                _any_of(_text("checkout", fields=("description", "outcome"))),
            ),
            StepDefinition(
                "Enter shipping information",
                "Provide your shipping details",
                _any_of(_text("shipping"), _text("address", fields=("trigger",))),
            ),
            StepDefinition(
                "Enter payment information",
                "Provide your payment details",
                _any_of(
                    _text("payment", fields=("description", "trigger")),
                    _text("credit card", fields=("trigger",)),
                ),
            ),
            StepDefinition(
                "Complete purchase",
                "Finalize your order",
                _any_of(_text("complete", "purchase", "order")),
            ),
        ),
        components=ComponentFilter(("cart", "checkout", "payment", "order")),
    ),
)


class PatternDetector:
    """Ranks predefined UI patterns and assembles workflows over a whole project."""

    def __init__(
        self,
        patterns: Sequence[PatternDefinition] = PATTERNS,
        workflows: Sequence[WorkflowDefinition] = WORKFLOWS,
    ) -> None:
        self._patterns = tuple(patterns)
        self._workflows = tuple(workflows)

    def detect_patterns(self, components: Sequence[ComponentMetadata]) -> List[DetectedPattern]:
        detected: List[DetectedPattern] = []
        for pattern in self._patterns:
            matched = [
                component
                for component in components
                if any(keyword in component.name.lower() for keyword in pattern.keywords)
            ]
            if not matched:
                continue
            actions = [
                action
                for component in matched
                for action in component.user_actions
                if _mentions_any(action, pattern.action_phrases)
            ]
            detected.append(
                DetectedPattern(
                    name=pattern.name,
                    description=pattern.description,
                    user_goal=pattern.user_goal,
                    matched_components=matched,
                    matched_actions=actions,
                    confidence=confidence_for(pattern, len(matched), len(actions)),
                )
            )
        # list.sort is stable, so equal scores keep declaration order.
        detected.sort(key=lambda item: item.confidence, reverse=True)
        return detected

    def detect_workflows(self, components: Sequence[ComponentMetadata]) -> List[Workflow]:
        # Step filters run over every action in the project, not only the
        # actions of the workflow's own components.
        all_actions = [action for component in components for action in component.user_actions]
        workflows: List[Workflow] = []
        for definition in self._workflows:
            if not any(definition.detect_components.matches(c) for c in components):
                continue
            if not any(definition.detect_actions.matches(a) for a in all_actions):
                continue
            workflows.append(
                Workflow(
                    name=definition.name,
                    description=definition.description,
                    steps=[
                        WorkflowStep(
                            name=step.name,
                            description=step.description,
                            actions=step.actions.select(all_actions),
                        )
                        for step in definition.steps
                    ],
                    components=[c for c in components if definition.components.matches(c)],
                )
            )
        return workflows


def confidence_for(pattern: PatternDefinition, component_count: int, action_count: int) -> float:
    """Weighted match ratio, each ratio capped at 1 so the score stays in [0, 1]."""
    component_score = _ratio(component_count, len(pattern.keywords))
    action_score = _ratio(action_count, len(pattern.action_phrases))
    return min(1.0, _COMPONENT_WEIGHT * component_score + _ACTION_WEIGHT * action_score)


def _ratio(count: int, total: int) -> float:
    if total <= 0 or count <= 0:
        return 0.0
    return min(1.0, count / total)


def _mentions_any(action: UserAction, phrases: Sequence[str]) -> bool:
    description = action.description.lower()
    outcome = action.outcome.lower()
    for phrase in phrases:
        needle = phrase.lower()
        if needle in description or needle in outcome:
            return True
    return False


__all__ = [
    "ActionClause",
    "ActionFilter",
    "ComponentFilter",
    "PATTERNS",
    "PatternDefinition",
    "PatternDetector",
    "StepDefinition",
    "WORKFLOWS",
    "WorkflowDefinition",
    "confidence_for",
]
