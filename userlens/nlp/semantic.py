"""Rule-based semantic classification of components.

Everything here is a pure function of its inputs so cached metadata stays
reproducible: the same name, props and context always yield the same
category and description.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models import ComponentCategory, ComponentContext, PropDefinition, SemanticInfo, UserAction

_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z])([A-Z][a-z])")
_WORD = re.compile(r"[A-Za-z]+")

_KEYWORD_STOPWORDS = frozenset({"the", "and", "for", "with"})


@dataclass(frozen=True)
class CategoryRule:
    """Assigns ``category`` when the name or any prop name contains a keyword."""

    category: ComponentCategory
    name_keywords: Tuple[str, ...]
    prop_keywords: Tuple[str, ...] = ()

    def matches(self, name: str, prop_names: Sequence[str]) -> bool:
        if any(keyword in name for keyword in self.name_keywords):
            return True
        return any(keyword in prop for prop in prop_names for keyword in self.prop_keywords)


CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(
        ComponentCategory.FORM,
        name_keywords=("form", "input", "login", "register"),
        prop_keywords=("onsubmit", "form"),
    ),
    CategoryRule(
        ComponentCategory.NAVIGATION,
        name_keywords=("nav", "menu", "link", "route"),
        prop_keywords=("href", "to", "path"),
    ),
    CategoryRule(
        ComponentCategory.INTERACTION,
        name_keywords=("button", "click", "action"),
        prop_keywords=("onclick", "onpress"),
    ),
    CategoryRule(
        ComponentCategory.DISPLAY,
        name_keywords=("view", "display", "show", "card", "list", "table"),
    ),
)

DEFAULT_CATEGORY = ComponentCategory.LAYOUT

# Order matters: substring lookups return the first pattern contained in the name.
SEMANTIC_MAPPINGS: Mapping[str, str] = MappingProxyType(
    {
        "Login": "Sign in to your account",
        "Register": "Create a new account",
        "SignUp": "Create a new account",
        "Profile": "Manage your profile information",
        "Settings": "Configure your preferences",
        "Dashboard": "View your overview and statistics",
        "User": "Your account information",
        "Password": "Manage password security",
        "Notification": "Manage your alerts and messages",
        "Search": "Find what you need",
        "Filter": "Narrow down your results",
        "Cart": "Your shopping cart",
        "Checkout": "Complete your purchase",
        "Product": "View product details",
        "Admin": "Administrative controls",
        "Navigation": "Navigate through the application",
        "Menu": "Access different sections",
        "Form": "Enter your information",
        "List": "Browse through items",
        "Table": "View structured data",
        "Modal": "View additional information",
        "Popup": "Quick information or action",
        "Button": "Perform an action",
        "Input": "Enter information",
        "Select": "Choose from options",
        "Dropdown": "Select from a list",
        "Checkbox": "Toggle an option",
        "Radio": "Choose one option",
        "Sidebar": "Access additional navigation",
        "Header": "Main navigation area",
        "Footer": "Additional information",
    }
)

_GOAL_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("login", "signin"), "Signing in to access your account"),
    (("register", "signup"), "Creating a new account"),
    (("search",), "Finding specific information"),
    (("form",), "Submitting information"),
    (("dashboard",), "Viewing an overview of your information"),
    (("settings",), "Configuring your preferences"),
)


def split_compact_case(name: str) -> str:
    """Insert spaces at camelCase/PascalCase boundaries (``HTMLForm`` -> ``HTML Form``)."""
    spaced = _LOWER_UPPER.sub(r"\1 \2", name)
    return _ACRONYM_BOUNDARY.sub(r"\1 \2", spaced)


def humanize(name: str) -> str:
    spaced = split_compact_case(name)
    return spaced[:1].upper() + spaced[1:]


class SemanticClassifier:
    """Maps a component's name, props and context to a category and a description."""

    def __init__(
        self,
        custom_mappings: Optional[Mapping[str, str]] = None,
        *,
        rules: Sequence[CategoryRule] = CATEGORY_RULES,
        mappings: Mapping[str, str] = SEMANTIC_MAPPINGS,
    ) -> None:
        self._custom_mappings = MappingProxyType(dict(custom_mappings or {}))
        self._rules = tuple(rules)
        self._mappings = mappings

    def classify(
        self,
        name: str,
        props: Sequence[PropDefinition],
        context: Optional[ComponentContext] = None,
    ) -> Tuple[ComponentCategory, str]:
        return self.categorize(name, props, context), self.describe(name, props, context)

    def categorize(
        self,
        name: str,
        props: Sequence[PropDefinition],
        context: Optional[ComponentContext] = None,
    ) -> ComponentCategory:
        lowered = name.lower()
        prop_names = [prop.name.lower() for prop in props]
        for rule in self._rules:
            if rule.matches(lowered, prop_names):
                return rule.category
        return DEFAULT_CATEGORY

    def describe(
        self,
        name: str,
        props: Sequence[PropDefinition],
        context: Optional[ComponentContext] = None,
    ) -> str:
        custom = self._custom_mappings.get(name)
        if custom:
            return custom
        exact = self._mappings.get(name)
        if exact:
            return exact
        for pattern, description in self._mappings.items():
            if pattern in name:
                return description
        return humanize(name)

    def semantic_info(
        self,
        name: str,
        props: Sequence[PropDefinition],
        context: Optional[ComponentContext] = None,
    ) -> SemanticInfo:
        purpose = self.describe(name, props, context)
        return SemanticInfo(
            purpose=purpose,
            user_goal=self._goal_for_component(name, purpose),
            keywords=self.extract_keywords(name, props, context),
        )

    def extract_keywords(
        self,
        name: str,
        props: Sequence[PropDefinition],
        context: Optional[ComponentContext] = None,
    ) -> List[str]:
        keywords: dict[str, None] = {}
        for word in split_compact_case(name).lower().split():
            if len(word) > 2:
                keywords.setdefault(word)
        prop_words = (
            word for prop in props for word in split_compact_case(prop.name).lower().split()
        )
        text_words: Iterable[str] = ()
        if context is not None:
            text_words = (
                match.group(0).lower() for text in context.jsx_text for match in _WORD.finditer(text)
            )
        for word in (*prop_words, *text_words):
            if len(word) > 2 and word not in _KEYWORD_STOPWORDS:
                keywords.setdefault(word)
        return list(keywords)

    @staticmethod
    def infer_user_goal(actions: Sequence[UserAction]) -> str:
        """Summarise what a user is trying to achieve with a sequence of actions."""
        if not actions:
            return "Using the application"

        types = {action.type for action in actions}
        triggers = [action.trigger.lower() for action in actions]

        if "submit" in types and ("input" in types or any("form" in t for t in triggers)):
            return "Submitting information"
        if "navigation" in types or any("link" in t or "menu" in t for t in triggers):
            return "Navigating through the application"
        if any("search" in t for t in triggers):
            return "Searching for information"
        if "click" in types and any("select" in t or "option" in t for t in triggers):
            return "Making a selection"

        first, last = actions[0], actions[-1]
        return f"{first.type.capitalize()}ing to {last.outcome}"

    @staticmethod
    def _goal_for_component(name: str, purpose: str) -> str:
        lowered = name.lower()
        for keywords, goal in _GOAL_RULES:
            if any(keyword in lowered for keyword in keywords):
                return goal
        return f"Interacting with the {purpose.lower()}"


__all__ = [
    "CATEGORY_RULES",
    "CategoryRule",
    "DEFAULT_CATEGORY",
    "SEMANTIC_MAPPINGS",
    "SemanticClassifier",
    "humanize",
    "split_compact_case",
]
