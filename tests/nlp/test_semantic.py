"""Tests for rule-based semantic classification."""

from __future__ import annotations

import pytest

from userlens.models import ComponentCategory, ComponentContext, PropDefinition, UserAction
from userlens.nlp.semantic import SemanticClassifier, humanize, split_compact_case


def _props(*names: str) -> list[PropDefinition]:
    return [PropDefinition(name=name) for name in names]


@pytest.mark.parametrize(
    ("name", "props", "expected"),
    [
        ("LoginButton", [], ComponentCategory.FORM),
        ("SideMenu", [], ComponentCategory.NAVIGATION),
        ("Widget", _props("href"), ComponentCategory.NAVIGATION),
        ("Widget", _props("onSubmit"), ComponentCategory.FORM),
        ("Widget", _props("onClick"), ComponentCategory.INTERACTION),
        ("ActionBar", [], ComponentCategory.INTERACTION),
        ("ProductCard", [], ComponentCategory.DISPLAY),
        ("Wrapper", _props("children"), ComponentCategory.LAYOUT),
        ("", [], ComponentCategory.LAYOUT),
    ],
)
def test_categorize_first_match_wins(name: str, props, expected: ComponentCategory) -> None:
    assert SemanticClassifier().categorize(name, props) is expected


def test_categorize_always_returns_a_category() -> None:
    classifier = SemanticClassifier()
    for name in ("X", "lowercase", "Über", "123", "A_B-C", "navFormButtonList"):
        assert classifier.categorize(name, _props("x", "y")) in set(ComponentCategory)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Login", "Sign in to your account"),
        ("LoginForm", "Sign in to your account"),
        ("UserProfile", "Manage your profile information"),
        ("Navigation", "Navigate through the application"),
        ("DataGrid", "Data Grid"),
        ("HTMLEditor", "HTML Editor"),
    ],
)
def test_describe_precedence(name: str, expected: str) -> None:
    assert SemanticClassifier().describe(name, []) == expected


def test_custom_mapping_wins_over_builtin() -> None:
    classifier = SemanticClassifier({"LoginForm": "Sign in with your company account"})
    assert classifier.describe("LoginForm", []) == "Sign in with your company account"
    assert classifier.describe("LoginPage", []) == "Sign in to your account"


def test_classification_is_pure() -> None:
    classifier = SemanticClassifier()
    props = _props("onSearch", "categories")
    first = classifier.classify("ProductSearch", props)
    second = classifier.classify("ProductSearch", props)
    assert first == second == (ComponentCategory.LAYOUT, "Find what you need")


def test_semantic_info_keywords_and_goal() -> None:
    context = ComponentContext(file_path="ProductSearch.jsx", jsx_text=["Find the Products"])
    info = SemanticClassifier().semantic_info("ProductSearch", _props("onSearch"), context)

    assert info.purpose == "Find what you need"
    assert info.user_goal == "Finding specific information"
    assert info.keywords == ["product", "search", "find", "products"]


def test_infer_user_goal() -> None:
    submit = UserAction("submit", "LoginForm", "Submit the login form", "Sends the form data")
    typing = UserAction("input", "Email", "Enter information in the email", "Updates the input value")
    nav = UserAction("navigation", "NavLink", "Click the nav link", "Navigates to another page")

    assert SemanticClassifier.infer_user_goal([]) == "Using the application"
    assert SemanticClassifier.infer_user_goal([typing, submit]) == "Submitting information"
    assert SemanticClassifier.infer_user_goal([nav]) == "Navigating through the application"


def test_compact_case_helpers() -> None:
    assert split_compact_case("showRegisterLink") == "show Register Link"
    assert split_compact_case("XMLHttpRequest") == "XML Http Request"
    assert humanize("userMenu") == "User Menu"
