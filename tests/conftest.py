"""Pytest configuration and fixtures for Liquor tests."""

import pytest

from liquor import DictLoader, Environment
from liquor.environment import terminal


@pytest.fixture(autouse=True)
def _plain_diagnostics(monkeypatch):
    """Render diagnostics without ANSI colours so messages compare as text."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def env():
    """Create a basic Liquor Environment."""
    return Environment()


@pytest.fixture
def env_strict():
    """Create a Liquor Environment with strict_variables enabled."""
    return Environment(strict_variables=True)


@pytest.fixture
def env_with_loader():
    """Create a Liquor Environment with DictLoader and test templates."""
    loader = DictLoader(
        {
            "greeting": "Hello {{ name }}!",
            "card": "[{{ title }}]",
            "product": "<{{ product.name }}>",
            "item_line": "{{ item_line }};",
            "setter": "{% assign from_partial = 'set' %}",
            "loop_counter": "{{ forloop.index }}:{{ item }} ",
            "self_include": "x{% include 'self_include' %}",
            "nested/outer": "({% include 'nested/inner' %})",
            "nested/inner": "inner {{ name }}",
            "broken": "line one\n{{ 10 | divided_by: 0 }}",
            "bad_syntax": "{% if x %}never closed",
        }
    )
    return Environment(loader=loader)


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace.

    Args:
        template_result: The actual template rendering result.
        expected: The expected output.
    """
    # Normalize whitespace for comparison
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
