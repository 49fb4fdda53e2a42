"""Tests for the include and render tags.

include shares the caller's scope; render isolates it. Both load their
target through the environment's loader and cache, enforce the nesting
limit, and report failures inside the sub-template with its name, line
and the include chain.
"""

from __future__ import annotations

import pytest

from liquor import Environment, RenderError, TemplateNotFoundError, TemplateSyntaxError
from liquor.environment.exceptions import ErrorCode, FilterError


def _render(env: Environment, source: str, **context) -> str:
    return env.from_string(source).render(context)


class TestInclude:
    """{% include %} shares the caller's scope."""

    def test_sees_caller_variables(self, env_with_loader):
        assert _render(env_with_loader, "{% assign name = 'Ada' %}{% include 'greeting' %}") == "Hello Ada!"

    def test_sees_render_arguments(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'greeting' %}", name="Bob") == "Hello Bob!"

    def test_assign_inside_is_visible_after(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'setter' %}[{{ from_partial }}]") == "[set]"

    def test_keyword_bindings(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'card', title: 'Hi' %}") == "[Hi]"

    def test_keyword_bindings_do_not_outlive_include(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'card', title: 'Hi' %}({{ title }})") == "[Hi]()"

    def test_with_binds_template_name(self, env_with_loader):
        source = "{% include 'product' with p %}"
        assert _render(env_with_loader, source, p={"name": "Mug"}) == "<Mug>"

    def test_with_alias(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'card' with t as title %}", t="x") == "[x]"

    def test_for_renders_once_per_item(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'item_line' for xs %}", xs=[1, 2]) == "1;2;"

    def test_for_with_alias_sets_forloop(self, env_with_loader):
        source = "{% include 'loop_counter' for items as item %}"
        assert _render(env_with_loader, source, items=["a", "b"]) == "1:a 2:b "

    def test_for_over_empty_collection(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'item_line' for xs %}", xs=[]) == ""

    def test_dynamic_name(self, env_with_loader):
        assert _render(env_with_loader, "{% include tpl %}", tpl="card", title="T") == "[T]"

    def test_nested_include(self, env_with_loader):
        assert _render(env_with_loader, "{% include 'nested/outer' %}", name="N") == "(inner N)"

    def test_target_compiled_once(self, env_with_loader):
        _render(env_with_loader, "{% for i in (1..3) %}{% include 'card' %}{% endfor %}")
        info = env_with_loader.cache_info()
        assert info["misses"] == 1
        assert info["hits"] == 2


class TestRender:
    """{% render %} isolates the sub-template."""

    def test_does_not_see_caller_variables(self, env_with_loader):
        assert _render(env_with_loader, "{% assign name = 'Ada' %}{% render 'greeting' %}") == "Hello !"

    def test_does_not_see_render_arguments(self, env_with_loader):
        assert _render(env_with_loader, "{% render 'greeting' %}", name="Ada") == "Hello !"

    def test_explicit_bindings(self, env_with_loader):
        assert _render(env_with_loader, "{% render 'greeting', name: who %}", who="Bob") == "Hello Bob!"

    def test_assign_inside_does_not_leak(self, env_with_loader):
        assert _render(env_with_loader, "{% render 'setter' %}[{{ from_partial }}]") == "[]"

    def test_sees_globals(self, env_with_loader):
        env = Environment(loader=env_with_loader.loader, globals={"name": "World"})
        assert _render(env, "{% render 'greeting' %}") == "Hello World!"

    def test_with(self, env_with_loader):
        assert _render(env_with_loader, "{% render 'product' with p %}", p={"name": "Cup"}) == "<Cup>"

    def test_with_alias(self, env_with_loader):
        assert _render(env_with_loader, "{% render 'card' with t as title %}", t="y") == "[y]"


class TestIncludeFailures:
    """Loading and nesting failures."""

    def test_missing_template(self, env_with_loader):
        with pytest.raises(RenderError) as exc_info:
            _render(env_with_loader, "{% include 'nope' %}")
        cause = exc_info.value.__cause__
        assert isinstance(cause, TemplateNotFoundError)
        assert cause.tag_name == "include"
        assert exc_info.value.code is ErrorCode.TEMPLATE_NOT_FOUND

    def test_missing_render_target(self, env_with_loader):
        with pytest.raises(RenderError) as exc_info:
            _render(env_with_loader, "{% render 'nope' %}")
        assert exc_info.value.__cause__.tag_name == "render"

    def test_missing_template_suggestion(self, env_with_loader):
        with pytest.raises(RenderError) as exc_info:
            _render(env_with_loader, "{% include 'greting' %}")
        assert "Did you mean 'greeting'?" in str(exc_info.value)

    def test_no_loader(self, env):
        with pytest.raises(RenderError) as exc_info:
            _render(env, "{% include 'card' %}")
        assert isinstance(exc_info.value.__cause__, TemplateNotFoundError)
        assert "no loader configured" in str(exc_info.value)

    def test_recursive_include_hits_depth_limit(self, env_with_loader):
        env = Environment(loader=env_with_loader.loader, max_include_depth=5)
        with pytest.raises(RenderError) as exc_info:
            _render(env, "{% include 'self_include' %}")
        assert exc_info.value.code is ErrorCode.INCLUDE_DEPTH
        assert "Maximum include depth exceeded (5)" in str(exc_info.value)

    def test_default_depth_limit(self, env_with_loader):
        with pytest.raises(RenderError) as exc_info:
            _render(env_with_loader, "{% include 'self_include' %}")
        assert exc_info.value.code is ErrorCode.INCLUDE_DEPTH

    def test_error_inside_included_template(self, env_with_loader):
        """The error names the included template, its line and the include chain."""
        template = env_with_loader.from_string("intro\n{% include 'broken' %}", name="page")
        with pytest.raises(RenderError) as exc_info:
            template.render()
        error = exc_info.value
        assert error.template_name == "broken"
        assert error.lineno == 2
        assert error.template_stack == [("page", 2)]
        assert isinstance(error.__cause__, FilterError)
        assert "Division by zero" in str(error)

    def test_syntax_error_in_included_template(self, env_with_loader):
        with pytest.raises(RenderError) as exc_info:
            _render(env_with_loader, "{% include 'bad_syntax' %}")
        assert isinstance(exc_info.value.__cause__, TemplateSyntaxError)
        assert "Unclosed 'if' block" in str(exc_info.value)
