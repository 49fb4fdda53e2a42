"""Tests for the Context scope chain and RenderContext."""

import pytest

from liquor.context import Context
from liquor.render_context import (
    RenderContext,
    get_render_context,
    render_context,
)
from liquor.template import UNDEFINED, LoopContext
from liquor.environment.exceptions import ErrorCode, RenderError


class TestLookup:
    """Frames are searched innermost first."""

    def test_data_and_globals(self):
        ctx = Context({"a": 1}, {"a": 0, "g": 2})
        assert ctx.lookup("a") == 1
        assert ctx.lookup("g") == 2

    def test_missing_is_undefined(self):
        assert Context().lookup("nope") is UNDEFINED

    def test_none_is_a_value(self):
        assert Context({"a": None}).lookup("a") is None

    def test_contains(self):
        ctx = Context({"a": 1}, {"g": 2})
        assert "a" in ctx
        assert "g" in ctx
        assert "z" not in ctx

    def test_names(self):
        ctx = Context({"a": 1}, {"g": 2})
        ctx.assign("s", 3)
        assert ctx.names() == frozenset({"a", "g", "s"})


class TestResolve:
    """Dotted and indexed path resolution."""

    @pytest.fixture
    def ctx(self):
        return Context({"user": {"name": "Ada", "tags": ["x", "y"], "the key": 1}})

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("user.name", "Ada"),
            ("user.tags[0]", "x"),
            ("user.tags.1", "y"),
            ("user.tags[-1]", "y"),
            ("user.tags.size", 2),
            ("user.tags.first", "x"),
            ('user["the key"]', 1),
            ("user['name']", "Ada"),
        ],
    )
    def test_paths(self, ctx, path, expected):
        assert ctx.resolve(path) == expected

    def test_missing_segment(self, ctx):
        assert ctx.resolve("user.missing.deeper") is UNDEFINED

    @pytest.mark.parametrize("path", ["", "user..name", "1user", "user[x]"])
    def test_malformed_path(self, ctx, path):
        with pytest.raises(ValueError):
            ctx.resolve(path)


class TestBinding:
    """assign, push and isolation."""

    def test_assign_does_not_touch_data(self):
        data = {"a": 1}
        ctx = Context(data)
        ctx.assign("a", 2)
        assert ctx.lookup("a") == 2
        assert data == {"a": 1}

    def test_push_shadows_then_restores(self):
        ctx = Context({"x": "outer"})
        with ctx.push({"x": "inner"}) as frame:
            assert ctx.lookup("x") == "inner"
            assert ctx.depth == 1
            frame["x"] = "rebound"
            assert ctx.lookup("x") == "rebound"
        assert ctx.lookup("x") == "outer"
        assert ctx.depth == 0

    def test_push_pops_on_exception(self):
        ctx = Context()
        with pytest.raises(RuntimeError), ctx.push({"tmp": 1}):
            raise RuntimeError
        assert ctx.lookup("tmp") is UNDEFINED

    def test_assign_inside_push_survives(self):
        ctx = Context()
        with ctx.push():
            ctx.assign("kept", True)
        assert ctx.lookup("kept") is True

    def test_pushed_frame_copies_bindings(self):
        bindings = {"a": 1}
        ctx = Context()
        with ctx.push(bindings) as frame:
            frame["a"] = 2
        assert bindings == {"a": 1}

    def test_isolated(self):
        ctx = Context({"a": 1}, {"g": 2}, strict=True)
        ctx.assign("s", 3)
        child = ctx.isolated({"b": 4})
        assert child.lookup("a") is UNDEFINED
        assert child.lookup("s") is UNDEFINED
        assert child.lookup("g") == 2
        assert child.lookup("b") == 4
        assert child.strict is True
        child.assign("c", 5)
        assert ctx.lookup("c") is UNDEFINED

    def test_repr(self):
        ctx = Context()
        ctx.assign("b", 1)
        ctx.assign("a", 1)
        assert repr(ctx) == "<Context scope=['a', 'b'] depth=0>"


class TestRenderContext:
    """Per-render state held in a ContextVar."""

    def test_not_set_outside_render(self):
        assert get_render_context() is None

    def test_render_context_manager(self):
        with render_context(template_name="page", max_include_depth=3) as ctx:
            assert get_render_context() is ctx
            assert ctx.max_include_depth == 3
        assert get_render_context() is None

    def test_child_context(self):
        parent = RenderContext(template_name="page", line=4, source="x")
        child = parent.child_context("card", "y")
        assert child.template_name == "card"
        assert child.source == "y"
        assert child.include_depth == 1
        assert child.template_stack == [("page", 4)]
        assert parent.template_stack == []

    def test_include_depth_limit(self):
        ctx = RenderContext(template_name="page", include_depth=2, max_include_depth=2, line=7)
        with pytest.raises(RenderError) as exc_info:
            ctx.check_include_depth("card")
        assert exc_info.value.code is ErrorCode.INCLUDE_DEPTH
        assert exc_info.value.lineno == 7

    def test_within_depth_limit(self):
        RenderContext(include_depth=1, max_include_depth=2).check_include_depth("card")


class TestLoopContext:
    """forloop properties."""

    def test_positions(self):
        loop = LoopContext(3)
        loop.advance(1)
        assert (loop.index, loop.index0, loop.rindex, loop.rindex0) == (2, 1, 2, 1)
        assert not loop.first
        assert not loop.last
        loop.advance(2)
        assert loop.last

    def test_parentloop(self):
        outer = LoopContext(2)
        inner = LoopContext(1, outer)
        assert inner.parentloop is outer
        assert outer.parentloop is None

    def test_str_is_json(self):
        loop = LoopContext(1)
        assert str(loop) == (
            '{"index":1,"index0":0,"rindex":1,"rindex0":0,'
            '"first":true,"last":true,"length":1}'
        )
