"""Expression evaluation for the Liquor renderer.

Evaluates expression nodes against a Context and threads values through
filter chains. Dispatch is by node class name, like statement rendering.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from liquor.environment.exceptions import (
    ErrorCode,
    FilterError,
    RenderError,
    TemplateError,
    UndefinedError,
)
from liquor.nodes import (
    BoolOp,
    Compare,
    Const,
    Contains,
    Expr,
    FilterCall,
    Getattr,
    Getitem,
    Name,
    Range,
)
from liquor.render_context import get_render_context
from liquor.template.helpers import (
    UNDEFINED,
    compare,
    contains,
    equals,
    get_segment,
    is_truthy,
    to_int,
)

if TYPE_CHECKING:
    from liquor.context import Context
    from liquor.environment.registry import FilterRegistry


class ExpressionEvaluationMixin:
    """Mixin for evaluating expressions and applying filters.

    Required Host Attributes:
        - _filters: FilterRegistry (overrides first, then built-ins)
        - _render_error: method building a positioned RenderError
    """

    if TYPE_CHECKING:
        _filters: FilterRegistry

        def _render_error(
            self,
            message: str,
            code: ErrorCode | None = None,
            suggestion: str | None = None,
        ) -> RenderError: ...

    _expr_dispatch: dict[str, Callable[..., Any]]

    def _get_expr_dispatch(self) -> dict[str, Callable[..., Any]]:
        return {
            "Const": self._eval_const,
            "Name": self._eval_name,
            "Getattr": self._eval_getattr,
            "Getitem": self._eval_getitem,
            "Range": self._eval_range,
            "Compare": self._eval_compare,
            "Contains": self._eval_contains,
            "BoolOp": self._eval_boolop,
        }

    def evaluate(self, expr: Expr, ctx: Context, strict: bool | None = None) -> Any:
        """Evaluate ``expr``; ``strict`` overrides the context's strict flag."""
        handler = self._expr_dispatch.get(type(expr).__name__)
        if handler is None:
            raise self._render_error(f"Cannot evaluate {type(expr).__name__} node")
        return handler(expr, ctx, ctx.strict if strict is None else strict)

    def _eval_const(self, node: Const, ctx: Context, strict: bool) -> Any:
        return node.value

    def _eval_name(self, node: Name, ctx: Context, strict: bool) -> Any:
        value = ctx.lookup(node.name)
        if value is UNDEFINED and strict:
            render_ctx = get_render_context()
            raise UndefinedError(
                node.name,
                template_name=render_ctx.template_name if render_ctx else None,
                lineno=node.lineno,
                available_names=ctx.names(),
            )
        return value

    def _eval_getattr(self, node: Getattr, ctx: Context, strict: bool) -> Any:
        return get_segment(self.evaluate(node.obj, ctx, strict), node.attr)

    def _eval_getitem(self, node: Getitem, ctx: Context, strict: bool) -> Any:
        obj = self.evaluate(node.obj, ctx, strict)
        key = self.evaluate(node.key, ctx, strict)
        if isinstance(key, float) and key.is_integer():
            key = int(key)
        return get_segment(obj, key)

    def _eval_range(self, node: Range, ctx: Context, strict: bool) -> range:
        start = to_int(self.evaluate(node.start, ctx, strict))
        end = to_int(self.evaluate(node.end, ctx, strict))
        return range(start, end + 1)

    def _eval_compare(self, node: Compare, ctx: Context, strict: bool) -> bool:
        left = self.evaluate(node.left, ctx, strict)
        right = self.evaluate(node.right, ctx, strict)
        if node.op == "==":
            return equals(left, right)
        if node.op == "!=":
            return not equals(left, right)
        return compare(left, node.op, right)

    def _eval_contains(self, node: Contains, ctx: Context, strict: bool) -> bool:
        return contains(self.evaluate(node.left, ctx, strict), self.evaluate(node.right, ctx, strict))

    def _eval_boolop(self, node: BoolOp, ctx: Context, strict: bool) -> bool:
        left = is_truthy(self.evaluate(node.left, ctx, strict))
        if node.op == "and":
            return left and is_truthy(self.evaluate(node.right, ctx, strict))
        return left or is_truthy(self.evaluate(node.right, ctx, strict))

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def evaluate_filtered(
        self, expr: Expr, filters: Sequence[FilterCall], ctx: Context
    ) -> Any:
        """Evaluate ``expr`` and thread the result through ``filters``.

        A leading ``default`` filter suppresses strict-mode errors for the
        expression it guards.
        """
        lenient = bool(filters) and filters[0].name == "default"
        value = self.evaluate(expr, ctx, False if lenient else None)
        return self.apply_filters(value, filters, ctx)

    def apply_filters(self, value: Any, filters: Sequence[FilterCall], ctx: Context) -> Any:
        """Apply filters left to right.

        Raises:
            RenderError: For an unknown filter name
            FilterError: When a filter fails (other exceptions are wrapped)
        """
        for call in filters:
            func = self._filters.get(call.name)
            if func is None:
                raise self._unknown_filter(call)
            args = [self.evaluate(arg, ctx) for arg in call.args]
            kwargs = {key: self.evaluate(arg, ctx) for key, arg in call.kwargs}
            try:
                value = func(value, *args, **kwargs)
            except FilterError as e:
                if e.filter_name is None:
                    e.filter_name = call.name
                raise
            except TemplateError:
                raise
            except Exception as e:
                raise FilterError(f"{type(e).__name__}: {e}", call.name) from e
        return value

    def _unknown_filter(self, call: FilterCall) -> RenderError:
        from difflib import get_close_matches

        matches = get_close_matches(call.name, list(self._filters.keys()), n=1, cutoff=0.6)
        render_ctx = get_render_context()
        if render_ctx is not None:
            render_ctx.line = call.lineno
        return self._render_error(
            f"Unknown filter '{call.name}'",
            code=ErrorCode.UNKNOWN_FILTER,
            suggestion=f"Did you mean '{matches[0]}'?" if matches else "Register it with Environment.add_filter()",
        )
