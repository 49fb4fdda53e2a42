"""Variable scope chain for one render call.

A Context is an ordered stack of frames, searched innermost first:

1. environment globals (never written),
2. the caller's mapping (never written),
3. the local scope, where ``assign`` and ``capture`` bind,
4. child frames pushed for loop bodies and include ``with`` bindings.

Child frames are popped when their block exits, so a loop variable never
outlives its loop. A Context belongs to exactly one render call and is
never shared between threads.

Example:
    >>> ctx = Context({"user": {"name": "Ada"}})
    >>> ctx.resolve("user.name")
    'Ada'
    >>> with ctx.push({"user": {"name": "Bob"}}):
    ...     ctx.resolve("user.name")
    'Bob'

"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any

from liquor.template.helpers import UNDEFINED, get_segment

_EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})

_PATH_SEGMENT_RE = re.compile(
    r"""
    (?:^|\.)(?P<name>[A-Za-z_][\w-]*\??)   # user / .profile
    | \.(?P<dotindex>\d+)                  # .0
    | \[(?P<index>-?\d+)\]                 # [0] / [-1]
    | \[(?P<quote>["'])(?P<key>.*?)(?P=quote)\]  # ["key"]
    """,
    re.VERBOSE,
)


class Context:
    """Scope chain for one render call.

    Args:
        data: The caller's variables (read-only)
        globals: Environment globals (read-only)
        strict: Raise UndefinedError for unknown top-level names
    """

    __slots__ = ("_frames", "_globals", "_scope", "strict")

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        globals: Mapping[str, Any] | None = None,
        *,
        strict: bool = False,
    ):
        self._globals = globals if globals is not None else _EMPTY_MAPPING
        self._frames: list[Mapping[str, Any]] = [
            self._globals,
            data if data is not None else _EMPTY_MAPPING,
            {},
        ]
        self._scope: dict[str, Any] = self._frames[2]  # type: ignore[assignment]
        self.strict = strict

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Any:
        """Return the innermost binding for ``name``, or UNDEFINED."""
        for frame in reversed(self._frames):
            if name in frame:
                return frame[name]
        return UNDEFINED

    def __contains__(self, name: object) -> bool:
        return any(name in frame for frame in self._frames)

    def names(self) -> frozenset[str]:
        """All names visible at this point (for "did you mean" hints)."""
        visible: set[str] = set()
        for frame in self._frames:
            visible.update(frame.keys())
        return frozenset(visible)

    def resolve(self, path: str) -> Any:
        """Resolve a dotted/indexed path such as ``items[0].name``.

        Missing segments resolve to UNDEFINED.

        Raises:
            ValueError: If ``path`` is not a well-formed variable path
        """
        segments = _split_path(path)
        value = self.lookup(segments[0])
        for segment in segments[1:]:
            value = get_segment(value, segment)
            if value is UNDEFINED:
                break
        return value

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    @property
    def scope(self) -> dict[str, Any]:
        """The local scope that ``assign`` and ``capture`` write to."""
        return self._scope

    @property
    def depth(self) -> int:
        """Number of child frames currently pushed."""
        return len(self._frames) - 3

    def assign(self, name: str, value: Any) -> None:
        """Bind ``name`` in the local scope."""
        self._scope[name] = value

    @contextmanager
    def push(self, bindings: Mapping[str, Any] | None = None) -> Iterator[dict[str, Any]]:
        """Push a child frame for the duration of the with block.

        Yields the frame's dict so a loop can rebind its variable in place
        on each iteration.
        """
        frame: dict[str, Any] = dict(bindings) if bindings else {}
        self._frames.append(frame)
        try:
            yield frame
        finally:
            self._frames.pop()

    def isolated(self, bindings: Mapping[str, Any] | None = None) -> Context:
        """A fresh Context that sees only globals and ``bindings``."""
        return Context(dict(bindings) if bindings else None, self._globals, strict=self.strict)

    def __repr__(self) -> str:
        return f"<Context scope={sorted(self._scope)} depth={self.depth}>"


def _split_path(path: str) -> list[Any]:
    segments: list[Any] = []
    pos = 0
    path = path.strip()
    while pos < len(path):
        match = _PATH_SEGMENT_RE.match(path, pos)
        if match is None or match.end() == pos or (pos == 0 and not match.group("name")):
            raise ValueError(f"Invalid variable path: {path!r}")
        if match.group("name"):
            segments.append(match.group("name"))
        elif match.group("dotindex") is not None:
            segments.append(int(match.group("dotindex")))
        elif match.group("index") is not None:
            segments.append(int(match.group("index")))
        else:
            segments.append(match.group("key"))
        pos = match.end()
    if not segments:
        raise ValueError(f"Invalid variable path: {path!r}")
    return segments
