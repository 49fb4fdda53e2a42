"""Template loaders for the Liquor environment.

A loader resolves a template name to source text for ``include``,
``render`` and ``Environment.get_template``. It is the only place the
engine touches files or any other storage, and the host chooses it.

Loader protocol:
    ``get_source(name) -> (source, filename)``, raising
    TemplateNotFoundError when the name cannot be resolved.

Built-in Loaders:
- `DictLoader`: In-memory mapping (tests, embedded templates)
- `FileSystemLoader`: One or more directories
- `ChoiceLoader`: First loader that has the template wins
- `FunctionLoader`: Wrap a callable

Custom Loaders:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT body FROM snippets WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Template '{name}' not found", name=name)
            return row.body, f"db://{name}"
    ```

Thread-Safety:
Loaders should be safe for concurrent ``get_source()`` calls. All built-in
loaders are, provided the wrapped callables/child loaders are.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol

from liquor.environment.exceptions import TemplateNotFoundError

_TEMPLATE_SUFFIXES = (".liquid", ".html", ".txt", ".md", ".xml", ".json")


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


class DictLoader:
    """Load templates from an in-memory mapping of name → source.

    Example:
            >>> env = Environment(loader=DictLoader({"greet": "Hi {{ name }}"}))
            >>> env.render("greet", name="Ada")
            'Hi Ada'

    Raises:
        TemplateNotFoundError: If the name is not in the mapping, with a
            "did you mean" hint when a close match exists
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg, name=name)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class FileSystemLoader:
    """Load templates from one or more directories, first match wins.

    A bare name without a suffix also matches ``<name>.liquid``, so
    ``{% render "card" %}`` finds ``card.liquid``. Names that would
    escape the search directories (``../secrets``) are never found.

    Example:
            >>> loader = FileSystemLoader(["themes/custom/", "themes/default/"])
            >>> source, filename = loader.get_source("product.liquid")
    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    def _candidates(self, base: Path, name: str) -> list[Path]:
        path = base / name
        if path.suffix:
            return [path]
        return [path, path.with_name(path.name + ".liquid")]

    def get_source(self, name: str) -> tuple[str, str]:
        """Read template source from the first directory that has it."""
        for base in self._paths:
            root = base.resolve()
            for path in self._candidates(base, name):
                if not path.resolve().is_relative_to(root):
                    continue
                if path.is_file():
                    return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}",
            name=name,
        )

    def list_templates(self) -> list[str]:
        """List template files (by known suffix) in all search paths."""
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob("*"):
                    if path.is_file() and path.suffix in _TEMPLATE_SUFFIXES:
                        templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


class ChoiceLoader:
    """Try several loaders in order, returning the first match.

    Example:
            >>> loader = ChoiceLoader([
            ...     DictLoader({"header": "<h1>Custom</h1>"}),
            ...     FileSystemLoader("snippets/"),
            ... ])
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders",
            name=name,
        )

    def list_templates(self) -> list[str]:
        """Merge template lists from all loaders (deduplicated, sorted)."""
        templates: set[str] = set()
        for loader in self._loaders:
            if hasattr(loader, "list_templates"):
                templates.update(loader.list_templates())
        return sorted(templates)


class FunctionLoader:
    """Wrap a callable as a loader.

    The callable takes a template name and returns the source string, a
    ``(source, filename)`` tuple, or ``None`` when there is no such template.

    Example:
            >>> snippets = {"sig": "-- {{ author }}"}
            >>> env = Environment(loader=FunctionLoader(snippets.get))
            >>> env.render("sig", author="Ada")
            '-- Ada'
    """

    __slots__ = ("_load_func",)

    def __init__(
        self,
        load_func: Callable[[str], str | tuple[str, str | None] | None],
    ):
        self._load_func = load_func

    def get_source(self, name: str) -> tuple[str, str | None]:
        result = self._load_func(name)

        if result is None:
            raise TemplateNotFoundError(f"Template '{name}' not found", name=name)

        if isinstance(result, str):
            return result, None

        return result
