"""Template cache for Inkwell.

This module compiles page templates once at startup and renders them many
times. Files named ``*.page.*`` are addressable pages keyed by file name;
files named ``*.layout.*`` are shared fragments that every page can extend or
include.

Key classes:
- TemplateData: Per-request view model passed to templates.
- TemplateCache: Immutable mapping of page name to compiled Jinja2 template.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    select_autoescape,
)

from .content import Post
from .errors import TemplateExecutionError, UnknownTemplateError
from .renderers import highlight_css
from .utils import friendly_date, is_layout_template, is_page_template, read_time, slugify

HELPERS: dict[str, Callable] = {
    "friendly_date": friendly_date,
    "slugify": slugify,
    "read_time": read_time,
}


@dataclass
class TemplateData:
    """Holding structure for the dynamic data passed to templates.

    Attributes:
        current_year: Filled in at render time.
        post: The post shown on a single-post page.
        posts: Posts shown on a listing page.
    """

    current_year: int = 0
    post: Post | None = None
    posts: list[Post] = field(default_factory=list)

    def as_context(self) -> dict:
        return {
            "current_year": self.current_year,
            "post": self.post,
            "posts": self.posts,
        }


def create_environment(directory: Path) -> Environment:
    """Create the Jinja2 environment with the template helpers installed.

    Undefined names raise at render time so a template referencing a missing
    field fails instead of printing blanks.
    """
    env = Environment(
        loader=FileSystemLoader(str(directory)),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        auto_reload=False,
        enable_async=False,
    )
    env.filters.update(HELPERS)
    env.globals.update(HELPERS)
    env.globals["pygments_css"] = highlight_css
    return env


class TemplateCache:
    """Compiled page templates, built once and read-only afterwards.

    Attributes:
        directory: Directory the templates were loaded from.
        env: Jinja2 environment holding the compiled layouts.
    """

    def __init__(
        self,
        directory: Path,
        env: Environment,
        templates: Mapping[str, Template],
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.directory = directory
        self.env = env
        self._templates = MappingProxyType(dict(templates))
        self._clock = clock

    @classmethod
    def build(
        cls, directory: Path, clock: Callable[[], datetime] = datetime.now
    ) -> TemplateCache:
        """Compile every page template in ``directory``.

        Layout fragments are compiled first so that each page is built
        together with every layout it can reference.

        Args:
            directory: Directory with ``*.page.*`` and ``*.layout.*`` files.
            clock: Source of the current time for ``current_year``.

        Returns:
            A new TemplateCache.

        Raises:
            TemplateExecutionError: If any template has a syntax error.
        """
        directory = Path(directory)
        env = create_environment(directory)
        templates: dict[str, Template] = {}
        if not directory.is_dir():
            return cls(directory, env, templates, clock)

        files = sorted(path for path in directory.iterdir() if path.is_file())
        layouts = [path for path in files if is_layout_template(path)]
        pages = [path for path in files if is_page_template(path)]

        for path in layouts + pages:
            try:
                template = env.get_template(path.name)
            except TemplateSyntaxError as exc:
                raise TemplateExecutionError(
                    f"line {exc.lineno}: {exc.message}",
                    source_path=path,
                    original_error=exc,
                ) from exc
            if path in pages:
                templates[path.name] = template
        return cls(directory, env, templates, clock)

    @property
    def templates(self) -> Mapping[str, Template]:
        """Read-only mapping of page name to compiled template."""
        return self._templates

    @property
    def pages(self) -> list[str]:
        """Sorted page names."""
        return sorted(self._templates)

    def __contains__(self, name: str) -> bool:
        return name in self._templates

    def with_defaults(self, data: TemplateData | None) -> TemplateData:
        """Return a copy of ``data`` with the current year filled in."""
        if data is None:
            data = TemplateData()
        return dataclasses.replace(data, current_year=self._clock().year)

    def render(self, name: str, data: TemplateData | None = None) -> bytes:
        """Render a page template to UTF-8 bytes.

        The output is produced in full before anything is returned, so a
        failure halfway through never yields partial output.

        Args:
            name: Page name, e.g. ``posts.page.html``.
            data: Template data; defaults are added.

        Returns:
            Rendered page as bytes.

        Raises:
            UnknownTemplateError: If ``name`` is not a cached page.
            TemplateExecutionError: If rendering fails.
        """
        template = self._templates.get(name)
        if template is None:
            raise UnknownTemplateError(name)
        context = self.with_defaults(data).as_context()
        try:
            output = template.render(**context)
        except Exception as exc:
            raise TemplateExecutionError(
                f"error rendering {name}: {exc}",
                source_path=self.directory / name,
                original_error=exc,
            ) from exc
        return output.encode("utf-8")
