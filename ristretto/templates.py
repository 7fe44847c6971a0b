"""Template rendering engine for Ristretto.

This module wraps a Jinja2 environment that loads the built-in theme from the
``ristretto/theme`` package directory, optionally overridden template by
template from a project ``theme_dir``.

Key class:
- TemplateEngine: Loads templates and renders them with the shared globals.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    select_autoescape,
)
from markupsafe import Markup

from .html_utils import join_root_url
from .utils import format_date

__all__ = ["TemplateEngine"]


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        theme_dir: Optional directory whose templates take precedence.
        root_url: Base URL applied by ``url_for``.
        env: Jinja2 environment.
    """

    def __init__(self, theme_dir: Path | None = None, root_url: str = ""):
        """Initialize the template engine.

        Args:
            theme_dir: Directory with template overrides.
            root_url: Optional base URL for links.
        """
        self.theme_dir = theme_dir
        self.root_url = root_url or ""
        loaders: list[BaseLoader] = []
        if theme_dir is not None:
            loaders.append(FileSystemLoader(str(theme_dir)))
        loaders.append(PackageLoader("ristretto", "theme"))
        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            enable_async=False,
        )
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global functions and filters in the Jinja environment."""
        self.env.globals["url_for"] = self._url_for
        self.env.filters["format_date"] = format_date

    def _url_for(self, path: str) -> str:
        """Generate a URL for a path, applying root_url if configured.

        Args:
            path: Path to generate URL for.

        Returns:
            Full URL with root_url prefix if configured.
        """
        if path.startswith(("http://", "https://", "//")):
            return path
        if self.root_url:
            return join_root_url(self.root_url, path)
        return path if path.startswith("/") else f"/{path}"

    def render(self, name: str, **context: Any) -> Markup:
        """Render a named template.

        Args:
            name: Template name, e.g. ``layout.html.jinja``.
            **context: Variables to make available in the template.

        Returns:
            The rendered markup.
        """
        return Markup(self.env.get_template(name).render(**context))
