"""Site building functionality for Ristretto.

This module loads the configuration, populates the content store once, and
renders every route to ``<output_dir>/<slug>/index.html``.

Key functions:
- build_site: Main function to build the entire site.
- load_config: Loads site configuration from ristretto.yaml.
- plan_routes: Lists the routes a build writes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateError

from .collections import DocumentCollection
from .content import ContentStore, Document
from .errors import ConfigError, DocumentNotFoundError
from .html_utils import absolutize_html_urls
from .layout import ChromeConfig, LayoutComposer, SiteMetadata
from .navigation import build_adjacency_index, build_page_nav
from .pages import (
    DEFAULT_LISTING_DATE_FORMAT,
    DEFAULT_POST_DATE_FORMAT,
    ListingRenderer,
    PostRenderer,
)
from .templates import TemplateEngine
from .utils import ensure_clean_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ristretto.yaml"
INDEX_ROUTE = "/"


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}" if source_path else message)


DEFAULT_CONFIG = {
    "content_dir": "content",
    "output_dir": "public",
    "root_url": "",
    "chrome": "top-nav",
    "theme_dir": None,
    "excerpt_length": 160,
    "listing_date_format": DEFAULT_LISTING_DATE_FORMAT,
    "post_date_format": DEFAULT_POST_DATE_FORMAT,
    "site": {},
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        documents: All documents in the content store.
        routes: Routes written successfully.
        output_dir: Directory where the site was built.
        failures: Routes that could not be rendered, with the error.
    """

    documents: list[Document]
    routes: list[str]
    output_dir: Path
    failures: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from ristretto.yaml.

    The footer copyright year is fixed here, once per build.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML, not a mapping, or holds a
            value of the wrong type.
    """
    config_path = project_root / CONFIG_FILENAME
    config = dict(DEFAULT_CONFIG)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"{config_path}: invalid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"{config_path}: expected a mapping at the top level")
        config.update(loaded)
    if config.get("copyright_year") is None:
        config["copyright_year"] = date.today().year
    if config.get("root_url") is None:
        config["root_url"] = ""
    _validate_config(config)
    ChromeConfig.from_name(config["chrome"])
    return config


def _validate_config(config: dict[str, Any]) -> None:
    for key in ("content_dir", "output_dir", "chrome"):
        value = config.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"'{key}' must be a non-empty string, got {value!r}")
    for key in ("root_url", "listing_date_format", "post_date_format"):
        if not isinstance(config.get(key), str):
            raise ConfigError(f"'{key}' must be a string, got {config.get(key)!r}")
    theme_dir = config.get("theme_dir")
    if theme_dir is not None and not isinstance(theme_dir, str):
        raise ConfigError(f"'theme_dir' must be a string, got {theme_dir!r}")
    for key in ("excerpt_length", "copyright_year"):
        value = config.get(key)
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    site = config.get("site")
    if site is not None and not isinstance(site, dict):
        raise ConfigError("'site' must be a mapping")


def plan_routes(store: ContentStore) -> list[str]:
    """Return the index route followed by one route per document."""
    return [INDEX_ROUTE] + [doc.url for doc in store]


def _normalize_route(route: str) -> str:
    slug = route.strip().strip("/")
    return f"/{slug}/" if slug else INDEX_ROUTE


def build_site(
    project_root: Path,
    routes: Iterable[str] | None = None,
    clean_output: bool | None = None,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Build the static site.

    Args:
        project_root: Root directory of the project.
        routes: Optional routes or slugs to render instead of every route.
        clean_output: Whether to wipe the output directory before building.
            Defaults to wiping only for a full build, so rendering selected
            routes leaves the rest of the output in place.
        output_dir_override: Optional output directory instead of config output_dir.

    Returns:
        BuildResult with the written routes and any failed ones.

    Raises:
        LoadError: If the content store cannot be populated.
        ConfigError: If the configuration is invalid.
        BuildError: If a route fails for any reason other than a missing document.
    """
    config = load_config(project_root)
    site = SiteMetadata.from_config(config)
    chrome = ChromeConfig.from_name(str(config["chrome"]))
    root_url = str(config.get("root_url") or "")
    theme_dir = config.get("theme_dir")

    store = ContentStore.from_directory(
        project_root / config["content_dir"],
        excerpt_length=config["excerpt_length"],
    )
    nav_entries = build_page_nav(store)
    adjacency = build_adjacency_index(DocumentCollection(store).posts())

    engine = TemplateEngine(
        project_root / theme_dir if theme_dir else None, root_url=root_url
    )
    composer = LayoutComposer(engine)
    listing = ListingRenderer(
        store,
        composer,
        site,
        chrome,
        nav_entries=nav_entries,
        date_format=str(config["listing_date_format"]),
    )
    posts = PostRenderer(
        store,
        composer,
        site,
        chrome,
        adjacency,
        nav_entries=nav_entries,
        date_format=str(config["post_date_format"]),
    )

    output_dir = output_dir_override or (project_root / config["output_dir"])
    if clean_output is None:
        clean_output = routes is None
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    requested = plan_routes(store) if routes is None else [_normalize_route(r) for r in routes]
    written: list[str] = []
    failures: dict[str, Exception] = {}
    for route in requested:
        try:
            if route == INDEX_ROUTE:
                rendered = listing.render()
            else:
                rendered = posts.render(route)
        except DocumentNotFoundError as exc:
            logger.warning("Skipping route %s: %s", route, exc)
            failures[route] = exc
            continue
        except TemplateError as exc:
            raise BuildError(_source_for(store, route), f"Template error: {exc}", exc) from exc
        except Exception as exc:
            raise BuildError(
                _source_for(store, route), _format_error_message(exc), exc
            ) from exc
        if root_url:
            rendered = absolutize_html_urls(rendered, root_url)
        _write_route(output_dir, route, rendered)
        written.append(route)

    logger.info("Wrote %d routes to %s", len(written), output_dir)
    return BuildResult(
        documents=list(store.all()),
        routes=written,
        output_dir=output_dir,
        failures=failures,
    )


def _source_for(store: ContentStore, route: str) -> Path | None:
    if route == INDEX_ROUTE or route not in store:
        return None
    return store.get(route).path


def _format_error_message(exc: Exception) -> str:
    """Describe an unexpected render error as ``ExceptionType: message``."""
    return f"{type(exc).__name__}: {exc}"


def _write_route(output_dir: Path, route: str, rendered: str) -> None:
    """Write a rendered route to ``<output_dir>/<route>/index.html``.

    Args:
        output_dir: Base output directory.
        route: Route path such as ``/`` or ``/blog/hello/``.
        rendered: Rendered HTML content.
    """
    target_dir = output_dir / route.strip("/")
    target_dir.mkdir(parents=True, exist_ok=True)
    with open(target_dir / "index.html", "w", encoding="utf-8") as f:
        f.write(rendered)
