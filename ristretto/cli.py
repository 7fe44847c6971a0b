"""Command-line interface for Ristretto.

This module defines the CLI commands using the Click framework.

Commands:
- build: Build the site into the output directory.
- routes: List the routes a build would write.
- new: Create a new post or page interactively.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import NoReturn

import click
import questionary
import yaml

from . import __version__
from .build import BuildError, build_site, load_config, plan_routes
from .content import FileContentLoader, load_store
from .errors import ConfigError, LoadError
from .utils import slug_from_path, slugify


@click.group()
@click.version_option(version=__version__, prog_name="ristretto")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Ristretto static blog generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(title: str, message: str, path: Path | None = None) -> NoReturn:
    click.echo(click.style(title, fg="red", bold=True), err=True)
    if path is not None:
        click.echo(click.style(f"  File: {_relative(path)}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
    raise SystemExit(1)


def _relative(path: Path) -> Path:
    try:
        return path.relative_to(Path.cwd())
    except ValueError:
        return path


@cli.command()
@click.option(
    "--route",
    "routes",
    multiple=True,
    help="Only render this slug or route (repeatable)",
)
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Output directory (overrides ristretto.yaml)",
)
@click.option(
    "--clean",
    is_flag=True,
    help="Wipe the output directory even when only some routes are rendered",
)
def build(routes: tuple[str, ...], output: Path | None, clean: bool):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    try:
        result = build_site(
            project_root,
            routes=routes or None,
            clean_output=True if clean else None,
            output_dir_override=output,
        )
    except LoadError as exc:
        _fail("Loading content failed:", exc.message, exc.source_path)
    except ConfigError as exc:
        _fail("Invalid configuration:", str(exc))
    except BuildError as exc:
        _fail("Build failed:", exc.message, exc.source_path)

    click.echo(f"Built {len(result.routes)} routes into {result.output_dir}")
    if not result.ok:
        for route, exc in result.failures.items():
            click.echo(click.style(f"  Failed {route}: {exc}", fg="red"), err=True)
        raise SystemExit(1)


@cli.command()
def routes():
    """List the routes a build would write."""
    project_root = Path.cwd()
    try:
        config = load_config(project_root)
        store = load_store(
            project_root / config["content_dir"],
            excerpt_length=config["excerpt_length"],
        )
    except LoadError as exc:
        _fail("Loading content failed:", exc.message, exc.source_path)
    except ConfigError as exc:
        _fail("Invalid configuration:", str(exc))
    for route in plan_routes(store):
        click.echo(route)


@cli.command()
def new():
    """Create a new post or page interactively."""
    project_root = Path.cwd()
    try:
        config = load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None
    content_dir = project_root / config["content_dir"]

    doc_type = questionary.select(
        "Type:",
        choices=["post", "page"],
        style=_questionary_style(),
    ).ask()
    if doc_type is None:
        raise click.Abort()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    slug = slugify(title)
    if not slug:
        raise click.ClickException(f"Cannot derive a slug from title {title!r}")

    frontmatter: dict[str, object] = {"title": title, "type": doc_type}
    if doc_type == "page":
        order = questionary.text(
            "Menu position:",
            default=str(_next_order(content_dir)),
            validate=lambda x: x.strip().lstrip("-").isdigit() or "Enter a whole number",
            style=_questionary_style(),
        ).ask()
        if order is None:
            raise click.Abort()
        frontmatter["order"] = int(order)
        target_dir = content_dir
        filename = f"{slug}.md"
    else:
        today = date.today()
        frontmatter["date"] = today
        target_dir = content_dir / "blog"
        filename = f"{today.isoformat()}-{slug}.md"

    target_path = target_dir / filename
    conflict = _find_slug_conflict(content_dir, target_path)
    if conflict is not None:
        raise click.ClickException(
            f"A file with slug '{conflict[0]}' already exists: {_relative(conflict[1])}"
        )

    target_dir.mkdir(parents=True, exist_ok=True)
    header = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    target_path.write_text(f"---\n{header}---\n\n", encoding="utf-8")
    click.echo(f"Created {_relative(target_path)}")


def _next_order(content_dir: Path) -> int:
    """Return one past the highest page order found in the content directory."""
    try:
        store = load_store(content_dir)
    except LoadError:
        return 1
    orders = [d.frontmatter.order for d in store.filter_by_type("page")]
    return max(orders, default=0) + 1


def _find_slug_conflict(content_dir: Path, target: Path) -> tuple[str, Path] | None:
    """Return (slug, path) of an existing file that derives the same slug as ``target``."""
    wanted = slug_from_path(target.relative_to(content_dir))
    if not content_dir.exists():
        return None
    for path in FileContentLoader(content_dir).iter_files():
        if slug_from_path(path.relative_to(content_dir)) == wanted:
            return wanted, path
    return None


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
