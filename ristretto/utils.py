"""Utility functions for Ristretto.

This module contains small string, path and date helpers used throughout the
Ristretto codebase.

Key functions:
    slugify: Convert a path segment to a URL slug.
    slug_from_path: Derive a document slug from its path relative to the content dir.
    parse_date: Coerce frontmatter date values to ``datetime.date``.
    format_date: strftime with a portable ``%-d`` (non-padded day).
    plain_excerpt: Build a plain-text excerpt from rendered HTML.
    is_markdown: Check if a path is a Markdown file.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import html
import re
import shutil
from datetime import date, datetime
from pathlib import Path

DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")
_TAG_RE = re.compile(r"<[^>]+>")
_BLOCK_BREAK_RE = re.compile(
    r"</(?:p|h[1-6]|li|blockquote|pre|div|tr|td|th)>|<br\s*/?>", re.IGNORECASE
)


def slugify(name: str) -> str:
    """Convert a path segment to a slug, dropping a date prefix.

    Args:
        name: Filename stem or directory name.

    Returns:
        URL-friendly slug, or an empty string if nothing usable remains.

    Examples:
        >>> slugify("2024-01-02-Post Title")
        'post-title'
    """
    cleaned = DATE_PREFIX_RE.sub("", name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    return cleaned.strip("-").lower()


def slug_from_path(rel: Path) -> str:
    """Derive a document slug from a path relative to the content directory.

    ``blog/hello.md`` and ``blog/hello/index.md`` both become ``blog/hello``.

    Args:
        rel: Relative path to the source file.

    Returns:
        Slash-joined slug; empty for a root ``index.md``.
    """
    parts = list(rel.with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    segments = [slugify(part) for part in parts]
    return "/".join(segment for segment in segments if segment)


def parse_date(value: object) -> date | None:
    """Coerce a frontmatter date value to a ``date``.

    PyYAML already turns unquoted ISO dates into ``date``/``datetime``;
    quoted values arrive as strings.

    Args:
        value: Raw frontmatter value.

    Returns:
        The parsed date, or None if the value is missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def format_date(value: date | None, fmt: str) -> str:
    """Format a date, supporting ``%-d`` on every platform.

    Args:
        value: Date to format; None renders as an empty string.
        fmt: strftime format string.

    Returns:
        The formatted date.

    Examples:
        >>> format_date(date(2024, 2, 1), "%-d %B %Y")
        '1 February 2024'
    """
    if value is None:
        return ""
    return value.strftime(fmt.replace("%-d", str(value.day)))


def plain_excerpt(rendered: str, limit: int = 160) -> str:
    """Build a plain-text excerpt from rendered HTML.

    Tags are stripped, whitespace collapsed, and text longer than ``limit``
    is cut at a word boundary with a trailing ellipsis.

    Args:
        rendered: HTML produced by the Markdown renderer.
        limit: Maximum character length of the result.

    Returns:
        Excerpt text.
    """
    text = _BLOCK_BREAK_RE.sub(" ", rendered)
    text = html.unescape(_TAG_RE.sub("", text))
    collapsed = " ".join(text.split())
    if len(collapsed) <= limit:
        return collapsed
    cut = collapsed[:limit].rsplit(" ", 1)[0].rstrip(" ,.;:")
    return f"{cut}…"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path), ignore_errors=True)
        if path.exists():
            # Fallback for stubborn directories
            for item in path.rglob("*"):
                if item.is_file():
                    item.unlink()
            for item in sorted(
                [p for p in path.rglob("*") if p.is_dir()], reverse=True
            ):
                item.rmdir()
            path.rmdir()
    path.mkdir(parents=True, exist_ok=True)


def is_internal_path(path: Path) -> bool:
    """Check if any component of a relative path starts with ``_`` or ``.``.

    Args:
        path: Path relative to the content directory.

    Returns:
        True if the path should be skipped by the loader.
    """
    return any(part.startswith(("_", ".")) for part in path.parts)


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"
