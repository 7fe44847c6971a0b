"""Frontmatter extraction for Ristretto.

This module splits a Markdown source file into its YAML frontmatter block and
body. Validation of the individual fields happens in the content module, which
knows the document types.

Key classes:
- FrontmatterExtractor: MetadataExtractor returning ``frontmatter`` and ``body``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(
    r"^\ufeff?---[ \t]*\n(.*?)^---[ \t]*(?:\n|$)", re.DOTALL | re.MULTILINE
)


class FrontmatterError(ValueError):
    """The frontmatter block is absent or is not a YAML mapping."""


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (frontmatter dict, remaining content).

    Raises:
        FrontmatterError: If there is no frontmatter block, the YAML is invalid,
            or it does not describe a mapping.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        raise FrontmatterError("missing frontmatter block")
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"invalid YAML frontmatter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("frontmatter must be a mapping")
    return data, text[match.end() :]


class FrontmatterExtractor:
    """Extracts YAML frontmatter from content.

    Parses the block between the leading ``---`` markers.
    """

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract frontmatter from content.

        Args:
            content: Source content with frontmatter.
            path: Path to the source file (unused).

        Returns:
            Dictionary with 'frontmatter' and 'body' keys.
        """
        frontmatter, body = extract_frontmatter(content)
        return {"frontmatter": frontmatter, "body": body}
