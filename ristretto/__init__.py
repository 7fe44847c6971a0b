"""Ristretto static blog generator.

This package turns a directory of Markdown documents with YAML frontmatter
into a static blog: an index listing of posts and one page per document,
wrapped in configurable header, navigation, sidebar and footer chrome.

The pipeline runs once per build: the content store is populated, queried for
the page menu and post order, and each route is rendered by Jinja2 templates.
The main entry point is the CLI module.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
