"""Exception types raised by Ristretto.

- LoadError: the content store could not be populated; aborts the build.
- DocumentNotFoundError: a route asked for a slug or id the store does not hold;
  fails that route only.
- ConfigError: ristretto.yaml is malformed or names an unknown option.
"""

from __future__ import annotations

from pathlib import Path


class LoadError(Exception):
    """Invalid, duplicate or incomplete content found while loading.

    Attributes:
        source_path: Path to the offending source file, if known.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path | None, message: str):
        self.source_path = source_path
        self.message = message
        prefix = f"{source_path}: " if source_path is not None else ""
        super().__init__(f"{prefix}{message}")


class DocumentNotFoundError(LookupError):
    """No document in the store matches the requested slug or id."""

    def __init__(self, key: str, kind: str = "slug"):
        self.key = key
        self.kind = kind
        super().__init__(f"No document with {kind} {key!r}")


class ConfigError(ValueError):
    """Configuration value is missing, malformed or unsupported."""
