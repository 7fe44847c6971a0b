"""Protocol definitions for Ristretto.

These protocols let the content store be populated and rendered by
interchangeable components, and let tests substitute simple fakes.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from markupsafe import Markup

    from .content import Document


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for rendering a document body to trusted HTML."""

    @abstractmethod
    def can_render(self, path: Path) -> bool:
        """Check if this renderer can handle the given file.

        Args:
            path: Path to the source file.

        Returns:
            True if this renderer can process the file.
        """
        ...

    @abstractmethod
    def render(self, content: str) -> Markup:
        """Render source text to HTML.

        Args:
            content: Body text with the frontmatter removed.

        Returns:
            Pre-rendered, trusted HTML.
        """
        ...


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for extracting metadata from content."""

    @abstractmethod
    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract metadata from content.

        Args:
            content: Source content.
            path: Path to the source file.

        Returns:
            Dictionary of extracted metadata.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files."""

    @abstractmethod
    def iter_files(self) -> list[Path]:
        """Return all content files in a deterministic order."""
        ...


@runtime_checkable
class DocumentSource(Protocol):
    """Protocol for building a Document from a source file."""

    @abstractmethod
    def build(self, path: Path) -> Document:
        """Build a Document.

        Args:
            path: Path to the source file.

        Returns:
            Document object.

        Raises:
            LoadError: If the file is malformed.
        """
        ...
