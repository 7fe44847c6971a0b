"""Content loading for Ristretto.

This module discovers Markdown files, validates their frontmatter and builds
immutable Document objects, which are collected in a read-only ContentStore.

Key classes:
- Document: Frozen dataclass for one parsed Markdown file.
- Frontmatter: Validated frontmatter fields.
- FileContentLoader: ContentLoader implementation for a content directory.
- DocumentBuilder: Builds a Document from a source file.
- ContentStore: The populated, read-only collection of documents.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from .errors import DocumentNotFoundError, LoadError
from .extractors import FrontmatterError, FrontmatterExtractor
from .renderers import default_renderer
from .utils import is_internal_path, is_markdown, parse_date, plain_excerpt, slug_from_path

if TYPE_CHECKING:
    from .collections import DocumentCollection
    from .protocols import ContentLoader, ContentRenderer, DocumentSource, MetadataExtractor

logger = logging.getLogger(__name__)

KNOWN_FIELDS = ("title", "date", "type", "order", "description")


class DocumentType(str, Enum):
    """Kind of document declared in frontmatter ``type``."""

    PAGE = "page"
    POST = "post"


@dataclass(frozen=True)
class Frontmatter:
    """Validated frontmatter of a document.

    Attributes:
        type: Declared document type.
        title: Optional title; renderers fall back to the slug.
        date: Publication date, required for posts.
        order: Navigation position, required for pages.
        description: Optional summary shown on the listing.
        extra: Any other frontmatter keys, read-only.
    """

    type: DocumentType
    title: str | None = None
    date: datetime.date | None = None
    order: int | None = None
    description: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Frontmatter:
        """Validate a raw frontmatter mapping.

        Args:
            raw: Mapping parsed from YAML.

        Returns:
            Frontmatter instance.

        Raises:
            ValueError: If a required field is missing or a field has the wrong type.
        """
        raw_type = raw.get("type")
        try:
            doc_type = DocumentType(raw_type)
        except ValueError:
            raise ValueError(
                f"'type' must be one of 'page' or 'post', got {raw_type!r}"
            ) from None

        title = _optional_str(raw, "title")
        description = _optional_str(raw, "description")

        order = raw.get("order")
        if order is not None and (isinstance(order, bool) or not isinstance(order, int)):
            raise ValueError(f"'order' must be an integer, got {order!r}")
        if doc_type is DocumentType.PAGE and order is None:
            raise ValueError("pages require an integer 'order'")

        published = parse_date(raw.get("date"))
        if raw.get("date") is not None and published is None:
            raise ValueError(f"'date' is not a valid date: {raw.get('date')!r}")
        if doc_type is DocumentType.POST and published is None:
            raise ValueError("posts require a 'date'")

        extra = {k: v for k, v in raw.items() if k not in KNOWN_FIELDS}
        return cls(
            type=doc_type,
            title=title,
            date=published,
            order=order,
            description=description,
            extra=MappingProxyType(extra),
        )


def _optional_str(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class Document:
    """A parsed Markdown document.

    Attributes:
        id: Source path relative to the content directory (POSIX form).
        slug: URL path segment(s), unique across the store.
        frontmatter: Validated frontmatter.
        excerpt: Plain-text excerpt of the body.
        body: Pre-rendered HTML. Trusted: templates insert it without escaping.
        path: Absolute source path, for diagnostics.
    """

    id: str
    slug: str
    frontmatter: Frontmatter
    excerpt: str
    body: Markup
    path: Path | None = None

    @property
    def type(self) -> DocumentType:
        return self.frontmatter.type

    @property
    def title(self) -> str:
        """Frontmatter title, or the slug when no title was given."""
        return self.frontmatter.title or self.slug

    @property
    def url(self) -> str:
        return f"/{self.slug}/"

    @property
    def summary(self) -> str:
        """Description if set, otherwise the excerpt."""
        return self.frontmatter.description or self.excerpt


class FileContentLoader:
    """Discovers Markdown files in a content directory.

    Paths with a component starting with ``_`` or ``.`` are skipped.

    Attributes:
        content_dir: Directory containing Markdown sources.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """Return every Markdown file, sorted by relative path.

        Returns:
            List of paths to content files.
        """
        files: list[Path] = []
        for path in self.content_dir.rglob("*"):
            if path.is_dir() or not is_markdown(path):
                continue
            if is_internal_path(path.relative_to(self.content_dir)):
                continue
            files.append(path)
        return sorted(files, key=lambda p: p.relative_to(self.content_dir).as_posix())


class DocumentBuilder:
    """Builds Document objects from source files.

    Attributes:
        content_dir: Directory the document ids and slugs are relative to.
        renderer: Markdown renderer producing the trusted body.
        extractor: Metadata extractor returning 'frontmatter' and 'body'.
        excerpt_length: Maximum excerpt length in characters.
    """

    def __init__(
        self,
        content_dir: Path,
        renderer: ContentRenderer | None = None,
        extractor: MetadataExtractor | None = None,
        excerpt_length: int = 160,
    ):
        self.content_dir = content_dir
        self.renderer = renderer or default_renderer
        self.extractor = extractor or FrontmatterExtractor()
        self.excerpt_length = excerpt_length

    def build(self, path: Path) -> Document:
        """Build a Document from a source file.

        Args:
            path: Path to the Markdown file.

        Returns:
            Document object.

        Raises:
            LoadError: If the renderer rejects the file, the frontmatter is
                missing, invalid or incomplete, or the path derives no slug.
        """
        rel = path.relative_to(self.content_dir)
        if not self.renderer.can_render(path):
            raise LoadError(path, "the renderer does not accept this file type")
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(path, f"cannot read file: {exc}") from exc

        try:
            metadata = self.extractor.extract(raw, path)
            frontmatter = Frontmatter.from_mapping(metadata["frontmatter"])
        except (FrontmatterError, ValueError) as exc:
            raise LoadError(path, str(exc)) from exc

        slug = slug_from_path(rel)
        if not slug:
            raise LoadError(path, "cannot derive a slug; the root index is reserved for the listing")

        body = self.renderer.render(metadata.get("body", ""))
        return Document(
            id=rel.as_posix(),
            slug=slug,
            frontmatter=frontmatter,
            excerpt=plain_excerpt(str(body), self.excerpt_length),
            body=body,
            path=path,
        )


class ContentStore:
    """Read-only collection of documents, populated once per build.

    Raises LoadError on construction if two documents share a slug or an id.
    """

    def __init__(self, documents: Iterable[Document] = ()):
        self._documents: list[Document] = []
        self._by_slug: dict[str, Document] = {}
        self._by_id: dict[str, Document] = {}
        for document in documents:
            self._append(document)

    def _append(self, document: Document) -> None:
        existing = self._by_slug.get(document.slug)
        if existing is not None:
            raise LoadError(
                document.path,
                f"duplicate slug {document.slug!r} (also derived from {existing.id})",
            )
        if document.id in self._by_id:
            raise LoadError(document.path, f"duplicate id {document.id!r}")
        self._documents.append(document)
        self._by_slug[document.slug] = document
        self._by_id[document.id] = document

    @classmethod
    def from_directory(
        cls,
        content_dir: Path,
        loader: ContentLoader | None = None,
        builder: DocumentSource | None = None,
        excerpt_length: int = 160,
    ) -> ContentStore:
        """Populate a store from a directory of Markdown files.

        Args:
            content_dir: Directory containing content.
            loader: Optional custom file discovery.
            builder: Optional custom document builder.
            excerpt_length: Excerpt length for the default builder.

        Returns:
            Populated ContentStore.

        Raises:
            LoadError: If the directory is missing or any document is invalid.
        """
        if not content_dir.is_dir():
            raise LoadError(content_dir, "content directory does not exist")
        loader = loader or FileContentLoader(content_dir)
        builder = builder or DocumentBuilder(content_dir, excerpt_length=excerpt_length)
        documents = []
        for path in loader.iter_files():
            document = builder.build(path)
            logger.debug("Loaded %s as /%s/ (%s)", document.id, document.slug, document.type.value)
            documents.append(document)
        store = cls(documents)
        logger.info("Loaded %d documents from %s", len(store), content_dir)
        return store

    def all(self) -> tuple[Document, ...]:
        return tuple(self._documents)

    def get(self, slug: str) -> Document:
        """Return the document with the given slug.

        Raises:
            DocumentNotFoundError: If no document has this slug.
        """
        key = slug.strip("/")
        try:
            return self._by_slug[key]
        except KeyError:
            raise DocumentNotFoundError(key) from None

    def get_by_id(self, doc_id: str) -> Document:
        """Return the document with the given id.

        Raises:
            DocumentNotFoundError: If no document has this id.
        """
        try:
            return self._by_id[doc_id]
        except KeyError:
            raise DocumentNotFoundError(doc_id, kind="id") from None

    def filter_by_type(self, doc_type: DocumentType | str) -> DocumentCollection:
        from .collections import filter_by_type

        return filter_by_type(self._documents, doc_type)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and slug.strip("/") in self._by_slug

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"ContentStore({len(self._documents)} documents)"


def load_store(content_dir: Path, excerpt_length: int = 160) -> ContentStore:
    """Populate a ContentStore from ``content_dir`` with the default components."""
    return ContentStore.from_directory(content_dir, excerpt_length=excerpt_length)
