from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from enum import Enum

from .content import Document, DocumentType

SORT_KEYS = frozenset({"date", "order", "title", "description"})


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


def filter_by_type(docs: Iterable[Document], doc_type: DocumentType | str) -> DocumentCollection:
    """Return the documents whose frontmatter type is ``doc_type``, in input order."""
    wanted = DocumentType(doc_type)
    return DocumentCollection(d for d in docs if d.frontmatter.type is wanted)


def sort_by(
    docs: Iterable[Document],
    key: str,
    direction: SortDirection | str = SortDirection.ASCENDING,
) -> DocumentCollection:
    """Stable sort of documents on a frontmatter field.

    Documents without a value for ``key`` sort after every document that has
    one, in both directions, and keep their relative input order. Ties among
    present values also keep input order, including when descending.

    Args:
        docs: Documents to sort.
        key: Frontmatter field name (date, order, title or description).
        direction: Ascending or descending.

    Returns:
        A new DocumentCollection.

    Raises:
        ValueError: If ``key`` is not a sortable frontmatter field.
    """
    if key not in SORT_KEYS:
        raise ValueError(f"Cannot sort by {key!r}; expected one of {sorted(SORT_KEYS)}")
    direction = SortDirection(direction)
    present: list[Document] = []
    missing: list[Document] = []
    for doc in docs:
        (missing if getattr(doc.frontmatter, key) is None else present).append(doc)
    # sorted(reverse=True) keeps ties in input order, so descending stays stable
    present = sorted(
        present,
        key=lambda d: getattr(d.frontmatter, key),
        reverse=direction is SortDirection.DESCENDING,
    )
    return DocumentCollection(present + missing)


class DocumentCollection(Sequence[Document]):
    """Immutable, chainable sequence of documents returned by queries."""

    def __init__(self, docs: Iterable[Document]):
        self._docs = tuple(docs)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._docs)

    def __len__(self) -> int:
        return len(self._docs)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return DocumentCollection(self._docs[item])
        return self._docs[item]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DocumentCollection):
            return self._docs == other._docs
        return NotImplemented

    def of_type(self, doc_type: DocumentType | str) -> DocumentCollection:
        return filter_by_type(self._docs, doc_type)

    def sorted_by(
        self, key: str, direction: SortDirection | str = SortDirection.ASCENDING
    ) -> DocumentCollection:
        return sort_by(self._docs, key, direction)

    def posts(self) -> DocumentCollection:
        """Posts, newest first."""
        return self.of_type(DocumentType.POST).sorted_by("date", SortDirection.DESCENDING)

    def pages(self) -> DocumentCollection:
        """Pages in navigation order."""
        return self.of_type(DocumentType.PAGE).sorted_by("order", SortDirection.ASCENDING)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._docs)} documents)"
