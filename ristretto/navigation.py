"""Navigation for Ristretto.

Builds the ordered page menu and the previous/next links shown under posts.

Direction convention for adjacent links: posts are listed newest first, and
``previous`` points at the next element of that list (the older post) while
``next`` points at the element before it (the newer post). The newest post
therefore has no ``next`` link and the oldest has no ``previous`` link.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from .collections import SortDirection
from .content import ContentStore, Document, DocumentType
from .errors import DocumentNotFoundError


@dataclass(frozen=True)
class NavEntry:
    slug: str
    title: str
    order: int

    @property
    def url(self) -> str:
        return f"/{self.slug}/"


@dataclass(frozen=True)
class PostLink:
    slug: str
    title: str

    @property
    def url(self) -> str:
        return f"/{self.slug}/"

    @classmethod
    def from_document(cls, doc: Document) -> PostLink:
        return cls(slug=doc.slug, title=doc.title)


@dataclass(frozen=True)
class AdjacentLinks:
    previous: PostLink | None = None
    next: PostLink | None = None


NO_ADJACENT_LINKS = AdjacentLinks()


def build_page_nav(store: ContentStore) -> tuple[NavEntry, ...]:
    """Return the page menu, ordered by ascending ``order``."""
    pages = store.filter_by_type(DocumentType.PAGE).sorted_by("order", SortDirection.ASCENDING)
    return tuple(NavEntry(slug=p.slug, title=p.title, order=p.frontmatter.order) for p in pages)


def _links_at(posts: Sequence[Document], index: int) -> AdjacentLinks:
    older = posts[index + 1] if index + 1 < len(posts) else None
    newer = posts[index - 1] if index > 0 else None
    return AdjacentLinks(
        previous=PostLink.from_document(older) if older is not None else None,
        next=PostLink.from_document(newer) if newer is not None else None,
    )


def build_adjacent_links(posts: Sequence[Document], current_id: str) -> AdjacentLinks:
    """Return the previous/next links for one post.

    Args:
        posts: All posts, sorted by date descending.
        current_id: Id of the post being rendered.

    Returns:
        AdjacentLinks for the post.

    Raises:
        DocumentNotFoundError: If ``current_id`` is not in ``posts``.
    """
    for index, doc in enumerate(posts):
        if doc.id == current_id:
            return _links_at(posts, index)
    raise DocumentNotFoundError(current_id, kind="id")


def build_adjacency_index(posts: Sequence[Document]) -> Mapping[str, AdjacentLinks]:
    """Compute adjacent links for every post once, keyed by document id."""
    return MappingProxyType({doc.id: _links_at(posts, i) for i, doc in enumerate(posts)})
