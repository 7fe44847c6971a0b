"""Route-level renderers for Ristretto.

- ListingRenderer: the ``/`` route, all posts newest first, or a notice when
  there are none.
- PostRenderer: the ``/<slug>/`` route for a single post or page.

Both render their content slot from a theme template and hand it to the
LayoutComposer together with a freshly built PageContext.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from .collections import DocumentCollection
from .content import ContentStore, Document, DocumentType
from .layout import ChromeConfig, LayoutComposer, PageContext, SiteMetadata
from .navigation import NO_ADJACENT_LINKS, AdjacentLinks, NavEntry, build_page_nav

logger = logging.getLogger(__name__)

LISTING_TEMPLATE = "listing.html.jinja"
POST_TEMPLATE = "post.html.jinja"

DEFAULT_LISTING_DATE_FORMAT = "%-d %B %Y"
DEFAULT_POST_DATE_FORMAT = "%B %d, %Y"


class ListingState(str, Enum):
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass(frozen=True)
class ListingView:
    posts: DocumentCollection
    date_format: str = DEFAULT_LISTING_DATE_FORMAT

    @property
    def state(self) -> ListingState:
        return ListingState.POPULATED if len(self.posts) else ListingState.EMPTY


@dataclass(frozen=True)
class PostView:
    document: Document
    adjacent_links: AdjacentLinks = NO_ADJACENT_LINKS
    date_format: str = DEFAULT_POST_DATE_FORMAT

    @property
    def show_post_navigation(self) -> bool:
        return self.document.type is DocumentType.POST


class _RouteRenderer:
    def __init__(
        self,
        store: ContentStore,
        composer: LayoutComposer,
        site: SiteMetadata,
        chrome: ChromeConfig,
        nav_entries: tuple[NavEntry, ...] | None = None,
    ):
        self.store = store
        self.composer = composer
        self.site = site
        self.chrome = chrome
        self.nav_entries = build_page_nav(store) if nav_entries is None else nav_entries

    def _compose(self, title: str, view: ListingView | PostView, template: str) -> str:
        adjacent = view.adjacent_links if isinstance(view, PostView) else NO_ADJACENT_LINKS
        context = PageContext(
            site=self.site,
            title=title,
            content=view,
            nav_entries=self.nav_entries,
            adjacent_links=adjacent,
        )
        slot = self.composer.engine.render(template, page=context, view=view, site=self.site)
        return self.composer.compose(context, self.chrome, slot)


class ListingRenderer(_RouteRenderer):
    """Renders the index route.

    The output has two shapes, chosen only by how many posts the store holds:
    a single "no posts" notice, or one article entry per post.
    """

    def __init__(
        self,
        store: ContentStore,
        composer: LayoutComposer,
        site: SiteMetadata,
        chrome: ChromeConfig,
        nav_entries: tuple[NavEntry, ...] | None = None,
        date_format: str = DEFAULT_LISTING_DATE_FORMAT,
    ):
        super().__init__(store, composer, site, chrome, nav_entries)
        self.date_format = date_format

    def view(self) -> ListingView:
        posts = DocumentCollection(self.store).posts()
        return ListingView(posts=posts, date_format=self.date_format)

    def state(self) -> ListingState:
        return self.view().state

    def render(self) -> str:
        view = self.view()
        logger.debug("Rendering listing (%s, %d posts)", view.state.value, len(view.posts))
        return self._compose("All posts", view, LISTING_TEMPLATE)


class PostRenderer(_RouteRenderer):
    """Renders a single post or page.

    Adjacent links are looked up in a precomputed index; documents missing
    from it (pages) render without post navigation.
    """

    def __init__(
        self,
        store: ContentStore,
        composer: LayoutComposer,
        site: SiteMetadata,
        chrome: ChromeConfig,
        adjacency: Mapping[str, AdjacentLinks],
        nav_entries: tuple[NavEntry, ...] | None = None,
        date_format: str = DEFAULT_POST_DATE_FORMAT,
    ):
        super().__init__(store, composer, site, chrome, nav_entries)
        self.adjacency = adjacency
        self.date_format = date_format

    def render(self, slug: str) -> str:
        """Render the document with the given slug.

        Raises:
            DocumentNotFoundError: If the store has no such slug.
        """
        return self.render_document(self.store.get(slug))

    def render_document(self, document: Document) -> str:
        view = PostView(
            document=document,
            adjacent_links=self.adjacency.get(document.id, NO_ADJACENT_LINKS),
            date_format=self.date_format,
        )
        logger.debug("Rendering %s", document.url)
        return self._compose(document.title, view, POST_TEMPLATE)
