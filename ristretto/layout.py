"""Page chrome composition for Ristretto.

A page is the site header, an optional navigation menu, the content slot, an
optional sidebar and the footer. Which optional blocks appear is described by
a ChromeConfig value rather than by which templates happen to exist, so every
configuration in the closed set renders.

Key classes:
- ChromeConfig: Enabled chrome blocks, with the named presets.
- SiteMetadata: Site-wide values shown in the chrome.
- PageContext: Per-route bundle handed to the composer.
- LayoutComposer: Renders the layout template around a content slot.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from .errors import ConfigError
from .navigation import NO_ADJACENT_LINKS, AdjacentLinks, NavEntry

if TYPE_CHECKING:
    from .pages import ListingView, PostView
    from .templates import TemplateEngine

LAYOUT_TEMPLATE = "layout.html.jinja"


class ChromeBlock(str, Enum):
    HEADER = "header"
    NAVIGATION = "navigation"
    SIDEBAR = "sidebar"
    FOOTER = "footer"


class NavigationPlacement(str, Enum):
    NONE = "none"
    TOP = "top"
    SIDE = "side"


@dataclass(frozen=True)
class ChromeConfig:
    """Optional chrome blocks of a page; header and footer are always on."""

    navigation: NavigationPlacement = NavigationPlacement.NONE
    sidebar: bool = False

    @property
    def blocks(self) -> tuple[ChromeBlock, ...]:
        """Enabled blocks in render order."""
        blocks = [ChromeBlock.HEADER]
        if self.navigation is not NavigationPlacement.NONE:
            blocks.append(ChromeBlock.NAVIGATION)
        if self.sidebar:
            blocks.append(ChromeBlock.SIDEBAR)
        blocks.append(ChromeBlock.FOOTER)
        return tuple(blocks)

    @property
    def has_aside(self) -> bool:
        return self.sidebar or self.navigation is NavigationPlacement.SIDE

    @classmethod
    def from_name(cls, name: str) -> ChromeConfig:
        """Look up a preset by name.

        Raises:
            ConfigError: If the preset does not exist.
        """
        try:
            return CHROME_PRESETS[name]
        except KeyError:
            choices = ", ".join(sorted(CHROME_PRESETS))
            raise ConfigError(f"Unknown chrome {name!r}; expected one of: {choices}") from None


CHROME_PRESETS: Mapping[str, ChromeConfig] = {
    "minimal": ChromeConfig(),
    "top-nav": ChromeConfig(navigation=NavigationPlacement.TOP),
    "side-nav": ChromeConfig(navigation=NavigationPlacement.SIDE, sidebar=True),
}


@dataclass(frozen=True)
class LicenseInfo:
    name: str
    url: str
    badge: str | None = None


DEFAULT_LICENSE = LicenseInfo(
    name="Creative Commons Attribution 4.0 International License",
    url="http://creativecommons.org/licenses/by/4.0/",
    badge="https://i.creativecommons.org/l/by/4.0/80x15.png",
)


@dataclass(frozen=True)
class SiteMetadata:
    """Site-wide values rendered by the header, sidebar and footer.

    Attributes:
        title: Site name shown in the header and ``<title>``.
        description: Tagline shown under the title.
        copyright_year: Year printed in the footer, fixed when the config is read.
        logo: Optional logo image URL.
        license: License widget for the sidebar, or None to hide it.
    """

    title: str = "Title"
    description: str = "Description"
    copyright_year: int = 1970
    logo: str | None = None
    license: LicenseInfo | None = DEFAULT_LICENSE

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> SiteMetadata:
        """Build site metadata from the ``site`` section of the config.

        Raises:
            ConfigError: If the section, its license entry or the year is malformed.
        """
        site = config.get("site") or {}
        if not isinstance(site, Mapping):
            raise ConfigError("'site' must be a mapping")
        raw_license = site.get("license", True)
        if raw_license is False or raw_license is None:
            license_info = None
        elif raw_license is True:
            license_info = DEFAULT_LICENSE
        elif isinstance(raw_license, Mapping) and {"name", "url"} <= set(raw_license):
            license_info = LicenseInfo(
                name=str(raw_license["name"]),
                url=str(raw_license["url"]),
                badge=raw_license.get("badge"),
            )
        else:
            raise ConfigError("'site.license' must be false or a mapping with name and url")
        year = config.get("copyright_year") or date.today().year
        if isinstance(year, bool) or not isinstance(year, int):
            raise ConfigError(f"'copyright_year' must be an integer, got {year!r}")
        return cls(
            title=str(site.get("title") or cls.title),
            description=str(site.get("description") or cls.description),
            copyright_year=year,
            logo=site.get("logo"),
            license=license_info,
        )


@dataclass(frozen=True)
class PageContext:
    """Everything the layout needs to render one route."""

    site: SiteMetadata
    title: str
    content: ListingView | PostView
    nav_entries: tuple[NavEntry, ...] = ()
    adjacent_links: AdjacentLinks = NO_ADJACENT_LINKS

    @property
    def document_title(self) -> str:
        if not self.title or self.title == self.site.title:
            return self.site.title
        return f"{self.title} | {self.site.title}"


class LayoutComposer:
    """Wraps a content slot in the site chrome.

    ``compose`` has no hidden inputs: the same context, chrome and slot always
    render the same bytes.
    """

    def __init__(self, engine: TemplateEngine):
        self.engine = engine

    def compose(self, context: PageContext, chrome: ChromeConfig, content_slot: Markup | str) -> str:
        """Render a complete HTML document.

        Args:
            context: Per-route page context.
            chrome: Enabled chrome blocks.
            content_slot: Main content. Markup is inserted as is; plain
                strings are escaped.

        Returns:
            The rendered document.
        """
        return str(
            self.engine.render(
                LAYOUT_TEMPLATE,
                page=context,
                site=context.site,
                chrome=chrome,
                blocks=chrome.blocks,
                placement=chrome.navigation.value,
                content_slot=content_slot,
            )
        )
