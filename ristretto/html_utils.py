"""URL helpers for Ristretto.

Routes are written as ``/<slug>/index.html`` and templates link to them with
root-relative URLs. When the site is published below a ``root_url`` those
links, and any root-relative links authors put in their Markdown, get the
root prepended after rendering.

Functions:
    join_root_url: Join a base URL with a path.
    absolutize_html_urls: Prefix root-relative URLs in rendered HTML.
"""

from __future__ import annotations

import re

# href/src/action values that start with exactly one slash
_ROOT_RELATIVE_ATTR_RE = re.compile(
    r"""(?P<attr>\b(?:href|src|action)\s*=\s*)(?P<quote>["'])(?P<url>/(?!/)[^"']*)(?P=quote)""",
    re.IGNORECASE,
)


def join_root_url(root_url: str, path: str) -> str:
    """Join a root URL and a path with exactly one slash between them.

    Examples:
        >>> join_root_url('https://example.com/blog/', '/about/')
        'https://example.com/blog/about/'

        >>> join_root_url('https://example.com', 'about/')
        'https://example.com/about/'

        >>> join_root_url('', '/about/')
        '/about/'
    """
    if not root_url:
        return path
    return f"{root_url.rstrip('/')}/{path.lstrip('/')}"


def absolutize_html_urls(html: str, root_url: str) -> str:
    """Prefix root-relative ``href``, ``src`` and ``action`` URLs with ``root_url``.

    Only URLs starting with a single ``/`` change. Absolute and
    protocol-relative URLs, fragments, ``mailto:`` links and links relative to
    the current document are left as written.

    Args:
        html: Rendered route.
        root_url: Base URL the site is published under.

    Returns:
        The HTML with root-relative URLs made absolute.

    Examples:
        >>> absolutize_html_urls('<a href="/about/">About</a>', 'https://example.com/blog')
        '<a href="https://example.com/blog/about/">About</a>'

        >>> absolutize_html_urls('<img src="cat.png">', 'https://example.com')
        '<img src="cat.png">'
    """
    if not root_url:
        return html

    def repl(match: re.Match) -> str:
        quote = match.group("quote")
        url = join_root_url(root_url, match.group("url"))
        return f"{match.group('attr')}{quote}{url}{quote}"

    return _ROOT_RELATIVE_ATTR_RE.sub(repl, html)
