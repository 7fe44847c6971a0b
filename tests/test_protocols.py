"""Tests for the pluggable loading components.

Covers the protocols, the frontmatter extractor and the Markdown renderer.
"""

from pathlib import Path

import pytest
from markupsafe import Markup

from ristretto.content import (
    ContentStore,
    Document,
    DocumentBuilder,
    DocumentType,
    FileContentLoader,
    Frontmatter,
)
from ristretto.errors import LoadError
from ristretto.extractors import FrontmatterError, FrontmatterExtractor, extract_frontmatter
from ristretto.protocols import ContentLoader, ContentRenderer, DocumentSource, MetadataExtractor
from ristretto.renderers import MarkdownRenderer

# --- Protocol Tests ---


def test_default_components_satisfy_protocols(tmp_path):
    """Test the built-in components implement their protocols."""
    assert isinstance(MarkdownRenderer(), ContentRenderer)
    assert isinstance(FrontmatterExtractor(), MetadataExtractor)
    assert isinstance(FileContentLoader(tmp_path), ContentLoader)
    assert isinstance(DocumentBuilder(tmp_path), DocumentSource)


def test_store_accepts_custom_loader_and_builder(tmp_path):
    """Test ContentStore.from_directory uses injected components."""

    class ListLoader:
        def iter_files(self):
            return [Path("b.md"), Path("a.md")]

    class StubBuilder:
        def build(self, path):
            return Document(
                id=path.name,
                slug=path.stem,
                frontmatter=Frontmatter(type=DocumentType.PAGE, order=1),
                excerpt="",
                body=Markup(""),
            )

    assert isinstance(ListLoader(), ContentLoader)
    store = ContentStore.from_directory(tmp_path, loader=ListLoader(), builder=StubBuilder())
    assert [d.slug for d in store] == ["b", "a"]


def test_builder_uses_custom_renderer(tmp_path):
    """Test DocumentBuilder renders bodies with the injected renderer."""

    class ShoutRenderer:
        def can_render(self, path):
            return True

        def render(self, content):
            return Markup(f"<p>{content.strip().upper()}</p>")

    source = tmp_path / "note.md"
    source.write_text("---\ntype: page\norder: 3\n---\nquiet words\n", encoding="utf-8")
    doc = DocumentBuilder(tmp_path, renderer=ShoutRenderer()).build(source)
    assert doc.body == Markup("<p>QUIET WORDS</p>")
    assert doc.excerpt == "QUIET WORDS"
    assert doc.id == "note.md"


def test_builder_rejects_files_the_renderer_cannot_handle(tmp_path):
    """Test DocumentBuilder refuses a file its renderer does not accept."""
    source = tmp_path / "notes.txt"
    source.write_text("---\ntype: page\norder: 1\n---\nPlain text\n", encoding="utf-8")
    with pytest.raises(LoadError, match="does not accept this file type") as excinfo:
        DocumentBuilder(tmp_path).build(source)
    assert excinfo.value.source_path == source


def test_store_reports_renderer_rejection(tmp_path):
    """Test a loader yielding a non-Markdown file fails population."""
    (tmp_path / "notes.rst").write_text("---\ntype: page\norder: 1\n---\nText\n", encoding="utf-8")

    class EverythingLoader:
        def iter_files(self):
            return sorted(tmp_path.iterdir())

    with pytest.raises(LoadError):
        ContentStore.from_directory(tmp_path, loader=EverythingLoader())


# --- Extractor Tests ---


def test_extract_frontmatter_splits_body():
    """Test frontmatter and body are separated."""
    data, body = extract_frontmatter("---\ntitle: Hello\ntype: post\n---\n\n# Body\n")
    assert data == {"title": "Hello", "type": "post"}
    assert body == "\n# Body\n"


def test_extract_frontmatter_allows_bom_and_empty_block():
    """Test a leading BOM and an empty block are accepted."""
    data, body = extract_frontmatter("\ufeff---\ntype: page\n---\nText")
    assert data == {"type": "page"}
    assert body == "Text"
    data, body = extract_frontmatter("---\n---\nText")
    assert data == {}
    assert body == "Text"


@pytest.mark.parametrize(
    "text, message",
    [
        ("# No frontmatter\n", "missing frontmatter block"),
        ("Intro\n---\ntype: post\n---\n", "missing frontmatter block"),
        ("---\ntitle: [oops\n---\n", "invalid YAML"),
        ("---\njust a string\n---\n", "must be a mapping"),
    ],
)
def test_extract_frontmatter_errors(text, message):
    """Test malformed frontmatter raises FrontmatterError."""
    with pytest.raises(FrontmatterError, match=message):
        extract_frontmatter(text)


def test_frontmatter_extractor_returns_mapping():
    """Test FrontmatterExtractor wraps extract_frontmatter."""
    result = FrontmatterExtractor().extract("---\ntype: page\n---\nBody", Path("x.md"))
    assert result == {"frontmatter": {"type": "page"}, "body": "Body"}


# --- Renderer Tests ---


def test_markdown_renderer_file_matching():
    """Test MarkdownRenderer accepts Markdown files only."""
    renderer = MarkdownRenderer()
    assert renderer.can_render(Path("post.md"))
    assert renderer.can_render(Path("POST.MD"))
    assert not renderer.can_render(Path("post.txt"))


def test_markdown_renderer_returns_trusted_markup():
    """Test rendered bodies are Markup and keep raw HTML."""
    html = MarkdownRenderer().render("Some *text* and <span class=\"x\">raw</span>.")
    assert isinstance(html, Markup)
    assert "<em>text</em>" in html
    assert '<span class="x">raw</span>' in html


def test_markdown_renderer_heading_ids():
    """Test headings get unique anchor ids."""
    html = MarkdownRenderer().render("# Intro\n\n## Intro\n\n### Getting Started!\n")
    assert '<h1 id="intro">Intro</h1>' in html
    assert '<h2 id="intro-1">Intro</h2>' in html
    assert '<h3 id="getting-started">Getting Started!</h3>' in html


def test_markdown_renderer_highlights_code():
    """Test fenced code with a known language is highlighted."""
    html = MarkdownRenderer().render("```python\nprint('hi')\n```\n")
    assert '<div class="highlight">' in html
    assert '<span class="nb">print</span>' in html


def test_markdown_renderer_unknown_language():
    """Test unknown languages fall back to an escaped code block."""
    html = MarkdownRenderer().render("```nosuchlang\n<tag>\n```\n")
    assert '<pre><code class="language-nosuchlang">&lt;tag&gt;' in html
    html = MarkdownRenderer().render("```\na < b\n```\n")
    assert "<pre><code>a &lt; b" in html


def test_markdown_renderer_plugins():
    """Test tables, strikethrough and bare URLs are enabled."""
    renderer = MarkdownRenderer()
    table = renderer.render("| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<table>" in table
    assert "<td>1</td>" in table
    assert "<del>gone</del>" in renderer.render("~~gone~~")
    assert '<a href="https://example.com">' in renderer.render("See https://example.com today")
