from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from ristretto.cli import cli
from ristretto.content import DocumentType, load_store


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def create_project(root: Path) -> Path:
    content = root / "content"
    write(content / "about.md", "---\ntitle: About\ntype: page\norder: 1\n---\n\nAbout.\n")
    write(content / "contact.md", "---\ntitle: Contact\ntype: page\norder: 4\n---\n\nMail.\n")
    write(
        content / "blog" / "2024-01-01-existing-post.md",
        "---\ntitle: Existing post\ntype: post\ndate: 2024-01-01\n---\n\nHello.\n",
    )
    return root


def mock_prompts(monkeypatch, responses, calls=None):
    answers = iter(responses)

    def prompt(*args, **kwargs):
        if calls is not None:
            calls.append(kwargs)

        class MockQuestion:
            def ask(self):
                return next(answers)

        return MockQuestion()

    monkeypatch.setattr("ristretto.cli.questionary.select", prompt)
    monkeypatch.setattr("ristretto.cli.questionary.text", prompt)


def test_cli_build(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["build"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Built 4 routes into" in result.output
    assert (tmp_path / "public" / "index.html").exists()
    assert (tmp_path / "public" / "blog" / "existing-post" / "index.html").exists()


def test_cli_build_routes_and_output(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["--verbose", "build", "--route", "about", "--output", "dist"], catch_exceptions=False
    )
    assert result.exit_code == 0
    assert "Built 1 routes into dist" in result.output
    assert (tmp_path / "dist" / "about" / "index.html").exists()
    assert not (tmp_path / "dist" / "index.html").exists()


def test_cli_build_missing_route_exits_nonzero(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["build", "--route", "missing", "--route", "about"])
    assert result.exit_code == 1
    assert "Built 1 routes" in result.output
    assert "Failed /missing/" in result.output
    assert (tmp_path / "public" / "about" / "index.html").exists()


def test_cli_build_reports_load_error(tmp_path, monkeypatch):
    create_project(tmp_path)
    write(tmp_path / "content" / "bad.md", "---\ntype: page\n---\n\nNo order.\n")
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Loading content failed:" in result.output
    assert "bad.md" in result.output
    assert "pages require an integer 'order'" in result.output


def test_cli_build_single_route_keeps_previous_output(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    post = tmp_path / "public" / "blog" / "existing-post" / "index.html"

    assert runner.invoke(cli, ["build"], catch_exceptions=False).exit_code == 0
    assert post.exists()

    result = runner.invoke(cli, ["build", "--route", "about"], catch_exceptions=False)
    assert result.exit_code == 0
    assert post.exists()
    assert (tmp_path / "public" / "about" / "index.html").exists()

    result = runner.invoke(cli, ["build", "--route", "about", "--clean"], catch_exceptions=False)
    assert result.exit_code == 0
    assert not post.exists()
    assert (tmp_path / "public" / "about" / "index.html").exists()


@pytest.mark.parametrize(
    "config, message",
    [
        ("copyright_year: abc\n", "'copyright_year' must be a positive integer"),
        ("excerpt_length: lots\n", "'excerpt_length' must be a positive integer"),
        ("content_dir: null\n", "'content_dir' must be a non-empty string"),
    ],
)
def test_cli_build_reports_bad_config_values(tmp_path, monkeypatch, config, message):
    create_project(tmp_path)
    write(tmp_path / "ristretto.yaml", config)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Invalid configuration:" in result.output
    assert message in result.output
    assert not (tmp_path / "public").exists()


def test_cli_build_reports_config_error(tmp_path, monkeypatch):
    create_project(tmp_path)
    write(tmp_path / "ristretto.yaml", "chrome: fancy\n")
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Invalid configuration:" in result.output
    assert "Unknown chrome 'fancy'" in result.output


def test_cli_routes(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["routes"], catch_exceptions=False)
    assert result.exit_code == 0
    assert result.output.splitlines() == ["/", "/about/", "/blog/existing-post/", "/contact/"]


def test_cli_routes_missing_content(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["routes"])
    assert result.exit_code == 1
    assert "content directory does not exist" in result.output


def test_new_post(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    mock_prompts(monkeypatch, ["post", "  My New Post  "])

    result = CliRunner().invoke(cli, ["new"], catch_exceptions=False)
    assert result.exit_code == 0

    today = date.today()
    expected = tmp_path / "content" / "blog" / f"{today.isoformat()}-my-new-post.md"
    assert expected.exists()
    assert "Created" in result.output

    doc = load_store(tmp_path / "content").get("blog/my-new-post")
    assert doc.title == "My New Post"
    assert doc.type is DocumentType.POST
    assert doc.frontmatter.date == today


def test_new_page_suggests_next_order(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    calls = []
    mock_prompts(monkeypatch, ["page", "Colophon", "5"], calls)

    result = CliRunner().invoke(cli, ["new"], catch_exceptions=False)
    assert result.exit_code == 0
    assert calls[2]["default"] == "5"

    doc = load_store(tmp_path / "content").get("colophon")
    assert doc.type is DocumentType.PAGE
    assert doc.frontmatter.order == 5
    assert (tmp_path / "content" / "colophon.md").exists()


def test_new_detects_duplicate_slug(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    mock_prompts(monkeypatch, ["post", "Existing Post"])

    result = CliRunner().invoke(cli, ["new"])
    assert result.exit_code != 0
    assert "already exists" in result.output
    assert len(list((tmp_path / "content" / "blog").iterdir())) == 1


def test_new_aborts_when_prompt_cancelled(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    mock_prompts(monkeypatch, [None])

    result = CliRunner().invoke(cli, ["new"])
    assert result.exit_code == 1
    assert not (tmp_path / "content").exists()


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "ristretto" in result.output


def test_module_main_entrypoint():
    from ristretto.__main__ import main

    assert callable(main)


def test_main_invokes_cli(monkeypatch):
    import ristretto.cli as cli_mod

    called = {}

    def fake_cli():
        called["ran"] = True

    monkeypatch.setattr(cli_mod, "cli", fake_cli)
    cli_mod.main()
    assert called["ran"]
