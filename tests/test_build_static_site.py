"""Tests for the local HTML preview builder."""

from pathlib import Path

import pytest

import build_static_site
import site_config
from build_static_site import (
    convert_markdown_with_toc,
    copy_assets,
    edit_link_url,
    page_title,
    relative_output_html,
    render_navbar_html,
    resolve_link,
    write_pages,
)
from site_config import MARKDOWN_OPTIONS, build_site_config


@pytest.mark.parametrize(
    "rel, expected",
    [
        pytest.param("README.md", "index.html", id="root_readme"),
        pytest.param("course/README.md", "course/index.html", id="section_readme"),
        pytest.param("course/10.md", "course/10.html", id="lesson"),
        pytest.param("resources/labs/lab1.md", "resources/labs/lab1.html", id="nested"),
    ],
)
def test_relative_output_html(tmp_path: Path, rel, expected):
    docs_root, output_root = tmp_path / "docs", tmp_path / "site"
    assert relative_output_html(docs_root, output_root, docs_root / rel) == output_root / expected


@pytest.mark.parametrize(
    "link, expected",
    [
        pytest.param("/course/1", "course/1.html", id="route"),
        pytest.param("/installation/LinuxInstall.md", "installation/LinuxInstall.html", id="md_link"),
        pytest.param("/resources/", "resources/index.html", id="folder"),
        pytest.param("/contact.md", "contact.html", id="root_page"),
        pytest.param("/", "index.html", id="home"),
        pytest.param("/course/README.md", "course/index.html", id="readme_link"),
        pytest.param("/course/1#goals", "course/1.html#goals", id="anchor_kept"),
        pytest.param("/resources/#links", "resources/index.html#links", id="folder_anchor"),
        pytest.param("https://inspec.io/docs", "https://inspec.io/docs", id="external"),
    ],
)
def test_resolve_link(link, expected):
    assert resolve_link(link) == expected


def test_edit_link_url(tmp_path: Path):
    theme = build_site_config(tmp_path)["themeConfig"]
    assert edit_link_url(theme, Path("course/1.md")) == (
        "https://github.com/mitre/inspec-advanced-developer/edit/master/docs/course/1.md"
    )

    theme["editLinks"] = False
    assert edit_link_url(theme, Path("course/1.md")) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        pytest.param("# Introduction\n\nbody\n", "Introduction", id="heading"),
        pytest.param("intro text\n\n# Later Title #\n", "Later Title", id="closed_heading"),
        pytest.param("## Only a subheading\n", "fallback", id="no_h1"),
        pytest.param("Intro\n\n```bash\n# install inspec\ncurl x\n```\n", "fallback", id="comment_in_fenced_code"),
        pytest.param("```ruby\n# a comment\n```\n\n# Real Title\n", "Real Title", id="heading_after_code"),
        pytest.param("Setext Title\n============\n", "Setext Title", id="setext_heading"),
    ],
)
def test_page_title(text, expected):
    assert page_title(text, "fallback") == expected


def test_convert_markdown_uses_markdown_options():
    """Permalinks, numbered code blocks and the ToC follow the markdown options."""
    text = "# Title\n\n## Section\n\n##### Too deep\n\n```ruby\ndescribe x\n```\n"
    content_html, toc_html = convert_markdown_with_toc(text, MARKDOWN_OPTIONS)

    assert 'class="headerlink"' in content_html
    # the fenced ruby block gets a line-number column
    assert 'class="linenos"' in content_html
    assert 'href="#title"' in toc_html
    assert 'href="#section"' in toc_html
    assert "Too deep" not in toc_html


def test_convert_markdown_without_options():
    content_html, _ = convert_markdown_with_toc("# Title\n\n```\ncode\n```\n", {})
    assert "headerlink" not in content_html
    assert "linenos" not in content_html


def test_render_navbar_html(tmp_path: Path):
    output_root = tmp_path / "site"
    config = build_site_config(tmp_path)
    nav_html = render_navbar_html(config, current_out_dir=output_root / "course", output_root=output_root)

    assert 'href="1.html"' in nav_html
    assert 'class="dropdown-menu"' in nav_html
    assert 'href="../installation/LinuxInstall.html"' in nav_html
    assert 'href="../installation/vagrant_install.html"' in nav_html
    assert 'href="../resources/index.html"' in nav_html
    assert 'href="../contact.html"' in nav_html
    assert 'href="https://github.com/mitre/inspec-advanced-developer">Contribute!</a>' in nav_html


def test_copy_assets_skips_markdown_and_dot_folders(docs_tree: Path, tmp_path: Path):
    output_root = tmp_path / "site"
    copy_assets(docs_tree, output_root)

    assert (output_root / "images" / "logo.png").read_bytes() == b"\x89PNG\r\n"
    assert not (output_root / ".vuepress").exists()
    assert not list(output_root.rglob("*.md"))


def test_write_pages(docs_tree: Path, tmp_path: Path):
    output_root = tmp_path / "site"
    config = build_site_config(docs_tree)
    written = write_pages(docs_tree, output_root, config)

    assert len(written) == len(list(docs_tree.rglob("*.md")))
    assert (output_root / "index.html").exists()
    assert (output_root / "course" / "index.html").exists()

    page = (output_root / "course" / "2.html").read_text(encoding="utf-8")
    # sidebar in numeric order, current page highlighted, labels from headings
    assert page.index('href="1.html">Introduction') < page.index('href="2.html">Profiles') < page.index('href="10.html">Wrap Up')
    assert 'class="nav-link active" aria-current="page" href="2.html"' in page
    assert "https://github.com/mitre/inspec-advanced-developer/edit/master/docs/course/2.md" in page
    assert "Help us improve this page!" in page
    assert "<title>Profiles | MITRE InSpec Advanced Developer Course</title>" in page

    lesson = (output_root / "course" / "1.html").read_text(encoding="utf-8")
    assert "On this page" in lesson

    contact = (output_root / "contact.html").read_text(encoding="utf-8")
    assert 'class="nav-link active"' not in contact
    assert "Introduction" not in contact


def test_write_pages_sidebar_skips_dot_folders(docs_tree: Path, tmp_path: Path):
    """Pages under dot-folders are listed in the config but not linked from the preview."""
    (docs_tree / "course" / ".drafts").mkdir()
    (docs_tree / "course" / ".drafts" / "2.md").write_text("# Draft\n", encoding="utf-8")
    output_root = tmp_path / "site"
    config = build_site_config(docs_tree)
    assert ".drafts/2" in config["themeConfig"]["sidebar"]["/course/"]

    write_pages(docs_tree, output_root, config)

    page = (output_root / "course" / "1.html").read_text(encoding="utf-8")
    assert ".drafts" not in page
    assert not (output_root / "course" / ".drafts").exists()
    assert 'href="10.html">Wrap Up' in page


def test_main_builds_site(docs_tree: Path, tmp_path: Path, monkeypatch, capsys):
    monkeypatch.setattr(site_config, "use_system_collation", lambda: None)
    output_root = tmp_path / "site"
    (output_root / "stale").mkdir(parents=True)

    build_static_site.main(["--docs", str(docs_tree), "--output", str(output_root)])

    assert (output_root / "installation" / "MacInstall.html").exists()
    assert (output_root / "images" / "logo.png").exists()
    assert not (output_root / "stale").exists()
    assert "Site generated at" in capsys.readouterr().out


@pytest.mark.parametrize(
    "docs_rel, out_rel, message",
    [
        pytest.param("missing", "site", "Docs directory not found", id="missing_docs"),
        pytest.param("docs", "docs/site", "must be outside the docs folder", id="output_in_docs"),
    ],
)
def test_main_rejects_bad_paths(docs_tree: Path, monkeypatch, docs_rel, out_rel, message):
    monkeypatch.setattr(site_config, "use_system_collation", lambda: None)
    base = docs_tree.parent
    with pytest.raises(SystemExit, match=message):
        build_static_site.main(["--docs", str(base / docs_rel), "--output", str(base / out_rel)])
