"""Pytest fixtures for the course docs site tests."""

from pathlib import Path

import pytest


# relative path -> markdown text
DOCS_PAGES = {
    "README.md": "# InSpec Advanced Developer\n\nWelcome.\n",
    "contact.md": "# Contact\n\nReach the team on GitHub.\n",
    "course/README.md": "# Course\n\nStart with lesson one.\n",
    "course/1.md": "# Introduction\n\n## Goals\n\nLearn resources.\n\n## Layout\n\nSee below.\n",
    "course/2.md": "# Profiles\n\n```ruby\ndescribe file('/etc/passwd') do\n  it { should exist }\nend\n```\n",
    "course/10.md": "# Wrap Up\n",
    "installation/LinuxInstall.md": "# Linux\n",
    "installation/MacInstall.md": "# Mac\n",
    "installation/WindowsInstall.md": "# Windows\n",
    "resources/README.md": "# Resources\n",
    "resources/Links.md": "# Links\n",
}


def write_docs(root: Path, pages: dict) -> Path:
    """Write a docs tree of markdown pages under root."""
    for rel, text in pages.items():
        fp = root / rel
        fp.parent.mkdir(parents=True, exist_ok=True)
        fp.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def docs_tree(tmp_path: Path) -> Path:
    """Small docs folder shaped like the course repo, with an asset and a .vuepress folder."""
    docs = write_docs(tmp_path / "docs", DOCS_PAGES)
    (docs / "images").mkdir()
    (docs / "images" / "logo.png").write_bytes(b"\x89PNG\r\n")
    (docs / ".vuepress").mkdir()
    (docs / ".vuepress" / "config.js").write_text("module.exports = {};\n", encoding="utf-8")
    return docs
