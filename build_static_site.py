#!/usr/bin/env python3
"""
Local preview builder for the course docs.

Features:
- Converts all .md files under the docs directory to .html in the output directory
- README.md becomes the index.html of its folder
- Top navbar from the site config (nested items render as dropdowns)
- Left sidebar listing the pages of the current section, in sidebar order
- "Edit this page" links, heading permalinks, numbered code blocks and a right-hand ToC
- Copies non-.md assets as-is (dot-folders such as .vuepress are skipped)

Usage:
  python build_static_site.py --docs ./docs --output ./site

Notes:
- Requires the "markdown" package: pip install markdown
"""

from __future__ import annotations

import argparse
import html
import logging
import os
import re
import shutil
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

import markdown
from pygments.formatters import HtmlFormatter

import site_config


log = logging.getLogger(__name__)

GITHUB_URL = "https://github.com"

# highlight classes emitted by codehilite
CODE_CSS = HtmlFormatter(style="default").get_style_defs(".codehilite")


# -- helpers: paths and links --
def is_markdown_file(path: Path) -> bool:
    return path.suffix == site_config.MARKDOWN_SUFFIX


def is_hidden(rel: Path) -> bool:
    return any(part.startswith(".") for part in rel.parts)


def relative_output_html(docs_root: Path, output_root: Path, md_path: Path) -> Path:
    """Map a docs markdown path to its output HTML path; README.md becomes index.html."""
    rel = md_path.relative_to(docs_root)
    if rel.name == "README.md":
        return output_root / rel.parent / "index.html"
    return (output_root / rel).with_suffix(".html")


def is_external(link: str) -> bool:
    return re.match(r"^[a-z][a-z0-9+.-]*:", link) is not None


def resolve_link(link: str) -> str:
    """Turn a site route ('/course/1', '/installation/X.md', '/resources/') into an output path.

    The result is relative to the output root and keeps any '#anchor'.
    External URLs are returned unchanged.
    """
    if is_external(link):
        return link
    route, sep, fragment = link.partition("#")
    return _route_to_html(route.lstrip("/")) + sep + fragment


def _route_to_html(route: str) -> str:
    if not route or route.endswith("/"):
        return f"{route}index.html"
    path = PurePosixPath(route)
    if path.suffix == ".html":
        return route
    if path.suffix == site_config.MARKDOWN_SUFFIX:
        path = path.with_suffix("")
    if path.name == "README":
        return str(path.parent / "index.html")
    return f"{path}.html"


def section_prefix(rel_md: Path) -> Optional[str]:
    """Return the '/section/' sidebar key a docs-relative page belongs to."""
    if len(rel_md.parts) < 2:
        return None
    return f"/{rel_md.parts[0]}/"


def repo_url(repo: str) -> str:
    if re.match(r"^https?://", repo):
        return repo.rstrip("/")
    return f"{GITHUB_URL}/{repo}"


def edit_link_url(theme: Dict[str, Any], rel_md: Path) -> Optional[str]:
    """Build the 'edit this page' URL for a docs-relative markdown path."""
    if not theme.get("editLinks") or not theme.get("repo"):
        return None
    base = repo_url(theme.get("docsRepo") or theme["repo"])
    branch = theme.get("docsBranch", "master")
    docs_dir = theme.get("docsDir", "").strip("/")
    parts = [p for p in (docs_dir, rel_md.as_posix()) if p]
    return f"{base}/edit/{branch}/{'/'.join(parts)}"


# -- helpers: markdown --
def _first_h1(tokens: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    for token in tokens:
        if token["level"] == 1:
            return token
        found = _first_h1(token.get("children", []))
        if found is not None:
            return found
    return None


def page_title(md_text: str, fallback: str) -> str:
    """First level-one heading of the page, else the fallback.

    Headings come from the parsed document, so '#' comments inside code blocks don't count.
    """
    md = markdown.Markdown(extensions=["extra", "toc"])
    md.convert(md_text)
    token = _first_h1(getattr(md, "toc_tokens", []))
    if token is None:
        return fallback
    return html.unescape(token["name"]) or fallback


def markdown_extension_configs(markdown_options: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    levels = markdown_options.get("toc", {}).get("includeLevel") or [1, 2, 3, 4, 5, 6]
    return {
        "toc": {
            "toc_depth": f"{min(levels)}-{max(levels)}",
            "permalink": bool(markdown_options.get("anchor", {}).get("permalink", False)),
        },
        # fenced blocks only pick up linenums when pygments does the highlighting
        "codehilite": {
            "linenums": bool(markdown_options.get("lineNumbers", False)),
            "use_pygments": True,
            "guess_lang": False,
        },
    }


def convert_markdown_with_toc(md_text: str, markdown_options: Dict[str, Any]) -> Tuple[str, str]:
    """Convert markdown and also return a generated ToC HTML.

    Returns (content_html, toc_html)
    """
    md = markdown.Markdown(
        extensions=["extra", "toc", "codehilite"],
        extension_configs=markdown_extension_configs(markdown_options),
    )
    content_html = md.convert(md_text)
    toc_html = getattr(md, "toc", "")
    return content_html, toc_html


# -- helpers: HTML generation --
def render_navbar_html(config: Dict[str, Any], current_out_dir: Path, output_root: Path) -> str:
    """Render the top navbar. Links are relative to current_out_dir."""
    theme = config["themeConfig"]

    def href(link: str) -> str:
        if is_external(link):
            return html.escape(link)
        target = output_root / resolve_link(link)
        return html.escape(os.path.relpath(target, start=current_out_dir).replace(os.sep, "/"))

    items: List[str] = []
    for item in theme.get("nav", []):
        text = html.escape(item["text"])
        if "items" in item:
            children = "".join(
                f'<li><a class="dropdown-item" href="{href(child["link"])}">{html.escape(child["text"])}</a></li>'
                for child in item["items"]
            )
            items.append(
                f'<li class="nav-item dropdown">'
                f'<a class="nav-link dropdown-toggle" href="#" role="button" data-bs-toggle="dropdown" aria-expanded="false">{text}</a>'
                f'<ul class="dropdown-menu">{children}</ul>'
                f"</li>"
            )
        else:
            items.append(f'<li class="nav-item"><a class="nav-link" href="{href(item["link"])}">{text}</a></li>')

    if theme.get("repo"):
        label = html.escape(theme.get("repoLabel") or "GitHub")
        items.append(f'<li class="nav-item"><a class="nav-link" href="{html.escape(repo_url(theme["repo"]))}">{label}</a></li>')

    home_href = html.escape(os.path.relpath(output_root / "index.html", start=current_out_dir).replace(os.sep, "/"))
    return (
        f'<nav class="navbar navbar-expand bg-body-tertiary border-bottom px-3">'
        f'<a class="navbar-brand" href="{home_href}">{html.escape(config.get("title", ""))}</a>'
        f'<ul class="navbar-nav ms-auto">{"".join(items)}</ul>'
        f"</nav>"
    )


def render_sidebar_html(sidebar: List[str], prefix: str, current_out_dir: Path, output_root: Path, current_out_html: Path, title_map: Dict[str, str]) -> str:
    """Render one section's sidebar list, highlighting the active page.

    Entries under dot-folders are left out since those pages are never rendered.
    """
    items: List[str] = []
    for identifier in sidebar:
        if is_hidden(PurePosixPath(identifier)):
            continue
        route = f"{prefix}{identifier}"
        target = output_root / resolve_link(route)
        label = html.escape(title_map.get(route, identifier))
        is_active = target == current_out_html
        active_cls = " active" if is_active else ""
        aria = ' aria-current="page"' if is_active else ""
        href = html.escape(os.path.relpath(target, start=current_out_dir).replace(os.sep, "/"))
        items.append(f'<li class="nav-item"><a class="nav-link{active_cls}"{aria} href="{href}">{label}</a></li>')
    return f'<ul class="list-unstyled">{"".join(items)}</ul>'


def render_page_html(page_title: str, navbar_html: str, sidebar_html: str, content_html: str, site_title: str, toc_html: Optional[str] = None, edit_url: Optional[str] = None, edit_text: str = "Edit this page") -> str:
    """Render a full page: navbar on top, sidebar left, content, optional ToC right."""
    title_text = html.escape(f"{page_title} | {site_title}" if site_title else page_title)
    edit_html = (
        f'<hr /><p class="edit-link"><a href="{html.escape(edit_url)}">{html.escape(edit_text)}</a></p>'
        if edit_url
        else ""
    )
    sidebar_block = f'<aside class="sidebar">{sidebar_html}</aside>' if sidebar_html else '<aside class="sidebar"></aside>'
    toc_block = f'<aside class="rightbar"><h2>On this page</h2><div class="toc">{toc_html}</div></aside>' if toc_html else ""
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title_text}</title>
    <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
    <style>
      .layout-container {{
        display: grid;
        grid-template-columns: 260px 1fr 240px;
        column-gap: 2rem;
      }}
      .sidebar {{
        position: sticky;
        top: 0;
        height: 100vh;
        overflow: auto;
        padding: 1.25rem;
        border-right: 1px solid #e5e5e5;
      }}
      .sidebar .nav-link.active {{ font-weight: 600; background: #e7effa; border-radius: .25rem; }}
      .content {{ padding: 2rem 1rem; max-width: 900px; line-height: 1.7; }}
      .content pre {{ background: #f7f7f7; border: 1px solid #e5e5e5; border-radius: 6px; padding: .75rem 1rem; }}
      .codehilitetable td.linenos {{ color: #999; padding-right: .75rem; user-select: none; }}
      {CODE_CSS}
      .headerlink {{ margin-left: .4rem; opacity: 0; text-decoration: none; }}
      h1:hover .headerlink, h2:hover .headerlink, h3:hover .headerlink, h4:hover .headerlink {{ opacity: .6; }}
      .rightbar {{ position: sticky; top: 1rem; align-self: start; padding: 2rem 1rem; font-size: .9rem; }}
      .rightbar h2 {{ font-size: .9rem; text-transform: uppercase; color: #6c757d; }}
    </style>
  </head>
  <body>
    {navbar_html}
    <div class="layout-container">
      {sidebar_block}
      <main class="content">
        {content_html}
        {edit_html}
      </main>
      {toc_block}
    </div>
    <script src="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/js/bootstrap.bundle.min.js"></script>
  </body>
</html>
"""


# -- helpers: asset copying --
def copy_assets(docs_root: Path, output_root: Path) -> None:
    """Copy all non-markdown files, preserving structure."""
    for src in docs_root.rglob("*"):
        rel = src.relative_to(docs_root)
        if src.is_dir() or is_hidden(rel) or is_markdown_file(src):
            continue
        dst = output_root / rel
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)


# -- write all pages --
def list_markdown_files(docs_root: Path) -> List[Path]:
    md_files = [p for p in docs_root.rglob("*.md") if p.is_file() and not is_hidden(p.relative_to(docs_root))]
    md_files.sort(key=lambda p: p.relative_to(docs_root).as_posix())
    return md_files


def write_pages(docs_root: Path, output_root: Path, config: Dict[str, Any]) -> List[Path]:
    """Convert all markdown files and write HTML pages. Returns the written paths."""
    theme = config["themeConfig"]
    sidebars: Dict[str, List[str]] = theme.get("sidebar", {})
    markdown_options: Dict[str, Any] = config.get("markdown", {})

    md_files = list_markdown_files(docs_root)
    texts: Dict[Path, str] = {p: p.read_text(encoding="utf-8") for p in md_files}

    # sidebar labels by route, e.g. '/course/1' -> first heading of course/1.md
    title_map: Dict[str, str] = {}
    for md_path, text in texts.items():
        route = "/" + md_path.relative_to(docs_root).with_suffix("").as_posix()
        title_map[route] = page_title(text, md_path.stem)

    written: List[Path] = []
    for md_path in md_files:
        rel_md = md_path.relative_to(docs_root)
        out_html_path = relative_output_html(docs_root, output_root, md_path)
        out_dir = out_html_path.parent
        out_dir.mkdir(parents=True, exist_ok=True)

        navbar_html = render_navbar_html(config, current_out_dir=out_dir, output_root=output_root)

        prefix = section_prefix(rel_md)
        sidebar_html = ""
        if prefix is not None and sidebars.get(prefix):
            sidebar_html = render_sidebar_html(
                sidebars[prefix],
                prefix,
                current_out_dir=out_dir,
                output_root=output_root,
                current_out_html=out_html_path,
                title_map=title_map,
            )

        text = texts[md_path]
        content_html, toc_html = convert_markdown_with_toc(text, markdown_options)
        # Only show right ToC if there are at least 2 entries
        has_toc = toc_html.count("<a ") >= 2

        full_html = render_page_html(
            page_title=page_title(text, md_path.stem),
            navbar_html=navbar_html,
            sidebar_html=sidebar_html,
            content_html=content_html,
            site_title=config.get("title", ""),
            toc_html=(toc_html if has_toc else None),
            edit_url=edit_link_url(theme, rel_md),
            edit_text=theme.get("editLinkText") or "Edit this page",
        )
        out_html_path.write_text(full_html, encoding="utf-8")
        log.debug("wrote %s", out_html_path)
        written.append(out_html_path)

    log.info("rendered %d pages into %s", len(written), output_root)
    return written


# -- CLI --
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a local HTML preview of the course docs.")
    parser.add_argument(
        "--docs",
        type=Path,
        default=site_config.DOCS_ROOT,
        help="Path to the docs folder (default: ./docs)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("./site"),
        help="Output folder for generated site",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less log output")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    site_config.configure_logging(args.verbose, args.quiet)
    site_config.use_system_collation()

    docs_root: Path = args.docs.expanduser().resolve()
    output_root: Path = args.output.resolve()

    if not docs_root.exists() or not docs_root.is_dir():
        raise SystemExit(f"Docs directory not found: {docs_root}")
    if output_root == docs_root or docs_root in output_root.parents:
        raise SystemExit(f"Output directory must be outside the docs folder: {output_root}")

    # prepare output directory (clean create)
    if output_root.exists():
        shutil.rmtree(output_root)
    output_root.mkdir(parents=True, exist_ok=True)

    config = site_config.build_site_config(docs_root)

    # copy non-md assets first
    copy_assets(docs_root, output_root)
    write_pages(docs_root, output_root, config)

    print(f"Site generated at: {output_root}")


if __name__ == "__main__":
    main()
