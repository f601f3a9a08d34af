#!/usr/bin/env python3
"""
Site configuration for the MITRE InSpec Advanced Developer Course docs.

Features:
- Declares site metadata, navbar items, edit-link settings and markdown options
- Derives per-section sidebars by scanning docs/<section> for .md files
- Writes the configuration as JSON for the static-site build tool

Usage:
  python site_config.py --docs ./docs --output ./docs/.vuepress/config.json
"""

from __future__ import annotations

import argparse
import copy
import functools
import json
import locale
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


log = logging.getLogger(__name__)


# -- site metadata --
DOCS_ROOT = Path("docs")

SITE_TITLE = "MITRE InSpec Advanced Developer Course"
SITE_DESCRIPTION = (
    "The MITRE InSpec Team's Advanced course for InSpec Profile and Resource Development"
)

REPO = "mitre/inspec-advanced-developer"
REPO_LABEL = "Contribute!"

# "Edit this page" links
DOCS_DIR = "docs"
DOCS_BRANCH = "master"
EDIT_LINKS = True
EDIT_LINK_TEXT = "Help us improve this page!"

SIDEBAR_SECTIONS = ("course", "installation", "resources")
SIDEBAR_DEPTH = 4
NAVBAR = "auto"

NAV: List[Dict[str, Any]] = [
    {"text": "Course", "link": "/course/1"},
    {
        "text": "Install",
        "items": [
            {"text": "Linux", "link": "/installation/LinuxInstall.md"},
            {"text": "Mac", "link": "/installation/MacInstall.md"},
            {"text": "Windows", "link": "/installation/WindowsInstall.md"},
            {"text": "Vagrant Install", "link": "/installation/vagrant_install.md"},
        ],
    },
    {"text": "Resources", "link": "/resources/"},
    {"text": "Contact", "link": "/contact.md"},
]

MARKDOWN_OPTIONS: Dict[str, Any] = {
    "lineNumbers": True,
    "anchor": {"permalink": True},
    # headings collected into the table of contents
    "toc": {"includeLevel": [1, 2, 3, 4]},
}

README_MARKER = "README"
MARKDOWN_SUFFIX = ".md"

_INTEGER_RE = re.compile(r"-?\d+")


# -- helpers: sidebar ordering --
def _as_int(name: str) -> Optional[int]:
    """Return name as an int when it is entirely an integer, else None."""
    if _INTEGER_RE.fullmatch(name):
        return int(name)
    return None


def compare_entries(a: str, b: str) -> int:
    """Order two sidebar identifiers.

    Numeric when both are plain integers ("2" < "10"), otherwise a locale
    string comparison that ignores case first and uses it only as a tiebreak.
    """
    num_a, num_b = _as_int(a), _as_int(b)
    if num_a is not None and num_b is not None:
        return (num_a > num_b) - (num_a < num_b)
    folded = locale.strcoll(a.casefold(), b.casefold())
    if folded:
        return folded
    return locale.strcoll(a, b)


def is_excluded(identifier: str) -> bool:
    return README_MARKER in identifier


# -- sidebar builder --
def sidebar_children(sub_dir: Union[str, Path], docs_root: Union[str, Path] = DOCS_ROOT) -> List[str]:
    """Return the sorted page identifiers for one docs section.

    Identifiers are paths relative to the section folder, '/'-separated and
    without the .md suffix. README pages are the section landing pages and are
    left out. A missing or empty section yields an empty list.
    """
    section_root = Path(docs_root) / sub_dir
    if not section_root.is_dir():
        log.warning("sidebar section not found, using empty sidebar: %s", section_root)
        return []

    files: List[str] = []
    for md_path in section_root.rglob("*"):
        if md_path.suffix != MARKDOWN_SUFFIX or not md_path.is_file():
            continue
        rel = md_path.relative_to(section_root).with_suffix("")
        files.append(rel.as_posix())

    files = [f for f in files if not is_excluded(f)]
    log.debug("sidebar data for %s: %s", section_root, files)

    # compare_entries is not transitive across numeric/named mixes; start from a
    # fixed order so the result doesn't depend on directory listing order
    files.sort()
    files.sort(key=functools.cmp_to_key(compare_entries))
    return files


def build_sidebars(docs_root: Union[str, Path] = DOCS_ROOT) -> Dict[str, List[str]]:
    """Map each '/section/' route prefix to its sidebar list."""
    return {f"/{section}/": sidebar_children(section, docs_root) for section in SIDEBAR_SECTIONS}


# -- configuration object --
def build_site_config(docs_root: Union[str, Path] = DOCS_ROOT) -> Dict[str, Any]:
    """Assemble the full site configuration from the current docs tree."""
    return {
        "title": SITE_TITLE,
        "description": SITE_DESCRIPTION,
        "themeConfig": {
            "repo": REPO,
            "repoLabel": REPO_LABEL,
            "docsDir": DOCS_DIR,
            "docsBranch": DOCS_BRANCH,
            "editLinks": EDIT_LINKS,
            "editLinkText": EDIT_LINK_TEXT,
            "sidebar": build_sidebars(docs_root),
            "sidebarDepth": SIDEBAR_DEPTH,
            "navbar": NAVBAR,
            "nav": copy.deepcopy(NAV),
        },
        "markdown": copy.deepcopy(MARKDOWN_OPTIONS),
    }


def write_site_config(config: Dict[str, Any], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    return output_path


# -- CLI --
def configure_logging(verbose: int = 0, quiet: int = 0) -> None:
    """Set the root log level from -v/-q counts around INFO."""
    level = logging.INFO - (10 * verbose) + (10 * quiet)
    level = max(logging.DEBUG, min(logging.ERROR, level))
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        logging.basicConfig(level=level)


def use_system_collation() -> None:
    """Sort sidebar names with the user's locale rather than the C locale."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        log.warning("falling back to C collation: %s", exc)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write the docs site configuration as JSON.")
    parser.add_argument(
        "--docs",
        type=Path,
        default=DOCS_ROOT,
        help="Documentation root containing the section folders (default: ./docs)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON here instead of printing it to stdout",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less log output")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    use_system_collation()

    docs_root: Path = args.docs.expanduser().resolve()
    if not docs_root.is_dir():
        raise SystemExit(f"Docs directory not found: {docs_root}")

    config = build_site_config(docs_root)
    if args.output is None:
        print(json.dumps(config, indent=2))
        return

    out = write_site_config(config, args.output.resolve())
    print(f"Site config written to: {out}")


if __name__ == "__main__":
    main()
