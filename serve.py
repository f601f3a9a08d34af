#!/usr/bin/env python3
"""
Simple HTTP server to preview the generated site.
Run this after build_static_site.py so links and assets resolve like on the real host.
"""

from __future__ import annotations

import argparse
import functools
import http.server
import logging
import socketserver
import webbrowser
from pathlib import Path
from typing import List, Optional

import site_config


log = logging.getLogger(__name__)


def make_handler(site_path: Path):
    return functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(site_path))


def serve_site(site_dir: Path = Path("site"), port: int = 8000, open_browser: bool = True) -> bool:
    """Serve site_dir until interrupted. Returns False when there is nothing to serve."""
    site_path = Path(site_dir)
    if not site_path.is_dir():
        log.error("site directory '%s' doesn't exist. Run build_static_site.py first.", site_path)
        return False

    with socketserver.TCPServer(("", port), make_handler(site_path)) as httpd:
        url = f"http://localhost:{port}"
        print(f"Serving {site_path} at {url}")
        print("Press Ctrl+C to stop")

        if open_browser:
            webbrowser.open(url)

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")
    return True


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the generated preview site.")
    parser.add_argument("--dir", type=Path, default=Path("site"), help="Generated site folder")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-browser", action="store_true", help="Don't open a browser tab")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less log output")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    site_config.configure_logging(args.verbose, args.quiet)
    if not serve_site(args.dir, port=args.port, open_browser=not args.no_browser):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
