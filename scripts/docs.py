"""Build or serve the libmilight documentation."""

from __future__ import annotations

import argparse
import http.server
import shutil
import socketserver
import subprocess
import sys
from functools import partial
from pathlib import Path

DOCS_DIR = Path(__file__).resolve().parent.parent / "docs"
BUILD_DIR = DOCS_DIR / "_build" / "html"


def build() -> None:
    """Run sphinx-build into docs/_build/html."""
    if BUILD_DIR.exists():
        shutil.rmtree(BUILD_DIR)

    result = subprocess.run(
        [sys.executable, "-m", "sphinx", "-b", "html", str(DOCS_DIR), str(BUILD_DIR)],
        cwd=DOCS_DIR.parent,
    )
    if result.returncode != 0:
        print("Documentation build failed!")
        sys.exit(1)

    print(f"\nDocumentation built at: file://{BUILD_DIR}/index.html")


def serve(port: int = 8000) -> None:
    """Build the documentation and serve it on localhost."""
    build()

    handler = partial(http.server.SimpleHTTPRequestHandler, directory=str(BUILD_DIR))
    with socketserver.TCPServer(("", port), handler) as httpd:
        print(f"\nServing documentation at http://localhost:{port}/ (Ctrl+C to stop)")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nStopping server...")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Documentation tools")
    parser.add_argument("command", choices=["build", "serve"])
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    if args.command == "build":
        build()
    else:
        serve(args.port)
