"""
Static File Server Example

Serves the `webroot` directory next to this script.

Usage:
    python fileserver.py

Test with:
    curl -i http://localhost:8080/            # index.html
    curl -i http://localhost:8080/style.css
    curl -i http://localhost:8080/notes.txt   # 403, extension not allowed
    curl -i -X POST http://localhost:8080/    # 405
"""

from pathlib import Path

from tinyserve import run
from tinyserve.utils.logging import info

if __name__ == "__main__":
	info("Starting static file server example")
	run(Path(__file__).parent / "webroot", port=8080)

# EOF
