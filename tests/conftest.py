from pathlib import Path
import pytest

INDEX: bytes = b"<!DOCTYPE html>\n<html><body><h1>Hello</h1></body></html>\n"
STYLE: bytes = "body { content: \"é\"; }\n".encode("utf8")
SCRIPT: bytes = b"console.log('tinyserve');\n"


@pytest.fixture
def site(tmp_path: Path) -> Path:
	"""A web root with a few servable files, a file with a forbidden
	extension and a secret outside of the root."""
	root = tmp_path / "webroot"
	(root / "css").mkdir(parents=True)
	(root / "index.html").write_bytes(INDEX)
	(root / "css" / "style.css").write_bytes(STYLE)
	(root / "app.js").write_bytes(SCRIPT)
	(root / "secrets.txt").write_bytes(b"hunter2\n")
	(tmp_path / "secret.html").write_bytes(b"<p>secret</p>")
	return root


# EOF
