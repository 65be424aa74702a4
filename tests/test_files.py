import asyncio
import os
from pathlib import Path

import pytest

from tinyserve.files import (
	ALLOWED_EXTENSIONS,
	MIME_TYPES,
	FileService,
	contentType,
	extension,
)
from tinyserve.http.model import Forbidden, HTTPRequestLine, MethodNotAllowed, NotFound

from conftest import INDEX, STYLE


def get(service: FileService, target: str, method: str = "GET"):
	return asyncio.run(service.respond(HTTPRequestLine(method, target, "HTTP/1.1")))


def test_tables_are_read_only():
	assert ALLOWED_EXTENSIONS == {".html", ".css", ".js"}
	with pytest.raises(TypeError):
		MIME_TYPES[".txt"] = "text/plain"  # type: ignore[index]


def test_content_type():
	assert contentType("/a/index.html") == "text/html"
	assert contentType("style.css") == "text/css"
	assert contentType("app.js") == "application/javascript"
	assert contentType("data.bin") == "application/octet-stream"


def test_extension():
	assert extension("/srv/web/app.min.js") == ".js"
	assert extension("/srv/web/.html") == ".html"
	assert extension("/srv/web.d/README") == ""
	assert extension("/srv/web/index.") == ""


def test_resolve_index(site: Path):
	service = FileService(site)
	index = os.path.realpath(site / "index.html")
	assert service.resolvePath("/") == index
	assert service.resolvePath("") == index
	assert service.resolvePath("///?x=1") == index
	assert service.resolvePath("/css/../index.html") == index


def test_resolve_forbidden(site: Path):
	service = FileService(site)
	for target in (
		"/../../etc/passwd",
		"/../secret.html",
		"/secrets.txt",
		"/css",
		"/INDEX.HTML",
	):
		with pytest.raises(Forbidden):
			service.resolvePath(target)


def test_resolve_symlink_outside(site: Path):
	(site / "link.html").symlink_to(site.parent / "secret.html")
	with pytest.raises(Forbidden):
		FileService(site).resolvePath("/link.html")


def test_symlinked_root(site: Path, tmp_path: Path):
	alias = tmp_path / "alias"
	alias.symlink_to(site)
	res = get(FileService(alias), "/")
	assert res.status == 200
	assert res.body == INDEX


def test_serves_files(site: Path):
	service = FileService(site)
	res = get(service, "/")
	assert res.status == 200
	assert res.body == INDEX
	assert res.getHeader("Content-Type") == "text/html"
	res = get(service, "/css/style.css?v=3")
	assert res.body == STYLE
	assert res.getHeader("Content-Type") == "text/css"
	assert res.getHeader("Content-Length") == str(len(STYLE))


def test_error_responses(site: Path):
	service = FileService(site)
	assert get(service, "/", method="POST").status == 405
	assert get(service, "/../secret.html", method="DELETE").status == 405
	assert get(service, "/secrets.txt").status == 403
	assert get(service, "/../../etc/passwd").status == 403
	res = get(service, "/missing.js")
	assert res.status == 404
	assert res.body == b"<html><body><h1>Error 404: Not Found</h1></body></html>"


def test_trailing_slash_is_forbidden(site: Path):
	service = FileService(site)
	for target in ("/index.html/", "/css/style.css/", "/css/"):
		with pytest.raises(Forbidden):
			service.resolvePath(target)
	assert get(service, "/index.html/").status == 403


def test_root_prefix_is_a_string_prefix(site: Path, tmp_path: Path):
	# A sibling directory sharing the root as a string prefix is reachable
	sibling = tmp_path / "webrootevil"
	sibling.mkdir()
	(sibling / "x.html").write_bytes(b"<p>sibling</p>")
	res = get(FileService(site), "/../webrootevil/x.html")
	assert res.status == 200
	assert res.body == b"<p>sibling</p>"


def test_dotfile_extension(site: Path):
	(site / ".html").write_bytes(b"<p>dot</p>")
	res = get(FileService(site), "/.html")
	assert res.status == 200
	assert res.getHeader("Content-Type") == "text/html"


def test_directory_with_allowed_extension(site: Path):
	(site / "pages.html").mkdir()
	assert get(FileService(site), "/pages.html").status == 404


def test_read_raises(site: Path):
	service = FileService(site)
	with pytest.raises(MethodNotAllowed):
		asyncio.run(service.read(HTTPRequestLine("get", "/", "HTTP/1.1")))
	with pytest.raises(NotFound):
		asyncio.run(service.read(HTTPRequestLine("GET", "/nope.html", "HTTP/1.1")))


# EOF
