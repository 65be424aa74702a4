import asyncio
import os
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .http.model import (
	Forbidden,
	HTTPRequestError,
	HTTPRequestLine,
	HTTPResponse,
	MethodNotAllowed,
	NotFound,
)
from .utils.logging import debug, logged

ALLOWED_EXTENSIONS: frozenset[str] = frozenset((".html", ".css", ".js"))

MIME_TYPES: Mapping[str, str] = MappingProxyType(
	{
		".html": "text/html",
		".css": "text/css",
		".js": "application/javascript",
	}
)

DEFAULT_MIME_TYPE: str = "application/octet-stream"

INDEX: str = "index.html"


def extension(path: str) -> str:
	"""Returns the extension of the last path segment, dot included. Unlike
	`os.path.splitext`, a leading dot starts an extension (`.html` is an
	HTML file), and a trailing dot or slash yields no extension."""
	name: str = path.rsplit("/", 1)[-1]
	i: int = name.rfind(".")
	return "" if i == -1 or i == len(name) - 1 else name[i:]


def contentType(path: str) -> str:
	return MIME_TYPES.get(extension(path), DEFAULT_MIME_TYPE)


class FileService:
	"""Serves the allowed files found under `root`, answering only
	`GET` requests."""

	def __init__(self, root: str | Path):
		# The root is canonicalized once, so that symlinked roots compare
		# against canonicalized request paths.
		self.root: str = os.path.realpath(root)

	def resolvePath(self, target: str) -> str:
		"""Resolves the request target to an absolute, canonical path.
		Raises `Forbidden` when the path escapes the root or has an
		extension that is not allowed."""
		rel: str = target.split("?", 1)[0].lstrip("/")
		# A trailing slash names a directory, which has no extension
		if rel.endswith("/"):
			raise Forbidden(f"Extension not allowed: {target}")
		path: str = os.path.realpath(os.path.join(self.root, rel or INDEX))
		# NOTE: This is a string prefix check, `/srv/webevil` passes for
		# a root of `/srv/web`.
		if not path.startswith(self.root):
			raise Forbidden(f"Path outside of root: {target}")
		elif extension(path) not in ALLOWED_EXTENSIONS:
			raise Forbidden(f"Extension not allowed: {target}")
		return path

	async def read(self, request: HTTPRequestLine) -> HTTPResponse:
		"""Returns the response for the file targeted by the request,
		raising an `HTTPRequestError` when it can't be served."""
		if request.method != "GET":
			raise MethodNotAllowed(f"Method not allowed: {request.method}")
		path: str = self.resolvePath(request.target)
		if not os.path.isfile(path):
			raise NotFound(f"File not found: {request.target}")
		body: bytes = await asyncio.get_running_loop().run_in_executor(
			None, Path(path).read_bytes
		)
		logged(debug) and debug("Serving file", Path=path, Size=len(body))
		return HTTPResponse.Create(body, contentType=contentType(path))

	async def respond(self, request: HTTPRequestLine) -> HTTPResponse:
		"""Like `read`, but converts request errors that have a status to
		their HTML error response. Other errors are propagated."""
		try:
			return await self.read(request)
		except HTTPRequestError as e:
			if e.status is None:
				raise
			logged(debug) and debug(
				"Request rejected", Status=e.status, Reason=e.message
			)
			return HTTPResponse.Error(e.status)


# EOF
