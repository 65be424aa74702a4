from typing import NamedTuple

from ..utils.io import DEFAULT_ENCODING, asBytes
from .status import HTTP_STATUS

# -----------------------------------------------------------------------------
#
# DATA MODEL
#
# -----------------------------------------------------------------------------


class HTTPRequestLine(NamedTuple):
	"""Represents a request line, the only part of a request we read."""

	method: str
	target: str
	protocol: str

	@property
	def path(self) -> str:
		"""The target without its query string."""
		return self.target.split("?", 1)[0]

	@property
	def query(self) -> str:
		p = self.target.split("?", 1)
		return p[1] if len(p) > 1 else ""


# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class HTTPRequestError(Exception):
	"""Raised while processing a request. When `status` is set, the error
	is reported to the client as a response with that status."""

	STATUS: int | None = None

	def __init__(self, message: str, status: int | None = None):
		super().__init__(message)
		self.message: str = message
		self.status: int | None = self.STATUS if status is None else status


class MalformedRequest(HTTPRequestError):
	"""The request line is missing or incomplete, the connection is
	dropped without a response."""


class MethodNotAllowed(HTTPRequestError):
	STATUS = 405


class Forbidden(HTTPRequestError):
	"""The path is outside of the root, or its extension is not allowed."""

	STATUS = 403


class NotFound(HTTPRequestError):
	STATUS = 404


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


ERROR_PAGE: str = "<html><body><h1>Error {status}: {message}</h1></body></html>"


class HTTPResponse:
	"""An HTTP response, always fully buffered and always closing the
	connection."""

	__slots__ = ["protocol", "status", "message", "headers", "body"]

	@staticmethod
	def Create(
		content: str | bytes | None = None,
		contentType: str = "application/octet-stream",
		status: int = 200,
		message: str | None = None,
		protocol: str = "HTTP/1.1",
	) -> "HTTPResponse":
		"""Factory method to create HTTP response objects."""
		body: bytes = asBytes(content)
		return HTTPResponse(
			protocol=protocol,
			status=status,
			message=message or HTTP_STATUS.get(status, "Unknown status"),
			headers={
				"Content-Type": contentType,
				"Content-Length": str(len(body)),
				"Connection": "close",
			},
			body=body,
		)

	@staticmethod
	def Error(status: int, message: str | None = None) -> "HTTPResponse":
		"""Creates the HTML error page response for the given status."""
		text: str = message or HTTP_STATUS.get(status, "Unknown status")
		return HTTPResponse.Create(
			ERROR_PAGE.format(status=status, message=text).encode(DEFAULT_ENCODING),
			contentType="text/html",
			status=status,
			message=text,
		)

	def __init__(
		self,
		protocol: str,
		status: int,
		message: str,
		headers: dict[str, str],
		body: bytes,
	):
		self.protocol: str = protocol
		self.status: int = status
		self.message: str = message
		self.headers: dict[str, str] = headers
		self.body: bytes = body

	def getHeader(self, name: str) -> str | None:
		return self.headers.get(name)

	def head(self) -> bytes:
		"""Serializes the head as a payload."""
		lines: list[str] = [f"{k}: {v}" for k, v in self.headers.items()]
		lines.insert(0, f"{self.protocol} {self.status} {self.message}")
		lines.append("")
		lines.append("")
		return "\r\n".join(lines).encode("ascii")

	def payload(self) -> bytes:
		"""The complete message, head and body, to be written at once."""
		return self.head() + self.body

	def __str__(self) -> str:
		return f"Response({self.protocol} {self.status} {self.message} {self.headers} {len(self.body)}b)"


# EOF
