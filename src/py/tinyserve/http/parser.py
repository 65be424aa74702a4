from ..utils.io import DEFAULT_ENCODING, LineParser
from .model import HTTPRequestLine, MalformedRequest


def parseRequestLine(line: bytes | None) -> HTTPRequestLine:
	"""Parses `<METHOD> <TARGET> <PROTOCOL>`, separated by single spaces.
	Anything after the third token is ignored. Raises `MalformedRequest`
	when the line is missing, blank, or has fewer than three tokens."""
	if line is None:
		raise MalformedRequest("No request line")
	ln: str = line.decode(DEFAULT_ENCODING, errors="replace")
	if not ln.strip():
		raise MalformedRequest("Empty request line")
	parts: list[str] = ln.split(" ")
	if len(parts) < 3:
		raise MalformedRequest(f"Incomplete request line: {ln!r}")
	return HTTPRequestLine(parts[0], parts[1], parts[2])


class RequestLineParser:
	"""Incrementally parses the request line out of the chunks read from
	a client, the rest of the request is never looked at."""

	__slots__ = ["line", "value"]

	def __init__(self) -> None:
		self.line: LineParser = LineParser()
		self.value: HTTPRequestLine | None = None

	def feed(self, chunk: bytes) -> HTTPRequestLine | None:
		"""Returns the request line once it is complete, `None` if more
		data is needed."""
		if self.value is None:
			line, _ = self.line.feed(chunk)
			if line is not None:
				self.value = parseRequestLine(line)
		return self.value

	def flush(self) -> HTTPRequestLine:
		"""Called when the client stopped sending, parses whatever was
		received as the request line."""
		if self.value is None:
			self.value = parseRequestLine(self.line.flush())
		return self.value

	def __str__(self) -> str:
		return f"RequestLineParser({self.value})"


# EOF
