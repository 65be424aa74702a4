DEFAULT_ENCODING: str = "utf8"
EOL: bytes = b"\r\n"
LF: bytes = b"\n"
CR: int = 0x0D


def asBytes(value: str | bytes | None) -> bytes:
	if isinstance(value, bytes):
		return value
	elif isinstance(value, str):
		return bytes(value, DEFAULT_ENCODING)
	elif value is None:
		return b""
	else:
		raise ValueError(f"Expected bytes or str, got: {value}")


class LineParser:
	"""Accumulates chunks until a line feed is found. Lines may end with
	either CRLF or a bare LF, the CR is not part of the returned line."""

	__slots__ = ["buffer", "line", "offset"]

	def __init__(self) -> None:
		self.buffer: bytearray = bytearray()
		self.line: bytes | None = None
		self.offset: int = 0

	def reset(self) -> "LineParser":
		self.buffer.clear()
		self.line = None
		self.offset = 0
		return self

	def flush(self) -> bytes | None:
		"""Returns the last parsed line, or whatever is pending in the
		buffer when no line feed was ever received."""
		if self.line is None and self.buffer:
			self.line = bytes(self.buffer)
			self.buffer.clear()
		return self.line

	def feed(self, chunk: bytes, start: int = 0) -> tuple[bytes | None, int]:
		"""Returns the matching line and how many bytes were read in chunk from start. When line is None,
		then the whole chunk has been processed."""
		pos = len(self.buffer)
		self.buffer += chunk[start:]
		end = self.buffer.find(LF, self.offset)
		if end == -1:
			self.offset = len(self.buffer)
			return None, len(chunk) - start
		else:
			stop = end - 1 if end and self.buffer[end - 1] == CR else end
			self.line = bytes(self.buffer[:stop])
			self.buffer.clear()
			self.offset = 0
			return self.line, (end - pos) + 1


# EOF
