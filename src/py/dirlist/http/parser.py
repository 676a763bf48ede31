import os
from typing import Iterator
from urllib.parse import unquote_to_bytes

from .model import HTTPRequest, headername

# Requests with a longer head (request line and header fields) are rejected
MAX_HEAD: int = 64 * 1_024
MAX_BODY: int = 1_024 * 1_024

EOL: bytes = b"\r\n"
END_OF_HEAD: bytes = b"\r\n\r\n"


class HTTPParserError(ValueError):
	"""The client sent something that isn't an HTTP/1.x request."""


class HTTPParser:
	"""Incrementally parses the requests sent on one connection. Chunks are
	fed as they're received and requests are yielded as soon as they are
	complete, several per chunk when the client pipelines them. Raises
	`HTTPParserError` on malformed or oversized requests, after which the
	parser must not be fed again."""

	def __init__(self, maxHead: int = MAX_HEAD, maxBody: int = MAX_BODY) -> None:
		self.maxHead: int = maxHead
		self.maxBody: int = maxBody
		self.buffer: bytearray = bytearray()
		# The request whose body is being received, if any
		self.pending: HTTPRequest | None = None
		self.expected: int = 0

	def feed(self, chunk: bytes) -> Iterator[HTTPRequest]:
		self.buffer += chunk
		while True:
			if self.pending is None:
				# Empty lines before a request line are ignored (RFC 9112 §2.2)
				while self.buffer.startswith(EOL):
					del self.buffer[: len(EOL)]
				end = self.buffer.find(END_OF_HEAD, 0, self.maxHead + len(END_OF_HEAD))
				if end == -1:
					if len(self.buffer) > self.maxHead:
						raise HTTPParserError(f"Request head exceeds {self.maxHead} bytes")
					return
				head = self.buffer[:end].decode("latin-1")
				del self.buffer[: end + len(END_OF_HEAD)]
				self.pending, self.expected = self.parseHead(head)
			if len(self.buffer) < self.expected:
				return
			request, self.pending = self.pending, None
			request.body = bytes(self.buffer[: self.expected])
			del self.buffer[: self.expected]
			yield request

	def parseHead(self, head: str) -> tuple[HTTPRequest, int]:
		"""Parses the request line and header fields, returning the request
		and the length of the body that follows."""
		line, *fields = head.split("\r\n")
		parts = line.split(" ")
		if len(parts) != 3 or not all(parts) or not parts[2].startswith("HTTP/"):
			raise HTTPParserError(f"Malformed request line: {line!r}")
		method, target, protocol = parts
		headers: dict[str, str] = {}
		for field in fields:
			name, colon, value = field.partition(":")
			if not colon or not name.strip():
				raise HTTPParserError(f"Malformed header field: {field!r}")
			headers[headername(name)] = value.strip()
		length = headers.get("Content-Length", "0")
		if not (length.isascii() and length.isdigit()) or int(length) > self.maxBody:
			raise HTTPParserError(f"Unsupported Content-Length: {length!r}")
		path, _, query = target.partition("?")
		return HTTPRequest(method, path, parseQuery(query), headers, protocol), int(length)


def unquote(text: str) -> str:
	"""Decodes a form-encoded value. Bytes that aren't valid UTF-8 become
	surrogate escapes, as in file names, so that paths survive the trip."""
	return os.fsdecode(unquote_to_bytes(text.replace("+", " ")))


def parseQuery(text: str) -> dict[str, str]:
	"""Decodes an `application/x-www-form-urlencoded` query string. When a key
	is repeated, the first value wins."""
	res: dict[str, str] = {}
	for item in text.split("&"):
		if item:
			key, _, value = item.partition("=")
			res.setdefault(unquote(key), unquote(value))
	return res


# EOF
