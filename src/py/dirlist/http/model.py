from typing import NamedTuple

__doc__ = """
Requests and responses as handlers see them. Requests arrive fully parsed,
with their query already decoded, and create the responses to themselves.
Responses are built whole and written as a head followed by the payload.
"""

ENCODING: str = "utf8"

HTTP_STATUS: dict[int, str] = {
	200: "OK",
	400: "Bad Request",
	404: "Not Found",
	500: "Internal Server Error",
}


def headername(name: str) -> str:
	"""Normalizes `content-length` as `Content-Length`."""
	return "-".join(_.capitalize() for _ in name.strip().split("-"))


class HTTPRequestError(Exception):
	"""Raised by handlers to answer with an error status instead of a
	regular response."""

	def __init__(self, message: str, status: int = 500):
		super().__init__(message)
		self.message: str = message
		self.status: int = status


class HTTPResponse(NamedTuple):
	status: int
	headers: dict[str, str]
	payload: bytes = b""
	protocol: str = "HTTP/1.1"

	@staticmethod
	def Make(
		status: int = 200,
		content: str | bytes = b"",
		contentType: str | None = None,
		*,
		headers: dict[str, str] | None = None,
		protocol: str = "HTTP/1.1",
	) -> "HTTPResponse":
		payload = content.encode(ENCODING) if isinstance(content, str) else content
		fields: dict[str, str] = {}
		if contentType:
			fields["Content-Type"] = contentType
		fields["Content-Length"] = str(len(payload))
		fields.update(headers or {})
		return HTTPResponse(status, fields, payload, protocol)

	def header(self, name: str) -> str | None:
		return self.headers.get(headername(name))

	def head(self) -> bytes:
		"""The status line and header fields, up to the blank line."""
		lines = [
			f"{self.protocol} {self.status} {HTTP_STATUS.get(self.status, 'Unknown')}"
		]
		lines.extend(f"{k}: {v}" for k, v in self.headers.items())
		# Header values only ever hold ASCII, paths are URL-encoded
		return ("\r\n".join(lines) + "\r\n\r\n").encode("ascii")


class HTTPRequest:
	__slots__ = ["method", "path", "query", "headers", "protocol", "body"]

	def __init__(
		self,
		method: str,
		path: str,
		query: dict[str, str] | None = None,
		headers: dict[str, str] | None = None,
		protocol: str = "HTTP/1.1",
		body: bytes = b"",
	):
		self.method: str = method
		self.path: str = path
		self.query: dict[str, str] = query or {}
		self.headers: dict[str, str] = headers or {}
		self.protocol: str = protocol
		self.body: bytes = body

	@property
	def keepAlive(self) -> bool:
		"""Tells if the connection stays open once this request is answered."""
		return (
			self.protocol != "HTTP/1.0"
			and (self.header("Connection") or "").lower() != "close"
		)

	def header(self, name: str) -> str | None:
		return self.headers.get(headername(name))

	def param(self, name: str, default: str | None = None) -> str | None:
		return self.query.get(name, default)

	def respond(
		self,
		content: str | bytes = b"",
		contentType: str | None = None,
		status: int = 200,
	) -> HTTPResponse:
		return HTTPResponse.Make(status, content, contentType, protocol=self.protocol)

	def respondHTML(self, html: str) -> HTTPResponse:
		return self.respond(html, "text/html; charset=utf-8")

	def error(self, status: int, message: str | None = None) -> HTTPResponse:
		return self.respond(
			HTTP_STATUS.get(status, "Error") if message is None else message,
			"text/plain; charset=utf-8",
			status,
		)

	def __repr__(self) -> str:
		return f"(HTTPRequest {self.method} {self.path} {self.query})"


# EOF
