from inspect import isawaitable
from typing import Any, Callable, NamedTuple

from .decorators import routes
from .http.model import HTTPRequest, HTTPRequestError, HTTPResponse
from .utils.logging import debug


class Handler(NamedTuple):
	"""A function answering one method on a path, or on the whole subtree
	below the path when it ends with `/`."""

	functor: Callable[[HTTPRequest], Any]
	method: str
	path: str

	@property
	def isSubtree(self) -> bool:
		return self.path.endswith("/")

	def matches(self, path: str) -> bool:
		return path.startswith(self.path) if self.isSubtree else path == self.path

	async def __call__(self, request: HTTPRequest) -> HTTPResponse:
		try:
			res = self.functor(request)
			return await res if isawaitable(res) else res
		except HTTPRequestError as e:
			return request.error(e.status, e.message)


class Dispatcher:
	"""Maps requests to handlers. When several paths match, the longest one
	wins, so `/content/` takes precedence over `/`."""

	def __init__(self) -> None:
		self.handlers: dict[str, list[Handler]] = {}

	def register(self, functor: Callable[[HTTPRequest], Any]) -> "Dispatcher":
		for method, path in routes(functor):
			if not path.startswith("/"):
				raise ValueError(f"Route path must start with '/': {path!r}")
			debug("Registered route", Method=method, Path=path)
			self.handlers.setdefault(method, []).append(Handler(functor, method, path))
		return self

	def match(self, method: str, path: str) -> Handler | None:
		res: Handler | None = None
		for handler in self.handlers.get(method, ()):
			if handler.matches(path) and (res is None or len(handler.path) > len(res.path)):
				res = handler
		return res


# EOF
