from typing import Callable, TypeVar

T = TypeVar("T")

# Attribute holding the `(method, path)` pairs a handler answers
ROUTES: str = "_dirlist_routes"


def routes(handler: object) -> list[tuple[str, str]]:
	return list(getattr(handler, ROUTES, ()))


def on(**methods: str | tuple[str, ...]) -> Callable[[T], T]:
	"""Marks a service method as the handler of the given HTTP methods (joined
	with `_` as in `GET_HEAD`) on the given paths. A path ending with `/`
	also covers every path below it:

	>    @on(GET_HEAD="/content/")
	>    def content(self, request):
	>        return request.respond(...)
	"""

	def decorator(handler: T) -> T:
		res = routes(handler)
		for names, paths in methods.items():
			for method in names.upper().split("_"):
				res.extend(
					(method, _) for _ in ((paths,) if isinstance(paths, str) else paths)
				)
		setattr(handler, ROUTES, res)
		return handler

	return decorator


# EOF
