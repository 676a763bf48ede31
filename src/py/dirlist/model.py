from typing import Any, Callable, Iterator, Optional

from .decorators import ROUTES
from .http.model import HTTPRequest, HTTPResponse
from .routing import Dispatcher


class Service:
    """Groups the handlers (methods decorated with `@on`) that share some
    state, like the listing they serve."""

    def __init__(self) -> None:
        self.app: Optional[Application] = None

    def handlers(self) -> Iterator[Callable[[HTTPRequest], Any]]:
        # Looked up on the class, so that properties aren't evaluated
        for name in dir(type(self)):
            if hasattr(getattr(type(self), name, None), ROUTES):
                yield getattr(self, name)

    def __repr__(self) -> str:
        return f"(Service {type(self).__name__}{' :mounted' if self.app else ''})"


class Application:
    def __init__(self, *services: Service) -> None:
        self.dispatcher: Dispatcher = Dispatcher()
        self.services: list[Service] = []
        for service in services:
            self.mount(service)

    def mount(self, service: Service) -> Service:
        if service.app is not None:
            raise RuntimeError(f"Service is already mounted: {service}")
        for handler in service.handlers():
            self.dispatcher.register(handler)
        service.app = self
        self.services.append(service)
        return service

    async def process(self, request: HTTPRequest) -> HTTPResponse:
        """Answers the request with the matching handler, or with a 404 when
        no route matches its method and path."""
        handler = self.dispatcher.match(request.method, request.path)
        return await handler(request) if handler else request.error(404)


# EOF
