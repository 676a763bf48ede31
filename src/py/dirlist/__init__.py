from .http.model import HTTPRequest, HTTPRequestError, HTTPResponse  # NOQA: F401
from .decorators import on  # NOQA: F401
from .listing import Entry, Listing, SortMode, render, scan, sort  # NOQA: F401
from .model import Application, Service  # NOQA: F401
from .server import run  # NOQA: F401


# EOF
