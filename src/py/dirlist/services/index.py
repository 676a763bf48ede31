import asyncio
from pathlib import Path

from ..decorators import on
from ..http.model import HTTPRequest, HTTPResponse
from ..listing import Listing, displayable
from ..model import Service
from ..utils.htmpl import H, html, raw
from ..utils.logging import info

PAGE_CSS: str = """
a {
	color: hotpink;
}
table {
	min-width: 50%;
}
th {
	color: #000;
	background-color: #eee;
}
td {
	color: #ccc;
	background-color: #111;
}
"""


class IndexService(Service):
	"""Serves the index page of a listing snapshot, and the raw content of
	the files it links to."""

	def __init__(self, listing: Listing):
		super().__init__()
		self.listing: Listing = listing
		# The page never changes, so we render it once and for all
		self.page: str = self.renderPage(listing)

	@staticmethod
	def renderPage(listing: Listing) -> str:
		title = displayable(listing.title)
		return "".join(
			html(
				H.html(
					H.head(
						H.meta(charset="utf-8"),
						H.title(displayable(listing.root)),
						H.style(raw(PAGE_CSS)),
					),
					H.body(
						H.h3(title),
						H.table(
							raw("\n"),
							H.tr(H.th("Name"), H.th("Date")),
							raw("\n"),
							raw(listing.table),
						),
						style="color:white;background:black",
					),
				),
				doctype="html",
			)
		)

	# Every path that isn't under `/content/` gets the index
	@on(GET_HEAD="/")
	def index(self, request: HTTPRequest) -> HTTPResponse:
		return request.respondHTML(self.page)

	# NOTE: The path is read as given, it is not constrained to the
	# listing's root.
	@on(GET_HEAD="/content/")
	async def content(self, request: HTTPRequest) -> HTTPResponse:
		path: str = request.param("path") or ""
		info("Content request", Path=path)
		try:
			data = await asyncio.to_thread(Path(path).read_bytes) if path else None
		except (OSError, ValueError):
			# ValueError is raised for paths with NUL bytes
			data = None
		return request.respond(data) if data is not None else request.respond(status=404)


# EOF
