import os
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, NamedTuple
from urllib.parse import urlencode

from .utils.files import contentType
from .utils.htmpl import H
from .utils.logging import debug, warning

__doc__ = """
Builds the listing of a directory tree: files are discovered by a
depth-first walk, classified by content type, filtered, sorted and
finally rendered as the rows of an HTML table.
"""

DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
CONTENT_PATH: str = "/content/"

# -----------------------------------------------------------------------------
#
# MODEL
#
# -----------------------------------------------------------------------------


class Entry(NamedTuple):
	"""A file found by the scan."""

	name: str
	path: str
	modifiedAt: datetime


class SortMode(Enum):
	"""The order in which entries are listed."""

	# NOTE: `lexy` keeps the discovery order, it does not sort by name.
	Lexy = "lexy"
	LastMod = "lastmod"
	ByDate = "bydate"

	@staticmethod
	def Parse(value: "str | SortMode") -> "SortMode":
		"""Parses the mode, any unknown value is `Lexy`."""
		if isinstance(value, SortMode):
			return value
		for mode in SortMode:
			if mode.value == value:
				return mode
		return SortMode.Lexy


# -----------------------------------------------------------------------------
#
# SCAN
#
# -----------------------------------------------------------------------------


def walk(root: str) -> Iterator[str]:
	"""Yields the path of every non-directory below `root`, depth-first,
	with each directory's children visited in name order. A `root` that
	isn't a directory is yielded itself. Directories that can't be listed
	are skipped, symlinks to directories are never followed."""
	try:
		with os.scandir(root) as it:
			children = sorted(it, key=lambda _: _.name)
	except NotADirectoryError:
		yield root
		return
	except OSError:
		return
	for child in children:
		try:
			is_dir = child.is_dir(follow_symlinks=False)
		except OSError:
			is_dir = False
		if is_dir:
			yield from walk(child.path)
		else:
			yield child.path


def scan(
	root: str | Path,
	mimeFilter: str = "",
	*,
	classify: Callable[[str], str] = contentType,
) -> list[Entry]:
	"""Scans the tree at `root` and returns the entries for the files whose
	detected content type contains `mimeFilter` (all files when empty), in
	discovery order. Files that can't be classified are skipped with a
	warning, files that can't be stat'ed are skipped silently."""
	res: list[Entry] = []
	for path in walk(os.fspath(root)):
		try:
			mime = classify(path)
		except OSError as e:
			warning("Could not detect content type", Path=path, Error=str(e))
			continue
		if mimeFilter and mimeFilter not in mime:
			continue
		try:
			info = os.lstat(path)
		except OSError:
			continue
		res.append(
			Entry(
				name=os.path.basename(path),
				path=path,
				modifiedAt=datetime.fromtimestamp(info.st_mtime),
			)
		)
		debug("Listed file", Path=path, Type=mime)
	return res


# -----------------------------------------------------------------------------
#
# SORT
#
# -----------------------------------------------------------------------------


def sort(entries: Iterable[Entry], mode: "str | SortMode") -> list[Entry]:
	"""Returns the entries ordered according to `mode`, sorts are stable so
	that entries with the same date keep their discovery order."""
	match SortMode.Parse(mode):
		case SortMode.LastMod:
			return sorted(entries, key=lambda _: _.modifiedAt, reverse=True)
		case SortMode.ByDate:
			return sorted(entries, key=lambda _: _.modifiedAt)
		case _:
			return list(entries)


# -----------------------------------------------------------------------------
#
# RENDER
#
# -----------------------------------------------------------------------------


def displayable(text: str) -> str:
	"""Replaces the undecodable bytes of file names, held as surrogate
	escapes, so that the text can be encoded as UTF-8."""
	return text.encode(errors="surrogateescape").decode(errors="replace")


def contentURL(path: str) -> str:
	# The raw bytes are encoded, as names aren't necessarily UTF-8
	return f"{CONTENT_PATH}?{urlencode({'path': os.fsencode(path)})}"


def renderEntry(entry: Entry) -> str:
	return str(
		H.tr(
			H.td(H.a(displayable(entry.name), href=contentURL(entry.path))),
			H.td(entry.modifiedAt.strftime(DATE_FORMAT)),
		)
	)


def render(entries: Iterable[Entry]) -> str:
	"""Renders the entries as table rows, one per line."""
	return "".join(f"{renderEntry(_)}\n" for _ in entries)


# -----------------------------------------------------------------------------
#
# LISTING
#
# -----------------------------------------------------------------------------


class Listing(NamedTuple):
	"""The snapshot of a directory: built once, never updated."""

	root: str
	filter: str
	mode: SortMode
	entries: tuple[Entry, ...]
	table: str

	@staticmethod
	def Make(root: str | Path, mimeFilter: str = "", mode: "str | SortMode" = SortMode.Lexy) -> "Listing":
		entries = tuple(sort(scan(root, mimeFilter), mode))
		return Listing(
			root=os.path.abspath(root),
			filter=mimeFilter,
			mode=SortMode.Parse(mode),
			entries=entries,
			table=render(entries),
		)

	@property
	def title(self) -> str:
		return f"{self.root}, with filter: {self.filter}" if self.filter else self.root


# EOF
