import argparse
import sys

from . import config
from .listing import Listing
from .server import run
from .services.index import IndexService
from .utils.logging import info


def port(value: str) -> int:
	"""Parses a TCP port number."""
	try:
		res = int(value)
	except ValueError:
		raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
	if not 0 <= res <= 65535:
		raise argparse.ArgumentTypeError(f"port out of range: {res}")
	return res


def parser() -> argparse.ArgumentParser:
	res = argparse.ArgumentParser(
		prog="dirlist",
		description="Serves an HTML listing of the files below a directory",
		formatter_class=argparse.ArgumentDefaultsHelpFormatter,
	)
	res.add_argument(
		"-r",
		action="store",
		dest="root",
		help="Root path",
		default=config.ROOT,
	)
	res.add_argument(
		"-p",
		action="store",
		dest="port",
		type=port,
		help="Service port",
		# NOTE: argparse applies `type` to string defaults too
		default=config.PORT,
	)
	res.add_argument(
		"-l",
		action="store",
		dest="host",
		help="Listen address, all interfaces when empty",
		default=config.HOST,
	)
	res.add_argument(
		"-m",
		action="store",
		dest="mode",
		help="Sorting order: lexy, lastmod, bydate",
		default=config.MODE,
	)
	res.add_argument(
		"-f",
		action="store",
		dest="filter",
		help="Content type filter, all files when empty",
		default=config.FILTER,
	)
	return res


def main(args: list[str] | None = None) -> None:
	# Invalid flags exit with status 2
	options = parser().parse_args(args=args)
	listing = Listing.Make(options.root, options.filter, options.mode)
	info(
		"Scanned directory",
		Root=listing.root,
		Filter=listing.filter,
		Mode=listing.mode.value,
		Entries=len(listing.entries),
	)
	try:
		run(IndexService(listing), host=options.host, port=options.port)
	except OSError:
		# The bind error has already been logged
		sys.exit(1)


if __name__ == "__main__":
	main()

# EOF
