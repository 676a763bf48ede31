from pathlib import Path

import filetype

# Fallback types for files without a known magic signature
TEXT_TYPE: str = "text/plain; charset=utf-8"
BINARY_TYPE: str = "application/octet-stream"


class MPEGTransportStream(filetype.Type):
	"""MPEG-TS video, a sequence of 188 bytes packets that all start with
	the 0x47 sync byte."""

	MIME = "video/mp2t"
	EXTENSION = "ts"
	PACKET = 188
	SYNC = 0x47

	def __init__(self) -> None:
		super().__init__(mime=self.MIME, extension=self.EXTENSION)

	def match(self, buf: bytes) -> bool:
		# At least two packets, and up to four of them, must be in sync
		count = min(4, len(buf) // self.PACKET)
		return count >= 2 and all(
			buf[i * self.PACKET] == self.SYNC for i in range(count)
		)


filetype.add_type(MPEGTransportStream())


def isText(head: bytes) -> bool:
	"""Tells if the given head of a file looks like UTF-8 text."""
	if b"\x00" in head:
		return False
	try:
		head.decode("utf-8")
		return True
	except UnicodeDecodeError as e:
		# The head may cut a multi-byte sequence in half
		return e.start >= len(head) - 3 and e.reason == "unexpected end of data"


def readHead(path: Path | str, size: int = 8192) -> bytes:
	"""Reads the first `size` bytes of the file, raising `OSError` when the
	file cannot be read."""
	with open(path, "rb") as f:
		return f.read(size)


def contentType(path: Path | str) -> str:
	"""Detects the MIME type of the file at `path` from its content (not its
	extension). Raises `OSError` when the file can't be read."""
	head = readHead(path)
	# Empty files have no signature to match
	kind = filetype.guess(head) if head else None
	if kind is not None:
		return str(kind.mime)
	else:
		return TEXT_TYPE if isText(head) else BINARY_TYPE


# EOF
