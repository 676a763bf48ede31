import sys
import time
from contextvars import ContextVar
from enum import Enum
from os import getenv
from typing import Any, NamedTuple, TextIO, TypeAlias

from .term import Term

__doc__ = """
Structured logging to stderr. Every logging function takes a message and
ad-hoc keyword context that is rendered as `Key=value` pairs, so that log
lines stay greppable:

>   [dirlist] Scanned directory Root=/srv/media Entries=12
"""

TValue: TypeAlias = bool | int | float | str | None

LogOrigin: ContextVar[str] = ContextVar("LogOrigin", default="dirlist")


class LogLevel(Enum):
	Debug = 0
	Info = 10
	Warning = 30
	Error = 40
	Exception = 50

	@property
	def color(self) -> str:
		return Term.Color({0: 31, 10: 75, 30: 202, 40: 160, 50: 124}[self.value])


def parseLevel(name: str | None, default: LogLevel = LogLevel.Info) -> LogLevel:
	"""Parses a level name like `debug` or `WARNING`, falling back to
	`default` when unknown."""
	wanted = (name or "").strip().lower()
	return next((_ for _ in LogLevel if _.name.lower() == wanted), default)


# The minimum level that is actually written
LEVEL: LogLevel = parseLevel(getenv("DIRLIST_LOG_LEVEL"))


class LogEntry(NamedTuple):
	"""A log line. Entries with a `name` are events, the others are
	messages."""

	origin: str
	time: float
	level: LogLevel = LogLevel.Info
	message: str | None = None
	name: str | None = None
	value: Any = None
	context: dict[str, TValue] | None = None
	icon: str | None = None

	def format(self) -> str:
		head = f"{self.level.color}{Term.BOLD}[{self.origin}]"
		if self.name is not None:
			body = f" {self.name}{Term.RESET} {formatData(self.value)}"
		else:
			icon = f" {self.icon}" if self.icon else ""
			body = f"{Term.RESET}{icon} {self.message}"
		return f"{head}{body} {formatData(self.context)}{Term.RESET}\n"


def formatData(value: Any) -> str:
	match value:
		case None | () | [] | {}:
			return "◌"
		case dict():
			return " ".join(
				f"{Term.BOLD}{k}{Term.RESET}={formatData(v)}" for k, v in value.items()
			)
		case list() | tuple():
			return ",".join(formatData(v) for v in value)
		case str():
			return repr(value) if " " in value else value
		case bool():
			return "✓" if value else "✗"
		case float():
			return f"{value:0.2f}"
		case _:
			return str(value)


def logged(level: LogLevel) -> bool:
	"""Tells if entries of the given level are written, which guards
	against building expensive context for nothing."""
	return level.value >= LEVEL.value


def send(entry: LogEntry, stream: TextIO | None = None) -> LogEntry:
	if logged(entry.level):
		out = stream or sys.stderr
		out.write(entry.format())
		out.flush()
	return entry


def entry(
	*,
	context: dict[str, TValue],
	origin: str | None = None,
	level: LogLevel = LogLevel.Info,
	**fields: Any,
) -> LogEntry:
	return LogEntry(
		origin=origin or LogOrigin.get(),
		time=time.time(),
		level=level,
		context=context,
		**fields,
	)


def debug(message: str, *, icon: str | None = None, **context: TValue) -> LogEntry:
	return send(entry(message=message, level=LogLevel.Debug, icon=icon, context=context))


def info(message: str, *, icon: str | None = None, **context: TValue) -> LogEntry:
	return send(entry(message=message, icon=icon, context=context))


def warning(message: str, *, icon: str | None = None, **context: TValue) -> LogEntry:
	return send(entry(message=message, level=LogLevel.Warning, icon=icon, context=context))


def error(message: str, code: int | str | None, **context: TValue) -> LogEntry:
	"""Logs a managed error, `code` is a short identifier like `BINDERR`."""
	if code is not None:
		context = {"Code": code} | context
	return send(entry(message=message, value=code, level=LogLevel.Error, context=context))


def event(event: str, value: Any = None, **context: TValue) -> LogEntry:
	return send(entry(name=event, value=value, context=context))


def exception(exception: BaseException, message: str | None = None) -> BaseException:
	"""Writes the exception and its traceback frames to stderr, returning the
	exception so that it can be used as `raise exception(e)`."""
	label = f"[{type(exception).__name__}] {exception}"
	lines = [f"!!! EXCP {message}: {label}" if message else f"!!! EXCP {label}"]
	tb = exception.__traceback__
	while tb:
		code = tb.tb_frame.f_code
		lines.append(f"... in {code.co_name:15s} at {tb.tb_lineno:4d} in {code.co_filename}")
		tb = tb.tb_next
	try:
		sys.stderr.write("\n".join(lines) + "\n")
		sys.stderr.flush()
	except OSError:  # nosec: B110
		# Called from exception handlers, where stderr may be gone
		pass
	return exception


# EOF
