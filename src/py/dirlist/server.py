import asyncio
import socket
import threading
from signal import SIGINT, SIGTERM
from typing import Awaitable, Callable, NamedTuple

from .config import LOG_REQUESTS
from .http.model import HTTP_STATUS, HTTPRequest, HTTPResponse
from .http.parser import HTTPParser, HTTPParserError
from .model import Application, Service
from .utils.logging import LogLevel, debug, error, event, exception, info, logged, warning


class ServerOptions(NamedTuple):
	# An empty host binds all the interfaces, IPv6 included when available
	host: str = ""
	port: int = 5555
	backlog: int = 1_024
	# How often the accept loop checks if it was asked to stop
	polling: float = 1.0
	readsize: int = 64 * 1_024
	keepalive: float = 60.0
	logRequests: bool = LOG_REQUESTS


OPTIONS: ServerOptions = ServerOptions()


def closing(status: int) -> bytes:
	"""A canned plain text response after which the connection is closed."""
	res = HTTPResponse.Make(
		status,
		HTTP_STATUS[status],
		"text/plain; charset=utf-8",
		headers={"Connection": "close"},
	)
	return res.head() + res.payload


BAD_REQUEST: bytes = closing(400)
SERVER_ERROR: bytes = closing(500)


class Server:
	"""Serves an application over non-blocking sockets, with one task per
	client connection."""

	def __init__(self, app: Application, options: ServerOptions = OPTIONS):
		self.app: Application = app
		self.options: ServerOptions = options
		self.isRunning: bool = True
		self.tasks: set[asyncio.Task[None]] = set()

	def stop(self) -> None:
		info("Server stopping…")
		self.isRunning = False

	@staticmethod
	def Bind(options: ServerOptions) -> socket.socket:
		"""Creates the listening socket, logging and raising `OSError` when
		the address can't be bound."""
		address = (options.host, options.port)
		try:
			if options.host:
				family = socket.getaddrinfo(
					options.host, options.port, type=socket.SOCK_STREAM
				)[0][0]
				server = socket.create_server(
					address, family=family, backlog=options.backlog
				)
			elif socket.has_dualstack_ipv6():
				server = socket.create_server(
					address,
					family=socket.AF_INET6,
					backlog=options.backlog,
					dualstack_ipv6=True,
				)
			else:
				server = socket.create_server(address, backlog=options.backlog)
		except OSError as e:
			error(
				f"Unable to bind to {options.host or '*'}:{options.port}, aborting.",
				"BINDERR",
				Reason=e.strerror or str(e),
			)
			raise
		server.setblocking(False)
		return server

	@staticmethod
	async def Respond(
		app: Application,
		request: HTTPRequest,
		write: Callable[[bytes], Awaitable[None]],
	) -> bool:
		"""Writes the application's response to the request. Returns `False`
		when the connection can't be kept open."""
		try:
			res = await app.process(request)
		except Exception as e:
			exception(e, f"Processing failed for {request.method} {request.path}")
			await write(SERVER_ERROR)
			return False
		# HEAD responses announce the payload but don't carry it
		await write(res.head() if request.method == "HEAD" else res.head() + res.payload)
		return True

	async def handle(self, client: socket.socket) -> None:
		"""Answers the requests of one connection in order, until the client
		closes it, stops keeping it alive or stays silent for too long."""
		loop = asyncio.get_running_loop()
		parser = HTTPParser()
		count: int = 0

		async def write(data: bytes) -> None:
			await loop.sock_sendall(client, data)

		try:
			keepAlive: bool = True
			while keepAlive:
				try:
					data = await asyncio.wait_for(
						loop.sock_recv(client, self.options.readsize),
						timeout=self.options.keepalive,
					)
				except asyncio.TimeoutError:
					break
				if not data:
					break
				try:
					for request in parser.feed(data):
						count += 1
						if self.options.logRequests:
							event(request.method, request.path)
						keepAlive = await self.Respond(self.app, request, write)
						keepAlive = keepAlive and request.keepAlive
						# Anything pipelined after the last request is dropped
						if not keepAlive:
							break
				except HTTPParserError as e:
					warning("Malformed request", Reason=str(e))
					await write(BAD_REQUEST)
					break
			logged(LogLevel.Debug) and debug("Connection closed", Requests=count)
		except (BrokenPipeError, ConnectionResetError):
			# The client went away early
			pass
		except Exception as e:
			exception(e)
		finally:
			client.close()

	async def serve(self, server: socket.socket) -> None:
		"""Accepts connections on the listening socket until stopped."""
		loop = asyncio.get_running_loop()
		# Signal handlers can only be set from the main thread
		if threading.current_thread() is threading.main_thread():
			loop.add_signal_handler(SIGINT, self.stop)
			loop.add_signal_handler(SIGTERM, self.stop)
		host, port = server.getsockname()[:2]
		info("Server listening", icon="🚀", Host=host or "*", Port=port)
		try:
			while self.isRunning:
				try:
					client, _ = await asyncio.wait_for(
						loop.sock_accept(server), timeout=self.options.polling
					)
				except asyncio.TimeoutError:
					continue
				except OSError as e:
					# Typically too many open files, pending clients wait in
					# the backlog meanwhile.
					warning("Could not accept connection", Reason=e.strerror or str(e))
					await asyncio.sleep(0.1)
					continue
				task = loop.create_task(self.handle(client))
				self.tasks.add(task)
				task.add_done_callback(self.tasks.discard)
		finally:
			server.close()
			for task in self.tasks:
				task.cancel()
			await asyncio.gather(*self.tasks, return_exceptions=True)


def run(
	*services: Service,
	host: str = OPTIONS.host,
	port: int = OPTIONS.port,
	logRequests: bool = OPTIONS.logRequests,
) -> None:
	"""Serves the given services until interrupted. Raises `OSError` when
	the address can't be bound."""
	options = OPTIONS._replace(host=host, port=port, logRequests=logRequests)
	server = Server(Application(*services), options)
	# Binding happens before the loop starts, so that failures surface as-is
	listener = Server.Bind(options)
	try:
		asyncio.run(server.serve(listener))
	except KeyboardInterrupt:
		event("ManualShutdown")
	event("EOK")


# EOF
