import asyncio
import os
import socket
import threading
from dataclasses import dataclass
from pathlib import Path
from signal import SIGINT, SIGTERM
from typing import Any, Callable, NamedTuple

from .config import HOST, LOG_REQUESTS, PORT, WEBROOT
from .files import FileService
from .http.model import HTTPRequestLine, HTTPResponse, MalformedRequest
from .http.parser import RequestLineParser
from .utils.limits import LimitType, unlimit
from .utils.logging import debug, event, exception, info, logged, warning


@dataclass(slots=True)
class ServerState:
	isRunning: bool = True

	def stop(self) -> None:
		info("Server stopping…")
		self.isRunning = False

	def onException(
		self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
	) -> None:
		e = context.get("exception")
		if e:
			exception(e)


class ServerOptions(NamedTuple):
	host: str = HOST
	port: int = PORT
	backlog: int = 10_000
	# This is the polling timeout for accepting new requests, it bounds how
	# long a stop takes to be noticed.
	polling: float = 1.0
	readsize: int = 4_096
	logRequests: bool = LOG_REQUESTS
	condition: Callable[[], bool] | None = None
	stopSignals: bool = True


OPTIONS: ServerOptions = ServerOptions()


class AIOSocketServer:
	"""AsyncIO backend using sockets directly."""

	@classmethod
	async def ReadRequest(
		cls,
		client: socket.socket,
		*,
		loop: asyncio.AbstractEventLoop,
		options: ServerOptions,
	) -> HTTPRequestLine:
		"""Reads from the client until the request line is complete, or
		the client stops sending."""
		parser: RequestLineParser = RequestLineParser()
		while True:
			chunk: bytes = await loop.sock_recv(client, options.readsize)
			if not chunk:
				# A no-data means the client is done sending
				return parser.flush()
			req = parser.feed(chunk)
			if req is not None:
				return req

	@classmethod
	async def OnRequest(
		cls,
		service: FileService,
		client: socket.socket,
		*,
		loop: asyncio.AbstractEventLoop,
		options: ServerOptions,
	) -> None:
		"""Asynchronous worker, answering exactly one request on the given
		socket and closing it."""
		try:
			try:
				req: HTTPRequestLine = await cls.ReadRequest(
					client, loop=loop, options=options
				)
			except MalformedRequest as e:
				logged(debug) and debug(
					"Dropping malformed request",
					Client=f"{id(client):x}",
					Reason=e.message,
				)
				return
			if options.logRequests:
				event(req.method, req.path)
			res: HTTPResponse = await service.respond(req)
			await loop.sock_sendall(client, res.payload())
			logged(debug) and debug(
				"Response sent",
				Client=f"{id(client):x}",
				Status=res.status,
				Length=len(res.body),
			)
		except BrokenPipeError:
			# Client did an early close
			warning("Client closed before the response was sent")
		except Exception as e:
			# Failures end this connection only, the client gets whatever
			# was written so far.
			exception(e, "Request handling failed")
		finally:
			client.close()

	@staticmethod
	def Bind(options: ServerOptions) -> socket.socket:
		"""Creates the listening socket."""
		server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
		try:
			server.bind((options.host, options.port))
		except OSError:
			server.close()
			raise
		# The argument is the backlog of connections that will be accepted before
		# they are refused.
		server.listen(options.backlog)
		return server

	@classmethod
	async def Serve(
		cls,
		service: FileService,
		options: ServerOptions = OPTIONS,
		*,
		server: socket.socket | None = None,
	) -> None:
		"""Main server coroutine. Listens on `server` when given, otherwise
		binds a socket as per the options."""
		server = cls.Bind(options) if server is None else server
		# This is what we need to use it with asyncio
		server.setblocking(False)

		tasks: set[asyncio.Task[None]] = set()
		loop = asyncio.get_running_loop()

		# Manage server state
		state = ServerState()
		# Signal handlers can only be installed from the main thread.
		if (
			options.stopSignals
			and threading.current_thread() is threading.main_thread()
		):
			loop.add_signal_handler(SIGINT, lambda: state.stop())
			loop.add_signal_handler(SIGTERM, lambda: state.stop())
		# Restored on exit, as the loop may belong to an embedder
		previousHandler = loop.get_exception_handler()
		loop.set_exception_handler(state.onException)

		host, port = server.getsockname()[:2]
		info("Server listening", icon="🚀", Host=host, Port=port)

		try:
			while state.isRunning:
				if options.condition and not options.condition():
					break
				try:
					client, _ = await asyncio.wait_for(
						loop.sock_accept(server), timeout=options.polling or 1.0
					)
					task = loop.create_task(
						cls.OnRequest(service, client, loop=loop, options=options)
					)
					tasks.add(task)
					task.add_done_callback(tasks.discard)
				except asyncio.TimeoutError:
					continue
				except OSError as e:
					# This can be: [OSError] [Errno 24] Too many open files
					if e.errno == 24:
						await asyncio.sleep(0.1)
					else:
						exception(e)

		finally:
			if options.stopSignals and (
				threading.current_thread() is threading.main_thread()
			):
				loop.remove_signal_handler(SIGINT)
				loop.remove_signal_handler(SIGTERM)
			server.close()
			loop.set_exception_handler(previousHandler)
			for task in tasks:
				task.cancel()
			await asyncio.gather(*tasks, return_exceptions=True)


def run(
	root: str | Path = WEBROOT,
	*,
	host: str = OPTIONS.host,
	port: int = OPTIONS.port,
	backlog: int = OPTIONS.backlog,
	condition: Callable[[], bool] | None = None,
	polling: float = OPTIONS.polling,
	logRequests: bool = OPTIONS.logRequests,
) -> None:
	"""High level function to run the server."""
	unlimit(LimitType.Files)
	options = ServerOptions(
		host=host,
		port=port,
		backlog=backlog,
		condition=condition,
		polling=polling,
		logRequests=logRequests,
	)
	service = FileService(root)
	if not os.path.isdir(service.root):
		warning("Root directory does not exist", Root=service.root)
	info(f'Serving "{service.root}" on http://localhost:{port}')
	try:
		asyncio.run(AIOSocketServer.Serve(service, options))
	except KeyboardInterrupt:
		event("ManualShutdown")
	event("EOK")


# EOF
