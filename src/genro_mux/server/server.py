# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""HTTP Server - listener ownership and start/stop lifecycle.

HttpServer binds one TCP listener, hands it to uvicorn and serves a
DispatchTable through MuxApplication. It exposes two explicit phases:

    await server.start()         # returns once the listener is bound
    await server.stop(deadline)  # graceful drain, then forced close

State machine::

    STOPPED ──start()──▶ STARTING ──bound + hooks ok──▶ RUNNING
       ▲                    │                               │
       │◀── BindError ──────┤                             stop()
       │◀── StartupError ───┘                               ▼
       └─────────────────────────────────────────────── STOPPING

Usage:
    from genro_mux import HttpServer, ServerConfig, build_dispatch_table

    table = build_dispatch_table([EchoRoute(), HelloRoute()])
    server = HttpServer(table, ServerConfig(port=8080))
    await server.start()
    ...
    await server.stop(5.0)

Architecture:
    HttpServer
        ├── table: DispatchTable (read-only, shared by all requests)
        ├── config: ServerConfig
        ├── app: MuxApplication → ServerLifespan / Dispatcher
        ├── _socket: listener, bound here so bind errors surface to the caller
        ├── _server: uvicorn.Server, one per start/stop cycle
        └── _serve_task: uvicorn main loop (accept side), runs until stop()

Start sequence:
    bind + listen (BindError) → route startup hooks (StartupError)
    → uvicorn serves the socket → main loop task → RUNNING

Stop sequence:
    should_exit → main loop ends → listener closed
    → idle connections closed, busy ones finish their response
    → deadline elapsed: busy transports aborted, request tasks cancelled
    → route shutdown hooks → STOPPED
"""

from __future__ import annotations

import asyncio
import logging
import socket
from enum import Enum
from typing import TYPE_CHECKING, Callable

import uvicorn

from ..application import MuxApplication
from ..exceptions import BindError, LifecycleError, StartupError
from .server_config import ServerConfig

if TYPE_CHECKING:
    from ..router import DispatchTable

__all__ = ["HttpServer", "ServerState"]

StateListener = Callable[["ServerState"], None]

BACKLOG = 2048


class ServerState(str, Enum):
    """Lifecycle state of an HttpServer."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class HttpServer:
    """
    Lifecycle manager for one listener serving one DispatchTable.

    Attributes:
        table: DispatchTable served by this instance.
        config: ServerConfig with address, shutdown timeout, log level.
        app: MuxApplication handed to uvicorn.
        logger: Server logger instance.
    """

    __slots__ = (
        "table",
        "config",
        "app",
        "logger",
        "_state",
        "_lock",
        "_listeners",
        "_socket",
        "_server",
        "_serve_task",
    )

    def __init__(self, table: DispatchTable, config: ServerConfig | None = None) -> None:
        self.table = table
        self.config = config or ServerConfig()
        self.app = MuxApplication(table)
        self.logger = logging.getLogger("genro_mux.server")
        self._state = ServerState.STOPPED
        self._lock = asyncio.Lock()
        self._listeners: list[StateListener] = []
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ServerState.RUNNING

    @property
    def port(self) -> int | None:
        """Port actually bound, None when no listener is open."""
        if self._socket is None:
            return None
        port: int = self._socket.getsockname()[1]
        return port

    @property
    def address(self) -> str | None:
        """Bound "host:port", None when no listener is open."""
        if self._socket is None:
            return None
        host, port = self._socket.getsockname()[:2]
        return f"{host}:{port}"

    def add_state_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with the new state on every transition."""
        self._listeners.append(listener)

    def _set_state(self, state: ServerState) -> None:
        self.logger.debug(f"State {self._state.value} -> {state.value}")
        self._state = state
        for listener in self._listeners:
            listener(state)

    async def start(self) -> None:
        """
        Bind the listener and begin serving in the background.

        Returns once the socket is listening and route startup hooks have run.

        Raises:
            LifecycleError: The server is not STOPPED. An active listener is
                left untouched.
            BindError: The address could not be bound. State is STOPPED.
            StartupError: A route startup hook failed. Routes already started
                are shut down, the socket is released and state is STOPPED.
        """
        async with self._lock:
            if self._state is not ServerState.STOPPED:
                raise LifecycleError(
                    f"Cannot start server in state {self._state.value!r}"
                )
            self._set_state(ServerState.STARTING)

            try:
                sock = self._bind()
            except OSError as e:
                self._set_state(ServerState.STOPPED)
                raise BindError(self.config.address, e) from e

            try:
                await self.app.lifespan.startup()
            except Exception as e:
                sock.close()
                self._set_state(ServerState.STOPPED)
                raise StartupError(f"Route startup failed, listener released: {e}") from e

            server = uvicorn.Server(self._uvicorn_config())
            config = server.config
            try:
                if not config.loaded:
                    config.load()
                server.lifespan = config.lifespan_class(config)
                await server.startup(sockets=[sock])
            except (Exception, SystemExit) as e:
                await self.app.lifespan.shutdown()
                sock.close()
                self._set_state(ServerState.STOPPED)
                if isinstance(e, SystemExit):
                    # uvicorn exits the process when it cannot serve the socket
                    raise StartupError(f"uvicorn refused to serve {self.config.address}") from e
                raise

            self._socket = sock
            self._server = server
            self._serve_task = asyncio.create_task(
                server.main_loop(), name="genro-mux-main-loop"
            )
            self._set_state(ServerState.RUNNING)
            self.logger.info(f"Starting HTTP server on {self.address}")

    async def stop(self, deadline: float | None = None) -> None:
        """
        Shut down gracefully.

        New connections are refused immediately. In-flight requests get up to
        ``deadline`` seconds (config.shutdown_timeout when None); connections
        still busy afterwards are closed without a response and their
        request tasks cancelled. Completes successfully in both cases.

        Raises:
            LifecycleError: The server is not RUNNING.
        """
        async with self._lock:
            if self._state is not ServerState.RUNNING:
                raise LifecycleError(
                    f"Cannot stop server in state {self._state.value!r}"
                )
            server, sock, serve_task = self._server, self._socket, self._serve_task
            if server is None or sock is None or serve_task is None:
                raise LifecycleError("Server is RUNNING without an active listener")
            self._set_state(ServerState.STOPPING)
            timeout = self.config.shutdown_timeout if deadline is None else deadline

            self.logger.info(f"Stopping HTTP server on {self.address} (deadline {timeout}s)")
            server.should_exit = True
            try:
                await serve_task
                for listener in server.servers:
                    listener.close()
                sock.close()
                await self._drain(server, timeout)
                await self.app.lifespan.shutdown()
            finally:
                self._abort_connections(server)
                sock.close()
                self._socket = None
                self._server = None
                self._serve_task = None
                self._set_state(ServerState.STOPPED)
            self.logger.info("HTTP server stopped")

    async def serve(self, stop_event: asyncio.Event) -> None:
        """Start, wait until ``stop_event`` is set, then stop with the configured deadline."""
        await self.start()
        try:
            await stop_event.wait()
        finally:
            await self.stop()

    async def _drain(self, server: uvicorn.Server, timeout: float) -> None:
        """Let in-flight requests finish within ``timeout``, then cut them off."""
        state = server.server_state
        # Idle keep-alive connections close now, busy ones after their response.
        for connection in list(state.connections):
            connection.shutdown()
        if not state.tasks:
            return
        _, pending = await asyncio.wait(list(state.tasks), timeout=timeout)
        if not pending:
            return
        self.logger.warning(
            f"Deadline of {timeout}s elapsed, closing {len(pending)} unfinished request(s)"
        )
        # Transports go first: a cancelled request must not get a response.
        self._abort_connections(server)
        for task in pending:
            task.cancel()
        await asyncio.wait(pending)

    def _bind(self) -> socket.socket:
        host, port = self.config.host, self.config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(BACKLOG)
        except OSError:
            sock.close()
            raise
        sock.set_inheritable(True)
        return sock

    def _uvicorn_config(self) -> uvicorn.Config:
        # Route hooks and the shutdown deadline are driven by HttpServer.
        return uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            lifespan="off",
            ws="none",
            log_config=None,
            log_level=self.config.log_level,
            access_log=False,
            backlog=BACKLOG,
        )

    def _abort_connections(self, server: uvicorn.Server) -> None:
        """Abort every transport still open."""
        for connection in list(server.server_state.connections):
            transport = getattr(connection, "transport", None)
            if transport is not None and not transport.is_closing():
                transport.abort()

    def __repr__(self) -> str:
        return f"HttpServer(state={self._state.value!r}, patterns={list(self.table)})"
