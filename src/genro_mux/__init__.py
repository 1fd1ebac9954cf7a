# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""genro-mux - Minimal HTTP server shell: route multiplexer + lifecycle.

Main components:
    Route: Abstract handler mounted at a fixed pattern
    build_dispatch_table: Compiles routes into an immutable DispatchTable
    HttpServer: Binds the listener, start()/stop() lifecycle on uvicorn
    ServerConfig: Host, port, shutdown deadline, log level

Usage:
    from genro_mux import HttpServer, build_dispatch_table
    from genro_mux.routes import EchoRoute, HelloRoute

    table = build_dispatch_table([EchoRoute(), HelloRoute()])
    server = HttpServer(table)
    await server.start()
    ...
    await server.stop(5.0)

Or from the command line: ``genro-mux serve``.
"""

__version__ = "0.1.0"

from .application import MuxApplication
from .dispatcher import Dispatcher
from .exceptions import (
    BindError,
    ClientDisconnect,
    ConfigurationError,
    DuplicatePatternError,
    HTTPException,
    HTTPNotFound,
    InvalidPatternError,
    LifecycleError,
    ServerError,
    StartupError,
)
from .lifespan import ServerLifespan
from .request import HttpRequest
from .response import PlainTextResponse, Response, error_response
from .route import Route
from .router import DispatchTable, build_dispatch_table, validate_pattern
from .server import HttpServer, ServerConfig, ServerState
from .types import ASGIApp, Message, Receive, Scope, Send

__all__ = [
    # Routing
    "Route",
    "DispatchTable",
    "build_dispatch_table",
    "validate_pattern",
    # Request / response
    "HttpRequest",
    "Response",
    "PlainTextResponse",
    "error_response",
    # ASGI layer
    "MuxApplication",
    "Dispatcher",
    "ServerLifespan",
    # Server lifecycle
    "HttpServer",
    "ServerConfig",
    "ServerState",
    # Exceptions
    "ConfigurationError",
    "DuplicatePatternError",
    "InvalidPatternError",
    "ServerError",
    "BindError",
    "StartupError",
    "LifecycleError",
    "HTTPException",
    "HTTPNotFound",
    "ClientDisconnect",
    # ASGI types
    "ASGIApp",
    "Message",
    "Receive",
    "Scope",
    "Send",
]
