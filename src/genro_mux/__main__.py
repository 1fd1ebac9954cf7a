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

"""
genro-mux CLI entry point and composition root.

Usage:
    genro-mux serve                     # Serve on 0.0.0.0:8080
    genro-mux serve ./site --port 9000  # Read ./site/config.yaml, override port

Composition order is fixed and written out by hand in compose():

    routes (EchoRoute, HelloRoute)
        → build_dispatch_table(routes)
        → HttpServer(table, config)
        → start() / wait for SIGINT or SIGTERM / stop()

This module is the only one that names the concrete route classes.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

from .exceptions import ConfigurationError, ServerError
from .route import Route
from .router import build_dispatch_table
from .routes import EchoRoute, HelloRoute
from .server import HttpServer, ServerConfig

logger = logging.getLogger("genro_mux")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def compose(config: ServerConfig) -> HttpServer:
    """Build every route once, then the dispatch table, then the server.

    Raises:
        ConfigurationError: The routes do not form a valid dispatch table.
    """
    routes: list[Route] = [
        EchoRoute(logging.getLogger("genro_mux.routes.echo")),
        HelloRoute(logging.getLogger("genro_mux.routes.hello")),
    ]
    table = build_dispatch_table(routes)
    return HttpServer(table, config)


async def run(server: HttpServer) -> None:
    """Serve until the process receives SIGINT or SIGTERM."""
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    signals = (signal.SIGINT, signal.SIGTERM) if sys.platform != "win32" else ()
    for sig in signals:
        loop.add_signal_handler(sig, stop_event.set)
    try:
        await server.serve(stop_event)
    finally:
        for sig in signals:
            loop.remove_signal_handler(sig)


def cmd_serve(argv: list[str]) -> int:
    """Run the HTTP server."""
    config = ServerConfig(argv=argv)
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)

    if not config.server_dir.is_dir():
        print(f"Error: '{config.server_dir}' is not a directory.", file=sys.stderr)
        return 1

    try:
        server = compose(config)
        asyncio.run(run(server))
    except ConfigurationError as e:
        logger.error(f"Invalid route configuration: {e}")
        return 1
    except ServerError as e:
        logger.error(f"Server failed to start: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nShutdown.")

    return 0


def main() -> int:
    """Main entry point."""
    if "--version" in sys.argv or "-v" in sys.argv:
        from . import __version__

        print(f"genro-mux {__version__}")
        return 0

    if "--help" in sys.argv or "-h" in sys.argv or len(sys.argv) == 1:
        print("Usage: genro-mux serve [server_dir] [options]")
        print()
        print("Arguments:")
        print("  server_dir                Directory holding config.yaml (default: .)")
        print()
        print("Options:")
        print("  --host HOST               Listen host (default: 0.0.0.0)")
        print("  --port PORT               Listen port (default: 8080)")
        print("  --shutdown-timeout SECS   Deadline for in-flight requests (default: 10)")
        print("  --log-level LEVEL         debug, info, warning, error (default: info)")
        print("  --config FILE             Config file name (default: config.yaml)")
        print("  --version, -v             Show version")
        print("  --help, -h                Show this help")
        return 0

    subcommand = sys.argv[1]
    if subcommand != "serve":
        print(f"Error: unknown subcommand '{subcommand}'", file=sys.stderr)
        return 1

    return cmd_serve(sys.argv[2:])


if __name__ == "__main__":
    sys.exit(main())
