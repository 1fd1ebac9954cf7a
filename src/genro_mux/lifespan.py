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
Route Lifespan Management.

Purpose
=======
ServerLifespan runs the optional ``on_startup`` / ``on_shutdown`` hooks of
every registered route.

HttpServer calls startup() after binding the listener and before handing it
to uvicorn, so all startup hooks have completed before the first connection
is accepted. shutdown() runs after the listener is closed and in-flight
requests are drained or cut off.

The same object also speaks the ASGI lifespan protocol, so a MuxApplication
mounted on any ASGI server gets the hooks through ``lifespan.startup`` /
``lifespan.shutdown`` messages.

Definition::

    class ServerLifespan:
        __slots__ = ("table", "_logger", "_running", "_started")

        def __init__(self, table: DispatchTable)
        async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None
        async def startup(self) -> None
        async def shutdown(self) -> None

Design Notes
============
- Hooks may be sync or async, smartasync makes both awaitable
- Startup runs in registration order, shutdown in reverse order
- Only routes whose startup went through are shut down
- A failing startup hook shuts down the routes already started, then the
  error propagates: HttpServer.start() raises StartupError, the ASGI
  protocol answers lifespan.startup.failed
- Shutdown errors are logged and don't prevent the remaining hooks
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartasync import smartasync

from .types import Receive, Scope, Send

if TYPE_CHECKING:
    from .router import DispatchTable

__all__ = ["ServerLifespan"]


class ServerLifespan:
    """
    Route hook runner for HttpServer.

    Attributes:
        table: DispatchTable whose routes receive the hooks.
    """

    __slots__ = ("table", "_logger", "_running", "_started")

    def __init__(self, table: DispatchTable) -> None:
        self.table = table
        self._logger = logging.getLogger("genro_mux.lifespan")
        # Patterns whose startup completed, in registration order.
        self._running: list[str] = []
        self._started = False

    @property
    def started(self) -> bool:
        """True between a successful startup and the following shutdown."""
        return self._started

    async def __call__(
        self, scope: Scope, receive: Receive, send: Send  # noqa: ARG002
    ) -> None:
        """Handle ASGI lifespan protocol."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as e:
                    await send({
                        "type": "lifespan.startup.failed",
                        "message": str(e),
                    })
                    return

            elif msg_type == "lifespan.shutdown":
                try:
                    await self.shutdown()
                except Exception:
                    self._logger.exception("Shutdown error")
                finally:
                    await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """
        Call on_startup on every route, in registration order.

        Raises:
            Exception: Whatever the failing hook raised, after the routes
                started before it have been shut down.
        """
        self._logger.debug("Running route startup hooks")
        self._running = []
        for pattern, route in self.table.items():
            if hasattr(route, "on_startup"):
                self._logger.debug(f"Starting route at {pattern}")
                try:
                    await self._call_hook(route, "on_startup")
                except Exception:
                    self._logger.exception(f"Startup failed for route at {pattern}")
                    await self.shutdown()
                    raise
            self._running.append(pattern)
        self._started = True

    async def shutdown(self) -> None:
        """Call on_shutdown on every started route in reverse order, logging failures."""
        self._logger.debug("Running route shutdown hooks")
        running, self._running = self._running, []
        self._started = False
        for pattern in reversed(running):
            route = self.table[pattern]
            if hasattr(route, "on_shutdown"):
                self._logger.debug(f"Stopping route at {pattern}")
                try:
                    await self._call_hook(route, "on_shutdown")
                except Exception:
                    self._logger.exception(f"Error shutting down route at {pattern}")

    async def _call_hook(self, route: object, method_name: str) -> None:
        hook = getattr(route, method_name)
        if callable(hook):
            await smartasync(hook)()
