# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Dispatcher - routes HTTP requests to handlers via the DispatchTable.

The Dispatcher is the ASGI callable for ``type="http"`` scopes. It:
1. Wraps the scope in an HttpRequest
2. Resolves the route with table.match(path)
3. Awaits route.handle(request)
4. Sends the returned Response
5. Writes one access-log line with status and timing

Request flow:
    scope → HttpRequest(scope, receive)
         → table.match(request.path)       (None → 404, no route invoked)
         → await route.handle(request)
         → await response(scope, receive, send)

Error containment:
    Nothing raised by a route leaves the Dispatcher.
    - HTTPException → plain-text response with its status and detail
    - Exception     → logged with traceback, 500 "Internal server error"
    If the response already started, the error is only logged.

Log format (logger "genro_mux.access"):
    "-> POST /echo 200 (0.4ms)"
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, MutableMapping

from .exceptions import HTTPException
from .request import HttpRequest
from .response import error_response

if TYPE_CHECKING:
    from .router import DispatchTable
    from .types import Receive, Scope, Send

__all__ = ["Dispatcher", "NOT_FOUND_MESSAGE", "SERVER_ERROR_MESSAGE"]

NOT_FOUND_MESSAGE = "404 page not found\n"
SERVER_ERROR_MESSAGE = "Internal server error\n"


class Dispatcher:
    """Routes ASGI HTTP requests to the route owning the request path."""

    __slots__ = ("table", "logger", "access_logger")

    def __init__(self, table: DispatchTable) -> None:
        self.table = table
        self.logger = logging.getLogger("genro_mux.dispatcher")
        self.access_logger = logging.getLogger("genro_mux.access")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface - dispatch request to its route."""
        start_time = time.perf_counter()
        request = HttpRequest(scope, receive)
        status_code = 0
        response_started = False

        async def send_tracking(message: MutableMapping[str, Any]) -> None:
            nonlocal status_code, response_started
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                response_started = True
            await send(message)

        route = self.table.match(request.path)
        try:
            if route is None:
                response = error_response(404, NOT_FOUND_MESSAGE)
            else:
                response = await route.handle(request)
            await response(scope, receive, send_tracking)
        except HTTPException as e:
            if response_started:
                self.logger.warning(f"{request!r}: {e!r} after response start")
            else:
                await error_response(e.status_code, e.detail, e.headers)(
                    scope, receive, send_tracking
                )
        except Exception:
            handler = type(route).__name__ if route is not None else "404 response"
            self.logger.exception(f"Unhandled error in {handler} for {request!r}")
            if not response_started:
                await error_response(500, SERVER_ERROR_MESSAGE)(scope, receive, send_tracking)

        duration = (time.perf_counter() - start_time) * 1000
        self.access_logger.info(
            f"-> {request.method} {request.path} {status_code} ({duration:.1f}ms)"
        )
