# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""HelloRoute - greets whoever is named in the request body."""

from __future__ import annotations

import logging

from ..exceptions import ClientDisconnect
from ..request import HttpRequest
from ..response import PlainTextResponse, Response, error_response
from ..route import Route

__all__ = ["HelloRoute"]


class HelloRoute(Route):
    pattern = "/hello"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("genro_mux.routes.hello")

    async def handle(self, request: HttpRequest) -> Response:
        """Answer ``Hello, <body>\\n``, or 500 when the body cannot be read."""
        try:
            name = await request.text()
        except ClientDisconnect as e:
            self.logger.error(f"Failed to read request: {e}")
            return error_response(500, "Internal server error\n")
        return PlainTextResponse(f"Hello, {name}\n")
