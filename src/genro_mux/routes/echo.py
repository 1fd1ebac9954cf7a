# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""EchoRoute - copies the request body back to the response."""

from __future__ import annotations

import logging

from ..exceptions import ClientDisconnect
from ..request import HttpRequest
from ..response import Response, error_response
from ..route import Route

__all__ = ["EchoRoute"]


class EchoRoute(Route):
    """Answers 200 with the request body, verbatim.

    The request Content-Type is echoed too, byte for byte, or
    application/octet-stream when the client sent none.
    """

    pattern = "/echo"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("genro_mux.routes.echo")

    async def handle(self, request: HttpRequest) -> Response:
        try:
            body = await request.body()
        except ClientDisconnect as e:
            self.logger.warning(f"Failed to handle request: {e}")
            return error_response(500, "Internal server error\n")
        content_type = request.content_type or "application/octet-stream"
        return Response(body, headers=[("content-type", content_type)])
