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
HTTP request adapter.

HttpRequest wraps the ASGI scope and receive callable handed to the
Dispatcher. Metadata (method, path, headers, client) is read from the scope
on construction; the body is NOT read until a route asks for it, so a route
that never touches the body never waits on the client.

Example:
    request = HttpRequest(scope, receive)
    try:
        payload = await request.body()
    except ClientDisconnect:
        ...

Every request carries an ``id`` taken from ``x-request-id`` when the client
sends one, generated otherwise. The Dispatcher uses it in log lines.
"""

from __future__ import annotations

import uuid
from typing import Any

from .exceptions import ClientDisconnect
from .types import Receive, Scope

__all__ = ["HttpRequest"]


class HttpRequest:
    """HTTP request adapter wrapping ASGI scope."""

    __slots__ = ("_scope", "_receive", "_headers", "_body", "_id")

    def __init__(self, scope: Scope, receive: Receive) -> None:
        self._scope = scope
        self._receive = receive
        self._headers: dict[str, str] = {}
        for name, value in scope.get("headers", []):
            self._headers[name.decode("latin-1").lower()] = value.decode("latin-1")
        self._body: bytes | None = None
        self._id = self._headers.get("x-request-id") or str(uuid.uuid4())

    @property
    def id(self) -> str:
        return self._id

    @property
    def scope(self) -> Scope:
        """Raw ASGI scope dict."""
        return self._scope

    @property
    def method(self) -> str:
        return str(self._scope.get("method", "GET")).upper()

    @property
    def path(self) -> str:
        return str(self._scope.get("path", "/"))

    @property
    def query_string(self) -> str:
        return bytes(self._scope.get("query_string", b"")).decode("latin-1")

    @property
    def headers(self) -> dict[str, str]:
        """Request headers (lowercase keys)."""
        return self._headers

    @property
    def content_type(self) -> str | None:
        """Content-Type header value."""
        return self._headers.get("content-type")

    @property
    def client(self) -> tuple[str, int] | None:
        """Client address as (host, port) tuple."""
        client = self._scope.get("client")
        if client:
            return (client[0], client[1])
        return None

    async def body(self) -> bytes:
        """
        Read and return the complete request body.

        The body is received once and cached, later calls return the same
        bytes.

        Raises:
            ClientDisconnect: The client disconnected before the last chunk.
        """
        if self._body is not None:
            return self._body
        chunks: list[bytes] = []
        while True:
            message: Any = await self._receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnect(f"Client disconnected while sending {self.path}")
            chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                break
        self._body = b"".join(chunks)
        return self._body

    async def text(self, encoding: str = "utf-8") -> str:
        """Request body decoded as text."""
        return (await self.body()).decode(encoding, errors="replace")

    def __repr__(self) -> str:
        return f"<HttpRequest id={self._id!r} method={self.method} path={self.path!r}>"
