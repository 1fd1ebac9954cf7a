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
HTTP Response classes for genro-mux routes.

A route's ``handle()`` returns a Response; the Dispatcher then awaits it as
an ASGI application::

    response = await route.handle(request)
    await response(scope, receive, send)

Classes
=======
Response
    Bytes or string body, status code, headers. Content-Type (with charset
    for text types) and Content-Length are filled in at construction.

PlainTextResponse
    Response with ``text/plain`` media type.

Helper Functions
================
error_response(status_code, message)
    Plain-text error response with ``x-content-type-options: nosniff``,
    the shape used for 404 and 500 answers.
"""

from __future__ import annotations

from collections.abc import Mapping

from .types import Receive, Scope, Send

__all__ = [
    "Response",
    "PlainTextResponse",
    "error_response",
]


# Type alias for headers input
HeadersInput = Mapping[str, str] | list[tuple[str, str]] | None


def _normalize_headers(
    headers: HeadersInput,
) -> list[tuple[str, str]]:
    """Normalize headers input to list of tuples."""
    if headers is None:
        return []
    if isinstance(headers, list):
        return list(headers)
    return list(headers.items())


class Response:
    """
    Base HTTP response class.

    Sends bytes or string content with headers through the ASGI interface.

    Attributes:
        body: Encoded response body as bytes.
        status_code: HTTP status code.
        media_type: Content-Type media type (may include charset).

    Example:
        >>> response = Response(content=b"hello", media_type="application/octet-stream")
        >>> await response(scope, receive, send)
    """

    __slots__ = ("body", "status_code", "_media_type", "_headers")

    media_type: str | None = None
    charset: str = "utf-8"

    def __init__(
        self,
        content: bytes | str | None = None,
        status_code: int = 200,
        headers: HeadersInput = None,
        media_type: str | None = None,
    ) -> None:
        self.status_code = status_code
        self._headers: list[tuple[str, str]] = _normalize_headers(headers)
        self._media_type = media_type
        self.body = self._encode_content(content)

        header_names = {name.lower() for name, _ in self._headers}
        if "content-type" not in header_names:
            content_type = self._get_content_type()
            if content_type:
                self._headers.append(("content-type", content_type))
        if "content-length" not in header_names:
            self._headers.append(("content-length", str(len(self.body))))

    def _encode_content(self, content: bytes | str | None) -> bytes:
        if content is None:
            return b""
        if isinstance(content, bytes):
            return content
        return content.encode(self.charset)

    def _get_content_type(self) -> str | None:
        """Get content-type header value with charset for text types."""
        effective_media_type = self._media_type if self._media_type is not None else self.media_type
        if effective_media_type is None:
            return None
        if effective_media_type.startswith("text/") and "charset" not in effective_media_type:
            return f"{effective_media_type}; charset={self.charset}"
        return effective_media_type

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Response headers as (name, value) tuples."""
        return list(self._headers)

    def set_header(self, name: str, value: str) -> None:
        """Add a response header."""
        self._headers.append((name, value))

    def _build_headers(self) -> list[tuple[bytes, bytes]]:
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface: send http.response.start then http.response.body."""
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self._build_headers(),
            }
        )
        await send({"type": "http.response.body", "body": self.body})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, length={len(self.body)})"


class PlainTextResponse(Response):
    """Response with text/plain content type."""

    __slots__ = ()

    media_type = "text/plain"


def error_response(
    status_code: int,
    message: str,
    headers: HeadersInput = None,
) -> PlainTextResponse:
    """
    Build a plain-text error response.

    The message is sent verbatim, callers add the trailing newline.

    Example:
        >>> error_response(500, "Internal server error\\n")
    """
    response = PlainTextResponse(message, status_code=status_code, headers=headers)
    response.set_header("x-content-type-options", "nosniff")
    return response
