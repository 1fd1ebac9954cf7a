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

"""Tests for HttpRequest."""

from __future__ import annotations

from typing import Any

import pytest

from genro_mux.exceptions import ClientDisconnect
from genro_mux.request import HttpRequest


def make_scope(
    method: str = "GET",
    path: str = "/",
    query_string: bytes = b"",
    headers: list[tuple[bytes, bytes]] | None = None,
    client: tuple[str, int] | None = ("127.0.0.1", 12345),
) -> dict[str, Any]:
    """Create a test HTTP scope."""
    return {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query_string,
        "headers": headers or [],
        "client": client,
    }


def make_receive(*messages: dict[str, Any]) -> Any:
    """Create a receive callable yielding ``messages`` in order, counting calls."""
    queue = list(messages)

    async def receive() -> dict[str, Any]:
        receive.calls += 1  # type: ignore[attr-defined]
        return queue.pop(0)

    receive.calls = 0  # type: ignore[attr-defined]
    return receive


class TestHttpRequestMetadata:
    def test_basic_properties(self) -> None:
        scope = make_scope(method="post", path="/echo", query_string=b"a=1")
        request = HttpRequest(scope, make_receive())
        assert request.method == "POST"
        assert request.path == "/echo"
        assert request.query_string == "a=1"
        assert request.client == ("127.0.0.1", 12345)
        assert request.scope is scope

    def test_headers_lowercased(self) -> None:
        scope = make_scope(headers=[(b"Content-Type", b"text/plain"), (b"X-Custom", b"v")])
        request = HttpRequest(scope, make_receive())
        assert request.headers == {"content-type": "text/plain", "x-custom": "v"}
        assert request.content_type == "text/plain"

    def test_no_content_type(self) -> None:
        assert HttpRequest(make_scope(), make_receive()).content_type is None

    def test_no_client(self) -> None:
        assert HttpRequest(make_scope(client=None), make_receive()).client is None

    def test_request_id_from_header(self) -> None:
        scope = make_scope(headers=[(b"x-request-id", b"abc-123")])
        assert HttpRequest(scope, make_receive()).id == "abc-123"

    def test_request_id_generated(self) -> None:
        first = HttpRequest(make_scope(), make_receive())
        second = HttpRequest(make_scope(), make_receive())
        assert first.id and second.id
        assert first.id != second.id

    def test_repr(self) -> None:
        scope = make_scope(path="/hello", headers=[(b"x-request-id", b"r1")])
        assert repr(HttpRequest(scope, make_receive())) == (
            "<HttpRequest id='r1' method=GET path='/hello'>"
        )


class TestHttpRequestBody:
    @pytest.mark.asyncio
    async def test_body_not_read_on_construction(self) -> None:
        receive = make_receive({"type": "http.request", "body": b"x"})
        HttpRequest(make_scope(), receive)
        assert receive.calls == 0

    @pytest.mark.asyncio
    async def test_single_chunk(self) -> None:
        receive = make_receive({"type": "http.request", "body": b"hello"})
        request = HttpRequest(make_scope(method="POST"), receive)
        assert await request.body() == b"hello"

    @pytest.mark.asyncio
    async def test_chunked_body(self) -> None:
        receive = make_receive(
            {"type": "http.request", "body": b"hel", "more_body": True},
            {"type": "http.request", "body": b"lo ", "more_body": True},
            {"type": "http.request", "body": b"world"},
        )
        request = HttpRequest(make_scope(method="POST"), receive)
        assert await request.body() == b"hello world"
        assert receive.calls == 3

    @pytest.mark.asyncio
    async def test_body_cached(self) -> None:
        receive = make_receive({"type": "http.request", "body": b"once"})
        request = HttpRequest(make_scope(method="POST"), receive)
        assert await request.body() == b"once"
        assert await request.body() == b"once"
        assert receive.calls == 1

    @pytest.mark.asyncio
    async def test_empty_body(self) -> None:
        receive = make_receive({"type": "http.request", "body": b""})
        assert await HttpRequest(make_scope(), receive).body() == b""

    @pytest.mark.asyncio
    async def test_text(self) -> None:
        receive = make_receive({"type": "http.request", "body": "wörld".encode()})
        assert await HttpRequest(make_scope(), receive).text() == "wörld"

    @pytest.mark.asyncio
    async def test_text_invalid_utf8_replaced(self) -> None:
        receive = make_receive({"type": "http.request", "body": b"a\xffb"})
        assert await HttpRequest(make_scope(), receive).text() == "a�b"

    @pytest.mark.asyncio
    async def test_disconnect_raises(self) -> None:
        receive = make_receive(
            {"type": "http.request", "body": b"partial", "more_body": True},
            {"type": "http.disconnect"},
        )
        request = HttpRequest(make_scope(method="POST", path="/echo"), receive)
        with pytest.raises(ClientDisconnect, match="/echo"):
            await request.body()
