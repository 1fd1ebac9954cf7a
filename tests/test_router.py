# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for the router builder and DispatchTable."""

from __future__ import annotations

from typing import Any

import pytest

from genro_mux.exceptions import (
    ConfigurationError,
    DuplicatePatternError,
    InvalidPatternError,
)
from genro_mux.request import HttpRequest
from genro_mux.response import PlainTextResponse, Response
from genro_mux.route import Route
from genro_mux.router import DispatchTable, build_dispatch_table, validate_pattern
from genro_mux.routes import EchoRoute, HelloRoute


class StaticRoute(Route):
    """Route answering a fixed text at a pattern given at construction."""

    def __init__(self, pattern: Any, text: str = "ok") -> None:
        self._pattern = pattern
        self.text = text

    @property
    def pattern(self) -> Any:
        return self._pattern

    async def handle(self, request: HttpRequest) -> Response:
        return PlainTextResponse(self.text)


# =============================================================================
# Route contract
# =============================================================================


class TestRouteContract:
    def test_cannot_instantiate_directly(self) -> None:
        with pytest.raises(TypeError, match="abstract"):
            Route()  # type: ignore[abstract]

    def test_missing_handle_is_abstract(self) -> None:
        class NoHandle(Route):
            pattern = "/x"

        with pytest.raises(TypeError, match="abstract"):
            NoHandle()  # type: ignore[abstract]

    def test_class_attribute_satisfies_pattern(self) -> None:
        route = EchoRoute()
        assert route.pattern == "/echo"
        assert repr(route) == "EchoRoute(pattern='/echo')"


# =============================================================================
# build_dispatch_table
# =============================================================================


class TestBuildDispatchTable:
    def test_one_entry_per_route(self) -> None:
        routes = [StaticRoute("/a"), StaticRoute("/b"), StaticRoute("/c/")]
        table = build_dispatch_table(routes)
        assert len(table) == 3
        assert table.patterns == ("/a", "/b", "/c/")
        for route in routes:
            assert table[route.pattern] is route

    def test_empty_route_set(self) -> None:
        table = build_dispatch_table([])
        assert len(table) == 0
        assert table.match("/anything") is None

    def test_accepts_any_iterable(self) -> None:
        table = build_dispatch_table(r for r in (EchoRoute(), HelloRoute()))
        assert set(table) == {"/echo", "/hello"}

    def test_duplicate_pattern_rejected(self) -> None:
        first, second = StaticRoute("/same"), StaticRoute("/same")
        with pytest.raises(DuplicatePatternError) as exc_info:
            build_dispatch_table([StaticRoute("/other"), first, second])
        assert exc_info.value.pattern == "/same"
        assert exc_info.value.existing is first
        assert exc_info.value.duplicate is second

    def test_duplicate_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            build_dispatch_table([EchoRoute(), EchoRoute()])

    def test_building_twice_gives_equal_tables(self) -> None:
        routes = [EchoRoute(), HelloRoute(), StaticRoute("/static/")]
        first = build_dispatch_table(routes)
        second = build_dispatch_table(routes)
        assert first is not second
        assert first == second
        assert dict(first.items()) == dict(second.items())

    def test_invalid_pattern_rejected(self) -> None:
        with pytest.raises(InvalidPatternError):
            build_dispatch_table([EchoRoute(), StaticRoute("relative")])


# =============================================================================
# validate_pattern
# =============================================================================


class TestValidatePattern:
    @pytest.mark.parametrize("pattern", ["/", "/echo", "/api/v1/", "/a-b_c.d"])
    def test_valid(self, pattern: str) -> None:
        assert validate_pattern(pattern) == pattern

    @pytest.mark.parametrize(
        "pattern, reason",
        [
            ("", "empty"),
            ("echo", "start with '/'"),
            ("/ec ho", "whitespace"),
            ("/echo?x=1", "query"),
            ("/echo#top", "fragment"),
            ("/users/{id}", "path parameters"),
            (None, "string"),
            (42, "string"),
        ],
    )
    def test_invalid(self, pattern: Any, reason: str) -> None:
        with pytest.raises(InvalidPatternError, match=reason):
            validate_pattern(pattern)


# =============================================================================
# DispatchTable
# =============================================================================


class TestDispatchTable:
    def test_is_read_only(self) -> None:
        table = build_dispatch_table([EchoRoute()])
        with pytest.raises(TypeError):
            table["/new"] = HelloRoute()  # type: ignore[index]
        with pytest.raises(AttributeError):
            table.foo = 1  # type: ignore[attr-defined]

    def test_source_dict_changes_do_not_leak(self) -> None:
        entries: dict[str, Route] = {"/echo": EchoRoute()}
        table = DispatchTable(entries)
        entries["/hello"] = HelloRoute()
        assert "/hello" not in table

    def test_exact_match(self) -> None:
        echo = EchoRoute()
        table = build_dispatch_table([echo, HelloRoute()])
        assert table.match("/echo") is echo

    def test_exact_pattern_does_not_match_subpaths(self) -> None:
        table = build_dispatch_table([EchoRoute()])
        assert table.match("/echo/more") is None
        assert table.match("/echoes") is None
        assert table.match("/") is None

    def test_subtree_pattern(self) -> None:
        files = StaticRoute("/files/")
        table = build_dispatch_table([files])
        assert table.match("/files/") is files
        assert table.match("/files/a/b.txt") is files
        assert table.match("/files") is None

    def test_longest_subtree_wins(self) -> None:
        root = StaticRoute("/")
        api = StaticRoute("/api/")
        v1 = StaticRoute("/api/v1/")
        table = build_dispatch_table([root, v1, api])
        assert table.match("/api/v1/users") is v1
        assert table.match("/api/v2/users") is api
        assert table.match("/other") is root

    def test_exact_wins_over_subtree(self) -> None:
        root = StaticRoute("/")
        echo = EchoRoute()
        table = build_dispatch_table([root, echo])
        assert table.match("/echo") is echo
        assert table.match("/echo/x") is root

    def test_repr(self) -> None:
        table = build_dispatch_table([EchoRoute()])
        assert repr(table) == "DispatchTable(patterns=['/echo'])"
