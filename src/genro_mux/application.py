# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""MuxApplication - the ASGI callable handed to uvicorn.

Splits incoming scopes by type:

    "lifespan"  → ServerLifespan (route startup/shutdown hooks)
    "http"      → Dispatcher (DispatchTable lookup)
    "websocket" → closed with 1003, genro-mux serves HTTP only
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .dispatcher import Dispatcher
from .lifespan import ServerLifespan

if TYPE_CHECKING:
    from .router import DispatchTable
    from .types import Receive, Scope, Send

__all__ = ["MuxApplication"]


class MuxApplication:
    """ASGI entry point wrapping one DispatchTable."""

    __slots__ = ("table", "dispatcher", "lifespan")

    def __init__(self, table: DispatchTable) -> None:
        self.table = table
        self.dispatcher = Dispatcher(table)
        self.lifespan = ServerLifespan(table)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        scope_type = scope["type"]
        if scope_type == "lifespan":
            await self.lifespan(scope, receive, send)
        elif scope_type == "http":
            await self.dispatcher(scope, receive, send)
        elif scope_type == "websocket":
            await send({"type": "websocket.close", "code": 1003})
        else:
            raise ValueError(f"Unsupported scope type: {scope_type!r}")

    def __repr__(self) -> str:
        return f"MuxApplication(patterns={list(self.table)})"
